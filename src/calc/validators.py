"""Input guards shared by the simulation engine.

Every engine entry point validates its arguments with these helpers before
any running total is touched, so a bad value surfaces as a ValidationError
instead of silently propagating through the trajectory.
"""

import math


class ValidationError(ValueError):
    """Raised when an input is malformed or out of range."""


def validate_number(value, name: str) -> float:
    """Ensure value is a finite real number and return it as a float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a finite number, got: {type(value).__name__} {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got: {value}")
    return float(value)


def validate_non_negative(value, name: str) -> float:
    number = validate_number(value, name)
    if number < 0:
        raise ValidationError(f"{name} cannot be negative, got: {number}")
    return number


def validate_positive(value, name: str) -> float:
    number = validate_number(value, name)
    if number <= 0:
        raise ValidationError(f"{name} must be positive, got: {number}")
    return number


def validate_fraction(value, name: str) -> float:
    """Ensure value is a fraction in [0, 1] (0.17 for 17%)."""
    number = validate_number(value, name)
    if number < 0 or number > 1:
        raise ValidationError(f"{name} must be between 0 and 1, got: {number}")
    return number


def validate_range(value, minimum: float, maximum: float, name: str) -> float:
    number = validate_number(value, name)
    if number < minimum or number > maximum:
        raise ValidationError(f"{name} must be between {minimum} and {maximum}, got: {number}")
    return number


def validate_integer(value, name: str, minimum: int = None) -> int:
    """Ensure value is a whole number (ints or integral floats)."""
    number = validate_number(value, name)
    if not number.is_integer():
        raise ValidationError(f"{name} must be a whole number, got: {value}")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be at least {minimum}, got: {int(number)}")
    return int(number)
