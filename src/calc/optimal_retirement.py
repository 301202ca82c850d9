"""Search for the earliest sustainable retirement age.

A retirement age is sustainable when, simulated with that age, total
wealth (savings + investments) never drops below zero in any retired
year. Candidates are tried in ascending order and the first sustainable
one is returned, so no younger candidate in range ever passes.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Union

from calc.validators import ValidationError
from calc.wealth_simulator import WealthSimulator
from model.FinancialInputs import FinancialInputs
from model.SimulationData import WealthSimulationResult


logger = logging.getLogger(__name__)


@dataclass
class OptimalRetirement:
    """The earliest sustainable retirement age and its simulation."""
    age: int
    simulation: WealthSimulationResult
    final_wealth: float
    candidates_tested: int

    feasible = True

    def to_dict(self) -> dict:
        return {
            "feasible": True,
            "age": self.age,
            "final_wealth": self.final_wealth,
            "candidates_tested": self.candidates_tested,
        }


@dataclass
class InfeasibleRetirement:
    """No candidate age in the searched range is sustainable."""
    min_age: int
    max_age: int
    candidates_tested: int
    reason: str = "no feasible retirement age"

    feasible = False

    def to_dict(self) -> dict:
        return {
            "feasible": False,
            "min_age": self.min_age,
            "max_age": self.max_age,
            "candidates_tested": self.candidates_tested,
            "reason": self.reason,
        }


RetirementSearchResult = Union[OptimalRetirement, InfeasibleRetirement]


def is_sustainable(result: WealthSimulationResult) -> bool:
    """True when wealth stays non-negative in every retired year."""
    return all(row.savings + row.investments >= 0 for row in result.retirement_years())


def _simulate_candidate(inputs: FinancialInputs, age: int) -> WealthSimulationResult:
    # Module-level so worker processes can pickle it
    return WealthSimulator().simulate(inputs, retirement_age=age)


def candidate_ages(inputs: FinancialInputs, min_age: Optional[int] = None,
                   max_age: Optional[int] = None) -> List[int]:
    """Ages to try, defaulting to next year through the end of the lifespan."""
    low = inputs.current_age + 1 if min_age is None else min_age
    high = inputs.lifespan if max_age is None else max_age
    if low > high:
        raise ValidationError(f"Empty retirement age range: {low}-{high}")
    if low <= inputs.current_age or high > inputs.lifespan:
        raise ValidationError(
            f"Retirement ages must fall within {inputs.current_age + 1}-{inputs.lifespan}, got: {low}-{high}"
        )
    return list(range(low, high + 1))


def find_optimal_retirement_age(inputs: FinancialInputs,
                                min_age: Optional[int] = None,
                                max_age: Optional[int] = None,
                                simulator: Optional[WealthSimulator] = None,
                                max_workers: int = 1) -> RetirementSearchResult:
    """Find the earliest sustainable retirement age in [min_age, max_age].

    Args:
        inputs: Financial inputs; their retirement_age is replaced per candidate
        min_age: First candidate (default current_age + 1)
        max_age: Last candidate (default lifespan)
        simulator: Simulator to run candidates with (e.g. one sharing a cache)
        max_workers: When greater than 1, candidates are simulated in a
                     process pool; the answer is the same as the serial search

    Returns:
        OptimalRetirement, or InfeasibleRetirement when no candidate passes

    Raises:
        ValidationError: If the inputs or the age range are invalid
    """
    inputs.validate()
    ages = candidate_ages(inputs, min_age, max_age)

    if max_workers > 1:
        return _parallel_search(inputs, ages, max_workers)

    simulator = simulator or WealthSimulator()
    for tested, age in enumerate(ages, start=1):
        result = simulator.simulate(inputs, retirement_age=age)
        if is_sustainable(result):
            logger.debug("retirement at %d is sustainable after %d candidates", age, tested)
            return OptimalRetirement(age=age, simulation=result,
                                     final_wealth=result.final_wealth,
                                     candidates_tested=tested)
        logger.debug("retirement at %d exhausts wealth", age)

    return InfeasibleRetirement(min_age=ages[0], max_age=ages[-1], candidates_tested=len(ages))


def _parallel_search(inputs: FinancialInputs, ages: List[int], max_workers: int) -> RetirementSearchResult:
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_simulate_candidate, inputs, age) for age in ages]
        results = [f.result() for f in futures]

    for tested, (age, result) in enumerate(zip(ages, results), start=1):
        if is_sustainable(result):
            return OptimalRetirement(age=age, simulation=result,
                                     final_wealth=result.final_wealth,
                                     candidates_tested=tested)
    return InfeasibleRetirement(min_age=ages[0], max_age=ages[-1], candidates_tested=len(ages))
