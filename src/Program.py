import sys
import os
import json
import logging
import argparse

from calc.validators import ValidationError
from calc.result_cache import get_default_cache
from calc.wealth_simulator import WealthSimulator
from calc.optimal_retirement import find_optimal_retirement_age
from model.FinancialInputs import FinancialInputs
from render.renderers import (
    SummaryRenderer,
    TrajectoryRenderer,
    PhaseTablesRenderer,
    OptimalAgeRenderer,
    parse_age_range,
    RENDERER_REGISTRY,
)


INPUT_PARAMETERS_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '../input-parameters'))


def load_spec(program_name: str, input_dir: str = INPUT_PARAMETERS_DIR) -> dict:
    """Read a program's spec.json.

    Args:
        program_name: Name of the program folder in input-parameters
        input_dir: Directory holding the program folders

    Returns:
        The parsed spec dictionary
    """
    spec_path = os.path.join(input_dir, program_name, 'spec.json')
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        return json.load(f)


def load_inputs(program_name: str, input_dir: str = INPUT_PARAMETERS_DIR) -> FinancialInputs:
    """Load and validate the FinancialInputs for a program."""
    inputs = FinancialInputs.from_spec(load_spec(program_name, input_dir))
    inputs.validate()
    return inputs


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Wealth planner: debt, emergency fund and retirement projection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary     Print income, expenses, milestones and final net worth (default)
  Trajectory  Print the year-by-year wealth trajectory
  Phases      Print one table per financial phase
  OptimalAge  Search for the earliest sustainable retirement age

Examples:
  python src/Program.py example
  python src/Program.py example --mode Trajectory --ages 40-70
  python src/Program.py example --mode Summary --retirement-age 55
  python src/Program.py example --mode OptimalAge --workers 4
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--retirement-age', '-r', type=int,
                        help='Override the retirement age from spec.json')
    parser.add_argument('--ages', '-a',
                        help="Age range for Trajectory mode: 'start-end', 'start-' or '-end'")
    parser.add_argument('--workers', '-w', type=int, default=1,
                        help='Worker processes for OptimalAge mode (default: 1)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log simulation and cache activity to stderr')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    try:
        inputs = load_inputs(args.program_name)
        simulator = WealthSimulator(get_default_cache())

        if args.mode == 'OptimalAge':
            result = find_optimal_retirement_age(inputs, simulator=simulator, max_workers=args.workers)
            OptimalAgeRenderer().render(result)
            return

        result = simulator.simulate(inputs, retirement_age=args.retirement_age)
        if args.mode == 'Summary':
            SummaryRenderer(inputs).render(result)
        elif args.mode == 'Trajectory':
            try:
                start_age, end_age = parse_age_range(args.ages, result) if args.ages else (None, None)
            except ValueError:
                raise ValidationError(
                    f"--ages must be 'start-end', 'start-', '-end' or a single age, got: {args.ages}"
                )
            TrajectoryRenderer(start_age, end_age).render(result)
        elif args.mode == 'Phases':
            PhaseTablesRenderer().render(result)
    except (FileNotFoundError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
