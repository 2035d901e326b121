"""Command-line entry point: run a scenario and print or save the results."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import SCENARIO_PRESETS, BaselineSnapshot, to_plain
from .costs import InterventionCostCalculator
from .engine import SimulationEngine
from .exceptions import SimulationError
from .interventions import InterventionType
from .monte_carlo import MonteCarloSimulation
from .sensitivity import SENSITIVITY_PARAMETERS, SensitivityAnalysis

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="labor-sim",
        description="Project AI-driven labor market change under policy scenarios.",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(SCENARIO_PRESETS),
        help="Start from a named scenario preset.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file with scenario fields; overrides the preset.",
    )
    parser.add_argument(
        "--baseline",
        type=Path,
        help="JSON baseline snapshot (defaults to the bundled US baseline).",
    )
    parser.add_argument("--start-year", type=int)
    parser.add_argument("--end-year", type=int)
    parser.add_argument(
        "--intervention",
        action="append",
        default=[],
        choices=[t.value for t in InterventionType],
        help="Add an intervention with default parameters (repeatable).",
    )
    parser.add_argument(
        "--format",
        choices=["summary", "json", "csv"],
        default="summary",
        help="Output format (default: summary).",
    )
    parser.add_argument("--output", type=Path, help="Write output here instead of stdout.")
    parser.add_argument(
        "--monte-carlo",
        type=int,
        metavar="N",
        help="Run N perturbed iterations and report outcome distributions.",
    )
    parser.add_argument("--seed", type=int, help="Random seed for --monte-carlo.")
    parser.add_argument(
        "--sensitivity",
        choices=sorted(SENSITIVITY_PARAMETERS),
        help="Sweep one input and report outcome elasticities.",
    )
    parser.add_argument(
        "--costs",
        action="store_true",
        help="Report fiscal cost and ROI of the scenario's interventions.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    config: Dict[str, Any] = dict(SCENARIO_PRESETS.get(args.preset, {}))
    if args.preset:
        config["name"] = args.preset
    if args.config:
        config.update(json.loads(args.config.read_text()))
    if args.start_year is not None:
        config["start_year"] = args.start_year
    if args.end_year is not None:
        config["end_year"] = args.end_year
    if args.intervention:
        config["interventions"] = list(config.get("interventions", [])) + [
            {"type": t} for t in args.intervention
        ]
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format=LOG_FORMAT)

    try:
        baseline = None
        if args.baseline:
            baseline = BaselineSnapshot.from_dict(json.loads(args.baseline.read_text()))
        engine = SimulationEngine(baseline)
        engine.create_scenario(build_config(args))

        if args.monte_carlo:
            mc = MonteCarloSimulation(engine, iterations=args.monte_carlo, seed=args.seed)
            mc.run()
            output = json.dumps(to_plain(mc.report()), indent=2)
        elif args.sensitivity:
            analysis = SensitivityAnalysis(engine)
            sweep = analysis.run_analysis(args.sensitivity)
            report = {**sweep.to_dict(), "sensitivity": analysis.calculate_sensitivity(sweep)}
            output = json.dumps(to_plain(report), indent=2)
        else:
            run = engine.run_simulation()
            if args.costs:
                costs = InterventionCostCalculator().calculate_all_costs(
                    engine.interventions.interventions, run
                )
                output = json.dumps(costs.to_dict(), indent=2)
            elif args.format == "summary":
                output = json.dumps(to_plain(run.summary), indent=2)
            else:
                output = engine.export_results(args.format)
    except (SimulationError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    if args.output:
        args.output.write_text(output)
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
