#!/usr/bin/env python3
"""
Design Evaluation CLI

Evaluates a system design (JSON or YAML file) against a traffic scenario.

Usage Examples:
    # Score a design at t=15s of its scenario
    python evaluate_design.py evaluate --design my_design.json --elapsed 15

    # Play against a scenario from a custom catalog
    python evaluate_design.py evaluate --design my_design.json --scenario levels.yaml

    # Run ticks 0..30, carrying crashes, backlogs and replicas between ticks
    python evaluate_design.py run --design my_design.json --start 0 --end 30 -o run.json

    # Browse the level catalog and component blueprints
    python evaluate_design.py scenarios
    python evaluate_design.py blueprints --json
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse
import json
import logging
from typing import List, Optional

import yaml

from sdgame.adapters.outbound.persistence import list_available_components, load_scenarios
from sdgame.config import Container, Settings
from sdgame.domain.errors import InvalidInputError, NotFoundError, SDGameError
from sdgame.domain.models import Design


# =============================================================================
# Argument Parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    common_parser = argparse.ArgumentParser(add_help=False)

    output_group = common_parser.add_argument_group("Output")
    output_group.add_argument("--output", "-o", metavar="FILE", help="Export results to JSON")
    output_group.add_argument("--json", action="store_true", help="Print JSON to stdout")
    output_group.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    output_group.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    design_parser = argparse.ArgumentParser(add_help=False)
    design_group = design_parser.add_argument_group("Design")
    design_group.add_argument("--design", "-d", metavar="FILE", required=True, help="Design JSON/YAML file")
    design_group.add_argument(
        "--scenario", "-s", metavar="ID|FILE",
        help="Scenario id, or a YAML catalog whose first scenario is used",
    )
    design_group.add_argument("--pass-threshold", type=float, help="Composite score needed to pass")

    parser = argparse.ArgumentParser(
        prog="evaluate_design.py",
        description="Evaluate system designs against traffic scenarios.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subs = parser.add_subparsers(dest="command", help="Command")

    ev = subs.add_parser("evaluate", help="Evaluate a design at one instant", parents=[common_parser, design_parser])
    ev.add_argument("--elapsed", "-e", type=float, default=0.0, help="Seconds into the scenario")

    rn = subs.add_parser("run", help="Evaluate consecutive ticks", parents=[common_parser, design_parser])
    rn.add_argument("--start", type=float, default=0.0, help="First tick (seconds)")
    rn.add_argument("--end", type=float, default=30.0, help="Last tick (seconds)")
    rn.add_argument("--step", type=float, default=1.0, help="Tick length (seconds)")

    sc = subs.add_parser("scenarios", help="List available scenarios", parents=[common_parser])
    sc.add_argument("--scenario-file", metavar="FILE", help="YAML scenario catalog")

    subs.add_parser("blueprints", help="List component blueprints", parents=[common_parser])

    return parser


# =============================================================================
# Helpers
# =============================================================================

def load_design(path: str) -> Design:
    """Load a design from a JSON or YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise InvalidInputError(f"Design file {path} must contain a mapping", details={"path": path})
    return Design.from_dict(data)


def build_container(args) -> Container:
    settings = Settings.from_env()
    container = Container.from_settings(settings)
    scenario_arg = getattr(args, "scenario", None) or getattr(args, "scenario_file", None)
    if scenario_arg and Path(scenario_arg).is_file():
        container.scenario_file = scenario_arg
    if getattr(args, "pass_threshold", None) is not None:
        container.pass_threshold = args.pass_threshold
    return container


def store_design(args, container: Container) -> Design:
    """Load the design file, resolve its scenario and save it."""
    design = load_design(args.design)
    if args.scenario:
        if Path(args.scenario).is_file():
            scenarios = load_scenarios(args.scenario)
            if not scenarios:
                raise NotFoundError(f"No scenarios in {args.scenario}", details={"path": args.scenario})
            design.scenario_id = scenarios[0].id
        else:
            design.scenario_id = args.scenario
    container.scenario_service().get_scenario(design.scenario_id)
    return container.design_service().save_design(design)


# =============================================================================
# Command Handlers
# =============================================================================

def handle_evaluate(args, container: Container, display) -> dict:
    design = store_design(args, container)
    result = container.evaluation_service().evaluate(design.id, args.elapsed)
    if not args.quiet and not args.json:
        display.display_evaluation(result)
    return result.to_dict()


def handle_run(args, container: Container, display) -> dict:
    design = store_design(args, container)
    results = container.evaluation_service().run_ticks(design.id, args.start, args.end, args.step)
    if not args.quiet and not args.json:
        display.display_run(results)
    return {
        "design_id": design.id,
        "ticks": len(results),
        "passed": sum(1 for r in results if r.passed),
        "results": [r.to_dict() for r in results],
    }


def handle_scenarios(args, container: Container, display) -> dict:
    scenarios = container.scenario_service().list_scenarios()
    if not args.quiet and not args.json:
        display.display_scenarios(scenarios)
    return {"scenarios": [s.to_dict() for s in scenarios]}


def handle_blueprints(args, container: Container, display) -> dict:
    blueprints = list_available_components()
    if not args.quiet and not args.json:
        display.display_blueprints(blueprints)
    return {"components": [c.to_dict() for c in blueprints]}


# =============================================================================
# Main
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Logging
    log_level = (
        logging.WARNING if args.quiet or args.json
        else logging.DEBUG if args.verbose
        else logging.INFO
    )
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    container = build_container(args)
    display = container.display_service()

    try:
        handlers = {
            "evaluate": handle_evaluate,
            "run": handle_run,
            "scenarios": handle_scenarios,
            "blueprints": handle_blueprints,
        }
        handler = handlers[args.command]
        result_data = handler(args, container, display)

        # JSON stdout
        if args.json:
            print(json.dumps(result_data, indent=2))

        # File export
        if args.output:
            with open(args.output, "w") as f:
                json.dump(result_data, f, indent=2)
            if not args.quiet:
                print(f"\n{display.colored(f'Results saved to: {args.output}', display.Colors.GREEN)}")

        return 0

    except KeyboardInterrupt:
        print("\nEvaluation interrupted.")
        return 130
    except (SDGameError, OSError, yaml.YAMLError) as e:
        print(display.colored(f"Error: {e}", display.Colors.RED), file=sys.stderr)
        if args.verbose:
            logging.exception("Evaluation failed")
        return 1
    finally:
        container.close()


if __name__ == "__main__":
    sys.exit(main())
