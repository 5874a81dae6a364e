import json
import argparse
import logging
import sys
from typing import Dict, Any, List, Optional

from aquarium_model import AquariumModel, EMPTY, FLOODED, INVALID
from aquarium_rules import AquariumSolver
from aquarium_text import render_board
from aquarium_puzzles import PUZZLES

logger = logging.getLogger(__name__)


def serialize_grid(model: AquariumModel) -> List[List[str]]:
    """Converts the grid state into a list of state names for JSON serialization."""
    names = {EMPTY: "EMPTY", FLOODED: "FLOODED", INVALID: "INVALID"}
    return [[names[cell.state] for cell in model.row(y)] for y in range(model.height)]


def run_solver(model: AquariumModel, max_rounds: Optional[int] = None) -> Dict[str, Any]:
    """Runs the solver to quiescence and returns the result stats."""
    solver = AquariumSolver(model)
    report = solver.solve(max_rounds=max_rounds)
    return {
        "is_solved": report.solved,
        "quiescent": report.quiescent,
        "rounds": report.rounds,
        "rules_triggered": report.rules_triggered(),
        "steps_total": len(report.steps),
        "final_grid": serialize_grid(model),
        "board": model.snapshot(),
        "changed_cells": [list(c) for step in report.steps for c in step.changed_cells],
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aquarium puzzle solver")
    parser.add_argument("puzzle", nargs="?", default="b0", choices=sorted(PUZZLES),
                        help="Name of the sample puzzle to solve.")
    parser.add_argument("--show-partitions", action="store_true",
                        help="Print partition ids next to each cell.")
    parser.add_argument("--max-rounds", type=int, default=None,
                        help="Cap on propagation rounds (default: width * height + 1).")
    parser.add_argument("--json", dest="json_path", default=None,
                        help="Optional path to write the result as JSON.")
    parser.add_argument("--png", dest="png_path", default=None,
                        help="Optional path to write a before/after PNG image.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every solver move.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    model = PUZZLES[args.puzzle]()
    before = model.copy()
    print(render_board(model, args.show_partitions))
    print(f"Board is solved: {model.is_solved()}")
    print()

    result = run_solver(model, max_rounds=args.max_rounds)

    print(render_board(model, args.show_partitions))
    print(f"Board is solved: {result['is_solved']}")

    if args.json_path:
        with open(args.json_path, 'w') as f:
            json.dump(result, f, indent=2, sort_keys=True)
        logger.info("Result written to %s", args.json_path)

    if args.png_path:
        # pygame is only needed for image output
        from aquarium_drawing import render_comparison
        changed = [tuple(c) for c in result["changed_cells"]]
        render_comparison(before, model, args.png_path, title=f"After: {args.puzzle}",
                          affected_cells=changed, show_partitions=args.show_partitions)
        logger.info("Image written to %s", args.png_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
