import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from aquarium_model import AquariumModel, StepResult, EMPTY, INVALID

logger = logging.getLogger(__name__)

RULE_R1 = "R1 Row invalidate"
RULE_R2 = "R2 Row flood"
RULE_R3 = "R3 Column invalidate"
RULE_R4 = "R4 Column flood"

# Global registry for passes: list of (order, func, name)
_PASSES = []


def solver_pass(order: int, name: str) -> Callable:
    """Decorator to register a propagation pass with its position in a round."""
    def decorator(func: Callable) -> Callable:
        _PASSES.append((order, func, name))
        return func
    return decorator


# ----------------------------
# Aggregates (recomputed from the grid, never cached)
# ----------------------------

def row_partition_sizes(model: AquariumModel, y: int) -> Dict[int, int]:
    """Number of cells each partition has in row y."""
    sizes: Dict[int, int] = {}
    for cell in model.row(y):
        sizes[cell.partition] = sizes.get(cell.partition, 0) + 1
    return sizes


def row_empty_count(model: AquariumModel, y: int) -> int:
    return sum(1 for cell in model.row(y) if cell.state == EMPTY)


def column_partition_rows(model: AquariumModel, x: int) -> Dict[int, List[int]]:
    """For column x: {partition: row indices}, each list ascending."""
    rows: Dict[int, List[int]] = {}
    for y in range(model.height):
        rows.setdefault(model.partition_at(x, y), []).append(y)
    return rows


def column_state_counts(model: AquariumModel, x: int) -> Dict[int, Counter]:
    """For column x: {partition: Counter(state -> count)}."""
    counts: Dict[int, Counter] = {}
    for cell in model.column(x):
        counts.setdefault(cell.partition, Counter())[cell.state] += 1
    return counts


@dataclass
class SolveReport:
    rounds: int
    quiescent: bool
    solved: bool
    steps: List[StepResult] = field(default_factory=list)

    def rules_triggered(self) -> Dict[str, int]:
        return dict(Counter(step.rule for step in self.steps))


class AquariumSolver:
    """Row/column constraint propagation for Aquarium boards.

    A round runs every registered pass in order. Solving repeats rounds
    until one of them changes nothing. The solver never guesses, so hard
    boards can end with Empty cells left.
    """

    def __init__(self, model: AquariumModel) -> None:
        self.model = model
        self.history: List[StepResult] = []

    def _record(self, rule: str, verb: str, x: int, y: int, changed: List[Tuple[int, int]]) -> Optional[StepResult]:
        if not changed:
            return None
        code = rule.split()[0]
        logger.debug("%s: %s %d, %d", code, verb, x, y)
        res = StepResult(changed, f"{code}: {verb} {x}, {y}", rule)
        self.history.append(res)
        return res

    def _invalidate(self, rule: str, x: int, y: int) -> Optional[StepResult]:
        return self._record(rule, "Invalidate", x, y, self.model.invalidate(x, y))

    def _flood(self, rule: str, x: int, y: int) -> Optional[StepResult]:
        return self._record(rule, "Flood", x, y, self.model.flood(x, y))

    @solver_pass(order=1, name=RULE_R1)
    def try_R1(self) -> List[StepResult]:
        """R1 - A partition larger than what the row still needs cannot hold water there."""
        results = []
        for y in reversed(range(self.model.height)):
            sizes = row_partition_sizes(self.model, y)
            remaining = self.model.row_remainder(y)
            for x in range(self.model.width):
                cell = self.model.cell_at(x, y)
                if cell.state != EMPTY:
                    continue
                if sizes[cell.partition] > remaining:
                    res = self._invalidate(RULE_R1, x, y)
                    if res:
                        results.append(res)
        return results

    @solver_pass(order=2, name=RULE_R2)
    def try_R2(self) -> List[StepResult]:
        """R2 - If the other Empty cells of the row cannot meet the hint, this partition floods."""
        results = []
        for y in range(self.model.height):
            sizes = row_partition_sizes(self.model, y)
            remaining = self.model.row_remainder(y)
            empty = row_empty_count(self.model, y)
            for x in range(self.model.width):
                cell = self.model.cell_at(x, y)
                if cell.state != EMPTY:
                    continue
                if empty - sizes[cell.partition] < remaining:
                    res = self._flood(RULE_R2, x, y)
                    if res:
                        results.append(res)
        return results

    @solver_pass(order=3, name="R3/R4 Column invalidate/flood")
    def try_R3_R4(self) -> List[StepResult]:
        """R3/R4 - Column counterparts of R1/R2.

        A partition can appear several times in one column. Its Invalid cells
        are always the topmost ones and its Flooded cells the bottommost, so
        the k-th row of its ascending row list marks where a level must sit.
        """
        results = []
        for x in range(self.model.width):
            part_rows = column_partition_rows(self.model, x)
            counts = column_state_counts(self.model, x)
            remainder = self.model.col_remainder(x)

            for partition, rows in part_rows.items():
                this_empty = counts[partition][EMPTY]
                this_invalid = counts[partition][INVALID]
                if this_empty == 0:
                    continue

                # R3: more Empty cells than the column can still take
                extra = min(this_empty - remainder, this_empty)
                if extra > 0:
                    y = rows[this_invalid + extra - 1]
                    res = self._invalidate(RULE_R3, x, y)
                    if res:
                        results.append(res)

                # R4: the other partitions cannot meet the hint on their own
                other_empty = sum(c[EMPTY] for p, c in counts.items() if p != partition)
                required = remainder - other_empty
                if 0 < required <= this_empty:
                    y = rows[this_invalid + this_empty - required]
                    res = self._flood(RULE_R4, x, y)
                    if res:
                        results.append(res)
        return results

    def run_round(self) -> List[StepResult]:
        """Run every pass once, in registration order."""
        results = []
        for _, func, name in sorted(_PASSES, key=lambda p: p[0]):
            moves = func(self)
            if moves:
                logger.debug("%s: %d move(s)", name, len(moves))
            results.extend(moves)
        return results

    def solve(self, max_rounds: Optional[int] = None) -> SolveReport:
        """Run rounds until quiescence.

        max_rounds caps the rounds executed, the final quiet one included.
        Every mutating round decides at least one Empty cell, so the default
        of width * height + 1 is always enough.
        """
        if max_rounds is None:
            max_rounds = self.model.width * self.model.height + 1
        steps: List[StepResult] = []
        rounds = 0
        executed = 0
        quiescent = False
        while executed < max_rounds:
            results = self.run_round()
            executed += 1
            if not results:
                quiescent = True
                break
            rounds += 1
            steps.extend(results)

        report = SolveReport(rounds=rounds, quiescent=quiescent, solved=self.model.is_solved(), steps=steps)
        logger.info(
            "Propagation stopped after %d round(s), %d move(s); quiescent=%s solved=%s",
            report.rounds, len(report.steps), report.quiescent, report.solved,
        )
        return report
