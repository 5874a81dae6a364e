from dataclasses import dataclass
from typing import List, Tuple, Dict, Sequence

# ----------------------------
# Domain model
# ----------------------------

EMPTY = 0
FLOODED = 1
INVALID = 2

CellState = int
RuleName = str

STATE_SYMBOLS: Dict[CellState, str] = {
    EMPTY: " ",
    FLOODED: "*",
    INVALID: "X",
}


@dataclass
class Cell:
    state: CellState
    partition: int


@dataclass
class StepResult:
    changed_cells: List[Tuple[int, int]]  # (x, y)
    message: str
    rule: RuleName = ""


def derive_partitions(width: int, height: int, walls: Sequence[bool], floors: Sequence[bool]) -> List[int]:
    """Label connected regions from wall/floor separators.

    walls[y * (width - 1) + x] separates (x, y) from (x + 1, y).
    floors[y * width + x] separates (x, y) from (x, y + 1).
    Cells are scanned row-major; the first unlabelled cell gets the next id.
    """
    if len(walls) != (width - 1) * height:
        raise ValueError(f"Expected {(width - 1) * height} walls, got {len(walls)}.")
    if len(floors) != width * (height - 1):
        raise ValueError(f"Expected {width * (height - 1)} floors, got {len(floors)}.")

    labels = [-1] * (width * height)
    next_id = 0
    for start in range(width * height):
        if labels[start] != -1:
            continue
        labels[start] = next_id
        stack = [start]
        while stack:
            i = stack.pop()
            x, y = i % width, i // width
            neighbors = []
            if x > 0 and not walls[y * (width - 1) + x - 1]:
                neighbors.append(i - 1)
            if x + 1 < width and not walls[y * (width - 1) + x]:
                neighbors.append(i + 1)
            if y > 0 and not floors[(y - 1) * width + x]:
                neighbors.append(i - width)
            if y + 1 < height and not floors[y * width + x]:
                neighbors.append(i + width)
            for n in neighbors:
                if labels[n] == -1:
                    labels[n] = next_id
                    stack.append(n)
        next_id += 1
    return labels


class AquariumModel:
    def __init__(self) -> None:
        self.width = 0
        self.height = 0
        # Row-major, width * height
        self.cells: List[Cell] = []
        self.row_hints: List[int] = []
        self.col_hints: List[int] = []

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x},{y}) outside {self.width}x{self.height} grid.")
        return y * self.width + x

    # ----------------------------
    # Construction
    # ----------------------------

    def load_partitions(
        self,
        width: int,
        height: int,
        partitions: Sequence[int],
        row_hints: Sequence[int],
        col_hints: Sequence[int],
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid dimensions must be positive.")
        if len(partitions) != width * height:
            raise ValueError(f"Expected {width * height} partition ids, got {len(partitions)}.")
        if len(row_hints) != height:
            raise ValueError(f"Expected {height} row hints, got {len(row_hints)}.")
        if len(col_hints) != width:
            raise ValueError(f"Expected {width} column hints, got {len(col_hints)}.")
        if any(h < 0 for h in row_hints) or any(h < 0 for h in col_hints):
            raise ValueError("Hints must be non-negative.")

        self.width = width
        self.height = height
        self.cells = [Cell(state=EMPTY, partition=int(p)) for p in partitions]
        self.row_hints = [int(h) for h in row_hints]
        self.col_hints = [int(h) for h in col_hints]

    def load_separators(
        self,
        width: int,
        height: int,
        walls: Sequence[bool],
        floors: Sequence[bool],
        row_hints: Sequence[int],
        col_hints: Sequence[int],
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid dimensions must be positive.")
        partitions = derive_partitions(width, height, walls, floors)
        self.load_partitions(width, height, partitions, row_hints, col_hints)

    # ----------------------------
    # Cell access
    # ----------------------------

    def cell_at(self, x: int, y: int) -> Cell:
        """Copy of the cell at (x, y). Changes go through set_state, flood or invalidate."""
        c = self.cells[self._index(x, y)]
        return Cell(state=c.state, partition=c.partition)

    def state_at(self, x: int, y: int) -> CellState:
        return self.cells[self._index(x, y)].state

    def partition_at(self, x: int, y: int) -> int:
        return self.cells[self._index(x, y)].partition

    def set_state(self, x: int, y: int, state: CellState) -> None:
        """Write a single cell. No partition propagation; use flood/invalidate for that."""
        if state not in STATE_SYMBOLS:
            raise ValueError(f"Unknown cell state: {state}")
        self.cells[self._index(x, y)].state = state

    def row(self, y: int) -> List[Cell]:
        offset = self._index(0, y)
        return self.cells[offset:offset + self.width]

    def column(self, x: int) -> List[Cell]:
        self._index(x, 0)
        return self.cells[x::self.width]

    # Separators are derived: adjacent cells are separated iff their ids differ.
    def has_wall(self, x: int, y: int) -> bool:
        if x + 1 >= self.width:
            raise IndexError(f"No wall to the right of column {x}.")
        return self.partition_at(x, y) != self.partition_at(x + 1, y)

    def has_floor(self, x: int, y: int) -> bool:
        if y + 1 >= self.height:
            raise IndexError(f"No floor below row {y}.")
        return self.partition_at(x, y) != self.partition_at(x, y + 1)

    # ----------------------------
    # Water physics
    # ----------------------------

    def flood(self, x: int, y: int) -> List[Tuple[int, int]]:
        """Flood every Empty cell of the partition at (x, y) in row y or below.

        Returns the cells that changed.
        """
        partition = self.partition_at(x, y)
        changed = []
        for yy in range(y, self.height):
            for xx in range(self.width):
                cell = self.cells[yy * self.width + xx]
                if cell.partition == partition and cell.state == EMPTY:
                    cell.state = FLOODED
                    changed.append((xx, yy))
        return changed

    def invalidate(self, x: int, y: int) -> List[Tuple[int, int]]:
        """Invalidate every Empty cell of the partition at (x, y) in row y or above.

        Returns the cells that changed.
        """
        partition = self.partition_at(x, y)
        changed = []
        for yy in range(0, y + 1):
            for xx in range(self.width):
                cell = self.cells[yy * self.width + xx]
                if cell.partition == partition and cell.state == EMPTY:
                    cell.state = INVALID
                    changed.append((xx, yy))
        return changed

    # ----------------------------
    # Hint bookkeeping
    # ----------------------------

    def flooded_in_row(self, y: int) -> int:
        return sum(1 for cell in self.row(y) if cell.state == FLOODED)

    def flooded_in_col(self, x: int) -> int:
        return sum(1 for cell in self.column(x) if cell.state == FLOODED)

    def row_remainder(self, y: int) -> int:
        return self.row_hints[y] - self.flooded_in_row(y)

    def col_remainder(self, x: int) -> int:
        return self.col_hints[x] - self.flooded_in_col(x)

    def count_state(self, state: CellState) -> int:
        return sum(1 for cell in self.cells if cell.state == state)

    def is_solved(self) -> bool:
        for y in range(self.height):
            if self.flooded_in_row(y) != self.row_hints[y]:
                return False
        for x in range(self.width):
            if self.flooded_in_col(x) != self.col_hints[x]:
                return False
        return True

    def states(self) -> List[CellState]:
        return [cell.state for cell in self.cells]

    def snapshot(self) -> Dict[str, object]:
        """Return a self-contained, JSON-friendly copy of the current board."""
        return {
            "width": self.width,
            "height": self.height,
            "row_hints": list(self.row_hints),
            "col_hints": list(self.col_hints),
            "partitions": [cell.partition for cell in self.cells],
            "grid": [
                "".join(STATE_SYMBOLS[cell.state] for cell in self.row(y))
                for y in range(self.height)
            ],
        }

    def copy(self) -> "AquariumModel":
        other = AquariumModel()
        other.width = self.width
        other.height = self.height
        other.cells = [Cell(state=c.state, partition=c.partition) for c in self.cells]
        other.row_hints = list(self.row_hints)
        other.col_hints = list(self.col_hints)
        return other
