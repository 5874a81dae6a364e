from typing import List

from aquarium_model import AquariumModel, Cell, STATE_SYMBOLS

LEFT_MARGIN = "   "
CELL_WIDTH = 3

WALL_OPEN = "|"
FLOOR_OPEN = "-"
SEPARATOR = "#"
JUNCTION_OPEN = "+"


def cell_rep(cell: Cell, show_partitions: bool = False) -> str:
    symbol = STATE_SYMBOLS[cell.state]
    if not show_partitions:
        return f"{symbol}  "
    return f"{symbol}{cell.partition:>2}"


def _floor_line(model: AquariumModel, y: int) -> str:
    parts = [LEFT_MARGIN, SEPARATOR]
    for x in range(model.width):
        floor = model.has_floor(x, y)
        last = x + 1 == model.width
        # up, left (this floor), right, down
        neighbors = [
            True if last else model.has_wall(x, y),
            floor,
            True if last else model.has_floor(x + 1, y),
            True if last else model.has_wall(x, y + 1),
        ]
        junction = SEPARATOR if sum(neighbors) >= 2 else JUNCTION_OPEN
        parts.append((SEPARATOR if floor else FLOOR_OPEN) * CELL_WIDTH + junction)
    return "".join(parts)


def render_lines(model: AquariumModel, show_partitions: bool = False) -> List[str]:
    """Board as text lines: column hints on top, row hints on the left,
    remainders (hint minus flooded cells) on the right and at the bottom."""
    board_width = 1 + (CELL_WIDTH + 1) * model.width
    bounds = LEFT_MARGIN + SEPARATOR * board_width

    lines = [LEFT_MARGIN + " " + "".join(f"{hint:>2}  " for hint in model.col_hints), bounds]

    for y in range(model.height):
        parts = [f"{model.row_hints[y]:>2} {SEPARATOR}"]
        row = model.row(y)
        for x, cell in enumerate(row):
            parts.append(cell_rep(cell, show_partitions))
            if x + 1 != model.width:
                parts.append(SEPARATOR if model.has_wall(x, y) else WALL_OPEN)
        parts.append(f"{SEPARATOR} {model.row_remainder(y):>2}")
        lines.append("".join(parts))

        if y + 1 != model.height:
            lines.append(_floor_line(model, y))

    lines.append(bounds)
    lines.append(LEFT_MARGIN + " " + "".join(f"{model.col_remainder(x):>2}  " for x in range(model.width)))
    return lines


def render_board(model: AquariumModel, show_partitions: bool = False) -> str:
    return "\n".join(render_lines(model, show_partitions))
