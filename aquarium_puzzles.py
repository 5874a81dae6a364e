"""Sample Aquarium boards for the command line tool."""

from typing import Callable, Dict

from aquarium_model import AquariumModel


def make_b0() -> AquariumModel:
    # 6x6 easy board, puzzle-aquarium.com ID 3,095,209
    model = AquariumModel()
    model.load_partitions(
        6, 6,
        [
            0, 0, 0, 0, 1, 1,
            0, 0, 2, 2, 1, 1,
            3, 0, 3, 2, 4, 5,
            3, 3, 3, 2, 4, 5,
            3, 3, 3, 3, 3, 5,
            3, 3, 5, 5, 5, 5,
        ],
        row_hints=[2, 4, 3, 2, 1, 4],
        col_hints=[1, 2, 1, 3, 5, 4],
    )
    return model


def make_u_shape() -> AquariumModel:
    # Partition 0 is a 'U': its two top cells share a row without touching.
    model = AquariumModel()
    model.load_separators(
        3, 3,
        walls=[
            True, True,
            False, False,
            False, False,
        ],
        floors=[
            False, True, False,
            True, True, True,
        ],
        row_hints=[1, 3, 3],
        col_hints=[2, 3, 2],
    )
    return model


PUZZLES: Dict[str, Callable[[], AquariumModel]] = {
    "b0": make_b0,
    "u_shape": make_u_shape,
}
