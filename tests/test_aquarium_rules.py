import logging
import pytest
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from aquarium_model import EMPTY, FLOODED, INVALID
from aquarium_rules import (
    AquariumSolver,
    RULE_R1,
    RULE_R2,
    RULE_R3,
    RULE_R4,
    _PASSES,
    column_partition_rows,
    column_state_counts,
    row_empty_count,
    row_partition_sizes,
)
from aquarium_puzzles import make_b0, make_u_shape
from tests.test_utils import make_model, set_states, grid_text, physics_violations

B0_EXPECTED = [
    "XXXX**",
    "**XX**",
    "X*X**X",
    "XXX**X",
    "XXXXX*",
    "XX****",
]


# ----------------------------
# Aggregates
# ----------------------------

def test_row_partition_sizes():
    model = make_b0()
    assert row_partition_sizes(model, 1) == {0: 2, 2: 2, 1: 2}
    assert row_partition_sizes(model, 4) == {3: 5, 5: 1}


def test_row_empty_count_tracks_state():
    model = make_b0()
    assert row_empty_count(model, 0) == 6
    model.flood(4, 0)
    assert row_empty_count(model, 0) == 4


def test_column_partition_rows_are_ascending():
    model = make_b0()
    assert column_partition_rows(model, 0) == {0: [0, 1], 3: [2, 3, 4, 5]}
    assert column_partition_rows(model, 3) == {0: [0], 2: [1, 2, 3], 3: [4], 5: [5]}


def test_column_state_counts():
    model = make_b0()
    model.invalidate(0, 4)
    counts = column_state_counts(model, 0)
    assert counts[0][EMPTY] == 2
    assert counts[3][INVALID] == 3
    assert counts[3][EMPTY] == 1


# ----------------------------
# Individual rules
# ----------------------------

def test_R1_invalidates_partition_too_big_for_row():
    model = make_model(3, 1, [0, 0, 1], [1], [0, 0, 1])
    solver = AquariumSolver(model)
    results = solver.try_R1()
    assert len(results) == 1
    assert results[0].rule == "R1 Row invalidate"
    assert sorted(results[0].changed_cells) == [(0, 0), (1, 0)]
    assert grid_text(model) == ["XX."]


def test_R2_floods_partition_needed_to_reach_hint():
    model = make_model(3, 1, [0, 0, 1], [2], [1, 1, 0])
    solver = AquariumSolver(model)
    assert solver.try_R1() == []
    results = solver.try_R2()
    assert [r.rule for r in results] == ["R2 Row flood"]
    assert grid_text(model) == ["**."]


def test_R3_and_R4_settle_a_single_column():
    model = make_model(1, 3, [0, 0, 0], [0, 0, 1], [1])
    solver = AquariumSolver(model)
    results = solver.try_R3_R4()
    assert [r.rule for r in results] == ["R3 Column invalidate", "R4 Column flood"]
    assert sorted(results[0].changed_cells) == [(0, 0), (0, 1)]
    assert results[1].changed_cells == [(0, 2)]
    assert grid_text(model) == ["X", "X", "*"]


def test_R4_floods_from_the_bottom_of_the_partition():
    model = make_model(1, 3, [0, 0, 1], [0, 1, 1], [2])
    solver = AquariumSolver(model)
    results = solver.try_R3_R4()
    assert [r.rule for r in results] == ["R4 Column flood"]
    assert results[0].changed_cells == [(0, 1)]
    assert grid_text(model) == [".", "*", "."]


def test_R4_holds_back_when_hint_exceeds_column():
    # Hint 5 in a column of three: no partition can supply what is required
    model = make_model(1, 3, [0, 0, 1], [0, 0, 0], [5])
    solver = AquariumSolver(model)
    assert solver.try_R3_R4() == []
    assert grid_text(model) == [".", ".", "."]
    assert physics_violations(model) == []

    report = solver.solve()
    assert report.quiescent
    assert RULE_R4 not in report.rules_triggered()
    assert physics_violations(model) == []


def test_R3_caps_invalidation_at_empty_cells():
    # Column already over its hint; partition 0 has only two rows to give up
    model = make_model(1, 3, [0, 0, 1], [0, 0, 1], [0])
    set_states(model, [".", ".", "*"])
    solver = AquariumSolver(model)
    results = solver.try_R3_R4()
    assert [r.rule for r in results] == [RULE_R3]
    assert sorted(results[0].changed_cells) == [(0, 0), (0, 1)]
    assert grid_text(model) == ["X", "X", "*"]
    assert physics_violations(model) == []


def test_R3_leaves_flooded_cells_of_the_same_partition():
    model = make_model(1, 3, [0, 0, 0], [0, 0, 1], [0])
    set_states(model, [".", ".", "*"])
    results = AquariumSolver(model).try_R3_R4()
    assert [r.rule for r in results] == [RULE_R3]
    assert grid_text(model) == ["X", "X", "*"]
    assert physics_violations(model) == []


def test_rules_skip_decided_cells():
    model = make_model(3, 1, [0, 0, 1], [1], [0, 0, 1])
    set_states(model, ["XX*"])
    solver = AquariumSolver(model)
    assert solver.run_round() == []


# ----------------------------
# Solving
# ----------------------------

def test_b0_reaches_known_solution():
    model = make_b0()
    report = AquariumSolver(model).solve()
    assert grid_text(model) == B0_EXPECTED
    assert model.is_solved()
    assert report.solved
    assert report.quiescent
    assert report.rounds == 2


def test_u_shape_partition_shares_state_across_gap():
    model = make_u_shape()
    report = AquariumSolver(model).solve()
    assert grid_text(model) == ["X*X", "***", "***"]
    assert report.solved


def make_open_diagonal():
    """Bottom row is forced; the two diagonals above both fit the hints."""
    return make_model(2, 3, [0, 1, 2, 3, 4, 4], [1, 1, 2], [2, 2])


@pytest.mark.parametrize("factory,solution", [
    (make_b0, B0_EXPECTED),
    (make_u_shape, ["X*X", "***", "***"]),
    (make_open_diagonal, ["*X", "X*", "**"]),
])
def test_physics_and_monotonicity_hold_after_every_round(factory, solution):
    model = factory()
    solver = AquariumSolver(model)
    previous = model.states()
    for _ in range(model.width * model.height + 1):
        results = solver.run_round()
        current = model.states()
        assert physics_violations(model) == []
        for old, new in zip(previous, current):
            assert old == new or old == EMPTY
        for row, expected in zip(grid_text(model), solution):
            for got, want in zip(row, expected):
                assert got == "." or got == want
        previous = current
        if not results:
            break
    else:
        pytest.fail("no quiescence within width * height rounds")


def test_extra_round_after_quiescence_changes_nothing():
    model = make_b0()
    solver = AquariumSolver(model)
    solver.solve()
    before = grid_text(model)
    assert solver.run_round() == []
    assert grid_text(model) == before


def test_rounds_stay_within_cell_count():
    for factory in (make_b0, make_u_shape):
        model = factory()
        report = AquariumSolver(model).solve()
        assert report.quiescent
        assert report.rounds <= model.width * model.height


def test_max_rounds_caps_solving():
    model = make_b0()
    report = AquariumSolver(model).solve(max_rounds=1)
    assert report.rounds == 1
    assert not report.quiescent
    assert not report.solved
    assert model.count_state(EMPTY) > 0


def test_partially_seeded_board_keeps_seed():
    model = make_b0()
    model.flood(4, 0)
    model.invalidate(0, 0)
    report = AquariumSolver(model).solve()
    assert report.solved
    assert grid_text(model) == B0_EXPECTED


def test_unsatisfiable_hints_stop_quietly():
    model = make_model(2, 2, [0, 0, 0, 0], [1, 0], [1, 0])
    report = AquariumSolver(model).solve()
    assert report.quiescent
    assert not report.solved
    assert not model.is_solved()
    assert physics_violations(model) == []


def test_board_that_needs_guessing_is_left_open():
    # Single-cell partitions: either diagonal satisfies every hint
    model = make_model(2, 2, [0, 1, 2, 3], [1, 1], [1, 1])
    report = AquariumSolver(model).solve()
    assert report.quiescent
    assert report.rounds == 0
    assert not report.solved
    assert grid_text(model) == ["..", ".."]


def test_partially_solved_board_keeps_open_cells():
    model = make_open_diagonal()
    report = AquariumSolver(model).solve()
    assert report.quiescent
    assert report.rounds == 1
    assert not report.solved
    assert grid_text(model) == ["..", "..", "**"]


def test_registered_pass_names():
    names = [name for _, _, name in sorted(_PASSES, key=lambda p: p[0])]
    assert names[:2] == [RULE_R1, RULE_R2]
    assert len(names) == 3


def test_report_counts_rules_and_history():
    model = make_b0()
    solver = AquariumSolver(model)
    report = solver.solve()
    counts = report.rules_triggered()
    assert sum(counts.values()) == len(report.steps)
    assert set(counts) <= {RULE_R1, RULE_R2, RULE_R3, RULE_R4}
    assert counts[RULE_R1] >= 1
    assert solver.history == report.steps
    changed = [c for step in report.steps for c in step.changed_cells]
    assert len(changed) == len(set(changed)) == 36


def test_moves_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="aquarium_rules")
    AquariumSolver(make_u_shape()).solve()
    messages = [r.getMessage() for r in caplog.records]
    assert "R1: Invalidate 0, 0" in messages
    assert "R2: Flood 1, 0" in messages
    assert any("quiescent=True" in m for m in messages)
    # Each pass that moved logs its registered name
    assert any(m.startswith(f"{RULE_R1}: ") and m.endswith("move(s)") for m in messages)
    assert any(m.startswith(f"{RULE_R2}: ") and m.endswith("move(s)") for m in messages)
