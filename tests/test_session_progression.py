import pytest

from litework.core.enums import GroupType
from litework.services.session_progression import (
    ExerciseState,
    GroupInfo,
    advance_after_set,
    apply_advance,
    planned_rounds,
)


def run_session(exercises, groups, max_steps=100):
    """Log one set at a time until finished. Returns visited indices and the final rounds."""
    index, rounds, visited = 0, {}, []
    for _ in range(max_steps):
        visited.append(index)
        exercises[index].sets_completed += 1
        adv = advance_after_set(exercises, groups, index, rounds)
        apply_advance(exercises, adv, index)
        for gid, r in adv.group_rounds.items():
            assert r <= groups[gid].rounds
        rounds = adv.group_rounds
        if adv.finished:
            return visited, rounds
        index = adv.next_index
    raise AssertionError("session never finished")


def test_linear_plan_walks_in_order():
    exercises = [ExerciseState(None, 2, 0), ExerciseState(None, 1, 0)]
    visited, _ = run_session(exercises, {})
    assert visited == [0, 0, 1]
    assert all(ex.completed for ex in exercises)


def test_circuit_loops_for_each_round_then_moves_on():
    groups = {"g": GroupInfo("g", GroupType.CIRCUIT, rounds=3)}
    exercises = [
        ExerciseState(None, 1, 0),
        ExerciseState("g", 1, 0),
        ExerciseState("g", 1, 0),
        ExerciseState(None, 1, 0),
    ]
    visited, rounds = run_session(exercises, groups)
    assert visited == [0, 1, 2, 1, 2, 1, 2, 3]
    assert rounds == {"g": 3}


def test_round_reset_clears_group_progress():
    groups = {"g": GroupInfo("g", GroupType.SUPERSET, rounds=2)}
    exercises = [ExerciseState("g", 1, 1, True), ExerciseState("g", 1, 1)]
    adv = advance_after_set(exercises, groups, 1, {})
    assert adv.next_index == 0
    assert adv.reset_group_id == "g"
    assert adv.group_rounds == {"g": 2}
    apply_advance(exercises, adv, 1)
    assert [(e.sets_completed, e.completed) for e in exercises] == [(0, False), (0, False)]


def test_single_round_superset_is_linear():
    groups = {"g": GroupInfo("g", GroupType.SUPERSET, rounds=1)}
    exercises = [ExerciseState("g", 1, 0), ExerciseState("g", 1, 0), ExerciseState(None, 1, 0)]
    visited, _ = run_session(exercises, groups)
    assert visited == [0, 1, 2]


def test_section_never_loops():
    groups = {"s": GroupInfo("s", GroupType.SECTION, rounds=3)}
    exercises = [ExerciseState("s", 1, 0), ExerciseState("s", 1, 0)]
    visited, _ = run_session(exercises, groups)
    assert visited == [0, 1]


def test_stays_on_exercise_until_target_sets_done():
    exercises = [ExerciseState(None, 3, 1), ExerciseState(None, 1, 0)]
    adv = advance_after_set(exercises, {}, 0, {})
    assert adv.next_index == 0
    assert not adv.exercise_completed


def test_round_counter_is_capped_at_group_rounds():
    groups = {"g": GroupInfo("g", GroupType.CIRCUIT, rounds=3)}
    exercises = [ExerciseState("g", 1, 1), ExerciseState("g", 1, 1), ExerciseState(None, 1, 0)]
    adv = advance_after_set(exercises, groups, 1, {"g": 5})
    assert adv.group_rounds == {"g": 3}
    assert adv.next_index == 2


def test_index_out_of_range():
    with pytest.raises(IndexError):
        advance_after_set([ExerciseState(None, 1, 1)], {}, 3, {})


def test_planned_rounds():
    assert planned_rounds(None) == 1
    assert planned_rounds(GroupInfo("s", GroupType.SECTION, rounds=3)) == 1
    assert planned_rounds(GroupInfo("g", GroupType.SUPERSET, rounds=1)) == 1
    assert planned_rounds(GroupInfo("g", GroupType.CIRCUIT, rounds=3)) == 3
