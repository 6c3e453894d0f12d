"""Live session sequencing: which exercise comes next after a set is logged.

Exercises are walked in order. A circuit or superset with more than one round
loops: after its last exercise the session jumps back to the group's first
exercise and the round counter goes up, until the final round is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from litework.core.enums import GroupType

LOOPING_GROUP_TYPES = (GroupType.CIRCUIT, GroupType.SUPERSET)


@dataclass
class ExerciseState:
    group_id: str | None
    sets_target: int
    sets_completed: int
    completed: bool = False


@dataclass(frozen=True)
class GroupInfo:
    id: str
    type: GroupType
    rounds: int = 1


@dataclass
class Advance:
    next_index: int
    group_rounds: dict[str, int]
    exercise_completed: bool = False
    reset_group_id: str | None = None
    finished: bool = False
    reset_indices: list[int] = field(default_factory=list)


def _loops(group: GroupInfo | None) -> bool:
    return group is not None and group.type in LOOPING_GROUP_TYPES and group.rounds > 1


def planned_rounds(group: GroupInfo | None) -> int:
    """How many times the exercises of ``group`` are performed in a session."""
    return group.rounds if _loops(group) else 1


def advance_after_set(
    exercises: Sequence[ExerciseState],
    groups: Mapping[str, GroupInfo],
    current_index: int,
    group_rounds: Mapping[str, int],
) -> Advance:
    """Decide where the session goes after a set of ``exercises[current_index]``.

    ``sets_completed`` of the current exercise must already include the new set.
    Returned ``group_rounds`` is a new dict; inputs are not mutated.
    """
    if not 0 <= current_index < len(exercises):
        raise IndexError(f"exercise index {current_index} out of range")

    rounds = dict(group_rounds)
    current = exercises[current_index]
    is_last_exercise = current_index == len(exercises) - 1

    if current.sets_completed < current.sets_target:
        return Advance(next_index=current_index, group_rounds=rounds)

    group = groups.get(current.group_id) if current.group_id else None
    if not _loops(group):
        if is_last_exercise:
            return Advance(current_index, rounds, exercise_completed=True, finished=True)
        return Advance(current_index + 1, rounds, exercise_completed=True)

    members = [i for i, ex in enumerate(exercises) if ex.group_id == group.id]
    position = members.index(current_index)
    if position < len(members) - 1:
        return Advance(members[position + 1], rounds, exercise_completed=True)

    current_round = min(rounds.get(group.id, 1), group.rounds)
    if current_round < group.rounds:
        rounds[group.id] = current_round + 1
        return Advance(
            members[0],
            rounds,
            exercise_completed=True,
            reset_group_id=group.id,
            reset_indices=members,
        )

    rounds[group.id] = group.rounds
    if is_last_exercise:
        return Advance(current_index, rounds, exercise_completed=True, finished=True)
    return Advance(current_index + 1, rounds, exercise_completed=True)


def apply_advance(exercises: Sequence[ExerciseState], advance: Advance, current_index: int) -> None:
    """Apply completion and circuit resets to mutable exercise states (ORM rows work too)."""
    if advance.exercise_completed:
        exercises[current_index].completed = True
    for i in advance.reset_indices:
        exercises[i].sets_completed = 0
        exercises[i].completed = False
