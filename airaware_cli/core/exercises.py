"""Exercise catalog lookup and daily progress view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from airaware_cli.core.constants import DAILY_GOAL, DEFAULT_CATEGORY, EXERCISE_DB
from airaware_cli.core.models import Exercise, SessionState


class UnknownCategoryError(KeyError):
    """Raised for a category key that is not in the catalog."""


@dataclass(frozen=True)
class ExerciseProgress:
    """Completion view for one category."""

    category: str
    exercises: Tuple[Tuple[Exercise, bool], ...]
    completed_count: int
    daily_goal: int

    @property
    def fraction(self) -> float:
        if self.daily_goal <= 0:
            return 1.0
        return min(self.completed_count / self.daily_goal, 1.0)


def categories() -> List[str]:
    return list(EXERCISE_DB)


def exercises_for(category: str) -> List[Exercise]:
    """Return the ordered exercises of ``category``."""
    try:
        entries = EXERCISE_DB[category]
    except KeyError as exc:
        raise UnknownCategoryError(category) from exc
    return [Exercise(**entry) for entry in entries]


def all_exercise_ids() -> Iterable[str]:
    for entries in EXERCISE_DB.values():
        for entry in entries:
            yield entry["id"]


def build_progress(
    state: SessionState,
    category: Optional[str] = None,
    daily_goal: int = DAILY_GOAL,
) -> ExerciseProgress:
    """Build the completion view for ``category`` (defaults to the selected one).

    A stored selection missing from the catalog falls back to the default category.
    The completed count spans every category, matching the daily goal.
    """
    key = category or state.selected_category
    if category is None and key not in EXERCISE_DB:
        key = DEFAULT_CATEGORY
    rows = tuple(
        (exercise, exercise.id in state.completed_exercise_ids)
        for exercise in exercises_for(key)
    )
    return ExerciseProgress(
        category=key,
        exercises=rows,
        completed_count=len(state.completed_exercise_ids),
        daily_goal=daily_goal,
    )
