"""Persistent session state with write-through saves and a daily reset."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from airaware_cli.core.constants import DEFAULT_CATEGORY, STORAGE_KEY
from airaware_cli.core.models import SessionState

logger = logging.getLogger(__name__)

# Field names written by earlier releases of the state file.
_LEGACY_FIELDS = {
    "completedExercises": "completedExerciseIds",
    "category": "selectedCategory",
}


def state_to_record(state: SessionState) -> Dict[str, Any]:
    """Serialize session state to its persisted record shape."""
    return {
        "currentCity": state.current_city,
        "completedExerciseIds": sorted(state.completed_exercise_ids),
        "lastVisitDate": state.last_visit_date,
        "selectedCategory": state.selected_category,
    }


def state_from_record(record: Any) -> SessionState:
    """Merge a persisted record over defaults; bad or missing fields use defaults."""
    state = SessionState()
    if not isinstance(record, dict):
        return state

    data = dict(record)
    for old, new in _LEGACY_FIELDS.items():
        if old in data and new not in data:
            data[new] = data[old]

    city = data.get("currentCity")
    if isinstance(city, str) and city:
        state.current_city = city

    completed = data.get("completedExerciseIds")
    if isinstance(completed, list):
        state.completed_exercise_ids = {str(item) for item in completed}

    visit = data.get("lastVisitDate")
    if isinstance(visit, str) and visit:
        state.last_visit_date = visit

    category = data.get("selectedCategory")
    if isinstance(category, str) and category:
        state.selected_category = category

    return state


class SessionStore:
    """Owns the session state and persists every mutation immediately.

    Persistence failures are logged and kept on ``last_error``; the in-memory
    change still applies so the session stays usable.
    """

    def __init__(self, path: Path, storage_key: str = STORAGE_KEY) -> None:
        self.path = path
        self.storage_key = storage_key
        self.state = SessionState()
        self.last_error: Optional[Exception] = None

    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            self.last_error = exc
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> SessionState:
        """Read the persisted record and merge it over defaults."""
        record = self._read_file().get(self.storage_key)
        self.state = state_from_record(record)
        logger.debug("Loaded session state from %s: %s", self.path, self.state)
        return self.state

    def save(self) -> bool:
        """Write the current state; return False when storage is unavailable."""
        data = self._read_file()
        data[self.storage_key] = state_to_record(self.state)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2) + "\n")
        except OSError as exc:
            logger.warning("Could not persist session state to %s: %s", self.path, exc)
            self.last_error = exc
            return False
        self.last_error = None
        return True

    def check_daily_reset(self, today: Optional[str] = None) -> bool:
        """Clear completed exercises when the visit date changes.

        Returns True when a reset happened.
        """
        today = today or date.today().isoformat()
        if self.state.last_visit_date == today:
            return False
        logger.info("New day %s (last visit %s); clearing progress", today, self.state.last_visit_date)
        self.state.completed_exercise_ids = set()
        self.state.last_visit_date = today
        self.save()
        return True

    def toggle_exercise(self, exercise_id: str) -> bool:
        """Flip completion for ``exercise_id`` and return the new done flag.

        Ids are not checked against the catalog.
        """
        completed = self.state.completed_exercise_ids
        if exercise_id in completed:
            completed.discard(exercise_id)
            done = False
        else:
            completed.add(exercise_id)
            done = True
        self.save()
        return done

    def reset_exercises(self) -> None:
        self.state.completed_exercise_ids = set()
        self.save()

    def set_category(self, key: str) -> None:
        self.state.selected_category = key or DEFAULT_CATEGORY
        self.save()

    def set_current_city(self, name: str) -> None:
        self.state.current_city = name or None
        self.save()
