"""Local session markers kept by the client.

Two presence flags live here, each with no expiry: the set of question ids
this client has answered and whether the admin check succeeded. They are
persisted to a small JSON file so a restart keeps them. Anyone who can edit
that file can forge either marker.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

logger = logging.getLogger(__name__)


def _atomic_write_json(path: Path, content: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(content, ensure_ascii=False, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)


@dataclass
class SessionState:
    path: Path
    answered: Set[str] = field(default_factory=set)
    admin_authenticated: bool = False

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> "SessionState":
        """Read markers from `path`; a missing or unreadable file starts empty."""
        state = cls(path=Path(path))
        if not state.path.exists():
            return state
        try:
            data = json.loads(state.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("session_state_unreadable path=%s; starting empty", state.path, exc_info=True)
            return state
        if isinstance(data, dict):
            answered = data.get("answered")
            if isinstance(answered, list):
                state.answered = {str(q) for q in answered}
            state.admin_authenticated = data.get("admin_authenticated") is True
        return state

    def save(self) -> None:
        _atomic_write_json(
            self.path,
            {"answered": sorted(self.answered), "admin_authenticated": self.admin_authenticated},
        )

    def clear(self) -> None:
        self.answered.clear()
        self.admin_authenticated = False
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def has_answered(self, question_id: str) -> bool:
        return str(question_id) in self.answered

    def mark_answered(self, question_id: str) -> None:
        self.answered.add(str(question_id))
        self.save()

    def mark_admin_authenticated(self) -> None:
        self.admin_authenticated = True
        self.save()

    def clear_admin(self) -> None:
        self.admin_authenticated = False
        self.save()


__all__ = ["SessionState"]
