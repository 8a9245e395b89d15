"""Best-score persistence.

The simulation never touches storage; :class:`game.session.BarSession`
loads once on construction and saves when a round ends.  Both operations
are best effort: a broken store must never interrupt play.
"""
from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Protocol

from config import HIGH_SCORE_FILE

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "high_score"


class HighScoreStore(Protocol):
    def load(self) -> int:
        ...

    def save(self, score: int) -> None:
        ...


def _coerce_score(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"high score must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"high score must be non-negative, got {value!r}")
    return int(value)


class JsonHighScoreStore:
    """Keeps ``{"high_score": n}`` in a small JSON file."""

    def __init__(self, path: Path = HIGH_SCORE_FILE) -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            raw = json.loads(self.path.read_text())
            if not isinstance(raw, dict):
                raise ValueError("high score file must hold a JSON object")
            return _coerce_score(raw.get(HIGH_SCORE_KEY, 0))
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, exc)
            return 0

    def save(self, score: int) -> None:
        payload = json.dumps({HIGH_SCORE_KEY: max(0, int(score))})
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".highscore-", suffix=".json")
            with os.fdopen(fd, "w") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.warning("Could not save high score to %s: %s", self.path, exc)
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove high score file %s: %s", self.path, exc)


class MemoryHighScoreStore:
    """In-process store, used headless and in tests."""

    def __init__(self, score: int = 0) -> None:
        self.score = max(0, int(score))
        self.saves = 0

    def load(self) -> int:
        return self.score

    def save(self, score: int) -> None:
        self.score = max(0, int(score))
        self.saves += 1
