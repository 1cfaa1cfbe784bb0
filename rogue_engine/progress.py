"""
Progress store: the one number that survives between runs, the highest
level reached. Kept in a small JSON file.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

MAX_LEVEL_KEY = "rogue_emoji_max_level"


class ProgressStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def max_level(self) -> int:
        data = self._load()
        try:
            return max(1, int(data.get(MAX_LEVEL_KEY, 1)))
        except (TypeError, ValueError):
            logger.warning("Ignoring bad %s value in %s", MAX_LEVEL_KEY, self.path)
            return 1

    def record(self, level: int) -> bool:
        """Persist level if it beats the stored best. Returns True when written."""
        if level <= self.max_level():
            return False
        data = self._load()
        data[MAX_LEVEL_KEY] = level
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)
        logger.info("New best level %d saved to %s", level, self.path)
        return True

    def reset(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read progress file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}
