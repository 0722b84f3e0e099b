"""
local_store.py: The player's personal best, cached in a small JSON file.
"""

import json
import logging
from pathlib import Path

from .constants import BEST_FILE

logger = logging.getLogger(__name__)


class BestScoreCache:
    def __init__(self, path=BEST_FILE):
        self.path = Path(path)

    def get_best(self) -> int:
        """The cached best, or 0 if there is none or the file is unreadable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable best score file %s: %s", self.path, e)
            return 0

        best = data.get("best") if isinstance(data, dict) else None
        if not isinstance(best, int) or best < 0:
            return 0
        return best

    def set_best(self, score: int):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"best": int(score)}), encoding="utf-8")
