from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from ...engine.puzzle import Puzzle


class InMemoryPuzzleStore:
    """Thread-safe registry of parsed puzzles keyed by ``puzzle_id``.

    Puzzles are immutable, so the store only guards its own dictionary.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._puzzles: Dict[str, Puzzle] = {}

    def add(self, puzzle: Puzzle) -> str:
        pid = uuid.uuid4().hex
        with self._lock:
            self._puzzles[pid] = puzzle
        return pid

    def get(self, puzzle_id: str) -> Optional[Puzzle]:
        with self._lock:
            return self._puzzles.get(puzzle_id)

    def delete(self, puzzle_id: str) -> bool:
        with self._lock:
            return self._puzzles.pop(puzzle_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._puzzles)
