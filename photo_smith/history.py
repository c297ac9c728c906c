from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from .errors import InvalidParameterError
from .image import Image

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 20


@dataclass
class HistoryEntry:
    image: Image
    # Operation that led away from this snapshot to the next state.
    label: str = ""


class HistoryManager:
    """
    Linear undo/redo over whole-image snapshots.

    Both stacks hold at most `capacity` entries and drop their oldest entry
    when full. Any new push discards the redo branch.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise InvalidParameterError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._undo: Deque[HistoryEntry] = deque(maxlen=capacity)
        self._redo: Deque[HistoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push_undo(self, snapshot: Image, label: str = "") -> None:
        if len(self._undo) == self._capacity:
            logger.debug("History full, dropping oldest of %d snapshots", self._capacity)
        self._undo.append(HistoryEntry(snapshot, label))
        self._redo.clear()

    def undo(self, current: Image) -> Optional[HistoryEntry]:
        """Pop the newest snapshot; `current` moves to the redo stack. None when empty."""
        if not self._undo:
            return None
        entry = self._undo.pop()
        self._redo.append(HistoryEntry(current, entry.label))
        return entry

    def redo(self, current: Image) -> Optional[HistoryEntry]:
        if not self._redo:
            return None
        entry = self._redo.pop()
        self._undo.append(HistoryEntry(current, entry.label))
        return entry

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def undo_label(self) -> Optional[str]:
        return self._undo[-1].label if self._undo else None

    def redo_label(self) -> Optional[str]:
        return self._redo[-1].label if self._redo else None

    def undo_snapshots(self) -> List[Image]:
        """Oldest first."""
        return [entry.image for entry in self._undo]

    def redo_snapshots(self) -> List[Image]:
        return [entry.image for entry in self._redo]

    def __len__(self) -> int:
        return len(self._undo)
