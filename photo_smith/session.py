from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from . import engine
from .color import merge
from .config import EngineSettings
from .errors import InvalidParameterError, PhotoSmithError
from .history import HistoryManager
from .image import Image
from .imageio import load_image, save_image
from .params import MergeMode
from .progress import CancelToken, FilterResult, FilterStatus, ProgressSink

logger = logging.getLogger(__name__)

NO_FILTER = "None"
RESET_LABEL = "Reset"


class EditorSession:
    """
    Owns the image being edited together with its history and cancel token.

    Every operation runs against a snapshot of the current image. The session
    adopts the output and records the snapshot in history only when the
    operation completes; cancellation and failures leave both untouched.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        progress: Optional[ProgressSink] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.history = HistoryManager(self.settings.history_capacity)
        self.token = CancelToken()
        self.progress = progress
        self.current: Optional[Image] = None
        self.original: Optional[Image] = None
        self.path: Optional[str] = None
        self.save_kwargs: dict = {}
        self.unsaved_changes = False
        self.last_message = ""

    @property
    def has_image(self) -> bool:
        return self.current is not None

    @property
    def active_filter(self) -> str:
        label = self.history.undo_label()
        return label if label else NO_FILTER

    def open_image(self, image: Image, path: Optional[str] = None) -> None:
        self.current = image.copy()
        self.original = image.copy()
        self.path = path
        self.save_kwargs = {}
        self.history.clear()
        self.token.clear()
        self.unsaved_changes = False
        self.last_message = "Image loaded"

    def load(self, path: Union[str, Path]) -> None:
        # A failed load raises before anything is replaced.
        loaded = load_image(path)
        self.open_image(loaded.image, loaded.path)
        self.save_kwargs = loaded.save_kwargs

    def save(self, path: Optional[Union[str, Path]] = None) -> str:
        if self.current is None:
            raise PhotoSmithError("No image loaded.")
        target = str(path) if path is not None else self.path
        if target is None:
            raise PhotoSmithError("No target path to save to.")
        save_image(self.current, target, self.save_kwargs)
        self.path = target
        self.unsaved_changes = False
        self.last_message = f"Saved to {target}"
        return target

    def unload(self) -> None:
        self.current = None
        self.original = None
        self.path = None
        self.save_kwargs = {}
        self.history.clear()
        self.unsaved_changes = False
        self.last_message = "Image unloaded"
        logger.info("Image unloaded")

    def reset(self) -> bool:
        if self.current is None or self.original is None:
            return False
        self.history.push_undo(self.current, RESET_LABEL)
        self.current = self.original.copy()
        self.unsaved_changes = True
        self.last_message = "Image reset to original"
        logger.info("Image reset to original")
        return True

    def cancel(self) -> None:
        self.token.cancel()

    def undo(self) -> bool:
        if self.current is None:
            return False
        entry = self.history.undo(self.current)
        if entry is None:
            return False
        self.current = entry.image
        self.unsaved_changes = True
        self.last_message = f"Undid {entry.label}" if entry.label else "Undo"
        logger.info("Undo -> active filter %s", self.active_filter)
        return True

    def redo(self) -> bool:
        if self.current is None:
            return False
        entry = self.history.redo(self.current)
        if entry is None:
            return False
        self.current = entry.image
        self.unsaved_changes = True
        self.last_message = f"Redid {entry.label}" if entry.label else "Redo"
        logger.info("Redo -> active filter %s", self.active_filter)
        return True

    def apply(self, key: str, **params: Any) -> FilterResult:
        """Run a catalog operation by key, e.g. ``session.apply("blur", strength=40)``."""
        try:
            op = engine.get_operation(key)
        except InvalidParameterError as exc:
            return self._failed(key, str(exc))
        return self._run(
            op.label,
            lambda image: engine.apply(
                key, image, token=self.token, progress=self.progress, settings=self.settings, **params
            ),
        )

    def run_cancelable(self, label: str, func: Callable[..., FilterResult], **params: Any) -> FilterResult:
        return self._run(
            label, lambda image: func(image, token=self.token, progress=self.progress, **params)
        )

    def run_simple(self, label: str, func: Callable[..., Image], **params: Any) -> FilterResult:
        return self._run(
            label,
            lambda image: FilterResult(func(image, **params), FilterStatus.COMPLETED, label, f"{label} filter applied"),
        )

    def merge_with(
        self,
        other: Union[Image, str, Path],
        mode: Union[MergeMode, str] = MergeMode.OVERLAP,
    ) -> FilterResult:
        if not isinstance(other, Image):
            try:
                other = load_image(other).image
            except PhotoSmithError as exc:
                logger.exception("Could not load image to merge")
                return self._failed("Merge", str(exc))
        return self.run_simple("Merge", merge, other=other, mode=mode)

    def _run(self, label: str, call: Callable[[Image], FilterResult]) -> FilterResult:
        if self.current is None:
            return self._failed(label, "No image loaded.")
        before = self.current
        self.token.clear()
        try:
            result = call(before)
        except Exception as exc:
            logger.exception("%s failed", label)
            return self._failed(label, str(exc))

        self.last_message = result.message
        if result.completed:
            self.history.push_undo(before, label)
            self.current = result.image
            self.unsaved_changes = True
        return result

    def _failed(self, label: str, message: str) -> FilterResult:
        self.last_message = f"{label} failed: {message}"
        image = self.current if self.current is not None else Image()
        return FilterResult(image, FilterStatus.FAILED, label, self.last_message)
