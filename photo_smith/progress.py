from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from .image import Image

logger = logging.getLogger(__name__)

ProgressSink = Callable[[int, int], None]

DEFAULT_PROGRESS_INTERVAL = 50


class CancelToken:
    """
    Cancellation flag shared between a running filter and whoever may stop it.
    Setting it never interrupts anything: the filter notices at its next checkpoint.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def clear(self) -> None:
        self._event.clear()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


class FilterStatus(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class FilterResult:
    image: Image
    status: FilterStatus
    name: str
    message: str = ""

    @property
    def completed(self) -> bool:
        return self.status is FilterStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status is FilterStatus.CANCELLED

    @property
    def failed(self) -> bool:
        return self.status is FilterStatus.FAILED


class ProgressReporter:
    def __init__(self, sink: Optional[ProgressSink], total: int, interval: int = DEFAULT_PROGRESS_INTERVAL) -> None:
        self.sink = sink
        self.total = total
        self.interval = max(1, int(interval))

    def report(self, done: int) -> None:
        if self.sink is None:
            return
        if done % self.interval == 0 or done == self.total:
            self.sink(done, self.total)


class Scan:
    """
    Iterates the units (rows or columns) of a cancelable filter.

    The token is read before every unit; progress goes out after the unit is
    processed, throttled to every `interval` units plus the final one.
    """

    def __init__(
        self,
        name: str,
        total: int,
        token: Optional[CancelToken] = None,
        progress: Optional[ProgressSink] = None,
        interval: int = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        self.name = name
        self.total = max(0, int(total))
        self.token = token
        self.done = 0
        self.cancelled = False
        self._reporter = ProgressReporter(progress, self.total, interval)

    def __iter__(self) -> Iterator[int]:
        logger.debug("Applying %s filter over %d units", self.name, self.total)
        for unit in range(self.total):
            if self.token is not None and self.token.is_cancelled():
                self.cancelled = True
                logger.info("%s filter cancelled after %d/%d units", self.name, self.done, self.total)
                return
            yield unit
            self.done = unit + 1
            self._reporter.report(self.done)

    def result(self, source: Image, output: Image) -> FilterResult:
        if self.cancelled:
            return FilterResult(source, FilterStatus.CANCELLED, self.name, f"{self.name} filter cancelled")
        logger.info("%s filter applied", self.name)
        return FilterResult(output, FilterStatus.COMPLETED, self.name, f"{self.name} filter applied")
