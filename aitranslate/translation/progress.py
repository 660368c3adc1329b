"""
Translation Progress

Contains the TranslationProgress dataclass and the ProgressReporter that
emits one notification per 10% boundary.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from aitranslate.logger import get_logger

logger = get_logger(__name__)

PROGRESS_STEP = 10


@dataclass
class TranslationProgress:
    """Progress notification for a run."""
    percent: int             # Boundary reached: 0, 10, ..., 100
    processed_items: int     # Entry/language pairs processed so far
    total_items: int         # Entries x target languages


def log_progress(progress: TranslationProgress) -> None:
    logger.info(f"[⏳] {progress.percent}%")


class ProgressReporter:
    """
    Tracks processed entry/language pairs and reports each 10% boundary once.

    Boundaries skipped over by a large step are all reported, in order.
    """

    def __init__(
        self,
        total_items: int,
        callback: Optional[Callable[[TranslationProgress], None]] = None,
    ):
        self.total_items = max(total_items, 0)
        self.processed_items = 0
        self.callback = callback or log_progress
        self._next_boundary = 0

    @property
    def percent(self) -> int:
        if self.total_items == 0:
            return 100
        processed = min(self.processed_items, self.total_items)
        return (100 * processed) // self.total_items

    def start(self) -> List[int]:
        """Report the starting boundary (100% straight away for an empty run)."""
        return self._emit_reached()

    def advance(self, count: int = 1) -> List[int]:
        """Add processed pairs and report any boundaries crossed."""
        self.processed_items += count
        return self._emit_reached()

    def _emit_reached(self) -> List[int]:
        emitted: List[int] = []
        current = self.percent
        while self._next_boundary <= 100 and self._next_boundary <= current:
            boundary = self._next_boundary
            self._next_boundary += PROGRESS_STEP
            self.callback(TranslationProgress(
                percent=boundary,
                processed_items=self.processed_items,
                total_items=self.total_items,
            ))
            emitted.append(boundary)
        return emitted
