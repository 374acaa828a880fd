"""
Batch processing over several notes, one after the other.

stop() may be called from another thread (a signal handler or UI); it is
checked between documents only, so the document in progress always finishes.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional
import logging
import threading
import time

from notecraft.drivers.base import TransformDriver
from notecraft.errors import NotecraftError
from notecraft.store import DocumentOutcome, FileDocumentStore, process_document

logger = logging.getLogger(__name__)


@dataclass
class BatchStats:
    total: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    stalled: int = 0
    errors: int = 0
    skipped: int = 0
    total_time_s: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "stalled": self.stalled,
            "errors": self.errors,
            "skipped": self.skipped,
            "total_time_s": round(self.total_time_s, 1),
        }


@dataclass
class BatchResult:
    outcomes: List[DocumentOutcome] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)   # {"path", "message"} for documents that raised
    stats: BatchStats = field(default_factory=BatchStats)
    stopped: bool = False


class BatchProcessor:
    """Runs one driver over many files sequentially."""

    def __init__(
        self,
        driver: TransformDriver,
        backup: bool = False,
        backup_dir: Optional[str] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ):
        self.driver = driver
        self.backup = backup
        self.backup_dir = backup_dir
        self.progress_callback = progress_callback
        self._stop = threading.Event()

    def stop(self) -> None:
        """Request a stop before the next document."""
        self._stop.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def run(self, paths: List[str]) -> BatchResult:
        self._stop.clear()
        result = BatchResult()
        result.stats.total = len(paths)
        start_time = time.time()

        for i, path in enumerate(paths):
            if self._stop.is_set():
                result.stopped = True
                result.stats.skipped = len(paths) - i
                logger.warning(f"Batch stopped, skipping {result.stats.skipped} remaining documents")
                break

            if self.progress_callback:
                self.progress_callback(i, len(paths), path)
            logger.info(f"[{i + 1}/{len(paths)}] {self.driver.feature}: {path}")

            try:
                outcome = process_document(
                    FileDocumentStore(path),
                    self.driver,
                    backup=self.backup,
                    backup_dir=self.backup_dir,
                )
            except (OSError, UnicodeDecodeError, NotecraftError) as e:
                logger.error(f"Error processing {path}: {e}")
                result.errors.append({"path": path, "message": str(e)})
                result.stats.errors += 1
                result.stats.processed += 1
                continue

            result.outcomes.append(outcome)
            result.stats.processed += 1
            status = outcome.result.status
            if status == "done":
                result.stats.succeeded += 1
            elif status == "stalled":
                result.stats.stalled += 1
            else:
                result.stats.failed += 1

        result.stats.total_time_s = time.time() - start_time
        logger.info(
            f"Batch finished: {result.stats.succeeded}/{result.stats.total} succeeded, "
            f"{result.stats.failed} failed, {result.stats.stalled} stalled, {result.stats.errors} errors"
        )
        return result
