"""
Document store and backups.

The drivers never touch files. process_document() reads a note, runs a
driver over it and writes each progress report back to the store, so a note
always holds committed output followed by the untouched remainder.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol
import logging
import shutil

from notecraft.drivers.base import DriverResult, TransformDriver

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Where a note lives."""

    def read(self) -> str:
        ...

    def replace_range(self, text: str, start_line: int = 0, end_line: Optional[int] = None) -> None:
        """Replace lines [start_line, end_line) with text; end_line=None means to the end."""
        ...


class FileDocumentStore:
    """A UTF-8 text file on disk."""

    def __init__(self, path: str):
        self.path = Path(path)

    def read(self) -> str:
        # newline="" keeps "\r\n" intact so offsets match the file
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def replace_range(self, text: str, start_line: int = 0, end_line: Optional[int] = None) -> None:
        if start_line == 0 and end_line is None:
            updated = text
        else:
            lines = self.read().split("\n")
            end = len(lines) if end_line is None else end_line
            updated = "\n".join(lines[:start_line] + [text] + lines[end:])
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)


def create_backup(path: str, backup_dir: Optional[str] = None) -> Optional[str]:
    """
    Copy path to <stem>.<timestamp>.bak<suffix> next to it, or into backup_dir.

    Returns:
        The backup path, or None when the copy failed. A failed backup is
        logged and does not stop processing.
    """
    source = Path(path)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    target_dir = Path(backup_dir) if backup_dir else source.parent
    dest = target_dir / f"{source.stem}.{timestamp}.bak{source.suffix}"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
    except OSError as e:
        logger.error(f"Backup of {source} failed: {e}")
        return None
    logger.info(f"Backed up {source} to {dest}")
    return str(dest)


@dataclass
class DocumentOutcome:
    """Result of processing one stored document."""
    path: str
    result: DriverResult
    backup: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "status": self.result.status,
            "iterations": self.result.iterations,
            "transform_calls": self.result.transform_calls,
            "message": self.result.message,
            "backup": self.backup,
        }


def process_document(
    store: DocumentStore,
    driver: TransformDriver,
    backup: bool = False,
    backup_dir: Optional[str] = None,
) -> DocumentOutcome:
    """
    Run driver over the document in store.

    Every progress report is written back to the store as it arrives. The
    final document is written only when the driver finished; after a failure
    the store keeps the last progress write.
    """
    path = str(getattr(store, "path", ""))
    backup_path = None
    if backup and path:
        backup_path = create_backup(path, backup_dir)

    original = store.read()
    previous_callback = driver.on_progress

    def write_progress(document: str) -> None:
        store.replace_range(document, 0)
        if previous_callback:
            previous_callback(document)

    driver.on_progress = write_progress
    try:
        result = driver.run(original)
    finally:
        driver.on_progress = previous_callback

    if result.ok:
        if result.text != original:
            store.replace_range(result.text, 0)
    else:
        logger.warning(f"{path or 'document'}: {result.message}")
    return DocumentOutcome(path=path, result=result, backup=backup_path)
