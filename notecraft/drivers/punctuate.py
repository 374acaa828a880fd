"""
Punctuation restoration.

Each chunk is sliced from the original body, stripped of its punctuation and
sent to the transform. Only whole sentences are committed: the output is cut
after its second-to-last terminator, because the last sentence may have been
truncated by the chunk edge. The cut is mapped back onto the source chunk by
counting alphanumeric characters, which punctuation changes never touch.
"""
from __future__ import annotations
from typing import List, Tuple
import logging

from notecraft.chunking.boundaries import (
    PUNCTUATION_CHARS,
    find_previous_sentence_end,
    find_sentence_end,
    strip_punctuation,
)
from notecraft.chunking.chunker import slice_by_characters
from notecraft.drivers.base import TransformDriver, restore_outer_whitespace

logger = logging.getLogger(__name__)


def count_alnum(text: str) -> int:
    return sum(1 for ch in text if ch.isalnum())


def source_offset_after(source: str, alnum_count: int) -> int:
    """
    Offset in source just past its alnum_count-th alphanumeric character,
    extended over any punctuation that directly follows it.

    Returns 0 when alnum_count is 0 and len(source) when source runs out.
    """
    if alnum_count <= 0:
        return 0
    seen = 0
    for i, ch in enumerate(source):
        if ch.isalnum():
            seen += 1
            if seen == alnum_count:
                end = i + 1
                while end < len(source) and source[end] in PUNCTUATION_CHARS:
                    end += 1
                return end
    return len(source)


class PunctuateDriver(TransformDriver):
    feature = "punctuate"
    default_chunk_size = 1000

    def __init__(self, transformer, *, preserve_headings: bool = True, **kwargs):
        super().__init__(transformer, **kwargs)
        self.preserve_headings = preserve_headings

    @classmethod
    def _feature_options(cls, feature) -> dict:
        return {"preserve_headings": feature.preserve_headings}

    def _punctuate(self, chunk: str) -> str:
        return self._transform(strip_punctuation(chunk, self.preserve_headings))

    def process_single(self, body: str) -> str:
        self._next_iteration()
        result = restore_outer_whitespace(body, self._punctuate(body))
        self._advance(result)
        return result

    def process_chunks(self, body: str) -> str:
        committed: List[str] = []
        cursor = 0
        while cursor < len(body):
            self._next_iteration(cursor)
            piece = slice_by_characters(body[cursor:], self.chunk_size)
            chunk = piece.chunk
            if not chunk.strip():
                text, consumed = chunk, len(chunk)
            elif not piece.remaining:
                text, consumed = restore_outer_whitespace(chunk, self._punctuate(chunk)), len(chunk)
            else:
                text, consumed = self._reconcile(chunk, self._punctuate(chunk))

            new_cursor = cursor + consumed
            self._check_progress(cursor, new_cursor)
            committed.append(text)
            cursor = new_cursor
            self._advance("".join(committed) + body[cursor:])

        return "".join(committed)

    def _reconcile(self, chunk: str, output: str) -> Tuple[str, int]:
        """Return (text to commit, source characters consumed)."""
        last = find_sentence_end(output)
        previous = find_previous_sentence_end(output, last.position) if last else None
        if previous is None:
            logger.warning("Punctuated chunk has fewer than two sentences, committing all of it")
            return restore_outer_whitespace(chunk, output), len(chunk)

        head = output[:previous.position + 1]
        consumed = source_offset_after(chunk, count_alnum(head))
        if consumed <= 0 or consumed >= len(chunk):
            logger.warning("Could not map punctuated text back onto the chunk, committing all of it")
            return restore_outer_whitespace(chunk, output), len(chunk)

        lead = chunk[:len(chunk) - len(chunk.lstrip())]
        return lead + head.strip(), consumed
