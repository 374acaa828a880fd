"""
Cosmetic cleanup.

Works on a working copy of the body: each chunk is replaced in place by its
cleaned version and the cursor moves past the replacement.
"""
from __future__ import annotations
import logging

from notecraft.chunking.chunker import slice_by_characters
from notecraft.drivers.base import TransformDriver, restore_outer_whitespace

logger = logging.getLogger(__name__)


class CosmeticDriver(TransformDriver):
    feature = "cosmetic"
    default_chunk_size = 1000

    def process_single(self, body: str) -> str:
        self._next_iteration()
        result = restore_outer_whitespace(body, self._transform(body))
        self._advance(result)
        return result

    def process_chunks(self, body: str) -> str:
        working = body
        cursor = 0
        while cursor < len(working):
            self._next_iteration(cursor)
            piece = slice_by_characters(working[cursor:], self.chunk_size)
            chunk = piece.chunk
            if chunk.strip():
                replacement = restore_outer_whitespace(chunk, self._transform(chunk))
            else:
                replacement = chunk

            working = working[:cursor] + replacement + working[cursor + len(chunk):]
            new_cursor = cursor + len(replacement)
            # Skip the boundary character so the next chunk starts on text
            if piece.remaining and working[new_cursor:new_cursor + 1].isspace():
                new_cursor += 1
            if len(replacement) != len(chunk):
                logger.info(f"Chunk at offset {cursor} changed length {len(chunk)} -> {len(replacement)}")

            self._check_progress(cursor, new_cursor)
            cursor = new_cursor
            self._advance(working)

        return working
