"""
Topic splitting.

Sentences are enumerated, the transform names the topics, and each topic
start becomes a "## Title" heading. The last topic of a chunk is carried
over: the cursor moves to its first sentence so the next chunk sees the
whole topic before its heading is committed.
"""
from __future__ import annotations
from typing import List
import logging

from notecraft.chunking.chunker import slice_by_characters
from notecraft.chunking.enumerator import enumerate_sentences
from notecraft.chunking.topics import (
    insert_all_headings,
    insert_headings_except_last,
    parse_topics,
    usable_topics,
)
from notecraft.drivers.base import Phase, TransformDriver

logger = logging.getLogger(__name__)


class SplitDriver(TransformDriver):
    feature = "split"
    default_chunk_size = 1000

    def process_single(self, body: str) -> str:
        self._next_iteration()
        self.phase = Phase.ENUMERATE
        enumerated = enumerate_sentences(body)
        topics = parse_topics(self._transform(enumerated.enumerated))
        result = insert_all_headings(enumerated, topics)
        self._log_iteration(body, result)
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
            else:
                self.phase = Phase.ENUMERATE
                enumerated = enumerate_sentences(chunk)
                topics = usable_topics(enumerated, parse_topics(self._transform(enumerated.enumerated)))

                if not topics:
                    logger.warning(f"No usable topics in chunk at offset {cursor}, keeping it unchanged")
                    text, consumed = chunk, len(chunk)
                elif not piece.remaining or len(topics) == 1:
                    text, consumed = insert_all_headings(enumerated, topics), len(chunk)
                else:
                    split = insert_headings_except_last(enumerated, topics)
                    text, consumed = split.before_last_processed, split.carry_offset
                    if consumed <= 0:
                        text, consumed = insert_all_headings(enumerated, topics), len(chunk)
                    else:
                        logger.info(f"Carrying topic '{topics[-1].title}' over from offset {cursor + consumed}")
                self._log_iteration(chunk, text)

            new_cursor = cursor + consumed
            self._check_progress(cursor, new_cursor)
            committed.append(text)
            cursor = new_cursor
            self._advance("".join(committed) + body[cursor:])

        return "".join(committed)

    def _log_iteration(self, block: str, processed: str) -> None:
        if self.debug_log:
            self.debug_log.topic_iteration(block, processed, self._iteration)
