"""
Summarization.

A body that fits one window is summarized in a single call. A longer body is
chunked by "##" sections, each chunk is summarized into a "## Part k"
section, and the accumulated parts are summarized again until they fit one
window. The final summary is placed at the top of the body in a
"~~~ Summary" block; the rest of the note is left as it was.
"""
from __future__ import annotations
import re
from typing import List, Tuple
import logging

from notecraft.chunking.chunker import slice_by_characters
from notecraft.drivers.base import TransformDriver
from notecraft.errors import ProcessingStalledError
from notecraft.llm.prompts import SUMMARY_MERGE_NOTE

logger = logging.getLogger(__name__)

SUMMARY_BLOCK_RE = re.compile(r"\A\s*~~~ Summary\n.*?\n~~~\n", re.DOTALL)


def format_summary_block(summary: str) -> str:
    return f"~~~ Summary\n{summary.strip()}\n~~~\n"


def strip_summary_block(body: str) -> str:
    """Drop a summary block left at the top of the body by an earlier run."""
    m = SUMMARY_BLOCK_RE.match(body)
    return body[m.end():] if m else body


def format_parts(summaries: List[str]) -> str:
    return "\n".join(f"## Part {i}\n{text.strip()}\n" for i, text in enumerate(summaries, start=1))


class SummarizeDriver(TransformDriver):
    feature = "summarize"
    default_chunk_size = 5000

    def process_body(self, body: str) -> str:
        content = strip_summary_block(body)
        if not content.strip():
            logger.info("Nothing to summarize besides an existing summary block")
            return body
        summary = super().process_body(content)
        return format_summary_block(summary) + content

    def process_single(self, body: str) -> str:
        self._next_iteration()
        return self._transform(body)

    def process_chunks(self, body: str) -> str:
        current = body
        round_number = 0
        while len(current) > self.chunk_size:
            round_number += 1
            blocks, summaries = self._summarize_round(current)
            if self.debug_log:
                self.debug_log.summary_round(blocks, summaries, round_number)

            accumulated = format_parts(summaries)
            logger.info(
                f"Summary round {round_number}: {len(blocks)} blocks, "
                f"{len(current)} -> {len(accumulated)} chars"
            )
            if len(accumulated) >= len(current):
                raise ProcessingStalledError(
                    f"summaries did not get shorter in round {round_number}",
                    cursor=len(current),
                    iteration=self._iteration,
                )
            current = accumulated

        self._next_iteration()
        return self._transform(current, self.system_prompt + "\n\n" + SUMMARY_MERGE_NOTE)

    def _summarize_round(self, text: str) -> Tuple[List[str], List[str]]:
        blocks: List[str] = []
        summaries: List[str] = []
        cursor = 0
        while cursor < len(text):
            self._next_iteration(cursor)
            piece = slice_by_characters(text[cursor:], self.chunk_size, policy="heading")
            self._check_progress(cursor, cursor + len(piece.chunk))
            cursor += len(piece.chunk)
            if not piece.chunk.strip():
                continue
            blocks.append(piece.chunk)
            summaries.append(self._transform(piece.chunk))
        return blocks, summaries
