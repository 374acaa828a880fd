"""
Sentence Enumerator

Inserts "k" markers before each sentence of a chunk so a transform can
refer to "sentence k" without the engine tracking character positions.
Markers are purely additive: strip_enumeration(enumerate_sentences(x)) == x,
even when x already contains quoted numbers.
"""
from __future__ import annotations
from typing import Dict, List

from notecraft.ir import EnumeratedChunk


def marker(n: int) -> str:
    return f'"{n}"'


def _first_non_whitespace(text: str, i: int) -> int:
    while i < len(text) and text[i].isspace():
        i += 1
    return i


def _sentence_starts(chunk: str) -> List[int]:
    starts = [_first_non_whitespace(chunk, 0)]
    i = 0
    while i < len(chunk):
        if chunk.startswith("...", i):
            nxt = _first_non_whitespace(chunk, i + 3)
            if nxt < len(chunk):
                starts.append(nxt)
            i += 3
            continue
        if chunk[i] in ".!?…":
            nxt = _first_non_whitespace(chunk, i + 1)
            if nxt < len(chunk):
                starts.append(nxt)
        i += 1
    return sorted(set(s for s in starts if s < len(chunk)))


def enumerate_sentences(chunk: str) -> EnumeratedChunk:
    """
    Insert a marker immediately before every sentence start.

    A sentence starts at the first non-whitespace character of the chunk and
    at the first non-whitespace character after each terminator. An ellipsis
    run is skipped as a whole, so "wait... what" yields two sentences.

    Returns:
        EnumeratedChunk whose positions map sentence index to the offset of
        its marker inside the enumerated text, and whose starts map it to
        the offset of the sentence inside the original chunk.
    """
    if not chunk:
        return EnumeratedChunk(enumerated="", text="")

    positions: Dict[int, int] = {}
    starts: Dict[int, int] = {}
    parts: List[str] = []
    length = 0
    cursor = 0
    for index, start in enumerate(_sentence_starts(chunk), start=1):
        before = chunk[cursor:start]
        parts.append(before)
        length += len(before)
        token = marker(index)
        positions[index] = length
        starts[index] = start
        parts.append(token)
        length += len(token)
        cursor = start
    parts.append(chunk[cursor:])
    return EnumeratedChunk(enumerated="".join(parts), positions=positions, text=chunk, starts=starts)


def strip_enumeration(chunk: EnumeratedChunk) -> str:
    """
    Remove the markers recorded in chunk.positions and nothing else.

    Quoted numbers that were already part of the text are kept.

    Raises:
        ValueError: if a recorded marker is not where positions says it is
    """
    parts: List[str] = []
    cursor = 0
    for index in sorted(chunk.positions):
        offset = chunk.positions[index]
        token = marker(index)
        if not chunk.enumerated.startswith(token, offset):
            raise ValueError(f"Marker {token} not found at offset {offset}")
        parts.append(chunk.enumerated[cursor:offset])
        cursor = offset + len(token)
    parts.append(chunk.enumerated[cursor:])
    return "".join(parts)
