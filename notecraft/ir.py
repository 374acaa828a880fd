from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Literal

BoundaryKind = Literal["paragraph", "sentence", "heading", "word", "window", "end", "none"]

@dataclass(frozen=True)
class SentenceEnd:
    position: int     # index of the terminator (last dot for "...")
    marker: str       # ".", "!", "?", "…" or "..."

@dataclass
class Slice:
    chunk: str
    remaining: str
    boundary: BoundaryKind = "none"

@dataclass
class EnumeratedChunk:
    enumerated: str
    positions: Dict[int, int] = field(default_factory=dict)  # sentence index -> marker offset in enumerated
    text: str = ""                                           # the chunk as given
    starts: Dict[int, int] = field(default_factory=dict)     # sentence index -> sentence offset in text

@dataclass(frozen=True)
class Topic:
    n: int
    title: str

@dataclass
class HeadingSplit:
    before_last_processed: str
    from_last_enumerated: str
    carry_offset: int  # plain-text length of the committed prefix, 0 when nothing is carried
