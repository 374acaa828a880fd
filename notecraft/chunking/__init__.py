"""
Chunking engine

Boundary scanning, sentence enumeration, budgeted slicing and topic/heading
merging. Everything here is pure text manipulation with no I/O.
"""
from notecraft.chunking.boundaries import (
    find_paragraph_boundary,
    find_sentence_end,
    find_previous_sentence_end,
    find_front_matter_end,
    split_front_matter,
    strip_punctuation,
)
from notecraft.chunking.enumerator import enumerate_sentences, strip_enumeration
from notecraft.chunking.chunker import (
    slice_text,
    slice_by_characters,
    slice_by_words,
    BudgetMode,
    BoundaryPolicy,
)
from notecraft.chunking.topics import (
    parse_topics,
    insert_headings_except_last,
    insert_all_headings,
)

__all__ = [
    "find_paragraph_boundary",
    "find_sentence_end",
    "find_previous_sentence_end",
    "find_front_matter_end",
    "split_front_matter",
    "strip_punctuation",
    "enumerate_sentences",
    "strip_enumeration",
    "slice_text",
    "slice_by_characters",
    "slice_by_words",
    "BudgetMode",
    "BoundaryPolicy",
    "parse_topics",
    "insert_headings_except_last",
    "insert_all_headings",
]
