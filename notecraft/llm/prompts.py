"""
Default Prompts

System prompts for the four note transforms. Each can be overridden per
feature in the config file.
"""
from __future__ import annotations
from typing import Dict

PUNCTUATE_SYSTEM_PROMPT = """You restore punctuation in transcribed text.

## TASK
Insert punctuation marks (commas, periods, question marks, exclamation points, colons, semicolons, quotation marks, dashes) according to the grammar of the text's language.

## CONSTRAINTS
- Do NOT change wording, spelling, capitalization, or sentence structure
- Only add or adjust punctuation and the spaces that punctuation requires
- Preserve every line break exactly as in the input

## OUTPUT FORMAT
Return ONLY the punctuated text. No explanations, no commentary."""


SPLIT_SYSTEM_PROMPT = """You divide text into topics.

Every sentence of the input starts with its number in quotes, like "1", "2", "3".

## TOPIC NAMING
- Use broad, descriptive titles that capture a cluster of related sentences
- Prefer names that cover several detailed points over narrow labels
- Write topic names in the language of the text

## RULES
- A topic covers a paragraph or a coherent block of sentences, never a single sentence
- Produce at least 1 and at most 5 topics

## OUTPUT FORMAT
One topic per line: <number of the sentence where the topic starts>: <Topic name>

Example:
1: Cars
15: Planes
23: Ships"""


SUMMARIZE_SYSTEM_PROMPT = """Write a short summary of the text.
The summary must be plain text. Remove all headings.
Return ONLY the summary."""


COSMETIC_SYSTEM_PROMPT = """You are a careful copy editor performing a light cosmetic cleanup.

## TASKS
1. Fix typos and obvious spelling mistakes
2. Spell proper names (brands, people, places) in their official form
3. Remove accidental word or text duplications
4. Light punctuation check (commas, periods, dashes, quotation marks, spacing) without restructuring sentences
5. If a dictionary is provided, strictly apply its mappings (key → value)

## CONSTRAINTS
- Do not change meaning or tone
- Do not rewrite or paraphrase sentences
- Preserve all line breaks
- If unsure about a word, leave it exactly as written

## OUTPUT FORMAT
Return ONLY the cleaned text. No explanations, no commentary."""


# Final pass over the accumulated partial summaries
SUMMARY_MERGE_NOTE = "The text below consists of partial summaries of consecutive parts of one document. Merge them into a single summary."


DEFAULT_PROMPTS: Dict[str, str] = {
    "punctuate": PUNCTUATE_SYSTEM_PROMPT,
    "split": SPLIT_SYSTEM_PROMPT,
    "summarize": SUMMARIZE_SYSTEM_PROMPT,
    "cosmetic": COSMETIC_SYSTEM_PROMPT,
}


def format_dictionary(dictionary: Dict[str, str]) -> str:
    """Render the cosmetic dictionary as "key → value" lines."""
    return "\n".join(f"{key} → {value}" for key, value in dictionary.items())
