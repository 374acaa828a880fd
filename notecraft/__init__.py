"""
notecraft: chunked LLM transforms for Markdown notes.

Punctuation restoration, topic splitting, summarization and cosmetic cleanup
of notes of any length, one bounded chunk at a time.
"""
__version__ = "0.1.0"
