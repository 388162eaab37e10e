# questionbank/utils/text_normalization.py
"""
Text normalization utilities for consistent question comparison.

Normalized forms are only used for scoring; stored questions always keep
their original text.
"""
import re
import unicodedata
from typing import List, Set

# Trailing punctuation stripped before comparison ("What is X??" == "what is x")
_TERMINAL_PUNCTUATION = '?!.,;:…？！。'

_WORD_PATTERN = re.compile(r'\w+', re.UNICODE)


def normalize_whitespace(text: str) -> str:
    """
    Normalize all whitespace to single spaces.

    Args:
        text: Input text

    Returns:
        Text with normalized whitespace
    """
    if not text:
        return ""
    return " ".join(text.split())


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters to their canonical form.

    Args:
        text: Input text

    Returns:
        Unicode-normalized text
    """
    if not text:
        return ""
    # NFKC: compatibility decomposition followed by canonical composition
    return unicodedata.normalize('NFKC', text)


def strip_terminal_punctuation(text: str) -> str:
    """Remove trailing punctuation (and whitespace left behind by it)."""
    if not text:
        return ""
    return text.rstrip().rstrip(_TERMINAL_PUNCTUATION).rstrip()


def normalize_question(text: str) -> str:
    """
    Normalize a question for similarity comparison.

    Case-folds, collapses whitespace and strips terminal punctuation.

    Args:
        text: Raw question text

    Returns:
        Comparison form of the question
    """
    if not text:
        return ""

    text = normalize_unicode(text)
    text = text.casefold()
    text = normalize_whitespace(text)
    return strip_terminal_punctuation(text)


def tokenize(text: str) -> List[str]:
    """Split normalized text into word tokens (punctuation dropped)."""
    if not text:
        return []
    return _WORD_PATTERN.findall(text)


def word_set(text: str) -> Set[str]:
    """Distinct word tokens of a text."""
    return set(tokenize(text))
