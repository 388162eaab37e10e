# Utils module for the question aggregation engine
from .text_normalization import (
    normalize_question,
    normalize_whitespace,
    strip_terminal_punctuation,
    tokenize,
    word_set,
)
from .timing import Timer, timed

__all__ = [
    'normalize_question',
    'normalize_whitespace',
    'strip_terminal_punctuation',
    'tokenize',
    'word_set',
    'Timer',
    'timed',
]
