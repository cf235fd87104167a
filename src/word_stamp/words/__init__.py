"""Word lists and placeholder expansion."""

from word_stamp.words.normalizer import (
    MalformedInputError,
    normalize_word_list,
    add_term,
    remove_term,
    merge_terms,
)
from word_stamp.words.placeholder import (
    DEFAULT_MARKER,
    InvalidMarkerError,
    contains_marker,
    expand,
    expand_all,
)

__all__ = [
    "MalformedInputError",
    "normalize_word_list",
    "add_term",
    "remove_term",
    "merge_terms",
    "DEFAULT_MARKER",
    "InvalidMarkerError",
    "contains_marker",
    "expand",
    "expand_all",
]
