"""Word list parsing and editing.

Word lists are plain text with terms separated by a delimiter (a comma by
default). A delimiter preceded by a backslash does not split; both stay
in the term::

    apple, café, salt\\, pepper
"""

import re
import unicodedata
from typing import Iterable, Union


class MalformedInputError(Exception):
    """Word list content cannot be read as text."""

    pass


def _decode(raw: Union[str, bytes]) -> str:
    """Return raw as text, rejecting binary content."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Word list is not valid UTF-8 text: {e}") from e
    else:
        text = raw

    if "\x00" in text:
        raise MalformedInputError("Word list contains binary data")
    return text


def strip_diacritics(term: str) -> str:
    """Remove combining marks: "café" becomes "cafe"."""
    decomposed = unicodedata.normalize("NFD", term)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def split_terms(text: str, delimiter: str = ",") -> list[str]:
    """Split on delimiters not preceded by a backslash.

    The backslash stays in the term: ``salt\\, pepper`` is one term.
    """
    if not delimiter:
        raise ValueError("Delimiter must not be empty")
    escaped = re.escape(delimiter)
    return re.split(rf"(?<!\\){escaped}", text)


def normalize_word_list(raw: Union[str, bytes], delimiter: str = ",") -> list[str]:
    """Turn raw delimited text into a clean list of terms.

    Terms are trimmed, empty pieces dropped, diacritics stripped, and
    duplicates removed keeping the first occurrence. The list is not sorted.

    Args:
        raw: Delimited text, or bytes holding UTF-8 text
        delimiter: Term separator

    Returns:
        Terms in first-seen order

    Raises:
        MalformedInputError: If raw cannot be decoded as text
    """
    text = _decode(raw)

    terms: list[str] = []
    seen: set[str] = set()
    for piece in split_terms(text, delimiter):
        term = strip_diacritics(piece.strip())
        if not term or term in seen:
            continue
        seen.add(term)
        terms.append(term)
    return terms


def add_term(terms: Iterable[str], term: str) -> list[str]:
    """Return a sorted list with ``term`` added. Blank terms are ignored."""
    current = list(terms)
    term = term.strip()
    if term:
        current.append(term)
    return sorted(current)


def remove_term(terms: Iterable[str], term: str) -> list[str]:
    """Return the list without any occurrence of ``term``."""
    return [t for t in terms if t != term]


def merge_terms(existing: Iterable[str], incoming: Iterable[str]) -> list[str]:
    """Union of two lists, deduplicated and sorted."""
    return sorted(set(existing) | {t.strip() for t in incoming if t.strip()})
