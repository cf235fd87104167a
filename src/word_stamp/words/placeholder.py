"""Placeholder expansion for templated text."""

from typing import Iterable

from word_stamp.formatting.ir import BatchItem

DEFAULT_MARKER = "!{word}"


class InvalidMarkerError(Exception):
    """The placeholder marker is unusable (empty)."""

    pass


def validate_marker(marker: str) -> str:
    """Return the marker, or raise if it is empty."""
    if not marker:
        raise InvalidMarkerError("Placeholder marker must not be empty")
    return marker


def contains_marker(template: str, marker: str = DEFAULT_MARKER) -> bool:
    """Check if the template contains the marker."""
    return validate_marker(marker) in template


def expand(template: str, value: str, marker: str = DEFAULT_MARKER) -> str:
    """Replace every occurrence of ``marker`` with ``value``, literally."""
    return template.replace(validate_marker(marker), value)


def expand_all(
    template: str,
    values: Iterable[str],
    marker: str = DEFAULT_MARKER,
) -> list[BatchItem]:
    """Expand the template once per value, keeping order."""
    validate_marker(marker)
    return [BatchItem(key=value, expanded_text=expand(template, value, marker)) for value in values]
