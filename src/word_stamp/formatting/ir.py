"""Intermediate Representation for styled text.

This module defines the value objects that flow between the style rule
engine, the renderer and the export pipeline. Every object here is
immutable and built fresh for each render cycle.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping, Optional


# =============================================================================
# Style declarations
# =============================================================================

@dataclass(frozen=True)
class StyleDeclaration:
    """A typed record of visual properties.

    Values are opaque: they are passed through to the capture backend
    without any validation of their meaning. ``None`` means "not set".

    Attributes:
        color: Text color (e.g. "purple", "#ff0000")
        background_color: Background color behind the text
        font_family: Font family name
        font_size: Font size in pixels
        font_weight: Font weight (e.g. 400, "bold")
        font_style: Font style (e.g. "italic")
        text_decoration: Text decoration (e.g. "underline")
    """

    color: Optional[Any] = None
    background_color: Optional[Any] = None
    font_family: Optional[Any] = None
    font_size: Optional[Any] = None
    font_weight: Optional[Any] = None
    font_style: Optional[Any] = None
    text_decoration: Optional[Any] = None

    @classmethod
    def property_names(cls) -> tuple[str, ...]:
        """Return the field names of the record."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "StyleDeclaration":
        """Build a declaration from a mapping of property names.

        Accepts camelCase (``fontWeight``), kebab-case (``font-weight``)
        and snake_case (``font_weight``) spellings.

        Raises:
            KeyError: If a property name is not part of the record
        """
        known = set(cls.property_names())
        values: dict[str, Any] = {}
        for raw_name, value in mapping.items():
            name = normalize_property_name(str(raw_name))
            if name not in known:
                raise KeyError(raw_name)
            values[name] = value
        return cls(**values)

    def merge(self, other: Optional["StyleDeclaration"]) -> "StyleDeclaration":
        """Return a new declaration with fields set in ``other`` winning."""
        if other is None:
            return self
        overrides = {
            name: getattr(other, name)
            for name in self.property_names()
            if getattr(other, name) is not None
        }
        return replace(self, **overrides)

    def as_dict(self) -> dict[str, Any]:
        """Return only the properties that are set."""
        return {
            name: getattr(self, name)
            for name in self.property_names()
            if getattr(self, name) is not None
        }

    @property
    def is_empty(self) -> bool:
        """Check if no property is set."""
        return not self.as_dict()


def normalize_property_name(name: str) -> str:
    """Convert a camelCase or kebab-case property name to snake_case."""
    out: list[str] = []
    for ch in name.strip().replace("-", "_"):
        if ch.isupper():
            if out and out[-1] != "_":
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


# =============================================================================
# Rules, tokens and runs
# =============================================================================

class MatchKind(str, Enum):
    """How a style rule selects text.

    Only regular expressions exist today; the enum is the extension point
    for literal or glob matching.
    """

    REGEX = "regex"


class TokenKind(str, Enum):
    """Kind of a text token."""

    WORD = "word"
    SPACE = "space"


@dataclass(frozen=True)
class StyleRule:
    """A declarative style rule.

    Attributes:
        match_kind: How ``pattern`` is interpreted
        pattern: The pattern source
        declaration: Style applied to tokens covered by a match
        flags: Optional regex flag letters (i, m, s, x, a)
    """

    match_kind: MatchKind
    pattern: str
    declaration: StyleDeclaration
    flags: str = ""


@dataclass(frozen=True)
class Token:
    """A maximal run of word or whitespace characters.

    Attributes:
        text: The token text
        start: Offset of the first character
        end: Offset one past the last character
        kind: WORD or SPACE
    """

    text: str
    start: int
    end: int
    kind: TokenKind

    @property
    def is_space(self) -> bool:
        return self.kind is TokenKind.SPACE


@dataclass(frozen=True)
class MatchRange:
    """Half-open character interval matched by a rule."""

    start: int
    end: int

    def contains(self, token: Token) -> bool:
        """Check if the whole token span lies inside this range."""
        return token.start >= self.start and token.end <= self.end


@dataclass(frozen=True)
class RuleMatch:
    """Tokens styled by a single rule.

    Attributes:
        rule: The rule that produced the match
        ranges: All match ranges of the rule over the text
        token_indexes: Indexes of tokens fully covered by a range
    """

    rule: StyleRule
    ranges: tuple[MatchRange, ...] = ()
    token_indexes: frozenset[int] = frozenset()


@dataclass(frozen=True)
class StyledRun:
    """A token's text plus the style it resolves to.

    ``style`` is None when no rule applies; the renderer then falls back to
    the caller's base style.
    """

    text: str
    style: Optional[StyleDeclaration] = None

    @property
    def styled(self) -> bool:
        return self.style is not None

    def __str__(self) -> str:
        return self.text


def runs_plain_text(runs: "list[StyledRun] | tuple[StyledRun, ...]") -> str:
    """Concatenate run texts."""
    return "".join(run.text for run in runs)


# =============================================================================
# Export results
# =============================================================================

@dataclass(frozen=True)
class BatchItem:
    """One term of a word list paired with its expanded text.

    ``key`` doubles as the archive entry name.
    """

    key: str
    expanded_text: str


@dataclass(frozen=True)
class ArchiveEntry:
    """A named image inside an archive."""

    name: str
    image_bytes: bytes


@dataclass(frozen=True)
class ItemFailure:
    """A batch item whose capture failed."""

    key: str
    message: str


@dataclass(frozen=True)
class SingleExport:
    """Result of a single-image export."""

    image_bytes: bytes
    filename: str = "content.png"
    kind: str = field(default="single", init=False)

    @property
    def data(self) -> bytes:
        return self.image_bytes


@dataclass(frozen=True)
class ArchiveExport:
    """Result of a batch export.

    Attributes:
        entries: Successfully captured images, in term-list order
        data: Serialized archive, None when nothing was captured
        failures: Items whose capture failed
        cancelled: Whether the batch stopped early on request
        filename: Suggested archive filename
    """

    entries: tuple[ArchiveEntry, ...] = ()
    data: Optional[bytes] = None
    failures: tuple[ItemFailure, ...] = ()
    cancelled: bool = False
    filename: str = "content_images.zip"
    kind: str = field(default="archive", init=False)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]


ExportResult = SingleExport | ArchiveExport
