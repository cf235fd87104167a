"""Formatting utilities for tokenizing and styling text."""

from word_stamp.formatting.ir import (
    MatchKind,
    TokenKind,
    StyleDeclaration,
    StyleRule,
    Token,
    MatchRange,
    RuleMatch,
    StyledRun,
)
from word_stamp.formatting.rules import (
    InvalidStyleRuleError,
    parse_rule_document,
)
from word_stamp.formatting.engine import StyleRuleEngine, apply_style, tokenize
from word_stamp.formatting.renderer import StyledRenderer

__all__ = [
    "MatchKind",
    "TokenKind",
    "StyleDeclaration",
    "StyleRule",
    "Token",
    "MatchRange",
    "RuleMatch",
    "StyledRun",
    "InvalidStyleRuleError",
    "parse_rule_document",
    "StyleRuleEngine",
    "apply_style",
    "tokenize",
    "StyledRenderer",
]
