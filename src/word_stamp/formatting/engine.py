"""Style rule engine: tokenize text and resolve styles per token."""

import re
from typing import Iterable, Optional, Sequence

from word_stamp.formatting.ir import (
    MatchRange,
    RuleMatch,
    StyleDeclaration,
    StyledRun,
    StyleRule,
    Token,
    TokenKind,
)
from word_stamp.formatting.rules import RuleInput, coerce_rules, compile_rule


class StyleRuleEngine:
    """Turn free text plus a rule set into styled runs.

    Pipeline:
    1. Tokenize text into word and whitespace tokens
    2. Collect every rule's match ranges over the whole text
    3. Record which tokens each rule covers completely
    4. Merge the per-rule matches, later rules winning field by field
    """

    # A token is a maximal run of non-whitespace or of whitespace
    TOKEN_PATTERN = re.compile(r"\S+|\s+")

    def tokenize(self, text: str) -> list[Token]:
        """Split text into tokens that partition it exactly."""
        tokens: list[Token] = []
        for match in self.TOKEN_PATTERN.finditer(text):
            chunk = match.group(0)
            kind = TokenKind.SPACE if chunk.isspace() else TokenKind.WORD
            tokens.append(Token(chunk, match.start(), match.end(), kind))
        return tokens

    def find_match_ranges(self, text: str, rule: StyleRule) -> list[MatchRange]:
        """Find all non-overlapping matches of a rule, left to right.

        Raises:
            InvalidStyleRuleError: If the rule cannot be compiled
        """
        matcher = compile_rule(rule)
        return [MatchRange(m.start(), m.end()) for m in matcher.finditer(text)]

    def match_rule(
        self, text: str, tokens: Sequence[Token], rule: StyleRule
    ) -> RuleMatch:
        """Find the tokens a single rule styles.

        Partial overlaps do not count: a token is styled only when its
        whole span is inside one match range.
        """
        ranges = self.find_match_ranges(text, rule)
        covered = frozenset(
            index
            for index, token in enumerate(tokens)
            if any(r.contains(token) for r in ranges)
        )
        return RuleMatch(rule=rule, ranges=tuple(ranges), token_indexes=covered)

    def match_rules(
        self, text: str, tokens: Sequence[Token], rules: Iterable[StyleRule]
    ) -> list[RuleMatch]:
        """Match every rule independently, keeping rule order."""
        return [self.match_rule(text, tokens, rule) for rule in rules]

    def merge_matches(
        self, tokens: Sequence[Token], matches: Sequence[RuleMatch]
    ) -> list[StyledRun]:
        """Combine per-rule matches into one styled run per token."""
        runs: list[StyledRun] = []
        for index, token in enumerate(tokens):
            style: Optional[StyleDeclaration] = None
            for match in matches:
                if index in match.token_indexes:
                    base = style or StyleDeclaration()
                    style = base.merge(match.rule.declaration)
            runs.append(StyledRun(text=token.text, style=style))
        return runs

    def apply_style(self, text: str, rules: Iterable[RuleInput]) -> list[StyledRun]:
        """Resolve the style of every token of ``text``.

        Args:
            text: The text to style
            rules: StyleRule objects or raw rule mappings, in precedence order

        Returns:
            One StyledRun per token

        Raises:
            InvalidStyleRuleError: If any rule is malformed
        """
        style_rules = coerce_rules(rules)
        tokens = self.tokenize(text)
        matches = self.match_rules(text, tokens, style_rules)
        return self.merge_matches(tokens, matches)


_engine = StyleRuleEngine()


def tokenize(text: str) -> list[Token]:
    """Tokenize with the shared engine."""
    return _engine.tokenize(text)


def apply_style(text: str, rules: Iterable[RuleInput]) -> list[StyledRun]:
    """Apply rules with the shared engine."""
    return _engine.apply_style(text, rules)
