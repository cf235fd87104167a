"""Style rule documents.

A rule document is YAML, either a single rule::

    type: regex
    pattern: '\\b\\w+ing\\b'
    style:
      color: purple

or a list of such mappings, applied in document order.
"""

import re
from typing import Any, Iterable, Mapping, Union

import yaml

from word_stamp.formatting.ir import MatchKind, StyleDeclaration, StyleRule


class InvalidStyleRuleError(Exception):
    """A style rule or rule document is malformed."""

    pass


REQUIRED_FIELDS = ("type", "pattern", "style")

# Letters accepted in a rule's optional ``flags`` field
REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
}

RuleInput = Union[StyleRule, Mapping[str, Any]]


def parse_rule_document(document: str) -> list[StyleRule]:
    """Parse a YAML rule document into rules.

    Args:
        document: The textual rule document

    Returns:
        Rules in document order

    Raises:
        InvalidStyleRuleError: If the document is not valid YAML or does not
            describe one or more well-formed rules
    """
    try:
        loaded = yaml.safe_load(document)
    except yaml.YAMLError as e:
        raise InvalidStyleRuleError(f"Invalid style document: {e}") from e

    if loaded is None:
        raise InvalidStyleRuleError("Style document is empty")

    if isinstance(loaded, Mapping):
        return [rule_from_mapping(loaded)]
    if isinstance(loaded, list):
        if not loaded:
            raise InvalidStyleRuleError("Style document contains no rules")
        return [rule_from_mapping(item) for item in loaded]

    raise InvalidStyleRuleError(
        f"Style document must be a mapping or a list, got {type(loaded).__name__}"
    )


def rule_from_mapping(data: Any) -> StyleRule:
    """Build a StyleRule from one parsed rule mapping.

    Raises:
        InvalidStyleRuleError: If a field is missing, empty or unsupported
    """
    if not isinstance(data, Mapping):
        raise InvalidStyleRuleError(
            f"Style rule must be a mapping, got {type(data).__name__}"
        )

    missing = [
        name for name in REQUIRED_FIELDS if data.get(name) is None or data.get(name) == ""
    ]
    if missing:
        raise InvalidStyleRuleError(
            "Invalid style configuration: missing required fields "
            f"({', '.join(missing)})"
        )

    try:
        match_kind = MatchKind(str(data["type"]).strip().lower())
    except ValueError:
        raise InvalidStyleRuleError(
            f"Unsupported style type: {data['type']}"
        ) from None

    pattern = data["pattern"]
    if not isinstance(pattern, str):
        raise InvalidStyleRuleError(
            f"Style pattern must be a string, got {type(pattern).__name__}"
        )

    style = data["style"]
    if not isinstance(style, Mapping):
        raise InvalidStyleRuleError("Style declaration must be a mapping")
    try:
        declaration = StyleDeclaration.from_mapping(style)
    except KeyError as e:
        raise InvalidStyleRuleError(f"Unknown style property: {e.args[0]}") from e

    rule = StyleRule(
        match_kind=match_kind,
        pattern=pattern,
        declaration=declaration,
        flags=str(data.get("flags") or ""),
    )
    # Fail at parse time rather than on first use
    compile_rule(rule)
    return rule


def coerce_rules(rules: Iterable[RuleInput]) -> list[StyleRule]:
    """Accept StyleRule objects or raw mappings and return validated StyleRules.

    Raises:
        InvalidStyleRuleError: If any rule is malformed
    """
    coerced: list[StyleRule] = []
    for rule in rules:
        if isinstance(rule, StyleRule):
            compile_rule(rule)
            coerced.append(rule)
        else:
            coerced.append(rule_from_mapping(rule))
    return coerced


def compile_rule(rule: StyleRule) -> "re.Pattern[str]":
    """Compile a rule's pattern into a matcher.

    Raises:
        InvalidStyleRuleError: If the kind is unsupported, the flags are
            unknown, or the pattern does not compile
    """
    if rule.match_kind != MatchKind.REGEX:
        raise InvalidStyleRuleError(f"Unsupported style type: {rule.match_kind}")
    if rule.declaration is None:
        raise InvalidStyleRuleError("Style rule has no declaration")

    flags = 0
    for letter in rule.flags.lower():
        if letter not in REGEX_FLAGS:
            raise InvalidStyleRuleError(f"Unknown regex flag: {letter!r}")
        flags |= REGEX_FLAGS[letter]

    try:
        return re.compile(rule.pattern, flags)
    except re.error as e:
        raise InvalidStyleRuleError(
            f"Invalid pattern {rule.pattern!r}: {e}"
        ) from e
