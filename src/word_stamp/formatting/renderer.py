"""Render layer: rule documents to styled runs, with graceful fallback."""

import logging
from typing import Iterable, Optional, Union

from word_stamp.config import get_settings
from word_stamp.formatting.engine import StyleRuleEngine
from word_stamp.formatting.ir import StyleDeclaration, StyledRun, StyleRule
from word_stamp.formatting.rules import (
    InvalidStyleRuleError,
    RuleInput,
    parse_rule_document,
)

logger = logging.getLogger(__name__)

RuleSource = Union[str, Iterable[RuleInput], None]


def default_base_style() -> StyleDeclaration:
    """Build the base style from settings."""
    settings = get_settings()
    return StyleDeclaration(
        color=settings.default_color,
        font_family=settings.default_font_family,
        font_size=settings.default_font_size,
        font_weight=settings.default_font_weight,
    )


class StyledRenderer:
    """Produce the run sequence shown on the surface.

    Each call is a pure function of the text, the rules and the base
    style; the renderer itself holds no per-render state.
    """

    def __init__(
        self,
        base_style: Optional[StyleDeclaration] = None,
        engine: Optional[StyleRuleEngine] = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            base_style: Style used for unstyled runs and as the merge base
            engine: Rule engine (a fresh one by default)
        """
        self.base_style = base_style or default_base_style()
        self.engine = engine or StyleRuleEngine()

    def load_rules(self, source: RuleSource) -> Optional[list[StyleRule]]:
        """Parse a rule source.

        Returns None when there are no rules.

        Raises:
            InvalidStyleRuleError: If the source is malformed
        """
        if source is None:
            return None
        if isinstance(source, str):
            if not source.strip():
                return None
            return parse_rule_document(source)
        return list(source)

    def render(self, text: str, rules: RuleSource = None) -> list[StyledRun]:
        """Render text into styled runs.

        Without rules the text is a single unstyled run. A malformed rule
        source also yields a single unstyled run.
        """
        try:
            style_rules = self.load_rules(rules)
            if style_rules is None:
                return [StyledRun(text=text)]
            return self.engine.apply_style(text, style_rules)
        except InvalidStyleRuleError as e:
            logger.warning("Falling back to unstyled text: %s", e)
            return [StyledRun(text=text)]

    def resolve(self, run: StyledRun) -> StyleDeclaration:
        """Effective style of a run: the base style overridden by the run's."""
        return self.base_style.merge(run.style)

    def with_overrides(self, overrides: StyleDeclaration) -> "StyledRenderer":
        """Return a renderer whose base style is overridden field by field."""
        return StyledRenderer(
            base_style=self.base_style.merge(overrides),
            engine=self.engine,
        )
