"""Tests for the styled renderer."""

import logging

import pytest

from word_stamp.formatting.ir import StyleDeclaration, StyledRun
from word_stamp.formatting.renderer import StyledRenderer, default_base_style


class TestStyledRenderer:
    """Tests for the StyledRenderer class."""

    @pytest.fixture
    def renderer(self) -> StyledRenderer:
        return StyledRenderer()

    def test_default_base_style(self):
        """Test that the base style comes from settings."""
        base = default_base_style()

        assert base == StyleDeclaration(
            color="#000000",
            font_family="Arial",
            font_size=20,
            font_weight=400,
        )

    def test_no_rules_single_run(self, renderer: StyledRenderer):
        """Test that text without rules renders as one unstyled run."""
        assert renderer.render("Hello there") == [StyledRun(text="Hello there")]

    def test_blank_document_single_run(self, renderer: StyledRenderer):
        """Test that a blank rule document means no rules."""
        assert renderer.render("Hello there", "  \n") == [StyledRun(text="Hello there")]

    def test_rule_document_applied(self, renderer: StyledRenderer, ing_rule_document: str):
        """Test rendering with a rule document."""
        runs = renderer.render("I was running", ing_rule_document)

        assert [run.text for run in runs] == ["I", " ", "was", " ", "running"]
        assert runs[-1].style.color == "purple"

    def test_missing_pattern_falls_back(self, renderer: StyledRenderer, caplog):
        """Test that a malformed document yields the text as one plain run."""
        document = "type: regex\nstyle:\n  color: purple\n"

        with caplog.at_level(logging.WARNING):
            runs = renderer.render("Any text here", document)

        assert runs == [StyledRun(text="Any text here")]
        assert "unstyled" in caplog.text

    def test_malformed_rule_objects_fall_back(self, renderer: StyledRenderer):
        """Test fallback for malformed rule mappings."""
        runs = renderer.render("Any text", [{"type": "regex", "pattern": "("}])

        assert runs == [StyledRun(text="Any text")]

    def test_resolve_merges_over_base(self, renderer: StyledRenderer):
        """Test that a run's style overrides the base field by field."""
        run = StyledRun(text="x", style=StyleDeclaration(color="purple"))

        resolved = renderer.resolve(run)

        assert resolved.color == "purple"
        assert resolved.font_family == "Arial"

    def test_resolve_unstyled_run(self, renderer: StyledRenderer):
        """Test that unstyled runs resolve to the base style."""
        assert renderer.resolve(StyledRun(text="x")) == renderer.base_style

    def test_with_overrides(self, renderer: StyledRenderer):
        """Test overriding the base style without touching the original."""
        custom = renderer.with_overrides(StyleDeclaration(color="navy", font_weight=700))

        assert custom.base_style.color == "navy"
        assert custom.base_style.font_weight == 700
        assert custom.base_style.font_family == "Arial"
        assert renderer.base_style.color == "#000000"
