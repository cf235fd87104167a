"""Tests for word list normalization."""

import pytest

from word_stamp.words.normalizer import (
    MalformedInputError,
    add_term,
    merge_terms,
    normalize_word_list,
    remove_term,
    split_terms,
    strip_diacritics,
)


class TestNormalizeWordList:
    """Tests for normalize_word_list."""

    def test_splits_and_trims(self):
        """Test splitting on commas and trimming whitespace."""
        assert normalize_word_list("apple, banana ,cherry") == [
            "apple",
            "banana",
            "cherry",
        ]

    def test_escaped_comma_is_part_of_term(self):
        """Test that a backslash-escaped comma does not split."""
        raw = "salt\\, pepper, sugar"

        assert normalize_word_list(raw) == ["salt\\, pepper", "sugar"]

    def test_escape_backslash_is_kept(self):
        """Test that the escaping backslash stays in the term."""
        assert split_terms("a\\,b,c") == ["a\\,b", "c"]

    def test_strips_diacritics(self):
        """Test that accents are removed."""
        assert normalize_word_list("café, naïve, Ångström") == [
            "cafe",
            "naive",
            "Angstrom",
        ]

    def test_deduplicates_keeping_first_seen_order(self):
        """Test duplicates are removed and order is kept (no sorting)."""
        assert normalize_word_list("b, a, b, café, cafe") == ["b", "a", "cafe"]

    def test_empty_input(self):
        """Test that empty input yields an empty list."""
        assert normalize_word_list("") == []
        assert normalize_word_list(" ,  , \n") == []

    def test_keeps_other_scripts_composed(self):
        """Test that non-Latin text is not left decomposed."""
        assert normalize_word_list("한국어, 日本") == ["한국어", "日本"]

    def test_accepts_utf8_bytes(self):
        """Test decoding UTF-8 bytes, including a BOM."""
        raw = "\ufeffZoë, Ann".encode("utf-8")

        assert normalize_word_list(raw) == ["Zoe", "Ann"]

    def test_binary_bytes_rejected(self):
        """Test that undecodable bytes raise MalformedInputError."""
        with pytest.raises(MalformedInputError):
            normalize_word_list(b"\x89PNG\r\n\x1a\n\xff\xfe")

    def test_nul_characters_rejected(self):
        """Test that text holding NUL characters is treated as binary."""
        with pytest.raises(MalformedInputError, match="binary"):
            normalize_word_list("a,\x00b")

    def test_custom_delimiter(self):
        """Test a different delimiter with escaping."""
        assert normalize_word_list("a; b\\;c ;d", delimiter=";") == ["a", "b\\;c", "d"]

    def test_newlines_are_not_delimiters(self):
        """Test that only the delimiter separates terms."""
        assert normalize_word_list("ice cream,\nhot dog") == ["ice cream", "hot dog"]

    def test_empty_delimiter_rejected(self):
        """Test that an empty delimiter is a configuration error."""
        with pytest.raises(ValueError):
            normalize_word_list("a,b", delimiter="")


class TestStripDiacritics:
    """Tests for strip_diacritics."""

    def test_plain_text_unchanged(self):
        assert strip_diacritics("plain") == "plain"

    def test_combining_marks_removed(self):
        assert strip_diacritics("élève") == "eleve"


class TestTermEditing:
    """Tests for the word list editing helpers."""

    def test_add_term_sorts(self):
        """Test that adding a term trims it and sorts the list."""
        assert add_term(["pear", "apple"], "  fig ") == ["apple", "fig", "pear"]

    def test_add_blank_term_ignored(self):
        """Test that blank input does not add anything."""
        assert add_term(["b", "a"], "   ") == ["a", "b"]

    def test_remove_term(self):
        """Test removing every occurrence of a term."""
        assert remove_term(["a", "b", "a"], "a") == ["b"]

    def test_remove_missing_term(self):
        """Test removing a term that is not present."""
        assert remove_term(["a"], "z") == ["a"]

    def test_merge_terms(self):
        """Test merging a dropped list into an existing one."""
        merged = merge_terms(["pear", "apple"], ["apple", " kiwi ", ""])

        assert merged == ["apple", "kiwi", "pear"]

    def test_editors_do_not_mutate_input(self):
        """Test that the caller's list is left untouched."""
        terms = ["b", "a"]
        add_term(terms, "c")
        remove_term(terms, "a")
        merge_terms(terms, ["d"])

        assert terms == ["b", "a"]
