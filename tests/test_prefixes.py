"""Tests for search prefix resolution."""

import pytest

from extsearch.prefixes import (
    DEFAULT_PREFIX,
    PrefixTable,
    build_prefix_table,
    parse_custom_prefixes,
)


class TestParseCustomPrefixes:
    """Tests for splitting the custom prefixes setting."""

    def test_space_separated(self):
        """Prefixes are split on spaces."""
        assert parse_custom_prefixes("# $") == ("#", "$")

    def test_empty_entries_dropped(self):
        """Double spaces and an empty setting add nothing."""
        assert parse_custom_prefixes("  #  ") == ("#",)
        assert parse_custom_prefixes("") == ()


class TestPrefixTable:
    """Tests for PrefixTable."""

    def test_default_prefix_first(self):
        """Default prefix precedes custom ones."""
        table = PrefixTable(("#", "$"))
        assert table.keywords == [DEFAULT_PREFIX, "#", "$"]

    def test_resolve_default(self):
        """Default prefix is recognized case-insensitively."""
        table = PrefixTable()
        prefix = table.resolve("EQ//blur")
        assert prefix is not None
        assert prefix.text == DEFAULT_PREFIX
        assert prefix.strip("EQ//blur") == "blur"

    def test_resolve_custom(self):
        """Custom prefix is recognized and stripped."""
        table = build_prefix_table("# $")
        prefix = table.resolve("#term")
        assert prefix is not None
        assert prefix.text == "#"
        assert prefix.strip("#term") == "term"

    def test_first_match_wins(self):
        """Earlier entries win over later overlapping ones."""
        table = PrefixTable(("e", "eq"))
        assert table.resolve("eqx").text == "e"

    def test_no_match(self):
        """Plain terms have no prefix."""
        table = build_prefix_table("# $")
        assert table.resolve("other") is None

    def test_prefix_must_lead(self):
        """Prefix inside the term is not a prefix."""
        assert PrefixTable().resolve("blureq//") is None

    def test_regex_chars_are_literal(self):
        """Special characters match only themselves."""
        table = PrefixTable((".", "(", "*"))
        assert table.resolve("x") is None
        assert table.resolve("(vitals").text == "("
        assert table.resolve("*").text == "*"

    def test_empty_setting_matches_nothing_extra(self):
        """An empty custom setting does not make every query prefixed."""
        table = build_prefix_table("")
        assert table.keywords == [DEFAULT_PREFIX]
        assert table.resolve("vitals") is None

    def test_strip_only_leading_prefix(self):
        """Only one leading occurrence is removed."""
        prefix = PrefixTable().resolve("eq//eq//x")
        assert prefix.strip("eq//eq//x") == "eq//x"

    def test_cached_table_is_immutable(self):
        """Shared cached tables cannot be extended by callers."""
        table = build_prefix_table("#")
        assert isinstance(table.prefixes, tuple)
        with pytest.raises(AttributeError):
            table.prefixes.append(table.prefixes[0])

    def test_table_cached_per_setting(self):
        """Same setting value reuses the compiled table."""
        assert build_prefix_table("# $") is build_prefix_table("# $")
        assert build_prefix_table("# $") is not build_prefix_table("#")
