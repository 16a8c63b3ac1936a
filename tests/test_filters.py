"""Unit tests for filter normalization and the early-return guard."""

from __future__ import annotations

import re

import pytest

from keysieve.core.filters import normalize_filters, should_short_circuit
from keysieve.core.types import FilterSet


def _patterns(filter_set: FilterSet):
    return [regex.pattern for regex in filter_set.regex_keys]


class TestNormalizeFilters:
    """Test suite for normalize_filters."""

    def test_single_string_filter(self):
        """Test a single exact filter becomes a one-element list."""
        fs = normalize_filters("one", None)
        assert fs.filter_keys == ("one",)
        assert fs.regex_keys == ()

    def test_single_string_regex(self):
        """Test a single string pattern is compiled."""
        fs = normalize_filters(None, "two")
        assert fs.filter_keys == ()
        assert _patterns(fs) == ["two"]
        assert isinstance(fs.regex_keys[0], re.Pattern)

    def test_sequences_and_compiled_patterns(self):
        """Test sequences are used as-is and compiled patterns keep flags."""
        four = re.compile("four", re.I)
        fs = normalize_filters(["one", "two"], ["three", four])
        assert fs.filter_keys == ("one", "two")
        assert _patterns(fs) == ["three", "four"]
        assert fs.regex_keys[1] is four

    def test_exact_keys_matched_by_pattern_are_dropped(self):
        """Test exact keys already matched by a pattern are removed."""
        fs = normalize_filters(["meal", "deal", "steal"], [r"^.ea.$"])
        assert fs.filter_keys == ("steal",)
        assert _patterns(fs) == [r"^.ea.$"]

    def test_pattern_search_is_unanchored(self):
        """Test patterns remove keys they match anywhere."""
        fs = normalize_filters(["first", "second", "third"], [re.compile("ir")])
        assert fs.filter_keys == ("second",)

    def test_invalid_regex_is_skipped(self):
        """Test strings that fail to compile are skipped."""
        fs = normalize_filters(None, ["(", "ok"])
        assert _patterns(fs) == ["ok"]

    def test_bytes_pattern_is_skipped(self):
        """Test bytes patterns cannot match string keys and are skipped."""
        fs = normalize_filters(None, [re.compile(b"key"), "key"])
        assert _patterns(fs) == ["key"]

    def test_duplicates_removed(self):
        """Test both lists are deduplicated keeping first occurrence."""
        fs = normalize_filters(["a", "b", "a"], ["x", "x"])
        assert fs.filter_keys == ("a", "b")
        assert _patterns(fs) == ["x"]

    def test_non_string_filters_dropped(self):
        """Test entries of the wrong type are ignored."""
        fs = normalize_filters([1, None, "x"], [1, {"prop": "prop"}, "y"])
        assert fs.filter_keys == ("x",)
        assert _patterns(fs) == ["y"]

    def test_absent_inputs(self):
        """Test absent inputs give an empty filter set."""
        fs = normalize_filters()
        assert fs == FilterSet()
        assert not fs


class TestShouldShortCircuit:
    """Test suite for should_short_circuit."""

    target = {"first": "first", "second": "second"}
    args = dict(filter_type="exclude", filters=["first"], regex_filters=[re.compile("fIrSt", re.I), "second"])

    @pytest.mark.parametrize("target", [{}, None, ["first"], "first"])
    def test_empty_or_missing_target(self, target):
        """Test empty, absent and non-mapping targets short-circuit."""
        assert should_short_circuit(target, **self.args) is True

    def test_valid_arguments(self):
        """Test a non-empty target with filters and filter type proceeds."""
        assert should_short_circuit(self.target, **self.args) is False

    def test_missing_filter_type(self):
        """Test a missing filter type does not short-circuit."""
        args = {**self.args, "filter_type": None}
        assert should_short_circuit(self.target, **args) is False

    def test_invalid_filter_type(self):
        """Test an unknown filter type short-circuits."""
        args = {**self.args, "filter_type": "invalid"}
        assert should_short_circuit(self.target, **args) is True

    @pytest.mark.parametrize("group", ["filters", "regex_filters"])
    def test_one_valid_group_is_enough(self, group):
        """Test one usable filter group is enough to proceed."""
        args = {**self.args, group: None}
        assert should_short_circuit(self.target, **args) is False

    def test_both_groups_missing(self):
        """Test short-circuit when no filters are given."""
        args = {**self.args, "filters": None, "regex_filters": None}
        assert should_short_circuit(self.target, **args) is True

    def test_both_groups_without_usable_entries(self):
        """Test short-circuit when no entry has a usable type."""
        args = {
            **self.args,
            "filters": [1, re.compile("regex"), {1, 2, 3}, None],
            "regex_filters": [1, {"prop": "prop"}, None],
        }
        assert should_short_circuit(self.target, **args) is True

    def test_empty_filter_lists(self):
        """Test empty filter lists short-circuit."""
        assert should_short_circuit(self.target, "include", [], []) is True
