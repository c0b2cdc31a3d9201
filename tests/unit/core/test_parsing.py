"""
Unit tests for core.parsing - numeric coercion at ingestion boundaries.
"""

import math

import pytest

from core.parsing import (
    clamp_trait,
    is_complete_trait_vector,
    is_finite_number,
    normalize_traits,
    parse_finite_number,
)

pytestmark = pytest.mark.unit


class TestParseFiniteNumber:
    """Tests for parse_finite_number."""

    @pytest.mark.parametrize("value,expected", [
        (42, 42),
        (-3, -3),
        (2.5, 2.5),
        (7.0, 7),
        ("42", 42),
        (" 12 ", 12),
        ("-1.5", -1.5),
    ])
    def test_parses_numbers_and_numeric_strings(self, value, expected):
        assert parse_finite_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, False, "", "   ", "abc", float("nan"), float("inf"),
        float("-inf"), "nan", "inf", [1], {"a": 1},
    ])
    def test_rejects_non_finite_and_non_numbers(self, value):
        assert parse_finite_number(value) == 0

    def test_integral_float_becomes_int(self):
        result = parse_finite_number(10.0)
        assert result == 10
        assert isinstance(result, int)

    def test_custom_default(self):
        assert parse_finite_number(None, default=-1) == -1
        assert parse_finite_number(math.nan, default=5) == 5


class TestIsFiniteNumber:
    """Tests for is_finite_number."""

    def test_accepts_ints_and_floats(self):
        assert is_finite_number(0)
        assert is_finite_number(-2.5)

    def test_rejects_bool_strings_and_non_finite(self):
        assert not is_finite_number(True)
        assert not is_finite_number("3")
        assert not is_finite_number(float("nan"))
        assert not is_finite_number(float("inf"))
        assert not is_finite_number(None)


class TestNormalizeTraits:
    """Tests for normalize_traits."""

    def test_pads_short_vectors_with_zero(self):
        assert normalize_traits([1, 2, 3]) == [1, 2, 3, 0, 0, 0]

    def test_truncates_long_vectors(self):
        assert normalize_traits([1, 2, 3, 4, 5, 6, 7, 8]) == [1, 2, 3, 4, 5, 6]

    def test_replaces_non_finite_entries(self):
        assert normalize_traits([float("nan"), "5", None, 4, float("inf"), 6]) == [0, 5, 0, 4, 0, 6]

    def test_non_sequence_input_gives_zero_vector(self):
        assert normalize_traits(None) == [0] * 6
        assert normalize_traits("10,10") == [0] * 6

    def test_custom_length(self):
        assert normalize_traits([1, 2, 3, 4, 5, 6], 4) == [1, 2, 3, 4]


class TestIsCompleteTraitVector:
    """Tests for is_complete_trait_vector."""

    def test_complete_vector(self):
        assert is_complete_trait_vector([1, 2, 3, 4, 5, 6])
        assert is_complete_trait_vector((1, 2, 3, 4, 5, 6))

    def test_incomplete_or_invalid_vector(self):
        assert not is_complete_trait_vector([1, 2, 3, 4, 5])
        assert not is_complete_trait_vector([1, 2, 3, 4, 5, float("nan")])
        assert not is_complete_trait_vector([1, 2, 3, 4, 5, "6"])
        assert not is_complete_trait_vector(None)


class TestClampTrait:
    """Tests for clamp_trait."""

    @pytest.mark.parametrize("value,expected", [
        (-5, 0), (0, 0), (50, 50), (100, 100), (112, 100),
    ])
    def test_clamps_to_trait_range(self, value, expected):
        assert clamp_trait(value) == expected
