"""Tests for the rounding primitives."""

import pytest

from medbill.domain.services.rounding import (
    RoundingMethod,
    apply_policy,
    clamp,
    round_down,
    round_to_nearest,
    round_up,
    round_value,
)


class TestRoundValue:

    def test_epsilon_fixes_binary_half(self):
        """1.005 is stored as 1.00499..., but still rounds half-up to 1.01."""
        assert round_value(1.005) == 1.01

    def test_default_two_decimals(self):
        assert round_value(3.14159) == 3.14
        assert round_value(2.675001) == 2.68

    def test_custom_decimals(self):
        assert round_value(1.2344, 3) == 1.234
        assert round_value(7.6, 0) == 8

    def test_negative_value(self):
        assert round_value(-1.234) == -1.23


class TestRoundUpDown:

    def test_round_up(self):
        assert round_up(1.231) == 1.24

    def test_round_up_exact_value_unchanged(self):
        """1.1 * 100 is 110.00000000000001 in binary; must not become 1.11."""
        assert round_up(1.1) == 1.1

    def test_round_down(self):
        assert round_down(1.239) == 1.23

    def test_round_down_exact_value_unchanged(self):
        assert round_down(0.29) == 0.29


class TestRoundToNearest:

    def test_nearest_05(self):
        assert round_to_nearest(12.32, 0.05) == 12.3
        assert round_to_nearest(12.38, 0.05) == 12.4

    def test_nearest_half(self):
        assert round_to_nearest(12.6, 0.5) == 12.5
        assert round_to_nearest(12.8, 0.5) == 13

    def test_nearest_whole(self):
        assert round_to_nearest(1180.4) == 1180
        assert round_to_nearest(1180.5) == 1181

    def test_non_positive_increment_falls_back(self):
        assert round_to_nearest(12.345678, 0) == 12.35


class TestApplyPolicy:

    @pytest.mark.parametrize(
        "method,value,expected",
        [
            (RoundingMethod.ROUND, 12.346, 12.35),
            (RoundingMethod.CEIL, 12.341, 12.35),
            (RoundingMethod.FLOOR, 12.349, 12.34),
            (RoundingMethod.NEAREST_05, 12.32, 12.3),
            (RoundingMethod.NEAREST_50, 12.6, 12.5),
            (RoundingMethod.NEAREST_1, 12.6, 13),
        ],
    )
    def test_dispatch(self, method, value, expected):
        assert apply_policy(value, method) == expected

    def test_accepts_string_method(self):
        assert apply_policy(12.6, "nearest1") == 13

    def test_unknown_method_uses_standard_round(self):
        assert apply_policy(12.346, "banana") == 12.35

    def test_default_is_standard_round(self):
        assert apply_policy(99.999) == 100


class TestClamp:

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2
