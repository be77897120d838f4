"""Tests for cents and whole-unit rounding."""

import pytest

from payrollcalc.sdk.money import round_cents, round_whole


@pytest.mark.parametrize("amount,expected", [
    (2884.6153846, 2884.62),
    (0.125, 0.13),
    (2237.5 * 0.062, 138.72),
    (1982.5 * 0.062, 122.92),
    (0, 0),
])
def test_round_cents(amount, expected):
    assert round_cents(amount) == expected


@pytest.mark.parametrize("amount,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2)])
def test_round_whole_halves_up(amount, expected):
    assert round_whole(amount) == expected
