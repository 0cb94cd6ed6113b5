"""Tests for simulation/units.py - quantity parsing and number formatting."""

import math

import pytest
from simulation.units import format_si, format_spice_number, parse_quantity


class TestParseQuantity:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1k", 1e3),
            ("1K", 1e3),
            ("15kΩ", 15e3),
            ("4.7k ohm", 4.7e3),
            ("1meg", 1e6),
            ("1MEG", 1e6),
            ("10Meg", 1e7),
            ("1M", 1e6),
            ("1m", 1e-3),
            ("1mA", 1e-3),
            ("100uF", 100e-6),
            ("1µF", 1e-6),
            ("1μF", 1e-6),
            ("22nF", 22e-9),
            ("10pF", 10e-12),
            ("5V", 5.0),
            ("3.3", 3.3),
            ("2.2e3", 2200.0),
            ("-12V", -12.0),
            ("1 k", 1e3),
            ("10MHz", 1e7),
        ],
    )
    def test_known_forms(self, text, expected):
        assert parse_quantity(text) == pytest.approx(expected)

    def test_lowercase_f_is_femto(self):
        assert parse_quantity("1f") == pytest.approx(1e-15)

    def test_uppercase_f_is_farad(self):
        assert parse_quantity("1F") == pytest.approx(1.0)

    def test_numbers_pass_through(self):
        assert parse_quantity(470) == 470.0
        assert parse_quantity(0.5) == 0.5

    @pytest.mark.parametrize("bad", ["", "   ", "abc", "1x", "k", None, True, float("nan"), "inf"])
    def test_unreadable_returns_fallback(self, bad):
        assert parse_quantity(bad, 42.0) == 42.0

    def test_default_fallback_is_zero(self):
        assert parse_quantity("garbage") == 0.0

    def test_none_fallback_allowed(self):
        assert parse_quantity("??", None) is None

    def test_idempotent_on_spice_format(self):
        for text in ("1k", "47uF", "1meg", "0.25"):
            value = parse_quantity(text)
            assert parse_quantity(format_spice_number(value)) == pytest.approx(value)


class TestFormatSpiceNumber:
    def test_integral_value(self):
        assert format_spice_number(1000.0) == "1000"

    def test_small_value(self):
        assert format_spice_number(1e-6) == "1e-06"

    def test_non_finite(self):
        assert format_spice_number(math.inf) == "0"


class TestFormatSi:
    def test_kilo(self):
        assert format_si(15000) == "15k"

    def test_milliamps(self):
        assert format_si(0.005, "A") == "5mA"

    def test_micro(self):
        assert format_si(4.7e-6) == "4.7u"

    def test_zero(self):
        assert format_si(0, "V") == "0V"

    def test_negative(self):
        assert format_si(-2500, "V") == "-2.5kV"
