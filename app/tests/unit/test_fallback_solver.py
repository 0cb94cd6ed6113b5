"""Tests for simulation/fallback_solver.py - the closed-form V/R case."""

import pytest
from simulation.fallback_solver import FALLBACK_TIMES, solve_fallback
from simulation.netlist_generator import NetlistGenerator
from simulation.result_labeler import label_series
from tests.conftest import make_battery, make_component, make_resistor


def _deck(components):
    return NetlistGenerator(components).generate().text


class TestSolveFallback:
    def test_five_volts_across_one_k(self, simple_resistor_circuit):
        result = solve_fallback(_deck(simple_resistor_circuit))
        assert result.success
        assert result.operating_point["i_vv1"] == pytest.approx(0.005)
        assert result.operating_point["v_1"] == pytest.approx(5.0)
        assert result.operating_point["v_0"] == 0.0

    def test_series_is_constant_over_fallback_window(self, simple_resistor_circuit):
        series = solve_fallback(_deck(simple_resistor_circuit)).series
        assert series.time.tolist() == list(FALLBACK_TIMES)
        assert series.voltages[1].tolist() == [5.0, 5.0]
        assert series.voltages[0].tolist() == [0.0, 0.0]
        assert series.currents["vv1"].tolist() == pytest.approx([0.005, 0.005])

    def test_floating_pair(self):
        deck = _deck([make_battery("V1", "A", "B", "12V"), make_resistor("R1", "B", "A", "4k")])
        result = solve_fallback(deck)
        assert result.success
        assert result.operating_point["i_vv1"] == pytest.approx(0.003)
        assert result.operating_point["v_1"] == pytest.approx(12.0)
        assert result.operating_point["v_2"] == 0.0

    def test_reversed_battery_keeps_ground_at_zero(self):
        generated = NetlistGenerator([make_battery("V1", "GND", "A"), make_resistor("R1", "A", "GND")]).generate()
        assert generated.device_lines == ["VV1 0 1 DC 5", "RR1 1 0 1000"]
        result = solve_fallback(generated.text)
        assert result.success
        assert result.operating_point["v_0"] == 0.0
        assert result.operating_point["v_1"] == pytest.approx(-5.0)
        labeled = label_series(result.series, generated.node_map)
        assert labeled.voltages == {"A": [-5.0, -5.0]}
        assert labeled.get("GND") == [0.0, 0.0]

    def test_handwritten_deck_with_suffixes(self):
        deck = "* test\nV1 1 0 DC 3.3\nR1 1 0 1k\n.end\n"
        result = solve_fallback(deck)
        assert result.operating_point["i_v1"] == pytest.approx(3.3e-3)

    def test_two_resistors_not_handled(self, divider_circuit):
        result = solve_fallback(_deck(divider_circuit))
        assert not result.success
        assert result.series is None
        assert "one DC voltage source" in result.error

    def test_resistor_on_other_nodes_not_handled(self):
        deck = _deck([make_battery("V1", "A", "GND"), make_resistor("R1", "B", "GND")])
        assert not solve_fallback(deck).success

    def test_diode_circuit_not_handled(self):
        deck = _deck([make_battery("V1", "A", "GND"), make_component("led", "D1", pin_1="A", pin_2="GND")])
        assert not solve_fallback(deck).success

    def test_zero_resistance_rejected(self):
        result = solve_fallback("t\nV1 1 0 DC 5\nR1 1 0 0\n.end\n")
        assert not result.success
        assert "positive resistance" in result.error

    def test_control_block_ignored(self):
        deck = "t\nV1 1 0 DC 5\nR1 1 0 1000\n.control\nRUN 1 0 5\n.endc\n.end\n"
        assert solve_fallback(deck).success
