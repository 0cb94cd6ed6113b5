"""Tests for simulation/result_labeler.py - node indices back to net names."""

from simulation.node_allocator import NodeMap
from simulation.result_labeler import label_series, placeholder_label, resolve_probes
from simulation.result_parser import DecodedSeries
from tests.conftest import make_component, make_resistor


def _series(nodes):
    return DecodedSeries(time=[0.0, 1e-3], voltages={n: [float(n), float(n)] for n in nodes})


class TestLabelSeries:
    def test_rekeys_by_net_name(self):
        labeled = label_series(_series([1, 2]), NodeMap({"VCC": 1, "MID": 2}))
        assert labeled.voltages == {"VCC": [1.0, 1.0], "MID": [2.0, 2.0]}
        assert labeled.time == [0.0, 1e-3]
        assert labeled.diagnostics == []

    def test_aliases_share_the_vector(self):
        labeled = label_series(_series([1]), NodeMap({"A": 1, "B": 1}))
        assert labeled.voltages["A"] == labeled.voltages["B"] == [1.0, 1.0]
        assert labeled.voltages["A"] is not labeled.voltages["B"]

    def test_unknown_index_gets_placeholder_and_diagnostic(self):
        labeled = label_series(_series([1, 7]), NodeMap({"A": 1}))
        assert labeled.voltages[placeholder_label(7)] == [7.0, 7.0]
        assert len(labeled.diagnostics) == 1
        assert "node_7" in labeled.diagnostics[0]

    def test_ground_index_not_reported(self):
        labeled = label_series(_series([0, 1]), NodeMap({"A": 1}))
        assert labeled.voltages == {"A": [1.0, 1.0]}
        assert labeled.get("0") == [0.0, 0.0]
        assert labeled.diagnostics == []

    def test_currents_carried_over(self):
        series = DecodedSeries(time=[0.0, 1.0], voltages={}, currents={"vv1": [0.1, 0.1]})
        assert label_series(series, NodeMap({})).currents == {"vv1": [0.1, 0.1]}

    def test_get_resolves_ground_alias(self):
        labeled = label_series(_series([1]), NodeMap({"A": 1}))
        assert labeled.get("GND") == [0.0, 0.0]
        assert labeled.get(" A ") == [1.0, 1.0]
        assert labeled.get("nope") is None

    def test_to_dict(self):
        data = label_series(_series([1]), NodeMap({"A": 1})).to_dict()
        assert set(data) == {"time", "voltages", "currents"}


class TestResolveProbes:
    def test_reads_display_only_pins(self):
        labeled = label_series(_series([1]), NodeMap({"OUT": 1}))
        scope = make_component("oscilloscope", "SCOPE1", pin_CH1="OUT", pin_GND="gnd")
        readings = resolve_probes([make_resistor("R1", "OUT", "GND"), scope], labeled)
        assert list(readings) == ["SCOPE1"]
        assert readings["SCOPE1"]["CH1"] == [1.0, 1.0]
        assert readings["SCOPE1"]["GND"] == [0.0, 0.0]

    def test_unsimulated_net_reads_none_with_diagnostic(self):
        labeled = label_series(_series([1]), NodeMap({"OUT": 1}))
        probe = make_component("probe", "P1", pin_tip="FLOATING", pin_spare="")
        readings = resolve_probes([probe], labeled)
        assert readings["P1"] == {"tip": None, "spare": None}
        assert labeled.diagnostics == ["Probe P1 pin tip: net 'FLOATING' was not simulated"]
