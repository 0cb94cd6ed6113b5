"""Tests for controllers/file_controller.py."""

import json

import pytest
from controllers.file_controller import load_circuit_file, load_node_map, validate_circuit_data
from models.component import ComponentKind


class TestValidateCircuitData:
    def test_valid(self, editor_circuit_data):
        validate_circuit_data(editor_circuit_data)

    @pytest.mark.parametrize(
        "data, message",
        [
            ([], "valid circuit object"),
            ({}, "'components'"),
            ({"components": {}}, "'components'"),
            ({"components": ["R1"]}, "not an object"),
            ({"components": [{"kind": "resistor"}]}, "'id'"),
            ({"components": [{"id": "r1"}]}, "'kind'"),
            ({"components": [{"id": "r1", "kind": "resistor"}, {"id": "r1", "kind": "led"}]}, "Duplicate"),
            ({"components": [{"id": "r1", "kind": "resistor", "pins": ["A", "B"]}]}, "invalid pin data"),
            ({"components": [{"id": "r1", "kind": "resistor", "pins": {"1": 5.5}}]}, "pin '1'"),
            ({"components": [{"id": "r1", "kind": "resistor", "pins": {"1": {"net": ["A"]}}}]}, "non-string net"),
        ],
    )
    def test_invalid(self, data, message):
        with pytest.raises(ValueError, match=message):
            validate_circuit_data(data)


class TestLoadCircuitFile:
    def test_load(self, tmp_path, editor_circuit_data):
        path = tmp_path / "circuit.json"
        path.write_text(json.dumps(editor_circuit_data))
        model = load_circuit_file(path)
        assert len(model) == 3
        assert model.get_component("r1").kind is ComponentKind.RESISTOR

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(json.JSONDecodeError):
            load_circuit_file(path)

    def test_invalid_structure(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"wires": []}))
        with pytest.raises(ValueError):
            load_circuit_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_circuit_file(tmp_path / "missing.json")


class TestLoadNodeMap:
    def test_load(self, tmp_path):
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps({"0": 0, "VCC": 1}))
        assert load_node_map(path).to_dict() == {"0": 0, "VCC": 1}

    @pytest.mark.parametrize("content", [[1, 2], {"VCC": "1"}, {"VCC": True}])
    def test_rejects_bad_maps(self, tmp_path, content):
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps(content))
        with pytest.raises(ValueError):
            load_node_map(path)
