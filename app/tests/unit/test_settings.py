"""Tests for simulation/settings.py."""

import json

import pytest
from simulation.settings import NGSPICE_PATH_ENV, SimulationSettings, load_settings


class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(NGSPICE_PATH_ENV, raising=False)
        settings = SimulationSettings()
        assert settings.tran_step == "0.1us"
        assert settings.tran_stop == "5ms"
        assert settings.use_initial_conditions is True
        assert settings.min_transient_points == 100
        assert settings.timeout == 60.0
        assert settings.ngspice_path is None

    def test_env_supplies_ngspice_path(self, monkeypatch):
        monkeypatch.setenv(NGSPICE_PATH_ENV, "/opt/ngspice/bin/ngspice")
        assert SimulationSettings().ngspice_path == "/opt/ngspice/bin/ngspice"

    def test_explicit_path_beats_env(self, monkeypatch):
        monkeypatch.setenv(NGSPICE_PATH_ENV, "/opt/ngspice/bin/ngspice")
        assert SimulationSettings(ngspice_path="/usr/bin/ngspice").ngspice_path == "/usr/bin/ngspice"

    @pytest.mark.parametrize("kwargs", [{"timeout": 0}, {"timeout": -1.0}, {"min_transient_points": -1}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            SimulationSettings(**kwargs)


class TestFromDict:
    def test_known_keys(self):
        settings = SimulationSettings.from_dict({"tran_stop": "10ms", "timeout": 5})
        assert settings.tran_stop == "10ms"
        assert settings.timeout == 5.0
        assert isinstance(settings.timeout, float)

    def test_unknown_keys_ignored(self, caplog):
        settings = SimulationSettings.from_dict({"colour": "blue"})
        assert settings == SimulationSettings()
        assert "colour" in caplog.text

    @pytest.mark.parametrize(
        "data",
        [{"timeout": "fast"}, {"min_transient_points": True}, {"use_initial_conditions": 1}, {"title": 3}],
    )
    def test_wrong_types_rejected(self, data):
        with pytest.raises(ValueError):
            SimulationSettings.from_dict(data)

    def test_round_trip(self):
        settings = SimulationSettings(title="x", min_transient_points=10, ngspice_path="/bin/ngspice")
        assert SimulationSettings.from_dict(settings.to_dict()) == settings


class TestLoadSettings:
    def test_load(self, tmp_path):
        path = tmp_path / "sim.json"
        path.write_text(json.dumps({"min_transient_points": 5}))
        assert load_settings(path).min_transient_points == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "none.json")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "sim.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "sim.json"
        path.write_text("{nope")
        with pytest.raises(json.JSONDecodeError):
            load_settings(path)
