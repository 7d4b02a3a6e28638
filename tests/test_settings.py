"""Tests for :mod:`melody_chain.settings`."""

import json
import logging

import pytest

from melody_chain.settings import MelodySettings, load_settings


def test_default_settings():
    settings = MelodySettings()
    assert settings.to_dict() == {
        "tempo": 120,
        "volume": 80,
        "instrument": "sine",
        "mode": "default",
        "length": 32,
        "order": 1,
    }
    settings.validate()


def test_from_dict_ignores_unknown_keys():
    settings = MelodySettings.from_dict({"tempo": 90, "isPlaying": True})
    assert settings.tempo == 90
    assert not hasattr(settings, "isPlaying")


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("tempo", 0, "Tempo"),
        ("volume", 101, "Volume"),
        ("instrument", "kazoo", "Instrument"),
        ("mode", "shuffle", "Mode"),
        ("length", 0, "length"),
        ("order", 0, "Order"),
    ],
)
def test_validate_rejects_out_of_range(field, value, message):
    settings = MelodySettings(**{field: value})
    with pytest.raises(ValueError, match=message):
        settings.validate()


def test_load_settings_reads_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"mode": "pattern", "order": 2}), encoding="utf-8")
    assert load_settings(path) == {"mode": "pattern", "order": 2}


def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path / "absent.json") == {}


def test_load_settings_invalid_json_logs_error(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert load_settings(path) == {}
    assert "could not load settings" in caplog.text.lower()


def test_load_settings_rejects_non_object(tmp_path, caplog):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert load_settings(path) == {}
    assert "json object" in caplog.text.lower()


@pytest.mark.parametrize(
    "data",
    [{"tempo": "120"}, {"length": None}, {"order": 1.5}, {"volume": True}, {"mode": 3}],
)
def test_validate_rejects_wrong_types(data):
    settings = MelodySettings.from_dict(data)
    with pytest.raises(ValueError, match="must be an? (integer|string)"):
        settings.validate()
