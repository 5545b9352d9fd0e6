import dataclasses

import pytest

import config


def test_gemini_keys_are_ordered_and_deduplicated(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    monkeypatch.setenv("GEMINI_API_KEY_2", "secondary")
    monkeypatch.setenv("GOOGLE_API_KEY", "primary")

    assert config.get_gemini_api_keys() == ["primary", "secondary"]
    assert config.get_google_api_key() == "primary"
    assert config.validate_api_keys() == []


def test_missing_keys_are_reported(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_API_KEY_2", "GOOGLE_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    assert config.validate_api_keys() == ["GEMINI_API_KEY or GOOGLE_API_KEY"]
    assert config.PlannerSettings.from_env().gemini_api_keys == ()


def test_settings_snapshot_is_frozen(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    settings = config.PlannerSettings.from_env()

    assert settings.gemini_api_keys[0] == "k"
    assert settings.extraction_max_chars == config.EXTRACTION_MAX_CHARS
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.max_itineraries = 10  # type: ignore[misc]
