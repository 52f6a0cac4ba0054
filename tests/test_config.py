"""Tests for EngineConfig."""
from engine.config import EngineConfig


def test_defaults_from_empty_env():
    cfg = EngineConfig.from_env({})
    assert cfg == EngineConfig()
    assert cfg.tick_seconds == 1.0
    assert cfg.autosave_seconds == 30.0
    assert cfg.event_anchor is None


def test_env_overrides():
    cfg = EngineConfig.from_env(
        {
            "TAP_TYCOON_SAVE_PATH": "/tmp/x.json",
            "TAP_TYCOON_TICK_SECONDS": "0.5",
            "TAP_TYCOON_AUTOSAVE_SECONDS": "10",
            "TAP_TYCOON_EVENT_ANCHOR": "1700000000000",
        }
    )
    assert cfg.save_path == "/tmp/x.json"
    assert cfg.tick_seconds == 0.5
    assert cfg.autosave_seconds == 10.0
    assert cfg.event_anchor == 1_700_000_000_000
