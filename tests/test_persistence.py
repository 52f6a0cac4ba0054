"""Tests for the persistence gateway helpers."""
import json
import os
from dataclasses import replace

import pytest

from core.errors import PersistenceUnavailable
from engine.persistence import JsonFileGateway, MemoryGateway, dumps_state, load_game, save_game
from engine.pipeline import Action, apply_action


def test_empty_gateway_starts_new_game(now):
    res = load_game(MemoryGateway({}), now)
    assert not res.restored
    assert res.error == ""
    assert res.state.resource == 0.0
    assert res.state.last_save_time == now


def test_malformed_blob_falls_back(now):
    gw = MemoryGateway({"tapTycoonState": "{not json"})
    res = load_game(gw, now)
    assert not res.restored
    assert res.error
    assert res.state.total_clicks == 0


def test_non_object_blob_falls_back(now):
    res = load_game(MemoryGateway({"tapTycoonState": json.dumps([1, 2, 3])}), now)
    assert not res.restored


def test_save_then_load_applies_offline_progress(fresh, now, with_levels):
    gw = MemoryGateway({})
    state = replace(with_levels(fresh, autoClicker=5), resource_per_second=5.0, resource=10.0)
    assert save_game(gw, state, now)

    res = load_game(gw, now + 120_000)
    assert res.restored
    assert res.offline_seconds == 120.0
    assert res.offline_credited == 600.0
    assert res.state.resource == 610.0
    assert res.state.last_save_time == now + 120_000


def test_failed_save_reports_false(fresh, now):
    gw = MemoryGateway({}, fail_saves=True)
    assert save_game(gw, fresh, now) is False
    assert gw.store == {}


def test_json_file_gateway(tmp_path, fresh, now):
    gw = JsonFileGateway(tmp_path / "nested" / "save.json")
    assert gw.load() is None
    blob = dumps_state(fresh)
    gw.save(blob)
    assert gw.load() == blob
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["save.json"]


def _set_event(events, event_id, key, value):
    for e in events:
        if e["id"] == event_id:
            e[key] = value


BAD_VALUES = {
    "infinite_last_save_time": lambda d: d.update(last_save_time=float("inf")),
    "nan_resource": lambda d: d.update(resource=float("nan")),
    "huge_int_clicks": lambda d: d.update(total_clicks=10**400),
    "zero_prestige_threshold": lambda d: d["prestige"].update(resource_required=0),
    "negative_prestige_threshold": lambda d: d["prestige"].update(resource_required=-5.0),
    "infinite_prestige_multiplier": lambda d: d["prestige"].update(multiplier=float("inf")),
    "huge_upgrade_level": lambda d: d["upgrades"]["clickPower"].update(level=10_000),
    "text_upgrade_level": lambda d: d["upgrades"]["clickPower"].update(level="lots"),
    "list_upgrade_level": lambda d: d["upgrades"]["autoClicker"].update(level=[1]),
    "text_daily_day": lambda d: d.update(daily_rewards=[{"day": "first", "claimed": True}]),
    "zero_discount_multiplier": lambda d: _set_event(d["special_events"], "upgrade_discount", "multiplier", 0),
    "infinite_event_start": lambda d: _set_event(d["special_events"], "click_frenzy", "start_time", float("inf")),
}


@pytest.mark.parametrize("case", sorted(BAD_VALUES))
def test_bad_values_fall_back_to_new_game(fresh, now, case):
    d = json.loads(dumps_state(fresh))
    d["resource"] = 5e6
    BAD_VALUES[case](d)
    res = load_game(MemoryGateway({"tapTycoonState": json.dumps(d)}), now)

    assert res.restored is False
    assert res.error
    assert res.state.resource == 0.0

    # the fallback state takes every intent without a non-engine error
    for action in (Action.prestige(), Action.buy("clickPower"), Action.click()):
        _, entry = apply_action(res.state, action, now)
        assert "ok" in entry


def test_large_but_sane_values_still_load(fresh, now):
    d = json.loads(dumps_state(fresh))
    d["upgrades"]["clickPower"]["level"] = 200
    d["prestige"]["resource_required"] = 1e12
    res = load_game(MemoryGateway({"tapTycoonState": json.dumps(d)}), now)
    assert res.restored
    assert res.state.upgrades["clickPower"].level == 200


def test_json_file_gateway_removes_temp_file_on_failure(tmp_path, fresh, monkeypatch):
    gw = JsonFileGateway(tmp_path / "save.json")

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", _fail)
    with pytest.raises(PersistenceUnavailable):
        gw.save(dumps_state(fresh))
    assert list(tmp_path.iterdir()) == []
