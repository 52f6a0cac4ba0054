"""Tests for the notice feed."""
from dataclasses import replace

from core.achievements import unlock_achievement
from core.daily import claim
from core.prestige import perform_prestige
from engine.notices import MAX_NOTICES, Notice, mark_all_read, notices_between, push, unread_count


def test_no_change_no_notices(fresh, now):
    assert notices_between(fresh, fresh, now, now) == []


def test_achievement_notice(fresh, now):
    after = unlock_achievement(fresh, "first_click")
    out = notices_between(fresh, after, now, now)
    assert [n.kind for n in out] == ["achievement"]
    assert "First Click" in out[0].message


def test_prestige_notice_replaces_upgrade_noise(fresh, now, with_levels):
    before = replace(with_levels(fresh, clickPower=3), resource=1e6)
    after = perform_prestige(before, now)
    kinds = [n.kind for n in notices_between(before, after, now, now)]
    assert kinds == ["prestige"]


def test_event_start_notice(fresh, now, hour_ms):
    out = notices_between(fresh, fresh, now + 25 * hour_ms, now + 23 * hour_ms)
    assert [n.kind for n in out] == ["special_event"]


def test_daily_reward_becomes_available(fresh, now, hour_ms):
    claimed = claim(fresh, 1, now)
    out = notices_between(claimed, claimed, now + 25 * hour_ms, now + 23 * hour_ms)
    daily = [n for n in out if n.kind == "daily_reward"]
    assert len(daily) == 1
    assert "Day 2" in daily[0].message


def test_feed_is_capped_and_newest_first():
    feed = ()
    for i in range(60):
        feed = push(feed, [Notice("info", f"t{i}", "", i)])
    assert len(feed) == MAX_NOTICES
    assert feed[0].title == "t59"
    assert unread_count(feed) == MAX_NOTICES
    assert unread_count(mark_all_read(feed)) == 0
