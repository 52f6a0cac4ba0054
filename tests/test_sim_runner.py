"""Headless run sanity check."""
from core.economy import click_rate

from engine.sim_runner import run_headless_sim


def test_ten_minute_run():
    out = run_headless_sim(seconds=600, clicks_per_second=5)
    final = out["final"]
    stats = out["stats"]

    assert stats.total_clicks == 3_000
    assert final.resource >= 0.0
    assert final.resource_per_second > 0.0
    assert final.resource_per_click == click_rate(final.upgrades["clickPower"].level, final.prestige.multiplier)
    assert {"first_click", "first_goon", "first_upgrade", "click_master", "click_legend"} <= final.achievements
    assert out["saves"] == [True] * 20
    assert any(n.kind == "achievement" for n in out["notices"])
    assert final.daily_rewards[0].claimed
