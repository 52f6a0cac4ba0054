"""Tap Tycoon (Streamlit)

Principles:
- UI only renders + triggers.
- Core domain and engine are pure Python modules.
- One GameSession per browser session; it owns the snapshot and the timers.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import streamlit as st

from core.achievements import ACHIEVEMENT_CATALOG
from core.catalog import UPGRADE_CATALOG
from core.fmt import format_duration, format_number
from core.stats import clicks_per_minute

from engine.config import EngineConfig
from engine.logging import dumps_session_export, export_session
from engine.notices import mark_all_read, unread_count
from engine.persistence import JsonFileGateway
from engine.session import GameSession, NoticeFeed, StatsRecorder


APP_TITLE = "Tap Tycoon"
APP_SUBTITLE = "Tap, build, prestige. Progress keeps running while you are away."
APP_VERSION = "1.0.0"

st.set_page_config(page_title=APP_TITLE, page_icon="💎", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 3.2rem; padding-bottom: 2rem;}
.card {
  border: 1px solid rgba(255,255,255,0.08);
  border-radius: 16px;
  padding: 14px 16px;
  background: rgba(255,255,255,0.03);
}
.pill {
  display: inline-block;
  padding: 2px 10px;
  border-radius: 999px;
  border: 1px solid rgba(255,255,255,0.12);
  font-size: 12px;
  opacity: .85;
}
.pill.ok {border-color: rgba(120,255,160,0.25);}
.pill.warn {border-color: rgba(255,190,90,0.35);}
hr.soft {border: none; border-top: 1px solid rgba(255,255,255,0.08); margin: 1rem 0;}
.small {font-size: 13px; opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "engine_config" not in ss:
        ss.engine_config = EngineConfig.from_env()
    if "stats_recorder" not in ss:
        ss.stats_recorder = StatsRecorder()
    if "notice_feed" not in ss:
        ss.notice_feed = NoticeFeed()
    if "session" not in ss:
        cfg: EngineConfig = ss.engine_config
        session = GameSession(
            JsonFileGateway(Path(cfg.save_path)),
            cfg,
            listeners=[ss.stats_recorder, ss.notice_feed],
        )
        res = session.open()
        session.start_timers()
        ss.session = session
        ss.welcome = ""
        if res.restored and res.offline_credited > 0:
            ss.welcome = (
                f"Welcome back! You were away {format_duration(int(res.offline_seconds * 1000))} "
                f"and earned {format_number(res.offline_credited)}."
            )
        elif res.error:
            ss.welcome = f"Save could not be restored ({res.error}); started a new game."
    if "last_result" not in ss:
        ss.last_result = None


def _report(entry: Dict[str, Any]) -> None:
    st.session_state.last_result = entry


# =========================
# Pages
# =========================


def page_play() -> None:
    ss = st.session_state
    session: GameSession = ss.session
    state = session.snapshot()

    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    if ss.get("welcome"):
        st.info(ss.welcome)

    a, b, c, d = st.columns(4)
    a.metric("Resource", format_number(state.resource))
    b.metric("Per second", format_number(state.resource_per_second))
    c.metric("Per click", format_number(state.resource_per_click))
    d.metric("Prestige", f"{state.prestige.level} · x{state.prestige.multiplier:g}")

    events = session.active_events()
    if events:
        st.markdown(" ".join(f"<span class='pill ok'>{e.name}</span>" for e in events), unsafe_allow_html=True)

    if st.button("TAP", type="primary", use_container_width=True):
        _report(session.click())
        st.rerun()
    if st.button("Refresh", use_container_width=False):
        st.rerun()

    res = ss.get("last_result")
    if res and not res.get("ok"):
        st.warning(res.get("error"))
    elif res and res.get("unlocked"):
        names = [a.name for a in ACHIEVEMENT_CATALOG if a.id in set(res["unlocked"])]
        st.success("Achievement unlocked: " + ", ".join(names))


def page_shop() -> None:
    session: GameSession = st.session_state.session
    state = session.snapshot()
    st.title("Shop")
    st.caption(f"Balance: {format_number(state.resource)}")

    for u in UPGRADE_CATALOG:
        cost = session.cost_of(u.id)
        level = state.upgrades[u.id].level
        with st.container():
            st.markdown("<div class='card'>", unsafe_allow_html=True)
            left, right = st.columns([3.0, 1.0])
            with left:
                st.markdown(f"#### {u.name} · lvl {level}")
                st.markdown(f"<div class='small'>{u.desc}</div>", unsafe_allow_html=True)
            with right:
                if st.button(f"Buy · {format_number(cost)}", key=f"buy_{u.id}", disabled=state.resource < cost, use_container_width=True):
                    _report(session.buy(u.id))
                    st.rerun()
            st.markdown("</div>", unsafe_allow_html=True)

    st.markdown("<hr class='soft'/>", unsafe_allow_html=True)
    st.subheader("Prestige")
    st.caption(
        f"Requires {format_number(state.prestige.resource_required)}. "
        f"Resets resource and upgrades for +{session.prestige_gain():g} multiplier."
    )
    if st.button("Prestige now", disabled=not session.can_prestige()):
        _report(session.prestige())
        st.rerun()


def page_daily() -> None:
    session: GameSession = st.session_state.session
    state = session.snapshot()
    st.title("Daily Rewards")
    day = session.claimable_day()
    st.caption(f"Claimable today: day {day}" if day else "Come back tomorrow.")

    cols = st.columns(6)
    for i, slot in enumerate(state.daily_rewards):
        with cols[i % 6]:
            label = f"Day {slot.day}: {format_number(slot.reward + slot.bonus)}"
            if slot.claimed:
                st.markdown(f"<span class='pill ok'>{label} ✓</span>", unsafe_allow_html=True)
            elif slot.day == day:
                if st.button(f"Claim {label}", key=f"claim_{slot.day}"):
                    _report(session.claim_daily(slot.day))
                    st.rerun()
            else:
                st.markdown(f"<span class='pill'>{label}</span>", unsafe_allow_html=True)


def page_achievements() -> None:
    session: GameSession = st.session_state.session
    unlocked = {a.id for a in session.unlocked_achievements()}
    st.title("Achievements")
    st.caption(f"{len(unlocked)} / {len(ACHIEVEMENT_CATALOG)} unlocked")
    for a in ACHIEVEMENT_CATALOG:
        mark = "✅" if a.id in unlocked else "🔒"
        st.markdown(f"{mark} **{a.name}** · {a.description} <span class='pill'>{a.category} · +{format_number(a.reward)}</span>", unsafe_allow_html=True)


def page_stats() -> None:
    ss = st.session_state
    session: GameSession = ss.session
    state = session.snapshot()
    stats = ss.stats_recorder.stats
    st.title("Stats")
    rows: List[tuple] = [
        ("Total earned (this run)", format_number(state.total_resource_earned)),
        ("Total clicks (this run)", format_number(state.total_clicks)),
        ("Lifetime clicks", format_number(stats.total_clicks)),
        ("Upgrades purchased", format_number(stats.total_upgrades_purchased)),
        ("Prestiges", format_number(stats.total_prestiges)),
        ("Fastest prestige", format_duration(stats.fastest_prestige) if stats.fastest_prestige else "-"),
        ("Best per second", format_number(stats.highest_resource_per_second)),
        ("Best per click", format_number(stats.highest_resource_per_click)),
        ("Clicks per minute", f"{clicks_per_minute(stats, session.clock()):.1f}"),
        ("Sessions", str(stats.sessions_played)),
    ]
    for k, v in rows:
        st.markdown(f"- **{k}:** {v}")

    st.subheader("Notices")
    feed: NoticeFeed = ss.notice_feed
    st.caption(f"{unread_count(feed.notices)} unread")
    for n in feed.notices:
        st.markdown(f"{'' if n.read else '🔔 '}**{n.title}** {n.message}")
    if st.button("Mark all read"):
        feed.notices = mark_all_read(feed.notices)
        st.rerun()


def export_controls() -> None:
    ss = st.session_state
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Session Export")
    payload = export_session(ss.session)
    payload["meta"] = {"app": APP_TITLE, "version": APP_VERSION, "exported_at": datetime.utcnow().isoformat() + "Z"}
    st.sidebar.download_button(
        "Download session",
        data=dumps_session_export(payload).encode("utf-8"),
        file_name="tap_tycoon_session.json",
        mime="application/json",
    )
    with st.sidebar.expander("Config"):
        st.code(json.dumps(asdict(ss.engine_config), indent=2), language="json")


# =========================
# Sidebar
# =========================


def sidebar() -> str:
    session: GameSession = st.session_state.session
    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    if st.sidebar.button("Save now", use_container_width=True):
        if session.save():
            st.sidebar.success("Saved.")
        else:
            st.sidebar.error("Save failed; progress is kept in memory.")
    export_controls()
    st.sidebar.markdown("---")
    return st.sidebar.radio("Page", ["Play", "Shop", "Daily", "Achievements", "Stats"], index=0)


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    page = sidebar()
    if page == "Play":
        page_play()
    elif page == "Shop":
        page_shop()
    elif page == "Daily":
        page_daily()
    elif page == "Achievements":
        page_achievements()
    else:
        page_stats()


if __name__ == "__main__":
    main()
