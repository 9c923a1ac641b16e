"""
Daymark — calendar dashboard for day-by-day scores.
Run with: streamlit run daymark/dashboard.py
"""

import streamlit as st
import plotly.graph_objects as go
import pandas as pd
import sqlite3
import threading
from datetime import date

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from daymark.config import ANNUAL_TARGET, DEFAULT_SKIN, SLOT_NAME
from daymark.database import load_store, toggle_and_save, CORRUPT_SUFFIX
from daymark.aggregation import view_totals, monthly_totals, compute_score_stats, month_range, target_progress
from daymark.calendar_grid import WEEKDAY_LABELS, can_shift_month, month_grid, month_title, shift_month
from daymark.errors import DaymarkError
from daymark.models import DayKey, Score
from daymark.store import ScoreStore
from daymark.skins import SKINS, get_skin, score_color

# ============================================================
# PAGE CONFIG
# ============================================================
st.set_page_config(
    page_title="Daymark",
    page_icon="◆",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ============================================================
# STYLING (rebuilt from the active skin on every render)
# ============================================================
def build_css(skin: dict) -> str:
    return f"""
<style>
footer {{visibility: hidden;}}
#MainMenu {{visibility: hidden;}}

.stApp {{ background: {skin['background']}; color: {skin['text']}; }}

/* Stat cards */
[data-testid="stMetric"] {{
    background: {skin['surface']};
    border: 1px solid rgba(255,255,255,0.1); border-radius: 14px;
    padding: 12px 16px;
}}
[data-testid="stMetric"] label {{
    font-size: 0.65rem; text-transform: uppercase; letter-spacing: 0.2em;
}}

/* Score buttons */
.stButton > button {{
    border-radius: 8px; font-weight: 700; font-size: 0.7rem;
    padding: 0.1rem 0.3rem; min-height: 1.6rem;
}}
.stButton > button[kind="primary"] {{
    background: {skin['accent']} !important; color: #000 !important; border: none;
}}

.day-number {{ font-size: 0.7rem; color: {skin['neutral']}; text-align: center; }}
.weekday {{ font-size: 0.65rem; text-transform: uppercase; letter-spacing: 0.1em;
            color: {skin['neutral']}; text-align: center; }}
</style>
"""


def apply_chart_style(fig, skin: dict):
    fig.update_layout(
        font=dict(color=skin["neutral"]),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        title_font=dict(size=14, color=skin["text"]),
        xaxis=dict(gridcolor="rgba(255,255,255,0.04)", tickfont=dict(color=skin["neutral"])),
        yaxis=dict(gridcolor="rgba(255,255,255,0.04)", tickfont=dict(color=skin["neutral"]),
                   zerolinecolor="rgba(255,255,255,0.15)"),
        margin=dict(l=40, r=20, t=45, b=35),
    )
    return fig


def format_total(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


# ============================================================
# SHARED LEDGER (one store per server process)
# ============================================================

@st.cache_resource
def _get_ledger():
    """
    Load the ledger once at startup.

    Streamlit serves every browser session from its own thread, so toggles
    go through the lock. A corrupt saved payload leaves us with an empty
    store and an error message to show.
    """
    load_error = None
    try:
        store = load_store(SLOT_NAME)
    except DaymarkError as e:
        store = ScoreStore()
        load_error = str(e)
    return {"store": store, "lock": threading.Lock(), "load_error": load_error}


def _toggle(day: DayKey, candidate: Score):
    ledger = _get_ledger()
    with ledger["lock"]:
        toggle_and_save(ledger["store"], day, candidate, SLOT_NAME)


def _init_view_state():
    today = date.today()
    st.session_state.setdefault("view_year", today.year)
    st.session_state.setdefault("view_month", today.month)


def _shift_view(delta: int):
    st.session_state.view_year, st.session_state.view_month = shift_month(
        st.session_state.view_year, st.session_state.view_month, delta
    )


# ============================================================
# SIDEBAR
# ============================================================
def render_sidebar(year_total: int) -> dict:
    st.sidebar.markdown("### ◆ Daymark")
    st.sidebar.markdown("---")

    names = list(SKINS.keys())
    default_index = names.index(DEFAULT_SKIN) if DEFAULT_SKIN in names else 0
    skin_name = st.sidebar.selectbox("Skin", names, index=default_index, key="skin")

    st.sidebar.markdown("**Legend**")
    st.sidebar.caption("+1 = high output  \n-1 = regression  \n0 = clear the day")

    st.sidebar.markdown("---")
    st.sidebar.markdown("**Focus goal**")
    st.sidebar.metric("Annual target", format_total(ANNUAL_TARGET),
                      delta=f"{format_total(year_total)} so far", delta_color="off")
    st.sidebar.progress(target_progress(year_total, ANNUAL_TARGET))

    return get_skin(skin_name)


# ============================================================
# CHARTS
# ============================================================
def chart_monthly_totals(snapshot, year: int, skin: dict):
    df = pd.DataFrame(monthly_totals(snapshot, year), columns=["month", "total"])
    if not df["total"].any():
        st.caption(f"No scored days in {year} yet.")
        return
    fig = go.Figure(go.Bar(
        x=df["month"], y=df["total"],
        marker_color=[score_color(skin, v) for v in df["total"]],
        text=[format_total(v) for v in df["total"]], textposition="outside",
    ))
    fig.update_layout(title=f"Monthly totals ({year})", height=320, yaxis_title="Net score")
    apply_chart_style(fig, skin)
    st.plotly_chart(fig, use_container_width=True)


# ============================================================
# CALENDAR
# ============================================================
def render_day_cell(day: DayKey, score: Score):
    st.markdown(f"<div class='day-number'>{day.day:02d}</div>", unsafe_allow_html=True)
    for candidate in (Score.POSITIVE, Score.NEUTRAL, Score.NEGATIVE):
        active = score is candidate
        if st.button(candidate.label, key=f"{day}:{candidate.value}",
                     type="primary" if active else "secondary",
                     use_container_width=True):
            try:
                _toggle(day, candidate)
            except (DaymarkError, sqlite3.Error) as e:
                st.error(f"Could not save {day}: {e}")
                return
            st.rerun()


def render_calendar(year: int, month: int, snapshot):
    header = st.columns(7)
    for col, label in zip(header, WEEKDAY_LABELS):
        col.markdown(f"<div class='weekday'>{label}</div>", unsafe_allow_html=True)

    for week in month_grid(year, month):
        cols = st.columns(7)
        for col, day in zip(cols, week):
            if day is None:
                continue
            with col:
                render_day_cell(day, snapshot.get(day, Score.NEUTRAL))


# ============================================================
# MAIN DASHBOARD
# ============================================================
def render_dashboard():
    _init_view_state()
    try:
        ledger = _get_ledger()
    except sqlite3.Error as e:
        st.error(f"Score database unavailable: {e}")
        st.stop()

    year = st.session_state.view_year
    month = st.session_state.view_month
    reference = DayKey(year, month, 1)

    with ledger["lock"]:
        snapshot = ledger["store"].snapshot()

    totals = view_totals(snapshot, year, month)

    skin = render_sidebar(totals.year)
    st.markdown(build_css(skin), unsafe_allow_html=True)

    if ledger["load_error"]:
        st.error(f"Saved scores could not be loaded: {ledger['load_error']}. "
                 f"Starting empty; the original payload was kept in slot "
                 f"'{SLOT_NAME}{CORRUPT_SUFFIX}'.")

    # Header
    h1, h2 = st.columns([2, 3])
    with h1:
        st.caption("Temporal log")
        st.markdown(f"## {month_title(year, month)}")
    with h2:
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Year", format_total(totals.year))
        m2.metric("Quarter", format_total(totals.quarter))
        m3.metric("Month", format_total(totals.month))
        m4.metric("Week", format_total(totals.week), help="The current real-world week")

    # Navigation
    n1, n2, n3, _ = st.columns([1, 1, 1, 6])
    with n1:
        if st.button("◀", key="nav_prev", use_container_width=True,
                     disabled=not can_shift_month(year, month, -1)):
            _shift_view(-1)
            st.rerun()
    with n2:
        if st.button("▶", key="nav_next", use_container_width=True,
                     disabled=not can_shift_month(year, month, 1)):
            _shift_view(1)
            st.rerun()
    with n3:
        if st.button("Today", key="nav_today", use_container_width=True):
            st.session_state.view_year = date.today().year
            st.session_state.view_month = date.today().month
            st.rerun()

    st.markdown("---")
    render_calendar(year, month, snapshot)

    st.markdown("---")
    _, m_start, m_end = month_range(reference)
    stats = compute_score_stats(snapshot, m_start, m_end)
    st.caption(f"{stats['scored_days']} scored days this month · "
               f"{stats['positive_days']} positive · {stats['negative_days']} negative")
    chart_monthly_totals(snapshot, year, skin)


# ============================================================
# MAIN
# ============================================================
def main():
    render_dashboard()

if __name__ == "__main__":
    main()
