"""
Pitch Card Generator — Streamlit UI
Two-page flow: Enter pitches → Preview card and download.
"""

import random
import sys
from pathlib import Path

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

sys.path.insert(0, str(Path(__file__).resolve().parent))

from config import AppSettings, CardConfig, Pitch
from defaults import PRESET_NAMES, blank_pitch, preset
from model import (
    MAX_CODE_LENGTH,
    build_cross_reference,
    build_layout,
    call_distribution,
    has_errors,
    total_percentage,
    validate_pitches,
)
from build_excel_model import XLSX_MIME, export_filename, generate_workbook, workbook_bytes
from storage import JsonPitchStore

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
CARD_RED = "#FF0000"
CARD_BLACK = "#000000"
CARD_GREY = "#7F8C8D"
CARD_WHITE = "#FFFFFF"
CARD_BLUE = "#2251FF"

# ---------------------------------------------------------------------------
# Page config & CSS
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Pitch Card",
    page_icon="⚾",
    layout="centered",
    initial_sidebar_state="collapsed",
)

st.markdown(f"""
<style>
    .main .block-container {{ padding-top: 1.5rem; max-width: 900px; }}
    [data-testid="collapsedControl"] {{ display: none; }}

    button[kind="primary"], .stDownloadButton button {{
        background-color: {CARD_BLACK} !important; border-color: {CARD_BLACK} !important;
        color: {CARD_WHITE} !important;
    }}

    .pc-header {{
        background: {CARD_RED}; color: white; text-align: center;
        padding: 1.2rem 2rem; border-radius: 8px; margin-bottom: 1.2rem;
    }}
    .pc-header h1 {{ margin: 0; font-size: 1.6rem; font-weight: 700; }}
    .pc-header p {{ margin: 0.3rem 0 0 0; font-size: 0.82rem; opacity: 0.85; }}

    .pc-total {{ font-weight: 600; }}
    .pc-total.over {{ color: {CARD_RED}; }}
</style>
""", unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
settings = AppSettings.from_env()
store = JsonPitchStore(settings.store_path)

if "card" not in st.session_state:
    st.session_state.card = CardConfig(pitches=store.load() or [blank_pitch()])
if "page" not in st.session_state:
    st.session_state.page = "configure"
if "form_rev" not in st.session_state:
    st.session_state.form_rev = 0


def _replace_pitches(pitches):
    """Swap the whole list (preset / reset) and rebuild the input widgets."""
    st.session_state.card.pitches = pitches
    st.session_state.form_rev += 1
    store.save(pitches)
    st.rerun()


def _render_header(subtitle: str):
    st.markdown(f"""
    <div class="pc-header">
        <h1>Pitch Card</h1>
        <p>{subtitle}</p>
    </div>
    """, unsafe_allow_html=True)


# ═══════════════════════════════════════════════════════════════════════════
# PAGE 1: CONFIGURE
# ═══════════════════════════════════════════════════════════════════════════
def _page_configure():
    card: CardConfig = st.session_state.card
    rev = st.session_state.form_rev

    _render_header("Enter your pitches, abbreviations and how often each should be called")

    pc1, pc2, pc3 = st.columns([3, 2, 1])
    with pc1:
        chosen = st.selectbox("Preset", PRESET_NAMES, label_visibility="collapsed")
    with pc2:
        if st.button("Load preset", use_container_width=True):
            _replace_pitches(preset(chosen))
    with pc3:
        if st.button("Reset", use_container_width=True):
            _replace_pitches([blank_pitch()])

    hc1, hc2, hc3, hc4 = st.columns([4, 2, 2, 1])
    with hc1:
        st.caption("Pitch name")
    with hc2:
        st.caption("Abbreviation")
    with hc3:
        st.caption("Pitch %")

    to_remove = None
    edited = []
    for i, p in enumerate(card.pitches):
        c1, c2, c3, c4 = st.columns([4, 2, 2, 1])
        with c1:
            name = st.text_input("Name", value=p.name, placeholder="Fastball",
                                 key=f"pn_{rev}_{i}", label_visibility="collapsed")
        with c2:
            code = st.text_input("Abbreviation", value=p.code[:MAX_CODE_LENGTH], placeholder="FB",
                                 max_chars=MAX_CODE_LENGTH,
                                 key=f"pa_{rev}_{i}", label_visibility="collapsed")
        with c3:
            pct = st.number_input("Percent", value=min(p.numeric_weight, 100.0), min_value=0.0,
                                  max_value=100.0, step=5.0, format="%g", key=f"pp_{rev}_{i}",
                                  label_visibility="collapsed")
        with c4:
            if st.button("✕", key=f"pr_{rev}_{i}"):
                to_remove = i
        edited.append(Pitch(name=name, code=code, weight=pct))

    if edited != card.pitches:
        card.pitches = edited
        store.save(edited)

    if to_remove is not None:
        _replace_pitches([p for i, p in enumerate(card.pitches) if i != to_remove])

    bc1, bc2, bc3 = st.columns([2, 2, 2])
    with bc1:
        if st.button("＋ Add pitch"):
            _replace_pitches(card.pitches + [blank_pitch()])
    with bc2:
        total = total_percentage(card.pitches)
        css = "pc-total over" if total > 100 else "pc-total"
        st.markdown(f'<div class="{css}">Total: {total:g}%</div>', unsafe_allow_html=True)
    with bc3:
        card.sheet_count = int(st.number_input(
            "Number of sheets", value=card.sheet_count, min_value=1, step=1,
            help="Currently every card contains one Player and one Coach sheet",
        ))

    issues = validate_pitches(card.pitches)
    for issue in issues:
        if issue.level == "error":
            st.error(issue.message)
        else:
            st.warning(issue.message)

    st.markdown('<div style="height:0.5rem"></div>', unsafe_allow_html=True)
    if st.button("Generate card", type="primary", use_container_width=True,
                 disabled=has_errors(issues)):
        st.session_state.page = "results"
        st.session_state.pop("rng_seed", None)
        st.rerun()

    _how_it_works()


def _how_it_works():
    st.divider()
    st.markdown("#### How it works")
    st.markdown(
        "Enter all your pitch names, their abbreviations, and the percentage you want each "
        "pitch to be used. The Excel file contains two tabs:\n\n"
        "- **Player** — for the pitcher's arm. Shows the pitch calls in a grid.\n"
        "- **Coach** — every call and its location. Call out the column number followed "
        "by the row number (e.g. *21-3*)."
    )


# ═══════════════════════════════════════════════════════════════════════════
# PAGE 2: PREVIEW & DOWNLOAD
# ═══════════════════════════════════════════════════════════════════════════
def _page_results():
    card: CardConfig = st.session_state.card

    if st.button("← Edit pitches"):
        st.session_state.page = "configure"
        st.rerun()

    _render_header("Preview your card, then download the workbook")

    # One seed per visit so reruns show the same card that gets downloaded
    if "rng_seed" not in st.session_state:
        st.session_state.rng_seed = random.randrange(2**32)
    seed = st.session_state.rng_seed

    layout = build_layout(card.pitches, random.Random(seed))
    table = build_cross_reference(layout, card.pitches)

    tab_player, tab_coach, tab_mix = st.tabs(["Player", "Coach", "Call mix"])

    with tab_player:
        st.dataframe(pd.DataFrame(layout.texts()), use_container_width=True, hide_index=True)

    with tab_coach:
        rows = table.rows()
        if table.codes:
            st.dataframe(pd.DataFrame(rows[1:], columns=table.headers()),
                         use_container_width=True, hide_index=True)
        else:
            st.info("No pitches were placed on the card.")

    with tab_mix:
        actual = call_distribution(layout)
        target_total = total_percentage(card.pitches) or 1.0
        names = {}
        target = {}
        for p in card.pitches:
            names.setdefault(p.code, p.name or p.code)
            target[p.code] = target.get(p.code, 0.0) + 100.0 * p.numeric_weight / target_total
        codes = sorted(set(target) | set(actual))
        labels = [names.get(c, c) for c in codes]

        fig = go.Figure()
        fig.add_trace(go.Bar(name="Target %", x=labels, y=[target.get(c, 0) for c in codes],
                             marker_color=CARD_GREY))
        fig.add_trace(go.Bar(name="On card %", x=labels, y=[actual.get(c, 0) for c in codes],
                             marker_color=CARD_BLUE))
        fig.update_layout(barmode="group", height=360, margin=dict(l=20, r=20, t=30, b=20),
                          legend=dict(orientation="h", y=1.1))
        st.plotly_chart(fig, use_container_width=True)

    st.divider()
    dc1, dc2, dc3 = st.columns([1, 2, 1])
    with dc2:
        wb = generate_workbook(card.pitches, card.sheet_count, random.Random(seed))
        st.download_button(
            "Download pitch card as Excel",
            data=workbook_bytes(wb),
            file_name=export_filename(),
            mime=XLSX_MIME,
            use_container_width=True,
        )
        if st.button("Shuffle again", use_container_width=True):
            st.session_state.pop("rng_seed", None)
            st.rerun()


# ═══════════════════════════════════════════════════════════════════════════
# Router
# ═══════════════════════════════════════════════════════════════════════════
if st.session_state.page == "configure":
    _page_configure()
else:
    _page_results()
