from __future__ import annotations

import string
from typing import Iterable, Optional

import streamlit as st

PRIMARY = "#3498db"
SURFACE = "#f5f7fa"
TEXT = "#2c3e50"
MUTED = "#7f8c8d"
PLACED = "#27ae60"
NOT_PLACED = "#e74c3c"
HIGHLIGHT = "#f39c12"

CSS_TEMPLATE = """
<style>
:root {
    --primary: $PRIMARY;
    --surface: $SURFACE;
    --text: $TEXT;
    --muted: $MUTED;
    --highlight: $HIGHLIGHT;
    --radius-md: 10px;
}

.stApp { background: var(--surface); color: var(--text); }

section.main .block-container {
    padding: 1.2rem 2rem 2rem 2rem;
    max-width: 1500px;
}

.app-status {
    display: flex;
    flex-wrap: wrap;
    gap: 1.4rem;
    padding: 0.6rem 1rem;
    border-radius: var(--radius-md);
    background: white;
    border: 1px solid rgba(0,0,0,0.06);
    font-size: 0.88rem;
    margin-bottom: 0.8rem;
}
.app-status .label { color: var(--muted); margin-right: 0.35rem; }
.app-status .value { font-weight: 600; }
.app-status .selected { color: var(--highlight); }

.app-kpi {
    background: white;
    border: 1px solid rgba(0,0,0,0.06);
    border-left: 4px solid var(--primary);
    border-radius: var(--radius-md);
    padding: 0.7rem 0.9rem;
}
.app-kpi .label { color: $MUTED; font-size: 0.82rem; margin-bottom: 0.2rem; }
.app-kpi .value { font-size: 1.3rem; font-weight: 700; }

.app-empty {
    display: flex;
    align-items: center;
    justify-content: center;
    min-height: 220px;
    border: 1px dashed rgba(0,0,0,0.15);
    border-radius: var(--radius-md);
    color: var(--muted);
}

.small-muted { color: var(--muted); font-size: 0.85rem; }
.section-header { font-weight: 700; font-size: 1.02rem; margin-bottom: 0.2rem; }
</style>
"""

GLOBAL_CSS = string.Template(CSS_TEMPLATE).safe_substitute(
    {"PRIMARY": PRIMARY, "SURFACE": SURFACE, "TEXT": TEXT, "MUTED": MUTED, "HIGHLIGHT": HIGHLIGHT}
)


def muted(text: str):
    st.markdown(f"<div class='small-muted'>{text}</div>", unsafe_allow_html=True)


def section_header(title: str, description: Optional[str] = None):
    st.markdown(f"<div class='section-header'>{title}</div>", unsafe_allow_html=True)
    if description:
        muted(description)


def kpi_row(items: Iterable[dict]):
    items = list(items)
    cols = st.columns(len(items)) if items else []
    for col, item in zip(cols, items):
        with col:
            st.markdown(
                f"""
                <div class='app-kpi'>
                    <div class='label'>{item.get('label','')}</div>
                    <div class='value'>{item.get('value','-')}</div>
                    <div class='small-muted'>{item.get('hint','')}</div>
                </div>
                """,
                unsafe_allow_html=True,
            )


def status_bar(fields: dict, selected: bool = False):
    """One line of label/value pairs; the selection value is highlighted when set."""
    parts = []
    for label, value in fields.items():
        css = "value selected" if selected and label == "Selected" else "value"
        parts.append(f"<span><span class='label'>{label}</span><span class='{css}'>{value}</span></span>")
    st.markdown(f"<div class='app-status'>{''.join(parts)}</div>", unsafe_allow_html=True)


def empty_state(message: str):
    st.markdown(f"<div class='app-empty'>{message}</div>", unsafe_allow_html=True)


class AppShell:
    def __init__(self, title: str, subtitle: Optional[str] = None):
        self.title = title
        self.subtitle = subtitle
        self._inject_css()

    @staticmethod
    def _inject_css():
        st.markdown(GLOBAL_CSS, unsafe_allow_html=True)

    def header(self):
        st.title(self.title)
        if self.subtitle:
            muted(self.subtitle)
