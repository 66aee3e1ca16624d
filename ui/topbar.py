import streamlit as st

from core.i18n import LANGUAGES, t
from villaplan import __version__


def render_topbar() -> str:
    """Render the sticky top bar and return the selected language."""
    st.markdown(
        """
        <style>
        .villaplan-topbar {position:sticky; top:0; background-color:white; z-index:100; padding:4px 8px; border-bottom:1px solid #ddd;}
        .villaplan-topbar div[data-testid="stHorizontalBlock"] {align-items:center;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state.setdefault("ui_prefs", {})
    prefs = st.session_state["ui_prefs"]
    current = prefs.get("language", "en")
    if current not in LANGUAGES:
        current = "en"
    with st.container():
        st.markdown('<div class="villaplan-topbar">', unsafe_allow_html=True)
        left, right = st.columns([3, 1])
        with left:
            st.markdown(f"**VILLAPLAN v{__version__}**")
            st.caption(t("Home purchase & renovation affordability", current))
        with right:
            prefs["language"] = st.selectbox(
                t("Lang", current),
                LANGUAGES,
                key="ui_lang",
                index=LANGUAGES.index(current),
            )
        st.markdown("</div>", unsafe_allow_html=True)
    return prefs["language"]
