import logging

import streamlit as st

from core.i18n import t
from core.state import load_state, save_state
from core.storage import SCENARIO_FILE, ScenarioStore
from villaplan.calculators import summarize
from villaplan.presets import DISCLAIMER
from ui.advisor_panel import render_advisor_panel
from ui.amortization import loan_schedules, render_amortization_view
from ui.export_panel import render_export_panel
from ui.inputs_form import render_inputs_form
from ui.scenario_manager import open_default_once, render_scenario_sidebar
from ui.sensitivity import render_sensitivity_view
from ui.summary_cards import render_summary_cards
from ui.topbar import render_topbar

logger = logging.getLogger(__name__)

TABS = ["Inputs", "Summary", "Amortization", "Sensitivity", "Advisor", "Export"]


def main():
    st.set_page_config(page_title="VILLAPLAN AFFORDABILITY PLANNER", layout="wide")
    load_state()
    store = ScenarioStore(SCENARIO_FILE)
    open_default_once(store)

    lang = render_topbar()
    st.title(t("Home purchase & renovation affordability", lang))
    st.caption(DISCLAIMER)

    tabs = st.tabs([t(name, lang) for name in TABS])
    with tabs[0]:
        inputs = render_inputs_form(lang)
    summary = summarize(inputs)
    with tabs[1]:
        render_summary_cards(summary, lang)
    with tabs[2]:
        render_amortization_view(inputs, lang)
    with tabs[3]:
        grid = render_sensitivity_view(inputs, summary, lang)
    with tabs[4]:
        render_advisor_panel(inputs, summary, lang)
    with tabs[5]:
        bank, family = loan_schedules(inputs)
        render_export_panel(inputs, summary, bank, family, grid, lang)

    render_scenario_sidebar(store, inputs, lang)
    save_state()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    main()
