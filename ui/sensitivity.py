import streamlit as st
from pydantic import ValidationError

from core.i18n import t
from villaplan.models import FinancialInputs, Summary
from villaplan.sensitivity import DEFAULT_SENSITIVITY_CONFIG, generate_grid, grid_frame, tier_frame

TIER_CSS = {
    "green": "background-color: #dcfce7; color: #14532d",
    "yellow": "background-color: #fef9c3; color: #713f12",
    "orange": "background-color: #ffedd5; color: #7c2d12",
    "red": "background-color: #fee2e2; color: #7f1d1d",
}


def render_sensitivity_config(lang: str = "en"):
    """Sweep bounds editor; returns the raw values."""
    cfg = dict(DEFAULT_SENSITIVITY_CONFIG.model_dump())
    cfg.update(st.session_state.get("sensitivity_config", {}))
    c1, c2, c3 = st.columns(3)
    cfg["min_amount"] = c1.number_input(t("Min amount", lang), value=float(cfg["min_amount"]), step=25000.0, key="sens_min_amount")
    cfg["max_amount"] = c2.number_input(t("Max amount", lang), value=float(cfg["max_amount"]), step=25000.0, key="sens_max_amount")
    cfg["step_amount"] = c3.number_input(t("Amount step", lang), value=float(cfg["step_amount"]), step=5000.0, key="sens_step_amount")
    c1, c2, c3 = st.columns(3)
    cfg["min_rate"] = c1.number_input(t("Min rate %", lang), value=float(cfg["min_rate"]), step=0.25, key="sens_min_rate")
    cfg["max_rate"] = c2.number_input(t("Max rate %", lang), value=float(cfg["max_rate"]), step=0.25, key="sens_max_rate")
    cfg["step_rate"] = c3.number_input(t("Rate step", lang), value=float(cfg["step_rate"]), step=0.05, key="sens_step_rate")
    st.session_state["sensitivity_config"] = cfg
    return cfg


def render_sensitivity_view(inputs: FinancialInputs, summary: Summary, lang: str = "en"):
    """Heatmap of bank payments; red cells exceed the comfortable DTI."""
    cfg = render_sensitivity_config(lang)
    try:
        grid = generate_grid(cfg, inputs.bank_term_years, summary.family_monthly, inputs.net_income_monthly)
    except (ValidationError, ValueError) as exc:
        st.error(f"{t('Invalid sensitivity settings', lang)}: {exc}")
        return None

    payments = grid_frame(grid)
    tiers = tier_frame(grid)
    payments.columns = [f"{rate:.2f}%" for rate in payments.columns]
    tiers.columns = payments.columns
    styled = payments.style.format("€{:,.0f}").apply(lambda _: tiers.replace(TIER_CSS), axis=None)
    st.dataframe(styled, use_container_width=True)
    st.caption(t("Red: DTI above 45% including the family loan.", lang))
    return grid
