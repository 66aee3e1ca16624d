from streamlit.testing.v1 import AppTest


def summary_app():
    from ui.summary_cards import render_summary_cards
    from villaplan.calculators import DEFAULT_INPUTS, summarize

    render_summary_cards(summarize(DEFAULT_INPUTS))


def inputs_app():
    from ui.inputs_form import render_inputs_form

    render_inputs_form()


def advisor_app():
    from ui.advisor_panel import render_advisor_panel
    from villaplan.calculators import DEFAULT_INPUTS, summarize

    render_advisor_panel(DEFAULT_INPUTS, summarize(DEFAULT_INPUTS))


def test_summary_cards_show_verdict_and_totals():
    at = AppTest.from_function(summary_app)
    at.run()
    assert not at.exception
    assert at.error[0].value == "Plan is not affordable as entered."
    total = next(m for m in at.metric if m.label == "Total project")
    assert total.value == "€1.223.000"


def test_inputs_form_recomputes_bank_loan():
    at = AppTest.from_function(inputs_app)
    at.run()
    assert not at.exception
    assert at.session_state["inputs"]["bank_loan_amount"] == 993000
    at.number_input(key="in_purchase_price").set_value(800000.0).run()
    assert at.session_state["inputs"]["purchase_price"] == 800000
    assert at.session_state["inputs"]["bank_loan_amount"] == 1095000


def test_inputs_form_manual_bank_loan():
    at = AppTest.from_function(inputs_app)
    at.run()
    at.checkbox(key="in_auto_bank_loan").uncheck().run()
    at.number_input(key="in_bank_loan_amount").set_value(850000.0).run()
    assert at.session_state["inputs"]["bank_loan_amount"] == 850000
    assert at.session_state["auto_bank_loan"] is False


def test_advisor_panel_lists_recommendations():
    at = AppTest.from_function(advisor_app)
    at.run()
    assert not at.exception
    assert at.error[0].value.startswith("High risk")
    assert any(md.value.startswith("1. DTI is too high") for md in at.markdown)
