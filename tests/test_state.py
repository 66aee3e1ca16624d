import json

import streamlit as st

from core import state


def test_save_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    st.session_state["inputs"] = {"purchase_price": 700000.0}
    st.session_state["save_scenario"] = True
    state.save_state()
    data = json.loads(file.read_text())
    assert "save_scenario" not in data
    assert data["inputs"] == {"purchase_price": 700000.0}


def test_load_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text(json.dumps({"ui_prefs": {"language": "nl"}, "in_purchase_price": 1.0}))
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert st.session_state["ui_prefs"] == {"language": "nl"}
    assert "in_purchase_price" not in st.session_state


def test_load_state_survives_corrupt_file(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text("{not json")
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "inputs" not in st.session_state
