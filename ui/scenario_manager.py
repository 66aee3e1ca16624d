import streamlit as st

from core.i18n import t
from core.storage import ScenarioImportError, ScenarioStore, StorageError
from ui.inputs_form import load_into_form


def _open(store: ScenarioStore, scenario_id: str):
    scenario = store.get(scenario_id)
    if scenario is not None:
        load_into_form(scenario.inputs)
        st.session_state["active_scenario_id"] = scenario.id


def open_default_once(store: ScenarioStore):
    """On the first run of a session, open the default plan (seeding one)."""
    if st.session_state.get("scenarios_initialized"):
        return
    st.session_state["scenarios_initialized"] = True
    store.initialize_default()
    if "inputs" not in st.session_state:
        default = store.get_default()
        if default is not None:
            load_into_form(default.inputs, auto_bank=True)
            st.session_state["active_scenario_id"] = default.id


def render_scenario_sidebar(store: ScenarioStore, inputs, lang: str = "en"):
    """Sidebar to save, open, rename, duplicate, delete and move saved plans."""
    st.sidebar.header(t("Scenarios", lang))
    scenarios = store.list()
    default_id = store.get_default_id()
    try:
        name = st.sidebar.text_input(t("New scenario name", lang), value=inputs.project_name, key="new_scenario_name")
        if st.sidebar.button(t("Save as new", lang), key="save_scenario"):
            created = store.create(name or inputs.project_name, inputs)
            st.session_state["active_scenario_id"] = created.id
            st.rerun()

        if not scenarios:
            st.sidebar.caption(t("No saved scenarios yet.", lang))
        labels = {s.id: s.name + (" ★" if s.id == default_id else "") for s in scenarios}
        active = st.session_state.get("active_scenario_id")
        ids = list(labels)
        if ids:
            selected = st.sidebar.selectbox(
                t("Saved scenarios", lang),
                ids,
                index=ids.index(active) if active in ids else 0,
                format_func=labels.get,
                key="selected_scenario",
            )
            c1, c2 = st.sidebar.columns(2)
            c1.button(t("Open", lang), key="open_scenario", on_click=_open, args=(store, selected))
            if c2.button(t("Update", lang), key="update_scenario"):
                store.update(selected, inputs=inputs)
                st.sidebar.success(t("Scenario updated.", lang))
            c1, c2 = st.sidebar.columns(2)
            if c1.button(t("Duplicate", lang), key="duplicate_scenario"):
                store.duplicate(selected)
                st.rerun()
            if c2.button(t("Delete", lang), key="delete_scenario"):
                store.delete(selected)
                st.rerun()
            new_name = st.sidebar.text_input(t("Rename to", lang), key="rename_scenario_name")
            c1, c2 = st.sidebar.columns(2)
            if c1.button(t("Rename", lang), key="rename_scenario") and new_name:
                store.rename(selected, new_name)
                st.rerun()
            if c2.button(t("Make default", lang), key="default_scenario"):
                store.set_default(selected)
                st.rerun()

        st.sidebar.download_button(
            t("Export scenarios", lang), store.export_json(), "scenarios.json", "application/json", key="dl_scenarios"
        )
        upload = st.sidebar.file_uploader(t("Import scenarios", lang), type=["json"], key="import_scenarios")
        merge = st.sidebar.checkbox(t("Merge with existing", lang), value=True, key="import_merge")
        if upload is not None and st.sidebar.button(t("Import", lang), key="do_import"):
            count = store.import_json(upload.getvalue().decode("utf-8"), merge=merge)
            st.sidebar.success(f"{t('Imported scenarios', lang)}: {count}")
    except ScenarioImportError as exc:
        st.sidebar.error(str(exc))
    except StorageError as exc:
        st.sidebar.error(str(exc))
