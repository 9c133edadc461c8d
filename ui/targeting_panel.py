from typing import Dict, Optional

import streamlit as st

from core.rules import has_blocking
from unitgrid.coordinator import DevelopmentState
from unitgrid.errors import TargetingError
from unitgrid.models import MortgageProgram
from unitgrid.reporting import targeting_label
from unitgrid.session import TargetingSession, open_targeting

SESSION_KEY = "targeting_session"
RESULT_KEY = "targeting_result"

STATE_LABELS = {
    DevelopmentState.ACTIVE_FULL: "all units",
    DevelopmentState.ACTIVE_PARTIAL: "partial",
    DevelopmentState.ACTIVE_EMPTY: "no units",
}


def _session() -> TargetingSession:
    return st.session_state[SESSION_KEY]


def _run(action, *args) -> None:
    """Apply a coordinator action from a widget callback."""
    try:
        action(*args)
    except TargetingError as exc:
        st.session_state["targeting_error"] = str(exc)
    else:
        st.session_state.pop("targeting_error", None)


def _bulk(dev_id: str, what: str) -> None:
    c = _session().coordinator
    section = int(st.session_state[f"{dev_id}_section"])
    if what == "floor":
        _run(c.toggle_floor, dev_id, section, int(st.session_state[f"{dev_id}_floor"]))
    elif what == "riser":
        _run(c.toggle_riser, dev_id, section, int(st.session_state[f"{dev_id}_riser"]))
    elif what == "section":
        _run(c.toggle_section, dev_id, section)
    elif what == "development":
        _run(c.toggle_development, dev_id)
    elif what == "select_all":
        _run(c.select_all_in_development, dev_id)
    elif what == "deselect_all":
        _run(c.deselect_all_in_development, dev_id)
    elif what == "unit":
        _run(c.toggle_unit, dev_id, st.session_state.get(f"{dev_id}_unit", "").strip())


def _sync_developments() -> None:
    c = _session().coordinator
    chosen = set(st.session_state.get("tgt_devs", []))
    for dev_id in sorted(c.active_developments() - chosen):
        c.deactivate(dev_id)
    for dev_id in sorted(chosen - c.active_developments()):
        _run(c.activate, dev_id)


def _render_development(dev_id: str, name: str) -> None:
    c = _session().coordinator
    catalog = c.catalog(dev_id)
    summary = c.selection_summary(dev_id)
    with st.expander(f"{name}: {STATE_LABELS[c.state(dev_id)]}", expanded=True):
        st.markdown(f"**{dev_id} selected:** {summary.count} of {summary.total}")
        c1, c2, c3 = st.columns(3)
        section = c1.number_input(
            "Section", min_value=1, max_value=catalog.sections_count, value=1, step=1, key=f"{dev_id}_section"
        )
        height = catalog.section_height(int(section))
        floor_key = f"{dev_id}_floor"
        if st.session_state.get(floor_key, 1) > height:
            del st.session_state[floor_key]
        c2.number_input(
            "Floor",
            min_value=1,
            max_value=height,
            value=1,
            step=1,
            key=floor_key,
        )
        c3.number_input(
            "Riser", min_value=1, max_value=catalog.units_per_floor, value=1, step=1, key=f"{dev_id}_riser"
        )
        b = st.columns(6)
        b[0].button("Toggle floor", key=f"{dev_id}_toggle_floor", on_click=_bulk, args=(dev_id, "floor"))
        b[1].button("Toggle riser", key=f"{dev_id}_toggle_riser", on_click=_bulk, args=(dev_id, "riser"))
        b[2].button("Toggle section", key=f"{dev_id}_toggle_section", on_click=_bulk, args=(dev_id, "section"))
        b[3].button(
            "Toggle development", key=f"{dev_id}_toggle_development", on_click=_bulk, args=(dev_id, "development")
        )
        b[4].button("Select all", key=f"{dev_id}_select_all", on_click=_bulk, args=(dev_id, "select_all"))
        b[5].button("Deselect all", key=f"{dev_id}_deselect_all", on_click=_bulk, args=(dev_id, "deselect_all"))
        u1, u2 = st.columns([3, 1])
        u1.text_input("Unit id", key=f"{dev_id}_unit", placeholder="s1_f1_r1")
        u2.button("Toggle unit", key=f"{dev_id}_toggle_unit", on_click=_bulk, args=(dev_id, "unit"))


def render_targeting_panel(
    catalogs,
    program: MortgageProgram,
    developments: Dict[str, str],
) -> Optional[MortgageProgram]:
    """Render the targeting editor for ``program``.

    ``developments`` maps browsable development ids to display names.
    Returns the updated program once the operator confirms.
    """
    session = st.session_state.get(SESSION_KEY)
    if session is None or not session.is_open or session.program.id != program.id:
        session = open_targeting(catalogs, list(developments), program)
        st.session_state[SESSION_KEY] = session
        st.session_state["tgt_devs"] = sorted(session.coordinator.active_developments())

    st.subheader(f"Units for {program.name}")
    st.multiselect(
        "Developments",
        options=list(developments),
        format_func=lambda d: developments.get(d, d),
        key="tgt_devs",
        on_change=_sync_developments,
    )
    if st.session_state.get("targeting_error"):
        st.error(st.session_state["targeting_error"])

    coordinator = session.coordinator
    for dev_id in sorted(coordinator.active_developments()):
        _render_development(dev_id, developments.get(dev_id, dev_id))

    results = session.warnings()
    for r in results:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")
    st.caption(f"Saved as: {targeting_label(session.preview())}")

    override = ""
    if has_blocking(results):
        override = st.text_input("Override reason", key="tgt_override")

    c1, c2 = st.columns(2)
    confirmed = c1.button("Confirm selection", key="tgt_confirm", disabled=has_blocking(results) and not override)
    cancelled = c2.button("Cancel", key="tgt_cancel")
    if confirmed:
        updated = session.confirm(override_reason=override or None)
        st.session_state[RESULT_KEY] = updated.model_dump()
        st.success(f"Saved: {targeting_label(updated.target_units)}")
        return updated
    if cancelled:
        session.cancel()
        st.session_state.pop(RESULT_KEY, None)
    return None
