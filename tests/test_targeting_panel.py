from streamlit.testing.v1 import AppTest


def panel_app():
    import streamlit as st
    from ui.targeting_panel import render_targeting_panel
    from unitgrid.catalog import CatalogRegistry, generate_catalog
    from unitgrid.models import MortgageProgram

    registry = CatalogRegistry(
        [generate_catalog("dev-1", [3, 2], 2, seed=1), generate_catalog("dev-2", [2], 2, seed=2)]
    )
    program = MortgageProgram(**st.session_state.get("program", {"id": "p1"}))
    render_targeting_panel(registry, program, {"dev-1": "Project 1", "dev-2": "Project 2"})


def _summary(at, dev_id):
    return next(m.value for m in at.markdown if m.value.startswith(f"**{dev_id} selected:**"))


def test_new_program_requires_a_development():
    at = AppTest.from_function(panel_app)
    at.run()
    assert any("TARGET_NO_DEVELOPMENTS" in e.value for e in at.error)
    assert at.button(key="tgt_confirm").disabled


def test_activate_toggle_and_confirm():
    at = AppTest.from_function(panel_app)
    at.run()
    at.multiselect(key="tgt_devs").select("dev-1").run()
    assert _summary(at, "dev-1") == "**dev-1 selected:** 10 of 10"

    at.text_input(key="dev-1_unit").input("s1_f1_r1").run()
    at.button(key="dev-1_toggle_unit").click().run()
    assert _summary(at, "dev-1") == "**dev-1 selected:** 9 of 10"

    at.button(key="dev-1_toggle_floor").click().run()
    assert _summary(at, "dev-1") == "**dev-1 selected:** 8 of 10"

    at.button(key="tgt_confirm").click().run()
    result = at.session_state["targeting_result"]["target_units"]
    assert list(result) == ["dev-1"]
    assert len(result["dev-1"]) == 8


def test_existing_rule_is_loaded():
    at = AppTest.from_function(panel_app)
    at.session_state["program"] = {"id": "p1", "target_units": {"dev-2": ["s1_f1_r1"]}}
    at.run()
    assert at.multiselect(key="tgt_devs").value == ["dev-2"]
    assert _summary(at, "dev-2") == "**dev-2 selected:** 1 of 4"


def test_floor_input_follows_section_height():
    at = AppTest.from_function(panel_app)
    at.session_state["program"] = {"id": "p1", "target_units": {"dev-1": []}}
    at.run()
    assert at.number_input(key="dev-1_floor").max == 3

    at.number_input(key="dev-1_floor").set_value(3).run()
    at.number_input(key="dev-1_section").set_value(2).run()
    floor = at.number_input(key="dev-1_floor")
    assert floor.max == 2
    assert floor.value == 1
    assert not at.exception


def test_rule_with_missing_development_opens_with_warning():
    at = AppTest.from_function(panel_app)
    at.session_state["program"] = {"id": "p1", "target_units": {"dev-1": [], "dev-16": ["s1_f1_r1"]}}
    at.run()
    assert not at.exception
    assert at.multiselect(key="tgt_devs").value == ["dev-1"]
    assert any("TARGET_DROPPED_DEVELOPMENTS" in w.value for w in at.warning)
