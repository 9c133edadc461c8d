import pytest

from unitgrid.catalog import CatalogRegistry, generate_catalog
from unitgrid.coordinator import DevelopmentState, SelectionCoordinator
from unitgrid.errors import UnknownDevelopment, UnknownUnitReference
from unitgrid.serializer import deserialize, normalize_rule, serialize


def _registry():
    return CatalogRegistry(
        [
            generate_catalog("dev-1", [3, 2], 2, seed=1),
            generate_catalog("dev-2", [2], 3, seed=2),
            generate_catalog("dev-3", [1, 1], 1, seed=3),
        ]
    )


def test_full_selection_serializes_as_empty_list():
    c = SelectionCoordinator(_registry())
    c.activate("dev-2")
    assert serialize(c) == {"dev-2": []}


def test_partial_selection_is_sorted():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    c.deselect_all_in_development("dev-1")
    for unit_id in ["s2_f2_r1", "s1_f1_r2", "s1_f3_r1"]:
        c.toggle_unit("dev-1", unit_id)
    assert serialize(c) == {"dev-1": ["s1_f1_r2", "s1_f3_r1", "s2_f2_r1"]}


def test_emptied_development_is_left_out():
    c = SelectionCoordinator(_registry())
    c.activate("dev-3")
    c.deselect_all_in_development("dev-3")
    c.activate("dev-2")
    assert serialize(c) == {"dev-2": []}
    assert serialize(deserialize(serialize(c), _registry())) == {"dev-2": []}


def test_deserialize_states():
    rule = {"dev-1": ["s1_f1_r1", "s2_f2_r2"], "dev-2": []}
    c = deserialize(rule, _registry())
    assert c.active_developments() == {"dev-1", "dev-2"}
    assert c.state("dev-1") == DevelopmentState.ACTIVE_PARTIAL
    assert c.state("dev-2") == DevelopmentState.ACTIVE_FULL
    assert c.state("dev-3") == DevelopmentState.INACTIVE
    assert c.selection("dev-1").selected_ids() == ["s1_f1_r1", "s2_f2_r2"]


@pytest.mark.parametrize(
    "rule",
    [
        {},
        {"dev-2": []},
        {"dev-1": ["s1_f1_r1", "s2_f2_r2"], "dev-2": [], "dev-3": ["s2_f1_r1"]},
    ],
)
def test_round_trip(rule):
    assert serialize(deserialize(rule, _registry())) == rule


def test_round_trip_from_serialized_state():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    c.toggle_riser("dev-1", 1, 1)
    c.activate("dev-2")
    c.toggle_floor("dev-2", 1, 2)
    rule = serialize(c)
    again = serialize(deserialize(rule, _registry()))
    assert again == rule


def test_explicit_full_enumeration_is_canonicalized():
    catalog = generate_catalog("dev-2", [2], 3, seed=2)
    rule = {"dev-2": sorted(catalog.all_unit_ids())}
    assert serialize(deserialize(rule, _registry())) == {"dev-2": []}


def test_unknown_unit_strict_raises():
    with pytest.raises(UnknownUnitReference) as exc:
        deserialize({"dev-1": ["s1_f1_r1", "s4_f1_r1"]}, _registry())
    assert exc.value.development_id == "dev-1"
    assert exc.value.unit_ids == ["s4_f1_r1"]


def test_unknown_unit_lenient_drops_and_reports():
    c = deserialize({"dev-1": ["s1_f1_r1", "s4_f1_r1"]}, _registry(), strict=False)
    assert c.selection("dev-1").selected_ids() == ["s1_f1_r1"]
    assert c.dropped_references == {"dev-1": ["s4_f1_r1"]}


def test_lenient_load_never_widens_to_full():
    c = deserialize({"dev-1": ["s9_f9_r9"]}, _registry(), strict=False)
    assert c.state("dev-1") == DevelopmentState.ACTIVE_EMPTY


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        deserialize({"dev-1": ["s1_f1_r1", "s1_f1_r1"]}, _registry())


def test_normalize_rule_shapes():
    assert normalize_rule(None) == {}
    assert normalize_rule([]) == {}
    assert normalize_rule(["s1_f1_r1"], "dev-1") == {"dev-1": ["s1_f1_r1"]}
    assert normalize_rule({"dev-1": None}) == {"dev-1": []}
    with pytest.raises(ValueError):
        normalize_rule(["s1_f1_r1"])


def test_unknown_development_strict_raises():
    with pytest.raises(UnknownDevelopment) as exc:
        deserialize({"dev-1": [], "dev-16": ["s1_f1_r1"]}, _registry())
    assert exc.value.development_id == "dev-16"


def test_development_outside_browsable_set_strict_raises():
    with pytest.raises(UnknownDevelopment):
        deserialize({"dev-2": []}, _registry(), development_ids=["dev-1"])


def test_unknown_development_lenient_is_skipped():
    rule = {"dev-1": [], "dev-16": ["s1_f1_r1"], "dev-2": ["s1_f1_r1"]}
    c = deserialize(rule, _registry(), development_ids=["dev-1", "dev-3"], strict=False)
    assert c.active_developments() == {"dev-1"}
    assert c.dropped_developments == ["dev-16", "dev-2"]
    assert serialize(c) == {"dev-1": []}
