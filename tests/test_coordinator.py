import pytest

from unitgrid.catalog import CatalogRegistry, generate_catalog
from unitgrid.coordinator import DevelopmentState, SelectionCoordinator
from unitgrid.errors import DevelopmentNotActive, InvalidCoordinate, UnknownDevelopment
from unitgrid.serializer import serialize


def _registry():
    return CatalogRegistry(
        [
            generate_catalog("dev-1", [3, 2], 2, seed=1),
            generate_catalog("dev-2", [2], 3, seed=2),
        ]
    )


def test_new_coordinator_has_no_active_developments():
    c = SelectionCoordinator(_registry())
    assert c.active_developments() == set()
    assert c.state("dev-1") == DevelopmentState.INACTIVE
    assert serialize(c) == {}


def test_walkthrough_example():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    summary = c.selection_summary("dev-1")
    assert summary.is_full and summary.count == 10

    c.toggle_unit("dev-1", "s1_f1_r1")
    summary = c.selection_summary("dev-1")
    assert summary.count == 9 and not summary.is_full

    result = c.toggle_floor("dev-1", 1, 1)
    assert result.action == "deselect"
    assert c.selection_summary("dev-1").count == 8

    rule = serialize(c)
    assert list(rule) == ["dev-1"]
    assert len(rule["dev-1"]) == 8
    assert "s1_f1_r1" not in rule["dev-1"] and "s1_f1_r2" not in rule["dev-1"]


def test_states():
    c = SelectionCoordinator(_registry())
    c.activate("dev-2")
    assert c.state("dev-2") == DevelopmentState.ACTIVE_FULL
    c.toggle_riser("dev-2", 1, 3)
    assert c.state("dev-2") == DevelopmentState.ACTIVE_PARTIAL
    c.deselect_all_in_development("dev-2")
    assert c.state("dev-2") == DevelopmentState.ACTIVE_EMPTY
    assert c.empty_developments() == ["dev-2"]
    c.select_all_in_development("dev-2")
    assert c.state("dev-2") == DevelopmentState.ACTIVE_FULL


def test_activate_is_noop_when_active():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    c.toggle_unit("dev-1", "s2_f2_r2")
    c.activate("dev-1")
    assert c.selection_summary("dev-1").count == 9


def test_reactivation_starts_full():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    c.toggle_section("dev-1", 1)
    c.deactivate("dev-1")
    assert not c.is_active("dev-1")
    c.activate("dev-1")
    assert c.selection_summary("dev-1").is_full


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.toggle_unit("dev-1", "s1_f1_r1"),
        lambda c: c.toggle_floor("dev-1", 1, 1),
        lambda c: c.toggle_riser("dev-1", 1, 1),
        lambda c: c.toggle_section("dev-1", 1),
        lambda c: c.toggle_development("dev-1"),
        lambda c: c.select_all_in_development("dev-1"),
        lambda c: c.deselect_all_in_development("dev-1"),
        lambda c: c.selection_summary("dev-1"),
    ],
)
def test_mutation_before_activate_raises(call):
    c = SelectionCoordinator(_registry())
    with pytest.raises(DevelopmentNotActive):
        call(c)


def test_bulk_outside_layout_raises_invalid_coordinate():
    c = SelectionCoordinator(_registry())
    c.activate("dev-1")
    with pytest.raises(InvalidCoordinate):
        c.toggle_floor("dev-1", 2, 3)
    assert c.selection_summary("dev-1").is_full


def test_browsable_developments_restrict_activation():
    c = SelectionCoordinator(_registry(), development_ids=["dev-2"])
    c.activate("dev-2")
    with pytest.raises(UnknownDevelopment) as exc:
        c.activate("dev-1")
    assert exc.value.development_id == "dev-1"
    assert isinstance(exc.value, KeyError)


def test_missing_catalog_raises_unknown_development():
    c = SelectionCoordinator(_registry())
    with pytest.raises(UnknownDevelopment, match="has no catalog"):
        c.activate("dev-16")
    assert c.active_developments() == set()


def test_selection_returns_copy():
    c = SelectionCoordinator({"dev-1": generate_catalog("dev-1", [3, 2], 2, seed=1)})
    c.activate("dev-1")
    c.selection("dev-1").deselect_all()
    assert c.selection_summary("dev-1").is_full
    assert c.total_selected() == 10
