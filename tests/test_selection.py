import pytest

from unitgrid.catalog import generate_catalog
from unitgrid.errors import UnknownUnitReference
from unitgrid.selection import UnitSelectionSet


def _catalog():
    return generate_catalog("dev-1", [3, 2], 2, seed=1)


def test_new_selection_is_full():
    sel = UnitSelectionSet(_catalog())
    assert sel.is_full()
    assert sel.size() == 10


def test_toggle_flips_membership():
    sel = UnitSelectionSet(_catalog())
    assert sel.toggle("s1_f1_r1") is False
    assert not sel.contains("s1_f1_r1")
    assert not sel.is_full()
    assert sel.toggle("s1_f1_r1") is True
    assert sel.is_full()


def test_toggle_foreign_unit_is_noop():
    sel = UnitSelectionSet(_catalog())
    assert sel.toggle("s9_f1_r1") is None
    assert sel.size() == 10


def test_select_and_deselect_all():
    sel = UnitSelectionSet(_catalog(), [])
    assert sel.is_empty()
    sel.select_all()
    assert sel.is_full()
    sel.deselect_all()
    assert sel.size() == 0
    assert not sel.is_full()


def test_initial_ids_must_exist():
    with pytest.raises(UnknownUnitReference) as exc:
        UnitSelectionSet(_catalog(), ["s1_f1_r1", "s7_f1_r1"])
    assert exc.value.unit_ids == ["s7_f1_r1"]
    assert exc.value.development_id == "dev-1"


def test_copy_is_independent():
    sel = UnitSelectionSet(_catalog(), ["s1_f1_r1"])
    other = sel.copy()
    other.toggle("s1_f1_r2")
    assert sel.selected_ids() == ["s1_f1_r1"]
    assert other.selected_ids() == ["s1_f1_r1", "s1_f1_r2"]
