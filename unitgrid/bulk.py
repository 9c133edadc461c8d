"""Bulk toggles for floors, risers, sections and whole developments.

Every bulk action follows the same rule: if any unit of the group is
selected the whole group is deselected, otherwise the whole group is
selected.  A partially selected group therefore always collapses to empty
on the next toggle and never to full.
"""
from __future__ import annotations

from typing import Iterable, List, Literal

from pydantic import BaseModel

from unitgrid.catalog import BuildingCatalog
from unitgrid.models import HousingUnit
from unitgrid.selection import UnitSelectionSet


class BulkResult(BaseModel):
    action: Literal["select", "deselect"]
    unit_ids: List[str]


def toggle_group(selection: UnitSelectionSet, units: Iterable[HousingUnit]) -> BulkResult:
    ids = [u.id for u in units]
    if any(selection.contains(i) for i in ids):
        selection.remove_many(ids)
        return BulkResult(action="deselect", unit_ids=ids)
    selection.add_many(ids)
    return BulkResult(action="select", unit_ids=ids)


def toggle_floor(selection: UnitSelectionSet, catalog: BuildingCatalog, section: int, floor: int) -> BulkResult:
    return toggle_group(selection, catalog.units_in_floor(section, floor))


def toggle_riser(selection: UnitSelectionSet, catalog: BuildingCatalog, section: int, riser: int) -> BulkResult:
    return toggle_group(selection, catalog.units_in_riser(section, riser))


def toggle_section(selection: UnitSelectionSet, catalog: BuildingCatalog, section: int) -> BulkResult:
    return toggle_group(selection, catalog.units_in_section(section))


def toggle_development(selection: UnitSelectionSet, catalog: BuildingCatalog) -> BulkResult:
    return toggle_group(selection, catalog.units())
