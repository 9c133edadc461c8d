from __future__ import annotations

from typing import Dict, List

import pandas as pd

from unitgrid.catalog import BuildingCatalog
from unitgrid.coordinator import SelectionCoordinator
from unitgrid.selection import UnitSelectionSet

FRAME_COLUMNS = [
    "development_id",
    "unit_id",
    "number",
    "section",
    "floor",
    "riser",
    "rooms",
    "area",
    "price",
    "selected",
]


def selection_frame(coordinator: SelectionCoordinator) -> pd.DataFrame:
    """One row per unit of every active development with a ``selected`` flag."""

    rows: List[Dict] = []
    for dev_id in sorted(coordinator.active_developments()):
        selection = coordinator.selection(dev_id)
        for u in selection.catalog.units():
            rows.append(
                {
                    "development_id": dev_id,
                    "unit_id": u.id,
                    "number": u.number,
                    "section": u.section,
                    "floor": u.floor,
                    "riser": u.riser,
                    "rooms": u.rooms,
                    "area": u.area,
                    "price": u.price,
                    "selected": selection.contains(u.id),
                }
            )
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def floor_matrix(selection: UnitSelectionSet, catalog: BuildingCatalog, section: int) -> pd.DataFrame:
    """Floors x risers table of membership flags, top floor first."""

    floors = list(reversed(catalog.floors(section)))
    data = {
        riser: [selection.contains(u.id) for u in reversed(catalog.units_in_riser(section, riser))]
        for riser in range(1, catalog.units_per_floor + 1)
    }
    return pd.DataFrame(data, index=pd.Index(floors, name="floor"))


def targeting_label(rule: Dict[str, List[str]]) -> str:
    """Short label used next to a program in the bank list."""

    if not rule:
        return "not targeted"
    if all(len(ids) == 0 for ids in rule.values()):
        return "all units"
    return f"{sum(len(ids) for ids in rule.values())} units"
