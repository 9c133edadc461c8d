"""Per-development selection state for the targeting rule being edited."""
from __future__ import annotations

import enum
import logging
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from unitgrid import bulk
from unitgrid.bulk import BulkResult
from unitgrid.catalog import BuildingCatalog, as_lookup
from unitgrid.errors import DevelopmentNotActive, UnknownDevelopment
from unitgrid.selection import UnitSelectionSet

logger = logging.getLogger(__name__)


class DevelopmentState(str, enum.Enum):
    INACTIVE = "inactive"
    ACTIVE_FULL = "active_full"
    ACTIVE_PARTIAL = "active_partial"
    ACTIVE_EMPTY = "active_empty"


class SelectionSummary(BaseModel):
    development_id: str
    count: int
    total: int
    is_full: bool


class SelectionCoordinator:
    """Owns one :class:`UnitSelectionSet` per active development.

    ``catalogs`` is a :class:`~unitgrid.catalog.CatalogRegistry`, a dict or a
    ``development_id -> BuildingCatalog`` callable.  ``development_ids``
    optionally limits which developments may be activated.  A new coordinator
    has no active developments: each one must be opted in explicitly.
    """

    def __init__(self, catalogs, development_ids: Optional[Iterable[str]] = None) -> None:
        self._lookup = as_lookup(catalogs)
        self.development_ids = None if development_ids is None else list(development_ids)
        self._selections: Dict[str, UnitSelectionSet] = {}
        # unit ids dropped by a lenient load, keyed by development
        self.dropped_references: Dict[str, List[str]] = {}
        # development keys of a lenient load that could not be opened
        self.dropped_developments: List[str] = []

    # -- lifecycle --------------------------------------------------------

    def catalog(self, development_id: str) -> BuildingCatalog:
        if self.development_ids is not None and development_id not in self.development_ids:
            raise UnknownDevelopment(development_id)
        try:
            return self._lookup(development_id)
        except KeyError:
            raise UnknownDevelopment(development_id, "has no catalog") from None

    def activate(self, development_id: str) -> UnitSelectionSet:
        if development_id in self._selections:
            return self._selections[development_id]
        selection = UnitSelectionSet(self.catalog(development_id))
        self._selections[development_id] = selection
        logger.debug("Activated %s with %d units", development_id, selection.size())
        return selection

    def deactivate(self, development_id: str) -> None:
        if self._selections.pop(development_id, None) is not None:
            logger.debug("Deactivated %s", development_id)
        self.dropped_references.pop(development_id, None)

    def is_active(self, development_id: str) -> bool:
        return development_id in self._selections

    def active_developments(self) -> set:
        return set(self._selections)

    def state(self, development_id: str) -> DevelopmentState:
        selection = self._selections.get(development_id)
        if selection is None:
            return DevelopmentState.INACTIVE
        if selection.is_full():
            return DevelopmentState.ACTIVE_FULL
        if selection.is_empty():
            return DevelopmentState.ACTIVE_EMPTY
        return DevelopmentState.ACTIVE_PARTIAL

    def selection(self, development_id: str) -> UnitSelectionSet:
        """Return a copy of the development's selection for display."""
        return self._require(development_id).copy()

    def _require(self, development_id: str) -> UnitSelectionSet:
        try:
            return self._selections[development_id]
        except KeyError:
            raise DevelopmentNotActive(development_id) from None

    def _log_change(self, development_id: str, what: str, result=None):
        logger.debug(
            "%s in %s -> %d selected", what, development_id, self._selections[development_id].size()
        )
        return result

    # -- mutations --------------------------------------------------------

    def toggle_unit(self, development_id: str, unit_id: str) -> Optional[bool]:
        selected = self._require(development_id).toggle(unit_id)
        return self._log_change(development_id, f"toggle unit {unit_id}", selected)

    def toggle_floor(self, development_id: str, section: int, floor: int) -> BulkResult:
        selection = self._require(development_id)
        result = bulk.toggle_floor(selection, selection.catalog, section, floor)
        return self._log_change(development_id, f"{result.action} floor {section}/{floor}", result)

    def toggle_riser(self, development_id: str, section: int, riser: int) -> BulkResult:
        selection = self._require(development_id)
        result = bulk.toggle_riser(selection, selection.catalog, section, riser)
        return self._log_change(development_id, f"{result.action} riser {section}/{riser}", result)

    def toggle_section(self, development_id: str, section: int) -> BulkResult:
        selection = self._require(development_id)
        result = bulk.toggle_section(selection, selection.catalog, section)
        return self._log_change(development_id, f"{result.action} section {section}", result)

    def toggle_development(self, development_id: str) -> BulkResult:
        selection = self._require(development_id)
        result = bulk.toggle_development(selection, selection.catalog)
        return self._log_change(development_id, f"{result.action} development", result)

    def select_all_in_development(self, development_id: str) -> None:
        self._require(development_id).select_all()
        self._log_change(development_id, "select all")

    def deselect_all_in_development(self, development_id: str) -> None:
        self._require(development_id).deselect_all()
        self._log_change(development_id, "deselect all")

    def replace_selection(self, development_id: str, unit_ids: Iterable[str]) -> None:
        """Set the exact membership of an active development.

        Raises ``UnknownUnitReference`` when an id is not in the catalog.
        """
        current = self._require(development_id)
        self._selections[development_id] = UnitSelectionSet(current.catalog, unit_ids)

    # -- queries ----------------------------------------------------------

    def selection_summary(self, development_id: str) -> SelectionSummary:
        selection = self._require(development_id)
        return SelectionSummary(
            development_id=development_id,
            count=selection.size(),
            total=selection.catalog.unit_count(),
            is_full=selection.is_full(),
        )

    def empty_developments(self) -> List[str]:
        return sorted(d for d, s in self._selections.items() if s.is_empty())

    def total_selected(self) -> int:
        return sum(s.size() for s in self._selections.values())

    def __repr__(self) -> str:
        return f"SelectionCoordinator(active={sorted(self._selections)})"
