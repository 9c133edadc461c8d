from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from unitgrid.catalog import BuildingCatalog
from unitgrid.errors import UnknownUnitReference

logger = logging.getLogger(__name__)


class UnitSelectionSet:
    """Which units of one development a program is restricted to.

    Membership is always a subset of the catalog.  A set holding every
    catalog unit is equivalent to "no restriction" and is what a freshly
    activated development starts with.
    """

    def __init__(self, catalog: BuildingCatalog, unit_ids: Optional[Iterable[str]] = None) -> None:
        self.catalog = catalog
        if unit_ids is None:
            self._ids = set(catalog.all_unit_ids())
            return
        ids = set(unit_ids)
        unknown = ids - catalog.all_unit_ids()
        if unknown:
            raise UnknownUnitReference(catalog.development_id, unknown)
        self._ids = ids

    @property
    def development_id(self) -> str:
        return self.catalog.development_id

    def contains(self, unit_id: str) -> bool:
        return unit_id in self._ids

    __contains__ = contains

    def toggle(self, unit_id: str) -> Optional[bool]:
        """Flip one unit and return its new membership.

        Ids from another catalog are ignored (``None`` is returned).
        """
        if not self.catalog.has_unit(unit_id):
            logger.debug("Ignoring toggle of foreign unit %s in %s", unit_id, self.development_id)
            return None
        if unit_id in self._ids:
            self._ids.discard(unit_id)
            return False
        self._ids.add(unit_id)
        return True

    def add_many(self, unit_ids: Iterable[str]) -> None:
        self._ids.update(u for u in unit_ids if self.catalog.has_unit(u))

    def remove_many(self, unit_ids: Iterable[str]) -> None:
        self._ids.difference_update(unit_ids)

    def select_all(self) -> None:
        self._ids = set(self.catalog.all_unit_ids())

    def deselect_all(self) -> None:
        self._ids = set()

    def size(self) -> int:
        return len(self._ids)

    __len__ = size

    def is_full(self) -> bool:
        return len(self._ids) == self.catalog.unit_count()

    def is_empty(self) -> bool:
        return not self._ids

    def selected_ids(self) -> List[str]:
        return sorted(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self.selected_ids())

    def copy(self) -> "UnitSelectionSet":
        return UnitSelectionSet(self.catalog, self._ids)

    def __repr__(self) -> str:
        return f"UnitSelectionSet({self.development_id!r}, {self.size()}/{self.catalog.unit_count()})"
