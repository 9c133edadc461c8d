"""Building catalog: the physical layout of one development.

A catalog is built once (generated demo data or an inventory feed) and is
read-only afterwards.  Every valid ``(section, floor, riser)`` triple maps to
exactly one :class:`~unitgrid.models.HousingUnit`; lookups outside the layout
raise :class:`~unitgrid.errors.InvalidCoordinate`.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from unitgrid.errors import InvalidCoordinate
from unitgrid.models import HousingUnit
from unitgrid.presets import DEFAULT_LAYOUT, development_ids

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int, int]
CatalogLookup = Callable[[str], "BuildingCatalog"]


def unit_id_for(section: int, floor: int, riser: int) -> str:
    return f"s{section}_f{floor}_r{riser}"


def unit_number_for(section: int, floor: int, riser: int) -> str:
    """Display number: section, two-digit floor, riser (``1032``)."""
    return f"{section}{floor:02d}{riser}"


def rooms_for_riser(riser: int) -> int:
    if riser == 1:
        return 1
    if riser == 2:
        return 2
    return 3


class BuildingCatalog:
    """Immutable description of one development's sections, floors and units."""

    def __init__(
        self,
        development_id: str,
        section_heights: Sequence[int],
        units_per_floor: int,
        units: Iterable[HousingUnit],
    ) -> None:
        if not section_heights:
            raise InvalidCoordinate("a catalog needs at least one section")
        if any(int(h) < 1 for h in section_heights) or int(units_per_floor) < 1:
            raise InvalidCoordinate("section heights and units per floor must be positive")
        self.development_id = development_id
        self._section_heights: Tuple[int, ...] = tuple(int(h) for h in section_heights)
        self.units_per_floor = int(units_per_floor)

        by_id: Dict[str, HousingUnit] = {}
        by_coord: Dict[Coordinate, HousingUnit] = {}
        for unit in units:
            coord = (unit.section, unit.floor, unit.riser)
            self._check(*coord)
            if unit.id in by_id:
                raise InvalidCoordinate(f"duplicate unit id {unit.id!r}")
            if coord in by_coord:
                raise InvalidCoordinate(
                    f"units {by_coord[coord].id!r} and {unit.id!r} share a coordinate",
                    *coord,
                )
            by_id[unit.id] = unit
            by_coord[coord] = unit

        expected = sum(self._section_heights) * self.units_per_floor
        if len(by_coord) != expected:
            missing = [
                c for c in self._coordinates() if c not in by_coord
            ]
            raise InvalidCoordinate(
                f"catalog for {development_id!r} is missing {len(missing)} unit(s), first at {missing[0]}",
                *missing[0],
            )
        self._by_id = by_id
        self._by_coord = by_coord
        self._ids = frozenset(by_id)

    # -- layout -----------------------------------------------------------

    @property
    def sections_count(self) -> int:
        return len(self._section_heights)

    @property
    def section_heights(self) -> Tuple[int, ...]:
        return self._section_heights

    @property
    def max_floors(self) -> int:
        return max(self._section_heights)

    def sections(self) -> List[int]:
        return list(range(1, self.sections_count + 1))

    def section_height(self, section: int) -> int:
        self._check_section(section)
        return self._section_heights[section - 1]

    def floors(self, section: int) -> List[int]:
        return list(range(1, self.section_height(section) + 1))

    def _coordinates(self):
        for s, height in enumerate(self._section_heights, start=1):
            for f in range(1, height + 1):
                for r in range(1, self.units_per_floor + 1):
                    yield (s, f, r)

    def _check_section(self, section: int) -> None:
        if not 1 <= section <= self.sections_count:
            raise InvalidCoordinate(
                f"section {section} outside 1..{self.sections_count}", section=section
            )

    def _check_floor(self, section: int, floor: int) -> None:
        self._check_section(section)
        height = self._section_heights[section - 1]
        if not 1 <= floor <= height:
            raise InvalidCoordinate(
                f"floor {floor} outside 1..{height} in section {section}",
                section=section,
                floor=floor,
            )

    def _check_riser(self, section: int, riser: int) -> None:
        self._check_section(section)
        if not 1 <= riser <= self.units_per_floor:
            raise InvalidCoordinate(
                f"riser {riser} outside 1..{self.units_per_floor}",
                section=section,
                riser=riser,
            )

    def _check(self, section: int, floor: int, riser: int) -> None:
        self._check_floor(section, floor)
        self._check_riser(section, riser)

    # -- lookups ----------------------------------------------------------

    def units_in_floor(self, section: int, floor: int) -> List[HousingUnit]:
        self._check_floor(section, floor)
        return [self._by_coord[(section, floor, r)] for r in range(1, self.units_per_floor + 1)]

    def units_in_riser(self, section: int, riser: int) -> List[HousingUnit]:
        self._check_riser(section, riser)
        height = self._section_heights[section - 1]
        return [self._by_coord[(section, f, riser)] for f in range(1, height + 1)]

    def units_in_section(self, section: int) -> List[HousingUnit]:
        self._check_section(section)
        return [
            self._by_coord[(section, f, r)]
            for f in range(1, self._section_heights[section - 1] + 1)
            for r in range(1, self.units_per_floor + 1)
        ]

    def unit_at(self, section: int, floor: int, riser: int) -> HousingUnit:
        self._check(section, floor, riser)
        return self._by_coord[(section, floor, riser)]

    def unit(self, unit_id: str) -> HousingUnit:
        return self._by_id[unit_id]

    def has_unit(self, unit_id: str) -> bool:
        return unit_id in self._ids

    def units(self) -> List[HousingUnit]:
        return [self._by_coord[c] for c in self._coordinates()]

    def all_unit_ids(self) -> frozenset:
        return self._ids

    def unit_count(self) -> int:
        return len(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return (
            f"BuildingCatalog({self.development_id!r}, sections={list(self._section_heights)}, "
            f"units_per_floor={self.units_per_floor})"
        )


def generate_catalog(
    development_id: str,
    section_heights: Sequence[int] = DEFAULT_LAYOUT["section_heights"],
    units_per_floor: int = DEFAULT_LAYOUT["units_per_floor"],
    seed: Optional[int] = None,
) -> BuildingCatalog:
    """Generate a demo catalog with one unit per coordinate.

    Room count follows the riser (1, 2, then 3 rooms), area falls in
    ``[35, 85)`` and price in ``[5M, 10M)``.  Passing ``seed`` makes the
    attributes reproducible; ids and numbers never depend on it.
    """

    rng = random.Random(seed)
    units = []
    for s, height in enumerate(section_heights, start=1):
        for f in range(1, height + 1):
            for r in range(1, units_per_floor + 1):
                units.append(
                    HousingUnit(
                        id=unit_id_for(s, f, r),
                        development_id=development_id,
                        section=s,
                        floor=f,
                        riser=r,
                        number=unit_number_for(s, f, r),
                        rooms=rooms_for_riser(r),
                        area=35 + rng.random() * 50,
                        price=5_000_000 + rng.random() * 5_000_000,
                    )
                )
    return BuildingCatalog(development_id, section_heights, units_per_floor, units)


def catalog_from_frame(development_id: str, frame: pd.DataFrame) -> BuildingCatalog:
    """Build a catalog from an inventory table.

    ``frame`` needs ``id``, ``section``, ``floor`` and ``riser`` columns;
    ``rooms``, ``area``, ``price`` and ``number`` are optional.  Section heights
    and units per floor are inferred, then the usual coverage check applies,
    so gaps or duplicated coordinates raise ``InvalidCoordinate``.
    """

    required = {"id", "section", "floor", "riser"}
    missing = required - set(frame.columns)
    if missing:
        raise ValueError(f"inventory is missing columns: {', '.join(sorted(missing))}")
    if frame.empty:
        raise InvalidCoordinate(f"inventory for {development_id!r} has no units")

    df = frame.copy()
    for c in ("section", "floor", "riser"):
        df[c] = pd.to_numeric(df[c], errors="raise").astype(int)
    if (df[["section", "floor", "riser"]] < 1).any().any():
        raise InvalidCoordinate("inventory coordinates must start at 1")

    sections_count = int(df["section"].max())
    heights = df.groupby("section")["floor"].max().reindex(
        range(1, sections_count + 1), fill_value=0
    )
    section_heights = [int(h) for h in heights]
    if 0 in section_heights:
        empty = section_heights.index(0) + 1
        raise InvalidCoordinate(f"section {empty} has no units", section=empty)
    units_per_floor = int(df["riser"].max())

    def opt(row, key):
        val = row.get(key)
        return None if val is None or pd.isna(val) else val

    units = []
    for row in df.to_dict("records"):
        s, f, r = int(row["section"]), int(row["floor"]), int(row["riser"])
        number = opt(row, "number")
        rooms = opt(row, "rooms")
        area = opt(row, "area")
        price = opt(row, "price")
        units.append(
            HousingUnit(
                id=str(row["id"]),
                development_id=development_id,
                section=s,
                floor=f,
                riser=r,
                number=str(number) if number is not None else unit_number_for(s, f, r),
                rooms=int(rooms) if rooms is not None else rooms_for_riser(r),
                area=float(area) if area is not None else 0.0,
                price=float(price) if price is not None else None,
            )
        )
    logger.info(
        "Loaded inventory for %s: %d units in %d sections", development_id, len(units), sections_count
    )
    return BuildingCatalog(development_id, section_heights, units_per_floor, units)


class CatalogRegistry:
    """Catalog source keyed by development id.

    Coordinators receive a registry (or any ``development_id -> catalog``
    callable) instead of reading a global, so parallel editing sessions never
    share state.
    """

    def __init__(self, catalogs: Optional[Iterable[BuildingCatalog]] = None) -> None:
        self._catalogs: Dict[str, BuildingCatalog] = {}
        for catalog in catalogs or []:
            self.add(catalog)

    def add(self, catalog: BuildingCatalog) -> None:
        self._catalogs[catalog.development_id] = catalog

    def get_catalog(self, development_id: str) -> BuildingCatalog:
        try:
            return self._catalogs[development_id]
        except KeyError:
            raise KeyError(f"no catalog for development {development_id!r}") from None

    __call__ = get_catalog

    def __contains__(self, development_id: object) -> bool:
        return development_id in self._catalogs

    def development_ids(self) -> List[str]:
        return list(self._catalogs)

    @classmethod
    def demo(
        cls,
        count: int = 15,
        section_heights: Sequence[int] = DEFAULT_LAYOUT["section_heights"],
        units_per_floor: int = DEFAULT_LAYOUT["units_per_floor"],
        seed: Optional[int] = None,
    ) -> "CatalogRegistry":
        registry = cls()
        for i, dev_id in enumerate(development_ids(count)):
            dev_seed = None if seed is None else seed + i
            registry.add(generate_catalog(dev_id, section_heights, units_per_floor, dev_seed))
        logger.debug("Generated %d demo catalogs", count)
        return registry


def as_lookup(catalogs) -> CatalogLookup:
    """Accept a registry, a mapping or a callable and return a lookup."""
    if isinstance(catalogs, CatalogRegistry):
        return catalogs.get_catalog
    if isinstance(catalogs, dict):
        def lookup(development_id: str) -> BuildingCatalog:
            try:
                return catalogs[development_id]
            except KeyError:
                raise KeyError(f"no catalog for development {development_id!r}") from None
        return lookup
    if callable(catalogs):
        return catalogs
    raise TypeError("catalogs must be a CatalogRegistry, a dict or a callable")
