"""Conversion between a coordinator and the persisted targeting rule.

The persisted rule is a ``{development_id: [unit_id, ...]}`` mapping.  A full
selection is written as an empty list; a missing key means the development is
not targeted at all.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from unitgrid.coordinator import SelectionCoordinator
from unitgrid.errors import UnknownDevelopment, UnknownUnitReference
from unitgrid.models import TargetingRule, normalize_rule

__all__ = ["TargetingRule", "deserialize", "normalize_rule", "serialize"]

logger = logging.getLogger(__name__)


def serialize(coordinator: SelectionCoordinator) -> TargetingRule:
    """Write the canonical rule for every active development.

    An active development with no units cannot be written as an empty list
    (that reads back as every unit), so it is left out: the program does not
    apply there.
    """
    rule: TargetingRule = {}
    for dev_id in sorted(coordinator.active_developments()):
        selection = coordinator.selection(dev_id)
        if selection.is_empty():
            logger.warning("Development %s has no units selected; leaving it out of the rule", dev_id)
            continue
        rule[dev_id] = [] if selection.is_full() else selection.selected_ids()
    return rule


def deserialize(
    rule: Optional[TargetingRule],
    catalogs,
    development_ids: Optional[Iterable[str]] = None,
    strict: bool = True,
) -> SelectionCoordinator:
    """Rebuild a coordinator from a persisted rule.

    Keys with an empty list are activated with a full selection, keys with ids
    get exactly those ids and developments not mentioned stay inactive.  With
    ``strict`` an unknown id raises ``UnknownUnitReference``; otherwise it is
    dropped, logged and listed in ``coordinator.dropped_references``.  The same
    applies to development keys: strict raises ``UnknownDevelopment``, lenient
    skips the key and lists it in ``coordinator.dropped_developments``.
    """

    coordinator = SelectionCoordinator(catalogs, development_ids)
    for dev_id, unit_ids in (rule or {}).items():
        ids = list(unit_ids or [])
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate unit ids in targeting rule for {dev_id!r}")
        try:
            selection = coordinator.activate(dev_id)
        except UnknownDevelopment:
            if strict:
                raise
            logger.warning("Dropping unknown development %s from targeting rule", dev_id)
            coordinator.dropped_developments.append(dev_id)
            continue
        if not ids:
            continue
        unknown = [u for u in ids if not selection.catalog.has_unit(u)]
        if unknown:
            if strict:
                raise UnknownUnitReference(dev_id, unknown)
            logger.warning(
                "Dropping %d unknown unit id(s) from %s: %s", len(unknown), dev_id, ", ".join(unknown)
            )
            coordinator.dropped_references[dev_id] = sorted(unknown)
            dropped = set(unknown)
            ids = [u for u in ids if u not in dropped]
        coordinator.replace_selection(dev_id, ids)
    return coordinator
