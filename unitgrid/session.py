"""Editing session handed to the program form.

A session owns a fresh coordinator for one program.  ``confirm`` returns the
updated program record; ``cancel`` drops everything without touching it.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.audit import AuditLog
from core.rules import RuleResult, evaluate_targeting, has_blocking
from unitgrid.coordinator import SelectionCoordinator
from unitgrid.models import MortgageProgram
from unitgrid.serializer import TargetingRule, deserialize, serialize

logger = logging.getLogger(__name__)


class TargetingSession:
    def __init__(
        self,
        coordinator: SelectionCoordinator,
        program: MortgageProgram,
        audit: Optional[AuditLog] = None,
        user: str = "operator",
    ) -> None:
        self._coordinator: Optional[SelectionCoordinator] = coordinator
        self.program = program
        self.audit = audit
        self.user = user
        self.result: Optional[MortgageProgram] = None

    @property
    def is_open(self) -> bool:
        return self._coordinator is not None

    @property
    def coordinator(self) -> SelectionCoordinator:
        if self._coordinator is None:
            raise RuntimeError("targeting session is closed")
        return self._coordinator

    def preview(self) -> TargetingRule:
        return serialize(self.coordinator)

    def warnings(self) -> List[RuleResult]:
        return evaluate_targeting(self.coordinator)

    def confirm(self, override_reason: Optional[str] = None) -> MortgageProgram:
        """Commit the selection and return the updated program.

        Blocking warnings (no development targeted) require an
        ``override_reason``; it is recorded in the audit log.
        """
        results = self.warnings()
        if has_blocking(results) and not override_reason:
            raise ValueError("override_reason required when critical warnings exist")
        rule = serialize(self.coordinator)
        old = self.program.target_units
        updated = self.program.model_copy(update={"target_units": rule}, deep=True)
        if self.audit is not None:
            if old != rule:
                self.audit.record(self.user, "target_units", old, rule)
            if override_reason:
                self.audit.record(self.user, "override_reason", None, override_reason)
        logger.info(
            "Saved targeting for program %s: %d development(s)", self.program.id or "<new>", len(rule)
        )
        self._coordinator = None
        self.result = updated
        return updated

    def cancel(self) -> None:
        logger.debug("Discarded targeting session for program %s", self.program.id or "<new>")
        self._coordinator = None


def open_targeting(
    catalogs,
    development_ids: Optional[Iterable[str]],
    program: MortgageProgram,
    audit: Optional[AuditLog] = None,
    user: str = "operator",
    strict: bool = False,
) -> TargetingSession:
    """Open the targeting editor for ``program``.

    Existing rules are loaded leniently by default so an outdated unit id
    shows up as a warning instead of blocking the editor.
    """
    rule = program.target_units or None
    if rule is None:
        coordinator = SelectionCoordinator(catalogs, development_ids)
    else:
        coordinator = deserialize(rule, catalogs, development_ids, strict=strict)
    return TargetingSession(coordinator, program, audit=audit, user=user)
