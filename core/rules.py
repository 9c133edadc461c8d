from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from unitgrid.coordinator import DevelopmentState, SelectionCoordinator


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_targeting(coordinator: SelectionCoordinator) -> List[RuleResult]:
    res: List[RuleResult] = []

    active = sorted(coordinator.active_developments())
    empty = coordinator.empty_developments()
    if len(active) == len(empty):
        res.append(
            RuleResult(
                code="TARGET_NO_DEVELOPMENTS",
                severity="critical",
                message="No development selected; the program will not apply anywhere.",
            )
        )

    for dev_id in empty:
        res.append(
            RuleResult(
                code="TARGET_EMPTY_SELECTION",
                severity="warn",
                message="Development is active but no units are selected.",
                context={"development_id": dev_id},
            )
        )

    for dev_id in sorted(coordinator.dropped_developments):
        res.append(
            RuleResult(
                code="TARGET_DROPPED_DEVELOPMENTS",
                severity="warn",
                message="Saved rule named a development that is no longer available; it was removed.",
                context={"development_id": dev_id},
            )
        )

    for dev_id, unit_ids in sorted(coordinator.dropped_references.items()):
        res.append(
            RuleResult(
                code="TARGET_DROPPED_UNITS",
                severity="warn",
                message="Saved selection referenced units that no longer exist; they were removed.",
                context={"development_id": dev_id, "unit_ids": list(unit_ids)},
            )
        )

    for dev_id in active:
        if coordinator.state(dev_id) == DevelopmentState.ACTIVE_PARTIAL:
            summary = coordinator.selection_summary(dev_id)
            res.append(
                RuleResult(
                    code="TARGET_PARTIAL",
                    severity="info",
                    message="Program applies to part of the development.",
                    context={
                        "development_id": dev_id,
                        "selected": summary.count,
                        "total": summary.total,
                    },
                )
            )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
