from __future__ import annotations
import logging
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from unitgrid.presets import LEGACY_DEVELOPMENT

logger = logging.getLogger(__name__)

TargetingRule = Dict[str, List[str]]


def normalize_rule(
    rule: Union[TargetingRule, List[str], None], default_development: Optional[str] = None
) -> TargetingRule:
    """Coerce older rule shapes to the development mapping.

    Early program records stored a flat list of unit ids for a single
    building.  An empty flat list carries no development and becomes ``{}``;
    a non-empty one is attributed to ``default_development``.
    """

    if rule is None:
        return {}
    if isinstance(rule, dict):
        return {str(k): list(v or []) for k, v in rule.items()}
    if isinstance(rule, (list, tuple)):
        if not rule:
            return {}
        if default_development is None:
            raise ValueError("a flat unit list needs a default development")
        return {default_development: list(rule)}
    raise TypeError(f"unsupported targeting rule type: {type(rule).__name__}")


class HousingUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    development_id: str = ""
    section: int
    floor: int
    riser: int
    number: str = ""
    rooms: int = 1
    area: float = 0.0
    price: Optional[float] = None


class MortgageProgram(BaseModel):
    id: str = ""
    name: str = "Standard mortgage"
    rate: float = 0.0
    min_term: int = 1
    max_term: int = 30
    min_down_payment: float = 15.0
    psk_min: float = 0.0
    psk_max: float = 0.0
    conditions: str = ""
    special_conditions: bool = False
    auto_rates: bool = False
    # development id -> unit ids; an empty list means every unit
    target_units: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("target_units", mode="before")
    @classmethod
    def _legacy_target_units(cls, value):
        if value is None:
            return {}
        if not isinstance(value, (list, tuple)):
            return value
        if value:
            logger.warning(
                "Program stores a flat list of %d unit id(s); assigning it to %s",
                len(value),
                LEGACY_DEVELOPMENT,
            )
        return normalize_rule(value, LEGACY_DEVELOPMENT)


class Bank(BaseModel):
    id: str = ""
    name: str = ""
    logo: str = ""
    description: str = ""
    is_active: bool = True
    auto_rates: bool = False
    programs: List[MortgageProgram] = Field(default_factory=list)

    def program(self, program_id: str) -> Optional[MortgageProgram]:
        return next((p for p in self.programs if p.id == program_id), None)
