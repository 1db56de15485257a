"""Boundary adapter from user-defined unit types to the four canonical slots."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from .models import UNIT_TYPES, FloorPlanData, UnitConfiguration, UnitTypeConfig


class DynamicUnitType(BaseModel):
    """A unit type as a user defines it: free id, name and colour."""

    id: str
    name: str
    area: float = Field(..., gt=0)
    percentage: float = Field(..., ge=0, le=100)
    color: Optional[str] = None
    corner_eligible: Optional[bool] = None


class TypeMapping(BaseModel):
    config: UnitConfiguration
    colors: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, DynamicUnitType] = Field(default_factory=dict)


def to_unit_configuration(types: Sequence[DynamicUnitType]) -> TypeMapping:
    """Map 1-4 user types onto the canonical slots by ascending area.

    Types fill the largest slots first, so a two-type mix lands on 2BR and
    3BR. Unused smaller slots get a zero share and the smallest given area.
    """
    if not types:
        raise ValueError("at least one unit type is required")
    if len(types) > len(UNIT_TYPES):
        raise ValueError(f"at most {len(UNIT_TYPES)} unit types are supported, got {len(types)}")
    ids = [t.id for t in types]
    if len(set(ids)) != len(ids):
        raise ValueError("unit type ids must be unique")

    ordered: List[DynamicUnitType] = sorted(types, key=lambda t: t.area)
    slots = UNIT_TYPES[len(UNIT_TYPES) - len(ordered):]
    floor_area = ordered[0].area

    mix: Dict[str, UnitTypeConfig] = {
        slot: UnitTypeConfig(percentage=0, area=floor_area, corner_eligible=False) for slot in UNIT_TYPES
    }
    colors: Dict[str, str] = {}
    labels: Dict[str, DynamicUnitType] = {}
    for slot, unit_type in zip(slots, ordered):
        mix[slot] = UnitTypeConfig(
            percentage=unit_type.percentage, area=unit_type.area, corner_eligible=unit_type.corner_eligible
        )
        if unit_type.color:
            colors[slot] = unit_type.color
        labels[slot] = unit_type
    return TypeMapping(config=UnitConfiguration(mix=mix), colors=colors, labels=labels)


def apply_type_labels(plan: FloorPlanData, mapping: TypeMapping) -> FloorPlanData:
    """Copy of ``plan`` with unit ids/names and stats keyed by the user's types."""
    units = []
    for unit in plan.units:
        label = mapping.labels.get(unit.type)
        if label is None:
            units.append(unit)
            continue
        units.append(unit.model_copy(update={"type_id": label.id, "type_name": label.name}))
    counts = {
        mapping.labels[slot].id: plan.stats.unit_counts.get(slot, 0)
        for slot in UNIT_TYPES
        if slot in mapping.labels
    }
    stats = plan.stats.model_copy(update={"unit_counts": counts})
    return plan.model_copy(update={"units": units, "stats": stats})
