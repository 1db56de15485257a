"""Apartment floorplate layout generator."""

from .models import (  # noqa: F401
    DEFAULT_UNIT_CONFIG,
    EGRESS_SPRINKLERED,
    EGRESS_UNSPRINKLERED,
    BuildingFootprint,
    EgressConfig,
    FloorPlanData,
    GeometryOptions,
    LayoutOption,
    UnitConfiguration,
    UnitTypeConfig,
)
from .generator import generate_floorplate, generate_floorplate_variants  # noqa: F401
from .constraints import validate_layout  # noqa: F401
from .adapters import DynamicUnitType, apply_type_labels, to_unit_configuration  # noqa: F401
from .events import EventLog  # noqa: F401

__all__ = [
    "DEFAULT_UNIT_CONFIG",
    "EGRESS_SPRINKLERED",
    "EGRESS_UNSPRINKLERED",
    "BuildingFootprint",
    "EgressConfig",
    "FloorPlanData",
    "GeometryOptions",
    "LayoutOption",
    "UnitConfiguration",
    "UnitTypeConfig",
    "generate_floorplate",
    "generate_floorplate_variants",
    "validate_layout",
    "DynamicUnitType",
    "apply_type_labels",
    "to_unit_configuration",
    "EventLog",
]
