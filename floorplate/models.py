"""Core data models for floorplate layouts."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    DEFAULT_ALIGNMENT,
    DEFAULT_CORE_DEPTH,
    DEFAULT_CORE_WIDTH,
    DEFAULT_CORRIDOR_WIDTH,
    DEFAULT_SEED,
    FEET_TO_METERS,
    SQ_FEET_TO_SQ_METERS,
)

UnitType = Literal["Studio", "1BR", "2BR", "3BR"]
UNIT_TYPES: tuple = ("Studio", "1BR", "2BR", "3BR")

Side = Literal["North", "South"]
Strategy = Literal["balanced", "mixOptimized", "efficiencyOptimized"]
STRATEGIES: tuple = ("balanced", "mixOptimized", "efficiencyOptimized")
Pattern = Literal["desc", "asc", "valley", "valley-inverted", "random"]
CoreRole = Literal["End", "Mid"]
PassFail = Literal["Pass", "Fail"]
EventLevel = Literal["debug", "info", "warning", "error"]
Facade = Literal["left", "right"]


class UnitTypeConfig(BaseModel):
    """Target share and minimum area for one unit type."""

    percentage: float = Field(..., ge=0, le=100)
    area: float = Field(..., gt=0)
    corner_eligible: Optional[bool] = None


class UnitConfiguration(BaseModel):
    """Target mix over the four canonical unit types."""

    mix: Dict[UnitType, UnitTypeConfig]

    @field_validator("mix")
    @classmethod
    def _check_slots(cls, value: Dict[str, UnitTypeConfig]) -> Dict[str, UnitTypeConfig]:
        missing = [t for t in UNIT_TYPES if t not in value]
        if missing:
            raise ValueError(f"unit mix missing types: {', '.join(missing)}")
        areas = [value[t].area for t in UNIT_TYPES]
        if any(b < a for a, b in zip(areas, areas[1:])):
            raise ValueError("unit areas must be non-decreasing from Studio to 3BR")
        return value

    def __getitem__(self, unit_type: str) -> UnitTypeConfig:
        return self.mix[unit_type]

    def total_percentage(self) -> float:
        return sum(self.mix[t].percentage for t in UNIT_TYPES)

    def active_types(self) -> List[str]:
        return [t for t in UNIT_TYPES if self.mix[t].percentage > 0]


class BoundingBox(BaseModel):
    min_x: float
    min_y: float
    max_x: float
    max_y: float


class BuildingFootprint(BaseModel):
    """Rectangular bar footprint; length runs along the corridor."""

    length: float = Field(..., gt=0)
    depth: float = Field(..., gt=0)
    rotation: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    floor_elevation: float = 0.0
    bbox: Optional[BoundingBox] = None


class EgressConfig(BaseModel):
    """Fire egress limits in meters."""

    sprinklered: bool = True
    dead_end_limit: float = Field(..., ge=0)
    travel_distance_limit: Optional[float] = Field(None, ge=0)
    common_path_limit: float = Field(0.0, ge=0)


EGRESS_SPRINKLERED = EgressConfig(
    sprinklered=True,
    dead_end_limit=50 * FEET_TO_METERS,
    travel_distance_limit=250 * FEET_TO_METERS,
    common_path_limit=125 * FEET_TO_METERS,
)
EGRESS_UNSPRINKLERED = EgressConfig(
    sprinklered=False,
    dead_end_limit=20 * FEET_TO_METERS,
    travel_distance_limit=200 * FEET_TO_METERS,
    common_path_limit=75 * FEET_TO_METERS,
)

DEFAULT_UNIT_CONFIG = UnitConfiguration(
    mix={
        "Studio": UnitTypeConfig(percentage=20, area=590 * SQ_FEET_TO_SQ_METERS),
        "1BR": UnitTypeConfig(percentage=40, area=885 * SQ_FEET_TO_SQ_METERS),
        "2BR": UnitTypeConfig(percentage=30, area=1180 * SQ_FEET_TO_SQ_METERS),
        "3BR": UnitTypeConfig(percentage=10, area=1475 * SQ_FEET_TO_SQ_METERS),
    }
)


class GeometryOptions(BaseModel):
    """Per-call geometry knobs."""

    corridor_width: float = Field(DEFAULT_CORRIDOR_WIDTH, gt=0)
    core_width: float = Field(DEFAULT_CORE_WIDTH, gt=0)
    core_depth: float = Field(DEFAULT_CORE_DEPTH, gt=0)
    core_side: Side = "North"
    alignment: float = Field(DEFAULT_ALIGNMENT, ge=0, le=1)
    strategy: Strategy = "balanced"
    custom_colors: Dict[UnitType, str] = Field(default_factory=dict)
    seed: int = DEFAULT_SEED

    @field_validator("custom_colors")
    @classmethod
    def _strip_colors(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {k: v.strip() for k, v in value.items() if v and v.strip()}


class Segment(BaseModel):
    """Contiguous span of one corridor side between two breaks."""

    length: float
    is_corner: bool = False
    bonus_area: float = Field(0.0, ge=0)
    start_x: float = 0.0
    side: Side = "North"
    pattern: Pattern = "desc"
    facade: Optional[Facade] = None

    @property
    def is_left_corner(self) -> bool:
        return self.is_corner and self.facade == "left"

    @property
    def is_right_corner(self) -> bool:
        return self.is_corner and self.facade == "right"

    @property
    def bonus_on_first(self) -> bool:
        # Right facade segments sit right of a core, so the core-adjacent unit is first.
        return self.is_right_corner


class Point(BaseModel):
    x: float
    y: float


class Rect(BaseModel):
    x: float
    y: float
    width: float
    depth: float


class UnitBlock(BaseModel):
    """A placed residential unit."""

    id: str
    type: UnitType
    type_id: str
    type_name: str
    x: float
    y: float
    width: float
    depth: float
    area: float
    color: str
    side: Side
    poly_points: Optional[List[Point]] = None
    rects: List[Rect] = Field(default_factory=list)
    is_l_shaped: bool = False
    is_truncated: bool = False
    bonus_area: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width


class CoreBlock(BaseModel):
    id: str
    x: float
    y: float
    width: float
    depth: float
    side: Side
    role: CoreRole


class FillerBlock(BaseModel):
    id: str
    x: float
    y: float
    width: float
    depth: float
    side: Side


class CorridorBlock(BaseModel):
    x: float
    y: float
    width: float
    depth: float


class Transform(BaseModel):
    center_x: float
    center_y: float
    rotation: float


class LayoutStats(BaseModel):
    """Aggregate areas and counts for a layout."""

    gsf: float
    nrsf: float
    efficiency: float
    unit_counts: Dict[str, int]
    total_units: int
    mix_deviation: float = 0.0


class EgressResult(BaseModel):
    max_dead_end: float
    max_travel_distance: float
    dead_end_status: PassFail
    travel_distance_status: PassFail
    travel_distance_limit: float


class LayoutEvent(BaseModel):
    """Structured record of a decision taken during generation."""

    level: EventLevel
    code: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


class FloorPlanData(BaseModel):
    """Generated floorplate in a frame centred on the footprint."""

    units: List[UnitBlock]
    cores: List[CoreBlock]
    fillers: List[FillerBlock]
    corridor: CorridorBlock
    building_length: float
    building_depth: float
    floor_elevation: float
    transform: Transform
    stats: LayoutStats
    egress: EgressResult
    strategy: Strategy = "balanced"
    events: List[LayoutEvent] = Field(default_factory=list)

    def units_on(self, side: str) -> List[UnitBlock]:
        return sorted((u for u in self.units if u.side == side), key=lambda u: u.x)


class LayoutOption(BaseModel):
    id: str
    strategy: Strategy
    floorplan: FloorPlanData
    label: str
    description: str


class GeometrySearchResult(BaseModel):
    """Outcome of the corner length / mid-core offset search."""

    corner_length: float
    mid_core_offset: float = 0.0
    score: Optional[float] = None
    candidates_evaluated: int = 0


class ValidationResult(BaseModel):
    """Result set from running layout checks."""

    passed: bool
    messages: List[str]
    failed_rules: List[str] = Field(default_factory=list)
    advisories: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _passed_matches_failures(self) -> "ValidationResult":
        if self.passed and self.failed_rules:
            raise ValueError("a passing result cannot list failed rules")
        return self
