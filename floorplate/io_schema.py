"""JSON schema helpers for import/export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .models import (
    DEFAULT_UNIT_CONFIG,
    EGRESS_SPRINKLERED,
    BuildingFootprint,
    EgressConfig,
    FloorPlanData,
    GeometryOptions,
    LayoutOption,
    LayoutStats,
    UnitConfiguration,
)


class GeneratorConfig(BaseModel):
    """Everything one generation call needs, as stored in a config file."""

    footprint: BuildingFootprint
    unit_mix: UnitConfiguration = Field(default_factory=lambda: DEFAULT_UNIT_CONFIG.model_copy(deep=True))
    egress: EgressConfig = Field(default_factory=lambda: EGRESS_SPRINKLERED.model_copy())
    options: GeometryOptions = Field(default_factory=GeometryOptions)


_VARIANTS = TypeAdapter(List[LayoutOption])


def layout_schema() -> Dict[str, Any]:
    return FloorPlanData.model_json_schema()


def stats_schema() -> Dict[str, Any]:
    return LayoutStats.model_json_schema()


def config_schema() -> Dict[str, Any]:
    return GeneratorConfig.model_json_schema()


def _dump(data: Any, path: Path | str) -> None:
    Path(path).write_text(json.dumps(data, indent=2, sort_keys=True))


def load_layout(path: Path | str) -> FloorPlanData:
    data = json.loads(Path(path).read_text())
    try:
        return FloorPlanData.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Layout file invalid: {exc}") from exc


def save_layout(plan: FloorPlanData, path: Path | str) -> None:
    _dump(plan.model_dump(mode="json"), path)


def load_variants(path: Path | str) -> List[LayoutOption]:
    data = json.loads(Path(path).read_text())
    try:
        return _VARIANTS.validate_python(data)
    except ValidationError as exc:
        raise ValueError(f"Variants file invalid: {exc}") from exc


def save_variants(options: List[LayoutOption], path: Path | str) -> None:
    _dump(_VARIANTS.dump_python(options, mode="json"), path)


def load_config(path: Path | str) -> GeneratorConfig:
    data = json.loads(Path(path).read_text())
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Config file invalid: {exc}") from exc


def export_markdown(plan: FloorPlanData, validation_msgs: list[str]) -> str:
    stats = plan.stats
    egress = plan.egress
    lines: list[str] = []
    lines.append(f"# Floorplate Summary ({plan.strategy})")
    lines.append("")
    lines.append(f"- Building: {plan.building_length:.1f} m x {plan.building_depth:.1f} m")
    lines.append(f"- Cores: {len(plan.cores)}")
    lines.append(f"- Units: {stats.total_units}")
    lines.append(f"- GSF: {stats.gsf:.1f} m²")
    lines.append(f"- NRSF: {stats.nrsf:.1f} m²")
    lines.append(f"- Efficiency: {stats.efficiency:.3f}")
    lines.append(f"- Mix deviation: {stats.mix_deviation:.1f} pts")
    lines.append("")
    lines.append("## Unit Mix")
    lines.append("| Type | Count | Share |")
    lines.append("| --- | --- | --- |")
    for type_id, count in stats.unit_counts.items():
        share = count / stats.total_units if stats.total_units else 0.0
        lines.append(f"| {type_id} | {count} | {share:.0%} |")
    lines.append("")
    lines.append("## Units")
    lines.append("| Id | Type | Side | Width (m) | Area (m²) | Shape |")
    lines.append("| --- | --- | --- | --- | --- | --- |")
    for unit in plan.units:
        shape = "L" if unit.is_l_shaped else "rect"
        if unit.is_truncated:
            shape += " (truncated)"
        lines.append(
            f"| {unit.id} | {unit.type_name} | {unit.side} | {unit.width:.2f} | {unit.area:.1f} | {shape} |"
        )
    lines.append("")
    lines.append("## Egress")
    lines.append(
        f"- Max dead end: {egress.max_dead_end:.1f} m ({egress.dead_end_status})\n"
        f"- Max travel distance: {egress.max_travel_distance:.1f} m ({egress.travel_distance_status}, "
        f"limit {egress.travel_distance_limit:.1f} m)\n"
    )
    lines.append("## Validation")
    for msg in validation_msgs:
        prefix = "⚠️" if msg.lower().startswith(("fail", "advisory")) else "✅"
        lines.append(f"- {prefix} {msg}")
    return "\n".join(lines)


def seed_config() -> Dict[str, Any]:
    """Starter config written by ``floorplate init``."""
    config = GeneratorConfig(footprint=BuildingFootprint(length=60.0, depth=18.0))
    return config.model_dump(mode="json")
