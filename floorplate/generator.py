"""Floorplate generation pipeline."""

from __future__ import annotations

import logging
import math
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .alignment import apply_wall_alignment, mirror_core_side, stack_corner_types
from .constants import (
    CLEAR_SIDE_RANDOM_BELOW,
    STRATEGY_DESCRIPTIONS,
    STRATEGY_LABELS,
    STRATEGY_PATTERNS,
    STRICT_ALIGNMENT_THRESHOLD,
)
from .distributor import distribute_units_to_segments
from .egress import evaluate_egress, needs_mid_core, travel_limit, two_core_travel
from .events import EventLog
from .io_schema import load_config
from .models import (
    STRATEGIES,
    BuildingFootprint,
    CoreBlock,
    CorridorBlock,
    EgressConfig,
    FillerBlock,
    FloorPlanData,
    GeometryOptions,
    LayoutOption,
    Point,
    Rect,
    Segment,
    Transform,
    UnitBlock,
    UnitConfiguration,
)
from .optimizer import find_optimal_geometry
from .scoring import compute_stats
from .segment_generator import generate_unit_segment
from .unit_counts import apply_core_side_mix_bias, calculate_building_unit_counts
from .wrapping import absorb_corridor_voids, apply_core_wrapping, detect_fillers, has_wrap_gap, wrap_gap_height

logger = logging.getLogger(__name__)


def _other_side(side: str) -> str:
    return "South" if side == "North" else "North"


def _row_y(side: str, rentable_depth: float, corridor_width: float) -> float:
    return 0.0 if side == "North" else rentable_depth + corridor_width


def _place_cores(
    building_length: float,
    corner_length: float,
    mid_spans: Tuple[float, ...],
    options: GeometryOptions,
    rentable_depth: float,
) -> List[CoreBlock]:
    core_w = options.core_width
    if options.core_side == "North":
        y = rentable_depth - options.core_depth
    else:
        y = rentable_depth + options.corridor_width

    def core(x: float, suffix: str, role: str) -> CoreBlock:
        return CoreBlock(
            id=f"core-{suffix}", x=x, y=y, width=core_w, depth=options.core_depth,
            side=options.core_side, role=role,
        )

    cores = [core(corner_length, "left", "End"), core(building_length - corner_length - core_w, "right", "End")]
    if len(mid_spans) == 2:
        cores.append(core(corner_length + core_w + mid_spans[0], "mid", "Mid"))
    return cores


def _core_side_segments(
    building_length: float,
    corner_length: float,
    mid_spans: Tuple[float, ...],
    cores: List[CoreBlock],
    single_bonus: float,
    options: GeometryOptions,
) -> List[Segment]:
    left_pattern, mid_pattern, right_pattern = STRATEGY_PATTERNS[options.strategy]
    side = options.core_side
    by_x = sorted(cores, key=lambda c: c.x)
    segments = [
        Segment(length=corner_length, is_corner=True, bonus_area=single_bonus, start_x=0.0,
                side=side, pattern=left_pattern, facade="left"),
    ]
    for i, span in enumerate(mid_spans):
        start = by_x[i].x + by_x[i].width
        # only the span left of a mid core gets wrapped; the last span's right core wraps rightward
        bonus = single_bonus if i < len(mid_spans) - 1 else 0.0
        segments.append(Segment(length=span, bonus_area=bonus, start_x=start, side=side, pattern=mid_pattern))
    right_start = by_x[-1].x + by_x[-1].width
    segments.append(
        Segment(length=building_length - right_start, is_corner=True, bonus_area=single_bonus,
                start_x=right_start, side=side, pattern=right_pattern, facade="right")
    )
    return segments


def _clear_side_segments(building_length: float, corner_length: float, options: GeometryOptions) -> List[Segment]:
    left_pattern, _, right_pattern = STRATEGY_PATTERNS[options.strategy]
    mid_pattern = "random" if options.alignment < CLEAR_SIDE_RANDOM_BELOW else "valley-inverted"
    side = _other_side(options.core_side)
    return [
        Segment(length=corner_length, is_corner=True, start_x=0.0, side=side, pattern=left_pattern, facade="left"),
        Segment(length=building_length - 2 * corner_length, start_x=corner_length, side=side, pattern=mid_pattern),
        Segment(length=corner_length, is_corner=True, start_x=building_length - corner_length, side=side,
                pattern=right_pattern, facade="right"),
    ]


def _generate_side(
    segments: List[Segment],
    distribution: List[Dict[str, int]],
    config: UnitConfiguration,
    rentable_depth: float,
    y: float,
    rng: random.Random,
    colors: Dict[str, str],
    events: EventLog,
) -> List[UnitBlock]:
    units: List[UnitBlock] = []
    for idx, (segment, counts) in enumerate(zip(segments, distribution)):
        units.extend(
            generate_unit_segment(segment, counts, config, rentable_depth, y, rng, colors, idx, events)
        )
    return units


def _shift_unit(unit: UnitBlock, dx: float, dy: float) -> UnitBlock:
    points = None
    if unit.poly_points:
        points = [Point(x=p.x + dx, y=p.y + dy) for p in unit.poly_points]
    rects = [Rect(x=r.x + dx, y=r.y + dy, width=r.width, depth=r.depth) for r in unit.rects]
    return unit.model_copy(update={"x": unit.x + dx, "y": unit.y + dy, "poly_points": points, "rects": rects})


def generate_floorplate(
    footprint: BuildingFootprint,
    config: UnitConfiguration,
    egress: EgressConfig,
    options: Optional[GeometryOptions] = None,
) -> FloorPlanData:
    """Lay out units and cores along a double-loaded corridor.

    The result is a pure function of the inputs (the ``random`` ordering
    pattern draws from an RNG seeded by ``options.seed``). Suboptimal
    layouts never raise; structural input errors raise ValueError.
    """
    options = options or GeometryOptions()
    events = EventLog()
    length = footprint.length
    depth = footprint.depth
    corridor_w = options.corridor_width
    core_w = options.core_width
    rentable = (depth - corridor_w) / 2
    if rentable <= 0:
        raise ValueError(f"Corridor width {corridor_w:.2f}m leaves no rentable depth in a {depth:.2f}m building")

    mid_core = needs_mid_core(length, core_w, egress)
    num_cores = 3 if mid_core else 2
    core_length = length - num_cores * core_w
    if core_length <= 0:
        raise ValueError(f"{num_cores} cores of {core_w:.2f}m do not fit a {length:.2f}m building")
    if mid_core:
        events.info(
            "mid_core_added",
            f"Two-core travel {two_core_travel(length, core_w):.1f}m exceeds limit {travel_limit(egress):.1f}m",
            travel=two_core_travel(length, core_w),
        )

    logger.info(
        "Generating %.1fm x %.1fm floorplate (%s, %d cores, alignment %.2f)",
        length, depth, options.strategy, num_cores, options.alignment,
    )
    rng = random.Random(options.seed)
    colors = dict(options.custom_colors)
    strict = options.alignment > STRICT_ALIGNMENT_THRESHOLD
    core_side = options.core_side
    clear_side = _other_side(core_side)
    num_mid_spans = 2 if mid_core else 1
    single_bonus = core_w * wrap_gap_height(rentable, options.core_depth) if has_wrap_gap(rentable, options.core_depth) else 0.0

    counts = calculate_building_unit_counts(
        core_length,
        length,
        num_cores * single_bonus,
        0.0,
        num_mid_spans + 2,
        3,
        config,
        rentable,
        core_side,
        options.strategy,
        mirrored=strict,
        events=events,
    )
    if not strict:
        counts = apply_core_side_mix_bias(counts, core_side, num_cores)
    core_inventory = counts.for_side(core_side)
    clear_inventory = counts.for_side(clear_side)

    geometry = find_optimal_geometry(
        core_length, core_inventory, config, rentable, num_mid_spans, single_bonus, False, True, events
    )
    corner = geometry.corner_length
    mid_total = core_length - 2 * corner
    if mid_core:
        mid_spans: Tuple[float, ...] = (mid_total / 2 + geometry.mid_core_offset, mid_total / 2 - geometry.mid_core_offset)
    else:
        mid_spans = (mid_total,)

    cores = _place_cores(length, corner, mid_spans, options, rentable)
    core_segments = _core_side_segments(length, corner, mid_spans, cores, single_bonus, options)
    core_dist = distribute_units_to_segments(core_inventory, core_segments, config, rentable, True, events)
    core_y = _row_y(core_side, rentable, corridor_w)
    clear_y = _row_y(clear_side, rentable, corridor_w)

    if strict:
        core_units = _generate_side(core_segments, core_dist, config, rentable, core_y, rng, colors, events)
        clear_units = mirror_core_side(core_units, cores, clear_y, clear_side, config, rentable, colors, events)
    else:
        clear_geometry = find_optimal_geometry(length, clear_inventory, config, rentable, 1, 0.0, True, True, events)
        clear_segments = _clear_side_segments(length, clear_geometry.corner_length, options)
        clear_dist = distribute_units_to_segments(clear_inventory, clear_segments, config, rentable, True, events)
        stack_corner_types(core_dist, clear_dist, config, events)
        core_units = _generate_side(core_segments, core_dist, config, rentable, core_y, rng, colors, events)
        clear_units = _generate_side(clear_segments, clear_dist, config, rentable, clear_y, rng, colors, events)
        if options.alignment > 0:
            clear_units = apply_wall_alignment(clear_units, core_units, options.alignment, config, rentable, events)

    apply_core_wrapping(core_units, cores, rentable, options.core_depth, config, events)
    units = core_units + clear_units
    left_void, right_void = absorb_corridor_voids(units, length, rentable, corridor_w, config, events)

    fillers: List[FillerBlock] = []
    for side in ("North", "South"):
        fillers.extend(
            detect_fillers(units, cores, side, _row_y(side, rentable, corridor_w), rentable, length, events)
        )

    egress_result = evaluate_egress(cores, length, corridor_w, egress, left_void, right_void)
    stats = compute_stats(units, config, length, depth)
    if not math.isfinite(stats.nrsf):
        events.error("nonfinite_width", "Layout net area is not finite")

    dx = -length / 2
    dy = -depth / 2
    plan = FloorPlanData(
        units=[_shift_unit(u, dx, dy) for u in sorted(units, key=lambda u: (u.side, u.x))],
        cores=[c.model_copy(update={"x": c.x + dx, "y": c.y + dy}) for c in cores],
        fillers=[f.model_copy(update={"x": f.x + dx, "y": f.y + dy}) for f in fillers],
        corridor=CorridorBlock(
            x=left_void + dx, y=rentable + dy, width=length - left_void - right_void, depth=corridor_w
        ),
        building_length=length,
        building_depth=depth,
        floor_elevation=footprint.floor_elevation,
        transform=Transform(center_x=footprint.center_x, center_y=footprint.center_y, rotation=footprint.rotation),
        stats=stats,
        egress=egress_result,
        strategy=options.strategy,
        events=events.events,
    )
    logger.info(
        "Placed %d units, efficiency %.3f, dead end %s, travel %s",
        stats.total_units, stats.efficiency, egress_result.dead_end_status, egress_result.travel_distance_status,
    )
    return plan


def generate_floorplate_variants(
    footprint: BuildingFootprint,
    config: UnitConfiguration,
    egress: EgressConfig,
    options: Optional[GeometryOptions] = None,
) -> List[LayoutOption]:
    """One layout per strategy preset, for side-by-side comparison."""
    options = options or GeometryOptions()
    variants: List[LayoutOption] = []
    for i, strategy in enumerate(STRATEGIES):
        plan = generate_floorplate(footprint, config, egress, options.model_copy(update={"strategy": strategy}))
        variants.append(
            LayoutOption(
                id=f"option-{i + 1}",
                strategy=strategy,
                floorplan=plan,
                label=STRATEGY_LABELS[strategy],
                description=STRATEGY_DESCRIPTIONS[strategy],
            )
        )
    return variants


def generate_from_file(path: Path | str) -> FloorPlanData:
    config = load_config(path)
    return generate_floorplate(config.footprint, config.unit_mix, config.egress, config.options)
