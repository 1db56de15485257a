"""Cross-corridor alignment: wall snapping, strict mirroring and corner stacking."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .constants import (
    ALIGNMENT_MIN_EPSILON,
    ALIGNMENT_PULL_RADIUS,
    FIT_EPSILON,
    STRICT_EDGE_TOLERANCE,
)
from .events import EventLog
from .flexibility import fallback_priority, is_corner_eligible, target_width, types_by_area
from .models import CoreBlock, UnitBlock, UnitConfiguration
from .segment_generator import unit_color
from .unit_counts import UnitCounts


def apply_wall_alignment(
    target_units: Sequence[UnitBlock],
    reference_units: Sequence[UnitBlock],
    strength: float,
    config: UnitConfiguration,
    rentable_depth: float,
    events: Optional[EventLog] = None,
) -> List[UnitBlock]:
    """Snap partitions of ``target_units`` toward walls of ``reference_units``.

    A partition moves only when both units beside it keep their minimum
    width, closest candidates win, and each unit is adjusted at most once.
    """
    if events is None:
        events = EventLog.silent()
    units = [u.model_copy(deep=True) for u in sorted(target_units, key=lambda u: u.x)]
    if not units or strength <= 0:
        return units

    walls = sorted({round(edge, 3) for u in reference_units for edge in (u.x, u.right)})
    pull = strength * ALIGNMENT_PULL_RADIUS

    candidates = []
    for i in range(len(units) - 1):
        edge = units[i].right
        if abs(units[i + 1].x - edge) > FIT_EPSILON:
            continue
        for wall in walls:
            distance = abs(wall - edge)
            if ALIGNMENT_MIN_EPSILON < distance <= pull:
                candidates.append((distance, i, wall))
    candidates.sort()

    consumed = set()
    for distance, i, wall in candidates:
        if i in consumed or i + 1 in consumed:
            continue
        unit, nxt = units[i], units[i + 1]
        new_width = wall - unit.x
        new_next_width = nxt.right - wall
        unit_floor = min(target_width(unit.type, config, rentable_depth), unit.width)
        next_floor = min(target_width(nxt.type, config, rentable_depth), nxt.width)
        if new_width < unit_floor or new_next_width < next_floor:
            continue
        unit.width = new_width
        unit.area = new_width * unit.depth
        nxt.x = wall
        nxt.width = new_next_width
        nxt.area = new_next_width * nxt.depth
        consumed.update((i, i + 1))
        events.debug(
            "alignment_snap",
            f"Snapped partition after {unit.id} by {distance:.2f}m",
            unit=unit.id,
            wall=wall,
        )
    return units


def _reclassify(unit: UnitBlock, config: UnitConfiguration, colors: Optional[Dict[str, str]],
                events: EventLog) -> None:
    current = config[unit.type].area
    for unit_type in fallback_priority(config):
        area = config[unit_type].area
        if unit.area >= area:
            if area > current:
                events.info(
                    "mirror_reclassified",
                    f"Expanded {unit.type} reclassified as {unit_type} ({unit.area:.1f} m2)",
                    unit=unit.id,
                    from_type=unit.type,
                    to_type=unit_type,
                )
                unit.type = unit_type
                unit.type_id = unit_type
                unit.type_name = unit_type
                unit.color = unit_color(unit_type, colors)
            return


def mirror_core_side(
    core_units: Sequence[UnitBlock],
    cores: Sequence[CoreBlock],
    clear_y: float,
    clear_side: str,
    config: UnitConfiguration,
    rentable_depth: float,
    colors: Optional[Dict[str, str]] = None,
    events: Optional[EventLog] = None,
) -> List[UnitBlock]:
    """Clone the core side onto the clear side and absorb each core's strip.

    The unit expanded for a core is the one the core wraps (right of the
    rightmost core, left of the others), falling back to the other neighbor.
    A lone core counts as the rightmost.
    """
    if events is None:
        events = EventLog.silent()
    ordered = sorted(core_units, key=lambda u: u.x)
    clones = [
        u.model_copy(
            update={
                "id": f"mirrored-{i}-{u.id}",
                "y": clear_y,
                "side": clear_side,
                "area": u.width * rentable_depth,
                "poly_points": None,
                "rects": [],
                "is_l_shaped": False,
                "bonus_area": 0.0,
            },
            deep=True,
        )
        for i, u in enumerate(ordered)
    ]
    if not cores:
        return clones

    rightmost_x = max(core.x for core in cores)
    for core in sorted(cores, key=lambda c: c.x):
        core_right = core.x + core.width
        left = next((u for u in clones if abs(u.right - core.x) < STRICT_EDGE_TOLERANCE), None)
        right = next((u for u in clones if abs(u.x - core_right) < STRICT_EDGE_TOLERANCE), None)
        if core.x == rightmost_x:
            choices = [(right, "right"), (left, "left")]
        else:
            choices = [(left, "left"), (right, "right")]
        unit, which = next(((u, w) for u, w in choices if u is not None), (None, None))
        if unit is None:
            events.warning(
                "mirror_unmatched",
                f"No clear-side unit beside core {core.id}; a filler covers its strip",
                core=core.id,
            )
            continue
        if which == "right":
            unit.x -= core.width
        unit.width += core.width
        unit.area = unit.width * rentable_depth
        events.debug(
            "mirror_compensated",
            f"{unit.id} absorbs the {core.width:.2f}m strip of core {core.id}",
            unit=unit.id,
            core=core.id,
        )
        _reclassify(unit, config, colors, events)
    return clones


def stack_corner_types(
    first: List[UnitCounts],
    second: List[UnitCounts],
    config: UnitConfiguration,
    events: Optional[EventLog] = None,
) -> None:
    """Match the premium corner type across the corridor, pulling only from mid segments."""
    if events is None:
        events = EventLog.silent()
    premium = next((t for t in fallback_priority(config) if is_corner_eligible(t, config)), None)
    if premium is None or not first or not second:
        return
    for end in ("left", "right"):
        _stack_end(first, second, end, premium, config, events)
        _stack_end(second, first, end, premium, config, events)


def _stack_end(source: List[UnitCounts], target: List[UnitCounts], end: str, premium: str,
               config: UnitConfiguration, events: EventLog) -> None:
    source_idx = 0 if end == "left" else len(source) - 1
    target_idx = 0 if end == "left" else len(target) - 1
    if source[source_idx][premium] == 0 or target[target_idx][premium] > 0:
        return
    corners = {0, len(target) - 1}
    donor = next(
        (i for i, counts in enumerate(target) if i not in corners and counts[premium] > 0),
        None,
    )
    if donor is None:
        return
    corner = target[target_idx]
    target[donor][premium] -= 1
    corner[premium] += 1
    swap = next((t for t in types_by_area(config) if t != premium and corner[t] > 0), None)
    if swap is not None:
        corner[swap] -= 1
        target[donor][swap] += 1
    events.info(
        "corner_stacked",
        f"Moved {premium} from mid segment {donor} into the {end} corner"
        + (f", swapping back {swap}" if swap else ""),
        end=end,
        donor=donor,
        swapped=swap,
    )
