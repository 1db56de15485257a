"""Post-placement geometry: core L-wraps, corridor-end voids and fillers."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .constants import CORE_WRAP_MIN_GAP, CORRIDOR_END_OVERLAP, EDGE_TOLERANCE, MIN_FILLER_WIDTH
from .events import EventLog
from .flexibility import is_corner_eligible, is_l_shape_eligible
from .models import CoreBlock, FillerBlock, Point, Rect, UnitBlock, UnitConfiguration

Coords = Sequence[Tuple[float, float]]


def _polygon(coords: Coords) -> List[Point]:
    return [Point(x=x, y=y) for x, y in coords]


def _outline(rects: Sequence[Rect]) -> List[Point]:
    """Boundary of a hole-free union of rectangles, one point per corner."""
    boxes = [(round(r.x, 9), round(r.y, 9), round(r.x + r.width, 9), round(r.y + r.depth, 9)) for r in rects]
    xs = sorted({b[0] for b in boxes} | {b[2] for b in boxes})
    ys = sorted({b[1] for b in boxes} | {b[3] for b in boxes})

    def covered(i: int, j: int) -> bool:
        if i < 0 or j < 0 or i >= len(xs) - 1 or j >= len(ys) - 1:
            return False
        cx = (xs[i] + xs[i + 1]) / 2
        cy = (ys[j] + ys[j + 1]) / 2
        return any(x0 < cx < x1 and y0 < cy < y1 for x0, y0, x1, y1 in boxes)

    # directed cell edges facing uncovered space, keyed by start point
    edges = {}
    for i in range(len(xs) - 1):
        for j in range(len(ys) - 1):
            if not covered(i, j):
                continue
            x0, x1, y0, y1 = xs[i], xs[i + 1], ys[j], ys[j + 1]
            if not covered(i, j - 1):
                edges[(x0, y0)] = (x1, y0)
            if not covered(i + 1, j):
                edges[(x1, y0)] = (x1, y1)
            if not covered(i, j + 1):
                edges[(x1, y1)] = (x0, y1)
            if not covered(i - 1, j):
                edges[(x0, y1)] = (x0, y0)
    if not edges:
        return []

    path = []
    point = min(edges)
    while point in edges:
        path.append(point)
        point = edges.pop(point)

    corners = []
    for k, (x, y) in enumerate(path):
        px, py = path[k - 1]
        nx, ny = path[(k + 1) % len(path)]
        if (px == x == nx) or (py == y == ny):
            continue
        corners.append((x, y))
    return _polygon(corners)


def _ensure_rects(unit: UnitBlock) -> None:
    if not unit.rects:
        unit.rects = [Rect(x=unit.x, y=unit.y, width=unit.width, depth=unit.depth)]


def wrap_gap_height(rentable_depth: float, core_depth: float) -> float:
    return rentable_depth - core_depth


def has_wrap_gap(rentable_depth: float, core_depth: float) -> bool:
    return wrap_gap_height(rentable_depth, core_depth) > CORE_WRAP_MIN_GAP


def apply_core_wrapping(
    core_units: Sequence[UnitBlock],
    cores: Sequence[CoreBlock],
    rentable_depth: float,
    core_depth: float,
    config: UnitConfiguration,
    events: Optional[EventLog] = None,
) -> int:
    """Extend the unit beside each core into the strip the core leaves free.

    The rightmost core wraps its right neighbor, every other core its left
    neighbor. Returns the number of wraps made.
    """
    if events is None:
        events = EventLog.silent()
    gap = wrap_gap_height(rentable_depth, core_depth)
    if gap <= CORE_WRAP_MIN_GAP or not cores:
        return 0

    wrapped = 0
    rightmost_x = max(core.x for core in cores)
    for core in cores:
        core_right = core.x + core.width
        wraps_right = core.x == rightmost_x
        if wraps_right:
            unit = next((u for u in core_units if abs(u.x - core_right) < EDGE_TOLERANCE), None)
        else:
            unit = next((u for u in core_units if abs(u.right - core.x) < EDGE_TOLERANCE), None)
        if unit is None:
            continue
        if not is_l_shape_eligible(unit.type, config):
            events.debug(
                "core_wrap_skipped",
                f"{unit.type} beside core {core.id} is not L-shape eligible",
                unit=unit.id,
                core=core.id,
            )
            continue

        top = unit.y
        bottom = unit.y + unit.depth
        # North rows have the free strip on the facade edge, South rows behind the core
        north = core.side == "North"
        strip_y = top if north else top + core_depth
        _ensure_rects(unit)
        unit.rects.append(Rect(x=core.x, y=strip_y, width=core.width, depth=gap))
        if wraps_right and north:
            coords = [(core.x, top), (unit.right, top), (unit.right, bottom), (unit.x, bottom),
                      (unit.x, top + gap), (core.x, top + gap)]
        elif wraps_right:
            coords = [(unit.x, top), (unit.right, top), (unit.right, bottom), (core.x, bottom),
                      (core.x, top + core_depth), (unit.x, top + core_depth)]
        elif north:
            coords = [(unit.x, top), (core_right, top), (core_right, top + gap), (unit.right, top + gap),
                      (unit.right, bottom), (unit.x, bottom)]
        else:
            coords = [(unit.x, top), (unit.right, top), (unit.right, top + core_depth),
                      (core_right, top + core_depth), (core_right, bottom), (unit.x, bottom)]
        unit.poly_points = _polygon(coords)
        unit.is_l_shaped = True
        unit.area += core.width * gap
        wrapped += 1
        events.debug(
            "core_wrapped",
            f"{unit.type} {unit.id} wraps {'left' if wraps_right else 'right'} into core {core.id}'s strip",
            unit=unit.id,
            core=core.id,
        )
    return wrapped


def _void_eligible(unit: Optional[UnitBlock], config: UnitConfiguration) -> bool:
    return (
        unit is not None
        and is_corner_eligible(unit.type, config)
        and is_l_shape_eligible(unit.type, config)
    )


def absorb_corridor_voids(
    units: Sequence[UnitBlock],
    building_length: float,
    rentable_depth: float,
    corridor_width: float,
    config: UnitConfiguration,
    events: Optional[EventLog] = None,
) -> Tuple[float, float]:
    """Let facing end units split the dead corridor stub at each building end.

    Returns the (left, right) void lengths taken out of the corridor.
    """
    if events is None:
        events = EventLog.silent()
    half = corridor_width / 2
    r = rentable_depth
    voids = []
    for end in ("left", "right"):
        if end == "left":
            north = next((u for u in units if u.side == "North" and abs(u.x) < EDGE_TOLERANCE), None)
            south = next((u for u in units if u.side == "South" and abs(u.x) < EDGE_TOLERANCE), None)
        else:
            north = next((u for u in units if u.side == "North" and abs(u.right - building_length) < EDGE_TOLERANCE), None)
            south = next((u for u in units if u.side == "South" and abs(u.right - building_length) < EDGE_TOLERANCE), None)
        if north is None or south is None:
            voids.append(0.0)
            continue
        if not (_void_eligible(north, config) and _void_eligible(south, config)):
            events.debug(
                "corridor_void",
                f"No {end} corridor void: end units {north.type}/{south.type} cannot take an L",
                end=end,
                length=0.0,
            )
            voids.append(0.0)
            continue
        void = min(north.width, south.width) - CORRIDOR_END_OVERLAP
        if void <= 0:
            voids.append(0.0)
            continue

        start = 0.0 if end == "left" else building_length - void
        _ensure_rects(north)
        _ensure_rects(south)
        north.rects.append(Rect(x=start, y=r, width=void, depth=half))
        south.rects.append(Rect(x=start, y=r + half, width=void, depth=half))
        north.area += void * half
        south.area += void * half
        # rebuilt from rects so an existing core-wrap strip stays in the outline
        for unit in (north, south):
            unit.poly_points = _outline(unit.rects)
            unit.is_l_shaped = True
        voids.append(void)
        events.info(
            "corridor_void",
            f"{end.capitalize()} corridor void of {void:.2f}m absorbed by {north.type}/{south.type}",
            end=end,
            length=void,
        )
    return voids[0], voids[1]


def detect_fillers(
    units: Sequence[UnitBlock],
    cores: Sequence[CoreBlock],
    side: str,
    y: float,
    depth: float,
    building_length: float,
    events: Optional[EventLog] = None,
) -> List[FillerBlock]:
    """Filler blocks for every uncovered stretch of one side's row."""
    if events is None:
        events = EventLog.silent()
    occupied = [
        (max(u.x, 0.0), min(u.right, building_length))
        for u in units
        if u.side == side and u.x < building_length and u.right > 0
    ]
    occupied.extend(
        (max(core.x, 0.0), min(core.x + core.width, building_length))
        for core in cores
        if core.side == side
    )
    occupied.sort()

    merged: List[List[float]] = []
    for start, end in occupied:
        if merged and start <= merged[-1][1] + MIN_FILLER_WIDTH:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    fillers: List[FillerBlock] = []
    cursor = 0.0
    for start, end in merged + [[building_length, building_length]]:
        if start - cursor > MIN_FILLER_WIDTH:
            fillers.append(
                FillerBlock(
                    id=f"{side.lower()}-filler-{len(fillers)}",
                    x=cursor,
                    y=y,
                    width=start - cursor,
                    depth=depth,
                    side=side,
                )
            )
            events.info(
                "filler_created",
                f"Filler of {start - cursor:.2f}m on {side} at x={cursor:.2f}",
                side=side,
                x=cursor,
                width=start - cursor,
            )
        cursor = max(cursor, end)
    return fillers
