"""Segment distributor: assign a side's inventory to its wall segments."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .constants import FIT_EPSILON, MIN_REMAINING_TO_FILL, OVERFLOW_STUDIO_PENALTY, UNIT_FIT_TOLERANCE
from .events import EventLog
from .flexibility import fallback_priority, is_corner_eligible, target_width, types_by_area
from .models import Segment, UnitConfiguration
from .unit_counts import UnitCounts, empty_counts, total


class _SegmentState:
    __slots__ = ("index", "is_corner", "capacity", "fill")

    def __init__(self, index: int, segment: Segment, rentable_depth: float) -> None:
        self.index = index
        self.is_corner = segment.is_corner
        self.capacity = segment.length + segment.bonus_area / rentable_depth
        self.fill = 0.0

    @property
    def remaining(self) -> float:
        return self.capacity - self.fill


def _placement_order(config: UnitConfiguration) -> List[str]:
    order = list(fallback_priority(config))
    order.extend(t for t in types_by_area(config) if t not in order)
    return order


def pick_best_unit(
    inventory: UnitCounts,
    is_corner: bool,
    prioritize_corners: bool,
    remaining: float,
    config: UnitConfiguration,
    rentable_depth: float,
) -> Optional[str]:
    """Largest available type that fits; corner segments try corner types first."""
    available = [t for t in _placement_order(config) if inventory[t] > 0]
    if not available:
        return None

    if prioritize_corners and is_corner:
        for t in available:
            if not is_corner_eligible(t, config):
                continue
            if remaining >= target_width(t, config, rentable_depth) - UNIT_FIT_TOLERANCE:
                return t

    for t in available:
        if remaining >= target_width(t, config, rentable_depth) - FIT_EPSILON:
            return t
    return None


def distribute_units_to_segments(
    counts: UnitCounts,
    segments: Sequence[Segment],
    config: UnitConfiguration,
    rentable_depth: float,
    prioritize_corners: bool = True,
    events: Optional[EventLog] = None,
) -> List[UnitCounts]:
    """Split ``counts`` across ``segments``; the result sums to ``counts`` exactly."""
    events = events or EventLog.silent()
    result = [empty_counts() for _ in segments]
    if not segments:
        return result

    inventory = empty_counts()
    inventory.update(counts)
    states = [_SegmentState(i, seg, rentable_depth) for i, seg in enumerate(segments)]
    if prioritize_corners:
        order = sorted(states, key=lambda s: (not s.is_corner, -s.capacity))
    else:
        order = sorted(states, key=lambda s: -s.capacity)

    def place(state: _SegmentState, unit_type: str) -> None:
        result[state.index][unit_type] += 1
        inventory[unit_type] -= 1
        state.fill += target_width(unit_type, config, rentable_depth)

    # Pass 0: every facade corner gets a corner-eligible unit while inventory allows.
    if prioritize_corners:
        corners = [s for s in order if s.is_corner]
        corner_types = [t for t in _placement_order(config) if is_corner_eligible(t, config)]
        for t in corner_types:
            for state in corners:
                if total(result[state.index]) > 0 or inventory[t] <= 0:
                    continue
                if state.remaining >= target_width(t, config, rentable_depth) - UNIT_FIT_TOLERANCE:
                    place(state, t)
                    events.debug(
                        "corner_reserved",
                        f"Reserved {t} for corner segment {state.index}",
                        segment=state.index,
                        unit_type=t,
                    )
        for state in corners:
            if total(result[state.index]) > 0:
                continue
            stocked = [t for t in reversed(corner_types) if inventory[t] > 0]
            if stocked:
                place(state, stocked[0])
                events.warning(
                    "corner_forced",
                    f"Forced {stocked[0]} into corner segment {state.index} without a fit",
                    segment=state.index,
                    unit_type=stocked[0],
                )
            else:
                events.warning(
                    "corner_unfilled",
                    f"No corner-eligible unit left for corner segment {state.index}",
                    segment=state.index,
                )

    # Pass 1: iterative best-fit fill.
    progress = True
    while total(inventory) > 0 and progress:
        progress = False
        for state in order:
            if state.remaining <= MIN_REMAINING_TO_FILL:
                continue
            unit_type = pick_best_unit(
                inventory, state.is_corner, prioritize_corners, state.remaining, config, rentable_depth
            )
            if unit_type is not None:
                place(state, unit_type)
                progress = True

    # Pass 2: force leftovers into the least dense segment, largest type first.
    placement = _placement_order(config)
    while total(inventory) > 0:
        best = None
        best_density = float("inf")
        for state in states:
            seg_counts = result[state.index]
            placed = total(seg_counts)
            studio_ratio = seg_counts["Studio"] / placed if placed else 0.0
            density = state.fill / state.capacity if state.capacity > 0 else float("inf")
            density += studio_ratio * OVERFLOW_STUDIO_PENALTY
            if density < best_density:
                best_density = density
                best = state
        if best is None:
            best = states[0]
        unit_type = next(t for t in placement if inventory[t] > 0)
        place(best, unit_type)
        events.debug(
            "overflow_assigned",
            f"Overflow {unit_type} forced into segment {best.index}",
            segment=best.index,
            unit_type=unit_type,
        )

    # Pass 3: no segment renders empty.
    for state in states:
        if total(result[state.index]) > 0:
            continue
        donor = None
        most = 1
        for other in states:
            if other.index == state.index:
                continue
            placed = total(result[other.index])
            if placed > most:
                most = placed
                donor = other
        if donor is None:
            events.warning(
                "segment_empty",
                f"Segment {state.index} stays empty; no donor segment has spare units",
                segment=state.index,
            )
            continue
        ascending = types_by_area(config, descending=False)
        if state.is_corner:
            steal_order = [t for t in ascending if is_corner_eligible(t, config)]
            steal_order += [t for t in ascending if t not in steal_order]
        else:
            steal_order = ascending
        unit_type = next(t for t in steal_order if result[donor.index][t] > 0)
        result[donor.index][unit_type] -= 1
        result[state.index][unit_type] += 1
        events.info(
            "segment_starved",
            f"Moved one {unit_type} from segment {donor.index} to empty segment {state.index}",
            segment=state.index,
            donor=donor.index,
            unit_type=unit_type,
        )

    return result
