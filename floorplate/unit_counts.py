"""Unit-count solver: how many units of each type a length can hold."""

from __future__ import annotations

import math
from typing import Dict, Optional

from pydantic import BaseModel

from .constants import COUNT_FIT_TOLERANCE, MIN_UNIT_WIDTH
from .events import EventLog
from .flexibility import (
    expansion_weight,
    is_corner_eligible,
    strategy_safety_factor,
    target_width,
    types_by_area,
)
from .models import UNIT_TYPES, UnitConfiguration

UnitCounts = Dict[str, int]


def empty_counts() -> UnitCounts:
    return {t: 0 for t in UNIT_TYPES}


def total(counts: UnitCounts) -> int:
    return sum(counts.get(t, 0) for t in UNIT_TYPES)


def min_width_sum(counts: UnitCounts, config: UnitConfiguration, rentable_depth: float) -> float:
    return sum(counts[t] * target_width(t, config, rentable_depth) for t in UNIT_TYPES)


def flex_weight_sum(counts: UnitCounts) -> float:
    return sum(counts[t] * expansion_weight(t) for t in UNIT_TYPES)


class SideCounts(BaseModel):
    """Unit inventory split between the two corridor sides."""

    north: Dict[str, int]
    south: Dict[str, int]

    def for_side(self, side: str) -> Dict[str, int]:
        return self.north if side == "North" else self.south

    def combined(self) -> Dict[str, int]:
        return {t: self.north[t] + self.south[t] for t in UNIT_TYPES}


def _largest_remainder(n: int, config: UnitConfiguration, total_mix: float) -> UnitCounts:
    counts = empty_counts()
    remainders = []
    assigned = 0
    for t in UNIT_TYPES:
        raw = n * config[t].percentage / total_mix
        whole = int(math.floor(raw))
        counts[t] = whole
        assigned += whole
        remainders.append((raw - whole, t))
    # stable: ties keep canonical order
    remainders.sort(key=lambda item: item[0], reverse=True)
    for _, t in remainders[: n - assigned]:
        counts[t] += 1
    return counts


def calculate_global_unit_counts(
    total_length: float,
    config: UnitConfiguration,
    rentable_depth: float,
    min_segments: int = 1,
    bonus_area: float = 0.0,
    strategy: str = "balanced",
    events: Optional[EventLog] = None,
) -> UnitCounts:
    """Per-type counts for a linear length under the target mix.

    Maximizes the unit count while every unit still fits at its target
    width, then guarantees one unit of each type present in the mix.
    """
    events = events or EventLog.silent()
    total_mix = config.total_percentage()
    if total_mix <= 0 or total_length < MIN_UNIT_WIDTH or rentable_depth <= 0:
        events.warning(
            "counts_empty",
            f"No units for length {total_length:.2f}m (mix total {total_mix:.0f}%)",
            length=total_length,
        )
        return empty_counts()

    avg_width = (
        sum(config[t].percentage * target_width(t, config, rentable_depth) for t in UNIT_TYPES)
        / total_mix
    )
    effective_length = total_length + bonus_area / rentable_depth
    usable = effective_length * strategy_safety_factor(strategy)

    max_physical = int(math.floor(total_length / MIN_UNIT_WIDTH))
    base = int(math.floor(usable / avg_width))
    start = max(min(base, max_physical), min_segments)
    if start <= 0:
        return empty_counts()

    best = _largest_remainder(start, config, total_mix)
    for n in range(start, max_physical + 1):
        candidate = _largest_remainder(n, config, total_mix)
        if min_width_sum(candidate, config, rentable_depth) <= usable + COUNT_FIT_TOLERANCE:
            best = candidate
        else:
            break

    counts = dict(best)
    in_mix = [t for t in types_by_area(config) if config[t].percentage > 0]
    for t in in_mix:
        if counts[t] > 0:
            continue
        donors = sorted((d for d in in_mix if counts[d] > 1), key=lambda d: counts[d], reverse=True)
        if donors:
            counts[donors[0]] -= 1
            counts[t] = 1
            events.debug(
                "counts_guaranteed_minimum",
                f"Added one {t} by taking from {donors[0]}",
                unit_type=t,
                donor=donors[0],
            )
    return counts


def apply_core_side_mix_bias(counts: SideCounts, core_side: str, num_cores: int) -> SideCounts:
    """Shift up to one studio per core onto the core side, trading back a 1BR."""
    core = counts.for_side(core_side)
    clear = counts.south if core_side == "North" else counts.north
    shifts = max(0, min(num_cores, clear["Studio"], core["1BR"]))
    for _ in range(shifts):
        clear["Studio"] -= 1
        core["Studio"] += 1
        core["1BR"] -= 1
        clear["1BR"] += 1
    return counts


def calculate_building_unit_counts(
    core_length: float,
    clear_length: float,
    core_bonus: float,
    clear_bonus: float,
    core_segments: int,
    clear_segments: int,
    config: UnitConfiguration,
    rentable_depth: float,
    core_side: str = "North",
    strategy: str = "balanced",
    mirrored: bool = False,
    events: Optional[EventLog] = None,
) -> SideCounts:
    """Counts for the whole building, split between the two sides.

    Each side first receives up to two corner-eligible units for its facade
    corners; other types follow each side's share of the length. In mirrored
    mode the core side is solved alone and copied to the clear side.
    """
    events = events or EventLog.silent()

    def _assign(core_counts: UnitCounts, clear_counts: UnitCounts) -> SideCounts:
        if core_side == "North":
            return SideCounts(north=core_counts, south=clear_counts)
        return SideCounts(north=clear_counts, south=core_counts)

    if mirrored:
        core_counts = calculate_global_unit_counts(
            core_length, config, rentable_depth, core_segments, core_bonus, strategy, events
        )
        return _assign(core_counts, dict(core_counts))

    total_length = core_length + clear_length
    totals = calculate_global_unit_counts(
        total_length,
        config,
        rentable_depth,
        core_segments + clear_segments,
        core_bonus + clear_bonus,
        strategy,
        events,
    )
    core_ratio = core_length / total_length if total_length > 0 else 0.5

    core_counts = empty_counts()
    clear_counts = empty_counts()
    core_eligible = 0
    clear_eligible = 0

    ordered = types_by_area(config)
    for t in ordered:
        amount = totals[t]
        if amount <= 0 or not is_corner_eligible(t, config):
            continue
        if amount >= 4:
            core_counts[t] = max(2, amount // 2)
        elif amount >= 2:
            if core_eligible < 2 and clear_eligible < 2:
                core_counts[t] = amount // 2
            elif core_eligible < 2:
                core_counts[t] = min(amount, 2 - core_eligible)
            elif clear_eligible < 2:
                core_counts[t] = amount - min(amount, 2 - clear_eligible)
            else:
                core_counts[t] = amount // 2
        else:
            core_counts[t] = 1 if core_eligible <= clear_eligible else 0
        clear_counts[t] = amount - core_counts[t]
        core_eligible += core_counts[t]
        clear_eligible += clear_counts[t]

    for t in ordered:
        amount = totals[t]
        if amount <= 0 or is_corner_eligible(t, config):
            continue
        core_counts[t] = min(int(math.floor(amount * core_ratio + 0.5)), amount)
        clear_counts[t] = amount - core_counts[t]

    return _assign(core_counts, clear_counts)
