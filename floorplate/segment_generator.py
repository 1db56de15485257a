"""Unit-segment generator: order one segment's units and size them."""

from __future__ import annotations

import math
import random
from typing import Dict, List, Optional, Tuple

from .constants import (
    AUTO_SPLIT_THRESHOLD,
    CORNER_UPGRADE_WIDTH_FACTOR,
    DEFAULT_UNIT_COLORS,
    FIT_EPSILON,
    MAX_DISTRIBUTION_PASSES,
    MIN_BONUS_TARGET_WIDTH,
    OVERFLOW_TOLERANCE,
)
from .events import EventLog
from .flexibility import (
    expansion_weight,
    fallback_priority,
    is_corner_eligible,
    is_l_shape_eligible,
    max_width,
    smallest_active_type,
    target_width,
    types_by_area,
)
from .models import Segment, UnitBlock, UnitConfiguration
from .unit_counts import UnitCounts, total


def unit_color(unit_type: str, colors: Optional[Dict[str, str]] = None) -> str:
    if colors and colors.get(unit_type):
        return colors[unit_type]
    return DEFAULT_UNIT_COLORS[unit_type]


def order_units(counts: UnitCounts, pattern: str, config: UnitConfiguration, rng: random.Random) -> List[str]:
    """Expand counts into a placement sequence following ``pattern``."""
    inventory: List[str] = []
    for t in types_by_area(config):
        inventory.extend([t] * counts.get(t, 0))

    if pattern == "asc":
        return list(reversed(inventory))
    if pattern == "valley":
        left = inventory[0::2]
        right = inventory[1::2]
        return left + list(reversed(right))
    if pattern == "valley-inverted":
        left = inventory[1::2]
        right = inventory[0::2]
        return left + list(reversed(right))
    if pattern == "random":
        shuffled = list(inventory)
        rng.shuffle(shuffled)
        return shuffled
    return inventory


def _protected_index(segment: Segment, count: int) -> int:
    if segment.is_right_corner and not segment.is_left_corner:
        return count - 1
    if segment.is_left_corner and not segment.is_right_corner:
        return 0
    return -1


def _keep_studio_off_bonus(units: List[str], segment: Segment, events: EventLog) -> None:
    if segment.bonus_area <= 0 or not units:
        return
    wrap_idx = 0 if segment.bonus_on_first else len(units) - 1
    if units[wrap_idx] != "Studio":
        return
    facade = _protected_index(segment, len(units))
    if segment.bonus_on_first:
        candidates = range(1, len(units))
    else:
        candidates = range(wrap_idx - 1, -1, -1)
    for i in candidates:
        if i != facade and units[i] != "Studio":
            units[wrap_idx], units[i] = units[i], units[wrap_idx]
            events.debug(
                "bonus_swap",
                f"Moved Studio off the core-wrap position (swapped with {units[wrap_idx]})",
                position=wrap_idx,
                swapped_with=i,
            )
            return


def _upgrade_facade_unit(units: List[str], idx: int, config: UnitConfiguration, rentable_depth: float,
                         events: EventLog) -> None:
    candidates = types_by_area(config, descending=False)
    candidates = [t for t in candidates if is_corner_eligible(t, config)]
    if not candidates:
        return
    current = target_width(units[idx], config, rentable_depth)
    choice = candidates[0]
    for t in candidates:
        if target_width(t, config, rentable_depth) <= current * CORNER_UPGRADE_WIDTH_FACTOR:
            choice = t
            break
    events.warning(
        "corner_upgrade",
        f"Upgraded facade unit {units[idx]} to {choice}",
        position=idx,
        from_type=units[idx],
        to_type=choice,
    )
    units[idx] = choice


def _enforce_corner_units(units: List[str], segment: Segment, config: UnitConfiguration,
                          rentable_depth: float, events: EventLog) -> None:
    if not segment.is_corner or not units:
        return
    last = len(units) - 1
    if segment.is_left_corner and not is_corner_eligible(units[0], config):
        for i in range(1, len(units)):
            if is_corner_eligible(units[i], config):
                units[0], units[i] = units[i], units[0]
                events.debug("corner_swap", f"Swapped {units[0]} into the left facade slot", position=0)
                break
    if segment.is_right_corner and not is_corner_eligible(units[last], config):
        stop = 1 if segment.is_left_corner else 0
        for i in range(last - 1, stop - 1, -1):
            if is_corner_eligible(units[i], config):
                units[last], units[i] = units[i], units[last]
                events.debug("corner_swap", f"Swapped {units[last]} into the right facade slot", position=last)
                break

    if segment.is_left_corner and not is_corner_eligible(units[0], config):
        _upgrade_facade_unit(units, 0, config, rentable_depth, events)
    if segment.is_right_corner and not is_corner_eligible(units[last], config):
        _upgrade_facade_unit(units, last, config, rentable_depth, events)


def _bonus_credit(units: List[str], segment: Segment, config: UnitConfiguration,
                  rentable_depth: float) -> Tuple[int, float]:
    """Index of the core-adjacent unit and the width its wrap will supply."""
    if not units or segment.bonus_area <= 0:
        return -1, 0.0
    idx = 0 if segment.bonus_on_first else len(units) - 1
    if not is_l_shape_eligible(units[idx], config):
        return -1, 0.0
    return idx, segment.bonus_area / rentable_depth


def _minimum_widths(units: List[str], segment: Segment, config: UnitConfiguration,
                    rentable_depth: float) -> Tuple[List[float], int, float]:
    mins = [target_width(t, config, rentable_depth) for t in units]
    bonus_idx, bonus_width = _bonus_credit(units, segment, config, rentable_depth)
    if bonus_idx >= 0:
        mins[bonus_idx] = max(MIN_BONUS_TARGET_WIDTH, mins[bonus_idx] - bonus_width)
    return mins, bonus_idx, bonus_width


def _remove_overflow(units: List[str], segment: Segment, config: UnitConfiguration,
                     rentable_depth: float, events: EventLog) -> None:
    while len(units) > 1:
        mins, _, _ = _minimum_widths(units, segment, config, rentable_depth)
        if sum(mins) <= segment.length + OVERFLOW_TOLERANCE:
            return
        protected = _protected_index(segment, len(units))
        remove = -1
        for i in range(len(units) - 1, -1, -1):
            if i != protected and not is_corner_eligible(units[i], config):
                remove = i
                break
        if remove < 0:
            for i in range(len(units) - 1, -1, -1):
                if i != protected:
                    remove = i
                    break
        if remove < 0:
            return
        removed = units.pop(remove)
        events.warning(
            "overflow_removed",
            f"Removed {removed} from a {segment.length:.2f}m segment to prevent overflow",
            unit_type=removed,
            position=remove,
            segment_start=segment.start_x,
        )


def _spread_slack(widths: List[float], maxs: List[float], weights: List[float], slack: float) -> float:
    """Distribute ``slack`` by weight under max caps; returns what is left."""
    remaining = slack
    capped = set()
    for _ in range(MAX_DISTRIBUTION_PASSES):
        if remaining <= FIT_EPSILON:
            break
        free = [i for i in range(len(widths)) if i not in capped]
        weight = sum(weights[i] for i in free)
        if weight <= 0:
            break
        given = 0.0
        for i in free:
            share = remaining * weights[i] / weight
            room = maxs[i] - widths[i]
            if share >= room:
                widths[i] = maxs[i]
                capped.add(i)
                given += max(room, 0.0)
            else:
                widths[i] += share
                given += share
        remaining -= given
    return remaining


def generate_unit_segment(
    segment: Segment,
    counts: UnitCounts,
    config: UnitConfiguration,
    rentable_depth: float,
    y: float,
    rng: Optional[random.Random] = None,
    colors: Optional[Dict[str, str]] = None,
    segment_index: int = 0,
    events: Optional[EventLog] = None,
) -> List[UnitBlock]:
    """Place one segment's units left to right from ``segment.start_x``.

    Widths never drop below target except for a last unit truncated by an
    overflow the removal pass could not resolve; such units carry
    ``is_truncated``. Widths sum to the segment length.
    """
    if events is None:
        events = EventLog.silent()
    rng = rng or random.Random(0)
    if segment.length <= 0:
        events.warning(
            "segment_empty",
            f"Segment {segment_index} has non-positive length {segment.length:.2f}m",
            segment=segment_index,
        )
        return []
    if total(counts) == 0:
        events.warning(
            "segment_empty",
            f"Segment {segment_index} received no units; a filler will cover it",
            segment=segment_index,
        )
        return []

    units = order_units(counts, segment.pattern, config, rng)
    _keep_studio_off_bonus(units, segment, events)
    _enforce_corner_units(units, segment, config, rentable_depth, events)
    _remove_overflow(units, segment, config, rentable_depth, events)

    mins, bonus_idx, bonus_width = _minimum_widths(units, segment, config, rentable_depth)
    maxs = [max(max_width(t, config, rentable_depth), m) for t, m in zip(units, mins)]
    if bonus_idx >= 0:
        maxs[bonus_idx] = max(maxs[bonus_idx] - bonus_width, mins[bonus_idx])
    weights = [expansion_weight(t) for t in units]

    widths = list(mins)
    last_idx = len(units) - 1
    slack = segment.length - sum(mins)
    leftover = 0.0
    if slack < 0:
        events.warning(
            "compression_gap",
            f"Segment {segment_index} is {-slack:.2f}m short of its unit minimums",
            segment=segment_index,
            shortfall=-slack,
        )
        widths[last_idx] = segment.length - sum(widths[:-1])
    else:
        leftover = _spread_slack(widths, maxs, weights, slack)

    absorber = -1
    split_at = -1
    if leftover > FIT_EPSILON:
        events.debug(
            "width_capped",
            f"All units capped with {leftover:.2f}m left over",
            segment=segment_index,
            leftover=leftover,
        )
        absorber = _largest_absorber(units, config)

    on_facade = segment.is_right_corner or (segment.is_left_corner and last_idx == 0)
    facade_locked = on_facade and is_corner_eligible(units[last_idx], config)
    tail = widths[last_idx] + leftover
    if absorber == last_idx and not facade_locked and tail > mins[last_idx] * AUTO_SPLIT_THRESHOLD:
        excess = tail - mins[last_idx]
        filler_type = smallest_active_type(config)
        filler_min = target_width(filler_type, config, rentable_depth)
        if excess >= filler_min:
            filler_width = min(excess, max(max_width(filler_type, config, rentable_depth), filler_min))
            split_at = last_idx
            units.insert(split_at, filler_type)
            mins.insert(split_at, filler_min)
            widths.insert(split_at, filler_width)
            last_idx += 1
            absorber = last_idx
            widths[last_idx] = tail - filler_width
            leftover = 0.0
            events.info(
                "auto_split",
                f"Split an oversized {units[last_idx]} by inserting a {filler_type}",
                segment=segment_index,
                excess=excess,
            )

    if leftover > FIT_EPSILON:
        widths[absorber] += leftover
        events.info(
            "residual_gap",
            f"{units[absorber]} absorbs {leftover:.2f}m past its maximum width",
            segment=segment_index,
            position=absorber,
            gap=leftover,
        )

    # bonus credit follows its unit; an inserted unit never takes it
    bonus_position = bonus_idx
    if 0 <= split_at <= bonus_position:
        bonus_position += 1

    blocks: List[UnitBlock] = []
    x = segment.start_x
    for i, (unit_type, width) in enumerate(zip(units, widths)):
        if not math.isfinite(width) or width <= 0:
            events.error(
                "nonfinite_width",
                f"Skipped {unit_type} with invalid width {width}",
                segment=segment_index,
                position=i,
            )
            continue
        truncated = width < mins[i] - FIT_EPSILON
        if truncated:
            events.warning(
                "unit_truncated",
                f"{unit_type} truncated to {width:.2f}m (target {mins[i]:.2f}m)",
                segment=segment_index,
                position=i,
            )
        blocks.append(
            UnitBlock(
                id=f"unit-{segment.side.lower()}-{segment_index}-{i}",
                type=unit_type,
                type_id=unit_type,
                type_name=unit_type,
                x=x,
                y=y,
                width=width,
                depth=rentable_depth,
                area=width * rentable_depth,
                color=unit_color(unit_type, colors),
                side=segment.side,
                is_truncated=truncated,
                bonus_area=segment.bonus_area if i == bonus_position else 0.0,
            )
        )
        x += width
    return blocks


def _largest_absorber(units: List[str], config: UnitConfiguration) -> int:
    for unit_type in fallback_priority(config) + tuple(types_by_area(config)):
        if unit_type in units:
            return units.index(unit_type)
    return len(units) - 1
