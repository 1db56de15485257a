"""Geometry optimizer: grid search over corner length and mid-core offset."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .constants import (
    COMPRESSION_PENALTY,
    COMPRESSION_THRESHOLD,
    CORNER_MID_RESERVE,
    CORNER_STEP,
    EXPANSION_PENALTY,
    MAX_CORNER_FRACTION,
    MAX_CORNER_LENGTH,
    MAX_OFFSET,
    MAX_OFFSET_FRACTION,
    MIN_CORNER_LENGTH,
    MIN_SCORING_CAPACITY,
    OFFSET_STEP,
)
from .distributor import distribute_units_to_segments
from .events import EventLog
from .flexibility import is_corner_eligible, target_width, types_by_area
from .models import GeometrySearchResult, Segment, UnitConfiguration
from .unit_counts import UnitCounts, flex_weight_sum, min_width_sum


def score_distribution(
    segments: Sequence[Segment],
    distribution: Sequence[UnitCounts],
    config: UnitConfiguration,
    rentable_depth: float,
) -> float:
    """Weighted mismatch between segment lengths and their units' minimum widths.

    Compression costs more than expansion, and segments holding flexible
    large units are judged more leniently.
    """
    score = 0.0
    for segment, counts in zip(segments, distribution):
        ideal = min_width_sum(counts, config, rentable_depth)
        diff = segment.length + segment.bonus_area / rentable_depth - ideal
        multiplier = COMPRESSION_PENALTY if diff < COMPRESSION_THRESHOLD else EXPANSION_PENALTY
        capacity = max(flex_weight_sum(counts), MIN_SCORING_CAPACITY)
        penalty = abs(diff) * multiplier / capacity
        if math.isnan(penalty):
            return math.inf
        score += penalty
    return score


def minimum_corner_length(
    available_length: float,
    inventory: UnitCounts,
    config: UnitConfiguration,
    rentable_depth: float,
    prioritize_corners: bool = True,
) -> float:
    """Feasibility floor for the corner-bay search.

    Never more than half of ``available_length``, so both corner bays and
    the cores between them stay inside the footprint on sub-minimum bars.
    """
    min_corner = MIN_CORNER_LENGTH
    if not prioritize_corners:
        return min(min_corner, available_length / 2)
    stocked = [t for t in types_by_area(config) if inventory.get(t, 0) > 0]
    corner_widths = [target_width(t, config, rentable_depth) for t in stocked if is_corner_eligible(t, config)]
    if corner_widths:
        min_corner = max(min_corner, max(corner_widths))
        min_corner = min(min_corner, available_length * MAX_CORNER_FRACTION)
    elif stocked:
        min_corner = max(min_corner, target_width(stocked[0], config, rentable_depth) * 0.9)
    return min(min_corner, available_length / 2)


def candidate_segments(
    available_length: float,
    corner_length: float,
    offset: float,
    num_mid_spans: int,
    single_bonus: float,
    continuous_side: bool,
) -> List[Segment]:
    """Simulated segment set for one search candidate.

    Only spans that a core will actually wrap carry the bonus credit: both
    corners, and the first of two mid spans (the mid core wraps to its left).
    """
    corner_bonus = 0.0 if continuous_side else single_bonus
    mid_length = available_length - 2 * corner_length
    segments = [
        Segment(length=corner_length, is_corner=True, bonus_area=corner_bonus, facade="left"),
    ]
    if continuous_side or num_mid_spans < 2:
        segments.append(Segment(length=mid_length, is_corner=False))
    else:
        half = mid_length / 2
        segments.append(Segment(length=half + offset, is_corner=False, bonus_area=single_bonus))
        segments.append(Segment(length=half - offset, is_corner=False))
    segments.append(Segment(length=corner_length, is_corner=True, bonus_area=corner_bonus, facade="right"))
    return segments


def find_optimal_geometry(
    available_length: float,
    inventory: UnitCounts,
    config: UnitConfiguration,
    rentable_depth: float,
    num_mid_spans: int = 1,
    single_bonus: float = 0.0,
    continuous_side: bool = False,
    prioritize_corners: bool = True,
    events: Optional[EventLog] = None,
) -> GeometrySearchResult:
    """Pick the corner length (and mid offset) whose distribution scores best."""
    if events is None:
        events = EventLog.silent()
    min_corner = minimum_corner_length(available_length, inventory, config, rentable_depth, prioritize_corners)
    max_corner = min(MAX_CORNER_LENGTH, available_length / 2 - CORNER_MID_RESERVE)
    if max_corner < min_corner:
        max_corner = min_corner

    best_corner: Optional[float] = None
    best_offset = 0.0
    best_score = math.inf
    evaluated = 0

    steps = int(math.floor((max_corner - min_corner) / CORNER_STEP + 1e-9))
    for step in range(steps + 1):
        corner = min_corner + step * CORNER_STEP
        mid_length = available_length - 2 * corner
        offsets = [0.0]
        if not continuous_side and num_mid_spans == 2:
            max_dev = min(MAX_OFFSET, math.floor(mid_length * MAX_OFFSET_FRACTION))
            offset = OFFSET_STEP
            while offset <= max_dev:
                offsets.extend([offset, -offset])
                offset += OFFSET_STEP

        for offset in offsets:
            segments = candidate_segments(
                available_length, corner, offset, num_mid_spans, single_bonus, continuous_side
            )
            if any(seg.length <= 0 for seg in segments):
                continue
            distribution = distribute_units_to_segments(
                inventory, segments, config, rentable_depth, prioritize_corners
            )
            score = score_distribution(segments, distribution, config, rentable_depth)
            evaluated += 1
            if score < best_score:
                best_score = score
                best_corner = corner
                best_offset = offset

    if best_corner is None:
        events.warning(
            "geometry_fallback",
            f"No candidate scored; using minimum corner length {min_corner:.2f}m",
            corner_length=min_corner,
        )
        return GeometrySearchResult(corner_length=min_corner, mid_core_offset=0.0, candidates_evaluated=evaluated)

    events.debug(
        "geometry_selected",
        f"Corner length {best_corner:.2f}m, mid offset {best_offset:.2f}m (score {best_score:.2f})",
        corner_length=best_corner,
        mid_core_offset=best_offset,
        score=best_score,
    )
    return GeometrySearchResult(
        corner_length=best_corner,
        mid_core_offset=best_offset,
        score=best_score,
        candidates_evaluated=evaluated,
    )
