"""Core count decision and advisory egress evaluation."""

from __future__ import annotations

from typing import Optional, Sequence

from .constants import ALCOVE_FACTOR, DEFAULT_TRAVEL_LIMIT, MIN_CORNER_LENGTH
from .models import CoreBlock, EgressConfig, EgressResult


def travel_limit(egress: EgressConfig) -> float:
    if egress.travel_distance_limit and egress.travel_distance_limit > 0:
        return egress.travel_distance_limit
    return DEFAULT_TRAVEL_LIMIT


def two_core_travel(building_length: float, core_width: float) -> float:
    """Worst-case half distance between two end cores at minimum corner length."""
    return (building_length - 2 * MIN_CORNER_LENGTH - 2 * core_width) / 2


def needs_mid_core(building_length: float, core_width: float, egress: EgressConfig) -> bool:
    return two_core_travel(building_length, core_width) > travel_limit(egress)


def evaluate_egress(
    cores: Sequence[CoreBlock],
    building_length: float,
    corridor_width: float,
    egress: EgressConfig,
    left_void: float = 0.0,
    right_void: float = 0.0,
) -> EgressResult:
    """Dead-end and travel distances for a corridor served by ``cores``.

    A dead end shorter than an alcove (a few corridor widths) always passes.
    Travel distance is the worse of the longest dead end and half the largest
    run between consecutive cores.
    """
    limit = travel_limit(egress)
    ordered = sorted(cores, key=lambda c: c.x)
    if not ordered:
        return EgressResult(
            max_dead_end=building_length,
            max_travel_distance=building_length,
            dead_end_status="Fail",
            travel_distance_status="Fail",
            travel_distance_limit=limit,
        )

    left_dead_end = ordered[0].x - left_void
    last = ordered[-1]
    right_dead_end = building_length - (last.x + last.width) - right_void
    max_dead_end = max(left_dead_end, right_dead_end)

    is_alcove = max_dead_end < ALCOVE_FACTOR * corridor_width
    dead_end_ok = is_alcove or max_dead_end <= egress.dead_end_limit

    between = 0.0
    for a, b in zip(ordered, ordered[1:]):
        between = max(between, (b.x - (a.x + a.width)) / 2)
    max_travel = max(max_dead_end, between)

    return EgressResult(
        max_dead_end=max_dead_end,
        max_travel_distance=max_travel,
        dead_end_status="Pass" if dead_end_ok else "Fail",
        travel_distance_status="Pass" if max_travel <= limit else "Fail",
        travel_distance_limit=limit,
    )
