"""Post-hoc validators for generated floorplates."""

from __future__ import annotations

from typing import List, Tuple

from .constants import COVERAGE_TOLERANCE, EDGE_TOLERANCE, FIT_EPSILON
from .flexibility import is_corner_eligible, target_width
from .models import FloorPlanData, UnitConfiguration, ValidationResult


def _row_spans(plan: FloorPlanData, side: str) -> List[Tuple[float, float, str]]:
    spans = [(u.x, u.width, u.id) for u in plan.units if u.side == side]
    spans.extend((c.x, c.width, c.id) for c in plan.cores if c.side == side)
    spans.extend((f.x, f.width, f.id) for f in plan.fillers if f.side == side)
    return sorted(spans)


def _coverage_problem(plan: FloorPlanData, side: str) -> str | None:
    spans = _row_spans(plan, side)
    covered = sum(width for _, width, _ in spans)
    if abs(covered - plan.building_length) > COVERAGE_TOLERANCE:
        return f"{side} row covers {covered:.2f}m of {plan.building_length:.2f}m."
    for (x1, w1, id1), (x2, _, id2) in zip(spans, spans[1:]):
        if x2 < x1 + w1 - COVERAGE_TOLERANCE:
            return f"{side} row overlaps between {id1} and {id2}."
    return None


def validate_layout(plan: FloorPlanData, config: UnitConfiguration) -> ValidationResult:
    """Validate a floorplate against its structural guarantees.

    Egress outcomes are reported as advisories; they never fail validation.
    """
    messages: List[str] = []
    failed: List[str] = []
    advisories: List[str] = []

    # Row coverage
    for side in ("North", "South"):
        problem = _coverage_problem(plan, side)
        if problem:
            failed.append(f"coverage_{side.lower()}")
            messages.append(f"Fail: {problem}")
        else:
            messages.append(f"{side} row fully covered without overlap.")

    # Expand-only floor
    undersized = []
    for unit in plan.units:
        if unit.is_truncated or unit.depth <= 0:
            continue
        effective = unit.width + unit.bonus_area / unit.depth
        if effective < target_width(unit.type, config, unit.depth) - FIT_EPSILON:
            undersized.append(unit.id)
    if undersized:
        failed.append("minimum_width")
        messages.append(f"Fail: units below target width: {', '.join(undersized)}.")
    else:
        messages.append("All units meet their target width.")
    truncated = [u.id for u in plan.units if u.is_truncated]
    if truncated:
        messages.append(f"{len(truncated)} unit(s) truncated by overflow: {', '.join(truncated)}.")

    # Cores
    if len(plan.cores) < 2:
        failed.append("core_count")
        messages.append(f"Fail: {len(plan.cores)} core(s); at least two required.")
    else:
        messages.append(f"{len(plan.cores)} cores placed.")

    # Facade corners
    half = plan.building_length / 2
    bad_corners = []
    for side in ("North", "South"):
        row = plan.units_on(side)
        eligible = sum(1 for u in row if is_corner_eligible(u.type, config))
        if not row or eligible < 2:
            continue
        ends = []
        if abs(row[0].x + half) < EDGE_TOLERANCE:
            ends.append(row[0])
        if abs(row[-1].right - half) < EDGE_TOLERANCE:
            ends.append(row[-1])
        bad_corners.extend(u.id for u in ends if not is_corner_eligible(u.type, config))
    if bad_corners:
        failed.append("corner_eligibility")
        messages.append(f"Fail: facade corners hold ineligible units: {', '.join(bad_corners)}.")
    else:
        messages.append("Facade corners hold corner-eligible units.")

    # Egress (advisory)
    egress = plan.egress
    if egress.dead_end_status == "Fail":
        advisories.append(f"Advisory: dead end {egress.max_dead_end:.1f}m exceeds the limit.")
    if egress.travel_distance_status == "Fail":
        advisories.append(
            f"Advisory: travel distance {egress.max_travel_distance:.1f}m exceeds "
            f"{egress.travel_distance_limit:.1f}m."
        )
    if not advisories:
        messages.append("Egress distances within limits.")
    messages.extend(advisories)

    return ValidationResult(passed=not failed, messages=messages, failed_rules=failed, advisories=advisories)
