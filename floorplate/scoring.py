"""Aggregate area and mix statistics."""

from __future__ import annotations

from typing import Dict, Sequence

from .models import UNIT_TYPES, LayoutStats, UnitBlock, UnitConfiguration


def mix_deviation(units: Sequence[UnitBlock], config: UnitConfiguration) -> float:
    """Largest percentage-point gap between achieved and requested mix."""
    requested_total = config.total_percentage()
    if not units or requested_total <= 0:
        return 0.0
    counts = {t: 0 for t in UNIT_TYPES}
    for unit in units:
        counts[unit.type] += 1
    worst = 0.0
    for unit_type in UNIT_TYPES:
        requested = config[unit_type].percentage / requested_total * 100
        achieved = counts[unit_type] / len(units) * 100
        worst = max(worst, abs(achieved - requested))
    return worst


def compute_stats(
    units: Sequence[UnitBlock],
    config: UnitConfiguration,
    building_length: float,
    building_depth: float,
) -> LayoutStats:
    gsf = building_length * building_depth
    nrsf = sum(u.area for u in units)
    counts: Dict[str, int] = {t: 0 for t in UNIT_TYPES}
    for unit in units:
        counts[unit.type] += 1
    return LayoutStats(
        gsf=gsf,
        nrsf=nrsf,
        efficiency=nrsf / gsf if gsf > 0 else 0.0,
        unit_counts=counts,
        total_units=len(units),
        mix_deviation=mix_deviation(units, config),
    )
