"""Flexibility model: per-type width bounds, weights and placement eligibility.

Target area is an absolute floor. Units only ever expand, and the expansion
weights skew leftover length toward the largest types, which tolerate size
variation far better than studios do.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .constants import (
    EXPANSION_WEIGHTS,
    FALLBACK_EXPANSION_FACTOR,
    ONE_BR_LSHAPE_MIN_AREA,
    STRATEGY_SAFETY_FACTORS,
    STUDIO_MAX_EXPANSION_FACTOR,
)
from .models import UNIT_TYPES, UnitConfiguration


def target_width(unit_type: str, config: UnitConfiguration, rentable_depth: float) -> float:
    """Minimum width of a unit: target area over rentable depth."""
    return config[unit_type].area / rentable_depth


def expansion_weight(unit_type: str) -> float:
    return EXPANSION_WEIGHTS.get(unit_type, 10.0)


def fallback_priority(config: UnitConfiguration) -> Tuple[str, ...]:
    """Active types ordered from the largest absorber to the smallest.

    This single table answers every "largest takes the excess, smallest
    never does" question: overflow order, rounding remainder, auto-split type.
    """
    active = config.active_types()
    order = sorted(active, key=lambda t: (config[t].area, UNIT_TYPES.index(t)), reverse=True)
    return tuple(order)


def largest_active_type(config: UnitConfiguration) -> Optional[str]:
    order = fallback_priority(config)
    return order[0] if order else None


def smallest_active_type(config: UnitConfiguration) -> str:
    order = fallback_priority(config)
    return order[-1] if order else "Studio"


def max_width(unit_type: str, config: UnitConfiguration, rentable_depth: float) -> float:
    """Upper width bound so a unit never visually becomes the next size class."""
    base = target_width(unit_type, config, rentable_depth)
    if unit_type == "Studio":
        return base * STUDIO_MAX_EXPANSION_FACTOR

    this_area = config[unit_type].area
    order = fallback_priority(config)
    largest_area = config[order[0]].area if order else this_area
    if this_area >= largest_area:
        smallest = smallest_active_type(config)
        return base + target_width(smallest, config, rentable_depth)

    larger = [t for t in reversed(order) if config[t].area > this_area]
    if larger:
        return target_width(larger[0], config, rentable_depth)
    return base * FALLBACK_EXPANSION_FACTOR


def is_corner_eligible(unit_type: str, config: UnitConfiguration) -> bool:
    explicit = config[unit_type].corner_eligible
    if explicit is not None:
        return explicit
    return unit_type in fallback_priority(config)[:2]


def corner_eligible_types(config: UnitConfiguration) -> List[str]:
    """Corner-eligible types, largest first."""
    return [t for t in _all_by_area_desc(config) if is_corner_eligible(t, config)]


def is_l_shape_eligible(unit_type: str, config: UnitConfiguration) -> bool:
    if unit_type == "Studio":
        return False
    if unit_type == "1BR":
        return config[unit_type].area > ONE_BR_LSHAPE_MIN_AREA
    return True


def strategy_safety_factor(strategy: str) -> float:
    return STRATEGY_SAFETY_FACTORS.get(strategy, STRATEGY_SAFETY_FACTORS["balanced"])


def _all_by_area_desc(config: UnitConfiguration) -> List[str]:
    return sorted(UNIT_TYPES, key=lambda t: (config[t].area, UNIT_TYPES.index(t)), reverse=True)


def types_by_area(config: UnitConfiguration, descending: bool = True) -> List[str]:
    order = _all_by_area_desc(config)
    return order if descending else list(reversed(order))
