"""Named tuning constants for floorplate generation.

All lengths are meters and all areas square meters. Values that were tuned
empirically (expansion weights, safety factors, search ranges, penalty
multipliers) live here so a change is always a deliberate tuning decision.
"""

from __future__ import annotations

from typing import Dict, Tuple

FEET_TO_METERS = 0.3048
SQ_FEET_TO_SQ_METERS = FEET_TO_METERS * FEET_TO_METERS

# Default building dimensions
MIN_UNIT_WIDTH = 12 * FEET_TO_METERS
DEFAULT_CORRIDOR_WIDTH = 6 * FEET_TO_METERS
DEFAULT_CORE_WIDTH = 12 * FEET_TO_METERS
DEFAULT_CORE_DEPTH = 29.5 * FEET_TO_METERS
DEFAULT_ALIGNMENT = 0.5
DEFAULT_SEED = 42

# Flexibility model
EXPANSION_WEIGHTS: Dict[str, float] = {
    "Studio": 0.1,
    "1BR": 3.0,
    "2BR": 15.0,
    "3BR": 50.0,
}
STUDIO_MAX_EXPANSION_FACTOR = 1.15
FALLBACK_EXPANSION_FACTOR = 1.25
ONE_BR_LSHAPE_MIN_AREA = 850 * SQ_FEET_TO_SQ_METERS
CORNER_UPGRADE_WIDTH_FACTOR = 1.1

STRATEGY_SAFETY_FACTORS: Dict[str, float] = {
    "balanced": 0.99,
    "mixOptimized": 0.97,
    "efficiencyOptimized": 1.0,
}
STRATEGY_LABELS: Dict[str, str] = {
    "balanced": "Balanced",
    "mixOptimized": "Mix Optimized",
    "efficiencyOptimized": "Efficiency",
}
STRATEGY_DESCRIPTIONS: Dict[str, str] = {
    "balanced": "Equal priority to mix accuracy, size accuracy, and efficiency",
    "mixOptimized": "Prioritizes hitting exact unit mix percentages",
    "efficiencyOptimized": "Prioritizes building efficiency (NRSF/GSF)",
}

# Ordering patterns per strategy: (left corner, middle spans, right corner)
STRATEGY_PATTERNS: Dict[str, Tuple[str, str, str]] = {
    "balanced": ("valley", "valley", "valley-inverted"),
    "mixOptimized": ("desc", "asc", "desc"),
    "efficiencyOptimized": ("valley-inverted", "random", "valley"),
}
CLEAR_SIDE_RANDOM_BELOW = 0.2

# Unit counting and distribution
COUNT_FIT_TOLERANCE = 0.05
UNIT_FIT_TOLERANCE = 0.15
FIT_EPSILON = 0.01
MIN_REMAINING_TO_FILL = 0.5
OVERFLOW_STUDIO_PENALTY = 0.5

# Segment generation
AUTO_SPLIT_THRESHOLD = 1.3
OVERFLOW_TOLERANCE = 0.1
MIN_BONUS_TARGET_WIDTH = 1.0
MAX_DISTRIBUTION_PASSES = 8

# Geometry search
MIN_CORNER_LENGTH = 20 * FEET_TO_METERS
MAX_CORNER_LENGTH = 65 * FEET_TO_METERS
CORNER_MID_RESERVE = 15 * FEET_TO_METERS
CORNER_STEP = 2 * FEET_TO_METERS
MAX_CORNER_FRACTION = 0.35
OFFSET_STEP = 4 * FEET_TO_METERS
MAX_OFFSET = 30 * FEET_TO_METERS
MAX_OFFSET_FRACTION = 0.15
COMPRESSION_PENALTY = 500.0
EXPANSION_PENALTY = 200.0
COMPRESSION_THRESHOLD = -0.1
MIN_SCORING_CAPACITY = 0.1

# Wall alignment
STRICT_ALIGNMENT_THRESHOLD = 0.6
ALIGNMENT_PULL_RADIUS = 4.0
ALIGNMENT_MIN_EPSILON = 0.01
STRICT_EDGE_TOLERANCE = 0.12
EDGE_TOLERANCE = 0.1

# Core wrap, corridor voids and fillers
CORE_WRAP_MIN_GAP = 1.0
CORRIDOR_END_OVERLAP = 6 * FEET_TO_METERS
MIN_FILLER_WIDTH = 0.01
COVERAGE_TOLERANCE = 0.1

# Egress
DEFAULT_TRAVEL_LIMIT = 250 * FEET_TO_METERS
ALCOVE_FACTOR = 2.5

DEFAULT_UNIT_COLORS: Dict[str, str] = {
    "Studio": "#3b82f6",
    "1BR": "#22c55e",
    "2BR": "#f97316",
    "3BR": "#a855f7",
}
