import pytest

from floorplate.events import EventLog
from floorplate.unit_counts import (
    SideCounts,
    apply_core_side_mix_bias,
    calculate_building_unit_counts,
    calculate_global_unit_counts,
    min_width_sum,
    total,
)

from conftest import make_config


def test_zero_mix_gives_empty_counts(depth):
    events = EventLog()
    counts = calculate_global_unit_counts(50, make_config(percentages=(0, 0, 0, 0)), depth, events=events)
    assert total(counts) == 0
    assert events.codes() == ["counts_empty"]


def test_sub_minimum_length_gives_empty_counts(config, depth):
    assert total(calculate_global_unit_counts(2.0, config, depth)) == 0


def test_counts_fit_minimum_widths(config, depth):
    counts = calculate_global_unit_counts(60, config, depth)
    assert total(counts) > 0
    assert min_width_sum(counts, config, depth) <= 60 * 0.99 + 0.05


def test_every_active_type_guaranteed(config, depth):
    events = EventLog()
    counts = calculate_global_unit_counts(60, config, depth, events=events)
    assert counts == {"Studio": 1, "1BR": 2, "2BR": 1, "3BR": 1}
    assert "counts_guaranteed_minimum" in events.codes()


def test_inactive_type_never_added(depth):
    config = make_config(percentages=(0, 50, 50, 0))
    counts = calculate_global_unit_counts(80, config, depth)
    assert counts["Studio"] == 0 and counts["3BR"] == 0


def test_bonus_area_adds_capacity(config, depth):
    plain = calculate_global_unit_counts(120, config, depth)
    bonus = calculate_global_unit_counts(120, config, depth, bonus_area=40 * depth)
    assert total(bonus) > total(plain)


def test_building_split_preserves_totals(config, depth):
    split = calculate_building_unit_counts(52.7, 60, 0, 0, 3, 3, config, depth)
    expected = calculate_global_unit_counts(112.7, config, depth, 6)
    assert split.combined() == expected


def test_building_split_seeds_corner_types_on_both_sides(depth):
    config = make_config(percentages=(10, 30, 40, 20))
    split = calculate_building_unit_counts(90, 97.3, 0, 0, 3, 3, config, depth)
    for side in ("North", "South"):
        counts = split.for_side(side)
        assert counts["2BR"] + counts["3BR"] >= 2


def test_mirrored_mode_copies_core_side(config, depth):
    split = calculate_building_unit_counts(52.7, 60, 0, 0, 3, 3, config, depth, core_side="South", mirrored=True)
    assert split.north == split.south
    assert split.south == calculate_global_unit_counts(52.7, config, depth, 3)


def test_core_side_mix_bias_keeps_totals():
    counts = SideCounts(
        north={"Studio": 0, "1BR": 4, "2BR": 2, "3BR": 1},
        south={"Studio": 3, "1BR": 2, "2BR": 2, "3BR": 1},
    )
    before = counts.combined()
    biased = apply_core_side_mix_bias(counts, "North", 2)
    assert biased.combined() == before
    assert biased.north["Studio"] == 2
    assert biased.south["1BR"] == 4


@pytest.mark.parametrize("strategy", ["balanced", "mixOptimized", "efficiencyOptimized"])
def test_strategies_yield_units(config, depth, strategy):
    assert total(calculate_global_unit_counts(100, config, depth, strategy=strategy)) > 0
