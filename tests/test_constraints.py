from floorplate.constraints import validate_layout
from floorplate.generator import generate_floorplate
from floorplate.models import (
    CoreBlock,
    CorridorBlock,
    EgressResult,
    FillerBlock,
    FloorPlanData,
    Transform,
)
from floorplate.scoring import compute_stats

from conftest import RENTABLE_DEPTH, make_unit

LENGTH = 36.0
HALF = LENGTH / 2
SOUTH_Y = RENTABLE_DEPTH + 1.83 - 9.0


def _egress(status="Pass"):
    return EgressResult(
        max_dead_end=16.7,
        max_travel_distance=16.7,
        dead_end_status=status,
        travel_distance_status=status,
        travel_distance_limit=76.2,
    )


def _core(x, uid):
    return CoreBlock(id=uid, x=x, y=-9.0, width=1.3, depth=8.99, side="North", role="End")


def make_plan(config, south=None, cores=None, fillers=None):
    north = [make_unit("2BR", -HALF, 16.7, y=-9.0), make_unit("2BR", 1.3, 16.7, y=-9.0)]
    if south is None:
        south = [("2BR", -HALF, 18.0), ("2BR", 0.0, 18.0)]
    units = north + [make_unit(t, x, w, side="South", y=SOUTH_Y) for t, x, w in south]
    return FloorPlanData(
        units=units,
        cores=cores if cores is not None else [_core(-1.3, "core-left"), _core(0.0, "core-right")],
        fillers=fillers or [],
        corridor=CorridorBlock(x=-HALF, y=RENTABLE_DEPTH - 9.0, width=LENGTH, depth=1.83),
        building_length=LENGTH,
        building_depth=18.0,
        floor_elevation=0.0,
        transform=Transform(center_x=0.0, center_y=0.0, rotation=0.0),
        stats=compute_stats(units, config, LENGTH, 18.0),
        egress=_egress(),
    )


def test_validate_layout_passes(config):
    result = validate_layout(make_plan(config), config)
    assert result.passed, result.failed_rules
    assert result.advisories == []


def test_generated_layout_is_structurally_sound(footprint, config, egress, options):
    plan = generate_floorplate(footprint, config, egress, options)
    result = validate_layout(plan, config)
    assert not {"coverage_north", "coverage_south", "core_count", "minimum_width"} & set(result.failed_rules)


def test_validate_detects_missing_unit(config):
    plan = make_plan(config)
    # drop a south unit to leave a hole in the row
    plan.units = [u for u in plan.units if not (u.side == "South" and u.x == 0.0)]
    result = validate_layout(plan, config)
    assert not result.passed
    assert "coverage_south" in result.failed_rules


def test_validate_detects_overlap(config):
    plan = make_plan(config, south=[("2BR", -HALF, 18.0), ("2BR", -1.0, 18.0)])
    result = validate_layout(plan, config)
    assert "coverage_south" in result.failed_rules
    assert any("overlaps" in msg for msg in result.messages)


def test_validate_detects_narrow_unit(config):
    filler = FillerBlock(id="south-filler-0", x=-6.0, y=SOUTH_Y, width=6.0, depth=RENTABLE_DEPTH, side="South")
    plan = make_plan(config, south=[("2BR", -HALF, 12.0), ("2BR", 0.0, 18.0)], fillers=[filler])
    result = validate_layout(plan, config)
    assert result.failed_rules == ["minimum_width"]


def test_truncated_unit_is_reported_not_failed(config):
    filler = FillerBlock(id="south-filler-0", x=-6.0, y=SOUTH_Y, width=6.0, depth=RENTABLE_DEPTH, side="South")
    plan = make_plan(config, south=[("2BR", -HALF, 12.0), ("2BR", 0.0, 18.0)], fillers=[filler])
    plan.units[2].is_truncated = True
    result = validate_layout(plan, config)
    assert result.passed
    assert any("truncated" in msg for msg in result.messages)


def test_validate_requires_two_cores(config):
    filler = FillerBlock(id="north-filler-0", x=0.0, y=-9.0, width=1.3, depth=RENTABLE_DEPTH, side="North")
    plan = make_plan(config, cores=[_core(-1.3, "core-left")], fillers=[filler])
    result = validate_layout(plan, config)
    assert result.failed_rules == ["core_count"]


def test_validate_flags_ineligible_corner(config):
    plan = make_plan(config, south=[("Studio", -HALF, 8.0), ("2BR", -10.0, 14.0), ("2BR", 4.0, 14.0)])
    result = validate_layout(plan, config)
    assert result.failed_rules == ["corner_eligibility"]


def test_egress_failures_are_advisory(config):
    plan = make_plan(config)
    plan.egress = _egress("Fail")
    result = validate_layout(plan, config)
    assert result.passed
    assert len(result.advisories) == 2
    assert all(msg.startswith("Advisory:") for msg in result.advisories)
