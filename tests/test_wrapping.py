import pytest

from floorplate.constants import CORRIDOR_END_OVERLAP
from floorplate.events import EventLog
from floorplate.models import CoreBlock
from floorplate.wrapping import absorb_corridor_voids, apply_core_wrapping, detect_fillers, has_wrap_gap

from conftest import make_unit

CORE_W = 3.6576
CORE_D = 8.99
CORRIDOR = 1.83


def _core(x, side="North", rentable=12.0, uid="core"):
    y = rentable - CORE_D if side == "North" else rentable + CORRIDOR
    return CoreBlock(id=uid, x=x, y=y, width=CORE_W, depth=CORE_D, side=side, role="End")


def test_wrap_gap_threshold():
    assert has_wrap_gap(12.0, CORE_D)
    assert not has_wrap_gap(8.085, CORE_D)
    assert not has_wrap_gap(CORE_D + 0.5, CORE_D)


def test_left_core_wraps_left_neighbour(config):
    events = EventLog()
    units = [
        make_unit("2BR", 0.0, 10.0, depth=12.0),
        make_unit("3BR", 10.0 + CORE_W, 26.3424, depth=12.0),
        make_unit("Studio", 40.0 + CORE_W, 8.0, depth=12.0),
    ]
    cores = [_core(10.0, uid="core-left"), _core(40.0, uid="core-right")]
    before = units[0].area
    wrapped = apply_core_wrapping(units, cores, 12.0, CORE_D, config, events=events)

    assert wrapped == 1
    unit = units[0]
    assert unit.is_l_shaped
    assert unit.area == pytest.approx(before + CORE_W * (12.0 - CORE_D))
    strip = unit.rects[-1]
    assert (strip.x, strip.y, strip.width) == (10.0, 0.0, CORE_W)
    assert strip.depth == pytest.approx(12.0 - CORE_D)
    assert len(unit.poly_points) == 6
    # the studio right of the rightmost core cannot take an L
    assert events.codes() == ["core_wrapped", "core_wrap_skipped"]
    assert not units[2].is_l_shaped


def test_single_core_wraps_right_neighbour_on_south(config):
    south_y = 12.0 + CORRIDOR
    units = [
        make_unit("1BR", 0.0, 10.0, depth=12.0, side="South", y=south_y),
        make_unit("2BR", 10.0 + CORE_W, 14.0, depth=12.0, side="South", y=south_y),
    ]
    wrapped = apply_core_wrapping(units, [_core(10.0, side="South")], 12.0, CORE_D, config)
    assert wrapped == 1
    assert not units[0].is_l_shaped
    strip = units[1].rects[-1]
    assert strip.x == 10.0
    assert strip.y == pytest.approx(south_y + CORE_D)
    xs = {p.x for p in units[1].poly_points}
    assert xs == {10.0, 10.0 + CORE_W, 10.0 + CORE_W + 14.0}


def test_no_wrap_when_core_fills_depth(config, depth):
    units = [make_unit("2BR", 0.0, 10.0)]
    assert apply_core_wrapping(units, [_core(10.0, rentable=depth)], depth, CORE_D, config) == 0
    assert not units[0].is_l_shaped


def test_corridor_voids_absorbed_by_eligible_end_units(config, depth):
    events = EventLog()
    south_y = depth + CORRIDOR
    units = [
        make_unit("2BR", 0.0, 14.0),
        make_unit("3BR", 43.0, 17.0),
        make_unit("2BR", 0.0, 13.7, side="South", y=south_y),
        make_unit("Studio", 50.0, 10.0, side="South", y=south_y),
    ]
    north_area = units[0].area
    left, right = absorb_corridor_voids(units, 60.0, depth, CORRIDOR, config, events=events)

    assert left == pytest.approx(13.7 - CORRIDOR_END_OVERLAP)
    assert right == 0.0
    assert units[0].area == pytest.approx(north_area + left * CORRIDOR / 2)
    assert units[0].rects[-1].y == pytest.approx(depth)
    assert units[2].rects[-1].y == pytest.approx(depth + CORRIDOR / 2)
    assert units[0].is_l_shaped and units[2].is_l_shaped
    assert not units[1].is_l_shaped
    voids = events.with_code("corridor_void")
    assert [e.data["end"] for e in voids] == ["left", "right"]
    assert voids[1].data["length"] == 0.0


def test_void_extends_an_existing_core_wrap_outline(config):
    north = make_unit("2BR", 0.0, 14.0, depth=12.0)
    south = make_unit("2BR", 0.0, 13.7, depth=12.0, side="South", y=12.0 + CORRIDOR)
    cores = [_core(14.0, uid="core-left"), _core(40.0, uid="core-right")]
    assert apply_core_wrapping([north], cores, 12.0, CORE_D, config) == 1

    left, _ = absorb_corridor_voids([north, south], 60.0, 12.0, CORRIDOR, config)
    gap = 12.0 - CORE_D
    half = CORRIDOR / 2
    expected = [
        (0.0, 0.0), (14.0 + CORE_W, 0.0), (14.0 + CORE_W, gap), (14.0, gap),
        (14.0, 12.0), (left, 12.0), (left, 12.0 + half), (0.0, 12.0 + half),
    ]
    outline = {(round(p.x, 6), round(p.y, 6)) for p in north.poly_points}
    assert len(north.poly_points) == 8
    assert outline == {(round(x, 6), round(y, 6)) for x, y in expected}
    assert north.area == pytest.approx(14.0 * 12.0 + CORE_W * gap + left * half)
    assert len(south.poly_points) == 6


def test_fillers_cover_uncovered_stretches():
    events = EventLog()
    units = [make_unit("2BR", 2.0, 8.0), make_unit("3BR", 10.0 + CORE_W, 40.0 - 10.0 - CORE_W)]
    cores = [_core(10.0, rentable=8.085)]
    fillers = detect_fillers(units, cores, "North", 0.0, 8.085, 50.0, events=events)

    assert [(round(f.x, 6), round(f.width, 6)) for f in fillers] == [(0.0, 2.0), (40.0, 10.0)]
    assert [f.id for f in fillers] == ["north-filler-0", "north-filler-1"]
    assert events.codes() == ["filler_created", "filler_created"]


def test_fillers_ignore_other_side_and_empty_row_is_one_filler():
    units = [make_unit("2BR", 0.0, 20.0)]
    fillers = detect_fillers(units, [], "South", 9.9, 8.0, 20.0)
    assert len(fillers) == 1
    assert fillers[0].width == 20.0 and fillers[0].side == "South"
    assert detect_fillers(units, [], "North", 0.0, 8.0, 20.0) == []
