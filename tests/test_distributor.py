from floorplate.distributor import distribute_units_to_segments, pick_best_unit
from floorplate.events import EventLog
from floorplate.flexibility import is_corner_eligible
from floorplate.models import Segment
from floorplate.unit_counts import total


def _segments(*lengths, corners=True):
    segs = []
    for i, length in enumerate(lengths):
        is_corner = corners and i in (0, len(lengths) - 1)
        facade = None
        if is_corner:
            facade = "left" if i == 0 else "right"
        segs.append(Segment(length=length, is_corner=is_corner, facade=facade))
    return segs


def test_distribution_preserves_inventory(config, depth):
    counts = {"Studio": 2, "1BR": 4, "2BR": 3, "3BR": 1}
    result = distribute_units_to_segments(counts, _segments(18, 40, 18), config, depth)
    for unit_type, amount in counts.items():
        assert sum(seg[unit_type] for seg in result) == amount


def test_corners_receive_corner_eligible_units(config, depth):
    counts = {"Studio": 1, "1BR": 2, "2BR": 2, "3BR": 1}
    result = distribute_units_to_segments(counts, _segments(15, 20, 15), config, depth)
    for seg in (result[0], result[-1]):
        assert any(seg[t] > 0 for t in seg if is_corner_eligible(t, config))


def test_short_corner_is_forced(config, depth):
    events = EventLog()
    counts = {"Studio": 2, "1BR": 2, "2BR": 2, "3BR": 0}
    result = distribute_units_to_segments(counts, _segments(5, 40, 20), config, depth, events=events)
    assert result[0]["2BR"] == 1
    assert "corner_forced" in events.codes()


def test_overflow_goes_somewhere(config, depth):
    events = EventLog()
    counts = {"Studio": 3, "1BR": 3, "2BR": 0, "3BR": 0}
    result = distribute_units_to_segments(counts, _segments(10, 10, corners=False), config, depth, events=events)
    assert sum(total(seg) for seg in result) == 6
    assert "overflow_assigned" in events.codes()


def test_empty_segment_steals_a_unit(config, depth):
    events = EventLog()
    counts = {"Studio": 4, "1BR": 0, "2BR": 0, "3BR": 0}
    result = distribute_units_to_segments(
        counts, _segments(20, 20, 0.4, corners=False), config, depth, prioritize_corners=False, events=events
    )
    assert [total(seg) for seg in result] == [1, 2, 1]
    assert events.with_code("segment_starved")[0].data["donor"] == 0


def test_pick_best_unit_prefers_corner_types(config, depth):
    inventory = {"Studio": 1, "1BR": 1, "2BR": 1, "3BR": 0}
    assert pick_best_unit(inventory, True, True, 14.0, config, depth) == "2BR"
    assert pick_best_unit(inventory, False, True, 11.0, config, depth) == "1BR"
    assert pick_best_unit(inventory, False, True, 3.0, config, depth) is None


def test_distributor_is_silent_without_log(config, depth):
    counts = {"Studio": 1, "1BR": 1, "2BR": 1, "3BR": 1}
    result = distribute_units_to_segments(counts, _segments(16, 30, 16), config, depth)
    assert sum(total(seg) for seg in result) == 4
