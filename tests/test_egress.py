import pytest

from floorplate.constants import DEFAULT_TRAVEL_LIMIT
from floorplate.egress import evaluate_egress, needs_mid_core, travel_limit
from floorplate.models import EGRESS_SPRINKLERED, EGRESS_UNSPRINKLERED, CoreBlock, EgressConfig

CORE_W = 3.6576


def _cores(*xs):
    return [
        CoreBlock(id=f"core-{i}", x=x, y=0.0, width=CORE_W, depth=8.99, side="North", role="End")
        for i, x in enumerate(xs)
    ]


def test_travel_limit_falls_back_to_default():
    assert travel_limit(EgressConfig(dead_end_limit=10.0)) == DEFAULT_TRAVEL_LIMIT
    assert travel_limit(EGRESS_UNSPRINKLERED) == pytest.approx(200 * 0.3048)


@pytest.mark.parametrize("length, expected", [(60.0, False), (170.0, False), (180.0, True), (200.0, True)])
def test_mid_core_threshold(length, expected):
    assert needs_mid_core(length, CORE_W, EGRESS_SPRINKLERED) is expected


def test_short_dead_ends_pass():
    result = evaluate_egress(_cores(10.0, 60.0 - 10.0 - CORE_W), 60.0, 1.83, EGRESS_SPRINKLERED)
    assert result.max_dead_end == pytest.approx(10.0)
    assert result.max_travel_distance == pytest.approx((60.0 - 20.0 - 2 * CORE_W) / 2)
    assert result.dead_end_status == "Pass"
    assert result.travel_distance_status == "Pass"


def test_long_dead_end_fails_until_void_shortens_it():
    cores = _cores(20.0, 42.0)
    assert evaluate_egress(cores, 60.0, 1.83, EGRESS_SPRINKLERED).dead_end_status == "Fail"
    shortened = evaluate_egress(cores, 60.0, 1.83, EGRESS_SPRINKLERED, left_void=6.0)
    assert shortened.max_dead_end == pytest.approx(60.0 - 42.0 - CORE_W)
    assert shortened.dead_end_status == "Pass"


def test_alcove_always_passes():
    strict = EgressConfig(dead_end_limit=1.0)
    result = evaluate_egress(_cores(4.0, 60.0 - 4.0 - CORE_W), 60.0, 1.83, strict)
    assert result.dead_end_status == "Pass"


def test_travel_between_cores_can_fail():
    result = evaluate_egress(_cores(5.0, 190.0), 200.0, 1.83, EGRESS_SPRINKLERED)
    assert result.max_travel_distance == pytest.approx((190.0 - 5.0 - CORE_W) / 2)
    assert result.travel_distance_status == "Fail"


def test_no_cores_fails_everything():
    result = evaluate_egress([], 60.0, 1.83, EGRESS_SPRINKLERED)
    assert result.dead_end_status == "Fail"
    assert result.travel_distance_status == "Fail"
