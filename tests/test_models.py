import pytest
from pydantic import ValidationError

from floorplate.models import (
    GeometryOptions,
    Segment,
    UnitConfiguration,
    UnitTypeConfig,
    ValidationResult,
)

from conftest import make_config


def test_unit_configuration_requires_all_slots():
    with pytest.raises(ValidationError):
        UnitConfiguration(mix={"Studio": UnitTypeConfig(percentage=100, area=50)})


def test_unit_configuration_rejects_shrinking_areas():
    with pytest.raises(ValidationError):
        make_config(areas=(55, 120, 110, 137))


def test_percentage_range_enforced():
    with pytest.raises(ValidationError):
        UnitTypeConfig(percentage=120, area=50)


def test_active_types_and_total(config):
    assert config.total_percentage() == pytest.approx(100)
    assert config.active_types() == ["Studio", "1BR", "2BR", "3BR"]
    partial = make_config(percentages=(0, 50, 50, 0))
    assert partial.active_types() == ["1BR", "2BR"]


def test_geometry_options_bounds_and_colors():
    with pytest.raises(ValidationError):
        GeometryOptions(alignment=1.5)
    opts = GeometryOptions(custom_colors={"2BR": "  #112233 ", "3BR": "  "})
    assert opts.custom_colors == {"2BR": "#112233"}


def test_segment_corner_properties():
    left = Segment(length=10, is_corner=True, facade="left")
    right = Segment(length=10, is_corner=True, facade="right")
    mid = Segment(length=10)
    assert left.is_left_corner and not left.bonus_on_first
    assert right.is_right_corner and right.bonus_on_first
    assert not mid.is_corner and not mid.bonus_on_first


def test_validation_result_consistency():
    with pytest.raises(ValidationError):
        ValidationResult(passed=True, messages=[], failed_rules=["coverage_north"])
    ok = ValidationResult(passed=False, messages=["x"], failed_rules=["coverage_north"])
    assert not ok.passed
