import pytest

from floorplate.models import (
    EGRESS_SPRINKLERED,
    BuildingFootprint,
    GeometryOptions,
    UnitBlock,
    UnitConfiguration,
    UnitTypeConfig,
)

RENTABLE_DEPTH = (18.0 - 1.83) / 2


def make_config(percentages=(20, 40, 30, 10), areas=(55, 82, 110, 137), **corner) -> UnitConfiguration:
    mix = {}
    for unit_type, pct, area in zip(("Studio", "1BR", "2BR", "3BR"), percentages, areas):
        mix[unit_type] = UnitTypeConfig(percentage=pct, area=area, corner_eligible=corner.get(unit_type))
    return UnitConfiguration(mix=mix)


def make_unit(unit_type, x, width, depth=RENTABLE_DEPTH, side="North", y=0.0, uid=None) -> UnitBlock:
    return UnitBlock(
        id=uid or f"u-{side.lower()}-{x:g}",
        type=unit_type,
        type_id=unit_type,
        type_name=unit_type,
        x=x,
        y=y,
        width=width,
        depth=depth,
        area=width * depth,
        color="#cccccc",
        side=side,
    )


@pytest.fixture
def config() -> UnitConfiguration:
    return make_config()


@pytest.fixture
def footprint() -> BuildingFootprint:
    return BuildingFootprint(length=60.0, depth=18.0)


@pytest.fixture
def options() -> GeometryOptions:
    return GeometryOptions(corridor_width=1.83)


@pytest.fixture
def egress():
    return EGRESS_SPRINKLERED


@pytest.fixture
def depth() -> float:
    return RENTABLE_DEPTH
