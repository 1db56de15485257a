import json

import pytest

from floorplate.generator import generate_floorplate, generate_floorplate_variants
from floorplate.io_schema import (
    GeneratorConfig,
    config_schema,
    export_markdown,
    layout_schema,
    load_config,
    load_layout,
    load_variants,
    save_layout,
    save_variants,
    seed_config,
    stats_schema,
)


def test_layout_file_round_trip(tmp_path, footprint, config, egress, options):
    plan = generate_floorplate(footprint, config, egress, options)
    path = tmp_path / "layout.json"
    save_layout(plan, path)
    assert load_layout(path) == plan


def test_variants_file_round_trip(tmp_path, footprint, config, egress, options):
    variants = generate_floorplate_variants(footprint, config, egress, options)
    path = tmp_path / "variants.json"
    save_variants(variants, path)
    loaded = load_variants(path)
    assert [v.id for v in loaded] == ["option-1", "option-2", "option-3"]


def test_invalid_files_raise_value_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"units": "nope"}))
    with pytest.raises(ValueError):
        load_layout(path)
    path.write_text(json.dumps({"footprint": {"length": -5, "depth": 18}}))
    with pytest.raises(ValueError):
        load_config(path)


def test_seed_config_is_loadable(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(seed_config()))
    config = load_config(path)
    assert isinstance(config, GeneratorConfig)
    assert config.footprint.length == 60.0
    assert config.unit_mix.total_percentage() == pytest.approx(100)


def test_schemas_describe_models():
    assert "units" in layout_schema()["properties"]
    assert "efficiency" in stats_schema()["properties"]
    assert "footprint" in config_schema()["properties"]


def test_markdown_summary(footprint, config, egress, options):
    plan = generate_floorplate(footprint, config, egress, options)
    md = export_markdown(plan, ["North row fully covered without overlap.", "Advisory: dead end too long."])
    assert md.startswith("# Floorplate Summary (balanced)")
    assert "## Unit Mix" in md
    assert f"- Units: {plan.stats.total_units}" in md
    assert "- ✅ North row fully covered without overlap." in md
    assert "- ⚠️ Advisory: dead end too long." in md
