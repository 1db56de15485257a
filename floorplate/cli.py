"""Command line interface for the floorplate generator."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from io import StringIO
from pathlib import Path
from typing import Any

from .constraints import validate_layout
from .generator import generate_floorplate, generate_floorplate_variants
from .io_schema import (
    config_schema,
    export_markdown,
    layout_schema,
    load_config,
    load_layout,
    save_layout,
    save_variants,
    seed_config,
    stats_schema,
)
from .models import DEFAULT_UNIT_CONFIG, STRATEGIES, UnitConfiguration

DEFAULT_CONFIG_PATH = Path("examples/floorplate_config.json")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2, sort_keys=True))


def _unit_mix(args: argparse.Namespace) -> UnitConfiguration:
    if getattr(args, "config", None):
        return load_config(args.config).unit_mix
    return DEFAULT_UNIT_CONFIG


def cmd_init(args: argparse.Namespace) -> int:
    path = Path(args.out or DEFAULT_CONFIG_PATH)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    _write_json(path, seed_config())
    print(f"Wrote seed configuration to {path}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    options = config.options
    if args.strategy:
        options = options.model_copy(update={"strategy": args.strategy})
    plan = generate_floorplate(config.footprint, config.unit_mix, config.egress, options)
    save_layout(plan, args.out)
    print(f"Generated {plan.stats.total_units} units (efficiency {plan.stats.efficiency:.3f}); saved to {args.out}")
    return 0


def cmd_variants(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    variants = generate_floorplate_variants(config.footprint, config.unit_mix, config.egress, config.options)
    save_variants(variants, args.out)
    for option in variants:
        stats = option.floorplan.stats
        print(f"{option.id} {option.label}: {stats.total_units} units, efficiency {stats.efficiency:.3f}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    plan = load_layout(args.input)
    result = validate_layout(plan, _unit_mix(args))
    for msg in result.messages:
        print(msg)
    return 0 if result.passed else 1


def cmd_export(args: argparse.Namespace) -> int:
    plan = load_layout(args.input)
    result = validate_layout(plan, _unit_mix(args))

    if args.format == "md":
        output = export_markdown(plan, result.messages)
    elif args.format == "json":
        data = {
            "stats": plan.stats.model_dump(),
            "egress": plan.egress.model_dump(),
            "validation": result.messages,
            "passed": result.passed,
        }
        output = json.dumps(data, indent=2)
    elif args.format == "csv":
        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["id", "type", "side", "x", "width", "area", "l_shaped", "truncated"])
        for unit in plan.units:
            writer.writerow([
                unit.id, unit.type_id, unit.side, f"{unit.x:.3f}", f"{unit.width:.3f}",
                f"{unit.area:.2f}", unit.is_l_shaped, unit.is_truncated,
            ])
        output = buffer.getvalue()
    else:
        raise ValueError(f"Unsupported export format: {args.format}")

    if args.out:
        Path(args.out).write_text(output)
    else:
        sys.stdout.write(output if output.endswith("\n") else output + "\n")
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    if args.target == "layout":
        data = layout_schema()
    elif args.target == "stats":
        data = stats_schema()
    elif args.target == "config":
        data = config_schema()
    else:
        raise ValueError("Unknown schema target")
    print(json.dumps(data, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="floorplate")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity",
    )
    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init", help="write seed configuration")
    p_init.add_argument("--out", default=None)
    p_init.set_defaults(func=cmd_init)

    p_gen = sub.add_parser("generate", help="generate one floorplate")
    p_gen.add_argument("--config", required=True)
    p_gen.add_argument("--out", required=True)
    p_gen.add_argument("--strategy", choices=list(STRATEGIES), default=None)
    p_gen.set_defaults(func=cmd_generate)

    p_var = sub.add_parser("variants", help="generate one floorplate per strategy")
    p_var.add_argument("--config", required=True)
    p_var.add_argument("--out", required=True)
    p_var.set_defaults(func=cmd_variants)

    p_val = sub.add_parser("validate", help="validate floorplate")
    p_val.add_argument("--in", dest="input", required=True)
    p_val.add_argument("--config", default=None, help="config holding the unit mix used")
    p_val.set_defaults(func=cmd_validate)

    p_exp = sub.add_parser("export", help="export floorplate summary")
    p_exp.add_argument("--in", dest="input", required=True)
    p_exp.add_argument("--format", choices=["md", "json", "csv"], required=True)
    p_exp.add_argument("--out", default=None)
    p_exp.add_argument("--config", default=None)
    p_exp.set_defaults(func=cmd_export)

    p_schema = sub.add_parser("schema", help="print JSON schema")
    p_schema.add_argument("--target", choices=["layout", "stats", "config"], required=True)
    p_schema.set_defaults(func=cmd_schema)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    try:
        return int(args.func(args))
    except Exception as exc:  # pragma: no cover - CLI top-level handler
        logger.debug("command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
