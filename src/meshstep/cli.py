"""Command-line STEP export of mesh files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from meshstep.config import ExportOptions
from meshstep.errors import StepExportError
from meshstep.exporter import StepExporter
from meshstep.io import load_mesh

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshstep",
        description="Convert a triangle mesh into a faceted STEP B-Rep solid.",
    )
    parser.add_argument("input", type=Path, help="Mesh file (STL, OBJ, PLY, ...).")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Destination STEP file (default: model.step next to the input).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML or JSON file with export options.",
    )
    parser.add_argument("--name", default=None, help="Product name written to the file.")
    parser.add_argument("--schema", default=None, help="FILE_SCHEMA identifier.")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Allow replacing an existing output file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log entity counts and other debug output.",
    )
    return parser


def _options_from_args(args: argparse.Namespace) -> ExportOptions:
    options = ExportOptions.load(args.config) if args.config else ExportOptions()
    overrides = {}
    if args.name:
        overrides["name"] = args.name
    if args.schema:
        overrides["schema"] = args.schema
    if args.output is not None:
        overrides["file_name"] = args.output.name
    return options.replace(**overrides) if overrides else options


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = _options_from_args(args)
        mesh = load_mesh(args.input)
    except (OSError, StepExportError) as exc:
        logger.error("%s", exc)
        return 1

    out_dir = args.output.parent if args.output is not None else args.input.parent
    target = out_dir / options.file_name
    if target.exists() and not args.overwrite:
        logger.error("export target already exists: %s", target)
        return 1

    exporter = StepExporter(options)
    for exported in exporter.export(mesh):
        print(exported.save(out_dir))
    return 0


if __name__ == "__main__":
    sys.exit(main())
