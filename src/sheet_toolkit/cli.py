"""
Module: cli

Purpose:
    Command line entry point.

    sheet-toolkit generate CONFIG.json -o LAYOUT.json [--id ID]
    sheet-toolkit render LAYOUT.json [--pdf P] [--png P] [--xlsx P]

Key Functions:
    - main(): Parse arguments, run a subcommand, return the exit status

Dependencies:
    - sheet_toolkit.builder: Layout engine and renderers
    - sheet_toolkit.core.utils: JSON persistence

Used By:
    - ``sheet-toolkit`` console script
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from sheet_toolkit import __version__
from sheet_toolkit.builder.layout import generate_layout
from sheet_toolkit.builder.output import RenderError, export_xlsx, render_preview, render_to_pdf
from sheet_toolkit.core.schemas import ValidationError, ensure_generatable
from sheet_toolkit.core.utils import load_config_json, load_layout_json, save_layout_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheet-toolkit",
        description="Generate answer sheet layouts and render them for printing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sheet-toolkit generate quiz.json -o quiz.layout.json
  sheet-toolkit render quiz.layout.json --pdf quiz.pdf --png quiz.png
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a layout from a config")
    gen.add_argument("config", type=Path, help="Layout config JSON")
    gen.add_argument("-o", "--output", type=Path, required=True, help="Layout JSON to write")
    gen.add_argument("--id", dest="layout_id", help="Layout id (default: timestamp based)")
    gen.add_argument(
        "--strict",
        action="store_true",
        help="Validate the config against the full JSON schema",
    )

    render = sub.add_parser("render", help="Render a saved layout")
    render.add_argument("layout", type=Path, help="Layout JSON")
    render.add_argument("--pdf", type=Path, help="PDF to write")
    render.add_argument("--png", type=Path, help="PNG preview to write")
    render.add_argument("--xlsx", type=Path, help="Excel workbook to write")
    render.add_argument("--scale", type=float, default=2.0, help="PNG scale (default: 2.0)")
    return parser


def cmd_generate(args: argparse.Namespace) -> None:
    config = load_config_json(args.config, strict=args.strict)
    ensure_generatable(config)
    layout = generate_layout(config, layout_id=args.layout_id)
    save_layout_json(layout, args.output)
    print(f"Wrote {layout.rows}x{layout.cols} layout {layout.id!r} to {args.output}")


def cmd_render(args: argparse.Namespace) -> None:
    if not (args.pdf or args.png or args.xlsx):
        raise ValidationError("Nothing to render: pass --pdf, --png and/or --xlsx")
    layout = load_layout_json(args.layout)
    if args.pdf:
        render_to_pdf(layout, args.pdf)
        print(f"Wrote {args.pdf}")
    if args.png:
        render_preview(layout, args.png, scale=args.scale)
        print(f"Wrote {args.png}")
    if args.xlsx:
        export_xlsx(layout, args.xlsx)
        print(f"Wrote {args.xlsx}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the command line interface.

    Returns:
        0 on success, 1 on validation, file or render failure
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    commands = {"generate": cmd_generate, "render": cmd_render}
    try:
        commands[args.command](args)
    except (ValidationError, RenderError, FileNotFoundError) as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
