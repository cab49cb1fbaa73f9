"""CLI orchestration for the presentation generator."""

from __future__ import annotations

import argparse
import traceback
from pathlib import Path
from typing import Optional, Sequence

from . import console
from .api import generate_presentation_from_config, write_config
from .config import default_paths
from .errors import ConfigValidationError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Asso Info Evry Presentation Generator. Generate presentation slides and combine them into a PDF.",
        epilog="Creates output/presentation.pdf with all slides combined.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")
    parser.add_argument("--font", default=None, help="Path to Cupertino font file (default: $PRESGEN_FONT or astro-design)")
    parser.add_argument("--config", default=None, help="Optional event JSON file overriding the built-in content")
    parser.add_argument(
        "--output",
        default=None,
        help="Output PDF path (default: output/presentation.pdf, or $PRESGEN_OUTPUT_DIR/presentation.pdf)",
    )
    parser.add_argument(
        "--write-config",
        default=None,
        metavar="PATH",
        help="Write the built-in event content as an editable JSON file and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show full traceback for unexpected errors",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.write_config:
            saved = write_config(Path(args.write_config).resolve())
            console.success(f"Event config written: {saved}")
            return

        config_path = Path(args.config).resolve() if args.config else None
        output_path = Path(args.output).resolve() if args.output else None

        console.header("Presentation Generator")
        ok = generate_presentation_from_config(
            config_path=config_path,
            output_path=output_path,
            font_path=args.font,
            paths=default_paths(),
            verbose=args.verbose,
            debug=args.debug,
        )
    except ConfigValidationError as e:
        raise SystemExit(str(e)) from e
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        raise SystemExit(f"Presentation generation failed: {e}") from e

    if not ok:
        raise SystemExit(1)
