#!/usr/bin/env python3
"""Create a static, uncompressed instance of a variable font at one weight.

The slide renderer needs plain TrueType files, one per weight. This script is
run once per missing weight by the presentation generator and keeps the font
tooling out of the generator's own process.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from fontTools.ttLib import TTFont
from fontTools.varLib.instancer import OverlapMode, instantiateVariableFont

DEFAULT_AXES = {"wdth": 100, "opsz": 28}
DROP_TABLES = ("MERG", "meta", "trak")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--input", required=True, help="Variable font source (TTF, OTF, WOFF or WOFF2)")
    parser.add_argument("--output", required=True, help="Path of the static TTF to write")
    parser.add_argument("--weight", required=True, type=int, help="Target wght axis value, e.g. 400")
    return parser.parse_args()


def instance_font(input_path: Path, output_path: Path, weight: int) -> Path:
    font = TTFont(str(input_path))
    if "fvar" in font:
        present = {axis.axisTag for axis in font["fvar"].axes}
        limits = {tag: value for tag, value in {**DEFAULT_AXES, "wght": weight}.items() if tag in present}
        instantiateVariableFont(font, limits, inplace=True, overlap=OverlapMode.KEEP_AND_SET_FLAGS)

    for table in DROP_TABLES:
        if table in font:
            del font[table]

    font.flavor = None
    output_path.parent.mkdir(parents=True, exist_ok=True)
    font.save(str(output_path))
    return output_path


def main() -> int:
    args = parse_args()
    input_path = Path(args.input).expanduser()
    output_path = Path(args.output).expanduser()

    if not input_path.is_file():
        raise SystemExit(f"Font source not found: {input_path}")

    try:
        instance_font(input_path, output_path, args.weight)
    except Exception as e:
        raise SystemExit(f"Font instancing failed at weight {args.weight}: {e}") from e

    print(f"Wrote {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
