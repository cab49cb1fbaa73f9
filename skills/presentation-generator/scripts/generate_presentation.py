#!/usr/bin/env python3
"""Presentation Generator - Renders the event slides and combines them into a PDF.

Seven fixed slides (title, Discord, Nuit de l'Info, programme, escape game,
association, subject) are rendered at 3840x2160, written to output/slides/,
assembled into output/presentation.pdf and the PNGs are removed afterwards.

Usage:
    python scripts/generate_presentation.py [--verbose] [--font PATH] [--config EVENT.json]
"""

from __future__ import annotations

from presgen.cli import run_cli


def main() -> None:
    run_cli()


if __name__ == "__main__":
    main()
