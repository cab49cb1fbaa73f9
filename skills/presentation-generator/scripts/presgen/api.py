"""Public API helpers for programmatic presentation generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_EVENT, GeneratorPaths
from .pipeline import Renderer, generate_presentation
from .render import render
from .validation import event_to_dict, load_event_config


def generate_presentation_from_config(
    *,
    config_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
    font_path: Optional[str] = None,
    paths: Optional[GeneratorPaths] = None,
    verbose: bool = False,
    renderer: Renderer = render,
    debug: bool = False,
) -> bool:
    """Generate the PDF using an optional event config file over the defaults.

    Raises ``ConfigValidationError`` when ``config_path`` is invalid; pipeline failures
    are reported on stdout and surface as ``False``.
    """
    event = load_event_config(Path(config_path)) if config_path else DEFAULT_EVENT
    return generate_presentation(
        verbose=verbose,
        font_path=font_path,
        event=event,
        paths=paths,
        output_path=output_path,
        renderer=renderer,
        debug=debug,
    )


def write_config(path: Path, config: Optional[Dict[str, Any]] = None) -> Path:
    """Write an event config (the defaults when omitted) to disk and return the path."""
    payload = {"event": config if config is not None else event_to_dict(DEFAULT_EVENT)}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path
