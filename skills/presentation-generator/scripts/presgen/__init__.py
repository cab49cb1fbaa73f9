"""Internal helpers for the presentation generator skill."""

from .api import generate_presentation_from_config, write_config
from .cli import run_cli
from .document import assemble, write_document
from .errors import (
    AssemblyError,
    ConfigValidationError,
    FontDerivationError,
    FontSourceError,
    MissingGlyphError,
    PresentationError,
    RenderError,
)
from .fonts import FontSet, load_fonts
from .pipeline import Stage, cleanup_slides, generate_presentation
from .qr import encode_qr
from .render import render
from .slides import slide_specs, sort_activities
from .validation import load_event_config, validate_event_config, validate_event_config_file

__all__ = [
    "AssemblyError",
    "ConfigValidationError",
    "FontDerivationError",
    "FontSet",
    "FontSourceError",
    "MissingGlyphError",
    "PresentationError",
    "RenderError",
    "Stage",
    "assemble",
    "cleanup_slides",
    "encode_qr",
    "generate_presentation",
    "generate_presentation_from_config",
    "load_event_config",
    "load_fonts",
    "render",
    "run_cli",
    "slide_specs",
    "sort_activities",
    "validate_event_config",
    "validate_event_config_file",
    "write_config",
    "write_document",
]
