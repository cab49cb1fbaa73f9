"""Custom exceptions for presentation config/runtime errors."""

from __future__ import annotations

from typing import Optional


class ConfigValidationError(ValueError):
    """Raised when an event JSON config is invalid for slide generation."""

    def __init__(self, issues: list[str]):
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid configuration"]
        super().__init__(self._format())

    def _format(self) -> str:
        lines = ["Configuration validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)


class PresentationError(RuntimeError):
    """Base class for failures while generating the presentation."""


class FontSourceError(PresentationError):
    """Raised when the variable font source cannot be read."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Font not found at {path}")


class FontDerivationError(PresentationError):
    """Raised when the font instancing step exits non-zero."""

    def __init__(self, weight: int, returncode: int, stderr: Optional[str] = None):
        self.weight = weight
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = self.stderr or f"exit code {returncode}"
        super().__init__(f"Failed to create static font at weight {weight}: {detail}")


class RenderError(PresentationError):
    """Raised when a layout tree cannot be rasterized."""


class MissingGlyphError(RenderError):
    """Raised when text uses a character the supplied fonts cannot draw."""

    def __init__(self, char: str, weight: int):
        self.char = char
        self.weight = weight
        super().__init__(f"No glyph for {char!r} (U+{ord(char):04X}) in font weight {weight}")


class AssemblyError(PresentationError):
    """Raised when slide images cannot be combined into the PDF."""
