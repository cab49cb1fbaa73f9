"""Static font derivation and the on-disk weight cache."""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from .config import FONT_CACHE_STEM, FONT_FAMILY, FONT_WEIGHTS
from .errors import FontDerivationError, FontSourceError, RenderError

INSTANCER_SCRIPT = Path(__file__).resolve().with_name("instance_font.py")

Deriver = Callable[[Path, Path, int], bytes]


@dataclass(frozen=True)
class FontSet:
    """Regular, medium and bold payloads of one family."""

    regular: bytes
    medium: bytes
    bold: bytes
    family: str = FONT_FAMILY

    def by_weight(self) -> Dict[int, bytes]:
        return {
            FONT_WEIGHTS["regular"]: self.regular,
            FONT_WEIGHTS["medium"]: self.medium,
            FONT_WEIGHTS["bold"]: self.bold,
        }

    def for_weight(self, weight: int) -> bytes:
        payloads = self.by_weight()
        if weight not in payloads:
            loaded = ", ".join(str(w) for w in sorted(payloads))
            raise RenderError(f"Font weight {weight} is not available for {self.family} (loaded: {loaded})")
        return payloads[weight]


def check_font_source(path: Path) -> None:
    """Raise ``FontSourceError`` unless ``path`` is a readable file."""
    try:
        with open(path, "rb") as fh:
            fh.read(1)
    except OSError as exc:
        raise FontSourceError(str(path)) from exc


def cached_font_path(cache_dir: Path, weight: int) -> Path:
    return cache_dir / f"{FONT_CACHE_STEM}-{weight}.ttf"


def derive_static_font(source: Path, output: Path, weight: int) -> bytes:
    """Write a static instance of ``source`` at ``weight`` to ``output`` and return its bytes."""
    cmd = [
        sys.executable,
        str(INSTANCER_SCRIPT),
        "--input",
        str(source),
        "--output",
        str(output),
        "--weight",
        str(weight),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise FontDerivationError(weight, result.returncode, result.stderr or result.stdout)
    return output.read_bytes()


def load_fonts(
    source: Path,
    cache_dir: Path,
    *,
    derive: Optional[Deriver] = None,
) -> FontSet:
    """Return the three weights, deriving only those missing from ``cache_dir``.

    The cache is keyed by weight alone: a different ``source`` reuses whatever
    is already cached until the directory is cleared.
    """
    derive = derive or derive_static_font
    cache_dir.mkdir(parents=True, exist_ok=True)

    payloads: Dict[str, bytes] = {}
    for label, weight in FONT_WEIGHTS.items():
        target = cached_font_path(cache_dir, weight)
        if target.is_file():
            payloads[label] = target.read_bytes()
        else:
            payloads[label] = derive(source, target, weight)
    return FontSet(**payloads)
