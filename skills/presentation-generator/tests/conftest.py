from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import newTable
from fontTools.ttLib.tables.TupleVariation import TupleVariation
from PIL import Image

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from presgen.config import FONT_WEIGHTS, GeneratorPaths  # noqa: E402
from presgen.fonts import FontSet, cached_font_path  # noqa: E402


def _glyph_name(codepoint: int) -> str:
    return f"uni{codepoint:04X}"


def _builder() -> FontBuilder:
    """Printable ASCII only, every glyph a 500-unit box (space left empty)."""
    codepoints = list(range(0x20, 0x7F))
    glyph_order = [".notdef"] + [_glyph_name(cp) for cp in codepoints]

    fb = FontBuilder(unitsPerEm=1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({cp: _glyph_name(cp) for cp in codepoints})

    glyphs = {}
    for name in glyph_order:
        pen = TTGlyphPen(None)
        if name != _glyph_name(0x20):
            pen.moveTo((50, 0))
            pen.lineTo((50, 700))
            pen.lineTo((450, 700))
            pen.lineTo((450, 0))
            pen.closePath()
        glyphs[name] = pen.glyph()
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics({name: (500, 50) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Presgen Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    return fb


def build_test_font() -> bytes:
    buffer = BytesIO()
    _builder().save(buffer)
    return buffer.getvalue()


def build_variable_test_font() -> bytes:
    """WOFF2 with a wght axis (100-900, default 400) that widens "A" by 100 units at 900."""
    fb = _builder()
    fb.setupFvar([("wght", 100, 400, 900, "Weight")], [])
    # Four outline points, then the four phantom points.
    deltas = [(0, 0), (0, 0), (100, 0), (100, 0), (0, 0), (0, 0), (0, 0), (0, 0)]
    fb.setupGvar({_glyph_name(ord("A")): [TupleVariation({"wght": (0.0, 1.0, 1.0)}, deltas)]})

    meta = newTable("meta")
    meta.data = {"dlng": "Latn"}
    fb.font["meta"] = meta
    fb.font.flavor = "woff2"

    buffer = BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def png_bytes(size=(64, 64), color=(220, 38, 38, 255)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(scope="session")
def test_font_bytes() -> bytes:
    return build_test_font()


@pytest.fixture
def font_set(test_font_bytes: bytes) -> FontSet:
    return FontSet(regular=test_font_bytes, medium=test_font_bytes, bold=test_font_bytes)


@pytest.fixture
def font_file(tmp_path: Path, test_font_bytes: bytes) -> Path:
    path = tmp_path / "fonts" / "PresgenTest.ttf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(test_font_bytes)
    return path


@pytest.fixture
def variable_font_file(tmp_path: Path) -> Path:
    path = tmp_path / "fonts" / "PresgenTest-Variable.woff2"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_variable_test_font())
    return path


@pytest.fixture
def paths(tmp_path: Path) -> GeneratorPaths:
    generator_paths = GeneratorPaths.from_root(tmp_path / "skill")
    generator_paths.assets_dir.mkdir(parents=True)
    generator_paths.logo_path.write_bytes(png_bytes())
    generator_paths.secondary_logo_path.write_bytes(png_bytes((120, 40), (255, 255, 255, 255)))
    return generator_paths


@pytest.fixture
def warm_cache(paths: GeneratorPaths, test_font_bytes: bytes) -> GeneratorPaths:
    """Pre-populate the font cache so no instancing subprocess is needed."""
    paths.cache_dir.mkdir(parents=True, exist_ok=True)
    for weight in FONT_WEIGHTS.values():
        cached_font_path(paths.cache_dir, weight).write_bytes(test_font_bytes)
    return paths
