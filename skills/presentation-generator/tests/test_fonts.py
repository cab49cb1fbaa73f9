from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from fontTools.ttLib import TTFont

from presgen import fonts
from presgen.config import FONT_WEIGHTS
from presgen.errors import FontDerivationError, FontSourceError, RenderError
from presgen.fonts import FontSet, cached_font_path, check_font_source, derive_static_font, load_fonts


def test_cached_font_path_is_keyed_by_weight(tmp_path: Path) -> None:
    assert cached_font_path(tmp_path, 500) == tmp_path / "Cupertino-OG-500.ttf"


def test_load_fonts_derives_only_missing_weights(tmp_path: Path) -> None:
    cache_dir = tmp_path / ".cache"
    calls: list[int] = []

    def fake_derive(source: Path, output: Path, weight: int) -> bytes:
        calls.append(weight)
        payload = f"font-{weight}".encode()
        output.write_bytes(payload)
        return payload

    first = load_fonts(tmp_path / "src.woff2", cache_dir, derive=fake_derive)
    assert calls == [400, 500, 700]
    assert first.bold == b"font-700"

    calls.clear()
    second = load_fonts(tmp_path / "src.woff2", cache_dir, derive=fake_derive)
    assert calls == []
    assert second == first


def test_load_fonts_rederives_a_deleted_weight(tmp_path: Path) -> None:
    cache_dir = tmp_path / ".cache"
    cache_dir.mkdir()
    for weight in FONT_WEIGHTS.values():
        cached_font_path(cache_dir, weight).write_bytes(b"cached")
    cached_font_path(cache_dir, 500).unlink()

    calls: list[int] = []

    def fake_derive(source: Path, output: Path, weight: int) -> bytes:
        calls.append(weight)
        return b"fresh"

    font_set = load_fonts(tmp_path / "src.woff2", cache_dir, derive=fake_derive)
    assert calls == [500]
    assert font_set.regular == b"cached"
    assert font_set.medium == b"fresh"


def test_derive_static_font_reports_tool_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd, **kwargs):
        assert "--weight" in cmd and cmd[cmd.index("--weight") + 1] == "700"
        return subprocess.CompletedProcess(cmd, 2, stdout="", stderr="unsupported axis")

    monkeypatch.setattr(fonts.subprocess, "run", fake_run)

    with pytest.raises(FontDerivationError) as exc:
        derive_static_font(tmp_path / "src.woff2", tmp_path / "out.ttf", 700)

    assert exc.value.weight == 700
    assert exc.value.returncode == 2
    assert "unsupported axis" in str(exc.value)


def test_derive_static_font_runs_instancer(font_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "cache" / "Cupertino-OG-400.ttf"

    payload = derive_static_font(font_file, output, 400)

    assert output.read_bytes() == payload
    font = TTFont(str(output))
    assert font.flavor is None
    assert ord("A") in font.getBestCmap()


def test_derive_static_font_instances_variable_woff2(variable_font_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "cache" / "Cupertino-OG-700.ttf"

    derive_static_font(variable_font_file, output, 700)

    font = TTFont(str(output))
    assert font.flavor is None
    for table in ("fvar", "gvar", "MERG", "meta", "trak"):
        assert table not in font
    # wght 700 sits 60% of the way to 900, where "A" gains 100 units.
    assert font["glyf"]["uni0041"].xMax == 510
    assert font["glyf"]["uni0042"].xMax == 450


def test_check_font_source_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "nope.woff2"
    with pytest.raises(FontSourceError, match="Font not found at"):
        check_font_source(missing)


def test_font_set_rejects_unloaded_weight() -> None:
    font_set = FontSet(regular=b"r", medium=b"m", bold=b"b")
    assert font_set.for_weight(500) == b"m"
    with pytest.raises(RenderError, match="weight 300"):
        font_set.for_weight(300)
