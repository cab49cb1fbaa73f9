from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "generate_presentation.py"


def _run(args: list[str], tmp_path: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PRESGEN_OUTPUT_DIR"] = str(tmp_path / "output")
    env["NO_COLOR"] = "1"
    env.pop("PRESGEN_FONT", None)
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_cli_shows_clean_validation_error(tmp_path: Path) -> None:
    bad_config = tmp_path / "bad.json"
    bad_config.write_text('{"event": {"activities": "oops"}}', encoding="utf-8")

    result = _run(["--config", str(bad_config)], tmp_path)

    assert result.returncode == 1
    assert "Configuration validation failed" in result.stderr
    assert "event.activities must be a list of objects" in result.stderr
    assert "Traceback" not in result.stderr


def test_cli_missing_font_exits_with_failure(tmp_path: Path) -> None:
    missing = tmp_path / "missing.woff2"

    result = _run(["--font", str(missing)], tmp_path)

    assert result.returncode == 1
    assert f"Font not found at {missing}" in result.stdout
    assert "Traceback" not in result.stderr
    assert not (tmp_path / "output" / "presentation.pdf").exists()


def test_cli_help_exits_cleanly(tmp_path: Path) -> None:
    result = _run(["--help"], tmp_path)

    assert result.returncode == 0
    assert "--font" in result.stdout
    assert "--verbose" in result.stdout


def test_cli_write_config(tmp_path: Path) -> None:
    target = tmp_path / "event.json"

    result = _run(["--write-config", str(target)], tmp_path)

    assert result.returncode == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert len(payload["event"]["links"]) == 3
