from __future__ import annotations

import json
from pathlib import Path

import pytest

from presgen import ConfigValidationError, validate_event_config
from presgen.api import write_config
from presgen.config import DEFAULT_EVENT
from presgen.validation import load_event_config, validate_event_config_file

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "assets" / "sample_event.json"


def test_validate_event_config_accepts_sample_config() -> None:
    payload = json.loads(SAMPLE_PATH.read_text(encoding="utf-8"))
    event, wrapped = validate_event_config(payload)
    assert wrapped is True
    assert event["association_name"] == "Asso Info Evry"


def test_validate_event_config_accepts_bare_object() -> None:
    event, wrapped = validate_event_config({"tagline": "Nuit de l'Info 2026"})
    assert wrapped is False
    assert event == {"tagline": "Nuit de l'Info 2026"}


def test_validate_event_config_collects_every_issue() -> None:
    bad = {
        "event": {
            "activities": [{"name": "Kahoot", "room": "Grand Amphi", "time": "24:10"}, "oops"],
            "association_url": "ftp://asso",
            "colour": "blue",
        }
    }
    with pytest.raises(ConfigValidationError) as exc:
        validate_event_config(bad)

    issues = exc.value.issues
    assert "event.activities[0].time '24:10' must use 24h HH:MM format" in issues
    assert "event.activities[1] must be an object" in issues
    assert "event.association_url must be an http(s) URL" in issues
    assert "event.colour is not a recognised field" in issues
    assert str(exc.value).startswith("Configuration validation failed:")


def test_validate_event_config_requires_three_links() -> None:
    bad = {"event": {"links": [{"title": "Discord", "subtitle": "x", "url": "https://discord.gg/a"}]}}
    with pytest.raises(ConfigValidationError) as exc:
        validate_event_config(bad)
    assert "must contain exactly 3 links" in str(exc.value)


def test_validate_event_config_rejects_non_object() -> None:
    with pytest.raises(ConfigValidationError, match="Root JSON value must be an object"):
        validate_event_config(["event"])
    with pytest.raises(ConfigValidationError, match="'event' must be an object"):
        validate_event_config({"event": "oops"})


def test_validate_event_config_file_reports_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text("{\n  \"event\": {,}\n}", encoding="utf-8")
    with pytest.raises(ConfigValidationError, match="Invalid JSON at line 2"):
        validate_event_config_file(path)


def test_validate_event_config_file_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="Config file not found"):
        validate_event_config_file(tmp_path / "missing.json")


def test_load_event_config_overlays_defaults(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps(
            {
                "event": {
                    "tagline": "Edition speciale",
                    "links": [
                        {"title": "Serveur", "subtitle": "Rejoindre", "url": "https://discord.gg/new"},
                        {"title": "NDI", "subtitle": "Site", "url": "https://www.nuitdelinfo.com/"},
                        {"title": "Sujet", "subtitle": "PDF", "url": "https://example.org/sujet.pdf"},
                    ],
                    "escape_game": {"room": "Salle 204"},
                }
            }
        ),
        encoding="utf-8",
    )

    event = load_event_config(path)

    assert event.tagline == "Edition speciale"
    assert event.association_name == DEFAULT_EVENT.association_name
    assert [link.name for link in event.links] == ["02-discord", "03-nuitdelinfo", "07-sujet"]
    assert event.links[0].url == "https://discord.gg/new"
    assert event.escape_game_room == "Salle 204"
    assert event.escape_game_availability == DEFAULT_EVENT.escape_game_availability
    assert event.activities == DEFAULT_EVENT.activities


def test_written_default_config_loads_back_to_defaults(tmp_path: Path) -> None:
    path = write_config(tmp_path / "nested" / "event.json")
    assert load_event_config(path) == DEFAULT_EVENT
