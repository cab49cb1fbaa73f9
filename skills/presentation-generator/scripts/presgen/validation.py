"""Config validation for the optional event JSON file."""

from __future__ import annotations

import dataclasses
import json
import re
from pathlib import Path
from typing import Any, Dict, Tuple

from .config import DEFAULT_EVENT, Activity, EventConfig, LinkSlide, MiscActivity
from .errors import ConfigValidationError

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_URL_RE = re.compile(r"^https?://\S+$")

_TEXT_FIELDS = ("association_name", "tagline")
_KNOWN_FIELDS = {
    "association_name",
    "tagline",
    "association_url",
    "links",
    "activities",
    "misc_activities",
    "escape_game",
}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_named_entries(items: Any, prefix: str, fields: Tuple[str, ...], issues: list[str]) -> None:
    if not isinstance(items, list):
        issues.append(f"{prefix} must be a list of objects")
        return
    for idx, item in enumerate(items):
        item_prefix = f"{prefix}[{idx}]"
        if not isinstance(item, dict):
            issues.append(f"{item_prefix} must be an object")
            continue
        for field in fields:
            if not _is_non_empty_str(item.get(field)):
                issues.append(f"{item_prefix}.{field} is required and must be a non-empty string")
        if "time" in fields and _is_non_empty_str(item.get("time")) and not _TIME_RE.match(item["time"]):
            issues.append(f"{item_prefix}.time '{item['time']}' must use 24h HH:MM format")


def _check_links(links: Any, prefix: str, issues: list[str]) -> None:
    expected = len(DEFAULT_EVENT.links)
    if not isinstance(links, list):
        issues.append(f"{prefix} must be a list of {expected} link objects")
        return
    if len(links) != expected:
        issues.append(f"{prefix} must contain exactly {expected} links (discord, nuit de l'info, subject)")
    for idx, link in enumerate(links):
        link_prefix = f"{prefix}[{idx}]"
        if not isinstance(link, dict):
            issues.append(f"{link_prefix} must be an object")
            continue
        for field in ("title", "subtitle"):
            if not _is_non_empty_str(link.get(field)):
                issues.append(f"{link_prefix}.{field} is required and must be a non-empty string")
        url = link.get("url")
        if not isinstance(url, str) or not _URL_RE.match(url):
            issues.append(f"{link_prefix}.url must be an http(s) URL")


def _check_event(event: Dict[str, Any], issues: list[str], prefix: str) -> None:
    unknown = sorted(set(event) - _KNOWN_FIELDS)
    for key in unknown:
        issues.append(f"{prefix}.{key} is not a recognised field")

    for field in _TEXT_FIELDS:
        if field in event and not _is_non_empty_str(event.get(field)):
            issues.append(f"{prefix}.{field} must be a non-empty string when provided")

    if "association_url" in event:
        url = event.get("association_url")
        if not isinstance(url, str) or not _URL_RE.match(url):
            issues.append(f"{prefix}.association_url must be an http(s) URL")

    if "links" in event:
        _check_links(event.get("links"), f"{prefix}.links", issues)
    if "activities" in event:
        _check_named_entries(event.get("activities"), f"{prefix}.activities", ("name", "room", "time"), issues)
    if "misc_activities" in event:
        _check_named_entries(event.get("misc_activities"), f"{prefix}.misc_activities", ("name", "room"), issues)

    escape_game = event.get("escape_game")
    if escape_game is not None:
        if not isinstance(escape_game, dict):
            issues.append(f"{prefix}.escape_game must be an object when provided")
        else:
            for field in ("room", "availability"):
                if field in escape_game and not _is_non_empty_str(escape_game.get(field)):
                    issues.append(f"{prefix}.escape_game.{field} must be a non-empty string when provided")


def validate_event_config(config: Dict[str, Any]) -> tuple[Dict[str, Any], bool]:
    """Validate an event config dict and return (event, wrapped)."""
    if not isinstance(config, dict):
        raise ConfigValidationError(["Root JSON value must be an object"])

    wrapped = "event" in config
    event = config.get("event") if wrapped else config

    if not isinstance(event, dict):
        raise ConfigValidationError(["'event' must be an object"])

    issues: list[str] = []
    _check_event(event, issues, "event" if wrapped else "root")

    if issues:
        raise ConfigValidationError(issues)

    return event, wrapped


def validate_event_config_file(config_path: Path) -> tuple[Dict[str, Any], bool]:
    """Load and validate a JSON event config file."""
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigValidationError([f"Config file not found: {config_path}"]) from exc
    except OSError as exc:
        raise ConfigValidationError([f"Config file not readable: {config_path} ({exc})"]) from exc

    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigValidationError([f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"]) from exc

    return validate_event_config(data)


def event_from_dict(event: Dict[str, Any], base: EventConfig = DEFAULT_EVENT) -> EventConfig:
    """Overlay a validated event dict on ``base``; link slide names keep their slots."""
    updates: Dict[str, Any] = {}
    for field in ("association_name", "tagline", "association_url"):
        if field in event:
            updates[field] = event[field].strip()
    if "links" in event:
        updates["links"] = tuple(
            LinkSlide(name=slot.name, title=link["title"], subtitle=link["subtitle"], url=link["url"])
            for slot, link in zip(base.links, event["links"])
        )
    if "activities" in event:
        updates["activities"] = tuple(
            Activity(name=item["name"], room=item["room"], time=item["time"]) for item in event["activities"]
        )
    if "misc_activities" in event:
        updates["misc_activities"] = tuple(
            MiscActivity(name=item["name"], room=item["room"]) for item in event["misc_activities"]
        )
    escape_game = event.get("escape_game") or {}
    if "room" in escape_game:
        updates["escape_game_room"] = escape_game["room"]
    if "availability" in escape_game:
        updates["escape_game_availability"] = escape_game["availability"]
    return dataclasses.replace(base, **updates)


def event_to_dict(event: EventConfig) -> Dict[str, Any]:
    """Inverse of ``event_from_dict`` for the fields a config file can carry."""
    return {
        "association_name": event.association_name,
        "tagline": event.tagline,
        "association_url": event.association_url,
        "links": [{"title": link.title, "subtitle": link.subtitle, "url": link.url} for link in event.links],
        "activities": [{"name": a.name, "room": a.room, "time": a.time} for a in event.activities],
        "misc_activities": [{"name": m.name, "room": m.room} for m in event.misc_activities],
        "escape_game": {"room": event.escape_game_room, "availability": event.escape_game_availability},
    }


def load_event_config(config_path: Path) -> EventConfig:
    """Validate ``config_path`` and merge it over the default event."""
    event, _ = validate_event_config_file(config_path)
    return event_from_dict(event)
