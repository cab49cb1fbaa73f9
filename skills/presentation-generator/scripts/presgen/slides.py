"""Slide layout builders.

Every builder returns a complete ``Box`` tree for one ``WIDTH`` x ``HEIGHT``
canvas. Builders never touch the filesystem: logos arrive as data URIs and QR
codes are encoded in memory, so the same inputs always give the same tree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, List, Sequence

from .config import ORB_GRADIENT_FADE, Activity, EventConfig, MiscActivity
from .layout import Border, Box, ColorStop, GridLines, Image, Node, RadialGradient, Style, Text, edges
from .qr import qr_data_uri

GRID_COLOR = "rgba(255, 255, 255, 0.03)"
GRID_SPACING = 160


@dataclass(frozen=True)
class SlideSpec:
    """A named slide and the thunk that builds its layout tree."""

    name: str
    build: Callable[[], Box]


def opacity_to_hex(opacity: float) -> str:
    """Convert a 0-100 opacity into a two-digit hex alpha suffix."""
    value = math.floor(opacity / 100 * 255 + 0.5)
    return format(max(0, min(255, value)), "02x")


def _overnight_key(activity: Activity) -> tuple[int, str]:
    hour = int(activity.time.split(":")[0])
    return (hour + 24 if hour < 12 else hour, activity.time)


def sort_activities(activities: Iterable[Activity]) -> List[Activity]:
    """Order activities through one overnight session (hours before noon come last)."""
    return sorted(activities, key=_overnight_key)


def display_url(url: str) -> str:
    return url.replace("https://", "")


def _text(content: str, size: float, weight: int, color: str, **style) -> Text:
    return Text(content, Style(font_size=size, font_weight=weight, color=color, **style))


def _dot(size: int, color: str, **style) -> Box:
    return Box(Style(width=size, height=size, border_radius="50%", background_color=color, **style))


def _root(event: EventConfig, children: Sequence[Node], *, centered: bool) -> Box:
    return Box(
        Style(
            width="100%",
            height="100%",
            flex_direction="column",
            align_items="center" if centered else None,
            justify_content="center" if centered else None,
            background_color=event.palette.bg,
            position="relative",
            overflow="hidden",
        ),
        children,
    )


def orbs(event: EventConfig) -> List[Box]:
    """Large blurred circles painted behind the slide content."""
    nodes: List[Box] = []
    for orb in event.orbs:
        gradient = RadialGradient(
            stops=(
                ColorStop(f"{orb.color}{opacity_to_hex(orb.opacity)}", 0.0),
                ColorStop(f"{orb.color}{opacity_to_hex(orb.opacity * ORB_GRADIENT_FADE)}", 0.5),
                ColorStop("transparent", 0.75),
            )
        )
        nodes.append(
            Box(
                Style(
                    position="absolute",
                    width=orb.width,
                    height=orb.height,
                    border_radius="50%",
                    background=gradient,
                    top=orb.top,
                    bottom=orb.bottom,
                    left=orb.left,
                    right=orb.right,
                )
            )
        )
    return nodes


def grid() -> Box:
    return Box(
        Style(
            position="absolute",
            top=0,
            left=0,
            right=0,
            bottom=0,
            background_grid=GridLines(color=GRID_COLOR, spacing=GRID_SPACING, thickness=1),
        )
    )


def backdrop(event: EventConfig) -> List[Node]:
    return [*orbs(event), grid()]


def header(event: EventConfig) -> Box:
    """Logo dot and association name pinned to the top-left corner."""
    palette = event.palette
    return Box(
        Style(position="absolute", top=96, left=128, align_items="center", gap=32),
        (
            _dot(32, palette.blue),
            _text(event.association_name, 56, 500, palette.text_secondary, letter_spacing=0.02),
        ),
    )


def qr_card(url: str, size: int, *, padding: int, radius: int) -> Box:
    # The QR is drawn white on transparent and inverted to read dark on the white card.
    return Box(
        Style(
            background_color="#ffffff",
            padding=edges(padding),
            border_radius=radius,
            align_items="center",
            justify_content="center",
        ),
        (Image(qr_data_uri(url, size), size, size, Style(filter="invert(1)")),),
    )


def _url_line(url_text: str, event: EventConfig, **style) -> Box:
    palette = event.palette
    return Box(
        Style(align_items="center", gap=24, **style),
        (_dot(24, palette.blue, flex_shrink=0), _text(url_text, 56, 500, palette.cyan)),
    )


def title_slide(event: EventConfig, logo: str) -> Box:
    palette = event.palette
    content = Box(
        Style(flex_direction="column", align_items="center", justify_content="center", gap=96),
        (
            Image(logo, 400, 400, Style(object_fit="contain")),
            _text(
                event.association_name,
                240,
                700,
                palette.text,
                text_align="center",
                letter_spacing=-0.03,
                line_height=1.1,
            ),
            _text(event.tagline, 80, 400, palette.text_secondary, text_align="center"),
        ),
    )
    return _root(event, [*backdrop(event), content], centered=True)


def qr_slide(event: EventConfig, title: str, subtitle: str, url: str, show_header: bool = True) -> Box:
    """Two columns: title, subtitle and link on the left, QR card on the right."""
    palette = event.palette
    qr_size = 800

    text_column = Box(
        Style(flex_direction="column", align_items="flex-start", gap=48, max_width=1400),
        (
            _text(title, 176, 700, palette.text, line_height=1.1, letter_spacing=-0.02),
            _text(subtitle, 72, 400, palette.text_secondary, line_height=1.4),
            _url_line(display_url(url), event, margin=edges(32, 0, 0, 0)),
        ),
    )
    qr_column = Box(
        Style(flex_direction="column", align_items="center", gap=48),
        (
            qr_card(url, qr_size, padding=64, radius=48),
            _text("Scannez pour rejoindre", 48, 400, palette.text_secondary, text_align="center"),
        ),
    )
    content = Box(
        Style(
            flex_direction="row",
            align_items="center",
            justify_content="center",
            gap=240,
            padding=edges(160),
        ),
        (text_column, qr_column),
    )

    children: List[Node] = backdrop(event)
    if show_header:
        children.append(header(event))
    children.append(content)
    return _root(event, children, centered=True)


def _section_heading(label: str, event: EventConfig) -> Text:
    return _text(
        label,
        64,
        500,
        event.palette.text_secondary,
        margin=edges(0, 0, 40, 0),
        text_transform="uppercase",
        letter_spacing=0.05,
    )


def _name_and_room(name: str, room: str, event: EventConfig, **style) -> Box:
    palette = event.palette
    return Box(
        Style(flex_direction="column", gap=8, **style),
        (_text(name, 52, 500, palette.text), _text(room, 40, 400, palette.text_secondary)),
    )


def _activity_row(activity: Activity, event: EventConfig) -> Box:
    palette = event.palette
    return Box(
        Style(
            align_items="center",
            gap=40,
            padding=edges(24, 0, 24, 0),
            border_bottom=Border(2, f"{palette.text_secondary}33"),
        ),
        (
            _text(activity.time, 56, 700, palette.blue, width=180, flex_shrink=0),
            _name_and_room(activity.name, activity.room, event, flex=1),
        ),
    )


def _misc_row(activity: MiscActivity, event: EventConfig) -> Box:
    palette = event.palette
    return Box(
        Style(
            align_items="center",
            gap=24,
            padding=edges(28, 0, 28, 0),
            border_bottom=Border(2, f"{palette.text_secondary}33"),
        ),
        (
            _dot(20, palette.cyan, flex_shrink=0),
            _name_and_room(activity.name, activity.room, event),
        ),
    )


def activities_slide(event: EventConfig) -> Box:
    """Timed schedule on the left, all-night activities on the right."""
    schedule = Box(
        Style(flex_direction="column", flex=1),
        (
            _section_heading("Planning", event),
            *(_activity_row(activity, event) for activity in sort_activities(event.activities)),
        ),
    )
    all_night = Box(
        Style(flex_direction="column", flex=1),
        (
            _section_heading("Toute la nuit", event),
            *(_misc_row(activity, event) for activity in event.misc_activities),
        ),
    )
    content = Box(
        Style(flex_direction="column", flex=1, padding=edges(240, 128, 128, 128), gap=64),
        (
            _text("Programme de la Nuit", 120, 700, event.palette.text, letter_spacing=-0.02),
            Box(Style(flex_direction="row", gap=120, flex=1), (schedule, all_night)),
        ),
    )
    return _root(event, [*backdrop(event), header(event), content], centered=False)


def escape_game_slide(event: EventConfig, secondary_logo: str) -> Box:
    palette = event.palette
    location = Box(
        Style(flex_direction="column", align_items="center", gap=40, margin=edges(40, 0, 0, 0)),
        (
            Box(
                Style(align_items="center", gap=32),
                (_dot(32, palette.blue), _text(event.escape_game_room, 80, 500, palette.text)),
            ),
            _text(event.escape_game_availability, 56, 400, palette.text_secondary, text_align="center"),
        ),
    )
    content = Box(
        Style(
            flex_direction="column",
            align_items="center",
            justify_content="center",
            flex=1,
            padding=edges(160),
            gap=80,
        ),
        (
            Image(secondary_logo, 1200, 400, Style(object_fit="contain")),
            _text("Escape Game", 140, 700, palette.text, text_align="center", letter_spacing=-0.02),
            location,
        ),
    )
    return _root(event, [*backdrop(event), header(event), content], centered=False)


def association_slide(event: EventConfig, logo: str) -> Box:
    """Single centred column with the association QR code; no header."""
    palette = event.palette
    qr_size = 600
    link = Box(
        Style(flex_direction="column", align_items="center", gap=40, margin=edges(40, 0, 0, 0)),
        (
            qr_card(event.association_url, qr_size, padding=48, radius=40),
            _url_line(display_url(event.association_url), event),
        ),
    )
    content = Box(
        Style(
            flex_direction="column",
            align_items="center",
            justify_content="center",
            flex=1,
            padding=edges(160),
            gap=80,
        ),
        (
            Image(logo, 300, 300, Style(object_fit="contain")),
            _text(event.association_name, 140, 700, palette.text, text_align="center", letter_spacing=-0.02),
            _text(event.tagline, 64, 400, palette.text_secondary, text_align="center"),
            link,
        ),
    )
    return _root(event, [*backdrop(event), content], centered=False)


def slide_specs(event: EventConfig, logo: str, secondary_logo: str) -> List[SlideSpec]:
    """The seven slides in generation order, which is also the PDF page order."""
    discord, nuit_de_l_info, subject = event.links
    return [
        SlideSpec("01-title", partial(title_slide, event, logo)),
        SlideSpec(discord.name, partial(qr_slide, event, discord.title, discord.subtitle, discord.url, True)),
        SlideSpec(
            nuit_de_l_info.name,
            partial(qr_slide, event, nuit_de_l_info.title, nuit_de_l_info.subtitle, nuit_de_l_info.url, True),
        ),
        SlideSpec("04-programme", partial(activities_slide, event)),
        SlideSpec("05-escape-game", partial(escape_game_slide, event, secondary_logo)),
        SlideSpec("06-asso", partial(association_slide, event, logo)),
        SlideSpec(subject.name, partial(qr_slide, event, subject.title, subject.subtitle, subject.url, True)),
    ]
