"""Declarative layout tree consumed by the renderer.

A slide is a tree of ``Box``, ``Text`` and ``Image`` nodes. Every node carries
a ``Style`` record with the subset of CSS the renderer understands. Trees are
plain frozen data: children are tuples, binary payloads are embedded as data
URIs, and nothing is resolved at render time except the supplied fonts.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

Length = Union[int, float, str]
Edges = Tuple[float, float, float, float]


def edges(*values: float) -> Edges:
    """Expand CSS shorthand (1, 2 or 4 values) into (top, right, bottom, left)."""
    if len(values) == 1:
        v = values[0]
        return (v, v, v, v)
    if len(values) == 2:
        vertical, horizontal = values
        return (vertical, horizontal, vertical, horizontal)
    if len(values) == 4:
        return (values[0], values[1], values[2], values[3])
    raise ValueError(f"edges() takes 1, 2 or 4 values, got {len(values)}")


@dataclass(frozen=True)
class ColorStop:
    color: str
    offset: float


@dataclass(frozen=True)
class RadialGradient:
    """Circle gradient sized to the farthest corner, as CSS ``radial-gradient(circle, ...)``."""

    stops: Tuple[ColorStop, ...]


@dataclass(frozen=True)
class GridLines:
    """Horizontal and vertical hairlines repeated every ``spacing`` pixels."""

    color: str
    spacing: int
    thickness: int = 1


@dataclass(frozen=True)
class Border:
    width: int
    color: str


@dataclass(frozen=True)
class Style:
    position: Optional[str] = None
    top: Optional[Length] = None
    left: Optional[Length] = None
    right: Optional[Length] = None
    bottom: Optional[Length] = None
    width: Optional[Length] = None
    height: Optional[Length] = None
    max_width: Optional[Length] = None
    flex_direction: Optional[str] = None
    align_items: Optional[str] = None
    justify_content: Optional[str] = None
    gap: Optional[float] = None
    padding: Optional[Edges] = None
    margin: Optional[Edges] = None
    flex: Optional[float] = None
    flex_shrink: Optional[float] = None
    border_radius: Optional[Length] = None
    background_color: Optional[str] = None
    background: Optional[RadialGradient] = None
    background_grid: Optional[GridLines] = None
    border_bottom: Optional[Border] = None
    overflow: Optional[str] = None
    object_fit: Optional[str] = None
    filter: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    color: Optional[str] = None
    letter_spacing: Optional[float] = None
    line_height: Optional[float] = None
    text_align: Optional[str] = None
    text_transform: Optional[str] = None


@dataclass(frozen=True)
class Box:
    style: Style = field(default_factory=Style)
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class Text:
    content: str
    style: Style = field(default_factory=Style)


@dataclass(frozen=True)
class Image:
    src: str
    width: int
    height: int
    style: Style = field(default_factory=Style)


Node = Union[Box, Text, Image]


def _style_to_dict(style: Style) -> Dict[str, Any]:
    raw = dataclasses.asdict(style)
    return {key: value for key, value in raw.items() if value is not None}


def tree_to_dict(node: Node) -> Dict[str, Any]:
    """Convert a layout tree into plain JSON-compatible data."""
    if isinstance(node, Box):
        return {
            "type": "box",
            "style": _style_to_dict(node.style),
            "children": [tree_to_dict(child) for child in node.children],
        }
    if isinstance(node, Text):
        return {"type": "text", "style": _style_to_dict(node.style), "content": node.content}
    if isinstance(node, Image):
        return {
            "type": "image",
            "style": _style_to_dict(node.style),
            "src": node.src,
            "width": node.width,
            "height": node.height,
        }
    raise TypeError(f"Unsupported layout node: {type(node).__name__}")


def tree_to_json(node: Node) -> str:
    return json.dumps(tree_to_dict(node), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def data_uri(mime: str, payload: bytes) -> str:
    """Embed a binary payload as a base64 data URI."""
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return ``(mime, payload)`` for a base64 data URI."""
    if not uri.startswith("data:"):
        raise ValueError("Layout images must be embedded data URIs")
    header, sep, body = uri[len("data:") :].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Layout images must use base64 data URIs")
    mime = header[: -len(";base64")] or "application/octet-stream"
    try:
        payload = base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload in data URI: {exc}") from exc
    return mime, payload
