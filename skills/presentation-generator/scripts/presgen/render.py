"""Rasterize layout trees to PNG.

Layout is a reduced flexbox: row/column main axis, gap, padding, margins,
``justify_content``, ``align_items`` (stretch by default), ``flex`` growth
from a zero basis, row shrinking, ``max_width``, percentage sizes and absolute
positioning against the parent box. Painting uses Pillow; SVG images go
through cairosvg first.

Text is drawn only with the three weights of the supplied ``FontSet``. There
is no fallback font: a character missing from the font raises
``MissingGlyphError``.
"""

from __future__ import annotations

import io
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import cairosvg
from fontTools.ttLib import TTFont
from PIL import Image as PILImage
from PIL import ImageChops, ImageDraw, ImageFont, ImageOps

from .errors import MissingGlyphError, RenderError
from .fonts import FontSet
from .layout import Box, ColorStop, Edges, GridLines, Image, Length, Node, RadialGradient, Style, Text, parse_data_uri

DEFAULT_FONT_SIZE = 16
DEFAULT_FONT_WEIGHT = 400
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_TEXT_COLOR = "#000000"

# Sample grid used to draw radial gradients before scaling them to the box.
GRADIENT_RESOLUTION = 512
GRADIENT_STEPS = 256

RGBA = Tuple[int, int, int, int]
Rect = Tuple[float, float, float, float]

_RGBA_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$")
_INVERT_RE = re.compile(r"^invert\(\s*([0-9.]+)(%?)\s*\)$")

# Line break opportunities besides spaces (URLs and hyphenated words).
BREAK_AFTER = "/-?&="


@dataclass
class Frame:
    """A node placed on the canvas (border box in canvas pixels)."""

    node: Node
    x: float
    y: float
    width: float
    height: float
    children: List["Frame"] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)


@dataclass
class _Item:
    node: Node
    base: float
    natural: float
    flex: float
    shrink: float
    margin_main: Tuple[float, float]
    margin_cross: Tuple[float, float]
    cross: Optional[float]
    explicit_cross: Optional[float]
    main: float = 0.0


def parse_color(value: str) -> RGBA:
    """Parse ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()``/``rgba()`` or ``transparent``."""
    text = value.strip().lower()
    if text == "transparent":
        return (0, 0, 0, 0)
    if text.startswith("#"):
        digits = text[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) in (6, 8) and re.fullmatch(r"[0-9a-f]+", digits):
            alpha = int(digits[6:8], 16) if len(digits) == 8 else 255
            return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha)
    match = _RGBA_RE.match(text)
    if match:
        parts = [p.strip() for p in match.group(1).split(",")]
        if len(parts) in (3, 4):
            try:
                r, g, b = (int(round(float(p))) for p in parts[:3])
                a = float(parts[3]) if len(parts) == 4 else 1.0
            except ValueError:
                pass
            else:
                return (r, g, b, int(round(max(0.0, min(1.0, a)) * 255)))
    raise RenderError(f"Unsupported color value: {value!r}")


def resolve_length(value: Optional[Length], reference: Optional[float]) -> Optional[float]:
    """Resolve px numbers, ``"NNpx"`` and ``"NN%"`` strings; percentages need a reference."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    try:
        if text.endswith("%"):
            if reference is None:
                return None
            return float(text[:-1]) / 100.0 * reference
        if text.endswith("px"):
            return float(text[:-2])
        return float(text)
    except ValueError as exc:
        raise RenderError(f"Unsupported length value: {value!r}") from exc


def _edges(value: Optional[Edges]) -> Edges:
    return value if value is not None else (0.0, 0.0, 0.0, 0.0)


def _segments(paragraph: str) -> List[str]:
    segments: List[str] = []
    current = ""
    for char in paragraph:
        current += char
        if char == " " or char in BREAK_AFTER:
            segments.append(current)
            current = ""
    if current:
        segments.append(current)
    return segments


def _is_absolute(node: Node) -> bool:
    return node.style.position == "absolute"


def _is_column(style: Style) -> bool:
    return style.flex_direction == "column"


class _Typesetter:
    def __init__(self, fonts: FontSet):
        self._fonts = fonts
        self._faces: Dict[Tuple[int, int], ImageFont.FreeTypeFont] = {}
        self._cmaps: Dict[int, Dict[int, str]] = {}

    @staticmethod
    def size(style: Style) -> float:
        return float(style.font_size or DEFAULT_FONT_SIZE)

    @staticmethod
    def weight(style: Style) -> int:
        return int(style.font_weight or DEFAULT_FONT_WEIGHT)

    def face(self, style: Style) -> ImageFont.FreeTypeFont:
        key = (self.weight(style), int(round(self.size(style))))
        if key not in self._faces:
            payload = self._fonts.for_weight(key[0])
            try:
                self._faces[key] = ImageFont.truetype(
                    io.BytesIO(payload), key[1], layout_engine=ImageFont.Layout.BASIC
                )
            except OSError as exc:
                raise RenderError(f"Cannot load font weight {key[0]}: {exc}") from exc
        return self._faces[key]

    def _cmap(self, weight: int) -> Dict[int, str]:
        if weight not in self._cmaps:
            font = TTFont(io.BytesIO(self._fonts.for_weight(weight)), lazy=True)
            self._cmaps[weight] = font.getBestCmap() or {}
        return self._cmaps[weight]

    def content(self, node: Text) -> str:
        text = node.content.upper() if node.style.text_transform == "uppercase" else node.content
        weight = self.weight(node.style)
        cmap = self._cmap(weight)
        for char in text:
            if char != "\n" and ord(char) not in cmap:
                raise MissingGlyphError(char, weight)
        return text

    def line_height(self, style: Style) -> float:
        return (style.line_height or DEFAULT_LINE_HEIGHT) * self.size(style)

    def spacing(self, style: Style) -> float:
        return (style.letter_spacing or 0.0) * self.size(style)

    def line_width(self, style: Style, line: str) -> float:
        if not line:
            return 0.0
        face = self.face(style)
        spacing = self.spacing(style)
        if not spacing:
            return float(face.getlength(line))
        return sum(float(face.getlength(ch)) for ch in line) + spacing * (len(line) - 1)

    def _break_word(self, style: Style, word: str, limit: float) -> str:
        cut = 1
        while cut < len(word) and self.line_width(style, word[: cut + 1]) <= limit:
            cut += 1
        return word[:cut]

    def wrap(self, node: Text, max_width: Optional[float]) -> List[str]:
        lines: List[str] = []
        style = node.style
        for paragraph in self.content(node).split("\n"):
            if max_width is None:
                lines.append(paragraph)
                continue
            limit = max_width + 0.5
            line = ""
            for segment in _segments(paragraph):
                candidate = line + segment
                if self.line_width(style, candidate.rstrip()) <= limit:
                    line = candidate
                    continue
                if line:
                    lines.append(line.rstrip())
                # A segment wider than the whole line is split between characters.
                while len(segment.rstrip()) > 1 and self.line_width(style, segment.rstrip()) > limit:
                    head = self._break_word(style, segment, limit)
                    lines.append(head)
                    segment = segment[len(head) :]
                line = segment
            lines.append(line.rstrip())
        return lines


class _LayoutEngine:
    def __init__(self, typesetter: _Typesetter):
        self._type = typesetter

    def measure(self, node: Node, avail: Optional[float]) -> Tuple[float, float]:
        """Preferred border-box size of ``node`` when offered ``avail`` pixels of width."""
        if isinstance(node, Image):
            return float(node.width), float(node.height)

        style = node.style
        pt, pr, pb, pl = _edges(style.padding)
        explicit_w = resolve_length(style.width, avail)
        explicit_h = resolve_length(style.height, None)
        max_w = resolve_length(style.max_width, avail)

        limit = explicit_w if explicit_w is not None else avail
        if max_w is not None:
            limit = max_w if limit is None else min(limit, max_w)
        inner = None if limit is None else max(0.0, limit - pl - pr)

        if isinstance(node, Text):
            lines = self._type.wrap(node, inner)
            content_w = max((self._type.line_width(style, line) for line in lines), default=0.0)
            content_h = len(lines) * self._type.line_height(style)
        else:
            flow = [child for child in node.children if not _is_absolute(child)]
            sizes = [self._outer(child, inner) for child in flow]
            gaps = (style.gap or 0.0) * max(0, len(flow) - 1)
            if _is_column(style):
                content_w = max((w for w, _ in sizes), default=0.0)
                content_h = sum(h for _, h in sizes) + gaps
            else:
                content_w = sum(w for w, _ in sizes) + gaps
                content_h = max((h for _, h in sizes), default=0.0)

        width = explicit_w if explicit_w is not None else content_w + pl + pr
        if max_w is not None:
            width = min(width, max_w)
        height = explicit_h if explicit_h is not None else content_h + pt + pb
        return width, height

    def _outer(self, node: Node, avail: Optional[float]) -> Tuple[float, float]:
        mt, mr, mb, ml = _edges(node.style.margin)
        inner = None if avail is None else max(0.0, avail - ml - mr)
        width, height = self.measure(node, inner)
        return width + ml + mr, height + mt + mb

    def layout(self, node: Node, x: float, y: float, width: float, height: float) -> Frame:
        frame = Frame(node, x, y, width, height)
        style = node.style
        pt, pr, pb, pl = _edges(style.padding)
        inner_w = max(0.0, width - pl - pr)
        inner_h = max(0.0, height - pt - pb)

        if isinstance(node, Text):
            frame.lines = self._type.wrap(node, inner_w)
            return frame
        if isinstance(node, Image):
            return frame

        flow = [child for child in node.children if not _is_absolute(child)]
        flow_rects = iter(self._place_flow(style, flow, x + pl, y + pt, inner_w, inner_h))
        for child in node.children:
            if _is_absolute(child):
                rect = self._place_absolute(child, x, y, width, height)
            else:
                rect = next(flow_rects)
            frame.children.append(self.layout(child, *rect))
        return frame

    def _place_absolute(self, child: Node, x: float, y: float, width: float, height: float) -> Rect:
        style = child.style
        left = resolve_length(style.left, width)
        right = resolve_length(style.right, width)
        top = resolve_length(style.top, height)
        bottom = resolve_length(style.bottom, height)

        if isinstance(child, Image):
            child_w, child_h = float(child.width), float(child.height)
        else:
            child_w = resolve_length(style.width, width)
            child_h = resolve_length(style.height, height)
            if child_w is None:
                if left is not None and right is not None:
                    child_w = max(0.0, width - left - right)
                else:
                    child_w = self.measure(child, width)[0]
            if child_h is None:
                if top is not None and bottom is not None:
                    child_h = max(0.0, height - top - bottom)
                else:
                    child_h = self.measure(child, child_w)[1]

        if left is not None:
            child_x = x + left
        elif right is not None:
            child_x = x + width - right - child_w
        else:
            child_x = x
        if top is not None:
            child_y = y + top
        elif bottom is not None:
            child_y = y + height - bottom - child_h
        else:
            child_y = y
        return child_x, child_y, child_w, child_h

    def _item(self, child: Node, column: bool, stretch: bool, content_w: float, content_h: float) -> _Item:
        style = child.style
        mt, mr, mb, ml = _edges(style.margin)
        margin_main = (mt, mb) if column else (ml, mr)
        margin_cross = (ml, mr) if column else (mt, mb)

        if isinstance(child, Image):
            explicit_w, explicit_h = float(child.width), float(child.height)
            stretch = False
        else:
            explicit_w = resolve_length(style.width, content_w)
            explicit_h = resolve_length(style.height, content_h)
        max_w = resolve_length(style.max_width, content_w)

        cross: Optional[float] = None
        if column:
            avail = content_w - ml - mr
            if explicit_w is not None:
                cross = explicit_w
            elif stretch:
                cross = avail
            else:
                # fit-content: never wider than the container offers
                cross = min(self.measure(child, avail)[0], avail)
            if max_w is not None:
                cross = min(cross, max_w)
            natural = explicit_h if explicit_h is not None else self.measure(child, cross)[1]
            explicit_main, explicit_cross = explicit_h, explicit_w
        else:
            natural = explicit_w if explicit_w is not None else self.measure(child, content_w - ml - mr)[0]
            if max_w is not None:
                natural = min(natural, max_w)
            explicit_main, explicit_cross = explicit_w, explicit_h

        flex = float(style.flex or 0.0)
        base = 0.0 if flex > 0 and explicit_main is None else natural
        shrink = 1.0 if style.flex_shrink is None else float(style.flex_shrink)
        return _Item(
            node=child,
            base=base,
            natural=natural,
            flex=flex,
            shrink=shrink,
            margin_main=margin_main,
            margin_cross=margin_cross,
            cross=cross,
            explicit_cross=explicit_cross,
        )

    def _place_flow(
        self,
        style: Style,
        children: Sequence[Node],
        x: float,
        y: float,
        content_w: float,
        content_h: float,
    ) -> List[Rect]:
        if not children:
            return []
        column = _is_column(style)
        align = style.align_items or "stretch"
        justify = style.justify_content or "flex-start"
        gap = float(style.gap or 0.0)
        main_avail = content_h if column else content_w
        cross_avail = content_w if column else content_h
        stretch = align == "stretch"

        items = [self._item(child, column, stretch, content_w, content_h) for child in children]
        gaps = gap * (len(items) - 1)

        def used() -> float:
            return sum(item.main + sum(item.margin_main) for item in items) + gaps

        for item in items:
            item.main = item.base
        free = main_avail - used()
        grow = sum(item.flex for item in items)
        for item in items:
            if item.flex > 0:
                share = free * item.flex / grow if free > 0 else 0.0
                # Column items never shrink below their content height.
                item.main = max(item.base + share, item.natural if column else 0.0)

        free = main_avail - used()
        if free < 0 and not column:
            weights = sum(item.main * item.shrink for item in items)
            if weights > 0:
                overflow = -free
                for item in items:
                    item.main = max(0.0, item.main - overflow * item.main * item.shrink / weights)
            free = main_avail - used()

        between = 0.0
        if justify == "center":
            offset = free / 2
        elif justify == "flex-end":
            offset = free
        elif justify == "space-between" and free > 0 and len(items) > 1:
            offset = 0.0
            between = free / (len(items) - 1)
        else:
            offset = 0.0

        rects: List[Rect] = []
        position = offset
        for item in items:
            node_stretch = stretch and not isinstance(item.node, Image)
            if column:
                cross = item.cross if item.cross is not None else 0.0
            elif item.explicit_cross is not None:
                cross = item.explicit_cross
            elif node_stretch:
                cross = cross_avail - sum(item.margin_cross)
            else:
                cross = self.measure(item.node, item.main)[1]

            if align == "center":
                cross_pos = (cross_avail - cross - sum(item.margin_cross)) / 2 + item.margin_cross[0]
            elif align == "flex-end":
                cross_pos = cross_avail - cross - item.margin_cross[1]
            else:
                cross_pos = item.margin_cross[0]

            position += item.margin_main[0]
            if column:
                rects.append((x + cross_pos, y + position, cross, item.main))
            else:
                rects.append((x + position, y + cross_pos, item.main, cross))
            position += item.main + item.margin_main[1] + gap + between
        return rects


def _stop_color(stops: Sequence[ColorStop], t: float) -> RGBA:
    colors = [(stop.offset, parse_color(stop.color)) for stop in stops]
    if t <= colors[0][0]:
        return colors[0][1]
    if t >= colors[-1][0]:
        return _opaque_rgb_for(colors, len(colors) - 1)
    for (o1, c1), (o2, c2) in zip(colors, colors[1:]):
        if o1 <= t <= o2:
            span = (t - o1) / (o2 - o1) if o2 > o1 else 1.0
            # Interpolate premultiplied, as CSS does, so fading to transparent keeps the hue.
            a = c1[3] + (c2[3] - c1[3]) * span
            if a <= 0:
                return _opaque_rgb_for(colors, colors.index((o2, c2)))
            rgb = [
                (c1[i] * c1[3] + (c2[i] * c2[3] - c1[i] * c1[3]) * span) / a
                for i in range(3)
            ]
            return (int(round(rgb[0])), int(round(rgb[1])), int(round(rgb[2])), int(round(a)))
    return colors[-1][1]


def _opaque_rgb_for(colors: Sequence[Tuple[float, RGBA]], index: int) -> RGBA:
    # A fully transparent stop borrows the RGB of its nearest visible neighbour.
    color = colors[index][1]
    if color[3] > 0:
        return color
    for _, candidate in reversed(colors[:index]):
        if candidate[3] > 0:
            return (candidate[0], candidate[1], candidate[2], 0)
    return color


def _radial_layer(size: Tuple[int, int], gradient: RadialGradient) -> PILImage.Image:
    n = GRADIENT_RESOLUTION
    centre = n / 2
    radius = math.hypot(centre, centre)
    sample = PILImage.new("RGBA", (n, n), _stop_color(gradient.stops, 1.0))
    draw = ImageDraw.Draw(sample)
    for step in range(GRADIENT_STEPS, 0, -1):
        t = step / GRADIENT_STEPS
        r = radius * t
        draw.ellipse((centre - r, centre - r, centre + r, centre + r), fill=_stop_color(gradient.stops, t))
    return sample.resize(size, PILImage.BICUBIC)


def _shape_mask(size: Tuple[int, int], radius: Optional[Length]) -> Optional[PILImage.Image]:
    if radius is None:
        return None
    w, h = size
    mask = PILImage.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    if isinstance(radius, str) and radius.strip().endswith("%") and float(radius.strip()[:-1]) >= 50:
        draw.ellipse((0, 0, w - 1, h - 1), fill=255)
        return mask
    r = resolve_length(radius, min(w, h)) or 0.0
    draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=min(r, min(w, h) / 2), fill=255)
    return mask


def _apply_mask(layer: PILImage.Image, mask: Optional[PILImage.Image]) -> PILImage.Image:
    if mask is None:
        return layer
    layer.putalpha(ImageChops.multiply(layer.getchannel("A"), mask))
    return layer


def _draw_grid(layer: PILImage.Image, grid: GridLines) -> None:
    draw = ImageDraw.Draw(layer)
    color = parse_color(grid.color)
    w, h = layer.size
    thickness = max(1, grid.thickness)
    for x in range(0, w, grid.spacing):
        draw.rectangle((x, 0, x + thickness - 1, h - 1), fill=color)
    for y in range(0, h, grid.spacing):
        draw.rectangle((0, y, w - 1, y + thickness - 1), fill=color)


def _invert_amount(value: Optional[str]) -> float:
    if not value:
        return 0.0
    match = _INVERT_RE.match(value.strip())
    if not match:
        raise RenderError(f"Unsupported filter: {value!r}")
    amount = float(match.group(1))
    if match.group(2):
        amount /= 100.0
    return max(0.0, min(1.0, amount))


def _decode_image(src: str, width: int, height: int) -> PILImage.Image:
    try:
        mime, payload = parse_data_uri(src)
    except ValueError as exc:
        raise RenderError(str(exc)) from exc
    try:
        if mime == "image/svg+xml":
            payload = cairosvg.svg2png(bytestring=payload, output_width=width, output_height=height)
        image = PILImage.open(io.BytesIO(payload))
        image.load()
    except Exception as exc:
        raise RenderError(f"Cannot decode embedded {mime} image: {exc}") from exc
    return image.convert("RGBA")


class _Painter:
    def __init__(self, canvas: PILImage.Image, typesetter: _Typesetter):
        self._canvas = canvas
        self._type = typesetter

    def paint(self, frame: Frame) -> None:
        node = frame.node
        self._decorate(frame)
        if isinstance(node, Text):
            self._text(frame)
        elif isinstance(node, Image):
            self._image(frame, node)
        for child in frame.children:
            self.paint(child)

    def _composite(self, layer: PILImage.Image, x: float, y: float) -> None:
        canvas = self._canvas
        dx, dy = int(round(x)), int(round(y))
        left, top = max(0, -dx), max(0, -dy)
        right = min(layer.width, canvas.width - dx)
        bottom = min(layer.height, canvas.height - dy)
        if right <= left or bottom <= top:
            return
        if (left, top, right, bottom) != (0, 0, layer.width, layer.height):
            layer = layer.crop((left, top, right, bottom))
        canvas.alpha_composite(layer, dest=(dx + left, dy + top))

    def _decorate(self, frame: Frame) -> None:
        style = frame.node.style
        if not (style.background_color or style.background or style.background_grid or style.border_bottom):
            return
        size = (max(1, int(round(frame.width))), max(1, int(round(frame.height))))
        mask = _shape_mask(size, style.border_radius)

        if style.background_color:
            fill = PILImage.new("RGBA", size, parse_color(style.background_color))
            self._composite(_apply_mask(fill, mask), frame.x, frame.y)
        if style.background:
            self._composite(_apply_mask(_radial_layer(size, style.background), mask), frame.x, frame.y)
        if style.background_grid:
            layer = PILImage.new("RGBA", size, (0, 0, 0, 0))
            _draw_grid(layer, style.background_grid)
            self._composite(layer, frame.x, frame.y)
        if style.border_bottom:
            border = style.border_bottom
            layer = PILImage.new("RGBA", size, (0, 0, 0, 0))
            ImageDraw.Draw(layer).rectangle(
                (0, size[1] - border.width, size[0] - 1, size[1] - 1), fill=parse_color(border.color)
            )
            self._composite(layer, frame.x, frame.y)

    def _text(self, frame: Frame) -> None:
        style = frame.node.style
        face = self._type.face(style)
        color = parse_color(style.color or DEFAULT_TEXT_COLOR)
        spacing = self._type.spacing(style)
        line_h = self._type.line_height(style)
        ascent, descent = face.getmetrics()
        pt, pr, pb, pl = _edges(style.padding)
        box_x = frame.x + pl
        box_w = frame.width - pl - pr
        draw = ImageDraw.Draw(self._canvas)

        for index, line in enumerate(frame.lines):
            line_w = self._type.line_width(style, line)
            if style.text_align == "center":
                x = box_x + (box_w - line_w) / 2
            elif style.text_align == "right":
                x = box_x + box_w - line_w
            else:
                x = box_x
            baseline = frame.y + pt + index * line_h + (line_h - (ascent + descent)) / 2 + ascent
            if not spacing:
                draw.text((x, baseline), line, font=face, fill=color, anchor="ls")
                continue
            for char in line:
                draw.text((x, baseline), char, font=face, fill=color, anchor="ls")
                x += float(face.getlength(char)) + spacing

    def _image(self, frame: Frame, node: Image) -> None:
        width, height = max(1, int(round(frame.width))), max(1, int(round(frame.height)))
        source = _decode_image(node.src, width, height)

        if node.style.object_fit == "contain":
            scale = min(width / source.width, height / source.height)
            fitted = source.resize(
                (max(1, int(round(source.width * scale))), max(1, int(round(source.height * scale)))),
                PILImage.LANCZOS,
            )
            layer = PILImage.new("RGBA", (width, height), (0, 0, 0, 0))
            layer.paste(fitted, ((width - fitted.width) // 2, (height - fitted.height) // 2))
        elif source.size != (width, height):
            layer = source.resize((width, height), PILImage.LANCZOS)
        else:
            layer = source

        amount = _invert_amount(node.style.filter)
        if amount:
            alpha = layer.getchannel("A")
            rgb = layer.convert("RGB")
            inverted = ImageOps.invert(rgb)
            if amount < 1.0:
                inverted = PILImage.blend(rgb, inverted, amount)
            layer = inverted.convert("RGBA")
            layer.putalpha(alpha)

        self._composite(layer, frame.x, frame.y)


def layout(tree: Node, width: int, height: int, fonts: FontSet) -> Frame:
    """Place every node of ``tree`` on a ``width`` x ``height`` canvas."""
    return _LayoutEngine(_Typesetter(fonts)).layout(tree, 0.0, 0.0, float(width), float(height))


def render(tree: Node, width: int, height: int, fonts: FontSet) -> bytes:
    """Render ``tree`` to PNG bytes of exactly ``width`` x ``height`` pixels."""
    if not isinstance(tree, Box):
        raise RenderError("The root of a slide must be a Box")
    typesetter = _Typesetter(fonts)
    root = _LayoutEngine(typesetter).layout(tree, 0.0, 0.0, float(width), float(height))
    canvas = PILImage.new("RGBA", (width, height), (0, 0, 0, 0))
    _Painter(canvas, typesetter).paint(root)

    buffer = io.BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()
