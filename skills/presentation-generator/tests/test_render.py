from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image as PILImage

from presgen.config import DEFAULT_EVENT, HEIGHT, WIDTH
from presgen.errors import MissingGlyphError, RenderError
from presgen.layout import Box, Image, Style, Text, data_uri
from presgen.qr import qr_data_uri
from presgen.render import Frame, layout, parse_color, render, resolve_length
from presgen.slides import display_url, grid, qr_slide, title_slide

from conftest import png_bytes


def _open(payload: bytes) -> PILImage.Image:
    image = PILImage.open(BytesIO(payload))
    image.load()
    return image.convert("RGBA")


def _root(*children, **style) -> Box:
    return Box(Style(width="100%", height="100%", **style), children)


def test_parse_color_forms() -> None:
    assert parse_color("#2563eb") == (37, 99, 235, 255)
    assert parse_color("#2563eb47") == (37, 99, 235, 71)
    assert parse_color("#fff") == (255, 255, 255, 255)
    assert parse_color("transparent") == (0, 0, 0, 0)
    assert parse_color("rgba(255, 255, 255, 0.03)") == (255, 255, 255, 8)
    with pytest.raises(RenderError):
        parse_color("papayawhip")


def test_resolve_length_units() -> None:
    assert resolve_length(120, 1000) == 120.0
    assert resolve_length("-800px", 1000) == -800.0
    assert resolve_length("15%", 3840) == pytest.approx(576.0)
    assert resolve_length("50%", None) is None
    assert resolve_length(None, 10) is None


def test_render_output_has_canvas_size(font_set) -> None:
    tree = _root(Text("Hi there", Style(font_size=40, color="#ffffff")), background_color="#000000")
    image = _open(render(tree, 320, 180, font_set))
    assert image.size == (320, 180)
    assert image.getpixel((319, 179)) == (0, 0, 0, 255)


def test_render_full_slide_at_4k(font_set) -> None:
    tree = title_slide(DEFAULT_EVENT, data_uri("image/png", png_bytes()))
    image = _open(render(tree, WIDTH, HEIGHT, font_set))
    assert image.size == (WIDTH, HEIGHT)


def test_missing_glyph_is_an_error(font_set) -> None:
    tree = _root(Text("Soirée", Style(font_size=20)))
    with pytest.raises(MissingGlyphError) as exc:
        render(tree, 100, 50, font_set)
    assert exc.value.char == "é"


def test_unknown_weight_is_an_error(font_set) -> None:
    tree = _root(Text("Light", Style(font_size=20, font_weight=300)))
    with pytest.raises(RenderError, match="weight 300"):
        render(tree, 100, 50, font_set)


def test_layout_centers_column_children(font_set) -> None:
    tree = _root(
        Box(Style(width=50, height=20)),
        flex_direction="column",
        align_items="center",
        justify_content="center",
    )
    child = layout(tree, 200, 100, font_set).children[0]
    assert (child.x, child.y, child.width, child.height) == (75, 40, 50, 20)


def test_layout_absolute_anchors(font_set) -> None:
    tree = _root(Box(Style(position="absolute", right=10, bottom="10px", width=20, height=20)))
    child = layout(tree, 200, 100, font_set).children[0]
    assert (child.x, child.y) == (170, 70)


def test_layout_flex_grow_shares_free_space(font_set) -> None:
    tree = _root(Box(Style(flex=1)), Box(Style(flex=1)), gap=20)
    first, second = layout(tree, 200, 100, font_set).children
    assert first.width == pytest.approx(90)
    assert second.x == pytest.approx(110)
    # Row items stretch on the cross axis by default.
    assert first.height == 100


def test_layout_wraps_text_to_available_width(font_set) -> None:
    # Test font glyphs advance 0.5em: 10px each at size 20.
    column = Box(
        Style(width=80, flex_direction="column", align_items="flex-start"),
        (Text("aaaa bbbb cccc", Style(font_size=20, line_height=1.0)),),
    )
    text = layout(_root(column), 400, 200, font_set).children[0].children[0]
    assert text.lines == ["aaaa", "bbbb", "cccc"]
    assert text.height == pytest.approx(60)


def _frames(frame: Frame):
    yield frame
    for child in frame.children:
        yield from _frames(child)


def test_wrap_breaks_after_url_separators(font_set) -> None:
    column = Box(
        Style(width=70, flex_direction="column", align_items="flex-start"),
        (Text("ab/cd?e=fg", Style(font_size=20, line_height=1.0)),),
    )
    text = layout(_root(column), 400, 200, font_set).children[0].children[0]
    assert text.lines == ["ab/cd?", "e=fg"]


def test_wrap_splits_word_wider_than_line(font_set) -> None:
    column = Box(
        Style(width=40, flex_direction="column", align_items="flex-start"),
        (Text("abcdefghij", Style(font_size=20, line_height=1.0)),),
    )
    text = layout(_root(column), 400, 200, font_set).children[0].children[0]
    assert text.lines == ["abcd", "efgh", "ij"]
    assert text.width <= 40


def test_subject_url_wraps_before_qr_card(font_set) -> None:
    link = DEFAULT_EVENT.links[2]
    tree = qr_slide(DEFAULT_EVENT, link.title, link.subtitle, link.url)
    frames = list(_frames(layout(tree, WIDTH, HEIGHT, font_set)))

    url = next(f for f in frames if isinstance(f.node, Text) and f.node.content == display_url(link.url))
    qr = next(f for f in frames if isinstance(f.node, Image) and f.node.src.startswith("data:image/svg+xml"))
    assert len(url.lines) > 1
    assert url.x + url.width <= qr.x


def test_uppercase_transform_applies_before_layout(font_set) -> None:
    tree = _root(Text("planning", Style(font_size=20, text_transform="uppercase")))
    assert layout(tree, 400, 100, font_set).children[0].lines == ["PLANNING"]


def test_grid_lines_are_faint_and_periodic(font_set) -> None:
    image = _open(render(_root(grid(), background_color="#000000"), 400, 400, font_set))
    assert image.getpixel((0, 5))[0] > 0
    assert image.getpixel((160, 5))[0] > 0
    assert image.getpixel((5, 5))[0] == 0


def test_inverted_qr_draws_dark_modules(font_set) -> None:
    tree = _root(Image(qr_data_uri("https://a.fr", 100), 100, 100, Style(filter="invert(1)")))
    image = _open(render(tree, 100, 100, font_set))
    # Top-left finder module is dark after inversion; background stays transparent.
    r, g, b, a = image.getpixel((1, 1))
    assert (r, g, b) == (0, 0, 0) and a == 255


def test_contain_keeps_aspect_ratio(font_set) -> None:
    wide = data_uri("image/png", png_bytes((200, 50), (255, 255, 255, 255)))
    tree = _root(Image(wide, 100, 100, Style(object_fit="contain")))
    image = _open(render(tree, 100, 100, font_set))
    assert image.getpixel((50, 50))[3] == 255
    assert image.getpixel((50, 5))[3] == 0


def test_non_data_uri_images_are_rejected(font_set) -> None:
    tree = _root(Image("https://example.com/logo.png", 10, 10))
    with pytest.raises(RenderError, match="data URI"):
        render(tree, 20, 20, font_set)
