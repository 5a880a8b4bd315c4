"""Tests for slidekit.render.rasterizer and slidekit.render.overlay."""

import pytest
from PIL import Image

from slidekit.core.slides import Slide, TextElement
from slidekit.render.overlay import overlay_boxes
from slidekit.render.rasterizer import anchor_shift


def _slide(*elements: TextElement) -> Slide:
    slide = Slide(id=1, image_src="bg.png")
    for el in elements:
        slide.add_text_element(el)
    return slide


# ── Alignment ───────────────────────────────────────────────────────────

class TestAnchorShift:
    def test_values(self):
        assert anchor_shift("left", 80) == 0
        assert anchor_shift("center", 80) == 40
        assert anchor_shift("right", 80) == 80


class TestPlanAlignment:
    @pytest.mark.parametrize("x,width", [(0, 400), (25, 400), (37.5, 1280), (100, 333)])
    def test_left_anchor_is_exact(self, rasterizer, x, width):
        slide = _slide(TextElement(text="Hello", x=x, y=10, align="left"))
        [line] = rasterizer.plan(slide, width, 300)
        assert line.x == x / 100 * width

    def test_center_shifts_half_width(self, rasterizer):
        slide = _slide(TextElement(text="abcd", x=50, y=0, font_size=20, align="center"))
        [line] = rasterizer.plan(slide, 400, 300)
        assert line.x == pytest.approx(200 - 20)

    def test_right_shifts_full_width(self, rasterizer):
        slide = _slide(TextElement(text="abcd", x=50, y=0, font_size=20, align="right"))
        [line] = rasterizer.plan(slide, 400, 300)
        assert line.x == pytest.approx(200 - 40)

    def test_center_uses_block_max_width(self, rasterizer):
        slide = _slide(TextElement(text="ab\nabcdef", x=50, y=0, font_size=10, align="center"))
        lines = rasterizer.plan(slide, 200, 100)
        # widest line is 30px, so every line shifts by 15
        assert [l.x for l in lines] == [pytest.approx(85), pytest.approx(85)]

    def test_right_multi_line(self, rasterizer):
        slide = _slide(TextElement(text="Line A\nLonger Line B", x=80, y=20,
                                   font_size=10, align="right"))
        first, second = rasterizer.plan(slide, 500, 400)
        anchor = 400
        assert first.x == pytest.approx(anchor - 65)
        assert second.x == pytest.approx(anchor - 65)
        assert second.x + 65 == pytest.approx(anchor)

    def test_lines_stack_by_line_height(self, rasterizer):
        slide = _slide(TextElement(text="a\nb\nc", x=0, y=50, font_size=10))
        lines = rasterizer.plan(slide, 100, 200)
        assert [l.y for l in lines] == [pytest.approx(100), pytest.approx(112), pytest.approx(124)]
        assert [l.text for l in lines] == ["a", "b", "c"]

    def test_empty_text_center_has_no_shift(self, rasterizer):
        slide = _slide(TextElement(text="", x=50, y=50, align="center"))
        [line] = rasterizer.plan(slide, 100, 100)
        assert line.x == 50
        assert line.text == ""

    def test_font_carries_style(self, rasterizer):
        slide = _slide(TextElement(text="x", bold=True, italic=True, font_size=17, color="#00ff00"))
        [line] = rasterizer.plan(slide, 100, 100)
        assert line.font.bold and line.font.italic
        assert line.font.size == 17
        assert line.color == "#00ff00"


# ── Paint order ─────────────────────────────────────────────────────────

class TestPaintOrder:
    def test_lower_z_index_painted_first(self, rasterizer):
        slide = _slide(
            TextElement(text="top", z_index=5),
            TextElement(text="bottom", z_index=1),
            TextElement(text="middle", z_index=3),
        )
        lines = rasterizer.plan(slide, 100, 100)
        assert [l.text for l in lines] == ["bottom", "middle", "top"]

    def test_ties_keep_collection_order(self, rasterizer):
        slide = _slide(
            TextElement(text="first", z_index=2),
            TextElement(text="second", z_index=2),
        )
        lines = rasterizer.plan(slide, 100, 100)
        assert [l.text for l in lines] == ["first", "second"]

    def test_multi_line_element_stays_together(self, rasterizer):
        slide = _slide(
            TextElement(text="b1\nb2", z_index=2),
            TextElement(text="a1\na2", z_index=1),
        )
        lines = rasterizer.plan(slide, 100, 100)
        assert [l.text for l in lines] == ["a1", "a2", "b1", "b2"]


# ── Rasterize ───────────────────────────────────────────────────────────

class TestRasterize:
    def test_background_only(self, rasterizer):
        background = Image.new("RGB", (64, 48), (10, 20, 30))
        surface = rasterizer.rasterize(_slide(), background, 64, 48)
        assert surface.size == (64, 48)
        assert surface.getcolors() == [(64 * 48, (10, 20, 30, 255))]

    def test_background_stretched_to_surface(self, rasterizer):
        background = Image.new("RGB", (10, 10), (200, 0, 0))
        surface = rasterizer.rasterize(_slide(), background, 40, 20)
        assert surface.size == (40, 20)
        assert surface.getpixel((39, 19)) == (200, 0, 0, 255)

    def test_text_is_drawn(self, rasterizer):
        background = Image.new("RGB", (200, 100), "white")
        slide = _slide(TextElement(text="XXXX", x=10, y=20, font_size=40, color="#000000"))
        surface = rasterizer.rasterize(slide, background, 200, 100)
        colors = dict((c, n) for n, c in surface.getcolors(200 * 100))
        assert len(colors) > 1
        # nothing drawn left of the anchor
        assert surface.crop((0, 0, 15, 100)).getcolors() == [(15 * 100, (255, 255, 255, 255))]

    def test_unknown_color_draws_black(self, rasterizer):
        background = Image.new("RGB", (120, 60), "white")
        slide = _slide(TextElement(text="WW", x=10, y=10, font_size=30, color="not-a-color"))
        surface = rasterizer.rasterize(slide, background, 120, 60)
        assert (0, 0, 0, 255) in {c for _, c in surface.getcolors(120 * 60)}

    def test_deterministic(self, rasterizer):
        background = Image.new("RGB", (160, 90), (240, 240, 240))
        slide = _slide(
            TextElement(text="One\nTwo", x=50, y=10, align="center", font_size=18),
            TextElement(text="Three", x=90, y=70, align="right", color="#AA0000", z_index=2),
        )
        a = rasterizer.rasterize(slide, background, 160, 90)
        b = rasterizer.rasterize(slide, background, 160, 90)
        assert a.tobytes() == b.tobytes()


# ── Live overlay ────────────────────────────────────────────────────────

class TestOverlay:
    def test_styles_follow_alignment(self):
        slide = _slide(
            TextElement(text="l", align="left"),
            TextElement(text="c", align="center"),
            TextElement(text="r", align="right"),
        )
        transforms = [b.style["transform"] for b in overlay_boxes(slide)]
        assert transforms == ["translateX(0)", "translateX(-50%)", "translateX(-100%)"]

    def test_style_values(self):
        slide = _slide(TextElement(text="t", x=12.5, y=80, font_size=24, bold=True,
                                   font_family="Georgia", z_index=4))
        [box] = overlay_boxes(slide)
        assert box.style["left"] == "12.5%"
        assert box.style["top"] == "80%"
        assert box.style["font"] == "bold 24px Georgia"
        assert box.style["z-index"] == "4"

    def test_paint_order_and_selection(self):
        slide = _slide(TextElement(text="a", z_index=2), TextElement(text="b", z_index=1))
        boxes = overlay_boxes(slide, selected_id="text-1")
        assert [b.text for b in boxes] == ["b", "a"]
        assert [b.selected for b in boxes] == [False, True]
