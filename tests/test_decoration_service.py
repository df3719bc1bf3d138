"""
Tests for decoration planning, drawing and the gradient frame.
"""

import math
import random

import numpy as np
import pytest
from PIL import Image

from kawaii_cam.models.decoration_model import (
    FALLBACK_GLYPHS,
    PINK,
    STYLE_BY_THEME,
    THEME_STYLES,
    PlacedDecoration,
    Theme,
)
from kawaii_cam.services.decoration_service import (
    CENTER_EXCLUSION,
    GENERIC_ATTEMPTS,
    THEMED_ATTEMPTS,
    DecorationService,
    in_center_exclusion,
)

ALL_GENERIC_GLYPHS = set(FALLBACK_GLYPHS).union(*(style.accents for style in THEME_STYLES))


class TestGenericPlanning:
    def test_center_only_random_source_draws_nothing(self, center_rng):
        placed = DecorationService().plan_decorations((300, 300), center_rng)
        assert placed == []

    def test_center_only_random_source_leaves_image_untouched(self, center_rng, white_image):
        out = DecorationService().add_decorations(white_image, center_rng)
        assert out.tobytes() == white_image.tobytes()

    @pytest.mark.parametrize("size", [(300, 300), (640, 360), (90, 400)])
    def test_never_places_inside_center_zone(self, size):
        service = DecorationService()
        w, h = size
        radius = min(w, h) * CENTER_EXCLUSION
        for seed in range(200):
            for d in service.plan_decorations(size, random.Random(seed)):
                assert math.hypot(d.x - w / 2, d.y - h / 2) >= radius

    def test_attributes_within_ranges(self):
        service = DecorationService()
        w, h = 400, 300
        for seed in range(100):
            placed = service.plan_decorations((w, h), random.Random(seed))
            assert len(placed) <= GENERIC_ATTEMPTS
            for d in placed:
                assert d.glyph in ALL_GENERIC_GLYPHS
                assert 0.05 * w <= d.x <= 0.95 * w
                assert 0.05 * h <= d.y <= 0.95 * h
                assert 16 <= d.font_size <= 28
                assert -0.2 <= d.angle <= 0.2
                assert d.color[:3] == PINK
                assert round(0.6 * 255) <= d.color[3] <= round(0.9 * 255)

    def test_same_seed_same_plan(self):
        service = DecorationService()
        assert service.plan_decorations((300, 300), random.Random(42)) == service.plan_decorations(
            (300, 300), random.Random(42)
        )

    def test_some_seed_skips_attempts(self):
        # with a 0.3 exclusion radius roughly a quarter of the attempts fall inside
        service = DecorationService()
        counts = [len(service.plan_decorations((300, 300), random.Random(seed))) for seed in range(50)]
        assert min(counts) < GENERIC_ATTEMPTS
        assert max(counts) > 0

    def test_in_center_exclusion(self):
        assert in_center_exclusion(150, 150, (300, 300))
        assert in_center_exclusion(150 + 89, 150, (300, 300))
        assert not in_center_exclusion(150 + 90, 150, (300, 300))
        assert not in_center_exclusion(10, 10, (300, 300))


class TestThemedPlanning:
    @pytest.mark.parametrize("theme", [t for t in Theme if t is not Theme.RANDOM])
    def test_glyphs_cycle_in_order(self, theme):
        style = STYLE_BY_THEME[theme]
        placed = DecorationService().plan_decorations((300, 300), random.Random(1), style)
        assert len(placed) == THEMED_ATTEMPTS
        expected = [style.glyphs[i % len(style.glyphs)] for i in range(THEMED_ATTEMPTS)]
        assert [d.glyph for d in placed] == expected

    def test_glyph_order_independent_of_randomness(self, center_rng):
        style = STYLE_BY_THEME[Theme.HELLO_KITTY]
        service = DecorationService()
        a = [d.glyph for d in service.plan_decorations((300, 300), random.Random(5), style)]
        b = [d.glyph for d in service.plan_decorations((300, 300), center_rng, style)]
        assert a == b == ["🎀", "💖", "✨", "🌸", "🎀", "💖", "✨", "🌸"]

    def test_themed_mode_has_no_center_exclusion(self, center_rng):
        style = STYLE_BY_THEME[Theme.KUROMI]
        placed = DecorationService().plan_decorations((300, 300), center_rng, style)
        assert len(placed) == THEMED_ATTEMPTS
        assert all(d.x == pytest.approx(150) and d.y == pytest.approx(150) for d in placed)

    def test_themed_attributes(self):
        style = STYLE_BY_THEME[Theme.CINNAMOROLL]
        for seed in range(30):
            for d in DecorationService().plan_decorations((200, 100), random.Random(seed), style):
                assert 20 <= d.x <= 180
                assert 10 <= d.y <= 90
                assert 20 <= d.font_size <= 32
                assert -0.3 <= d.angle <= 0.3
                assert d.color == (*style.color, 204)


class TestDrawing:
    def test_add_decorations_preserves_size_and_input(self, white_image):
        before = white_image.tobytes()
        out = DecorationService().add_decorations(white_image, random.Random(3))
        assert out.size == white_image.size
        assert out.mode == "RGBA"
        assert white_image.tobytes() == before

    def test_draw_decorations_marks_glyph_position(self):
        image = Image.new("RGBA", (120, 120), (255, 255, 255, 255))
        glyph = PlacedDecoration("O", 30.0, 90.0, 0.15, 28.0, (*PINK, 230))
        out = np.asarray(DecorationService().draw_decorations(image, [glyph])).astype(int)
        around = out[70:111, 10:51, :3]
        assert around.min() < 200
        # far corner untouched, alpha stays opaque
        assert tuple(out[5, 115]) == (255, 255, 255, 255)
        assert (out[..., 3] == 255).all()

    def test_draw_decorations_clips_at_canvas_edge(self):
        image = Image.new("RGBA", (40, 40), (255, 255, 255, 255))
        glyphs = [
            PlacedDecoration("W", 0.0, 0.0, 0.0, 30.0, (*PINK, 255)),
            PlacedDecoration("W", 40.0, 40.0, -0.2, 30.0, (*PINK, 255)),
        ]
        out = DecorationService().draw_decorations(image, glyphs)
        assert out.size == (40, 40)

    def test_add_decorations_converts_rgb_input(self, solid_image):
        out = DecorationService().add_decorations(solid_image, random.Random(0))
        assert out.mode == "RGBA"
        assert out.size == solid_image.size

    def test_frame_preserves_size(self, white_image):
        out = DecorationService().add_frame(white_image)
        assert out.size == white_image.size

    def test_frame_colors_border_not_center(self):
        image = Image.new("RGBA", (300, 300), (255, 255, 255, 255))
        out = np.asarray(DecorationService().add_frame(image))
        # left edge, inside the 8-unit stroke
        r, g, b, a = out[150, 3]
        assert a == 255
        assert (r, g, b) != (255, 255, 255)
        assert g < 120
        # interior untouched
        assert tuple(out[150, 150]) == (255, 255, 255, 255)
        assert tuple(out[150, 20]) == (255, 255, 255, 255)

    def test_frame_gradient_runs_pink_to_purple(self):
        image = Image.new("RGBA", (300, 300), (0, 0, 0, 255))
        out = np.asarray(DecorationService().add_frame(image)).astype(int)
        top_left = out[30, 3, :3]
        bottom_right = out[270, 296, :3]
        # pink has more red, purple more blue
        assert top_left[0] > bottom_right[0]
        assert top_left[2] < bottom_right[2]

    @pytest.mark.parametrize("size", [(1, 1), (5, 3)])
    def test_frame_on_tiny_images(self, size):
        out = DecorationService().add_frame(Image.new("RGBA", size, (0, 0, 0, 255)))
        assert out.size == size


def test_different_seeds_give_different_plans():
    service = DecorationService()
    plans = {tuple(service.plan_decorations((300, 300), random.Random(seed))) for seed in range(5)}
    assert len(plans) > 1


class TestCharacterTheme:
    @pytest.mark.parametrize("theme", [t for t in Theme if t is not Theme.RANDOM])
    def test_uses_the_character_bundle(self, theme, white_image):
        service = DecorationService()
        out = service.add_character_theme(white_image, theme, random.Random(4))
        plan = service.plan_decorations(white_image.size, random.Random(4), STYLE_BY_THEME[theme])
        assert out.tobytes() == service.draw_decorations(white_image, plan).tobytes()

    def test_random_theme_falls_through_to_generic_mode(self, white_image):
        service = DecorationService()
        out = service.add_character_theme(white_image, Theme.RANDOM, random.Random(6))
        assert out.tobytes() == service.add_decorations(white_image, random.Random(6)).tobytes()

    def test_no_frame_is_added(self, white_image, center_rng):
        # every generic attempt lands in the center zone, so nothing at all is drawn
        out = DecorationService().add_character_theme(white_image, Theme.RANDOM, center_rng)
        assert out.tobytes() == white_image.tobytes()

    def test_empty_image_gives_empty_canvas(self):
        out = DecorationService().add_character_theme(Image.new("RGB", (0, 0)), Theme.KUROMI, random.Random(1))
        assert out.size == (0, 0)
        assert out.mode == "RGBA"
