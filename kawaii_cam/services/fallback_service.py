"""Запасной путь, когда фильтры не могут прочитать снимок.

Собирает холст 500×500: радиальный фон, снимок в скруглённой рамке,
заголовок и обычные украшения. Размер результата не зависит от входа.
"""
from __future__ import annotations

import random
from typing import Optional

from PIL import Image, ImageChops, ImageDraw, ImageOps

from kawaii_cam.models.decoration_model import BLUE, PINK, PURPLE, WHITE
from kawaii_cam.services.decoration_service import DecorationService
from kawaii_cam.services.drawing import (
    load_font,
    radial_gradient,
    rounded_rect_mask,
    rounded_rect_stroke_mask,
    to_drawable,
)

CANVAS_SIZE = (500, 500)
PHOTO_BOX = (50, 80, 450, 480)
PHOTO_CORNER_RADIUS = 25.0
PHOTO_BORDER_WIDTH = 6.0
TITLE = "Kawaii Character! 🎀✨"
TITLE_FONT_SIZE = 28
TITLE_TOP = 20
TITLE_STROKE_WIDTH = 2

BACKGROUND_STOPS = (
    (0.0, (*PINK, 0.2 * 255)),
    (0.5, (*PURPLE, 0.1 * 255)),
    (1.0, (*BLUE, 0.1 * 255)),
)


class FallbackService:
    def __init__(self, decoration_service: Optional[DecorationService] = None) -> None:
        self._decorations = decoration_service or DecorationService()

    def compose_fallback(self, image: Image.Image, rng: random.Random) -> Image.Image:
        """Возвращает новый холст 500×500 со снимком в рамке и украшениями."""
        w, h = CANVAS_SIZE
        canvas = radial_gradient(CANVAS_SIZE, (w / 2.0, h / 2.0), w / 2.0, BACKGROUND_STOPS)

        self._draw_photo(canvas, image)

        border = Image.new("RGBA", CANVAS_SIZE, (*PINK, 255))
        border.putalpha(rounded_rect_stroke_mask(CANVAS_SIZE, PHOTO_BOX, PHOTO_CORNER_RADIUS, PHOTO_BORDER_WIDTH))
        canvas.alpha_composite(border)

        self._draw_title(canvas)
        return self._decorations.add_decorations(canvas, rng)

    def _draw_photo(self, canvas: Image.Image, image: Image.Image) -> None:
        """Вписывает снимок (с обрезкой по пропорциям) в скруглённую область."""
        drawable = to_drawable(image)
        if drawable is None:
            return
        x0, y0, x1, y1 = PHOTO_BOX
        box_size = (x1 - x0, y1 - y0)
        photo = ImageOps.fit(drawable, box_size, Image.Resampling.LANCZOS)
        clip = rounded_rect_mask(box_size, (0, 0, box_size[0], box_size[1]), PHOTO_CORNER_RADIUS)
        photo.putalpha(ImageChops.multiply(photo.getchannel("A"), clip))
        canvas.alpha_composite(photo, dest=(x0, y0))

    def _draw_title(self, canvas: Image.Image) -> None:
        font = load_font(TITLE_FONT_SIZE, bold=True)
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        left, top, right, _bottom = draw.textbbox((0, 0), TITLE, font=font, stroke_width=TITLE_STROKE_WIDTH)
        x = (canvas.width - (right - left)) / 2.0 - left
        draw.text(
            (x, TITLE_TOP - top),
            TITLE,
            font=font,
            fill=(*PINK, 255),
            stroke_width=TITLE_STROKE_WIDTH,
            stroke_fill=(*WHITE, 255),
        )
        canvas.alpha_composite(layer)
