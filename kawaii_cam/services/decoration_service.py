"""Украшения «kawaii»: случайные глифы, тематические наборы и градиентная рамка.

Принципы:
- SRP: планирование позиций отделено от рисования (`plan_decorations` -> `add_decorations`).
- Источник случайности передаётся явно (`random.Random`), поэтому результат
  воспроизводим при фиксированном зерне.
- Входное изображение не мутируется: рисуем на копии.
"""
from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from kawaii_cam.models.decoration_model import (
    FALLBACK_GLYPHS,
    PINK,
    PURPLE,
    RGB,
    STYLE_BY_THEME,
    THEME_STYLES,
    PlacedDecoration,
    Theme,
    ThemeStyle,
)
from kawaii_cam.services.drawing import (
    as_rgba_copy,
    composite_centered,
    linear_gradient,
    load_font,
    rounded_rect_stroke_mask,
    to_drawable,
)

logger = logging.getLogger(__name__)

GENERIC_ATTEMPTS = 12
GENERIC_MARGIN = 0.05
GENERIC_FONT_RANGE = (16.0, 28.0)
GENERIC_ALPHA_RANGE = (0.6, 0.9)
GENERIC_MAX_ANGLE = 0.2
# Radius of the skipped center area as a share of min(width, height)
CENTER_EXCLUSION = 0.3

THEMED_ATTEMPTS = 8
THEMED_MARGIN = 0.1
THEMED_FONT_RANGE = (20.0, 32.0)
THEMED_ALPHA = 0.8
THEMED_MAX_ANGLE = 0.3

FRAME_WIDTH = 8.0
FRAME_CORNER_RADIUS = 20.0


def in_center_exclusion(x: float, y: float, size: Tuple[int, int]) -> bool:
    """True, если точка ближе к центру, чем 0.3 * min(w, h)."""
    w, h = size
    return math.hypot(x - w / 2.0, y - h / 2.0) < min(w, h) * CENTER_EXCLUSION


def _with_alpha(color: RGB, alpha: float) -> Tuple[int, int, int, int]:
    return color[0], color[1], color[2], int(round(alpha * 255))


class DecorationService:
    def plan_decorations(
        self,
        size: Tuple[int, int],
        rng: random.Random,
        style: Optional[ThemeStyle] = None,
    ) -> List[PlacedDecoration]:
        """Рассчитывает размещение глифов, ничего не рисуя.

        Без `style` обычный режим: случайная тема, 12 попыток, центр пропускается.
        Со `style` тематический режим: 8 глифов набора по кругу, без исключений.
        """
        if style is None:
            return self._plan_generic(size, rng)
        return self._plan_themed(size, rng, style)

    def add_decorations(
        self,
        image: Image.Image,
        rng: random.Random,
        style: Optional[ThemeStyle] = None,
    ) -> Image.Image:
        """Возвращает копию изображения с нарисованными украшениями."""
        return self.draw_decorations(image, self.plan_decorations(image.size, rng, style))

    def draw_decorations(self, image: Image.Image, decorations: Sequence[PlacedDecoration]) -> Image.Image:
        canvas = as_rgba_copy(image)
        for decoration in decorations:
            self._draw_glyph(canvas, decoration)
        return canvas

    def add_character_theme(self, image: Image.Image, theme: Theme, rng: random.Random) -> Image.Image:
        """Украшения одного персонажа без рамки.

        `Theme.RANDOM` даёт обычный режим со случайной темой. Изображение,
        которое нельзя нарисовать (например, пустое), превращается в
        прозрачный холст того же размера.
        """
        canvas = to_drawable(image)
        if canvas is None:
            return Image.new("RGBA", image.size)
        style = None if theme is Theme.RANDOM else STYLE_BY_THEME[theme]
        return self.add_decorations(canvas, rng, style)

    def add_frame(self, image: Image.Image, start_color: RGB = PINK, end_color: RGB = PURPLE) -> Image.Image:
        """Рамка: скруглённый прямоугольник, обводка залита градиентом по диагонали.

        Обводка шириной 8 центрирована на контуре, отстоящем на 4 от краёв,
        радиус скругления 20.
        """
        canvas = as_rgba_copy(image)
        w, h = canvas.size
        if w == 0 or h == 0:
            return canvas
        inset = FRAME_WIDTH / 2.0
        mask = rounded_rect_stroke_mask(
            (w, h), (inset, inset, w - inset, h - inset), FRAME_CORNER_RADIUS, FRAME_WIDTH
        )
        border = linear_gradient((w, h), start_color, end_color)
        border.putalpha(mask)
        canvas.alpha_composite(border)
        return canvas

    # ---- Planning ----
    def _plan_generic(self, size: Tuple[int, int], rng: random.Random) -> List[PlacedDecoration]:
        w, h = size
        style = rng.choice(THEME_STYLES)
        pool = style.accents + FALLBACK_GLYPHS
        logger.debug("Generic decorations with %s accents", style.theme.value)

        placed: List[PlacedDecoration] = []
        for _ in range(GENERIC_ATTEMPTS):
            x = rng.uniform(w * GENERIC_MARGIN, w * (1.0 - GENERIC_MARGIN))
            y = rng.uniform(h * GENERIC_MARGIN, h * (1.0 - GENERIC_MARGIN))
            # the attempt is consumed, no retry
            if in_center_exclusion(x, y, size):
                continue
            glyph = rng.choice(pool)
            font_size = rng.uniform(*GENERIC_FONT_RANGE)
            alpha = rng.uniform(*GENERIC_ALPHA_RANGE)
            angle = rng.uniform(-GENERIC_MAX_ANGLE, GENERIC_MAX_ANGLE)
            placed.append(PlacedDecoration(glyph, x, y, angle, font_size, _with_alpha(PINK, alpha)))
        return placed

    def _plan_themed(self, size: Tuple[int, int], rng: random.Random, style: ThemeStyle) -> List[PlacedDecoration]:
        w, h = size
        color = _with_alpha(style.color, THEMED_ALPHA)
        placed: List[PlacedDecoration] = []
        for i in range(THEMED_ATTEMPTS):
            glyph = style.glyphs[i % len(style.glyphs)]
            x = rng.uniform(w * THEMED_MARGIN, w * (1.0 - THEMED_MARGIN))
            y = rng.uniform(h * THEMED_MARGIN, h * (1.0 - THEMED_MARGIN))
            font_size = rng.uniform(*THEMED_FONT_RANGE)
            angle = rng.uniform(-THEMED_MAX_ANGLE, THEMED_MAX_ANGLE)
            placed.append(PlacedDecoration(glyph, x, y, angle, font_size, color))
        return placed

    # ---- Drawing ----
    def _draw_glyph(self, canvas: Image.Image, decoration: PlacedDecoration) -> None:
        """Рисует глиф на отдельной плитке, поворачивает и накладывает центром в (x, y)."""
        font = load_font(int(round(decoration.font_size)))
        measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        left, top, right, bottom = measure.textbbox((0, 0), decoration.glyph, font=font, embedded_color=True)
        tile = Image.new("RGBA", (max(1, right - left), max(1, bottom - top)), (0, 0, 0, 0))
        r, g, b, a = decoration.color
        ImageDraw.Draw(tile).text((-left, -top), decoration.glyph, font=font, fill=(r, g, b, 255), embedded_color=True)
        # color emoji ignore fill, so opacity is applied to the whole tile
        tile.putalpha(tile.getchannel("A").point(lambda v: v * a // 255))
        # PIL rotates counter-clockwise for positive degrees
        rotated = tile.rotate(-math.degrees(decoration.angle), resample=Image.Resampling.BICUBIC, expand=True)
        composite_centered(canvas, rotated, decoration.x, decoration.y)
