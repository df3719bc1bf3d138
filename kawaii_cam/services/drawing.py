"""Низкоуровневые примитивы рисования поверх Pillow.

Шрифты с запасными вариантами, маски скруглённых прямоугольников со
сглаживанием, градиенты и наложение с обрезкой по краям холста.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

Box = Tuple[float, float, float, float]
Color = Sequence[float]

SUPERSAMPLE = 4

# Searched in order by ImageFont.truetype (system font dirs included)
REGULAR_FONTS = (
    "seguiemj.ttf",
    "Apple Color Emoji.ttc",
    "NotoEmoji-Regular.ttf",
    "DejaVuSans.ttf",
    "Arial.ttf",
    "arial.ttf",
)
BOLD_FONTS = (
    "seguisb.ttf",
    "Arial Bold.ttf",
    "arialbd.ttf",
    "DejaVuSans-Bold.ttf",
)


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Первый доступный TrueType-шрифт нужного кегля, иначе встроенный шрифт Pillow."""
    size = max(1, int(size))
    for name in BOLD_FONTS if bold else REGULAR_FONTS:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("No TrueType font found for size %d, using Pillow default", size)
    return ImageFont.load_default(size=size)


def as_rgba_copy(image: Image.Image) -> Image.Image:
    """Новая RGBA-копия, на которой можно рисовать."""
    if image.mode == "RGBA":
        return image.copy()
    return image.convert("RGBA")


def to_drawable(image: Image.Image) -> Optional[Image.Image]:
    """Приводит любое изображение к RGBA для вставки на холст.

    Режимы, которые Pillow не конвертирует напрямую (например, float),
    нормализуются по своему диапазону значений в оттенки серого.
    Для пустого изображения возвращает None.
    """
    if image.width == 0 or image.height == 0:
        return None
    try:
        return image.convert("RGBA")
    except (ValueError, OSError):
        pass
    arr = np.asarray(image, dtype=np.float64)
    if arr.ndim == 3:
        arr = arr.mean(axis=2)
    lo, hi = float(arr.min()), float(arr.max())
    if hi > lo:
        scaled = (arr - lo) * (255.0 / (hi - lo))
    else:
        scaled = np.zeros_like(arr)
    return Image.fromarray(np.clip(scaled, 0, 255).astype(np.uint8)).convert("RGBA")


def composite_centered(canvas: Image.Image, overlay: Image.Image, cx: float, cy: float) -> None:
    """Накладывает `overlay` центром в (cx, cy); выступающие за холст части обрезаются."""
    left = int(round(cx - overlay.width / 2.0))
    top = int(round(cy - overlay.height / 2.0))
    src_x = max(0, -left)
    src_y = max(0, -top)
    if src_x >= overlay.width or src_y >= overlay.height:
        return
    if left >= canvas.width or top >= canvas.height:
        return
    canvas.alpha_composite(overlay, dest=(max(0, left), max(0, top)), source=(src_x, src_y))


# ---------- Маски ----------
def _valid(box: Box) -> bool:
    return box[2] >= box[0] and box[3] >= box[1]


def _scaled(box: Box, factor: int) -> Tuple[int, int, int, int]:
    """Переводит box в сверхвыборку; Pillow включает x1 и y1, поэтому они уменьшаются на 1."""
    x0, y0, x1, y1 = (int(round(v * factor)) for v in box)
    return x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)


def rounded_rect_mask(size: Tuple[int, int], box: Box, radius: float) -> Image.Image:
    """Сглаженная L-маска залитого скруглённого прямоугольника."""
    w, h = size
    big = Image.new("L", (max(1, w * SUPERSAMPLE), max(1, h * SUPERSAMPLE)), 0)
    if _valid(box):
        ImageDraw.Draw(big).rounded_rectangle(_scaled(box, SUPERSAMPLE), radius=radius * SUPERSAMPLE, fill=255)
    return big.resize((max(1, w), max(1, h)), Image.Resampling.BOX)


def rounded_rect_stroke_mask(size: Tuple[int, int], box: Box, radius: float, width: float) -> Image.Image:
    """Маска обводки толщиной `width`, центрированной на контуре `box`.

    Строится как разность внешнего и внутреннего скруглённых прямоугольников.
    """
    w, h = size
    half = width / 2.0
    big = Image.new("L", (max(1, w * SUPERSAMPLE), max(1, h * SUPERSAMPLE)), 0)
    draw = ImageDraw.Draw(big)
    outer = (box[0] - half, box[1] - half, box[2] + half, box[3] + half)
    inner = (box[0] + half, box[1] + half, box[2] - half, box[3] - half)
    if _valid(outer):
        draw.rounded_rectangle(_scaled(outer, SUPERSAMPLE), radius=(radius + half) * SUPERSAMPLE, fill=255)
    if _valid(inner):
        draw.rounded_rectangle(_scaled(inner, SUPERSAMPLE), radius=max(0.0, radius - half) * SUPERSAMPLE, fill=0)
    return big.resize((max(1, w), max(1, h)), Image.Resampling.BOX)


# ---------- Градиенты ----------
def linear_gradient(
    size: Tuple[int, int],
    start_color: Color,
    end_color: Color,
    start: Tuple[float, float] = (0.0, 0.0),
    end: Optional[Tuple[float, float]] = None,
) -> Image.Image:
    """Непрозрачный RGBA-градиент вдоль оси start -> end (по умолчанию по диагонали)."""
    w, h = size
    if end is None:
        end = (float(w), float(h))
    dx, dy = end[0] - start[0], end[1] - start[1]
    denom = dx * dx + dy * dy or 1.0
    ys, xs = np.ogrid[0:h, 0:w]
    t = np.clip(((xs + 0.5 - start[0]) * dx + (ys + 0.5 - start[1]) * dy) / denom, 0.0, 1.0)
    c0 = np.asarray(start_color[:3], dtype=np.float64)
    c1 = np.asarray(end_color[:3], dtype=np.float64)
    rgb = c0 + (c1 - c0) * t[..., None]
    alpha = np.full((h, w, 1), 255.0)
    arr = np.concatenate([rgb, alpha], axis=-1)
    return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))


def radial_gradient(
    size: Tuple[int, int],
    center: Tuple[float, float],
    radius: float,
    stops: Sequence[Tuple[float, Color]],
) -> Image.Image:
    """RGBA-градиент от центра до `radius` через опорные точки (offset, RGBA 0..255).

    За пределами радиуса ничего не рисуется (альфа 0).
    """
    w, h = size
    ys, xs = np.ogrid[0:h, 0:w]
    t = np.hypot(xs + 0.5 - center[0], ys + 0.5 - center[1]) / max(radius, 1e-6)
    offsets = [offset for offset, _color in stops]
    arr = np.zeros((h, w, 4), dtype=np.float64)
    for channel in range(4):
        values = [color[channel] for _offset, color in stops]
        arr[..., channel] = np.interp(t, offsets, values)
    arr[t > 1.0] = 0.0
    return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))
