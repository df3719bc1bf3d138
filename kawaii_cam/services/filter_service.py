"""Цепочка фильтров «kawaii»: цвет, мягкое смешивание, тонировка, виньетка.

Принципы:
- SRP: только попиксельная математика, без украшений и UI.
- Каждый этап: именованный `FilterStage`. Сбой этапа не прерывает цепочку:
  этап пропускается, дальше идёт результат предыдущего.
- Чистый код: входное изображение не мутируется, расчёты векторизованы (numpy).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from kawaii_cam.models.style_model import DEFAULT_FILTER_PARAMETERS, FilterChainParameters

logger = logging.getLogger(__name__)

# 8-bit modes that Pillow converts to RGBA losslessly enough for the filters
DECODABLE_MODES = frozenset({"1", "L", "LA", "P", "PA", "RGB", "RGBA", "RGBX", "CMYK", "YCbCr"})

# Rec. 709 luma
LUMA_WEIGHTS = np.array([0.2125, 0.7154, 0.0721], dtype=np.float32)


class ImageDecodeError(ValueError):
    """Изображение нельзя перевести во внутреннее представление фильтров."""


class FilterStageError(RuntimeError):
    """Этап фильтра не смог выдать результат."""


StageFunc = Callable[[np.ndarray, FilterChainParameters], np.ndarray]


@dataclass(frozen=True)
class FilterStage:
    name: str
    apply: StageFunc


@dataclass(frozen=True)
class FilterResult:
    """Результат цепочки и имена пропущенных (сбойных) этапов."""
    image: Image.Image
    skipped_stages: Tuple[str, ...] = ()


# ---------- Вспомогательные функции ----------
def _with_rgb(pixels: np.ndarray, rgb: np.ndarray) -> np.ndarray:
    """Собирает RGBA из новых RGB и исходной альфы, с ограничением в [0, 1]."""
    out = pixels.copy()
    out[..., :3] = np.clip(rgb, 0.0, 1.0)
    return out


def _premultiply(pixels: np.ndarray) -> np.ndarray:
    out = pixels.copy()
    out[..., :3] *= pixels[..., 3:4]
    return out


def _unpremultiply(pixels: np.ndarray) -> np.ndarray:
    alpha = pixels[..., 3:4]
    with np.errstate(divide="ignore", invalid="ignore"):
        rgb = np.where(alpha > 0, pixels[..., :3] / alpha, 0.0)
    out = pixels.copy()
    out[..., :3] = np.clip(rgb, 0.0, 1.0)
    return out


def gaussian_kernel(sigma: float) -> np.ndarray:
    """Нормированное одномерное ядро Гаусса с полушириной ceil(3σ)."""
    half = max(1, int(math.ceil(3.0 * sigma)))
    xs = np.arange(-half, half + 1, dtype=np.float32)
    kernel = np.exp(-(xs * xs) / (2.0 * sigma * sigma))
    return (kernel / kernel.sum()).astype(np.float32)


def gaussian_blur(pixels: np.ndarray, sigma: float) -> np.ndarray:
    """Сепарабельное размытие по Гауссу, края дополняются повтором (edge).

    Работает с любым числом каналов; альфу не учитывает, для RGBA
    вызывать на премультиплицированных данных.
    """
    if sigma <= 0:
        return pixels.copy()
    kernel = gaussian_kernel(sigma)
    half = len(kernel) // 2
    h, w = pixels.shape[:2]

    # Horizontal pass via shifted slices
    padded = np.pad(pixels, ((0, 0), (half, half), (0, 0)), mode="edge")
    horiz = np.zeros_like(pixels)
    for i, weight in enumerate(kernel):
        horiz += weight * padded[:, i:i + w, :]

    # Vertical pass
    padded = np.pad(horiz, ((half, half), (0, 0), (0, 0)), mode="edge")
    out = np.zeros_like(pixels)
    for i, weight in enumerate(kernel):
        out += weight * padded[i:i + h, :, :]
    return out


def source_over(foreground: np.ndarray, background: np.ndarray) -> np.ndarray:
    """Классическое альфа-наложение «source-over» (неумноженная альфа на входе и выходе)."""
    fa = foreground[..., 3:4]
    ba = background[..., 3:4]
    out_a = fa + ba * (1.0 - fa)
    premul = foreground[..., :3] * fa + background[..., :3] * ba * (1.0 - fa)
    with np.errstate(divide="ignore", invalid="ignore"):
        rgb = np.where(out_a > 0, premul / out_a, 0.0)
    return np.concatenate([np.clip(rgb, 0.0, 1.0), out_a], axis=-1).astype(np.float32)


# ---------- Этапы ----------
def color_controls(pixels: np.ndarray, params: FilterChainParameters) -> np.ndarray:
    """1) Яркость (сдвиг), насыщенность (смешение с лумой), контраст (вокруг 0.5)."""
    rgb = np.clip(pixels[..., :3] + params.brightness, 0.0, 1.0)
    luma = (rgb @ LUMA_WEIGHTS)[..., None]
    rgb = luma + params.saturation * (rgb - luma)
    rgb = (rgb - 0.5) * params.contrast + 0.5
    return _with_rgb(pixels, rgb)


def soft_blend(pixels: np.ndarray, params: FilterChainParameters) -> np.ndarray:
    """2) Чёткая копия поверх слегка размытой: мягкое «свечение» по краям и прозрачности."""
    blurred = _unpremultiply(gaussian_blur(_premultiply(pixels), params.blur_radius))
    return source_over(pixels, blurred)


def tint(pixels: np.ndarray, params: FilterChainParameters) -> np.ndarray:
    """3) Розовая тонировка матрицей 3×3, альфа без изменений."""
    matrix = np.asarray(params.tint_matrix, dtype=np.float32)
    if matrix.shape != (3, 3):
        raise FilterStageError(f"Матрица тонировки должна быть 3×3, получено {matrix.shape}")
    return _with_rgb(pixels, pixels[..., :3] @ matrix.T)


def vignette(pixels: np.ndarray, params: FilterChainParameters) -> np.ndarray:
    """4) Радиальное затемнение: 1 - intensity * min(d / (radius * полудиагональ), 1)^2."""
    h, w = pixels.shape[:2]
    reach = params.vignette_radius * math.hypot(w / 2.0, h / 2.0)
    if reach <= 0:
        raise FilterStageError("Радиус виньетки должен быть положительным")
    ys, xs = np.ogrid[0:h, 0:w]
    dist = np.hypot(xs + 0.5 - w / 2.0, ys + 0.5 - h / 2.0).astype(np.float32)
    falloff = np.clip(dist / reach, 0.0, 1.0) ** 2
    factor = 1.0 - params.vignette_intensity * falloff
    return _with_rgb(pixels, pixels[..., :3] * factor[..., None])


DEFAULT_STAGES: Tuple[FilterStage, ...] = (
    FilterStage("color_controls", color_controls),
    FilterStage("soft_blend", soft_blend),
    FilterStage("tint", tint),
    FilterStage("vignette", vignette),
)


class FilterService:
    """Применяет фиксированную цепочку этапов к изображению.

    Этапы можно подменить (например, в тестах), но не параметры:
    приложение всегда использует `DEFAULT_FILTER_PARAMETERS`.
    """

    def __init__(
        self,
        params: FilterChainParameters = DEFAULT_FILTER_PARAMETERS,
        stages: Optional[Sequence[FilterStage]] = None,
    ) -> None:
        self.params = params
        self.stages: Tuple[FilterStage, ...] = tuple(DEFAULT_STAGES if stages is None else stages)

    def decode(self, image: Image.Image) -> np.ndarray:
        """Переводит изображение в float32-массив H×W×4 в диапазоне [0, 1].

        Raises:
            ImageDecodeError: пустое изображение, неподдерживаемый режим
                (16/32-бит, float и т.п.) или ошибка конвертации.
        """
        if image.width == 0 or image.height == 0:
            raise ImageDecodeError("Пустое изображение")
        if image.mode not in DECODABLE_MODES:
            raise ImageDecodeError(f"Режим {image.mode} не поддерживается фильтрами")
        try:
            rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        except (ValueError, OSError) as exc:
            raise ImageDecodeError(f"Не удалось преобразовать {image.mode} в RGBA") from exc
        return np.asarray(rgba, dtype=np.float32) / 255.0

    @staticmethod
    def encode(pixels: np.ndarray) -> Image.Image:
        """Обратное преобразование: float [0, 1] -> 8-битный RGBA."""
        arr = np.clip(np.rint(pixels * 255.0), 0, 255).astype(np.uint8)
        return Image.fromarray(arr)

    def run(self, image: Image.Image) -> FilterResult:
        """Прогоняет все этапы и сообщает, какие из них были пропущены.

        Raises:
            ImageDecodeError: см. `decode`.
        """
        pixels = self.decode(image)
        skipped = []
        for stage in self.stages:
            out = self._run_stage(stage, pixels)
            if out is None:
                skipped.append(stage.name)
                continue
            pixels = out
        return FilterResult(image=self.encode(pixels), skipped_stages=tuple(skipped))

    def apply_style_filters(self, image: Image.Image) -> Image.Image:
        """Возвращает отфильтрованную копию того же размера."""
        return self.run(image).image

    def _run_stage(self, stage: FilterStage, pixels: np.ndarray) -> Optional[np.ndarray]:
        """Выполняет этап; None означает «этап пропущен, берите предыдущий результат»."""
        try:
            out = stage.apply(pixels, self.params)
            if not isinstance(out, np.ndarray):
                raise FilterStageError(f"этап вернул {type(out).__name__} вместо массива")
            if out.shape != pixels.shape:
                raise FilterStageError(f"этап вернул форму {out.shape}, ожидалась {pixels.shape}")
            if not np.all(np.isfinite(out)):
                raise FilterStageError("этап вернул NaN/inf")
        except Exception as exc:
            # any stage failure means passthrough, never an aborted chain
            logger.warning("Filter stage %r skipped: %s", stage.name, exc)
            return None
        return out.astype(np.float32, copy=False)
