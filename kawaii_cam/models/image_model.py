"""Модели данных для снимков.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель снимка и его метаданные.

    Fields:
        path: Путь к исходному файлу (None для синтезированных снимков).
        pil_image: Изображение PIL в режиме RGBA.
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL исходного файла, например "RGB".
        size_bytes: Размер файла, если доступен.
    """
    path: Optional[Path]
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]

    @classmethod
    def from_image(cls, image: Image.Image, path: Optional[Path] = None, size_bytes: Optional[int] = None) -> "ImageData":
        """Упаковывает готовое изображение PIL (без копирования пикселей)."""
        width, height = image.size
        return cls(
            path=path,
            pil_image=image,
            width=width,
            height=height,
            mode=image.mode,
            size_bytes=size_bytes,
        )
