"""Получение снимков и сохранение результатов в фотобиблиотеку.

Принципы:
- SRP: класс отвечает только за ввод/вывод изображений.
- OCP: новые источники (камера, буфер обмена) можно добавить отдельными методами.
- Сохранение в стиле «fire-and-forget»: результат сообщается только через колбэк.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageDraw, UnidentifiedImageError

from kawaii_cam.models.decoration_model import PINK, WHITE
from kawaii_cam.models.image_model import ImageData
from kawaii_cam.services.drawing import load_font

logger = logging.getLogger(__name__)

SaveCompletion = Callable[[bool, Optional[Exception]], None]

TEST_IMAGE_SIZE = (300, 300)
TEST_IMAGE_TEXT = "Test Photo 📸"


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает снимок с диска (замена камеры) и возвращает его с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` в режиме RGBA; поле `mode` хранит
            исходный режим файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as opened:
                source_mode = opened.mode
                pil_image = opened.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        width, height = pil_image.size
        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=source_mode,
            size_bytes=size_bytes,
        )

    def make_test_image(self) -> ImageData:
        """Отладочный снимок: розовый квадрат 300×300 с белой подписью."""
        image = Image.new("RGBA", TEST_IMAGE_SIZE, (*PINK, 255))
        draw = ImageDraw.Draw(image)
        draw.text((80, 140), TEST_IMAGE_TEXT, font=load_font(24, bold=True), fill=(*WHITE, 255))
        return ImageData.from_image(image)

    def save_to_library(
        self,
        image: Image.Image,
        directory: str | Path,
        completion: Optional[SaveCompletion] = None,
    ) -> Optional[Path]:
        """Сохраняет PNG с меткой времени в папку фотобиблиотеки.

        Ошибки не пробрасываются: вызывающий узнаёт о них из
        `completion(ok, error)`.

        Returns:
            Путь к сохранённому файлу или None при ошибке.
        """
        folder = Path(directory)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        target = folder / f"kawaii-{stamp}.png"
        try:
            folder.mkdir(parents=True, exist_ok=True)
            image.save(target, format="PNG")
        except (OSError, ValueError) as exc:
            logger.warning("Could not save %s: %s", target, exc)
            if completion:
                completion(False, exc)
            return None

        logger.info("Saved %s", target)
        if completion:
            completion(True, None)
        return target
