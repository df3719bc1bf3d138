"""Превращение снимка в «kawaii»-картинку.

Основной путь: пауза -> фильтры -> украшения -> рамка.
Если фильтры не могут прочитать снимок, собирается запасной холст 500×500.

Конвертер не хранит изменяемого состояния между вызовами, поэтому его можно
вызывать из рабочих потоков для независимых снимков. Отмены нет: вызов
выполняется целиком, включая паузу.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

from PIL import Image

from kawaii_cam.config import DEFAULT_PROCESSING_DELAY
from kawaii_cam.models.decoration_model import Theme
from kawaii_cam.services.decoration_service import DecorationService
from kawaii_cam.services.fallback_service import FallbackService
from kawaii_cam.services.filter_service import FilterService, ImageDecodeError

logger = logging.getLogger(__name__)


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Явный источник случайности; без зерна берётся зерно из текущего времени."""
    return random.Random(time.time_ns() if seed is None else seed)


class StyleConverter:
    def __init__(
        self,
        delay: float = DEFAULT_PROCESSING_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        filter_service: Optional[FilterService] = None,
        decoration_service: Optional[DecorationService] = None,
        fallback_service: Optional[FallbackService] = None,
    ) -> None:
        self.delay = delay
        self._sleep = sleep
        self._filters = filter_service or FilterService()
        self._decorations = decoration_service or DecorationService()
        self._fallback = fallback_service or FallbackService(self._decorations)

    def convert(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        """Полный конвейер для одного снимка.

        Всегда сначала ждёт `delay` секунд. Ошибки чтения снимка не
        пробрасываются: вместо них возвращается запасной холст.
        """
        if self.delay > 0:
            self._sleep(self.delay)
        rng = make_rng(seed)
        try:
            filtered = self._filters.apply_style_filters(image)
        except ImageDecodeError as exc:
            logger.info("Filters cannot read the photo (%s), composing fallback", exc)
            return self._fallback.compose_fallback(image, rng)
        decorated = self._decorations.add_decorations(filtered, rng)
        return self._decorations.add_frame(decorated)

    # ---- Тематические варианты (без фильтров и паузы) ----
    def create_character_style(self, image: Image.Image, theme: Theme, seed: Optional[int] = None) -> Image.Image:
        """Копия снимка с украшениями выбранного персонажа.

        `Theme.RANDOM` даёт обычный режим со случайной темой.
        """
        return self._decorations.add_character_theme(image, theme, make_rng(seed))

    def create_hello_kitty_style(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        return self.create_character_style(image, Theme.HELLO_KITTY, seed)

    def create_my_melody_style(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        return self.create_character_style(image, Theme.MY_MELODY, seed)

    def create_cinnamoroll_style(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        return self.create_character_style(image, Theme.CINNAMOROLL, seed)

    def create_kuromi_style(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        return self.create_character_style(image, Theme.KUROMI, seed)

    def create_pompompurin_style(self, image: Image.Image, seed: Optional[int] = None) -> Image.Image:
        return self.create_character_style(image, Theme.POMPOMPURIN, seed)
