"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая работа вынесена в рабочий поток,
  результат возвращается в главный цикл Tk через очередь.
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from tkinter import filedialog, TclError
from typing import Optional

import customtkinter as ctk
from PIL import Image

from kawaii_cam.config import AppConfig
from kawaii_cam.models.decoration_model import Theme
from kawaii_cam.models.image_model import ImageData
from kawaii_cam.services.image_service import ImageService
from kawaii_cam.services.style_converter import StyleConverter
from kawaii_cam.ui.image_viewer import ImageViewer
from kawaii_cam.ui.sidebar import Sidebar
from kawaii_cam.ui.bottom_bar import BottomBar

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 80


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Получение снимка через `ImageService`.
    - Запуск `StyleConverter` в рабочем потоке и показ результата.
    - Сохранение результата в фотобиблиотеку (ошибки только в журнал).
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    config: AppConfig = field(default_factory=AppConfig)

    _image_service: ImageService = field(default_factory=ImageService)
    _converter: StyleConverter = field(init=False)
    _results: "queue.Queue[Optional[Image.Image]]" = field(default_factory=queue.Queue)
    _captured: Optional[ImageData] = None
    _character: Optional[Image.Image] = None
    _theme: Theme = Theme.RANDOM
    _is_processing: bool = False

    def __post_init__(self) -> None:
        self._converter = StyleConverter(delay=self.config.processing_delay)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_take_photo = self._handle_take_photo
        self.sidebar.on_test_photo = self._handle_test_photo
        self.sidebar.on_theme_change = self._handle_theme_change

        self.bottom.on_save = self._handle_save
        self.bottom.on_reset = self._handle_reset

    # ---- Handlers ----
    def _handle_take_photo(self) -> None:
        if self._is_processing:
            return
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите снимок",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp *.heic"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("Could not load photo: %s", exc)
            return
        self._start_processing(image_data)

    def _handle_test_photo(self) -> None:
        if self._is_processing:
            return
        self._start_processing(self._image_service.make_test_image())

    def _handle_theme_change(self, theme: Theme) -> None:
        self._theme = theme

    def _handle_save(self) -> None:
        if self._character is None:
            return
        self._image_service.save_to_library(self._character, self.config.library_dir, self._on_saved)

    def _handle_reset(self) -> None:
        self._captured = None
        self._character = None
        self.viewer.clear()
        self.sidebar.set_image_info(None)
        self.sidebar.set_has_photo(False)
        self.bottom.set_result_ready(False)

    # ---- Helpers ----
    def _start_processing(self, image_data: ImageData) -> None:
        self._captured = image_data
        self._character = None
        self._is_processing = True

        self.viewer.set_image(image_data.pil_image)
        self.sidebar.set_image_info(image_data)
        self.sidebar.set_has_photo(True)
        self.sidebar.set_processing(True)
        self.bottom.set_result_ready(False)

        worker = threading.Thread(
            target=self._process_in_background, args=(image_data.pil_image, self._theme), daemon=True
        )
        worker.start()
        self.window.after(POLL_INTERVAL_MS, self._poll_result)

    def _process_in_background(self, image: Image.Image, theme: Theme) -> None:
        """Выполняется в рабочем потоке; с виджетами не работает.

        При ошибке в очередь кладётся None, чтобы главный цикл снял ожидание.
        """
        try:
            result = self._converter.convert(image)
            if theme is not Theme.RANDOM:
                # character stickers on top of the regular kawaii look
                result = self._converter.create_character_style(result, theme)
        except Exception:
            logger.exception("Kawaii conversion failed")
            self._results.put(None)
            return
        self._results.put(result)

    def _poll_result(self) -> None:
        try:
            result = self._results.get_nowait()
        except queue.Empty:
            # still running; schedule another poll
            self.window.after(POLL_INTERVAL_MS, self._poll_result)
            return
        self._is_processing = False
        self.sidebar.set_processing(False)
        if result is None:
            # conversion failed, keep showing the captured photo
            self._character = None
            if self._captured is not None:
                self.viewer.set_image(self._captured.pil_image)
            self.bottom.set_result_ready(False)
            return
        self._character = result
        self.viewer.set_processed_image(result)
        self.bottom.set_result_ready(True)

    @staticmethod
    def _on_saved(ok: bool, error: Optional[Exception]) -> None:
        # Save failures are not shown to the user
        if not ok:
            logger.warning("Photo library save failed: %s", error)
