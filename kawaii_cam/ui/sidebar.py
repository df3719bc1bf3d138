"""Боковая панель: получение снимка, выбор персонажа, состояние обработки.

Принципы:
- SRP: управляет только элементами управления, не содержит обработки изображений.
- ISP: события наружу через `on_*`, состояние внутрь через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from kawaii_cam.models.decoration_model import Theme
from kawaii_cam.models.image_model import ImageData


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: снимок, персонаж, обработка, информация."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_take_photo: Optional[Callable[[], None]] = None
        self.on_test_photo: Optional[Callable[[], None]] = None
        self.on_theme_change: Optional[Callable[[Theme], None]] = None

        self._title = ctk.CTkLabel(
            self, text="📸✨ Sanrio Me! ✨📸", text_color="#ff2d55", font=ctk.CTkFont(size=20, weight="bold")
        )
        self._title.grid(row=0, column=0, padx=8, pady=(8, 2), sticky="w")
        self._subtitle = ctk.CTkLabel(
            self, text="Превратите фото в милого персонажа!", wraplength=250, anchor="w", justify="left"
        )
        self._subtitle.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        self._take_btn = ctk.CTkButton(
            self, text="Сделать фото…", fg_color="#ff2d55", hover_color="#af52de", command=self._emit_take_photo
        )
        self._take_btn.grid(row=2, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._test_btn = ctk.CTkButton(self, text="Тестовое фото", fg_color="gray40", command=self._emit_test_photo)
        self._test_btn.grid(row=3, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Character section
        self._theme_title = ctk.CTkLabel(self, text="Персонаж", font=ctk.CTkFont(size=16, weight="bold"))
        self._theme_title.grid(row=4, column=0, padx=8, pady=(8, 4), sticky="w")
        self._theme_menu = ctk.CTkOptionMenu(self, values=[t.value for t in Theme], command=self._on_theme_select)
        self._theme_menu.set(Theme.RANDOM.value)
        self._theme_menu.grid(row=5, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Processing section (hidden until a photo is being converted)
        self._progress = ctk.CTkProgressBar(self, mode="indeterminate", progress_color="#ff2d55")
        self._status = ctk.CTkLabel(self, text="Создаём вашего персонажа…", text_color="#ff2d55")
        self._status_hint = ctk.CTkLabel(self, text="✨ Добавляем kawaii-магию ✨")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Снимок", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._mode_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_mode = ctk.CTkLabel(self, textvariable=self._mode_val, anchor="w", justify="left")

        self._info_path.grid(row=10, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_mode.grid(row=12, column=0, padx=8, pady=(0, 10), sticky="ew")

    # public API (sync from controller)
    def set_image_info(self, data: Optional[ImageData]) -> None:
        if data is None:
            self._path_val.set("—")
            self._dims_val.set("—")
            self._mode_val.set("—")
            return
        self._path_val.set(f"Файл: {data.path}" if data.path else "Файл: тестовый снимок")
        self._dims_val.set(f"Размер: {data.width}×{data.height} px")
        self._mode_val.set(f"Режим: {data.mode}")

    def set_processing(self, active: bool) -> None:
        """Показывает индикатор обработки и блокирует получение нового снимка."""
        state = "disabled" if active else "normal"
        self._take_btn.configure(state=state)
        self._test_btn.configure(state=state)
        self._theme_menu.configure(state=state)
        if active:
            self._progress.grid(row=6, column=0, padx=8, pady=(8, 4), sticky="ew")
            self._status.grid(row=7, column=0, padx=8, pady=(0, 2), sticky="w")
            self._status_hint.grid(row=8, column=0, padx=8, pady=(0, 8), sticky="w")
            self._progress.start()
        else:
            self._progress.stop()
            self._progress.grid_remove()
            self._status.grid_remove()
            self._status_hint.grid_remove()

    def set_has_photo(self, has_photo: bool) -> None:
        self._take_btn.configure(text="Сделать новое фото…" if has_photo else "Сделать фото…")

    # events
    def _emit_take_photo(self) -> None:
        if self.on_take_photo:
            self.on_take_photo()

    def _emit_test_photo(self) -> None:
        if self.on_test_photo:
            self.on_test_photo()

    def _on_theme_select(self, value: str) -> None:
        if self.on_theme_change:
            self.on_theme_change(Theme(value))
