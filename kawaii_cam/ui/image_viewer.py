"""Виджет предпросмотра: снимок или готовая картинка, вписанные в окно.

Принципы:
- SRP: отвечает только за показ изображения, без обработки.
- Удержание пробела показывает исходный снимок вместо результата.
"""
from __future__ import annotations

from typing import Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

PLACEHOLDER_TEXT = "Сделайте фото, чтобы создать своего персонажа!"


class ImageViewer(ctk.CTkFrame):
    """Канва с исходным снимком и результатом «kawaii»-обработки."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._hold_before_active: bool = False

        self._canvas.bind("<Configure>", lambda _e: self._render_image())
        self._canvas.bind("<ButtonPress-1>", lambda _e: self._canvas.focus_set())
        self._canvas.bind("<KeyPress-space>", self._on_space_down)
        self._canvas.bind("<KeyRelease-space>", self._on_space_up)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает исходный снимок и сбрасывает результат."""
        self._original_image = image
        self._processed_image = None
        self._render_image()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает готовую картинку (может быть None) и перерисовывает виджет."""
        self._processed_image = image
        self._render_image()

    def clear(self) -> None:
        self._original_image = None
        self._processed_image = None
        self._render_image()

    # ---- Internals ----
    def _render_image(self) -> None:
        self._canvas.delete("all")
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))

        show_after = self._processed_image is not None and not self._hold_before_active
        image = self._processed_image if show_after else self._original_image
        if image is None:
            self._canvas.create_text(
                canvas_w // 2, canvas_h // 2, text=PLACEHOLDER_TEXT, fill="#ff2d55", width=max(1, canvas_w - 40)
            )
            return

        img_w, img_h = image.size
        if img_w == 0 or img_h == 0:
            return
        # fit, never upscale beyond 2x
        scale = max(0.05, min(2.0, canvas_w / img_w, canvas_h / img_h))
        scaled = image.resize((max(1, int(img_w * scale)), max(1, int(img_h * scale))), Image.Resampling.LANCZOS)
        self._tk_image = ImageTk.PhotoImage(scaled)
        self._canvas.create_image(canvas_w // 2, canvas_h // 2, image=self._tk_image, anchor="center")

    def _get_canvas_bg(self) -> str:
        # Soft pink tint; CTk does not expose canvas theme
        return "#2a1f24" if ctk.get_appearance_mode().lower() == "dark" else "#fff2f5"

    def _on_space_down(self, _event: tk.Event) -> None:
        if not self._hold_before_active and self._processed_image is not None:
            self._hold_before_active = True
            self._render_image()

    def _on_space_up(self, _event: tk.Event) -> None:
        if self._hold_before_active:
            self._hold_before_active = False
            self._render_image()
