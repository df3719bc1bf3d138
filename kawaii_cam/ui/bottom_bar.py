from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_save: Optional[Callable[[], None]] = None
        self.on_reset: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)  # caption stretches

        self._caption = ctk.StringVar(value="")
        self._caption_label = ctk.CTkLabel(
            self, textvariable=self._caption, text_color="#ff2d55", font=ctk.CTkFont(size=16, weight="bold"), anchor="w"
        )
        self._caption_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="ew")

        self._save_btn = ctk.CTkButton(
            self, text="Сохранить фото 💾", fg_color="#007aff", corner_radius=18, command=self._on_save_click
        )
        self._save_btn.grid(row=0, column=1, padx=6, pady=8, sticky="e")
        self._reset_btn = ctk.CTkButton(
            self, text="Создать ещё! 🌟", fg_color="#ff2d55", corner_radius=18, command=self._on_reset_click
        )
        self._reset_btn.grid(row=0, column=2, padx=(6, 10), pady=8, sticky="e")
        self.set_result_ready(False)

    # public API (sync from controller)
    def set_result_ready(self, ready: bool) -> None:
        """Кнопки активны только когда есть готовый персонаж."""
        state = "normal" if ready else "disabled"
        self._save_btn.configure(state=state)
        self._reset_btn.configure(state=state)
        self._caption.set("Ваш персонаж! 🎀" if ready else "")

    # events
    def _on_save_click(self) -> None:
        if self.on_save:
            self.on_save()

    def _on_reset_click(self) -> None:
        if self.on_reset:
            self.on_reset()
