from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from kawaii_cam.config import AppConfig
from kawaii_cam.controllers.app_controller import AppController
from kawaii_cam.ui.image_viewer import ImageViewer
from kawaii_cam.ui.sidebar import Sidebar
from kawaii_cam.ui.bottom_bar import BottomBar


class KawaiiCamApp(ctk.CTk):
    def __init__(self, config: Optional[AppConfig] = None) -> None:
        super().__init__()
        config = config or AppConfig()
        ctk.set_appearance_mode(config.appearance_mode)
        ctk.set_default_color_theme("blue")

        self.title("Sanrio Me!")
        self.minsize(820, 600)

        # root layout: left preview, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self, config=config
        )
        self._controller.bind_events()
