"""Точка входа в приложение."""
import logging

from kawaii_cam.app import KawaiiCamApp
from kawaii_cam.config import AppConfig


def main() -> None:
    """Читает настройки, настраивает журнал, создаёт и запускает главное окно."""
    config = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = KawaiiCamApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
