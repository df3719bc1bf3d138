"""Темы персонажей, наборы глифов и описание размещённых украшений.

Принципы:
- SRP: только данные; выбор позиций и рисование живут в сервисе украшений.
- Глифы хранятся строками-графемами: "☁️" считается одним глифом, хотя это две кодовые точки.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

# UIKit system palette
PINK: RGB = (255, 45, 85)
PURPLE: RGB = (175, 82, 222)
BLUE: RGB = (0, 122, 255)
YELLOW: RGB = (255, 204, 0)
WHITE: RGB = (255, 255, 255)


class Theme(Enum):
    HELLO_KITTY = "Hello Kitty"
    MY_MELODY = "My Melody"
    CINNAMOROLL = "Cinnamoroll"
    KUROMI = "Kuromi"
    POMPOMPURIN = "Pompompurin"
    RANDOM = "Случайная"


@dataclass(frozen=True)
class ThemeStyle:
    """Оформление одного персонажа.

    Fields:
        theme: Персонаж.
        accents: Тройка глифов, подмешиваемая к общему пулу в обычном режиме.
        glyphs: Набор для тематического режима (перебирается по кругу).
        color: Цвет глифов тематического режима.
    """
    theme: Theme
    accents: Tuple[str, ...]
    glyphs: Tuple[str, ...]
    color: RGB


FALLBACK_GLYPHS: Tuple[str, ...] = ("✨", "💖", "🌟", "💕", "⭐", "💫", "🎀", "🌸", "💗", "🌺")

THEME_STYLES: Tuple[ThemeStyle, ...] = (
    ThemeStyle(Theme.HELLO_KITTY, ("🎀", "💖", "✨"), ("🎀", "💖", "✨", "🌸"), PINK),
    ThemeStyle(Theme.MY_MELODY, ("🐰", "💕", "🌸"), ("🐰", "💕", "🌸", "🎀"), PINK),
    ThemeStyle(Theme.CINNAMOROLL, ("☁️", "💙", "⭐"), ("☁️", "💙", "⭐", "✨"), BLUE),
    ThemeStyle(Theme.KUROMI, ("🖤", "💜", "🌙"), ("🖤", "💜", "🌙", "⭐"), PURPLE),
    ThemeStyle(Theme.POMPOMPURIN, ("🍮", "💛", "🌟"), ("🍮", "💛", "🌟", "☀️"), YELLOW),
)

STYLE_BY_THEME: Dict[Theme, ThemeStyle] = {style.theme: style for style in THEME_STYLES}


@dataclass(frozen=True)
class PlacedDecoration:
    """Один глиф, готовый к отрисовке.

    Fields:
        glyph: Строка глифа.
        x, y: Центр глифа в координатах изображения.
        angle: Поворот, радианы (положительный поворачивает по часовой стрелке).
        font_size: Кегль, pt.
        color: RGBA, альфа уже умножена на 255.
    """
    glyph: str
    x: float
    y: float
    angle: float
    font_size: float
    color: RGBA
