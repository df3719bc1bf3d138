"""Неизменяемые параметры цепочки фильтров."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Matrix3 = Tuple[Tuple[float, float, float], Tuple[float, float, float], Tuple[float, float, float]]


@dataclass(frozen=True)
class FilterChainParameters:
    """Константы фильтров «kawaii».

    Fields:
        brightness: Сдвиг яркости, добавляется к каждому каналу (0..1).
        saturation: Множитель насыщенности.
        contrast: Множитель контраста вокруг среднего серого (0.5).
        blur_radius: Сигма гауссова размытия для мягкого смешивания, px.
        tint_matrix: Строки R', G', B' как линейные комбинации (R, G, B).
        vignette_intensity: Сила затемнения краёв.
        vignette_radius: Радиус спада в долях полудиагонали.
    """
    brightness: float = 0.3
    saturation: float = 1.4
    contrast: float = 1.2
    blur_radius: float = 0.8
    tint_matrix: Matrix3 = (
        (1.15, 0.05, 0.10),
        (0.05, 1.10, 0.05),
        (0.15, 0.05, 1.05),
    )
    vignette_intensity: float = 0.2
    vignette_radius: float = 1.8


DEFAULT_FILTER_PARAMETERS = FilterChainParameters()
