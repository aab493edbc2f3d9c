"""
Параметры рендеринга.

Конфигурация задаётся плоским словарём (как CONFIG в main.py) и
превращается в RenderConfig, недостающие ключи берутся из DEFAULT_CONFIG.
"""

import logging
from dataclasses import dataclass, field
from typing import Tuple

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    # --- Холст ---
    'width': 400,
    'height': 400,

    # --- Камера ---
    'camera_position': [0, 0, -50],
    'camera_rotation': [0, 0, 0],     # углы X, Y, Z в градусах
    'viewport_size': 1.0,
    'projection_z': 1.0,

    # --- Трассировка ---
    'recursion_depth': 4,             # глубина отражений/прозрачности
    'subsampling': 0,                 # шаг пропуска строк, 0 - без пропусков

    # --- Структура ускорения ---
    'max_bounding_diameter': 10.0,
    'outline_bounding_spheres': False,

    # --- Цвета ---
    'background_color': [8, 8, 16],
    'highlight_color': [255, 255, 255],
}


@dataclass
class RenderConfig:
    width: int = DEFAULT_CONFIG['width']
    height: int = DEFAULT_CONFIG['height']
    camera_position: Tuple[float, float, float] = (0.0, 0.0, -50.0)
    camera_rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    viewport_size: float = DEFAULT_CONFIG['viewport_size']
    projection_z: float = DEFAULT_CONFIG['projection_z']
    recursion_depth: int = DEFAULT_CONFIG['recursion_depth']
    subsampling: int = DEFAULT_CONFIG['subsampling']
    max_bounding_diameter: float = DEFAULT_CONFIG['max_bounding_diameter']
    outline_bounding_spheres: bool = False
    background_color: Tuple[float, float, float] = (8.0, 8.0, 16.0)
    highlight_color: Tuple[float, float, float] = (255.0, 255.0, 255.0)
    extra: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Размер холста должен быть положительным: "
                             f"{self.width}x{self.height}")
        if self.recursion_depth < 0:
            logger.warning("recursion_depth=%d < 0, используется 0",
                           self.recursion_depth)
            self.recursion_depth = 0
        if self.subsampling < 0:
            logger.warning("subsampling=%d < 0, используется 0", self.subsampling)
            self.subsampling = 0

    @classmethod
    def from_dict(cls, config: dict) -> "RenderConfig":
        """
        Собирает RenderConfig из словаря.

        Ключи, которых нет в DEFAULT_CONFIG, сохраняются в extra
        (например, параметры демо-сцены).
        """
        known = {key: config.get(key, default) for key, default in DEFAULT_CONFIG.items()}
        extra = {key: value for key, value in config.items() if key not in DEFAULT_CONFIG}
        return cls(
            width=int(known['width']),
            height=int(known['height']),
            camera_position=_vec3(known['camera_position']),
            camera_rotation=_vec3(known['camera_rotation']),
            viewport_size=float(known['viewport_size']),
            projection_z=float(known['projection_z']),
            recursion_depth=int(known['recursion_depth']),
            subsampling=int(known['subsampling']),
            max_bounding_diameter=float(known['max_bounding_diameter']),
            outline_bounding_spheres=bool(known['outline_bounding_spheres']),
            background_color=_vec3(known['background_color']),
            highlight_color=_vec3(known['highlight_color']),
            extra=extra,
        )


def _vec3(value):
    values = tuple(float(v) for v in value)
    if len(values) != 3:
        raise ValueError(f"Ожидался вектор из 3 компонент: {value}")
    return values
