"""
Сцена: хранение сфер, источников света и структуры ускорения.
"""

import logging
from enum import Enum

import numpy as np

from .bounding import BoundingTree, build_bounding_tree

logger = logging.getLogger(__name__)


class Sphere:
    """
    Сфера - единственный геометрический примитив.

    Параметры:
        center: центр сферы
        radius: радиус (> 0)
        color: базовый цвет, RGB в диапазоне [0, 255]
        specular: показатель блеска по Фонгу, -1 отключает блик
        reflective: коэффициент отражения в [0, 1]
        opacity: непрозрачность в [0, 1] (1 - полностью непрозрачная)

    Некорректные параметры отклоняются при создании (ValueError),
    поэтому такая сфера никогда не попадает в сцену.
    """

    def __init__(self, center, radius, color, specular=-1, reflective=0.0,
                 opacity=1.0):
        center = np.array(center, dtype=np.float64)
        if center.shape != (3,) or not np.all(np.isfinite(center)):
            raise ValueError(f"Некорректный центр сферы: {center}")
        if not radius > 0:
            raise ValueError(f"Радиус сферы должен быть > 0, получено {radius}")
        if not 0.0 <= reflective <= 1.0:
            raise ValueError(f"reflective вне [0, 1]: {reflective}")
        if not 0.0 <= opacity <= 1.0:
            raise ValueError(f"opacity вне [0, 1]: {opacity}")

        color = np.array(color, dtype=np.float64)
        if color.shape != (3,):
            raise ValueError(f"Цвет должен иметь 3 компоненты: {color}")

        self.center = center
        self.radius = float(radius)
        self.color = np.clip(color, 0.0, 255.0)
        self.specular = float(specular)
        self.reflective = float(reflective)
        self.opacity = float(opacity)

        # Стабильный идентификатор, назначается сценой при добавлении
        self.id = -1

    def __repr__(self):
        return (f"Sphere(id={self.id}, center={self.center.tolist()}, "
                f"radius={self.radius}, color={self.color.tolist()}, "
                f"specular={self.specular}, reflective={self.reflective}, "
                f"opacity={self.opacity})")


class LightType(Enum):
    AMBIENT = "ambient"
    POINT = "point"
    DIRECTIONAL = "directional"


class Light:
    """
    Источник света.

    Для POINT position - положение в мире, для DIRECTIONAL - вектор
    направления на источник (не нормализуется), для AMBIENT не используется.
    """

    def __init__(self, light_type, intensity, position=None):
        light_type = LightType(light_type)
        if not intensity >= 0:
            raise ValueError(f"Интенсивность должна быть >= 0, получено {intensity}")
        if light_type is not LightType.AMBIENT:
            if position is None:
                raise ValueError(f"Для источника {light_type.value} нужна позиция")
            position = np.array(position, dtype=np.float64)
            if position.shape != (3,):
                raise ValueError(f"Позиция должна иметь 3 компоненты: {position}")
        else:
            position = None

        self.type = light_type
        self.intensity = float(intensity)
        self.position = position

    def __repr__(self):
        pos = None if self.position is None else self.position.tolist()
        return f"Light({self.type.value}, intensity={self.intensity}, position={pos})"


class Scene:
    """
    Контейнер для 3D сцены.

    Хранит:
        - Сферы (плоский список, порядок добавления = идентификатор)
        - Источники света
        - Структуру ускорения (дерево ограничивающих сфер), которая
          перестраивается только явным вызовом rebuild_bounding_volumes()
    """

    def __init__(self):
        self.spheres = []
        self.lights = []

        # Плоские массивы для быстрого перебора теней (обновляются при добавлении)
        self.centers = np.zeros((0, 3), dtype=np.float64)
        self.radii = np.zeros(0, dtype=np.float64)

        self.tree = BoundingTree.empty()
        self.max_bounding_diameter = None

    @property
    def check_list(self):
        """Индексы корневых узлов дерева (узлы-кластеры и одиночные сферы)."""
        return self.tree.roots

    def add_sphere(self, sphere):
        """
        Добавляет сферу и назначает ей идентификатор.

        Структура ускорения не обновляется: новая сфера станет видимой
        после rebuild_bounding_volumes().
        """
        sphere.id = len(self.spheres)
        self.spheres.append(sphere)
        self.centers = np.vstack([self.centers, sphere.center[None, :]])
        self.radii = np.append(self.radii, sphere.radius)
        return sphere.id

    def add_light(self, light):
        """Добавляет источник света, возвращает его индекс."""
        self.lights.append(light)
        return len(self.lights) - 1

    def rebuild_bounding_volumes(self, max_diameter):
        """
        Перестраивает дерево ограничивающих сфер с нуля.

        Параметры:
            max_diameter: максимальный "цепной" диаметр кластера
        """
        self.max_bounding_diameter = max_diameter
        self.tree = build_bounding_tree(self.spheres, max_diameter)
        logger.info("Ограничивающие сферы: %d кластеров, %d корневых записей "
                    "на %d сфер (max diameter %s)",
                    self.tree.composite_count, len(self.tree.roots),
                    len(self.spheres), max_diameter)
        return self.tree

    def describe(self):
        """Краткая сводка по сцене."""
        return (f"Сцена: {len(self.spheres)} сфер, {len(self.lights)} источников "
                f"света, {len(self.tree.roots)} записей в check-list")
