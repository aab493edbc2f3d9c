"""
Камера: отображение пикселя холста в луч в мировых координатах.
"""

import numpy as np

from .math_utils import rotate_vector, rotation_matrix


class Camera:
    """
    Камера с ориентацией по углам Эйлера.

    Параметры:
        position: позиция камеры в пространстве
        rotation: углы поворота (x, y, z) в градусах, применяются X, затем Y, затем Z
        viewport_size: размер видового окна на плоскости проекции
        projection_z: расстояние до плоскости проекции
        width, height: размер холста в пикселях
    """

    def __init__(self, position, rotation, viewport_size, projection_z,
                 width: int, height: int):
        self.position = np.array(position, dtype=np.float64)
        self.angles = tuple(float(a) for a in rotation)
        self.rotation = rotation_matrix(*self.angles)
        self.viewport_size = float(viewport_size)
        self.projection_z = float(projection_z)
        self.width = width
        self.height = height

    @classmethod
    def from_config(cls, config):
        return cls(config.camera_position, config.camera_rotation,
                   config.viewport_size, config.projection_z,
                   config.width, config.height)

    def canvas_to_viewport(self, x, y):
        """Координаты холста (от центра, +y вверх) -> точка на плоскости проекции."""
        return np.array([
            x * self.viewport_size / self.width,
            y * self.viewport_size / self.height,
            self.projection_z,
        ])

    def get_ray(self, x, y):
        """
        Генерирует луч из камеры через пиксель (x, y).

        Возвращает (origin, direction); direction не нормализуется.
        """
        direction = rotate_vector(self.rotation, self.canvas_to_viewport(x, y))
        return self.position, direction
