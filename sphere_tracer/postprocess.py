"""
Вывод кадра: холст-приёмник пикселей, сохранение изображений.
"""

import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class ImageCanvas:
    """
    Приёмник пикселей в памяти.

    Координаты пикселей отсчитываются от центра изображения
    (+x вправо, +y вверх). Пиксели за пределами холста молча
    отбрасываются.

    present() фиксирует готовый кадр в self.frame и вызывает
    on_present(frame), если он задан.
    """

    def __init__(self, width, height, on_present=None):
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 3), dtype=np.uint8)
        self.frame = None
        self.frames_presented = 0
        self.on_present = on_present

    def _to_buffer(self, x, y):
        px = self.width // 2 + x
        py = (self.height - self.height // 2) - y - 1
        if px < 0 or px >= self.width or py < 0 or py >= self.height:
            return None
        return py, px

    def put_pixel(self, x, y, color):
        pos = self._to_buffer(x, y)
        if pos is None:
            return
        self.buffer[pos] = np.clip(np.round(color), 0, 255)

    def get_pixel(self, x, y):
        """Цвет пикселя в центрированных координатах (или None вне холста)."""
        pos = self._to_buffer(x, y)
        if pos is None:
            return None
        return self.buffer[pos].copy()

    def present(self):
        self.frame = self.buffer.copy()
        self.frames_presented += 1
        if self.on_present is not None:
            self.on_present(self.frame)


def save_ppm(filename, image):
    """
    Сохранение в формате PPM (P3 - текстовый).

    image: массив uint8 shape (height, width, 3)
    """
    height, width = image.shape[:2]
    image_8bit = np.asarray(image, dtype=np.uint8)

    with open(filename, 'w') as f:
        f.write(f"P3\n{width} {height}\n255\n")
        for y in range(height):
            row = []
            for x in range(width):
                r, g, b = image_8bit[y, x]
                row.append(f"{r} {g} {b}")
            f.write(" ".join(row) + "\n")

    logger.info("Сохранено: %s", filename)


def save_png(filename, image):
    """Сохранение в формате PNG через Pillow."""
    img = Image.fromarray(np.asarray(image, dtype=np.uint8), 'RGB')
    img.save(filename)
    logger.info("Сохранено: %s", filename)
