"""
Sphere Tracer - рекурсивная трассировка лучей для сцен из сфер.

Тени, блики по Фонгу, отражения и прозрачность; ускорение за счёт
кластеризации сфер в ограничивающие сферы и пропуска строк.

Запуск: python main.py
"""

import logging

from sphere_tracer.config import RenderConfig
from sphere_tracer.demo_scene import create_demo_scene
from sphere_tracer.postprocess import ImageCanvas, save_png, save_ppm
from sphere_tracer.renderer import RenderContext, gradient_background, render_frame


# ==================== КОНФИГУРАЦИЯ ====================
# Параметры можно изменить для получения разных результатов

CONFIG = {
    # --- Параметры рендеринга ---
    'width': 600,                   # ширина изображения
    'height': 600,                  # высота изображения
    'recursion_depth': 3,           # глубина отражений и прозрачности
    'subsampling': 2,               # пропуск строк (0 = трассировать все)

    # --- Камера ---
    'camera_position': [0, 2, -12],   # позиция камеры
    'camera_rotation': [-5, 0, 0],    # углы X, Y, Z (градусы)
    'viewport_size': 1.0,
    'projection_z': 1.0,

    # --- Структура ускорения ---
    'max_bounding_diameter': 10.0,    # максимальный диаметр кластера
    'outline_bounding_spheres': False,  # подсветка силуэтов кластеров

    # --- Сцена ---
    'floor_color': [164, 164, 0],
    'glass_opacity': 0.4,
    'mirror_reflective': 0.8,
    'ambient_intensity': 0.2,

    # --- Фон ---
    'gradient_background': False,
    'background_color': [8, 8, 16],
}


def main():
    """Основная функция рендеринга."""
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    print("=" * 60)
    print("Sphere Tracer - Трассировка лучей")
    print("=" * 60)

    # 1. Параметры
    print("\n[1/4] Чтение параметров...")
    config = RenderConfig.from_dict(CONFIG)

    # 2. Сцена
    print("[2/4] Создание сцены...")
    scene = create_demo_scene(config.extra, config.max_bounding_diameter)
    print(f"      {scene.describe()}")

    # 3. Рендеринг
    print(f"[3/4] Рендеринг {config.width}x{config.height}, "
          f"глубина {config.recursion_depth}, пропуск строк {config.subsampling}...")
    canvas = ImageCanvas(config.width, config.height)
    background = None
    if config.extra.get('gradient_background', False):
        background = gradient_background
    ctx = RenderContext(scene, config, canvas, background=background)
    stats = render_frame(ctx)
    print(f"      Завершено за {stats.elapsed:.1f} секунд")

    # 4. Сохранение
    print("[4/4] Сохранение...")
    save_ppm("result.ppm", canvas.frame)
    save_png("result.png", canvas.frame)

    print("\n" + "=" * 60)
    print("Готово!")
    print("=" * 60)


if __name__ == "__main__":
    main()
