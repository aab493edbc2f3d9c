"""
Создание демонстрационной сцены из сфер.
"""

from .scene import Light, LightType, Scene, Sphere


def add_sphere_row(scene: Scene, start, count: int, spacing: float, radius: float,
                   colors, specular=-1, reflective=0.0):
    """Добавляет ряд сфер вдоль оси X, цвета берутся по кругу."""
    x0, y0, z0 = start
    for i in range(count):
        scene.add_sphere(Sphere(
            [x0 + i * spacing, y0, z0], radius, colors[i % len(colors)],
            specular=specular, reflective=reflective,
        ))


def create_demo_scene(config: dict, max_bounding_diameter=None) -> Scene:
    """
    Создаёт демонстрационную сцену: пол, ряд близких сфер (они
    объединяются в кластер), блестящую, зеркальную и стеклянную сферы.
    Параметры настраиваются через словарь config.

    Обычно сюда передаётся RenderConfig.extra - ключи, неизвестные
    рендереру. Структура ускорения строится сразу с max_bounding_diameter,
    а если он не задан - с config['max_bounding_diameter'].
    """
    scene = Scene()

    floor_color = config.get('floor_color', [164, 164, 0])
    row_colors = config.get('row_colors', [[255, 0, 0], [0, 0, 255], [0, 255, 0]])

    # Пол - очень большая сфера
    scene.add_sphere(Sphere([0, -5002, 0], 5001, floor_color, specular=1000,
                            reflective=0.1))

    # Ряд близких сфер
    add_sphere_row(scene, config.get('row_start', [-2, 0, 5]),
                   config.get('row_count', 3), 2.0, 1.0, row_colors,
                   specular=500, reflective=config.get('row_reflective', 0.3))

    # Одиночная сфера в стороне
    scene.add_sphere(Sphere([0, 6, 10], 1, [255, 255, 0], specular=10,
                            reflective=0.2))

    # Зеркальная сфера
    scene.add_sphere(Sphere([6, 1, 14], 2, [248, 248, 248], specular=10000,
                            reflective=config.get('mirror_reflective', 0.8)))

    # Стеклянная сфера
    scene.add_sphere(Sphere([-5, 1, 8], 1.5, [200, 230, 255], specular=300,
                            reflective=0.1,
                            opacity=config.get('glass_opacity', 0.4)))

    scene.add_light(Light(LightType.AMBIENT, config.get('ambient_intensity', 0.2)))
    scene.add_light(Light(LightType.DIRECTIONAL, 0.3, [0, 1, -1]))
    scene.add_light(Light(LightType.POINT, 0.5, [-500, 70, -100]))
    scene.add_light(Light(LightType.POINT, 0.4, [2, 10, -5]))

    if max_bounding_diameter is None:
        max_bounding_diameter = config.get('max_bounding_diameter', 10.0)
    scene.rebuild_bounding_volumes(max_bounding_diameter)
    return scene
