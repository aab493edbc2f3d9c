"""
Ядро рендеринга методом рекурсивной трассировки лучей.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from .bounding import closest_intersection
from .camera import Camera
from .geometry import sphere_normal
from .lighting import EPSILON, ShadowCache, compute_lighting
from .math_utils import add, brighten_color, reflect_ray, scale

logger = logging.getLogger(__name__)

# Идентификатор попадания "в фон"
NO_OBJECT = -1

# Минимальный t первичного луча: всё, что ближе плоскости проекции, не видно
PRIMARY_MIN_T = 1.0


def constant_background(color):
    """Фон одного цвета."""
    color = np.array(color, dtype=np.float64)

    def background(origin, direction):
        return color

    return background


def gradient_background(origin, direction):
    """Фон-градиент, зависящий от направления луча."""
    return np.array([
        (np.cos(direction[1]) + 0.5) * 125,
        (np.sin(direction[0]) + 0.5) * 125,
        (np.cos(direction[1]) + 0.33) * 125,
    ])


@dataclass
class RenderStats:
    """Счётчики одного кадра."""
    rays_traced: int = 0
    pixels_traced: int = 0
    pixels_replicated: int = 0
    coherence_breaks: int = 0
    shadow_cache_hits: int = 0
    shadow_cache_misses: int = 0
    elapsed: float = 0.0


class RenderContext:
    """
    Всё, что нужно для рендеринга кадра: сцена, камера, параметры,
    функция фона, приёмник пикселей и служебный кэш теней.

    Параметры:
        scene: Scene
        config: RenderConfig
        sink: объект с методами put_pixel(x, y, color) и present()
        background: функция (origin, direction) -> цвет;
            по умолчанию - сплошной config.background_color
    """

    def __init__(self, scene, config, sink, background=None):
        self.scene = scene
        self.config = config
        self.sink = sink
        if background is None:
            background = constant_background(config.background_color)
        self.background = background
        self.highlight_color = np.array(config.highlight_color, dtype=np.float64)
        self.camera = Camera.from_config(config)
        self.shadow_cache = ShadowCache(len(scene.lights))
        self.stats = RenderStats()

    @property
    def outline(self):
        return self.config.outline_bounding_spheres


def trace_ray_hit(ctx, origin, direction, min_t, max_t, depth):
    """
    Трассировка одного луча.

    Алгоритм:
    1. Находим ближайшее пересечение с деревом ограничивающих сфер
    2. Нет пересечения - цвет фона
    3. Попали в кластер (только в режиме outline) - цвет подсветки
    4. Иначе локальный цвет = базовый цвет * освещённость
    5. Полупрозрачная сфера: смешиваем с лучом, прошедшим насквозь
    6. Отражающая сфера: смешиваем с отражённым лучом

    Каждая рекурсивная ветка уменьшает depth на 1, при depth == 0
    рекурсии нет.

    Возвращает: (color, hit_id)
        hit_id: идентификатор сферы, индекс кластера (outline) или NO_OBJECT
    """
    ctx.stats.rays_traced += 1
    scene = ctx.scene
    tree = scene.tree

    t, index = closest_intersection(tree, origin, direction, min_t, max_t,
                                    outline=ctx.outline)
    if index < 0:
        return np.asarray(ctx.background(origin, direction), dtype=np.float64), NO_OBJECT

    node = tree.nodes[index]
    if not node.is_leaf:
        return ctx.highlight_color, index

    sphere = scene.spheres[node.primitive]
    point = add(origin, scale(direction, t))
    normal = sphere_normal(point, sphere.center)
    view = scale(direction, -1.0)

    lighting = compute_lighting(scene, point, normal, view, sphere.specular,
                                ctx.shadow_cache)
    color = brighten_color(sphere.color, lighting)

    if sphere.opacity < 1 and depth > 0:
        transmitted, _ = trace_ray_hit(ctx, point, direction, EPSILON, np.inf,
                                       depth - 1)
        color = (brighten_color(color, sphere.opacity)
                 + brighten_color(transmitted, 1 - sphere.opacity))

    if sphere.reflective > 0 and depth > 0:
        reflection = reflect_ray(view, normal)
        reflected, _ = trace_ray_hit(ctx, point, reflection, EPSILON, np.inf,
                                     depth - 1)
        color = (brighten_color(color, 1 - sphere.reflective)
                 + brighten_color(reflected, sphere.reflective))

    return color, sphere.id


def trace_ray(ctx, origin, direction, min_t, max_t, depth):
    """Цвет луча (см. trace_ray_hit)."""
    color, _ = trace_ray_hit(ctx, origin, direction, min_t, max_t, depth)
    return color


def render_pixel(ctx, x, y, depth=None):
    """Трассирует первичный луч через пиксель (x, y)."""
    if depth is None:
        depth = max(0, ctx.config.recursion_depth)
    origin, direction = ctx.camera.get_ray(x, y)
    return trace_ray_hit(ctx, origin, direction, PRIMARY_MIN_T, np.inf, depth)


def canvas_range(size):
    """Координаты пикселей вдоль оси холста, от центра."""
    return range(-(size // 2), size - size // 2)


def render_scene(ctx):
    """Полный рендеринг: каждый пиксель трассируется."""
    depth = max(0, ctx.config.recursion_depth)
    rows = canvas_range(ctx.config.height)

    for x in canvas_range(ctx.config.width):
        ctx.shadow_cache.reset()
        for y in rows:
            color, _ = render_pixel(ctx, x, y, depth)
            ctx.sink.put_pixel(x, y, color)
            ctx.stats.pixels_traced += 1


def subsample_render_scene(ctx, stride):
    """
    Рендеринг с пропуском строк.

    В каждом столбце трассируются строки с шагом 1 + stride. Если в двух
    соседних трассированных строках первичный луч попал в разные объекты,
    все строки между ними трассируются честно; иначе они заполняются
    цветом нижней трассированной строки. Последняя строка столбца
    трассируется всегда.
    """
    depth = max(0, ctx.config.recursion_depth)
    rows = list(canvas_range(ctx.config.height))
    sampled = rows[::max(0, stride) + 1]
    if sampled and sampled[-1] != rows[-1]:
        sampled.append(rows[-1])

    for x in canvas_range(ctx.config.width):
        ctx.shadow_cache.reset()
        prev_y = None
        prev_color = None
        prev_hit = NO_OBJECT

        for y in sampled:
            color, hit = render_pixel(ctx, x, y, depth)
            ctx.sink.put_pixel(x, y, color)
            ctx.stats.pixels_traced += 1

            if prev_y is not None and y - prev_y > 1:
                if hit != prev_hit:
                    ctx.stats.coherence_breaks += 1
                    for gap_y in range(prev_y + 1, y):
                        gap_color, _ = render_pixel(ctx, x, gap_y, depth)
                        ctx.sink.put_pixel(x, gap_y, gap_color)
                        ctx.stats.pixels_traced += 1
                else:
                    for gap_y in range(prev_y + 1, y):
                        ctx.sink.put_pixel(x, gap_y, prev_color)
                        ctx.stats.pixels_replicated += 1

            prev_y, prev_color, prev_hit = y, color, hit


def rebuild_acceleration(ctx, max_diameter=None):
    """Перестраивает дерево ограничивающих сфер сцены."""
    if max_diameter is None:
        max_diameter = ctx.config.max_bounding_diameter
    return ctx.scene.rebuild_bounding_volumes(max_diameter)


def render_frame(ctx):
    """
    Рендеринг одного кадра целиком и вывод через sink.present().

    Режим (полный или с пропуском строк) выбирается по config.subsampling.
    Сцена во время рендеринга не меняется, кроме кэша теней.

    Возвращает RenderStats кадра.
    """
    config = ctx.config
    if config.recursion_depth < 0:
        logger.warning("recursion_depth=%d < 0, используется 0",
                       config.recursion_depth)

    ctx.camera = Camera.from_config(config)
    ctx.shadow_cache = ShadowCache(len(ctx.scene.lights))
    ctx.stats = RenderStats()

    start_time = time.time()
    if config.subsampling > 0:
        subsample_render_scene(ctx, config.subsampling)
    else:
        render_scene(ctx)
    ctx.stats.elapsed = time.time() - start_time

    ctx.stats.shadow_cache_hits = ctx.shadow_cache.hits
    ctx.stats.shadow_cache_misses = ctx.shadow_cache.misses
    ctx.sink.present()

    stats = ctx.stats
    logger.info("Кадр %dx%d за %.2f с: %d лучей, %d пикселей трассировано, "
                "%d скопировано, %d разрывов когерентности, кэш теней %d/%d",
                config.width, config.height, stats.elapsed, stats.rays_traced,
                stats.pixels_traced, stats.pixels_replicated,
                stats.coherence_breaks, stats.shadow_cache_hits,
                stats.shadow_cache_hits + stats.shadow_cache_misses)
    return stats
