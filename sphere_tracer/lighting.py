"""
Освещение: диффузная и зеркальная составляющие, тени.
"""

import numpy as np

from .geometry import first_blocker, ray_sphere_roots, root_in_interval
from .math_utils import dot, length, reflect_ray, subtract
from .scene import LightType

# Смещение от поверхности (избегаем self-intersection)
EPSILON = 0.001


class ShadowCache:
    """
    Кэш когерентности теней: для каждого источника - индекс сферы,
    заслонившей его в предыдущей точке (или None).

    Соседние пиксели обычно затеняются одной и той же сферой, поэтому
    она проверяется первой. Кэш сбрасывается в начале каждого столбца
    изображения.

    Источники могут добавляться в сцену уже после создания кэша:
    для незнакомого индекса кэш пуст, а слот заводится при записи.
    """

    def __init__(self, n_lights=0):
        self.blockers = [None] * n_lights
        self.hits = 0
        self.misses = 0

    def reset(self):
        self.blockers = [None] * len(self.blockers)

    def __getitem__(self, light_index):
        if light_index >= len(self.blockers):
            return None
        return self.blockers[light_index]

    def __setitem__(self, light_index, blocker):
        if light_index >= len(self.blockers):
            self.blockers.extend([None] * (light_index + 1 - len(self.blockers)))
        self.blockers[light_index] = blocker


def any_intersection(scene, origin, direction, min_t, max_t, last_blocker=None,
                     cache=None):
    """
    Поиск ЛЮБОЙ сферы, пересекающей луч внутри (min_t, max_t).

    Сначала проверяется last_blocker (если задан); если он по-прежнему
    заслоняет луч, он сразу возвращается. Иначе - линейный перебор плоского
    списка сфер (не дерева: пропущенная тень даёт видимые артефакты).

    Возвращает индекс сферы или None.
    """
    if last_blocker is not None:
        sphere = scene.spheres[last_blocker]
        a = direction[0]**2 + direction[1]**2 + direction[2]**2
        t1, t2 = ray_sphere_roots(origin, direction, sphere.center, sphere.radius, a)
        if root_in_interval(t1, t2, min_t, max_t):
            if cache is not None:
                cache.hits += 1
            return last_blocker

    if cache is not None:
        cache.misses += 1

    index = first_blocker(origin, direction, min_t, max_t, scene.centers, scene.radii)
    if index < 0:
        return None
    return int(index)


def compute_lighting(scene, point, normal, view, specular, cache):
    """
    Суммарная интенсивность освещения в точке.

    Параметры:
        point: точка на поверхности
        normal: нормаль в точке
        view: вектор от точки к наблюдателю
        specular: показатель блеска, -1 - без блика
        cache: ShadowCache, обновляется после каждого теневого луча

    Результат не ограничивается сверху, отсечение делается при
    применении к цвету.
    """
    intensity = 0.0
    normal_length = length(normal)
    view_length = length(view)

    for i, light in enumerate(scene.lights):
        if light.type is LightType.AMBIENT:
            intensity += light.intensity
            continue

        if light.type is LightType.POINT:
            light_ray = subtract(light.position, point)
        else:
            light_ray = light.position

        blocked_by = any_intersection(scene, point, light_ray, EPSILON, 1.0,
                                      cache[i], cache)
        cache[i] = blocked_by
        if blocked_by is not None:
            continue

        # Диффузная составляющая (Ламберт)
        n_dot_l = dot(normal, light_ray)
        if n_dot_l > 0:
            intensity += light.intensity * n_dot_l / (normal_length * length(light_ray))

        # Зеркальная составляющая (Фонг)
        if specular != -1:
            reflection = reflect_ray(light_ray, normal)
            r_dot_v = dot(reflection, view)
            if r_dot_v > 0:
                intensity += light.intensity * np.power(
                    r_dot_v / (length(reflection) * view_length), specular)

    return intensity
