"""
Геометрические примитивы: пересечение луча со сферой.
"""

import numpy as np
from numba import njit

from .math_utils import divide, length, subtract


# Пара корней "нет пересечения"
NO_HIT = (np.inf, np.inf)


@njit(cache=True, error_model="numpy")
def ray_sphere_roots(origin, direction, center, radius, a):
    """
    Пересечение луча со сферой (решение квадратного уравнения).

    Параметры:
        origin: начало луча
        direction: направление луча (не обязательно единичное)
        center, radius: сфера
        a: direction·direction, считается один раз на луч и передаётся снаружи

    Возвращает:
        (t1, t2) - оба корня, в касательном случае равные;
        (inf, inf) если вещественных корней нет.

    Без fastmath: NaN (нулевое направление) должен проваливать проверку
    дискриминанта.
    """
    ocx = origin[0] - center[0]
    ocy = origin[1] - center[1]
    ocz = origin[2] - center[2]

    b = 2.0 * (ocx*direction[0] + ocy*direction[1] + ocz*direction[2])
    c = ocx*ocx + ocy*ocy + ocz*ocz - radius*radius

    discriminant = b*b - 4.0*a*c
    # Сравнение с NaN ложно, поэтому NaN тоже уходит в "нет пересечения"
    if not discriminant >= 0.0:
        return np.inf, np.inf

    sqrt_d = np.sqrt(discriminant)
    t1 = (-b + sqrt_d) / (2.0*a)
    t2 = (-b - sqrt_d) / (2.0*a)

    # a == 0: 0/0 даёт NaN
    if np.isnan(t1) or np.isnan(t2):
        return np.inf, np.inf

    return t1, t2


@njit(cache=True)
def root_in_interval(t1, t2, min_t, max_t):
    """Лежит ли хотя бы один корень строго внутри (min_t, max_t)."""
    return (min_t < t1 and t1 < max_t) or (min_t < t2 and t2 < max_t)


@njit(cache=True, error_model="numpy")
def first_blocker(origin, direction, min_t, max_t, centers, radii):
    """
    Линейный перебор плоского списка сфер: индекс первой сферы,
    пересекающей луч внутри (min_t, max_t), или -1.

    Параметры:
        centers: shape (n, 3)
        radii: shape (n,)
    """
    a = direction[0]**2 + direction[1]**2 + direction[2]**2
    for i in range(centers.shape[0]):
        t1, t2 = ray_sphere_roots(origin, direction, centers[i], radii[i], a)
        if root_in_interval(t1, t2, min_t, max_t):
            return i
    return -1


def intersect_ray_sphere(origin, direction, center, radius, a=None):
    """
    Обёртка над ray_sphere_roots для вызова из Python-кода.

    Если a не передан, он вычисляется из direction.
    """
    origin = np.asarray(origin, dtype=np.float64)
    direction = np.asarray(direction, dtype=np.float64)
    center = np.asarray(center, dtype=np.float64)
    if a is None:
        a = float(direction @ direction)
    return ray_sphere_roots(origin, direction, center, float(radius), float(a))


def sphere_normal(point, center):
    """Единичная внешняя нормаль сферы в точке point."""
    normal = subtract(point, center)
    return divide(normal, length(normal))
