"""
Математические утилиты для работы с 3D векторами и матрицами поворота.
Оптимизировано с помощью numba для ускорения.
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def dot(a, b):
    """Скалярное произведение двух векторов."""
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


@njit(cache=True, fastmath=True)
def add(a, b):
    return np.array([a[0] + b[0], a[1] + b[1], a[2] + b[2]])


@njit(cache=True, fastmath=True)
def subtract(a, b):
    """Разность векторов a - b."""
    return np.array([a[0] - b[0], a[1] - b[1], a[2] - b[2]])


@njit(cache=True, fastmath=True)
def scale(v, s):
    """Умножение вектора на скаляр."""
    return np.array([v[0] * s, v[1] * s, v[2] * s])


@njit(cache=True, error_model="numpy")
def divide(v, s):
    # без fastmath: деление на ноль должно дать inf/nan, а не мусор
    return np.array([v[0] / s, v[1] / s, v[2] / s])


@njit(cache=True, fastmath=True)
def length(v):
    """Длина вектора."""
    return np.sqrt(v[0]**2 + v[1]**2 + v[2]**2)


@njit(cache=True, fastmath=True)
def mat_vec(m, v):
    """Произведение матрицы 3x3 на вектор."""
    result = np.zeros(3)
    for i in range(3):
        for j in range(3):
            result[i] += m[i, j] * v[j]
    return result


@njit(cache=True, fastmath=True)
def reflect_ray(ray, normal):
    """
    Отражение вектора ray относительно нормали: R = 2N(N·ray) - ray.

    Вектор ray направлен ОТ поверхности (к источнику света или к наблюдателю),
    поэтому результат тоже смотрит от поверхности.
    """
    k = 2.0 * dot(normal, ray)
    return np.array([normal[0] * k - ray[0],
                     normal[1] * k - ray[1],
                     normal[2] * k - ray[2]])


@njit(cache=True, fastmath=True)
def rotate_vector(rotations, v):
    """
    Последовательно применяет матрицы поворота к вектору.

    rotations: массив shape (k, 3, 3); матрицы применяются в порядке
    хранения, т.е. для rotation_matrix(x, y, z) сначала X, затем Y, затем Z.
    """
    result = v.astype(np.float64)
    for k in range(rotations.shape[0]):
        result = mat_vec(rotations[k], result)
    return result


def x_rotation_matrix(degrees):
    """Матрица поворота вокруг оси X на угол в градусах."""
    radians = np.radians(degrees)
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ])


def y_rotation_matrix(degrees):
    """Матрица поворота вокруг оси Y на угол в градусах."""
    radians = np.radians(degrees)
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def z_rotation_matrix(degrees):
    """Матрица поворота вокруг оси Z на угол в градусах."""
    radians = np.radians(degrees)
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def rotation_matrix(x, y, z):
    """
    Стек матриц поворота (X, Y, Z) для углов Эйлера в градусах.

    Повороты не коммутируют: rotate_vector применяет их строго в порядке
    X, затем Y, затем Z.

    Возвращает массив shape (3, 3, 3).
    """
    return np.stack([
        x_rotation_matrix(x),
        y_rotation_matrix(y),
        z_rotation_matrix(z),
    ])


def midpoint(points):
    """Центр масс (среднее арифметическое) набора точек."""
    return np.mean(np.asarray(points, dtype=np.float64), axis=0)


def clamp(low, high, value):
    return min(max(low, value), high)


def brighten_color(color, intensity):
    """
    Масштабирует цвет на интенсивность с отсечением каналов в [0, 255].
    """
    return np.array([clamp(0.0, 255.0, channel * intensity)
                     for channel in np.asarray(color, dtype=np.float64)])
