"""
Структура ускорения: дерево ограничивающих сфер.

Дерево хранится "ареной" - плоским списком узлов, адресуемых индексом.
Первые n узлов - листья, по одному на сферу сцены в порядке добавления,
так что индекс листа совпадает с идентификатором сферы. Узлы-кластеры
добавляются после листьев.
"""

from enum import Enum

import numpy as np

from .geometry import ray_sphere_roots
from .math_utils import length, midpoint

# Разница корней, ниже которой кластер рисуется как контур (режим отладки)
OUTLINE_THRESHOLD = 2.5


class NodeKind(Enum):
    LEAF = 0
    COMPOSITE = 1


class BoundingNode:
    """
    Узел арены.

    LEAF хранит индекс сферы в primitive, COMPOSITE - список индексов
    дочерних узлов в children.
    """

    __slots__ = ['kind', 'center', 'radius', 'primitive', 'children']

    def __init__(self, kind, center, radius, primitive=-1, children=()):
        self.kind = kind
        self.center = center
        self.radius = radius
        self.primitive = primitive
        self.children = list(children)

    @property
    def is_leaf(self):
        return self.kind is NodeKind.LEAF

    def __repr__(self):
        if self.is_leaf:
            return f"Leaf(sphere={self.primitive})"
        return (f"Composite(center={np.round(self.center, 3).tolist()}, "
                f"radius={self.radius:.3f}, children={self.children})")


class BoundingTree:
    """Арена узлов и список корневых записей (check-list)."""

    def __init__(self, nodes, roots):
        self.nodes = nodes
        self.roots = roots

    @classmethod
    def empty(cls):
        return cls([], [])

    @property
    def composite_count(self):
        return sum(1 for node in self.nodes if not node.is_leaf)

    def leaves_under(self, index):
        """Индексы сфер, достижимых из узла index."""
        node = self.nodes[index]
        if node.is_leaf:
            return [node.primitive]
        result = []
        for child in node.children:
            result.extend(self.leaves_under(child))
        return result


def chain_distance(center_a, radius_a, center_b, radius_b):
    """Расстояние между центрами плюс оба радиуса."""
    return length(center_a - center_b) + radius_a + radius_b


def _is_inside(center, radius, other):
    # Новая сфера целиком внутри уже принятой
    return not (length(other.center - center) + radius > other.radius)


def build_bounding_tree(spheres, max_diameter):
    """
    Жадная однопроходная кластеризация сфер в ограничивающие сферы.

    Алгоритм:
    1. Для каждой ещё не связанной сферы i (в порядке списка) начинаем
       группу из одной этой сферы.
    2. Каждая следующая свободная сфера j > i входит в группу, только если
       цепное расстояние до КАЖДОГО члена группы не превышает max_diameter.
       Наибольшее встреченное допустимое расстояние - рабочий диаметр группы.
    3. Группа из двух и более сфер даёт кластер: центр - среднее центров,
       радиус - рабочий диаметр. Кластер отбрасывается, если он целиком
       лежит внутри уже принятого кластера.
    4. Члены принятого кластера помечаются связанными и больше не
       рассматриваются.
    5. Корневой список - принятые кластеры плюс все несвязанные сферы.

    Это эвристика: результат зависит от порядка сфер, перекрывающиеся
    кластеры возможны.

    Возвращает BoundingTree.
    """
    nodes = [BoundingNode(NodeKind.LEAF, sphere.center, sphere.radius, primitive=i)
             for i, sphere in enumerate(spheres)]
    n = len(spheres)
    bound = [False] * n
    accepted = []

    for i in range(n):
        if bound[i]:
            continue

        group = [i]
        max_distance = 0.0

        for j in range(i + 1, n):
            if bound[j]:
                continue
            sphere_b = spheres[j]
            fits = True
            for k in group:
                sphere_a = spheres[k]
                distance = chain_distance(sphere_a.center, sphere_a.radius,
                                          sphere_b.center, sphere_b.radius)
                if distance > max_diameter:
                    fits = False
                else:
                    max_distance = max(distance, max_distance)
            if fits:
                group.append(j)

        if len(group) < 2:
            continue

        center = midpoint([spheres[k].center for k in group])
        if any(_is_inside(center, max_distance, nodes[other]) for other in accepted):
            continue

        nodes.append(BoundingNode(NodeKind.COMPOSITE, center, max_distance,
                                  children=group))
        accepted.append(len(nodes) - 1)
        for k in group:
            bound[k] = True

    roots = accepted + [i for i in range(n) if not bound[i]]
    return BoundingTree(nodes, roots)


def closest_intersection(tree, origin, direction, min_t, max_t,
                         entries=None, outline=False):
    """
    Поиск ближайшего пересечения луча с деревом ограничивающих сфер.

    Перебирает entries (по умолчанию корневой список). Корень листа внутри
    (min_t, max_t) и строго меньше текущего ближайшего t обновляет попадание.
    Для кластера то же условие запускает рекурсивный обход его детей с
    max_t, сжатым до текущего ближайшего t. При равенстве выигрывает первый.

    В режиме outline кластер с почти совпадающими корнями (касательный луч)
    сам считается попаданием - так рисуются силуэты кластеров.

    Возвращает: (t, node_index)
        t: расстояние до пересечения (inf если нет)
        node_index: индекс узла арены (-1 если нет пересечения)
    """
    if entries is None:
        entries = tree.roots

    closest_t = np.inf
    closest = -1
    a = direction[0]**2 + direction[1]**2 + direction[2]**2

    for index in entries:
        node = tree.nodes[index]
        t1, t2 = ray_sphere_roots(origin, direction, node.center, node.radius, a)

        if node.is_leaf:
            if min_t < t1 < max_t and t1 < closest_t:
                closest_t, closest = t1, index
            if min_t < t2 < max_t and t2 < closest_t:
                closest_t, closest = t2, index
            continue

        if outline and abs(t1 - t2) < OUTLINE_THRESHOLD:
            t = min(t1, t2)
            if min_t < t < max_t and t < closest_t:
                closest_t, closest = t, index
            continue

        if ((min_t < t1 < max_t and t1 < closest_t)
                or (min_t < t2 < max_t and t2 < closest_t)):
            t, hit = closest_intersection(tree, origin, direction, min_t,
                                          min(max_t, closest_t), node.children,
                                          outline)
            if t < closest_t:
                closest_t, closest = t, hit

    return closest_t, closest
