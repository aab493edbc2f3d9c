import numpy as np
import pytest

from sphere_tracer.bounding import (
    BoundingNode, BoundingTree, NodeKind, build_bounding_tree, chain_distance,
    closest_intersection,
)
from sphere_tracer.scene import Sphere


def _spheres(specs):
    spheres = [Sphere(center, radius, [255, 255, 255]) for center, radius in specs]
    for i, sphere in enumerate(spheres):
        sphere.id = i
    return spheres


@pytest.fixture
def row_spheres():
    return _spheres([
        ([-2, 0, 5], 1.0),
        ([0, 0, 5], 1.0),
        ([2, 0, 5], 1.0),
        ([0, 6, 10], 1.0),
    ])


def test_chain_distance():
    d = chain_distance(np.array([0.0, 0.0, 0.0]), 1.0, np.array([3.0, 4.0, 0.0]), 2.0)
    assert d == pytest.approx(8.0)


def test_row_is_clustered(row_spheres):
    tree = build_bounding_tree(row_spheres, 10.0)

    # Листья занимают первые индексы арены
    for i in range(4):
        assert tree.nodes[i].is_leaf
        assert tree.nodes[i].primitive == i

    assert tree.roots == [4, 3]
    cluster = tree.nodes[4]
    assert cluster.kind is NodeKind.COMPOSITE
    assert cluster.children == [0, 1, 2]
    assert np.allclose(cluster.center, [0, 0, 5])
    # Наибольшее цепное расстояние: крайние сферы, 4 + 1 + 1
    assert cluster.radius == pytest.approx(6.0)


def test_small_diameter_leaves_everything_unclustered(row_spheres):
    tree = build_bounding_tree(row_spheres, 3.0)
    assert tree.roots == [0, 1, 2, 3]
    assert tree.composite_count == 0


def test_empty_list_gives_empty_tree():
    tree = build_bounding_tree([], 10.0)
    assert tree.nodes == []
    assert tree.roots == []


def test_cluster_inside_accepted_cluster_is_discarded():
    """
    {A, B} образуют кластер радиуса 9 с центром в x=3.5. C и D несовместимы
    с B, но их собственный кластер целиком внутри первого и отбрасывается.
    """
    spheres = _spheres([
        ([0, 0, 0], 1.0),     # A
        ([7, 0, 0], 1.0),     # B
        ([-2.5, 0, 0], 1.0),  # C
        ([-3, 0, 0], 0.5),    # D
    ])
    tree = build_bounding_tree(spheres, 10.0)

    assert tree.composite_count == 1
    cluster = tree.nodes[4]
    assert cluster.children == [0, 1]
    assert np.allclose(cluster.center, [3.5, 0, 0])
    assert cluster.radius == pytest.approx(9.0)
    assert tree.roots == [4, 2, 3]


def test_cluster_outside_accepted_cluster_is_kept():
    spheres = _spheres([
        ([0, 0, 0], 1.0),
        ([7, 0, 0], 1.0),
        ([-30, 0, 0], 1.0),
        ([-31, 0, 0], 1.0),
    ])
    tree = build_bounding_tree(spheres, 10.0)
    assert tree.composite_count == 2
    assert tree.roots == [4, 5]
    assert tree.nodes[5].children == [2, 3]


def test_every_primitive_reachable_exactly_once():
    rng = np.random.RandomState(7)
    specs = [(rng.uniform(-20, 20, 3), rng.uniform(0.2, 2.0)) for _ in range(40)]
    spheres = _spheres(specs)
    tree = build_bounding_tree(spheres, 8.0)

    direct = [tree.nodes[i].primitive for i in tree.roots if tree.nodes[i].is_leaf]
    nested = []
    for index in tree.roots:
        node = tree.nodes[index]
        if not node.is_leaf:
            nested.extend(tree.leaves_under(index))

    # Связанные сферы не попадают в check-list напрямую
    assert not set(direct) & set(nested)
    assert sorted(direct + nested) == list(range(len(spheres)))


def test_cluster_encloses_its_members():
    rng = np.random.RandomState(3)
    specs = [(rng.uniform(-10, 10, 3), rng.uniform(0.2, 1.5)) for _ in range(30)]
    spheres = _spheres(specs)
    tree = build_bounding_tree(spheres, 12.0)
    for node in tree.nodes:
        if node.is_leaf:
            continue
        for child in node.children:
            member = spheres[child]
            reach = np.linalg.norm(member.center - node.center) + member.radius
            assert reach <= node.radius + 1e-9


def test_clustering_depends_on_order():
    """Результат кластеризации зависит от порядка сфер в списке."""
    specs = [([0, 0, 0], 1.0), ([5, 0, 0], 1.0), ([10, 0, 0], 1.0)]
    forward = build_bounding_tree(_spheres(specs), 8.0)
    backward = build_bounding_tree(_spheres(specs[::-1]), 8.0)

    assert forward.roots == [3, 2]
    assert backward.roots == [3, 2]
    # Вперёд: кластер из сфер x=0 и x=5; назад: из x=10 и x=5
    assert np.allclose(forward.nodes[3].center, [2.5, 0, 0])
    assert np.allclose(backward.nodes[3].center, [7.5, 0, 0])


def test_closest_hit_through_cluster(row_spheres):
    tree = build_bounding_tree(row_spheres, 10.0)
    origin = np.array([0.0, 0.0, -5.0])
    t, index = closest_intersection(tree, origin, np.array([0.0, 0.0, 1.0]), 1.0, np.inf)
    assert t == pytest.approx(9.0)
    assert index == 1


def test_ray_through_cluster_missing_children(row_spheres):
    tree = build_bounding_tree(row_spheres, 10.0)
    origin = np.array([0.0, 4.0, -5.0])
    t, index = closest_intersection(tree, origin, np.array([0.0, 0.0, 1.0]), 1.0, np.inf)
    assert np.isinf(t)
    assert index == -1


def test_closest_hit_respects_interval(row_spheres):
    tree = build_bounding_tree(row_spheres, 10.0)
    origin = np.array([0.0, 0.0, -5.0])
    direction = np.array([0.0, 0.0, 1.0])
    # Ближний корень (9) за пределами max_t, дальний (11) тоже
    t, index = closest_intersection(tree, origin, direction, 1.0, 8.5)
    assert index == -1
    # Изнутри сферы виден только дальний корень
    t, index = closest_intersection(tree, np.array([0.0, 0.0, 5.0]), direction, 0.001, np.inf)
    assert t == pytest.approx(1.0)
    assert index == 1


def test_nested_tree_of_arbitrary_depth():
    spheres = _spheres([([0, 0, 5], 1.0)])
    nodes = [
        BoundingNode(NodeKind.LEAF, spheres[0].center, 1.0, primitive=0),
        BoundingNode(NodeKind.COMPOSITE, np.array([0.0, 0.0, 5.0]), 3.0, children=[0]),
        BoundingNode(NodeKind.COMPOSITE, np.array([0.0, 0.0, 5.0]), 5.0, children=[1]),
    ]
    tree = BoundingTree(nodes, [2])
    t, index = closest_intersection(tree, np.array([0.0, 0.0, -5.0]),
                                    np.array([0.0, 0.0, 1.0]), 1.0, np.inf)
    assert t == pytest.approx(9.0)
    assert index == 0
    assert tree.leaves_under(2) == [0]


def test_tie_goes_to_first_entry():
    spheres = _spheres([([0, 0, 5], 1.0), ([0, 0, 5], 1.0)])
    tree = build_bounding_tree(spheres, 0.5)
    assert tree.roots == [0, 1]
    _, index = closest_intersection(tree, np.array([0.0, 0.0, -5.0]),
                                    np.array([0.0, 0.0, 1.0]), 1.0, np.inf)
    assert index == 0


def test_outline_mode_reports_cluster_silhouette(row_spheres):
    tree = build_bounding_tree(row_spheres, 10.0)
    origin = np.array([0.0, -5.9, -20.0])
    direction = np.array([0.0, 0.0, 1.0])

    t, index = closest_intersection(tree, origin, direction, 1.0, np.inf, outline=True)
    assert index == 4
    assert not tree.nodes[index].is_leaf

    t, index = closest_intersection(tree, origin, direction, 1.0, np.inf, outline=False)
    assert index == -1
