import numpy as np
import pytest

from skeletalgraph.analysis.pathfinding import PathFinder
from skeletalgraph.classes.curve import pycurve
from skeletalgraph.classes.vertex import pyvertex
from skeletalgraph.core.graph import SkeletonGraph
from skeletalgraph.exceptions import DomainError, InvariantBreachError, NoPathError
from skeletalgraph.operations.topology import TopologyManager


def _setup():
    graph = SkeletonGraph()
    return graph, TopologyManager(graph, PathFinder(graph))


def _add(graph, x, y=0.0):
    return graph.add_vertex(pyvertex((x, y, 0)))


def _x_curve(*xs):
    return pycurve.from_points([(x, 0, 0) for x in xs])


def _xs(graph, edge_id):
    return graph.get_edge(edge_id).pCurve.aPoint[:, 0]


def test_merge_in_and_out_edges():
    graph, topology = _setup()
    a, b, c = _add(graph, 0), _add(graph, 1), _add(graph, 2)
    ab = graph.add_edge(a, b)
    bc = graph.add_edge(b, c)

    new_edge, removed = topology.remove_degree_2_vertex_and_merge_edges(b)

    assert sorted(removed) == sorted([ab, bc])
    assert graph.source(new_edge) == a and graph.target(new_edge) == c
    assert np.allclose(_xs(graph, new_edge), [0, 1, 2])
    assert not graph.has_vertex(b)
    assert graph.point_count() == 3


def test_merge_two_in_edges():
    graph, topology = _setup()
    a, b, c = _add(graph, 0), _add(graph, 1), _add(graph, 2)
    graph.add_edge(a, b)
    graph.add_edge(c, b)

    new_edge, _ = topology.remove_degree_2_vertex_and_merge_edges(b)

    assert graph.source(new_edge) == a and graph.target(new_edge) == c
    assert np.allclose(_xs(graph, new_edge), [0, 1, 2])


def test_merge_two_out_edges():
    graph, topology = _setup()
    a, b, c = _add(graph, 0), _add(graph, 1), _add(graph, 2)
    graph.add_edge(b, a)
    graph.add_edge(b, c)

    new_edge, _ = topology.remove_degree_2_vertex_and_merge_edges(b)

    assert graph.source(new_edge) == a and graph.target(new_edge) == c
    assert np.allclose(_xs(graph, new_edge), [0, 1, 2])
    # junction tangent points along the merged curve
    assert np.allclose(graph.get_edge(new_edge).pCurve.aTangent[1], (1, 0, 0))


def test_merge_rejects_wrong_degree():
    graph, topology = _setup()
    a, b = _add(graph, 0), _add(graph, 1)
    graph.add_edge(a, b)
    with pytest.raises(DomainError):
        topology.remove_degree_2_vertex_and_merge_edges(b)


def test_merge_rejects_lone_self_loop():
    graph, topology = _setup()
    a = _add(graph, 0)
    graph.add_edge(a, a, pycurve.from_points([(0, 0, 0), (1, 1, 0), (0, 0, 0)]))
    with pytest.raises(InvariantBreachError):
        topology.remove_degree_2_vertex_and_merge_edges(a)


def test_batch_merge_reports_only_surviving_edges():
    graph, topology = _setup()
    ids = [_add(graph, x) for x in range(4)]
    chain = [graph.add_edge(u, v) for u, v in zip(ids, ids[1:])]

    result = topology.remove_vertices_of_degree_2_and_merge_edges([ids[1], ids[2], ids[3]])

    assert result.removed_vertices == [ids[1], ids[2]]
    assert sorted(result.removed_edges) == sorted(chain)
    assert len(result.added_edges) == 1
    final = result.added_edges[0]
    assert graph.edges() == [final]
    assert np.allclose(_xs(graph, final), [0, 1, 2, 3])


def test_convert_to_curve_orients_each_edge_along_the_path():
    graph, topology = _setup()
    a, b, c = _add(graph, 0), _add(graph, 1), _add(graph, 3)
    graph.add_edge(a, b)
    graph.add_edge(c, b, _x_curve(3, 2, 1))

    assert np.allclose(topology.convert_to_curve([a, b, c]).aPoint[:, 0], [0, 1, 2, 3])
    assert np.allclose(topology.convert_to_curve([c, b, a]).aPoint[:, 0], [3, 2, 1, 0])
    assert topology.convert_to_curve([a]).size() == 0
    assert topology.convert_to_curve([a, c]).size() == 0


def _split_path_graph():
    graph, topology = _setup()
    s, u, m, v, t = _add(graph, 0), _add(graph, 2), _add(graph, 3), _add(graph, 4), _add(graph, 6)
    su = graph.add_edge(s, u, _x_curve(0, 1, 2))
    graph.add_edge(u, m)
    graph.add_edge(m, v)
    vt = graph.add_edge(v, t, _x_curve(4, 5, 6))
    return graph, topology, (s, u, m, v, t), (su, vt)


def test_split_path_joins_edges_along_the_connecting_path():
    graph, topology, (s, u, m, v, t), (su, vt) = _split_path_graph()

    result = topology.split_path(su, vt, displacement=0.5)

    joined = graph.edge_between(s, t)
    assert joined in result.added_edges
    assert np.allclose(_xs(graph, joined), [0, 1.5, 3, 4.5, 6])
    assert not graph.has_edge(su) and not graph.has_edge(vt)
    assert su in result.removed_edges and vt in result.removed_edges
    assert m in result.removed_vertices
    assert not graph.has_vertex(m)
    assert graph.edge_count() == 2
    assert graph.point_count() == sum(graph.get_edge(e).nPoint for e in graph.edges())
    for edge_id in result.added_edges:
        assert graph.has_edge(edge_id)


def test_split_path_rejects_same_edge():
    graph, topology, _, (su, _) = _split_path_graph()
    with pytest.raises(DomainError):
        topology.split_path(su, su)


def test_split_path_without_connection():
    graph, topology = _setup()
    e1 = graph.add_edge(_add(graph, 0), _add(graph, 1))
    e2 = graph.add_edge(_add(graph, 5), _add(graph, 6))
    with pytest.raises(NoPathError):
        topology.split_path(e1, e2)
    assert graph.edge_count() == 2


def test_split_edge_along_curve_bridges_neighbours():
    graph, topology = _setup()
    p, x, y, q = _add(graph, -1), _add(graph, 0), _add(graph, 1), _add(graph, 2)
    graph.add_edge(p, x)
    xy = graph.add_edge(x, y)
    graph.add_edge(y, q)

    result = topology.split_edge_along_curve(xy, [(p, q)])

    new_edge = result.added_edges[0]
    assert graph.source(new_edge) == p and graph.target(new_edge) == q
    assert np.allclose(_xs(graph, new_edge), [-1, 2])
    assert sorted(result.removed_vertices) == sorted([x, y])
    assert graph.vertices() == [p, q]
    assert graph.edges() == [new_edge]


def test_split_edge_along_curve_requires_adjacent_pairs():
    graph, topology = _setup()
    p, x, y = _add(graph, -1), _add(graph, 0), _add(graph, 1)
    z = _add(graph, 9)
    graph.add_edge(p, x)
    xy = graph.add_edge(x, y)

    with pytest.raises(DomainError):
        topology.split_edge_along_curve(xy, [(p, z)])
    assert graph.has_edge(xy)


def test_split_path_leaves_vertex_with_only_a_self_loop():
    graph, topology = _setup()
    x, v, y = _add(graph, 0), _add(graph, 1), _add(graph, 2)
    xv = graph.add_edge(x, v, _x_curve(0, 0.5, 1))
    vy = graph.add_edge(v, y, _x_curve(1, 1.5, 2))
    loop = graph.add_edge(v, v, pycurve.from_points([(1, 0, 0), (1, 1, 0), (1, 0, 0)]))

    result = topology.split_path(xv, vy, displacement=0.1)

    joined = graph.edge_between(x, y)
    assert result.added_edges == [joined]
    assert np.allclose(_xs(graph, joined), [0, 0.9, 1.1, 2])
    assert sorted(result.removed_edges) == sorted([xv, vy])
    assert result.removed_vertices == []
    assert graph.has_vertex(v)
    assert graph.edge_between(v, v) == loop
    assert graph.edge_count() == 2


def test_split_path_through_shared_endpoint_does_not_repeat_it():
    graph, topology = _setup()
    x, v, y = _add(graph, 0), _add(graph, 1), _add(graph, 2)
    xv = graph.add_edge(x, v)
    vy = graph.add_edge(v, y)

    result = topology.split_path(xv, vy)

    joined = graph.edge_between(x, y)
    assert result.added_edges == [joined]
    assert np.allclose(graph.get_edge(joined).pCurve.aPoint, [[0, 0, 0], [1, 0, 0], [2, 0, 0]])
    assert result.removed_vertices == [v]
    assert graph.edges() == [joined]


def _along_curve_graph(reverse_neighbours=False):
    graph, topology = _setup()
    p, x, y, q = _add(graph, -1), _add(graph, 0), _add(graph, 1), _add(graph, 2)
    if reverse_neighbours:
        graph.add_edge(x, p, _x_curve(0, -0.5, -1))
        graph.add_edge(q, y, _x_curve(2, 1.5, 1))
    else:
        graph.add_edge(p, x, _x_curve(-1, -0.5, 0))
        graph.add_edge(y, q, _x_curve(1, 1.5, 2))
    xy = graph.add_edge(x, y, _x_curve(0, 0.5, 1))
    return graph, topology, (p, x, y, q), xy


@pytest.mark.parametrize("reverse_neighbours", [False, True])
def test_split_edge_along_curve_follows_neighbour_curves(reverse_neighbours):
    graph, topology, (p, x, y, q), xy = _along_curve_graph(reverse_neighbours)
    consumed = [e for e in graph.edges() if e != xy]

    result = topology.split_edge_along_curve(xy, [(p, q)])

    (new_edge,) = result.added_edges
    assert graph.source(new_edge) == p and graph.target(new_edge) == q
    assert np.allclose(_xs(graph, new_edge), [-1, -0.5, 0.5, 1.5, 2])
    assert sorted(result.removed_edges) == sorted(consumed + [xy])
    assert sorted(result.removed_vertices) == sorted([x, y])


def test_split_edge_along_curve_with_swapped_pair():
    graph, topology, (p, x, y, q), xy = _along_curve_graph()

    result = topology.split_edge_along_curve(xy, [(q, p)])

    (new_edge,) = result.added_edges
    assert graph.source(new_edge) == q and graph.target(new_edge) == p
    assert np.allclose(_xs(graph, new_edge), [2, 1.5, 0.5, -0.5, -1])
    assert sorted(result.removed_vertices) == sorted([x, y])


def test_split_edge_along_curve_with_pairs_sharing_an_edge():
    graph, topology = _setup()
    p, x, y, q = _add(graph, -1), _add(graph, 0), _add(graph, 1), _add(graph, 2)
    r = _add(graph, -1, 1)
    px = graph.add_edge(p, x)
    rx = graph.add_edge(r, x)
    xy = graph.add_edge(x, y)
    yq = graph.add_edge(y, q)

    result = topology.split_edge_along_curve(xy, [(p, q), (r, q)])

    first, second = result.added_edges
    assert graph.source(first) == p and graph.target(first) == q
    assert graph.source(second) == r and graph.target(second) == q
    assert np.allclose(graph.get_edge(first).pCurve.aPoint, [[-1, 0, 0], [2, 0, 0]])
    assert np.allclose(graph.get_edge(second).pCurve.aPoint, [[-1, 1, 0], [2, 0, 0]])
    assert sorted(result.removed_edges) == sorted([px, rx, xy, yq])
    assert len(result.removed_edges) == 4
    assert sorted(result.removed_vertices) == sorted([x, y])
    assert graph.edge_count() == 2
    assert graph.point_count() == 4
