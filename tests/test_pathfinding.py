import pytest

from skeletalgraph.analysis.pathfinding import PathFinder
from skeletalgraph.classes.vertex import pyvertex
from skeletalgraph.core.graph import SkeletonGraph
from skeletalgraph.exceptions import StaleDescriptorError


def _graph(n):
    graph = SkeletonGraph()
    ids = [graph.add_vertex(pyvertex((i, 0, 0))) for i in range(n)]
    return graph, ids


def test_path_to_self():
    graph, (a,) = _graph(1)
    assert PathFinder(graph).shortest_path(a, a) == [a]


def test_path_ignores_edge_direction():
    graph, (a, b, c, d) = _graph(4)
    ab = graph.add_edge(a, b)
    cb = graph.add_edge(c, b)
    cd = graph.add_edge(c, d)
    finder = PathFinder(graph)

    path = finder.shortest_path(a, d)
    assert path == [a, b, c, d]
    assert finder.shortest_path(d, a) == [d, c, b, a]
    assert finder.path_to_edges(path) == [ab, cb, cd]


def test_shortest_of_two_routes():
    graph, (a, b, c, d) = _graph(4)
    graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_edge(c, d)
    graph.add_edge(a, d)

    assert PathFinder(graph).shortest_path(a, d) == [a, d]


def test_unreachable_target():
    graph, (a, b, c) = _graph(3)
    graph.add_edge(a, b)
    assert PathFinder(graph).shortest_path(a, c) is None


def test_path_with_stale_vertex():
    graph, (a, b) = _graph(2)
    graph.remove_vertex(b)
    with pytest.raises(StaleDescriptorError):
        PathFinder(graph).shortest_path(a, b)


def test_shortest_path_between_edges():
    graph, (a, b, c, d, e) = _graph(5)
    first = graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_edge(c, d)
    second = graph.add_edge(e, d)
    finder = PathFinder(graph)

    assert finder.shortest_path_between_edges(first, second) == [b, c, d]
    paths = finder.endpoint_paths(first, second)
    assert paths[0] == [a, b, c, d, e]
    assert paths[3] == [b, c, d]


def test_connected_components():
    graph, (a, b, c, d, e) = _graph(5)
    graph.add_edge(a, b)
    graph.add_edge(c, d)
    finder = PathFinder(graph)

    assert finder.count_connected_components() == 3
    assert finder.reachable_vertices(c) == {c, d}
    assert PathFinder(SkeletonGraph()).count_connected_components() == 0


def test_self_loop_does_not_add_a_component():
    graph, (a, b) = _graph(2)
    graph.add_edge(a, a)
    graph.add_edge(a, b)
    assert PathFinder(graph).count_connected_components() == 1
