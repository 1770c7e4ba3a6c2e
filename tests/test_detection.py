from skeletalgraph.analysis.detection import CycleAnalyzer
from skeletalgraph.classes.vertex import pyvertex
from skeletalgraph.core.graph import SkeletonGraph


def _graph(n):
    graph = SkeletonGraph()
    ids = [graph.add_vertex(pyvertex((i, i % 2, 0))) for i in range(n)]
    return graph, ids


def _flags(graph):
    vertices = {v for v in graph.vertices() if graph.get_vertex(v).iFlag_cycle}
    edges = {e for e in graph.edges() if graph.get_edge(e).iFlag_cycle}
    return vertices, edges


def test_tree_has_no_cycles():
    graph, (a, b, c, d) = _graph(4)
    graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_edge(b, d)

    CycleAnalyzer(graph).find_cycles()
    assert _flags(graph) == (set(), set())


def test_triangle_is_fully_flagged():
    graph, (a, b, c) = _graph(3)
    edges = {graph.add_edge(a, b), graph.add_edge(b, c), graph.add_edge(c, a)}

    CycleAnalyzer(graph).find_cycles()
    assert _flags(graph) == ({a, b, c}, edges)


def test_tail_of_a_cycle_is_not_flagged():
    graph, (a, b, c, d, tail) = _graph(5)
    square = {graph.add_edge(a, b), graph.add_edge(b, c), graph.add_edge(d, c), graph.add_edge(d, a)}
    graph.add_edge(tail, a)

    CycleAnalyzer(graph).find_cycles()
    assert _flags(graph) == ({a, b, c, d}, square)


def test_bridge_between_cycles_is_not_flagged():
    graph, ids = _graph(6)
    left = {graph.add_edge(ids[0], ids[1]), graph.add_edge(ids[1], ids[2]), graph.add_edge(ids[2], ids[0])}
    right = {graph.add_edge(ids[3], ids[4]), graph.add_edge(ids[4], ids[5]), graph.add_edge(ids[5], ids[3])}
    bridge = graph.add_edge(ids[2], ids[3])

    analyzer = CycleAnalyzer(graph)
    analyzer.find_cycles()

    vertices, edges = _flags(graph)
    assert vertices == set(ids)
    assert edges == left | right
    assert bridge not in analyzer.get_cycle_edges()


def test_self_loop_and_parallel_edges_are_cycles():
    graph, (a, b, c) = _graph(3)
    loop = graph.add_edge(a, a)
    first = graph.add_edge(b, c)
    second = graph.add_edge(b, c)
    link = graph.add_edge(a, b)

    CycleAnalyzer(graph).find_cycles()

    vertices, edges = _flags(graph)
    assert edges == {loop, first, second}
    assert link not in edges
    assert vertices == {a, b, c}


def test_find_cycles_resets_stale_flags():
    graph, (a, b) = _graph(2)
    e = graph.add_edge(a, b)
    graph.get_vertex(a).iFlag_cycle = True
    graph.get_edge(e).iFlag_cycle = True

    CycleAnalyzer(graph).find_cycles()
    assert _flags(graph) == (set(), set())


def test_describe_cycles():
    graph, (a, b, c) = _graph(3)
    graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_edge(c, a)
    analyzer = CycleAnalyzer(graph)
    analyzer.find_cycles()

    report = analyzer.describe_cycles()
    assert report.startswith("Cycle vertices:")
    assert "Cycle edges:" in report
    assert len(report.splitlines()) == 8
