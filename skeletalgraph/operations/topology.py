"""
Topology changes spanning several edges of a skeletal graph.

This module provides operations that splice curves together: merging the two
edges of a degree-2 vertex, re-routing one edge's curve between neighbouring
vertices and joining two edges along the path that connects them.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..classes.curve import pycurve, normalize
from ..classes.results import GraphOperationResult
from ..config import GraphSettings
from ..core.graph import SkeletonGraph
from ..analysis.pathfinding import PathFinder
from ..exceptions import DomainError, InvariantBreachError, NoPathError

logger = logging.getLogger(__name__)


class TopologyManager:
    """
    Manages multi-edge topology changes.

    This class provides methods for:
    - Removing degree-2 vertices by merging their edges
    - Splitting an edge's curve along adjoining edges
    - Concatenating the curves along a vertex path
    - Joining two edges through their shortest connecting path
    """

    def __init__(self, graph: SkeletonGraph, pathfinder: PathFinder, settings: Optional[GraphSettings] = None):
        """
        Initialize the topology manager.

        Args:
            graph: SkeletonGraph instance to manage
            pathfinder: PathFinder for path analysis
            settings: Tuning parameters; defaults if None
        """
        self.graph = graph
        self.pathfinder = pathfinder
        self.settings = settings if settings is not None else GraphSettings()

    def remove_degree_2_vertex_and_merge_edges(self, vertex_id: int) -> Tuple[int, Tuple[int, int]]:
        """
        Remove a vertex of degree 2 and replace its two edges by one.

        The merged curve follows the in-edge into the out-edge (->*->), the
        first in-edge into the reversed second one (->*<-), or the reversed
        first out-edge into the second one (<-*->).

        Returns:
            (merged edge, (first removed edge, second removed edge))
        """
        if self.graph.degree(vertex_id) != 2:
            raise DomainError(f"Trying to merge edges of non degree-2 vertex {vertex_id}")

        in_edges = self.graph.in_edges(vertex_id)
        out_edges = self.graph.out_edges(vertex_id)

        if set(in_edges) & set(out_edges):
            raise InvariantBreachError(f"Cannot merge the self-loop of degree-2 vertex {vertex_id}")

        if len(in_edges) == 1 and len(out_edges) == 1:
            new_curve = self.graph.get_edge(in_edges[0]).pCurve.copy()
            out_curve = self.graph.get_edge(out_edges[0]).pCurve
            new_curve.aTangent[-1] = normalize(out_curve.aPoint[1] - new_curve.aPoint[-1])
            new_curve.append(out_curve, skip_first=1)
            new_source = self.graph.source(in_edges[0])
            new_target = self.graph.target(out_edges[0])

        elif len(in_edges) == 2:
            new_curve = self.graph.get_edge(in_edges[0]).pCurve.copy()
            second_curve = self.graph.get_edge(in_edges[1]).pCurve
            new_curve.aTangent[-1] = normalize(second_curve.aPoint[-2] - new_curve.aPoint[-1])
            new_curve.append(second_curve, skip_first=1, reverse=True)
            new_source = self.graph.source(in_edges[0])
            new_target = self.graph.source(in_edges[1])

        elif len(out_edges) == 2:
            new_curve = self.graph.get_edge(out_edges[0]).pCurve.reversed()
            second_curve = self.graph.get_edge(out_edges[1]).pCurve
            new_curve.aTangent[-1] = normalize(second_curve.aPoint[1] - new_curve.aPoint[-1])
            new_curve.append(second_curve, skip_first=1)
            new_source = self.graph.target(out_edges[0])
            new_target = self.graph.target(out_edges[1])

        else:
            raise InvariantBreachError(f"Unexpected edge configuration around degree-2 vertex {vertex_id}")

        new_edge = self.graph.add_edge(new_source, new_target, new_curve)
        if new_edge is None:
            raise InvariantBreachError(f"Could not create new edge to replace degree-2 vertex {vertex_id}")

        removed_edges = self.graph.remove_vertex(vertex_id)
        if len(removed_edges) != 2:
            raise InvariantBreachError(
                f"Removing degree-2 vertex {vertex_id} removed {len(removed_edges)} edges")

        return new_edge, (removed_edges[0], removed_edges[1])

    def remove_vertices_of_degree_2_and_merge_edges(self, candidates: Iterable[int]) -> GraphOperationResult:
        """
        Batch form of ``remove_degree_2_vertex_and_merge_edges``.

        Candidates that no longer exist, are not of degree 2 or only carry a
        self-loop are skipped. An edge created by one merge and consumed by a
        later one is reported neither as added nor as removed.
        """
        result = GraphOperationResult()
        added_edges: List[int] = []
        superseded = set()

        for vertex_id in candidates:
            if not self.graph.has_vertex(vertex_id) or self.graph.degree(vertex_id) != 2:
                continue
            if set(self.graph.in_edges(vertex_id)) & set(self.graph.out_edges(vertex_id)):
                continue

            new_edge, removed_pair = self.remove_degree_2_vertex_and_merge_edges(vertex_id)

            for removed_edge in removed_pair:
                if removed_edge in added_edges:
                    superseded.add(removed_edge)
                else:
                    result.removed_edges.append(removed_edge)

            result.removed_vertices.append(vertex_id)
            added_edges.append(new_edge)

        result.added_edges = [e for e in added_edges if e not in superseded]
        if result.removed_vertices:
            logger.debug(f"Merged edges around {len(result.removed_vertices)} degree-2 vertices")
        return result

    def split_edge_along_curve(self, edge_id: int, vertex_pairs: List[Tuple[int, int]]) -> GraphOperationResult:
        """
        Re-route the curve of an edge between pairs of neighbouring vertices.

        For each ``(source, target)`` pair, both vertices must be joined to an
        endpoint of ``edge_id`` by another edge. The new edge follows the
        source's adjoining curve, then the curve of ``edge_id`` (deformed to
        meet its neighbours), then the target's adjoining curve. The adjoining
        edges and ``edge_id`` are removed afterwards.

        Returns:
            The new edges and the removed vertices and edges
        """
        edge = self.graph.get_edge(edge_id)
        split_source = edge.lVertexID_source
        split_target = edge.lVertexID_target
        removed_curve = edge.pCurve.copy()

        plans = [self._locate_adjoining_curves(edge_id, split_source, split_target, new_source, new_target)
                 for new_source, new_target in vertex_pairs]

        result = GraphOperationResult()
        edges_to_remove: List[int] = []

        for (new_source, new_target), (start_edge, start_reversed, end_edge, end_reversed, reverse_middle) \
                in zip(vertex_pairs, plans):
            start_curve = self._oriented_curve(start_edge, start_reversed)
            end_curve = self._oriented_curve(end_edge, end_reversed)

            start_curve.pop_back()

            middle_curve = removed_curve.reversed() if reverse_middle else removed_curve.copy()
            middle_curve.pseudo_elastic_deform(True, start_curve.aPoint[-1])
            middle_curve.pseudo_elastic_deform(False, end_curve.aPoint[1])
            middle_curve.pop_back()

            start_curve.append(middle_curve, skip_first=1)
            start_curve.append(end_curve, skip_first=1)

            result.added_edges.append(self.graph.add_edge(new_source, new_target, start_curve))
            for consumed in (start_edge, end_edge):
                if consumed not in edges_to_remove:
                    edges_to_remove.append(consumed)

        edges_to_remove.append(edge_id)

        for removed_edge in edges_to_remove:
            removed_source, removed_target = self.graph.remove_edge(removed_edge)
            result.removed_edges.append(removed_edge)
            result.removed_vertices.extend(v for v in (removed_source, removed_target) if v is not None)

        return result

    def _locate_adjoining_curves(self, edge_id: int, split_source: int, split_target: int,
                                 new_source: int, new_target: int) -> Tuple[int, bool, int, bool, bool]:
        """
        Find the edges joining a requested pair to the ends of the split edge.

        Returns:
            (start edge, reverse it, end edge, reverse it, reverse the split curve)
        """
        start = None
        end = None
        reverse_middle = False

        for at_target, junction in ((False, split_source), (True, split_target)):
            for in_edge in self.graph.in_edges(junction):
                if in_edge == edge_id:
                    continue
                in_source = self.graph.source(in_edge)
                if in_source == new_source:
                    start = (in_edge, False)
                    reverse_middle = at_target
                elif in_source == new_target:
                    end = (in_edge, True)
                    reverse_middle = not at_target

            for out_edge in self.graph.out_edges(junction):
                if out_edge == edge_id:
                    continue
                out_target = self.graph.target(out_edge)
                if out_target == new_source:
                    start = (out_edge, True)
                    reverse_middle = at_target
                elif out_target == new_target:
                    end = (out_edge, False)
                    reverse_middle = not at_target

        if start is None or end is None:
            raise DomainError(
                f"Vertices {new_source} and {new_target} are not both adjacent to edge {edge_id}")

        return start[0], start[1], end[0], end[1], reverse_middle

    def _oriented_curve(self, edge_id: int, reverse: bool) -> pycurve:
        curve = self.graph.get_edge(edge_id).pCurve
        return curve.reversed() if reverse else curve.copy()

    def _joining_edge(self, vertex_one: int, vertex_two: int) -> Optional[int]:
        edge_id = self.graph.edge_between(vertex_one, vertex_two)
        if edge_id is None:
            edge_id = self.graph.edge_between(vertex_two, vertex_one)
        return edge_id

    def convert_to_curve(self, path: List[int]) -> pycurve:
        """
        Concatenate the curves of the edges along a vertex path.

        Each curve is oriented to run along the path. Returns an empty curve
        for paths of fewer than two vertices or paths with a missing edge.
        """
        if len(path) < 2:
            return pycurve()

        new_curve = None
        for current_id, next_id in zip(path, path[1:]):
            edge_id = self._joining_edge(current_id, next_id)
            if edge_id is None:
                logger.warning(f"No edge between path vertices {current_id} and {next_id}")
                return pycurve()

            backwards = current_id == self.graph.target(edge_id)
            if new_curve is None:
                new_curve = self._oriented_curve(edge_id, backwards)
            else:
                new_curve.append(self.graph.get_edge(edge_id).pCurve, skip_first=1, reverse=backwards)

        return new_curve

    def split_path(self, edge_a: int, edge_b: int, displacement: Optional[float] = None) -> GraphOperationResult:
        """
        Join two edges into one running along their shortest connecting path.

        The far ends of ``edge_a`` and ``edge_b`` become the ends of the new
        edge. Both curves are shortened by ``displacement`` arc length at the
        junctions and bridged by the concatenated curves of the connecting
        path. The two original edges are removed and vertices left with degree
        2 along the path are merged away.

        Args:
            edge_a: First edge
            edge_b: Second edge
            displacement: Arc length trimmed at each junction; the configured
                default if None

        Returns:
            The new edges and the removed vertices and edges
        """
        if edge_a == edge_b:
            raise DomainError(f"Cannot join edge {edge_a} to itself")
        if displacement is None:
            displacement = self.settings.split_path_displacement

        a_source, a_target = self.graph.source(edge_a), self.graph.target(edge_a)
        b_source, b_target = self.graph.source(edge_b), self.graph.target(edge_b)
        curve_a = self.graph.get_edge(edge_a).pCurve
        curve_b = self.graph.get_edge(edge_b).pCurve

        paths = self.pathfinder.endpoint_paths(edge_a, edge_b)
        best_index = None
        for index, path in enumerate(paths):
            if path is not None and (best_index is None or len(path) < len(paths[best_index])):
                best_index = index
        if best_index is None:
            raise NoPathError(f"Edges {edge_a} and {edge_b} are not connected")

        # start curve ends and end curve starts at the joined endpoints
        if best_index == 0:
            start_curve, end_curve = curve_a.reversed(), curve_b.copy()
            new_source, new_target = a_target, b_target
        elif best_index == 1:
            start_curve, end_curve = curve_a.reversed(), curve_b.reversed()
            new_source, new_target = a_target, b_source
        elif best_index == 2:
            start_curve, end_curve = curve_a.copy(), curve_b.copy()
            new_source, new_target = a_source, b_target
        else:
            start_curve, end_curve = curve_a.copy(), curve_b.reversed()
            new_source, new_target = a_source, b_source

        shortest = paths[best_index]
        middle_curve = self.convert_to_curve(shortest)

        first_junction = start_curve.aPoint[-1].copy()
        distance_to_back = 0.0
        while start_curve.size() > 2 and distance_to_back < displacement:
            back = start_curve.aPoint[-1]
            before_back = start_curve.aPoint[-2]
            segment_length = float(np.linalg.norm(back - before_back))
            first_junction += normalize(before_back - back) * min(segment_length, displacement - distance_to_back)
            distance_to_back += segment_length
            start_curve.pop_back()
        start_curve.pseudo_elastic_deform(False, first_junction)

        second_junction = end_curve.aPoint[0].copy()
        distance_to_front = 0.0
        index = 0
        while index < end_curve.size() - 2 and distance_to_front < displacement:
            current = end_curve.aPoint[index]
            following = end_curve.aPoint[index + 1]
            segment_length = float(np.linalg.norm(following - current))
            second_junction += normalize(following - current) * min(segment_length, displacement - distance_to_front)
            distance_to_front += segment_length
            index += 1
        end_curve.trim_front(index)
        end_curve.pseudo_elastic_deform(True, second_junction)

        if middle_curve.size() > 2:
            middle_curve.pseudo_elastic_deform(True, first_junction)
            middle_curve.pseudo_elastic_deform(False, second_junction)
            start_curve.append(middle_curve, skip_first=1)
            start_curve.pop_back()

        # edges sharing an endpoint without trimmed junctions meet at one point
        if np.allclose(start_curve.aPoint[-1], end_curve.aPoint[0]):
            start_curve.append(end_curve, skip_first=1)
        else:
            start_curve.append(end_curve)
        start_curve.update_tangents()

        new_edge = self.graph.add_edge(new_source, new_target, start_curve)

        result = GraphOperationResult(added_edges=[new_edge])
        for old_edge in (edge_a, edge_b):
            removed_source, removed_target = self.graph.remove_edge(old_edge)
            result.removed_edges.append(old_edge)
            result.removed_vertices.extend(v for v in (removed_source, removed_target) if v is not None)

        result.merge(self.remove_vertices_of_degree_2_and_merge_edges(shortest))
        transient = {e for e in result.added_edges if not self.graph.has_edge(e)}
        result.added_edges = [e for e in result.added_edges if e not in transient]
        result.removed_edges = [e for e in result.removed_edges if e not in transient]

        logger.debug(f"Joined edges {edge_a} and {edge_b} along a {len(shortest)}-vertex path")
        return result
