"""
Cycle detection for skeletal graphs.

Cycles are found by growing a breadth-first spanning tree over each connected
component. Every neighbour reached through a non-tree edge closes a cycle,
which is localized by walking both endpoints back to their lowest common
ancestor (the bifurcation) in the tree.
"""

import logging
from typing import Dict, List, Optional
from collections import deque

from ..classes.curve import format_vector
from ..core.graph import SkeletonGraph
from ..exceptions import InvariantBreachError

logger = logging.getLogger(__name__)


class CycleAnalyzer:
    """
    Detects and reports cycles in skeletal graphs.

    This class provides methods for:
    - Tagging every vertex and edge that lies on a cycle
    - Listing the tagged vertices and edges
    - Producing a textual cycle report
    """

    def __init__(self, graph: SkeletonGraph):
        """
        Initialize the cycle analyzer.

        Args:
            graph: SkeletonGraph instance to analyze
        """
        self.graph = graph

    def find_cycles(self) -> None:
        """
        Reset and recompute the cycle flags of every vertex and edge.

        After the call a vertex or edge is flagged exactly when it lies on a
        cycle of the (undirected) graph.
        """
        for vertex_id in self.graph.vertices():
            self.graph.get_vertex(vertex_id).iFlag_cycle = False
        for edge_id in self.graph.edges():
            self.graph.get_edge(edge_id).iFlag_cycle = False

        # spanning tree parent per vertex, None for component roots
        parent: Dict[int, Optional[int]] = {}

        for start_id in self.graph.vertices():
            if start_id in parent:
                continue

            parent[start_id] = None
            queue = deque([start_id])

            while queue:
                current_id = queue.popleft()
                for _, neighbor_id in self.graph.neighbors(current_id):
                    if neighbor_id == parent[current_id]:
                        continue
                    if neighbor_id in parent:
                        self.tag_cycle(current_id, neighbor_id, parent)
                    else:
                        parent[neighbor_id] = current_id
                        queue.append(neighbor_id)

        cycle_count = len(self.get_cycle_edges())
        logger.debug(f"Cycle detection flagged {cycle_count} edges")

    def tag_cycle(self, vertex_one: int, vertex_two: int, parent: Dict[int, Optional[int]]) -> None:
        """
        Flag the cycle closed by the non-tree connection between two tree vertices.

        Args:
            vertex_one: Vertex being expanded
            vertex_two: Already discovered neighbour of ``vertex_one``
            parent: Spanning tree parent map
        """
        path_one = self._root_path(vertex_one, parent)
        path_two = self._root_path(vertex_two, parent)

        if path_one[0] != path_two[0]:
            raise InvariantBreachError(
                f"Vertices {vertex_one} and {vertex_two} do not share a spanning tree root")

        # trim the common prefix down to the bifurcation
        common = 0
        while common < len(path_one) and common < len(path_two) and path_one[common] == path_two[common]:
            common += 1
        bifurcation = path_one[common - 1]

        self.graph.get_vertex(bifurcation).iFlag_cycle = True
        self._tag_branch(bifurcation, path_one[common:])
        self._tag_branch(bifurcation, path_two[common:])

        for edge_id, neighbor_id in self.graph.neighbors(vertex_one):
            if neighbor_id == vertex_two:
                self.graph.get_edge(edge_id).iFlag_cycle = True

    def _root_path(self, vertex_id: int, parent: Dict[int, Optional[int]]) -> List[int]:
        path = [vertex_id]
        while parent[path[-1]] is not None:
            path.append(parent[path[-1]])
        path.reverse()
        return path

    def _tag_branch(self, bifurcation: int, branch: List[int]) -> None:
        last_id = bifurcation
        for next_id in branch:
            self.graph.get_vertex(next_id).iFlag_cycle = True
            edge_id = self.graph.edge_between(next_id, last_id)
            if edge_id is None:
                edge_id = self.graph.edge_between(last_id, next_id)
            if edge_id is None:
                raise InvariantBreachError(f"Spanning tree edge between {last_id} and {next_id} has disappeared")
            self.graph.get_edge(edge_id).iFlag_cycle = True
            last_id = next_id

    def get_cycle_vertices(self) -> List[int]:
        return [v for v in self.graph.vertices() if self.graph.get_vertex(v).iFlag_cycle]

    def get_cycle_edges(self) -> List[int]:
        return [e for e in self.graph.edges() if self.graph.get_edge(e).iFlag_cycle]

    def describe_cycles(self) -> str:
        """
        Textual report of the flagged vertices and edges.

        Uses the flags as they currently are; call ``find_cycles`` first to
        refresh them.
        """
        lines = ["Cycle vertices:"]
        for vertex_id in self.get_cycle_vertices():
            lines.append(f"  {vertex_id}: {format_vector(self.graph.get_vertex(vertex_id).position)}")

        lines.append("Cycle edges:")
        for edge_id in self.get_cycle_edges():
            edge = self.graph.get_edge(edge_id)
            source = self.graph.get_vertex(edge.lVertexID_source)
            target = self.graph.get_vertex(edge.lVertexID_target)
            lines.append(f"  {edge_id}: |{format_vector(source.position)}| -> "
                         f"|{format_vector(target.position)}| ({edge.nPoint} points)")
        return "\n".join(lines)
