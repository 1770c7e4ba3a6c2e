"""
Path finding and reachability analysis for skeletal graphs.

This module provides breadth-first algorithms for finding paths and analyzing
connectivity. Edge direction is ignored: a skeleton is traversed as an
undirected structure.
"""

import logging
from typing import Dict, List, Optional, Set
from collections import deque

from ..core.graph import SkeletonGraph

logger = logging.getLogger(__name__)


class PathFinder:
    """
    Path finding algorithms for skeletal graphs.

    This class provides methods for:
    - Finding the shortest path between two vertices or two edges
    - Converting vertex paths to edges
    - Counting connected components
    - Analyzing reachability
    """

    def __init__(self, graph: SkeletonGraph):
        """
        Initialize the path finder.

        Args:
            graph: SkeletonGraph instance to analyze
        """
        self.graph = graph

    def shortest_path(self, source_id: int, target_id: int) -> Optional[List[int]]:
        """
        Find the shortest path from ``source_id`` to ``target_id`` using BFS.

        The search starts at the target so that following back-pointers from
        the source yields the path in source-to-target order.

        Args:
            source_id: Starting vertex ID
            target_id: Destination vertex ID

        Returns:
            Vertex IDs from source to target inclusive, or None if unreachable
        """
        self.graph.get_vertex(source_id)
        self.graph.get_vertex(target_id)

        if source_id == target_id:
            return [source_id]

        parent: Dict[int, Optional[int]] = {target_id: None}
        queue = deque([target_id])

        while queue and source_id not in parent:
            current_id = queue.popleft()
            for _, neighbor_id in self.graph.neighbors(current_id):
                if neighbor_id not in parent:
                    parent[neighbor_id] = current_id
                    queue.append(neighbor_id)

        if source_id not in parent:
            logger.debug(f"No path between vertices {source_id} and {target_id}")
            return None

        path = [source_id]
        next_id = parent[source_id]
        while next_id is not None:
            path.append(next_id)
            next_id = parent[next_id]
        return path

    def shortest_path_between_edges(self, edge_a: int, edge_b: int) -> Optional[List[int]]:
        """
        Find the shortest path joining any endpoint of ``edge_a`` to any endpoint of ``edge_b``.

        Candidates are tried in the order source-source, source-target,
        target-source, target-target; the first shortest one wins.

        Returns:
            The shortest endpoint path, or None if the edges are not connected
        """
        paths = self.endpoint_paths(edge_a, edge_b)
        best = None
        for path in paths:
            if path is not None and (best is None or len(path) < len(best)):
                best = path
        return best

    def endpoint_paths(self, edge_a: int, edge_b: int) -> List[Optional[List[int]]]:
        """Shortest paths for the four endpoint pairings (ss, st, ts, tt)."""
        a_source, a_target = self.graph.source(edge_a), self.graph.target(edge_a)
        b_source, b_target = self.graph.source(edge_b), self.graph.target(edge_b)
        return [
            self.shortest_path(a_source, b_source),
            self.shortest_path(a_source, b_target),
            self.shortest_path(a_target, b_source),
            self.shortest_path(a_target, b_target),
        ]

    def path_to_edges(self, path: List[int]) -> List[int]:
        """
        Convert a path of vertex IDs to the edges joining consecutive vertices.

        Args:
            path: List of vertex IDs representing a path

        Returns:
            List of edge IDs; pairs with no joining edge are skipped
        """
        edge_ids = []
        for start_id, end_id in zip(path, path[1:]):
            edge_id = self.graph.edge_between(start_id, end_id)
            if edge_id is None:
                edge_id = self.graph.edge_between(end_id, start_id)
            if edge_id is not None:
                edge_ids.append(edge_id)
        return edge_ids

    def reachable_vertices(self, start_id: int) -> Set[int]:
        """All vertices in the connected component of ``start_id``."""
        self.graph.get_vertex(start_id)
        reachable = {start_id}
        queue = deque([start_id])

        while queue:
            current_id = queue.popleft()
            for _, neighbor_id in self.graph.neighbors(current_id):
                if neighbor_id not in reachable:
                    reachable.add(neighbor_id)
                    queue.append(neighbor_id)

        return reachable

    def count_connected_components(self) -> int:
        """Number of connected components, counted by flood fill."""
        explored: Set[int] = set()
        component_count = 0

        for vertex_id in self.graph.vertices():
            if vertex_id not in explored:
                explored |= self.reachable_vertices(vertex_id)
                component_count += 1

        logger.debug(f"Found {component_count} connected components")
        return component_count
