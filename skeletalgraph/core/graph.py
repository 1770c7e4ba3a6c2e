"""
Core graph data structure for skeletal graph representation.

This module provides the fundamental graph store without high-level operations.
"""

import copy
import logging
from typing import Dict, List, Optional, Tuple

from ..classes.vertex import pyvertex
from ..classes.edge import pyedge
from ..classes.curve import pycurve
from ..exceptions import StaleDescriptorError

logger = logging.getLogger(__name__)


class SkeletonGraph:
    """
    Directed multigraph store for curve-skeletons.

    Vertices and edges are identified by integer descriptors taken from
    counters that never repeat, so a descriptor stays valid until the entity it
    names is removed and can never alias a later one. This class provides:
    - O(1) vertex/edge insertion, removal and lookup
    - Incidence maps for in/out edges of every vertex
    - Degree tracking
    - A running total of curve points across all edges
    """

    def __init__(self):
        self.id_to_vertex: Dict[int, pyvertex] = {}
        self.id_to_edge: Dict[int, pyedge] = {}

        # vertex id -> {edge id: neighbour vertex id}
        self.in_adjacency: Dict[int, Dict[int, int]] = {}
        self.out_adjacency: Dict[int, Dict[int, int]] = {}

        self._next_vertex_id = 0
        self._next_edge_id = 0
        self._point_count = 0

        logger.debug("Initialized empty SkeletonGraph")

    # ========================================================================
    # SIZE GETTERS
    # ========================================================================

    def vertex_count(self) -> int:
        return len(self.id_to_vertex)

    def edge_count(self) -> int:
        return len(self.id_to_edge)

    def point_count(self) -> int:
        """Total number of curve points over all edges."""
        return self._point_count

    # ========================================================================
    # VERTICES
    # ========================================================================

    def add_vertex(self, vertex: Optional[pyvertex] = None) -> int:
        """
        Insert a copy of ``vertex`` and return its descriptor.

        Args:
            vertex: Vertex properties; a default vertex at the origin if None

        Returns:
            Descriptor of the new vertex
        """
        new_vertex = vertex.copy() if vertex is not None else pyvertex()
        vertex_id = self._next_vertex_id
        self._next_vertex_id += 1

        new_vertex.lVertexID = vertex_id
        self.id_to_vertex[vertex_id] = new_vertex
        self.in_adjacency[vertex_id] = {}
        self.out_adjacency[vertex_id] = {}
        return vertex_id

    def remove_vertex(self, vertex_id: Optional[int]) -> List[int]:
        """
        Remove a vertex and all its incident edges.

        Returns:
            Descriptors of the removed edges (empty for the null vertex)
        """
        if vertex_id is None:
            return []
        removed_edges = self.clear_vertex(vertex_id)
        del self.id_to_vertex[vertex_id]
        del self.in_adjacency[vertex_id]
        del self.out_adjacency[vertex_id]
        return removed_edges

    def clear_vertex(self, vertex_id: int) -> List[int]:
        """
        Remove every edge incident to a vertex, keeping the vertex itself.

        Returns:
            Descriptors of the removed edges, in-edges first
        """
        self._check_vertex(vertex_id)
        removed_edges = list(self.in_adjacency[vertex_id].keys())
        for edge_id in self.out_adjacency[vertex_id]:
            # a self-loop is both an in- and an out-edge
            if edge_id not in self.in_adjacency[vertex_id]:
                removed_edges.append(edge_id)

        for edge_id in removed_edges:
            self._detach_edge(edge_id)
        return removed_edges

    def get_vertex(self, vertex_id: int) -> pyvertex:
        try:
            return self.id_to_vertex[vertex_id]
        except KeyError:
            raise StaleDescriptorError(f"Vertex {vertex_id} does not exist") from None

    def has_vertex(self, vertex_id: Optional[int]) -> bool:
        return vertex_id is not None and vertex_id in self.id_to_vertex

    def vertices(self) -> List[int]:
        """Snapshot of all vertex descriptors in insertion order."""
        return list(self.id_to_vertex.keys())

    def degree(self, vertex_id: int) -> int:
        return self.in_degree(vertex_id) + self.out_degree(vertex_id)

    def in_degree(self, vertex_id: int) -> int:
        self._check_vertex(vertex_id)
        return len(self.in_adjacency[vertex_id])

    def out_degree(self, vertex_id: int) -> int:
        self._check_vertex(vertex_id)
        return len(self.out_adjacency[vertex_id])

    def in_edges(self, vertex_id: int) -> List[int]:
        self._check_vertex(vertex_id)
        return list(self.in_adjacency[vertex_id].keys())

    def out_edges(self, vertex_id: int) -> List[int]:
        self._check_vertex(vertex_id)
        return list(self.out_adjacency[vertex_id].keys())

    def incident_edges(self, vertex_id: int) -> List[int]:
        """In-edges then out-edges; a self-loop is listed once."""
        edges = self.in_edges(vertex_id)
        edges.extend(e for e in self.out_adjacency[vertex_id] if e not in self.in_adjacency[vertex_id])
        return edges

    def neighbors(self, vertex_id: int) -> List[Tuple[int, int]]:
        """
        Direction-agnostic neighbourhood of a vertex.

        Returns:
            (edge id, neighbour vertex id) pairs, in-edges first then out-edges
        """
        self._check_vertex(vertex_id)
        pairs = list(self.in_adjacency[vertex_id].items())
        pairs.extend(self.out_adjacency[vertex_id].items())
        return pairs

    # ========================================================================
    # EDGES
    # ========================================================================

    def add_edge(self, source_id: Optional[int], target_id: Optional[int],
                 curve: Optional[pycurve] = None) -> Optional[int]:
        """
        Insert an edge from ``source_id`` to ``target_id``.

        The edge takes ownership of ``curve``. Without a curve a straight
        two-point curve is synthesized between the vertex positions. The edge
        is flagged as part of a cycle only if both endpoints already are.

        Returns:
            Descriptor of the new edge, or None if either endpoint is null
        """
        if source_id is None or target_id is None:
            logger.warning(f"Cannot add edge between null vertices ({source_id} -> {target_id})")
            return None

        source = self.get_vertex(source_id)
        target = self.get_vertex(target_id)

        if curve is None:
            curve = pycurve.straight(source.position, target.position)

        edge_id = self._next_edge_id
        self._next_edge_id += 1

        edge = pyedge(source_id, target_id, curve, source.iFlag_cycle and target.iFlag_cycle)
        edge.lEdgeID = edge_id

        self.id_to_edge[edge_id] = edge
        self.out_adjacency[source_id][edge_id] = target_id
        self.in_adjacency[target_id][edge_id] = source_id
        self._point_count += curve.size()
        return edge_id

    def remove_edge(self, edge_id: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
        """
        Remove an edge; endpoints left without edges are removed too, unless
        the graph would be left empty.

        Returns:
            (removed source, removed target); None for endpoints that were kept
        """
        if edge_id is None:
            return None, None

        edge = self.get_edge(edge_id)
        source_id = edge.lVertexID_source
        target_id = edge.lVertexID_target

        self._detach_edge(edge_id)

        removed_source = None
        removed_target = None

        if self.degree(source_id) == 0 and self.vertex_count() != 1:
            self.remove_vertex(source_id)
            removed_source = source_id

        if target_id != source_id and self.degree(target_id) == 0 and self.vertex_count() != 1:
            self.remove_vertex(target_id)
            removed_target = target_id

        return removed_source, removed_target

    def get_edge(self, edge_id: int) -> pyedge:
        try:
            return self.id_to_edge[edge_id]
        except KeyError:
            raise StaleDescriptorError(f"Edge {edge_id} does not exist") from None

    def has_edge(self, edge_id: Optional[int]) -> bool:
        return edge_id is not None and edge_id in self.id_to_edge

    def edges(self) -> List[int]:
        """Snapshot of all edge descriptors in insertion order."""
        return list(self.id_to_edge.keys())

    def source(self, edge_id: int) -> int:
        return self.get_edge(edge_id).lVertexID_source

    def target(self, edge_id: int) -> int:
        return self.get_edge(edge_id).lVertexID_target

    def get_edge_source(self, edge_id: int) -> pyvertex:
        return self.get_vertex(self.source(edge_id))

    def get_edge_target(self, edge_id: int) -> pyvertex:
        return self.get_vertex(self.target(edge_id))

    def replace_curve(self, edge_id: int, curve: pycurve) -> None:
        """Give an edge a new curve, keeping the point total in sync."""
        edge = self.get_edge(edge_id)
        self._point_count += curve.size() - edge.pCurve.size()
        edge.pCurve = curve

    def edge_between(self, source_id: int, target_id: int) -> Optional[int]:
        """First edge going from ``source_id`` to ``target_id``, or None."""
        self._check_vertex(target_id)
        for edge_id, neighbor_id in self.out_adjacency[self._check_vertex(source_id)].items():
            if neighbor_id == target_id:
                return edge_id
        return None

    def edge_exists(self, from_id: Optional[int], to_id: Optional[int]) -> Tuple[List[int], bool]:
        """
        Look for edges joining two vertices in either direction.

        Returns:
            (edges found, True if an edge goes from ``from_id`` to ``to_id``)
        """
        if from_id is None or to_id is None:
            return [], False

        edges = []
        right_direction = False
        backward = self.edge_between(to_id, from_id)
        if backward is not None:
            edges.append(backward)
        forward = self.edge_between(from_id, to_id)
        if forward is not None:
            edges.append(forward)
            right_direction = True
        return edges, right_direction

    def is_edge_source_or_target(self, edge_id: int, vertex_id: int) -> bool:
        edge = self.get_edge(edge_id)
        return vertex_id in (edge.lVertexID_source, edge.lVertexID_target)

    def find_vertex_not_connected_to_adjacent_edge(self, edge_id: int, adjacent_edge_id: int) -> Optional[int]:
        """
        Return the endpoint of ``edge_id`` that is not shared with ``adjacent_edge_id``.

        Returns:
            The unshared endpoint, or None if the edges are not adjacent
        """
        edge = self.get_edge(edge_id)
        adjacent = self.get_edge(adjacent_edge_id)
        adjacent_ends = (adjacent.lVertexID_source, adjacent.lVertexID_target)

        if edge.lVertexID_source in adjacent_ends:
            return edge.lVertexID_target
        if edge.lVertexID_target in adjacent_ends:
            return edge.lVertexID_source
        return None

    def is_simple_edge(self, edge_id: int) -> bool:
        """True if the edge's curve has no interior point."""
        return self.get_edge(edge_id).pCurve.size() <= 2

    # ========================================================================
    # WHOLE GRAPH
    # ========================================================================

    def copy(self) -> "SkeletonGraph":
        """Deep snapshot; descriptors are preserved in the copy."""
        return copy.deepcopy(self)

    def _check_vertex(self, vertex_id: int) -> int:
        if vertex_id not in self.id_to_vertex:
            raise StaleDescriptorError(f"Vertex {vertex_id} does not exist")
        return vertex_id

    def _detach_edge(self, edge_id: int) -> None:
        edge = self.id_to_edge.pop(edge_id)
        del self.out_adjacency[edge.lVertexID_source][edge_id]
        del self.in_adjacency[edge.lVertexID_target][edge_id]
        self._point_count -= edge.pCurve.size()
