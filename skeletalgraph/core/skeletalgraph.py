"""
Main facade class for skeletal graph editing.

This module provides the pyskeletalgraph class, which owns one graph store and
delegates to specialized analysis and operation modules.
"""

import logging
from typing import List, Optional, Tuple

from ..classes.curve import pycurve, format_vector
from ..classes.edge import pyedge
from ..classes.vertex import pyvertex
from ..classes.results import CollapseOption, GraphOperationResult
from ..config import GraphSettings
from .graph import SkeletonGraph
from ..operations.simplification import GraphSimplifier
from ..operations.modification import GraphModifier
from ..operations.topology import TopologyManager
from ..analysis.detection import CycleAnalyzer
from ..analysis.pathfinding import PathFinder
from ..formats.export_graph import export_graph_to_file
from ..formats.import_graph import import_graph_from_file

logger = logging.getLogger(__name__)


class pyskeletalgraph:
    """
    Main facade class for skeletal graph editing.

    Exposes the graph store, editing, analysis, simplification and
    serialization operations behind a single object.
    """

    def __init__(self, settings: Optional[GraphSettings] = None):
        """
        Initialize an empty skeletal graph.

        Args:
            settings: Tuning parameters; defaults if None
        """
        self.settings = settings if settings is not None else GraphSettings()
        self._wire(SkeletonGraph())

    def _wire(self, graph: SkeletonGraph):
        """Attach the analysis and operation components to a graph store."""
        self._graph = graph

        # Initialize analysis components
        self._pathfinder = PathFinder(self._graph)
        self._cycles = CycleAnalyzer(self._graph)

        # Initialize operation components
        self._modifier = GraphModifier(self._graph, self.settings)
        self._topology = TopologyManager(self._graph, self._pathfinder, self.settings)
        self._simplifier = GraphSimplifier(self._graph, self._modifier, self._topology)

    @property
    def graph(self) -> SkeletonGraph:
        return self._graph

    # ========================================================================
    # BASIC GRAPH OPERATIONS
    # ========================================================================

    def add_vertex(self, vertex: Optional[pyvertex] = None) -> int:
        """Add a copy of a vertex; a default vertex at the origin if None."""
        if vertex is None:
            vertex = pyvertex(dRadius=self.settings.default_vertex_radius,
                              dRadius_max=self.settings.max_vertex_radius)
        return self._graph.add_vertex(vertex)

    def remove_vertex(self, vertex_id: Optional[int]) -> List[int]:
        """Remove a vertex and its incident edges."""
        return self._graph.remove_vertex(vertex_id)

    def clear_vertex(self, vertex_id: int) -> List[int]:
        """Remove the incident edges of a vertex, keeping the vertex."""
        return self._graph.clear_vertex(vertex_id)

    def add_edge(self, source_id: Optional[int], target_id: Optional[int],
                 curve: Optional[pycurve] = None) -> Optional[int]:
        """Add an edge; None if either endpoint is null."""
        return self._graph.add_edge(source_id, target_id, curve)

    def remove_edge(self, edge_id: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
        """Remove an edge and any endpoint left without edges."""
        return self._graph.remove_edge(edge_id)

    def get_vertex(self, vertex_id: int) -> pyvertex:
        return self._graph.get_vertex(vertex_id)

    def get_edge(self, edge_id: int) -> pyedge:
        return self._graph.get_edge(edge_id)

    def vertices(self) -> List[int]:
        return self._graph.vertices()

    def edges(self) -> List[int]:
        return self._graph.edges()

    def degree(self, vertex_id: int) -> int:
        return self._graph.degree(vertex_id)

    def vertex_count(self) -> int:
        return self._graph.vertex_count()

    def edge_count(self) -> int:
        return self._graph.edge_count()

    def point_count(self) -> int:
        """Total number of curve points over all edges."""
        return self._graph.point_count()

    def edge_exists(self, from_id: Optional[int], to_id: Optional[int]) -> Tuple[List[int], bool]:
        """Edges joining two vertices, and whether one goes from ``from_id`` to ``to_id``."""
        return self._graph.edge_exists(from_id, to_id)

    def is_simple_edge(self, edge_id: int) -> bool:
        return self._graph.is_simple_edge(edge_id)

    def copy(self) -> "pyskeletalgraph":
        """Deep snapshot sharing nothing with this graph."""
        new_graph = pyskeletalgraph(GraphSettings.from_dict(self.settings.to_dict()))
        new_graph._wire(self._graph.copy())
        return new_graph

    # ========================================================================
    # GRAPH MODIFICATION
    # ========================================================================

    def update_vertex_position(self, vertex_id: Optional[int], position,
                               maintain_shape: Optional[bool] = None) -> bool:
        """Move a vertex, deforming its incident curves to follow."""
        return self._modifier.update_vertex_position(vertex_id, position, maintain_shape)

    def get_edge_radius(self, edge_id: int, segment_index: int) -> float:
        """Radius interpolated along an edge."""
        return self._modifier.get_edge_radius(edge_id, segment_index)

    def split_edge_at(self, edge_id: int, segment_index: int, position) -> Tuple[int, Tuple[int, int]]:
        """Insert a vertex on an edge segment."""
        return self._modifier.split_edge_at(edge_id, segment_index, position)

    def cut_edge_at(self, edge_id: int, segment_index: int, position) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Cut an edge open, leaving two tips."""
        return self._modifier.cut_edge_at(edge_id, segment_index, position)

    def collapse_edge(self, edge_id: int, option: CollapseOption = CollapseOption.SOURCE) -> GraphOperationResult:
        """Contract an edge into one of its endpoints."""
        return self._modifier.collapse_edge(edge_id, option)

    def merge_vertices(self, vertex_one: int, vertex_two: int,
                       option: CollapseOption = CollapseOption.SOURCE) -> GraphOperationResult:
        """Merge two vertices into one."""
        return self._modifier.merge_vertices(vertex_one, vertex_two, option)

    def deform_edge(self, edge_id: int, point_index: int, position) -> bool:
        """Move one curve point of an edge."""
        return self._modifier.deform_edge(edge_id, point_index, position)

    def move_and_scale(self, displacement, scale_factor: float) -> None:
        """Translate then scale the whole graph."""
        self._modifier.move_and_scale(displacement, scale_factor)

    # ========================================================================
    # TOPOLOGY
    # ========================================================================

    def remove_degree_2_vertex_and_merge_edges(self, vertex_id: int) -> Tuple[int, Tuple[int, int]]:
        """Replace a degree-2 vertex and its two edges by a single edge."""
        return self._topology.remove_degree_2_vertex_and_merge_edges(vertex_id)

    def remove_vertices_of_degree_2_and_merge_edges(self, candidates: List[int]) -> GraphOperationResult:
        """Batch merge of degree-2 vertices."""
        return self._topology.remove_vertices_of_degree_2_and_merge_edges(candidates)

    def split_edge_along_curve(self, edge_id: int, vertex_pairs: List[Tuple[int, int]]) -> GraphOperationResult:
        """Re-route an edge's curve between pairs of neighbouring vertices."""
        return self._topology.split_edge_along_curve(edge_id, vertex_pairs)

    def convert_to_curve(self, path: List[int]) -> pycurve:
        """Concatenate the curves along a vertex path."""
        return self._topology.convert_to_curve(path)

    def split_path(self, edge_a: int, edge_b: int, displacement: Optional[float] = None) -> GraphOperationResult:
        """Join two edges along their shortest connecting path."""
        return self._topology.split_path(edge_a, edge_b, displacement)

    # ========================================================================
    # PATH FINDING & CYCLES
    # ========================================================================

    def shortest_path(self, source_id: int, target_id: int) -> Optional[List[int]]:
        """Shortest vertex path ignoring edge direction; None if unreachable."""
        return self._pathfinder.shortest_path(source_id, target_id)

    def shortest_path_between_edges(self, edge_a: int, edge_b: int) -> Optional[List[int]]:
        """Shortest path between any endpoints of two edges."""
        return self._pathfinder.shortest_path_between_edges(edge_a, edge_b)

    def count_connected_components(self) -> int:
        return self._pathfinder.count_connected_components()

    def find_cycles(self) -> None:
        """Recompute the cycle flags of all vertices and edges."""
        self._cycles.find_cycles()

    def get_cycle_vertices(self) -> List[int]:
        return self._cycles.get_cycle_vertices()

    def get_cycle_edges(self) -> List[int]:
        return self._cycles.get_cycle_edges()

    def describe_cycles(self) -> str:
        return self._cycles.describe_cycles()

    # ========================================================================
    # SIMPLIFICATION
    # ========================================================================

    def collapse_edges_shorter_than(self, min_length: float) -> int:
        """Collapse edges whose curve is shorter than ``min_length``."""
        return self._simplifier.collapse_edges_shorter_than(min_length)

    def collapse_edges_with_less_than_n_splines(self, n: int) -> int:
        """Collapse edges whose curve has fewer than ``n`` points."""
        return self._simplifier.collapse_edges_with_less_than_n_splines(n)

    def collapse_simple_edges(self) -> int:
        """Collapse or merge away edges without interior curve points."""
        return self._simplifier.collapse_simple_edges()

    def remove_vertices_of_degree(self, k: int) -> int:
        """Remove every vertex of degree ``k``."""
        return self._simplifier.remove_vertices_of_degree(k)

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def export_to_file(self, filename: str, scale: float = 1.0) -> bool:
        """Write the graph to a text file."""
        return export_graph_to_file(self._graph, filename, scale, self.settings.float_precision)

    @classmethod
    def import_from_file(cls, filename: str,
                         settings: Optional[GraphSettings] = None) -> Tuple["pyskeletalgraph", float]:
        """
        Load a graph written by ``export_to_file``.

        Returns:
            (new graph, scale stored in the file)
        """
        new_graph = cls(settings)
        scale = import_graph_from_file(filename, new_graph._graph, new_graph.settings)
        return new_graph, scale

    def to_string(self) -> str:
        """Human readable dump of all vertices and edges."""
        lines = [f"SkeletalGraph contains {self.vertex_count()} vertices and {self.edge_count()} edges:",
                 "------ vertices ------"]
        for index, vertex_id in enumerate(self._graph.vertices()):
            vertex = self._graph.get_vertex(vertex_id)
            lines.append(f"{index} : {vertex_id} : {format_vector(vertex.position)}, "
                         f"radius : {vertex.dRadius}, in cycle : {int(vertex.iFlag_cycle)}")

        lines.append("------- edges -------")
        for index, edge_id in enumerate(self._graph.edges()):
            edge = self._graph.get_edge(edge_id)
            source = self._graph.get_vertex(edge.lVertexID_source)
            target = self._graph.get_vertex(edge.lVertexID_target)
            lines.append(f"{index} : {edge_id}")
            lines.append(f" |{format_vector(source.position)}| ->")
            lines.append(edge.pCurve.to_compact_string().rstrip("\n"))
            lines.append(f" -> |{format_vector(target.position)}|")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"pyskeletalgraph(vertices={self.vertex_count()}, edges={self.edge_count()})"
