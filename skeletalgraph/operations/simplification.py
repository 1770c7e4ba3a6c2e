"""
Batch simplification operations for skeletal graphs.

This module provides cleanup passes that remove short or degenerate edges and
prune vertices by degree.
"""

import logging
from typing import Callable

from ..classes.results import CollapseOption
from ..config import SIMPLE_EDGE_POINT_COUNT
from ..core.graph import SkeletonGraph
from ..exceptions import DomainError
from .modification import GraphModifier
from .topology import TopologyManager

logger = logging.getLogger(__name__)


class GraphSimplifier:
    """
    Handles batch simplification passes.

    This class provides methods for:
    - Collapsing edges shorter than a length
    - Collapsing edges with too few curve points
    - Collapsing and merging simple (straight two-point) edges
    - Removing vertices of a given degree
    """

    def __init__(self, graph: SkeletonGraph, modifier: GraphModifier, topology: TopologyManager):
        """
        Initialize the graph simplifier.

        Args:
            graph: SkeletonGraph instance to simplify
            modifier: GraphModifier used to collapse edges
            topology: TopologyManager used to merge degree-2 vertices
        """
        self.graph = graph
        self.modifier = modifier
        self.topology = topology

    def collapse_edges_shorter_than(self, min_length: float) -> int:
        """
        Collapse at their midpoint all edges whose curve is shorter than ``min_length``.

        Edges touching a vertex of degree 1 are kept so that tips survive.

        Returns:
            Number of removed vertices
        """
        return self._collapse_edges(lambda edge_id: self.graph.get_edge(edge_id).dLength < min_length,
                                    f"shorter than {min_length}")

    def collapse_edges_with_less_than_n_splines(self, n: int) -> int:
        """
        Collapse at their midpoint all edges whose curve has fewer than ``n`` points.

        Returns:
            Number of removed vertices
        """
        return self._collapse_edges(lambda edge_id: self.graph.get_edge(edge_id).nPoint < n,
                                    f"with less than {n} points")

    def collapse_simple_edges(self) -> int:
        """
        Remove edges whose curve has no interior point.

        Simple edges between branching vertices are collapsed; chains of two
        simple edges through a degree-2 vertex are merged into one edge whose
        curve keeps the removed vertex as an interior point.

        Returns:
            Number of removed vertices
        """
        removed_count = self.collapse_edges_with_less_than_n_splines(SIMPLE_EDGE_POINT_COUNT)

        merged_count = 0
        for vertex_id in self.graph.vertices():
            if not self.graph.has_vertex(vertex_id) or self.graph.degree(vertex_id) != 2:
                continue
            incident = self.graph.incident_edges(vertex_id)
            if len(incident) != 2 or not all(self.graph.is_simple_edge(e) for e in incident):
                continue
            self.topology.remove_degree_2_vertex_and_merge_edges(vertex_id)
            merged_count += 1

        if merged_count:
            logger.info(f"Merged {merged_count} simple edge chains")
        return removed_count + merged_count

    def remove_vertices_of_degree(self, k: int) -> int:
        """
        Remove every vertex of degree exactly ``k`` together with its edges.

        Degrees are checked as the pass goes, so a vertex whose degree drops
        to ``k`` because a neighbour was removed earlier is removed as well.

        Returns:
            Number of removed vertices
        """
        removed_count = 0
        for vertex_id in self.graph.vertices():
            if self.graph.has_vertex(vertex_id) and self.graph.degree(vertex_id) == k:
                self.graph.remove_vertex(vertex_id)
                removed_count += 1

        logger.info(f"Removed {removed_count} vertices of degree {k}")
        return removed_count

    def _collapse_edges(self, should_collapse: Callable[[int], bool], description: str) -> int:
        edges_to_collapse = []
        for edge_id in self.graph.edges():
            source_degree = self.graph.degree(self.graph.source(edge_id))
            target_degree = self.graph.degree(self.graph.target(edge_id))
            if should_collapse(edge_id) and source_degree != 1 and target_degree != 1:
                edges_to_collapse.append(edge_id)

        logger.debug(f"Found {len(edges_to_collapse)} edges {description} to collapse")

        removed_count = 0
        for edge_id in edges_to_collapse:
            if not self.graph.has_edge(edge_id):
                continue
            try:
                result = self.modifier.collapse_edge(edge_id, CollapseOption.MIDPOINT)
            except DomainError as e:
                logger.warning(f"Skipping edge {edge_id}: {e}")
                continue
            removed_count += len(result.removed_vertices)

        logger.info(f"Collapsed edges {description}, removed {removed_count} vertices")
        return removed_count
