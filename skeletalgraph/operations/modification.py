"""
Geometric and local structural modifications of skeletal graphs.

This module provides operations that move vertices, deform edges and split,
cut, collapse or merge individual elements.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..classes.curve import pycurve, normalize
from ..classes.vertex import pyvertex
from ..classes.results import CollapseOption, GraphOperationResult
from ..config import GraphSettings
from ..core.graph import SkeletonGraph
from ..exceptions import DomainError, InvariantBreachError

logger = logging.getLogger(__name__)


class GraphModifier:
    """
    Handles local graph modification operations.

    This class provides methods for:
    - Moving vertices while keeping incident curves attached
    - Splitting and cutting edges
    - Collapsing edges and merging vertices
    - Deforming, translating and scaling curves
    """

    def __init__(self, graph: SkeletonGraph, settings: Optional[GraphSettings] = None):
        """
        Initialize the graph modifier.

        Args:
            graph: SkeletonGraph instance to modify
            settings: Tuning parameters; defaults if None
        """
        self.graph = graph
        self.settings = settings if settings is not None else GraphSettings()

    def update_vertex_position(self, vertex_id: Optional[int], position,
                               maintain_shape: Optional[bool] = None) -> bool:
        """
        Move a vertex and drag the ends of its incident curves along.

        Each curve is first deformed locally around its end point; curves too
        short for that are deformed elastically over their whole length.

        Args:
            vertex_id: Vertex to move
            position: New 3D position
            maintain_shape: Keep the curve shape rigid near the moved tip
                during elastic deformation; the configured default if None

        Returns:
            False if the vertex is null or an incident curve could not follow
        """
        if vertex_id is None:
            return False
        if maintain_shape is None:
            maintain_shape = self.settings.maintain_shape_around_tip

        position = np.asarray(position, dtype=float)
        self.graph.get_vertex(vertex_id).position = position.copy()
        window = self.settings.deformation_window

        for edge_id in self.graph.in_edges(vertex_id):
            curve = self.graph.get_edge(edge_id).pCurve
            if not curve.deform_at(curve.size() - 1, position, window):
                if not curve.pseudo_elastic_deform(False, position, maintain_shape):
                    return False

        for edge_id in self.graph.out_edges(vertex_id):
            curve = self.graph.get_edge(edge_id).pCurve
            if not curve.deform_at(0, position, window):
                if not curve.pseudo_elastic_deform(True, position, maintain_shape):
                    return False

        return True

    def get_edge_radius(self, edge_id: int, segment_index: int) -> float:
        """
        Interpolate a radius along an edge from its end vertex radii.

        The radius goes linearly from the harmonic mean of both radii at the
        source to the target radius at the last point.
        """
        r1 = self.graph.get_edge_source(edge_id).dRadius
        r2 = self.graph.get_edge_target(edge_id).dRadius
        r_start = (2.0 * r1 * r2) / (r1 + r2)
        r_end = r2

        n = self.graph.get_edge(edge_id).nPoint
        segment_index = min(segment_index, n - 1)

        return (1.0 - segment_index / (n - 1)) * (r_start - r_end) + r_end

    def split_edge_at(self, edge_id: int, segment_index: int, position) -> Tuple[int, Tuple[int, int]]:
        """
        Insert a new vertex on segment ``segment_index`` of an edge.

        Args:
            edge_id: Edge to split
            segment_index: Segment between curve points ``segment_index`` and ``segment_index + 1``
            position: Position of the new vertex

        Returns:
            (new vertex, (edge from the old source, edge to the old target))
        """
        edge = self.graph.get_edge(edge_id)
        curve = edge.pCurve
        n = curve.size()

        if segment_index < 0 or segment_index >= n - 1:
            raise DomainError(f"Cannot split edge {edge_id} at invalid segment index {segment_index}")

        position = np.asarray(position, dtype=float)
        radius = self.get_edge_radius(edge_id, segment_index)
        new_vertex = self.graph.add_vertex(pyvertex(position, radius))

        points = curve.aPoint
        tangents = curve.aTangent

        first_half = pycurve(
            np.vstack([points[:segment_index + 1], position]),
            np.vstack([tangents[:segment_index + 1], normalize(position - points[segment_index])]))
        if first_half.size() >= 3:
            first_half.aTangent[-2] = normalize(first_half.aPoint[-1] - first_half.aPoint[-3])

        second_half = pycurve(
            np.vstack([position, points[segment_index + 1:]]),
            np.vstack([normalize(points[segment_index + 1] - position), tangents[segment_index + 1:]]))
        if second_half.size() >= 3:
            second_half.aTangent[1] = normalize(second_half.aPoint[2] - second_half.aPoint[0])

        left_edge = self.graph.add_edge(edge.lVertexID_source, new_vertex, first_half)
        right_edge = self.graph.add_edge(new_vertex, edge.lVertexID_target, second_half)

        self.graph.get_edge(left_edge).iFlag_cycle = edge.iFlag_cycle
        self.graph.get_edge(right_edge).iFlag_cycle = edge.iFlag_cycle

        self.graph.remove_edge(edge_id)

        logger.debug(f"Split edge {edge_id} at segment {segment_index} into {left_edge} and {right_edge}")
        return new_vertex, (left_edge, right_edge)

    def cut_edge_at(self, edge_id: int, segment_index: int, position) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """
        Cut an edge open at a position, leaving two dangling tips.

        The tips are placed at the configured cut displacement from
        ``position``, towards the previous and the next curve point.

        Returns:
            ((left tip, right tip), (edge ending at the left tip, edge starting at the right tip))
        """
        curve = self.graph.get_edge(edge_id).pCurve
        if segment_index < 0 or segment_index >= curve.size() - 1:
            raise DomainError(f"Cannot cut edge {edge_id} at invalid segment index {segment_index}")

        position = np.asarray(position, dtype=float)
        displacement = self.settings.cut_displacement
        left_position = position + normalize(curve.aPoint[segment_index] - position) * displacement
        right_position = position + normalize(curve.aPoint[segment_index + 1] - position) * displacement

        right_vertex, (left_edge_tmp, right_edge) = self.split_edge_at(edge_id, segment_index, right_position)

        last_segment = self.graph.get_edge(left_edge_tmp).nPoint - 2
        left_vertex, (left_edge, middle_edge) = self.split_edge_at(left_edge_tmp, last_segment, left_position)

        self.graph.remove_edge(middle_edge)

        return (left_vertex, right_vertex), (left_edge, right_edge)

    def collapse_edge(self, edge_id: int, option: CollapseOption = CollapseOption.SOURCE) -> GraphOperationResult:
        """
        Contract an edge into a single vertex.

        The source is kept for SOURCE and MIDPOINT, the target for TARGET. The
        kept vertex moves to its own position, or to the midpoint. Every other
        edge of the dropped endpoint is re-routed onto the kept vertex, and
        direct parallel edges between the two endpoints are discarded.

        Returns:
            The dropped vertex, the edges removed with it and the re-routed edges
        """
        edge = self.graph.get_edge(edge_id)
        source_id = edge.lVertexID_source
        target_id = edge.lVertexID_target

        if source_id == target_id:
            raise DomainError(f"Cannot collapse self-loop edge {edge_id}")

        to_keep, to_remove = source_id, target_id
        if option == CollapseOption.TARGET:
            to_keep, to_remove = target_id, source_id

        keep_position = self.graph.get_vertex(to_keep).position
        if option == CollapseOption.MIDPOINT:
            new_position = (self.graph.get_vertex(source_id).position
                            + self.graph.get_vertex(target_id).position) * 0.5
        else:
            new_position = keep_position.copy()

        rerouted: List[Tuple[int, int, pycurve]] = []

        for in_edge in self.graph.in_edges(to_remove):
            if in_edge == edge_id:
                continue
            in_source = self.graph.source(in_edge)
            in_curve = self.graph.get_edge(in_edge).pCurve.copy()
            if in_source == to_keep:
                logger.warning(f"Dropping edge {in_edge} parallel to collapsed edge {edge_id}")
            elif in_source == to_remove:
                in_curve[0] = (new_position, normalize(in_curve.aPoint[1] - new_position))
                in_curve[-1] = (new_position, normalize(new_position - in_curve.aPoint[-2]))
                rerouted.append((to_keep, to_keep, in_curve))
            else:
                in_curve[-1] = (new_position, normalize(new_position - in_curve.aPoint[-2]))
                rerouted.append((in_source, to_keep, in_curve))

        for out_edge in self.graph.out_edges(to_remove):
            if out_edge == edge_id:
                continue
            out_target = self.graph.target(out_edge)
            if out_target == to_keep:
                logger.warning(f"Dropping edge {out_edge} parallel to collapsed edge {edge_id}")
            elif out_target != to_remove:
                out_curve = self.graph.get_edge(out_edge).pCurve.copy()
                out_curve[0] = (new_position, normalize(out_curve.aPoint[1] - new_position))
                rerouted.append((to_keep, out_target, out_curve))

        removed_edges = self.graph.remove_vertex(to_remove)

        if not np.allclose(keep_position, new_position):
            if not self.update_vertex_position(to_keep, new_position):
                raise InvariantBreachError(f"Could not move vertex {to_keep} while collapsing edge {edge_id}")

        added_edges = [self.graph.add_edge(new_source, new_target, new_curve)
                       for new_source, new_target, new_curve in rerouted]

        logger.debug(f"Collapsed edge {edge_id}: removed vertex {to_remove}, re-routed {len(added_edges)} edges")
        return GraphOperationResult(added_edges=added_edges,
                                    removed_vertices=[to_remove],
                                    removed_edges=removed_edges)

    def merge_vertices(self, vertex_one: int, vertex_two: int,
                       option: CollapseOption = CollapseOption.SOURCE) -> GraphOperationResult:
        """
        Merge two vertices by joining them with an edge and collapsing it.

        Args:
            vertex_one: Vertex kept for SOURCE and MIDPOINT
            vertex_two: Vertex kept for TARGET
            option: Which vertex survives and where

        Returns:
            The merged-away vertex, its removed edges and the re-routed edges
        """
        if vertex_one == vertex_two:
            raise DomainError(f"Cannot merge vertex {vertex_one} with itself")

        synthetic_edge = self.graph.add_edge(vertex_one, vertex_two)
        if synthetic_edge is None:
            raise DomainError(f"Could not merge vertices {vertex_one} and {vertex_two}")

        result = self.collapse_edge(synthetic_edge, option)
        result.removed_edges = [e for e in result.removed_edges if e != synthetic_edge]
        return result

    def deform_edge(self, edge_id: int, point_index: int, position) -> bool:
        """
        Move one point of an edge curve, dragging its neighbours along.

        Moving the first or last point moves the matching end vertex, so that
        every curve incident to it stays attached.
        """
        n = self.graph.get_edge(edge_id).nPoint
        if point_index < 0:
            point_index += n
        if point_index < 0 or point_index >= n:
            return False

        if point_index == 0:
            return self.update_vertex_position(self.graph.source(edge_id), position)
        if point_index == n - 1:
            return self.update_vertex_position(self.graph.target(edge_id), position)
        return self.graph.get_edge(edge_id).pCurve.deform_at(point_index, position, self.settings.deformation_window)

    def move_and_scale(self, displacement, scale_factor: float) -> None:
        """Translate the whole graph by ``displacement`` then scale it by ``scale_factor``."""
        displacement = np.asarray(displacement, dtype=float)

        for vertex_id in self.graph.vertices():
            vertex = self.graph.get_vertex(vertex_id)
            vertex.position = (vertex.position + displacement) * scale_factor

        for edge_id in self.graph.edges():
            curve = self.graph.get_edge(edge_id).pCurve
            curve.aPoint = (curve.aPoint + displacement) * scale_factor
            curve.update_tangents()
