"""
Import a skeletal graph from the tag-delimited text format.

The reader tokenizes the document into tags and text runs, so both the
one-tag-per-line layout written by ``export_graph_to_file`` and compact layouts
with several tags per line are accepted. Malformed fields degrade to defaults
with a warning instead of aborting the load.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

import numpy as np

from ..classes.curve import pycurve
from ..classes.vertex import pyvertex
from ..config import GraphSettings
from ..core.graph import SkeletonGraph

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"<(/?)(\w+)>|([^<]+)")


def _tokenize(content: str) -> Iterator[Tuple[str, str]]:
    """Yield ("open", name), ("close", name) and ("text", stripped text) tokens."""
    for match in _TOKEN_PATTERN.finditer(content):
        closing, name, text = match.groups()
        if name is not None:
            yield ("close" if closing else "open"), name
        elif text.strip():
            yield "text", text.strip()


def _parse_vector(text: str) -> Optional[np.ndarray]:
    values = text.split()
    if len(values) != 3:
        return None
    try:
        return np.array([float(v) for v in values])
    except ValueError:
        return None


def import_graph_from_file(filename: str, graph: SkeletonGraph,
                           settings: Optional[GraphSettings] = None) -> float:
    """
    Read a graph from a text file into ``graph``.

    Args:
        filename: Path of the input file
        graph: Destination graph; vertices and edges are added to it
        settings: Provides the default and maximum vertex radius

    Returns:
        The scale stored in the file (1.0 if absent or malformed)

    Raises:
        ValueError: If ``graph`` is None
        OSError: If the file cannot be read
    """
    if graph is None:
        raise ValueError("Cannot import into a null graph")
    if settings is None:
        settings = GraphSettings()

    try:
        with open(filename, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Could not open {filename}, no graph was imported: {e}")
        raise

    scale = 1.0
    vertex_ids: List[int] = []
    stack: List[str] = []

    position = np.zeros(3)
    radius = settings.default_vertex_radius
    cycle = False
    source_index: Optional[int] = None
    target_index: Optional[int] = None
    curve_points: List[np.ndarray] = []

    for kind, value in _tokenize(content):
        if kind == "open":
            stack.append(value)
            if value == "vertex":
                position = np.zeros(3)
                radius = settings.default_vertex_radius
                cycle = False
            elif value == "edge":
                source_index = None
                target_index = None
                cycle = False
                curve_points = []
            continue

        if kind == "close":
            if not stack or stack[-1] != value:
                logger.warning(f"Unexpected closing tag </{value}> in {filename}")
                if value in stack:
                    del stack[stack.index(value):]
                continue
            stack.pop()

            if value == "vertex":
                vertex = pyvertex(position, radius, cycle, dRadius_max=settings.max_vertex_radius)
                vertex_ids.append(graph.add_vertex(vertex))
            elif value == "edge":
                _add_imported_edge(graph, vertex_ids, source_index, target_index, cycle, curve_points)
            continue

        field = stack[-1] if stack else None
        in_vertex = "vertex" in stack

        if field == "scale":
            try:
                scale = float(value)
            except ValueError:
                logger.warning(f"Could not read scale from '{value}'")
        elif field == "pos" and in_vertex:
            parsed = _parse_vector(value)
            if parsed is None:
                logger.warning(f"Could not read position from '{value}'")
                parsed = np.zeros(3)
            position = parsed
        elif field == "radius" and in_vertex:
            try:
                radius = float(value)
            except ValueError:
                logger.warning(f"Could not read radius from '{value}'")
                radius = settings.default_vertex_radius
        elif field == "cycle":
            try:
                cycle = int(value) != 0
            except ValueError:
                logger.warning(f"Could not read cycle flag from '{value}'")
                cycle = False
        elif field == "source":
            source_index = _parse_index(value, "source")
        elif field == "target":
            target_index = _parse_index(value, "target")
        elif field == "curve":
            for line in value.splitlines():
                point = _parse_vector(line)
                if point is None:
                    logger.warning(f"Could not read curve point from '{line.strip()}'")
                else:
                    curve_points.append(point)

    logger.info(f"Imported {graph.vertex_count()} vertices and {graph.edge_count()} edges from {filename}")
    return scale


def _parse_index(text: str, name: str) -> Optional[int]:
    try:
        return int(text)
    except ValueError:
        logger.warning(f"Could not read {name} index from '{text}'")
        return None


def _add_imported_edge(graph: SkeletonGraph, vertex_ids: List[int], source_index: Optional[int],
                       target_index: Optional[int], cycle: bool, curve_points: List[np.ndarray]) -> None:
    valid = range(len(vertex_ids))
    if source_index not in valid or target_index not in valid:
        logger.warning(f"Could not add edge with invalid vertex indices: {source_index}, {target_index}")
        return

    curve = None
    if len(curve_points) >= 2:
        curve = pycurve.from_points(curve_points)
    else:
        logger.warning(f"Edge {source_index} -> {target_index} has fewer than two curve points, "
                       f"using a straight curve")

    edge_id = graph.add_edge(vertex_ids[source_index], vertex_ids[target_index], curve)
    graph.get_edge(edge_id).iFlag_cycle = cycle
