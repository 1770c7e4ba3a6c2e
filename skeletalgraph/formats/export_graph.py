"""
Export a skeletal graph to the tag-delimited text format.
"""

import logging
from typing import Dict, List

from ..classes.curve import format_float, format_vector
from ..config import FLOAT_PRECISION
from ..core.graph import SkeletonGraph

logger = logging.getLogger(__name__)


def export_graph_to_file(graph: SkeletonGraph, filename: str, scale: float = 1.0,
                         precision: int = FLOAT_PRECISION) -> bool:
    """
    Write a graph to a text file.

    Vertices are written in insertion order and numbered from 0; edges refer
    to their endpoints by these numbers. The document is assembled in memory
    first, so a failure never leaves a partial file behind.

    Args:
        graph: Graph to export
        filename: Path of the output file
        scale: Scale factor stored in the header
        precision: Significant digits of the written floats

    Returns:
        True on success, False if an edge refers to an unknown vertex or the
        file cannot be written
    """
    lines: List[str] = [f"<scale>{format_float(scale, precision)}</scale>", "<vertices>"]
    vertex_index: Dict[int, int] = {}

    for index, vertex_id in enumerate(graph.vertices()):
        vertex = graph.get_vertex(vertex_id)
        lines.append("<vertex>")
        lines.append(f"<pos>{format_vector(vertex.position, precision)}</pos>")
        lines.append(f"<radius>{format_float(vertex.dRadius, precision)}</radius>")
        lines.append(f"<cycle>{int(vertex.iFlag_cycle)}</cycle>")
        lines.append("</vertex>")
        vertex_index[vertex_id] = index

    lines.append("</vertices>")
    lines.append("<edges>")

    for edge_id in graph.edges():
        edge = graph.get_edge(edge_id)
        if edge.lVertexID_source not in vertex_index or edge.lVertexID_target not in vertex_index:
            logger.error(f"Invalid edge {edge_id} found when trying to export graph to {filename}")
            return False

        lines.append("<edge>")
        lines.append(f"<source>{vertex_index[edge.lVertexID_source]}</source>")
        lines.append(f"<target>{vertex_index[edge.lVertexID_target]}</target>")
        lines.append(f"<cycle>{int(edge.iFlag_cycle)}</cycle>")
        lines.append("<curve>")
        lines.append(edge.pCurve.to_compact_string(precision).rstrip("\n"))
        lines.append("</curve>")
        lines.append("</edge>")

    lines.append("</edges>")

    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write("\n".join(line for line in lines if line) + "\n")
    except OSError as e:
        logger.error(f"Could not write graph to {filename}: {e}")
        return False

    logger.info(f"Exported {graph.vertex_count()} vertices and {graph.edge_count()} edges to {filename}")
    return True
