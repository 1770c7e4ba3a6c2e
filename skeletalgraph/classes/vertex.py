"""
Vertex (joint) of a skeletal graph.
"""

import logging
from typing import Optional

import numpy as np

from ..config import DEFAULT_VERTEX_RADIUS, MAX_ALLOWED_VERTEX_RADIUS

logger = logging.getLogger(__name__)


class pyvertex:
    """
    A joint of the curve-skeleton: a 3D position with a radius.

    Attributes:
        position: numpy array of shape (3,)
        dRadius: Joint radius, capped at ``dRadius_max``
        iFlag_cycle: True if the vertex lies on a cycle of the graph
        lVertexID: Descriptor assigned by the graph store, None until inserted
    """

    def __init__(self, position=(0.0, 0.0, 0.0), dRadius: float = DEFAULT_VERTEX_RADIUS,
                 iFlag_cycle: bool = False, dRadius_max: float = MAX_ALLOWED_VERTEX_RADIUS):
        self.position = np.array(position, dtype=float).reshape(3)
        if dRadius > dRadius_max:
            logger.warning(f"Vertex radius {dRadius} exceeds the maximum {dRadius_max}, capping it")
            dRadius = dRadius_max
        self.dRadius = float(dRadius)
        self.iFlag_cycle = bool(iFlag_cycle)
        self.lVertexID: Optional[int] = None

    def copy(self) -> "pyvertex":
        new_vertex = pyvertex(self.position.copy(), self.dRadius, self.iFlag_cycle, dRadius_max=float('inf'))
        new_vertex.lVertexID = self.lVertexID
        return new_vertex

    def calculate_distance(self, other: "pyvertex") -> float:
        return float(np.linalg.norm(self.position - other.position))

    def __repr__(self) -> str:
        return (f"pyvertex(id={self.lVertexID}, position={self.position.tolist()}, "
                f"radius={self.dRadius}, cycle={self.iFlag_cycle})")
