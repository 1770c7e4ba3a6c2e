"""
Edge of a skeletal graph: a directed curve between two vertices.
"""

from typing import Optional

from .curve import pycurve


class pyedge:
    """
    Directed edge owning the curve that joins its two vertices.

    Attributes:
        lVertexID_source: Descriptor of the source vertex
        lVertexID_target: Descriptor of the target vertex
        pCurve: Curve whose first/last points sit on the source/target vertices
        iFlag_cycle: True if the edge lies on a cycle of the graph
        lEdgeID: Descriptor assigned by the graph store
    """

    def __init__(self, lVertexID_source: int, lVertexID_target: int, pCurve: pycurve,
                 iFlag_cycle: bool = False):
        self.lVertexID_source = lVertexID_source
        self.lVertexID_target = lVertexID_target
        self.pCurve = pCurve
        self.iFlag_cycle = bool(iFlag_cycle)
        self.lEdgeID: Optional[int] = None

    @property
    def nPoint(self) -> int:
        return self.pCurve.size()

    @property
    def dLength(self) -> float:
        return self.pCurve.length()

    def is_self_loop(self) -> bool:
        return self.lVertexID_source == self.lVertexID_target

    def __repr__(self) -> str:
        return (f"pyedge(id={self.lEdgeID}, {self.lVertexID_source} -> {self.lVertexID_target}, "
                f"points={self.nPoint}, cycle={self.iFlag_cycle})")
