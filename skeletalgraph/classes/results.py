"""
Result records describing the side effects of structural graph operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CollapseOption(Enum):
    """Which end of a collapsed edge survives, and where it ends up."""
    SOURCE = "source"
    TARGET = "target"
    MIDPOINT = "midpoint"


@dataclass
class GraphOperationResult:
    """Vertices and edges added and removed by one structural operation."""
    added_vertices: List[int] = field(default_factory=list)
    added_edges: List[int] = field(default_factory=list)
    removed_vertices: List[int] = field(default_factory=list)
    removed_edges: List[int] = field(default_factory=list)

    def merge(self, other: "GraphOperationResult") -> "GraphOperationResult":
        """Fold the effects of a later operation into this one."""
        self.added_vertices.extend(other.added_vertices)
        self.added_edges.extend(other.added_edges)
        self.removed_vertices.extend(other.removed_vertices)
        self.removed_edges.extend(other.removed_edges)
        return self
