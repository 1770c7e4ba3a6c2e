"""
PySkeletalGraph - Curve-Skeleton Graph Editing Library

A Python library for building, editing and analyzing the curve-skeleton of a
3D shape: a directed multigraph whose vertices are joints with a radius and
whose edges are deformable space curves. Supports structural edits (split,
cut, collapse, merge, path joining), shortest paths, connected components,
cycle detection and batch simplification.

Main Classes:
    pyskeletalgraph: Main class for skeletal graph editing (facade)
    SkeletonGraph: Graph store with stable integer descriptors
    pyvertex: Joint of the skeleton
    pyedge: Directed edge carrying a curve
    pycurve: Deformable point + tangent curve

Example:
    >>> from skeletalgraph import pyskeletalgraph, pyvertex
    >>> graph = pyskeletalgraph()
    >>> a = graph.add_vertex(pyvertex((0, 0, 0)))
    >>> b = graph.add_vertex(pyvertex((1, 0, 0)))
    >>> edge = graph.add_edge(a, b)
    >>> graph.find_cycles()
"""

__version__ = "0.1.0"

from skeletalgraph.classes.vertex import pyvertex
from skeletalgraph.classes.edge import pyedge
from skeletalgraph.classes.curve import pycurve
from skeletalgraph.classes.results import CollapseOption, GraphOperationResult
from skeletalgraph.config import GraphSettings
from skeletalgraph.core.graph import SkeletonGraph
from skeletalgraph.core.skeletalgraph import pyskeletalgraph
from skeletalgraph.exceptions import (
    SkeletalGraphError,
    DomainError,
    NoPathError,
    InvariantBreachError,
    StaleDescriptorError,
)
from skeletalgraph.logging_config import setup_logging

__all__ = [
    'pyskeletalgraph',
    'SkeletonGraph',
    'pyvertex',
    'pyedge',
    'pycurve',
    'CollapseOption',
    'GraphOperationResult',
    'GraphSettings',
    'SkeletalGraphError',
    'DomainError',
    'NoPathError',
    'InvariantBreachError',
    'StaleDescriptorError',
    'setup_logging',
]
