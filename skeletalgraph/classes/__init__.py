"""
Core data classes for skeletal graph representation.

This module contains the fundamental records used throughout the
skeletalgraph library.
"""

from .vertex import pyvertex
from .edge import pyedge
from .curve import pycurve, PointTangent
from .results import CollapseOption, GraphOperationResult

__all__ = [
    'pyvertex',
    'pyedge',
    'pycurve',
    'PointTangent',
    'CollapseOption',
    'GraphOperationResult',
]
