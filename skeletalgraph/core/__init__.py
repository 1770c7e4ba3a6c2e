"""
Core graph data structures and management.

This module contains the fundamental graph store and the facade that wires
the analysis and operation components around it.
"""

from .graph import SkeletonGraph

__all__ = ['SkeletonGraph']
