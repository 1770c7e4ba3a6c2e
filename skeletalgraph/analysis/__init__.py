"""
Graph analysis modules for skeletal graphs.

This module contains classes for shortest path search, connectivity analysis
and cycle detection.
"""

from .pathfinding import PathFinder
from .detection import CycleAnalyzer

__all__ = ['PathFinder', 'CycleAnalyzer']
