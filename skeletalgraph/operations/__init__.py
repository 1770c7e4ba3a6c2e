"""
Graph operation modules for modifying and simplifying skeletal graphs.

This module contains classes that perform structural edits such as splitting,
collapsing and merging, and batch cleanup passes.
"""

from .modification import GraphModifier
from .topology import TopologyManager
from .simplification import GraphSimplifier

__all__ = ['GraphModifier', 'TopologyManager', 'GraphSimplifier']
