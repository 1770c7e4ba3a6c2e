"""
Text import and export of skeletal graphs.
"""

from .export_graph import export_graph_to_file
from .import_graph import import_graph_from_file

__all__ = ['export_graph_to_file', 'import_graph_from_file']
