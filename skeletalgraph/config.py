"""
Configuration and constants for skeletal graph editing.

Module-level constants hold the library defaults. ``GraphSettings`` bundles the
tunable ones so a facade instance can be configured from a dict or JSON file.
"""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

DEFAULT_VERTEX_RADIUS = 1.0
MAX_ALLOWED_VERTEX_RADIUS = 10000.0

# Distance from the cut position to each tip created by cut_edge_at
DEFAULT_CUT_DISPLACEMENT = 1.0

# Arc length trimmed from each junction by split_path
DEFAULT_SPLIT_PATH_DISPLACEMENT = 1.0

# Number of neighbouring curve points dragged along by a localized deformation
DEFAULT_DEFORMATION_WINDOW = 3

# Edges whose curve has fewer points than this are "simple" (no interior points)
SIMPLE_EDGE_POINT_COUNT = 3

# Significant digits written by the text exporter
FLOAT_PRECISION = 9


@dataclass
class GraphSettings:
    """
    Tunable parameters of a skeletal graph.

    Attributes:
        default_vertex_radius: Radius given to vertices created without one
        max_vertex_radius: Radii above this value are capped on creation and import
        cut_displacement: Offset of each tip from the cut position in cut_edge_at
        split_path_displacement: Default arc length trimmed at junctions by split_path
        deformation_window: Points on each side moved by a localized deformation
        maintain_shape_around_tip: Default for update_vertex_position
        float_precision: Significant digits used when exporting
    """
    default_vertex_radius: float = DEFAULT_VERTEX_RADIUS
    max_vertex_radius: float = MAX_ALLOWED_VERTEX_RADIUS
    cut_displacement: float = DEFAULT_CUT_DISPLACEMENT
    split_path_displacement: float = DEFAULT_SPLIT_PATH_DISPLACEMENT
    deformation_window: int = DEFAULT_DEFORMATION_WINDOW
    maintain_shape_around_tip: bool = True
    float_precision: int = FLOAT_PRECISION

    def __post_init__(self):
        if self.max_vertex_radius <= 0:
            raise ValueError("max_vertex_radius must be positive")
        if self.deformation_window < 1:
            raise ValueError("deformation_window must be at least 1")
        if self.float_precision < 1:
            raise ValueError("float_precision must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSettings":
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "GraphSettings":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
