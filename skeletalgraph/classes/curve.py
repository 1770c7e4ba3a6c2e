"""
Deformable space curve carried by every skeletal graph edge.

A curve is an ordered sequence of (point, tangent) pairs stored as two (n, 3)
numpy arrays. The first and last points coincide with the positions of the
edge's source and target vertices; the graph keeps them anchored when vertices
move. Two deformation primitives are provided:

- ``deform_at``: localized, moves one point and drags a few neighbours along.
  It needs interior points to absorb the motion and fails otherwise.
- ``pseudo_elastic_deform``: relocates one end of the curve and spreads the
  displacement over the whole curve by arc length, the other end staying put.
  Always succeeds for curves with at least two points.
"""

import logging
from typing import Iterable, Iterator, NamedTuple, Sequence

import numpy as np

from ..config import DEFAULT_DEFORMATION_WINDOW, FLOAT_PRECISION

logger = logging.getLogger(__name__)


class PointTangent(NamedTuple):
    point: np.ndarray
    tangent: np.ndarray


def normalize(vector) -> np.ndarray:
    """Return the unit vector along ``vector``, or the zero vector for a null input."""
    v = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return np.zeros(3)
    return v / norm


def format_float(value: float, precision: int = FLOAT_PRECISION) -> str:
    return f"{float(value):.{precision}g}"


def format_vector(vector, precision: int = FLOAT_PRECISION) -> str:
    """Space separated compact representation of a 3D vector."""
    return " ".join(format_float(c, precision) for c in vector)


class pycurve:
    """
    Ordered point + tangent sequence.

    Args:
        aPoint: Sequence of 3D points, shape (n, 3)
        aTangent: Optional matching tangents; computed from the points if omitted
    """

    def __init__(self, aPoint=None, aTangent=None):
        if aPoint is None:
            self.aPoint = np.empty((0, 3), dtype=float)
        else:
            self.aPoint = np.array(aPoint, dtype=float).reshape(-1, 3)

        if aTangent is None:
            self.aTangent = np.zeros_like(self.aPoint)
            self.update_tangents()
        else:
            self.aTangent = np.array(aTangent, dtype=float).reshape(-1, 3)
            if self.aTangent.shape != self.aPoint.shape:
                raise ValueError(
                    f"Tangent array shape {self.aTangent.shape} does not match point array shape {self.aPoint.shape}")

    @classmethod
    def straight(cls, start, end) -> "pycurve":
        """Two-point curve from ``start`` to ``end`` with both tangents along the segment."""
        start = np.asarray(start, dtype=float)
        end = np.asarray(end, dtype=float)
        tangent = normalize(end - start)
        return cls([start, end], [tangent, tangent])

    @classmethod
    def from_points(cls, points: Iterable) -> "pycurve":
        return cls([np.asarray(p, dtype=float) for p in points])

    @classmethod
    def from_point_tangents(cls, point_tangents: Sequence[PointTangent]) -> "pycurve":
        if not point_tangents:
            return cls()
        return cls([pt[0] for pt in point_tangents], [pt[1] for pt in point_tangents])

    # ------------------------------------------------------------------
    # Sequence access
    # ------------------------------------------------------------------

    def size(self) -> int:
        return int(self.aPoint.shape[0])

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> PointTangent:
        return PointTangent(self.aPoint[index].copy(), self.aTangent[index].copy())

    def __setitem__(self, index: int, value) -> None:
        point, tangent = value
        self.aPoint[index] = np.asarray(point, dtype=float)
        self.aTangent[index] = np.asarray(tangent, dtype=float)

    def __iter__(self) -> Iterator[PointTangent]:
        for i in range(self.size()):
            yield self[i]

    def __repr__(self) -> str:
        return f"pycurve(size={self.size()}, length={self.length():.4g})"

    def front(self) -> PointTangent:
        return self[0]

    def after_front(self) -> PointTangent:
        return self[1]

    def back(self) -> PointTangent:
        return self[-1]

    def before_back(self) -> PointTangent:
        return self[-2]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def push_back(self, point_tangent) -> None:
        point, tangent = point_tangent
        self.aPoint = np.vstack([self.aPoint, np.asarray(point, dtype=float).reshape(1, 3)])
        self.aTangent = np.vstack([self.aTangent, np.asarray(tangent, dtype=float).reshape(1, 3)])

    def pop_back(self) -> PointTangent:
        if self.size() == 0:
            raise IndexError("pop_back from an empty curve")
        last = self.back()
        self.aPoint = self.aPoint[:-1].copy()
        self.aTangent = self.aTangent[:-1].copy()
        return last

    def trim_front(self, count: int) -> None:
        """Drop the first ``count`` points."""
        if count <= 0:
            return
        self.aPoint = self.aPoint[count:].copy()
        self.aTangent = self.aTangent[count:].copy()

    def append(self, other: "pycurve", skip_first: int = 0, reverse: bool = False) -> None:
        """
        Append the points of ``other`` to this curve.

        Args:
            other: Curve to append
            skip_first: Number of leading points of (possibly reversed) ``other`` to skip
            reverse: Append ``other`` in reverse order with flipped tangents
        """
        source = other.reversed() if reverse else other
        if skip_first >= source.size():
            return
        self.aPoint = np.vstack([self.aPoint, source.aPoint[skip_first:]])
        self.aTangent = np.vstack([self.aTangent, source.aTangent[skip_first:]])

    def reversed(self) -> "pycurve":
        """Copy running the other way; tangents are negated."""
        return pycurve(self.aPoint[::-1].copy(), -self.aTangent[::-1])

    def copy(self) -> "pycurve":
        return pycurve(self.aPoint.copy(), self.aTangent.copy())

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def length(self) -> float:
        """Arc length of the polyline through the curve points."""
        if self.size() < 2:
            return 0.0
        return float(np.linalg.norm(np.diff(self.aPoint, axis=0), axis=1).sum())

    def update_tangents(self) -> None:
        """Recompute all tangents: one-sided at the ends, central differences inside."""
        n = self.size()
        if n < 2:
            self.aTangent = np.zeros_like(self.aPoint)
            return

        tangents = np.empty_like(self.aPoint)
        tangents[0] = normalize(self.aPoint[1] - self.aPoint[0])
        tangents[-1] = normalize(self.aPoint[-1] - self.aPoint[-2])
        for i in range(1, n - 1):
            tangents[i] = normalize(self.aPoint[i + 1] - self.aPoint[i - 1])
        self.aTangent = tangents

    def deform_at(self, index: int, target_position, window: int = DEFAULT_DEFORMATION_WINDOW) -> bool:
        """
        Move the point at ``index`` to ``target_position``, dragging up to
        ``window`` interior neighbours on each side with linearly decreasing weight.

        End points other than ``index`` never move.

        Returns:
            False if the curve has no interior point or ``index`` is out of range
        """
        n = self.size()
        if n < 3:
            return False
        if index < 0:
            index += n
        if index < 0 or index >= n:
            return False

        target = np.asarray(target_position, dtype=float)
        displacement = target - self.aPoint[index]

        for j in range(max(0, index - window), min(n, index + window + 1)):
            if j == index or j == 0 or j == n - 1:
                continue
            weight = 1.0 - abs(j - index) / (window + 1)
            self.aPoint[j] += weight * displacement

        self.aPoint[index] = target
        self.update_tangents()
        return True

    def pseudo_elastic_deform(self, at_front: bool, target_position,
                              maintain_shape_around_tip: bool = True) -> bool:
        """
        Relocate one end of the curve, spreading the motion by arc length.

        Args:
            at_front: Move the first point if True, the last one otherwise
            target_position: New position of the moved end
            maintain_shape_around_tip: Use a cosine falloff, which moves the
                region near the tip almost rigidly, instead of a linear one

        Returns:
            False only for curves with fewer than two points
        """
        n = self.size()
        if n < 2:
            return False

        target = np.asarray(target_position, dtype=float)
        order = np.arange(n) if at_front else np.arange(n)[::-1]
        displacement = target - self.aPoint[order[0]]

        segment_lengths = np.linalg.norm(np.diff(self.aPoint[order], axis=0), axis=1)
        arc = np.concatenate(([0.0], np.cumsum(segment_lengths)))
        total = arc[-1]
        if total > 0.0:
            t = arc / total
        else:
            t = np.linspace(0.0, 1.0, n)

        if maintain_shape_around_tip:
            weights = 0.5 * (1.0 + np.cos(np.pi * t))
        else:
            weights = 1.0 - t

        self.aPoint[order] += weights[:, None] * displacement
        self.aPoint[order[0]] = target
        self.update_tangents()
        return True

    def to_compact_string(self, precision: int = FLOAT_PRECISION) -> str:
        """One "x y z" line per point."""
        return "".join(format_vector(p, precision) + "\n" for p in self.aPoint)
