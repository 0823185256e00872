"""
Turn the best rotation into the eight corners of the oriented box.

The points are rotated into the candidate frame, their axis-aligned box is
taken there, and its corners are rotated back with the transpose.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .geometry import Point3, bounds, rotate, to_points

# Corner i uses the upper bound on axis k when _CORNER_SELECT[i][k] is 1
_CORNER_SELECT = np.array([
    [0, 0, 0],
    [1, 0, 0],
    [1, 1, 0],
    [0, 1, 0],
    [0, 1, 1],
    [0, 0, 1],
    [1, 0, 1],
    [1, 1, 1],
], dtype=bool)

HEXAHEDRON_EDGES = (
    (0, 1), (1, 2), (2, 3), (3, 0),
    (5, 6), (6, 7), (7, 4), (4, 5),
    (0, 5), (1, 6), (2, 7), (3, 4),
)

# Counter-clockwise seen from outside
HEXAHEDRON_FACES = (
    (0, 3, 2, 1),
    (5, 6, 7, 4),
    (0, 1, 6, 5),
    (3, 4, 7, 2),
    (0, 5, 4, 3),
    (1, 2, 7, 6),
)


@dataclass(frozen=True, eq=False)
class OrientedBox:
    """Oriented box: corners in the input frame plus the frame they came from."""
    corners: np.ndarray   # (8, 3), input frame
    rotation: np.ndarray  # (3, 3)
    lower: np.ndarray     # box minimum in the rotated frame
    upper: np.ndarray     # box maximum in the rotated frame

    @property
    def extents(self) -> np.ndarray:
        return self.upper - self.lower

    @property
    def volume(self) -> float:
        return float(np.prod(self.extents))

    @property
    def center(self) -> np.ndarray:
        return ((self.lower + self.upper) / 2.0) @ self.rotation

    def as_points(self) -> List[Point3]:
        return to_points(self.corners)

    def contains(self, points, atol: float = 1e-9) -> bool:
        local = rotate(np.asarray(points, dtype=float), self.rotation)
        tol = atol * max(1.0, float(np.max(np.abs(self.upper))), float(np.max(np.abs(self.lower))))
        return bool(np.all(local >= self.lower - tol) and np.all(local <= self.upper + tol))


def box_corners(lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """Eight corners of an axis-aligned box in the fixed corner order."""
    return np.where(_CORNER_SELECT, upper, lower)


def post_process(points: np.ndarray, rotation: np.ndarray,
                 out: Optional[np.ndarray] = None) -> OrientedBox:
    """
    Oriented box of `points` in the frame given by `rotation`.

    If `out` is given it must be an (8, 3) float array; the corners are also
    written into it.
    """
    if out is not None and np.shape(out) != (8, 3):
        raise ValueError(f"Output storage must have shape (8, 3), got {np.shape(out)}")
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 3 or len(points) < 3:
        raise ValueError(f"Expected at least 3 points of shape (n, 3), got {points.shape}")

    lower, upper = bounds(rotate(points, rotation))
    # R is orthonormal, so R.T undoes it; row vectors therefore multiply by R
    corners = box_corners(lower, upper) @ rotation

    if out is not None:
        out[...] = corners
    return OrientedBox(corners=corners, rotation=np.array(rotation), lower=lower, upper=upper)
