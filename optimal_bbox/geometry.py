"""
Geometry primitives: points, point matrices and rotation matrices.

Rotations are plain (3, 3) float arrays acting on column vectors, so a point
cloud stored row-wise is rotated with `points @ R.T`. Any arithmetic on
rotation matrices (blending, perturbing, simplex moves) must be followed by
`nearest_orthonormal` before the result is used.
"""
from __future__ import annotations

from typing import List, NamedTuple, Tuple

import numpy as np

# Relative size of QR's smallest pivot below which the SVD path is taken
RANK_EPS = 1e-6


class Point3(NamedTuple):
    x: float
    y: float
    z: float


def as_point_matrix(points, min_points: int = 3) -> np.ndarray:
    """
    Convert a sequence of Point3 / 3-sequences or an (n, 3) array to a fresh
    float64 (n, 3) array, checking the preconditions of the optimizer.
    """
    try:
        mat = np.array(points, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Points must be 3D coordinates: {e}") from e

    if mat.ndim != 2 or mat.shape[1] != 3:
        raise ValueError(f"Points must have shape (n, 3), got {mat.shape}")
    if mat.shape[0] < min_points:
        raise ValueError(
            f"At least {min_points} points are required, got {mat.shape[0]}"
        )
    if not np.all(np.isfinite(mat)):
        raise ValueError("Points contain NaN or infinite coordinates")
    return mat


def to_points(mat: np.ndarray) -> List[Point3]:
    return [Point3(float(x), float(y), float(z)) for x, y, z in mat]


def nearest_orthonormal(m) -> np.ndarray:
    """
    Project a 3x3 matrix onto the rotation group.

    Uses a QR decomposition with the signs of R's diagonal folded into Q, which
    returns `m` itself when it already is orthonormal. Rank-deficient input goes
    through the SVD polar factor `U @ Vt` instead. A reflection (det = -1) is
    turned into a rotation by negating the last row; that flips one axis of the
    rotated frame and leaves every bounding box volume unchanged.
    """
    m = np.asarray(m, dtype=float)
    if m.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")

    scale = np.max(np.abs(m)) if np.all(np.isfinite(m)) else 0.0
    if scale == 0.0:
        return np.eye(3)

    q, r = np.linalg.qr(m)
    diag = np.diag(r)
    if np.min(np.abs(diag)) > RANK_EPS * scale:
        q = q * np.where(diag < 0, -1.0, 1.0)
    else:
        u, _, vt = np.linalg.svd(m)
        q = u @ vt

    if np.linalg.det(q) < 0:
        q = q.copy()
        q[2] *= -1.0
    return q


def is_rotation(m, atol: float = 1e-8) -> bool:
    """True if `m` is orthonormal with determinant +1 (within atol)."""
    m = np.asarray(m, dtype=float)
    if m.shape != (3, 3) or not np.all(np.isfinite(m)):
        return False
    return bool(
        np.allclose(m.T @ m, np.eye(3), atol=atol)
        and abs(np.linalg.det(m) - 1.0) <= atol
    )


def random_rotation(rng: np.random.Generator) -> np.ndarray:
    """Uniformly distributed rotation (QR of a Gaussian matrix)."""
    return nearest_orthonormal(rng.standard_normal((3, 3)))


def axis_rotation(axis: int, angle: float) -> np.ndarray:
    """Rotation by `angle` radians about coordinate axis 0, 1 or 2."""
    c, s = np.cos(angle), np.sin(angle)
    i, j = [(1, 2), (2, 0), (0, 1)][axis]
    rot = np.eye(3)
    rot[i, i] = c
    rot[i, j] = -s
    rot[j, i] = s
    rot[j, j] = c
    return rot


def principal_axes(points: np.ndarray) -> np.ndarray:
    """Rotation whose rows are the principal axes of the point cloud."""
    centered = points - points.mean(axis=0)
    cov = centered.T @ centered / max(len(points) - 1, 1)
    eigenvalues, eigenvectors = np.linalg.eigh(cov)
    idx = np.argsort(eigenvalues)[::-1]
    return nearest_orthonormal(eigenvectors[:, idx].T)


def rotate(points: np.ndarray, rotation: np.ndarray) -> np.ndarray:
    """Apply `rotation` to every row of `points`."""
    return points @ rotation.T


def bounds(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Componentwise (min, max) of a point matrix."""
    return points.min(axis=0), points.max(axis=0)
