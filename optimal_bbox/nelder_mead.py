"""
Local refinement of one candidate rotation with a Nelder-Mead simplex.

The simplex has four vertices, each a rotation matrix: the candidate itself
plus the candidate turned by `step` radians about each coordinate axis. Moves
are computed in matrix space and every new vertex is projected back onto the
rotation group before it is scored, so the simplex never leaves SO(3).
"""
from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from .config import DEFAULT_REFINE_ITERATIONS, DEFAULT_SIMPLEX_FTOL, DEFAULT_SIMPLEX_STEP
from .fitness import compute_fitness
from .geometry import axis_rotation, nearest_orthonormal

logger = logging.getLogger(__name__)

REFLECTION = 1.0
EXPANSION = 2.0
CONTRACTION = 0.5
SHRINK = 0.5


def _along(origin: np.ndarray, vertex: np.ndarray, coeff: float) -> np.ndarray:
    """origin + coeff * (vertex - origin), projected back to a rotation."""
    return nearest_orthonormal(origin + coeff * (vertex - origin))


def initial_simplex(rotation: np.ndarray, step: float = DEFAULT_SIMPLEX_STEP) -> List[np.ndarray]:
    vertices = [np.array(rotation, dtype=float)]
    for axis in range(3):
        vertices.append(nearest_orthonormal(axis_rotation(axis, step) @ rotation))
    return vertices


def refine(
    rotation: np.ndarray,
    points: np.ndarray,
    iterations: int = DEFAULT_REFINE_ITERATIONS,
    step: float = DEFAULT_SIMPLEX_STEP,
    ftol: float = DEFAULT_SIMPLEX_FTOL,
) -> Tuple[np.ndarray, float]:
    """
    Run at most `iterations` Nelder-Mead moves starting around `rotation`.

    Returns (best rotation, its fitness). The candidate is a vertex of the
    starting simplex and the best vertex is never replaced by a worse one, so
    the result is at least as good as the input.
    """
    simplex = initial_simplex(rotation, step)
    values = [compute_fitness(v, points) for v in simplex]

    for it in range(iterations):
        order = np.argsort(values, kind="stable")
        simplex = [simplex[i] for i in order]
        values = [values[i] for i in order]

        if values[-1] - values[0] <= ftol * abs(values[0]):
            logger.debug("Simplex converged after %d iterations", it)
            break

        centroid = sum(simplex[:-1]) / (len(simplex) - 1)
        worst = simplex[-1]

        reflected = _along(centroid, worst, -REFLECTION)
        f_reflected = compute_fitness(reflected, points)

        if f_reflected < values[0]:
            expanded = _along(centroid, worst, -REFLECTION * EXPANSION)
            f_expanded = compute_fitness(expanded, points)
            if f_expanded < f_reflected:
                simplex[-1], values[-1] = expanded, f_expanded
            else:
                simplex[-1], values[-1] = reflected, f_reflected
            continue

        if f_reflected < values[-2]:
            simplex[-1], values[-1] = reflected, f_reflected
            continue

        if f_reflected < values[-1]:
            contracted = _along(centroid, worst, -REFLECTION * CONTRACTION)
            f_contracted = compute_fitness(contracted, points)
            accept = f_contracted <= f_reflected
        else:
            contracted = _along(centroid, worst, CONTRACTION)
            f_contracted = compute_fitness(contracted, points)
            accept = f_contracted < values[-1]

        if accept:
            simplex[-1], values[-1] = contracted, f_contracted
            continue

        # Shrink every vertex towards the best one
        best = simplex[0]
        for i in range(1, len(simplex)):
            simplex[i] = _along(best, simplex[i], SHRINK)
            values[i] = compute_fitness(simplex[i], points)

    i_best = int(np.argmin(values))
    return simplex[i_best], values[i_best]
