"""
Fitness of a candidate rotation: the volume of the axis-aligned bounding box
of the rotated point cloud. Lower is better; zero (flat or collinear clouds)
is a valid value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .geometry import bounds, rotate


def compute_fitness(rotation: np.ndarray, points: np.ndarray) -> float:
    lower, upper = bounds(rotate(points, rotation))
    return float(np.prod(upper - lower))


@dataclass
class FitnessTable:
    """Fitness values index-aligned with the candidates they were computed for."""
    candidates: list
    values: np.ndarray

    @property
    def best_index(self) -> int:
        # argmin returns the first minimum, so earlier candidates win ties
        return int(np.argmin(self.values))

    @property
    def best_value(self) -> float:
        return float(self.values[self.best_index])

    def best(self) -> np.ndarray:
        return self.candidates[self.best_index]

    def ranking(self) -> np.ndarray:
        """Candidate indices sorted from best to worst (stable)."""
        return np.argsort(self.values, kind="stable")


def evaluate(candidates: Iterable[np.ndarray], points: np.ndarray) -> FitnessTable:
    candidates = list(candidates)
    values = np.array([compute_fitness(r, points) for r in candidates], dtype=float)
    return FitnessTable(candidates, values)
