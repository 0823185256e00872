"""
Population of candidate rotations and the genetic operator that evolves it.

One genetic step keeps the elite unchanged and fills the remaining slots with
children of tournament-selected parents. A child is a weighted blend of its
parents, re-orthonormalized, and occasionally perturbed by Gaussian noise
(again re-orthonormalized). All randomness comes from the Generator passed in.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

import numpy as np

from .config import OBBConfig
from .fitness import FitnessTable, evaluate
from .geometry import nearest_orthonormal, random_rotation

logger = logging.getLogger(__name__)


class Population:
    """Fixed-size, ordered collection of rotation matrices."""

    def __init__(self, members: Iterable[np.ndarray]):
        self._members: List[np.ndarray] = [np.asarray(m, dtype=float) for m in members]
        if not self._members:
            raise ValueError("A population needs at least one member")

    @classmethod
    def random(cls, size: int, rng: np.random.Generator,
               seeds: Iterable[np.ndarray] = ()) -> "Population":
        """`size` members: the seed rotations first, random rotations after."""
        members = [nearest_orthonormal(s) for s in seeds][:size]
        while len(members) < size:
            members.append(random_rotation(rng))
        return cls(members)

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, i: int) -> np.ndarray:
        return self._members[i]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._members)

    def fitness(self, points: np.ndarray) -> FitnessTable:
        return evaluate(self._members, points)


def _tournament(table: FitnessTable, size: int, rng: np.random.Generator) -> int:
    """Index of the fittest among `size` members drawn without replacement."""
    n = len(table.values)
    entrants = rng.choice(n, size=min(size, n), replace=False)
    return int(entrants[np.argmin(table.values[entrants])])


def align_rows(reference: np.ndarray, other: np.ndarray) -> np.ndarray:
    """
    Flip rows of `other` that point away from the matching row of `reference`.
    Flipping a row mirrors one axis of the rotated frame and does not change
    the bounding box volume.
    """
    signs = np.where(np.einsum("ij,ij->i", reference, other) < 0, -1.0, 1.0)
    return other * signs[:, None]


def crossover(fitter: np.ndarray, other: np.ndarray, bias: float) -> np.ndarray:
    blend = bias * fitter + (1.0 - bias) * align_rows(fitter, other)
    return nearest_orthonormal(blend)


def mutate(rotation: np.ndarray, scale: float, rng: np.random.Generator) -> np.ndarray:
    return nearest_orthonormal(rotation + scale * rng.standard_normal((3, 3)))


def genetic_step(
    population: Population,
    points: np.ndarray,
    rng: np.random.Generator,
    config: OBBConfig,
) -> Population:
    """Produce the next generation; its size equals the current one."""
    table = population.fitness(points)
    ranking = table.ranking()
    elite_count = min(config.elite_count, len(population) - 1)

    children = [population[i] for i in ranking[:elite_count]]
    mutations = 0
    while len(children) < len(population):
        a = _tournament(table, config.tournament_size, rng)
        b = _tournament(table, config.tournament_size, rng)
        if table.values[b] < table.values[a]:
            a, b = b, a
        child = crossover(population[a], population[b], config.crossover_bias)

        if rng.random() < config.mutation_rate:
            child = mutate(child, config.mutation_scale, rng)
            mutations += 1
        children.append(child)

    logger.debug(
        "Genetic step: kept %d elite, bred %d children (%d mutated)",
        elite_count, len(children) - elite_count, mutations,
    )
    return Population(children)
