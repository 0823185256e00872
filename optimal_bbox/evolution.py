"""
Evolution driver: genetic step, then Nelder-Mead on every member, then the
stopping rule, once per generation.

The run stops when the best fitness has stalled (relative change below
`stall_tolerance`) for `stall_generations` consecutive generations, or after
`max_generations`. Relative change keeps the rule independent of the scale of
the point cloud.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .config import OBBConfig
from .fitness import FitnessTable
from .geometry import principal_axes
from .nelder_mead import refine
from .population import Population, genetic_step

logger = logging.getLogger(__name__)


@dataclass
class EvolutionResult:
    rotation: np.ndarray
    fitness: float
    generations: int
    history: List[float] = field(default_factory=list)
    stopped_early: bool = False


def relative_improvement(previous: Optional[float], current: float) -> float:
    """
    |current - previous| / current.

    There is no previous value on the first generation, which counts as an
    improvement. Two zero volumes in a row are no improvement; dropping to
    zero from a positive volume is.
    """
    if previous is None:
        return float("inf")
    if current == 0.0:
        return 0.0 if previous == 0.0 else float("inf")
    return abs(current - previous) / current


def _refine_all(population: Population, points: np.ndarray, config: OBBConfig,
                executor: Optional[ThreadPoolExecutor]) -> FitnessTable:
    """Refine every member; the table holds the refined members and their fitness."""
    def work(rotation):
        return refine(rotation, points, config.refine_iterations,
                      config.simplex_step, config.simplex_ftol)

    if executor is None:
        refined = [work(r) for r in population]
    else:
        # map() keeps member order and the list is complete only once every member is refined
        refined = list(executor.map(work, population))
    return FitnessTable([r for r, _ in refined],
                        np.array([v for _, v in refined], dtype=float))


def evolve(
    points: np.ndarray,
    config: Optional[OBBConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> EvolutionResult:
    """Search for the rotation minimizing the axis-aligned box volume of `points`."""
    config = config or OBBConfig()
    if rng is None:
        rng = np.random.default_rng(config.seed)

    points = np.array(points, dtype=float)
    points.setflags(write=False)

    seeds = [np.eye(3)]
    if config.seed_principal_axes:
        seeds.append(principal_axes(points))
    population = Population.random(config.population_size, rng, seeds)

    executor = ThreadPoolExecutor(max_workers=config.workers) if config.workers > 1 else None
    history: List[float] = []
    previous: Optional[float] = None
    stall = 0
    stopped_early = False

    try:
        for generation in range(config.max_generations):
            population = genetic_step(population, points, rng, config)
            table = _refine_all(population, points, config, executor)
            population = Population(table.candidates)

            best_value = table.best_value
            history.append(best_value)

            if relative_improvement(previous, best_value) < config.stall_tolerance:
                stall += 1
            else:
                stall = 0
            logger.debug("Generation %d: best volume %.6g (stall %d)",
                         generation, best_value, stall)

            if stall >= config.stall_generations:
                stopped_early = True
                break
            previous = best_value
    finally:
        if executor is not None:
            executor.shutdown()

    logger.info("Evolution finished after %d generation(s), best volume %.6g",
                len(history), table.best_value)
    return EvolutionResult(
        rotation=table.best(),
        fitness=table.best_value,
        generations=len(history),
        history=history,
        stopped_early=stopped_early,
    )
