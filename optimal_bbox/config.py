"""
Tuning parameters for the oriented bounding box optimizer.

The defaults below are what `find_obb` uses when no configuration is passed.
Pass an `OBBConfig` to override any of them, e.g. for reproducible tests with
a smaller population.
"""
from __future__ import annotations

from dataclasses import dataclass, replace as _dc_replace
from typing import Optional

# -- Evolution --------------------------------------------------------------
DEFAULT_POPULATION_SIZE = 50
DEFAULT_MAX_GENERATIONS = 100
DEFAULT_STALL_TOLERANCE = 1e-2
DEFAULT_STALL_GENERATIONS = 5

# -- Nelder-Mead refinement ---------------------------------------------------
DEFAULT_REFINE_ITERATIONS = 20
DEFAULT_SIMPLEX_STEP = 0.25      # radians, size of the initial simplex
DEFAULT_SIMPLEX_FTOL = 1e-9

# -- Genetic operator ---------------------------------------------------------
DEFAULT_ELITE_COUNT = 2
DEFAULT_TOURNAMENT_SIZE = 3
DEFAULT_CROSSOVER_BIAS = 0.6     # weight given to the fitter parent
DEFAULT_MUTATION_RATE = 0.1
DEFAULT_MUTATION_SCALE = 0.2


@dataclass(frozen=True)
class OBBConfig:
    """All tunables of one optimization run."""
    population_size: int = DEFAULT_POPULATION_SIZE
    max_generations: int = DEFAULT_MAX_GENERATIONS
    refine_iterations: int = DEFAULT_REFINE_ITERATIONS
    stall_tolerance: float = DEFAULT_STALL_TOLERANCE
    stall_generations: int = DEFAULT_STALL_GENERATIONS

    simplex_step: float = DEFAULT_SIMPLEX_STEP
    simplex_ftol: float = DEFAULT_SIMPLEX_FTOL

    elite_count: int = DEFAULT_ELITE_COUNT
    tournament_size: int = DEFAULT_TOURNAMENT_SIZE
    crossover_bias: float = DEFAULT_CROSSOVER_BIAS
    mutation_rate: float = DEFAULT_MUTATION_RATE
    mutation_scale: float = DEFAULT_MUTATION_SCALE

    seed_principal_axes: bool = True
    workers: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ("population_size", "max_generations", "stall_generations",
                     "tournament_size", "workers"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.refine_iterations < 0:
            raise ValueError(
                f"refine_iterations must be >= 0, got {self.refine_iterations}"
            )
        if not 0 <= self.elite_count < self.population_size:
            raise ValueError(
                f"elite_count must be in [0, population_size), got {self.elite_count}"
            )
        for name in ("crossover_bias", "mutation_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.stall_tolerance < 0:
            raise ValueError(
                f"stall_tolerance must be >= 0, got {self.stall_tolerance}"
            )
        if self.simplex_step <= 0 or self.mutation_scale < 0:
            raise ValueError("simplex_step must be > 0 and mutation_scale >= 0")

    def replace(self, **changes) -> "OBBConfig":
        """Return a copy with the given fields changed (re-validated)."""
        return _dc_replace(self, **changes)
