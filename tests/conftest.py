import numpy as np
import pytest

from optimal_bbox.config import OBBConfig
from optimal_bbox.geometry import nearest_orthonormal


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fast_config():
    return OBBConfig(population_size=16, max_generations=25, seed=7)


@pytest.fixture
def unit_cube():
    return np.array(
        [[x, y, z] for x in (0.0, 1.0) for y in (0.0, 1.0) for z in (0.0, 1.0)]
    )


@pytest.fixture
def box_cloud():
    """Corners of a 3 x 2 x 1 box plus interior points."""
    gen = np.random.default_rng(42)
    extents = np.array([3.0, 2.0, 1.0])
    corners = np.array(
        [[x, y, z] for x in (0.0, 1.0) for y in (0.0, 1.0) for z in (0.0, 1.0)]
    ) * extents
    interior = gen.random((60, 3)) * extents
    return np.vstack([corners, interior])


@pytest.fixture
def fixed_rotation():
    return nearest_orthonormal(
        np.array([[0.8, -0.36, 0.48], [0.6, 0.48, -0.64], [0.0, 0.8, 0.6]])
    )
