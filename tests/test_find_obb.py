import itertools

import numpy as np
import pytest

from optimal_bbox import OBBConfig, Point3, find_obb, oriented_box

# Corner pairs parallel to each box axis, given the fixed corner order
AXIS_EDGES = (
    ((0, 1), (3, 2), (5, 6), (4, 7)),
    ((0, 3), (1, 2), (5, 4), (6, 7)),
    ((0, 5), (1, 6), (2, 7), (3, 4)),
)


def box_volume(corners):
    c = np.asarray(corners)
    return float(np.prod([np.linalg.norm(c[j] - c[i]) for (i, j), *_ in AXIS_EDGES]))


def assert_parallelepiped(corners, atol=1e-9):
    c = np.asarray(corners)
    directions = []
    for group in AXIS_EDGES:
        vectors = [c[j] - c[i] for i, j in group]
        for v in vectors[1:]:
            np.testing.assert_allclose(v, vectors[0], atol=atol)
        directions.append(vectors[0])
    for a, b in itertools.combinations(directions, 2):
        assert abs(np.dot(a, b)) <= atol * max(1.0, np.linalg.norm(a) * np.linalg.norm(b))


def test_unit_cube_returns_its_corners(unit_cube):
    corners = find_obb(unit_cube, config=OBBConfig(seed=0))
    assert len(corners) == 8
    assert all(isinstance(p, Point3) for p in corners)
    got = {tuple(np.round(p, 6) + 0.0) for p in corners}
    expected = {tuple(p) for p in unit_cube}
    assert got == expected
    assert box_volume(corners) == pytest.approx(1.0)


def test_accepts_point3_sequences(fast_config):
    pts = [Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0), Point3(0, 0, 1)]
    corners = find_obb(pts, config=fast_config)
    assert_parallelepiped(corners)
    box = oriented_box(pts, config=fast_config)
    assert box.contains(np.array(pts))


def test_random_cloud_box_is_valid_and_encloses(rng, fast_config):
    pts = rng.standard_normal((200, 3)) * [4.0, 2.0, 1.0]
    box = oriented_box(pts, config=fast_config)
    assert_parallelepiped(box.corners)
    assert box.contains(pts)
    aabb_volume = np.prod(pts.max(axis=0) - pts.min(axis=0))
    assert box.volume <= aabb_volume * (1 + 1e-9)


def test_axis_aligned_box_is_kept(box_cloud, fast_config):
    box = oriented_box(box_cloud, config=fast_config)
    assert box.volume == pytest.approx(6.0, rel=1e-6)


def test_rotation_invariance(box_cloud, fixed_rotation, fast_config):
    plain = oriented_box(box_cloud, config=fast_config)
    turned = oriented_box(box_cloud @ fixed_rotation.T, config=fast_config)
    assert turned.volume == pytest.approx(plain.volume, rel=5e-2)
    assert turned.contains(box_cloud @ fixed_rotation.T)


def test_convex_hull_gives_same_volume(box_cloud, fixed_rotation, fast_config):
    pts = box_cloud @ fixed_rotation.T
    with_hull = oriented_box(pts, use_convex_hull=True, config=fast_config)
    without_hull = oriented_box(pts, use_convex_hull=False, config=fast_config)
    assert with_hull.volume == pytest.approx(without_hull.volume, rel=5e-2)
    assert with_hull.contains(pts)


def test_flat_square_gives_flat_box(fast_config):
    square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    box = oriented_box(square, config=fast_config)
    assert box.volume == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(box.corners[:, 2], 0.0, atol=1e-9)
    assert box.contains(np.array(square, dtype=float))


def test_collinear_points_terminate_with_degenerate_box():
    line = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
    box = oriented_box(line, config=OBBConfig(population_size=10, seed=2))
    assert box.volume == 0.0
    assert box.contains(np.array(line, dtype=float))
    assert sorted(box.extents)[-1] == pytest.approx(2.0)


def test_collinear_hull_reduction_falls_back(fast_config):
    line = [(0, 0, 0), (1, 1, 1), (2, 2, 2), (3, 3, 3)]
    corners = find_obb(line, use_convex_hull=True, config=fast_config)
    assert len(corners) == 8


@pytest.mark.parametrize("points", [
    [],
    [(0, 0, 0)],
    [(0, 0, 0), (1, 1, 1)],
    [(0, 0), (1, 1), (2, 2)],
])
def test_precondition_violations(points):
    with pytest.raises(ValueError):
        find_obb(points)
