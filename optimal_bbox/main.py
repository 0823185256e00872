"""
find_obb: approximate minimum-volume oriented bounding box of a 3D point set.

    >>> from optimal_bbox import find_obb
    >>> corners = find_obb([(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)])
    >>> len(corners)
    8

Pipeline: (optional) convex hull reduction -> genetic algorithm with
Nelder-Mead refinement over rotations -> axis-aligned box in the best frame,
rotated back into the input frame.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .config import OBBConfig
from .evolution import evolve
from .geometry import Point3, as_point_matrix
from .hull import convex_hull_vertices
from .postprocess import OrientedBox, post_process

logger = logging.getLogger(__name__)


def oriented_box(points, use_convex_hull: bool = False,
                 config: Optional[OBBConfig] = None) -> OrientedBox:
    """Like `find_obb`, but returns the box with its rotation and extents."""
    config = config or OBBConfig()
    pts = as_point_matrix(points)

    work = convex_hull_vertices(pts) if use_convex_hull else pts
    logger.info("Optimizing over %d of %d points", len(work), len(pts))

    result = evolve(work, config)
    # Corners come from all input points so the box encloses every one of them
    box = post_process(pts, result.rotation)
    logger.info("Oriented box extents %s, volume %.6g", box.extents, box.volume)
    return box


def find_obb(points, use_convex_hull: bool = False,
             config: Optional[OBBConfig] = None) -> List[Point3]:
    """
    Eight corners of an approximately minimal oriented bounding box.

    points          – at least 3 points (Point3, 3-sequences or an (n, 3) array)
    use_convex_hull – optimize on the hull vertices only
    config          – tuning parameters; `OBBConfig(seed=...)` for reproducible runs

    Raises ValueError for fewer than 3 points or malformed coordinates.
    """
    return oriented_box(points, use_convex_hull, config).as_points()
