"""
Convex hull reduction of the input cloud.

Only hull vertices can touch a bounding box, so optimizing on them gives the
same box with far fewer points per fitness evaluation.
"""
from __future__ import annotations

import logging

import numpy as np
from scipy.spatial import ConvexHull, QhullError

logger = logging.getLogger(__name__)


def convex_hull_vertices(points: np.ndarray) -> np.ndarray:
    """
    Hull vertices of `points` (order unspecified).

    Qhull cannot build a 3D hull of flat, collinear or tiny inputs; those are
    returned unchanged.
    """
    try:
        hull = ConvexHull(points)
    except QhullError as e:
        reason = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
        logger.warning("Convex hull failed (%s); using all %d points", reason, len(points))
        return np.array(points, dtype=float)

    logger.debug("Convex hull: %d of %d points kept", len(hull.vertices), len(points))
    return np.asarray(points, dtype=float)[hull.vertices]
