"""Approximate minimum-volume oriented bounding boxes of 3D point sets."""
from .config import OBBConfig
from .geometry import Point3
from .main import find_obb, oriented_box
from .postprocess import OrientedBox

__all__ = ["OBBConfig", "OrientedBox", "Point3", "find_obb", "oriented_box"]
