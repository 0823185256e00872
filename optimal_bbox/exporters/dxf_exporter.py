"""
DXF output of an oriented box using ezdxf.
The box is written as a MESH entity: 8 vertices, 6 quad faces.
"""
from pathlib import Path

import ezdxf
import numpy as np

from ..postprocess import HEXAHEDRON_FACES


def add_hexahedron(msp, corners, layer: str = "OBB"):
    """Add the box with the given 8 ordered corners to a layout; returns the MESH."""
    corners = np.asarray(corners, dtype=float)
    if corners.shape != (8, 3):
        raise ValueError(f"A hexahedron needs 8 corners of 3 coordinates, got {corners.shape}")

    mesh = msp.add_mesh(dxfattribs={"layer": layer})
    with mesh.edit_data() as data:
        data.vertices = [tuple(float(v) for v in p) for p in corners]
        data.faces = [list(face) for face in HEXAHEDRON_FACES]
    return mesh


def export_dxf(corners, output_path: Path, layer: str = "OBB") -> None:
    doc = ezdxf.new("R2010")
    doc.header["$LUNITS"] = 2    # decimal
    msp = doc.modelspace()

    add_hexahedron(msp, corners, layer)

    corners = np.asarray(corners, dtype=float)
    doc.header["$EXTMIN"] = tuple(float(v) for v in corners.min(axis=0))
    doc.header["$EXTMAX"] = tuple(float(v) for v in corners.max(axis=0))

    doc.saveas(str(output_path))
