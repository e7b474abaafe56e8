"""
This module implements the geometry of 3D periodic lattices:
lattice parameters (`Lattice`), their classification into crystal
systems (`CrystalSystem`, `PrincipalAxis`), unit cells in direct and
reciprocal space (`UnitCell`, `ReciprocalUnitCell`) and families of
lattice planes (`MillerPlane`).
"""

from .crystal_system import (
    build_lattice,
    build_lattice_from_metric_tensor,
    classify,
    crystal_system,
    principal_axis,
)
from .lattice import CrystalSystem, Lattice, PrincipalAxis
from .miller_plane import MillerPlane
from .unit_cell import CellGeometry, CellKind, ReciprocalUnitCell, UnitCell

__all__ = [
    "CellGeometry",
    "CellKind",
    "CrystalSystem",
    "Lattice",
    "MillerPlane",
    "PrincipalAxis",
    "ReciprocalUnitCell",
    "UnitCell",
    "build_lattice",
    "build_lattice_from_metric_tensor",
    "classify",
    "crystal_system",
    "principal_axis",
]
