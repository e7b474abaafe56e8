from .crystal import (
    CrystalSystem,
    Lattice,
    MillerPlane,
    PrincipalAxis,
    ReciprocalUnitCell,
    UnitCell,
)
from .errors import DegenerateLatticeError, DimensionMismatchError, InvalidLatticeError
from .linalg import get_backend

__all__ = [
    "CrystalSystem",
    "DegenerateLatticeError",
    "DimensionMismatchError",
    "InvalidLatticeError",
    "Lattice",
    "MillerPlane",
    "PrincipalAxis",
    "ReciprocalUnitCell",
    "UnitCell",
    "get_backend",
]
