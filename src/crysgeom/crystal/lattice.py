import enum
import logging
from typing import Optional

import numpy as np

from crysgeom import settings

LOG = logging.getLogger(__name__)


class CrystalSystem(enum.Enum):
    "Metric symmetry of a lattice"

    CUBIC = "cubic"
    RHOMBOHEDRAL = "rhombohedral"
    HEXAGONAL = "hexagonal"
    TETRAGONAL = "tetragonal"
    ORTHORHOMBIC = "orthorhombic"
    MONOCLINIC = "monoclinic"
    TRICLINIC = "triclinic"
    UNKNOWN = "unknown"


class PrincipalAxis(enum.Enum):
    "Highest symmetry axis of a lattice"

    A = "a"
    B = "b"
    C = "c"
    NONE = "none"


def _readonly(values) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


class Lattice:
    """
    Immutable holder for the six parameters of a periodic lattice.

    Lengths are in Angstroms, angles in degrees. The volume is optional
    and only known if it was supplied (e.g. recovered from a metric tensor).

    Attributes:
        lengths (np.ndarray): read-only array (a, b, c)
        angles (np.ndarray): read-only array (alpha, beta, gamma) in degrees
        angles_radians (np.ndarray): read-only array (alpha, beta, gamma) in radians
        volume (float or None): cell volume in cubic Angstroms, if known
        crystal_system (CrystalSystem): metric symmetry of the lattice
        principal_axis (PrincipalAxis): highest symmetry axis of the lattice
    """

    __slots__ = (
        "_lengths",
        "_angles",
        "_angles_radians",
        "_volume",
        "_crystal_system",
        "_principal_axis",
    )

    def __init__(
        self,
        a: float,
        b: float,
        c: float,
        alpha: float,
        beta: float,
        gamma: float,
        volume: Optional[float] = None,
        crystal_system: CrystalSystem = CrystalSystem.UNKNOWN,
        principal_axis: PrincipalAxis = PrincipalAxis.NONE,
    ):
        """
        Construct a lattice directly from its parameters. No classification
        is performed here, see `crysgeom.crystal.crystal_system.build_lattice`
        for a lattice with its crystal system and principal axis determined.

        Args:
            a, b, c (float): lattice lengths in Angstroms
            alpha, beta, gamma (float): lattice angles in degrees
            volume (float, optional): volume of the cell in cubic Angstroms
            crystal_system (CrystalSystem, optional): defaults to UNKNOWN
            principal_axis (PrincipalAxis, optional): defaults to NONE
        """
        object.__setattr__(self, "_lengths", _readonly((a, b, c)))
        object.__setattr__(self, "_angles", _readonly((alpha, beta, gamma)))
        object.__setattr__(self, "_angles_radians", _readonly(np.radians(self._angles)))
        object.__setattr__(self, "_volume", None if volume is None else float(volume))
        object.__setattr__(self, "_crystal_system", CrystalSystem(crystal_system))
        object.__setattr__(self, "_principal_axis", PrincipalAxis(principal_axis))

    @classmethod
    def from_parameters(cls, lengths, angles, volume=None, **kwargs):
        "Construct a lattice from the sequences (a, b, c) and (alpha, beta, gamma)"
        if len(lengths) != 3 or len(angles) != 3:
            raise ValueError("A lattice requires exactly three lengths and three angles")
        return cls(*lengths, *angles, volume=volume, **kwargs)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def lengths(self) -> np.ndarray:
        "Lattice lengths (a, b, c) in Angstroms"
        return self._lengths

    @property
    def angles(self) -> np.ndarray:
        "Lattice angles (alpha, beta, gamma) in degrees"
        return self._angles

    @property
    def angles_radians(self) -> np.ndarray:
        "Lattice angles (alpha, beta, gamma) in radians"
        return self._angles_radians

    @property
    def volume(self) -> Optional[float]:
        "Volume of the unit cell in cubic Angstroms, None if unknown"
        return self._volume

    @property
    def crystal_system(self) -> CrystalSystem:
        return self._crystal_system

    @property
    def principal_axis(self) -> PrincipalAxis:
        """
        The principal axis of this lattice e.g. for monoclinic cells
        the axis perpendicular to the plane containing the two 90 degree angles.
        """
        return self._principal_axis

    @property
    def a(self) -> float:
        "Length of lattice vector a"
        return float(self._lengths[0])

    @property
    def b(self) -> float:
        "Length of lattice vector b"
        return float(self._lengths[1])

    @property
    def c(self) -> float:
        "Length of lattice vector c"
        return float(self._lengths[2])

    @property
    def alpha(self) -> float:
        "Angle between lattice vectors b and c in degrees"
        return float(self._angles[0])

    @property
    def beta(self) -> float:
        "Angle between lattice vectors a and c in degrees"
        return float(self._angles[1])

    @property
    def gamma(self) -> float:
        "Angle between lattice vectors a and b in degrees"
        return float(self._angles[2])

    @property
    def alpha_radians(self) -> float:
        return float(self._angles_radians[0])

    @property
    def beta_radians(self) -> float:
        return float(self._angles_radians[1])

    @property
    def gamma_radians(self) -> float:
        return float(self._angles_radians[2])

    @property
    def parameters(self) -> np.ndarray:
        "single vector of lattice side lengths and angles in degrees"
        return np.hstack((self._lengths, self._angles))

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Lattice):
            return NotImplemented
        atol = settings.EQUALITY_ATOL
        return (
            _all_close(self._lengths, other._lengths, atol)
            and _all_close(self._angles, other._angles, atol)
            and _all_close(self._angles_radians, other._angles_radians, atol)
            and self._volume == other._volume
            and self._crystal_system is other._crystal_system
            and self._principal_axis is other._principal_axis
        )

    def __hash__(self):
        # parameters are tolerance-compared, so only the exact fields are hashed
        return hash((self._volume, self._crystal_system, self._principal_axis))

    def __repr__(self):
        a, b, c = self._lengths
        al, be, ga = self._angles
        return (
            f"<{self.__class__.__name__}: {self._crystal_system.value} "
            f"(a={a:.5f}, b={b:.5f}, c={c:.5f}, "
            f"alpha={al:.4f}, beta={be:.4f}, gamma={ga:.4f}, "
            f"volume={self._volume}, axis={self._principal_axis.value})>"
        )


def _all_close(one, two, atol) -> bool:
    "every element pair must lie within atol of each other"
    if one.shape != two.shape:
        return False
    return bool(np.all(np.abs(one - two) < atol))
