import enum
import logging
from typing import List

import numpy as np

from crysgeom import settings
from crysgeom.errors import DegenerateLatticeError, InvalidLatticeError
from crysgeom.linalg import get_backend
from crysgeom.util.num import (
    as_coordinates,
    as_matrix,
    as_vector,
    clipped_arccos,
    index_box,
)
from .crystal_system import (
    build_lattice,
    build_lattice_from_metric_tensor,
    classify,
    validate_parameters,
)
from .lattice import CrystalSystem, Lattice, PrincipalAxis
from .miller_plane import MillerPlane

LOG = logging.getLogger(__name__)


class CellKind(enum.Enum):
    "Which space a cell lives in"

    DIRECT = "direct"
    RECIPROCAL = "reciprocal"


def _readonly(arr) -> np.ndarray:
    arr = np.array(arr, dtype=np.float64)
    arr.setflags(write=False)
    return arr


def metric_tensor(lattice: Lattice, backend=None) -> np.ndarray:
    """
    Calculate the metric tensor G of a lattice, where G[i][i] = length_i^2
    and G[i][j] = length_i length_j cos(angle_k) for the angle k between
    lattice vectors i and j. Off-diagonal values smaller than
    ``settings.METRIC_ZERO_THRESHOLD`` are set to exactly zero.

    Args:
        lattice (Lattice): the lattice
        backend (str or LinearAlgebra, optional): linear algebra implementation

    Returns:
        np.ndarray: (3, 3) symmetric metric tensor
    """
    backend = get_backend(backend)
    lengths = lattice.lengths
    angles = lattice.angles_radians
    tensor = np.zeros((3, 3))
    for i in range(3):
        tensor[i, i] = lengths[i] ** 2
    for i in range(3):
        j = (i + 1) % 3
        k = (j + 1) % 3
        value = lengths[i] * lengths[j] * np.cos(angles[k])
        if abs(value) < settings.METRIC_ZERO_THRESHOLD:
            value = 0.0
        tensor[i, j] = value
        tensor[j, i] = value
    return backend.matrix(tensor)


def invert_metric_tensor(tensor, backend=None) -> np.ndarray:
    """
    Invert a metric tensor, i.e. move between direct and reciprocal space.

    Raises:
        DegenerateLatticeError: if the tensor is singular or not positive definite
    """
    backend = get_backend(backend)
    determinant = backend.determinant(tensor)
    scale = np.prod(np.diag(tensor))
    if not (scale > 0 and determinant > settings.SINGULAR_DETERMINANT_RTOL * scale):
        raise DegenerateLatticeError(
            f"Metric tensor is singular or not positive definite (det = {determinant})"
        )
    try:
        return backend.inverse(tensor)
    except np.linalg.LinAlgError as e:
        raise DegenerateLatticeError("Could not invert metric tensor") from e


class CellGeometry:
    """
    Geometry shared by direct and reciprocal unit cells. Everything
    here depends only on the lattice and the metric tensors, so it works
    for cells of either `CellKind`.
    """

    kind: CellKind
    _lattice: Lattice
    _metric_tensor: np.ndarray

    @property
    def lattice(self) -> Lattice:
        "The lattice parameters of this cell"
        return self._lattice

    @property
    def metric_tensor(self) -> np.ndarray:
        "The (3, 3) metric tensor G of this cell"
        return self._metric_tensor

    @property
    def reciprocal(self) -> "CellGeometry":
        raise NotImplementedError

    @property
    def backend(self):
        "The linear algebra implementation used by this cell"
        return self._backend

    @property
    def reciprocal_lattice(self) -> Lattice:
        return self.reciprocal.lattice

    @property
    def reciprocal_metric_tensor(self) -> np.ndarray:
        return self.reciprocal.metric_tensor

    @property
    def a(self) -> float:
        return self._lattice.a

    @property
    def b(self) -> float:
        return self._lattice.b

    @property
    def c(self) -> float:
        return self._lattice.c

    @property
    def alpha(self) -> float:
        "Angle between lattice vectors b and c in degrees"
        return self._lattice.alpha

    @property
    def beta(self) -> float:
        "Angle between lattice vectors a and c in degrees"
        return self._lattice.beta

    @property
    def gamma(self) -> float:
        "Angle between lattice vectors a and b in degrees"
        return self._lattice.gamma

    @property
    def a_star(self) -> float:
        return self.reciprocal_lattice.a

    @property
    def b_star(self) -> float:
        return self.reciprocal_lattice.b

    @property
    def c_star(self) -> float:
        return self.reciprocal_lattice.c

    @property
    def alpha_star(self) -> float:
        return self.reciprocal_lattice.alpha

    @property
    def beta_star(self) -> float:
        return self.reciprocal_lattice.beta

    @property
    def gamma_star(self) -> float:
        return self.reciprocal_lattice.gamma

    @property
    def volume(self) -> float:
        "The volume of the cell, sqrt(det(G))"
        return float(np.sqrt(self._backend.determinant(self._metric_tensor)))

    @property
    def crystal_system(self) -> CrystalSystem:
        return self._lattice.crystal_system

    @property
    def principal_axis(self) -> PrincipalAxis:
        return self._lattice.principal_axis

    @property
    def orthogonalization_matrix(self) -> np.ndarray:
        raise NotImplementedError

    @property
    def fractionalization_matrix(self) -> np.ndarray:
        raise NotImplementedError

    def orthogonalize(self, coords) -> np.ndarray:
        """
        Transform coordinates from fractional space (a, b, c)
        to Cartesian space (x, y, z). The x-direction will be aligned
        along lattice vector a.

        Args:
            coords (array_like): (3,) vector or (N, 3) array of fractional coordinates

        Returns:
            np.ndarray: Cartesian coordinates with the same shape as coords
        """
        coords = as_coordinates(coords, name="fractional coordinates")
        return self._backend.multiply(self.orthogonalization_matrix, coords.T).T

    def fractionalize(self, coords) -> np.ndarray:
        """
        Transform coordinates from Cartesian space (x, y, z)
        to fractional space (a, b, c). The x-direction is assumed
        to be aligned along lattice vector a.

        Args:
            coords (array_like): (3,) vector or (N, 3) array of Cartesian coordinates

        Returns:
            np.ndarray: fractional coordinates with the same shape as coords
        """
        coords = as_coordinates(coords, name="Cartesian coordinates")
        return self._backend.multiply(self.fractionalization_matrix, coords.T).T

    def _inner(self, u, v, tensor=None) -> float:
        if tensor is None:
            tensor = self._metric_tensor
        return float(np.dot(u, self._backend.multiply(tensor, v)))

    def calculate_length(self, vector) -> float:
        """
        Length of a vector given in fractional coordinates, sqrt(v.G.v).

        Args:
            vector (array_like): (3,) vector in fractional coordinates

        Returns:
            float: the length (Angstroms for a direct cell)
        """
        v = as_vector(vector, name="fractional vector")
        return float(np.sqrt(max(self._inner(v, v), 0.0)))

    def calculate_distance(self, site1, site2) -> float:
        "Distance between two sites given in fractional coordinates"
        return self.calculate_length(
            as_vector(site2, name="site2") - as_vector(site1, name="site1")
        )

    def calculate_angle(self, vector1, vector2, vector3=None) -> float:
        """
        With two arguments, the angle between two vectors given in
        fractional coordinates. With three, the angle at site2 between
        site1 and site3 (i.e. the angle between site2 - site1 and
        site2 - site3, c.f. a bond angle).

        Returns:
            float: the angle in radians
        """
        if vector3 is None:
            u = as_vector(vector1, name="vector1")
            v = as_vector(vector2, name="vector2")
        else:
            site2 = as_vector(vector2, name="site2")
            u = site2 - as_vector(vector1, name="site1")
            v = site2 - as_vector(vector3, name="site3")
        norm = self.calculate_length(u) * self.calculate_length(v)
        if norm == 0.0:
            raise ValueError("Cannot calculate an angle involving a zero length vector")
        return clipped_arccos(self._inner(u, v) / norm)

    def calculate_dihedral_angle(self, site1, site2, site3, site4) -> float:
        """
        Torsion angle between the plane through site1, site2, site3
        and the plane through site2, site3, site4, signed following the
        IUPAC convention.

        The plane normals are formed from cross products of fractional
        vectors, which yields their components along the reciprocal axes,
        so only the direct and reciprocal metric tensors are needed.

        Returns:
            float: the angle in radians, in (-pi, pi]
        """
        sites = [
            as_vector(s, name=f"site{i}")
            for i, s in enumerate((site1, site2, site3, site4), start=1)
        ]
        b1, b2, b3 = (sites[i + 1] - sites[i] for i in range(3))
        n1 = np.cross(b1, b2)
        n2 = np.cross(b2, b3)
        reciprocal_tensor = self.reciprocal_metric_tensor
        volume = self.volume
        b2_length = self.calculate_length(b2)
        if (
            b2_length == 0.0
            or self._inner(n1, n1, reciprocal_tensor) <= 0.0
            or self._inner(n2, n2, reciprocal_tensor) <= 0.0
        ):
            raise ValueError("Dihedral angle is undefined for collinear sites")
        x = volume * volume * self._inner(n1, n2, reciprocal_tensor)
        y = volume * self._inner(np.cross(n1, n2), b2) / b2_length
        return float(np.arctan2(y, x))

    @staticmethod
    def _miller_indices(plane) -> np.ndarray:
        indices = plane.indices if isinstance(plane, MillerPlane) else plane
        hkl = as_vector(indices, name="Miller indices")
        if not np.any(hkl):
            raise ValueError("d-spacing is undefined for the (0 0 0) reflection")
        return hkl

    def calculate_d_spacing(self, plane) -> float:
        """
        Interplanar spacing of a family of planes, from 1/d^2 = hkl.G*.hkl.

        Args:
            plane (MillerPlane or array_like): the planes, or their indices (h, k, l)

        Returns:
            float: the d-spacing (Angstroms for a direct cell)
        """
        hkl = self._miller_indices(plane)
        return float(1.0 / np.sqrt(self._inner(hkl, hkl, self.reciprocal_metric_tensor)))

    def calculate_d_spacings(self, hkl) -> np.ndarray:
        """
        Interplanar spacings for many families of planes at once.

        Args:
            hkl (array_like): (N, 3) array of Miller indices

        Returns:
            np.ndarray: (N,) array of d-spacings
        """
        hkl = as_coordinates(hkl, name="Miller indices").reshape(-1, 3)
        if np.any(np.all(hkl == 0, axis=1)):
            raise ValueError("d-spacing is undefined for the (0 0 0) reflection")
        inv_d2 = np.einsum("ij,jk,ik->i", hkl, self.reciprocal_metric_tensor, hkl)
        return 1.0 / np.sqrt(inv_d2)

    def max_miller_index(self, d_spacing_limit: float) -> MillerPlane:
        """
        The largest Miller indices that can be observed at a resolution
        limit: no reflection with d >= d_spacing_limit has |h|, |k| or |l|
        beyond (a/d, b/d, c/d).

        Args:
            d_spacing_limit (float): the smallest observable d-spacing

        Returns:
            MillerPlane: the limiting (h_max, k_max, l_max), with its d_spacing set
                to the limit
        """
        if not d_spacing_limit > 0:
            raise ValueError(f"d-spacing limit must be positive, got {d_spacing_limit}")
        # guard against a/d landing just below an integer through rounding
        limits = np.floor(self._lattice.lengths / d_spacing_limit + 1e-9).astype(int)
        return MillerPlane(*limits, d_spacing=d_spacing_limit, label="max")

    def enumerate_planes(self, d_spacing_limit: float) -> List[MillerPlane]:
        """
        Every family of planes (hkl) with a d-spacing of at least
        d_spacing_limit, ignoring any systematic absences.

        Args:
            d_spacing_limit (float): the smallest observable d-spacing

        Returns:
            List[MillerPlane]: planes with d_spacing set, sorted by
                decreasing d-spacing
        """
        limit = self.max_miller_index(d_spacing_limit)
        hkl = index_box(limit.indices)
        if len(hkl) == 0:
            return []
        d = self.calculate_d_spacings(hkl)
        keep = d >= d_spacing_limit * (1 - 1e-12)
        hkl, d = hkl[keep], d[keep]
        order = np.argsort(-d, kind="stable")
        LOG.debug("%d planes with d >= %s", len(order), d_spacing_limit)
        return [MillerPlane(*hkl[i], d_spacing=d[i]) for i in order]

    @property
    def unique_parameters(self) -> tuple:
        "the parameters that define this cell given its crystal system"
        lat = self._lattice
        system = lat.crystal_system
        if system is CrystalSystem.CUBIC:
            return (lat.a,)
        elif system is CrystalSystem.RHOMBOHEDRAL:
            return lat.a, lat.alpha
        elif system in (CrystalSystem.HEXAGONAL, CrystalSystem.TETRAGONAL):
            return lat.a, lat.c
        elif system is CrystalSystem.ORTHORHOMBIC:
            return lat.a, lat.b, lat.c
        elif system is CrystalSystem.MONOCLINIC:
            angle = {
                PrincipalAxis.A: lat.alpha,
                PrincipalAxis.B: lat.beta,
                PrincipalAxis.C: lat.gamma,
            }[lat.principal_axis]
            return lat.a, lat.b, lat.c, angle
        return tuple(lat.parameters)

    def __repr__(self):
        unique = self.unique_parameters
        s = "<{{}}: {{}} ({})>".format(",".join("{:.3f}" for p in unique))
        return s.format(self.__class__.__name__, self.crystal_system.value, *unique)


class UnitCell(CellGeometry):
    """
    A direct space unit cell. The metric tensor, the reciprocal cell and
    the orthogonalization/fractionalization matrices are all calculated on
    construction and never change afterwards, so a constructed cell may
    be shared freely.

    Unless otherwise specified, lengths are in Angstroms and angles
    of lattice parameters in degrees; calculated angles are in radians.

    Attributes:
        lattice (Lattice): the direct lattice parameters
        metric_tensor (np.ndarray): the (3, 3) metric tensor G
        reciprocal (ReciprocalUnitCell): the reciprocal cell, with metric tensor G^-1
        orthogonalization_matrix (np.ndarray): fractional to Cartesian transform
        fractionalization_matrix (np.ndarray): Cartesian to fractional transform
    """

    kind = CellKind.DIRECT

    def __init__(self, lattice: Lattice, backend=None):
        """
        Create a UnitCell from a lattice.

        Args:
            lattice (Lattice): the lattice parameters. If its crystal system is
                UNKNOWN it is classified first, otherwise the stored crystal
                system and principal axis must match the classification.
            backend (str or LinearAlgebra, optional): linear algebra implementation,
                defaults to ``settings.LINALG_BACKEND``

        Raises:
            InvalidLatticeError: for out of range or unclassifiable parameters,
                or a crystal system the parameters do not have
            DegenerateLatticeError: if the resulting metric tensor is singular
        """
        backend = get_backend(backend)
        lattice = self._classified(lattice)
        self._initialize(lattice, metric_tensor(lattice, backend), backend)

    @staticmethod
    def _classified(lattice: Lattice) -> Lattice:
        if not isinstance(lattice, Lattice):
            raise TypeError(f"Expected a Lattice, got {type(lattice).__name__}")
        validate_parameters(lattice.lengths, lattice.angles)
        system, axis = classify(lattice.lengths, lattice.angles)
        if system is CrystalSystem.UNKNOWN:
            raise InvalidLatticeError(f"{lattice} does not match any crystal system")
        if lattice.crystal_system is CrystalSystem.UNKNOWN:
            lattice = Lattice.from_parameters(
                lattice.lengths,
                lattice.angles,
                volume=lattice.volume,
                crystal_system=system,
                principal_axis=axis,
            )
        elif (lattice.crystal_system, lattice.principal_axis) != (system, axis):
            raise InvalidLatticeError(
                f"{lattice} is labelled {lattice.crystal_system.value} "
                f"(axis {lattice.principal_axis.value}) but its parameters "
                f"are {system.value} (axis {axis.value})"
            )
        return lattice

    def _initialize(self, lattice, tensor, backend):
        self._backend = backend
        self._lattice = lattice
        self._metric_tensor = _readonly(tensor)
        self._reciprocal = ReciprocalUnitCell(self)
        self._orthogonalization_matrix = _readonly(
            self._determine_orthogonalization_matrix()
        )
        try:
            fractionalization = backend.inverse(self._orthogonalization_matrix)
        except np.linalg.LinAlgError as e:
            raise DegenerateLatticeError(
                "Could not invert orthogonalization matrix"
            ) from e
        self._fractionalization_matrix = _readonly(fractionalization)
        LOG.debug("Constructed %r", self)

    def _determine_orthogonalization_matrix(self) -> np.ndarray:
        # [ a, b cos(ga), c cos(be)                 ]
        # [ 0, b sin(ga), -c sin(be) cos(al*)       ]
        # [ 0,         0, 1 / c* = V / (a b sin ga) ]
        a, b, c = self._lattice.lengths
        _, beta, gamma = self._lattice.angles_radians
        reciprocal = self._reciprocal.lattice
        return self._backend.matrix(
            (
                (a, b * np.cos(gamma), c * np.cos(beta)),
                (0.0, b * np.sin(gamma), -c * np.sin(beta) * np.cos(reciprocal.alpha_radians)),
                (0.0, 0.0, 1.0 / reciprocal.c),
            )
        )

    @classmethod
    def from_metric_tensor(cls, tensor, backend=None):
        """
        Create a UnitCell directly from a metric tensor, which is used
        as is (the lattice parameters are recovered from it).

        Args:
            tensor (array_like): (3, 3) symmetric positive definite metric tensor
            backend (str or LinearAlgebra, optional): linear algebra implementation

        Returns:
            UnitCell: the unit cell described by the tensor
        """
        backend = get_backend(backend)
        tensor = backend.matrix(as_matrix(tensor, name="metric tensor"))
        if not np.allclose(tensor, tensor.T, rtol=1e-10, atol=settings.METRIC_ZERO_THRESHOLD):
            raise InvalidLatticeError("Metric tensor must be symmetric")
        lattice = build_lattice_from_metric_tensor(tensor, backend)
        uc = cls.__new__(cls)
        uc._initialize(lattice, tensor, backend)
        return uc

    @property
    def reciprocal(self) -> "ReciprocalUnitCell":
        "The reciprocal cell, always the same instance"
        return self._reciprocal

    @property
    def orthogonalization_matrix(self) -> np.ndarray:
        "Transform from fractional to Cartesian coordinates, x along a"
        return self._orthogonalization_matrix

    @property
    def fractionalization_matrix(self) -> np.ndarray:
        "Transform from Cartesian to fractional coordinates, the inverse of the orthogonalization matrix"
        return self._fractionalization_matrix

    @classmethod
    def from_lengths_and_angles(cls, lengths, angles, unit="degrees", backend=None):
        """
        Construct a new UnitCell from the provided lengths and angles.

        Args:
            lengths (array_like): Lattice side lengths (a, b, c) in Angstroms,
                b and c may be None.
            angles (array_like): Lattice angles (alpha, beta, gamma) in provided
                units (default degrees), any may be None.
            unit (str, optional): Unit for angles i.e. 'radians' or 'degrees'
                (default degrees).
            backend (str or LinearAlgebra, optional): linear algebra implementation

        Returns:
            UnitCell: A new unit cell object representing the provided lattice.
        """
        given = [x for x in angles if x is not None]
        if unit == "radians":
            angles = [None if x is None else np.degrees(x) for x in angles]
        elif unit == "degrees":
            if given and np.all(np.abs(given) <= np.pi):
                LOG.warning(
                    "Small angles in UnitCell.from_lengths_and_angles, "
                    "are you sure your angles are not in radians?"
                )
        else:
            raise ValueError(f"Unknown angle unit '{unit}'")
        return cls(build_lattice(lengths, angles), backend=backend)

    @classmethod
    def cubic(cls, a, **kwargs):
        "Construct a new cubic UnitCell from the side length a"
        return cls.from_lengths_and_angles((a, a, a), (90, 90, 90), **kwargs)

    @classmethod
    def tetragonal(cls, a, c, **kwargs):
        "Construct a new tetragonal UnitCell from the side lengths a (= b) and c"
        return cls.from_lengths_and_angles((a, a, c), (90, 90, 90), **kwargs)

    @classmethod
    def orthorhombic(cls, a, b, c, **kwargs):
        "Construct a new orthorhombic UnitCell from the side lengths a, b, c"
        return cls.from_lengths_and_angles((a, b, c), (90, 90, 90), **kwargs)

    @classmethod
    def hexagonal(cls, a, c, **kwargs):
        "Construct a new hexagonal UnitCell from the side lengths a (= b) and c"
        return cls.from_lengths_and_angles((a, a, c), (90, 90, 120), **kwargs)

    @classmethod
    def rhombohedral(cls, a, alpha, **kwargs):
        "Construct a new rhombohedral UnitCell from the side length a and angle alpha in degrees"
        return cls.from_lengths_and_angles((a, a, a), (alpha, alpha, alpha), **kwargs)

    @classmethod
    def monoclinic(cls, a, b, c, beta, **kwargs):
        "Construct a new monoclinic (unique axis b) UnitCell"
        return cls.from_lengths_and_angles((a, b, c), (90, beta, 90), **kwargs)

    @classmethod
    def triclinic(cls, a, b, c, alpha, beta, gamma, **kwargs):
        "Construct a new UnitCell from all six lattice parameters"
        return cls.from_lengths_and_angles((a, b, c), (alpha, beta, gamma), **kwargs)


class ReciprocalUnitCell(CellGeometry):
    """
    The reciprocal of a direct `UnitCell`. Its metric tensor is the
    inverse of the direct one, and its own reciprocal is the direct cell
    it was created from, so no further cells are ever derived.

    Reciprocal cells have no orthogonalization matrix; coordinate
    transforms belong to the direct cell.
    """

    kind = CellKind.RECIPROCAL

    def __init__(self, direct: UnitCell):
        self._backend = direct.backend
        self._direct = direct
        self._metric_tensor = _readonly(
            invert_metric_tensor(direct.metric_tensor, self._backend)
        )
        self._lattice = build_lattice_from_metric_tensor(
            self._metric_tensor,
            self._backend,
            crystal_system=direct.crystal_system,
            principal_axis=direct.principal_axis,
        )

    @property
    def reciprocal(self) -> UnitCell:
        "The direct cell this reciprocal cell belongs to"
        return self._direct

    @property
    def orthogonalization_matrix(self):
        raise TypeError(
            "Reciprocal cells have no orthogonalization matrix, "
            "use the direct cell (.reciprocal) instead"
        )

    @property
    def fractionalization_matrix(self):
        raise TypeError(
            "Reciprocal cells have no fractionalization matrix, "
            "use the direct cell (.reciprocal) instead"
        )
