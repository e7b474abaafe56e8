"""
Classification of lattice parameters into crystal systems and
principal axes, and construction of classified `Lattice` objects
either from (possibly incomplete) parameters or from a metric tensor.

The metric symmetry rules applied are:

    Cubic            a = b = c;   alpha = beta = gamma = 90
    Rhombohedral     alpha = beta = gamma != 90
    Hexagonal        two lengths equal; one angle 120
    Tetragonal       two lengths equal; alpha = beta = gamma = 90
    Orthorhombic     a != b != c; alpha = beta = gamma = 90
    Monoclinic       a != b != c; two angles 90
    Triclinic        a != b != c; at most one angle 90

Lengths and angles are compared with the tolerances in `crysgeom.settings`,
as parameters recovered from metric tensors carry rounding error.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from crysgeom import settings
from crysgeom.errors import DegenerateLatticeError, InvalidLatticeError
from crysgeom.linalg import get_backend
from crysgeom.util.num import as_matrix, clipped_arccos
from .lattice import CrystalSystem, Lattice, PrincipalAxis

LOG = logging.getLogger(__name__)


def _lengths_equal(x, y) -> bool:
    return abs(x - y) <= settings.LENGTH_RTOL * max(abs(x), abs(y))


def _angles_equal(x, y) -> bool:
    return abs(x - y) <= settings.ANGLE_ATOL


def _three(values, name) -> list:
    values = list(values)
    if len(values) != 3:
        raise InvalidLatticeError(f"Expected three {name}, got {len(values)}")
    return [None if x is None else float(x) for x in values]


def _rhombohedral_angle(angles) -> Optional[float]:
    """
    The shared angle of a rhombohedral lattice, or None if the given
    angles do not describe one. Must be decided before unset angles are
    defaulted to 90.

    The first given angle is the reference, and every other given angle
    must equal it. A lone beta or gamma is the shorthand for a monoclinic
    or hexagonal lattice, so with alpha unset at least two angles are needed.
    """
    given = [x for x in angles if x is not None]
    if not given or _angles_equal(given[0], 90.0):
        return None
    if angles[0] is None and len(given) < 2:
        return None
    if not all(_angles_equal(x, given[0]) for x in given[1:]):
        return None
    return given[0]


def validate_parameters(lengths: Sequence[float], angles: Sequence[float]):
    """
    Check that fully specified lattice parameters are physically sensible.

    Args:
        lengths (array_like): lattice lengths (a, b, c) in Angstroms
        angles (array_like): lattice angles (alpha, beta, gamma) in degrees

    Raises:
        InvalidLatticeError: for a non-positive or non-finite length, or an angle
            outside of the open interval (0, 180)
    """
    for name, x in zip("abc", lengths):
        if x is None or not np.isfinite(x) or x <= 0:
            raise InvalidLatticeError(f"Lattice length {name} must be positive, got {x}")
    for name, x in zip(("alpha", "beta", "gamma"), angles):
        if x is None or not np.isfinite(x) or not 0.0 < x < 180.0:
            raise InvalidLatticeError(
                f"Lattice angle {name} must lie strictly between 0 and 180 degrees, got {x}"
            )


def fill_defaults(lengths, angles) -> Tuple[list, list]:
    """
    Replace unset (None) lattice parameters with their implied values:
    b and c default to a; angles default to 90 degrees, unless the
    given angles make the lattice rhombohedral, in which case they
    default to the first given angle.

    Args:
        lengths (Sequence): (a, b, c), where b and c may be None
        angles (Sequence): (alpha, beta, gamma), any of which may be None

    Returns:
        Tuple[list, list]: the completed lengths and angles
    """
    lengths = _three(lengths, "lengths")
    angles = _three(angles, "angles")
    a = lengths[0]
    if a is None:
        raise InvalidLatticeError("Lattice length a must be given")
    rhombohedral_angle = _rhombohedral_angle(angles)
    default_angle = 90.0 if rhombohedral_angle is None else rhombohedral_angle
    return (
        [a if x is None else x for x in lengths],
        [default_angle if x is None else x for x in angles],
    )


def _equal_length_multiplicity(lengths) -> int:
    return max(sum(_lengths_equal(x, y) for y in lengths) for x in lengths)


def _system_from_complete_parameters(lengths, angles) -> CrystalSystem:
    nr_equal_lengths = _equal_length_multiplicity(lengths)
    right_angles = [_angles_equal(x, 90.0) for x in angles]
    nr_right_angles = sum(right_angles)

    if nr_right_angles == 3:
        if nr_equal_lengths == 3:
            return CrystalSystem.CUBIC
        elif nr_equal_lengths == 2:
            return CrystalSystem.TETRAGONAL
        return CrystalSystem.ORTHORHOMBIC

    nr_120 = sum(_angles_equal(x, 120.0) for x in angles)
    # the reciprocal of a hexagonal cell has gamma* = 60
    nr_60 = sum(_angles_equal(x, 60.0) for x in angles)
    hexagonal_angles = nr_120 == 1 or (nr_60 == 1 and nr_right_angles == 2)
    if hexagonal_angles and nr_equal_lengths == 2:
        return CrystalSystem.HEXAGONAL
    elif nr_right_angles == 2 and nr_equal_lengths == 1:
        return CrystalSystem.MONOCLINIC
    elif nr_right_angles <= 1 and nr_equal_lengths == 1:
        return CrystalSystem.TRICLINIC
    return CrystalSystem.UNKNOWN


def principal_axis(crystal_system: CrystalSystem, angles) -> PrincipalAxis:
    """
    The principal axis for a lattice of the given crystal system.

    Hexagonal and tetragonal lattices have c as the principal axis,
    monoclinic lattices the axis opposite their unique angle, and all
    other crystal systems have none.

    Args:
        crystal_system (CrystalSystem): the crystal system of the lattice
        angles (Sequence[float]): complete lattice angles (alpha, beta, gamma)

    Returns:
        PrincipalAxis: the principal axis
    """
    if crystal_system in (CrystalSystem.HEXAGONAL, CrystalSystem.TETRAGONAL):
        return PrincipalAxis.C
    if crystal_system is CrystalSystem.MONOCLINIC:
        alpha, beta, gamma = angles
        if _angles_equal(alpha, beta):
            return PrincipalAxis.C
        elif _angles_equal(alpha, gamma):
            return PrincipalAxis.B
        return PrincipalAxis.A
    return PrincipalAxis.NONE


def classify(lengths, angles) -> Tuple[CrystalSystem, PrincipalAxis]:
    """
    Determine the crystal system and principal axis of a lattice.

    Args:
        lengths (Sequence): (a, b, c) in Angstroms; b and c may be None
            and then default to a
        angles (Sequence): (alpha, beta, gamma) in degrees; any may be None
            and then default to 90 (or to the shared angle for rhombohedral lattices)

    Returns:
        Tuple[CrystalSystem, PrincipalAxis]: UNKNOWN is returned when the
            parameters match no crystal system
    """
    rhombohedral = _rhombohedral_angle(_three(angles, "angles")) is not None
    lengths, angles = fill_defaults(lengths, angles)
    if rhombohedral:
        system = CrystalSystem.RHOMBOHEDRAL
    else:
        system = _system_from_complete_parameters(lengths, angles)
    axis = principal_axis(system, angles)
    LOG.debug("Classified %s %s as %s (axis %s)", lengths, angles, system.value, axis.value)
    return system, axis


def crystal_system(lengths, angles) -> CrystalSystem:
    "The crystal system of a lattice, see `classify`"
    return classify(lengths, angles)[0]


def build_lattice(lengths, angles, volume: Optional[float] = None) -> Lattice:
    """
    Construct a classified lattice from (possibly incomplete) parameters.

    Args:
        lengths (Sequence): (a, b, c) in Angstroms; b and c may be None
        angles (Sequence): (alpha, beta, gamma) in degrees; any may be None
        volume (float, optional): the cell volume in cubic Angstroms, if known

    Returns:
        Lattice: the lattice with its crystal system and principal axis set

    Raises:
        InvalidLatticeError: if the parameters are out of range or match no
            crystal system
    """
    system, axis = classify(lengths, angles)
    lengths, angles = fill_defaults(lengths, angles)
    validate_parameters(lengths, angles)
    if system is CrystalSystem.UNKNOWN:
        raise InvalidLatticeError(
            f"Lattice parameters {lengths} {angles} do not match any crystal system"
        )
    return Lattice.from_parameters(
        lengths, angles, volume=volume, crystal_system=system, principal_axis=axis
    )


def build_lattice_from_metric_tensor(
    tensor,
    backend=None,
    crystal_system: Optional[CrystalSystem] = None,
    principal_axis: Optional[PrincipalAxis] = None,
) -> Lattice:
    """
    Recover a classified lattice from its metric tensor G, where
    G[i][i] = length_i^2, G[j][k] = length_j length_k cos(angle_i)
    and volume^2 = det(G).

    A known crystal system skips classification. The reciprocal of a
    classified lattice belongs to the same family, but accidental
    equalities in its parameters (e.g. a* = b* for a monoclinic cell
    with b = a sin(beta)) would otherwise match none of the rules.

    Args:
        tensor (array_like): (3, 3) metric tensor
        backend (str or LinearAlgebra, optional): linear algebra implementation
            used for the determinant
        crystal_system (CrystalSystem, optional): the known crystal system,
            by default the lattice is classified
        principal_axis (PrincipalAxis, optional): the known principal axis,
            used together with crystal_system

    Returns:
        Lattice: the lattice described by the metric tensor, with its volume set

    Raises:
        DegenerateLatticeError: if the determinant of G is not positive
    """
    backend = get_backend(backend)
    tensor = as_matrix(tensor, name="metric tensor")
    diagonal = np.diag(tensor)
    if np.any(diagonal <= 0):
        raise InvalidLatticeError(
            f"Metric tensor diagonal must be positive, got {diagonal}"
        )
    lengths = np.sqrt(diagonal)
    angles = []
    for i in range(3):
        j = (i + 1) % 3
        k = (j + 1) % 3
        angles.append(
            np.degrees(clipped_arccos(tensor[j, k] / (lengths[j] * lengths[k])))
        )
    determinant = backend.determinant(tensor)
    if not determinant > 0:
        raise DegenerateLatticeError(
            f"Metric tensor determinant must be positive, got {determinant}"
        )
    volume = np.sqrt(determinant)
    if crystal_system is None or crystal_system is CrystalSystem.UNKNOWN:
        return build_lattice(lengths, angles, volume=volume)
    validate_parameters(lengths, angles)
    if principal_axis is None:
        principal_axis = PrincipalAxis.NONE
    return Lattice.from_parameters(
        lengths,
        angles,
        volume=volume,
        crystal_system=crystal_system,
        principal_axis=principal_axis,
    )
