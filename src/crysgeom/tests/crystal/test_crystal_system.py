import logging
import unittest

import numpy as np

from crysgeom.crystal import (
    CrystalSystem,
    Lattice,
    PrincipalAxis,
    build_lattice,
    build_lattice_from_metric_tensor,
    classify,
    crystal_system,
    principal_axis,
)
from crysgeom.errors import DegenerateLatticeError, InvalidLatticeError
from .. import (
    BACKEND_NAMES,
    CUBIC_METRIC_TENSOR,
    CUBIC_PARAMETERS,
    CUBIC_VOLUME,
    MONOCLINIC_PARAMETERS,
    ORTHORHOMBIC_METRIC_TENSOR,
    ORTHORHOMBIC_PARAMETERS,
    ORTHORHOMBIC_VOLUME,
    TRICLINIC_METRIC_TENSOR,
    TRICLINIC_PARAMETERS,
    TRICLINIC_VOLUME,
)

LOG = logging.getLogger(__name__)


class ClassificationTestCase(unittest.TestCase):
    def test_crystal_systems(self):
        right = (90, 90, 90)
        cases = (
            ((3, None, None), right, CrystalSystem.CUBIC),
            ((3, None, None), (60, 60, 60), CrystalSystem.RHOMBOHEDRAL),
            ((5, None, 2), (90, 90, 120), CrystalSystem.HEXAGONAL),
            ((2, 2, 5), right, CrystalSystem.TETRAGONAL),
            ((5, 3, 2), right, CrystalSystem.ORTHORHOMBIC),
            ((2, 3, 5), (90, 30, 90), CrystalSystem.MONOCLINIC),
            ((3, 5, 2), (30, 45, 60), CrystalSystem.TRICLINIC),
        )
        for lengths, angles, expected in cases:
            with self.subTest(expected=expected):
                self.assertIs(crystal_system(lengths, angles), expected)

    def test_principal_axes(self):
        self.assertEqual(
            classify((2, 3, 5), (90, 30, 90)),
            (CrystalSystem.MONOCLINIC, PrincipalAxis.B),
        )
        self.assertIs(classify((2, 3, 5), (90, 90, 30))[1], PrincipalAxis.C)
        self.assertIs(classify((2, 3, 5), (30, 90, 90))[1], PrincipalAxis.A)
        self.assertIs(classify((5, None, 2), (90, 90, 120))[1], PrincipalAxis.C)
        self.assertIs(classify((2, 2, 5), (90, 90, 90))[1], PrincipalAxis.C)
        self.assertIs(classify((3, None, None), (90, 90, 90))[1], PrincipalAxis.NONE)
        self.assertIs(classify((3, 5, 2), (30, 45, 60))[1], PrincipalAxis.NONE)
        self.assertIs(
            principal_axis(CrystalSystem.ORTHORHOMBIC, (90, 90, 90)), PrincipalAxis.NONE
        )

    def test_unset_angles(self):
        self.assertIs(crystal_system((3, None, None), (None, None, None)), CrystalSystem.CUBIC)
        self.assertIs(crystal_system((3, None, None), (75, None, None)), CrystalSystem.RHOMBOHEDRAL)
        self.assertIs(crystal_system((2, 3, 5), (None, 99.23, None)), CrystalSystem.MONOCLINIC)
        self.assertIs(crystal_system((5, None, 2), (None, None, 120)), CrystalSystem.HEXAGONAL)

    def test_rhombohedral_with_unset_alpha(self):
        self.assertIs(crystal_system((3, None, None), (None, 60, 60)), CrystalSystem.RHOMBOHEDRAL)
        self.assertIs(crystal_system((3, None, None), (None, 75, None)), CrystalSystem.UNKNOWN)
        self.assertIs(crystal_system((3, None, None), (None, 60, 70)), CrystalSystem.UNKNOWN)
        lat = build_lattice((3, None, None), (None, 60, 60))
        np.testing.assert_allclose(lat.angles, [60, 60, 60])

    def test_tolerant_comparison(self):
        self.assertIs(
            crystal_system((3.0, 3.0 + 1e-12, 3.0), (90.0, 90.0 + 1e-10, 90.0)),
            CrystalSystem.CUBIC,
        )

    def test_reciprocal_hexagonal_angle(self):
        self.assertIs(crystal_system((1, 1, 2), (90, 90, 60)), CrystalSystem.HEXAGONAL)

    def test_unknown(self):
        self.assertIs(crystal_system((3, 3, 3), (90, 90, 100)), CrystalSystem.UNKNOWN)
        self.assertIs(crystal_system((3, 3, 5), (80, 100, 110)), CrystalSystem.UNKNOWN)

    def test_missing_a(self):
        with self.assertRaises(InvalidLatticeError):
            classify((None, 2, 3), (90, 90, 90))
        with self.assertRaises(InvalidLatticeError):
            classify((1, 2), (90, 90, 90))


class BuildLatticeTestCase(unittest.TestCase):
    def test_cubic_defaults(self):
        lat = build_lattice((5.43018, None, None), (None, None, None))
        self.assertEqual(
            lat,
            Lattice(*CUBIC_PARAMETERS, crystal_system=CrystalSystem.CUBIC),
        )

    def test_orthorhombic_defaults(self):
        lat = build_lattice(ORTHORHOMBIC_PARAMETERS[:3], (None, None, None))
        self.assertEqual(
            lat,
            Lattice(*ORTHORHOMBIC_PARAMETERS, crystal_system=CrystalSystem.ORTHORHOMBIC),
        )

    def test_monoclinic_defaults(self):
        lat = build_lattice(MONOCLINIC_PARAMETERS[:3], (None, 99.23, None))
        self.assertEqual(
            lat,
            Lattice(
                *MONOCLINIC_PARAMETERS,
                crystal_system=CrystalSystem.MONOCLINIC,
                principal_axis=PrincipalAxis.B,
            ),
        )

    def test_rhombohedral_defaults(self):
        lat = build_lattice((3, None, None), (60, None, None), volume=5.0)
        np.testing.assert_allclose(lat.angles, [60, 60, 60])
        np.testing.assert_allclose(lat.lengths, [3, 3, 3])
        self.assertEqual(lat.volume, 5.0)
        self.assertIs(lat.crystal_system, CrystalSystem.RHOMBOHEDRAL)

    def test_triclinic(self):
        lat = build_lattice(TRICLINIC_PARAMETERS[:3], TRICLINIC_PARAMETERS[3:])
        self.assertEqual(
            lat, Lattice(*TRICLINIC_PARAMETERS, crystal_system=CrystalSystem.TRICLINIC)
        )

    def test_invalid_parameters(self):
        with self.assertRaises(InvalidLatticeError):
            build_lattice((-1, None, None), (90, 90, 90))
        with self.assertRaises(InvalidLatticeError):
            build_lattice((0, None, None), (90, 90, 90))
        with self.assertRaises(InvalidLatticeError):
            build_lattice((2, 3, 5), (90, 180, 90))
        with self.assertRaises(InvalidLatticeError):
            build_lattice((2, 3, 5), (0, 45, 60))
        with self.assertRaises(InvalidLatticeError):
            build_lattice((2, 3, float("nan")), (90, 90, 90))

    def test_unknown_system_rejected(self):
        with self.assertRaises(InvalidLatticeError):
            build_lattice((3, 3, 3), (90, 90, 100))


class LatticeFromMetricTensorTestCase(unittest.TestCase):
    def test_cubic(self):
        lat = build_lattice_from_metric_tensor(CUBIC_METRIC_TENSOR)
        np.testing.assert_allclose(lat.lengths, CUBIC_PARAMETERS[:3], rtol=1e-10)
        np.testing.assert_allclose(lat.angles, 90.0)
        self.assertAlmostEqual(lat.volume / CUBIC_VOLUME, 1.0, places=6)
        self.assertIs(lat.crystal_system, CrystalSystem.CUBIC)

    def test_orthorhombic(self):
        lat = build_lattice_from_metric_tensor(ORTHORHOMBIC_METRIC_TENSOR)
        np.testing.assert_allclose(lat.lengths, ORTHORHOMBIC_PARAMETERS[:3], rtol=1e-8)
        self.assertAlmostEqual(lat.volume / ORTHORHOMBIC_VOLUME, 1.0, places=6)
        self.assertIs(lat.crystal_system, CrystalSystem.ORTHORHOMBIC)

    def test_triclinic(self):
        for name in BACKEND_NAMES:
            with self.subTest(backend=name):
                lat = build_lattice_from_metric_tensor(TRICLINIC_METRIC_TENSOR, backend=name)
                np.testing.assert_allclose(lat.parameters, TRICLINIC_PARAMETERS, atol=1e-6)
                self.assertAlmostEqual(lat.volume, TRICLINIC_VOLUME, delta=0.05)
                self.assertIs(lat.crystal_system, CrystalSystem.TRICLINIC)

    def test_volume_squared_is_determinant(self):
        lat = build_lattice_from_metric_tensor(TRICLINIC_METRIC_TENSOR)
        self.assertAlmostEqual(
            lat.volume**2 / np.linalg.det(TRICLINIC_METRIC_TENSOR), 1.0, places=10
        )

    def test_known_crystal_system_is_kept(self):
        # reciprocal of a (2, 1, 3, 90, 30, 90) cell, where a* = b*
        r = -np.sqrt(3) / 3
        tensor = np.array([[1.0, 0.0, r], [0.0, 1.0, 0.0], [r, 0.0, 4 / 9]])
        with self.assertRaises(InvalidLatticeError):
            build_lattice_from_metric_tensor(tensor)
        lat = build_lattice_from_metric_tensor(
            tensor,
            crystal_system=CrystalSystem.MONOCLINIC,
            principal_axis=PrincipalAxis.B,
        )
        self.assertIs(lat.crystal_system, CrystalSystem.MONOCLINIC)
        self.assertIs(lat.principal_axis, PrincipalAxis.B)
        np.testing.assert_allclose(lat.parameters, [1, 1, 2 / 3, 90, 150, 90])
        self.assertAlmostEqual(lat.volume, 1 / 3)

    def test_not_positive_definite(self):
        tensor = np.array([[1.0, 0.9, 0.9], [0.9, 1.0, -0.9], [0.9, -0.9, 1.0]])
        with self.assertRaises(DegenerateLatticeError):
            build_lattice_from_metric_tensor(tensor)

    def test_non_positive_diagonal(self):
        with self.assertRaises(InvalidLatticeError):
            build_lattice_from_metric_tensor(np.diag([1.0, 1.0, 0.0]))
