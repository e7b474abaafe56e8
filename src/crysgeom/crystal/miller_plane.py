import numpy as np

#: d_spacing value of a plane whose spacing has not been calculated
UNSET_D_SPACING = -1.0


class MillerPlane:
    """
    A family of lattice planes (hkl), i.e. a reciprocal lattice vector,
    together with the quantities measured or calculated for the
    associated diffracted beam.

    The Miller indices define the plane and are immutable, the
    remaining attributes may be updated by whoever holds the object.

    Attributes:
        d_spacing (float): interplanar spacing in Angstroms, -1 if not yet
            calculated (see `UnitCell.calculate_d_spacing`)
        label (str): free text describing the planes
        structure_factor (float or None): calculated structure factor F(hkl)
        intensity (float or None): observed scattering intensity I(hkl)
    """

    def __init__(
        self,
        h: int,
        k: int,
        l: int,
        d_spacing: float = UNSET_D_SPACING,
        label: str = "",
        structure_factor=None,
        intensity=None,
    ):
        self._indices = (int(h), int(k), int(l))
        self.d_spacing = float(d_spacing)
        self.label = label
        self.structure_factor = structure_factor
        self.intensity = intensity

    @classmethod
    def from_indices(cls, indices, **kwargs):
        "Construct a plane from a sequence (h, k, l)"
        h, k, l = indices
        return cls(h, k, l, **kwargs)

    @property
    def indices(self):
        "Miller indices (h, k, l)"
        return self._indices

    @property
    def h(self) -> int:
        return self._indices[0]

    @property
    def k(self) -> int:
        return self._indices[1]

    @property
    def l(self) -> int:
        return self._indices[2]

    @property
    def has_d_spacing(self) -> bool:
        "has the d-spacing of this plane been set?"
        return self.d_spacing != UNSET_D_SPACING

    @property
    def q_spacing(self) -> float:
        """
        Magnitude of the scattering vector (momentum transfer) of
        these planes, Q = 2 pi / d, in inverse Angstroms.
        """
        if not self.has_d_spacing:
            raise ValueError(f"d-spacing of {self.indices} has not been calculated")
        return 2 * np.pi / self.d_spacing

    def __eq__(self, other):
        if not isinstance(other, MillerPlane):
            return NotImplemented
        return (
            self._indices == other._indices
            and self.d_spacing == other.d_spacing
            and self.label == other.label
            and self.structure_factor == other.structure_factor
            and self.intensity == other.intensity
        )

    # mutable fields take part in equality
    __hash__ = None

    def __repr__(self):
        h, k, l = self._indices
        s = f"<{self.__class__.__name__}: ({h} {k} {l})"
        if self.has_d_spacing:
            s += f" d={self.d_spacing:.5f}"
        if self.label:
            s += f" '{self.label}'"
        return s + ">"
