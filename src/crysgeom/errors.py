class InvalidLatticeError(ValueError):
    "Lattice parameters that do not describe a valid crystal lattice"


class DegenerateLatticeError(ValueError):
    "A metric tensor that is singular or not positive definite"


class DimensionMismatchError(ValueError):
    "A vector or matrix argument with the wrong shape"
