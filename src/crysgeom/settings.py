"""
Package wide defaults. Each value may be overridden through an
environment variable of the same name prefixed with ``CRYSGEOM_``,
read once when this module is first imported.
"""
import os

_PREFIX = "CRYSGEOM_"


def _env_float(name, default):
    value = os.environ.get(_PREFIX + name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(
            f"Could not interpret {_PREFIX + name}='{value}' as a number"
        ) from e


#: name of the linear algebra implementation used when none is given
LINALG_BACKEND = os.environ.get(_PREFIX + "LINALG_BACKEND", "numpy").lower()

#: relative tolerance when deciding whether two cell lengths are equal
LENGTH_RTOL = _env_float("LENGTH_RTOL", 1e-6)

#: absolute tolerance (degrees) when deciding whether two cell angles are equal
ANGLE_ATOL = _env_float("ANGLE_ATOL", 1e-6)

#: off-diagonal metric tensor elements smaller than this are set to zero
METRIC_ZERO_THRESHOLD = _env_float("METRIC_ZERO_THRESHOLD", 1e-10)

#: absolute tolerance used by Lattice equality
EQUALITY_ATOL = _env_float("EQUALITY_ATOL", 1e-10)

#: det(G) / (G11 G22 G33) below this marks a metric tensor as singular
SINGULAR_DETERMINANT_RTOL = _env_float("SINGULAR_DETERMINANT_RTOL", 1e-12)
