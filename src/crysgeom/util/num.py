import numpy as np

from crysgeom.errors import DimensionMismatchError


def cartesian_product(*arrays) -> np.ndarray:
    """
    Efficiently calculate the Cartesian product of the
    provided vectors A x B x C ... etc. This will maintain
    order in loops from the right most array.

    Args:
        *arrays (array_like): 1D arrays to use for the Cartesian product

    Returns:
        np.ndarray: The Cartesian product of the provided vectors.
    """
    arrays = [np.asarray(a) for a in arrays]
    la = len(arrays)
    dtype = np.result_type(*arrays)
    arr = np.empty([len(a) for a in arrays] + [la], dtype=dtype)
    for i, a in enumerate(np.ix_(*arrays)):
        arr[..., i] = a
    return arr.reshape(-1, la)


def index_box(limits) -> np.ndarray:
    """
    All integer triples (h, k, l) with |h| <= limits[0], |k| <= limits[1]
    and |l| <= limits[2], excluding (0, 0, 0).

    Args:
        limits (array_like): the three (non-negative) index limits

    Returns:
        np.ndarray: (N, 3) integer array of indices
    """
    ranges = [np.arange(-int(x), int(x) + 1) for x in limits]
    hkl = cartesian_product(*ranges)
    return hkl[np.any(hkl != 0, axis=1)]


def clipped_arccos(value) -> float:
    "arccos with the argument clipped to [-1, 1] to absorb rounding error"
    return float(np.arccos(np.clip(value, -1.0, 1.0)))


def as_vector(values, name="vector") -> np.ndarray:
    """
    Convert values to a float vector of length 3.

    Raises:
        DimensionMismatchError: if the values do not form a 3-vector
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (3,):
        raise DimensionMismatchError(
            f"{name} must have shape (3,), got {arr.shape}"
        )
    return arr


def as_coordinates(values, name="coordinates") -> np.ndarray:
    """
    Convert values to either a single (3,) vector or an
    (N, 3) array of row vectors.

    Raises:
        DimensionMismatchError: if the trailing dimension is not 3
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim not in (1, 2) or arr.shape[-1] != 3:
        raise DimensionMismatchError(
            f"{name} must have shape (3,) or (N, 3), got {arr.shape}"
        )
    return arr


def as_matrix(values, name="matrix") -> np.ndarray:
    "Convert values to a (3, 3) float matrix, raising DimensionMismatchError otherwise"
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (3, 3):
        raise DimensionMismatchError(
            f"{name} must have shape (3, 3), got {arr.shape}"
        )
    return arr
