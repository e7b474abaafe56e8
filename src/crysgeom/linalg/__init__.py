"""
Interchangeable dense linear algebra implementations used by
the unit cell geometry. Anything satisfying the `LinearAlgebra`
protocol may be passed wherever a ``backend`` argument is accepted.
"""
import logging

from crysgeom import settings
from .base import LinearAlgebra
from .numpy_backend import NumpyLinearAlgebra
from .scipy_backend import ScipyLinearAlgebra

LOG = logging.getLogger(__name__)

BACKENDS = {
    NumpyLinearAlgebra.name: NumpyLinearAlgebra,
    ScipyLinearAlgebra.name: ScipyLinearAlgebra,
}


def get_backend(backend=None) -> LinearAlgebra:
    """
    Resolve a linear algebra implementation.

    Args:
        backend (str or LinearAlgebra, optional): a backend name ('numpy' or 'scipy'),
            an existing implementation (returned unchanged), or None for the
            configured default (``settings.LINALG_BACKEND``).

    Returns:
        LinearAlgebra: the resolved implementation
    """
    if backend is None:
        backend = settings.LINALG_BACKEND
    if not isinstance(backend, str):
        return backend
    name = backend.lower()
    if name not in BACKENDS:
        raise ValueError(
            f"Unknown linear algebra backend '{backend}', "
            f"choose one of {sorted(BACKENDS)}"
        )
    LOG.debug("Using %s linear algebra backend", name)
    return BACKENDS[name]()


__all__ = [
    "BACKENDS",
    "LinearAlgebra",
    "NumpyLinearAlgebra",
    "ScipyLinearAlgebra",
    "get_backend",
]
