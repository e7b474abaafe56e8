from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class LinearAlgebra(Protocol):
    """
    The dense linear algebra operations the lattice geometry code relies on.

    Matrices and vectors are row-major ``np.ndarray`` objects, so vector
    addition/subtraction and conversion back to nested lists (``tolist``)
    come for free. Implementations must be free of side effects, and
    ``inverse`` must raise ``np.linalg.LinAlgError`` for a singular matrix.
    """

    name: str

    def matrix(self, values) -> np.ndarray:
        ...

    def vector(self, values) -> np.ndarray:
        ...

    def multiply(self, matrix: np.ndarray, other: np.ndarray) -> np.ndarray:
        ...

    def inverse(self, matrix: np.ndarray) -> np.ndarray:
        ...

    def determinant(self, matrix: np.ndarray) -> float:
        ...
