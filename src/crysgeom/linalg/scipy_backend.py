import warnings

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve


class ScipyLinearAlgebra:
    """
    Linear algebra through an explicit LU decomposition
    (``scipy.linalg.lu_factor``). Both the inverse and the determinant
    are derived from the same factorisation, so they are numerically
    consistent with one another.
    """

    name = "scipy"

    def matrix(self, values) -> np.ndarray:
        return np.array(values, dtype=np.float64)

    def vector(self, values) -> np.ndarray:
        return np.array(values, dtype=np.float64).reshape(-1)

    def multiply(self, matrix, other) -> np.ndarray:
        return np.dot(matrix, other)

    @staticmethod
    def _factor(matrix):
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise np.linalg.LinAlgError("Matrix must be square")
        with warnings.catch_warnings():
            # exactly singular input is reported through the zero pivot instead
            warnings.simplefilter("ignore", LinAlgWarning)
            lu, piv = lu_factor(matrix, check_finite=True)
        return lu, piv

    def inverse(self, matrix) -> np.ndarray:
        lu, piv = self._factor(matrix)
        if np.any(np.diag(lu) == 0.0):
            raise np.linalg.LinAlgError("Singular matrix")
        return lu_solve((lu, piv), np.eye(lu.shape[0]))

    def determinant(self, matrix) -> float:
        lu, piv = self._factor(matrix)
        # each row interchange recorded in piv flips the sign
        swaps = np.count_nonzero(piv != np.arange(len(piv)))
        sign = -1.0 if swaps % 2 else 1.0
        return float(sign * np.prod(np.diag(lu)))

    def __repr__(self):
        return f"<{self.__class__.__name__}>"
