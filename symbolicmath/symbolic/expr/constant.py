from typing import Dict, List, Optional, Sequence

import numpy as np

from symbolicmath import config

from .expr import ScalarExpr, VectorExpr


class K(ScalarExpr):
    """Constant scalar expression.

    Represents a numeric literal. K is the lowest variant in the dispatch
    order, so it only implements arithmetic with other constants; everything
    else is handled by the more complex operand.

    Attributes:
        value (float): The constant's value

    Example:
        >>> K(2.0) + 3        # K(5.0)
        >>> K(2.0) * x        # Monomial 2.0 * x
    """

    _rank = 0

    def __init__(self, value: float = 0.0):
        self.value = float(value)

    def __float__(self):
        return self.value

    def check(self) -> None:
        return None

    def variables(self) -> List:
        return []

    def constant(self) -> float:
        return self.value

    def linear_coeff(self, wrt: Optional[Sequence] = None) -> np.ndarray:
        n = 0 if wrt is None else len(wrt)
        return np.zeros(n, dtype=config.numerics.dtype)

    def degree(self) -> int:
        return 0

    def derivative_wrt(self, variable) -> "K":
        return K(0.0)

    def _evaluate(self, assignment: Dict[int, float]) -> float:
        return self.value

    def to_monomial(self):
        from .monomial import Monomial

        return Monomial(self.value)

    def to_polynomial(self):
        from .polynomial import Polynomial

        return Polynomial([self.to_monomial()])

    def _plus(self, right: "K", reflected: bool = False) -> "K":
        return K(self.value + right.value)

    def _multiply(self, right: "K", reflected: bool = False) -> "K":
        return K(self.value * right.value)

    def __repr__(self):
        return f"K({self.value!r})"


class KVector(VectorExpr):
    """Constant vector expression backed by a read-only numpy array.

    Attributes:
        values (np.ndarray): 1-D array of the vector's entries

    Example:
        >>> kv = KVector([1.0, 2.0, 3.0])
        >>> kv + 1                          # KVector([2.0, 3.0, 4.0])
        >>> kv * 2.0                        # KVector([2.0, 4.0, 6.0])
        >>> kv.to_numpy()                   # array([1., 2., 3.])
    """

    _rank = 4
    element_type = K

    def __init__(self, values: Sequence[float] = ()):
        arr = np.array(values, dtype=config.numerics.dtype)
        if arr.ndim == 2 and arr.shape[1] == 1:
            arr = arr[:, 0]
        if arr.ndim != 1:
            raise ValueError(f"KVector requires a 1-D array of values, got shape {arr.shape}")
        arr.setflags(write=False)
        self.values = arr

    @property
    def elements(self):
        return tuple(K(v) for v in self.values)

    def __len__(self) -> int:
        return self.values.shape[0]

    def __iter__(self):
        return iter(self.elements)

    def at_vec(self, idx: int) -> K:
        self._check_index(idx)
        return K(self.values[idx])

    def to_numpy(self) -> np.ndarray:
        """Return the entries as a new, writeable numpy array."""
        return self.values.copy()

    def check(self) -> None:
        return None

    def variables(self) -> List:
        return []

    def constant(self) -> np.ndarray:
        return self.to_numpy()

    def linear_coeff(self, wrt: Optional[Sequence] = None) -> np.ndarray:
        # Without an ordering the zero block is square, one column per row.
        cols = len(self) if wrt is None else len(wrt)
        return np.zeros((len(self), cols), dtype=config.numerics.dtype)

    def degree(self) -> int:
        return 0

    def derivative_wrt(self, variable) -> "KVector":
        return KVector(np.zeros(len(self)))

    def _evaluate(self, assignment: Dict[int, float]) -> np.ndarray:
        return self.to_numpy()

    def transpose(self) -> np.ndarray:
        """Return the transpose as a (1, N) numpy array."""
        return self.values.reshape(1, -1).copy()

    def to_monomial_vector(self):
        from .monomial import MonomialVector

        return MonomialVector([element.to_monomial() for element in self.elements])

    def to_polynomial_vector(self):
        from .polynomial import PolynomialVector

        return PolynomialVector([element.to_polynomial() for element in self.elements])

    def _plus(self, right, reflected: bool = False) -> VectorExpr:
        if isinstance(right, K):
            return KVector(self.values + right.value)
        if isinstance(right, KVector):
            return KVector(self.values + right.values)
        return self._elementwise("plus", right, reflected)

    def _multiply(self, right, reflected: bool = False) -> VectorExpr:
        if isinstance(right, K):
            return KVector(self.values * right.value)
        return self._elementwise("multiply", right, reflected)

    def _dot(self, right: VectorExpr, reflected: bool = False):
        if isinstance(right, KVector):
            return K(float(np.dot(self.values, right.values)))
        return super()._dot(right, reflected)

    def left_multiply(self, matrix) -> VectorExpr:
        from symbolicmath.errors import DimensionError

        matrix = np.asarray(matrix)
        if matrix.ndim != 2 or matrix.shape[1] != len(self):
            raise DimensionError("MatMul", matrix, self)
        return KVector(matrix @ self.values)

    def __repr__(self):
        return f"KVector({self.values.tolist()!r})"


def ones_vector(n: int) -> KVector:
    """Return a KVector of ``n`` ones."""
    return KVector(np.ones(n))


def zeros_vector(n: int) -> KVector:
    """Return a KVector of ``n`` zeros."""
    return KVector(np.zeros(n))
