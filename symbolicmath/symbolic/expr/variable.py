import threading
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from symbolicmath import config
from symbolicmath.errors import (
    InvalidBoundsError,
    MissingVariableError,
    UninitializedVariableError,
)

from .expr import ScalarExpr, VectorExpr, column_index, column_of


class VarType(Enum):
    """Domain of a decision variable."""

    CONTINUOUS = "continuous"
    BINARY = "binary"
    INTEGER = "integer"


class IdGenerator:
    """Thread-safe source of variable ids.

    Ids start at 1 and increase by one per call; 0 is reserved for the
    uninitialized Variable. The module keeps one process-wide instance that
    ``new_variable`` uses unless another generator is passed explicitly.
    """

    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError(f"IdGenerator must start at 1 or above, got {start}")
        self._lock = threading.Lock()
        self._next = start

    def next_id(self) -> int:
        with self._lock:
            vid = self._next
            self._next += 1
        return vid

    def next_ids(self, n: int) -> List[int]:
        """Reserve ``n`` consecutive ids in one step."""
        with self._lock:
            first = self._next
            self._next += n
        return list(range(first, first + n))


_ids = IdGenerator()


class Variable(ScalarExpr):
    """A decision variable in an optimization model.

    Variables are identified by a process-unique integer id and are immutable.
    Create them with ``new_variable()`` or ``new_variable_vector()``; a
    Variable built directly with the default id of 0 is the zero value and
    fails ``check()``.

    Attributes:
        id (int): Unique identifier, 0 when uninitialized
        lower (float): Lower bound
        upper (float): Upper bound
        type (VarType): Domain of the variable
        name (str): Display name

    Example:
        >>> x = new_variable()
        >>> 2 * x + 1          # Polynomial 2.0 * x + 1.0
        >>> x <= 10            # Constraint(x <= K(10.0))
    """

    _rank = 1

    def __init__(
        self,
        id: int = 0,
        lower: float = -np.inf,
        upper: float = np.inf,
        type: VarType = VarType.CONTINUOUS,
        name: Optional[str] = None,
    ):
        self.id = int(id)
        self.lower = float(lower)
        self.upper = float(upper)
        self.type = VarType(type)
        self.name = name if name is not None else f"x_{self.id}"

    def __hash__(self):
        return hash((Variable, self.id))

    def check(self) -> None:
        if self.id == 0:
            raise UninitializedVariableError(self)
        if self.lower > self.upper:
            raise InvalidBoundsError(self, self.lower, self.upper)

    def variables(self) -> List["Variable"]:
        return [self]

    def constant(self) -> float:
        return 0.0

    def linear_coeff(self, wrt: Optional[Sequence["Variable"]] = None) -> np.ndarray:
        if wrt is None:
            wrt = [self]
        coeffs = np.zeros(len(wrt), dtype=config.numerics.dtype)
        coeffs[column_of(column_index(wrt), self)] = 1.0
        return coeffs

    def degree(self) -> int:
        return 1

    def derivative_wrt(self, variable: "Variable"):
        from .constant import K

        return K(1.0) if variable.id == self.id else K(0.0)

    def _evaluate(self, assignment: Dict[int, float]) -> float:
        try:
            return assignment[self.id]
        except KeyError:
            raise MissingVariableError(self, "the assignment") from None

    def to_monomial(self):
        from .monomial import Monomial

        return Monomial(1.0, (self,), (1,))

    def to_polynomial(self):
        from .polynomial import Polynomial

        return Polynomial([self.to_monomial()])

    def power(self, exponent: int):
        """Return ``self ** exponent`` as a Monomial."""
        return self.to_monomial().power(exponent)

    def __pow__(self, exponent):
        return self.power(exponent)

    def _plus(self, right, reflected: bool = False):
        return self.to_monomial()._plus(right, reflected)

    def _multiply(self, right, reflected: bool = False):
        return self.to_monomial()._multiply(right, reflected)

    def __repr__(self):
        return f"Var({self.name!r})"


class VariableVector(VectorExpr):
    """Vector of decision variables.

    Attributes:
        elements: Tuple of Variable objects

    Example:
        >>> vv = new_variable_vector(3)
        >>> vv.linear_coeff()      # 3x3 identity
        >>> vv + np.ones(3)        # PolynomialVector
    """

    _rank = 5
    element_type = Variable

    def constant(self) -> np.ndarray:
        return np.zeros(len(self), dtype=config.numerics.dtype)

    def linear_coeff(self, wrt: Optional[Sequence[Variable]] = None) -> np.ndarray:
        if wrt is None:
            wrt = self.variables()
        columns = column_index(wrt)
        coeffs = np.zeros((len(self), len(wrt)), dtype=config.numerics.dtype)
        for row, variable in enumerate(self.elements):
            coeffs[row, column_of(columns, variable)] = 1.0
        return coeffs

    def to_monomial_vector(self):
        from .monomial import MonomialVector

        return MonomialVector([v.to_monomial() for v in self.elements])

    def to_polynomial_vector(self):
        from .polynomial import PolynomialVector

        return PolynomialVector([v.to_polynomial() for v in self.elements])


def new_variable(
    lower: float = -np.inf,
    upper: float = np.inf,
    type: VarType = VarType.CONTINUOUS,
    name: Optional[str] = None,
    generator: Optional[IdGenerator] = None,
) -> Variable:
    """Create a Variable with a fresh id.

    Args:
        lower (float): Lower bound. Defaults to -inf.
        upper (float): Upper bound. Defaults to inf.
        type (VarType): Variable domain. Defaults to VarType.CONTINUOUS.
        name (str, optional): Display name. Defaults to ``x_<id>``.
        generator (IdGenerator, optional): Source of ids. Defaults to the process-wide generator.

    Returns:
        Variable: The new variable
    """
    generator = generator or _ids
    return Variable(generator.next_id(), lower=lower, upper=upper, type=type, name=name)


def new_variable_vector(
    n: int,
    lower: float = -np.inf,
    upper: float = np.inf,
    type: VarType = VarType.CONTINUOUS,
    generator: Optional[IdGenerator] = None,
) -> VariableVector:
    """Create a VariableVector of ``n`` variables with fresh, distinct ids.

    Raises:
        ValueError: If ``n`` is negative
    """
    if n < 0:
        raise ValueError(f"a variable vector needs a non-negative length, got {n}")
    generator = generator or _ids
    return VariableVector(
        [Variable(vid, lower=lower, upper=upper, type=type) for vid in generator.next_ids(n)]
    )
