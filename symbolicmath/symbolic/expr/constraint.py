import os
import sys
import warnings
from enum import Enum
from typing import List, Tuple

from symbolicmath.errors import DimensionError

from .expr import Expr, unique_variables


class Sense(Enum):
    """Relational sense of a constraint. Purely descriptive, never evaluated."""

    LessThanEqual = "<="
    GreaterThanEqual = ">="
    Equal = "=="

    def reverse(self) -> "Sense":
        """Return the sense that holds when the two sides are swapped."""
        if self is Sense.LessThanEqual:
            return Sense.GreaterThanEqual
        if self is Sense.GreaterThanEqual:
            return Sense.LessThanEqual
        return self

    def __str__(self):
        return self.value


class Constraint:
    """A recorded comparison between two scalar expressions.

    Constraints are built by ``Expr.comparison`` (or the ``<=``, ``>=``, ``==``
    operators) and consumed by a solver-facing layer. They only hold their two
    sides and the sense; they never evaluate to a truth value and never modify
    the expressions they reference.

    Attributes:
        lhs: Left-hand side expression
        rhs: Right-hand side expression
        sense (Sense): Relation between the two sides

    Example:
        >>> x = new_variable()
        >>> c = x <= 10
        >>> c.lhs is x, c.rhs, c.sense      # (True, K(10.0), Sense.LessThanEqual)
    """

    def __init__(self, lhs: Expr, rhs: Expr, sense: Sense):
        if not isinstance(lhs, Expr) or not isinstance(rhs, Expr):
            raise TypeError(
                f"{self.__class__.__name__} sides must be expressions, got "
                f"{type(lhs).__name__} and {type(rhs).__name__}"
            )
        self._lhs = lhs
        self._rhs = rhs
        self._sense = Sense(sense)

    @property
    def lhs(self) -> Expr:
        return self._lhs

    @property
    def rhs(self) -> Expr:
        return self._rhs

    @property
    def sense(self) -> Sense:
        return self._sense

    def left(self) -> Expr:
        return self._lhs

    def right(self) -> Expr:
        return self._rhs

    def children(self) -> List[Expr]:
        return [self._lhs, self._rhs]

    def check(self) -> None:
        """Validate both sides and their shapes.

        Raises:
            DimensionError: If a side has the wrong shape for this kind of constraint
        """
        self._lhs.check()
        self._rhs.check()
        if self._lhs.is_vector or self._rhs.is_vector:
            raise DimensionError(f"Comparison ({self._sense})", self._lhs, self._rhs)

    def variables(self):
        return unique_variables(self._lhs.variables() + self._rhs.variables())

    def is_linear(self) -> bool:
        return self._lhs.degree() <= 1 and self._rhs.degree() <= 1

    def dims(self) -> Tuple[int, int]:
        return self._lhs.dims()

    def __repr__(self):
        return f"{self._lhs!r} {self._sense} {self._rhs!r}"


class VectorConstraint(Constraint):
    """A recorded row-by-row comparison between two vector expressions of equal length."""

    def __len__(self) -> int:
        return len(self._lhs)

    def check(self) -> None:
        self._lhs.check()
        self._rhs.check()
        if (
            not (self._lhs.is_vector and self._rhs.is_vector)
            or self._lhs.dims() != self._rhs.dims()
        ):
            raise DimensionError(f"Comparison ({self._sense})", self._lhs, self._rhs)

    def at_vec(self, idx: int) -> Constraint:
        """Return the scalar constraint of row ``idx``."""
        return Constraint(self._lhs.at_vec(idx), self._rhs.at_vec(idx), self._sense)

    def __iter__(self):
        return (self.at_vec(ii) for ii in range(len(self)))


_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))) + os.sep


def _caller_stacklevel() -> int:
    """Return the ``warnings.warn`` stacklevel of the first frame outside symbolicmath."""
    # level 1 is warn_if_constant, the frame that calls warnings.warn
    frame = sys._getframe(1)
    level = 1
    while frame is not None and os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR):
        frame = frame.f_back
        level += 1
    return level


def warn_if_constant(constraint: Constraint) -> None:
    """Warn when a constraint has no variables on either side.

    The warning is attributed to the user code that built the constraint.
    """
    if not constraint.variables():
        warnings.warn(
            f"constraint {constraint!r} has no variables; "
            "it is either always or never satisfied",
            stacklevel=_caller_stacklevel(),
        )
