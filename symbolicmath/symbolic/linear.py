"""Affine extraction for expressions and constraints.

The solver-facing layer works on a single column ordering of every variable
in the model. ``ordered_variables`` builds that ordering (variables sorted by
id, which is creation order) and ``linearize`` / ``affine_form`` return the
numeric blocks for one expression or constraint over it:

    expression:   e == A @ x + b
    constraint:   A @ x  {<=, >=, ==}  b

Example:
    >>> x = new_variable_vector(3)
    >>> c = (2 * x + 1) <= np.array([4.0, 5.0, 6.0])
    >>> form = affine_form(c)
    >>> form.A          # 2 * identity
    >>> form.b          # array([3., 4., 5.])
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from symbolicmath.symbolic.expr import Constraint, Expr, Sense, Variable, unique_variables


@dataclass
class AffineConstraint:
    """Numeric form ``A @ x  sense  b`` of a linear constraint.

    Attributes:
        A: Coefficient matrix, shape (rows, len(wrt)); a 1-D row for scalar constraints
        b: Right-hand side, shape (rows,); a float for scalar constraints
        sense: Relation between ``A @ x`` and ``b``
        wrt: The variable ordering of the columns of ``A``
    """

    A: np.ndarray
    b: Union[np.ndarray, float]
    sense: Sense
    wrt: Tuple[Variable, ...]


def ordered_variables(*items: Union[Expr, Constraint]) -> list:
    """Return every variable of the given expressions and constraints, sorted by id."""
    variables = unique_variables(v for item in items for v in item.variables())
    return sorted(variables, key=lambda v: v.id)


def linearize(
    expr: Expr, wrt: Optional[Sequence[Variable]] = None
) -> Tuple[np.ndarray, Union[np.ndarray, float]]:
    """Return ``(A, b)`` with ``expr == A @ x + b`` over the ordering ``wrt``.

    Raises:
        UnsupportedOperationError: If the expression has a term of degree greater than one
        MissingVariableError: If a variable of the expression is absent from ``wrt``
    """
    expr.check()
    if wrt is None:
        wrt = expr.variables()
    return expr.linear_coeff(wrt), expr.constant()


def affine_form(
    constraint: Constraint, wrt: Optional[Sequence[Variable]] = None
) -> AffineConstraint:
    """Move every variable of a constraint to the left and every constant to the right.

    Args:
        constraint: A Constraint or VectorConstraint with affine sides
        wrt: Column ordering. Defaults to ``ordered_variables(constraint)``.

    Returns:
        AffineConstraint: ``A = coeff(lhs) - coeff(rhs)`` and ``b = const(rhs) - const(lhs)``
    """
    constraint.check()
    if wrt is None:
        wrt = ordered_variables(constraint)
    wrt = tuple(wrt)

    lhs, rhs = constraint.lhs, constraint.rhs
    A = lhs.linear_coeff(wrt) - rhs.linear_coeff(wrt)
    b = rhs.constant() - lhs.constant()
    return AffineConstraint(A=A, b=b, sense=constraint.sense, wrt=wrt)
