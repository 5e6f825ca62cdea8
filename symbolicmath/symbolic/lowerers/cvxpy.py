from typing import Any, Callable, Dict, Sequence, Type, Union

import cvxpy as cp

from symbolicmath.symbolic.expr import (
    Constraint,
    Expr,
    K,
    KVector,
    Monomial,
    MonomialVector,
    Polynomial,
    PolynomialVector,
    Sense,
    Variable,
    VariableVector,
    VectorConstraint,
)
from symbolicmath.symbolic.expr.expr import column_index, column_of

_CVXPY_VISITORS: Dict[Type[Any], Callable] = {}


def visitor(expr_cls: Type[Any]):
    def register(fn: Callable[[Any, Any], Union[cp.Expression, cp.Constraint]]):
        _CVXPY_VISITORS[expr_cls] = fn
        return fn

    return register


def dispatch(lowerer: Any, expr: Any):
    fn = _CVXPY_VISITORS.get(type(expr))
    if fn is None:
        raise NotImplementedError(
            f"{lowerer.__class__.__name__!r} has no visitor for {type(expr).__name__}"
        )
    return fn(lowerer, expr)


class CvxpyLowerer:
    """
    Lowers affine symbolic expressions and constraints to CVXPy.

    All model variables live in one CVXPy vector ``x`` created by the caller;
    ``wrt[j]`` is ``x[j]``. Non-constant expressions are lowered through their
    affine decomposition ``linear_coeff(wrt) @ x + constant()``, so anything of
    degree greater than one is rejected.
    """

    def __init__(self, x: cp.Expression, wrt: Sequence[Variable]):
        """
        Initialize the CVXPy lowerer.

        Args:
            x: CVXPy vector of shape ``(len(wrt),)`` holding every variable
            wrt: Ordering of the variables, one entry of ``x`` each

        Raises:
            ValueError: If ``x`` does not have one entry per variable
        """
        self.wrt = tuple(wrt)
        if tuple(x.shape) != (len(self.wrt),):
            raise ValueError(
                f"CVXPy variable has shape {x.shape} but {len(self.wrt)} variables were given"
            )
        self.x = x
        self._columns = column_index(self.wrt)

    def lower(self, expr: Any) -> Union[cp.Expression, cp.Constraint]:
        """Lower a symbolic expression or constraint to CVXPy."""
        return dispatch(self, expr)

    def _affine(self, node: Expr) -> cp.Expression:
        return node.linear_coeff(self.wrt) @ self.x + node.constant()

    @visitor(K)
    def visit_constant(self, node: K) -> cp.Expression:
        return cp.Constant(node.value)

    @visitor(KVector)
    def visit_constant_vector(self, node: KVector) -> cp.Expression:
        return cp.Constant(node.to_numpy())

    @visitor(Variable)
    def visit_variable(self, node: Variable) -> cp.Expression:
        return self.x[column_of(self._columns, node)]

    @visitor(VariableVector)
    def visit_variable_vector(self, node: VariableVector) -> cp.Expression:
        return self._affine(node)

    @visitor(Monomial)
    def visit_monomial(self, node: Monomial) -> cp.Expression:
        return self._affine(node)

    @visitor(Polynomial)
    def visit_polynomial(self, node: Polynomial) -> cp.Expression:
        return self._affine(node)

    @visitor(MonomialVector)
    def visit_monomial_vector(self, node: MonomialVector) -> cp.Expression:
        return self._affine(node)

    @visitor(PolynomialVector)
    def visit_polynomial_vector(self, node: PolynomialVector) -> cp.Expression:
        return self._affine(node)

    @visitor(Constraint)
    def visit_constraint(self, node: Constraint) -> cp.Constraint:
        return self._relation(node)

    @visitor(VectorConstraint)
    def visit_vector_constraint(self, node: VectorConstraint) -> cp.Constraint:
        return self._relation(node)

    def _relation(self, node: Constraint) -> cp.Constraint:
        node.check()
        left = self.lower(node.lhs)
        right = self.lower(node.rhs)
        if node.sense is Sense.LessThanEqual:
            return left <= right
        if node.sense is Sense.GreaterThanEqual:
            return left >= right
        return left == right
