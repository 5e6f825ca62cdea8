from typing import Any, Callable, Dict, Sequence, Type

import jax.numpy as jnp
import numpy as np

from symbolicmath.symbolic.expr import (
    Constraint,
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

_JAX_VISITORS: Dict[Type[Any], Callable] = {}


def visitor(expr_cls: Type[Any]):
    def register(fn: Callable[[Any, Any], Callable]):
        _JAX_VISITORS[expr_cls] = fn
        return fn

    return register


def dispatch(lowerer: Any, expr: Any):
    fn = _JAX_VISITORS.get(type(expr))
    if fn is None:
        raise NotImplementedError(
            f"{lowerer.__class__.__name__!r} has no visitor for {type(expr).__name__}"
        )
    return fn(lowerer, expr)


class JaxLowerer:
    """
    Lowers symbolic expressions to JAX functions of the stacked variable vector.

    Every lowered function has the signature ``f(x) -> jnp.ndarray`` where
    ``x[j]`` is the value of ``wrt[j]``. The functions are pure, so they can be
    jitted and differentiated with ``jax.jacfwd``. Constraints lower to their
    residual, which is non-positive (or zero for equalities) when satisfied.
    """

    def __init__(self, wrt: Sequence[Variable]):
        """
        Initialize the JAX lowerer.

        Args:
            wrt: Ordering of the variables; variable ``wrt[j]`` reads ``x[j]``.
        """
        self.wrt = tuple(wrt)
        self._columns = column_index(self.wrt)

    def lower(self, expr: Any) -> Callable:
        """Lower a symbolic expression or constraint to a JAX function."""
        return dispatch(self, expr)

    def _column(self, variable: Variable) -> int:
        return column_of(self._columns, variable)

    @visitor(K)
    def visit_constant(self, node: K):
        value = jnp.asarray(node.value)
        return lambda x: value

    @visitor(KVector)
    def visit_constant_vector(self, node: KVector):
        value = jnp.asarray(node.values)
        return lambda x: value

    @visitor(Variable)
    def visit_variable(self, node: Variable):
        col = self._column(node)
        return lambda x: x[col]

    @visitor(VariableVector)
    def visit_variable_vector(self, node: VariableVector):
        cols = np.array([self._column(v) for v in node.elements], dtype=int)
        return lambda x: x[cols]

    @visitor(Monomial)
    def visit_monomial(self, node: Monomial):
        coeff = node.coefficient
        cols = np.array([self._column(v) for v in node.variable_factors], dtype=int)
        exps = np.array(node.exponents, dtype=int)
        if cols.size == 0:
            return lambda x: jnp.asarray(coeff)
        return lambda x: coeff * jnp.prod(x[cols] ** exps)

    @visitor(Polynomial)
    def visit_polynomial(self, node: Polynomial):
        fs = [self.lower(term) for term in node.terms]

        def fn(x):
            acc = jnp.asarray(0.0)
            for f in fs:
                acc = acc + f(x)
            return acc

        return fn

    @visitor(MonomialVector)
    def visit_monomial_vector(self, node: MonomialVector):
        return self._stack(node)

    @visitor(PolynomialVector)
    def visit_polynomial_vector(self, node: PolynomialVector):
        return self._stack(node)

    def _stack(self, node):
        fs = [self.lower(element) for element in node.elements]
        if not fs:
            return lambda x: jnp.zeros(0)
        return lambda x: jnp.stack([f(x) for f in fs])

    @visitor(Constraint)
    def visit_constraint(self, node: Constraint):
        return self._residual(node)

    @visitor(VectorConstraint)
    def visit_vector_constraint(self, node: VectorConstraint):
        return self._residual(node)

    def _residual(self, node: Constraint):
        fL = self.lower(node.lhs)
        fR = self.lower(node.rhs)
        if node.sense is Sense.GreaterThanEqual:
            return lambda x: fR(x) - fL(x)
        return lambda x: fL(x) - fR(x)
