"""Symbolic expression lowering to executable backends.

The lowering process translates an expression or constraint into something a
numerical backend can run. Each backend implements a lowerer class with one
visitor per expression variant:

    - JAX: a pure function ``f(x)`` of the stacked variable vector, for
      evaluation and automatic differentiation
    - CVXPy: affine CVXPy expressions and constraints, built from the
      ``linear_coeff(wrt) @ x + constant()`` decomposition

Both lowerers take the column ordering ``wrt`` explicitly; use
``symbolicmath.symbolic.linear.ordered_variables`` to build the global one.

Example:
    Lowering the same constraint to both backends::

        vv = new_variable_vector(3)
        c = 2 * vv + 1 <= np.ones(3)
        wrt = ordered_variables(c)

        residual = lower_to_jax(c, wrt)            # residual(x) <= 0 when satisfied
        x = cp.Variable(len(wrt))
        con = lower_to_cvxpy(c, x, wrt)            # cvxpy constraint on x
"""

from typing import TYPE_CHECKING, Any, Callable, List, Sequence, Union

from symbolicmath.symbolic.expr import Constraint, Expr, Variable

if TYPE_CHECKING:
    import cvxpy as cp


def lower(expr: Union[Expr, Constraint], lowerer: Any):
    """Dispatch an expression or constraint to a backend lowerer.

    Args:
        expr: Symbolic expression or constraint to lower
        lowerer: Backend lowerer instance (JaxLowerer, CvxpyLowerer)

    Returns:
        The backend representation. JaxLowerer returns a callable ``f(x)``;
        CvxpyLowerer returns a CVXPy expression or constraint.

    Raises:
        NotImplementedError: If the lowerer has no visitor for the expression type
    """
    return lowerer.lower(expr)


def _is_single(exprs) -> bool:
    return isinstance(exprs, (Expr, Constraint))


def lower_to_jax(
    exprs: Union[Expr, Constraint, Sequence[Union[Expr, Constraint]]],
    wrt: Sequence[Variable],
) -> Union[Callable, List[Callable]]:
    """Lower symbolic expression(s) to JAX callable(s).

    Args:
        exprs: Single expression/constraint or a sequence of them
        wrt: Variable ordering; ``wrt[j]`` is read from ``x[j]``

    Returns:
        A callable ``f(x)`` for a single input, otherwise a list of callables
    """
    from symbolicmath.symbolic.lowerers.jax import JaxLowerer

    jl = JaxLowerer(wrt)
    if _is_single(exprs):
        return lower(exprs, jl)
    return [lower(e, jl) for e in exprs]


def lower_to_cvxpy(
    exprs: Union[Expr, Constraint, Sequence[Union[Expr, Constraint]]],
    x: "cp.Expression",
    wrt: Sequence[Variable],
):
    """Lower affine symbolic expression(s) or constraint(s) to CVXPy.

    Args:
        exprs: Single expression/constraint or a sequence of them
        x: CVXPy vector with one entry per variable of ``wrt``
        wrt: Variable ordering

    Returns:
        A CVXPy object for a single input, otherwise a list of them

    Raises:
        UnsupportedOperationError: If an expression has a term of degree greater than one
    """
    from symbolicmath.symbolic.lowerers.cvxpy import CvxpyLowerer

    cl = CvxpyLowerer(x, wrt)
    if _is_single(exprs):
        return lower(exprs, cl)
    return [lower(e, cl) for e in exprs]
