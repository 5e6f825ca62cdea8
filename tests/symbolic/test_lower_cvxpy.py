import cvxpy as cp
import numpy as np
import pytest

from symbolicmath import (
    K,
    KVector,
    Sense,
    UnsupportedOperationError,
    new_variable,
    new_variable_vector,
    ordered_variables,
)
from symbolicmath.symbolic.expr import Expr
from symbolicmath.symbolic.lower import lower_to_cvxpy
from symbolicmath.symbolic.lowerers.cvxpy import CvxpyLowerer


class UnregisteredExpr(Expr):
    pass


class TestCvxpyLowerer:
    def test_unregistered_expression(self):
        lowerer = CvxpyLowerer(cp.Variable(1), [new_variable()])
        with pytest.raises(NotImplementedError, match="has no visitor for UnregisteredExpr"):
            lowerer.lower(UnregisteredExpr())

    def test_variable_shape_must_match_ordering(self):
        x, y = new_variable(), new_variable()
        with pytest.raises(ValueError, match="shape"):
            CvxpyLowerer(cp.Variable(3), [x, y])

    def test_constant(self):
        """Test lowering constant values"""
        lowerer = CvxpyLowerer(cp.Variable(1), [new_variable()])

        result = lowerer.lower(K(5.0))
        assert isinstance(result, cp.Constant)
        assert result.value == 5.0

        result = lowerer.lower(KVector([1.0, 2.0, 3.0]))
        assert isinstance(result, cp.Constant)
        np.testing.assert_array_equal(result.value, [1, 2, 3])

    def test_variable(self):
        """Test lowering a single variable to its entry of x"""
        x, y = new_variable(), new_variable()
        x_cvx = cp.Variable(2, name="x")
        lowerer = CvxpyLowerer(x_cvx, [x, y])

        result = lowerer.lower(y)
        assert isinstance(result, cp.Expression)

        x_cvx.value = np.array([3.0, 4.0])
        assert result.value == pytest.approx(4.0)

    def test_affine_vector_expression(self):
        """Test lowering A @ vv + b through the affine decomposition"""
        vv = new_variable_vector(3)
        A = np.array([[1.0, 2.0, 0.0], [0.0, -1.0, 1.0]])
        b = np.array([0.5, -0.5])
        expr = A @ vv + b
        wrt = ordered_variables(expr)
        x_cvx = cp.Variable(len(wrt))

        result = lower_to_cvxpy(expr, x_cvx, wrt)

        point = np.array([1.0, 2.0, 3.0])
        x_cvx.value = point
        np.testing.assert_allclose(result.value, A @ point + b)

    def test_scalar_polynomial(self):
        x, y = new_variable(), new_variable()
        expr = 2 * x - 3 * y + 1
        x_cvx = cp.Variable(2)

        result = lower_to_cvxpy(expr, x_cvx, [x, y])

        x_cvx.value = np.array([1.0, 1.0])
        assert result.value == pytest.approx(0.0)

    def test_nonlinear_expression_is_rejected(self):
        x = new_variable()
        with pytest.raises(UnsupportedOperationError):
            lower_to_cvxpy(x * x, cp.Variable(1), [x])

    def test_multiple_expressions(self):
        x, y = new_variable(), new_variable()
        results = lower_to_cvxpy([x + 1, 2 * y], cp.Variable(2), [x, y])
        assert len(results) == 2
        assert all(isinstance(r, cp.Expression) for r in results)


class TestCvxpyConstraints:
    @pytest.mark.parametrize("sense", [Sense.LessThanEqual, Sense.GreaterThanEqual, Sense.Equal])
    def test_scalar_constraint_residual(self, sense):
        x = new_variable()
        x_cvx = cp.Variable(1)

        result = lower_to_cvxpy((2 * x).comparison(4, sense), x_cvx, [x])

        assert isinstance(result, cp.Constraint)
        x_cvx.value = np.array([1.0])
        # cvxpy stores every relation as an expression that is <= 0 (or == 0) when satisfied
        expected = 2.0 if sense is Sense.GreaterThanEqual else -2.0
        np.testing.assert_allclose(result.expr.value, expected)

    def test_vector_constraint(self):
        vv = new_variable_vector(3)
        c = 2 * vv + 1 <= np.array([4.0, 5.0, 6.0])
        wrt = ordered_variables(c)
        x_cvx = cp.Variable(len(wrt))

        result = lower_to_cvxpy(c, x_cvx, wrt)

        assert isinstance(result, cp.Constraint)
        assert result.shape == (3,)

    def test_lowered_problem_solves(self):
        vv = new_variable_vector(2)
        wrt = list(vv)
        x_cvx = cp.Variable(2)
        constraints = lower_to_cvxpy(
            [vv >= np.array([1.0, 2.0]), vv[0] + vv[1] <= 10], x_cvx, wrt
        )
        objective = cp.Minimize(lower_to_cvxpy(vv.dot(np.ones(2)), x_cvx, wrt))

        problem = cp.Problem(objective, constraints)
        problem.solve()

        np.testing.assert_allclose(x_cvx.value, [1.0, 2.0], atol=1e-5)
