import numpy as np
import pytest

from symbolicmath import (
    K,
    MissingVariableError,
    Monomial,
    MonomialVector,
    NegativeExponentError,
    Polynomial,
    PolynomialVector,
    UnsupportedOperationError,
    Variable,
    new_variable,
    new_variable_vector,
)

# =============================================================================
# Monomial Construction
# =============================================================================


def test_monomial_merges_repeated_factors():
    x, y = new_variable(), new_variable()

    m = Monomial(3.0, (x, y, x), (1, 1, 1))

    assert [v.id for v in m.variable_factors] == [x.id, y.id]
    assert m.exponents == (2, 1)
    assert m.degree() == 3
    assert m.powers() == {x.id: 2, y.id: 1}


def test_monomial_drops_zero_exponents():
    x, y = new_variable(), new_variable()

    m = Monomial(2.0, (x, y), (0, 1))

    assert [v.id for v in m.variables()] == [y.id]
    assert m.degree() == 1


def test_zero_coefficient_gives_zero_monomial():
    x, y = new_variable(), new_variable()

    m = Monomial(0.0, (x, y), (2, 1))

    assert m.degree() == 0
    assert len(m.variables()) == 0
    assert m.coefficient == 0.0

    scaled = (x**2) * 0
    assert scaled.degree() == 0
    np.testing.assert_array_equal(scaled.linear_coeff([x]), [0.0])
    assert (0 * (x * y)).degree() == 0


def test_monomial_constructor_validation():
    x = new_variable()

    with pytest.raises(ValueError, match="exponents"):
        Monomial(1.0, (x,), (1, 2))
    with pytest.raises(NegativeExponentError):
        Monomial(1.0, (x,), (-1,))
    with pytest.raises(TypeError):
        Monomial(1.0, (x,), (1.5,))
    with pytest.raises(TypeError):
        Monomial(1.0, (K(1.0),), (1,))


def test_monomial_check_reports_uninitialized_factor():
    m = Monomial(1.0, (Variable(),), (1,))

    with pytest.raises(ValueError, match="not been initialized"):
        m.check()


def test_monomial_repr():
    x = new_variable(name="x")
    y = new_variable(name="y")

    assert repr(Monomial(3.0, (x, y), (2, 1))) == "Monomial(3.0 * x**2 * y)"


# =============================================================================
# Monomial Algebra
# =============================================================================


def test_monomial_constant_and_linear_coeff():
    x, y = new_variable(), new_variable()

    assert Monomial(4.0).constant() == 4.0
    assert Monomial(4.0, (x,)).constant() == 0.0
    np.testing.assert_array_equal(Monomial(4.0, (x,)).linear_coeff([y, x]), [0.0, 4.0])
    np.testing.assert_array_equal(Monomial(4.0).linear_coeff([x]), [0.0])


def test_monomial_linear_coeff_rejects_higher_degree():
    x, y = new_variable(), new_variable()

    with pytest.raises(UnsupportedOperationError) as excinfo:
        (x * y).linear_coeff()
    assert excinfo.value.operation == "LinearCoeff"

    with pytest.raises(UnsupportedOperationError):
        (x**2).linear_coeff()


def test_linear_coeff_requires_every_variable_in_ordering():
    x, y = new_variable(), new_variable()

    with pytest.raises(MissingVariableError):
        (2 * x).linear_coeff([y])
    with pytest.raises(LookupError):
        (x + y).linear_coeff([x])


def test_monomial_derivative():
    x, y, z = new_variable(), new_variable(), new_variable()
    m = Monomial(3.0, (x, y), (2, 1))

    dx = m.derivative_wrt(x)
    assert isinstance(dx, Monomial)
    assert dx.coefficient == 6.0
    assert dx.evaluate({x: 2.0, y: 5.0}) == 60.0

    dz = m.derivative_wrt(z)
    assert isinstance(dz, K)
    assert dz.value == 0.0


def test_variable_derivative():
    x, y = new_variable(), new_variable()

    assert x.derivative_wrt(x).value == 1.0
    assert x.derivative_wrt(y).value == 0.0


def test_power():
    x = new_variable()

    cube = x**3
    assert isinstance(cube, Monomial)
    assert cube.degree() == 3
    assert cube.evaluate({x: 2.0}) == 8.0

    assert (Monomial(2.0, (x,)) ** 2).coefficient == 4.0
    assert (x**0).degree() == 0

    with pytest.raises(NegativeExponentError):
        x**-1
    with pytest.raises(TypeError):
        x**0.5


def test_evaluate_accepts_variable_ids():
    x, y = new_variable(), new_variable()
    m = Monomial(2.0, (x, y), (1, 2))

    assert m.evaluate({x.id: 3.0, y.id: 2.0}) == 24.0


def test_evaluate_requires_every_variable():
    x, y = new_variable(), new_variable()

    with pytest.raises(MissingVariableError):
        (x * y).evaluate({x: 1.0})


# =============================================================================
# Polynomials
# =============================================================================


def test_polynomial_merges_like_terms():
    x, y = new_variable(), new_variable()

    p = 2 * x + 3 * y + x + 1 + 4

    assert isinstance(p, Polynomial)
    assert len(p.terms) == 3
    np.testing.assert_array_equal(p.linear_coeff([x, y]), [3.0, 3.0])
    assert p.constant() == 5.0


def test_polynomial_cancellation_leaves_zero_polynomial():
    x = new_variable()

    p = (x + 1) - x - 1

    assert isinstance(p, Polynomial)
    assert p.terms == ()
    assert p.degree() == 0
    assert p.constant() == 0.0
    assert repr(p) == "Polynomial(0.0)"


def test_polynomial_degree_and_is_linear():
    x, y = new_variable(), new_variable()

    assert (x + y + 1).is_linear()
    assert not (x * y + 1).is_linear()
    assert (x * y * y + x).degree() == 3


def test_polynomial_power_expands():
    x = new_variable()

    sq = (x + 1) ** 2

    assert sq.degree() == 2
    assert len(sq.terms) == 3
    assert sq.evaluate({x: 3.0}) == 16.0
    assert ((x + 1) ** 0).evaluate({x: 3.0}) == 1.0


def test_polynomial_derivative():
    x, y = new_variable(), new_variable()
    p = x * x * y + 3 * x + 2

    dp = p.derivative_wrt(x)

    # d/dx (x^2 y + 3x + 2) = 2xy + 3
    assert dp.evaluate({x: 2.0, y: 5.0}) == 23.0


def test_polynomial_to_monomial():
    x, y = new_variable(), new_variable()

    assert (x + 0).to_monomial().coefficient == 1.0
    assert Polynomial().to_monomial().coefficient == 0.0
    with pytest.raises(UnsupportedOperationError):
        (x + y).to_monomial()


def test_polynomial_rejects_nested_polynomial_terms():
    x = new_variable()

    with pytest.raises(TypeError):
        Polynomial([x + 1])


# =============================================================================
# Vector Forms
# =============================================================================


def test_monomial_and_polynomial_vectors():
    vv = new_variable_vector(3)

    mv = 2 * vv
    pv = mv + np.array([1.0, 2.0, 3.0])

    assert isinstance(mv, MonomialVector)
    assert isinstance(pv, PolynomialVector)
    assert pv.is_linear()
    np.testing.assert_array_equal(pv.linear_coeff(), 2 * np.eye(3))
    np.testing.assert_array_equal(pv.constant(), [1.0, 2.0, 3.0])


def test_vector_linear_coeff_rejects_higher_degree():
    vv = new_variable_vector(2)
    x = new_variable()

    quad = vv * x
    assert quad.degree() == 2
    with pytest.raises(UnsupportedOperationError):
        quad.linear_coeff()


def test_vector_derivative():
    vv = new_variable_vector(2)
    x = new_variable()

    d = (vv * x + x).derivative_wrt(x)
    values = {vv[0]: 2.0, vv[1]: -1.0, x: 7.0}

    np.testing.assert_allclose(d.evaluate(values), [3.0, 0.0])


def test_dot_product_reduces_to_scalar():
    vv = new_variable_vector(3)
    weights = np.array([1.0, 2.0, 3.0])

    s = vv.dot(weights)
    assert isinstance(s, Polynomial)
    np.testing.assert_array_equal(s.linear_coeff(list(vv)), weights)

    t = weights @ vv
    np.testing.assert_array_equal(t.linear_coeff(list(vv)), weights)

    sq = vv @ vv
    assert sq.degree() == 2
    assert sq.evaluate({v: 2.0 for v in vv}) == 12.0


def test_matrix_times_variable_vector():
    vv = new_variable_vector(3)
    A = np.array([[1.0, 0.0, 2.0], [0.0, -1.0, 0.0]])

    result = A @ vv

    assert isinstance(result, PolynomialVector)
    assert len(result) == 2
    np.testing.assert_array_equal(result.linear_coeff(list(vv)), A)


# =============================================================================
# Variable Ordering
# =============================================================================


def _ids(variables):
    return [v.id for v in variables]


def test_scalar_results_keep_operand_order():
    x, y = new_variable(), new_variable()

    assert _ids((y + 2 * x).variables()) == [y.id, x.id]
    np.testing.assert_array_equal((y + 2 * x).linear_coeff(), [1.0, 2.0])
    assert _ids((2 * x + y).variables()) == [x.id, y.id]
    assert _ids((x * y).variables()) == [x.id, y.id]
    assert _ids((y * x).variables()) == [y.id, x.id]
    assert _ids((y * (x * x)).variables()) == [y.id, x.id]
    assert _ids((x + y * y).variables()) == [x.id, y.id]
    assert _ids((1 + x + y).variables()) == [x.id, y.id]
    assert _ids((y + (x + 1)).variables()) == [y.id, x.id]
    assert _ids((y * (x + 1)).variables()) == [y.id, x.id]


def test_polynomial_variables_are_deduplicated():
    x, y = new_variable(), new_variable()

    p = x + y + x * y + 3 * x

    assert _ids(p.variables()) == [x.id, y.id]
    np.testing.assert_array_equal((x + y + x).linear_coeff(), [2.0, 1.0])


def test_vector_variables_follow_first_occurrence():
    x, y = new_variable(), new_variable()
    vv = new_variable_vector(2)

    mv = MonomialVector([x * y, y.to_monomial(), Monomial(2.0, (x,))])
    assert _ids(mv.variables()) == [x.id, y.id]

    pv = PolynomialVector([y + 1, x + y, (x * x).to_polynomial()])
    assert _ids(pv.variables()) == [y.id, x.id]

    assert _ids((x + vv).variables()) == [x.id, vv[0].id, vv[1].id]
    assert _ids((vv + x).variables()) == [vv[0].id, x.id, vv[1].id]
    np.testing.assert_array_equal((x + vv).linear_coeff(), [[1.0, 1.0, 0.0], [1.0, 0.0, 1.0]])


def test_dot_product_keeps_operand_order():
    a = new_variable_vector(2)
    b = new_variable_vector(2)

    assert _ids(a.dot(2 * b).variables()) == [a[0].id, b[0].id, a[1].id, b[1].id]
    assert _ids((2 * b).dot(a).variables()) == [b[0].id, a[0].id, b[1].id, a[1].id]
