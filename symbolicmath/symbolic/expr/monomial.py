from typing import Dict, List, Optional, Sequence

import numpy as np

from symbolicmath import config
from symbolicmath.errors import NegativeExponentError, UnsupportedOperationError

from .expr import ScalarExpr, VectorExpr, column_index, column_of
from .variable import Variable


def _check_exponent(exponent) -> int:
    if isinstance(exponent, bool) or not isinstance(exponent, (int, np.integer)):
        raise TypeError(f"exponents must be integers, got {type(exponent).__name__}")
    if exponent < 0:
        raise NegativeExponentError(int(exponent))
    return int(exponent)


class Monomial(ScalarExpr):
    """A coefficient times a product of variable powers.

    Repeated factors are merged on construction and factors with a zero
    exponent are dropped, so ``variable_factors`` holds distinct variables.
    A coefficient whose magnitude is at or below ``numerics.zero_tol`` gives
    the zero monomial, which has no factors and degree 0.

    Attributes:
        coefficient (float): Scalar multiplier
        variable_factors (tuple): Distinct Variables in the product
        exponents (tuple): Non-negative integer exponent of each factor

    Example:
        >>> x, y = new_variable(), new_variable()
        >>> m = Monomial(3.0, (x, y, x), (1, 1, 1))   # 3 * x**2 * y
        >>> m.degree()                                # 3
        >>> m.derivative_wrt(x)                       # 6 * x * y
    """

    _rank = 2

    def __init__(
        self,
        coefficient: float = 1.0,
        variable_factors: Sequence[Variable] = (),
        exponents: Optional[Sequence[int]] = None,
    ):
        factors = tuple(variable_factors)
        exponents = (1,) * len(factors) if exponents is None else tuple(exponents)
        if len(factors) != len(exponents):
            raise ValueError(
                f"Monomial has {len(factors)} variable factors but {len(exponents)} exponents"
            )

        merged: Dict[int, list] = {}
        for factor, exponent in zip(factors, exponents):
            if not isinstance(factor, Variable):
                raise TypeError(
                    f"Monomial factors must be Variables, got {type(factor).__name__}"
                )
            exponent = _check_exponent(exponent)
            if exponent == 0:
                continue
            if factor.id in merged:
                merged[factor.id][1] += exponent
            else:
                merged[factor.id] = [factor, exponent]

        self.coefficient = float(coefficient)
        if abs(self.coefficient) <= config.numerics.zero_tol:
            self.coefficient = 0.0
            merged = {}
        self.variable_factors = tuple(factor for factor, _ in merged.values())
        self.exponents = tuple(exponent for _, exponent in merged.values())

    def powers(self) -> Dict[int, int]:
        """Return the exponent of each factor keyed by variable id."""
        return {f.id: e for f, e in zip(self.variable_factors, self.exponents)}

    def matches(self, other: "Monomial") -> bool:
        """Return True when both monomials have the same variables with the same exponents."""
        return self.powers() == other.powers()

    def check(self) -> None:
        for factor in self.variable_factors:
            factor.check()

    def variables(self) -> List[Variable]:
        return list(self.variable_factors)

    def degree(self) -> int:
        return sum(self.exponents)

    def constant(self) -> float:
        return self.coefficient if self.degree() == 0 else 0.0

    def linear_coeff(self, wrt: Optional[Sequence[Variable]] = None) -> np.ndarray:
        if wrt is None:
            wrt = self.variables()
        coeffs = np.zeros(len(wrt), dtype=config.numerics.dtype)
        degree = self.degree()
        if degree > 1:
            raise UnsupportedOperationError(
                "LinearCoeff",
                f"{self!r} has degree {degree}; only terms of degree 0 or 1 have linear coefficients",
            )
        if degree == 1:
            coeffs[column_of(column_index(wrt), self.variable_factors[0])] = self.coefficient
        return coeffs

    def derivative_wrt(self, variable: Variable) -> ScalarExpr:
        from .constant import K

        exponent = self.powers().get(variable.id, 0)
        if exponent == 0:
            return K(0.0)
        exponents = tuple(
            e - 1 if f.id == variable.id else e
            for f, e in zip(self.variable_factors, self.exponents)
        )
        return Monomial(self.coefficient * exponent, self.variable_factors, exponents)

    def _evaluate(self, assignment: Dict[int, float]) -> float:
        value = self.coefficient
        for factor, exponent in zip(self.variable_factors, self.exponents):
            value *= factor._evaluate(assignment) ** exponent
        return value

    def to_monomial(self) -> "Monomial":
        return self

    def to_polynomial(self):
        from .polynomial import Polynomial

        return Polynomial([self])

    def _scaled(self, factor: float) -> "Monomial":
        return Monomial(self.coefficient * factor, self.variable_factors, self.exponents)

    def power(self, exponent: int) -> "Monomial":
        """Return ``self ** exponent``.

        Raises:
            NegativeExponentError: If ``exponent`` is negative
        """
        exponent = _check_exponent(exponent)
        return Monomial(
            self.coefficient**exponent,
            self.variable_factors,
            tuple(e * exponent for e in self.exponents),
        )

    def __pow__(self, exponent):
        return self.power(exponent)

    def _plus(self, right: ScalarExpr, reflected: bool = False):
        from .polynomial import Polynomial

        terms = [self, right.to_monomial()]
        if reflected:
            terms.reverse()
        return Polynomial.from_terms(terms)

    def _multiply(self, right: ScalarExpr, reflected: bool = False) -> "Monomial":
        first, second = self, right.to_monomial()
        if reflected:
            first, second = second, first
        return Monomial(
            first.coefficient * second.coefficient,
            first.variable_factors + second.variable_factors,
            first.exponents + second.exponents,
        )

    def _format(self) -> str:
        parts = [repr(self.coefficient)]
        for factor, exponent in zip(self.variable_factors, self.exponents):
            parts.append(factor.name if exponent == 1 else f"{factor.name}**{exponent}")
        return " * ".join(parts)

    def __repr__(self):
        return f"Monomial({self._format()})"


class MonomialVector(VectorExpr):
    """Vector of monomials, one per row."""

    _rank = 6
    element_type = Monomial

    def to_polynomial_vector(self):
        from .polynomial import PolynomialVector

        return PolynomialVector([m.to_polynomial() for m in self.elements])
