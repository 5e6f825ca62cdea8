from typing import Dict, Optional, Sequence

import numpy as np

from symbolicmath import config

from .expr import ScalarExpr, VectorExpr, unique_variables
from .monomial import Monomial, _check_exponent


class Polynomial(ScalarExpr):
    """A sum of monomial terms.

    Arithmetic always returns polynomials whose like terms are merged (see
    ``from_terms``); the plain constructor keeps the terms it is given.

    Attributes:
        terms (tuple): Monomial terms of the sum

    Example:
        >>> x, y = new_variable(), new_variable()
        >>> p = 2 * x + 3 * y + 1
        >>> p.linear_coeff([x, y])     # array([2., 3.])
        >>> p.constant()               # 1.0
    """

    _rank = 3

    def __init__(self, terms: Sequence[ScalarExpr] = ()):
        converted = []
        for ii, term in enumerate(terms):
            if not isinstance(term, ScalarExpr) or isinstance(term, Polynomial):
                raise TypeError(
                    f"Polynomial term {ii} must be a K, Variable or Monomial, "
                    f"got {type(term).__name__}"
                )
            converted.append(term.to_monomial())
        self.terms = tuple(converted)

    @classmethod
    def from_terms(cls, terms: Sequence[Monomial]) -> "Polynomial":
        """Build a polynomial, merging like terms and dropping zero terms.

        Terms keep the order in which their variable pattern first appears.
        A merged term is dropped when its coefficient magnitude is at or
        below ``numerics.zero_tol``.
        """
        merged: Dict[tuple, list] = {}
        for term in terms:
            key = tuple(sorted(term.powers().items()))
            if key in merged:
                merged[key][0] += term.coefficient
            else:
                merged[key] = [term.coefficient, term]
        tol = config.numerics.zero_tol
        return cls(
            [
                Monomial(coeff, term.variable_factors, term.exponents)
                for coeff, term in merged.values()
                if abs(coeff) > tol
            ]
        )

    def check(self) -> None:
        for term in self.terms:
            term.check()

    def variables(self):
        return unique_variables(v for term in self.terms for v in term.variable_factors)

    def degree(self) -> int:
        return max((term.degree() for term in self.terms), default=0)

    def constant(self) -> float:
        return sum((term.coefficient for term in self.terms if term.degree() == 0), 0.0)

    def linear_coeff(self, wrt: Optional[Sequence] = None) -> np.ndarray:
        if wrt is None:
            wrt = self.variables()
        coeffs = np.zeros(len(wrt), dtype=config.numerics.dtype)
        for term in self.terms:
            coeffs += term.linear_coeff(wrt)
        return coeffs

    def is_linear(self) -> bool:
        return self.degree() <= 1

    def derivative_wrt(self, variable) -> "Polynomial":
        return Polynomial.from_terms(
            [term.derivative_wrt(variable).to_monomial() for term in self.terms]
        )

    def _evaluate(self, assignment: Dict[int, float]) -> float:
        return sum((term._evaluate(assignment) for term in self.terms), 0.0)

    def to_monomial(self) -> Monomial:
        if not self.terms:
            return Monomial(0.0)
        if len(self.terms) == 1:
            return self.terms[0]
        return super().to_monomial()

    def to_polynomial(self) -> "Polynomial":
        return self

    def _scaled(self, factor: float) -> "Polynomial":
        return Polynomial.from_terms([term._scaled(factor) for term in self.terms])

    def power(self, exponent: int) -> "Polynomial":
        """Return ``self ** exponent`` by repeated multiplication.

        Raises:
            NegativeExponentError: If ``exponent`` is negative
        """
        exponent = _check_exponent(exponent)
        result = Polynomial([Monomial(1.0)])
        for _ in range(exponent):
            result = result._multiply(self)
        return result

    def __pow__(self, exponent):
        return self.power(exponent)

    def _plus(self, right: ScalarExpr, reflected: bool = False) -> "Polynomial":
        other = right.to_polynomial().terms
        if reflected:
            return Polynomial.from_terms(other + self.terms)
        return Polynomial.from_terms(self.terms + other)

    def _multiply(self, right: ScalarExpr, reflected: bool = False) -> "Polynomial":
        first, second = self.terms, right.to_polynomial().terms
        if reflected:
            first, second = second, first
        return Polynomial.from_terms([a._multiply(b) for a in first for b in second])

    def __repr__(self):
        if not self.terms:
            return "Polynomial(0.0)"
        return f"Polynomial({' + '.join(term._format() for term in self.terms)})"


class PolynomialVector(VectorExpr):
    """Vector of polynomials, one per row."""

    _rank = 7
    element_type = Polynomial

    def is_linear(self) -> bool:
        return self.degree() <= 1
