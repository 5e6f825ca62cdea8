import numbers
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from symbolicmath.errors import (
    InvalidIndexError,
    MissingVariableError,
    UnsupportedInputError,
    UnsupportedOperationError,
)
from symbolicmath.symbolic.dimensions import (
    check_dimensions_in_addition,
    check_dimensions_in_comparison,
    check_dimensions_in_multiplication,
)


class Expr:
    """Base class for symbolic expressions in mathematical-programming models.

    Expr is the foundation of the expression algebra. There is a closed set of
    concrete variants: the scalars K, Variable, Monomial and Polynomial, and the
    vectors KVector, VariableVector, MonomialVector and PolynomialVector. Every
    variant supports:

    - Arithmetic: plus/+, minus/-, multiply/*, unary -
    - Comparison: less_eq/<=, greater_eq/>=, eq/== (these build constraints)
    - Linearization: linear_coeff() and constant()
    - Introspection: dims(), variables(), degree(), check()
    - Differentiation and evaluation: derivative_wrt(), evaluate()

    Binary operators follow a fixed dispatch order (see ``_rank``). When the
    operand ranks above the receiver, the operand's implementation handles the
    pair, so every ordered pair of variants is implemented exactly once.

    Attributes:
        __array_priority__: Priority for operations with numpy arrays (set to 1000)
        _rank: Position of the variant in the dispatch order
        is_vector: Whether the variant is a vector expression

    Note:
        When used in operations with numpy arrays, Expr objects take precedence,
        so ``np.array([1.0, 2.0]) + x`` is handled by ``x``.
    """

    # Give Expr objects higher priority than numpy arrays in operations
    __array_priority__ = 1000

    _rank = -1
    is_vector = False

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        return self.plus(other)

    def __radd__(self, other):
        return to_expr(other).plus(self)

    def __sub__(self, other):
        return self.minus(other)

    def __rsub__(self, other):
        # e.g. 5 - x  =>  K(5).minus(x)
        return to_expr(other).minus(self)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, other):
        return to_expr(other).multiply(self)

    def __neg__(self):
        return self.multiply(-1.0)

    def __le__(self, other):
        return self.less_eq(other)

    def __ge__(self, other):
        return self.greater_eq(other)

    def __eq__(self, other):
        return self.eq(other)

    # __eq__ builds constraints, so expressions are unhashable unless a
    # variant restores __hash__ (Variable does, by id).
    __hash__ = None

    @property
    def T(self):
        """Transpose property, same as ``transpose()``."""
        return self.transpose()

    # ------------------------------------------------------------------
    # Capability set
    # ------------------------------------------------------------------

    def dims(self) -> Tuple[int, int]:
        """Return the shape of the expression.

        Returns:
            tuple: ``(N, 1)`` for a vector of length N and ``(1, 1)`` for scalars
        """
        raise NotImplementedError(f"dims() not implemented for {self.__class__.__name__}")

    def check(self) -> None:
        """Validate the expression.

        Returns None when the expression is well formed and raises otherwise.
        Every operator checks its receiver and its operand before computing.

        Raises:
            UninitializedVariableError: If a variable was never initialized
            ElementError: If an element of a vector fails its own check
        """
        raise NotImplementedError(f"check() not implemented for {self.__class__.__name__}")

    def variables(self) -> List["Variable"]:
        """Return the distinct variables in the expression.

        Returns:
            list: Variables ordered by first occurrence, deduplicated by id
        """
        raise NotImplementedError(f"variables() not implemented for {self.__class__.__name__}")

    def constant(self):
        """Return the additive constant of the expression.

        Returns:
            float for scalars, ``np.ndarray`` of shape (N,) for vectors
        """
        raise NotImplementedError(f"constant() not implemented for {self.__class__.__name__}")

    def linear_coeff(self, wrt: Optional[Sequence["Variable"]] = None) -> np.ndarray:
        """Return the coefficients of the expression with respect to an ordering of variables.

        Together with ``constant()`` this is the affine decomposition of the
        expression: ``e == linear_coeff(wrt) @ x + constant()`` for every
        assignment ``x`` of the variables in ``wrt``.

        Args:
            wrt: Ordering of the variables, one column each. Defaults to
                ``self.variables()``.

        Returns:
            np.ndarray: Shape ``(len(wrt),)`` for scalars, ``(N, len(wrt))`` for vectors

        Raises:
            MissingVariableError: If a variable of the expression is absent from ``wrt``
            UnsupportedOperationError: If a term has degree greater than one
        """
        raise NotImplementedError(
            f"linear_coeff() not implemented for {self.__class__.__name__}"
        )

    def degree(self) -> int:
        raise NotImplementedError(f"degree() not implemented for {self.__class__.__name__}")

    def derivative_wrt(self, variable: "Variable") -> "Expr":
        """Return the partial derivative of the expression with respect to ``variable``."""
        raise NotImplementedError(
            f"derivative_wrt() not implemented for {self.__class__.__name__}"
        )

    def evaluate(self, values: Mapping[Union["Variable", int], float]):
        """Evaluate the expression numerically.

        Args:
            values: Mapping from Variable (or variable id) to its value

        Returns:
            float for scalars, ``np.ndarray`` for vectors

        Raises:
            MissingVariableError: If a variable of the expression has no value
        """
        return self._evaluate(as_assignment(values))

    def _evaluate(self, assignment: Dict[int, float]):
        raise NotImplementedError(f"evaluate() not implemented for {self.__class__.__name__}")

    def transpose(self):
        raise NotImplementedError(f"transpose() not implemented for {self.__class__.__name__}")

    # ------------------------------------------------------------------
    # Arithmetic templates
    # ------------------------------------------------------------------

    def plus(self, other) -> "Expr":
        """Add another expression, number or array to this expression.

        Scalars broadcast against vectors; two vectors must have equal length.

        Raises:
            DimensionError: If two vectors of different lengths are added
            UnsupportedInputError: If ``other`` cannot be interpreted as an expression
        """
        self.check()
        right = to_expr(other)
        right.check()
        check_dimensions_in_addition(self, right)

        if outranks(right, self):
            return right._plus(self, reflected=True)
        return self._plus(right)

    def minus(self, other) -> "Expr":
        """Subtract another expression, number or array from this expression."""
        self.check()
        right = to_expr(other)
        right.check()
        check_dimensions_in_addition(self, right, operation="Minus")

        return self.plus(right.multiply(-1.0))

    def multiply(self, other) -> "Expr":
        """Multiply this expression by another expression, number or array.

        Scalar times anything is valid. Vector times vector would produce a
        matrix and is rejected; use ``dot()`` or ``@`` for the inner product.

        Raises:
            DimensionError: If both operands are vectors
            UnsupportedOperationError: If ``other`` is a 2-D matrix
        """
        self.check()
        if isinstance(other, np.ndarray) and other.ndim == 2 and other.shape[1] != 1:
            raise UnsupportedOperationError(
                "Multiply",
                "operations that result in matrices are not supported; "
                "write matrix-vector products with the @ operator",
            )
        right = to_expr(other)
        right.check()
        check_dimensions_in_multiplication(self, right)

        if outranks(right, self):
            return right._multiply(self, reflected=True)
        return self._multiply(right)

    # The canonical implementations below receive an operand that does not
    # outrank the receiver. ``reflected`` is True when that operand was the
    # left one, so results keep the caller's operand order.

    def _plus(self, right: "Expr", reflected: bool = False) -> "Expr":
        raise NotImplementedError(f"plus() not implemented for {self.__class__.__name__}")

    def _multiply(self, right: "Expr", reflected: bool = False) -> "Expr":
        raise NotImplementedError(f"multiply() not implemented for {self.__class__.__name__}")

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def comparison(self, other, sense) -> "Constraint":
        """Build a constraint between this expression and another.

        The constraint only records both sides and the sense; it is never
        evaluated to a truth value. Constant scalars compared against a vector
        are broadcast to a KVector of the same length.

        Args:
            other: Right-hand side (expression, number or array)
            sense: A ``Sense`` or its string form ("<=", ">=", "==")

        Returns:
            Constraint for scalar sides, VectorConstraint for vector sides

        Raises:
            DimensionError: If the two sides have different shapes
        """
        from .constant import K, KVector
        from .constraint import Sense

        sense = Sense(sense)
        self.check()
        right = to_expr(other)
        right.check()

        left = self
        if left.is_vector and isinstance(right, K):
            right = KVector(np.full(len(left), right.value))
        elif right.is_vector and isinstance(left, K):
            left = KVector(np.full(len(right), left.value))
        check_dimensions_in_comparison(left, right, sense)

        if outranks(right, left):
            return right._comparison(left, sense.reverse())
        return left._comparison(right, sense)

    def _comparison(self, right: "Expr", sense) -> "Constraint":
        from .constraint import Constraint, VectorConstraint, warn_if_constant

        if self.is_vector:
            constraint = VectorConstraint(self, right, sense)
        else:
            constraint = Constraint(self, right, sense)
        warn_if_constant(constraint)
        return constraint

    def less_eq(self, other) -> "Constraint":
        """Return the constraint ``self <= other``."""
        from .constraint import Sense

        return self.comparison(other, Sense.LessThanEqual)

    def greater_eq(self, other) -> "Constraint":
        """Return the constraint ``self >= other``."""
        from .constraint import Sense

        return self.comparison(other, Sense.GreaterThanEqual)

    def eq(self, other) -> "Constraint":
        """Return the constraint ``self == other``."""
        from .constraint import Sense

        return self.comparison(other, Sense.Equal)


class ScalarExpr(Expr):
    """Base class for the scalar variants K, Variable, Monomial and Polynomial."""

    def dims(self) -> Tuple[int, int]:
        return (1, 1)

    def transpose(self) -> "ScalarExpr":
        # The transpose of a scalar is the scalar itself.
        return self

    def to_monomial(self) -> "Monomial":
        raise UnsupportedOperationError(
            "ToMonomial", f"{self.__class__.__name__} cannot be written as a single monomial"
        )

    def to_polynomial(self) -> "Polynomial":
        raise NotImplementedError(
            f"to_polynomial() not implemented for {self.__class__.__name__}"
        )


class VectorExpr(Expr):
    """Base class for vector expressions.

    A vector expression is a fixed-length, ordered sequence of scalar
    expressions. Elementwise arithmetic, element validation and row-by-row
    linearization are shared here; variants override the parts they can do
    faster (KVector works directly on its numpy array).

    Attributes:
        elements: Tuple of scalar expressions, one per row
    """

    is_vector = True
    element_type = ScalarExpr

    def __init__(self, elements: Sequence[ScalarExpr] = ()):
        elements = tuple(elements)
        for ii, element in enumerate(elements):
            if not isinstance(element, self.element_type):
                raise TypeError(
                    f"{self.__class__.__name__} element {ii} must be a "
                    f"{self.element_type.__name__}, got {type(element).__name__}"
                )
        self.elements = elements

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return vector_of(self.elements[idx])
        return self.at_vec(idx)

    def __matmul__(self, other):
        return self.dot(other)

    def __rmatmul__(self, other):
        matrix = np.asarray(other)
        if matrix.ndim == 1:
            return self.dot(matrix)
        if matrix.ndim != 2:
            raise UnsupportedInputError("MatMul", other)
        return self.left_multiply(matrix)

    def dims(self) -> Tuple[int, int]:
        return (len(self), 1)

    def at_vec(self, idx: int) -> ScalarExpr:
        """Return the scalar expression at row ``idx``.

        Raises:
            InvalidIndexError: If ``idx`` is outside ``[0, len(self))``
        """
        self._check_index(idx)
        return self.elements[idx]

    def _check_index(self, idx) -> None:
        if isinstance(idx, bool) or not isinstance(idx, (int, np.integer)):
            raise UnsupportedInputError("AtVec", idx)
        if idx < 0 or idx >= len(self):
            raise InvalidIndexError(int(idx), len(self))

    def check(self) -> None:
        from symbolicmath.errors import ElementError

        for ii, element in enumerate(self.elements):
            try:
                element.check()
            except Exception as err:
                raise ElementError(ii, err) from err

    def variables(self) -> List["Variable"]:
        return unique_variables(v for element in self.elements for v in element.variables())

    def constant(self) -> np.ndarray:
        from symbolicmath.config import numerics

        return np.array([element.constant() for element in self.elements], dtype=numerics.dtype)

    def linear_coeff(self, wrt: Optional[Sequence["Variable"]] = None) -> np.ndarray:
        from symbolicmath.config import numerics

        if wrt is None:
            wrt = self.variables()
        wrt = list(wrt)
        if not self.elements:
            return np.zeros((0, len(wrt)), dtype=numerics.dtype)
        return np.vstack([element.linear_coeff(wrt) for element in self.elements])

    def degree(self) -> int:
        return max((element.degree() for element in self.elements), default=0)

    def derivative_wrt(self, variable: "Variable") -> "VectorExpr":
        return vector_of([element.derivative_wrt(variable) for element in self.elements])

    def _evaluate(self, assignment: Dict[int, float]) -> np.ndarray:
        from symbolicmath.config import numerics

        return np.array(
            [element._evaluate(assignment) for element in self.elements], dtype=numerics.dtype
        )

    def transpose(self):
        raise UnsupportedOperationError(
            "Transpose",
            f"the transpose of a {self.__class__.__name__} is a matrix expression, "
            "which is not supported",
        )

    def _plus(self, right: Expr, reflected: bool = False) -> "VectorExpr":
        return self._elementwise("plus", right, reflected)

    def _multiply(self, right: Expr, reflected: bool = False) -> "VectorExpr":
        # Vector times vector is rejected before dispatch, so right is a scalar.
        return self._elementwise("multiply", right, reflected)

    def _elementwise(self, method: str, right: Expr, reflected: bool = False) -> "VectorExpr":
        if right.is_vector:
            pairs = zip(self.elements, right.elements)
        else:
            pairs = ((element, right) for element in self.elements)
        if reflected:
            return vector_of([getattr(other, method)(left) for left, other in pairs])
        return vector_of([getattr(left, method)(other) for left, other in pairs])

    def dot(self, other) -> ScalarExpr:
        """Return the inner product of this vector with another vector of the same length.

        This is the only supported product of two vectors; it reduces to a scalar.

        Raises:
            DimensionError: If ``other`` is not a vector of the same length
        """
        from symbolicmath.errors import DimensionError

        self.check()
        right = to_expr(other)
        right.check()
        if not right.is_vector or len(right) != len(self):
            raise DimensionError("Dot", self, right)

        if outranks(right, self):
            return right._dot(self, reflected=True)
        return self._dot(right)

    def _dot(self, right: "VectorExpr", reflected: bool = False) -> ScalarExpr:
        from .constant import K

        total = K(0.0)
        for left, other in zip(self.elements, right.elements):
            product = other.multiply(left) if reflected else left.multiply(other)
            total = total.plus(product)
        return total

    def left_multiply(self, matrix) -> "VectorExpr":
        """Return ``matrix @ self`` for a constant matrix of shape (M, N).

        Raises:
            DimensionError: If the matrix does not have ``len(self)`` columns
        """
        from symbolicmath.errors import DimensionError

        self.check()
        matrix = np.asarray(matrix)
        if matrix.ndim != 2 or matrix.shape[1] != len(self):
            raise DimensionError("MatMul", matrix, self)
        return vector_of([self._dot_row(row) for row in matrix])

    def _dot_row(self, row: np.ndarray) -> ScalarExpr:
        from .polynomial import Polynomial

        terms = []
        for coeff, element in zip(row, self.elements):
            terms.extend(element.to_polynomial()._scaled(float(coeff)).terms)
        return Polynomial.from_terms(terms)

    def __repr__(self):
        inner = ", ".join(repr(element) for element in self.elements)
        return f"{self.__class__.__name__}([{inner}])"


def outranks(left: Expr, right: Expr) -> bool:
    """Return True when ``left`` comes after ``right`` in the dispatch order.

    The order is K < Variable < Monomial < Polynomial < KVector <
    VariableVector < MonomialVector < PolynomialVector.
    """
    return left._rank > right._rank


def dispatch_order() -> List[type]:
    """Return the expression variants sorted by their dispatch rank."""
    from .constant import K, KVector
    from .monomial import Monomial, MonomialVector
    from .polynomial import Polynomial, PolynomialVector
    from .variable import Variable, VariableVector

    variants = [
        K, Variable, Monomial, Polynomial, KVector, VariableVector, MonomialVector, PolynomialVector
    ]
    return sorted(variants, key=lambda cls: cls._rank)


def to_expr(value) -> Expr:
    """Interpret a value as an expression.

    Numbers become K, 1-D arrays and (N, 1) column arrays become KVector, and
    expressions are returned unchanged. Every operator calls this first.

    Args:
        value: Expression, Python/numpy number or numpy array

    Returns:
        Expr: The value as an expression

    Raises:
        UnsupportedInputError: If the value has no expression form

    Example:
        >>> to_expr(5.0)                  # K(5.0)
        >>> to_expr(np.array([1.0, 2.0])) # KVector([1.0, 2.0])
        >>> to_expr(x) is x               # True for any expression x
    """
    from .constant import K, KVector

    if isinstance(value, Expr):
        return value
    if isinstance(value, (numbers.Real, np.number)) and not isinstance(value, (bool, np.bool_)):
        return K(value)
    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return K(value.item())
        if value.ndim == 1:
            return KVector(value)
        if value.ndim == 2 and value.shape[1] == 1:
            return KVector(value[:, 0])
    raise UnsupportedInputError("to_expr", value)


def is_expr(value) -> bool:
    """Return True when ``to_expr`` accepts the value."""
    try:
        to_expr(value)
    except UnsupportedInputError:
        return False
    return True


def unique_variables(variables) -> List["Variable"]:
    """Deduplicate variables by id, keeping the first occurrence of each."""
    seen = {}
    for variable in variables:
        if variable.id not in seen:
            seen[variable.id] = variable
    return list(seen.values())


def as_assignment(values: Mapping) -> Dict[int, float]:
    """Normalize a mapping keyed by Variable or variable id to ``{id: value}``."""
    from .variable import Variable

    assignment = {}
    for key, value in values.items():
        if isinstance(key, Variable):
            assignment[key.id] = float(value)
        elif isinstance(key, (int, np.integer)) and not isinstance(key, bool):
            assignment[int(key)] = float(value)
        else:
            raise UnsupportedInputError("evaluate", key)
    return assignment


def column_index(wrt: Sequence["Variable"]) -> Dict[int, int]:
    """Map variable ids to their column in the ordering ``wrt``."""
    columns = {}
    for col, variable in enumerate(wrt):
        columns.setdefault(variable.id, col)
    return columns


def column_of(columns: Dict[int, int], variable: "Variable") -> int:
    try:
        return columns[variable.id]
    except KeyError:
        raise MissingVariableError(variable) from None


def vector_of(elements: Sequence[ScalarExpr]) -> VectorExpr:
    """Build the simplest vector expression that holds the given scalars.

    All constants give a KVector, all bare variables a VariableVector, any mix
    of constants, variables and monomials a MonomialVector, and anything else
    a PolynomialVector.
    """
    from .constant import K, KVector
    from .monomial import Monomial, MonomialVector
    from .polynomial import PolynomialVector
    from .variable import Variable, VariableVector

    elements = list(elements)
    if all(isinstance(e, K) for e in elements):
        return KVector([e.value for e in elements])
    if all(isinstance(e, Variable) for e in elements):
        return VariableVector(elements)
    if all(isinstance(e, (K, Variable, Monomial)) for e in elements):
        return MonomialVector([e.to_monomial() for e in elements])
    return PolynomialVector([e.to_polynomial() for e in elements])
