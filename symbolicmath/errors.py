"""Structured errors raised by the symbolic expression algebra.

Every error carries the values that caused it so callers can assert on the
fields directly instead of matching message substrings. Each class also
derives from the closest builtin exception, so ``except ValueError`` and
``pytest.raises(TypeError)`` keep working.
"""

from typing import Any


def _dims_of(value: Any):
    dims = getattr(value, "dims", None)
    if callable(dims):
        return dims()
    return getattr(value, "shape", None)


class SymbolicError(Exception):
    """Base class for all errors raised by symbolicmath."""


class DimensionError(SymbolicError, ValueError):
    """Two operands have incompatible shapes for an operation.

    Attributes:
        operation: Name of the operation that was attempted (e.g. ``"Plus"``)
        arg1: Left operand, exactly as it was received
        arg2: Right operand, exactly as it was received

    Example:
        >>> vv1, vv2 = new_variable_vector(3), new_variable_vector(2)
        >>> try:
        ...     vv1 + vv2
        ... except DimensionError as err:
        ...     assert err == DimensionError("Plus", vv1, vv2)
    """

    def __init__(self, operation: str, arg1: Any, arg2: Any):
        self.operation = operation
        self.arg1 = arg1
        self.arg2 = arg2
        super().__init__(self._message())

    def _message(self) -> str:
        msg = (
            f"dimension error in {self.operation}: "
            f"{type(self.arg1).__name__} with dims {_dims_of(self.arg1)} and "
            f"{type(self.arg2).__name__} with dims {_dims_of(self.arg2)} are incompatible"
        )
        if self.operation == "Multiply":
            msg += "; multiplying two vectors would produce a matrix, try transposing one of them"
        return msg

    def __eq__(self, other):
        if not isinstance(other, DimensionError):
            return NotImplemented
        return (
            self.operation == other.operation
            and self.arg1 is other.arg1
            and self.arg2 is other.arg2
        )

    def __hash__(self):
        return hash((self.operation, id(self.arg1), id(self.arg2)))


class ElementError(SymbolicError, ValueError):
    """An element of a vector expression failed its own ``check()``.

    The original error is kept both as ``cause`` and as ``__cause__``.
    """

    def __init__(self, index: int, cause: Exception):
        self.index = index
        self.cause = cause
        super().__init__(f"element {index} has an issue: {cause}")


class UninitializedVariableError(SymbolicError, ValueError):
    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(
            "variable has not been initialized (id 0); "
            "create variables with new_variable() or new_variable_vector()"
        )


class InvalidBoundsError(SymbolicError, ValueError):
    def __init__(self, variable: Any, lower: float, upper: float):
        self.variable = variable
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"variable {getattr(variable, 'name', None)!r} has lower bound {lower} "
            f"above upper bound {upper}"
        )


class InvalidIndexError(SymbolicError, IndexError):
    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"index {index} is out of range for an expression of length {length}")


class UnsupportedOperationError(SymbolicError, NotImplementedError):
    """The operation has no well-defined result for these operands.

    Raised for products that would produce a matrix and for linearizing
    terms of degree greater than one.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} is not supported: {reason}")


class UnsupportedInputError(SymbolicError, TypeError):
    def __init__(self, function_name: str, value: Any):
        self.function_name = function_name
        self.value = value
        super().__init__(
            f"{function_name} received an input of unsupported type {type(value).__name__}: "
            f"{value!r}"
        )


class NegativeExponentError(SymbolicError, ValueError):
    def __init__(self, exponent: int):
        self.exponent = exponent
        super().__init__(f"exponent must be a non-negative integer, got {exponent}")


class MissingVariableError(SymbolicError, LookupError):
    """A variable of the expression is absent from the requested ordering or assignment."""

    def __init__(self, variable: Any, where: str = "the variable ordering"):
        self.variable = variable
        super().__init__(f"{variable!r} does not appear in {where}")
