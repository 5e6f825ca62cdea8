"""Dimension checks shared by every arithmetic and comparison operator.

Each check receives the two operands exactly as the operator saw them and
raises a ``DimensionError`` carrying both of them when the shapes do not fit.
"""

from typing import Any

from symbolicmath.errors import DimensionError


def check_dimensions_in_addition(left: Any, right: Any, operation: str = "Plus") -> None:
    """Check that two expressions can be added.

    A scalar broadcasts against any vector. Two vectors must have the same length.

    Args:
        left: Left operand
        right: Right operand
        operation: Name recorded in the error (``"Plus"`` or ``"Minus"``)

    Raises:
        DimensionError: If both operands are vectors of different lengths
    """
    if left.is_vector and right.is_vector and left.dims() != right.dims():
        raise DimensionError(operation, left, right)


def check_dimensions_in_multiplication(left: Any, right: Any) -> None:
    """Check that two expressions can be multiplied.

    A scalar times anything is valid. The product of two (N, 1) vectors would
    be a matrix, which is outside the capability set, so it is rejected.

    Raises:
        DimensionError: If both operands are vectors
    """
    if left.is_vector and right.is_vector:
        raise DimensionError("Multiply", left, right)


def check_dimensions_in_comparison(left: Any, right: Any, sense: Any) -> None:
    """Check that two expressions can be compared.

    Both sides must have the same shape, and either both or neither must be vectors.

    Raises:
        DimensionError: If the shapes differ
    """
    if left.is_vector != right.is_vector or left.dims() != right.dims():
        raise DimensionError(f"Comparison ({sense})", left, right)
