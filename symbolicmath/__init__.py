from symbolicmath.config import NumericsConfig, get_numerics, set_numerics
from symbolicmath.errors import (
    DimensionError,
    ElementError,
    InvalidBoundsError,
    InvalidIndexError,
    MissingVariableError,
    NegativeExponentError,
    SymbolicError,
    UninitializedVariableError,
    UnsupportedInputError,
    UnsupportedOperationError,
)

# Core symbolic expressions - flat namespace for most common names
from symbolicmath.symbolic.expr import (
    Constraint,
    Expr,
    IdGenerator,
    K,
    KVector,
    Monomial,
    MonomialVector,
    Polynomial,
    PolynomialVector,
    Sense,
    Variable,
    VariableVector,
    VarType,
    VectorConstraint,
    is_expr,
    new_variable,
    new_variable_vector,
    ones_vector,
    to_expr,
    zeros_vector,
)
from symbolicmath.symbolic.linear import (
    AffineConstraint,
    affine_form,
    linearize,
    ordered_variables,
)
from symbolicmath.symbolic.lower import lower, lower_to_cvxpy, lower_to_jax

__all__ = [
    # Configuration
    "NumericsConfig",
    "get_numerics",
    "set_numerics",
    # Errors
    "SymbolicError",
    "DimensionError",
    "ElementError",
    "InvalidBoundsError",
    "InvalidIndexError",
    "MissingVariableError",
    "NegativeExponentError",
    "UninitializedVariableError",
    "UnsupportedInputError",
    "UnsupportedOperationError",
    # Expressions
    "Expr",
    "K",
    "KVector",
    "Variable",
    "VariableVector",
    "VarType",
    "IdGenerator",
    "Monomial",
    "MonomialVector",
    "Polynomial",
    "PolynomialVector",
    "new_variable",
    "new_variable_vector",
    "ones_vector",
    "zeros_vector",
    "to_expr",
    "is_expr",
    # Constraints
    "Constraint",
    "VectorConstraint",
    "Sense",
    # Linearization
    "AffineConstraint",
    "affine_form",
    "linearize",
    "ordered_variables",
    # Lowering
    "lower",
    "lower_to_jax",
    "lower_to_cvxpy",
]
