# Core base classes, coercion and dispatch order
# Constants
from .constant import K, KVector, ones_vector, zeros_vector

# Constraints
from .constraint import Constraint, Sense, VectorConstraint
from .expr import (
    Expr,
    ScalarExpr,
    VectorExpr,
    dispatch_order,
    is_expr,
    outranks,
    to_expr,
    unique_variables,
    vector_of,
)

# Monomials and polynomials
from .monomial import Monomial, MonomialVector
from .polynomial import Polynomial, PolynomialVector

# Variables
from .variable import (
    IdGenerator,
    Variable,
    VariableVector,
    VarType,
    new_variable,
    new_variable_vector,
)

__all__ = [
    # Core base classes, coercion and dispatch order
    "Expr",
    "ScalarExpr",
    "VectorExpr",
    "to_expr",
    "is_expr",
    "outranks",
    "dispatch_order",
    "unique_variables",
    "vector_of",
    # Constants
    "K",
    "KVector",
    "ones_vector",
    "zeros_vector",
    # Variables
    "Variable",
    "VariableVector",
    "VarType",
    "IdGenerator",
    "new_variable",
    "new_variable_vector",
    # Monomials and polynomials
    "Monomial",
    "MonomialVector",
    "Polynomial",
    "PolynomialVector",
    # Constraints
    "Constraint",
    "VectorConstraint",
    "Sense",
]
