"""Exact rational arithmetic package."""

from .fraction import (
    DEFAULT_INT_BITS,
    ArithmeticOverflow,
    DivisionByZero,
    Fraction,
    FractionError,
    InvalidArgument,
    as_fraction_array,
    gcd,
    lcd,
    to_float_array,
    zeros,
    zeros_like,
)

__all__ = [
    "Fraction",
    "FractionError",
    "InvalidArgument",
    "DivisionByZero",
    "ArithmeticOverflow",
    "DEFAULT_INT_BITS",
    "gcd",
    "lcd",
    "as_fraction_array",
    "to_float_array",
    "zeros",
    "zeros_like",
]
