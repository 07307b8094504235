"""Exact fractions kept in lowest terms, with NumPy interoperability."""
from __future__ import annotations

import numbers
import operator
from typing import Any, Callable, Optional, Tuple

import numpy as np

# ``None`` leaves numerators and denominators unbounded; an integer enables
# overflow detection for that signed width (32 mirrors a C/Java ``int``).
DEFAULT_INT_BITS: Optional[int] = None


class FractionError(ArithmeticError):
    """Base class for every fault raised by :class:`Fraction`."""


class InvalidArgument(FractionError, ValueError):
    """Raised when a fraction is built from a denominator below 1."""


class DivisionByZero(FractionError, ZeroDivisionError):
    """Raised when a fraction is divided by a zero-valued fraction."""


class ArithmeticOverflow(FractionError, OverflowError):
    """Raised when a value leaves the configured fixed integer width."""


def _ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return int(value)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


def _validate_int_bits(int_bits: Optional[int]) -> Optional[int]:
    if int_bits is None:
        return None
    if isinstance(int_bits, bool) or not isinstance(int_bits, numbers.Integral):
        raise TypeError(f"int_bits must be an integer or None, got {type(int_bits)!r}")
    if int_bits < 2:
        raise ValueError("int_bits must be >= 2")
    return int(int_bits)


def _checked(value: int, int_bits: Optional[int]) -> int:
    """Return *value* unchanged, or raise if it does not fit in ``int_bits``."""
    if int_bits is not None:
        limit = 1 << (int_bits - 1)
        if not -limit <= value < limit:
            raise ArithmeticOverflow(
                f"a {value.bit_length()}-bit value does not fit in a signed "
                f"{int_bits}-bit integer"
            )
    return value


def _checked_power(base: int, power: int, int_bits: Optional[int]) -> int:
    # |base| ** power has at least (bit_length - 1) * power + 1 bits, so a
    # hopeless power is refused before it is computed.
    if int_bits is not None and (abs(base).bit_length() - 1) * power >= int_bits:
        raise ArithmeticOverflow(f"power does not fit in a signed {int_bits}-bit integer")
    return _checked(base ** power, int_bits)


def gcd(a: int, b: int) -> int:
    """Return the greatest common divisor of two positive integers.

    Uses the Euclidean algorithm: the larger value is moved into ``a``, then
    ``(a, b)`` is replaced by ``(b, a % b)`` until the remainder is zero.
    A zero argument has no meaningful place in reduction and is rejected.
    """
    if a < 0 or b < 0:
        raise ValueError("gcd expects non-negative arguments")
    if a < b:
        a, b = b, a
    if b == 0:
        raise ValueError("gcd is undefined for a zero argument")
    remainder = a % b
    while remainder != 0:
        a, b = b, remainder
        remainder = a % b
    return b


def lcd(a: int, b: int, *, int_bits: Optional[int] = None) -> int:
    """Return the least common denominator of two positive denominators."""
    return _checked(a * b, int_bits) // gcd(a, b)


def _canonicalize(num: int, den: int) -> Tuple[int, int]:
    # Sign always ends up on the numerator; zero is stored as 0/1.
    if den == 0:
        raise DivisionByZero("denominator is zero")
    if den < 0:
        num, den = -num, -den
    if num == 0:
        return 0, 1
    if num == den:
        return 1, 1
    divisor = gcd(abs(num), den)
    if divisor > 1:
        num //= divisor
        den //= divisor
    return num, den


def _coerce_fraction(value: Any, *, int_bits: Optional[int] = None) -> "Fraction":
    """Interpret *value* as a :class:`Fraction` without leaving the integers.

    A fraction carrying a different width is rebuilt with ``int_bits`` (and
    so re-checked against it); ``None`` keeps whatever width it already has.
    """
    if isinstance(value, Fraction):
        if int_bits is None or value._int_bits == int_bits:
            return value
        return Fraction(value._numerator, value._denominator, int_bits=int_bits)
    if isinstance(value, np.generic):  # NumPy scalars
        value = value.item()
    if isinstance(value, numbers.Integral):
        return Fraction(value, int_bits=int_bits)
    raise TypeError(f"Cannot interpret {type(value)!r} as Fraction")


class Fraction:
    """A rational number stored as a reduced numerator/denominator pair.

    Every instance is in lowest terms with a positive denominator, so two
    fractions with the same value always have identical components. Instances
    are never modified after construction; every operation returns a new one.

    ``Fraction()`` is 0, ``Fraction(n)`` is n/1 and ``Fraction(n, d)`` is
    reduced on the way in. The two-argument form raises
    :class:`InvalidArgument` when ``d < 1``.
    """

    __slots__ = ("_numerator", "_denominator", "_int_bits")
    __array_priority__ = 1000.0  # Prefer Fraction semantics in NumPy expressions.

    def __init__(
        self,
        numerator: numbers.Integral = 0,
        denominator: Optional[numbers.Integral] = None,
        *,
        int_bits: Optional[int] = None,
    ) -> None:
        if int_bits is None:
            int_bits = DEFAULT_INT_BITS
        int_bits = _validate_int_bits(int_bits)

        num = _ensure_int(numerator, name="numerator")
        den = 1 if denominator is None else _ensure_int(denominator, name="denominator")
        if den < 1:
            raise InvalidArgument("denominator must be >= 1")
        num = _checked(num, int_bits)
        den = _checked(den, int_bits)
        if den != 1:
            num, den = _canonicalize(num, den)

        self._numerator = num
        self._denominator = den
        self._int_bits = int_bits

    @classmethod
    def _from_raw(cls, num: int, den: int, int_bits: Optional[int]) -> "Fraction":
        """Build a result from an unnormalised pair, whatever the sign of ``den``."""
        num, den = _canonicalize(num, den)
        result = cls.__new__(cls)
        result._numerator = _checked(num, int_bits)
        result._denominator = _checked(den, int_bits)
        result._int_bits = int_bits
        return result

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def int_bits(self) -> Optional[int]:
        return self._int_bits

    def value(self) -> float:
        """Return the value of this fraction as a float."""
        return self._numerator / self._denominator

    def display(self) -> str:
        """Return ``"n/d"``, or just ``"n"`` for whole numbers."""
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    # ------------------------------------------------------------------
    # Named arithmetic
    def add(self, other: "Fraction") -> "Fraction":
        """Return ``self + other`` as a new fraction."""
        return self._combine(self._require_fraction(other, "add"), operator.add)

    def sub(self, other: "Fraction") -> "Fraction":
        """Return ``self - other`` as a new fraction."""
        return self._combine(self._require_fraction(other, "sub"), operator.sub)

    def mul(self, other: "Fraction") -> "Fraction":
        """Return ``self * other`` as a new fraction."""
        other = self._require_fraction(other, "mul")
        bits = self._combine_int_bits(self, other)
        return Fraction._from_raw(
            _checked(self._numerator * other._numerator, bits),
            _checked(self._denominator * other._denominator, bits),
            bits,
        )

    def div(self, other: "Fraction") -> "Fraction":
        """Return ``self / other`` as a new fraction.

        Raises :class:`DivisionByZero` when ``other`` is zero.
        """
        other = self._require_fraction(other, "div")
        if other._numerator == 0:
            raise DivisionByZero("division by zero")
        bits = self._combine_int_bits(self, other)
        return Fraction._from_raw(
            _checked(self._numerator * other._denominator, bits),
            _checked(self._denominator * other._numerator, bits),
            bits,
        )

    def equals(self, other: "Fraction") -> bool:
        """Return True when both fractions have the same reduced components."""
        other = self._require_fraction(other, "equals")
        return (
            self._numerator == other._numerator
            and self._denominator == other._denominator
        )

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self.value()

    def __int__(self) -> int:
        return self._numerator // self._denominator

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Fraction({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return self.display()

    def __format__(self, format_spec: str) -> str:
        # Float presentation types format the value; anything else (fill,
        # alignment, width) applies to the display string.
        if format_spec and format_spec[-1] in "eEfFgG%":
            return format(self.value(), format_spec)
        if format_spec in ("r", "R"):
            format_spec = ""
        return format(self.display(), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _require_fraction(value: Any, name: str) -> "Fraction":
        if not isinstance(value, Fraction):
            raise TypeError(f"{name}() expects a Fraction, got {type(value)!r}")
        return value

    @staticmethod
    def _combine_int_bits(*fractions: "Fraction") -> Optional[int]:
        widths = [f._int_bits for f in fractions if f._int_bits is not None]
        return min(widths) if widths else None

    def _combine(self, other: "Fraction", op: Callable[[int, int], int]) -> "Fraction":
        bits = self._combine_int_bits(self, other)
        if self._denominator == other._denominator:
            return Fraction._from_raw(
                _checked(op(self._numerator, other._numerator), bits),
                self._denominator,
                bits,
            )
        common = lcd(self._denominator, other._denominator, int_bits=bits)
        left = _checked(common // self._denominator * self._numerator, bits)
        right = _checked(common // other._denominator * other._numerator, bits)
        return Fraction._from_raw(_checked(op(left, right), bits), common, bits)

    def _operand(self, value: Any) -> "Fraction":
        # Fractions keep their own width; integers take this one's.
        if isinstance(value, Fraction):
            return value
        return _coerce_fraction(value, int_bits=self._int_bits)

    def _dispatch(self, other: Any, ufunc, operation, reflected: bool = False) -> Any:
        if isinstance(other, (np.ndarray, list, tuple)):
            array = np.asarray(other, dtype=object)
            return ufunc(array, self) if reflected else ufunc(self, array)
        try:
            other = self._operand(other)
        except TypeError:
            return NotImplemented
        return operation(other, self) if reflected else operation(self, other)

    @staticmethod
    def _exponent(value: Any) -> int:
        if isinstance(value, np.generic):
            value = value.item()
        if isinstance(value, Fraction):
            if value._denominator != 1:
                raise ValueError("exponent must be a whole number")
            return value._numerator
        return _ensure_int(value, name="exponent")

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        return self._dispatch(other, np.add, Fraction.add)

    def __radd__(self, other: Any) -> Any:
        return self._dispatch(other, np.add, Fraction.add, reflected=True)

    def __sub__(self, other: Any) -> Any:
        return self._dispatch(other, np.subtract, Fraction.sub)

    def __rsub__(self, other: Any) -> Any:
        return self._dispatch(other, np.subtract, Fraction.sub, reflected=True)

    def __mul__(self, other: Any) -> Any:
        return self._dispatch(other, np.multiply, Fraction.mul)

    def __rmul__(self, other: Any) -> Any:
        return self._dispatch(other, np.multiply, Fraction.mul, reflected=True)

    def __truediv__(self, other: Any) -> Any:
        return self._dispatch(other, np.true_divide, Fraction.div)

    def __rtruediv__(self, other: Any) -> Any:
        return self._dispatch(other, np.true_divide, Fraction.div, reflected=True)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, (np.ndarray, list, tuple)):
            return np.power(self, np.asarray(exponent, dtype=object))
        power = self._exponent(exponent)
        bits = self._int_bits
        num, den = self._numerator, self._denominator
        if power < 0:
            if num == 0:
                raise DivisionByZero("0 cannot be raised to a negative power")
            num, den, power = den, num, -power
        return Fraction._from_raw(
            _checked_power(num, power, bits),
            _checked_power(den, power, bits),
            bits,
        )

    def __neg__(self) -> "Fraction":
        return Fraction._from_raw(
            _checked(-self._numerator, self._int_bits),
            self._denominator,
            self._int_bits,
        )

    def __pos__(self) -> "Fraction":
        return self

    def __abs__(self) -> "Fraction":
        if self._numerator >= 0:
            return self
        return -self

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op) -> Any:
        if not isinstance(other, Fraction):
            return NotImplemented
        return op(
            self._numerator * other._denominator,
            other._numerator * self._denominator,
        )

    def __eq__(self, other: Any) -> Any:
        if not isinstance(other, Fraction):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: Any) -> Any:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> Any:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> Any:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> Any:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Components are canonical, so equal values hash alike.
        return hash((self._numerator, self._denominator))

    # ------------------------------------------------------------------
    # NumPy interoperability
    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        """Apply the matching named operation element by element.

        Integer elements enter at the narrowest width among the scalar
        fraction operands; fraction elements keep their own, and each named
        operation then combines the two widths as usual.
        """
        operation = _UFUNC_OPERATIONS.get(ufunc)
        if method != "__call__" or kwargs or operation is None:
            return NotImplemented

        bits = Fraction._combine_int_bits(
            *(value for value in inputs if isinstance(value, Fraction))
        )

        def apply(*items):
            return operation(*(
                item if isinstance(item, Fraction) else _coerce_fraction(item, int_bits=bits)
                for item in items
            ))

        # 0-d object arrays keep NumPy from dispatching back to this method.
        operands = [np.asarray(value, dtype=object) for value in inputs]
        return np.frompyfunc(apply, ufunc.nin, 1)(*operands)


_UFUNC_OPERATIONS = {
    np.add: Fraction.add,
    np.subtract: Fraction.sub,
    np.multiply: Fraction.mul,
    np.true_divide: Fraction.div,
    np.power: Fraction.__pow__,
    np.negative: Fraction.__neg__,
    np.positive: Fraction.__pos__,
    np.absolute: Fraction.__abs__,
}


def _fits(item: Any, int_bits: Optional[int]) -> bool:
    return isinstance(item, Fraction) and (int_bits is None or item.int_bits == int_bits)


def as_fraction_array(
    values: Any,
    *,
    int_bits: Optional[int] = None,
    copy: bool = True,
) -> np.ndarray:
    """Return an object ndarray holding a :class:`Fraction` for every entry.

    Entries may be fractions or integers (including NumPy integer scalars and
    integer arrays). With ``int_bits`` every entry is checked against that
    width and fractions built with another width are rebuilt. With
    ``copy=False`` an object array that already qualifies is returned as is.
    """

    if not isinstance(values, (np.ndarray, list, tuple)):
        values = list(values)
    array = np.array(values, dtype=object) if copy else np.asarray(values, dtype=object)
    if all(_fits(item, int_bits) for item in array.flat):
        return array
    converted = np.frompyfunc(lambda item: _coerce_fraction(item, int_bits=int_bits), 1, 1)(array)
    return np.asarray(converted, dtype=object)


def _filled_with_zero(shape, int_bits: Optional[int]) -> np.ndarray:
    result = np.empty(shape, dtype=object)
    # Every cell holds the same immutable zero.
    result.fill(Fraction(int_bits=int_bits))
    return result


def zeros(length: int, *, int_bits: Optional[int] = None) -> np.ndarray:
    """Return a one-dimensional array of ``length`` zero fractions."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return _filled_with_zero((length,), int_bits)


def zeros_like(values: Any, *, int_bits: Optional[int] = None) -> np.ndarray:
    """Return zero fractions in the shape of ``values``."""

    return _filled_with_zero(np.shape(values), int_bits)


def to_float_array(values: Any) -> np.ndarray:
    """Return the float64 values of an array of fractions, with the same shape."""

    return as_fraction_array(values, copy=False).astype(np.float64)


__all__ = [
    "ArithmeticOverflow",
    "DEFAULT_INT_BITS",
    "DivisionByZero",
    "Fraction",
    "FractionError",
    "InvalidArgument",
    "as_fraction_array",
    "gcd",
    "lcd",
    "to_float_array",
    "zeros",
    "zeros_like",
]
