import re
import sys
from typing import Optional

from factor_finder.errors import DomainError, ParseError

DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")

# Targets and factors routinely exceed the interpreter's default 4300-digit
# int/str conversion limit.
sys.set_int_max_str_digits(0)


def parse_bigint(text: str, *, field: Optional[str] = None) -> int:
    """Parse a decimal string into an arbitrary-precision integer.

    Surrounding whitespace is tolerated. Underscore separators, floats and
    any other base are rejected with a ParseError naming the field.
    """
    label = f"{field}: " if field else ""
    if not isinstance(text, str):
        raise ParseError(f"{label}expected a decimal string, got {type(text).__name__}", field=field)

    stripped = text.strip()
    if not DECIMAL_PATTERN.fullmatch(stripped):
        shown = stripped if len(stripped) <= 40 else stripped[:40] + "..."
        raise ParseError(f"{label}not a decimal integer: {shown!r}", field=field)
    return int(stripped)


def power(base: int, exponent: int) -> int:
    """Plain base ** exponent. Exponents are small in practice, so no modular tricks."""
    if exponent < 0:
        raise DomainError(f"exponent must be non-negative, got {exponent}", field="exponent")
    return base ** exponent


def tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise DomainError("division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def tmod(a: int, b: int) -> int:
    """Remainder matching tdiv; its sign follows the dividend."""
    return a - tdiv(a, b) * b


def to_decimal(n: int) -> str:
    """Decimal string of n, whatever its size."""
    return str(n)


def digit_count(n: int) -> int:
    """Number of decimal digits of |n|, without building the full string."""
    n = abs(n)
    if n < 10:
        return 1
    estimate = int(n.bit_length() * 0.30102999566398120) + 1
    while estimate > 1 and 10 ** (estimate - 1) > n:
        estimate -= 1
    while 10 ** estimate <= n:
        estimate += 1
    return estimate
