"""
ttoken.types.uint — u64 range checks and checked arithmetic.

Balances, allowances, nonces and the total supply are unsigned 64-bit
integers. Python ints are unbounded, so the bounds are enforced explicitly and
arithmetic fails fast instead of wrapping.

Exports
-------
* Constants: `U64_MAX`, `U8_MAX`
* Checks: `is_u64(n)`, `ensure_u64(name, n)`
* Arithmetic:
    - `checked_add(a, b)` → raises `Overflow` if the sum exceeds `U64_MAX`
    - `checked_sub(a, b)` → raises ValueError if the result would be negative
"""

from __future__ import annotations

from ..errors import Overflow

U64_MAX: int = (1 << 64) - 1
"""Maximum 64-bit unsigned integer."""

U8_MAX: int = (1 << 8) - 1


def is_u64(n: int) -> bool:
    """Return True iff `n` is a (non-bool) int with 0 <= n <= U64_MAX."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= U64_MAX


def ensure_u64(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    if value > U64_MAX:
        raise OverflowError(f"{name} exceeds u64")
    return value


def checked_add(a: int, b: int) -> int:
    """
    Checked u64 addition.
    """
    s = ensure_u64("a", a) + ensure_u64("b", b)
    if s > U64_MAX:
        raise Overflow(data={"a": a, "b": b})
    return s


def checked_sub(a: int, b: int) -> int:
    """
    Checked u64 subtraction. Raises ValueError if result would be negative.
    """
    ensure_u64("a", a)
    ensure_u64("b", b)
    if b > a:
        raise ValueError(f"subtraction underflow: {a} - {b} < 0")
    return a - b


__all__ = ["U64_MAX", "U8_MAX", "is_u64", "ensure_u64", "checked_add", "checked_sub"]
