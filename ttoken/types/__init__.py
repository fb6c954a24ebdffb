"""
ttoken.types — value types shared across the ledger.

- uint:   u64/u8 range checks and checked arithmetic
- calls:  signed call payloads (Transfer, TransferFrom, Approve) and queries
- events: TransferEvent / ApproveEvent records

Symbols are re-exported lazily so low-level modules (encoding, state) can
import `ttoken.types.uint` without pulling in the payload classes.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "U64_MAX": ("uint", "U64_MAX"),
    "U8_MAX": ("uint", "U8_MAX"),
    "is_u64": ("uint", "is_u64"),
    "ensure_u64": ("uint", "ensure_u64"),
    "checked_add": ("uint", "checked_add"),
    "checked_sub": ("uint", "checked_sub"),
    "Transfer": ("calls", "Transfer"),
    "TransferFrom": ("calls", "TransferFrom"),
    "Approve": ("calls", "Approve"),
    "AllowanceQuery": ("calls", "AllowanceQuery"),
    "TransferEvent": ("events", "TransferEvent"),
    "ApproveEvent": ("events", "ApproveEvent"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
