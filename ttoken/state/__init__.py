"""
ttoken.state — the Ledger Store (accounts, allowances, journal).

Submodules:
- accounts: Account records (balance, nonce)
- journal:  Journaling writes, checkpoints, revert/commit
- ledger:   LedgerStore reads, checked mutators, genesis, snapshots

Common symbols are lazily re-exported from their submodules on first access.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "Account": ("accounts", "Account"),
    "Journal": ("journal", "Journal"),
    "LedgerStore": ("ledger", "LedgerStore"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
