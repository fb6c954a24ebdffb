"""
ttoken.state.journal — journaling writes, checkpoints, revert/commit.

A deterministic, in-memory write journal layered over the ledger's base
mappings (accounts and allowances). It supports nested checkpoints via a stack
of overlays. Writes go to the top overlay; reads consult overlays from
top → base. `commit()` merges the top overlay into the next layer (or the base
mappings when it is the last layer). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O.
- Copy-on-write for accounts (Account objects are copied into overlays).
- Allowance overlay per (owner, spender); a staged 0 prunes the entry on apply.
- Deterministic behavior; no reliance on wall clock or randomness.

Intended usage
--------------
    j = Journal(accounts, allowances)
    j.begin()
    j.ensure_account_for_write(key).credit(10)
    j.set_allowance(owner, spender, 5)
    j.commit()        # or j.revert()

Notes
-----
- This journal does not enforce business rules; the transfer engine validates
  before writing.
- Accounts are never destroyed, so there are no deletion markers for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, MutableMapping, Optional, Tuple

from .accounts import Account

AllowanceKey = Tuple[bytes, bytes]


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer.

    - `accounts`:   copies of Account objects modified/created in this layer.
    - `allowances`: staged allowance values keyed by (owner, spender).
    """

    accounts: Dict[bytes, Account] = field(default_factory=dict)
    allowances: Dict[AllowanceKey, int] = field(default_factory=dict)

    def put_account_copy(self, key: bytes, acc: Account) -> Account:
        # Store a *copy* to avoid aliasing with lower layers.
        acc_copy = acc.copy()
        self.accounts[key] = acc_copy
        return acc_copy


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    Parameters
    ----------
    accounts : MutableMapping[bytes, Account]
        The base (persisted) account mapping.
    allowances : MutableMapping[(bytes, bytes), int]
        The base allowance mapping.
    """

    def __init__(
        self,
        accounts: MutableMapping[bytes, Account],
        allowances: MutableMapping[AllowanceKey, int],
    ) -> None:
        self._base_accounts = accounts
        self._base_allowances = allowances
        # Start with a single empty overlay for convenience.
        self._layers: List[_Overlay] = [_Overlay()]

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker (int)."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """
        Commit the top overlay into its parent, or into the base mappings when
        only the root layer remains.
        """
        if len(self._layers) > 1:
            top = self._layers.pop()
            self._merge_layers(self._layers[-1], top)
        else:
            self._apply_to_base(self._layers[0])
            self._layers[0] = _Overlay()

    def revert(self) -> None:
        """Discard the top overlay (or clear it if it's the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    # --------------------------------------------------------------------- #
    # Account API
    # --------------------------------------------------------------------- #

    def get_account(self, key: bytes | bytearray | memoryview) -> Optional[Account]:
        """Readonly lookup. Do not mutate the returned object."""
        k = _b(key, name="key")
        for layer in reversed(self._layers):
            local = layer.accounts.get(k)
            if local is not None:
                return local
        return self._base_accounts.get(k)

    def ensure_account_for_write(self, key: bytes | bytearray | memoryview) -> Account:
        """
        Fetch an Account suitable for **mutation** in the top layer. A copy of
        the visible record is promoted to the top; absent keys get a fresh
        zeroed account.
        """
        k = _b(key, name="key")
        top = self._layers[-1]
        if k in top.accounts:
            return top.accounts[k]
        acc = self.get_account(k)
        return top.put_account_copy(k, acc if acc is not None else Account())

    # --------------------------------------------------------------------- #
    # Allowance API
    # --------------------------------------------------------------------- #

    def get_allowance(self, owner: bytes, spender: bytes) -> int:
        k = (_b(owner, name="owner"), _b(spender, name="spender"))
        for layer in reversed(self._layers):
            if k in layer.allowances:
                return layer.allowances[k]
        return self._base_allowances.get(k, 0)

    def set_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        k = (_b(owner, name="owner"), _b(spender, name="spender"))
        self._layers[-1].allowances[k] = int(amount)

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_layers(dst: _Overlay, src: _Overlay) -> None:
        for key, acc in src.accounts.items():
            dst.accounts[key] = acc.copy()
        dst.allowances.update(src.allowances)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for key, acc in layer.accounts.items():
            self._base_accounts[key] = acc.copy()
        for k, v in layer.allowances.items():
            if v == 0:
                self._base_allowances.pop(k, None)
            else:
                self._base_allowances[k] = v


__all__ = ["Journal", "AllowanceKey"]
