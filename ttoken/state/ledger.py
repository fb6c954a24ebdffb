"""
ttoken.state.ledger — the Ledger Store.

Durable mapping from account key to {balance, nonce}, from (owner, spender) to
an approved amount, and the fixed total supply.

Reads
-----
    balance_of(key), nonce_of(key), allowance_of(owner, spender),
    total_supply(), account(key)

All reads return 0 / an empty account for unknown keys and never mutate.

Writes
------
    credit, debit, set_allowance, bump_nonce

Writes are only accepted inside `transaction()`, which opens a journal
checkpoint and applies every staged write on success or none of them if the
body raises. The transfer engine is the only intended writer.

Deployment & persistence
------------------------
    LedgerStore.genesis(owner, supply)         whole supply to one key
    LedgerStore.from_allocations({key: amt})   supply = checked sum
    to_dict() / from_dict()                    JSON-friendly snapshot
    state_root()                               SHA3-256 digest of the state
"""

from __future__ import annotations

import hashlib
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from ..types.uint import checked_add, ensure_u64
from .accounts import Account
from .journal import AllowanceKey, Journal

STATE_ROOT_TAG = b"ttoken.state/v1"


def _key(x: bytes | bytearray | memoryview, *, name: str = "key") -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    b = bytes(x)
    if not b:
        raise ValueError(f"{name} must not be empty")
    return b


def _h2b(h: str) -> bytes:
    s = h[2:] if h.startswith(("0x", "0X")) else h
    return bytes.fromhex(s)


def _b2h(b: bytes) -> str:
    return "0x" + b.hex()


class LedgerStore:
    """
    Account balances, nonces, allowances and the fixed total supply.

    The sum of all balances equals `total_supply()` at every point between
    calls; `from_dict` refuses snapshots that break this.
    """

    def __init__(
        self,
        supply: int = 0,
        accounts: Optional[Mapping[bytes, Account]] = None,
        allowances: Optional[Mapping[AllowanceKey, int]] = None,
    ) -> None:
        self._supply = ensure_u64("supply", supply)
        self._accounts: Dict[bytes, Account] = {
            _key(k): acc.copy() for k, acc in (accounts or {}).items()
        }
        self._allowances: Dict[AllowanceKey, int] = {
            (_key(o, name="owner"), _key(s, name="spender")): ensure_u64("allowance", v)
            for (o, s), v in (allowances or {}).items()
            if v
        }
        total = sum(a.balance for a in self._accounts.values())
        if total != self._supply:
            raise ValueError(f"balances sum to {total}, expected total supply {self._supply}")
        self._journal = Journal(self._accounts, self._allowances)

    # ------------------------------------------------------------------ #
    # Deployment
    # ------------------------------------------------------------------ #

    @classmethod
    def genesis(cls, owner: bytes, supply: int) -> "LedgerStore":
        """Deploy with the whole `supply` credited to `owner`."""
        supply = ensure_u64("supply", supply)
        accounts = {_key(owner, name="owner"): Account(balance=supply)} if supply else {}
        return cls(supply=supply, accounts=accounts)

    @classmethod
    def from_allocations(cls, allocations: Mapping[bytes, int]) -> "LedgerStore":
        """Deploy with several funded accounts; total supply is their sum."""
        supply = 0
        accounts: Dict[bytes, Account] = {}
        for key, amount in allocations.items():
            k = _key(key)
            if k in accounts:
                raise ValueError(f"duplicate allocation for {_b2h(k)}")
            supply = checked_add(supply, ensure_u64("allocation", amount))
            if amount:
                accounts[k] = Account(balance=amount)
        return cls(supply=supply, accounts=accounts)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def total_supply(self) -> int:
        return self._supply

    def account(self, key: bytes) -> Account:
        """A copy of the account record (zeroed if unknown)."""
        acc = self._journal.get_account(_key(key))
        return acc.copy() if acc is not None else Account()

    def balance_of(self, key: bytes) -> int:
        acc = self._journal.get_account(_key(key))
        return acc.balance if acc is not None else 0

    def nonce_of(self, key: bytes) -> int:
        acc = self._journal.get_account(_key(key))
        return acc.nonce if acc is not None else 0

    def allowance_of(self, owner: bytes, spender: bytes) -> int:
        return self._journal.get_allowance(_key(owner, name="owner"), _key(spender, name="spender"))

    def items(self) -> Iterator[Tuple[bytes, Account]]:
        """Committed accounts in key order."""
        for k in sorted(self._accounts):
            yield k, self._accounts[k].copy()

    def allowances(self) -> Iterator[Tuple[bytes, bytes, int]]:
        """Committed non-zero allowances as (owner, spender, value), ordered."""
        for (o, s) in sorted(self._allowances):
            yield o, s, self._allowances[(o, s)]

    def sum_balances(self) -> int:
        return sum(a.balance for a in self._accounts.values())

    # ------------------------------------------------------------------ #
    # Atomic writes
    # ------------------------------------------------------------------ #

    @contextmanager
    def transaction(self) -> Iterator["LedgerStore"]:
        """
        Stage writes in a journal checkpoint. On a clean exit they are applied;
        if the body raises, they are discarded and the exception propagates.
        """
        outermost = self._journal.depth() == 1
        self._journal.begin()
        try:
            yield self
        except BaseException:
            self._journal.revert()
            raise
        self._journal.commit()
        if outermost:
            self._journal.commit()

    def in_transaction(self) -> bool:
        return self._journal.depth() > 1

    def _require_tx(self) -> None:
        if not self.in_transaction():
            raise RuntimeError("ledger writes must happen inside transaction()")

    def credit(self, key: bytes, amount: int) -> int:
        """Add `amount` to the balance of `key`; raises Overflow past u64."""
        self._require_tx()
        acc = self._journal.ensure_account_for_write(_key(key))
        acc.credit(amount)
        return acc.balance

    def debit(self, key: bytes, amount: int) -> int:
        """Take `amount` from `key`; raises InsufficientBalance if short."""
        self._require_tx()
        k = _key(key)
        acc = self._journal.ensure_account_for_write(k)
        acc.debit(amount, key=k)
        return acc.balance

    def set_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        """Overwrite the allowance of (owner, spender)."""
        self._require_tx()
        self._journal.set_allowance(
            _key(owner, name="owner"), _key(spender, name="spender"), ensure_u64("amount", amount)
        )

    def bump_nonce(self, key: bytes) -> int:
        self._require_tx()
        acc = self._journal.ensure_account_for_write(_key(key))
        acc.increment_nonce()
        return acc.nonce

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def to_dict(self) -> Dict[str, Any]:
        if self.in_transaction():
            raise RuntimeError("cannot snapshot during a transaction")
        return {
            "total_supply": self._supply,
            "accounts": {_b2h(k): acc.to_dict() for k, acc in self.items()},
            "allowances": [
                {"owner": _b2h(o), "spender": _b2h(s), "value": v} for o, s, v in self.allowances()
            ],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LedgerStore":
        try:
            supply = int(data["total_supply"])
            accounts = {_h2b(k): Account.from_dict(v) for k, v in data.get("accounts", {}).items()}
            allowances = {
                (_h2b(a["owner"]), _h2b(a["spender"])): int(a["value"])
                for a in data.get("allowances", [])
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"bad ledger snapshot: {e}") from e
        return cls(supply=supply, accounts=accounts, allowances=allowances)

    def state_root(self) -> bytes:
        """
        Deterministic digest of the committed state.

        Hash over: tag || u64(supply) || u64(#accounts) || per account in key
        order (u16(len(key)) || key || u64(balance) || u64(nonce)) ||
        u64(#allowances) || per allowance in (owner, spender) order
        (u16-prefixed owner || u16-prefixed spender || u64(value)).
        """
        h = hashlib.sha3_256(STATE_ROOT_TAG)
        h.update(self._supply.to_bytes(8, "big"))
        h.update(len(self._accounts).to_bytes(8, "big"))
        for k, acc in self.items():
            h.update(len(k).to_bytes(2, "big") + k)
            h.update(acc.balance.to_bytes(8, "big"))
            h.update(acc.nonce.to_bytes(8, "big"))
        h.update(len(self._allowances).to_bytes(8, "big"))
        for o, s, v in self.allowances():
            h.update(len(o).to_bytes(2, "big") + o)
            h.update(len(s).to_bytes(2, "big") + s)
            h.update(v.to_bytes(8, "big"))
        return h.digest()


__all__ = ["LedgerStore", "STATE_ROOT_TAG"]
