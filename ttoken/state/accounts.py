"""
ttoken.state.accounts — Account records.

An Account holds two fields:

- balance:  u64 token amount
- nonce:    u64 authorization counter (monotonically increasing)

Accounts are created implicitly as (0, 0) the first time a key is written and
are never deleted. This module avoids any storage concerns; the journal and
ledger store wrap these helpers to stage and roll back changes.

All arithmetic is u64-bounded and checked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..errors import InsufficientBalance, Overflow
from ..types.uint import U64_MAX, checked_add, ensure_u64


@dataclass(slots=True)
class Account:
    """
    A minimal, deterministic account record.

    Invariants:
    - balance and nonce are u64
    """
    balance: int = 0
    nonce: int = 0

    def __post_init__(self) -> None:
        self.balance = ensure_u64("balance", self.balance)
        self.nonce = ensure_u64("nonce", self.nonce)

    def copy(self) -> "Account":
        return Account(balance=self.balance, nonce=self.nonce)

    # ----------------------- field operations ------------------------------ #

    def increment_nonce(self) -> None:
        """
        Increase the nonce by 1; raises Overflow at u64 max.
        """
        if self.nonce == U64_MAX:
            raise Overflow("nonce overflow (u64 max)")
        self.nonce += 1

    def credit(self, amount: int) -> None:
        """
        Increase balance by `amount`; raises Overflow past u64 max.
        """
        self.balance = checked_add(self.balance, amount)

    def debit(self, amount: int, *, key: bytes | None = None) -> None:
        """
        Decrease balance by `amount`; raises InsufficientBalance if short.
        """
        amt = ensure_u64("amount", amount)
        if self.balance < amt:
            raise InsufficientBalance(account=key, balance=self.balance, requested=amt)
        self.balance -= amt

    # ----------------------- (de)serialization ----------------------------- #

    def to_dict(self) -> Dict[str, int]:
        return {"balance": self.balance, "nonce": self.nonce}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        try:
            return cls(balance=int(data["balance"]), nonce=int(data["nonce"]))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"bad account dict: {e}") from e


__all__ = ["Account"]
