"""
ttoken.types.events — event records emitted by successful mutations.

Two events exist:

* `TransferEvent` (topic ``"transfer"``) for `transfer` and `transfer_from`.
  `owner` is the account debited; `spender` is set only when the move was made
  through an allowance.
* `ApproveEvent` (topic ``"approve"``) for `approve`.

Events are write-only outputs: the ledger never reads them back.

Helpers
-------
* `to_dict()` gives a JSON-friendly form (keys as 0x-hex).
* `to_wire()` gives the CBOR map relayed to the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional


def _hex(b: Optional[bytes]) -> Optional[str]:
    return None if b is None else "0x" + b.hex()


@dataclass(frozen=True)
class TransferEvent:
    """
    Tokens moved from `owner` to `to`.

    Attributes:
        owner:   account the tokens were taken from
        to:      account receiving the tokens
        value:   amount moved
        spender: account that spent an allowance, None for a direct transfer
    """

    owner: bytes
    to: bytes
    value: int
    spender: Optional[bytes] = None

    TOPIC: ClassVar[str] = "transfer"

    @property
    def topic(self) -> str:
        return self.TOPIC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": _hex(self.owner),
            "spender": _hex(self.spender),
            "to": _hex(self.to),
            "value": self.value,
        }

    def to_wire(self) -> Dict[str, Any]:
        return {"owner": self.owner, "spender": self.spender, "to": self.to, "value": self.value}


@dataclass(frozen=True)
class ApproveEvent:
    """`owner` allowed `spender` to move up to `value` of its tokens."""

    owner: bytes
    spender: bytes
    value: int

    TOPIC: ClassVar[str] = "approve"

    @property
    def topic(self) -> str:
        return self.TOPIC

    def to_dict(self) -> Dict[str, Any]:
        return {"owner": _hex(self.owner), "spender": _hex(self.spender), "value": self.value}

    def to_wire(self) -> Dict[str, Any]:
        return {"owner": self.owner, "spender": self.spender, "value": self.value}


__all__ = ["TransferEvent", "ApproveEvent"]
