"""
ttoken.errors — call-level exceptions for the token ledger.

Every mutating call either applies completely or fails with one of the typed
exceptions below. They are converted into structured outcome payloads by the
contract facade and never leave the ledger in a partially-updated state.

Hierarchy
---------
TokenError (base)
 ├─ InvalidSignature       : signature does not verify for the claimed signer
 ├─ NonceMismatch          : claimed nonce != signer's stored nonce
 ├─ InsufficientBalance    : debit larger than the account balance
 ├─ InsufficientAllowance  : transfer_from larger than the approved amount
 ├─ Overflow               : checked u64 arithmetic would exceed 2**64 - 1
 └─ MalformedCall          : payload could not be decoded or is out of range

Notes
-----
* All failures are *call-local*: the store stays usable for later calls.
* None of them are retried inside the ledger. A relayer may resubmit the same
  signed payload after a business failure, because the nonce was not consumed.

These classes avoid importing other ttoken modules so they can be used from
the lowest layers (state, encoding) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class TokenError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NONCE_MISMATCH').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "token error"
    code: str = "TOKEN_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for outcomes/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _hex(key: Optional[bytes]) -> Optional[str]:
    return None if key is None else "0x" + bytes(key).hex()


class InvalidSignature(TokenError):
    """The signature is not valid over the canonical message for `signer`."""

    def __init__(
        self,
        message: str = "invalid signature",
        *,
        signer: Optional[bytes] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if signer is not None:
            d.setdefault("signer", _hex(signer))
        super().__init__(message=message, code="INVALID_SIGNATURE", data=d or None)


class NonceMismatch(TokenError):
    """
    The claimed nonce differs from the signer's stored nonce.

    `got < expected` is a replay, `got > expected` an out-of-order submission.
    """

    def __init__(
        self,
        message: str = "nonce mismatch",
        *,
        signer: Optional[bytes] = None,
        expected: Optional[int] = None,
        got: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if signer is not None:
            d.setdefault("signer", _hex(signer))
        if expected is not None:
            d.setdefault("expected", expected)
        if got is not None:
            d.setdefault("got", got)
        super().__init__(message=message, code="NONCE_MISMATCH", data=d or None)


class InsufficientBalance(TokenError):
    """Raised when a debit would make an account balance negative."""

    def __init__(
        self,
        message: str = "insufficient balance",
        *,
        account: Optional[bytes] = None,
        balance: Optional[int] = None,
        requested: Optional[int] = None,
    ):
        d: Dict[str, Any] = {}
        if account is not None:
            d["account"] = _hex(account)
        if balance is not None:
            d["balance"] = balance
        if requested is not None:
            d["requested"] = requested
        super().__init__(message=message, code="INSUFFICIENT_BALANCE", data=d or None)


class InsufficientAllowance(TokenError):
    """Raised when a spender tries to move more than it was approved for."""

    def __init__(
        self,
        message: str = "insufficient allowance",
        *,
        owner: Optional[bytes] = None,
        spender: Optional[bytes] = None,
        allowance: Optional[int] = None,
        requested: Optional[int] = None,
    ):
        d: Dict[str, Any] = {}
        if owner is not None:
            d["owner"] = _hex(owner)
        if spender is not None:
            d["spender"] = _hex(spender)
        if allowance is not None:
            d["allowance"] = allowance
        if requested is not None:
            d["requested"] = requested
        super().__init__(message=message, code="INSUFFICIENT_ALLOWANCE", data=d or None)


class Overflow(TokenError):
    """Checked u64 arithmetic would exceed the representable range."""

    def __init__(self, message: str = "u64 overflow", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="OVERFLOW", data=data)


class MalformedCall(TokenError):
    """
    The call payload could not be decoded, names an unknown operation, or has
    fields outside their declared ranges (wrong key size, non-u64 integers).
    """

    def __init__(
        self,
        message: str = "malformed call",
        *,
        field_name: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if field_name is not None:
            d.setdefault("field", field_name)
        super().__init__(message=message, code="MALFORMED_CALL", data=d or None)


# -------- helper utilities ---------------------------------------------------


def error_to_outcome(err: TokenError) -> Dict[str, Any]:
    """
    Map a TokenError to canonical outcome fields.

    Returns:
        {
          "status": "FAILED",
          "error":  {code, message, data?}
        }
    """
    return {"status": "FAILED", "error": err.to_dict()}


__all__ = [
    "TokenError",
    "InvalidSignature",
    "NonceMismatch",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Overflow",
    "MalformedCall",
    "error_to_outcome",
]
