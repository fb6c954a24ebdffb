"""
ttoken.encoding.canonical — deterministic SignBytes for signed calls.

A signed call authorizes exactly one action. The bytes a signer signs are built
from two parts:

    action  = u8(len(tag)) || tag
            || u8(len(domain)) || domain
            || u16le(len(key_0)) || key_0 || ... || u16le(len(key_n)) || key_n
            || u64le(value)
    message = action || u64le(nonce)

* `tag` names the operation (``ttoken.transfer/v1`` ...). Transfer and approve
  carry the same field shape, so without the tag a signed transfer could be
  submitted as an approval for the same nonce.
* `domain` is an optional deployment separator (<= 255 bytes), so signatures
  made for one ledger instance do not verify on another.
* Every variable-length part is length-prefixed, which keeps the encoding
  injective for any key size.

Integers are little-endian fixed width; the encoding never depends on Python
object identity, dict ordering or platform.
"""

from __future__ import annotations

from typing import Final, Sequence

from ..types.uint import ensure_u64

OP_TRANSFER: Final[bytes] = b"ttoken.transfer/v1"
OP_TRANSFER_FROM: Final[bytes] = b"ttoken.transfer_from/v1"
OP_APPROVE: Final[bytes] = b"ttoken.approve/v1"

MAX_DOMAIN_LEN: Final[int] = 0xFF
MAX_KEY_LEN: Final[int] = 0xFFFF


def u64le(n: int) -> bytes:
    return ensure_u64("value", n).to_bytes(8, "little")


def _short(b: bytes, *, name: str, limit: int, width: int) -> bytes:
    if not isinstance(b, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    raw = bytes(b)
    if len(raw) > limit:
        raise ValueError(f"{name} too long: {len(raw)} > {limit}")
    return len(raw).to_bytes(width, "little") + raw


def encode_key(key: bytes) -> bytes:
    if not key:
        raise ValueError("account key must not be empty")
    return _short(key, name="key", limit=MAX_KEY_LEN, width=2)


def action_bytes(op: bytes, keys: Sequence[bytes], value: int, *, domain: bytes = b"") -> bytes:
    """
    Canonical encoding of an action's semantic fields (everything but the nonce).
    """
    buf = bytearray(_short(op, name="op", limit=0xFF, width=1))
    buf += _short(domain, name="domain", limit=MAX_DOMAIN_LEN, width=1)
    for k in keys:
        buf += encode_key(k)
    buf += u64le(value)
    return bytes(buf)


def sign_bytes(action: bytes, nonce: int) -> bytes:
    """The exact message a signer signs: action encoding followed by the nonce."""
    return bytes(action) + u64le(nonce)


__all__ = [
    "OP_TRANSFER",
    "OP_TRANSFER_FROM",
    "OP_APPROVE",
    "MAX_DOMAIN_LEN",
    "u64le",
    "encode_key",
    "action_bytes",
    "sign_bytes",
]
