"""
ttoken.types.calls — signed call payloads and query arguments.

Each mutating operation receives one of the payloads below. A payload carries
the semantic fields of the action, the signer's expected nonce and a signature
over the canonical SignBytes (see `ttoken.encoding.canonical`).

=============  ==========  ===========================================
payload        signer      action fields (signed, in this order)
=============  ==========  ===========================================
Transfer       sender      sender, to, value
TransferFrom   spender     spender, owner, to, value
Approve        owner       owner, spender, value
=============  ==========  ===========================================

Payloads are immutable and validated on construction. Invalid shapes raise
`MalformedCall` because payloads usually come from untrusted relayers.

Clients build signed payloads with the `signed(...)` constructors, passing any
signer object exposing ``public_key: bytes`` and ``sign(message) -> bytes``
(see `ttoken.auth.signatures.Ed25519Signer`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Protocol, Tuple

from ..encoding import canonical
from ..encoding.wire import require_map
from ..errors import MalformedCall
from .uint import is_u64


class SignerLike(Protocol):
    @property
    def public_key(self) -> bytes: ...

    def sign(self, message: bytes) -> bytes: ...


def _key(name: str, v: Any) -> bytes:
    if not isinstance(v, (bytes, bytearray, memoryview)):
        raise MalformedCall(f"{name} must be bytes", field_name=name)
    b = bytes(v)
    if not b:
        raise MalformedCall(f"{name} must not be empty", field_name=name)
    return b


def _u64(name: str, v: Any) -> int:
    if not is_u64(v):
        raise MalformedCall(f"{name} must be a u64 integer", field_name=name)
    return int(v)


def _sig(v: Any) -> bytes:
    if not isinstance(v, (bytes, bytearray, memoryview)):
        raise MalformedCall("signature must be bytes", field_name="signature")
    return bytes(v)


class _SignedCall:
    """Shared behaviour of the three signed payloads."""

    OP: ClassVar[bytes]
    KEY_FIELDS: ClassVar[Tuple[str, ...]]
    WIRE_NAMES: ClassVar[Dict[str, str]] = {}

    value: int
    nonce: int
    signature: bytes

    def _normalize(self) -> None:
        for f in self.KEY_FIELDS:
            object.__setattr__(self, f, _key(f, getattr(self, f)))
        object.__setattr__(self, "value", _u64("value", self.value))
        object.__setattr__(self, "nonce", _u64("nonce", self.nonce))
        object.__setattr__(self, "signature", _sig(self.signature))

    @property
    def signer(self) -> bytes:
        """The account whose authorization this payload proves."""
        return getattr(self, self.KEY_FIELDS[0])

    def keys(self) -> Tuple[bytes, ...]:
        return tuple(getattr(self, f) for f in self.KEY_FIELDS)

    def action_bytes(self, domain: bytes = b"") -> bytes:
        return canonical.action_bytes(self.OP, self.keys(), self.value, domain=domain)

    def signature_message(self, domain: bytes = b"") -> bytes:
        """The message to be signed over."""
        return canonical.sign_bytes(self.action_bytes(domain), self.nonce)

    # ------------------------------ wire -----------------------------------

    @classmethod
    def _wire_name(cls, attr: str) -> str:
        return cls.WIRE_NAMES.get(attr, attr)

    def to_wire(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {self._wire_name(f): getattr(self, f) for f in self.KEY_FIELDS}
        out["value"] = self.value
        out["nonce"] = self.nonce
        out["signature"] = self.signature
        return out

    @classmethod
    def from_wire(cls, obj: Any):
        fields = [cls._wire_name(f) for f in cls.KEY_FIELDS] + ["value", "nonce", "signature"]
        m: Mapping[str, Any] = require_map(obj, fields)
        kwargs = {f: m[cls._wire_name(f)] for f in cls.KEY_FIELDS}
        return cls(value=m["value"], nonce=m["nonce"], signature=m["signature"], **kwargs)


@dataclass(frozen=True)
class Transfer(_SignedCall):
    """Move `value` tokens from `sender` to `to`, authorized by `sender`."""

    sender: bytes
    to: bytes
    value: int
    nonce: int
    signature: bytes = b""

    OP: ClassVar[bytes] = canonical.OP_TRANSFER
    KEY_FIELDS: ClassVar[Tuple[str, ...]] = ("sender", "to")
    WIRE_NAMES: ClassVar[Dict[str, str]] = {"sender": "from"}

    def __post_init__(self) -> None:
        self._normalize()

    @classmethod
    def signed(
        cls, signer: SignerLike, to: bytes, value: int, nonce: int, *, domain: bytes = b""
    ) -> "Transfer":
        unsigned = cls(sender=signer.public_key, to=to, value=value, nonce=nonce)
        return cls(
            sender=unsigned.sender,
            to=unsigned.to,
            value=unsigned.value,
            nonce=unsigned.nonce,
            signature=signer.sign(unsigned.signature_message(domain)),
        )


@dataclass(frozen=True)
class TransferFrom(_SignedCall):
    """
    Move `value` tokens from `owner` to `to`, spending an allowance that
    `owner` granted to `spender`; authorized by `spender`.
    """

    spender: bytes
    owner: bytes
    to: bytes
    value: int
    nonce: int
    signature: bytes = b""

    OP: ClassVar[bytes] = canonical.OP_TRANSFER_FROM
    KEY_FIELDS: ClassVar[Tuple[str, ...]] = ("spender", "owner", "to")

    def __post_init__(self) -> None:
        self._normalize()

    @classmethod
    def signed(
        cls,
        signer: SignerLike,
        owner: bytes,
        to: bytes,
        value: int,
        nonce: int,
        *,
        domain: bytes = b"",
    ) -> "TransferFrom":
        unsigned = cls(spender=signer.public_key, owner=owner, to=to, value=value, nonce=nonce)
        return cls(
            spender=unsigned.spender,
            owner=unsigned.owner,
            to=unsigned.to,
            value=unsigned.value,
            nonce=unsigned.nonce,
            signature=signer.sign(unsigned.signature_message(domain)),
        )


@dataclass(frozen=True)
class Approve(_SignedCall):
    """Set the allowance of `spender` over `owner`'s tokens to `value`."""

    owner: bytes
    spender: bytes
    value: int
    nonce: int
    signature: bytes = b""

    OP: ClassVar[bytes] = canonical.OP_APPROVE
    KEY_FIELDS: ClassVar[Tuple[str, ...]] = ("owner", "spender")

    def __post_init__(self) -> None:
        self._normalize()

    @classmethod
    def signed(
        cls, signer: SignerLike, spender: bytes, value: int, nonce: int, *, domain: bytes = b""
    ) -> "Approve":
        unsigned = cls(owner=signer.public_key, spender=spender, value=value, nonce=nonce)
        return cls(
            owner=unsigned.owner,
            spender=unsigned.spender,
            value=unsigned.value,
            nonce=unsigned.nonce,
            signature=signer.sign(unsigned.signature_message(domain)),
        )


@dataclass(frozen=True)
class AllowanceQuery:
    """Arguments to query how much `spender` may move out of `owner`'s balance."""

    owner: bytes
    spender: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", _key("owner", self.owner))
        object.__setattr__(self, "spender", _key("spender", self.spender))

    def to_wire(self) -> Dict[str, Any]:
        return {"owner": self.owner, "spender": self.spender}

    @classmethod
    def from_wire(cls, obj: Any) -> "AllowanceQuery":
        m = require_map(obj, ("owner", "spender"))
        return cls(owner=m["owner"], spender=m["spender"])


__all__ = ["SignerLike", "Transfer", "TransferFrom", "Approve", "AllowanceQuery"]
