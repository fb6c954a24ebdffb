"""
ttoken.auth.signatures — pluggable signature primitives.

The ledger never hard-codes a signature algorithm. It talks to a
`SignatureScheme`:

    scheme.name          -> str      registry name
    scheme.key_size      -> int      size of an account key (public key) in bytes
    scheme.verify(public_key, message, signature) -> bool

`verify` must be deterministic and must return False (not raise) for
malformed keys or signatures; the verifier maps False to `InvalidSignature`.

Shipped schemes
---------------
- ``ed25519`` — RFC 8032 Ed25519 via `cryptography`. Account keys are the raw
  32-byte public keys.

Hosts may register their own scheme (e.g. a BLS precompile) with
`register_scheme(...)` and select it by name in the configuration.

Signers
-------
`Ed25519Signer` is the client-side counterpart used by wallets, tests and the
CLI to produce account keys and signatures.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature as _CryptoInvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


@runtime_checkable
class SignatureScheme(Protocol):
    name: str
    key_size: int

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Return True iff `signature` is valid over `message` under `public_key`."""


# --------------------------------------------------------------------------------------
# Ed25519
# --------------------------------------------------------------------------------------


class Ed25519Scheme:
    """Ed25519 verification backed by `cryptography`."""

    name = "ed25519"
    key_size = 32
    signature_size = 64

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        if len(public_key) != self.key_size or len(signature) != self.signature_size:
            return False
        try:
            pk = Ed25519PublicKey.from_public_bytes(bytes(public_key))
        except ValueError:
            return False
        try:
            pk.verify(bytes(signature), bytes(message))
        except _CryptoInvalidSignature:
            return False
        return True

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "Ed25519Scheme()"


class Ed25519Signer:
    """
    Holds an Ed25519 private key and signs canonical call messages.

        signer = Ed25519Signer.generate()
        signer.public_key      # 32-byte account key
        signer.sign(message)   # 64-byte signature
    """

    scheme = "ed25519"

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._sk = private_key
        self._pk = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def generate(cls) -> "Ed25519Signer":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "Ed25519Signer":
        """Build a signer from a 32-byte raw private key (seed)."""
        if len(seed) != 32:
            raise ValueError("ed25519 seed must be 32 bytes")
        return cls(Ed25519PrivateKey.from_private_bytes(bytes(seed)))

    @property
    def public_key(self) -> bytes:
        return self._pk

    def private_bytes(self) -> bytes:
        return self._sk.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign(bytes(message))

    def __repr__(self) -> str:
        return f"Ed25519Signer(public_key=0x{self._pk.hex()})"


# --------------------------------------------------------------------------------------
# Registry
# --------------------------------------------------------------------------------------

_SCHEMES: Dict[str, SignatureScheme] = {}


def register_scheme(scheme: SignatureScheme, *, replace: bool = False) -> None:
    if not isinstance(scheme, SignatureScheme):
        raise TypeError("scheme must provide name, key_size and verify()")
    name = scheme.name.strip().lower()
    if name in _SCHEMES and not replace:
        raise ValueError(f"signature scheme already registered: {name}")
    _SCHEMES[name] = scheme


def get_scheme(name: Optional[str] = None) -> SignatureScheme:
    """Resolve a registered scheme by name (default: ed25519)."""
    key = (name or "ed25519").strip().lower()
    try:
        return _SCHEMES[key]
    except KeyError:
        raise ValueError(
            f"unknown signature scheme {key!r}; known: {', '.join(sorted(_SCHEMES))}"
        ) from None


def known_schemes() -> list[str]:
    return sorted(_SCHEMES)


register_scheme(Ed25519Scheme())


__all__ = [
    "SignatureScheme",
    "Ed25519Scheme",
    "Ed25519Signer",
    "register_scheme",
    "get_scheme",
    "known_schemes",
]
