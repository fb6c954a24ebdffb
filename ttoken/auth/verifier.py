"""
ttoken.auth.verifier — the Authorization Verifier.

Confirms that a signed call was authorized by the key it claims:

1. message = action encoding || u64le(claimed_nonce)
2. the signature scheme must accept `signature` over `message` under the
   signer key, otherwise `InvalidSignature`
3. `claimed_nonce` must equal the ledger's current nonce for the signer,
   otherwise `NonceMismatch` (lower = replay, higher = out of order)

Verification is read-only. Advancing the nonce is the transfer engine's job and
happens in the same atomic transition as the business mutation, so a call that
verifies but fails a balance/allowance check can be resubmitted unchanged.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..encoding.canonical import sign_bytes
from ..errors import InvalidSignature, NonceMismatch
from .signatures import SignatureScheme, get_scheme


class NonceSource(Protocol):
    def nonce_of(self, key: bytes) -> int: ...


class _SignedCallLike(Protocol):
    signer: bytes
    nonce: int
    signature: bytes

    def action_bytes(self, domain: bytes = b"") -> bytes: ...


class AuthorizationVerifier:
    """
    Signature + nonce check against a ledger's nonce table.

    Parameters
    ----------
    nonces : NonceSource
        Anything exposing `nonce_of(key)`; normally the `LedgerStore`.
    scheme : SignatureScheme | None
        Signature primitive (default: ed25519).
    domain : bytes
        Deployment separator mixed into every signed message.
    """

    def __init__(
        self,
        nonces: NonceSource,
        scheme: Optional[SignatureScheme] = None,
        *,
        domain: bytes = b"",
    ) -> None:
        self._nonces = nonces
        self.scheme = scheme or get_scheme()
        self.domain = bytes(domain)

    def verify(
        self,
        signer_key: bytes,
        action_encoding: bytes,
        claimed_nonce: int,
        signature: bytes,
    ) -> None:
        """Raise InvalidSignature / NonceMismatch; return None on success."""
        message = sign_bytes(action_encoding, claimed_nonce)
        if not self.scheme.verify(signer_key, message, signature):
            raise InvalidSignature(signer=signer_key)

        expected = self._nonces.nonce_of(signer_key)
        if claimed_nonce != expected:
            raise NonceMismatch(signer=signer_key, expected=expected, got=claimed_nonce)

    def verify_call(self, call: _SignedCallLike) -> None:
        """Verify a Transfer / TransferFrom / Approve payload."""
        self.verify(call.signer, call.action_bytes(self.domain), call.nonce, call.signature)


__all__ = ["AuthorizationVerifier", "NonceSource"]
