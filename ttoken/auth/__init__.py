"""
ttoken.auth — proof that a caller controls the account key it claims.

- signatures: pluggable SignatureScheme registry (ed25519 shipped) + signers
- verifier:   AuthorizationVerifier (signature, then nonce)
"""

from .signatures import (  # noqa: F401
    Ed25519Scheme,
    Ed25519Signer,
    SignatureScheme,
    get_scheme,
    known_schemes,
    register_scheme,
)
from .verifier import AuthorizationVerifier  # noqa: F401

__all__ = [
    "AuthorizationVerifier",
    "Ed25519Scheme",
    "Ed25519Signer",
    "SignatureScheme",
    "get_scheme",
    "known_schemes",
    "register_scheme",
]
