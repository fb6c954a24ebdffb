"""
ttoken.encoding — canonical byte encodings.

- canonical: SignBytes for signed calls (what signers sign)
- wire:      CBOR codec for call arguments/results exchanged with the host
"""

from . import canonical, wire  # noqa: F401

__all__ = ["canonical", "wire"]
