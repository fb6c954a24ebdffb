"""
ttoken — a transparent fungible token ledger with signed, relayable calls.

Every balance, allowance and nonce is public. Mutations are authorized by a
signature over a canonical message plus a per-signer nonce, so any relayer may
submit a call on the signer's behalf.

This package exposes only lightweight metadata at import time. Import the
facade explicitly:

    from ttoken.contract import TokenContract
"""

from .version import __version__

__all__ = ["__version__"]
