"""
ttoken.version — package version and the protocol identifiers a deployment
speaks.

Two ledgers interoperate when they agree on the signed-message tags and the
wire encoding; the package version alone does not say that. `ttoken info`
reports both so operators can compare deployments.
"""

from __future__ import annotations

from importlib import metadata
from typing import Dict

from .encoding.canonical import OP_APPROVE, OP_TRANSFER, OP_TRANSFER_FROM

try:
    __version__ = metadata.version("ttoken")
except metadata.PackageNotFoundError:
    # running from a source checkout
    __version__ = "0.1.0"

WIRE_FORMAT = "cbor/canonical"


def sign_tags() -> Dict[str, str]:
    """Operation name → tag mixed into that operation's signed bytes."""
    return {
        "transfer": OP_TRANSFER.decode("ascii"),
        "transfer_from": OP_TRANSFER_FROM.decode("ascii"),
        "approve": OP_APPROVE.decode("ascii"),
    }


def version_metadata() -> Dict[str, object]:
    return {
        "version": __version__,
        "wire_format": WIRE_FORMAT,
        "sign_tags": sign_tags(),
    }


__all__ = ["__version__", "WIRE_FORMAT", "sign_tags", "version_metadata"]
