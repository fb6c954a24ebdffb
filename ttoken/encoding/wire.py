"""
ttoken.encoding.wire — canonical CBOR for call arguments and results.

The host hands the ledger opaque argument bytes and expects opaque result
bytes back. We use CBOR maps with text keys, encoded with `cbor2` in canonical
mode (RFC 8949 §4.2.1 deterministic map ordering) so the same logical value
always produces the same bytes.

Shapes
------
transfer       {"from", "to", "value", "nonce", "signature"}
transfer_from  {"spender", "owner", "to", "value", "nonce", "signature"}
approve        {"owner", "spender", "value", "nonce", "signature"}
allowance      {"owner", "spender"}
account        bytes (the account key)
(no argument)  null

Keys and signatures are CBOR byte strings; integers are CBOR unsigned ints.

Public API
----------
- dumps(obj) -> bytes
- loads(data) -> Any          (raises MalformedCall on undecodable input)
- require_map(obj, fields)    -> dict
"""

from __future__ import annotations

import io
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable

import cbor2

from ..errors import MalformedCall


def _plain(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: _plain(v) for k, v in asdict(obj).items()}
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(x) for x in obj]
    if isinstance(obj, (bytearray, memoryview)):
        return bytes(obj)
    return obj


def dumps(obj: Any) -> bytes:
    """Deterministic CBOR encoding (dataclasses become maps)."""
    return cbor2.dumps(_plain(obj), canonical=True)


def loads(data: bytes) -> Any:
    """Decode exactly one CBOR item; trailing bytes are rejected."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedCall("payload must be bytes")
    raw = bytes(data)
    fp = io.BytesIO(raw)
    try:
        obj = cbor2.CBORDecoder(fp).decode()
    except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
        raise MalformedCall(f"undecodable payload: {e}") from e
    end = fp.tell()
    if fp.read(1):
        raise MalformedCall("trailing bytes after payload", data={"trailing": len(raw) - end})
    return obj


def require_map(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """
    Check that `obj` is a map carrying exactly `fields` (no more, no less).
    """
    if not isinstance(obj, dict):
        raise MalformedCall(f"expected map, got {type(obj).__name__}")
    wanted = set(fields)
    keys = set(obj.keys())
    missing = sorted(wanted - keys)
    if missing:
        raise MalformedCall("missing fields", data={"missing": missing})
    extra = sorted(str(k) for k in keys - wanted)
    if extra:
        raise MalformedCall("unexpected fields", data={"unexpected": extra})
    return obj


__all__ = ["dumps", "loads", "require_map"]
