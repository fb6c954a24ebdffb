"""
ttoken.cli.common — helpers shared by the CLI commands.

Files
-----
key file     JSON {"scheme", "label", "public_key_hex", "secret_key_hex"}
state file   JSON ledger snapshot (`LedgerStore.to_dict()`)
call file    JSON {"function", "payload_hex"} where payload is the CBOR
             argument map accepted by `TokenContract.call`
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, NoReturn

import typer

from ..auth.signatures import Ed25519Signer
from ..state.ledger import LedgerStore


def fail(msg: str) -> NoReturn:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def echo_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text())
    except FileNotFoundError:
        fail(f"file not found: {path}")
    except json.JSONDecodeError as e:
        fail(f"{path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        fail(f"{path} must hold a JSON object, got {type(data).__name__}")
    return data


def write_json(path: Path, obj: Any) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n")


# ----------------------------------------------------------------------------
# Keys
# ----------------------------------------------------------------------------


def _hex_bytes(s: str) -> bytes:
    h = s[2:] if s.startswith(("0x", "0X")) else s
    return bytes.fromhex(h)


def key_file_data(signer: Ed25519Signer, label: str = "") -> Dict[str, Any]:
    return {
        "scheme": signer.scheme,
        "label": label,
        "public_key_hex": signer.public_key.hex(),
        "secret_key_hex": signer.private_bytes().hex(),
    }


def load_signer(path: Path) -> Ed25519Signer:
    data = _read_json(path)
    if data.get("scheme", "ed25519") != "ed25519":
        fail(f"unsupported key scheme in {path}: {data.get('scheme')}")
    try:
        return Ed25519Signer.from_seed(_hex_bytes(data["secret_key_hex"]))
    except (KeyError, ValueError) as e:
        fail(f"bad key file {path}: {e}")


def parse_account(value: str) -> bytes:
    """
    An account key given on the command line: 0x-hex public key, bare hex, or
    the path of a key file.
    """
    p = Path(value)
    if p.is_file():
        data = _read_json(p)
        try:
            return bytes.fromhex(data["public_key_hex"])
        except (KeyError, ValueError) as e:
            fail(f"bad key file {p}: {e}")
    try:
        key = _hex_bytes(value)
    except ValueError:
        fail(f"not a hex account key or key file: {value}")
    if not key:
        fail("account key must not be empty")
    return key


# ----------------------------------------------------------------------------
# State
# ----------------------------------------------------------------------------


def load_ledger(path: Path) -> LedgerStore:
    data = _read_json(path)
    try:
        return LedgerStore.from_dict(data)
    except (ValueError, TypeError, OverflowError) as e:
        fail(f"bad state file {path}: {e}")


def save_ledger(path: Path, ledger: LedgerStore) -> None:
    write_json(path, ledger.to_dict())


# ----------------------------------------------------------------------------
# Call envelopes
# ----------------------------------------------------------------------------


def call_envelope(function: str, payload: bytes) -> Dict[str, str]:
    return {"function": function, "payload_hex": payload.hex()}


def load_call(path: Path) -> tuple[str, bytes]:
    data = _read_json(path)
    try:
        return str(data["function"]), bytes.fromhex(data["payload_hex"])
    except (KeyError, ValueError) as e:
        fail(f"bad call file {path}: {e}")


__all__ = [
    "fail",
    "echo_json",
    "write_json",
    "key_file_data",
    "load_signer",
    "parse_account",
    "load_ledger",
    "save_ledger",
    "call_envelope",
    "load_call",
]
