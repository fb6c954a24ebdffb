"""
ttoken.cli.sign — build and sign call payloads offline.

Implements:
  - ttoken sign transfer        --key K --to ACCOUNT --value N [--nonce N | --state S]
  - ttoken sign approve         --key K --spender ACCOUNT --value N [...]
  - ttoken sign transfer-from   --key K --owner ACCOUNT --to ACCOUNT --value N [...]

The output is a call file ({"function", "payload_hex"}) ready for
`ttoken apply`, or for any relayer that forwards it to `TokenContract.call`.
The signing domain comes from TTOKEN_DOMAIN.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ..config import get_config
from ..encoding import wire
from ..errors import TokenError
from ..types.calls import Approve, Transfer, TransferFrom
from .common import call_envelope, echo_json, fail, load_ledger, load_signer, parse_account, write_json

app = typer.Typer(help="Sign transfer / approve / transfer-from payloads")

_KEY_OPT = typer.Option(..., "--key", "-k", help="Signer key file (from `ttoken keygen`)")
_VALUE_OPT = typer.Option(..., "--value", min=0, help="Token amount")
_NONCE_OPT = typer.Option(None, "--nonce", min=0, help="Signer nonce (default: read from --state)")
_STATE_OPT = typer.Option(None, "--state", "-s", help="State file used to look up the nonce")
_OUT_OPT = typer.Option(None, "--output", "-o", help="Write the call file here (default: stdout)")


def _resolve_nonce(nonce: Optional[int], state: Optional[Path], signer_key: bytes) -> int:
    if nonce is not None:
        return nonce
    if state is None:
        fail("pass --nonce or --state to determine the signer nonce")
    return load_ledger(state).nonce_of(signer_key)


def _emit(function: str, call, output: Optional[Path]) -> None:
    envelope = call_envelope(function, wire.dumps(call.to_wire()))
    if output:
        write_json(output, envelope)
        typer.echo(f"Call written to {output}")
    else:
        echo_json(envelope)


@app.command("transfer")
def sign_transfer(
    key: Path = _KEY_OPT,
    to: str = typer.Option(..., "--to", help="Recipient account (hex or key file)"),
    value: int = _VALUE_OPT,
    nonce: Optional[int] = _NONCE_OPT,
    state: Optional[Path] = _STATE_OPT,
    output: Optional[Path] = _OUT_OPT,
) -> None:
    """Sign a direct transfer from the key's account."""
    signer = load_signer(key)
    n = _resolve_nonce(nonce, state, signer.public_key)
    try:
        call = Transfer.signed(signer, parse_account(to), value, n, domain=get_config().domain)
    except TokenError as e:
        fail(str(e))
    _emit("transfer", call, output)


@app.command("approve")
def sign_approve(
    key: Path = _KEY_OPT,
    spender: str = typer.Option(..., "--spender", help="Spender account (hex or key file)"),
    value: int = _VALUE_OPT,
    nonce: Optional[int] = _NONCE_OPT,
    state: Optional[Path] = _STATE_OPT,
    output: Optional[Path] = _OUT_OPT,
) -> None:
    """Sign an approval that sets the spender's allowance to VALUE."""
    signer = load_signer(key)
    n = _resolve_nonce(nonce, state, signer.public_key)
    try:
        call = Approve.signed(signer, parse_account(spender), value, n, domain=get_config().domain)
    except TokenError as e:
        fail(str(e))
    _emit("approve", call, output)


@app.command("transfer-from")
def sign_transfer_from(
    key: Path = _KEY_OPT,
    owner: str = typer.Option(..., "--owner", help="Account whose allowance is spent"),
    to: str = typer.Option(..., "--to", help="Recipient account (hex or key file)"),
    value: int = _VALUE_OPT,
    nonce: Optional[int] = _NONCE_OPT,
    state: Optional[Path] = _STATE_OPT,
    output: Optional[Path] = _OUT_OPT,
) -> None:
    """Sign a delegated transfer spending an allowance granted to the key's account."""
    signer = load_signer(key)
    n = _resolve_nonce(nonce, state, signer.public_key)
    try:
        call = TransferFrom.signed(
            signer, parse_account(owner), parse_account(to), value, n, domain=get_config().domain
        )
    except TokenError as e:
        fail(str(e))
    _emit("transfer_from", call, output)
