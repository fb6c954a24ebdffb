"""
ttoken - command-line interface for a transparent token ledger kept in a JSON
state file.

Commands:
  keygen                 Generate an Ed25519 account key
  genesis                Create a state file with the initial supply
  sign ...               Sign transfer / approve / transfer-from payloads
  apply                  Apply signed call files to a state file
  account                Show balance and nonce of an account
  allowance              Show the allowance of (owner, spender)
  info                   Token metadata, supply, state root and version

Global options:
  --log-level TEXT       DEBUG/INFO/WARNING/ERROR (env TTOKEN_LOG_LEVEL)
  --log-json / --log-text

Examples:
  ttoken keygen -o alice.json
  ttoken genesis -s state.json --owner alice.json --supply 1000
  ttoken sign transfer -k alice.json --to bob.json --value 40 -s state.json -o call.json
  ttoken apply -s state.json call.json
  ttoken account -s state.json bob.json
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .. import logging as tlog
from ..auth.signatures import Ed25519Signer
from ..config import get_config
from ..contract import TokenContract
from ..errors import TokenError
from ..state.ledger import LedgerStore
from ..version import version_metadata
from . import sign
from .common import (
    echo_json,
    fail,
    key_file_data,
    load_call,
    load_ledger,
    parse_account,
    save_ledger,
    write_json,
)

app = typer.Typer(
    name="ttoken",
    help="Transparent fungible token ledger",
    no_args_is_help=True,
    add_completion=False,
)

_STATE_OPT = typer.Option(..., "--state", "-s", help="Ledger state file (JSON)")


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR; default: TTOKEN_LOG_LEVEL)",
    ),
    log_json: Optional[bool] = typer.Option(
        None,
        "--log-json/--log-text",
        help="Log format (default: TTOKEN_LOG_FORMAT, else json when not a TTY)",
    ),
) -> None:
    """
    ttoken CLI — keys, genesis, offline signing and call application.

    Token metadata and the signing domain are read from the environment
    (TTOKEN_NAME, TTOKEN_SYMBOL, TTOKEN_DECIMALS, TTOKEN_DOMAIN, ...).
    """
    try:
        cfg = get_config()
    except ValueError as e:
        fail(f"bad configuration: {e}")
    if log_json is None and cfg.log_format is not None:
        log_json = cfg.log_format == "json"
    tlog.configure(json=log_json, level=log_level or cfg.log_level)


# ----------------------------------------------------------------------------
# keys & genesis
# ----------------------------------------------------------------------------


@app.command()
def keygen(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save key to file (default: prints to stdout)"
    ),
    label: str = typer.Option("", "--label", help="Optional label for this key"),
    seed: Optional[str] = typer.Option(
        None, "--seed", help="32-byte hex seed for a deterministic key (testing only)"
    ),
) -> None:
    """Generate an Ed25519 keypair; the public key is the account key."""
    try:
        signer = Ed25519Signer.from_seed(bytes.fromhex(seed)) if seed else Ed25519Signer.generate()
    except ValueError as e:
        fail(f"bad seed: {e}")
    data = key_file_data(signer, label)
    if output:
        write_json(output, data)
        try:
            output.chmod(0o600)
        except OSError:
            pass
        typer.echo(f"Key saved to {output}")
        typer.echo(f"  Account: 0x{data['public_key_hex']}")
    else:
        echo_json(data)


@app.command()
def genesis(
    state: Path = _STATE_OPT,
    owner: Optional[str] = typer.Option(
        None, "--owner", help="Account receiving the whole supply (hex or key file)"
    ),
    supply: int = typer.Option(0, "--supply", min=0, help="Initial supply credited to --owner"),
    alloc: List[str] = typer.Option(
        [], "--alloc", help="Additional ACCOUNT=AMOUNT allocation (repeatable)"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file"),
) -> None:
    """Create a new ledger state file."""
    if state.exists() and not force:
        fail(f"{state} exists (use --force to overwrite)")
    allocations = {}
    if owner is not None:
        allocations[parse_account(owner)] = supply
    elif supply:
        fail("--supply requires --owner")
    for item in alloc:
        acct, sep, amount = item.rpartition("=")
        if not sep:
            fail(f"--alloc expects ACCOUNT=AMOUNT, got {item!r}")
        try:
            n = int(amount)
        except ValueError:
            fail(f"bad amount in {item!r}")
        k = parse_account(acct)
        if k in allocations:
            fail(f"duplicate allocation for 0x{k.hex()}")
        allocations[k] = n
    try:
        ledger = LedgerStore.from_allocations(allocations)
    except (ValueError, OverflowError, TokenError) as e:
        fail(str(e))
    save_ledger(state, ledger)
    typer.echo(f"Genesis written to {state} (total supply {ledger.total_supply()})")


# ----------------------------------------------------------------------------
# apply & queries
# ----------------------------------------------------------------------------


@app.command()
def apply(
    calls: List[Path] = typer.Argument(..., help="Call files produced by `ttoken sign`"),
    state: Path = _STATE_OPT,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write the state file"),
) -> None:
    """
    Apply call files in order. Each call is atomic; the state file is written
    once at the end with every successful call. Exits 1 if any call failed.
    """
    contract = TokenContract(load_ledger(state))
    outcomes = []
    failed = 0
    with tlog.trace_scope():
        for path in calls:
            function, payload = load_call(path)
            outcome = contract.execute(function, payload)
            if not outcome.ok:
                failed += 1
            outcomes.append({"call": str(path), **outcome.to_dict()})
    if not dry_run:
        save_ledger(state, contract.ledger)
    echo_json(outcomes)
    if failed:
        raise typer.Exit(1)


@app.command()
def account(
    key: str = typer.Argument(..., help="Account (hex or key file)"),
    state: Path = _STATE_OPT,
) -> None:
    """Show balance and nonce of an account (zeros if unknown)."""
    ledger = load_ledger(state)
    k = parse_account(key)
    echo_json({"account": "0x" + k.hex(), **ledger.account(k).to_dict()})


@app.command()
def allowance(
    owner: str = typer.Argument(..., help="Owner account"),
    spender: str = typer.Argument(..., help="Spender account"),
    state: Path = _STATE_OPT,
) -> None:
    """Show how much SPENDER may still move out of OWNER's balance."""
    ledger = load_ledger(state)
    o, s = parse_account(owner), parse_account(spender)
    echo_json(
        {"owner": "0x" + o.hex(), "spender": "0x" + s.hex(), "allowance": ledger.allowance_of(o, s)}
    )


@app.command()
def info(
    state: Optional[Path] = typer.Option(None, "--state", "-s", help="Ledger state file (JSON)"),
) -> None:
    """Token metadata, version and (with --state) supply and state root."""
    cfg = get_config()
    out = {**cfg.to_dict(), **version_metadata()}
    if state is not None:
        ledger = load_ledger(state)
        out["total_supply"] = ledger.total_supply()
        out["state_root"] = "0x" + ledger.state_root().hex()
    echo_json(out)


app.add_typer(sign.app, name="sign")


def main() -> None:
    """Entry point for the ttoken CLI."""
    app()


if __name__ == "__main__":
    main()
