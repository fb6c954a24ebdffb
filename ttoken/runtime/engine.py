"""
ttoken.runtime.engine — the Transfer Engine.

Applies the three mutating operations as atomic state transitions:

    shape check → verify (signature, nonce) → business checks → mutate
    → bump signer nonce → commit → emit event

Everything from verification to the nonce bump runs inside one
`LedgerStore.transaction()`. If any step raises, the journal checkpoint is
reverted, so balances, allowances and nonces are exactly as before the call and
no event is emitted. A call that fails a business check leaves the signer's
nonce untouched; the same signed payload can be resubmitted once it would
succeed.

Rules
-----
transfer(Transfer)
    signer = sender; debit(sender), credit(to), bump nonce(sender).
    A transfer to oneself leaves the balance unchanged but still consumes the
    nonce and emits an event.

approve(Approve)
    signer = owner; overwrite allowance(owner, spender) with value (no balance
    check; setting 0 revokes); bump nonce(owner).

transfer_from(TransferFrom)
    signer = spender; allowance(owner, spender) >= value else
    InsufficientAllowance, then balance(owner) >= value else
    InsufficientBalance; reduce the allowance, debit(owner), credit(to),
    bump nonce(spender).
"""

from __future__ import annotations

from typing import Optional

from ..auth.verifier import AuthorizationVerifier
from ..errors import InsufficientAllowance, InsufficientBalance, MalformedCall, TokenError
from ..logging import get_logger
from ..state.ledger import LedgerStore
from ..types.calls import Approve, Transfer, TransferFrom
from ..types.events import ApproveEvent, TransferEvent
from ..types.uint import checked_sub
from .event_sink import EventSink

log = get_logger(__name__)


def _hex(b: bytes) -> str:
    return "0x" + b.hex()


class TransferEngine:
    """
    Executes signed calls against a `LedgerStore`.

    Parameters
    ----------
    ledger : LedgerStore
        The state being mutated.
    verifier : AuthorizationVerifier | None
        Signature + nonce checks (default: ed25519 against `ledger`).
    sink : EventSink | None
        Receives one event per successful call.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        verifier: Optional[AuthorizationVerifier] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.ledger = ledger
        self.verifier = verifier or AuthorizationVerifier(ledger)
        self.sink = sink if sink is not None else EventSink()

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def transfer(self, call: Transfer) -> TransferEvent:
        if not isinstance(call, Transfer):
            raise TypeError("transfer expects a Transfer payload")
        try:
            self._check_keys(call)
            with self.ledger.transaction() as led:
                self.verifier.verify_call(call)
                led.debit(call.sender, call.value)
                led.credit(call.to, call.value)
                led.bump_nonce(call.sender)
        except TokenError as e:
            self._rejected("transfer", call, e)
            raise
        event = TransferEvent(owner=call.sender, to=call.to, value=call.value)
        return self._accepted("transfer", call, event)

    def approve(self, call: Approve) -> ApproveEvent:
        if not isinstance(call, Approve):
            raise TypeError("approve expects an Approve payload")
        try:
            self._check_keys(call)
            with self.ledger.transaction() as led:
                self.verifier.verify_call(call)
                led.set_allowance(call.owner, call.spender, call.value)
                led.bump_nonce(call.owner)
        except TokenError as e:
            self._rejected("approve", call, e)
            raise
        event = ApproveEvent(owner=call.owner, spender=call.spender, value=call.value)
        return self._accepted("approve", call, event)

    def transfer_from(self, call: TransferFrom) -> TransferEvent:
        if not isinstance(call, TransferFrom):
            raise TypeError("transfer_from expects a TransferFrom payload")
        try:
            self._check_keys(call)
            with self.ledger.transaction() as led:
                self.verifier.verify_call(call)
                allowance = led.allowance_of(call.owner, call.spender)
                if allowance < call.value:
                    raise InsufficientAllowance(
                        owner=call.owner,
                        spender=call.spender,
                        allowance=allowance,
                        requested=call.value,
                    )
                balance = led.balance_of(call.owner)
                if balance < call.value:
                    raise InsufficientBalance(
                        account=call.owner, balance=balance, requested=call.value
                    )
                led.set_allowance(call.owner, call.spender, checked_sub(allowance, call.value))
                led.debit(call.owner, call.value)
                led.credit(call.to, call.value)
                led.bump_nonce(call.spender)
        except TokenError as e:
            self._rejected("transfer_from", call, e)
            raise
        event = TransferEvent(
            owner=call.owner, to=call.to, value=call.value, spender=call.spender
        )
        return self._accepted("transfer_from", call, event)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _check_keys(self, call: Transfer | TransferFrom | Approve) -> None:
        size = self.verifier.scheme.key_size
        for name, key in zip(call.KEY_FIELDS, call.keys()):
            if len(key) != size:
                raise MalformedCall(
                    f"{name} must be a {size}-byte account key",
                    field_name=name,
                    data={"size": len(key)},
                )

    def _accepted(self, op: str, call, event):
        self.sink.emit(event)
        log.debug(
            "call applied",
            extra={"op": op, "signer": _hex(call.signer), "nonce": call.nonce, "value": call.value},
        )
        return event

    def _rejected(self, op: str, call, err: TokenError) -> None:
        log.info(
            "call rejected",
            extra={"op": op, "signer": _hex(call.signer), "nonce": call.nonce, "code": err.code},
        )


__all__ = ["TransferEngine"]
