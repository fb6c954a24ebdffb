"""
ttoken.contract — the token contract facade (Query & Event Interface).

`TokenContract` wires a `LedgerStore`, an `AuthorizationVerifier`, a
`TransferEngine` and an `EventSink` together and exposes the contract surface:

Reads (pure, never log, never mutate)
    name(), symbol(), decimals(), total_supply(),
    account(key) -> Account, allowance(owner, spender) -> int

Mutations (signed, atomic; raise a TokenError subclass on failure)
    transfer(Transfer), transfer_from(TransferFrom), approve(Approve)

Host entry points
    call(fn_name, payload_bytes) -> bytes
        CBOR in, CBOR out; raises TokenError (MalformedCall for unknown names
        or undecodable arguments).
    execute(fn_name, payload_bytes) -> CallOutcome
        Same dispatch, but failures are reported in the outcome instead of
        raised, in the shape {status, result, events, error}.

Events
    Successful mutations append to `events`; `drain_events()` hands them to
    the host and empties the sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .auth.signatures import SignatureScheme, get_scheme
from .auth.verifier import AuthorizationVerifier
from .config import TokenConfig, TokenMetadata, get_config
from .encoding import wire
from .errors import MalformedCall, TokenError, error_to_outcome
from .runtime.engine import TransferEngine
from .runtime.event_sink import Event, EventSink
from .state.accounts import Account
from .state.ledger import LedgerStore
from .types.calls import AllowanceQuery, Approve, Transfer, TransferFrom
from .types.events import ApproveEvent, TransferEvent

STATUS_OK = "OK"
STATUS_FAILED = "FAILED"


@dataclass
class CallOutcome:
    """
    Result of `TokenContract.execute`.

    status: "OK" or "FAILED"
    result: JSON-friendly result of the call (None on failure)
    events: events emitted by the call, as dicts with a "topic" key
    error:  {code, message, data?} on failure
    """

    status: str
    result: Any = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "result": self.result,
            "events": list(self.events),
            "error": self.error,
        }


def _event_dict(ev: Event) -> Dict[str, Any]:
    out: Dict[str, Any] = {"topic": ev.topic}
    out.update(ev.to_dict())
    return out


def _nullary(fn: Callable[[], Any]) -> Callable[[Any], Any]:
    def handler(args: Any) -> Any:
        if args is not None:
            raise MalformedCall("this call takes no arguments")
        return fn()

    return handler


def _key_arg(obj: Any, name: str = "key") -> bytes:
    if not isinstance(obj, (bytes, bytearray)) or not obj:
        raise MalformedCall(f"{name} must be a non-empty byte string", field_name=name)
    return bytes(obj)


class TokenContract:
    """
    Transparent fungible token.

    Build one with `deploy(owner, supply)` for a fresh ledger, or pass an
    existing `LedgerStore` (e.g. restored with `LedgerStore.from_dict`).
    """

    def __init__(
        self,
        ledger: LedgerStore,
        *,
        config: Optional[TokenConfig] = None,
        scheme: Optional[SignatureScheme] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.config = config or get_config()
        self.ledger = ledger
        self.sink = sink if sink is not None else EventSink()
        self.verifier = AuthorizationVerifier(
            ledger,
            scheme or get_scheme(self.config.signature_scheme),
            domain=self.config.domain,
        )
        self.engine = TransferEngine(ledger, self.verifier, self.sink)
        self._dispatch: Dict[str, Callable[[Any], Any]] = {
            "name": _nullary(self.name),
            "symbol": _nullary(self.symbol),
            "decimals": _nullary(self.decimals),
            "total_supply": _nullary(self.total_supply),
            "account": lambda a: self.account(_key_arg(a)),
            "allowance": lambda a: self.allowance(AllowanceQuery.from_wire(a)),
            "transfer": lambda a: self.transfer(Transfer.from_wire(a)),
            "transfer_from": lambda a: self.transfer_from(TransferFrom.from_wire(a)),
            "approve": lambda a: self.approve(Approve.from_wire(a)),
        }

    # ------------------------------------------------------------------ #
    # Deployment
    # ------------------------------------------------------------------ #

    @classmethod
    def deploy(
        cls, owner: bytes, supply: int, *, config: Optional[TokenConfig] = None
    ) -> "TokenContract":
        """Deploy with the whole `supply` credited to `owner`."""
        return cls(LedgerStore.genesis(owner, supply), config=config)

    @classmethod
    def from_allocations(
        cls, allocations: Mapping[bytes, int], *, config: Optional[TokenConfig] = None
    ) -> "TokenContract":
        return cls(LedgerStore.from_allocations(allocations), config=config)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    @property
    def metadata(self) -> TokenMetadata:
        return self.config.metadata

    def name(self) -> str:
        return self.metadata.name

    def symbol(self) -> str:
        return self.metadata.symbol

    def decimals(self) -> int:
        return self.metadata.decimals

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def account(self, key: bytes) -> Account:
        return self.ledger.account(key)

    def allowance(self, owner: Union[bytes, AllowanceQuery], spender: Optional[bytes] = None) -> int:
        """
        Remaining amount `spender` may move out of `owner`'s balance.

        Accepts either `(owner, spender)` or a single `AllowanceQuery`.
        """
        if isinstance(owner, AllowanceQuery):
            if spender is not None:
                raise TypeError("pass either an AllowanceQuery or (owner, spender)")
            return self.ledger.allowance_of(owner.owner, owner.spender)
        if spender is None:
            raise TypeError("allowance() missing spender")
        return self.ledger.allowance_of(owner, spender)

    def state_root(self) -> bytes:
        return self.ledger.state_root()

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def transfer(self, call: Transfer) -> TransferEvent:
        return self.engine.transfer(call)

    def transfer_from(self, call: TransferFrom) -> TransferEvent:
        return self.engine.transfer_from(call)

    def approve(self, call: Approve) -> ApproveEvent:
        return self.engine.approve(call)

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    @property
    def events(self) -> List[Event]:
        return self.sink.events

    def drain_events(self) -> List[Event]:
        return self.sink.drain()

    # ------------------------------------------------------------------ #
    # Host entry points
    # ------------------------------------------------------------------ #

    def _invoke(self, fn_name: str, payload: bytes) -> Any:
        handler = self._dispatch.get(fn_name)
        if handler is None:
            raise MalformedCall(f"unknown function {fn_name!r}", data={"function": fn_name})
        args = wire.loads(payload) if payload else None
        return handler(args)

    def call(self, fn_name: str, payload: bytes = b"") -> bytes:
        """
        Decode CBOR arguments, run `fn_name`, return the CBOR-encoded result.

        Results: str/int for metadata and allowance, {"balance", "nonce"} for
        account, the event map for mutations.
        """
        result = self._invoke(fn_name, payload)
        if isinstance(result, Account):
            return wire.dumps(result.to_dict())
        if isinstance(result, (TransferEvent, ApproveEvent)):
            return wire.dumps(result.to_wire())
        return wire.dumps(result)

    def execute(self, fn_name: str, payload: bytes = b"") -> CallOutcome:
        """Like `call`, but report TokenErrors in a `CallOutcome`."""
        mark = len(self.sink)
        try:
            result = self._invoke(fn_name, payload)
        except TokenError as e:
            failed = error_to_outcome(e)
            return CallOutcome(status=failed["status"], error=failed["error"])
        if isinstance(result, (Account, TransferEvent, ApproveEvent)):
            result = result.to_dict()
        emitted = [_event_dict(ev) for ev in self.sink.events[mark:]]
        return CallOutcome(status=STATUS_OK, result=result, events=emitted)


__all__ = ["TokenContract", "CallOutcome", "STATUS_OK", "STATUS_FAILED"]
