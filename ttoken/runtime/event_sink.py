"""
ttoken.runtime.event_sink — append-only record of emitted events.

The transfer engine appends one event per successful mutation. The ledger never
reads events back; the host collects them with `drain()` and relays them to
observers.

The sink also offers a deterministic `logs_root()` (Merkle over per-event
hashes) so hosts and tests can compare event streams of two runs cheaply.

Typical use:
    sink = EventSink()
    sink.emit(TransferEvent(owner=a, to=b, value=10))
    root = sink.logs_root()
    events = sink.drain()
"""

from __future__ import annotations

import hashlib
from typing import Iterable, List, Optional, Union

from ..encoding import wire
from ..types.events import ApproveEvent, TransferEvent

Event = Union[TransferEvent, ApproveEvent]

_HASH = hashlib.sha3_256


def _h(data: bytes) -> bytes:
    return _HASH(data).digest()


def hash_event(event: Event) -> bytes:
    """
    Per-event hash with simple domain separation.

    Hash over: "LOG\\0" || u8(len(topic)) || topic || sha3(cbor(event))
    """
    topic = event.topic.encode("ascii")
    buf = bytearray(b"LOG\0")
    buf += len(topic).to_bytes(1, "big") + topic
    buf += _h(wire.dumps(event.to_wire()))
    return _h(bytes(buf))


def _merkle_pair(l: bytes, r: bytes) -> bytes:
    return _h(b"MR\0" + l + r)


def logs_root(events: Iterable[Event]) -> bytes:
    """
    Merkle root over per-event hashes (duplicate last when odd).
    Empty set root is sha3_256("MR\\0EMPTY").
    """
    level = [hash_event(e) for e in events]
    if not level:
        return _h(b"MR\0EMPTY")
    while len(level) > 1:
        nxt: List[bytes] = []
        it = iter(level)
        for a in it:
            b = next(it, None)
            if b is None:
                b = a
            nxt.append(_merkle_pair(a, b))
        level = nxt
    return level[0]


class EventSink:
    """
    Collects events in emission order.

    Caches the computed root until the next emit() invalidates it.
    """

    __slots__ = ["_events", "_cached_root"]

    def __init__(self) -> None:
        self._events: List[Event] = []
        self._cached_root: Optional[bytes] = None

    # ------------------------ mutation ------------------------

    def emit(self, event: Event) -> int:
        """Append an event. Returns its index."""
        if not isinstance(event, (TransferEvent, ApproveEvent)):
            raise TypeError(f"unsupported event type: {type(event).__name__}")
        self._events.append(event)
        self._cached_root = None
        return len(self._events) - 1

    def drain(self) -> List[Event]:
        """Return all collected events and empty the sink."""
        out = self._events
        self._events = []
        self._cached_root = None
        return out

    # ------------------------ accessors ------------------------

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def logs_root(self) -> bytes:
        if self._cached_root is None:
            self._cached_root = logs_root(self._events)
        return self._cached_root


__all__ = ["Event", "EventSink", "hash_event", "logs_root"]
