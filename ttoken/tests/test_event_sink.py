from __future__ import annotations

import pytest

from ttoken.runtime.event_sink import EventSink, hash_event, logs_root
from ttoken.types.events import ApproveEvent, TransferEvent

A = b"\x01" * 32
B = b"\x02" * 32


def test_emit_and_drain() -> None:
    sink = EventSink()
    e1 = TransferEvent(owner=A, to=B, value=1)
    e2 = ApproveEvent(owner=A, spender=B, value=2)
    assert sink.emit(e1) == 0
    assert sink.emit(e2) == 1
    assert len(sink) == 2
    assert sink.events == [e1, e2]

    assert sink.drain() == [e1, e2]
    assert len(sink) == 0

    assert sink.events == []
    assert sink.emit(e1) == 0


def test_events_is_a_copy() -> None:
    sink = EventSink()
    sink.emit(TransferEvent(owner=A, to=B, value=1))
    sink.events.clear()
    assert len(sink) == 1


def test_rejects_foreign_objects() -> None:
    with pytest.raises(TypeError):
        EventSink().emit({"topic": "transfer"})  # type: ignore[arg-type]


def test_topics() -> None:
    assert TransferEvent(owner=A, to=B, value=1).topic == "transfer"
    assert ApproveEvent(owner=A, spender=B, value=1).topic == "approve"


def test_logs_root_tracks_order_and_content() -> None:
    t = TransferEvent(owner=A, to=B, value=1)
    a = ApproveEvent(owner=A, spender=B, value=1)
    assert logs_root([]) == logs_root([])
    assert logs_root([t, a]) != logs_root([a, t])
    assert logs_root([t]) != logs_root([TransferEvent(owner=A, to=B, value=1, spender=B)])
    assert hash_event(t) != hash_event(a)

    sink = EventSink()
    empty = sink.logs_root()
    sink.emit(t)
    assert sink.logs_root() == logs_root([t]) != empty
