"""
ttoken.runtime — transition execution.

- engine:     TransferEngine (verify → check → mutate → bump nonce → emit)
- event_sink: EventSink (append-only events, drain, logs root)
"""

from .engine import TransferEngine  # noqa: F401
from .event_sink import EventSink  # noqa: F401

__all__ = ["TransferEngine", "EventSink"]
