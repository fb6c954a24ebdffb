"""
SignBytes layout tests.

The byte layout is part of the signing contract with every client, so a few
vectors are pinned here byte by byte.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ttoken.encoding import canonical
from ttoken.types.uint import U64_MAX

A = b"\x01" * 32
B = b"\x02" * 32


def test_u64le() -> None:
    assert canonical.u64le(0) == b"\x00" * 8
    assert canonical.u64le(1) == b"\x01" + b"\x00" * 7
    assert canonical.u64le(U64_MAX) == b"\xff" * 8
    with pytest.raises(OverflowError):
        canonical.u64le(U64_MAX + 1)
    with pytest.raises(ValueError):
        canonical.u64le(-1)


def test_action_bytes_layout() -> None:
    got = canonical.action_bytes(canonical.OP_TRANSFER, [A, B], 40)
    tag = canonical.OP_TRANSFER
    expected = (
        bytes([len(tag)]) + tag
        + b"\x00"
        + (32).to_bytes(2, "little") + A
        + (32).to_bytes(2, "little") + B
        + (40).to_bytes(8, "little")
    )
    assert got == expected


def test_domain_is_length_prefixed() -> None:
    with_domain = canonical.action_bytes(canonical.OP_APPROVE, [A, B], 1, domain=b"net-1")
    assert b"\x05net-1" in with_domain
    assert with_domain != canonical.action_bytes(canonical.OP_APPROVE, [A, B], 1)


def test_domain_too_long() -> None:
    with pytest.raises(ValueError):
        canonical.action_bytes(canonical.OP_APPROVE, [A, B], 1, domain=b"x" * 256)


def test_sign_bytes_appends_nonce() -> None:
    action = canonical.action_bytes(canonical.OP_TRANSFER, [A, B], 7)
    msg = canonical.sign_bytes(action, 3)
    assert msg[: len(action)] == action
    assert msg[len(action):] == (3).to_bytes(8, "little")


def test_operation_tags_differ_for_same_fields() -> None:
    t = canonical.action_bytes(canonical.OP_TRANSFER, [A, B], 10)
    a = canonical.action_bytes(canonical.OP_APPROVE, [A, B], 10)
    assert t != a


def test_empty_key_rejected() -> None:
    with pytest.raises(ValueError):
        canonical.encode_key(b"")


@given(
    k1=st.binary(min_size=1, max_size=40),
    k2=st.binary(min_size=1, max_size=40),
    k3=st.binary(min_size=1, max_size=40),
    k4=st.binary(min_size=1, max_size=40),
)
def test_key_boundaries_are_unambiguous(k1: bytes, k2: bytes, k3: bytes, k4: bytes) -> None:
    # Different key splits never collide even when their concatenations match.
    x = canonical.action_bytes(canonical.OP_TRANSFER, [k1, k2], 5)
    y = canonical.action_bytes(canonical.OP_TRANSFER, [k3, k4], 5)
    assert (x == y) == ((k1, k2) == (k3, k4))


@given(v=st.integers(min_value=0, max_value=U64_MAX), n=st.integers(min_value=0, max_value=U64_MAX))
def test_deterministic(v: int, n: int) -> None:
    a = canonical.sign_bytes(canonical.action_bytes(canonical.OP_TRANSFER_FROM, [A, B, A], v), n)
    b = canonical.sign_bytes(canonical.action_bytes(canonical.OP_TRANSFER_FROM, [A, B, A], v), n)
    assert a == b
