from __future__ import annotations

import pytest

from ttoken.encoding import canonical
from ttoken.errors import MalformedCall, Overflow
from ttoken.types.calls import AllowanceQuery, Approve, Transfer, TransferFrom
from ttoken.types.uint import U64_MAX, checked_add, checked_sub, ensure_u64, is_u64


def test_uint_helpers() -> None:
    assert is_u64(0) and is_u64(U64_MAX)
    assert not is_u64(-1) and not is_u64(U64_MAX + 1) and not is_u64(True)
    assert checked_add(U64_MAX - 1, 1) == U64_MAX
    with pytest.raises(Overflow):
        checked_add(U64_MAX, 1)
    assert checked_sub(5, 5) == 0
    with pytest.raises(ValueError):
        checked_sub(1, 2)
    with pytest.raises(TypeError):
        ensure_u64("x", 1.0)  # type: ignore[arg-type]


def test_signers_per_payload(alice, bob, carol) -> None:
    a, b, c = alice.public_key, bob.public_key, carol.public_key
    assert Transfer.signed(alice, b, 1, 0).signer == a
    assert Approve.signed(alice, b, 1, 0).signer == a
    tf = TransferFrom.signed(bob, a, c, 1, 0)
    assert tf.signer == b
    assert tf.keys() == (b, a, c)


def test_signature_message_layout(alice, bob) -> None:
    call = Transfer.signed(alice, bob.public_key, 9, 4, domain=b"d")
    expected = canonical.sign_bytes(
        canonical.action_bytes(canonical.OP_TRANSFER, [alice.public_key, bob.public_key], 9, domain=b"d"),
        4,
    )
    assert call.signature_message(b"d") == expected
    assert len(call.signature) == 64


def test_signed_payloads_are_deterministic(alice, bob) -> None:
    # Ed25519 signatures are deterministic for a given key and message.
    assert Approve.signed(alice, bob.public_key, 5, 0) == Approve.signed(alice, bob.public_key, 5, 0)


def test_payloads_normalize_bytes_like(alice) -> None:
    call = Transfer(sender=bytearray(b"\x01" * 32), to=memoryview(b"\x02" * 32), value=1, nonce=0)
    assert type(call.sender) is bytes and type(call.to) is bytes
    assert call.signature == b""


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(sender=b"", to=b"\x02", value=1, nonce=0),
        dict(sender=b"\x01", to="bob", value=1, nonce=0),
        dict(sender=b"\x01", to=b"\x02", value=-5, nonce=0),
        dict(sender=b"\x01", to=b"\x02", value=1, nonce=U64_MAX + 1),
        dict(sender=b"\x01", to=b"\x02", value=1, nonce=0, signature="sig"),
    ],
)
def test_invalid_payloads(kwargs) -> None:
    with pytest.raises(MalformedCall):
        Transfer(**kwargs)


def test_payloads_are_frozen(alice, bob) -> None:
    call = Transfer.signed(alice, bob.public_key, 1, 0)
    with pytest.raises(AttributeError):
        call.value = 2  # type: ignore[misc]


def test_allowance_query_validation() -> None:
    with pytest.raises(MalformedCall):
        AllowanceQuery(owner=b"", spender=b"\x01")


def test_types_lazy_exports() -> None:
    from ttoken import types

    assert types.Transfer is Transfer
    assert types.U64_MAX == U64_MAX
    with pytest.raises(AttributeError):
        types.Mint  # noqa: B018
