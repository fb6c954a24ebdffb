from __future__ import annotations

import pytest

from ttoken.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidSignature,
    MalformedCall,
    NonceMismatch,
    Overflow,
    TokenError,
    error_to_outcome,
)

A = b"\xaa" * 32
B = b"\xbb" * 32


@pytest.mark.parametrize(
    "err, code",
    [
        (InvalidSignature(signer=A), "INVALID_SIGNATURE"),
        (NonceMismatch(signer=A, expected=1, got=0), "NONCE_MISMATCH"),
        (InsufficientBalance(account=A, balance=1, requested=2), "INSUFFICIENT_BALANCE"),
        (InsufficientAllowance(owner=A, spender=B, allowance=1, requested=2), "INSUFFICIENT_ALLOWANCE"),
        (Overflow(), "OVERFLOW"),
        (MalformedCall(field_name="to"), "MALFORMED_CALL"),
    ],
)
def test_codes_are_stable(err: TokenError, code: str) -> None:
    assert isinstance(err, TokenError)
    assert isinstance(err, Exception)
    assert err.code == code
    assert err.to_dict()["code"] == code


def test_nonce_mismatch_carries_expected_and_got() -> None:
    err = NonceMismatch(signer=A, expected=3, got=1)
    d = err.to_dict()
    assert d["message"] == "nonce mismatch"
    assert d["data"] == {"signer": "0x" + A.hex(), "expected": 3, "got": 1}


def test_allowance_error_data_is_hex() -> None:
    err = InsufficientAllowance(owner=A, spender=B, allowance=50, requested=51)
    assert err.data == {
        "owner": "0x" + A.hex(),
        "spender": "0x" + B.hex(),
        "allowance": 50,
        "requested": 51,
    }


def test_data_is_omitted_when_empty() -> None:
    assert "data" not in Overflow().to_dict()
    assert "data" not in InvalidSignature().to_dict()


def test_malformed_call_merges_field_into_data() -> None:
    err = MalformedCall("bad", field_name="value", data={"size": 3})
    assert err.data == {"size": 3, "field": "value"}


def test_error_to_outcome() -> None:
    out = error_to_outcome(InsufficientBalance(account=A, balance=0, requested=5))
    assert out["status"] == "FAILED"
    assert out["error"]["code"] == "INSUFFICIENT_BALANCE"
    assert out["error"]["data"]["requested"] == 5


def test_raise_and_catch_as_base() -> None:
    with pytest.raises(TokenError) as ei:
        raise NonceMismatch(expected=1, got=2)
    assert ei.value.code == "NONCE_MISMATCH"
