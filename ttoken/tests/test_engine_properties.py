"""
Property tests over random call sequences.

A small fixed population of signers issues random transfers, approvals and
delegated transfers with sometimes-stale nonces and sometimes-excessive
amounts. After every call:

- balances sum to the total supply
- a failed call changes nothing and emits nothing
- a successful call bumps exactly the signer's nonce by one
- running the same sequence on a second ledger gives the same state root
"""

from __future__ import annotations

from typing import List, Tuple

from hypothesis import given, settings
from hypothesis import strategies as st

from ttoken.auth.signatures import Ed25519Signer
from ttoken.config import TokenConfig, TokenMetadata
from ttoken.contract import TokenContract
from ttoken.errors import TokenError
from ttoken.types.calls import Approve, Transfer, TransferFrom

SIGNERS = [Ed25519Signer.from_seed(bytes([i + 10]) * 32) for i in range(4)]
KEYS = [s.public_key for s in SIGNERS]
CFG = TokenConfig(metadata=TokenMetadata())

Op = Tuple[str, int, int, int, int, int]

op_strategy = st.tuples(
    st.sampled_from(["transfer", "approve", "transfer_from"]),
    st.integers(min_value=0, max_value=3),  # signer
    st.integers(min_value=0, max_value=3),  # counterparty (owner for transfer_from)
    st.integers(min_value=0, max_value=3),  # recipient
    st.integers(min_value=0, max_value=120),  # value
    st.integers(min_value=-1, max_value=1),  # nonce skew
)


def _fresh() -> TokenContract:
    return TokenContract.from_allocations({KEYS[0]: 60, KEYS[1]: 40}, config=CFG)


def _build(c: TokenContract, op: Op):
    kind, si, ci, ri, value, skew = op
    signer = SIGNERS[si]
    nonce = max(0, c.account(signer.public_key).nonce + skew)
    if kind == "transfer":
        return c.transfer, Transfer.signed(signer, KEYS[ci], value, nonce)
    if kind == "approve":
        return c.approve, Approve.signed(signer, KEYS[ci], value, nonce)
    return c.transfer_from, TransferFrom.signed(signer, KEYS[ci], KEYS[ri], value, nonce)


@settings(max_examples=60, deadline=None)
@given(ops=st.lists(op_strategy, max_size=25))
def test_conservation_and_failure_isolation(ops: List[Op]) -> None:
    c = _fresh()
    for op in ops:
        fn, call = _build(c, op)
        before = c.ledger.to_dict()
        n_events = len(c.events)
        nonce_before = c.account(call.signer).nonce
        try:
            fn(call)
        except TokenError:
            assert c.ledger.to_dict() == before
            assert len(c.events) == n_events
        else:
            assert c.account(call.signer).nonce == nonce_before + 1
            assert len(c.events) == n_events + 1
        assert c.ledger.sum_balances() == c.total_supply() == 100


@settings(max_examples=30, deadline=None)
@given(ops=st.lists(op_strategy, max_size=15))
def test_same_calls_same_state_root(ops: List[Op]) -> None:
    c1, c2 = _fresh(), _fresh()
    for op in ops:
        fn1, call = _build(c1, op)
        results = []
        for fn in (fn1, getattr(c2, fn1.__name__)):
            try:
                results.append(fn(call))
            except TokenError as e:
                results.append(e.code)
        assert results[0] == results[1]
    assert c1.state_root() == c2.state_root()
    assert c1.sink.logs_root() == c2.sink.logs_root()


@settings(max_examples=40, deadline=None)
@given(value=st.integers(min_value=0, max_value=200))
def test_no_negative_spend(value: int) -> None:
    c = _fresh()
    call = Transfer.signed(SIGNERS[1], KEYS[2], value, 0)
    if value <= 40:
        c.transfer(call)
        assert c.account(KEYS[1]).balance == 40 - value
    else:
        before = c.ledger.to_dict()
        try:
            c.transfer(call)
        except TokenError as e:
            assert e.code == "INSUFFICIENT_BALANCE"
        else:
            raise AssertionError("overdraft accepted")
        assert c.ledger.to_dict() == before
