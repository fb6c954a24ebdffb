from __future__ import annotations

import pytest

from ttoken.errors import InsufficientBalance, Overflow
from ttoken.state.accounts import Account
from ttoken.state.journal import Journal
from ttoken.state.ledger import LedgerStore
from ttoken.types.uint import U64_MAX

A = b"\xaa" * 32
B = b"\xbb" * 32
C = b"\xcc" * 32


# ----------------------------------------------------------------------------
# Account
# ----------------------------------------------------------------------------


def test_account_checked_ops() -> None:
    acc = Account(balance=10)
    acc.credit(5)
    assert acc.balance == 15
    acc.debit(15)
    assert acc.balance == 0
    with pytest.raises(InsufficientBalance):
        acc.debit(1)
    with pytest.raises(Overflow):
        Account(balance=U64_MAX).credit(1)
    with pytest.raises(Overflow):
        Account(nonce=U64_MAX).increment_nonce()


def test_account_rejects_out_of_range() -> None:
    with pytest.raises(ValueError):
        Account(balance=-1)
    with pytest.raises(OverflowError):
        Account(nonce=U64_MAX + 1)
    with pytest.raises(ValueError):
        Account.from_dict({"balance": 1})


# ----------------------------------------------------------------------------
# Journal
# ----------------------------------------------------------------------------


def test_journal_nested_commit_and_revert() -> None:
    accounts = {A: Account(balance=10)}
    allowances = {}
    j = Journal(accounts, allowances)

    j.begin()
    j.ensure_account_for_write(A).debit(4)
    j.begin()
    j.ensure_account_for_write(B).credit(4)
    j.set_allowance(A, B, 7)
    assert j.get_account(B).balance == 4
    j.revert()
    assert j.get_account(B) is None
    assert j.get_allowance(A, B) == 0
    j.commit()
    # merged into the root overlay, base untouched until the root commit
    assert accounts[A].balance == 10
    assert j.get_account(A).balance == 6
    j.commit()
    assert accounts[A].balance == 6
    assert j.depth() == 1


def test_journal_zero_allowance_is_pruned() -> None:
    allowances = {(A, B): 5}
    j = Journal({}, allowances)
    j.begin()
    j.set_allowance(A, B, 0)
    assert j.get_allowance(A, B) == 0
    assert allowances == {(A, B): 5}
    j.commit()
    j.commit()
    assert allowances == {}


# ----------------------------------------------------------------------------
# LedgerStore
# ----------------------------------------------------------------------------


def test_genesis_reads() -> None:
    led = LedgerStore.genesis(A, 100)
    assert led.total_supply() == 100
    assert led.balance_of(A) == 100
    assert led.balance_of(B) == 0
    assert led.nonce_of(B) == 0
    assert led.allowance_of(A, B) == 0
    assert led.account(C) == Account()


def test_writes_require_transaction() -> None:
    led = LedgerStore.genesis(A, 100)
    with pytest.raises(RuntimeError):
        led.credit(B, 1)
    with pytest.raises(RuntimeError):
        led.bump_nonce(A)


def test_transaction_commits_all_or_nothing() -> None:
    led = LedgerStore.genesis(A, 100)
    with led.transaction() as tx:
        tx.debit(A, 30)
        tx.credit(B, 30)
        tx.set_allowance(A, C, 9)
        tx.bump_nonce(A)
    assert (led.balance_of(A), led.balance_of(B)) == (70, 30)
    assert led.nonce_of(A) == 1
    assert led.allowance_of(A, C) == 9

    before = led.state_root()
    with pytest.raises(InsufficientBalance):
        with led.transaction() as tx:
            tx.credit(B, 5)
            tx.bump_nonce(B)
            tx.debit(A, 1000)
    assert led.state_root() == before
    assert led.balance_of(B) == 30
    assert led.nonce_of(B) == 0
    assert not led.in_transaction()


def test_nested_transaction_commits_with_outer() -> None:
    led = LedgerStore.genesis(A, 10)
    with led.transaction() as tx:
        with tx.transaction() as inner:
            inner.debit(A, 3)
            inner.credit(B, 3)
        assert tx.in_transaction()
    assert led.balance_of(B) == 3
    assert led.sum_balances() == led.total_supply()


def test_from_allocations_and_checked_supply() -> None:
    led = LedgerStore.from_allocations({A: 60, B: 40})
    assert led.total_supply() == 100
    with pytest.raises(Overflow):
        LedgerStore.from_allocations({A: U64_MAX, B: 1})


def test_constructor_checks_supply() -> None:
    with pytest.raises(ValueError):
        LedgerStore(supply=10, accounts={A: Account(balance=9)})


def test_snapshot_round_trip_preserves_root() -> None:
    led = LedgerStore.from_allocations({A: 60, B: 40})
    with led.transaction() as tx:
        tx.set_allowance(A, B, 5)
        tx.bump_nonce(A)
    snap = led.to_dict()
    assert snap["total_supply"] == 100
    assert snap["allowances"] == [{"owner": "0x" + A.hex(), "spender": "0x" + B.hex(), "value": 5}]
    restored = LedgerStore.from_dict(snap)
    assert restored.state_root() == led.state_root()
    assert restored.nonce_of(A) == 1


def test_from_dict_rejects_inconsistent_snapshot() -> None:
    snap = LedgerStore.genesis(A, 100).to_dict()
    snap["total_supply"] = 99
    with pytest.raises(ValueError):
        LedgerStore.from_dict(snap)
    with pytest.raises(ValueError):
        LedgerStore.from_dict({"accounts": {}})


def test_state_root_changes_with_state() -> None:
    a = LedgerStore.genesis(A, 100)
    b = LedgerStore.genesis(A, 100)
    assert a.state_root() == b.state_root()
    with b.transaction() as tx:
        tx.bump_nonce(A)
    assert a.state_root() != b.state_root()


def test_journal_root_revert_discards_staged_writes() -> None:
    accounts = {A: Account(balance=10)}
    j = Journal(accounts, {})
    j.ensure_account_for_write(A).debit(1)
    j.set_allowance(A, B, 3)
    j.revert()
    assert j.depth() == 1
    assert j.get_account(A).balance == 10
    assert j.get_allowance(A, B) == 0
    j.commit()
    assert accounts[A].balance == 10


def test_package_lazy_exports() -> None:
    from ttoken import state

    assert state.LedgerStore is LedgerStore
    assert state.Account is Account
    with pytest.raises(AttributeError):
        state.Nope  # noqa: B018
