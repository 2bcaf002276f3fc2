"""Tests for the SQLite transaction store."""
import pytest
from datetime import datetime, timezone
from expense_tracker.models.transaction import TransactionCreate, TransactionKind
from expense_tracker.storage.query import TransactionQuery


def _add(store, owner_id="alice", **kwargs):
    data = {"kind": "expense", "category": "Food", "amount": 10.0, "occurred_at": "2024-01-05"}
    data.update(kwargs)
    return store.add_transaction(owner_id, TransactionCreate(**data))


def test_add_and_get(store):
    tx = _add(store, note="lunch")

    fetched = store.get_transaction("alice", tx.id)

    assert fetched == tx
    assert fetched.owner_id == "alice"
    assert fetched.kind == TransactionKind.EXPENSE
    assert fetched.occurred_at == datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert fetched.created_at == fetched.updated_at


def test_get_is_owner_scoped(store):
    tx = _add(store)
    assert store.get_transaction("bob", tx.id) is None


def test_find_orders_newest_first_with_stable_ties(store):
    first = _add(store, category="A", occurred_at="2024-01-05")
    second = _add(store, category="B", occurred_at="2024-01-05")
    newest = _add(store, category="C", occurred_at="2024-02-01")
    _add(store, owner_id="bob", occurred_at="2024-03-01")

    found = store.find_transactions(TransactionQuery(owner_id="alice"))

    assert [tx.id for tx in found] == [newest.id, first.id, second.id]


def test_find_with_limit_and_offset(store):
    for day in range(1, 6):
        _add(store, occurred_at=f"2024-01-0{day}")

    page = store.find_transactions(TransactionQuery(owner_id="alice"), offset=2, limit=2)

    assert [tx.occurred_at.day for tx in page] == [3, 2]


def test_count_with_filters(store):
    _add(store, category="Groceries")
    _add(store, category="Rent", kind="expense")
    _add(store, category="Salary", kind="income")

    assert store.count_transactions(TransactionQuery(owner_id="alice")) == 3
    assert store.count_transactions(TransactionQuery(owner_id="alice", kind=TransactionKind.INCOME)) == 1
    assert store.count_transactions(TransactionQuery(owner_id="alice", category="GROC")) == 1
    assert store.count_transactions(TransactionQuery(owner_id="bob")) == 0


def test_category_match_is_unicode_case_insensitive(store):
    _add(store, category="Café")
    assert store.count_transactions(TransactionQuery(owner_id="alice", category="CAFÉ")) == 1


def test_update_applies_changes(store):
    tx = _add(store)

    updated = store.update_transaction("alice", tx.id, {"amount": 42.0, "kind": TransactionKind.INCOME})

    assert updated.amount == 42.0
    assert updated.kind == TransactionKind.INCOME
    assert updated.category == tx.category
    assert updated.created_at == tx.created_at
    assert updated.updated_at >= tx.updated_at


def test_update_other_owner_matches_nothing(store):
    tx = _add(store)

    assert store.update_transaction("bob", tx.id, {"amount": 1.0}) is None
    assert store.get_transaction("alice", tx.id) == tx


def test_update_never_touches_owner(store):
    tx = _add(store)
    with pytest.raises(ValueError):
        store.update_transaction("alice", tx.id, {"owner_id": "bob"})


def test_delete(store):
    tx = _add(store)

    assert store.delete_transaction("bob", tx.id) is False
    assert store.delete_transaction("alice", tx.id) is True
    assert store.delete_transaction("alice", tx.id) is False
    assert store.get_transaction("alice", tx.id) is None


def test_totals_by_kind(store):
    _add(store, kind="income", amount=100.0)
    _add(store, kind="expense", amount=30.0)
    _add(store, kind="expense", amount=20.0)

    totals = store.totals_by_kind(TransactionQuery(owner_id="alice"))

    assert totals == {"income": (100.0, 1), "expense": (50.0, 2)}


def test_totals_by_category_sorted_by_total(store):
    _add(store, category="Food", amount=5.0)
    _add(store, category="Rent", amount=500.0)
    _add(store, category="Food", amount=7.5)
    _add(store, category="Salary", kind="income", amount=900.0)

    rows = store.totals_by_category(TransactionQuery(owner_id="alice", kind=TransactionKind.EXPENSE))

    assert rows == [("Rent", 500.0, 1), ("Food", 12.5, 2)]
