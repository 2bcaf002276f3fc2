"""Tests for summary and category breakdown reports."""
import pytest
from expense_tracker.models.transaction import AMOUNT_MAX, TransactionCreate, TransactionKind
from expense_tracker.services.filters import build_transaction_query
from expense_tracker.services.reports import ReportService


def _add(store, kind, category, amount, date, owner_id="alice"):
    store.add_transaction(
        owner_id,
        TransactionCreate(kind=kind, category=category, amount=amount, occurred_at=date),
    )


def test_summary_example(store):
    _add(store, "expense", "Food", 12.50, "2024-01-05")
    _add(store, "income", "Salary", 1000, "2024-01-01")
    query = build_transaction_query("alice", start_date="2024-01-01", end_date="2024-01-05")

    summary = ReportService(store).summary(query)

    assert summary.income == 1000
    assert summary.expense == 12.5
    assert summary.balance == 987.5
    assert summary.transaction_count == 2


def test_summary_empty_is_zero(store):
    summary = ReportService(store).summary(build_transaction_query("alice"))

    assert summary.income == 0
    assert summary.expense == 0
    assert summary.balance == 0
    assert summary.transaction_count == 0


def test_summary_missing_income_group(store):
    _add(store, "expense", "Food", 20, "2024-01-05")

    summary = ReportService(store).summary(build_transaction_query("alice"))

    assert summary.income == 0
    assert summary.expense == 20
    assert summary.balance == -20
    assert summary.transaction_count == 1


def test_summary_ignores_kind_constraint(store):
    _add(store, "expense", "Food", 20, "2024-01-05")
    _add(store, "income", "Salary", 50, "2024-01-05")

    query = build_transaction_query("alice", kind=TransactionKind.EXPENSE)
    summary = ReportService(store).summary(query)

    assert summary.income == 50
    assert summary.transaction_count == 2


def test_summary_rounds_to_cents(store):
    _add(store, "expense", "Coffee", 0.1, "2024-01-05")
    _add(store, "expense", "Coffee", 0.2, "2024-01-06")

    summary = ReportService(store).summary(build_transaction_query("alice"))

    assert summary.expense == 0.3
    assert summary.balance == -0.3


def test_summary_invariants_hold_for_any_range(store):
    amounts = [("income", 1200), ("expense", 33.33), ("expense", 66.67), ("income", 0.5), ("expense", 250)]
    for day, (kind, amount) in enumerate(amounts, start=1):
        _add(store, kind, "Misc", amount, f"2024-03-{day:02d}")
    reports = ReportService(store)

    for start in range(1, 6):
        for end in range(start, 6):
            query = build_transaction_query("alice", start_date=f"2024-03-{start:02d}", end_date=f"2024-03-{end:02d}")
            summary = reports.summary(query)
            assert summary.balance == round(summary.income - summary.expense, 2)
            assert summary.transaction_count == end - start + 1


def test_category_breakdown_only_expenses_sorted(store):
    _add(store, "expense", "Food", 12.5, "2024-01-05")
    _add(store, "expense", "Rent", 800, "2024-01-03")
    _add(store, "expense", "Food", 20, "2024-01-20")
    _add(store, "income", "Salary", 1000, "2024-01-01")
    _add(store, "expense", "Travel", 300, "2024-01-10", owner_id="bob")

    breakdown = ReportService(store).category_breakdown(build_transaction_query("alice"))

    assert [(c.category, c.total, c.count) for c in breakdown] == [("Rent", 800, 1), ("Food", 32.5, 2)]


def test_category_breakdown_date_range(store):
    _add(store, "expense", "Food", 12.5, "2024-01-05")
    _add(store, "expense", "Rent", 800, "2024-02-03")

    query = build_transaction_query("alice", start_date="2024-02-01")
    breakdown = ReportService(store).category_breakdown(query)

    assert [c.category for c in breakdown] == ["Rent"]


def test_summary_of_largest_amounts_is_exact(store):
    _add(store, "income", "Bonus", AMOUNT_MAX, "2024-01-01")
    _add(store, "income", "Bonus", AMOUNT_MAX, "2024-01-02")

    summary = ReportService(store).summary(build_transaction_query("alice"))

    assert summary.income == 2 * AMOUNT_MAX
    assert summary.balance == 2 * AMOUNT_MAX


def test_summary_refuses_non_finite_totals():
    class OverflowingStore:
        def totals_by_kind(self, query):
            return {"income": (float("inf"), 2)}

    with pytest.raises(ValueError):
        ReportService(OverflowingStore()).summary(build_transaction_query("alice"))
