"""Summary totals and expense category breakdowns."""
import math
from typing import List
from expense_tracker.models.summary import CategoryTotal, TransactionSummary
from expense_tracker.models.transaction import TransactionKind
from expense_tracker.storage.database import TransactionStore
from expense_tracker.storage.query import TransactionQuery


def _money(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"Total is not a finite amount: {value}")
    return round(value, 2)


class ReportService:
    """Aggregates a user's transactions. Grouping happens in the storage query."""
    
    def __init__(self, store: TransactionStore):
        self.store = store
    
    def summary(self, query: TransactionQuery) -> TransactionSummary:
        """
        Income/expense totals over ``query``.
        
        Any ``kind`` constraint on the query is ignored; both groups are
        always reported and default to zero when absent.
        
        Returns:
            TransactionSummary with balance = income - expense and
            transaction_count = income count + expense count
        """
        totals = self.store.totals_by_kind(query.with_kind(None))
        income, income_count = totals.get(TransactionKind.INCOME.value, (0.0, 0))
        expense, expense_count = totals.get(TransactionKind.EXPENSE.value, (0.0, 0))
        income = _money(income)
        expense = _money(expense)
        return TransactionSummary(
            income=income,
            expense=expense,
            balance=_money(income - expense),
            transaction_count=income_count + expense_count,
        )
    
    def category_breakdown(self, query: TransactionQuery) -> List[CategoryTotal]:
        """Expense totals per category, largest first."""
        rows = self.store.totals_by_category(query.with_kind(TransactionKind.EXPENSE))
        return [
            CategoryTotal(category=category, total=_money(total), count=count)
            for category, total, count in rows
        ]
