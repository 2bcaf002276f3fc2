"""Storage-level predicate over the transactions table."""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple

from expense_tracker.models.transaction import TransactionKind
from expense_tracker.utils.timestamp import to_storage


@dataclass(frozen=True)
class TransactionQuery:
    """Owner-scoped filter. ``None`` fields impose no constraint."""

    owner_id: str
    kind: Optional[TransactionKind] = None
    category: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def with_kind(self, kind: Optional[TransactionKind]) -> "TransactionQuery":
        return replace(self, kind=kind)

    def to_sql(self) -> Tuple[str, List[object]]:
        """Return a WHERE clause (without the keyword) and its parameters."""
        clauses = ["owner_id = ?"]
        params: List[object] = [self.owner_id]

        if self.kind is not None:
            clauses.append("kind = ?")
            params.append(self.kind.value)

        if self.category:
            # contains_ci is registered on every connection by TransactionStore
            clauses.append("contains_ci(category, ?)")
            params.append(self.category)

        if self.start is not None:
            clauses.append("occurred_at >= ?")
            params.append(to_storage(self.start))

        if self.end is not None:
            clauses.append("occurred_at <= ?")
            params.append(to_storage(self.end))

        return " AND ".join(clauses), params
