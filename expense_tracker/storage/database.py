"""Database storage layer using SQLite."""
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from expense_tracker.config import settings
from expense_tracker.models.transaction import Transaction, TransactionCreate, TransactionKind
from expense_tracker.storage.query import TransactionQuery
from expense_tracker.utils.timestamp import to_storage

# Columns a partial update may touch
UPDATABLE_COLUMNS = ("kind", "category", "amount", "occurred_at", "note")


def _contains_ci(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive literal substring test, registered as an SQL function."""
    if haystack is None or needle is None:
        return False
    return needle.casefold() in haystack.casefold()


def _to_column(field: str, value: Any) -> Any:
    if value is None:
        return None
    if field == "kind":
        return TransactionKind(value).value
    if field == "occurred_at":
        return to_storage(value)
    return value


class TransactionStore:
    """Storage for transactions."""

    def __init__(self, db_path: str = "expense_tracker.db"):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    kind TEXT NOT NULL CHECK (kind IN ('income', 'expense')),
                    category TEXT NOT NULL,
                    amount REAL NOT NULL CHECK (amount > 0),
                    occurred_at TEXT NOT NULL,
                    note TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_occurred
                ON transactions(owner_id, occurred_at DESC)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_kind
                ON transactions(owner_id, kind)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_category
                ON transactions(owner_id, category)
            """)
            conn.commit()

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.create_function("contains_ci", 2, _contains_ci)
        try:
            yield conn
        finally:
            conn.close()

    @staticmethod
    def _row_to_transaction(row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            owner_id=row["owner_id"],
            kind=TransactionKind(row["kind"]),
            category=row["category"],
            amount=row["amount"],
            occurred_at=datetime.fromisoformat(row["occurred_at"]),
            note=row["note"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def add_transaction(self, owner_id: str, tx: TransactionCreate) -> Transaction:
        """Insert a new transaction for ``owner_id`` and return the stored record."""
        now = datetime.now(timezone.utc)
        record = Transaction(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            kind=tx.kind,
            category=tx.category,
            amount=tx.amount,
            occurred_at=tx.occurred_at or now,
            note=tx.note,
            created_at=now,
            updated_at=now,
        )
        with self._get_conn() as conn:
            conn.execute("""
                INSERT INTO transactions
                (id, owner_id, kind, category, amount, occurred_at, note, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                record.id,
                record.owner_id,
                record.kind.value,
                record.category,
                record.amount,
                to_storage(record.occurred_at),
                record.note,
                to_storage(record.created_at),
                to_storage(record.updated_at),
            ))
            conn.commit()
        # Round-trip through storage so callers see the persisted precision
        return self.get_transaction(owner_id, record.id)

    def get_transaction(self, owner_id: str, transaction_id: str) -> Optional[Transaction]:
        """Get one of ``owner_id``'s transactions, or None."""
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM transactions WHERE id = ? AND owner_id = ?",
                (transaction_id, owner_id),
            ).fetchone()
            return self._row_to_transaction(row) if row else None

    def find_transactions(
        self,
        query: TransactionQuery,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Get matching transactions, newest ``occurred_at`` first."""
        where, params = query.to_sql()
        sql = f"SELECT * FROM transactions WHERE {where} ORDER BY occurred_at DESC, rowid ASC"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params = params + [limit, offset]
        with self._get_conn() as conn:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_transaction(row) for row in rows]

    def count_transactions(self, query: TransactionQuery) -> int:
        """Count matching transactions."""
        where, params = query.to_sql()
        with self._get_conn() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM transactions WHERE {where}", params).fetchone()
            return int(row[0])

    def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        changes: Dict[str, Any],
    ) -> Optional[Transaction]:
        """
        Apply a partial update to one of ``owner_id``'s transactions.

        Returns the updated record, or None when nothing matched. Keys outside
        ``UPDATABLE_COLUMNS`` are rejected so the owner can never be rewritten.
        """
        unknown = set(changes) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")

        assignments = [f"{field} = ?" for field in changes]
        params: List[Any] = [_to_column(field, value) for field, value in changes.items()]
        assignments.append("updated_at = ?")
        params.append(to_storage(datetime.now(timezone.utc)))
        params.extend([transaction_id, owner_id])

        with self._get_conn() as conn:
            cursor = conn.execute(
                f"UPDATE transactions SET {', '.join(assignments)} WHERE id = ? AND owner_id = ?",
                params,
            )
            conn.commit()
            if cursor.rowcount == 0:
                return None
        return self.get_transaction(owner_id, transaction_id)

    def delete_transaction(self, owner_id: str, transaction_id: str) -> bool:
        """Permanently delete a transaction. Returns False when nothing matched."""
        with self._get_conn() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND owner_id = ?",
                (transaction_id, owner_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def totals_by_kind(self, query: TransactionQuery) -> Dict[str, Tuple[float, int]]:
        """Sum and count of ``amount`` per kind, e.g. ``{"income": (1000.0, 1)}``."""
        where, params = query.to_sql()
        with self._get_conn() as conn:
            rows = conn.execute(f"""
                SELECT kind, SUM(amount) AS total, COUNT(*) AS count
                FROM transactions
                WHERE {where}
                GROUP BY kind
            """, params).fetchall()
            return {row["kind"]: (float(row["total"]), int(row["count"])) for row in rows}

    def totals_by_category(self, query: TransactionQuery) -> List[Tuple[str, float, int]]:
        """(category, total, count) per category, largest total first."""
        where, params = query.to_sql()
        with self._get_conn() as conn:
            rows = conn.execute(f"""
                SELECT category, SUM(amount) AS total, COUNT(*) AS count
                FROM transactions
                WHERE {where}
                GROUP BY category
                ORDER BY total DESC, category ASC
            """, params).fetchall()
            return [(row["category"], float(row["total"]), int(row["count"])) for row in rows]


# Global instance
_transaction_store = None


def get_db() -> TransactionStore:
    """Get the transaction store instance."""
    global _transaction_store
    if _transaction_store is None:
        _transaction_store = TransactionStore(settings.database_path)
    return _transaction_store
