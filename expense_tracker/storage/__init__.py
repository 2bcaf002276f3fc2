from .query import TransactionQuery
from .database import TransactionStore, get_db

__all__ = ["TransactionQuery", "TransactionStore", "get_db"]
