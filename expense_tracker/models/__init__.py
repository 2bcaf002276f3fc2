from .transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionKind,
    TransactionPage,
)
from .summary import TransactionSummary, CategoryTotal, MessageResponse

__all__ = [
    "Transaction",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionKind",
    "TransactionPage",
    "TransactionSummary",
    "CategoryTotal",
    "MessageResponse",
]
