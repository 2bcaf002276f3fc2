"""Aggregate report models."""
from pydantic import Field
from expense_tracker.models.transaction import ApiModel


class TransactionSummary(ApiModel):
    """Income/expense totals over a filtered set."""
    
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0
    transaction_count: int = Field(0, ge=0)


class CategoryTotal(ApiModel):
    """Expense total for one category."""
    
    category: str
    total: float
    count: int = Field(..., ge=1)


class MessageResponse(ApiModel):
    """Plain confirmation message."""
    
    message: str
