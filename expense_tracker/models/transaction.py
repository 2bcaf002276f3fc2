"""Transaction data models."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from expense_tracker.utils.timestamp import as_utc, parse_timestamp

CATEGORY_MAX_LENGTH = 30
NOTE_MAX_LENGTH = 100
# Keeps per-owner SUM() totals finite
AMOUNT_MAX = 1_000_000_000

# Fields that may be omitted from an update but never set to null
NON_NULLABLE_FIELDS = ("kind", "category", "amount", "occurred_at")


class TransactionKind(str, Enum):
    """Income/expense classification of a transaction."""
    
    INCOME = "income"
    EXPENSE = "expense"


class ApiModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        return parse_timestamp(value)
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return as_utc(value)


class TransactionCreate(ApiModel):
    """Payload for creating a transaction. The owner comes from the caller, never the body."""
    
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "type": "expense",
                "category": "Food",
                "amount": 12.50,
                "date": "2024-01-05",
                "note": "Lunch with the team",
            }
        },
    )
    
    kind: TransactionKind = Field(..., alias="type", description="'income' or 'expense'")
    category: str = Field(..., min_length=1, max_length=CATEGORY_MAX_LENGTH, description="Category label")
    amount: float = Field(..., gt=0, le=AMOUNT_MAX, allow_inf_nan=False, description="Amount, always positive")
    occurred_at: Optional[datetime] = Field(None, alias="date", description="When it happened; defaults to now")
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH, description="Free-text note")
    
    @field_validator("category", "note", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("occurred_at", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Any:
        return _coerce_timestamp(value)

    @field_validator("occurred_at")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class TransactionUpdate(ApiModel):
    """Partial update payload. Only fields present in the request are applied."""
    
    model_config = ConfigDict(extra="forbid")
    
    kind: Optional[TransactionKind] = Field(None, alias="type")
    category: Optional[str] = Field(None, min_length=1, max_length=CATEGORY_MAX_LENGTH)
    amount: Optional[float] = Field(None, gt=0, le=AMOUNT_MAX, allow_inf_nan=False)
    occurred_at: Optional[datetime] = Field(None, alias="date")
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)
    
    @field_validator("category", "note", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("occurred_at", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Any:
        return _coerce_timestamp(value)

    @field_validator("occurred_at")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)
    
    @field_validator(*NON_NULLABLE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value
    
    def changes(self) -> Dict[str, Any]:
        """Fields explicitly supplied by the caller, keyed by Python field name."""
        return self.model_dump(exclude_unset=True)


class Transaction(ApiModel):
    """Stored transaction record."""
    
    id: str
    owner_id: str = Field(..., alias="owner", description="Owning user")
    kind: TransactionKind = Field(..., alias="type")
    category: str
    amount: float
    occurred_at: datetime = Field(..., alias="date")
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TransactionPage(ApiModel):
    """One page of a filtered transaction listing."""
    
    transactions: List[Transaction] = Field(default_factory=list)
    total_pages: int = Field(..., ge=0)
    current_page: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
