"""Translate caller-supplied list/report parameters into storage queries."""
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple, Union

from expense_tracker.errors import FieldError, RequestValidationFailed
from expense_tracker.models.transaction import TransactionKind
from expense_tracker.storage.query import TransactionQuery
from expense_tracker.utils.timestamp import end_of_day, is_date_only, parse_timestamp


@dataclass(frozen=True)
class Pagination:
    """1-based page window."""

    page: int = 1
    limit: int = 10

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def _parse_kind(kind, errors: List[FieldError]) -> Optional[TransactionKind]:
    if kind is None or isinstance(kind, TransactionKind):
        return kind
    if not kind.strip():
        return None
    try:
        return TransactionKind(kind.strip())
    except ValueError:
        errors.append(FieldError(field="type", message="type must be income or expense", location="query"))
        return None


def _parse_dates(
    start_date: Optional[str],
    end_date: Optional[str],
    errors: List[FieldError],
) -> Tuple[Optional[datetime], Optional[datetime]]:
    start = end = None

    if start_date and start_date.strip():
        try:
            start = parse_timestamp(start_date)
        except ValueError:
            errors.append(FieldError(field="startDate", message="startDate must be a valid ISO 8601 date", location="query"))

    if end_date and end_date.strip():
        try:
            end = parse_timestamp(end_date)
            if is_date_only(end_date):
                end = end_of_day(end)
        except ValueError:
            errors.append(FieldError(field="endDate", message="endDate must be a valid ISO 8601 date", location="query"))

    return start, end


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Parse the optional ``startDate``/``endDate`` strings.

    A bare ``YYYY-MM-DD`` end date covers that whole day. Blank strings are
    treated as absent. All malformed values are reported together.

    Raises:
        RequestValidationFailed: If either value is not an ISO-8601 date/datetime
    """
    errors: List[FieldError] = []
    start, end = _parse_dates(start_date, end_date, errors)
    if errors:
        raise RequestValidationFailed(errors)
    return start, end


def build_transaction_query(
    owner_id: str,
    kind: Union[TransactionKind, str, None] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> TransactionQuery:
    """
    Build an owner-scoped query; absent or blank parameters add no constraint.

    ``kind`` may be a raw ``type`` query value. Invalid kind and date values
    are reported together.

    Raises:
        RequestValidationFailed: If ``kind`` or either date is malformed
    """
    errors: List[FieldError] = []
    parsed_kind = _parse_kind(kind, errors)
    start, end = _parse_dates(start_date, end_date, errors)
    if errors:
        raise RequestValidationFailed(errors)

    category = category.strip() if category else None
    return TransactionQuery(
        owner_id=owner_id,
        kind=parsed_kind,
        category=category or None,
        start=start,
        end=end,
    )
