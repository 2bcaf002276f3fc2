"""Timestamp parsing utilities."""
import re
from datetime import datetime, time, timezone

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_date_only(s: str) -> bool:
    """Return True for a bare ``YYYY-MM-DD`` string."""
    return bool(_DATE_ONLY.match(s.strip()))


def parse_timestamp(s: str) -> datetime:
    """
    Parse a timestamp string into a UTC-aware datetime object.
    
    Supports multiple formats:
    - Date only: "2024-01-02" (midnight UTC)
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with timezone: "2024-01-02T09:10:00+02:00"
    - ISO format without timezone: "2024-01-02T09:10:00"
    - Space-separated: "2024-01-02 09:10:00"
    
    Naive values are assumed to be UTC; offset values are converted to UTC.
    
    Args:
        s: Timestamp string
        
    Returns:
        datetime object in UTC
        
    Raises:
        ValueError: If timestamp cannot be parsed
    """
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")
    
    s = s.strip()
    
    # Convert trailing "Z" to "+00:00" for ISO format compatibility
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    
    # Replace space with "T" for ISO-like format
    if " " in s and "T" not in s:
        s = s.replace(" ", "T", 1)
    
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(
            f"Unable to parse timestamp: {s}. Expected ISO format "
            "(e.g., '2024-01-02', '2024-01-02T09:10:00Z' or '2024-01-02T09:10:00+00:00')"
        ) from None
    
    return as_utc(dt)


def as_utc(dt: datetime) -> datetime:
    """
    Attach UTC to a naive datetime, convert an aware one to UTC.

    Raises:
        ValueError: If the UTC equivalent falls outside years 1..9999
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError(f"Timestamp out of range once converted to UTC: {dt.isoformat()}") from None


def end_of_day(dt: datetime) -> datetime:
    """Last representable instant of ``dt``'s calendar day, keeping its tzinfo."""
    return datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)


def to_storage(dt: datetime) -> str:
    """
    Serialize a datetime for storage.
    
    Fixed microsecond precision in UTC keeps lexical order equal to
    chronological order, so string comparisons in SQL work as range checks.
    """
    return as_utc(dt).isoformat(timespec="microseconds")
