from .timestamp import as_utc, is_date_only, parse_timestamp, to_storage, end_of_day

__all__ = ["as_utc", "is_date_only", "parse_timestamp", "to_storage", "end_of_day"]
