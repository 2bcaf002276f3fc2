from .filters import Pagination, build_transaction_query, parse_date_range
from .reports import ReportService
from .dashboard import render_dashboard

__all__ = [
    "Pagination",
    "build_transaction_query",
    "parse_date_range",
    "ReportService",
    "render_dashboard",
]
