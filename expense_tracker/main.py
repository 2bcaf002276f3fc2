"""FastAPI main application."""
import logging
from typing import List, Optional
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from expense_tracker import __version__
from expense_tracker.auth import get_current_owner
from expense_tracker.config import settings
from expense_tracker.errors import TransactionNotFound, register_exception_handlers
from expense_tracker.logging_config import configure_logging
from expense_tracker.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionPage,
    TransactionUpdate,
)
from expense_tracker.models.summary import CategoryTotal, MessageResponse, TransactionSummary
from expense_tracker.services.dashboard import render_dashboard
from expense_tracker.services.filters import Pagination, build_transaction_query
from expense_tracker.services.reports import ReportService
from expense_tracker.storage.database import TransactionStore, get_db

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=__version__, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log method, path and status code of every request."""
    response = await call_next(request)
    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.app_name, "version": __version__}


@app.get("/health")
async def health():
    """Healthcheck endpoint."""
    return {"status": "ok"}


@app.get("/transactions", response_model=TransactionPage)
async def list_transactions(
    kind: Optional[str] = Query(None, alias="type", description="income or expense; blank means any"),
    category: Optional[str] = Query(None, description="Case-insensitive substring of the category"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive lower bound (ISO 8601)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive upper bound (ISO 8601)"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_limit, ge=1, le=settings.max_page_limit),
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """
    List the caller's transactions, newest first.

    All filters are optional and combine with AND.
    """
    query = build_transaction_query(owner_id, kind, category, start_date, end_date)
    pagination = Pagination(page=page, limit=limit)

    transactions = store.find_transactions(query, offset=pagination.offset, limit=pagination.limit)
    total = store.count_transactions(query)

    return TransactionPage(
        transactions=transactions,
        total_pages=pagination.total_pages(total),
        current_page=pagination.page,
        total=total,
    )


@app.get("/transactions/stats", response_model=TransactionSummary)
async def get_stats(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Income, expense, balance and count over an optional date range."""
    query = build_transaction_query(owner_id, start_date=start_date, end_date=end_date)
    return ReportService(store).summary(query)


@app.get("/transactions/categories", response_model=List[CategoryTotal])
async def get_categories(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Expense breakdown per category, largest total first."""
    query = build_transaction_query(owner_id, start_date=start_date, end_date=end_date)
    return ReportService(store).category_breakdown(query)


@app.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Get one of the caller's transactions."""
    transaction = store.get_transaction(owner_id, transaction_id)
    if transaction is None:
        raise TransactionNotFound(transaction_id)
    return transaction


@app.post("/transactions", response_model=Transaction, status_code=201)
async def create_transaction(
    payload: TransactionCreate,
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Create a transaction owned by the caller."""
    transaction = store.add_transaction(owner_id, payload)
    logger.info(
        "Transaction created",
        extra={"owner_id": owner_id, "transaction_id": transaction.id, "kind": transaction.kind.value},
    )
    return transaction


@app.put("/transactions/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """
    Partially update one of the caller's transactions.

    Only fields present in the body change; each is validated with the
    same rules as on create.
    """
    changes = payload.changes()
    transaction = store.update_transaction(owner_id, transaction_id, changes)
    if transaction is None:
        raise TransactionNotFound(transaction_id)
    logger.info(
        "Transaction updated",
        extra={"owner_id": owner_id, "transaction_id": transaction_id, "fields": sorted(changes)},
    )
    return transaction


@app.delete("/transactions/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Permanently delete one of the caller's transactions."""
    if not store.delete_transaction(owner_id, transaction_id):
        raise TransactionNotFound(transaction_id)
    logger.info("Transaction deleted", extra={"owner_id": owner_id, "transaction_id": transaction_id})
    return MessageResponse(message="Transaction deleted successfully")


@app.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    owner_id: str = Depends(get_current_owner),
    store: TransactionStore = Depends(get_db),
):
    """Dashboard page: summary cards, expense categories and recent transactions."""
    query = build_transaction_query(owner_id, start_date=start_date, end_date=end_date)
    reports = ReportService(store)
    recent = store.find_transactions(query, offset=0, limit=settings.dashboard_recent_limit)

    if start_date or end_date:
        period = f"{start_date or '...'} to {end_date or '...'}"
    else:
        period = "All time"

    page = render_dashboard(
        settings.app_name,
        reports.summary(query),
        reports.category_breakdown(query),
        recent,
        period=period,
    )
    return HTMLResponse(content=page)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
