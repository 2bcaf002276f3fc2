"""Caller identity.

Authentication itself happens upstream; the gateway forwards the verified
user id in a trusted header (``settings.user_header``).
"""
from fastapi import Request

from expense_tracker.config import settings
from expense_tracker.errors import AuthenticationRequired


def get_current_owner(request: Request) -> str:
    """FastAPI dependency returning the authenticated caller's user id."""
    owner_id = (request.headers.get(settings.user_header) or "").strip()
    if not owner_id:
        raise AuthenticationRequired()
    return owner_id
