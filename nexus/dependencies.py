"""
Shared FastAPI dependencies: the request's API key and the current day.
"""
import secrets
from datetime import date
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from nexus.constants import API_KEY, API_KEY_HEADER
from nexus.shared.date_utils import today_utc

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)) -> str:
    """Reject requests whose X-API-Key does not match NEXUS_API_KEY"""
    if not api_key or not secrets.compare_digest(api_key.encode(), API_KEY.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Nexus API requires a valid {API_KEY_HEADER} header",
        )
    return api_key


def get_today() -> date:
    """Current UTC day; overridden in tests to pin the clock"""
    return today_utc()
