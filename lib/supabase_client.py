# =============================================================================
# lib/supabase_client.py - Supabase Client Factory
# =============================================================================
# Builds the Supabase client used by the service layer and provides small
# helpers shared by every query:
# - create_supabase_client(): construct a client from URL + key
# - fetch_all_rows(): page through a select beyond the 1000-row response cap
#
# Clients are created by app/dependencies.py and passed into services
# explicitly; nothing here keeps module-level state.
#
# Usage:
#   from lib.supabase_client import create_supabase_client
#   client = create_supabase_client(url, service_key)
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from supabase import Client, create_client

logger = logging.getLogger(__name__)

# PostgREST caps a single response at this many rows by default
POSTGREST_PAGE_SIZE = 1000


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code and an optional suggestion so the
    message tells HOW to fix the problem, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_supabase_client(url: str, key: str) -> Client:
    """
    Create a Supabase client.

    Server-side code passes the service_role key, which bypasses Row Level
    Security.

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(url, key)
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
        ) from e

    logger.info("Supabase client initialized successfully")
    return client


def fetch_all_rows(
    build_query: Callable[[], Any],
    page_size: int = POSTGREST_PAGE_SIZE,
) -> list[dict[str, Any]]:
    """
    Execute a select page by page until a short page comes back.

    Args:
        build_query: Returns a fresh, un-executed query builder (filters and
            ordering applied, no range). Called once per page.
        page_size: Rows per request

    Returns:
        All rows, in query order
    """
    rows: list[dict[str, Any]] = []
    offset = 0

    while True:
        response = build_query().range(offset, offset + page_size - 1).execute()
        page = response.data or []
        rows.extend(page)

        if len(page) < page_size:
            break
        offset += page_size

    logger.debug(f"Fetched {len(rows)} rows in {offset // page_size + 1} page(s)")
    return rows
