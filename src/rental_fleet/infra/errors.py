"""Translation of store failures into user-presentable messages.

Every public car operation funnels unexpected failures through
translate_store_error before raising StoreError, whichever backend
(SQLAlchemy/psycopg or Supabase PostgREST/Storage) produced them.
"""

from __future__ import annotations

from postgrest.exceptions import APIError
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

GENERIC_MESSAGE = "An unexpected error occurred while talking to the data store"

# Postgres SQLSTATE and PostgREST error codes
_CODE_MESSAGES: dict[str, str] = {
    "23505": "A record with the same unique value already exists",
    "23503": "The record references data that does not exist",
    "23502": "A required field is missing",
    "22P02": "Invalid identifier or value format",
    "42501": "You do not have permission to perform this action",
    "PGRST116": "The requested record was not found",
    "PGRST301": "Your session has expired, please sign in again",
}


def translate_store_error(exc: BaseException) -> str:
    """
    Convert a store or storage failure into a message for the caller.

    Known error codes map to fixed messages; anything else falls back to
    the exception's own text, or a generic message when it has none.
    """
    if isinstance(exc, APIError):
        return _CODE_MESSAGES.get(str(exc.code), exc.message or GENERIC_MESSAGE)

    if isinstance(exc, OperationalError):
        return "The database is unavailable, please try again later"

    if isinstance(exc, DBAPIError):
        code = _sqlstate(exc.orig)
        if code in _CODE_MESSAGES:
            return _CODE_MESSAGES[code]
        return str(exc.orig).strip() or GENERIC_MESSAGE

    if isinstance(exc, SQLAlchemyError):
        return GENERIC_MESSAGE

    return str(exc).strip() or GENERIC_MESSAGE


def _sqlstate(orig: BaseException | None) -> str | None:
    # psycopg 3 exposes .sqlstate, psycopg2 exposes .pgcode
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
