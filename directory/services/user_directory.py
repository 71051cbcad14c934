"""
Read-side data access for the user directory page.

Every function takes the pooled engine explicitly and converts storage
failures into ``DirectoryError`` values instead of raising them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from directory.services.user_query import UserFilter, build_user_query

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "unknown error"

PROVINCES_QUERY = "SELECT province_id, name FROM tb_province ORDER BY name"
TOTAL_USERS_QUERY = "SELECT COUNT(*) FROM tb_user"
USERS_WITH_PROVINCE_QUERY = "SELECT COUNT(*) FROM tb_user WHERE province_id IS NOT NULL"


class DirectoryError(Exception):
    """
    Storage failure surfaced to the page. ``code`` is the driver error code
    when the underlying DB-API exception carries one.
    """

    prefix = "Database error"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message or UNKNOWN_ERROR)
        self.message = message
        self.code = code

    @classmethod
    def from_exception(cls, exc: BaseException) -> "DirectoryError":
        orig = getattr(exc, "orig", None) or exc
        args = getattr(orig, "args", ())
        code = None
        if args and isinstance(args[0], int) and not isinstance(args[0], bool):
            code = args[0]
            message = str(args[1]) if len(args) > 1 else None
        else:
            message = str(orig) or None
        return cls(message=message, code=code)

    @property
    def display_message(self) -> str:
        if self.code is not None:
            detail = str(self.code)
        else:
            detail = self.message or UNKNOWN_ERROR
        return f"{self.prefix}: {detail}"


class ConnectivityError(DirectoryError):
    """The pool could not hand out a live connection."""

    prefix = "Connection failed"


class QueryError(DirectoryError):
    """A specific statement failed."""

    prefix = "Query failed"


@dataclass(frozen=True)
class UserRecord:
    user_id: int
    firstname: str
    lastname: str
    province_id: Optional[int] = None
    province_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "province_id": self.province_id,
            "province_name": self.province_name,
        }


@dataclass(frozen=True)
class ProvinceRecord:
    province_id: int
    name: str


@dataclass(frozen=True)
class ProvinceSummary:
    provinces: List[ProvinceRecord] = field(default_factory=list)
    total_users: int = 0
    with_province: int = 0


@dataclass(frozen=True)
class DirectoryPage:
    """Everything the directory template needs for one request."""

    users: List[UserRecord]
    summary: ProvinceSummary
    error: Optional[str] = None


def probe_connection(engine: Engine) -> Optional[ConnectivityError]:
    """Check out a pooled connection, run a liveness query and release it."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("[db] connection error", exc_info=True)
        return ConnectivityError.from_exception(exc)
    return None


def _row_to_user(row) -> UserRecord:
    province_id = row["province_id"]
    return UserRecord(
        user_id=int(row["user_id"]),
        firstname=row["firstname"],
        lastname=row["lastname"],
        province_id=int(province_id) if province_id is not None else None,
        province_name=row["province_name"],
    )


def list_users(engine: Engine, user_filter: UserFilter) -> Tuple[List[UserRecord], Optional[QueryError]]:
    """
    Run the filtered listing query.

    Returns all matching users ordered by id, or an empty list and the error.
    """
    query = build_user_query(user_filter)
    try:
        with engine.connect() as conn:
            rows = conn.execute(text(query.sql), query.bind_params()).mappings().all()
        users = [_row_to_user(row) for row in rows]
    except SQLAlchemyError as exc:
        logger.error("[db] query error", exc_info=True)
        return [], QueryError.from_exception(exc)
    return users, None


def get_province_summary(engine: Engine) -> Tuple[Optional[ProvinceSummary], Optional[QueryError]]:
    """
    Read the province list and the user counts.

    The three reads are not isolated from each other; the first failure
    stops the remaining reads.
    """
    try:
        with engine.connect() as conn:
            province_rows = conn.execute(text(PROVINCES_QUERY)).mappings().all()
            total_users = conn.execute(text(TOTAL_USERS_QUERY)).scalar_one()
            with_province = conn.execute(text(USERS_WITH_PROVINCE_QUERY)).scalar_one()
    except SQLAlchemyError as exc:
        logger.error("[db] summary query error", exc_info=True)
        return None, QueryError.from_exception(exc)

    provinces = [
        ProvinceRecord(province_id=int(row["province_id"]), name=row["name"])
        for row in province_rows
    ]
    return ProvinceSummary(
        provinces=provinces,
        total_users=int(total_users),
        with_province=int(with_province),
    ), None


def load_directory_page(engine: Engine, user_filter: UserFilter) -> DirectoryPage:
    """Probe, list and summarize for one page request, in that order."""
    connectivity_error = probe_connection(engine)
    if connectivity_error is not None:
        return DirectoryPage(
            users=[],
            summary=ProvinceSummary(),
            error=connectivity_error.display_message,
        )

    users, list_error = list_users(engine, user_filter)
    summary, summary_error = get_province_summary(engine)

    error = list_error or summary_error
    return DirectoryPage(
        users=users,
        summary=summary or ProvinceSummary(),
        error=error.display_message if error else None,
    )
