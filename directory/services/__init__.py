"""
Service layer exports.
"""
from .user_query import UserFilter, UserQuery, build_user_query
from .user_directory import (
    ConnectivityError,
    DirectoryError,
    DirectoryPage,
    ProvinceRecord,
    ProvinceSummary,
    QueryError,
    UserRecord,
    get_province_summary,
    list_users,
    load_directory_page,
    probe_connection,
)

__all__ = [
    "UserFilter",
    "UserQuery",
    "build_user_query",
    "ConnectivityError",
    "DirectoryError",
    "DirectoryPage",
    "ProvinceRecord",
    "ProvinceSummary",
    "QueryError",
    "UserRecord",
    "get_province_summary",
    "list_users",
    "load_directory_page",
    "probe_connection",
]
