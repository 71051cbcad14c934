"""
Filtered user listing query construction.

Filter values never reach the SQL text: every predicate uses a positional
named bind (``:p0``, ``:p1``, ...) and the matching value is appended to
``UserQuery.params`` in the same order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from directory.utils.validators import normalize_search_text, parse_province_id

BASE_USER_QUERY = """
SELECT
    u.user_id, u.firstname, u.lastname, u.province_id,
    p.name AS province_name
FROM tb_user u
LEFT JOIN tb_province p ON p.province_id = u.province_id
""".strip()

ORDER_CLAUSE = "ORDER BY u.user_id"


@dataclass(frozen=True)
class UserFilter:
    """Request-scoped search criteria for the user listing."""

    search: Optional[str] = None
    province_id: Optional[int] = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "UserFilter":
        """Build a filter from raw query-string values (``q`` and ``province``)."""
        return cls(
            search=normalize_search_text(args.get("q")),
            province_id=parse_province_id(args.get("province")),
        )


@dataclass
class UserQuery:
    sql: str
    params: List[Any] = field(default_factory=list)

    def bind_params(self) -> Dict[str, Any]:
        return {f"p{index}": value for index, value in enumerate(self.params)}


def build_user_query(user_filter: UserFilter) -> UserQuery:
    """Return the listing SQL and its ordered bound parameters for ``user_filter``."""
    where: List[str] = []
    params: List[Any] = []

    def bind(value: Any) -> str:
        params.append(value)
        return f":p{len(params) - 1}"

    # Re-normalize so a hand-built filter obeys the same rules as from_args.
    search = normalize_search_text(user_filter.search)
    province_id = parse_province_id(user_filter.province_id)

    if search:
        pattern = f"%{search}%"
        where.append(f"(u.firstname LIKE {bind(pattern)} OR u.lastname LIKE {bind(pattern)})")
    if province_id is not None:
        where.append(f"u.province_id = {bind(province_id)}")

    parts = [BASE_USER_QUERY]
    if where:
        parts.append("WHERE " + " AND ".join(where))
    parts.append(ORDER_CLAUSE)
    return UserQuery(sql="\n".join(parts), params=params)
