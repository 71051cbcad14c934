from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError

from directory.services import user_directory
from directory.services.user_directory import (
    ConnectivityError,
    QueryError,
    get_province_summary,
    list_users,
    load_directory_page,
    probe_connection,
)
from directory.services.user_query import UserFilter


def _drop(engine, table: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"DROP TABLE {table}"))


def test_search_matches_either_name_field_ordered_by_id(engine) -> None:
    users, error = list_users(engine, UserFilter(search="ann"))

    assert error is None
    assert [(u.user_id, u.firstname, u.lastname) for u in users] == [
        (1, "Anna", "Lee"),
        (2, "Bob", "Ann"),
    ]
    assert users[0].province_id == 1
    assert users[0].province_name == "Phuket"


def test_null_province_is_absent_not_empty_string(engine) -> None:
    users, error = list_users(engine, UserFilter())

    assert error is None
    bob = next(u for u in users if u.firstname == "Bob")
    assert bob.province_id is None
    assert bob.province_name is None


def test_unfiltered_listing_returns_everyone_in_id_order(engine) -> None:
    users, _ = list_users(engine, UserFilter())

    assert [u.user_id for u in users] == list(range(1, 11))


def test_province_filter(engine) -> None:
    users, error = list_users(engine, UserFilter(province_id=1))

    assert error is None
    assert [u.firstname for u in users] == ["Anna", "Dan", "Jack"]


def test_search_and_province_combined(engine) -> None:
    users, _ = list_users(engine, UserFilter(search="ann", province_id=1))

    assert [u.firstname for u in users] == ["Anna"]


def test_province_summary_counts(engine) -> None:
    # An active filter on the listing has no effect on the summary.
    list_users(engine, UserFilter(province_id=2))

    summary, error = get_province_summary(engine)

    assert error is None
    assert summary.total_users == 10
    assert summary.with_province == 7
    assert [p.name for p in summary.provinces] == ["Bangkok", "Chiang Mai", "Phuket"]
    assert [p.province_id for p in summary.provinces] == [2, 3, 1]


def test_empty_tables(empty_engine) -> None:
    users, error = list_users(empty_engine, UserFilter(search="x"))
    summary, summary_error = get_province_summary(empty_engine)

    assert (users, error) == ([], None)
    assert summary_error is None
    assert (summary.provinces, summary.total_users, summary.with_province) == ([], 0, 0)


def test_probe_succeeds_against_live_storage(engine) -> None:
    assert probe_connection(engine) is None


def test_probe_reports_connectivity_error(unreachable_engine) -> None:
    error = probe_connection(unreachable_engine)

    assert isinstance(error, ConnectivityError)
    assert error.display_message.startswith("Connection failed: ")


def test_listing_failure_returns_no_rows(engine) -> None:
    _drop(engine, "tb_user")

    users, error = list_users(engine, UserFilter())

    assert users == []
    assert isinstance(error, QueryError)
    assert error.code is None
    assert error.display_message == "Query failed: no such table: tb_user"


def test_summary_failure_aborts_remaining_reads(engine) -> None:
    _drop(engine, "tb_province")

    summary, error = get_province_summary(engine)

    assert summary is None
    assert isinstance(error, QueryError)
    assert "tb_province" in error.display_message


def test_page_skips_reads_when_storage_unreachable(unreachable_engine, monkeypatch) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("no reads may be issued after a failed probe")

    monkeypatch.setattr(user_directory, "list_users", fail)
    monkeypatch.setattr(user_directory, "get_province_summary", fail)

    page = load_directory_page(unreachable_engine, UserFilter(search="ann"))

    assert page.users == []
    assert page.summary.total_users == 0
    assert page.summary.provinces == []
    assert page.error.startswith("Connection failed: ")


def test_page_keeps_summary_when_listing_fails(engine, monkeypatch) -> None:
    monkeypatch.setattr(
        user_directory,
        "list_users",
        lambda engine, user_filter: ([], QueryError(message="boom")),
    )

    page = load_directory_page(engine, UserFilter())

    assert page.users == []
    assert page.summary.total_users == 10
    assert page.error == "Query failed: boom"


def test_page_happy_path(engine) -> None:
    page = load_directory_page(engine, UserFilter(province_id=3))

    assert page.error is None
    assert [u.firstname for u in page.users] == ["Frank", "Ivy"]
    assert page.summary.with_province == 7


class _DriverError(Exception):
    pass


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_DriverError(1146, "Table 'appdb.tb_user' doesn't exist"), "Query failed: 1146"),
        (_DriverError("syntax error near WHERE"), "Query failed: syntax error near WHERE"),
        (_DriverError(), "Query failed: unknown error"),
    ],
)
def test_error_detail_prefers_driver_code(orig, expected) -> None:
    wrapped = ProgrammingError("SELECT 1", {}, orig)

    error = QueryError.from_exception(wrapped)

    assert error.display_message == expected


def test_driver_code_is_kept_with_message() -> None:
    wrapped = ProgrammingError("SELECT 1", {}, _DriverError(2003, "Can't connect to MySQL server"))

    error = ConnectivityError.from_exception(wrapped)

    assert error.code == 2003
    assert error.message == "Can't connect to MySQL server"
    assert error.display_message == "Connection failed: 2003"
