from __future__ import annotations

from pathlib import Path

import pytest

from directory import create_app
from directory.config import Config
from directory.database import build_engine, db_session, init_db
from directory.models import Province, User

PROVINCES = [
    (1, "Phuket"),
    (2, "Bangkok"),
    (3, "Chiang Mai"),
]

# 10 users, 7 of them with a province.
USERS = [
    ("Anna", "Lee", 1),
    ("Bob", "Ann", None),
    ("Carla", "Diaz", 2),
    ("Dan", "Wong", 1),
    ("Eve", "Stone", None),
    ("Frank", "Moss", 3),
    ("Gina", "Park", 2),
    ("Hugo", "Reyes", None),
    ("Ivy", "Chen", 3),
    ("Jack", "Hill", 1),
]


class ConfigForTests(Config):
    TESTING = True
    DATABASE_URL = "sqlite://"
    DB_CREATE_TABLES = False


def _sqlite_engine(path: Path):
    return build_engine({"DATABASE_URL": f"sqlite:///{path}", "DB_CONNECTION_LIMIT": 5})


@pytest.fixture()
def empty_engine(tmp_path: Path):
    engine = _sqlite_engine(tmp_path / "directory.sqlite3")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def engine(empty_engine):
    with db_session(empty_engine) as session:
        session.add_all(Province(province_id=pid, name=name) for pid, name in PROVINCES)
        session.flush()
        session.add_all(
            User(firstname=first, lastname=last, province_id=province_id)
            for first, last, province_id in USERS
        )
    return empty_engine


@pytest.fixture()
def unreachable_engine(tmp_path: Path):
    # sqlite cannot create a database file inside a directory that does not exist
    engine = _sqlite_engine(tmp_path / "missing" / "directory.sqlite3")
    yield engine
    engine.dispose()


@pytest.fixture()
def app(engine):
    return create_app(ConfigForTests, engine=engine)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def unreachable_client(unreachable_engine):
    return create_app(ConfigForTests, engine=unreachable_engine).test_client()
