import io

import pytest

from auth import register_user
from console_io import ConsoleIO
from database import DataAccess, get_db_connection, init_database
from session_manager import Session


@pytest.fixture
def db():
    data_access = DataAccess(get_db_connection(":memory:"))
    init_database(data_access, out=io.StringIO())
    yield data_access
    data_access.close()


@pytest.fixture
def make_io():
    """Console whose input is the given lines and whose output is captured"""
    def _make(*lines):
        return ConsoleIO(io.StringIO("".join(f"{line}\n" for line in lines)), io.StringIO())
    return _make


@pytest.fixture
def catalog(db):
    games = [
        ("G1", "Chess Master", "strategy", 9.99, "Classic chess", "http://img/g1.png"),
        ("G2", "Space Race", "racing", 4.50, "Fast ships", "http://img/g2.png"),
        ("G3", "Tower Siege", "strategy", 19.00, "Defend the tower", "http://img/g3.png"),
        ("G0", "Free Demo", "demo", 0, "Demo disc", "http://img/g0.png"),
    ]
    for game in games:
        db.execute_update("""
            INSERT INTO Catalog (gameID, gameName, genre, price, description, imageURL)
            VALUES (?, ?, ?, ?, ?, ?)
        """, game)
    return games


@pytest.fixture
def manager_session():
    return Session("admin", "manager")


@pytest.fixture
def alice(db):
    register_user(db, "alice", "pw1", "555-1111", "chess")
    return Session("alice", "customer")


@pytest.fixture
def bob(db):
    register_user(db, "bob", "pw2", "555-2222", "")
    return Session("bob", "customer")


@pytest.fixture
def employee(db, manager_session):
    from role_manager import RoleManager

    register_user(db, "erin", "pw3", "555-3333", "")
    RoleManager(db).change_role(manager_session, "erin", "employee")
    return Session("erin", "employee")


@pytest.fixture
def count_rows(db):
    def _count(table, where="", params=()):
        return db.execute_query_rows(f"SELECT COUNT(*) AS n FROM {table} {where}", params)[0]['n']
    return _count
