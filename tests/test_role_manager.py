import pytest

from errors import DataCorruption, LoginTaken, NotFound, PermissionDenied, ValidationError
from order_manager import OrderManager
from role_manager import RoleManager


@pytest.fixture
def roles(db):
    return RoleManager(db)


def test_resolve_role_customer(roles, alice):
    assert roles.resolve_role("alice") == "customer"


def test_resolve_role_manager(roles):
    assert roles.resolve_role("admin") == "manager"


def test_resolve_role_unknown_user(roles):
    with pytest.raises(NotFound):
        roles.resolve_role("nobody")


def test_resolve_role_flags_double_membership(db, roles, alice):
    db.execute_update("INSERT INTO Worker (login) VALUES ('alice')")

    with pytest.raises(DataCorruption):
        roles.resolve_role("alice")


def test_resolve_role_flags_missing_membership(db, roles, alice):
    db.execute_update("DELETE FROM Customer WHERE login = 'alice'")

    with pytest.raises(DataCorruption):
        roles.resolve_role("alice")


def test_resolve_role_flags_role_column_mismatch(db, roles, alice):
    db.execute_update("UPDATE Users SET role = 'manager' WHERE login = 'alice'")

    with pytest.raises(DataCorruption):
        roles.resolve_role("alice")


def test_manager_promotes_customer_to_employee(roles, manager_session, bob, count_rows):
    assert roles.change_role(manager_session, "bob", "employee") == "employee"

    assert count_rows("Customer", "WHERE login = 'bob'") == 0
    assert count_rows("Worker", "WHERE login = 'bob'") == 1
    assert roles.resolve_role("bob") == "employee"


def test_change_role_back_to_customer(roles, manager_session, employee, count_rows):
    roles.change_role(manager_session, "erin", "customer")

    assert count_rows("Customer", "WHERE login = 'erin'") == 1
    assert count_rows("Worker", "WHERE login = 'erin'") == 0
    assert roles.resolve_role("erin") == "customer"


def test_change_role_accepts_plural_spelling(roles, manager_session, bob):
    assert roles.change_role(manager_session, "bob", "Managers") == "manager"
    assert roles.resolve_role("bob") == "manager"


def test_change_role_rejects_unknown_role(roles, manager_session, bob):
    with pytest.raises(ValidationError):
        roles.change_role(manager_session, "bob", "wizard")

    assert roles.resolve_role("bob") == "customer"


def test_change_role_unknown_user(roles, manager_session, count_rows):
    with pytest.raises(NotFound):
        roles.change_role(manager_session, "nobody", "employee")

    assert count_rows("Worker") == 1


def test_customer_cannot_change_roles(roles, alice, bob, count_rows):
    with pytest.raises(PermissionDenied):
        roles.change_role(alice, "bob", "manager")

    assert roles.resolve_role("bob") == "customer"
    assert count_rows("Worker") == 1


def test_rename_login_moves_membership_and_orders(db, roles, manager_session, alice, catalog, count_rows):
    OrderManager(db).place_order(alice, "G1", 1)

    roles.rename_login(manager_session, "alice", "alicia")

    assert count_rows("Users", "WHERE login = 'alice'") == 0
    assert count_rows("Customer", "WHERE login = 'alice'") == 0
    assert count_rows("Customer", "WHERE login = 'alicia'") == 1
    assert count_rows("RentalOrder", "WHERE login = 'alicia'") == 1
    assert roles.resolve_role("alicia") == "customer"


def test_rename_own_login_updates_session(roles, manager_session, count_rows):
    roles.rename_login(manager_session, "admin", "boss")

    assert manager_session.login == "boss"
    assert count_rows("Worker", "WHERE login = 'boss'") == 1
    assert roles.resolve_role("boss") == "manager"


def test_rename_to_taken_login_rolls_back(roles, manager_session, alice, bob, count_rows):
    with pytest.raises(LoginTaken):
        roles.rename_login(manager_session, "alice", "bob")

    assert count_rows("Customer", "WHERE login = 'alice'") == 1
    assert roles.resolve_role("alice") == "customer"
    assert roles.resolve_role("bob") == "customer"


def test_rename_validates_new_login(roles, manager_session, alice):
    with pytest.raises(ValidationError):
        roles.rename_login(manager_session, "alice", "a" * 51)


def test_customer_cannot_rename(roles, alice, bob, count_rows):
    with pytest.raises(PermissionDenied):
        roles.rename_login(alice, "bob", "robert")

    assert count_rows("Users", "WHERE login = 'bob'") == 1
