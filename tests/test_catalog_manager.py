from decimal import Decimal

import pytest

from catalog_manager import CatalogManager, parse_price
from errors import ConstraintViolation, NotFound, PermissionDenied, ValidationError
from order_manager import OrderManager


@pytest.fixture
def games(db):
    return CatalogManager(db)


def test_list_games(games, catalog):
    assert [game['gameID'] for game in games.list_games()] == ["G0", "G1", "G2", "G3"]


def test_games_by_genre(games, catalog):
    assert [game['gameID'] for game in games.games_by_genre("strategy")] == ["G1", "G3"]
    assert games.games_by_genre("horror") == []


def test_games_under_price_sorted(games, catalog):
    ascending = games.games_under_price("10")
    descending = games.games_under_price("10", descending=True)

    assert [game['gameID'] for game in ascending] == ["G0", "G2", "G1"]
    assert [game['gameID'] for game in descending] == ["G1", "G2", "G0"]


def test_games_under_price_rejects_text(games, catalog):
    with pytest.raises(ValidationError):
        games.games_under_price("cheap")


def test_parse_price():
    assert parse_price("9.999") == Decimal("10.00")
    assert parse_price(" 4.5 ") == Decimal("4.50")
    for bad in ("-1", "abc", "NaN", "Infinity", "1e30"):
        with pytest.raises(ValidationError):
            parse_price(bad)


def test_manager_adds_game(games, manager_session):
    game = games.add_game(manager_session, "G9", "Puzzle Box", "puzzle", "12.5", "Boxes", "http://img/g9.png")

    assert game['gameName'] == "Puzzle Box"
    assert game['price'] == 12.5


def test_add_duplicate_game(games, manager_session, catalog):
    with pytest.raises(ConstraintViolation):
        games.add_game(manager_session, "G1", "Copy", "strategy", "1", "", "")


def test_customer_cannot_add_game(games, alice, count_rows):
    with pytest.raises(PermissionDenied):
        games.add_game(alice, "G9", "Puzzle Box", "puzzle", "12.5", "", "")

    assert count_rows("Catalog") == 0


def test_refused_change_is_only_recorded_in_audit_log(games, alice, catalog, count_rows):
    before = count_rows("audit_logs")

    with pytest.raises(PermissionDenied):
        games.remove_game(alice, "G1")

    assert count_rows("Catalog") == 4
    assert count_rows("audit_logs") == before + 1
    assert count_rows("audit_logs", "WHERE event_type = 'permission_check' AND success = 0") == 1


def test_manager_updates_game(games, manager_session, catalog):
    games.update_game(manager_session, "G2", "Space Race 2", "racing", "5.25", "Faster", "http://img/g2b.png")

    game = games.get_game("G2")
    assert game['gameName'] == "Space Race 2"
    assert game['price'] == 5.25
    assert game['imageURL'] == "http://img/g2b.png"


def test_update_missing_game(games, manager_session):
    with pytest.raises(NotFound):
        games.update_game(manager_session, "G404", "x", "y", "1", "", "")


def test_update_rejects_negative_price(games, manager_session, catalog):
    with pytest.raises(ValidationError):
        games.update_game(manager_session, "G1", "Chess Master", "strategy", "-2", "", "")

    assert games.get_game("G1")['price'] == 9.99


def test_customer_cannot_update_game(games, alice, catalog):
    with pytest.raises(PermissionDenied):
        games.update_game(alice, "G1", "Hacked", "strategy", "0.01", "", "")

    assert games.get_game("G1")['gameName'] == "Chess Master"


def test_manager_removes_game(games, manager_session, catalog):
    games.remove_game(manager_session, "G2")

    with pytest.raises(NotFound):
        games.get_game("G2")


def test_remove_missing_game(games, manager_session):
    with pytest.raises(NotFound):
        games.remove_game(manager_session, "G404")


def test_remove_ordered_game_is_refused(db, games, manager_session, alice, catalog):
    OrderManager(db).place_order(alice, "G1", 1)

    with pytest.raises(ConstraintViolation):
        games.remove_game(manager_session, "G1")

    assert games.get_game("G1")['gameID'] == "G1"


def test_customer_cannot_remove_game(games, alice, catalog, count_rows):
    with pytest.raises(PermissionDenied):
        games.remove_game(alice, "G1")

    assert count_rows("Catalog") == 4
