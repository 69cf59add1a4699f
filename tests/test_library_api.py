# tests/test_library_api.py
from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from library_management.domain.exceptions import (
    InvalidParametersError,
    LendingRuleError,
    NotFoundError,
)
from library_management.main import app
from library_management.models.schema_models import BookSchema, UserSchema
from library_management.services import library_db

BOOK_ID = UUID("b5cf7620-d659-4b66-b7c7-25d45021ee62")
USER_ID = UUID("b5cf7620-d659-4b66-b7c7-25d45021ee63")


@pytest.fixture
def client():
    """TestClient without lifespan, so no tables are created"""
    return TestClient(app)


@pytest.fixture
def user():
    return UserSchema(user_id=USER_ID, username="Rafael")


@pytest.fixture
def book(user):
    return BookSchema(
        book_id=BOOK_ID,
        name="Livro",
        author="Rafael",
        cost=10.0,
        year_edition=date(2020, 1, 30),
        is_borrowed=True,
        devolution_date=date(2023, 3, 17),
        user=user,
    )


def test_get_book(client, book):
    with patch.object(library_db, "get_book_by_id", AsyncMock(return_value=book)):
        response = client.get(f"/books/{BOOK_ID}")

    assert response.status_code == 200
    body = response.json()
    assert body["book_id"] == str(BOOK_ID)
    assert body["devolution_date"] == "2023-03-17"
    assert body["user"]["username"] == "Rafael"


def test_get_book_not_found(client):
    with patch.object(library_db, "get_book_by_id", AsyncMock(side_effect=NotFoundError())):
        response = client.get(f"/books/{BOOK_ID}")

    assert response.status_code == 404
    assert response.json() == {"detail": "The object was not found"}


def test_search_books_is_not_parsed_as_id(client, book):
    search = AsyncMock(return_value=[book])
    with patch.object(library_db, "search_books", search):
        response = client.get("/books/search", params={"name": "Livro"})

    assert response.status_code == 200
    assert len(response.json()) == 1
    search.assert_awaited_once_with(name="Livro", author=None)


def test_insert_book(client, book):
    insert = AsyncMock(return_value=book)
    with patch.object(library_db, "insert_book", insert):
        response = client.post("/books", json={"name": "Livro", "author": "Rafael", "cost": 10.0})

    assert response.status_code == 201
    assert insert.await_args.args[0].name == "Livro"


def test_update_book_wrong_parameters(client):
    with patch.object(library_db, "update_book", AsyncMock(side_effect=InvalidParametersError())):
        response = client.put(f"/books/{BOOK_ID}", json={"name": "", "author": ""})

    assert response.status_code == 422
    assert response.json() == {"detail": "The parameters are wrong"}


def test_delete_book(client):
    delete = AsyncMock(return_value=None)
    with patch.object(library_db, "delete_book", delete):
        response = client.delete(f"/books/{BOOK_ID}")

    assert response.status_code == 204
    delete.assert_awaited_once_with(BOOK_ID)


def test_lend_book_rejected(client):
    error = LendingRuleError("Livro já foi emprestado")
    with patch.object(library_db, "lend_book_to_user", AsyncMock(side_effect=error)):
        response = client.post(f"/books/{BOOK_ID}/lend/{USER_ID}")

    assert response.status_code == 400
    assert response.json() == {"detail": "Livro já foi emprestado"}


def test_affordable_requires_value(client):
    response = client.get(f"/books/{BOOK_ID}/affordable")

    assert response.status_code == 422


def test_affordable(client):
    with patch.object(library_db, "verify_if_is_possible_to_buy_book_with_value", AsyncMock(return_value=True)):
        response = client.get(f"/books/{BOOK_ID}/affordable", params={"value": 10.0})

    assert response.json() == {"book_id": str(BOOK_ID), "result": True}


def test_get_penalty(client):
    with patch.object(library_db, "calculate_penalty_after_six_months", AsyncMock(return_value=20.0)):
        response = client.get(f"/users/{USER_ID}/penalty")

    assert response.json() == {"user_id": str(USER_ID), "penalty": 20.0}


def test_create_user(client, user):
    with patch.object(library_db, "create_user", AsyncMock(return_value=user)):
        response = client.post("/users", json={"username": "Rafael"})

    assert response.status_code == 201
    assert response.json() == {"user_id": str(USER_ID), "username": "Rafael", "is_punished": False}


def test_overdue_users(client, user):
    with patch.object(library_db, "users_with_late_devolution", AsyncMock(return_value=[user])):
        response = client.get("/reports/overdue-users")

    assert [u["username"] for u in response.json()] == ["Rafael"]


def test_borrowed_count_empty_library(client):
    error = LendingRuleError("Nenhum livro foi encontrado")
    with patch.object(library_db, "count_borrowed_books", AsyncMock(side_effect=error)):
        response = client.get("/reports/borrowed-count")

    assert response.status_code == 400
    assert response.json() == {"detail": "Nenhum livro foi encontrado"}


def test_total_cost(client):
    with patch.object(library_db, "total_cost_of_books", AsyncMock(return_value=20.5)):
        response = client.get("/reports/total-cost")

    assert response.json() == {"cost": 20.5}
