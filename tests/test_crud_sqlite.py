# tests/test_crud_sqlite.py
from datetime import date
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from library_management import crud
from library_management.crud import CreateData, DeleteData, ReadData, UpdateData
from library_management.domain.exceptions import NotFoundError
from library_management.models.dc_models import BookModel, UserNameModel
from library_management.models.schema_models import BookSchema, UserSchema
from library_management.services import library_db

MISSING_ID = UUID("b5cf7620-d659-4b66-b7c7-25d45021ee99")


def make_session_factory(engine):
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=engine,
    )


@pytest_asyncio.fixture
async def sqlite_session(tmp_path, monkeypatch):
    """Point the CRUD layer and the service at a fresh SQLite file with tables created"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'library.sqlite3'}", echo=False)
    session_factory = make_session_factory(engine)
    monkeypatch.setattr(crud, "engine", engine)
    monkeypatch.setattr(library_db, "Session", session_factory)
    await CreateData.create_table()
    yield session_factory
    await engine.dispose()


@pytest.mark.asyncio
async def test_lend_and_return_round_trip(sqlite_session):
    user = await library_db.create_user(UserNameModel(username="Rafael"))
    assert user.is_punished is False
    assert await library_db.calculate_penalty_after_six_months(user.user_id) == 0.0
    book = await library_db.insert_book(
        BookModel(name="Livro", author="Rafael", cost=10.0, year_edition=date(2020, 1, 30))
    )

    await library_db.lend_book_to_user(user.user_id, book.book_id, today=date(2023, 2, 15))

    lent_book = await library_db.get_book_by_id(book.book_id)
    assert lent_book.is_borrowed is True
    assert lent_book.devolution_date == date(2023, 3, 17)
    assert lent_book.user == user
    assert await library_db.verify_if_book_is_borrowed(book.book_id) is True

    returned_books = await library_db.remove_user_loans(user.user_id)
    assert [b.book_id for b in returned_books] == [book.book_id]

    returned_book = await library_db.get_book_by_id(book.book_id)
    assert returned_book.user is None
    assert returned_book.devolution_date is None
    assert returned_book.is_borrowed is False

    await library_db.delete_book(book.book_id)

    with pytest.raises(NotFoundError):
        await library_db.get_book_by_id(book.book_id)


@pytest.mark.asyncio
async def test_update_book_data_stores_every_column(sqlite_session):
    user = await library_db.create_user(UserNameModel(username="Beatriz"))
    book = await library_db.insert_book(BookModel(name="Livro", author="Rafael"))
    snapshot = book.model_copy(
        update={
            "name": "Outro",
            "author": "Beatriz",
            "description": "Legal1",
            "cost": 12.5,
            "year_edition": date(2019, 5, 1),
            "is_borrowed": True,
            "devolution_date": date(2023, 3, 1),
            "user": user,
        }
    )

    assert await UpdateData.update_book_data(snapshot, sqlite_session()) is True

    assert await ReadData.read_book_data(book.book_id, sqlite_session()) == snapshot


@pytest.mark.asyncio
async def test_partial_update_keeps_stored_price(sqlite_session):
    book = await library_db.insert_book(
        BookModel(name="Livro", author="Rafael", cost=10.0, year_edition=date(2020, 1, 30))
    )

    await library_db.update_book(BookModel(name="Outro", author="Beatriz"), book.book_id)

    stored_book = await library_db.get_book_by_id(book.book_id)
    assert stored_book.name == "Outro"
    assert stored_book.cost == 10.0
    assert await library_db.total_cost_of_books() == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_price_update_is_persisted(sqlite_session):
    book = await library_db.insert_book(
        BookModel(name="Livro", author="Rafael", cost=10.0, year_edition=date(2020, 1, 30))
    )

    await library_db.update_book_price_according_year_edition(book.book_id, today=date(2023, 2, 15))

    assert (await library_db.get_book_by_id(book.book_id)).cost == pytest.approx(9.7)


@pytest.mark.asyncio
async def test_helpers_report_missing_rows(sqlite_session):
    assert await ReadData.read_book_data(MISSING_ID, sqlite_session()) is None
    assert await ReadData.read_user_data(MISSING_ID, sqlite_session()) is None
    assert await UpdateData.update_book_data(BookSchema(book_id=MISSING_ID), sqlite_session()) is False
    assert await DeleteData.delete_book_data(MISSING_ID, sqlite_session()) is False


@pytest.mark.asyncio
async def test_helpers_return_empty_results_on_database_errors(tmp_path):
    # no create_table: every query fails with "no such table"
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.sqlite3'}", echo=False)
    session_factory = make_session_factory(engine)
    try:
        assert await ReadData.read_all_book_data(session_factory()) == []
        assert await ReadData.read_book_data(MISSING_ID, session_factory()) is None
        assert await CreateData.create_book_data(BookSchema(name="Livro"), session_factory()) is False
        assert await CreateData.create_user_data(UserSchema(username="Rafael"), session_factory()) is False
    finally:
        await engine.dispose()
