"""DB service layer for library use cases.

- Routers should not touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries.
- Decisions are delegated to domain.lending_rules; this module loads the
  snapshots the rules need and persists what they return.
- Use CRUD helpers that do NOT commit inside session.begin().
"""

import logging
from datetime import date
from typing import List
from uuid import UUID

from library_management.converter import DataConverter
from library_management.crud import CreateData, DeleteData, ReadData, UpdateData
from library_management.db import Session
from library_management.domain import lending_rules
from library_management.domain.exceptions import NotFoundError
from library_management.models.dc_models import BookModel, UserNameModel
from library_management.models.schema_models import BookSchema, UserSchema

data_converter = DataConverter()


async def read_book_data(book_id: UUID) -> BookSchema | None:
    async with Session() as session:
        return await ReadData.read_book_data(book_id, session)


async def read_all_book_data() -> List[BookSchema]:
    async with Session() as session:
        return await ReadData.read_all_book_data(session)


async def read_user_data(user_id: UUID) -> UserSchema | None:
    async with Session() as session:
        return await ReadData.read_user_data(user_id, session)


async def save_book_data(book: BookSchema) -> None:
    async with Session() as session:
        success = await UpdateData.update_book_data(book, session)
        if not success:
            raise RuntimeError("Failed to update book data")


async def _require_book(book_id: UUID) -> BookSchema:
    book = await read_book_data(book_id)
    if book is None:
        logging.info(f"Book not found: {book_id}")
        raise NotFoundError()
    return book


async def _require_user(user_id: UUID) -> UserSchema:
    user = await read_user_data(user_id)
    if user is None:
        logging.info(f"User not found: {user_id}")
        raise NotFoundError()
    return user


# ==============================================================================
# ==== Books ===================================================================
# ==============================================================================


async def get_books() -> List[BookSchema]:
    return await read_all_book_data()


async def get_book_by_id(book_id: UUID) -> BookSchema:
    return await _require_book(book_id)


async def insert_book(book_model: BookModel) -> BookSchema:
    lending_rules.validate_book_for_insert(book_model)
    book = data_converter.convert_bookmodel_to_bookschema(book_model)
    async with Session() as session:
        success = await CreateData.create_book_data(book, session)
        if not success:
            raise RuntimeError("Failed to create book data")
    logging.info(f"Book created: {book.book_id}")
    return book


async def update_book(book_model: BookModel, book_id: UUID) -> BookSchema:
    lending_rules.validate_book_for_update(book_model)
    book = await _require_book(book_id)
    updated_book = lending_rules.apply_book_update(book, book_model)
    await save_book_data(updated_book)
    return updated_book


async def delete_book(book_id: UUID) -> None:
    await _require_book(book_id)
    async with Session() as session:
        success = await DeleteData.delete_book_data(book_id, session)
        if not success:
            raise RuntimeError("Failed to delete book data")
    logging.info(f"Book deleted: {book_id}")


async def verify_if_book_is_borrowed(book_id: UUID) -> bool:
    book = await _require_book(book_id)
    return book.is_borrowed is True


async def verify_if_is_possible_to_buy_book_with_value(book_id: UUID, value: float) -> bool:
    book = await _require_book(book_id)
    return lending_rules.verify_if_is_possible_to_buy_book_with_value(book, value)


async def update_book_price_according_year_edition(book_id: UUID, today: date | None = None) -> BookSchema:
    book = await _require_book(book_id)
    updated_book = lending_rules.update_book_price_according_year_edition(book, today or date.today())
    await save_book_data(updated_book)
    logging.info(f"Book price updated: {book_id} {book.cost} -> {updated_book.cost}")
    return updated_book


async def search_books(name: str | None = None, author: str | None = None) -> List[BookSchema]:
    books = await read_all_book_data()
    if name is not None and author is not None:
        return lending_rules.get_books_same_author_and_name(books, name, author)
    if name is not None:
        return lending_rules.get_books_same_name(books, name)
    if author is not None:
        return lending_rules.get_books_same_author(books, author)
    return books


# ==============================================================================
# ==== Loans ===================================================================
# ==============================================================================


async def lend_book_to_user(user_id: UUID, book_id: UUID, today: date | None = None) -> BookSchema:
    book = await _require_book(book_id)
    user = await _require_user(user_id)
    lent_book = lending_rules.lend_book_to_user(user, book, today or date.today())
    await save_book_data(lent_book)
    logging.info(f"Book {book_id} lent to user {user_id} until {lent_book.devolution_date}")
    return lent_book


async def remove_user_loans(user_id: UUID) -> List[BookSchema]:
    """Detach every book from the user in one transaction.

    NOTE: Do not call CRUD helpers that commit() inside this transaction.
    """
    user = await _require_user(user_id)
    books = await read_all_book_data()
    returned_books = lending_rules.remove_user_loans(user, books)

    async with Session() as session:
        async with session.begin():
            for book in returned_books:
                success = await UpdateData.update_book_data_no_commit(book, session)
                if not success:
                    raise RuntimeError(f"Failed to update book data: {book.book_id}")
    logging.info(f"Removed {len(returned_books)} loan(s) from user {user_id}")
    return returned_books


async def calculate_penalty_after_six_months(user_id: UUID, today: date | None = None) -> float:
    user = await _require_user(user_id)
    if not user.is_punished:
        return 0.0
    books = await read_all_book_data()
    return lending_rules.calculate_penalty_after_six_months(user, books, today or date.today())


# ==============================================================================
# ==== Users ===================================================================
# ==============================================================================


async def create_user(user_name: UserNameModel) -> UserSchema:
    user = data_converter.convert_usernamemodel_to_userschema(user_name)
    async with Session() as session:
        success = await CreateData.create_user_data(user, session)
        if not success:
            raise RuntimeError("Failed to create user data")
    return user


async def get_user_by_id(user_id: UUID) -> UserSchema:
    return await _require_user(user_id)


# ==============================================================================
# ==== Reports =================================================================
# ==============================================================================


async def count_borrowed_books() -> int:
    return lending_rules.count_number_of_borrowed_books(await read_all_book_data())


async def total_cost_of_books() -> float:
    return lending_rules.calculate_total_cost_of_books(await read_all_book_data())


async def max_books_cost() -> float:
    return lending_rules.get_max_books_cost(await read_all_book_data())


async def users_responsible_for_borrowed() -> List[UserSchema]:
    return lending_rules.get_users_responsible_for_borrowed(await read_all_book_data())


async def users_with_late_devolution(today: date | None = None) -> List[UserSchema]:
    books = await read_all_book_data()
    return lending_rules.get_users_with_book_with_late_devolution_date(books, today or date.today())


async def number_of_books_rented_by_user(user_id: UUID) -> int:
    user = await _require_user(user_id)
    lent_books = [book for book in await read_all_book_data() if book.user is not None]
    return lending_rules.get_number_of_books_rented_by_user(lent_books, user)
