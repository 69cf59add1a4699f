# import database
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload
from typing import List
import logging

from library_management.create_engine import engine
from library_management.models.schema_models import BookSchema, UserSchema
from library_management.models.schemas import Base, Book, User
from uuid import UUID


class CreateData:
    @staticmethod
    async def create_table() -> None:
        """Create tables if not exists"""
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except IntegrityError as e:
            logging.warning(f"Table already exists or other integrity error: {e}")

    @staticmethod
    async def create_book_data(book: BookSchema, session: AsyncSession) -> bool:
        """Create a new book row

        Args:
            book (BookSchema): Book data to store
        """
        async with session:
            try:
                new_book = Book(
                    book_id=book.book_id,
                    name=book.name,
                    author=book.author,
                    description=book.description,
                    cost=book.cost,
                    year_edition=book.year_edition,
                    is_borrowed=book.is_borrowed,
                    devolution_date=book.devolution_date,
                    user_id=book.user.user_id if book.user is not None else None,
                )
                session.add(new_book)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to create book data: {e}")
                return False

    @staticmethod
    async def create_user_data(user: UserSchema, session: AsyncSession) -> bool:
        """Create a new user row

        Args:
            user (UserSchema): User data to store
        """
        async with session:
            try:
                new_user = User(
                    user_id=user.user_id,
                    username=user.username,
                    is_punished=user.is_punished,
                )
                session.add(new_user)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to create user data: {e}")
                return False


class ReadData:
    @staticmethod
    async def read_book_data(book_id: UUID, session: AsyncSession) -> BookSchema | None:
        """Read book data and the user holding it

        Args:
            book_id (UUID): To identify the book

        Returns:
            BookSchema: Book data with user data, None if the book does not exist
        """
        async with session:
            try:
                stmt = select(Book).where(Book.book_id == book_id).options(joinedload(Book.user))
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                return BookSchema.model_validate(result)
            except Exception as e:
                logging.error(f"Failed to read book data: {e}")
                return None

    @staticmethod
    async def read_all_book_data(session: AsyncSession) -> List[BookSchema]:
        """Read every book with the user holding it

        Returns:
            List[BookSchema]: All books, empty if reading failed
        """
        async with session:
            try:
                stmt = select(Book).options(joinedload(Book.user)).order_by(Book.book_id)
                result = await session.execute(stmt)
                result = result.scalars().all()
                return [BookSchema.model_validate(book) for book in result]
            except Exception as e:
                logging.error(f"Failed to read all book data: {e}")
                return []

    @staticmethod
    async def read_user_data(user_id: UUID, session: AsyncSession) -> UserSchema | None:
        """Read user data

        Args:
            user_id (UUID): To identify the user

        Returns:
            UserSchema: User data, None if the user does not exist
        """
        async with session:
            try:
                stmt = select(User).where(User.user_id == user_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                return UserSchema.model_validate(result)
            except Exception as e:
                logging.error(f"Failed to read user data: {e}")
                return None


class UpdateData:
    @staticmethod
    async def update_book_data(book: BookSchema, session: AsyncSession) -> bool:
        """Overwrite the stored book with the given snapshot

        Args:
            book (BookSchema): Updated book data

        Returns:
            bool: False if the book does not exist or the update failed
        """
        async with session:
            try:
                stmt = select(Book).where(Book.book_id == book.book_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return False

                result.name = book.name
                result.author = book.author
                result.description = book.description
                result.cost = book.cost
                result.year_edition = book.year_edition
                result.is_borrowed = book.is_borrowed
                result.devolution_date = book.devolution_date
                result.user_id = book.user.user_id if book.user is not None else None
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to update book data: {e}")
                return False

    @staticmethod
    async def update_book_data_no_commit(book: BookSchema, session: AsyncSession) -> bool:
        """Same as update_book_data, for use inside session.begin()"""
        stmt = select(Book).where(Book.book_id == book.book_id)
        result = await session.execute(stmt)
        result = result.scalars().first()

        if result is None:
            return False

        result.is_borrowed = book.is_borrowed
        result.devolution_date = book.devolution_date
        result.user_id = book.user.user_id if book.user is not None else None
        return True


class DeleteData:
    @staticmethod
    async def delete_book_data(book_id: UUID, session: AsyncSession) -> bool:
        """Delete the book row

        Args:
            book_id (UUID): To identify the book
        """
        async with session:
            try:
                stmt = select(Book).where(Book.book_id == book_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return False

                await session.delete(result)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to delete book data: {e}")
                return False
