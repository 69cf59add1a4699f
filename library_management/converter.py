from typing import List

from uuid6 import uuid7

from library_management.models.dc_models import (
    BookModel,
    BookResponseModel,
    UserModel,
    UserNameModel,
)
from library_management.models.schema_models import BookSchema, UserSchema


class DataConverter:
    """This class is used to convert data between different formats."""

    def convert_bookmodel_to_bookschema(self, book_model: BookModel) -> BookSchema:
        """Convert the BookModel sent by the client to a new BookSchema

        A new book is never borrowed and has no user.

        Args:
            book_model (BookModel): Book data sent by the client

        Returns:
            BookSchema: Book snapshot with a fresh id
        """
        return BookSchema(
            book_id=uuid7(),
            name=book_model.name,
            author=book_model.author,
            description=book_model.description,
            cost=book_model.cost,
            year_edition=book_model.year_edition,
            is_borrowed=False,
            devolution_date=None,
            user=None,
        )

    def convert_bookschema_to_bookresponsemodel(self, book: BookSchema) -> BookResponseModel:
        """Convert the BookSchema to the BookResponseModel to send client

        Args:
            book (BookSchema): Book snapshot

        Returns:
            BookResponseModel: Book data for transmission to the client
        """
        return BookResponseModel(
            book_id=book.book_id,
            name=book.name,
            author=book.author,
            description=book.description,
            cost=book.cost,
            year_edition=book.year_edition,
            is_borrowed=book.is_borrowed,
            devolution_date=book.devolution_date,
            user=self.convert_userschema_to_usermodel(book.user) if book.user is not None else None,
        )

    def convert_bookschemas_to_bookresponsemodels(self, books: List[BookSchema]) -> List[BookResponseModel]:
        return [self.convert_bookschema_to_bookresponsemodel(book) for book in books]

    def convert_usernamemodel_to_userschema(self, user_name: UserNameModel) -> UserSchema:
        return UserSchema(user_id=uuid7(), username=user_name.username, is_punished=False)

    def convert_userschema_to_usermodel(self, user: UserSchema) -> UserModel:
        return UserModel(
            user_id=user.user_id,
            username=user.username,
            is_punished=user.is_punished,
        )

    def convert_userschemas_to_usermodels(self, users: List[UserSchema]) -> List[UserModel]:
        return [self.convert_userschema_to_usermodel(user) for user in users]
