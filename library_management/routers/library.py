import logging
from typing import List

from uuid import UUID

from fastapi import APIRouter, Query, status

from library_management.converter import DataConverter
from library_management.models.dc_models import (
    AvailabilityModel,
    BookModel,
    BookResponseModel,
    CostModel,
    CountModel,
    PenaltyModel,
    UserModel,
    UserNameModel,
)
from library_management.services import library_db

library_router = APIRouter()
data_converter = DataConverter()


class BookAPI:
    # /books/search is registered before /books/{book_id} so it is not parsed as an id.
    @staticmethod
    @library_router.get("/books/search", response_model=List[BookResponseModel])
    async def search_books(name: str | None = None, author: str | None = None):
        books = await library_db.search_books(name=name, author=author)
        return data_converter.convert_bookschemas_to_bookresponsemodels(books)

    @staticmethod
    @library_router.get("/books", response_model=List[BookResponseModel])
    async def get_books():
        books = await library_db.get_books()
        return data_converter.convert_bookschemas_to_bookresponsemodels(books)

    @staticmethod
    @library_router.get("/books/{book_id}", response_model=BookResponseModel)
    async def get_book(book_id: UUID):
        book = await library_db.get_book_by_id(book_id)
        return data_converter.convert_bookschema_to_bookresponsemodel(book)

    @staticmethod
    @library_router.post("/books", response_model=BookResponseModel, status_code=status.HTTP_201_CREATED)
    async def insert_book(book: BookModel):
        logging.info(f"insert book: {book}")
        created_book = await library_db.insert_book(book)
        return data_converter.convert_bookschema_to_bookresponsemodel(created_book)

    @staticmethod
    @library_router.put("/books/{book_id}", response_model=BookResponseModel)
    async def update_book(book_id: UUID, book: BookModel):
        updated_book = await library_db.update_book(book, book_id)
        return data_converter.convert_bookschema_to_bookresponsemodel(updated_book)

    @staticmethod
    @library_router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_book(book_id: UUID):
        await library_db.delete_book(book_id)

    @staticmethod
    @library_router.get("/books/{book_id}/borrowed", response_model=AvailabilityModel)
    async def is_borrowed(book_id: UUID):
        result = await library_db.verify_if_book_is_borrowed(book_id)
        return AvailabilityModel(book_id=book_id, result=result)

    @staticmethod
    @library_router.get("/books/{book_id}/affordable", response_model=AvailabilityModel)
    async def is_affordable(book_id: UUID, value: float = Query(..., ge=0)):
        result = await library_db.verify_if_is_possible_to_buy_book_with_value(book_id, value)
        return AvailabilityModel(book_id=book_id, result=result)

    @staticmethod
    @library_router.put("/books/{book_id}/price", response_model=BookResponseModel)
    async def update_price(book_id: UUID):
        book = await library_db.update_book_price_according_year_edition(book_id)
        return data_converter.convert_bookschema_to_bookresponsemodel(book)


class LoanAPI:
    @staticmethod
    @library_router.post("/books/{book_id}/lend/{user_id}", response_model=BookResponseModel)
    async def lend_book(book_id: UUID, user_id: UUID):
        book = await library_db.lend_book_to_user(user_id, book_id)
        return data_converter.convert_bookschema_to_bookresponsemodel(book)

    @staticmethod
    @library_router.delete("/users/{user_id}/loans", response_model=List[BookResponseModel])
    async def remove_loans(user_id: UUID):
        books = await library_db.remove_user_loans(user_id)
        return data_converter.convert_bookschemas_to_bookresponsemodels(books)

    @staticmethod
    @library_router.get("/users/{user_id}/penalty", response_model=PenaltyModel)
    async def get_penalty(user_id: UUID):
        penalty = await library_db.calculate_penalty_after_six_months(user_id)
        return PenaltyModel(user_id=user_id, penalty=penalty)


class UserAPI:
    @staticmethod
    @library_router.post("/users", response_model=UserModel, status_code=status.HTTP_201_CREATED)
    async def create_user(user_name: UserNameModel):
        user = await library_db.create_user(user_name)
        return data_converter.convert_userschema_to_usermodel(user)

    @staticmethod
    @library_router.get("/users/{user_id}", response_model=UserModel)
    async def get_user(user_id: UUID):
        user = await library_db.get_user_by_id(user_id)
        return data_converter.convert_userschema_to_usermodel(user)


class ReportAPI:
    @staticmethod
    @library_router.get("/reports/borrowed-count", response_model=CountModel)
    async def borrowed_count():
        return CountModel(count=await library_db.count_borrowed_books())

    @staticmethod
    @library_router.get("/reports/total-cost", response_model=CostModel)
    async def total_cost():
        return CostModel(cost=await library_db.total_cost_of_books())

    @staticmethod
    @library_router.get("/reports/max-cost", response_model=CostModel)
    async def max_cost():
        return CostModel(cost=await library_db.max_books_cost())

    @staticmethod
    @library_router.get("/reports/borrowers", response_model=List[UserModel])
    async def borrowers():
        users = await library_db.users_responsible_for_borrowed()
        return data_converter.convert_userschemas_to_usermodels(users)

    @staticmethod
    @library_router.get("/reports/overdue-users", response_model=List[UserModel])
    async def overdue_users():
        users = await library_db.users_with_late_devolution()
        return data_converter.convert_userschemas_to_usermodels(users)

    @staticmethod
    @library_router.get("/reports/users/{user_id}/book-count", response_model=CountModel)
    async def user_book_count(user_id: UUID):
        return CountModel(count=await library_db.number_of_books_rented_by_user(user_id))
