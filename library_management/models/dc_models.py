from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserNameModel(BaseModel):
    username: str


class UserModel(BaseModel):
    user_id: UUID
    username: str | None
    is_punished: bool

    class Config:
        from_attributes = True


class BookModel(BaseModel):
    """Book data exchanged with the client (no loan bookkeeping)."""
    name: str | None = None
    author: str | None = None
    description: str | None = None
    cost: float | None = None
    year_edition: date | None = None


class BookResponseModel(BookModel):
    book_id: UUID
    is_borrowed: bool | None = None
    devolution_date: date | None = None
    user: Optional[UserModel] = None

    class Config:
        from_attributes = True


class CountModel(BaseModel):
    count: int


class CostModel(BaseModel):
    cost: float


class PenaltyModel(BaseModel):
    user_id: UUID
    penalty: float


class AvailabilityModel(BaseModel):
    book_id: UUID
    result: bool
