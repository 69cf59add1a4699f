from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field
from uuid6 import uuid7


class UserSchema(BaseModel):
    user_id: UUID = Field(default_factory=uuid7)
    username: str | None = None
    is_punished: bool = False

    class Config:
        from_attributes = True


class BookSchema(BaseModel):
    book_id: UUID = Field(default_factory=uuid7)
    name: str | None = None
    author: str | None = None
    description: str | None = None
    cost: float | None = None
    year_edition: date | None = None
    is_borrowed: bool | None = None
    devolution_date: date | None = None
    user: Optional[UserSchema] = None

    class Config:
        from_attributes = True
