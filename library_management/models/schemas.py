from sqlalchemy import ForeignKey
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column
from sqlalchemy.types import Boolean, Date, Float, String, Uuid
from uuid6 import uuid7


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    user_id = Column(Uuid, primary_key=True, default=uuid7)
    username = Column(String)
    is_punished = Column(Boolean, default=False, nullable=False)

    books = relationship(
        "Book",
        back_populates="user",
    )


class Book(Base):
    __tablename__ = "books"
    book_id = Column(Uuid, primary_key=True, default=uuid7)
    name = Column(String)
    author = Column(String)
    description = Column(String)
    cost = Column(Float, nullable=True)
    year_edition = Column(Date, nullable=True)
    is_borrowed = Column(Boolean, nullable=True)
    devolution_date = Column(Date, nullable=True)
    user_id = Column(Uuid, ForeignKey("users.user_id"), nullable=True)

    user = relationship(
        "User",
        back_populates="books",
        uselist=False,
    )
