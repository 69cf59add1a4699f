"""Lending, penalty and pricing rules that are independent from HTTP and DB.

Every function works on in-memory snapshots (BookSchema / UserSchema) handed
in by the caller. Functions that change a book return an updated copy; the
service layer decides what to persist.

Rule of thumb:
- OK: validation, date arithmetic, filtering, aggregation.
- Not OK: touching DB sessions, FastAPI, datetime.now()/date.today().
"""

from datetime import date, timedelta
from typing import Iterable, List

from library_management.domain.exceptions import (
    InvalidParametersError,
    LendingRuleError,
    NotFoundError,
)
from library_management.models.dc_models import BookModel
from library_management.models.schema_models import BookSchema, UserSchema

PENALTY_GRACE_MONTHS = 6
PENALTY_RATE_PER_MONTH = 0.1
DEPRECIATION_RATE_PER_YEAR = 0.01
LOAN_PERIOD_DAYS = 30

NO_BOOKS_FOUND = "Nenhum livro foi encontrado"
BOOK_WITHOUT_PRICE = "Livro cadastrado sem preço"
NO_PRICE_REGISTERED = "Nenhum preço cadastrado"
BORROWED_STATUS_MISSING = "Situação de empréstimo do livro não informada"
YEAR_EDITION_NOT_FOUND = "Ano de lançamento não encontrado"
YEAR_EDITION_AFTER_TODAY = "Ano de lançamento depois de hoje"
COST_NOT_FOUND = "Custo do livro não encontrado"
BOOK_ALREADY_BORROWED = "Livro já foi emprestado"
USER_NOT_ALLOWED = "O usuário não está autorizado para pegar novos livros"
NO_LOANS_FOR_USER = "Não há nenhum livro emprestado para esse usuário"
BOOK_NOT_BORROWED = "O livro está associado ao usuário, mas não está emprestado"
BOOK_WITHOUT_DEVOLUTION_DATE = "O livro está associado ao usuário, mas não tem data de devolução"
BOOK_WITHOUT_COST = "O livro não possui custo"


# ==============================================================================
# ==== Helpers =================================================================
# ==============================================================================


def same_user(first: UserSchema | None, second: UserSchema | None) -> bool:
    """Return True when both snapshots refer to the same user record."""
    if first is None or second is None:
        return False
    return first.user_id == second.user_id


def months_between(start: date, end: date) -> int:
    """Return the number of whole calendar months from start to end.

    Negative when end is before start. A month only counts once the day of
    month is reached again, e.g. 2025-01-31 -> 2025-02-28 is 0 months.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def _distinct_users(users: Iterable[UserSchema]) -> List[UserSchema]:
    result: List[UserSchema] = []
    seen = set()
    for user in users:
        if user.user_id in seen:
            continue
        seen.add(user.user_id)
        result.append(user)
    return result


def _require_books(books: List[BookSchema] | None) -> List[BookSchema]:
    if not books:
        raise LendingRuleError(NO_BOOKS_FOUND)
    return books


# ==============================================================================
# ==== Eligibility =============================================================
# ==============================================================================


def check_booking_possibility(user: UserSchema, book: BookSchema) -> bool:
    """Return whether the user may borrow the book right now.

    Raises:
        LendingRuleError: The book carries no borrowed flag at all.
    """
    if book.is_borrowed is None:
        raise LendingRuleError(BORROWED_STATUS_MISSING)
    return not user.is_punished and not book.is_borrowed


def verify_if_is_possible_to_buy_book_with_value(book: BookSchema, value: float) -> bool:
    """Return whether the given amount covers the book's cost."""
    if book.cost is None:
        raise LendingRuleError(COST_NOT_FOUND)
    return book.cost <= value


def lend_book_to_user(user: UserSchema, book: BookSchema, today: date) -> BookSchema:
    """Lend the book to the user and return the updated book.

    The devolution date is set LOAN_PERIOD_DAYS after today.

    Raises:
        LendingRuleError: The book has no borrowed flag, is already borrowed,
            or the user is punished.
    """
    if book.is_borrowed is None:
        raise LendingRuleError(BORROWED_STATUS_MISSING)
    if book.is_borrowed:
        raise LendingRuleError(BOOK_ALREADY_BORROWED)
    if user.is_punished:
        raise LendingRuleError(USER_NOT_ALLOWED)
    return book.model_copy(
        update={
            "is_borrowed": True,
            "user": user,
            "devolution_date": today + timedelta(days=LOAN_PERIOD_DAYS),
        }
    )


def remove_user_loans(user: UserSchema, books: List[BookSchema]) -> List[BookSchema]:
    """Detach every book lent to the user and return the updated books."""
    user_books = [book for book in books if same_user(book.user, user)]
    if not user_books:
        raise LendingRuleError(NO_LOANS_FOR_USER)
    return [
        book.model_copy(update={"user": None, "devolution_date": None, "is_borrowed": False})
        for book in user_books
    ]


# ==============================================================================
# ==== Pricing =================================================================
# ==============================================================================


def calculate_discount_based_on_percentage(book: BookSchema, percentage: float) -> float:
    """Return the amount taken off the book's cost by the given percentage."""
    if book.cost is None:
        raise LendingRuleError(COST_NOT_FOUND)
    return book.cost * percentage / 100


def get_number_of_years_released(book: BookSchema, today: date) -> int:
    """Return the calendar-year difference between the edition and today.

    Raises:
        LendingRuleError: The edition date is missing or lies in the future.
    """
    if book.year_edition is None:
        raise LendingRuleError(YEAR_EDITION_NOT_FOUND)
    if book.year_edition > today:
        raise LendingRuleError(YEAR_EDITION_AFTER_TODAY)
    return today.year - book.year_edition.year


def update_book_price_according_year_edition(book: BookSchema, today: date) -> BookSchema:
    """Depreciate the book's cost by DEPRECIATION_RATE_PER_YEAR per year since its edition."""
    if book.year_edition is None:
        raise LendingRuleError(YEAR_EDITION_NOT_FOUND)
    if book.cost is None:
        raise LendingRuleError(COST_NOT_FOUND)
    years = get_number_of_years_released(book, today)
    factor = max(0.0, 1 - DEPRECIATION_RATE_PER_YEAR * years)
    return book.model_copy(update={"cost": round(book.cost * factor, 2)})


def calculate_penalty_after_six_months(
    user: UserSchema, books: List[BookSchema], today: date
) -> float:
    """Return the penalty owed by a punished user for books kept too long.

    Each of the user's books adds cost * months_over_grace * PENALTY_RATE_PER_MONTH
    once more than PENALTY_GRACE_MONTHS whole months have passed since its
    devolution date. Users that are not punished owe nothing.

    Raises:
        LendingRuleError: One of the user's books is not borrowed, has no
            devolution date, or has no cost.
    """
    if not user.is_punished:
        return 0.0

    penalty = 0.0
    for book in books:
        if not same_user(book.user, user):
            continue
        if not book.is_borrowed:
            raise LendingRuleError(BOOK_NOT_BORROWED)
        if book.devolution_date is None:
            raise LendingRuleError(BOOK_WITHOUT_DEVOLUTION_DATE)
        if book.cost is None:
            raise LendingRuleError(BOOK_WITHOUT_COST)

        months_late = months_between(book.devolution_date, today)
        if months_late > PENALTY_GRACE_MONTHS:
            penalty += book.cost * (months_late - PENALTY_GRACE_MONTHS) * PENALTY_RATE_PER_MONTH
    return round(penalty, 2)


# ==============================================================================
# ==== Reports =================================================================
# ==============================================================================


def get_users_responsible_for_borrowed(books: List[BookSchema]) -> List[UserSchema]:
    return _distinct_users(
        book.user for book in books if book.is_borrowed is True and book.user is not None
    )


def count_number_of_borrowed_books(books: List[BookSchema] | None) -> int:
    books = _require_books(books)
    return sum(1 for book in books if book.is_borrowed is True)


def calculate_total_cost_of_books(books: List[BookSchema] | None) -> float:
    books = _require_books(books)
    if any(book.cost is None for book in books):
        raise LendingRuleError(BOOK_WITHOUT_PRICE)
    return sum(book.cost for book in books)


def get_max_books_cost(books: List[BookSchema] | None) -> float:
    books = _require_books(books)
    costs = [book.cost for book in books if book.cost is not None]
    if not costs or max(costs) == 0:
        raise LendingRuleError(NO_PRICE_REGISTERED)
    return max(costs)


def get_users_with_book_with_late_devolution_date(
    books: List[BookSchema], today: date
) -> List[UserSchema]:
    """Return the users holding a book whose devolution date has passed."""
    late_users = []
    for book in books:
        if book.devolution_date is None:
            continue
        if book.user is None:
            raise LendingRuleError(
                f"O livro {book.name} possui data de devolução mas não tem usuário relacionado."
            )
        if book.devolution_date < today:
            late_users.append(book.user)
    return _distinct_users(late_users)


def get_number_of_books_rented_by_user(books: List[BookSchema], user: UserSchema) -> int:
    count = 0
    for book in books:
        if book.user is None:
            raise LendingRuleError(f"O livro {book.name} não tem usuário relacionado")
        if same_user(book.user, user):
            count += 1
    return count


def get_books_same_author_and_name(
    books: List[BookSchema], name: str, author: str
) -> List[BookSchema]:
    return [book for book in books if book.name == name and book.author == author]


def get_books_same_name(books: List[BookSchema], name: str) -> List[BookSchema]:
    return [book for book in books if book.name == name]


def get_books_same_author(books: List[BookSchema], author: str) -> List[BookSchema]:
    return [book for book in books if book.author == author]


# ==============================================================================
# ==== Book payload validation =================================================
# ==============================================================================


def _has_name_and_author(book_model: BookModel) -> bool:
    return bool(book_model.name) and bool(book_model.author)


def validate_book_for_insert(book_model: BookModel) -> None:
    if not _has_name_and_author(book_model):
        raise NotFoundError()


def validate_book_for_update(book_model: BookModel) -> None:
    if not _has_name_and_author(book_model):
        raise InvalidParametersError()


def apply_book_update(book: BookSchema, book_model: BookModel) -> BookSchema:
    """Return the book with the fields sent in the payload applied.

    Fields left out of the payload keep their stored value.
    """
    validate_book_for_update(book_model)
    return book.model_copy(update=book_model.model_dump(exclude_unset=True))
