"""Data records for readers, loans and books."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_TITLES = 10000
ACTIVE = 1
LOCKED = 0


@dataclass
class Date:
    day: int
    month: int
    year: int


@dataclass
class Loan:
    book_id: int
    borrowed: Date
    returned: Date
    status: int


@dataclass
class Reader:
    card: int
    last_name: str
    first_name: str
    gender: str
    status: int = ACTIVE
    loans: list[Loan] = field(default_factory=list)

    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name}"

    def is_active(self) -> bool:
        return self.status == ACTIVE

    def has_loans(self) -> bool:
        return bool(self.loans)


@dataclass
class Book:
    book_id: int
    status: int
    location: str


@dataclass
class BookTitle:
    isbn: str
    title: str
    pages: int
    author: str
    year: int
    category: str
    copies: list[Book] = field(default_factory=list)
    borrowed_count: int = 0