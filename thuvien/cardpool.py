"""Pool of unused reader card numbers stored in a text file."""

from __future__ import annotations

import argparse
import os
import random
from collections import deque
from typing import Iterable, Optional, Sequence

MAX_CARDS = 10000
DEFAULT_UPPER = 99999
DEFAULT_PATH = os.path.join("txt", "MaTheDocGia.txt")


def read_card_numbers(path) -> list[int]:
    """Read up to MAX_CARDS integers; stop at the first token that is not one."""
    try:
        with open(path, encoding="utf-8") as fh:
            content = fh.read()
    except OSError:
        return []
    numbers: list[int] = []
    for token in content.split():
        if len(numbers) >= MAX_CARDS:
            break
        try:
            numbers.append(int(token))
        except ValueError:
            break
    return numbers


def write_card_numbers(numbers: Iterable[int], path) -> None:
    """Write one number per line."""
    with open(path, "w", encoding="utf-8") as fh:
        for number in numbers:
            fh.write(f"{number}\n")


class CardPool:
    """FIFO queue of free card numbers, capped at MAX_CARDS."""

    def __init__(self, numbers: Iterable[int] = ()):
        self._numbers = deque(numbers)

    def __len__(self) -> int:
        return len(self._numbers)

    def take(self) -> int:
        """Remove and return the next free card number."""
        if not self._numbers:
            raise LookupError("no card numbers left")
        return self._numbers.popleft()

    def release(self, number: int) -> None:
        """Return a card number to the end of the pool."""
        if len(self._numbers) >= MAX_CARDS:
            raise OverflowError("card number pool is full")
        self._numbers.append(number)

    def save(self, path) -> None:
        write_card_numbers(self._numbers, path)


def load_card_pool(path) -> CardPool:
    return CardPool(read_card_numbers(path))


def generate_card_numbers(
    count: int, upper: int = DEFAULT_UPPER, rng: Optional[random.Random] = None
) -> list[int]:
    """Return `count` distinct random numbers in 1..upper."""
    if count < 0 or count > upper:
        raise ValueError(f"cannot draw {count} distinct numbers from 1..{upper}")
    rng = rng or random.Random()
    values = list(range(1, upper + 1))
    for i in range(count):
        r = rng.randrange(i, upper)
        values[i], values[r] = values[r], values[i]
    return values[:count]


def write_random_card_file(path, count: int = MAX_CARDS) -> list[int]:
    """Fill a card file with `count` random distinct numbers and return them."""
    numbers = generate_card_numbers(count)
    write_card_numbers(numbers, path)
    return numbers


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate random reader card numbers.")
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH)
    parser.add_argument("-n", "--count", type=int, default=MAX_CARDS)
    args = parser.parse_args(argv)
    write_random_card_file(args.path, args.count)
    print(f"Da ghi {args.count} ma the doc gia ngau nhien!")
    return 0