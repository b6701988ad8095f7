"""Reader records kept in a binary search tree keyed by card number."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from thuvien.cardpool import MAX_CARDS
from thuvien.models import Reader

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ReaderHasLoans(Exception):
    """Raised when deleting a reader who still has borrowed books."""

    def __init__(self, card: int):
        super().__init__(f"reader {card} still has borrowed books")
        self.card = card


@dataclass
class _Node:
    reader: Reader
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None


def _build(readers: list[Reader], lo: int, hi: int) -> Optional[_Node]:
    """Build a balanced tree from readers[lo..hi], already sorted by card."""
    if lo > hi:
        return None
    mid = (lo + hi) // 2
    return _Node(readers[mid], _build(readers, lo, mid - 1), _build(readers, mid + 1, hi))


def _detach_min(node: _Node) -> tuple[Optional[_Node], Reader]:
    """Remove the smallest node of a subtree; return the new subtree and its reader."""
    if node.left is None:
        return node.right, node.reader
    node.left, reader = _detach_min(node.left)
    return node, reader


def _delete(node: Optional[_Node], card: int) -> Optional[_Node]:
    if node is None:
        raise KeyError(card)
    if card < node.reader.card:
        node.left = _delete(node.left, card)
        return node
    if card > node.reader.card:
        node.right = _delete(node.right, card)
        return node
    if node.reader.has_loans():
        raise ReaderHasLoans(card)
    if node.left is None:
        return node.right
    if node.right is None:
        return node.left
    node.right, node.reader = _detach_min(node.right)
    return node


class ReaderTree:
    """Readers indexed by card number; iteration yields them in card order."""

    def __init__(self, readers: Iterable[Reader] = ()):
        self._rebuild(list(readers))

    def _rebuild(self, readers: list[Reader]) -> None:
        readers.sort(key=lambda r: r.card)
        self._root = _build(readers, 0, len(readers) - 1)
        self._size = len(readers)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Reader]:
        stack: list[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.reader
            node = node.right

    def search(self, card: int) -> Optional[Reader]:
        """Return the reader with this card number, or None."""
        node = self._root
        while node is not None and node.reader.card != card:
            node = node.left if card < node.reader.card else node.right
        return node.reader if node is not None else None

    def add(self, reader: Reader) -> None:
        """Insert a reader and rebalance the whole tree."""
        readers = list(self)
        readers.append(reader)
        self._rebuild(readers)

    def delete(self, card: int) -> Reader:
        """Remove and return the reader with this card.

        Raises KeyError if there is none and ReaderHasLoans if the reader
        still has books out.
        """
        reader = self.search(card)
        if reader is None:
            raise KeyError(card)
        self._root = _delete(self._root, card)
        self._size -= 1
        return reader

    def by_name(self) -> list[Reader]:
        """Readers ordered by first name, then last name."""
        return sorted(self, key=name_sort_key)


def name_sort_key(reader: Reader) -> tuple[str, str]:
    return reader.first_name, reader.last_name


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def load_readers(path) -> ReaderTree:
    """Read reader records (card, last name, first name, gender, status, blank line)."""
    readers: list[Reader] = []
    with open(path, encoding="utf-8") as fh:
        lines = (line.rstrip("\n") for line in fh)
        while len(readers) < MAX_CARDS:
            line = next(lines, None)
            if line is None:
                break
            if not line:
                continue
            card = _leading_int(line)
            if card is None:
                continue
            last_name = next(lines, None)
            first_name = next(lines, None) if last_name is not None else None
            gender = next(lines, None) if first_name is not None else None
            status_line = next(lines, None) if gender is not None else None
            if status_line is None:
                break
            status = _leading_int(status_line)
            if status is None:
                continue
            next(lines, None)
            readers.append(Reader(card, last_name, first_name, gender, status))
    return ReaderTree(readers)


def save_readers(tree: ReaderTree, path) -> None:
    """Write every reader in card order, each record followed by a blank line."""
    with open(path, "w", encoding="utf-8") as fh:
        for reader in tree:
            fh.write(
                f"{reader.card}\n{reader.last_name}\n{reader.first_name}\n"
                f"{reader.gender}\n{reader.status}\n\n"
            )