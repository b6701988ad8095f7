"""Menus and screens of the library reader-card manager."""

from __future__ import annotations

import argparse
import os
from typing import Iterable, Iterator, Optional, Sequence

from thuvien.cardpool import load_card_pool
from thuvien.console import KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_UP, Console, read_key
from thuvien.models import Reader
from thuvien.readers import ReaderHasLoans, ReaderTree, load_readers, save_readers
from thuvien.text import ENTER, ESC, InputCancelled, is_valid_gender, normalize_name, read_name, read_number

ITEMS_PER_PAGE = 15
INT_MAX = 2**31 - 1
DEFAULT_DATA_DIR = "txt"
READERS_FILE = "DanhSachDocGia.txt"
CARDS_FILE = "MaTheDocGia.txt"

MAIN_TITLE = "=== CHUONG TRINH QUAN LY THU VIEN ==="
MAIN_MENU = (
    "Quan ly the doc gia",
    "Quan ly dau sach",
    "Muon sach",
    "Tra sach",
    "Cac sach doc gia dang muon",
    "Thong ke top 10 sach",
    "Thoat",
)
READER_TITLE = "=== QUAN LY THE DOC GIA ==="
READER_MENU = (
    "1. Them the doc gia",
    "2. Sua thong tin doc gia",
    "3. Xoa the doc gia",
    "4. In danh sach doc gia",
    "5. Quay lai",
)
LIST_TITLE = "=== IN DANH SACH DOC GIA ==="
LIST_MENU = (
    "1. In DS theo ten/ho tang dan",
    "2. In DS theo ma the tang dan",
    "3. Quay lai",
)
NOT_READY = "Chuc nang nay chua lam!"
PAGING_HINT = "Nhan phim mui ten [<-] [->] de chuyen trang, [ESC] de thoat."
DELETE_PROMPT = "Nhap ma the can xoa: "

_COLUMN_WIDTHS = (6, 10, 30, 12, 15)
_STATUS_TEXT = {True: "Hoat dong", False: "Bi khoa"}


def page_count(total: int, per_page: int = ITEMS_PER_PAGE) -> int:
    """Number of pages needed for `total` rows; an empty list still has one page."""
    if total <= 0:
        return 1
    return (total - 1) // per_page + 1


def _row(cells: Sequence[object]) -> str:
    parts = (f" {str(cell):<{width - 1}}" for cell, width in zip(cells, _COLUMN_WIDTHS))
    return "│" + "│".join(parts) + "│"


def format_reader_row(number: int, reader: Reader) -> str:
    """One table row: ordinal, card, full name, gender, status."""
    status = _STATUS_TEXT[reader.is_active()]
    return _row((number, reader.card, reader.full_name(), reader.gender, status))


def _table_line(left: str, joint: str, right: str) -> str:
    return left + joint.join("─" * width for width in _COLUMN_WIDTHS) + right


def _live_keys() -> Iterator[str]:
    while True:
        yield read_key()


class App:
    """Interactive reader-card management driven by a stream of key presses."""

    def __init__(
        self,
        console: Optional[Console] = None,
        keys: Optional[Iterable[str]] = None,
        data_dir=DEFAULT_DATA_DIR,
    ):
        self.console = console if console is not None else Console()
        self._keys: Iterator[str] = iter(keys) if keys is not None else _live_keys()
        self.readers_path = os.path.join(data_dir, READERS_FILE)
        self.cards_path = os.path.join(data_dir, CARDS_FILE)
        try:
            self.tree = load_readers(self.readers_path)
        except OSError:
            self.tree = ReaderTree()
            self.console.notify("Khong the mo file danh sach doc gia!")

    # -- input helpers -------------------------------------------------

    def _next_key(self) -> str:
        try:
            return next(self._keys)
        except StopIteration:
            raise EOFError("no more key presses") from None

    def _confirm(self) -> bool:
        """Read a single answer character, then discard the rest of the line."""
        answer = self._next_key()
        while answer in (" ", "\t", ENTER):
            answer = self._next_key()
        self.console.write(answer)
        while self._next_key() != ENTER:
            pass
        return answer in ("y", "Y")

    def _select(self, items: Sequence[str], current: int) -> int:
        con = self.console
        while True:
            con.show_cursor(False)
            for i, item in enumerate(items):
                if i == current:
                    con.set_color(0)
                    con.set_background(11)
                else:
                    con.set_color(15)
                    con.set_background(0)
                con.box_double(35, 5 + i * 3, item, 30)
                con.set_color(15)
                con.set_background(0)
            key = self._next_key()
            if key == KEY_UP:
                current = (current - 1) % len(items)
            elif key == KEY_DOWN:
                current = (current + 1) % len(items)
            elif key == ENTER:
                return current

    def _title(self, text: str, x: int = 35) -> None:
        con = self.console
        con.clear()
        con.set_color(14)
        con.goto(x, 2)
        con.write(text)
        con.set_color(7)

    def _not_ready(self) -> None:
        self.console.goto(35, 8)
        self.console.write(NOT_READY)
        self._next_key()

    # -- reader table --------------------------------------------------

    def _draw_table_frame(self, title: str) -> None:
        con = self.console
        con.clear()
        con.set_color(14)
        con.box_double(40, 1, title, 25)
        con.set_color(7)
        con.goto(4, 3)
        con.write(_table_line("┌", "┬", "┐"))
        con.goto(4, 4)
        con.write(_row(("STT", "Ma The", "Ho va Ten", "Gioi Tinh", "Trang Thai")))
        con.goto(4, 5)
        con.write(_table_line("├", "┼", "┤"))

    def _show_page(self, rows: Sequence[Reader], page: int, pages: int) -> None:
        con = self.console
        for i in range(ITEMS_PER_PAGE + 2):
            con.goto(4, 6 + i)
            con.clear_to_eol()
        start = page * ITEMS_PER_PAGE
        chunk = rows[start:start + ITEMS_PER_PAGE]
        for offset, reader in enumerate(chunk):
            con.goto(4, 6 + offset)
            con.write(format_reader_row(start + offset + 1, reader))
        con.goto(4, 6 + len(chunk))
        con.write(_table_line("└", "┴", "┘"))
        con.goto(35, 7 + ITEMS_PER_PAGE)
        con.clear_to_eol()
        con.write(f"Trang {page + 1} / {pages}")

    def _show_hint(self) -> None:
        con = self.console
        con.set_color(8)
        con.goto(20, 8 + ITEMS_PER_PAGE)
        con.write(PAGING_HINT)
        con.set_color(7)

    # -- screens -------------------------------------------------------

    def _read_nonempty_name(self, x: int, y: int, max_len: int, allow_space: bool, error: str) -> str:
        while True:
            self.console.goto(x, y)
            value = read_name(self._keys, max_len, allow_space, echo=self.console.write)
            if value:
                return value
            self.console.notify(error)

    def add_reader(self) -> Optional[Reader]:
        """Ask for a new reader, give it the next free card and add it to the tree."""
        con = self.console
        con.show_cursor(True)
        con.clear()
        con.set_color(14)
        con.box_double(40, 2, "   THEM DOC GIA MOI   ", 25)
        con.set_color(7)
        con.goto(15, 5)
        con.write("┌" + "─" * 70 + "┐")
        for row in range(6, 14):
            con.goto(15, row)
            con.write("│")
            con.goto(86, row)
            con.write("│")
        con.goto(15, 14)
        con.write("└" + "─" * 70 + "┘")
        con.set_color(8)
        con.goto(20, 15)
        con.write("Meo: Nhan phim [ESC] de huy bo va thoat.")
        con.set_color(7)
        con.goto(20, 7)
        con.write("Ho         : ")
        con.goto(20, 9)
        con.write("Ten        : ")
        con.goto(20, 11)
        con.write("Gioi tinh  : ")
        con.goto(55, 11)
        con.write("(Nam/Nu)")

        input_x = 33
        try:
            last_name = self._read_nonempty_name(
                input_x, 7, 30, True, "Ho khong duoc de trong. Vui long nhap lai!"
            )
            first_name = self._read_nonempty_name(
                input_x, 9, 10, False, "Ten khong duoc de trong. Vui long nhap lai!"
            )
            while True:
                con.goto(input_x, 11)
                gender = read_name(self._keys, 3, False, echo=con.write)
                if is_valid_gender(gender):
                    con.goto(55, 11)
                    con.write(" " * 10)
                    break
                con.notify("Gioi tinh khong hop le. Chi duoc nhap 'Nam' hoac 'Nu'.")
                con.goto(input_x, 11)
                con.write(" " * 7)
        except InputCancelled:
            con.notify("DA HUY THAO TAC THEM DOC GIA")
            con.show_cursor(False)
            return None
        con.show_cursor(False)

        pool = load_card_pool(self.cards_path)
        try:
            card = pool.take()
        except LookupError:
            con.notify("DA HET MA THE, KHONG THE THEM DOC GIA MOI")
            return None

        reader = Reader(card, last_name, first_name, normalize_name(gender))
        self.tree.add(reader)
        pool.save(self.cards_path)
        con.set_color(10)
        con.notify("THEM DOC GIA THANH CONG!")
        con.set_color(7)
        return reader

    def _read_card(self) -> Optional[int]:
        """Read a card number at the delete prompt; None when the user cancels."""
        con = self.console
        while True:
            con.goto(90 + len(DELETE_PROMPT), 6)
            try:
                text = read_number(self._keys, 10, echo=con.write)
            except InputCancelled:
                return None
            if not text:
                continue
            value = int(text)
            if value > INT_MAX:
                con.notify("Ma the khong hop le. Vui long nhap so.")
                continue
            return value

    def _show_reader_details(self, reader: Reader) -> None:
        con = self.console
        for row in range(6, 17 + ITEMS_PER_PAGE + 2):
            con.goto(90, row)
            con.clear_to_eol()
        details = (
            (9, "Thong tin doc gia:"),
            (10, f"Ma the     : {reader.card}"),
            (11, f"Ho va ten  : {reader.full_name()}"),
            (12, f"Gioi tinh  : {reader.gender}"),
            (13, f"Trang thai : {_STATUS_TEXT[reader.is_active()]}"),
            (15, "Ban co chac chan muon xoa doc gia nay? (y/n): "),
        )
        for row, text in details:
            con.goto(90, row)
            con.write(text)

    def delete_reader(self) -> list[Reader]:
        """Delete readers by card number until cancelled; return those removed."""
        con = self.console
        deleted: list[Reader] = []
        self._draw_table_frame("   XOA DOC GIA   ")
        while True:
            if len(self.tree) == 0:
                for row in range(6, 6 + ITEMS_PER_PAGE + 6):
                    con.goto(1, row)
                    con.clear_to_eol()
                con.set_color(7)
                con.notify("Danh sach doc gia rong. Nhan ESC de thoat.")
                while self._next_key() != ESC:
                    pass
                break

            rows = list(self.tree)
            for row in range(6, 8 + ITEMS_PER_PAGE + 6):
                con.goto(1, row)
                con.clear_to_eol()
            self._show_page(rows, 0, page_count(len(rows)))
            self._show_hint()
            con.goto(90, 6)
            con.write(DELETE_PROMPT)
            con.show_cursor(True)

            card = self._read_card()
            if card is None:
                con.set_color(10)
                con.notify("DA HUY THAO TAC XOA DOC GIA")
                con.set_color(7)
                break

            reader = self.tree.search(card)
            if reader is None:
                con.notify("Khong tim thay doc gia co ma the nay!")
                continue

            self._show_reader_details(reader)
            if not self._confirm():
                con.set_color(10)
                con.notify("DA HUY THAO TAC XOA DOC GIA")
                con.set_color(7)
                continue

            try:
                self.tree.delete(card)
            except ReaderHasLoans:
                con.notify("Doc gia dang muon sach, khong the xoa!")
                continue
            deleted.append(reader)

            pool = load_card_pool(self.cards_path)
            try:
                pool.release(card)
            except OverflowError:
                con.notify(
                    "Canh bao: Danh sach ma the hien dang day. Ma the da xoa khong the tai su dung."
                )
            else:
                pool.save(self.cards_path)

            self._save()
            con.set_color(10)
            con.notify("XOA DOC GIA THANH CONG!")
            con.set_color(7)

        con.show_cursor(False)
        return deleted

    def list_readers(self, by_name: bool) -> list[Reader]:
        """Page through the readers, by name or by card; return them in display order."""
        con = self.console
        if len(self.tree) == 0:
            con.notify("Danh sach doc gia trong!")
            return []
        rows = self.tree.by_name() if by_name else list(self.tree)
        self._draw_table_frame("   DANH SACH DOC GIA   ")
        pages = page_count(len(rows))
        page = 0
        self._show_page(rows, page, pages)
        self._show_hint()
        while True:
            con.show_cursor(False)
            key = self._next_key()
            if key == KEY_LEFT and page > 0:
                page -= 1
                self._show_page(rows, page, pages)
            elif key == KEY_RIGHT and page < pages - 1:
                page += 1
                self._show_page(rows, page, pages)
            elif key == ESC:
                break
        return rows

    def _save(self) -> None:
        try:
            save_readers(self.tree, self.readers_path)
        except OSError:
            self.console.notify("Khong the mo file de ghi danh sach doc gia!")

    def _list_menu(self) -> None:
        choice = 0
        while True:
            self._title(LIST_TITLE)
            choice = self._select(LIST_MENU, choice)
            self.console.clear()
            if choice == 0:
                self.list_readers(True)
            elif choice == 1:
                self.list_readers(False)
            else:
                break
        self.console.clear()
        self.console.show_cursor(True)

    def _reader_menu(self) -> None:
        choice = 0
        while True:
            self._title(READER_TITLE)
            choice = self._select(READER_MENU, choice)
            self.console.clear()
            if choice == 0:
                self.add_reader()
            elif choice == 1:
                pass
            elif choice == 2:
                self.delete_reader()
            elif choice == 3:
                self._list_menu()
            else:
                break
        self.console.clear()
        self.console.show_cursor(True)

    def run(self) -> None:
        """Main menu; saves the reader list when the user chooses to quit."""
        choice = 0
        while True:
            self._title(MAIN_TITLE, 30)
            choice = self._select(MAIN_MENU, choice)
            self.console.clear()
            if choice == 0:
                self._reader_menu()
            elif choice == len(MAIN_MENU) - 1:
                self._save()
                return
            else:
                self._not_ready()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Library reader-card manager.")
    parser.add_argument("--data-dir", default=DEFAULT_DATA_DIR)
    args = parser.parse_args(argv)
    App(Console(), None, args.data_dir).run()
    return 0