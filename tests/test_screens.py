import io
import time

import pytest

from thuvien.cardpool import read_card_numbers, write_card_numbers
from thuvien.console import KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_UP, Console
from thuvien.models import Date, Loan, Reader
from thuvien.readers import ReaderTree, load_readers, save_readers
from thuvien.screens import (
    ITEMS_PER_PAGE,
    App,
    format_reader_row,
    page_count,
)

ESC = "\x1b"
ENTER = "\r"


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _seconds: None)


def typed(text):
    return list(text) + [ENTER]


def make_app(tmp_path, keys, readers=None, cards=(1001, 1002, 1003)):
    if readers is not None:
        save_readers(ReaderTree(readers), tmp_path / "DanhSachDocGia.txt")
    write_card_numbers(cards, tmp_path / "MaTheDocGia.txt")
    out = io.StringIO()
    app = App(Console(out), keys, str(tmp_path))
    return app, out


def sample_readers():
    return [
        Reader(5, "Tran", "Binh", "Nam"),
        Reader(2, "Le", "An", "Nu"),
        Reader(9, "Pham", "An", "Nam", status=0),
    ]


def test_page_count_bounds_rows():
    for total in range(1, 100):
        pages = page_count(total)
        assert (pages - 1) * ITEMS_PER_PAGE < total <= pages * ITEMS_PER_PAGE


def test_page_count_of_empty_list_is_one():
    assert page_count(0) == 1


def test_format_reader_row_contents():
    active = format_reader_row(1, Reader(42, "Nguyen Van", "An", "Nam"))
    locked = format_reader_row(2, Reader(7, "Le", "Binh", "Nu", status=0))
    assert "Nguyen Van An" in active
    assert "Hoat dong" in active
    assert "Bi khoa" in locked
    assert active.startswith("│ 1")
    assert len(active) == len(locked)


def test_missing_reader_file_gives_empty_tree(tmp_path):
    app, out = make_app(tmp_path, [])
    assert len(app.tree) == 0
    assert "Khong the mo file danh sach doc gia!" in out.getvalue()


def test_add_reader_takes_first_card(tmp_path):
    keys = typed("nguyen  van") + typed("AN") + typed("nam")
    app, out = make_app(tmp_path, keys, readers=[])
    reader = app.add_reader()
    assert reader.card == 1001
    assert reader.last_name == "Nguyen Van"
    assert reader.first_name == "An"
    assert reader.gender == "Nam"
    assert app.tree.search(1001) == reader
    assert read_card_numbers(tmp_path / "MaTheDocGia.txt") == [1002, 1003]
    assert "THEM DOC GIA THANH CONG!" in out.getvalue()


def test_add_reader_retries_invalid_fields(tmp_path):
    keys = typed("") + typed("le") + typed("") + typed("binh") + typed("xx") + typed("nu")
    app, out = make_app(tmp_path, keys, readers=[])
    reader = app.add_reader()
    assert reader.gender == "Nu"
    text = out.getvalue()
    assert "Ho khong duoc de trong" in text
    assert "Ten khong duoc de trong" in text
    assert "Gioi tinh khong hop le" in text


def test_add_reader_cancelled(tmp_path):
    keys = typed("tran") + [ESC]
    app, out = make_app(tmp_path, keys, readers=[])
    assert app.add_reader() is None
    assert len(app.tree) == 0
    assert read_card_numbers(tmp_path / "MaTheDocGia.txt") == [1001, 1002, 1003]
    assert "DA HUY THAO TAC THEM DOC GIA" in out.getvalue()


def test_add_reader_without_free_cards(tmp_path):
    keys = typed("tran") + typed("binh") + typed("nam")
    app, out = make_app(tmp_path, keys, readers=[], cards=())
    assert app.add_reader() is None
    assert len(app.tree) == 0
    assert "DA HET MA THE" in out.getvalue()


def test_delete_reader_confirmed(tmp_path):
    keys = typed("5") + ["y", ENTER, ESC]
    app, out = make_app(tmp_path, keys, readers=sample_readers())
    deleted = app.delete_reader()
    assert [r.card for r in deleted] == [5]
    assert app.tree.search(5) is None
    assert [r.card for r in load_readers(tmp_path / "DanhSachDocGia.txt")] == [2, 9]
    assert read_card_numbers(tmp_path / "MaTheDocGia.txt")[-1] == 5
    assert "XOA DOC GIA THANH CONG!" in out.getvalue()


def test_delete_reader_declined(tmp_path):
    keys = typed("2") + ["n", ENTER, ESC]
    app, out = make_app(tmp_path, keys, readers=sample_readers())
    assert app.delete_reader() == []
    assert app.tree.search(2) is not None
    assert len(app.tree) == 3
    assert "DA HUY THAO TAC XOA DOC GIA" in out.getvalue()


def test_delete_unknown_and_invalid_card(tmp_path):
    keys = typed("77") + typed("9999999999") + [ESC]
    app, out = make_app(tmp_path, keys, readers=sample_readers())
    assert app.delete_reader() == []
    text = out.getvalue()
    assert "Khong tim thay doc gia co ma the nay!" in text
    assert "Ma the khong hop le. Vui long nhap so." in text


def test_delete_reader_with_loans_is_refused(tmp_path):
    keys = typed("5") + ["y", ENTER, ESC]
    app, out = make_app(tmp_path, keys, readers=sample_readers())
    borrower = app.tree.search(5)
    borrower.loans.append(Loan(1, Date(1, 1, 2024), Date(0, 0, 0), 0))
    assert app.delete_reader() == []
    assert app.tree.search(5) is borrower
    assert "dang muon sach" in out.getvalue()


def test_delete_last_reader_waits_for_escape(tmp_path):
    keys = typed("5") + ["Y", ENTER, "a", ESC]
    app, out = make_app(tmp_path, keys, readers=[Reader(5, "Tran", "Binh", "Nam")])
    deleted = app.delete_reader()
    assert [r.card for r in deleted] == [5]
    assert len(app.tree) == 0
    assert "Danh sach doc gia rong" in out.getvalue()


def test_list_readers_orders(tmp_path):
    app, _ = make_app(tmp_path, [ESC, ESC], readers=sample_readers())
    by_card = app.list_readers(False)
    by_name = app.list_readers(True)
    assert [r.card for r in by_card] == [2, 5, 9]
    assert [(r.first_name, r.last_name) for r in by_name] == [
        ("An", "Le"),
        ("An", "Pham"),
        ("Binh", "Tran"),
    ]


def test_list_readers_paging(tmp_path):
    readers = [Reader(n, "Ho", f"Ten{n:02d}", "Nam") for n in range(1, 21)]
    keys = [KEY_LEFT, KEY_RIGHT, KEY_RIGHT, ESC]
    app, out = make_app(tmp_path, keys, readers=readers)
    rows = app.list_readers(False)
    assert len(rows) == 20
    text = out.getvalue()
    assert "Trang 1 / 2" in text
    assert "Trang 2 / 2" in text
    assert "Ten20" in text


def test_list_readers_empty(tmp_path):
    app, out = make_app(tmp_path, [], readers=[])
    assert app.list_readers(True) == []
    assert "Danh sach doc gia trong!" in out.getvalue()


def test_run_quit_saves_readers(tmp_path):
    app, _ = make_app(tmp_path, [KEY_UP, ENTER], readers=sample_readers())
    app.tree.add(Reader(1, "Vo", "Cuong", "Nam"))
    app.run()
    saved = load_readers(tmp_path / "DanhSachDocGia.txt")
    assert [r.card for r in saved] == [1, 2, 5, 9]


def test_run_unfinished_feature_then_quit(tmp_path):
    keys = [KEY_DOWN, ENTER, "x", KEY_UP, KEY_UP, ENTER]
    app, out = make_app(tmp_path, keys, readers=sample_readers())
    app.run()
    assert "Chuc nang nay chua lam!" in out.getvalue()
    assert len(load_readers(tmp_path / "DanhSachDocGia.txt")) == 3


def test_run_through_reader_menu_adds_reader(tmp_path):
    keys = (
        [ENTER, ENTER]
        + typed("do")
        + typed("ha")
        + typed("nu")
        + [KEY_UP, ENTER, KEY_UP, ENTER]
    )
    app, _ = make_app(tmp_path, keys, readers=[])
    app.run()
    saved = list(load_readers(tmp_path / "DanhSachDocGia.txt"))
    assert [(r.card, r.full_name(), r.gender) for r in saved] == [(1001, "Do Ha", "Nu")]


def test_run_raises_when_keys_run_out(tmp_path):
    app, _ = make_app(tmp_path, [KEY_DOWN], readers=[])
    with pytest.raises(EOFError):
        app.run()