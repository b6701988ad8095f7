# thuvien

A small console program for managing the reader cards of a library.
Readers are kept in a binary search tree ordered by card number, and new
cards are handed out from a pool of unused card numbers stored in a text
file. The screens and messages are in Vietnamese.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Preparing the card pool

Before any reader can be added, the pool of free card numbers has to exist.
The `thuvien-cards` command writes a file of random, distinct card numbers
between 1 and 99999, one per line:

```
thuvien-cards                      # 10000 numbers into txt/MaTheDocGia.txt
thuvien-cards cards.txt -n 500     # 500 numbers into cards.txt
```

When a reader is added, the first number in the pool is taken; when a
reader is deleted, that number goes back to the end of the pool so it can be
used again. The pool holds at most 10000 numbers; if it is full, a deleted
reader's number is not returned to it.

## Running the program

```
thuvien                    # data files in ./txt
thuvien --data-dir data    # data files in ./data
```

The program reads `DanhSachDocGia.txt` (the readers) and `MaTheDocGia.txt`
(the card pool) from the data directory. If the reader file cannot be
opened, it starts with an empty list.

Menus are driven with the Up and Down arrows and Enter. Under
"Quan ly the doc gia" you can:

- add a reader: family name (letters and single spaces, up to 30
  characters), given name (letters, up to 10) and gender `Nam` or `Nu`.
  Names are tidied as they are entered. Esc cancels at any prompt.
- delete a reader by card number, after confirming with `y`. A reader who
  still has books on loan is not deleted. After each deletion the reader
  file and the card pool are saved.
- list all readers, either by card number or by given name then family
  name, fifteen to a page, turning pages with the Left and Right arrows;
  Esc leaves the list.

Choosing "Thoat" in the main menu saves the reader list and quits.

## What it does not do

Only reader cards are managed. The menu entries for editing a reader, book
titles, borrowing and returning books, listing a reader's loans and the
top-10 statistics show "Chuc nang nay chua lam!" and do nothing else.
`thuvien.models` has `Loan`, `Book` and `BookTitle` records, but nothing
stores or edits them, and the reader file does not hold loans.

## The reader file

Readers are stored as plain text, one block per reader followed by a blank
line:

```
1234
Nguyen Van
An
Nam
1

```

The lines are the card number, the family name, the given name, the gender
and the status (`1` for active, anything else for locked). At most 10000
readers are read.

## Using it as a library

```python
from thuvien.models import Reader
from thuvien.readers import load_readers, save_readers
from thuvien.cardpool import load_card_pool

tree = load_readers("readers.txt")        # ReaderTree
pool = load_card_pool("cards.txt")        # CardPool

reader = Reader(pool.take(), "Tran Thi", "Binh", "Nu")
tree.add(reader)

for r in tree.by_name():
    print(r.card, r.full_name())

tree.delete(reader.card)                   # KeyError if absent, ReaderHasLoans if books are out
pool.release(reader.card)

save_readers(tree, "readers.txt")
pool.save("cards.txt")
```

`CardPool.take` raises `LookupError` when the pool is empty and
`CardPool.release` raises `OverflowError` when it is full.
`thuvien.text.normalize_name` trims spaces, lower-cases the text and
capitalises each word; `is_valid_gender` accepts `nam` or `nu` in any case.