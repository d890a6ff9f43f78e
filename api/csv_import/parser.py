"""
Streaming CSV reader for uploaded files.

The file is read row by row on a worker thread; the event loop gets control
back between rows. Anything that makes the file itself unreadable (bad
encoding, broken quoting, I/O failure) surfaces as `CsvParseError`.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import AsyncIterator, Iterator, TextIO

from starlette.concurrency import iterate_in_threadpool

# Cells beyond the header width land here; nothing downstream reads them.
EXTRA_CELLS_KEY = "_extra"


class CsvParseError(RuntimeError):
    pass


def _read_rows(handle: TextIO) -> Iterator[dict[str, str]]:
    reader = csv.DictReader(handle, restkey=EXTRA_CELLS_KEY, restval="", strict=True)
    if reader.fieldnames is None:
        # Empty file.
        return
    reader.fieldnames = [name.strip() for name in reader.fieldnames]
    yield from reader


async def iter_csv_rows(path: str | Path) -> AsyncIterator[dict[str, str]]:
    """
    Yield raw rows (header -> cell text) from a UTF-8 CSV file.
    """
    try:
        # utf-8-sig drops a leading BOM written by spreadsheet exports.
        with open(path, newline="", encoding="utf-8-sig", errors="strict") as handle:
            async for row in iterate_in_threadpool(_read_rows(handle)):
                yield row
    except UnicodeDecodeError as exc:
        raise CsvParseError(f"file is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except csv.Error as exc:
        raise CsvParseError(str(exc)) from exc
    except OSError as exc:
        raise CsvParseError(f"could not read uploaded file: {exc.strerror or exc}") from exc
