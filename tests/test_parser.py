from __future__ import annotations

import pytest

from csv_import.parser import EXTRA_CELLS_KEY, CsvParseError, iter_csv_rows

pytestmark = pytest.mark.asyncio


async def _collect(path) -> list[dict[str, str]]:
    return [row async for row in iter_csv_rows(path)]


async def test_rows_are_keyed_by_stripped_headers(write_csv) -> None:
    path = write_csv(" Make Name ,Model Name\nToyota,Corolla\nHonda,Civic\n")

    rows = await _collect(path)

    assert rows == [
        {"Make Name": "Toyota", "Model Name": "Corolla"},
        {"Make Name": "Honda", "Model Name": "Civic"},
    ]


async def test_quoted_cells_keep_commas_and_newlines(write_csv) -> None:
    path = write_csv('make_name,trim_description\nToyota,"Sport, with ""extras""\nand more"\n')

    rows = await _collect(path)

    assert rows == [{"make_name": "Toyota", "trim_description": 'Sport, with "extras"\nand more'}]


async def test_leading_bom_is_dropped(write_csv) -> None:
    path = write_csv(b"\xef\xbb\xbfmake_name\nToyota\n")

    rows = await _collect(path)

    assert rows == [{"make_name": "Toyota"}]


async def test_short_and_long_rows(write_csv) -> None:
    path = write_csv("a,b\n1\n1,2,3\n")

    rows = await _collect(path)

    assert rows[0] == {"a": "1", "b": ""}
    assert rows[1] == {"a": "1", "b": "2", EXTRA_CELLS_KEY: ["3"]}


async def test_empty_file_yields_nothing(write_csv) -> None:
    assert await _collect(write_csv("")) == []
    assert await _collect(write_csv("make_name,model_name\n", name="header.csv")) == []


async def test_invalid_utf8_is_a_parse_error(write_csv) -> None:
    path = write_csv(b"make_name\nToyota\n\xff\xfe\xfa\n")

    with pytest.raises(CsvParseError, match="not valid UTF-8"):
        await _collect(path)


async def test_broken_quoting_is_a_parse_error(write_csv) -> None:
    path = write_csv('make_name,model_name\n"Toyota"x,Corolla\n')

    with pytest.raises(CsvParseError):
        await _collect(path)


async def test_missing_file_is_a_parse_error(tmp_path) -> None:
    with pytest.raises(CsvParseError, match="could not read uploaded file"):
        await _collect(tmp_path / "gone.csv")
