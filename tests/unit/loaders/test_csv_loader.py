"""
Unit tests for the delimited-text loader.

Covers encoding and delimiter detection, chunking, cell classification and
malformed-row handling.
"""

import io
from datetime import datetime

import pytest

from visualization_advisor.core.exceptions import EmptyDataError
from visualization_advisor.loaders.csv_loader import (
    CSVLoader,
    detect_delimiter,
    detect_encoding,
    read_header,
)


def load_all(loader):
    records = []
    for chunk in loader.load():
        records.extend(chunk.records)
    return records


@pytest.mark.unit
class TestDetection:
    """Test encoding and delimiter sniffing."""

    def test_utf8(self):
        assert detect_encoding("name\nJosé\n".encode("utf-8")) == "utf-8"

    def test_bom(self):
        assert detect_encoding(b"\xef\xbb\xbfa,b\n1,2\n") == "utf-8-sig"

    def test_cp1252_fallback(self):
        sample = "name\ncafé au lait\n".encode("cp1252")
        assert detect_encoding(sample) == "cp1252"

    def test_truncated_multibyte_tail_is_not_an_error(self):
        sample = "name\nJosé".encode("utf-8")[:-1]
        assert detect_encoding(sample) == "utf-8"

    @pytest.mark.parametrize("text,expected", [
        ("a,b,c\n1,2,3\n4,5,6\n", ","),
        ("a\tb\tc\n1\t2\t3\n4\t5\t6\n", "\t"),
        ("a;b;c\n1;2;3\n4;5;6\n", ";"),
        ("a|b|c\n1|2|3\n4|5|6\n", "|"),
    ])
    def test_delimiters(self, text, expected):
        assert detect_delimiter(text) == expected

    def test_empty_text_defaults_to_comma(self):
        assert detect_delimiter("") == ","

    def test_read_header(self):
        assert read_header(" a , b\n1,2\n", ",") == ["a", "b"]
        assert read_header("", ",") == []


@pytest.mark.unit
class TestCSVLoader:
    """Test chunked loading."""

    def test_cells_are_classified(self):
        data = b"name,age,joined,active\nann,30,2024-01-15,true\nbob,,2024-02-01,false\n"
        records = load_all(CSVLoader(data))

        assert records == [
            {"name": "ann", "age": 30, "joined": datetime(2024, 1, 15), "active": True},
            {"name": "bob", "age": None, "joined": datetime(2024, 2, 1), "active": False},
        ]

    def test_chunking(self):
        lines = ["id,value"] + [f"{i},{i * 2}" for i in range(25)]
        loader = CSVLoader("\n".join(lines).encode("utf-8"), chunk_size=10)

        sizes = [len(chunk.records) for chunk in loader.load()]

        assert sizes == [10, 10, 5]
        assert loader.rows_emitted == 25
        assert loader.columns == ["id", "value"]

    def test_tab_delimited(self):
        records = load_all(CSVLoader(b"a\tb\n1\t2\n3\t4\n"))
        assert records == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_explicit_delimiter(self):
        loader = CSVLoader(b"a;b\n1;2\n", delimiter=";")
        assert load_all(loader) == [{"a": 1, "b": 2}]

    def test_long_rows_are_skipped_and_counted(self):
        data = b"a,b\n1,2\n3,4,5\n6,7\n"
        loader = CSVLoader(data)
        chunks = list(loader.load())

        assert [record["a"] for chunk in chunks for record in chunk.records] == [1, 6]
        assert loader.skipped_row_count == 1
        assert sum(chunk.skipped for chunk in chunks) == 1

    def test_short_rows_get_null_cells(self):
        records = load_all(CSVLoader(b"a,b,c\n1,2,3\n4,5\n"))
        assert records[1]["a"] == 4
        assert records[1]["c"] is None

    def test_bom_is_not_part_of_the_header(self):
        loader = CSVLoader(b"\xef\xbb\xbfa,b\n1,2\n")
        load_all(loader)
        assert loader.columns == ["a", "b"]

    def test_cp1252_file(self):
        data = "drink,price\ncafé au lait,3\n".encode("cp1252")
        assert load_all(CSVLoader(data)) == [{"drink": "café au lait", "price": 3}]

    def test_file_object_source(self):
        handle = io.BytesIO(b"a,b\n1,2\n")
        assert load_all(CSVLoader(handle)) == [{"a": 1, "b": 2}]

    def test_path_source(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n1,2\n")
        loader = CSVLoader(str(path))
        assert load_all(loader) == [{"a": 1, "b": 2}]
        assert loader.file_name == "data.csv"
        assert loader.get_metadata()["file_size_bytes"] == 8

    def test_empty_source(self):
        with pytest.raises(EmptyDataError):
            load_all(CSVLoader(b""))

    def test_unterminated_quote_on_last_row_keeps_earlier_rows(self):
        data = b'a,b\n1,x\n2,y\n3,z\n4,w\n5,"v\n'
        loader = CSVLoader(data)
        records = load_all(loader)
        assert [r["a"] for r in records] == [1, 2, 3, 4]
        assert loader.skipped_row_count == 1

    def test_unterminated_quote_after_earlier_chunks(self):
        data = b'a,b\n1,x\n2,y\n3,z\n4,w\n5,v\n6,"u\n'
        loader = CSVLoader(data, chunk_size=2)
        chunks = list(loader.load())
        records = [r for chunk in chunks for r in chunk.records]
        assert [r["a"] for r in records] == [1, 2, 3, 4, 5]
        assert sum(chunk.skipped for chunk in chunks) == 1
