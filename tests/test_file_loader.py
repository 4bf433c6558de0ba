import pandas as pd
import pytest

from conftest import make_xlsx
from sheetsight.data_utils import Number, Text
from sheetsight.errors import EmptyDataset, ParseError, UnsupportedFormat
from sheetsight.file_loader import FileFormat, detect_format, load_file, sheet_name_for


def test_detect_format_by_extension():
    assert detect_format("a.csv") is FileFormat.CSV
    assert detect_format("A.XLSX") is FileFormat.SPREADSHEET
    assert detect_format("old.xls") is FileFormat.SPREADSHEET


@pytest.mark.parametrize("name", ["notes.txt", "data.json", "README", "archive.csv.zip"])
def test_unsupported_extension_fails_before_parsing(name):
    with pytest.raises(UnsupportedFormat) as exc:
        load_file(b"\x00 not even looked at", name)
    assert "CSV or Excel" in exc.value.user_message


def test_sheet_name_from_file_name():
    assert sheet_name_for("sales.csv") == "sales"
    assert sheet_name_for("q1.sales.csv") == "q1.sales"
    assert sheet_name_for(".csv") == "data"


def test_csv_single_sheet(people_csv):
    workbook = load_file(people_csv, "people.csv")
    assert len(workbook) == 1
    assert workbook.file_name == "people.csv"

    sheet = workbook[0]
    assert sheet.name == "people"
    assert sheet.headers == ["name", "age", "city"]
    assert len(sheet.rows) == 3
    assert sheet.rows[0] == {"name": Text("ann"), "age": Number(30), "city": Text("Oslo")}
    assert sheet.rows[2]["age"] == Number(-4.5)


def test_csv_cells_typed_individually():
    data = b"v\n1\nabc\n2.5\n"
    rows = load_file(data, "mixed.csv")[0].rows
    assert [row["v"] for row in rows] == [Number(1), Text("abc"), Number(2.5)]


def test_csv_empty_cells_are_omitted():
    rows = load_file(b"a,b,c\n1,,x\n", "gaps.csv")[0].rows
    assert rows == [{"a": Number(1), "c": Text("x")}]


def test_csv_latin1_fallback():
    data = "name\nJosé\n".encode("ISO-8859-1")
    rows = load_file(data, "names.csv")[0].rows
    assert rows == [{"name": Text("José")}]


def test_csv_malformed_row_is_parse_error():
    with pytest.raises(ParseError) as exc:
        load_file(b"a,b\n1,2\n3,4,5\n", "bad.csv")
    assert exc.value.user_message.startswith("Error parsing file:")


def test_csv_header_only_is_empty():
    with pytest.raises(EmptyDataset):
        load_file(b"a,b\n", "empty.csv")


def test_csv_no_content_is_empty():
    with pytest.raises(EmptyDataset):
        load_file(b"", "nothing.csv")


def test_spreadsheet_drops_empty_sheets(three_sheet_xlsx):
    workbook = load_file(three_sheet_xlsx, "book.xlsx")
    assert workbook.sheet_names == ["A", "C"]
    assert len(workbook[0].rows) == 3
    assert len(workbook[1].rows) == 5
    assert workbook[1].headers == ["y", "label"]
    assert workbook[1].rows[0] == {"y": Number(1), "label": Text("a")}


def test_spreadsheet_all_empty_fails():
    data = make_xlsx({"A": pd.DataFrame(columns=["x"]), "B": pd.DataFrame(columns=["y"])})
    with pytest.raises(EmptyDataset):
        load_file(data, "empty.xlsx")


def test_spreadsheet_text_cells_are_not_coerced():
    data = make_xlsx({"S": pd.DataFrame({"code": ["123", "abc"], "n": [1.5, 2]})})
    rows = load_file(data, "codes.xlsx")[0].rows
    assert rows[0] == {"code": Text("123"), "n": Number(1.5)}
    assert rows[1] == {"code": Text("abc"), "n": Number(2)}


def test_spreadsheet_headers_cover_sparse_first_row():
    df = pd.DataFrame({"a": [1, 2], "b": [None, 5]})
    sheet = load_file(make_xlsx({"S": df}), "sparse.xlsx")[0]
    assert sheet.headers == ["a", "b"]
    assert sheet.rows[0] == {"a": Number(1)}
    assert sheet.rows[1] == {"a": Number(2), "b": Number(5)}


def test_corrupt_spreadsheet_is_parse_error():
    with pytest.raises(ParseError):
        load_file(b"this is not a workbook", "broken.xlsx")

