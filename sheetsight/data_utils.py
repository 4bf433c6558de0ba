import datetime
import io
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pandas as pd


NUMERIC_PATTERN = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


@dataclass(frozen=True)
class Text:
    value: str


Cell = Union[Number, Text]
Row = Dict[str, Cell]


@dataclass(frozen=True)
class Sheet:
    """One table: a name, its ordered headers and its rows."""
    name: str
    headers: List[str]
    rows: List[Row] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.name} ({len(self.rows)} rows)"

    def __len__(self):
        return len(self.rows)


@dataclass(frozen=True)
class Workbook:
    file_name: str
    sheets: List[Sheet]

    def __len__(self):
        return len(self.sheets)

    def __getitem__(self, index) -> Sheet:
        return self.sheets[index]

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self.sheets]


def coerce_cell(raw) -> Optional[Cell]:
    """
    Decide the cell kind once. Returns None for empty cells.
    Strings that look numeric become Number, other strings stay Text.
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        if raw.strip() == "":
            return None
        if NUMERIC_PATTERN.match(raw):
            text = raw.strip()
            if re.fullmatch(r"[-+]?\d+", text):
                return Number(int(text))
            return Number(float(text))
        return Text(raw)

    # bool is an int subclass; keep it out of Number
    if isinstance(raw, bool):
        return Text(str(raw))

    if isinstance(raw, int):
        return Number(raw)

    if isinstance(raw, float):
        if math.isnan(raw):
            return None
        return Number(int(raw) if raw.is_integer() else raw)

    try:
        if pd.isna(raw):
            return None
    except (TypeError, ValueError):
        pass

    # pd.Timestamp is a datetime subclass
    if isinstance(raw, (datetime.date, datetime.time)):
        return Text(raw.isoformat())

    # numpy scalars
    if hasattr(raw, "item"):
        return coerce_cell(raw.item())

    return Text(str(raw))


def frame_to_rows(df: pd.DataFrame, coerce_strings: bool = True) -> List[Row]:
    """
    Convert a DataFrame into Row mappings, omitting empty cells and
    dropping rows that end up with no cells.
    """
    headers = [str(col) for col in df.columns]
    rows = []
    for values in df.itertuples(index=False, name=None):
        row = {}
        for header, raw in zip(headers, values):
            if isinstance(raw, str) and not coerce_strings:
                cell = Text(raw) if raw.strip() else None
            else:
                cell = coerce_cell(raw)
            if cell is not None:
                row[header] = cell
        if row:
            rows.append(row)
    return rows


def raw_value(cell: Optional[Cell]):
    return None if cell is None else cell.value


def sheet_to_frame(sheet: Sheet, rows: List[Row] = None) -> pd.DataFrame:
    """
    Raw values in header order; missing cells become None.
    Pass ``rows`` to render a derived view (e.g. a sorted one).
    """
    rows = sheet.rows if rows is None else rows
    records = [[raw_value(row.get(h)) for h in sheet.headers] for row in rows]
    return pd.DataFrame(records, columns=sheet.headers, dtype=object)


def numeric_columns(sheet: Sheet) -> List[str]:
    return [
        header for header in sheet.headers
        if any(isinstance(row.get(header), Number) for row in sheet.rows)
    ]


def describe_sheet(sheet: Sheet) -> str:
    buffer = io.StringIO()
    buffer.write(f"Sheet: {sheet.name}\n")
    buffer.write(f"- Shape: ({len(sheet.rows)}, {len(sheet.headers)})\n")
    buffer.write(f"- Columns: {sheet.headers}\n")
    buffer.write(f"- Numeric columns: {numeric_columns(sheet)}\n")
    return buffer.getvalue()
