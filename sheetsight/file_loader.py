import io
import logging
import os
from enum import Enum

import pandas as pd

from sheetsight.data_utils import Sheet, Workbook, frame_to_rows
from sheetsight.errors import EmptyDataset, ParseError, UnsupportedFormat

logger = logging.getLogger(__name__)


class FileFormat(Enum):
    CSV = "csv"
    SPREADSHEET = "spreadsheet"


EXTENSIONS = {
    'csv': FileFormat.CSV,
    'xlsx': FileFormat.SPREADSHEET,
    'xls': FileFormat.SPREADSHEET,
}


def _split_extension(file_name: str):
    base = os.path.basename(file_name)
    if '.' not in base:
        return base, ''
    stem, ext = base.rsplit('.', 1)
    return stem, ext.lower()


def detect_format(file_name: str) -> FileFormat:
    ext = _split_extension(file_name)[1]
    if ext not in EXTENSIONS:
        logger.info("Unsupported extension .%s for %s", ext, file_name)
        raise UnsupportedFormat(file_name)
    return EXTENSIONS[ext]


def sheet_name_for(file_name: str) -> str:
    stem = _split_extension(file_name)[0]
    return stem or 'data'


def load_file(data: bytes, file_name: str) -> Workbook:
    """
    Turn uploaded bytes into a Workbook.

    The format comes from the file extension. Either a complete Workbook
    with at least one non-empty sheet is returned, or an error is raised:
    UnsupportedFormat, ParseError or EmptyDataset.
    """
    file_format = detect_format(file_name)

    if file_format is FileFormat.CSV:
        sheets = [load_csv(data, file_name)]
    else:
        sheets = load_spreadsheet(data)

    valid_sheets = [sheet for sheet in sheets if sheet.rows]
    for sheet in sheets:
        if not sheet.rows:
            logger.info("Dropping empty sheet %r from %s", sheet.name, file_name)

    if not valid_sheets:
        raise EmptyDataset(file_name)

    logger.info("Loaded %s: %d sheet(s)", file_name, len(valid_sheets))
    return Workbook(file_name=file_name, sheets=valid_sheets)


def _read_csv(data: bytes, encoding: str) -> pd.DataFrame:
    # Everything as text; numeric detection happens per cell.
    return pd.read_csv(
        io.BytesIO(data),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding=encoding,
    )


def load_csv(data: bytes, file_name: str) -> Sheet:
    try:
        try:
            df = _read_csv(data, 'utf-8')
        except UnicodeDecodeError:
            logger.warning("UTF-8 failed for %s, trying ISO-8859-1...", file_name)
            df = _read_csv(data, 'ISO-8859-1')
    except pd.errors.EmptyDataError:
        raise EmptyDataset(file_name)
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        logger.error("Error reading CSV %s: %s", file_name, e)
        raise ParseError(str(e)) from e

    headers = [str(col) for col in df.columns]
    return Sheet(name=sheet_name_for(file_name), headers=headers, rows=frame_to_rows(df))


def load_spreadsheet(data: bytes) -> list:
    """Every sheet in workbook order, empty ones included."""
    try:
        frames = pd.read_excel(io.BytesIO(data), sheet_name=None, dtype=object)
    except Exception as e:
        logger.error("Error reading spreadsheet: %s", e)
        raise ParseError(str(e) or type(e).__name__) from e

    sheets = []
    for name, df in frames.items():
        headers = [str(col) for col in df.columns]
        rows = frame_to_rows(df, coerce_strings=False)
        sheets.append(Sheet(name=str(name), headers=headers, rows=rows))
    return sheets
