"""Reading and writing raw tables.

A raw table is a list of rows of text cells with the header as row 0. This
module produces raw tables from CSV text and from the first sheet of a
workbook, and writes them back out as CSV or xlsx.

Every cell goes through :func:`finboard_core.parsing.cleaning.cell_text`,
so native workbook numbers arrive in the Brazilian text form the parsers
expect.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence, Union

import pandas as pd

from finboard_core.models import RawTable
from finboard_core.parsing.cleaning import cell_text, strip_invisibles, uniquify

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = {".xlsx", ".xls"}
CSV_SUFFIXES = {".csv", ".txt"}

PathOrBuffer = Union[str, Path, BinaryIO, bytes]


def read_csv_text(text: str, delimiter: str = ",") -> RawTable:
    """Split delimited text into a raw table.

    Quoted cells may contain the delimiter (``"29,80"``); quotes are removed
    and cells trimmed. Blank lines are kept as empty rows so row indexes
    match the file's line numbers.

    Examples:
        >>> read_csv_text('Data,Valor\\n01/01/2025,"29,80"\\n')
        [['Data', 'Valor'], ['01/01/2025', '29,80']]
    """
    text = text.lstrip("\ufeff")
    rows = [[cell_text(c) for c in row] for row in csv.reader(io.StringIO(text), delimiter=delimiter)]
    # a trailing newline yields no row; a trailing blank line yields []
    while rows and not rows[-1]:
        rows.pop()
    return rows


def read_workbook(source: PathOrBuffer, sheet: Union[int, str] = 0) -> RawTable:
    """Read one sheet (the first by default) as a raw table.

    Args:
        source: Path, open binary file, or the file's bytes.
        sheet: Sheet index or name.

    Returns:
        Row-major cells with the header as row 0. Trailing empty cells of a
        row are dropped.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    df = pd.read_excel(source, sheet_name=sheet, header=None, dtype=object)
    table: RawTable = []
    for values in df.itertuples(index=False, name=None):
        row = [cell_text(v) for v in values]
        while row and not row[-1]:
            row.pop()
        table.append(row)
    while table and not table[-1]:
        table.pop()
    logger.debug("Read sheet %r: %d rows", sheet, len(table))
    return table


def read_table(path: Union[str, Path], encoding: str = "utf-8") -> RawTable:
    """Read a CSV or workbook file, dispatching on its suffix.

    Raises:
        ValueError: If the suffix is not supported.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in WORKBOOK_SUFFIXES:
        return read_workbook(path)
    if suffix in CSV_SUFFIXES:
        return read_csv_text(path.read_text(encoding=encoding))
    raise ValueError(
        f"Unsupported file type {path.suffix!r}. Use one of: "
        f"{', '.join(sorted(WORKBOOK_SUFFIXES | CSV_SUFFIXES))}"
    )


def header_labels(table: RawTable) -> list[str]:
    """Cleaned, de-duplicated header row."""
    if not table:
        return []
    return uniquify([strip_invisibles(h) or "" for h in table[0]])


def iter_records(table: RawTable) -> Iterator[tuple[int, dict[str, str]]]:
    """Yield ``(row_index, {header: cell})`` for every data row.

    Short rows are padded with ``""``; cells beyond the header are dropped.
    """
    headers = header_labels(table)
    for i in range(1, len(table)):
        row = table[i] or []
        yield i, {h: (row[j] if j < len(row) else "") for j, h in enumerate(headers)}


def _frame(table: Sequence[Sequence[str]]) -> pd.DataFrame:
    if not table:
        return pd.DataFrame()
    header = list(table[0])
    body = [list(r) + [""] * (len(header) - len(r)) for r in table[1:]]
    return pd.DataFrame(body, columns=header)


def write_workbook(table: Sequence[Sequence[str]], sheet_name: str = "Sheet1") -> bytes:
    """Encode a raw table as an xlsx workbook with one sheet."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        _frame(table).to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()


def write_csv(table: Sequence[Sequence[str]], out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    _frame(table).to_csv(out_path, index=False, encoding="utf-8", quoting=csv.QUOTE_MINIMAL)
