"""Shared utilities for cleaning spreadsheet cells and headers.

This module provides the text helpers used by every parser in the package:
invisible-character stripping, header normalization for keyword matching,
conversion of native spreadsheet values into Brazilian-format text, and
header de-duplication.

Key utilities:
- Text normalization: strip invisible characters, remove accents
- Cell normalization: numbers, dates and NaN to text a parser can read
- Column naming: normalize for matching, handle duplicates

Examples:
    >>> from finboard_core.parsing.cleaning import cell_text, normalize_header
    >>> cell_text(29.8)
    '29,8'
    >>> normalize_header("  Total Recebido ")
    'total recebido'
"""

from __future__ import annotations

import datetime as dt
import math
import re
import unicodedata
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

# Unicode characters that should be stripped from text
NBSP = "\u00a0"  # Non-breaking space
NNBSP = "\u202f"  # Narrow non-breaking space
ZW = "".join(chr(c) for c in (0x200B, 0x200C, 0x200D, 0xFEFF))  # Zero-width characters


def strip_invisibles(x: Any) -> Optional[str]:
    """Remove invisible and problematic whitespace characters from text.

    Strips:
    - Carriage returns (\\r)
    - Tabs (converted to spaces)
    - Non-breaking spaces (NBSP, NNBSP)
    - Zero-width characters (ZWSP, ZWNJ, ZWJ, BOM)
    - Collapses multiple spaces to single space

    Args:
        x: Value to clean (string, number, or None).

    Returns:
        Cleaned string or None if input is None/NaN.

    Examples:
        >>> strip_invisibles("  Valor Vendas  ")
        'Valor Vendas'
        >>> strip_invisibles(None)
        None
    """
    if x is None or (isinstance(x, float) and pd.isna(x)):
        return None
    s = str(x)
    s = s.replace("\r", "").replace("\t", " ").replace(NBSP, " ").replace(NNBSP, " ")
    s = re.sub(r"[%s]" % re.escape(ZW), "", s)  # zero-width
    s = re.sub(r"\s+", " ", s).strip()
    return s


def remove_accents(s: str) -> str:
    """Remove accents and diacritics from string.

    Examples:
        >>> remove_accents("Março")
        'Marco'
    """
    return "".join(c for c in unicodedata.normalize("NFD", s) if unicodedata.category(c) != "Mn")


def normalize_header(s: Any) -> str:
    """Normalize a header or name for keyword comparison.

    Accents are kept: the keyword tables list accented and plain spellings
    side by side ("líquido" / "liquido").

    Examples:
        >>> normalize_header("Mês")
        'mês'
        >>> normalize_header(None)
        ''
    """
    base = strip_invisibles(s)
    if base is None:
        return ""
    # NFC so that a decomposed "ê" still matches the keyword "mês"
    return unicodedata.normalize("NFC", base).lower()


def format_decimal_br(value: float) -> str:
    """Render a float with a decimal comma and no thousands separator.

    Examples:
        >>> format_decimal_br(29.8)
        '29,8'
        >>> format_decimal_br(45292.0)
        '45292'
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value)).replace(".", ",")


def cell_text(value: Any) -> str:
    """Convert one spreadsheet cell into the text the parsers expect.

    Workbook readers hand back native values. The monetary parser treats
    ``.`` as a thousands separator, so native floats are rendered with a
    decimal comma before they reach it.

    Args:
        value: Raw cell (str, int, float, datetime, None or NaN).

    Returns:
        Cleaned text; never None.

    Examples:
        >>> cell_text(2)
        '2'
        >>> cell_text(float("nan"))
        ''
        >>> cell_text(pd.Timestamp("2025-01-03"))
        '2025-01-03'
        >>> cell_text(pd.Timestamp("2025-01-03 10:30"))
        '2025-01-03T10:30:00'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (pd.Timestamp, dt.datetime, dt.date)):
        if pd.isna(value):
            return ""
        if isinstance(value, dt.datetime) and value.time() != dt.time(0):
            return value.isoformat()
        return value.strftime("%Y-%m-%d")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ""
        return format_decimal_br(value)
    # numpy scalars and friends
    if hasattr(value, "item") and not isinstance(value, str):
        return cell_text(value.item())
    return strip_invisibles(value) or ""


def uniquify(cols: Iterable[str]) -> List[str]:
    """Make column names unique by appending .1, .2, etc. to duplicates.

    Args:
        cols: Iterable of column names (may contain duplicates).

    Returns:
        List of unique column names with duplicates numbered.

    Examples:
        >>> uniquify(["Valor", "Valor", "Data", "Valor"])
        ['Valor', 'Valor.1', 'Data', 'Valor.2']
    """
    seen: dict[str, int] = {}
    out = []
    for c in cols:
        n = seen.get(c, 0)
        out.append(c if n == 0 else f"{c}.{n}")
        seen[c] = n + 1
    return out


def is_blank_row(cells: Optional[Sequence[Any]]) -> bool:
    """True when a row has no cells or only blank ones."""
    if not cells:
        return True
    return all(not cell_text(c) for c in cells)
