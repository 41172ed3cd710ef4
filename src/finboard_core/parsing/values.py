"""Brazilian-locale number parsing.

Spreadsheets exported by Brazilian payment platforms write amounts as
``R$ 1.234,56``: dot for thousands, comma for decimals. The parsers here
assume that convention. Callers holding native floats must convert them
with :func:`finboard_core.parsing.cleaning.cell_text` first, otherwise a
plain ``1234.56`` is read as ``123456``.

Examples:
    >>> parse_monetary("1.234,56")
    1234.56
    >>> parse_monetary("R$ 29,80")
    29.8
    >>> parse_quantity("3")
    3
"""

from __future__ import annotations

import re
from typing import Any

from finboard_core.exceptions import ValueParseError

# Characters removed before parsing: the "R" and "$" of the currency symbol and any whitespace
_CURRENCY_RE = re.compile(r"[R$\s]")

# Leading decimal number, the way a lenient float reader consumes it
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def parse_monetary(text: Any, *, strict: bool = False) -> float:
    """Parse a Brazilian-format monetary amount.

    Steps, in this order:
    1. Remove ``R``, ``$`` and whitespace.
    2. Remove every ``.`` (thousands separator).
    3. Replace the first ``,`` with ``.`` (decimal separator).
    4. Read the leading decimal number; trailing garbage is ignored.

    Args:
        text: Cell text. None is treated as empty.
        strict: Raise instead of returning 0 for non-empty unparsable text.

    Returns:
        The parsed amount, or 0.0 for empty/unparsable input.

    Raises:
        ValueParseError: Only when ``strict`` is set and the text is not
            empty but holds no number.

    Examples:
        >>> parse_monetary("")
        0.0
        >>> parse_monetary("abc")
        0.0
    """
    if text is None:
        return 0.0
    raw = str(text)
    s = _CURRENCY_RE.sub("", raw)
    if not s:
        return 0.0
    s = s.replace(".", "").replace(",", ".", 1)
    m = _LEADING_NUMBER_RE.match(s)
    if m is None:
        if strict:
            raise ValueParseError(f"Valor inválido: {raw!r}")
        return 0.0
    return float(m.group(0))


def parse_quantity(text: Any, default: int = 1) -> int:
    """Parse a sales count, falling back to ``default``.

    The leading integer is used, so ``"2.0"`` and ``"2,0"`` both give 2.
    Zero, negative and unparsable values give ``default``.

    Examples:
        >>> parse_quantity("2")
        2
        >>> parse_quantity("0")
        1
        >>> parse_quantity("", default=0)
        0
    """
    value = parse_int(text)
    if value is None or value < 1:
        return default
    return value


def parse_int(text: Any) -> int | None:
    """Return the leading integer of ``text`` or None."""
    if text is None:
        return None
    m = _LEADING_INT_RE.match(str(text).strip())
    if m is None:
        return None
    return int(m.group(0))


def format_brl_number(value: float) -> str:
    """Two decimals with a decimal comma, no thousands separator.

    Examples:
        >>> format_brl_number(14.9)
        '14,90'
    """
    return f"{value:.2f}".replace(".", ",")
