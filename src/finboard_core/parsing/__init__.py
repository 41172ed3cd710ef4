"""Locale-aware cell parsers.

- :mod:`finboard_core.parsing.cleaning`: text and cell normalization
- :mod:`finboard_core.parsing.values`: Brazilian monetary amounts and counts
- :mod:`finboard_core.parsing.dates`: dates in every shape a sheet uses
"""

from finboard_core.parsing.dates import DateParts, format_br_date, parse_date
from finboard_core.parsing.values import format_brl_number, parse_monetary, parse_quantity

__all__ = [
    "DateParts",
    "format_br_date",
    "format_brl_number",
    "parse_date",
    "parse_monetary",
    "parse_quantity",
]
