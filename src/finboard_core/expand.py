"""Aggregated-row expansion.

A daily-aggregated sheet has one row per day: how many sales happened and
what they added up to. The dashboard stores individual sales, so each row
is turned into ``quantity`` sales that share the day's totals.

Examples:
    >>> from finboard_core.ids import SequentialIds
    >>> from finboard_core.models import ColumnMapping
    >>> mapping = ColumnMapping(date="Dia", gross_value="Valor Vendas",
    ...                         net_value="Total Recebido", year="Ano",
    ...                         month="Mês", day="Dia", quantity="Vendas")
    >>> row = {"Ano": "2024", "Mês": "Janeiro", "Dia": "1", "Vendas": "2",
    ...        "Valor Vendas": "29,80", "Total Recebido": "28,31"}
    >>> [s.gross_value for s in expand_aggregated_row(row, mapping, id_factory=SequentialIds())]
    [14.9, 14.9]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from finboard_core.config import ImportSettings, SplitMode
from finboard_core.ids import IdFactory, generate_id
from finboard_core.models import ColumnMapping, Sale
from finboard_core.parsing.cleaning import cell_text, is_blank_row
from finboard_core.parsing.dates import Clock, DateParts, parse_date
from finboard_core.parsing.values import parse_monetary, parse_quantity

logger = logging.getLogger(__name__)

Record = Mapping[str, str]


@dataclass(frozen=True)
class RowValues:
    """Date and totals read from one row."""

    date: str
    gross_value: float
    net_value: float


def is_skipped_row(record: Record, total_marker: str = "Total") -> bool:
    """Empty rows and the trailing summary row are skipped without comment."""
    cells = list(record.values())
    if is_blank_row(cells):
        return True
    return cell_text(cells[0]) == total_marker


def date_parts_for(record: Record, mapping: ColumnMapping) -> Optional[DateParts]:
    if mapping.year and mapping.month and mapping.day:
        return DateParts(
            record.get(mapping.year, ""),
            record.get(mapping.month, ""),
            record.get(mapping.day, ""),
        )
    return None


def read_row_values(
    record: Record,
    mapping: ColumnMapping,
    settings: ImportSettings,
    clock: Optional[Clock] = None,
) -> RowValues:
    """Resolve a row's date and totals.

    Raises:
        ParseError: In strict mode, for an unparsable date or amount.
    """
    date = parse_date(
        record.get(mapping.date or "", ""),
        date_parts_for(record, mapping),
        strict=settings.strict,
        clock=clock,
        serial_floor=settings.serial_date_floor,
    )
    gross = parse_monetary(record.get(mapping.gross_value or "", ""), strict=settings.strict)
    net = parse_monetary(record.get(mapping.net_value or "", ""), strict=settings.strict)
    return RowValues(date, gross, net)


def split_amount(total: float, quantity: int, mode: SplitMode = SplitMode.DIVIDE) -> list[float]:
    """Share ``total`` across ``quantity`` units.

    DIVIDE gives every unit ``total / quantity`` unrounded, so the shares can
    sum back to the total only within floating-point error. CENTS rounds
    the total to cents and hands the leftover cents to the first units, so
    the shares sum back exactly.

    Examples:
        >>> split_amount(28.31, 2)
        [14.155, 14.155]
        >>> split_amount(28.31, 2, SplitMode.CENTS)
        [14.16, 14.15]
    """
    if quantity < 1:
        raise ValueError(f"quantity must be positive, got {quantity}")
    if mode is SplitMode.DIVIDE:
        return [total / quantity] * quantity
    cents = int(Decimal(str(total)).scaleb(2).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    base, remainder = divmod(cents, quantity)
    return [(base + (1 if i < remainder else 0)) / 100 for i in range(quantity)]


def expand_aggregated_row(
    record: Record,
    mapping: ColumnMapping,
    *,
    settings: Optional[ImportSettings] = None,
    id_factory: Optional[IdFactory] = None,
    clock: Optional[Clock] = None,
) -> list[Sale]:
    """Turn one daily-aggregated row into individual sales.

    Args:
        record: The row keyed by header label, in column order.
        mapping: Column mapping; ``quantity`` and the split-date roles are
            optional.
        settings: Import settings (defaults apply when None).
        id_factory: Produces sale ids.
        clock: "Now" for the lenient date fallback.

    Returns:
        ``quantity`` sales (1 when the count column is absent or not a
        positive integer). Summary and empty rows give an empty list, as do
        rows without a count column whose totals are both zero.

    Raises:
        ParseError: In strict mode, for an unparsable date or amount.
        ValueError: When a total is negative.
    """
    settings = settings or ImportSettings()
    new_id = id_factory or generate_id
    if is_skipped_row(record, settings.total_marker):
        return []

    values = read_row_values(record, mapping, settings, clock)
    if mapping.quantity:
        quantity = parse_quantity(record.get(mapping.quantity, ""))
    else:
        if values.gross_value <= 0 and values.net_value <= 0:
            return []
        quantity = 1

    gross_shares = split_amount(values.gross_value, quantity, settings.split_mode)
    net_shares = split_amount(values.net_value, quantity, settings.split_mode)
    return [
        Sale(
            id=new_id(),
            date=values.date,
            gross_value=gross,
            net_value=net,
            source=settings.source,
        )
        for gross, net in zip(gross_shares, net_shares)
    ]
