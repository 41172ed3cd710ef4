"""Daily-sales sheet -> PushinPay transactional sheet.

Batch counterpart of the interactive import. It takes the fixed daily-sales
template (``Ano, Mês, Dia, Vendas, Valor Vendas, Total Recebido``) and
writes one PushinPay row per sale, which is what the example downloads and
exports are built from.

Column lookup uses :data:`finboard_core.schema.CONVERTER_RULES`, which
require keyword combinations (``valor`` + ``vendas``, ``total`` +
``recebido``), unlike the single-keyword rules of the interactive import.

Examples:
    >>> table = convert_aggregated_to_transactional(generate_daily_sales_example())
    >>> table[1]
    ['01/01/2025', '1', 'Produto Genérico', '14,90', '14,15', '', '', '', 'Venda 1 de 2 do dia 01/01/2025']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from finboard_core.config import SplitMode
from finboard_core.exceptions import EmptyConversionError, MissingColumnsError
from finboard_core.expand import split_amount
from finboard_core.models import ParseDiagnostic, RawTable
from finboard_core.parsing.cleaning import cell_text
from finboard_core.parsing.dates import format_br_date
from finboard_core.parsing.values import format_brl_number, parse_int, parse_monetary
from finboard_core.schema import CONVERTER_RULES, locate_columns
from finboard_core.tables import write_workbook

logger = logging.getLogger(__name__)

PUSHINPAY_HEADER: tuple[str, ...] = (
    "Data",
    "Quantidade",
    "Nome do Produto",
    "Valor Unitário",
    "Total Recebido",
    "Meio de Pagamento",
    "Status",
    "Observações",
    "Identificação",
)
GENERIC_PRODUCT = "Produto Genérico"
TOTAL_MARKER = "Total"


@dataclass
class ConversionResult:
    table: RawTable
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)

    @property
    def records(self) -> int:
        return max(len(self.table) - 1, 0)


def _sale_rows(
    date: str, quantity: int, gross: float, net: float, split_mode: SplitMode
) -> RawTable:
    rows: RawTable = []
    gross_shares = split_amount(gross, quantity, split_mode)
    net_shares = split_amount(net, quantity, split_mode)
    for i, (g, n) in enumerate(zip(gross_shares, net_shares), start=1):
        rows.append(
            [
                date,
                "1",
                GENERIC_PRODUCT,
                format_brl_number(g),
                format_brl_number(n),
                "",
                "",
                "",
                f"Venda {i} de {quantity} do dia {date}",
            ]
        )
    return rows


def convert_with_diagnostics(
    table: RawTable, split_mode: SplitMode = SplitMode.DIVIDE
) -> ConversionResult:
    """Convert a daily-sales table, reporting the rows it skipped.

    Args:
        table: Raw daily-sales table, header in row 0.
        split_mode: How each day's totals are shared across its sales.

    Returns:
        ConversionResult with the PushinPay table (header included) and
        one diagnostic per skipped row.

    Raises:
        EmptyConversionError: If the table is empty or no row is valid.
        MissingColumnsError: If any required column is absent.
    """
    if not table:
        raise EmptyConversionError("Dados vazios ou inválidos")

    headers = [cell_text(h) for h in table[0]]
    cols = locate_columns(headers, CONVERTER_RULES)
    missing = [role for role, idx in cols.items() if idx is None]
    if missing:
        raise MissingColumnsError(missing)
    logger.debug("Converter columns: %s", cols)

    result = ConversionResult(table=[list(PUSHINPAY_HEADER)])
    for i in range(1, len(table)):
        row = table[i]
        first = cell_text(row[0]) if row else ""
        if not first or first == TOTAL_MARKER:
            continue

        def cell(role: str) -> str:
            idx = cols[role]
            return cell_text(row[idx]) if idx is not None and idx < len(row) else ""

        year, month, day = cell("year"), cell("month"), cell("day")
        quantity = parse_int(cell("quantity")) or 0
        gross = parse_monetary(cell("gross_value"))
        net = parse_monetary(cell("net_value"))

        if not year or not month or not day or quantity <= 0 or gross <= 0:
            message = (
                f"Linha {i + 1} ignorada: dados inválidos "
                f"(ano={year!r}, mês={month!r}, dia={day!r}, vendas={quantity}, valor={gross})"
            )
            logger.warning(message)
            result.diagnostics.append(ParseDiagnostic(i, message))
            continue

        try:
            date = format_br_date(year, month, day)
            result.table.extend(_sale_rows(date, quantity, gross, net, split_mode))
        except ValueError as e:
            logger.warning("Erro ao processar linha %d: %s", i + 1, e)
            result.diagnostics.append(ParseDiagnostic(i, str(e)))

    if result.records == 0:
        raise EmptyConversionError("Nenhum registro válido foi processado")

    logger.info(
        "Converted %d daily rows into %d sales (%d skipped)",
        len(table) - 1,
        result.records,
        len(result.diagnostics),
    )
    return result


def convert_aggregated_to_transactional(
    table: RawTable, split_mode: SplitMode = SplitMode.DIVIDE
) -> RawTable:
    """Convert a daily-sales table into the PushinPay layout.

    See :func:`convert_with_diagnostics` for the rules and errors.
    """
    return convert_with_diagnostics(table, split_mode).table


def generate_daily_sales_example() -> RawTable:
    """Template of the daily-aggregated layout."""
    return [
        ["Ano", "Mês", "Dia", "Vendas", "Valor Vendas", "Total Recebido"],
        ["2025", "Janeiro", "1", "2", "29,80", "28,31"],
        ["2025", "Janeiro", "2", "1", "14,90", "14,16"],
        ["2025", "Janeiro", "3", "3", "44,70", "42,47"],
        ["2025", "Janeiro", "4", "1", "14,90", "14,16"],
        ["2025", "Janeiro", "5", "2", "29,80", "28,31"],
    ]


def generate_pushinpay_example() -> RawTable:
    """Template of the transactional PushinPay layout."""
    rows = [
        ("01/01/2025", "14,16", 1, 2),
        ("01/01/2025", "14,15", 2, 2),
        ("02/01/2025", "14,16", 1, 1),
        ("03/01/2025", "14,16", 1, 3),
        ("03/01/2025", "14,16", 2, 3),
        ("03/01/2025", "14,15", 3, 3),
    ]
    return [list(PUSHINPAY_HEADER)] + [
        [date, "1", GENERIC_PRODUCT, "14,90", net, "", "", "", f"Venda {i} de {q} do dia {date}"]
        for date, net, i, q in rows
    ]


# kind -> (table factory, sheet name, download file name)
EXAMPLES: dict[str, tuple[Callable[[], RawTable], str, str]] = {
    "daily": (generate_daily_sales_example, "Vendas Diárias", "exemplo-vendas-diarias.xlsx"),
    "pushinpay": (generate_pushinpay_example, "PushinPay", "exemplo-pushinpay.xlsx"),
}


def example_workbook(kind: str = "daily") -> tuple[str, bytes]:
    """Build a downloadable example workbook.

    Returns:
        (file name, xlsx bytes)

    Raises:
        ValueError: If ``kind`` is not "daily" or "pushinpay".
    """
    try:
        factory, sheet_name, filename = EXAMPLES[kind]
    except KeyError:
        raise ValueError(f"Invalid example '{kind}'. Must be one of: {', '.join(EXAMPLES)}") from None
    return filename, write_workbook(factory(), sheet_name=sheet_name)
