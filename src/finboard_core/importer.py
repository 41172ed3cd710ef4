"""Sales import: raw table in, validated Sale records and diagnostics out.

The import runs in two phases:

1. A precondition check on the column mapping. If a required role (date,
   gross value, net value) is unmapped or names a header the table does
   not have, :class:`IncompleteMappingError` is raised and nothing is
   returned.
2. A row loop. Empty rows and the ``Total`` summary row are skipped. Rows
   of a daily-aggregated sheet are expanded into one sale per unit sold;
   rows of a transactional sheet give one sale when either amount is
   positive. A row that raises is recorded as a :class:`ParseDiagnostic`
   and the loop moves on.

The orchestrator never persists anything; the caller decides what to do
with :class:`ImportResult.sales`.

Examples:
    >>> from finboard_core.converter import generate_daily_sales_example
    >>> from finboard_core.ids import SequentialIds
    >>> table = generate_daily_sales_example()
    >>> detection = detect_schema(table[0])
    >>> mapping = detection.mapping.with_roles(
    ...     {"gross_value": "Valor Vendas", "net_value": "Total Recebido"}
    ... )
    >>> result = import_rows(table, mapping, id_factory=SequentialIds())
    >>> result.imported
    9
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Union

from finboard_core.config import ImportSettings
from finboard_core.exceptions import DataQualityError, IncompleteMappingError
from finboard_core.expand import expand_aggregated_row, is_skipped_row, read_row_values
from finboard_core.ids import IdFactory, generate_id
from finboard_core.models import (
    ColumnMapping,
    ImportResult,
    ParseDiagnostic,
    RawTable,
    Sale,
    SchemaKind,
)
from finboard_core.parsing.dates import Clock
from finboard_core.schema import AGGREGATED_RULES, detect_schema, detect_schema_kind, locate_first
from finboard_core.tables import header_labels, iter_records, read_table

logger = logging.getLogger(__name__)


def complete_aggregated_mapping(mapping: ColumnMapping, headers: list[str]) -> ColumnMapping:
    """Fill unmapped year / month / day / quantity roles from the headers.

    Roles the caller already set are left alone.
    """
    found: dict[str, str] = {}
    for rule in AGGREGATED_RULES:
        if getattr(mapping, rule.role):
            continue
        idx = locate_first(headers, rule)
        if idx is not None:
            found[rule.role] = headers[idx]
    return dataclasses.replace(mapping, **found) if found else mapping


def import_rows(
    table: RawTable,
    mapping: ColumnMapping,
    *,
    settings: Optional[ImportSettings] = None,
    id_factory: Optional[IdFactory] = None,
    clock: Optional[Clock] = None,
    schema: Optional[SchemaKind] = None,
) -> ImportResult:
    """Import every data row of ``table``.

    Args:
        table: Raw table, header in row 0.
        mapping: Column mapping, auto-detected or chosen by the user. It
            is used as given; detection is never re-run over it.
        settings: Strictness and split policy.
        id_factory: Produces sale ids (time-plus-random by default).
        clock: "Now" for the lenient date fallback.
        schema: Force a layout instead of inferring it from the headers.

    Returns:
        ImportResult with the sales in row order and one diagnostic per
        row that failed.

    Raises:
        IncompleteMappingError: Before any row is read, when a required
            role is unmapped or points at a missing header.
    """
    settings = settings or ImportSettings()
    new_id = id_factory or generate_id
    headers = header_labels(table)

    missing = mapping.missing_required(headers)
    if missing:
        logger.error("Import aborted, unmapped roles: %s (headers: %s)", missing, headers)
        raise IncompleteMappingError(missing)

    schema = schema or detect_schema_kind(headers)
    if schema is SchemaKind.AGGREGATED:
        mapping = complete_aggregated_mapping(mapping, headers)
    logger.debug("Importing %d rows as %s with %s", max(len(table) - 1, 0), schema.value, mapping)

    result = ImportResult(schema=schema)
    for row_index, record in iter_records(table):
        if is_skipped_row(record, settings.total_marker):
            continue
        try:
            if schema is SchemaKind.AGGREGATED:
                result.sales.extend(
                    expand_aggregated_row(
                        record, mapping, settings=settings, id_factory=new_id, clock=clock
                    )
                )
                continue
            values = read_row_values(record, mapping, settings, clock)
            if values.gross_value > 0 or values.net_value > 0:
                result.sales.append(
                    Sale(
                        id=new_id(),
                        date=values.date,
                        gross_value=values.gross_value,
                        net_value=values.net_value,
                        source=settings.source,
                    )
                )
        except Exception as e:
            logger.warning("Erro ao processar linha %d: %s", row_index + 1, e)
            result.diagnostics.append(ParseDiagnostic(row_index, str(e)))

    logger.info(
        "Imported %d sales (%d rows with errors)", result.imported, len(result.diagnostics)
    )
    return result


def import_file(
    path: Union[str, Path],
    mapping: Optional[ColumnMapping] = None,
    *,
    overrides: Optional[dict[str, Optional[str]]] = None,
    settings: Optional[ImportSettings] = None,
    id_factory: Optional[IdFactory] = None,
    clock: Optional[Clock] = None,
) -> ImportResult:
    """Read a CSV/xlsx file and import it.

    Args:
        path: File to read (first sheet for workbooks).
        mapping: Explicit mapping; auto-detected from the headers when None.
        overrides: Role -> header corrections applied on top of the mapping.
        settings, id_factory, clock: As for :func:`import_rows`.

    Raises:
        DataQualityError: If the file holds no rows at all.
        IncompleteMappingError: If the final mapping lacks a required role.
    """
    path = Path(path)
    table = read_table(path)
    if not table:
        raise DataQualityError(f"Arquivo vazio: {path}")

    headers = header_labels(table)
    detection = detect_schema(headers)
    if mapping is None:
        mapping = detection.mapping
        if detection.ambiguous_roles:
            logger.info(
                "Ambiguous columns in %s: %s", path.name, ", ".join(detection.ambiguous_roles)
            )
    if overrides:
        mapping = mapping.with_roles(overrides)

    logger.info("Processing %s (%s)", path, detection.schema.value)
    return import_rows(
        table,
        mapping,
        settings=settings,
        id_factory=id_factory,
        clock=clock,
        schema=detection.schema,
    )


def preview_rows(table: RawTable, limit: int = 5) -> RawTable:
    """First ``limit`` data rows, for showing the user before import."""
    return [list(r) for r in table[1 : 1 + limit]]
