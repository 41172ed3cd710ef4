"""finboard-core - sales spreadsheet import for a small-business finance dashboard.

This package turns the spreadsheets small digital businesses download from
their payment platform into individual sale records, and computes the KPIs
shown on the dashboard.

Two sheet layouts are supported:

- **Daily-aggregated**: ``Ano, Mês, Dia, Vendas, Valor Vendas, Total Recebido``,
  one row per day. Each row is expanded into one sale per unit sold.
- **Transactional** (PushinPay): ``Data, Valor Bruto, Valor Líquido``, one row
  per sale.

Module Structure:
    finboard_core.parsing: Brazilian-locale number and date parsers
    finboard_core.schema: Layout and column-role detection
    finboard_core.expand: Aggregated-row expansion
    finboard_core.importer: Import orchestration
    finboard_core.converter: Daily sheet -> PushinPay sheet, example templates
    finboard_core.tables: CSV/xlsx reading and writing
    finboard_core.kpis: Dashboard KPIs
    finboard_core.store: JSON key-value persistence

Quick Start:
    >>> from finboard_core import detect_schema, import_rows, read_table
    >>>
    >>> table = read_table("vendas.xlsx")
    >>> detection = detect_schema(table[0])
    >>> detection = detection.with_overrides(
    ...     gross_value="Valor Vendas", net_value="Total Recebido"
    ... )
    >>> mapping = detection.mapping
    >>> result = import_rows(table, mapping)
    >>> result.imported, result.diagnostics
"""

__version__ = "0.1.0"

from finboard_core.config import ImportSettings, SplitMode
from finboard_core.converter import (
    convert_aggregated_to_transactional,
    generate_daily_sales_example,
    generate_pushinpay_example,
)
from finboard_core.exceptions import (
    ConfigError,
    DataQualityError,
    DateParseError,
    EmptyConversionError,
    FinboardError,
    IncompleteMappingError,
    MissingColumnsError,
    ParseError,
    StoreError,
    ValueParseError,
)
from finboard_core.expand import expand_aggregated_row
from finboard_core.importer import import_file, import_rows
from finboard_core.models import ColumnMapping, ImportResult, ParseDiagnostic, Sale, SchemaKind
from finboard_core.parsing import parse_date, parse_monetary
from finboard_core.schema import detect_schema
from finboard_core.tables import read_table

__all__ = [
    "ColumnMapping",
    "ConfigError",
    "DataQualityError",
    "DateParseError",
    "EmptyConversionError",
    "FinboardError",
    "ImportResult",
    "ImportSettings",
    "IncompleteMappingError",
    "MissingColumnsError",
    "ParseDiagnostic",
    "ParseError",
    "Sale",
    "SchemaKind",
    "SplitMode",
    "StoreError",
    "ValueParseError",
    "__version__",
    "convert_aggregated_to_transactional",
    "detect_schema",
    "expand_aggregated_row",
    "generate_daily_sales_example",
    "generate_pushinpay_example",
    "import_file",
    "import_rows",
    "parse_date",
    "parse_monetary",
    "read_table",
]
