"""Domain-specific exceptions for finboard-core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from FinboardError for easy catching.
"""


class FinboardError(Exception):
    """Base exception for all finboard-core errors.

    Users can catch this exception to handle any error raised by the
    import pipeline, the converter or the store.
    """

    pass


class ConfigError(FinboardError):
    """Raised when ImportSettings receives an invalid value."""

    pass


class DataQualityError(FinboardError):
    """Raised when an input table cannot be processed at all.

    This exception is raised when:
    - Required columns are missing from the header row
    - The column mapping leaves a required role unmapped
    - A batch transform produces no valid rows
    """

    pass


class IncompleteMappingError(DataQualityError):
    """Raised before any row is read when a required role is unmapped."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Mapeamento de colunas incompleto: " + ", ".join(self.missing)
        )


class MissingColumnsError(DataQualityError):
    """Raised by the converter when required headers are absent."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Formato de planilha inválido. Colunas necessárias: "
            "Ano, Mês, Dia, Vendas, Valor Vendas, Total Recebido "
            f"(faltando: {', '.join(self.missing)})"
        )


class EmptyConversionError(DataQualityError):
    """Raised by the converter when no row survives validation."""

    pass


class ParseError(FinboardError, ValueError):
    """Raised in strict mode when a cell cannot be parsed."""

    pass


class ValueParseError(ParseError):
    """Raised in strict mode for an unparsable monetary value."""

    pass


class DateParseError(ParseError):
    """Raised in strict mode when no date strategy succeeds."""

    pass


class StoreError(FinboardError):
    """Raised when the JSON store cannot be read or decoded."""

    pass
