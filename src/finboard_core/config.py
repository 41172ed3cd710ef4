"""Import settings.

This module provides the single configuration object used by the import
orchestrator, the row expander and the converter. All configuration is
in memory; nothing is read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from finboard_core.exceptions import ConfigError
from finboard_core.models import SALE_SOURCES
from finboard_core.parsing.dates import SERIAL_DATE_FLOOR


class SplitMode(str, Enum):
    """How an aggregated total is shared across its sales."""

    DIVIDE = "divide"  # total / quantity, unrounded
    CENTS = "cents"  # rounded to cents, leftover cents on the first units


@dataclass(frozen=True)
class ImportSettings:
    """Knobs for one import run.

    Attributes:
        strict: Turn unparsable dates and amounts into row diagnostics
            instead of defaulting to "now" and 0.
        split_mode: How aggregated totals are split across the quantity.
        total_marker: First-cell text of the trailing summary row.
        serial_date_floor: Numbers at or below this are never read as
            spreadsheet serial dates.
        source: Source recorded on every imported sale.

    Examples:
        >>> ImportSettings(strict=True).split_mode
        <SplitMode.DIVIDE: 'divide'>
    """

    strict: bool = False
    split_mode: SplitMode = SplitMode.DIVIDE
    total_marker: str = "Total"
    serial_date_floor: float = SERIAL_DATE_FLOOR
    source: str = "pushinpay"

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "split_mode", SplitMode(self.split_mode))
        except ValueError as exc:
            choices = ", ".join(m.value for m in SplitMode)
            raise ConfigError(
                f"Invalid split_mode {self.split_mode!r}. Must be one of: {choices}"
            ) from exc
        if self.source not in SALE_SOURCES:
            raise ConfigError(f"Invalid source {self.source!r}. Must be one of: {SALE_SOURCES}")
        if not self.total_marker:
            raise ConfigError("total_marker must not be empty")
        if self.serial_date_floor < 0:
            raise ConfigError("serial_date_floor must be non-negative")
