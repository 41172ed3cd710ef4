"""Shared fixtures: deterministic ids, a frozen clock and the daily-sales template."""

from datetime import datetime, timezone

import pytest

from finboard_core.converter import generate_daily_sales_example
from finboard_core.ids import SequentialIds
from finboard_core.models import ColumnMapping

FROZEN_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def frozen_clock():
    """A clock that always returns 2025-06-01 12:00 UTC."""
    return lambda: FROZEN_NOW


@pytest.fixture
def daily_table() -> list[list[str]]:
    return generate_daily_sales_example()


@pytest.fixture
def aggregated_mapping() -> ColumnMapping:
    return ColumnMapping(
        date="Ano",
        gross_value="Valor Vendas",
        net_value="Total Recebido",
        year="Ano",
        month="Mês",
        day="Dia",
        quantity="Vendas",
    )
