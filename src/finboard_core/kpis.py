"""Dashboard KPIs: revenue, expenses, profit and the series behind the charts.

Everything here reads the stored collections and returns plain numbers or
DataFrames; nothing is written back.

Examples:
    >>> from finboard_core.models import Sale
    >>> sales = [Sale("a", "2025-01-01T00:00:00.000Z", 14.9, 14.16)]
    >>> calculate_kpis(sales, [], []).net_profit
    14.16
    >>> format_currency(1234.5)
    'R$ 1.234,50'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Sequence

import pandas as pd

from finboard_core.models import FixedCost, Sale, VariableExpense

logger = logging.getLogger(__name__)

# Fixed costs are prorated over a period in 30-day months
DAYS_PER_MONTH = 30

CATEGORY_LABELS = {
    "traffic": "Tráfego",
    "domain": "Domínio",
    "tools": "Ferramentas",
    "content": "Conteúdo",
    "other": "Outros",
}


@dataclass(frozen=True)
class KPIData:
    gross_revenue: float
    net_revenue: float
    total_expenses: float
    net_profit: float
    average_ticket: float
    total_sales: int
    roi: float
    margin_percentage: float


def _utc(ts: datetime) -> pd.Timestamp:
    t = pd.Timestamp(ts)
    return t.tz_localize(timezone.utc) if t.tzinfo is None else t.tz_convert(timezone.utc)


def _dated_values(items: Sequence[Sale | VariableExpense], value_attr: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.to_datetime([i.date for i in items], utc=True, errors="coerce"),
            "value": [float(getattr(i, value_attr)) for i in items],
        }
    )


def calculate_kpis(
    sales: Sequence[Sale],
    fixed_costs: Sequence[FixedCost],
    variable_expenses: Sequence[VariableExpense],
    period: Optional[tuple[datetime, datetime]] = None,
) -> KPIData:
    """Summarize revenue, expenses and profitability.

    Args:
        sales: Stored sales.
        fixed_costs: Recurring costs; counted in full when there is no
            period, prorated over the period otherwise (monthly cost x
            months, annual cost x months / 12).
        variable_expenses: One-off expenses.
        period: Optional inclusive (start, end); naive datetimes are UTC.

    Returns:
        KPIData. ROI and margin are percentages and are 0 when their
        denominator is 0.
    """
    sales_df = pd.DataFrame(
        {
            "date": pd.to_datetime([s.date for s in sales], utc=True, errors="coerce"),
            "gross": [s.gross_value for s in sales],
            "net": [s.net_value for s in sales],
        }
    )
    expenses_df = _dated_values(variable_expenses, "value")
    fixed_total = sum(c.value for c in fixed_costs)

    if period is not None:
        start, end = _utc(period[0]), _utc(period[1])
        sales_df = sales_df[(sales_df["date"] >= start) & (sales_df["date"] <= end)]
        expenses_df = expenses_df[(expenses_df["date"] >= start) & (expenses_df["date"] <= end)]
        months = (end - start).total_seconds() / (86400 * DAYS_PER_MONTH)
        fixed_total = sum(
            c.value * months if c.type == "monthly" else c.value * (months / 12)
            for c in fixed_costs
        )

    gross_revenue = float(sales_df["gross"].sum())
    net_revenue = float(sales_df["net"].sum())
    total_expenses = float(expenses_df["value"].sum()) + fixed_total
    net_profit = net_revenue - total_expenses
    total_sales = int(len(sales_df))
    logger.debug(
        "KPIs over %d sales, %d expenses, fixed costs %.2f", total_sales, len(expenses_df), fixed_total
    )

    return KPIData(
        gross_revenue=gross_revenue,
        net_revenue=net_revenue,
        total_expenses=total_expenses,
        net_profit=net_profit,
        average_ticket=gross_revenue / total_sales if total_sales > 0 else 0.0,
        total_sales=total_sales,
        roi=(net_profit / total_expenses) * 100 if total_expenses > 0 else 0.0,
        margin_percentage=(net_profit / gross_revenue) * 100 if gross_revenue > 0 else 0.0,
    )


def daily_sales_series(
    sales: Sequence[Sale], days: int = 30, today: Optional[date] = None
) -> pd.DataFrame:
    """Net sales per UTC day over the last ``days`` days, zero-filled.

    Returns:
        DataFrame with columns ``date`` (YYYY-MM-DD), ``value`` and
        ``formatted_date`` (DD/MM), one row per day from ``today - days``
        to ``today`` inclusive.
    """
    today = today or datetime.now(timezone.utc).date()
    index = pd.date_range(end=pd.Timestamp(today), periods=days + 1, freq="D")

    df = _dated_values(sales, "net_value").dropna(subset=["date"]).copy()
    df["day"] = df["date"].dt.tz_localize(None).dt.normalize()
    totals = df.groupby("day")["value"].sum().reindex(index, fill_value=0.0)

    return pd.DataFrame(
        {
            "date": index.strftime("%Y-%m-%d"),
            "value": totals.to_numpy(dtype=float),
            "formatted_date": index.strftime("%d/%m"),
        }
    )


def expense_distribution(expenses: Sequence[VariableExpense]) -> pd.DataFrame:
    """Total and share of variable expenses per category.

    Returns:
        DataFrame with columns ``category`` (Portuguese label), ``value``
        and ``percentage``, in order of first appearance.
    """
    if not expenses:
        return pd.DataFrame(columns=["category", "value", "percentage"])
    df = pd.DataFrame({"category": [e.category for e in expenses], "value": [e.value for e in expenses]})
    grouped = df.groupby("category", sort=False)["value"].sum().reset_index()
    total = float(df["value"].sum())
    grouped["percentage"] = grouped["value"] / total * 100 if total else 0.0
    grouped["category"] = grouped["category"].map(lambda c: CATEGORY_LABELS.get(c, c))
    return grouped


def format_currency(value: float) -> str:
    """Brazilian Real, e.g. ``R$ 1.234,56``."""
    s = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-R$ {s}" if value < 0 else f"R$ {s}"


def format_percentage(value: float) -> str:
    """Examples:
    >>> format_percentage(12.345)
    '12.3%'
    """
    return f"{value:.1f}%"
