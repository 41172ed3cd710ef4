"""Example: Dashboard KPIs over the stored document

Loads the JSON store written by import_daily_sales.py and prints the
numbers behind the dashboard cards and charts for January 2025.
"""

from datetime import date, datetime
from pathlib import Path

from finboard_core.kpis import (
    calculate_kpis,
    daily_sales_series,
    expense_distribution,
    format_currency,
    format_percentage,
)
from finboard_core.store import JsonStore

data = JsonStore(Path("data/finboard.json")).get_data()

period = (datetime(2025, 1, 1), datetime(2025, 1, 31))  # MODIFY AS NEEDED
kpis = calculate_kpis(data.sales, data.fixed_costs, data.variable_expenses, period=period)

print(f"Vendas:          {kpis.total_sales}")
print(f"Receita bruta:   {format_currency(kpis.gross_revenue)}")
print(f"Receita líquida: {format_currency(kpis.net_revenue)}")
print(f"Despesas:        {format_currency(kpis.total_expenses)}")
print(f"Lucro:           {format_currency(kpis.net_profit)}")
print(f"Ticket médio:    {format_currency(kpis.average_ticket)}")
print(f"ROI:             {format_percentage(kpis.roi)}")
print(f"Margem:          {format_percentage(kpis.margin_percentage)}")

print("\nVendas por dia:")
series = daily_sales_series(data.sales, days=30, today=date(2025, 1, 31))
print(series[series["value"] > 0].to_string(index=False))

print("\nDespesas por categoria:")
print(expense_distribution(data.variable_expenses).to_string(index=False))
