"""Example: Import a daily-sales sheet into the dashboard store

This example walks through the interactive import the way the dashboard
does it:
1. Read the sheet and detect its layout and column roles
2. Fix the roles the detector could not fill
3. Import, print the row diagnostics, and append the sales to the store

Prerequisites:
- A daily-sales sheet (run ``finboard example daily`` to get one)
- Write access to data/ for the JSON store
"""

from pathlib import Path

from finboard_core import ImportSettings, SplitMode, detect_schema, import_rows, read_table
from finboard_core.store import JsonStore, append_sales

sheet = Path("exemplo-vendas-diarias.xlsx")  # MODIFY AS NEEDED
store = JsonStore(Path("data/finboard.json"))

table = read_table(sheet)
detection = detect_schema(table[0])
print(f"Layout: {detection.schema.value}")

for role, match in detection.matches.items():
    print(f"  {role:<12} {match.outcome.value:<9} {match.label or '-'}")

# On the daily template the last gross-value candidate, "Total Recebido", wins
# the guess and leaves the net value unmapped, so both are picked by hand
if detection.absent_roles:
    print(f"\nUnmapped: {', '.join(detection.absent_roles)}")
    detection = detection.with_overrides(gross_value="Valor Vendas", net_value="Total Recebido")

settings = ImportSettings(split_mode=SplitMode.CENTS)
result = import_rows(table, detection.mapping, settings=settings)

print(f"\nImported {result.imported} sales")
for d in result.diagnostics:
    print(f"  - linha {d.row_index + 1}: {d.message}")

if result.sales:
    data = append_sales(store, result.sales)
    print(f"Store now holds {len(data.sales)} sales")
