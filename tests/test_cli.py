"""End-to-end tests for the finboard command line."""

import json

import pytest

from finboard_core.cli import main
from finboard_core.converter import generate_pushinpay_example
from finboard_core.store import JsonStore
from finboard_core.tables import read_table


@pytest.fixture
def daily_xlsx(tmp_path):
    out = tmp_path / "diario.xlsx"
    assert main(["--quiet", "example", "daily", "--out", str(out)]) == 0
    return out


def test_example_writes_workbook(daily_xlsx, daily_table) -> None:
    assert read_table(daily_xlsx) == daily_table


def test_detect(daily_xlsx, capsys) -> None:
    assert main(["--quiet", "detect", str(daily_xlsx), "--preview", "1"]) == 0
    out = capsys.readouterr().out
    assert "schema: daily-aggregated" in out
    assert "net_value" in out and "absent" in out
    assert "2025 | Janeiro | 1" in out


def test_import_to_stdout(daily_xlsx, capsys) -> None:
    code = main(["--quiet", "import", str(daily_xlsx), "--map", "gross_value=Valor Vendas",
                 "--map", "net_value=Total Recebido"])
    assert code == 0
    sales = json.loads(capsys.readouterr().out)
    assert len(sales) == 9
    assert sales[0]["grossValue"] == pytest.approx(14.9)
    assert sales[0]["source"] == "pushinpay"


def test_import_into_store(daily_xlsx, tmp_path) -> None:
    store_path = tmp_path / "finboard.json"
    args = ["--quiet", "import", str(daily_xlsx), "--store", str(store_path),
            "--map", "gross_value=Valor Vendas", "--map", "net_value=Total Recebido",
            "--split", "cents"]
    assert main(args) == 0
    sales = JsonStore(store_path).get_data().sales
    assert [s.net_value for s in sales[:2]] == [14.16, 14.15]


def test_import_without_net_mapping_fails(daily_xlsx) -> None:
    assert main(["--quiet", "import", str(daily_xlsx)]) == 1


def test_bad_override_syntax(daily_xlsx) -> None:
    assert main(["--quiet", "import", str(daily_xlsx), "--map", "net_value"]) == 2


def test_convert_to_xlsx(daily_xlsx, tmp_path) -> None:
    out = tmp_path / "pushinpay.xlsx"
    assert main(["--quiet", "convert", str(daily_xlsx), "--out", str(out), "--split", "cents"]) == 0
    table = read_table(out)
    assert len(table) == 10
    example = generate_pushinpay_example()
    assert table[: len(example)] == example


def test_convert_to_csv(daily_xlsx, tmp_path) -> None:
    out = tmp_path / "pushinpay.csv"
    assert main(["--quiet", "convert", str(daily_xlsx), "--out", str(out)]) == 0
    assert len(read_table(out)) == 10


def test_convert_rejects_transactional_sheet(tmp_path) -> None:
    src = tmp_path / "pushinpay.csv"
    src.write_text('Data,Valor Bruto,Valor Líquido\n15/03/2024,"14,90","14,16"\n', encoding="utf-8")
    assert main(["--quiet", "convert", str(src), "--out", str(tmp_path / "out.xlsx")]) == 1


def test_missing_input_file(tmp_path) -> None:
    assert main(["--quiet", "detect", str(tmp_path / "nope.csv")]) == 1
