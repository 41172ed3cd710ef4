"""Tests for raw table reading and writing."""

import datetime as dt

import pandas as pd
import pytest

from finboard_core.parsing.cleaning import cell_text, normalize_header, uniquify
from finboard_core.tables import (
    header_labels,
    iter_records,
    read_csv_text,
    read_table,
    read_workbook,
    write_csv,
    write_workbook,
)


class TestReadCsvText:
    def test_quoted_cells_keep_commas(self) -> None:
        text = 'Data,Valor Bruto,Valor Líquido\n15/03/2024,"1.234,56","14,16"\n'
        assert read_csv_text(text) == [
            ["Data", "Valor Bruto", "Valor Líquido"],
            ["15/03/2024", "1.234,56", "14,16"],
        ]

    def test_cells_are_trimmed(self) -> None:
        assert read_csv_text(" Data , Valor \n a , b ") == [["Data", "Valor"], ["a", "b"]]

    def test_bom_is_removed(self) -> None:
        assert read_csv_text("\ufeffData,Valor\n")[0] == ["Data", "Valor"]

    def test_trailing_blank_lines_are_dropped(self) -> None:
        assert read_csv_text("Data\n1\n\n\n") == [["Data"], ["1"]]

    def test_inner_blank_line_is_kept(self) -> None:
        assert read_csv_text("Data\n\n1\n") == [["Data"], [], ["1"]]

    def test_semicolon_delimiter(self) -> None:
        assert read_csv_text("Data;Valor\n01/01/2025;29,80\n", delimiter=";")[1] == ["01/01/2025", "29,80"]

    def test_empty(self) -> None:
        assert read_csv_text("") == []


class TestWorkbooks:
    def test_round_trip(self, daily_table) -> None:
        assert read_workbook(write_workbook(daily_table, sheet_name="Vendas Diárias")) == daily_table

    def test_native_values_become_brazilian_text(self, tmp_path) -> None:
        path = tmp_path / "native.xlsx"
        pd.DataFrame({"Data": ["15/03/2024"], "Vendas": [2], "Valor": [1234.5]}).to_excel(
            path, index=False
        )
        assert read_table(path) == [["Data", "Vendas", "Valor"], ["15/03/2024", "2", "1234,5"]]

    def test_ragged_rows_are_padded_on_write(self, tmp_path) -> None:
        table = [["A", "B", "C"], ["1"], ["2", "3", "4"]]
        path = tmp_path / "ragged.xlsx"
        path.write_bytes(write_workbook(table))
        assert read_table(path) == [["A", "B", "C"], ["1"], ["2", "3", "4"]]


class TestReadTable:
    def test_csv_file(self, tmp_path) -> None:
        path = tmp_path / "vendas.CSV"
        path.write_text("Data,Valor\n01/01/2025,\"29,80\"\n", encoding="utf-8")
        assert read_table(path)[1] == ["01/01/2025", "29,80"]

    def test_unsupported(self, tmp_path) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            read_table(tmp_path / "vendas.ods")

    def test_write_csv(self, tmp_path, daily_table) -> None:
        path = tmp_path / "out" / "vendas.csv"
        write_csv(daily_table, path)
        assert read_table(path) == daily_table


class TestRecords:
    def test_header_labels_are_unique(self) -> None:
        assert header_labels([["Valor", " Valor ", "Data"]]) == ["Valor", "Valor.1", "Data"]

    def test_header_labels_empty_table(self) -> None:
        assert header_labels([]) == []

    def test_iter_records(self) -> None:
        table = [["Data", "Valor"], ["01/01/2025"], ["02/01/2025", "1,00", "extra"]]
        assert list(iter_records(table)) == [
            (1, {"Data": "01/01/2025", "Valor": ""}),
            (2, {"Data": "02/01/2025", "Valor": "1,00"}),
        ]


class TestCleaning:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            (float("nan"), ""),
            (True, "1"),
            (2, "2"),
            (2.0, "2"),
            (29.8, "29,8"),
            (pd.Timestamp("2025-01-03"), "2025-01-03"),
            (pd.Timestamp("2025-01-03 10:30"), "2025-01-03T10:30:00"),
            (dt.datetime(2025, 1, 3, 10, 30, tzinfo=dt.timezone.utc), "2025-01-03T10:30:00+00:00"),
            (dt.date(2025, 1, 3), "2025-01-03"),
            ("  Valor\u200b ", "Valor"),
        ],
    )
    def test_cell_text(self, value, expected: str) -> None:
        assert cell_text(value) == expected

    def test_normalize_header(self) -> None:
        assert normalize_header("  Mês ") == "mês"
        assert normalize_header("Me\u0302s") == "mês"

    def test_uniquify(self) -> None:
        assert uniquify(["a", "a", "b", "a"]) == ["a", "a.1", "b", "a.2"]
