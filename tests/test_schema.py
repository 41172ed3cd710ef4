"""Tests for layout detection and keyword-based column role inference."""

import pytest

from finboard_core.models import ColumnMapping, SchemaKind
from finboard_core.schema import (
    CONVERTER_RULES,
    IMPORT_RULES,
    KeywordRule,
    MatchOutcome,
    detect_schema,
    detect_schema_kind,
    locate_columns,
)

DAILY_HEADERS = ["Ano", "Mês", "Dia", "Vendas", "Valor Vendas", "Total Recebido"]
PUSHINPAY_HEADERS = ["Data", "Valor Bruto", "Valor Líquido"]


class TestSchemaKind:
    def test_daily_template_is_aggregated(self) -> None:
        assert detect_schema_kind(DAILY_HEADERS) is SchemaKind.AGGREGATED

    def test_any_marker_is_enough(self) -> None:
        assert detect_schema_kind(["Dia", "Bruto", "Líquido"]) is SchemaKind.AGGREGATED
        assert detect_schema_kind(["mes", "valor"]) is SchemaKind.AGGREGATED

    def test_transactional(self) -> None:
        assert detect_schema_kind(PUSHINPAY_HEADERS) is SchemaKind.TRANSACTIONAL

    def test_empty_headers(self) -> None:
        assert detect_schema_kind([]) is SchemaKind.TRANSACTIONAL


class TestAggregatedDetection:
    """The daily template's extra roles are found on their own."""

    @pytest.fixture
    def detection(self):
        return detect_schema(DAILY_HEADERS)

    def test_quantity_is_vendas(self, detection) -> None:
        assert detection.mapping.quantity == "Vendas"
        assert detection.matches["quantity"].outcome is MatchOutcome.FOUND

    def test_split_date_roles(self, detection) -> None:
        assert detection.mapping.year == "Ano"
        assert detection.mapping.month == "Mês"
        assert detection.mapping.day == "Dia"

    def test_date_takes_last_candidate(self, detection) -> None:
        match = detection.matches["date"]
        assert match.outcome is MatchOutcome.AMBIGUOUS
        assert match.candidates == ("Ano", "Mês", "Dia")
        assert match.label == "Dia"

    def test_gross_is_ambiguous(self, detection) -> None:
        match = detection.matches["gross_value"]
        assert match.outcome is MatchOutcome.AMBIGUOUS
        assert match.candidates == ("Valor Vendas", "Total Recebido")
        assert detection.mapping.gross_value == "Total Recebido"

    def test_net_is_left_for_the_user(self, detection) -> None:
        """'Total Recebido' is claimed by the gross rule, so net stays unmapped."""
        assert detection.mapping.net_value is None
        assert "net_value" in detection.absent_roles
        assert detection.mapping.missing_required(DAILY_HEADERS) == ["net_value"]

    def test_override_completes_mapping(self, detection) -> None:
        fixed = detection.with_overrides(gross_value="Valor Vendas", net_value="Total Recebido")
        assert fixed.mapping.is_complete
        assert fixed.mapping.gross_value == "Valor Vendas"
        assert fixed.mapping.quantity == "Vendas"


class TestTransactionalDetection:
    def test_pushinpay_headers(self) -> None:
        detection = detect_schema(PUSHINPAY_HEADERS)
        assert detection.schema is SchemaKind.TRANSACTIONAL
        assert detection.mapping == ColumnMapping(
            date="Data", gross_value="Valor Bruto", net_value="Valor Líquido"
        )
        assert detection.ambiguous_roles == []
        assert detection.absent_roles == []

    def test_english_headers(self) -> None:
        mapping = detect_schema(["Date", "Gross", "Net"]).mapping
        assert (mapping.date, mapping.gross_value, mapping.net_value) == ("Date", "Gross", "Net")

    def test_no_extra_roles_on_transactional(self) -> None:
        detection = detect_schema(PUSHINPAY_HEADERS)
        assert "quantity" not in detection.matches
        assert detection.mapping.quantity is None

    def test_header_claimed_by_first_rule(self) -> None:
        """'Total Líquido' matches gross ("total") before net ("líquido")."""
        mapping = detect_schema(["Data", "Total Líquido"]).mapping
        assert mapping.gross_value == "Total Líquido"
        assert mapping.net_value is None

    def test_last_candidate_wins(self) -> None:
        detection = detect_schema(["Data", "Total", "Valor Bruto", "Valor Líquido"])
        match = detection.matches["gross_value"]
        assert match.outcome is MatchOutcome.AMBIGUOUS
        assert match.candidates == ("Total", "Valor Bruto")
        assert match.label == "Valor Bruto"

    def test_later_header_beats_stronger_keyword(self) -> None:
        """'Total' wins over 'Valor Bruto' because it comes later in the row."""
        detection = detect_schema(["Data", "Valor Bruto", "Total", "Líquido"])
        match = detection.matches["gross_value"]
        assert match.candidates == ("Valor Bruto", "Total")
        assert match.label == "Total"

    def test_equal_rank_picks_later_header(self) -> None:
        detection = detect_schema(["Data", "Bruto", "Valor Bruto", "Líquido"])
        assert detection.mapping.gross_value == "Valor Bruto"

    def test_headers_are_normalized(self) -> None:
        detection = detect_schema(["  DATA ", "VALOR BRUTO", "valor líquido"])
        assert detection.mapping.date == "  DATA "
        assert detection.mapping.gross_value == "VALOR BRUTO"

    def test_blank_headers_are_ignored(self) -> None:
        detection = detect_schema(["", "Data", "Bruto", "Líquido"])
        assert detection.mapping.date == "Data"


class TestKeywordRule:
    def test_rank_is_keyword_position(self) -> None:
        rule = IMPORT_RULES[2]
        assert rule.role == "net_value"
        assert rule.rank("valor líquido") == 0
        assert rule.rank("valor") == 4
        assert rule.rank("data") is None

    def test_require_all(self) -> None:
        rule = KeywordRule("gross_value", ("valor", "vendas"), require_all=True)
        assert rule.rank("valor vendas") == 0
        assert rule.rank("vendas") is None

    def test_exclude(self) -> None:
        rule = KeywordRule("quantity", ("vendas",), exclude=("valor",))
        assert rule.rank("vendas") == 0
        assert rule.rank("valor vendas") is None


class TestConverterRules:
    def test_daily_template(self) -> None:
        cols = locate_columns(DAILY_HEADERS, CONVERTER_RULES)
        assert cols == {
            "year": 0,
            "month": 1,
            "day": 2,
            "quantity": 3,
            "gross_value": 4,
            "net_value": 5,
        }

    def test_single_keywords_are_not_enough(self) -> None:
        cols = locate_columns(["Ano", "Mês", "Dia", "Vendas", "Valor", "Recebido"], CONVERTER_RULES)
        assert cols["gross_value"] is None
        assert cols["net_value"] is None

    def test_unaccented_month(self) -> None:
        cols = locate_columns(["ano", "mes", "dia"], CONVERTER_RULES)
        assert cols["month"] == 1
