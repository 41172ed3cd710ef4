"""Tests for the JSON key-value store."""

import json

import pytest

from finboard_core.exceptions import StoreError
from finboard_core.models import FinancialData, FixedCost, Sale, UserProfile
from finboard_core.store import STORAGE_KEY, JsonStore, append_sales, delete_sale


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / "data" / "finboard.json")


def make_sales(n: int, start: int = 1) -> list:
    return [
        Sale(f"sale-{i}", "2025-01-01T00:00:00.000Z", 14.90, 14.16) for i in range(start, start + n)
    ]


class TestJsonStore:
    def test_missing_file_is_empty(self, store) -> None:
        data = store.get_data()
        assert data.sales == []
        assert data.user_profile == UserProfile()

    def test_save_and_load(self, store) -> None:
        data = FinancialData(
            sales=make_sales(2),
            fixed_costs=[FixedCost("f1", "Hospedagem", 30.0, "monthly", "tools", "2025-01-05")],
            user_profile=UserProfile(name="Ana", email="ana@example.com"),
        )
        store.save_data(data)
        assert store.get_data() == data

    def test_document_layout(self, store) -> None:
        store.save_data(FinancialData(sales=make_sales(1)))
        raw = json.loads(store.path.read_text(encoding="utf-8"))
        doc = raw[STORAGE_KEY]
        assert set(doc) == {"sales", "fixedCosts", "variableExpenses", "userProfile"}
        assert doc["sales"][0] == {
            "id": "sale-1",
            "date": "2025-01-01T00:00:00.000Z",
            "grossValue": 14.90,
            "netValue": 14.16,
            "source": "pushinpay",
        }

    def test_other_keys_are_kept(self, store) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        store.save_data(FinancialData())
        store.clear_data()
        assert json.loads(store.path.read_text(encoding="utf-8")) == {"theme": "dark"}

    def test_clear_without_data(self, store) -> None:
        store.clear_data()
        assert not store.path.exists()

    def test_invalid_json(self, store) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError, match="Invalid JSON"):
            store.get_data()

    def test_malformed_document(self, store) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({STORAGE_KEY: {"sales": [{"id": "x"}]}}), encoding="utf-8")
        with pytest.raises(StoreError, match="Malformed"):
            store.get_data()


class TestSalesHelpers:
    def test_append_keeps_order(self, store) -> None:
        append_sales(store, make_sales(2))
        append_sales(store, make_sales(3, start=3))
        assert [s.id for s in store.get_data().sales] == [f"sale-{i}" for i in range(1, 6)]

    def test_delete_sale(self, store) -> None:
        append_sales(store, make_sales(3))
        assert delete_sale(store, "sale-2") is True
        assert [s.id for s in store.get_data().sales] == ["sale-1", "sale-3"]

    def test_delete_unknown_sale(self, store) -> None:
        append_sales(store, make_sales(1))
        assert delete_sale(store, "nope") is False
        assert len(store.get_data().sales) == 1
