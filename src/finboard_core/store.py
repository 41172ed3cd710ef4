"""Key-value persistence for the dashboard document.

The dashboard keeps everything (sales, fixed costs, variable expenses and
the user profile) as one JSON document under one key. :class:`JsonStore`
maps that onto a JSON file so the import pipeline's callers can
load, replace and clear it. The import pipeline itself never writes here.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Union

from finboard_core.exceptions import StoreError
from finboard_core.models import FinancialData, Sale

logger = logging.getLogger(__name__)

STORAGE_KEY = "financial-data"


class JsonStore:
    """A JSON file holding ``{key: document}``.

    Example:
        >>> store = JsonStore("data/finboard.json")
        >>> data = store.get_data()
        >>> data.sales.append(sale)
        >>> store.save_data(data)
    """

    def __init__(self, path: Union[str, Path], key: str = STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            content = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in {self.path}: {e}") from e
        if not isinstance(content, dict):
            raise StoreError(f"Expected a JSON object in {self.path}")
        return content

    def get_data(self) -> FinancialData:
        """Load the document, or an empty one when nothing is stored."""
        raw = self._read_all().get(self.key)
        if raw is None:
            return FinancialData()
        try:
            return FinancialData.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed document under {self.key!r}: {e}") from e

    def save_data(self, data: FinancialData) -> None:
        """Replace the whole document."""
        content = self._read_all()
        content[self.key] = data.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(content, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("Saved %d sales to %s", len(data.sales), self.path)

    def clear_data(self) -> None:
        content = self._read_all()
        if content.pop(self.key, None) is None:
            return
        self.path.write_text(json.dumps(content, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Cleared %r from %s", self.key, self.path)


def append_sales(store: JsonStore, sales: Iterable[Sale]) -> FinancialData:
    """Append imported sales, keeping insertion order, and save."""
    data = store.get_data()
    before = len(data.sales)
    data.sales.extend(sales)
    store.save_data(data)
    logger.info("Stored %d new sales (%d total)", len(data.sales) - before, len(data.sales))
    return data


def delete_sale(store: JsonStore, sale_id: str) -> bool:
    """Remove one sale by id. Returns False when no sale has that id."""
    data = store.get_data()
    kept = [s for s in data.sales if s.id != sale_id]
    if len(kept) == len(data.sales):
        return False
    data.sales = kept
    store.save_data(data)
    return True
