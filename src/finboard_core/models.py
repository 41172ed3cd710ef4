"""Domain types shared across the import pipeline.

Sale records are what the pipeline produces. The column mapping, schema
kind and diagnostics are transient and live only for one import. The
expense and profile types describe the rest of the stored document used
by :mod:`finboard_core.store` and :mod:`finboard_core.kpis`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Literal, Optional

SaleSource = Literal["pushinpay", "manual"]
SALE_SOURCES: tuple[str, ...] = ("pushinpay", "manual")

RawTable = list[list[str]]


class SchemaKind(str, Enum):
    """Layout of an input sheet."""

    AGGREGATED = "daily-aggregated"  # one row per day with a sales count
    TRANSACTIONAL = "transactional"  # one row per sale


@dataclass(frozen=True)
class Sale:
    """One sale as stored by the dashboard.

    Attributes:
        id: Opaque unique identifier.
        date: ISO-8601 timestamp string.
        gross_value: Amount charged to the customer.
        net_value: Amount received after fees.
        source: "pushinpay" for imported rows, "manual" for typed-in ones.
    """

    id: str
    date: str
    gross_value: float
    net_value: float
    source: SaleSource = "pushinpay"

    def __post_init__(self) -> None:
        if self.gross_value < 0 or self.net_value < 0:
            raise ValueError(
                f"Valores negativos não são permitidos: bruto={self.gross_value}, "
                f"líquido={self.net_value}"
            )
        if self.source not in SALE_SOURCES:
            raise ValueError(f"Origem inválida: {self.source!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "grossValue": self.gross_value,
            "netValue": self.net_value,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sale:
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            gross_value=float(data["grossValue"]),
            net_value=float(data["netValue"]),
            source=data.get("source", "manual"),
        )


@dataclass(frozen=True)
class ParseDiagnostic:
    """A row that was skipped because it could not be processed.

    Attributes:
        row_index: Index in the raw table (the header is row 0).
        message: Human-readable reason.
    """

    row_index: int
    message: str


# Roles every import needs, in the order they are reported when missing
REQUIRED_ROLES: tuple[str, ...] = ("date", "gross_value", "net_value")

# Camel-case spellings accepted from callers and the CLI
_ROLE_ALIASES = {
    "grossValue": "gross_value",
    "netValue": "net_value",
}


@dataclass(frozen=True)
class ColumnMapping:
    """Role -> header label. Each role holds at most one label."""

    date: Optional[str] = None
    gross_value: Optional[str] = None
    net_value: Optional[str] = None
    year: Optional[str] = None
    month: Optional[str] = None
    day: Optional[str] = None
    quantity: Optional[str] = None

    @classmethod
    def _roles(cls, data: dict[str, Optional[str]]) -> dict[str, Optional[str]]:
        known = {f.name for f in fields(cls)}
        out: dict[str, Optional[str]] = {}
        for key, label in data.items():
            role = _ROLE_ALIASES.get(key, key)
            if role not in known:
                raise ValueError(f"Papel de coluna desconhecido: {key!r}")
            out[role] = label or None
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Optional[str]]) -> ColumnMapping:
        """Build a mapping from role names; empty labels count as unmapped.

        Raises:
            ValueError: On an unknown role name.
        """
        return cls(**cls._roles(data))

    def with_roles(self, data: dict[str, Optional[str]]) -> ColumnMapping:
        """Copy with the given roles replaced; other roles are kept.

        Examples:
            >>> ColumnMapping(date="Data").with_roles({"netValue": "Recebido"}).net_value
            'Recebido'
        """
        return replace(self, **self._roles(data))

    def to_dict(self) -> dict[str, Optional[str]]:
        return asdict(self)

    def missing_required(self, headers: Optional[list[str]] = None) -> list[str]:
        """Required roles that are unmapped, or mapped to a label not in ``headers``."""
        missing = []
        for role in REQUIRED_ROLES:
            label = getattr(self, role)
            if not label or (headers is not None and label not in headers):
                missing.append(role)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_required()


@dataclass
class ImportResult:
    """Outcome of one import: the sales to persist plus skipped-row notes."""

    sales: list[Sale] = field(default_factory=list)
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)
    schema: SchemaKind = SchemaKind.TRANSACTIONAL

    @property
    def imported(self) -> int:
        return len(self.sales)


# --------------------------- rest of the stored document ---------------------------
FixedCostType = Literal["monthly", "annual"]
ExpenseCategory = Literal["traffic", "domain", "tools", "content", "other"]
ExpenseType = Literal["business", "personal"]


@dataclass(frozen=True)
class FixedCost:
    id: str
    name: str
    value: float
    type: FixedCostType
    category: str
    recurring_date: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "type": self.type,
            "category": self.category,
            "recurringDate": self.recurring_date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FixedCost:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            value=float(data["value"]),
            type=data["type"],
            category=str(data.get("category", "")),
            recurring_date=str(data.get("recurringDate", "")),
        )


@dataclass(frozen=True)
class VariableExpense:
    id: str
    name: str
    value: float
    category: ExpenseCategory
    date: str
    type: ExpenseType = "business"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VariableExpense:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            value=float(data["value"]),
            category=data["category"],
            date=str(data["date"]),
            type=data.get("type", "business"),
        )


@dataclass
class UserProfile:
    name: str = "Usuário"
    avatar: str = ""
    email: str = ""


@dataclass
class FinancialData:
    """The whole persisted document."""

    sales: list[Sale] = field(default_factory=list)
    fixed_costs: list[FixedCost] = field(default_factory=list)
    variable_expenses: list[VariableExpense] = field(default_factory=list)
    user_profile: UserProfile = field(default_factory=UserProfile)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sales": [s.to_dict() for s in self.sales],
            "fixedCosts": [c.to_dict() for c in self.fixed_costs],
            "variableExpenses": [e.to_dict() for e in self.variable_expenses],
            "userProfile": asdict(self.user_profile),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FinancialData:
        profile = data.get("userProfile") or {}
        return cls(
            sales=[Sale.from_dict(s) for s in data.get("sales", [])],
            fixed_costs=[FixedCost.from_dict(c) for c in data.get("fixedCosts", [])],
            variable_expenses=[
                VariableExpense.from_dict(e) for e in data.get("variableExpenses", [])
            ],
            user_profile=UserProfile(
                name=profile.get("name", "Usuário"),
                avatar=profile.get("avatar", ""),
                email=profile.get("email", ""),
            ),
        )
