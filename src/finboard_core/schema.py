"""Header inspection: which layout a sheet uses and which column plays which role.

Two layouts are recognised:

- **daily-aggregated**: ``Ano, Mês, Dia, Vendas, Valor Vendas, Total Recebido``,
  one row per day with the number of sales and the day's totals.
- **transactional**: ``Data, Valor Bruto, Valor Líquido``, one row per sale.

Column roles are inferred from keyword rules. Two rule tables exist and
are deliberately kept apart:

- :data:`IMPORT_RULES` is permissive (any single keyword) and feeds the
  interactive import, where the user can still correct the guess.
- :data:`CONVERTER_RULES` requires keyword combinations and feeds the
  batch converter, whose input is the fixed daily-sales template.

Examples:
    >>> result = detect_schema(["Ano", "Mês", "Dia", "Vendas", "Valor Vendas", "Total Recebido"])
    >>> result.schema
    <SchemaKind.AGGREGATED: 'daily-aggregated'>
    >>> result.mapping.quantity
    'Vendas'
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from finboard_core.models import ColumnMapping, SchemaKind
from finboard_core.parsing.cleaning import normalize_header

logger = logging.getLogger(__name__)

# Any header containing one of these marks the sheet as daily-aggregated
AGGREGATED_MARKERS: tuple[str, ...] = ("ano", "mês", "mes", "dia")


class MatchOutcome(str, Enum):
    FOUND = "found"
    AMBIGUOUS = "ambiguous"
    ABSENT = "absent"


@dataclass(frozen=True)
class KeywordRule:
    """Assigns a role to headers containing certain keywords.

    Attributes:
        role: ColumnMapping field the rule fills.
        keywords: Lower-case substrings, in priority order.
        require_all: Every keyword must appear (otherwise any one is enough).
        exclude: Substrings that disqualify a header.
    """

    role: str
    keywords: tuple[str, ...]
    require_all: bool = False
    exclude: tuple[str, ...] = ()

    def rank(self, header: str) -> Optional[int]:
        """Index of the first keyword found in a normalized header, or None.

        With ``require_all`` a match always ranks 0.
        """
        if any(word in header for word in self.exclude):
            return None
        if self.require_all:
            return 0 if all(word in header for word in self.keywords) else None
        for i, word in enumerate(self.keywords):
            if word in header:
                return i
        return None


# Fixed order: a header claimed by an earlier rule is never offered to a later one.
# The aggregated date keywords only ever fire on aggregated sheets, since
# they are what makes a sheet aggregated.
IMPORT_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("date", ("data", "date") + AGGREGATED_MARKERS),
    KeywordRule("gross_value", ("bruto", "gross", "valor vendas", "total")),
    KeywordRule("net_value", ("líquido", "liquido", "net", "recebido", "valor")),
)

# Split-date and count columns of the aggregated layout; located independently
AGGREGATED_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("year", ("ano",)),
    KeywordRule("month", ("mês", "mes")),
    KeywordRule("day", ("dia",)),
    KeywordRule("quantity", ("vendas",), exclude=("valor",)),
)

CONVERTER_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("year", ("ano",)),
    KeywordRule("month", ("mês", "mes")),
    KeywordRule("day", ("dia",)),
    KeywordRule("quantity", ("vendas",), exclude=("valor",)),
    KeywordRule("gross_value", ("valor", "vendas"), require_all=True),
    KeywordRule("net_value", ("total", "recebido"), require_all=True),
)


@dataclass(frozen=True)
class RoleMatch:
    """What the rules found for one role.

    Attributes:
        role: ColumnMapping field name.
        outcome: FOUND, AMBIGUOUS or ABSENT.
        candidates: Every header the rule accepted, in header order.
        label: The header picked for the mapping (None when ABSENT).
    """

    role: str
    outcome: MatchOutcome
    candidates: tuple[str, ...] = ()
    label: Optional[str] = None


@dataclass(frozen=True)
class SchemaDetection:
    schema: SchemaKind
    mapping: ColumnMapping
    matches: dict[str, RoleMatch] = field(default_factory=dict)

    @property
    def ambiguous_roles(self) -> list[str]:
        return [r for r, m in self.matches.items() if m.outcome is MatchOutcome.AMBIGUOUS]

    @property
    def absent_roles(self) -> list[str]:
        return [r for r, m in self.matches.items() if m.outcome is MatchOutcome.ABSENT]

    def with_overrides(self, **labels: Optional[str]) -> SchemaDetection:
        """Replace guessed labels with user choices.

        Examples:
            >>> d = detect_schema(["Data", "Bruto", "Recebido"])
            >>> d.with_overrides(net_value="Bruto").mapping.net_value
            'Bruto'
        """
        mapping = dataclasses.replace(self.mapping, **labels)
        return dataclasses.replace(self, mapping=mapping)


def detect_schema_kind(headers: Iterable[str]) -> SchemaKind:
    """AGGREGATED when any header mentions ano / mês / dia."""
    for h in headers:
        norm = normalize_header(h)
        if any(marker in norm for marker in AGGREGATED_MARKERS):
            return SchemaKind.AGGREGATED
    return SchemaKind.TRANSACTIONAL


def _pick(role: str, candidates: list[str]) -> RoleMatch:
    """Choose among the headers accepted for ``role``, in header order.

    The last candidate wins: the headers are scanned left to right and each
    match replaces the previous guess.
    """
    if not candidates:
        return RoleMatch(role, MatchOutcome.ABSENT)
    outcome = MatchOutcome.FOUND if len(candidates) == 1 else MatchOutcome.AMBIGUOUS
    return RoleMatch(role, outcome, tuple(candidates), candidates[-1])


def locate_first(headers: Sequence[str], rule: KeywordRule) -> Optional[int]:
    """Index of the first header accepted by ``rule``."""
    for i, h in enumerate(headers):
        if rule.rank(normalize_header(h)) is not None:
            return i
    return None


def locate_columns(headers: Sequence[str], rules: Iterable[KeywordRule]) -> dict[str, Optional[int]]:
    """Role -> index of the first matching header, each rule applied independently."""
    return {rule.role: locate_first(headers, rule) for rule in rules}


def detect_schema(headers: Sequence[str]) -> SchemaDetection:
    """Infer the layout and a column mapping from a header row.

    Args:
        headers: Header labels (row 0 of the table).

    Returns:
        SchemaDetection with the guessed mapping and one RoleMatch per role.
        Roles the rules could not fill are None in the mapping; the caller
        decides whether to ask the user or abort.
    """
    labels = [str(h) for h in headers]
    schema = detect_schema_kind(labels)

    accepted: dict[str, list[str]] = {rule.role: [] for rule in IMPORT_RULES}
    for label in labels:
        norm = normalize_header(label)
        if not norm:
            continue
        for rule in IMPORT_RULES:
            if rule.rank(norm) is not None:
                accepted[rule.role].append(label)
                break

    matches = {role: _pick(role, cands) for role, cands in accepted.items()}

    if schema is SchemaKind.AGGREGATED:
        for rule in AGGREGATED_RULES:
            hits = [label for label in labels if rule.rank(normalize_header(label)) is not None]
            if not hits:
                matches[rule.role] = RoleMatch(rule.role, MatchOutcome.ABSENT)
            else:
                outcome = MatchOutcome.FOUND if len(hits) == 1 else MatchOutcome.AMBIGUOUS
                matches[rule.role] = RoleMatch(rule.role, outcome, tuple(hits), hits[0])

    mapping = ColumnMapping(**{role: m.label for role, m in matches.items()})
    logger.debug("Detected %s schema, mapping %s", schema.value, mapping)
    for role, m in matches.items():
        if m.outcome is MatchOutcome.AMBIGUOUS:
            logger.debug("Role %s is ambiguous between %s, picked %r", role, m.candidates, m.label)
    return SchemaDetection(schema=schema, mapping=mapping, matches=matches)
