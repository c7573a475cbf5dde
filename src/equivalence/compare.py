"""Structural comparison of REST and GraphQL results.

Three tiers:
  1. key presence: keys only one transport returns are failures unless
     whitelisted as transport-specific
  2. value equality on the keys both transports return
  3. for lists, per-item shape; differing lengths are expected because the
     two sides may see different record sets

Every finding is a Divergence; expected ones are kept in the report but do
not make it fail.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from equivalence.normalize import DEFAULT_IGNORED_FIELDS, InvalidIdError, normalize_entity

# nested relations only the GraphQL selection set can return
TRANSPORT_ONLY_FIELDS = frozenset({"tasks", "user"})


class DivergenceKind(str, Enum):
    EXPECTED = "EXPECTED"
    MISSING_KEY = "MISSING_KEY"
    EXTRA_KEY = "EXTRA_KEY"
    VALUE_MISMATCH = "VALUE_MISMATCH"
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"
    ERROR_MISMATCH = "ERROR_MISMATCH"
    INVALID_ID = "INVALID_ID"


EXPECTED_KINDS = frozenset({DivergenceKind.EXPECTED, DivergenceKind.LENGTH_MISMATCH})


@dataclass(frozen=True)
class Divergence:
    """One difference between the transports.

    MISSING_KEY means REST returned the key and GraphQL did not; EXTRA_KEY
    is the reverse.
    INVALID_ID carries the reason on the side whose id was unusable.
    """
    kind: DivergenceKind
    path: str
    rest: Any = None
    graphql: Any = None

    @property
    def expected(self) -> bool:
        return self.kind in EXPECTED_KINDS


@dataclass
class ComparisonReport:
    divergences: list[Divergence] = field(default_factory=list)

    @property
    def failures(self) -> list[Divergence]:
        return [d for d in self.divergences if not d.expected]

    @property
    def expected(self) -> list[Divergence]:
        return [d for d in self.divergences if d.expected]

    @property
    def ok(self) -> bool:
        return not self.failures

    def add(self, kind: DivergenceKind, path: str, rest: Any = None, graphql: Any = None) -> None:
        self.divergences.append(Divergence(kind, path, rest, graphql))

    def merge(self, other: "ComparisonReport") -> None:
        self.divergences.extend(other.divergences)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _compare_keys(
    report: ComparisonReport,
    rest: dict,
    graphql: dict,
    expected_only: frozenset,
    path: str,
    failure_kind: Optional[DivergenceKind] = None,
) -> set:
    for key in sorted(rest.keys() - graphql.keys()):
        kind = DivergenceKind.EXPECTED if key in expected_only else (failure_kind or DivergenceKind.MISSING_KEY)
        report.add(kind, _join(path, key), rest=rest[key])
    for key in sorted(graphql.keys() - rest.keys()):
        kind = DivergenceKind.EXPECTED if key in expected_only else (failure_kind or DivergenceKind.EXTRA_KEY)
        report.add(kind, _join(path, key), graphql=graphql[key])
    return rest.keys() & graphql.keys()


def _normalize_side(
    report: ComparisonReport,
    entity: dict,
    ignore: Iterable[str],
    require_id: bool,
    path: str,
    side: str,
) -> Optional[dict]:
    try:
        return normalize_entity(entity, ignore, require_id)
    except InvalidIdError as exc:
        report.add(DivergenceKind.INVALID_ID, _join(path, exc.field), **{side: exc.reason})
        return None


def compare_entities(
    rest: dict,
    graphql: dict,
    expected_only: Iterable[str] = TRANSPORT_ONLY_FIELDS,
    ignore: Iterable[str] = DEFAULT_IGNORED_FIELDS,
    path: str = "",
    require_id: bool = True,
) -> ComparisonReport:
    """Compare one entity from each transport (tiers 1 and 2).

    An entity without a usable id is reported as INVALID_ID and not compared
    further.
    """
    expected_only = frozenset(expected_only)
    report = ComparisonReport()
    rest_n = _normalize_side(report, rest, ignore, require_id, path, "rest")
    graphql_n = _normalize_side(report, graphql, ignore, require_id, path, "graphql")
    if rest_n is None or graphql_n is None:
        return report

    common = _compare_keys(report, rest_n, graphql_n, expected_only, path)
    for key in sorted(common):
        if rest_n[key] != graphql_n[key]:
            report.add(DivergenceKind.VALUE_MISMATCH, _join(path, key), rest_n[key], graphql_n[key])
    return report


def compare_lists(
    rest_items: list,
    graphql_items: list,
    expected_only: Iterable[str] = TRANSPORT_ONLY_FIELDS,
    ignore: Iterable[str] = DEFAULT_IGNORED_FIELDS,
    path: str = "",
) -> ComparisonReport:
    """Compare two lists of entities (tier 3): lengths and per-item keys."""
    expected_only = frozenset(expected_only)
    report = ComparisonReport()
    if len(rest_items) != len(graphql_items):
        report.add(DivergenceKind.LENGTH_MISMATCH, path or "[]", len(rest_items), len(graphql_items))

    for index, (rest, graphql) in enumerate(zip(rest_items, graphql_items)):
        item_path = f"{path}[{index}]"
        rest_n = _normalize_side(report, rest, ignore, True, item_path, "rest")
        graphql_n = _normalize_side(report, graphql, ignore, True, item_path, "graphql")
        if rest_n is None or graphql_n is None:
            continue
        _compare_keys(
            report,
            rest_n,
            graphql_n,
            expected_only,
            item_path,
            failure_kind=DivergenceKind.SHAPE_MISMATCH,
        )
    return report


def compare_errors(rest_error, graphql_error, path: str = "") -> ComparisonReport:
    """Compare the failure of each transport by taxonomy kind.

    Either side may be None (the call succeeded); one failure against one
    success is a mismatch too.
    """
    report = ComparisonReport()
    rest_kind = rest_error.kind if rest_error is not None else None
    graphql_kind = graphql_error.kind if graphql_error is not None else None
    if rest_kind != graphql_kind:
        report.add(DivergenceKind.ERROR_MISMATCH, path or "error", rest_kind, graphql_kind)
    return report
