"""Differential harness: run one logical operation on both transports and compare."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from equivalence.clients import TransportError
from equivalence.compare import (
    TRANSPORT_ONLY_FIELDS,
    ComparisonReport,
    DivergenceKind,
    compare_entities,
    compare_errors,
    compare_lists,
)
from equivalence.normalize import DEFAULT_IGNORED_FIELDS

logger = logging.getLogger(__name__)


@dataclass
class OperationOutcome:
    name: str
    rest_result: Any = None
    graphql_result: Any = None
    rest_error: Optional[TransportError] = None
    graphql_error: Optional[TransportError] = None
    report: ComparisonReport = field(default_factory=ComparisonReport)

    @property
    def ok(self) -> bool:
        return self.report.ok


def _capture(call: Callable[[], Any]) -> tuple[Any, Optional[TransportError]]:
    try:
        return call(), None
    except TransportError as exc:
        return None, exc


class EquivalenceHarness:
    """Drives matched operation pairs and keeps every outcome.

    Only TransportError is captured; anything else raised by a call is a bug
    in the test itself and propagates.
    """

    def __init__(self, expected_only: Iterable[str] = TRANSPORT_ONLY_FIELDS):
        self.expected_only = frozenset(expected_only)
        self.outcomes: list[OperationOutcome] = []

    def run(
        self,
        name: str,
        rest_call: Callable[[], Any],
        graphql_call: Callable[[], Any],
        ignore: Iterable[str] = (),
        envelope: bool = False,
    ) -> OperationOutcome:
        """Run both calls and compare their results.

        ``ignore`` adds fields to skip on top of the timestamps. ``envelope``
        marks a result that wraps entities without being one, like a login
        payload, so it needs no id of its own.
        """
        rest_result, rest_error = _capture(rest_call)
        graphql_result, graphql_error = _capture(graphql_call)

        outcome = OperationOutcome(name, rest_result, graphql_result, rest_error, graphql_error)
        outcome.report = self._compare(name, outcome, DEFAULT_IGNORED_FIELDS | frozenset(ignore), envelope)

        for divergence in outcome.report.divergences:
            log = logger.info if divergence.expected else logger.warning
            log(
                "Transport divergence",
                extra={
                    "operation": name,
                    "kind": divergence.kind.value,
                    "path": divergence.path,
                    "rest": repr(divergence.rest),
                    "graphql": repr(divergence.graphql),
                },
            )
        self.outcomes.append(outcome)
        return outcome

    def _compare(
        self,
        name: str,
        outcome: OperationOutcome,
        ignore: frozenset,
        envelope: bool,
    ) -> ComparisonReport:
        if outcome.rest_error or outcome.graphql_error:
            return compare_errors(outcome.rest_error, outcome.graphql_error, path=name)

        rest, graphql = outcome.rest_result, outcome.graphql_result
        if isinstance(rest, list) and isinstance(graphql, list):
            return compare_lists(rest, graphql, self.expected_only, ignore, path=name)
        if isinstance(rest, dict) and isinstance(graphql, dict):
            return compare_entities(rest, graphql, self.expected_only, ignore, require_id=not envelope)

        report = ComparisonReport()
        if rest != graphql:
            report.add(DivergenceKind.VALUE_MISMATCH, name, rest, graphql)
        return report

    @property
    def failures(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if not o.ok]
