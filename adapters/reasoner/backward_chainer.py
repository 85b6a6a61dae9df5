"""
Adapter: BackwardChainer (SLD-resolution backward chainer)
Implementuje port Reasoner.

Potok dla jednego zapytania:
  tekst programu → lexer → parser → {fakty, reguły}
  tekst zapytania → lexer → parse_query → cele
  cele + baza → resolve_bounded (budżet) → drzewo → extract_query_results

Błędy leksera/parsera nie wychodzą poza adapter — wracają jako Diagnostic.
Każde wywołanie ma własne tokeny, licznik zmiennych i drzewo; brak stanu
współdzielonego między zapytaniami.
"""
from __future__ import annotations

import logging
import time
from typing import Literal, Optional

from adapters.program_parser.recursive_descent import RecursiveDescentParser, build_database
from adapters.reasoner.extraction import (
    extract_query_results,
    get_query_vars,
    render_bindings,
    render_statement,
)
from adapters.reasoner.sld_resolver import resolve_bounded
from config import Settings
from contracts import (
    Diagnostic,
    Fact,
    HornSyntaxError,
    LexError,
    ProgramCheck,
    Query,
    QueryResult,
    Rule,
    SearchBudget,
    SearchStatus,
)
from ports.program_parser import ProgramParser

logger = logging.getLogger("hornlog.backward_chainer")


def _cap(requested: Optional[int], limit: Optional[int]) -> Optional[int]:
    if requested is None:
        return limit
    if limit is None:
        return requested
    return min(requested, limit)


def to_diagnostic(exc: HornSyntaxError, stage: Literal["program", "query"]) -> Diagnostic:
    return Diagnostic(
        stage=stage,
        kind="lex" if isinstance(exc, LexError) else "parse",
        message=exc.message,
        position=exc.position,
        expected=getattr(exc, "expected", None),
        found=getattr(exc, "found", None),
    )


class BackwardChainer:
    """
    Reasoner dla programów Hornlog: zwraca WSZYSTKIE odpowiedzi w kolejności
    wyprowadzeń (najpierw fakty, potem reguły, w kolejności z pliku).
    """

    def __init__(
        self,
        max_depth: Optional[int] = 256,
        max_nodes: Optional[int] = 200_000,
        timeout_ms: Optional[int] = 5000,
        parser: Optional[ProgramParser] = None,
    ) -> None:
        self._max_depth = max_depth
        self._max_nodes = max_nodes
        self._timeout_ms = timeout_ms
        self._parser = parser or RecursiveDescentParser()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackwardChainer":
        return cls(
            max_depth=settings.max_depth,
            max_nodes=settings.max_nodes,
            timeout_ms=settings.timeout_ms,
        )

    def effective_budget(self, budget: Optional[SearchBudget] = None) -> SearchBudget:
        """Limity z żądania, każdy przycięty do skonfigurowanego."""
        budget = budget or SearchBudget()
        return SearchBudget(
            max_depth=_cap(budget.max_depth, self._max_depth),
            max_nodes=_cap(budget.max_nodes, self._max_nodes),
            timeout_ms=_cap(budget.timeout_ms, self._timeout_ms),
        )

    # -- Reasoner protocol -------------------------------------------------

    def evaluate(
        self,
        program: str,
        query: str,
        budget: Optional[SearchBudget] = None,
    ) -> QueryResult:
        start = time.monotonic()

        try:
            statements = self._parser.parse_program(program)
        except HornSyntaxError as exc:
            logger.info("Program rejected: %s", exc.message)
            return self._failed(query, to_diagnostic(exc, "program"), start)

        try:
            goals = self._parser.parse_query(query)
        except HornSyntaxError as exc:
            logger.info("Query rejected: %s", exc.message)
            return self._failed(query, to_diagnostic(exc, "query"), start)

        search = resolve_bounded(goals, build_database(statements), self.effective_budget(budget))
        variables = get_query_vars(goals)
        solutions = extract_query_results(search.tree, variables)
        duration_ms = (time.monotonic() - start) * 1000.0

        logger.info(
            "Query %r: %d solution(s), %s, %.1f ms",
            query.strip(), len(solutions), search.status.value, duration_ms,
        )

        return QueryResult(
            query=query,
            status=search.status,
            exhausted_reason=search.reason,
            success=len(solutions) > 0,
            variables=variables,
            solutions=solutions,
            answers=[render_bindings(s) for s in solutions],
            nodes_expanded=search.nodes_expanded,
            depth_reached=search.depth_reached,
            duration_ms=duration_ms,
        )

    def check(self, program: str) -> ProgramCheck:
        try:
            statements = self._parser.parse_program(program)
        except HornSyntaxError as exc:
            logger.info("Program rejected: %s", exc.message)
            return ProgramCheck(ok=False, diagnostic=to_diagnostic(exc, "program"))

        return ProgramCheck(
            ok=True,
            facts=sum(isinstance(s, Fact) for s in statements),
            rules=sum(isinstance(s, Rule) for s in statements),
            queries=sum(isinstance(s, Query) for s in statements),
            statements=[render_statement(s) for s in statements],
        )

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _failed(query: str, diagnostic: Diagnostic, start: float) -> QueryResult:
        return QueryResult(
            query=query,
            status=SearchStatus.ERROR,
            diagnostic=diagnostic,
            duration_ms=(time.monotonic() - start) * 1000.0,
        )
