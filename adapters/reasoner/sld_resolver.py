"""
SLD-resolution: budowa pełnego drzewa wyprowadzeń dla zapytania.

Algorytm (DFS, kolejność deklaracji: najpierw fakty, potem reguły):
  - węzeł bez celów      → liść sukcesu
  - węzeł z celami       → pierwszy cel unifikowany z każdą klauzulą;
                           każda udana unifikacja = jedno dziecko
  - reguła (i fakt ze zmiennymi) jest przemianowywana przy KAŻDYM użyciu
    (X → X_<n>), licznik należy do jednego wywołania resolve_*
  - nieudana unifikacja nie tworzy dziecka (to jest backtracking)

Drzewo budowane jest jawnym stosem, więc głębokość wyprowadzenia nie jest
ograniczona stosem Pythona. resolve_query nie ma limitów; resolve_bounded
przyjmuje SearchBudget i zwraca status EXHAUSTED zamiast wisieć.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Sequence, Union

from adapters.program_parser.recursive_descent import build_database
from adapters.reasoner.extraction import term_variables, transform_term
from adapters.reasoner.unification import unify_atoms
from contracts import (
    Atom,
    Database,
    ResolutionNode,
    Rule,
    SearchBudget,
    SearchResult,
    SearchStatus,
    Statement,
    Term,
    Variable,
)

logger = logging.getLogger("hornlog.sld_resolver")

Program = Union[Database, Sequence[Statement]]

# (głowa, ciało, czy zawiera zmienne)
_Clause = tuple[Atom, tuple[Atom, ...], bool]


# ──────────────────────────────────────────────────────────────────────────────
# Przemianowanie zmiennych (standardizing apart)
# ──────────────────────────────────────────────────────────────────────────────

def rename_clause(
    head: Atom,
    body: Sequence[Atom],
    counter: int,
) -> tuple[Atom, tuple[Atom, ...], int]:
    """
    Każda zmienna klauzuli dostaje świeżą nazwę X_<n>; ta sama zmienna źródłowa
    → ta sama świeża nazwa w obrębie jednej aktywacji. Zwraca nowy licznik.
    """
    mapping: dict[str, str] = {}

    def _fresh(term: Term) -> Term:
        nonlocal counter
        if not isinstance(term, Variable):
            return term
        if term.name not in mapping:
            counter += 1
            mapping[term.name] = f"{term.name}_{counter}"
        return Variable(name=mapping[term.name])

    def _atom(atom: Atom) -> Atom:
        return Atom(name=atom.name, args=tuple(transform_term(a, _fresh) for a in atom.args))

    fresh_head = _atom(head)
    fresh_body = tuple(_atom(a) for a in body)
    return fresh_head, fresh_body, counter


def rename_rule(rule: Rule, counter: int) -> tuple[Rule, int]:
    head, body, counter = rename_clause(rule.head, rule.body, counter)
    return Rule(head=head, body=body), counter


def _clauses(db: Database) -> list[_Clause]:
    clauses: list[_Clause] = []
    for fact in db.facts:
        has_vars = any(next(term_variables(a), None) is not None for a in fact.args)
        clauses.append((fact, (), has_vars))
    for rule in db.rules:
        clauses.append((rule.head, rule.body, True))
    return clauses


# ──────────────────────────────────────────────────────────────────────────────
# Rezolucja
# ──────────────────────────────────────────────────────────────────────────────

def resolve_bounded(
    query: Sequence[Atom],
    program: Program,
    budget: Optional[SearchBudget] = None,
) -> SearchResult:
    """
    Buduje drzewo rezolucji z opcjonalnym budżetem.

    max_depth  — węzeł na tej głębokości z celami nie jest rozwijany (gałąź ucięta)
    max_nodes  — po przekroczeniu liczby węzłów przeszukiwanie się kończy
    timeout_ms — po przekroczeniu czasu przeszukiwanie się kończy
    W każdym przypadku status=EXHAUSTED, a częściowe drzewo jest zwracane.
    """
    db = program if isinstance(program, Database) else build_database(program)
    clauses = _clauses(db)
    budget = budget or SearchBudget()

    deadline: Optional[float] = None
    if budget.timeout_ms is not None:
        deadline = time.monotonic() + budget.timeout_ms / 1000.0

    root = ResolutionNode(goal=None, subs={}, pending=list(query))
    counter = 0
    node_count = 1
    expanded = 0
    depth_reached = 0
    reason: Optional[str] = None

    logger.debug(
        "Resolving %d goal(s) against %d fact(s) and %d rule(s)",
        len(query), len(db.facts), len(db.rules),
    )

    stack: list[tuple[ResolutionNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        depth_reached = max(depth_reached, depth)

        if not node.pending:
            continue

        if deadline is not None and time.monotonic() > deadline:
            reason = "timeout"
            break
        if budget.max_depth is not None and depth >= budget.max_depth:
            reason = reason or "max_depth"
            continue

        goal = node.pending[0]
        rest = node.pending[1:]
        expanded += 1

        for head, body, has_vars in clauses:
            if head.name != goal.name or len(head.args) != len(goal.args):
                continue
            if has_vars:
                head, body, counter = rename_clause(head, body, counter)
            extended = unify_atoms(goal, head, node.subs)
            if extended is None:
                continue
            node.children.append(
                ResolutionNode(goal=head, subs=extended, pending=[*body, *rest])
            )

        node_count += len(node.children)
        if budget.max_nodes is not None and node_count > budget.max_nodes:
            reason = "max_nodes"
            break

        for child in reversed(node.children):
            stack.append((child, depth + 1))

    status = SearchStatus.COMPLETE
    if reason is not None:
        status = SearchStatus.EXHAUSTED
        logger.warning(
            "Search exhausted (%s) after %d expansion(s), %d node(s), depth %d",
            reason, expanded, node_count, depth_reached,
        )

    return SearchResult(
        tree=root,
        status=status,
        reason=reason,
        nodes_expanded=expanded,
        depth_reached=depth_reached,
    )


def resolve_query(query: Sequence[Atom], program: Program) -> ResolutionNode:
    """Pełne drzewo bez limitów. Rekurencja bez przypadku bazowego nie zakończy się."""
    return resolve_bounded(query, program).tree
