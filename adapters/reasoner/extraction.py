"""
Wyciąganie odpowiedzi z drzewa rezolucji + renderowanie termów.

Odpowiedź powstaje tylko w liściu sukcesu (brak dzieci i brak celów).
Liść porażki (cele zostały, żadna klauzula nie pasuje) nie daje nic.

Wszystkie przejścia po termach używają jawnego stosu: głębokość termu
(np. s(s(...)) po długim wyprowadzeniu) nie jest ograniczona stosem Pythona.
"""
from __future__ import annotations

from typing import Callable, Iterable, Iterator, Sequence, Union

from adapters.reasoner.unification import walk
from contracts import (
    Atom,
    Compound,
    Fact,
    Query,
    ResolutionNode,
    Rule,
    Statement,
    Substitution,
    Term,
    Variable,
)


# ──────────────────────────────────────────────────────────────────────────────
# Przejścia po termach
# ──────────────────────────────────────────────────────────────────────────────

def transform_term(term: Term, visit: Callable[[Term], Term]) -> Term:
    """
    Przebudowuje term od liści w górę. `visit` dostaje każdy podterm, zanim
    zostanie rozłożony na argumenty (np. walk albo przemianowanie zmiennej).
    Argumenty odwiedzane są od lewej, tak jak przy zwykłej rekurencji.
    """
    built: list[Term] = []
    stack: list[tuple[Term, bool]] = [(term, False)]
    while stack:
        t, ready = stack.pop()
        if ready:
            arity = len(t.args)
            args = tuple(built[-arity:])
            del built[-arity:]
            built.append(Compound(name=t.name, args=args))
            continue
        t = visit(t)
        if isinstance(t, Compound):
            stack.append((t, True))
            stack.extend((arg, False) for arg in reversed(t.args))
        else:
            built.append(t)
    return built[0]


def term_variables(term: Term) -> Iterator[str]:
    """Nazwy zmiennych termu (z powtórzeniami), od lewej."""
    stack = [term]
    while stack:
        t = stack.pop()
        if isinstance(t, Variable):
            yield t.name
        elif isinstance(t, Compound):
            stack.extend(reversed(t.args))


# ──────────────────────────────────────────────────────────────────────────────
# Podstawienia
# ──────────────────────────────────────────────────────────────────────────────

def apply_substitution(term: Term, subs: Substitution) -> Term:
    """Pełna dereferencja: zmienne zastąpione wiązaniami, także w argumentach."""
    return transform_term(term, lambda t: walk(t, subs))


def apply_to_atom(atom: Atom, subs: Substitution) -> Atom:
    return Atom(name=atom.name, args=tuple(apply_substitution(a, subs) for a in atom.args))


def get_query_vars(query: Iterable[Atom]) -> list[str]:
    """Wszystkie różne zmienne zapytania (także zagnieżdżone), posortowane."""
    found: set[str] = set()
    for atom in query:
        for arg in atom.args:
            found.update(term_variables(arg))
    return sorted(found)


def extract_query_results(
    tree: ResolutionNode,
    query_vars: Sequence[str],
) -> list[Substitution]:
    """
    Jedno podstawienie na każde udane wyprowadzenie, w kolejności dzieci.
    Podstawienie dziecka nakładane jest na rodzica (dziecko wygrywa kolizje).
    """
    results: list[Substitution] = []
    stack: list[tuple[ResolutionNode, Substitution]] = [(tree, dict(tree.subs))]

    while stack:
        node, subs = stack.pop()
        if not node.children:
            if node.pending:
                continue  # ślepa uliczka
            results.append({
                var: apply_substitution(Variable(name=var), subs)
                for var in query_vars
            })
            continue
        for child in reversed(node.children):
            stack.append((child, {**subs, **child.subs}))

    return results


# ──────────────────────────────────────────────────────────────────────────────
# Renderowanie
# ──────────────────────────────────────────────────────────────────────────────

def render_term(term: Term) -> str:
    """Constant/Variable → nazwa; Compound → 'f(a, g(X))'."""
    parts: list[str] = []
    stack: list[Union[Term, str]] = [term]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Compound):
            stack.append(")")
            for i, arg in enumerate(reversed(item.args)):
                if i:
                    stack.append(", ")
                stack.append(arg)
            stack.append(f"{item.name}(")
        else:
            parts.append(item.name)
    return "".join(parts)


def render_atom(atom: Atom) -> str:
    if not atom.args:
        return atom.name
    return f"{atom.name}({', '.join(render_term(a) for a in atom.args)})"


def render_statement(stmt: Statement) -> str:
    if isinstance(stmt, Fact):
        return f"{render_atom(stmt.atom)}."
    if isinstance(stmt, Rule):
        return f"{render_atom(stmt.head)} :- {', '.join(render_atom(a) for a in stmt.body)}."
    if isinstance(stmt, Query):
        return f"?- {', '.join(render_atom(a) for a in stmt.body)}."
    raise TypeError(f"Nieznany typ instrukcji: {type(stmt).__name__}")


def render_bindings(solution: Substitution) -> dict[str, str]:
    return {var: render_term(term) for var, term in solution.items()}


def render_solution(solution: Substitution) -> str:
    """{'X': a, 'Y': f(b)} → 'X = a, Y = f(b)'; pusta odpowiedź → 'true'."""
    if not solution:
        return "true"
    return ", ".join(f"{var} = {render_term(term)}" for var, term in solution.items())
