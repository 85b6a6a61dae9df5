"""
Unifikacja Robinsona z occurs-check na termach i atomach.

Podstawienie jest trójkątne: wiązanie zmiennej może zawierać inne zmienne,
więc przed porównaniem term jest "dereferencjonowany" (walk).
Nieudana próba nigdy nie zostawia częściowych wiązań: praca idzie na kopii,
która zastępuje wejście dopiero po pełnym sukcesie.
"""
from __future__ import annotations

from typing import Optional

from contracts import Atom, Compound, Constant, Substitution, Term, Variable


def walk(term: Term, subs: Substitution) -> Term:
    """Podąża łańcuchem wiązań zmiennej aż do termu niezwiązanego lub niezmiennej."""
    while isinstance(term, Variable) and term.name in subs:
        term = subs[term.name]
    return term


def occurs_in(name: str, term: Term, subs: Substitution) -> bool:
    """True jeśli zmienna `name` występuje w `term` (z uwzględnieniem wiązań)."""
    stack = [term]
    while stack:
        t = walk(stack.pop(), subs)
        if isinstance(t, Variable):
            if t.name == name:
                return True
        elif isinstance(t, Compound):
            stack.extend(t.args)
    return False


def _bind(var: Variable, term: Term, subs: Substitution) -> bool:
    if occurs_in(var.name, term, subs):
        return False
    subs[var.name] = term
    return True


def _unify(t1: Term, t2: Term, subs: Substitution) -> bool:
    # pary do zunifikowania; argumenty od lewej, bez rekurencji po głębokości
    stack: list[tuple[Term, Term]] = [(t1, t2)]
    while stack:
        a, b = stack.pop()
        a = walk(a, subs)
        b = walk(b, subs)

        if isinstance(a, Variable):
            if isinstance(b, Variable) and a.name == b.name:
                continue
            if not _bind(a, b, subs):
                return False
        elif isinstance(b, Variable):
            if not _bind(b, a, subs):
                return False
        elif isinstance(a, Constant) and isinstance(b, Constant):
            if a.name != b.name:
                return False
        elif isinstance(a, Compound) and isinstance(b, Compound):
            if a.name != b.name or len(a.args) != len(b.args):
                return False
            stack.extend(reversed(list(zip(a.args, b.args))))
        else:
            return False  # stała vs złożony
    return True


def unify_terms(t1: Term, t2: Term, subs: Substitution) -> bool:
    """
    Unifikuje dwa termy, rozszerzając `subs` w miejscu.
    Przy niepowodzeniu `subs` pozostaje nietknięte.
    """
    scratch = dict(subs)
    if not _unify(t1, t2, scratch):
        return False
    subs.update(scratch)
    return True


def unify_atoms(
    a1: Atom,
    a2: Atom,
    subs: Optional[Substitution] = None,
) -> Optional[Substitution]:
    """
    Unifikuje dwa atomy (ta sama nazwa i arność, potem argumenty od lewej).
    Startuje od `subs` (domyślnie puste) i zwraca NOWE rozszerzone podstawienie
    albo None. Wejściowe `subs` nie jest modyfikowane.
    """
    if a1.name != a2.name or len(a1.args) != len(a2.args):
        return None
    scratch: Substitution = dict(subs) if subs else {}
    for t1, t2 in zip(a1.args, a2.args):
        if not _unify(t1, t2, scratch):
            return None
    return scratch
