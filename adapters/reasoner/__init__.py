"""
Reasoner adapter package.

Public import:
    from adapters.reasoner import BackwardChainer
"""

from adapters.reasoner.backward_chainer import BackwardChainer
from adapters.reasoner.extraction import extract_query_results, get_query_vars
from adapters.reasoner.sld_resolver import resolve_bounded, resolve_query
from adapters.reasoner.unification import unify_atoms, unify_terms

__all__ = [
    "BackwardChainer",
    "extract_query_results",
    "get_query_vars",
    "resolve_bounded",
    "resolve_query",
    "unify_atoms",
    "unify_terms",
]
