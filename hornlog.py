#!/usr/bin/env python3
"""
hornlog.py — CLI narzędzie Hornlog.

Działa całkowicie lokalnie — nie wymaga uruchomionego serwera API.
Program (fakty i reguły) czytany jest z --file, --text lub stdin.

Konfiguracja budżetu: zmienne środowiskowe z prefiksem HORNLOG_
lub plik .env (np. HORNLOG_MAX_DEPTH=512).

Podkomendy:
    query   — wykonaj zapytanie na programie, wypisz wszystkie odpowiedzi
    check   — sparsuj program i wypisz instrukcje
    tokens  — wypisz tokeny programu

Użycie:
    python hornlog.py query --file family.pl "?- grandparent(john, Y)."
    python hornlog.py query --text "p(a). p(b)." "?- p(X)." --max-depth 50
    python hornlog.py check --file family.pl
    python hornlog.py tokens --text "parent(X, Y)."
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _safe_terminal_text(value: Any) -> str:
    s = str(value)
    encoding = sys.stdout.encoding or "utf-8"
    try:
        s.encode(encoding)
        return s
    except UnicodeEncodeError:
        return s.encode(encoding, errors="replace").decode(encoding, errors="replace")


def _read_text(args: argparse.Namespace) -> str:
    if getattr(args, "file", None):
        try:
            return open(args.file, encoding="utf-8").read()
        except OSError as e:
            print(f"Błąd odczytu pliku: {e}", file=sys.stderr)
            sys.exit(1)
    if getattr(args, "text", None) is not None:
        return args.text
    return sys.stdin.read()


def _print_diagnostic(diagnostic: Any) -> None:
    where = f" (pozycja {diagnostic.position})" if diagnostic.position is not None else ""
    print(
        f"Błąd {diagnostic.kind} w {diagnostic.stage}{where}: {diagnostic.message}",
        file=sys.stderr,
    )


def _print_solutions_table(query: str, variables: list[str], answers: list[dict[str, str]]) -> None:
    table = Table(
        title=f"{_safe_terminal_text(query.strip())} [{len(answers)}]",
        box=box.ASCII,
        show_lines=False,
    )
    table.add_column("#", justify="right", no_wrap=True)
    if not variables:
        table.add_column("Result")
    for var in variables:
        table.add_column(_safe_terminal_text(var), style="bold cyan" if var == variables[0] else None)
    for idx, answer in enumerate(answers, 1):
        if not variables:
            table.add_row(str(idx), "true")
        else:
            table.add_row(str(idx), *(_safe_terminal_text(answer[v]) for v in variables))
    _console().print(table)


def _settings():
    from config import Settings
    return Settings()


# -- podkomendy ------------------------------------------------------------

def _query(args: argparse.Namespace) -> None:
    from adapters.reasoner.backward_chainer import BackwardChainer
    from contracts import SearchBudget, SearchStatus

    program = _read_text(args)
    reasoner = BackwardChainer.from_settings(_settings())
    result = reasoner.evaluate(
        program,
        args.query,
        SearchBudget(
            max_depth=args.max_depth,
            max_nodes=args.max_nodes,
            timeout_ms=args.timeout_ms,
        ),
    )

    if result.diagnostic is not None:
        _print_diagnostic(result.diagnostic)
        sys.exit(1)

    if result.status == SearchStatus.EXHAUSTED:
        print(
            f"Uwaga: przeszukiwanie przerwane ({result.exhausted_reason}); "
            f"odpowiedzi mogą być niepełne.",
            file=sys.stderr,
        )

    if not result.answers:
        print("No solutions.")
        return
    _print_solutions_table(result.query, result.variables, result.answers)


def _check(args: argparse.Namespace) -> None:
    from adapters.reasoner.backward_chainer import BackwardChainer

    result = BackwardChainer.from_settings(_settings()).check(_read_text(args))
    if result.diagnostic is not None:
        _print_diagnostic(result.diagnostic)
        sys.exit(1)

    table = Table(
        title=f"Program: {result.facts} fact(s), {result.rules} rule(s), {result.queries} query(ies)",
        box=box.ASCII,
        show_lines=False,
    )
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Statement")
    for idx, stmt in enumerate(result.statements, 1):
        table.add_row(str(idx), _safe_terminal_text(stmt))
    _console().print(table)


def _tokens(args: argparse.Namespace) -> None:
    from adapters.program_parser.recursive_descent import RecursiveDescentParser
    from contracts import LexError

    try:
        tokens = RecursiveDescentParser().tokenize(_read_text(args))
    except LexError as exc:
        print(f"Błąd lex: {exc.message}", file=sys.stderr)
        sys.exit(1)

    table = Table(title=f"Tokens [{len(tokens)}]", box=box.ASCII, show_lines=False)
    table.add_column("Pos", justify="right", no_wrap=True)
    table.add_column("Kind", no_wrap=True, style="cyan")
    table.add_column("Text")
    for tok in tokens:
        table.add_row(str(tok.position), tok.kind.value, _safe_terminal_text(tok.text))
    _console().print(table)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="hornlog",
        description="Hornlog — CLI (lokalny, bez serwera API)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # query
    p = sub.add_parser("query", help="Wykonaj zapytanie '?- ...' na programie")
    p.add_argument("query", help="Zapytanie, np. \"?- parent(X, mary).\"")
    p.add_argument("--text", "-t", help="Treść programu")
    p.add_argument("--file", "-f", help="Ścieżka do pliku z programem")
    p.add_argument("--max-depth", type=int, default=None, metavar="N")
    p.add_argument("--max-nodes", type=int, default=None, metavar="N")
    p.add_argument("--timeout-ms", type=int, default=None, metavar="MS")

    # check
    p = sub.add_parser("check", help="Sparsuj program i wypisz instrukcje")
    p.add_argument("--text", "-t", help="Treść programu")
    p.add_argument("--file", "-f", help="Ścieżka do pliku z programem")

    # tokens
    p = sub.add_parser("tokens", help="Wypisz tokeny programu")
    p.add_argument("--text", "-t", help="Treść programu")
    p.add_argument("--file", "-f", help="Ścieżka do pliku z programem")

    args = parser.parse_args()
    logging.basicConfig(level=_settings().log_level.upper())

    cmds = {
        "query":  _query,
        "check":  _check,
        "tokens": _tokens,
    }
    cmds[args.command](args)


if __name__ == "__main__":
    main()
