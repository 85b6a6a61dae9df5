"""
Program parser adapter package.

Public import:
    from adapters.program_parser import RecursiveDescentParser, tokenize
"""

from adapters.program_parser.lexer import tokenize
from adapters.program_parser.recursive_descent import (
    Parser,
    RecursiveDescentParser,
    build_database,
    parse_program,
    parse_query,
    parse_statement,
)

__all__ = [
    "Parser",
    "RecursiveDescentParser",
    "build_database",
    "parse_program",
    "parse_query",
    "parse_statement",
    "tokenize",
]
