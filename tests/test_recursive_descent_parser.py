import pytest

from adapters.program_parser.lexer import tokenize
from adapters.program_parser.recursive_descent import (
    Parser,
    RecursiveDescentParser,
    build_database,
    parse_program,
    parse_query,
    parse_statement,
)
from contracts import (
    Atom,
    Compound,
    Constant,
    Fact,
    ParseError,
    Query,
    Rule,
    Token,
    TokenKind,
    Variable,
)
from ports.program_parser import ProgramParser


def _c(name: str) -> Constant:
    return Constant(name=name)


def _v(name: str) -> Variable:
    return Variable(name=name)


def _atom(name: str, *args) -> Atom:
    return Atom(name=name, args=args)


def test_parse_query_with_nested_compound():
    stmt = parse_statement(tokenize("?- ancestor(father(john), X), parent(X, mary)."))

    assert stmt == Query(body=(
        _atom("ancestor", Compound(name="father", args=(_c("john"),)), _v("X")),
        _atom("parent", _v("X"), _c("mary")),
    ))


def test_parse_fact_from_tokens():
    tokens = [
        Token(kind=TokenKind.IDENTIFIER, text="parent"),
        Token(kind=TokenKind.LPAREN, text="("),
        Token(kind=TokenKind.IDENTIFIER, text="john"),
        Token(kind=TokenKind.COMMA, text=","),
        Token(kind=TokenKind.IDENTIFIER, text="mary"),
        Token(kind=TokenKind.RPAREN, text=")"),
        Token(kind=TokenKind.PERIOD, text="."),
    ]

    assert parse_statement(tokens) == Fact(atom=_atom("parent", _c("john"), _c("mary")))


def test_parse_rule():
    stmt = parse_statement(tokenize("grandparent(X, Y) :- parent(X, Z), parent(Z, Y)."))

    assert isinstance(stmt, Rule)
    assert stmt.head == _atom("grandparent", _v("X"), _v("Y"))
    assert stmt.body == (
        _atom("parent", _v("X"), _v("Z")),
        _atom("parent", _v("Z"), _v("Y")),
    )


def test_parse_zero_arity_atom_and_constant_argument():
    stmts = parse_program(tokenize("done. wrap(nil)."))

    assert stmts == [
        Fact(atom=Atom(name="done")),
        Fact(atom=_atom("wrap", _c("nil"))),
    ]


def test_parse_program_keeps_declaration_order():
    stmts = parse_program(tokenize("b. a :- b. ?- a. c."))

    assert [s.statement_type for s in stmts] == ["fact", "rule", "query", "fact"]


def test_parse_program_of_empty_text():
    assert parse_program(tokenize("")) == []


def test_parser_cursor_reads_statements_one_by_one():
    parser = Parser(tokenize("p. q."))

    assert parser.parse_statement() == Fact(atom=Atom(name="p"))
    assert not parser.at_end
    assert parser.parse_statement() == Fact(atom=Atom(name="q"))
    assert parser.at_end


@pytest.mark.parametrize("text,expected,found", [
    ("parent(john", "')'", "end of input"),
    ("parent(john)", "'.' or ':-' after atom", "end of input"),
    ("p :- .", "identifier", "'.'"),
    ("p(X, ).", "term (identifier or variable)", "')'"),
    ("X.", "identifier", "variable 'X'"),
    ("?- p(X)", "'.'", "end of input"),
    ("p q.", "'.' or ':-' after atom", "identifier 'q'"),
])
def test_parse_errors_report_expected_and_found(text, expected, found):
    with pytest.raises(ParseError) as exc_info:
        parse_program(tokenize(text))

    assert exc_info.value.expected == expected
    assert exc_info.value.found == found


def test_parse_program_stops_at_first_error():
    with pytest.raises(ParseError) as exc_info:
        parse_program(tokenize("p(a). q(. r(b)."))

    # offset znaku kropki w 'q(.'
    assert exc_info.value.position == len("p(a). q(")


def test_parse_query_returns_goal_list():
    goals = parse_query(tokenize("?- parent(X, mary), male(X)."))

    assert goals == [
        _atom("parent", _v("X"), _c("mary")),
        _atom("male", _v("X")),
    ]


@pytest.mark.parametrize("text,found", [
    ("parent(john, mary).", "fact"),
    ("p(X) :- q(X).", "rule"),
])
def test_parse_query_rejects_non_query_statements(text, found):
    with pytest.raises(ParseError) as exc_info:
        parse_query(tokenize(text))

    assert exc_info.value.expected == "query ('?-')"
    assert exc_info.value.found == found


def test_parse_query_rejects_trailing_tokens():
    with pytest.raises(ParseError) as exc_info:
        parse_query(tokenize("?- p(X). q."))

    assert exc_info.value.expected == "end of input"
    assert exc_info.value.found == "identifier 'q'"


def test_build_database_partitions_facts_and_rules_and_drops_queries():
    stmts = parse_program(tokenize("p(a). q(X) :- p(X). ?- q(a). p(b)."))

    db = build_database(stmts)

    assert db.facts == [_atom("p", _c("a")), _atom("p", _c("b"))]
    assert len(db.rules) == 1
    assert db.rules[0].head == _atom("q", _v("X"))


def test_recursive_descent_parser_implements_port():
    parser = RecursiveDescentParser()

    assert isinstance(parser, ProgramParser)
    assert parser.parse_query("?- p.") == [Atom(name="p")]
    assert len(parser.parse_program("p. q :- p.")) == 2


def test_parse_deeply_nested_term():
    depth = 1500
    stmt = parse_statement(tokenize("num(" + "s(" * depth + "z" + ")" * depth + ")."))

    term = stmt.atom.args[0]
    levels = 0
    while isinstance(term, Compound):
        assert term.name == "s"
        term = term.args[0]
        levels += 1
    assert levels == depth
    assert term == _c("z")


def test_nested_arguments_keep_order():
    stmt = parse_statement(tokenize("p(f(a, g(X, b)), Y, h(c))."))

    assert stmt.atom == _atom(
        "p",
        Compound(name="f", args=(_c("a"), Compound(name="g", args=(_v("X"), _c("b"))))),
        _v("Y"),
        Compound(name="h", args=(_c("c"),)),
    )


def test_unclosed_deep_term_reports_character_offset():
    depth = 1200
    text = "p(" + "s(" * depth + "z" + ")" * depth + "."

    with pytest.raises(ParseError) as exc_info:
        parse_program(tokenize(text))

    assert exc_info.value.expected == "')'"
    assert exc_info.value.found == "'.'"
    assert exc_info.value.position == len(text) - 1


def test_error_at_end_of_input_points_past_last_token():
    with pytest.raises(ParseError) as exc_info:
        parse_program(tokenize("parent(john, mary)  "))

    assert exc_info.value.found == "end of input"
    assert exc_info.value.position == len("parent(john, mary)")


def test_parse_query_rejects_fact_at_its_offset():
    with pytest.raises(ParseError) as exc_info:
        parse_query(tokenize("  parent(john, mary)."))

    assert exc_info.value.found == "fact"
    assert exc_info.value.position == 2


def test_trailing_tokens_after_query_report_their_offset():
    with pytest.raises(ParseError) as exc_info:
        parse_query(tokenize("?- p(X). q"))

    assert exc_info.value.found == "identifier 'q'"
    assert exc_info.value.position == len("?- p(X). ")
