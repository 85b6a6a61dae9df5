from adapters.program_parser.lexer import tokenize
from adapters.program_parser.recursive_descent import parse_program
from adapters.reasoner.extraction import (
    apply_substitution,
    extract_query_results,
    get_query_vars,
    render_atom,
    render_solution,
    render_statement,
    render_term,
)
from contracts import Atom, Compound, Constant, ResolutionNode, Variable


def _c(name: str) -> Constant:
    return Constant(name=name)


def _v(name: str) -> Variable:
    return Variable(name=name)


def _f(name: str, *args) -> Compound:
    return Compound(name=name, args=args)


def test_extract_query_results_leaf_node():
    leaf = ResolutionNode(
        goal=Atom(name="p", args=(_v("X"),)),
        subs={"X": _c("a")},
    )

    assert extract_query_results(leaf, ["X"]) == [{"X": _c("a")}]


def test_extract_query_results_with_child():
    child = ResolutionNode(goal=Atom(name="q", args=(_v("X"),)), subs={"X": _c("b")})
    parent = ResolutionNode(
        goal=Atom(name="p", args=(_v("X"),)),
        subs={},
        pending=[Atom(name="q", args=(_v("X"),))],
        children=[child],
    )

    assert extract_query_results(parent, ["X"]) == [{"X": _c("b")}]


def test_dead_end_leaf_contributes_nothing():
    dead = ResolutionNode(subs={}, pending=[Atom(name="q", args=(_v("X"),))])
    ok = ResolutionNode(subs={"X": _c("c")})
    root = ResolutionNode(pending=[Atom(name="p", args=(_v("X"),))], children=[dead, ok])

    assert extract_query_results(root, ["X"]) == [{"X": _c("c")}]


def test_results_follow_child_order():
    root = ResolutionNode(
        pending=[Atom(name="p", args=(_v("X"),))],
        children=[
            ResolutionNode(subs={"X": _c("first")}),
            ResolutionNode(
                subs={},
                pending=[Atom(name="q", args=(_v("X"),))],
                children=[
                    ResolutionNode(subs={"X": _c("second")}),
                    ResolutionNode(subs={"X": _c("third")}),
                ],
            ),
            ResolutionNode(subs={"X": _c("fourth")}),
        ],
    )

    results = extract_query_results(root, ["X"])

    assert [r["X"].name for r in results] == ["first", "second", "third", "fourth"]


def test_child_bindings_take_precedence_over_parent():
    root = ResolutionNode(
        subs={"X": _c("parent"), "Y": _c("kept")},
        pending=[Atom(name="p", args=(_v("X"),))],
        children=[ResolutionNode(subs={"X": _c("child")})],
    )

    assert extract_query_results(root, ["X", "Y"]) == [{"X": _c("child"), "Y": _c("kept")}]


def test_root_without_children_and_goals_yields_one_empty_solution():
    assert extract_query_results(ResolutionNode(), []) == [{}]


def test_apply_substitution_follows_chains_inside_compounds():
    subs = {"X": _v("Y"), "Y": _f("f", _v("Z")), "Z": _c("c")}

    assert apply_substitution(_v("X"), subs) == _f("f", _c("c"))
    assert apply_substitution(_f("g", _v("X"), _v("W")), subs) == _f("g", _f("f", _c("c")), _v("W"))


def test_get_query_vars_nested_deduplicated_sorted():
    query = [
        Atom(name="q", args=(_v("Y"), _f("f", _v("X"), _f("g", _v("Z"))))),
        Atom(name="p", args=(_v("X"), _c("a"))),
    ]

    assert get_query_vars(query) == ["X", "Y", "Z"]


def test_get_query_vars_of_ground_query():
    assert get_query_vars([Atom(name="p", args=(_c("a"),))]) == []


def test_render_term():
    assert render_term(_c("john")) == "john"
    assert render_term(_v("X")) == "X"
    assert render_term(_f("f", _c("a"), _f("g", _v("X")))) == "f(a, g(X))"


def test_render_atom_and_statements():
    stmts = parse_program(tokenize(
        "done. parent(john, mary). grandparent(X, Y) :- parent(X, Z), parent(Z, Y). ?- done."
    ))

    assert render_atom(Atom(name="done")) == "done"
    assert [render_statement(s) for s in stmts] == [
        "done.",
        "parent(john, mary).",
        "grandparent(X, Y) :- parent(X, Z), parent(Z, Y).",
        "?- done.",
    ]


def test_render_solution():
    assert render_solution({}) == "true"
    assert render_solution({"X": _c("a"), "Y": _f("f", _c("b"))}) == "X = a, Y = f(b)"


def test_apply_substitution_and_render_long_binding_chain():
    # X_0 = s(X_1), X_1 = s(X_2), ..., X_1499 = s(z)
    depth = 1500
    subs = {f"X_{i}": _f("s", _v(f"X_{i + 1}")) for i in range(depth)}
    subs[f"X_{depth}"] = _c("z")

    term = apply_substitution(_v("X_0"), subs)

    assert render_term(term) == "s(" * depth + "z" + ")" * depth


def test_get_query_vars_of_deeply_nested_query():
    term = _v("X")
    for _ in range(1500):
        term = _f("s", term, _v("Y"))

    assert get_query_vars([Atom(name="p", args=(term,))]) == ["X", "Y"]
