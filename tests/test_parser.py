import pytest
from hypothesis import given
from hypothesis import strategies as st

from emojilang.emoji_ast import ASTNode
from emojilang.emoji_constants import keyword_tokens
from emojilang.emoji_errors import LexError, ParseError
from emojilang.emoji_lexer import Token, tokenize
from emojilang.emoji_parser import Parser, parse, parse_source


def parse_one(source: str) -> ASTNode:
    """Parse a source holding exactly one statement and return that statement."""
    program = parse_source(source)
    assert len(program.children) == 1
    return program.children[0]


def bound(node: ASTNode) -> str | None:
    return None if node.is_absent() else str(node.value)


# ----------------------------------------------------------------------
# Precedence and associativity
# ----------------------------------------------------------------------


def test_multiplicative_binds_tighter_than_additive() -> None:
    node = parse_one("1 + 2 * 3")
    assert node.kind == "additive"
    assert node.operator == "+"
    assert node.left.value == "1"
    assert node.right.kind == "multiplicative"
    assert (node.right.left.value, node.right.right.value) == ("2", "3")


def test_grouping_overrides_precedence_without_a_node() -> None:
    node = parse_one("(1 + 2) * 3")
    assert node.kind == "multiplicative"
    assert node.left.kind == "additive"
    assert parse_one("(x)").kind == "identifier"


@pytest.mark.parametrize(
    "source,kind,left_kind",
    [
        ("a - b - c", "additive", "additive"),
        ("a / b * c", "multiplicative", "multiplicative"),
        ("a || b || c", "logical_or", "logical_or"),
        ("a && b && c", "logical_and", "logical_and"),
        ("a < b < c", "comparison", "comparison"),
        ("a == b != c", "comparison", "comparison"),
    ],
)  # type: ignore[misc]
def test_binary_levels_are_left_associative(source: str, kind: str, left_kind: str) -> None:
    node = parse_one(source)
    assert node.kind == kind
    assert node.left.kind == left_kind
    assert node.right.kind == "identifier"
    assert node.right.value == "c"


@pytest.mark.parametrize(
    "source,outer,inner_side,inner",
    [
        ("a || b && c", "logical_or", "right", "logical_and"),
        ("a && b || c", "logical_or", "left", "logical_and"),
        ("a && b == c", "logical_and", "right", "comparison"),
        ("a + 1 >= b", "comparison", "left", "additive"),
        ("a % 2 - b", "additive", "left", "multiplicative"),
        ("-a * b", "multiplicative", "left", "unary"),
        ("!a && b", "logical_and", "left", "unary"),
    ],
)  # type: ignore[misc]
def test_precedence_ladder(source: str, outer: str, inner_side: str, inner: str) -> None:
    node = parse_one(source)
    assert node.kind == outer
    assert getattr(node, inner_side).kind == inner


def test_comparison_operators() -> None:
    for op in ("==", "!=", "<", ">", "<=", ">="):
        node = parse_one(f"a {op} b")
        assert node.kind == "comparison"
        assert node.operator == op


# ----------------------------------------------------------------------
# Conditional
# ----------------------------------------------------------------------


def test_conditional_is_right_associative() -> None:
    node = parse_one("a ?? b :: c ?? d :: e")
    assert node.kind == "conditional"
    assert node.condition.value == "a"
    assert node.consequence.value == "b"
    alt = node.alternative
    assert alt.kind == "conditional"
    assert [alt.condition.value, alt.consequence.value, alt.alternative.value] == ["c", "d", "e"]


def test_conditional_consequence_may_nest() -> None:
    node = parse_one("a ?? b ?? c :: d :: e")
    assert node.consequence.kind == "conditional"
    assert node.alternative.value == "e"


def test_conditional_condition_stops_at_logical_or() -> None:
    node = parse_one("a || b ?? c :: d")
    assert node.kind == "conditional"
    assert node.condition.kind == "logical_or"


def test_conditional_as_condition_needs_parentheses() -> None:
    node = parse_one("(a ?? b :: c) ?? d :: e")
    assert node.condition.kind == "conditional"
    assert node.alternative.value == "e"


def test_conditional_missing_alternative_marker() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("a ?? b")
    assert excinfo.value.expected == ("'::'",)
    assert excinfo.value.found.type == "EOF"
    assert "expected '::', got end of input" in str(excinfo.value)


# ----------------------------------------------------------------------
# Unary, strategy and iteration
# ----------------------------------------------------------------------


def test_strategy_prefixes_stack() -> None:
    node = parse_one("~~$$x")
    assert node.kind == "strategy"
    assert node.strategy == "~~"
    assert node.operand.kind == "strategy"
    assert node.operand.strategy == "$$"
    assert node.operand.operand.kind == "identifier"
    assert node.operand.operand.value == "x"


def test_double_negation() -> None:
    node = parse_one("--5")
    assert node.kind == "unary"
    assert node.operator == "-"
    assert node.operand.kind == "unary"
    assert node.operand.operand.kind == "number"
    assert node.operand.operand.value == "5"


def test_mixed_prefixes_wrap_outward() -> None:
    node = parse_one("!-##x")
    assert [node.kind, node.operand.kind, node.operand.operand.kind] == [
        "unary",
        "unary",
        "strategy",
    ]
    assert node.operand.operand.strategy == "##"


def test_prefix_wraps_whole_postfix_chain() -> None:
    node = parse_one("-f(x).y")
    assert node.kind == "unary"
    assert node.operand.kind == "member"


def test_iteration_expression() -> None:
    node = parse_one("@@ xs >> f(x)")
    assert node.kind == "iteration"
    assert node.collection.value == "xs"
    assert node.transform.kind == "call"


def test_iteration_collection_is_a_postfix_chain() -> None:
    node = parse_one("@@ data.items[1:] >> ~~g")
    assert node.collection.kind == "slice"
    assert node.collection.object.kind == "member"
    assert node.transform.kind == "strategy"


def test_iteration_collection_rejects_binary_expression() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("@@ a + b >> f")
    assert excinfo.value.expected == ("'>>'",)
    assert excinfo.value.found.value == "+"


def test_iteration_collection_allows_grouped_binary() -> None:
    node = parse_one("@@ (a + b) >> f")
    assert node.collection.kind == "additive"


def test_iteration_transform_stops_at_unary_level() -> None:
    node = parse_one("@@ xs >> f * 2")
    assert node.kind == "multiplicative"
    assert node.left.kind == "iteration"


def test_nested_iteration() -> None:
    node = parse_one("@@ xs >> @@ ys >> g")
    assert node.transform.kind == "iteration"
    assert node.transform.collection.value == "ys"


# ----------------------------------------------------------------------
# Postfix chains
# ----------------------------------------------------------------------


def test_postfix_chain_applies_left_to_right() -> None:
    node = parse_one("a[0](x).y[1:2]")
    assert node.kind == "slice"
    member = node.object
    assert member.kind == "member"
    assert member.member == "y"
    call = member.object
    assert call.kind == "call"
    assert [arg.value for arg in call.arguments] == ["x"]
    index = call.function
    assert index.kind == "index"
    assert index.object.value == "a"
    assert index.index.value == "0"


def test_long_postfix_chain() -> None:
    node = parse_one("f(x)[0].y[1:3](z)")
    kinds = []
    while node.kind != "identifier":
        kinds.append(node.kind)
        node = node.function if node.kind == "call" else node.object
    assert kinds == ["call", "slice", "member", "index", "call"]
    assert node.value == "f"


def test_call_arguments() -> None:
    assert parse_one("f()").arguments == []
    node = parse_one("f(a, b + 1, g(c))")
    assert [arg.kind for arg in node.arguments] == ["identifier", "additive", "call"]


def test_call_rejects_trailing_comma() -> None:
    with pytest.raises(ParseError):
        parse_source("f(a,)")


def test_member_requires_identifier() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("a.1")
    assert excinfo.value.expected == ("identifier",)


def test_member_on_number() -> None:
    node = parse_one("1.x")
    assert node.kind == "member"
    assert node.object.kind == "number"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a[:]", (None, None, None)),
        ("a[::]", (None, None, None)),
        ("a[::2]", (None, None, "2")),
        ("a[1:]", ("1", None, None)),
        ("a[:5]", (None, "5", None)),
        ("a[1:5:2]", ("1", "5", "2")),
        ("a[1::2]", ("1", None, "2")),
        ("a[1: :2]", ("1", None, "2")),
        ("a[:5:]", (None, "5", None)),
        ("a[x:'y']", ("x", "y", None)),
    ],
)  # type: ignore[misc]
def test_slice_bounds_are_optional(
    source: str, expected: tuple[str | None, str | None, str | None]
) -> None:
    node = parse_one(source)
    assert node.kind == "slice"
    assert node.object.value == "a"
    assert (bound(node.start), bound(node.end), bound(node.step)) == expected


def test_absent_bound_is_not_a_literal() -> None:
    node = parse_one("a[:0]")
    assert node.start.is_absent()
    assert node.start.value is None
    assert not node.end.is_absent()
    assert node.end.value == "0"


@pytest.mark.parametrize("source", ["a[x + 1:2]", "a[1:x + 1]", "a[f(1):2]", "a[-1:]"])  # type: ignore[misc]
def test_slice_bounds_must_be_primaries(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_grouped_slice_bound() -> None:
    node = parse_one("a[(x + 1):#[1]]")
    assert node.kind == "slice"
    assert node.start.kind == "additive"
    assert node.end.kind == "array"
    with pytest.raises(ParseError):
        parse_source("a[:#[1][0]]")


@pytest.mark.parametrize(
    "source,kind",
    [
        ("a[i]", "identifier"),
        ("a[i + 1]", "additive"),
        ("a[f(1)]", "call"),
        ("a[b.c * 2]", "multiplicative"),
        ("a[-1]", "unary"),
        ("a[b ?? 1 :: 2]", "conditional"),
        ("a[(b)]", "identifier"),
        ("a[@@ xs >> f]", "iteration"),
    ],
)  # type: ignore[misc]
def test_index_expression(source: str, kind: str) -> None:
    node = parse_one(source)
    assert node.kind == "index"
    assert node.index.kind == kind


# ----------------------------------------------------------------------
# Primaries
# ----------------------------------------------------------------------


def test_literals() -> None:
    assert parse_one("42").kind == "number"
    assert parse_one("4.25").value == "4.25"
    assert parse_one("true").kind == "boolean"
    assert parse_one("false").value == "false"
    assert parse_one("name_1").kind == "identifier"


def test_string_value_is_decoded() -> None:
    node = parse_one("'say \"hi\"'")
    assert node.kind == "string"
    assert node.value == 'say "hi"'
    assert parse_one('""').value == ""


def test_array_literals() -> None:
    assert parse_one("#[]").elements == []
    node = parse_one("#[1, a + b, #[2],]")
    assert [e.kind for e in node.elements] == ["number", "additive", "array"]


@pytest.mark.parametrize("source", ["#[1 2]", "#[,]", "#[1,,]", "#[1"])  # type: ignore[misc]
def test_bad_array_literals(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_map_literals() -> None:
    assert parse_one("#{}").entries == []
    node = parse_one("#{a: 1, 'b c': x + 1,}")
    keys = [(e.key.kind, e.key.value) for e in node.entries]
    assert keys == [("identifier", "a"), ("string", "b c")]
    assert node.entries[1].value.kind == "additive"


def test_map_keeps_duplicate_keys_in_order() -> None:
    node = parse_one("#{a: 1, a: 2}")
    assert [e.value.value for e in node.entries] == ["1", "2"]


@pytest.mark.parametrize("source", ["#{1: 2}", "#{a 1}", "#{a: }", "#{a: 1 b: 2}"])  # type: ignore[misc]
def test_bad_map_literals(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_unclosed_group() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("(a + b")
    assert excinfo.value.expected == ("')'",)


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------


def test_dataflow_definition() -> None:
    node = parse_one("x + 1 => y")
    assert node.kind == "dataflow"
    assert node.value.kind == "additive"
    assert node.value.left.value == "x"
    assert node.name.kind == "identifier"
    assert node.name.value == "y"


def test_dataflow_value_may_be_conditional() -> None:
    node = parse_one("a ?? b :: c => y")
    assert node.kind == "dataflow"
    assert node.value.kind == "conditional"


@pytest.mark.parametrize("source", ["x + 1 => 5", "x => 'y'", "x =>", "=> y"])  # type: ignore[misc]
def test_dataflow_requires_identifier_target(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_dataflow_error_reports_target_token() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("x + 1 => 5")
    err = excinfo.value
    assert err.expected == ("identifier",)
    assert err.found.value == "5"
    assert (err.line, err.col) == (1, 10)


def test_program_preserves_statement_order() -> None:
    program = parse_source("a => b\nc\n{ d }\n'e'")
    assert program.kind == "program"
    assert [s.kind for s in program.statements] == ["dataflow", "identifier", "block", "string"]


def test_blocks_nest() -> None:
    node = parse_one("{ x => y { } 1 }")
    assert node.kind == "block"
    assert [s.kind for s in node.statements] == ["dataflow", "block", "number"]
    assert node.statements[1].statements == []


@pytest.mark.parametrize("source", ["{ x", "}", "{ x => }"])  # type: ignore[misc]
def test_bad_blocks(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_empty_program() -> None:
    program = parse_source("  // nothing here\n")
    assert program.kind == "program"
    assert program.children == []


def test_comments_and_continuations_do_not_split_statements() -> None:
    joined = parse_source("1 +\\\n2")
    plain = parse_source("1 + 2")
    assert joined.same_shape(plain)
    assert len(joined.children) == 1
    commented = parse_source("1 /* one */ + // two\n 2")
    assert commented.same_shape(plain)


# ----------------------------------------------------------------------
# Positions and errors
# ----------------------------------------------------------------------


def test_node_spans() -> None:
    node = parse_one("foo + bar")
    assert (node.line, node.col, node.span) == (1, 1, (0, 9))
    assert node.right.span == (6, 9)
    assert node.right.col == 7


def test_multiline_positions() -> None:
    node = parse_one("f(\n  a,\n  b\n)")
    assert node.kind == "call"
    second = node.arguments[1]
    assert (second.line, second.col) == (3, 3)
    assert node.span == (0, 13)


def test_parse_error_position() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("1 + * 2")
    err = excinfo.value
    assert err.found.type == "MULT"
    assert err.position.offset == 4
    assert err.expected == ("expression",)
    assert str(err) == "expected expression, got MULT '*' at line 1, col 5"


def test_lex_error_propagates_through_parser() -> None:
    with pytest.raises(LexError):
        parse_source("x $ y")
    with pytest.raises(SyntaxError):
        parse_source("x ~ y")


def test_stray_pipe_is_rejected() -> None:
    with pytest.raises(ParseError):
        parse_source("a >> b")


def test_parser_accepts_token_list_without_eof() -> None:
    program = Parser([Token("IDENT", "x", 1, 1, 0)]).parse()
    assert [s.value for s in program.children] == ["x"]


def test_parse_accepts_lazy_stream() -> None:
    program = parse(tokenize("a b c"))
    assert [s.value for s in program.children] == ["a", "b", "c"]


def test_parse_statement_entry_point() -> None:
    parser = Parser(tokenize("x => y z"))
    first = parser.parse_statement()
    assert first.kind == "dataflow"
    assert parser.current().value == "z"


@given(
    names=st.lists(
        st.from_regex(r"[a-z_][a-z0-9_]{0,8}", fullmatch=True).filter(
            lambda s: s not in keyword_tokens
        ),
        min_size=1,
        max_size=6,
    ),
    ops=st.lists(st.sampled_from(["+", "-", "*", "/", "%", "&&", "||", "<", "=="]), min_size=5, max_size=5),
)  # type: ignore[misc]
def test_operator_chains_parse(names: list[str], ops: list[str]) -> None:
    source = names[0]
    for op, name in zip(ops, names[1:]):
        source += f" {op} {name}"
    program = parse_source(source + " => result")
    assert len(program.children) == 1
    leaves = [n.value for n in program.children[0].value.walk() if n.kind == "identifier"]
    assert leaves == names


def test_long_prefix_chain_parses() -> None:
    node = parse_source("-" * 1500 + "~~x").children[0]
    depth = 0
    while node.kind == "unary":
        assert node.operator == "-"
        depth += 1
        node = node.operand
    assert depth == 1500
    assert node.kind == "strategy"
    assert node.operand.value == "x"


def test_prefix_chain_spans_nest_inward() -> None:
    outer = parse_source("!-x").children[0]
    assert outer.span == (0, 3)
    assert outer.operand.span == (1, 3)
    assert outer.operand.operand.span == (2, 3)


def test_moderate_grouping_depth_parses() -> None:
    node = parse_source("(" * 50 + "x" + ")" * 50).children[0]
    assert node.kind == "identifier"
    assert node.span == (50, 51)


def test_excessive_grouping_depth_is_a_parse_error() -> None:
    depth = 5000
    with pytest.raises(ParseError) as excinfo:
        parse_source("(" * depth + "x" + ")" * depth)
    assert excinfo.value.reason == "expression nested too deeply"
    assert excinfo.value.expected == ("expression",)


def test_synthesized_eof_follows_multiline_string() -> None:
    tokens = [t for t in tokenize('"a\nbc"') if t.type != "EOF"]
    parser = Parser(tokens)
    parser.parse()
    eof = parser.current()
    expected = list(tokenize('"a\nbc"'))[-1]
    assert (eof.line, eof.col, eof.offset) == (expected.line, expected.col, expected.offset)
    assert (eof.line, eof.col) == (2, 4)
