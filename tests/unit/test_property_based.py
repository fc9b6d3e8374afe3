"""
Property-based tests using Hypothesis.

These tests verify invariants across a wide range of inputs,
replacing the need for exhaustive example-based tests.
"""

import math

from hypothesis import given, settings
from hypothesis import strategies as st

from exprwhizz.core.dictionary import REHASH_THRESHOLD, Dictionary, hash_key
from exprwhizz.core.errors import WhizzError
from exprwhizz.core.expression_lang import evaluate, parse_expr, stringify, tokenize
from exprwhizz.core.expression_lang.tree import count, depth
from exprwhizz.core.ir.expressions import render

# =============================================================================
# Strategies
# =============================================================================

_literals = st.integers(min_value=0, max_value=20).map(lambda n: (str(n), float(n)))


def _combine(children: st.SearchStrategy) -> st.SearchStrategy:
    def negate(child: tuple[str, float]) -> tuple[str, float]:
        return f"(-{child[0]})", -child[1]

    def binary(args: tuple[str, tuple[str, float], tuple[str, float]]) -> tuple[str, float]:
        op, (ltext, lval), (rtext, rval) = args
        if op == "+":
            value = lval + rval
        elif op == "-":
            value = lval - rval
        else:
            value = lval * rval
        return f"({ltext} {op} {rtext})", value

    return st.one_of(
        children.map(negate),
        st.tuples(st.sampled_from("+-*"), children, children).map(binary),
    )


# (source text, value computed independently)
arithmetic = st.recursive(_literals, _combine, max_leaves=12)

names = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_0123456789"),
    min_size=1,
    max_size=31,
).filter(lambda s: not s[0].isdigit())


# =============================================================================
# Expression Language Properties
# =============================================================================


class TestExpressionProperties:
    """Property-based tests for tokenizer, parser and evaluator."""

    @given(st.text(max_size=200))
    @settings(max_examples=300)
    def test_pipeline_never_crashes(self, text: str) -> None:
        """Invariant: arbitrary input only ever fails with a WhizzError."""
        try:
            tree = parse_expr(text)
            if tree is not None:
                evaluate(tree, Dictionary())
        except WhizzError:
            pass

    @given(arithmetic)
    @settings(max_examples=200)
    def test_evaluation_matches_reference(self, case: tuple[str, float]) -> None:
        """Invariant: fully parenthesized arithmetic evaluates like Python floats."""
        text, expected = case
        tree = parse_expr(text)
        assert tree is not None
        assert evaluate(tree, Dictionary()) == expected

    @given(arithmetic)
    @settings(max_examples=200)
    def test_stringify_round_trip(self, case: tuple[str, float]) -> None:
        """Invariant: re-parsing the rendered tree gives the same tree."""
        tree = parse_expr(case[0])
        rendered = stringify(tree)
        reparsed = parse_expr(rendered)
        assert reparsed == tree
        assert stringify(reparsed) == rendered

    @given(arithmetic)
    @settings(max_examples=100)
    def test_depth_bounded_by_count(self, case: tuple[str, float]) -> None:
        """Invariant: 1 <= depth <= count for every tree."""
        tree = parse_expr(case[0])
        assert 1 <= depth(tree) <= count(tree)

    @given(arithmetic, st.integers(min_value=0, max_value=300))
    @settings(max_examples=200)
    def test_stringify_respects_capacity(self, case: tuple[str, float], capacity: int) -> None:
        """Invariant: output length is at most capacity - 1."""
        tree = parse_expr(case[0])
        assert len(stringify(tree, capacity)) <= max(capacity - 1, 0)

    @given(arithmetic, st.integers(min_value=0, max_value=120))
    @settings(max_examples=200)
    def test_bounded_render_is_prefix(self, case: tuple[str, float], limit: int) -> None:
        """Invariant: stopping early yields a prefix of the full rendering."""
        tree = parse_expr(case[0])
        full = render(tree)
        partial = render(tree, limit)
        assert full.startswith(partial)
        assert partial == full or len(partial) > limit

    @given(st.lists(st.integers(min_value=1, max_value=9), min_size=2, max_size=8))
    @settings(max_examples=100)
    def test_subtraction_is_left_associative(self, numbers: list[int]) -> None:
        """Invariant: a - b - c == (a - b) - c."""
        tree = parse_expr(" - ".join(str(n) for n in numbers))
        expected = float(numbers[0])
        for n in numbers[1:]:
            expected -= n
        assert evaluate(tree, Dictionary()) == expected

    @given(st.lists(st.integers(min_value=1, max_value=3), min_size=2, max_size=4))
    @settings(max_examples=100)
    def test_power_is_right_associative(self, numbers: list[int]) -> None:
        """Invariant: a ^ b ^ c == a ^ (b ^ c)."""
        tree = parse_expr(" ^ ".join(str(n) for n in numbers))
        expected = float(numbers[-1])
        for n in reversed(numbers[:-1]):
            try:
                expected = math.pow(n, expected)
            except OverflowError:
                expected = math.inf
        assert evaluate(tree, Dictionary()) == expected

    @given(names, st.floats(allow_nan=False, allow_infinity=False, width=32))
    @settings(max_examples=100)
    def test_assignment_round_trip(self, name: str, number: float) -> None:
        """Invariant: after ``name = v`` the variable evaluates to v."""
        env = Dictionary()
        env.store("v", number)
        assert evaluate(parse_expr(f"{name} = v"), env) == number
        assert evaluate(parse_expr(name), env) == number

    @given(st.text(alphabet=st.sampled_from("0123456789+-*/^()= xy"), max_size=30))
    @settings(max_examples=200)
    def test_tokens_never_contain_end(self, text: str) -> None:
        """Invariant: END is synthesized by the stream, never stored."""
        tokens = tokenize(text)
        assert all(str(t.kind) != "(end)" for t in tokens.tokens)


# =============================================================================
# Dictionary Properties
# =============================================================================


class TestDictionaryProperties:
    """Dictionary behaves like a dict under any sequence of operations."""

    @given(
        st.lists(
            st.tuples(
                st.sampled_from(["store", "delete"]),
                st.sampled_from([f"k{i}" for i in range(12)]),
                st.integers(min_value=-100, max_value=100),
            ),
            max_size=120,
        )
    )
    @settings(max_examples=200)
    def test_matches_dict_model(self, ops: list[tuple[str, str, int]]) -> None:
        env = Dictionary()
        model: dict[str, float] = {}
        for op, key, number in ops:
            if op == "store":
                env.store(key, float(number))
                model[key] = float(number)
            elif key in model:
                env.delete(key)
                del model[key]
            assert env.size() == len(model)
            assert env.load_factor() <= REHASH_THRESHOLD

        assert dict(env.items()) == model
        for i in range(12):
            assert env.retrieve(f"k{i}") == model.get(f"k{i}")

    @given(names, st.integers(min_value=0, max_value=10))
    def test_hash_in_range(self, key: str, exponent: int) -> None:
        capacity = 8 << exponent
        assert 0 <= hash_key(key, capacity) < capacity
