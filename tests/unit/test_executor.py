"""Tests for expression execution, compile-once/run-many and evaluate()."""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_DOWN, ROUND_UP, Decimal, DivisionByZero, InvalidOperation
from fractions import Fraction

import pytest

from exactcalc.core.config import EvaluatorConfig
from exactcalc.core.errors import ArgumentError
from exactcalc.core.expression_lang import compile_expr, evaluate, execute, parse

D = Decimal


class TestArithmetic:
    """Literal-only expressions evaluate with decimal semantics."""

    def test_empty_string_is_zero(self) -> None:
        assert evaluate("") == 0

    def test_integer_is_treated_as_decimal(self) -> None:
        value = random.randint(1, 100)
        result = evaluate(str(value))
        assert isinstance(result, Decimal)
        assert result == value

    def test_two_plus_two_is_four(self) -> None:
        assert evaluate("2+2") == 4

    def test_add_two_decimals(self) -> None:
        assert evaluate("2.7+3.2") == D("5.9")

    def test_add_many_numbers(self) -> None:
        assert evaluate("1.2+3.4+5.6+7.8") == D("1.2") + D("3.4") + D("5.6") + D("7.8")
        assert evaluate("1.7+2.9+14.24+6.58") == D("1.7") + D("2.9") + D("14.24") + D("6.58")

    def test_subtract(self) -> None:
        assert evaluate("5-2") == 3
        assert evaluate("15.2-2.3-4.8-0.58") == D("15.2") - D("2.3") - D("4.8") - D("0.58")

    def test_add_and_subtract(self) -> None:
        assert evaluate("15+8-4-2+7") == 15 + 8 - 4 - 2 + 7
        assert evaluate("17.89-2.47+7.16") == D("17.89") - D("2.47") + D("7.16")

    def test_all_four_operators(self) -> None:
        assert evaluate("50-5*3*2+7") == 27
        assert evaluate("84+15+4-4*3*9+24+4-54/3-5-7+47") == 40
        assert evaluate("50-48/4/3+7*2*4+2+5+8") == 117
        assert evaluate("5/2/2+1.5*3+4.58") == D("10.33")
        assert evaluate("25/3+1.34*2.56+1.49+2.36/1.48") == (
            D(25) / D(3) + D("1.34") * D("2.56") + D("1.49") + D("2.36") / D("1.48")
        )
        assert evaluate("2*3+5-4-2*5+7") == 4

    def test_parentheses(self) -> None:
        assert evaluate("2*(5+3)") == 16
        assert evaluate("(5+3)*2") == 16
        assert evaluate("(5+3)*5-2") == 38
        assert evaluate("(5+3)*(5-2)") == 24
        assert evaluate("((5+3)*3-(8-2)/2)/2") == D("10.5")
        assert evaluate("(4*(3+5)-4-8/2-(6-4)/2)*((2+4)*4-(8-5)/3)-5") == 524
        assert evaluate("(((9-6/2)*2-4)/2-6-1)/(2+24/(2+4))") == D("-0.5")

    def test_signed_literals(self) -> None:
        assert evaluate("-5") == -5
        assert evaluate("+5") == 5
        assert evaluate("2*-3") == -6
        assert evaluate("2/-4") == D("-0.5")
        assert evaluate("(-5+2)") == -3
        assert evaluate("(1)-2") == -1

    def test_exponent_literal(self) -> None:
        assert evaluate("1.5e3+1") == 1501
        assert evaluate("2*-1e1") == -20

    def test_exponent_literal_scales_back_exactly(self) -> None:
        assert evaluate("3e-1*10") == 3
        assert evaluate("2e-2") == D("0.02")

    def test_exact_decimal_addition(self) -> None:
        # 0.1 + 0.2 is not 0.30000000000000004 here
        assert evaluate("0.1+0.2") == D("0.3")

    def test_division_uses_context_precision(self) -> None:
        assert evaluate("1/3") == D("0.3333333333333333333333333333")

    def test_long_chain_evaluates_iteratively(self) -> None:
        assert evaluate("+".join(["1"] * 5000)) == 5000

    def test_deep_nesting_evaluates_iteratively(self) -> None:
        depth = 2000
        assert evaluate("(" * depth + "1+2" + ")+1" * depth) == 3 + depth


class TestVariables:
    """Variables bind by name through the positional argument vector."""

    def test_simple_variables(self, ab_bindings: dict[str, Decimal]) -> None:
        a = ab_bindings["a"]
        assert evaluate("a", {"a": a}) == a
        assert evaluate("a+a", {"a": a}) == a + a
        assert evaluate("a+b", ab_bindings) == D("8.3")

    def test_binding_order_independent(self) -> None:
        assert evaluate("a-b", {"b": 1, "a": 10}) == 9
        assert evaluate("a-b", {"a": 10, "b": 1}) == 9

    def test_multiple_variables(self) -> None:
        a, b, c = D(6), D("4.5"), D("2.6")
        bindings = {"a": a, "b": b, "c": c}
        assert evaluate("(((9-a/2)*2-b)/2-a-1)/(2+c/(2+4))", bindings) == (
            (((D(9) - a / D(2)) * D(2) - b) / D(2) - a - D(1)) / (D(2) + c / (D(2) + D(4)))
        )
        assert evaluate("(c+b)*a", bindings) == (c + b) * a

    def test_numeric_values_are_coerced(self) -> None:
        assert evaluate("a+b+c", {"a": 6, "b": 4.5, "c": Fraction(1, 4)}) == D("10.75")
        assert evaluate("a*3", {"a": 2.6}) == D("7.8")

    def test_variable_minus_literal_is_subtraction(self) -> None:
        assert evaluate("a-2", {"a": 5}) == 3


class TestBindingErrors:
    """Binding mismatches raise ArgumentError."""

    def test_missing_binding(self) -> None:
        with pytest.raises(ArgumentError, match="contains 2 parameters but got 1") as exc_info:
            evaluate("a+b", {"a": 1})
        assert exc_info.value.missing == ("b",)

    def test_no_bindings(self) -> None:
        with pytest.raises(ArgumentError):
            evaluate("a")

    def test_excess_binding(self) -> None:
        with pytest.raises(ArgumentError, match="contains 1 parameters but got 2"):
            evaluate("a", {"a": 1, "b": 2})

    def test_excess_binding_on_constant(self) -> None:
        with pytest.raises(ArgumentError):
            evaluate("", {"a": 1})

    def test_wrong_names_enumerated(self) -> None:
        with pytest.raises(ArgumentError, match="No values provided for parameters: a,c") as exc_info:
            evaluate("a+b+c", {"b": 1, "x": 2, "y": 3})
        assert exc_info.value.missing == ("a", "c")

    @pytest.mark.parametrize("value", ["1", None, True, float("nan"), float("inf"), D("NaN")])
    def test_invalid_value(self, value: object) -> None:
        with pytest.raises(ArgumentError, match="Invalid value for parameter 'a'"):
            evaluate("a", {"a": value})

    def test_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            evaluate("a+b", {"a": 1})


class TestArithmeticErrors:
    """Arithmetic faults surface as decimal signals, never Infinity or NaN."""

    def test_division_by_zero(self) -> None:
        with pytest.raises(DivisionByZero):
            evaluate("1/0")

    def test_division_by_zero_is_arithmetic_error(self) -> None:
        with pytest.raises(ArithmeticError):
            evaluate("1/0")
        with pytest.raises(ZeroDivisionError):
            evaluate("a/(b-b)", {"a": 1, "b": 2})

    def test_zero_by_zero(self) -> None:
        with pytest.raises(InvalidOperation):
            evaluate("0/0")


class TestCompileOnce:
    """A compiled expression runs many times without re-parsing."""

    def test_invoke_multiple_times(self) -> None:
        fn = compile_expr("(a+b)/(a+c)")
        a, b, c = D(6), D("3.9"), D("4.9")
        assert fn({"a": a, "b": b, "c": c}) == (a + b) / (a + c)

        a, b, c = D("5.4"), D("-2.4"), D("7.5")
        assert fn({"a": a, "b": b, "c": c}) == (a + b) / (a + c)

    def test_variables_exposed(self) -> None:
        fn = compile_expr("x*y+x")
        assert fn.variables == ("x", "y")
        assert fn.expression.source == "x*y+x"

    def test_idempotent(self) -> None:
        compiled = parse("a/b+1")
        bindings = {"a": D(1), "b": D(7)}
        first = execute(compiled, bindings)
        second = execute(compiled, bindings)
        assert first.as_tuple() == second.as_tuple()

    def test_failed_call_does_not_affect_next(self) -> None:
        fn = compile_expr("a/b")
        with pytest.raises(DivisionByZero):
            fn({"a": 1, "b": 0})
        assert fn({"a": 1, "b": 4}) == D("0.25")

    def test_concurrent_execution(self) -> None:
        compiled = parse("a*b+a")
        inputs = [{"a": D(i), "b": D(i + 1)} for i in range(200)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda b: execute(compiled, b), inputs))
        assert results == [b["a"] * b["b"] + b["a"] for b in inputs]


class TestConfigDrivenContext:
    """Precision and rounding come from EvaluatorConfig."""

    def test_precision(self) -> None:
        assert evaluate("1/3", config=EvaluatorConfig(precision=5)) == D("0.33333")

    def test_rounding(self) -> None:
        assert evaluate("2/3", config=EvaluatorConfig(precision=3, rounding=ROUND_UP)) == D("0.667")
        assert evaluate("2/3", config=EvaluatorConfig(precision=3, rounding=ROUND_DOWN)) == D(
            "0.666"
        )

    def test_explicit_context(self) -> None:
        compiled = parse("10/4")
        assert execute(compiled, context=EvaluatorConfig(precision=2).context()) == D("2.5")
