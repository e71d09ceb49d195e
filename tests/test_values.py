"""Tests for the interpreter value system."""

import pytest
from pydantic import ValidationError

from conftest import call, i, lit_int, var

from magi.model.expressions import (
    BlockExpr,
    ConditionalExpr,
    ListExpr,
    LiteralKind,
    PatternExpr,
    TypeExpr,
)
from magi.interpreter import (
    BooleanValue,
    ExpressionValue,
    FloatValue,
    IntValue,
    ListValue,
    NothingValue,
    PatternValue,
    StringValue,
    TypeValue,
    UIntValue,
    UnexpectedTypeError,
    VariablePattern,
    is_truthy,
    type_name,
)
from magi.interpreter._values import (
    I64_MAX,
    U64_MAX,
    obj_from_expression,
    parse_literal,
)


# ---------------------------------------------------------------------------
# parse_literal
# ---------------------------------------------------------------------------

class TestParseLiteral:
    def test_integer(self):
        assert parse_literal(LiteralKind.INT, "42") == IntValue(value=42)

    def test_negative_integer(self):
        assert parse_literal(LiteralKind.INT, "-7") == IntValue(value=-7)

    def test_integer_max(self):
        assert parse_literal(LiteralKind.INT, str(I64_MAX)).value == I64_MAX

    def test_integer_out_of_range(self):
        with pytest.raises(UnexpectedTypeError, match="out of range"):
            parse_literal(LiteralKind.INT, str(I64_MAX + 1))

    def test_integer_malformed(self):
        with pytest.raises(UnexpectedTypeError, match="Expected Int"):
            parse_literal(LiteralKind.INT, "4x")

    def test_float_keeps_text(self):
        obj = parse_literal(LiteralKind.FLOAT, "4.50")
        assert isinstance(obj, FloatValue)
        assert obj.text == "4.50"
        assert obj.as_float() == pytest.approx(4.5)

    def test_float_malformed(self):
        with pytest.raises(UnexpectedTypeError, match="Expected Float"):
            parse_literal(LiteralKind.FLOAT, "four")

    def test_true(self):
        assert parse_literal(LiteralKind.BOOLEAN, "true") == BooleanValue(value=True)

    def test_false(self):
        assert parse_literal(LiteralKind.BOOLEAN, "false") == BooleanValue(value=False)

    def test_boolean_is_case_sensitive(self):
        with pytest.raises(UnexpectedTypeError, match="Expected Boolean"):
            parse_literal(LiteralKind.BOOLEAN, "True")

    @pytest.mark.parametrize("lexeme", [" 1", "1_000", "+1", "0x10", ""])
    def test_integer_strict_lexeme(self, lexeme):
        with pytest.raises(UnexpectedTypeError, match="Expected Int"):
            parse_literal(LiteralKind.INT, lexeme)

    def test_integer_leading_zeros(self):
        assert parse_literal(LiteralKind.INT, "007") == IntValue(value=7)

    def test_integer_huge_lexeme(self):
        with pytest.raises(UnexpectedTypeError, match="out of range"):
            parse_literal(LiteralKind.INT, "9" * 5000)

    @pytest.mark.parametrize("lexeme", ["inf", "nan", "-Infinity", "1_0.5", " 2.5", ".5"])
    def test_float_strict_lexeme(self, lexeme):
        with pytest.raises(UnexpectedTypeError, match="Expected Float"):
            parse_literal(LiteralKind.FLOAT, lexeme)

    def test_float_exponent(self):
        assert parse_literal(LiteralKind.FLOAT, "1.5e3").text == "1.5e3"

    def test_float_overflowing_lexeme(self):
        with pytest.raises(UnexpectedTypeError, match="out of range 1e400"):
            parse_literal(LiteralKind.FLOAT, "1e400")

    def test_string(self):
        assert parse_literal(LiteralKind.STRING, "hello") == StringValue(value="hello")


# ---------------------------------------------------------------------------
# Identity and equality
# ---------------------------------------------------------------------------

class TestIdentity:
    def test_equal_content_distinct_identity(self):
        a, b = i(3), i(3)
        assert a == b
        assert a.id != b.id

    def test_different_content(self):
        assert i(3) != i(4)

    def test_different_variant_same_number(self):
        assert IntValue(value=1) != UIntValue(value=1)

    def test_nested_equality_ignores_identity(self):
        assert ListValue(item=i(1)) == ListValue(item=i(1))

    def test_pattern_values_compare_by_content(self):
        assert PatternValue(pattern=VariablePattern(name="x")) == PatternValue(
            pattern=VariablePattern(name="x"),
        )

    def test_equal_values_hash_equal(self):
        assert hash(i(3)) == hash(i(3))

    def test_frozen(self):
        obj = i(3)
        with pytest.raises(ValidationError):
            obj.value = 4

    def test_int_range_validated(self):
        with pytest.raises(ValidationError):
            IntValue(value=I64_MAX + 1)

    def test_uint_range_validated(self):
        with pytest.raises(ValidationError):
            UIntValue(value=-1)
        assert UIntValue(value=U64_MAX).value == U64_MAX


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_only_true_is_truthy(self):
        assert is_truthy(BooleanValue(value=True))
        assert not is_truthy(BooleanValue(value=False))
        assert not is_truthy(i(1))
        assert not is_truthy(StringValue(value="true"))
        assert not is_truthy(NothingValue())

    def test_primitive_type_names(self):
        assert type_name(i(1)) == "Int"
        assert type_name(UIntValue(value=1)) == "UInt"
        assert type_name(FloatValue(text="1.0")) == "Float"
        assert type_name(StringValue(value="")) == "String"
        assert type_name(BooleanValue(value=True)) == "Boolean"
        assert type_name(NothingValue()) == "Nothing"
        assert type_name(ListValue()) == "List"

    def test_type_value_is_named_after_itself(self):
        assert type_name(TypeValue(name="Point")) == "Point"

    def test_pattern_type_name(self):
        assert type_name(PatternValue(pattern=VariablePattern(name="x"))) == "VariablePattern"

    def test_expression_type_name(self):
        assert type_name(ExpressionValue(expression=call("f"))) == "CallExpression"


class TestDisplay:
    def test_numbers(self):
        assert str(i(-5)) == "-5"
        assert str(UIntValue(value=5)) == "5"
        assert str(FloatValue(text="2.5")) == "2.5"

    def test_boolean(self):
        assert str(BooleanValue(value=False)) == "false"

    def test_nothing(self):
        assert str(NothingValue()) == "nothing"

    def test_other(self):
        assert str(TypeValue(name="Int")) == "_"


# ---------------------------------------------------------------------------
# obj_from_expression
# ---------------------------------------------------------------------------

class TestFromExpression:
    def test_literal(self):
        assert obj_from_expression(lit_int(7)) == i(7)

    def test_type(self):
        assert obj_from_expression(TypeExpr(lexeme="Int")) == TypeValue(name="Int")

    def test_empty_list(self):
        assert obj_from_expression(ListExpr()) == ListValue()

    def test_list_item_converted(self):
        assert obj_from_expression(ListExpr(item=lit_int(1))) == ListValue(item=i(1))

    def test_pattern(self):
        obj = obj_from_expression(PatternExpr(pattern=var("x")))
        assert obj == PatternValue(pattern=VariablePattern(name="x"))

    def test_other_kinds_stay_expressions(self):
        node = ConditionalExpr(condition=lit_int(1), then_arm=lit_int(2))
        obj = obj_from_expression(node)
        assert isinstance(obj, ExpressionValue)
        assert obj.expression == node

    def test_block_stays_expression(self):
        assert obj_from_expression(BlockExpr()).kind == "expression"
