"""Tests for Pydantic validation of expression tree nodes."""

import pytest
from pydantic import TypeAdapter, ValidationError

from magi.model.expressions import (
    CallExpr,
    Expression,
    FieldPatternExpr,
    InfixExpr,
    InfixOp,
    LiteralExpr,
    LiteralKind,
    PairPatternExpr,
    ValuePatternExpr,
    VariablePatternExpr,
)

ONE = LiteralExpr(literal=LiteralKind.INT, lexeme="1")


# ===========================================================================
# Pattern validators
# ===========================================================================


class TestFieldPattern:
    def test_valid(self):
        node = FieldPatternExpr(name="width", value=VariablePatternExpr(name="w"))
        assert node.name == "width"

    def test_empty_name(self):
        with pytest.raises(ValidationError, match="field pattern requires a non-empty name"):
            FieldPatternExpr(name="", value=VariablePatternExpr(name="w"))


class TestVariablePattern:
    def test_unnamed_allowed(self):
        node = VariablePatternExpr()
        assert node.name is None
        assert node.type_id is None

    def test_typed(self):
        assert VariablePatternExpr(name="n", type_id="Int").type_id == "Int"

    def test_empty_name(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            VariablePatternExpr(name="")


# ===========================================================================
# Discriminated unions
# ===========================================================================


class TestExpressionUnion:
    adapter = TypeAdapter(Expression)

    def test_literal_from_dict(self):
        node = self.adapter.validate_python({"kind": "literal", "literal": "Float", "lexeme": "2.5"})
        assert isinstance(node, LiteralExpr)
        assert node.literal is LiteralKind.FLOAT

    def test_nested_from_dict(self):
        node = self.adapter.validate_python({
            "kind": "infix",
            "left": {"kind": "literal", "literal": "Int", "lexeme": "1"},
            "operator": "*",
            "right": {"kind": "identifier", "lexeme": "x"},
        })
        assert isinstance(node, InfixExpr)
        assert node.operator is InfixOp.MUL
        assert node.right.lexeme == "x"

    def test_call_signature_union(self):
        node = self.adapter.validate_python({
            "kind": "call",
            "name": "f",
            "signature": {
                "kind": "pair_pattern",
                "left": {"kind": "value_pattern", "expression": {"kind": "literal", "literal": "Int", "lexeme": "1"}},
                "right": {"kind": "variable_pattern", "name": "y"},
            },
        })
        assert isinstance(node, CallExpr)
        assert isinstance(node.signature, PairPatternExpr)
        assert isinstance(node.signature.left, ValuePatternExpr)

    def test_position_optional(self):
        node = self.adapter.validate_python({
            "kind": "identifier",
            "lexeme": "x",
            "position": {"line": 3, "column": 7},
        })
        assert node.position.line == 3
        assert ONE.position is None

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "while", "lexeme": "x"})

    def test_unknown_operator(self):
        with pytest.raises(ValidationError):
            InfixExpr(left=ONE, operator="^", right=ONE)

    def test_unknown_literal_kind(self):
        with pytest.raises(ValidationError):
            LiteralExpr(literal="Char", lexeme="c")

    def test_nested_validator_runs(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({
                "kind": "call",
                "name": "f",
                "signature": {"kind": "variable_pattern", "name": ""},
            })
