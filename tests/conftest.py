"""Shared test helpers for the magi test suite."""

from magi.model.expressions import (
    CallExpr,
    FieldPatternExpr,
    IdentifierExpr,
    InfixExpr,
    InfixOp,
    LiteralExpr,
    LiteralKind,
    MethodExpr,
    PairPatternExpr,
    TuplePatternExpr,
    ValuePatternExpr,
    VariablePatternExpr,
)
from magi.interpreter import IntValue


def lit_int(n):
    return LiteralExpr(literal=LiteralKind.INT, lexeme=str(n))


def lit_float(text):
    return LiteralExpr(literal=LiteralKind.FLOAT, lexeme=text)


def lit_str(text):
    return LiteralExpr(literal=LiteralKind.STRING, lexeme=text)


def lit_bool(flag):
    return LiteralExpr(literal=LiteralKind.BOOLEAN, lexeme="true" if flag else "false")


def ident(name):
    return IdentifierExpr(lexeme=name)


def val(expr):
    """Shorthand for a value pattern wrapping *expr*."""
    return ValuePatternExpr(expression=expr)


def var(name=None, type_id=None):
    return VariablePatternExpr(name=name, type_id=type_id)


def pair(left, right):
    return PairPatternExpr(left=left, right=right)


def tup(child):
    return TuplePatternExpr(child=child)


def field(name, value):
    return FieldPatternExpr(name=name, value=value)


def add(left, right):
    return InfixExpr(left=left, operator=InfixOp.ADD, right=right)


def call(name, signature=None):
    return CallExpr(name=name, signature=signature)


def method(name, signature, body):
    return MethodExpr(name=name, signature=signature, body=body)


def i(n):
    """Shorthand for IntValue(value=n)."""
    return IntValue(value=n)
