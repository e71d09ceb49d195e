"""Value system for the interpreter.

Runtime values ("objects") are frozen pydantic models tagged with a
``kind`` literal. Each object carries a unique ``id`` that plays no part
in equality: two objects are equal when their variant and content are.

This module also holds the runtime patterns, the multimethod containers
and the conversion from parser nodes to objects.
"""

from __future__ import annotations

import math
import re
from typing import Annotated, Literal, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from magi.model.expressions import Expression, LiteralKind, PatternNode

from ._errors import MethodAlreadyExistsError, UnexpectedTypeError

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U64_MAX = (1 << 64) - 1

_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]+(\.[0-9]*)?([eE][+-]?[0-9]+)?")


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------

class _ObjBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _ObjBase):
            return NotImplemented
        return type(self) is type(other) and self._content() == other._content()

    def __hash__(self) -> int:
        return hash(self.kind)

    def _content(self) -> dict:
        return {k: v for k, v in self.__dict__.items() if k != "id"}

    def __str__(self) -> str:
        return "_"


class MultimethodValue(_ObjBase):
    """A multimethod bound to a name."""

    kind: Literal["multimethod"] = "multimethod"
    multimethod: Multimethod


class PatternValue(_ObjBase):
    """A pattern passed around as data."""

    kind: Literal["pattern"] = "pattern"
    pattern: Pattern


class TypeValue(_ObjBase):
    kind: Literal["type"] = "type"
    name: str


class IntValue(_ObjBase):
    kind: Literal["int"] = "int"
    value: int = Field(ge=I64_MIN, le=I64_MAX)

    def __str__(self) -> str:
        return str(self.value)


class UIntValue(_ObjBase):
    kind: Literal["uint"] = "uint"
    value: int = Field(ge=0, le=U64_MAX)

    def __str__(self) -> str:
        return str(self.value)


class FloatValue(_ObjBase):
    """A float kept as its decimal text; parsed on demand."""

    kind: Literal["float"] = "float"
    text: str

    def as_float(self) -> float:
        return float(self.text)

    def __str__(self) -> str:
        return self.text


class BooleanValue(_ObjBase):
    kind: Literal["boolean"] = "boolean"
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


class StringValue(_ObjBase):
    kind: Literal["string"] = "string"
    value: str

    def __str__(self) -> str:
        return self.value


class NothingValue(_ObjBase):
    kind: Literal["nothing"] = "nothing"

    def __str__(self) -> str:
        return "nothing"


class ListValue(_ObjBase):
    kind: Literal["list"] = "list"
    item: Obj | None = None


class ExpressionValue(_ObjBase):
    """An expression node the interpreter has not turned into a value yet."""

    kind: Literal["expression"] = "expression"
    expression: Expression


Obj = Annotated[
    Union[
        MultimethodValue,
        PatternValue,
        TypeValue,
        IntValue,
        UIntValue,
        FloatValue,
        BooleanValue,
        StringValue,
        NothingValue,
        ListValue,
        ExpressionValue,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Runtime patterns
# ---------------------------------------------------------------------------

class FieldPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    name: str
    value: Pattern


class PairPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pair"] = "pair"
    left: Pattern
    right: Pattern


class TuplePattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tuple"] = "tuple"
    child: Pattern


class ValuePattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["value"] = "value"
    obj: Obj


class VariablePattern(BaseModel):
    """A name with an optional type tag. Also the key type of environments."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    name: str | None = None
    type_id: str | None = None


Pattern = Annotated[
    Union[FieldPattern, PairPattern, TuplePattern, ValuePattern, VariablePattern],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Multimethods
# ---------------------------------------------------------------------------

class Receiver(BaseModel):
    """One (signature, body) pair of a multimethod."""

    model_config = ConfigDict(frozen=True)

    signature: Pattern | None = None
    body: Obj


class Multimethod(BaseModel):
    """A named, ordered, append-only set of receivers."""

    name: str
    receivers: list[Receiver] = []

    def define(self, signature: Pattern | None, body: Obj) -> Receiver:
        """Append a receiver unless one with an equal signature exists."""
        for receiver in self.receivers:
            if receiver.signature == signature:
                raise MethodAlreadyExistsError(self.name)
        receiver = Receiver(signature=signature, body=body)
        self.receivers.append(receiver)
        return receiver


MultimethodValue.model_rebuild()
PatternValue.model_rebuild()
ListValue.model_rebuild()
FieldPattern.model_rebuild()
PairPattern.model_rebuild()
TuplePattern.model_rebuild()
ValuePattern.model_rebuild()
Receiver.model_rebuild()
Multimethod.model_rebuild()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

_TYPE_NAMES = {
    "multimethod": "Multimethod",
    "int": "Int",
    "uint": "UInt",
    "float": "Float",
    "string": "String",
    "boolean": "Boolean",
    "list": "List",
    "nothing": "Nothing",
}

_PATTERN_TYPE_NAMES = {
    "field": "FieldPattern",
    "pair": "PairPattern",
    "tuple": "TuplePattern",
    "value": "ValuePattern",
    "variable": "VariablePattern",
}


def type_name(obj: Obj) -> str:
    """User-facing type name of an object (``Int``, ``PairPattern``, ...)."""
    if obj.kind == "type":
        return obj.name
    if obj.kind == "pattern":
        return _PATTERN_TYPE_NAMES[obj.pattern.kind]
    if obj.kind == "expression":
        return obj.expression.kind.capitalize() + "Expression"
    return _TYPE_NAMES[obj.kind]


def is_truthy(obj: Obj) -> bool:
    """Only ``true`` is truthy."""
    return obj.kind == "boolean" and obj.value is True


# ---------------------------------------------------------------------------
# Conversion from parser nodes
# ---------------------------------------------------------------------------

def obj_from_expression(expression: Expression) -> Obj:
    """Wrap a parser node as an object.

    - literals -> Int / Float / String / Boolean (parsed from the lexeme)
    - types -> Type
    - lists -> List with the nested item converted
    - patterns -> Pattern
    - everything else -> Expression, to be evaluated later
    """
    kind = expression.kind
    if kind == "literal":
        return parse_literal(expression.literal, expression.lexeme)
    if kind == "type":
        return TypeValue(name=expression.lexeme)
    if kind == "list":
        item = obj_from_expression(expression.item) if expression.item is not None else None
        return ListValue(item=item)
    if kind == "pattern":
        return PatternValue(pattern=pattern_from_node(expression.pattern))
    return ExpressionValue(expression=expression)


def parse_literal(literal: LiteralKind, lexeme: str) -> Obj:
    """Parse a literal lexeme into an object.

    - Int: a signed 64-bit decimal
    - Float: a finite decimal, optionally with an exponent, stored as written
    - Boolean: ``true`` / ``false``
    - String: the lexeme itself
    """
    if literal == LiteralKind.INT:
        if not _INT_RE.fullmatch(lexeme):
            raise UnexpectedTypeError("Int", repr(lexeme))
        digits = lexeme.lstrip("-").lstrip("0") or "0"
        if len(digits) > 19:
            raise UnexpectedTypeError("Int", f"out of range {lexeme}")
        value = -int(digits) if lexeme.startswith("-") else int(digits)
        if not I64_MIN <= value <= I64_MAX:
            raise UnexpectedTypeError("Int", f"out of range {lexeme}")
        return IntValue(value=value)

    if literal == LiteralKind.FLOAT:
        if not _FLOAT_RE.fullmatch(lexeme):
            raise UnexpectedTypeError("Float", repr(lexeme))
        if not math.isfinite(float(lexeme)):
            raise UnexpectedTypeError("Float", f"out of range {lexeme}")
        return FloatValue(text=lexeme)

    if literal == LiteralKind.BOOLEAN:
        if lexeme == "true":
            return BooleanValue(value=True)
        if lexeme == "false":
            return BooleanValue(value=False)
        raise UnexpectedTypeError("Boolean", repr(lexeme))

    return StringValue(value=lexeme)


def pattern_from_node(node: PatternNode) -> Pattern:
    """Convert a parser pattern into a runtime pattern."""
    kind = node.kind
    if kind == "field_pattern":
        return FieldPattern(name=node.name, value=pattern_from_node(node.value))
    if kind == "pair_pattern":
        return PairPattern(left=pattern_from_node(node.left), right=pattern_from_node(node.right))
    if kind == "tuple_pattern":
        return TuplePattern(child=pattern_from_node(node.child))
    if kind == "value_pattern":
        return ValuePattern(obj=obj_from_expression(node.expression))
    return VariablePattern(name=node.name, type_id=node.type_id)
