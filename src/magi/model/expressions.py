"""Expression tree nodes handed to the interpreter by the parser.

Every node is a pydantic model tagged with a ``kind`` literal so that a
whole tree can be validated from plain data. Patterns are a second,
smaller discriminated union embedded in calls, method definitions and
``PatternExpr`` nodes.

Nodes also carry the raw ``lexeme`` and an optional source ``position``.
The interpreter only reads the lexeme where a literal has to be parsed.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


class SourcePosition(BaseModel):
    """Line/column of the first character of a node (1-based)."""

    line: int = 1
    column: int = 1


class LiteralKind(str, Enum):
    INT = "Int"
    FLOAT = "Float"
    STRING = "String"
    BOOLEAN = "Boolean"


class InfixOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

class FieldPatternExpr(BaseModel):
    """A named argument pattern: ``name: value``."""

    kind: Literal["field_pattern"] = "field_pattern"
    name: str
    value: PatternNode

    @model_validator(mode="after")
    def _name_check(self):
        if not self.name:
            raise ValueError("field pattern requires a non-empty name")
        return self


class PairPatternExpr(BaseModel):
    """Two patterns separated by a comma, e.g. the arguments of ``f(a, b)``."""

    kind: Literal["pair_pattern"] = "pair_pattern"
    left: PatternNode
    right: PatternNode


class TuplePatternExpr(BaseModel):
    """A parenthesized pattern."""

    kind: Literal["tuple_pattern"] = "tuple_pattern"
    child: PatternNode


class ValuePatternExpr(BaseModel):
    """An expression used as a pattern, matched by value."""

    kind: Literal["value_pattern"] = "value_pattern"
    expression: Expression


class VariablePatternExpr(BaseModel):
    """An optionally named, optionally typed placeholder: ``n``, ``n: Int``, ``_``."""

    kind: Literal["variable_pattern"] = "variable_pattern"
    name: str | None = None
    type_id: str | None = None

    @model_validator(mode="after")
    def _name_check(self):
        if self.name == "":
            raise ValueError("variable pattern name must not be empty")
        return self


PatternNode = Annotated[
    Union[
        FieldPatternExpr,
        PairPatternExpr,
        TuplePatternExpr,
        ValuePatternExpr,
        VariablePatternExpr,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

class LiteralExpr(BaseModel):
    """A literal whose value is spelled by *lexeme* (e.g. ``42``, ``4.5``, ``true``)."""

    kind: Literal["literal"] = "literal"
    literal: LiteralKind
    lexeme: str
    position: SourcePosition | None = None


class IdentifierExpr(BaseModel):
    """Reference to a bound name."""

    kind: Literal["identifier"] = "identifier"
    lexeme: str
    position: SourcePosition | None = None


class TypeExpr(BaseModel):
    """A capitalized type identifier such as ``Int``."""

    kind: Literal["type"] = "type"
    lexeme: str
    position: SourcePosition | None = None


class ListExpr(BaseModel):
    """A bracketed list. Several entries are chained through a pair pattern."""

    kind: Literal["list"] = "list"
    item: Expression | None = None
    lexeme: str = ""
    position: SourcePosition | None = None


class CallExpr(BaseModel):
    """Invocation of a multimethod: ``name(signature)``."""

    kind: Literal["call"] = "call"
    name: str
    signature: PatternNode | None = None
    lexeme: str = ""
    position: SourcePosition | None = None


class MethodExpr(BaseModel):
    """Definition of one receiver: ``def name(signature) body``."""

    kind: Literal["method"] = "method"
    name: str
    signature: PatternNode | None = None
    body: Expression
    lexeme: str = ""
    position: SourcePosition | None = None


class InfixExpr(BaseModel):
    kind: Literal["infix"] = "infix"
    left: Expression
    operator: InfixOp
    right: Expression
    lexeme: str = ""
    position: SourcePosition | None = None


class ConditionalExpr(BaseModel):
    """``if condition then_arm``. There is no else arm."""

    kind: Literal["conditional"] = "conditional"
    condition: Expression
    then_arm: Expression
    lexeme: str = ""
    position: SourcePosition | None = None


class BlockExpr(BaseModel):
    kind: Literal["block"] = "block"
    children: list[Expression] = []
    lexeme: str = ""
    position: SourcePosition | None = None


class PatternExpr(BaseModel):
    """A pattern appearing in expression position."""

    kind: Literal["pattern"] = "pattern"
    pattern: PatternNode
    lexeme: str = ""
    position: SourcePosition | None = None


Expression = Annotated[
    Union[
        LiteralExpr,
        IdentifierExpr,
        TypeExpr,
        ListExpr,
        CallExpr,
        MethodExpr,
        InfixExpr,
        ConditionalExpr,
        BlockExpr,
        PatternExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression/PatternNode references.
FieldPatternExpr.model_rebuild()
PairPatternExpr.model_rebuild()
TuplePatternExpr.model_rebuild()
ValuePatternExpr.model_rebuild()
ListExpr.model_rebuild()
CallExpr.model_rebuild()
MethodExpr.model_rebuild()
InfixExpr.model_rebuild()
ConditionalExpr.model_rebuild()
BlockExpr.model_rebuild()
PatternExpr.model_rebuild()
