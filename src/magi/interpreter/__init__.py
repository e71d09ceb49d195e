"""magi interpreter: evaluation of parsed expression trees.

Entry point::

    from magi.interpreter import evaluate

    result = evaluate(tree)
    assert result == IntValue(value=7)

For state that outlives one evaluation (method definitions, globals),
create an ``Interpreter`` and call ``evaluate_expr`` repeatedly.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from magi.model.expressions import Expression

from ._arithmetic import apply_infix
from ._config import InterpreterConfig
from ._dispatch import DispatchPrecedence
from ._environment import Environment
from ._errors import (
    DivisionByZeroError,
    InterpreterError,
    MethodAlreadyExistsError,
    NoMatchError,
    NoMatchingMultimethodError,
    NoMatchingReceiverError,
    NoMatchingVariableError,
    NoMatchingVisitorError,
    SignatureAlreadyExistsError,
    TooMuchRecursionError,
    UnexpectedTypeError,
    UnimplementedError,
    VariableAlreadyExistsError,
)
from ._executor import Interpreter
from ._patterns import linearize, matches_with, precedence
from ._values import (
    BooleanValue,
    ExpressionValue,
    FieldPattern,
    FloatValue,
    IntValue,
    ListValue,
    Multimethod,
    MultimethodValue,
    NothingValue,
    Obj,
    PairPattern,
    Pattern,
    PatternValue,
    Receiver,
    StringValue,
    TuplePattern,
    TypeValue,
    UIntValue,
    ValuePattern,
    VariablePattern,
    is_truthy,
    type_name,
)

_EXPRESSION_ADAPTER = TypeAdapter(Expression)


def evaluate(
    tree: Any,
    environment: Environment | None = None,
    *,
    config: InterpreterConfig | None = None,
    **overrides: Any,
) -> Obj:
    """Evaluate one expression tree in a fresh interpreter.

    Parameters
    ----------
    tree
        An expression node, or its plain-data form (e.g. decoded JSON),
        which is validated into a node first.
    environment
        Local bindings visible to the tree.
    config
        Interpreter settings; keyword *overrides* replace single fields.

    Returns
    -------
    Obj
        The resulting value. Failures raise ``InterpreterError`` subclasses.
    """
    if isinstance(tree, dict):
        tree = _EXPRESSION_ADAPTER.validate_python(tree)
    interpreter = Interpreter(config=config, **overrides)
    return interpreter.evaluate_expr(tree, environment)


__all__ = [
    "BooleanValue",
    "DispatchPrecedence",
    "DivisionByZeroError",
    "Environment",
    "ExpressionValue",
    "FieldPattern",
    "FloatValue",
    "IntValue",
    "Interpreter",
    "InterpreterConfig",
    "InterpreterError",
    "ListValue",
    "MethodAlreadyExistsError",
    "Multimethod",
    "MultimethodValue",
    "NoMatchError",
    "NoMatchingMultimethodError",
    "NoMatchingReceiverError",
    "NoMatchingVariableError",
    "NoMatchingVisitorError",
    "NothingValue",
    "Obj",
    "PairPattern",
    "Pattern",
    "PatternValue",
    "Receiver",
    "SignatureAlreadyExistsError",
    "StringValue",
    "TooMuchRecursionError",
    "TuplePattern",
    "TypeValue",
    "UIntValue",
    "UnexpectedTypeError",
    "UnimplementedError",
    "ValuePattern",
    "VariableAlreadyExistsError",
    "VariablePattern",
    "apply_infix",
    "evaluate",
    "is_truthy",
    "linearize",
    "matches_with",
    "precedence",
    "type_name",
]
