"""Evaluation engine: tree-walking interpreter over runtime objects.

The ``Interpreter`` turns an object into a value by looking up a handler
for the object's dispatch tag. Literal objects use their own kind as the
tag; unevaluated expressions use the expression's kind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from magi.model.expressions import Expression

from ._arithmetic import apply_infix
from ._config import InterpreterConfig
from ._dispatch import define, select_receiver
from ._environment import Environment
from ._errors import (
    NoMatchingMultimethodError,
    NoMatchingVariableError,
    NoMatchingVisitorError,
    TooMuchRecursionError,
    UnexpectedTypeError,
    VariableAlreadyExistsError,
)
from ._values import (
    FieldPattern,
    ListValue,
    Multimethod,
    NothingValue,
    Obj,
    PairPattern,
    Pattern,
    PatternValue,
    TuplePattern,
    ValuePattern,
    VariablePattern,
    is_truthy,
    obj_from_expression,
    pattern_from_node,
    type_name,
)

logger = logging.getLogger(__name__)


def dispatch_tag(obj: Obj) -> str:
    """The key an object is evaluated under."""
    if obj.kind == "expression":
        return obj.expression.kind
    return obj.kind


class Interpreter:
    """Evaluates objects against a persistent global environment.

    Parameters
    ----------
    config : InterpreterConfig, optional
        Limits and dispatch rules. Keyword *overrides* replace single
        fields, e.g. ``Interpreter(max_recursion_depth=16)``.
    environment : Environment, optional
        Initial global environment; a fresh one is created otherwise.
    """

    def __init__(
        self,
        config: InterpreterConfig | None = None,
        environment: Environment | None = None,
        **overrides: object,
    ) -> None:
        if overrides:
            base = config.model_dump() if config is not None else {}
            config = InterpreterConfig(**{**base, **overrides})
        self.config = config or InterpreterConfig()
        self.environment = environment if environment is not None else Environment()
        self.recursion_level = 0

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, obj: Obj, env: Environment | None = None) -> Obj:
        """Evaluate *obj*, resolving names in *env* before the global environment."""
        tag = dispatch_tag(obj)
        handler = self._DISPATCH.get(tag)
        if handler is None:
            raise NoMatchingVisitorError(tag)
        return handler(self, obj, env)

    def evaluate_expr(self, expression: Expression, env: Environment | None = None) -> Obj:
        return self.evaluate(obj_from_expression(expression), env)

    def get_variable(self, pattern: VariablePattern, env: Environment | None = None) -> Obj:
        if env is not None:
            found = env.get(pattern)
            if found is not None:
                return found
        found = self.environment.get(pattern)
        if found is None:
            raise NoMatchingVariableError(pattern)
        return found

    def define_variable(self, pattern: VariablePattern, obj: Obj) -> Obj:
        """Bind a new global variable. Returns the variable pattern as a value."""
        if pattern in self.environment:
            raise VariableAlreadyExistsError(pattern)
        self.environment.bind(pattern, obj)
        return PatternValue(pattern=pattern)

    def mutate_variable(self, pattern: VariablePattern, obj: Obj) -> Obj:
        """Rebind an existing global variable. Returns the variable pattern as a value."""
        if pattern not in self.environment:
            raise NoMatchingVariableError(pattern)
        self.environment.bind(pattern, obj)
        return PatternValue(pattern=pattern)

    # -----------------------------------------------------------------------
    # Recursion guard
    # -----------------------------------------------------------------------

    @contextmanager
    def _call_frame(self, name: str) -> Iterator[None]:
        limit = self.config.max_recursion_depth
        entry_level = self.recursion_level
        if entry_level >= limit:
            logger.debug("Call to %r exceeds recursion limit %d", name, limit)
            raise TooMuchRecursionError(limit)
        self.recursion_level = entry_level + 1
        try:
            yield
        except RecursionError:
            # Host stack exhausted below the configured limit; converted at
            # the outermost frame only.
            if entry_level > 0:
                raise
            logger.debug("Host stack exhausted inside %r below limit %d", name, limit)
            raise TooMuchRecursionError(limit) from None
        finally:
            self.recursion_level = entry_level

    # -----------------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------------

    def _eval_value(self, obj: Obj, _env: Environment | None) -> Obj:
        return obj

    def _eval_list(self, obj: Obj, env: Environment | None) -> Obj:
        if obj.item is None:
            return obj
        return ListValue(item=self.evaluate(obj.item, env))

    def _eval_identifier(self, obj: Obj, env: Environment | None) -> Obj:
        return self.get_variable(VariablePattern(name=obj.expression.lexeme), env)

    def _eval_call(self, obj: Obj, env: Environment | None) -> Obj:
        call = obj.expression
        multimethod = self._lookup_multimethod(call.name, env)

        signature = None
        if call.signature is not None:
            signature = self._resolve_signature(pattern_from_node(call.signature), env)

        candidate = select_receiver(
            multimethod,
            signature,
            mode=self.config.precedence,
            enforce_types=self.config.enforce_variable_types,
        )
        with self._call_frame(call.name):
            return self.evaluate(candidate.receiver.body, candidate.bindings)

    def _eval_method(self, obj: Obj, _env: Environment | None) -> Obj:
        method = obj.expression
        signature = pattern_from_node(method.signature) if method.signature is not None else None
        define(self.environment, method.name, signature, obj_from_expression(method.body))
        return PatternValue(pattern=VariablePattern(name=method.name))

    def _eval_infix(self, obj: Obj, env: Environment | None) -> Obj:
        infix = obj.expression
        left = self.evaluate_expr(infix.left, env)
        right = self.evaluate_expr(infix.right, env)
        return apply_infix(infix.operator, left, right)

    def _eval_conditional(self, obj: Obj, env: Environment | None) -> Obj:
        conditional = obj.expression
        if is_truthy(self.evaluate_expr(conditional.condition, env)):
            return self.evaluate_expr(conditional.then_arm, env)
        return NothingValue()

    def _eval_block(self, obj: Obj, env: Environment | None) -> Obj:
        result: Obj = NothingValue()
        for child in obj.expression.children:
            result = self.evaluate_expr(child, env)
        return result

    def _eval_pattern(self, obj: Obj, env: Environment | None) -> Obj:
        pattern = obj.pattern
        if pattern.kind == "variable":
            return self.get_variable(pattern, env)
        if pattern.kind == "value":
            return PatternValue(pattern=ValuePattern(obj=self.evaluate(pattern.obj, env)))
        return obj

    # Dispatch table
    _DISPATCH: dict[str, Callable[[Interpreter, Obj, Environment | None], Obj]] = {
        "int": _eval_value,
        "uint": _eval_value,
        "float": _eval_value,
        "string": _eval_value,
        "boolean": _eval_value,
        "nothing": _eval_value,
        "type": _eval_value,
        "multimethod": _eval_value,
        "list": _eval_list,
        "pattern": _eval_pattern,
        "identifier": _eval_identifier,
        "call": _eval_call,
        "method": _eval_method,
        "infix": _eval_infix,
        "conditional": _eval_conditional,
        "block": _eval_block,
    }

    # -----------------------------------------------------------------------
    # Call helpers
    # -----------------------------------------------------------------------

    def _lookup_multimethod(self, name: str, env: Environment | None) -> Multimethod:
        try:
            value = self.get_variable(VariablePattern(name=name), env)
        except NoMatchingVariableError:
            raise NoMatchingMultimethodError(name) from None
        if value.kind != "multimethod":
            raise UnexpectedTypeError("Multimethod", type_name(value))
        return value.multimethod

    def _resolve_signature(self, pattern: Pattern, env: Environment | None) -> Pattern:
        """Turn a call signature into concrete values.

        Named variables are looked up, value payloads are evaluated and
        compound patterns are resolved part by part.
        """
        kind = pattern.kind
        if kind == "variable":
            if pattern.name is None:
                return pattern
            return ValuePattern(obj=self.get_variable(pattern, env))
        if kind == "value":
            return ValuePattern(obj=self.evaluate(pattern.obj, env))
        if kind == "pair":
            return PairPattern(
                left=self._resolve_signature(pattern.left, env),
                right=self._resolve_signature(pattern.right, env),
            )
        if kind == "tuple":
            return TuplePattern(child=self._resolve_signature(pattern.child, env))
        return FieldPattern(name=pattern.name, value=self._resolve_signature(pattern.value, env))
