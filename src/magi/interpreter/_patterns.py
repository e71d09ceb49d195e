"""Pattern linearization: structural matching that also extracts bindings.

``linearize(reference, given)`` walks a *reference* pattern (a receiver's
signature) alongside a *given* pattern (a resolved call signature). The
walk is driven by the reference's variant:

- value     matches a value pattern with an equal object, binds nothing
- variable  matches any value pattern, binding it when the variable is named
- pair      matches a pair whose halves both match; bindings are merged
- tuple     matches a tuple whose child matches
- field     matches a field with the same name whose value matches

Any other combination raises :class:`NoMatchError`.
"""

from __future__ import annotations

from collections.abc import Callable

from ._environment import Environment
from ._errors import NoMatchError
from ._values import (
    FieldPattern,
    PairPattern,
    Pattern,
    TuplePattern,
    ValuePattern,
    VariablePattern,
    type_name,
)

VALUE_PRECEDENCE = 2
DEFAULT_PRECEDENCE = 1


def linearize(reference: Pattern, given: Pattern, *, enforce_types: bool = False) -> Environment:
    """Match *given* against *reference* and return the bound variables.

    When *enforce_types* is set, a variable with a type tag only matches
    values of that type; otherwise the tag is ignored.
    """
    return _LINEARIZERS[reference.kind](reference, given, enforce_types)


def matches_with(reference: Pattern, given: Pattern, *, enforce_types: bool = False) -> bool:
    try:
        linearize(reference, given, enforce_types=enforce_types)
    except NoMatchError:
        return False
    return True


def precedence(pattern: Pattern | None) -> int:
    """Specificity of a pattern: literal values outrank everything else.

    Nested patterns are not inspected. A missing signature scores 0.
    """
    if pattern is None:
        return 0
    if pattern.kind == "value":
        return VALUE_PRECEDENCE
    return DEFAULT_PRECEDENCE


def _linearize_value(reference: ValuePattern, given: Pattern, _enforce: bool) -> Environment:
    if given.kind != "value" or reference.obj != given.obj:
        raise NoMatchError()
    return Environment.empty()


def _linearize_variable(reference: VariablePattern, given: Pattern, enforce: bool) -> Environment:
    if given.kind != "value":
        raise NoMatchError()
    if enforce and reference.type_id is not None and type_name(given.obj) != reference.type_id:
        raise NoMatchError()
    if reference.name is None:
        return Environment.empty()
    return Environment({VariablePattern(name=reference.name): given.obj})


def _linearize_pair(reference: PairPattern, given: Pattern, enforce: bool) -> Environment:
    if given.kind != "pair":
        raise NoMatchError()
    left = linearize(reference.left, given.left, enforce_types=enforce)
    right = linearize(reference.right, given.right, enforce_types=enforce)
    return left.extend(right)


def _linearize_tuple(reference: TuplePattern, given: Pattern, enforce: bool) -> Environment:
    if given.kind != "tuple":
        raise NoMatchError()
    return linearize(reference.child, given.child, enforce_types=enforce)


def _linearize_field(reference: FieldPattern, given: Pattern, enforce: bool) -> Environment:
    if given.kind != "field" or given.name != reference.name:
        raise NoMatchError()
    return linearize(reference.value, given.value, enforce_types=enforce)


_LINEARIZERS: dict[str, Callable[[Pattern, Pattern, bool], Environment]] = {
    "value": _linearize_value,
    "variable": _linearize_variable,
    "pair": _linearize_pair,
    "tuple": _linearize_tuple,
    "field": _linearize_field,
}
