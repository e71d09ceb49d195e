"""Numeric promotion for the built-in infix operators.

Promotion is decided by the pair of operand kinds and is asymmetric:

    Int   op Int   -> Int      Int   op UInt  -> Int  (UInt narrowed)
    UInt  op UInt  -> UInt     UInt  op Int   -> UInt (Int reinterpreted)
    any   op Float -> Float    Float op any   -> Float

Integer results wrap around at 64 bits. Integer division and modulo
truncate toward zero. Floats are parsed from their text and the result
is stored as text again. Non-finite operands and results are rejected.
"""

from __future__ import annotations

import math

from magi.model.expressions import InfixOp

from ._errors import DivisionByZeroError, UnexpectedTypeError, UnimplementedError
from ._values import I64_MAX, U64_MAX, FloatValue, IntValue, Obj, UIntValue, type_name

_NUMERIC_KINDS = frozenset({"int", "uint", "float"})


def wrap_i64(n: int) -> int:
    n &= U64_MAX
    return n - (1 << 64) if n > I64_MAX else n


def wrap_u64(n: int) -> int:
    return n & U64_MAX


def _div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _apply_int(op: InfixOp, a: int, b: int) -> int:
    if op == InfixOp.ADD:
        return a + b
    if op == InfixOp.SUB:
        return a - b
    if op == InfixOp.MUL:
        return a * b
    if op in (InfixOp.DIV, InfixOp.MOD):
        if b == 0:
            raise DivisionByZeroError()
        q = _div_trunc(a, b)
        return q if op == InfixOp.DIV else a - b * q
    raise UnimplementedError(f"operator {op.value}")


def _float_op(op: InfixOp, a: float, b: float) -> float:
    if op == InfixOp.ADD:
        return a + b
    if op == InfixOp.SUB:
        return a - b
    if op == InfixOp.MUL:
        return a * b
    if op in (InfixOp.DIV, InfixOp.MOD):
        if b == 0.0:
            raise DivisionByZeroError()
        return a / b if op == InfixOp.DIV else math.fmod(a, b)
    raise UnimplementedError(f"operator {op.value}")


def _apply_float(op: InfixOp, a: float, b: float) -> float:
    """Float arithmetic restricted to finite operands and results."""
    for operand in (a, b):
        if not math.isfinite(operand):
            raise UnexpectedTypeError("finite Float", repr(operand))
    try:
        result = _float_op(op, a, b)
    except (ValueError, OverflowError) as exc:
        raise UnexpectedTypeError("finite Float", str(exc)) from None
    if not math.isfinite(result):
        raise UnexpectedTypeError("finite Float", repr(result))
    return result


def _as_float(obj: Obj) -> float:
    if obj.kind == "float":
        return obj.as_float()
    return float(obj.value)


def apply_infix(op: InfixOp, left: Obj, right: Obj) -> Obj:
    """Apply an arithmetic operator to two evaluated operands."""
    if left.kind not in _NUMERIC_KINDS or right.kind not in _NUMERIC_KINDS:
        raise UnexpectedTypeError(
            "Int|UInt|Float",
            f"({type_name(left)}, {type_name(right)})",
        )

    if left.kind == "float" or right.kind == "float":
        result = _apply_float(op, _as_float(left), _as_float(right))
        return FloatValue(text=repr(result))

    if left.kind == "int":
        # UInt operands are narrowed to signed.
        return IntValue(value=wrap_i64(_apply_int(op, left.value, wrap_i64(right.value))))

    # Int operands are reinterpreted as unsigned.
    return UIntValue(value=wrap_u64(_apply_int(op, left.value, wrap_u64(right.value))))
