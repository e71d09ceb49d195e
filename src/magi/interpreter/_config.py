"""Interpreter settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ._dispatch import DispatchPrecedence


class InterpreterConfig(BaseModel):
    """Tunable limits and dispatch rules.

    Parameters
    ----------
    max_recursion_depth
        Deepest allowed nesting of multimethod calls (default 4).
    precedence
        Whether candidates are ranked by their own signature (default) or
        all scored from the call signature.
    enforce_variable_types
        Make ``n: Int`` match only ``Int`` values. Off by default, in which
        case type tags are accepted and ignored.
    """

    model_config = ConfigDict(frozen=True)

    max_recursion_depth: int = Field(default=4, ge=1)
    precedence: DispatchPrecedence = DispatchPrecedence.RECEIVER
    enforce_variable_types: bool = False
