"""Failures raised by the interpreter.

Every failure derives from :class:`InterpreterError`; callers that only
care whether evaluation succeeded can catch the base class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._values import VariablePattern


class InterpreterError(Exception):
    """Runtime error during evaluation."""


class UnimplementedError(InterpreterError):
    def __init__(self, what: str = "") -> None:
        super().__init__(f"Unimplemented: {what}" if what else "Unimplemented")


class UnexpectedTypeError(InterpreterError):
    def __init__(self, expected: str, found: str | None = None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected}, found {found or 'nothing'}")


class MethodAlreadyExistsError(InterpreterError):
    """A receiver with an identical signature is already defined."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Method '{name}' already has a receiver with this signature")


class SignatureAlreadyExistsError(InterpreterError):
    pass


class VariableAlreadyExistsError(InterpreterError):
    def __init__(self, pattern: VariablePattern) -> None:
        self.pattern = pattern
        super().__init__(f"Variable '{pattern.name}' is already defined")


class NoMatchingReceiverError(InterpreterError):
    """No receiver of the multimethod accepts the call signature."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No receiver of '{name}' matches the call")


class NoMatchingMultimethodError(InterpreterError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No multimethod named '{name}'")


class NoMatchingVariableError(InterpreterError):
    def __init__(self, pattern: VariablePattern) -> None:
        self.pattern = pattern
        super().__init__(f"Variable '{pattern.name}' not found")


class NoMatchingVisitorError(InterpreterError):
    """No handler is registered for a value's dispatch tag."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"No handler for '{tag}'")


class NoMatchError(InterpreterError):
    """Two patterns do not match.

    Only raised by pattern linearization; the dispatcher turns it into
    :class:`NoMatchingReceiverError`.
    """


class TooMuchRecursionError(InterpreterError):
    def __init__(self, depth: int) -> None:
        self.depth = depth
        super().__init__(f"Call depth exceeded the limit of {depth}")


class DivisionByZeroError(InterpreterError):
    def __init__(self) -> None:
        super().__init__("Division by zero")
