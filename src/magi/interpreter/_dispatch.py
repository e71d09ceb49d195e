"""Multimethod registry and receiver selection.

Multimethods live in the interpreter's global environment, bound to their
name like any other value. Defining a method either creates the
multimethod or appends a receiver to it; calling one matches every
receiver against the call signature and picks the best candidate.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

from ._environment import Environment
from ._errors import NoMatchError, NoMatchingReceiverError, UnexpectedTypeError
from ._patterns import linearize, precedence
from ._values import (
    Multimethod,
    MultimethodValue,
    Obj,
    Pattern,
    Receiver,
    VariablePattern,
    type_name,
)

logger = logging.getLogger(__name__)


class DispatchPrecedence(str, Enum):
    """Which pattern a candidate's precedence is computed from."""

    # Each candidate is scored by its own signature.
    RECEIVER = "receiver"
    # Every candidate gets the call signature's score, so ties (and
    # therefore definition order) decide almost every call.
    CALL_SITE = "call_site"


class Candidate(NamedTuple):
    index: int
    receiver: Receiver
    bindings: Environment
    precedence: int


def define(
    environment: Environment,
    name: str,
    signature: Pattern | None,
    body: Obj,
) -> Multimethod:
    """Register a receiver under *name* in *environment*.

    Raises MethodAlreadyExistsError when the multimethod already has a
    receiver with an equal signature, and UnexpectedTypeError when *name*
    is bound to something that is not a multimethod.
    """
    key = VariablePattern(name=name)
    existing = environment.get(key)

    if existing is None:
        multimethod = Multimethod(name=name, receivers=[Receiver(signature=signature, body=body)])
        environment.bind(key, MultimethodValue(multimethod=multimethod))
        logger.debug("Created multimethod %r", name)
        return multimethod

    if existing.kind != "multimethod":
        raise UnexpectedTypeError("Multimethod", type_name(existing))

    multimethod = existing.multimethod
    multimethod.define(signature, body)
    logger.debug("Added receiver %d to %r", len(multimethod.receivers), name)
    return multimethod


def _match(reference: Pattern | None, given: Pattern | None, enforce_types: bool) -> Environment:
    if reference is None and given is None:
        return Environment.empty()
    if reference is None or given is None:
        raise NoMatchError()
    return linearize(reference, given, enforce_types=enforce_types)


def rank_candidates(
    multimethod: Multimethod,
    call_signature: Pattern | None,
    *,
    mode: DispatchPrecedence = DispatchPrecedence.RECEIVER,
    enforce_types: bool = False,
) -> list[Candidate]:
    """Return the matching receivers, best first.

    Sorting is stable, so among equal precedence the earliest-defined
    receiver comes first.
    """
    candidates: list[Candidate] = []
    for index, receiver in enumerate(multimethod.receivers):
        try:
            bindings = _match(receiver.signature, call_signature, enforce_types)
        except NoMatchError:
            continue
        scored = call_signature if mode == DispatchPrecedence.CALL_SITE else receiver.signature
        candidates.append(Candidate(index, receiver, bindings, precedence(scored)))

    candidates.sort(key=lambda c: c.precedence, reverse=True)
    return candidates


def select_receiver(
    multimethod: Multimethod,
    call_signature: Pattern | None,
    *,
    mode: DispatchPrecedence = DispatchPrecedence.RECEIVER,
    enforce_types: bool = False,
) -> Candidate:
    """Pick the receiver that handles a call, or raise NoMatchingReceiverError."""
    candidates = rank_candidates(
        multimethod, call_signature, mode=mode, enforce_types=enforce_types,
    )
    if not candidates:
        raise NoMatchingReceiverError(multimethod.name)

    best = candidates[0]
    logger.debug(
        "Dispatching %r to receiver %d of %d (precedence %d, %d candidates)",
        multimethod.name,
        best.index + 1,
        len(multimethod.receivers),
        best.precedence,
        len(candidates),
    )
    return best
