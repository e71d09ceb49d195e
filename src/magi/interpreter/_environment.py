"""Variable environments.

An environment maps variable patterns to objects. Type tags on the key
are dropped on the way in, so ``n`` and ``n: Int`` name the same slot.
Environments built for a call are never modified after construction;
merging produces a new environment.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from ._values import Obj, VariablePattern


def _key(pattern: VariablePattern) -> VariablePattern:
    if pattern.type_id is None:
        return pattern
    return VariablePattern(name=pattern.name)


class Environment:
    """Mapping from variable pattern to bound object."""

    def __init__(self, entries: Mapping[VariablePattern, Obj] | None = None) -> None:
        self._entries: dict[VariablePattern, Obj] = {}
        for pattern, obj in (entries or {}).items():
            self._entries[_key(pattern)] = obj

    @classmethod
    def empty(cls) -> Environment:
        return cls()

    @classmethod
    def of(cls, **bindings: Obj) -> Environment:
        """Build an environment from keyword arguments: ``Environment.of(x=obj)``."""
        return cls({VariablePattern(name=name): obj for name, obj in bindings.items()})

    def extend(self, other: Environment) -> Environment:
        """Return a new environment; entries of *other* win on collision."""
        merged = Environment(self._entries)
        merged._entries.update(other._entries)
        return merged

    def get(self, pattern: VariablePattern) -> Obj | None:
        return self._entries.get(_key(pattern))

    def bind(self, pattern: VariablePattern, obj: Obj) -> None:
        """Insert or replace a binding in place.

        Only the interpreter's global environment is written this way.
        """
        self._entries[_key(pattern)] = obj

    def __contains__(self, pattern: object) -> bool:
        return isinstance(pattern, VariablePattern) and _key(pattern) in self._entries

    def __iter__(self) -> Iterator[VariablePattern]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        names = ", ".join(p.name or "_" for p in self._entries)
        return f"<Environment [{names}]>"
