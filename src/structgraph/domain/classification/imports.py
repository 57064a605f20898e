"""Per-unit import context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .facts import ImportFact


@dataclass(slots=True)
class ImportContext:
    """Simple name to qualified name, as declared by one unit's imports.

    Lookups are case-sensitive. When two imports bind the same simple name the
    later one wins. Wildcard imports bind nothing; they are only remembered.
    """

    types: dict[str, str] = field(default_factory=dict)
    static_members: dict[str, str] = field(default_factory=dict)
    wildcard_packages: list[str] = field(default_factory=list)

    @classmethod
    def from_facts(cls, imports: Iterable[ImportFact]) -> ImportContext:
        context = cls()
        for fact in imports:
            context.add(fact)
        return context

    def add(self, fact: ImportFact) -> None:
        name = fact.name.strip()
        if not name:
            return
        if fact.is_wildcard:
            if not fact.is_static:
                self.wildcard_packages.append(name)
            return
        if fact.is_static:
            owner, _, member = name.rpartition(".")
            if owner and member:
                self.static_members[member] = owner
            return
        self.types[fact.simple_name] = name

    def resolve(self, simple_name: str) -> str | None:
        return self.types.get(simple_name)

    def static_owner(self, member: str) -> str | None:
        return self.static_members.get(member)

    def __contains__(self, simple_name: object) -> bool:
        return simple_name in self.types

    def __len__(self) -> int:
        return len(self.types)
