"""Integrity check: detect divergence between the authority and class indices.

Publishing by authority and by class are separate, non-transactional calls,
so the two indices can drift apart. This check reads a provider map through
its read-only views and reports:

1. Records bound under an authority but under no class
2. Records bound under a class but under no authority
3. Authorities bound in more than one scope
"""

from __future__ import annotations

from dataclasses import dataclass, field

from provmap.registry.models import ProviderRecord
from provmap.registry.provider_map import ProviderMap


@dataclass
class ScopedBinding:
    """Where one record is bound; ``user_id`` is None for the global scope."""

    user_id: int | None
    key: str
    record: ProviderRecord

    @property
    def scope(self) -> str:
        return "global" if self.user_id is None else f"user {self.user_id}"


@dataclass
class IntegrityReport:
    """Result of cross-checking the two indices of a provider map."""

    name_only: list[ScopedBinding] = field(default_factory=list)
    class_only: list[ScopedBinding] = field(default_factory=list)
    multi_scope: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_consistent(self) -> bool:
        return not (self.name_only or self.class_only or self.multi_scope)

    @property
    def details(self) -> list[str]:
        lines = [
            f"{b.key} ({b.scope}) -> {b.record} has no class binding"
            for b in self.name_only
        ]
        lines += [
            f"{b.key} ({b.scope}) -> {b.record} has no authority binding"
            for b in self.class_only
        ]
        lines += [
            f"authority {name} bound in {', '.join(scopes)}"
            for name, scopes in self.multi_scope.items()
        ]
        return lines

    def summary(self) -> str:
        if self.is_consistent:
            return "indices consistent"
        return (
            f"{len(self.name_only)} authority-only, {len(self.class_only)} class-only, "
            f"{len(self.multi_scope)} multi-scope"
        )


def check_integrity(provider_map: ProviderMap) -> IntegrityReport:
    """Cross-check the authority and class indices of ``provider_map``.

    Records are matched by identity, never by equality.
    """
    report = IntegrityReport()

    by_name = list(provider_map.iter_by_name())
    by_class = list(provider_map.iter_by_class())
    named = {id(record) for _, _, record in by_name}
    classed = {id(record) for _, _, record in by_class}

    for user_id, authority, record in by_name:
        if id(record) not in classed:
            report.name_only.append(ScopedBinding(user_id, authority, record))
    for user_id, component, record in by_class:
        if id(record) not in named:
            report.class_only.append(
                ScopedBinding(user_id, component.flatten(), record)
            )

    scopes: dict[str, list[str]] = {}
    for user_id, authority, _ in by_name:
        scopes.setdefault(authority, []).append(
            "global" if user_id is None else f"user {user_id}"
        )
    report.multi_scope = {a: s for a, s in scopes.items() if len(s) > 1}

    return report
