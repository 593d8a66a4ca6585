"""Provider map: published content providers indexed by authority and by class.

Bindings are split into a global scope, for providers owned by system-level
uids, and one scope per user for everything else. Global bindings shadow
per-user bindings on lookup.

None of the methods here synchronize. Callers hold a single lock covering
the whole map for every call, and may chain a lookup and a put under that
lock as one atomic step.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Generic, Hashable, Iterator, Mapping, TextIO, TypeVar

from provmap.registry.dump import dump_providers
from provmap.registry.identity import UserIdentity
from provmap.registry.models import ComponentName, ProviderRecord

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class _ScopedIndex(Generic[K]):
    """One key space split into a global table and lazily created user tables."""

    def __init__(self, label: str, identity: UserIdentity) -> None:
        self.label = label
        self._identity = identity
        self.global_table: dict[K, ProviderRecord] = {}
        self.per_user: dict[int, dict[K, ProviderRecord]] = {}

    def get(self, key: K, user_id: int | None) -> ProviderRecord | None:
        record = self.global_table.get(key)
        if record is not None:
            return record
        table = self.per_user.get(self._identity.resolve_user(user_id))
        if table is None:
            return None
        return table.get(key)

    def put(self, key: K, record: ProviderRecord) -> None:
        if self._identity.is_system(record.uid):
            logger.debug("put %s global key=%s uid=%d", self.label, key, record.uid)
            self.global_table[key] = record
            return
        user_id = self._identity.user_id_of(record.uid)
        logger.debug(
            "put %s user=%d key=%s uid=%d", self.label, user_id, key, record.uid
        )
        self.per_user.setdefault(user_id, {})[key] = record

    def remove(self, key: K, user_id: int | None) -> None:
        if key in self.global_table:
            logger.debug("remove %s global key=%s", self.label, key)
            del self.global_table[key]
            return
        resolved = self._identity.resolve_user(user_id)
        logger.debug("remove %s user=%d key=%s", self.label, resolved, key)
        table = self.per_user.get(resolved)
        if table is not None:
            table.pop(key, None)

    def users(self) -> list[tuple[int, Mapping[K, ProviderRecord]]]:
        return [
            (user_id, MappingProxyType(self.per_user[user_id]))
            for user_id in sorted(self.per_user)
        ]

    def items(self) -> Iterator[tuple[int | None, K, ProviderRecord]]:
        for key, record in self.global_table.items():
            yield None, key, record
        for user_id in sorted(self.per_user):
            for key, record in self.per_user[user_id].items():
                yield user_id, key, record

    def size(self) -> int:
        return len(self.global_table) + sum(len(t) for t in self.per_user.values())


class ProviderMap:
    """Keeps track of content providers by authority (name) and by class.

    The host environment owns one instance and hands it to collaborators.
    Lookups return ``None`` when nothing is bound and never modify the map;
    removing an unbound key is a no-op.
    """

    def __init__(self, identity: UserIdentity | None = None) -> None:
        self.identity = identity or UserIdentity()
        self._by_name: _ScopedIndex[str] = _ScopedIndex("by-name", self.identity)
        self._by_class: _ScopedIndex[ComponentName] = _ScopedIndex(
            "by-class", self.identity
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_provider_by_name(
        self, name: str, user_id: int | None = None
    ) -> ProviderRecord | None:
        """Return the provider published under authority ``name``.

        A global binding wins regardless of ``user_id``. Otherwise the
        binding of ``user_id`` (or of the calling user when omitted) is used.
        """
        return self._by_name.get(name, user_id)

    def get_provider_by_class(
        self, component: ComponentName, user_id: int | None = None
    ) -> ProviderRecord | None:
        """Return the provider published for ``component``; see :meth:`get_provider_by_name`."""
        return self._by_class.get(component, user_id)

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def put_provider_by_name(self, name: str, record: ProviderRecord) -> None:
        """Bind ``name`` to ``record`` in the scope selected by ``record.uid``.

        Overwrites any binding of ``name`` in that scope. Bindings of the
        same name in other scopes are left alone.
        """
        self._by_name.put(name, record)

    def put_provider_by_class(self, component: ComponentName, record: ProviderRecord) -> None:
        self._by_class.put(component, record)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_provider_by_name(self, name: str, user_id: int | None = None) -> None:
        """Drop the binding for ``name``.

        A global binding is removed first and exclusively; only when there
        is none is the user's table consulted.
        """
        self._by_name.remove(name, user_id)

    def remove_provider_by_class(
        self, component: ComponentName, user_id: int | None = None
    ) -> None:
        self._by_class.remove(component, user_id)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def global_by_name(self) -> Mapping[str, ProviderRecord]:
        return MappingProxyType(self._by_name.global_table)

    @property
    def global_by_class(self) -> Mapping[ComponentName, ProviderRecord]:
        return MappingProxyType(self._by_class.global_table)

    def users_by_name(self) -> list[tuple[int, Mapping[str, ProviderRecord]]]:
        """Return ``(user_id, table)`` pairs in ascending user order."""
        return self._by_name.users()

    def users_by_class(self) -> list[tuple[int, Mapping[ComponentName, ProviderRecord]]]:
        return self._by_class.users()

    def iter_by_name(self) -> Iterator[tuple[int | None, str, ProviderRecord]]:
        """Yield ``(user_id, authority, record)``; ``user_id`` is None for global."""
        return self._by_name.items()

    def iter_by_class(self) -> Iterator[tuple[int | None, ComponentName, ProviderRecord]]:
        return self._by_class.items()

    def size(self) -> tuple[int, int]:
        """Return the number of ``(by_name, by_class)`` bindings."""
        return self._by_name.size(), self._by_class.size()

    def dump(self, sink: TextIO, dump_all: bool = False) -> None:
        """Write the human-readable listing of this map to ``sink``."""
        dump_providers(self, sink, dump_all)
