"""Diagnostic text dump of a provider map.

Writes the by-class listing (global, then per user) and, with ``dump_all``,
the authority to provider listing. Reading only; the map is not modified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, TextIO

from provmap.registry.models import ComponentName, ProviderRecord

if TYPE_CHECKING:
    from provmap.registry.provider_map import ProviderMap


def _dump_by_class(
    sink: TextIO, dump_all: bool, table: Mapping[ComponentName, ProviderRecord]
) -> None:
    for record in table.values():
        if dump_all:
            sink.write(f"  * {record}\n")
            record.dump(sink, "    ")
        else:
            sink.write(f"  * {record.name.short_string()}\n")


def _dump_by_name(sink: TextIO, table: Mapping[str, ProviderRecord]) -> None:
    for authority, record in table.items():
        sink.write(f"  {authority}: {record}\n")


def dump_providers(provider_map: ProviderMap, sink: TextIO, dump_all: bool) -> None:
    """Write ``provider_map`` to ``sink`` in the published-providers layout.

    Per-user tables that are empty are skipped. When exactly one user has
    class bindings its entries are written without a ``User`` header.
    """
    if provider_map.global_by_class:
        sink.write("  Published content providers (by class):\n")
        _dump_by_class(sink, dump_all, provider_map.global_by_class)
        sink.write(" \n")

    users = [(u, t) for u, t in provider_map.users_by_class() if t]
    if len(users) > 1:
        for user_id, table in users:
            sink.write(f"  User {user_id}:\n")
            _dump_by_class(sink, dump_all, table)
            sink.write(" \n")
    elif users:
        _dump_by_class(sink, dump_all, users[0][1])

    if dump_all:
        sink.write(" \n")
        sink.write("  Authority to provider mappings:\n")
        _dump_by_name(sink, provider_map.global_by_name)
        for user_id, table in provider_map.users_by_name():
            if not table:
                continue
            sink.write(f"  User {user_id}:\n")
            _dump_by_name(sink, table)
