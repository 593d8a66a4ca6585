"""Provider snapshots: YAML declarations of published providers.

A snapshot lists providers the way a component manager would publish them::

    providers:
      - package: com.android.providers.contacts
        class: .ContactsProvider2
        uid: 1000
        authority: contacts;com.android.contacts
      - package: com.example.photos
        class: com.example.photos.PhotoProvider
        user: 10
        app_id: 10050
        authority: photos
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import yaml

from provmap.registry.identity import UserIdentity
from provmap.registry.models import ComponentName, ProviderRecord
from provmap.registry.provider_map import ProviderMap

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file cannot be turned into provider records."""


def load_snapshot(
    path: str | Path, identity: UserIdentity | None = None
) -> list[ProviderRecord]:
    """Load provider records from a YAML snapshot file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SnapshotError(f"{path}: not valid YAML: {e}") from e

    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("providers", []), list):
        raise SnapshotError(f"{path}: expected a mapping with a 'providers' list")

    identity = identity or UserIdentity()
    records = [
        _record_from_dict(item, identity, index)
        for index, item in enumerate(data.get("providers", []))
    ]
    logger.debug("loaded %d provider(s) from %s", len(records), path)
    return records


def populate(provider_map: ProviderMap, records: Iterable[ProviderRecord]) -> None:
    """Publish each record by class and under every one of its authorities."""
    for record in records:
        provider_map.put_provider_by_class(record.name, record)
        for authority in record.authorities:
            provider_map.put_provider_by_name(authority, record)


def _record_from_dict(data: dict, identity: UserIdentity, index: int) -> ProviderRecord:
    where = f"providers[{index}]"
    if not isinstance(data, dict):
        raise SnapshotError(f"{where}: expected a mapping")

    for key in ("package", "class"):
        if not data.get(key):
            raise SnapshotError(f"{where}: missing required field '{key}'")
    if "uid" not in data and "app_id" not in data:
        raise SnapshotError(f"{where}: needs either 'uid' or 'app_id'")

    try:
        name = ComponentName.unflatten(f"{data['package']}/{data['class']}")
        if "uid" in data:
            uid = int(data["uid"])
            if uid < 0:
                raise ValueError(f"uid must be >= 0, got {uid}")
        else:
            uid = identity.uid_for(int(data.get("user", 0)), int(data["app_id"]))
        init_order = int(data.get("init_order", 0))
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"{where}: {e}") from e

    return ProviderRecord(
        name=name,
        uid=uid,
        authority=_authority_field(data, where),
        process_name=_text_field(data, "process", where),
        exported=_flag_field(data, "exported", where),
        multiprocess=_flag_field(data, "multiprocess", where),
        init_order=init_order,
        read_permission=_text_field(data, "read_permission", where),
        write_permission=_text_field(data, "write_permission", where),
    )


def _text_field(data: dict, key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SnapshotError(f"{where}: '{key}' must be a string")
    return value


def _authority_field(data: dict, where: str) -> str:
    """Accept ``a;b`` or a YAML list of authorities."""
    value = data.get("authority")
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise SnapshotError(f"{where}: 'authority' list must hold strings")
        return ";".join(value)
    return _text_field(data, "authority", where)


def _flag_field(data: dict, key: str, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise SnapshotError(f"{where}: '{key}' must be true or false")
    return value
