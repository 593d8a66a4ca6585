"""Tests for the provider map text dump."""

import io

from provmap.registry.models import ComponentName, ProviderRecord
from provmap.registry.provider_map import ProviderMap


def _publish(pm: ProviderMap, package: str, uid: int, authority: str) -> ProviderRecord:
    rec = ProviderRecord(
        name=ComponentName.unflatten(f"{package}/.Provider"), uid=uid, authority=authority
    )
    pm.put_provider_by_class(rec.name, rec)
    pm.put_provider_by_name(authority, rec)
    return rec


def _dump(pm: ProviderMap, dump_all: bool) -> list[str]:
    buf = io.StringIO()
    pm.dump(buf, dump_all)
    return buf.getvalue().splitlines()


def test_empty_registry_without_details_writes_nothing():
    assert _dump(ProviderMap(), False) == []


def test_empty_registry_with_details_writes_headers_only():
    assert _dump(ProviderMap(), True) == [" ", "  Authority to provider mappings:"]


def test_global_and_single_user_without_header():
    pm = ProviderMap()
    _publish(pm, "com.android.contacts", 1000, "contacts")
    _publish(pm, "com.example.photos", 10050, "photos")

    assert _dump(pm, False) == [
        "  Published content providers (by class):",
        "  * com.android.contacts/.Provider",
        " ",
        "  * com.example.photos/.Provider",
    ]


def test_multiple_users_get_headers_in_order():
    pm = ProviderMap()
    _publish(pm, "com.example.b", 10 * 100000 + 10001, "b")
    _publish(pm, "com.example.a", 10001, "a")

    assert _dump(pm, False) == [
        "  User 0:",
        "  * com.example.a/.Provider",
        " ",
        "  User 10:",
        "  * com.example.b/.Provider",
        " ",
    ]


def test_details_include_record_dump_and_authorities():
    pm = ProviderMap()
    sys_rec = _publish(pm, "com.android.contacts", 1000, "contacts")
    user_rec = _publish(pm, "com.example.photos", 10050, "photos")

    lines = _dump(pm, True)
    assert lines[0] == "  Published content providers (by class):"
    assert lines[1] == f"  * {sys_rec}"
    assert lines[2].startswith("    package=com.android.contacts")

    idx = lines.index("  Authority to provider mappings:")
    assert lines[idx - 1] == " "
    assert lines[idx + 1:] == [
        f"  contacts: {sys_rec}",
        "  User 0:",
        f"  photos: {user_rec}",
    ]


def test_emptied_user_tables_are_skipped():
    pm = ProviderMap()
    rec = _publish(pm, "com.example.gone", 10050, "gone")
    pm.remove_provider_by_class(rec.name, 0)
    pm.remove_provider_by_name("gone", 0)

    assert _dump(pm, False) == []
    assert _dump(pm, True) == [" ", "  Authority to provider mappings:"]


def test_dump_does_not_change_state():
    pm = ProviderMap()
    _publish(pm, "com.example.a", 10050, "a")
    before = pm.size()
    _dump(pm, True)
    assert pm.size() == before
    assert [u for u, _ in pm.users_by_name()] == [0]
