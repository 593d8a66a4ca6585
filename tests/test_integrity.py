"""Tests for the authority/class index integrity check."""

from provmap.registry.integrity import check_integrity
from provmap.registry.models import ComponentName, ProviderRecord
from provmap.registry.provider_map import ProviderMap


def _record(package: str, uid: int) -> ProviderRecord:
    return ProviderRecord(name=ComponentName.unflatten(f"{package}/.P"), uid=uid)


def test_consistent_map():
    pm = ProviderMap()
    rec = _record("com.example.a", 10050)
    pm.put_provider_by_class(rec.name, rec)
    pm.put_provider_by_name("a", rec)
    pm.put_provider_by_name("a.alias", rec)

    report = check_integrity(pm)
    assert report.is_consistent
    assert report.summary() == "indices consistent"
    assert report.details == []


def test_empty_map_is_consistent():
    assert check_integrity(ProviderMap()).is_consistent


def test_detects_one_sided_bindings():
    pm = ProviderMap()
    named = _record("com.example.named", 10050)
    classed = _record("com.android.classed", 1000)
    pm.put_provider_by_name("named", named)
    pm.put_provider_by_class(classed.name, classed)

    report = check_integrity(pm)
    assert not report.is_consistent
    assert [(b.user_id, b.key) for b in report.name_only] == [(0, "named")]
    assert [(b.scope, b.key) for b in report.class_only] == [
        ("global", "com.android.classed/com.android.classed.P")
    ]
    assert report.summary() == "1 authority-only, 1 class-only, 0 multi-scope"


def test_detects_authority_in_multiple_scopes():
    pm = ProviderMap()
    sys_rec = _record("com.android.s", 1000)
    user_rec = _record("com.example.u", 10050)
    for rec in (sys_rec, user_rec):
        pm.put_provider_by_class(rec.name, rec)
        pm.put_provider_by_name("shared", rec)

    report = check_integrity(pm)
    assert report.multi_scope == {"shared": ["global", "user 0"]}
    assert report.details == ["authority shared bound in global, user 0"]


def test_matches_by_identity_not_equality():
    pm = ProviderMap()
    a = _record("com.example.same", 10050)
    b = _record("com.example.same", 10050)
    pm.put_provider_by_name("same", a)
    pm.put_provider_by_class(b.name, b)

    report = check_integrity(pm)
    assert len(report.name_only) == 1
    assert len(report.class_only) == 1
