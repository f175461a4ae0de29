# tests/test_building_access.py

"""
Tests for committee / building-member checks and their cache.
"""

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from core.building_access import BuildingAccessPolicy, extract_building_id
from core.config import settings as app_settings
from core.cache import SimpleCache, committee_key, get_cache, invalidate_membership
from dependencies.auth import CurrentUser
from models.enums import DenyReason

ENDPOINT = "/test-endpoint"


@pytest.fixture
def policy(store, audit_sink):
    return BuildingAccessPolicy(store, audit_sink, cache=SimpleCache(), ttl_seconds=900)


# ------------------------------------------------------------------
# Committee
# ------------------------------------------------------------------
def test_committee_member_allowed(policy, store, audit_sink, caller):
    store.committee = {("b1", caller.id)}

    decision = policy.check_committee_member(caller, "b1", ENDPOINT)

    assert decision.allowed is True
    assert audit_sink.entries == []


def test_non_committee_member_denied_and_audited(policy, audit_sink, caller):
    decision = policy.check_committee_member(caller, "b1", ENDPOINT)

    assert decision.reason == DenyReason.not_committee_member
    entry = audit_sink.entries[0]
    assert entry.resource_type == "Building"
    assert entry.resource_id == "b1"
    assert entry.metadata == {"reason": "not_committee_member", "endpoint": ENDPOINT}


def test_committee_decision_is_cached(policy, store, caller):
    store.committee = {("b1", caller.id)}

    policy.check_committee_member(caller, "b1", ENDPOINT)
    policy.check_committee_member(caller, "b1", ENDPOINT)

    assert len(store.calls_named("find_committee_membership")) == 1


def test_cached_denial_does_not_audit_again(policy, audit_sink, caller):
    policy.check_committee_member(caller, "b1", ENDPOINT)
    second = policy.check_committee_member(caller, "b1", ENDPOINT)

    assert second.reason == DenyReason.not_committee_member
    assert len(audit_sink.entries) == 1


def test_zero_ttl_disables_caching(store, audit_sink, caller):
    store.committee = {("b1", caller.id)}
    policy = BuildingAccessPolicy(store, audit_sink, cache=SimpleCache(), ttl_seconds=0)

    policy.check_committee_member(caller, "b1", ENDPOINT)
    policy.check_committee_member(caller, "b1", ENDPOINT)

    assert policy.ttl_seconds == 0
    assert len(store.calls_named("find_committee_membership")) == 2


def test_default_ttl_comes_from_settings(store, audit_sink):
    policy = BuildingAccessPolicy(store, audit_sink, cache=SimpleCache())

    assert policy.ttl_seconds == app_settings.MEMBERSHIP_CACHE_TTL_SECONDS


@pytest.mark.parametrize("user,building_id,reason", [
    (None, "b1", DenyReason.missing_caller),
    (CurrentUser(id="u1"), None, DenyReason.missing_building_id),
    (CurrentUser(id="u1"), "", DenyReason.missing_building_id),
])
def test_missing_context_is_not_audited(policy, store, audit_sink, user, building_id, reason):
    assert policy.check_committee_member(user, building_id, ENDPOINT).reason == reason
    assert policy.check_building_member(user, building_id, ENDPOINT).reason == reason
    assert store.calls == []
    assert audit_sink.entries == []


def test_uses_global_cache_by_default(store, audit_sink, caller):
    store.committee = {("b1", caller.id)}
    policy = BuildingAccessPolicy(store, audit_sink)

    policy.check_committee_member(caller, "b1", ENDPOINT)

    assert get_cache().get(committee_key(caller.id, "b1")) is True


def test_invalidate_membership_forces_requery(store, audit_sink, caller):
    policy = BuildingAccessPolicy(store, audit_sink)

    assert policy.check_committee_member(caller, "b1", ENDPOINT).allowed is False
    store.committee = {("b1", caller.id)}
    invalidate_membership(caller.id, "b1")

    assert policy.check_committee_member(caller, "b1", ENDPOINT).allowed is True


# ------------------------------------------------------------------
# Building member
# ------------------------------------------------------------------
@pytest.mark.parametrize("membership", ["committee", "owners", "tenants"])
def test_any_membership_kind_allows(policy, store, caller, membership):
    setattr(store, membership, {("b1", caller.id)})

    assert policy.check_building_member(caller, "b1", ENDPOINT).allowed is True


def test_committee_member_short_circuits_other_lookups(policy, store, caller):
    store.committee = {("b1", caller.id)}

    policy.check_building_member(caller, "b1", ENDPOINT)

    assert [c[0] for c in store.calls] == ["find_committee_membership"]


def test_non_member_denied_after_all_lookups(policy, store, audit_sink, caller):
    decision = policy.check_building_member(caller, "b1", ENDPOINT)

    assert decision.reason == DenyReason.not_building_member
    assert [c[0] for c in store.calls] == [
        "find_committee_membership",
        "find_apartment_owner",
        "find_active_tenancy",
    ]
    assert audit_sink.entries[0].metadata["reason"] == "not_building_member"


def test_committee_and_member_caches_are_separate(policy, store, caller):
    store.tenants = {("b1", caller.id)}

    assert policy.check_building_member(caller, "b1", ENDPOINT).allowed is True
    assert policy.check_committee_member(caller, "b1", ENDPOINT).allowed is False


@settings(max_examples=40, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(
    user_id=st.uuids().map(str),
    building_id=st.uuids().map(str),
    membership=st.sampled_from(["committee", "owners", "tenants", "none"]),
)
def test_building_membership_property(store_factory, audit_sink_factory, user_id, building_id, membership):
    store = store_factory()
    if membership != "none":
        setattr(store, membership, {(building_id, user_id)})
    sink = audit_sink_factory()
    policy = BuildingAccessPolicy(store, sink, cache=SimpleCache())

    decision = policy.check_building_member(CurrentUser(id=user_id), building_id, ENDPOINT)

    assert decision.allowed is (membership != "none")
    assert len(sink.entries) == (1 if membership == "none" else 0)


# ------------------------------------------------------------------
# Building id extraction
# ------------------------------------------------------------------
@pytest.mark.parametrize("path_params,body,expected", [
    ({"buildingId": "b1"}, {"buildingId": "b2"}, "b1"),
    ({}, {"buildingId": "b2"}, "b2"),
    (None, {"buildingId": "b2"}, "b2"),
    ({"id": "x"}, None, None),
    ({}, ["buildingId"], None),
    ({}, {}, None),
])
def test_extract_building_id(path_params, body, expected):
    assert extract_building_id(path_params, body) == expected
