"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit        - No external deps
    @pytest.mark.smoke       - Fast subset
    @pytest.mark.integration - Needs running services

The ``org_tree`` fixture builds a small hierarchy used across layers:

    Acme
    +-- Engineering
    |   +-- Platform
    |   |   +-- Storage
    |   +-- Mobile
    +-- Sales
    Globex            (separate root)
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.rbac import AccessScopeCalculator, AuthorizationGate, RelationshipResolver
from src.shared.types import Organization  # noqa: TC001 -- dataclass field type
from tests.fakes import FakeCommentStore, FakeGoalStore, FakeOrgStore, FakeUserStore


@dataclass
class OrgTree:
    store: FakeOrgStore
    acme: Organization
    engineering: Organization
    platform: Organization
    storage: Organization
    mobile: Organization
    sales: Organization
    globex: Organization


@pytest.fixture
def org_store() -> FakeOrgStore:
    return FakeOrgStore()


@pytest.fixture
def org_tree(org_store: FakeOrgStore) -> OrgTree:
    acme = org_store.add("Acme", ai_guidelines="Customers first.")
    engineering = org_store.add(
        "Engineering", parent=acme, ai_guidelines="Prefer boring technology."
    )
    platform = org_store.add("Platform", parent=engineering)
    storage = org_store.add("Storage", parent=platform)
    mobile = org_store.add("Mobile", parent=engineering)
    sales = org_store.add("Sales", parent=acme)
    globex = org_store.add("Globex")
    return OrgTree(
        store=org_store,
        acme=acme,
        engineering=engineering,
        platform=platform,
        storage=storage,
        mobile=mobile,
        sales=sales,
        globex=globex,
    )


@pytest.fixture
def user_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def goal_store() -> FakeGoalStore:
    return FakeGoalStore()


@pytest.fixture
def comment_store() -> FakeCommentStore:
    return FakeCommentStore()


@pytest.fixture
def resolver(org_store: FakeOrgStore) -> RelationshipResolver:
    return RelationshipResolver(org_store=org_store)


@pytest.fixture
def scope(org_store: FakeOrgStore) -> AccessScopeCalculator:
    return AccessScopeCalculator(org_store=org_store)


@pytest.fixture
def gate(resolver: RelationshipResolver) -> AuthorizationGate:
    return AuthorizationGate(resolver=resolver)
