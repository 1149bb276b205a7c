"""
Shared fixtures.

Services run against tests.fakes.InMemoryDocumentStore; nothing talks to Supabase.
"""

import random

import pytest

from app.config.settings import Settings
from app.modules.actions.registry import ActionServices
from tests.fakes import InMemoryDocumentStore


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, supabase_url="", supabase_key="")


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def services(store, settings) -> ActionServices:
    return ActionServices(store, settings, rng=random.Random(1234))


@pytest.fixture
def group(services):
    """Group owned by u1 ("Alice")"""
    return services.groups.create_group_with_owner("Book Club", "u1", "Alice")


@pytest.fixture
def join(services, group):
    """join(user_id, name) -> JoinResponse, using the group's default invite"""
    def _join(user_id: str, name: str = "Member"):
        return services.memberships.join_group_by_code(group.invite.code, user_id, name)
    return _join


def membership_of(store, settings, group_id: str, user_id: str) -> dict:
    docs = store.docs(settings.collection_memberships, group_id=group_id, user_id=user_id)
    assert len(docs) <= 1
    return docs[0] if docs else None
