"""
Tests for joining, role changes, ownership transfer and member removal.
"""
import pytest

from app.core.exceptions import Forbidden, MissingActorError, NotFound, Transient, ValidationError
from app.modules.actions.registry import ActionServices
from tests.conftest import membership_of
from tests.fakes import ScriptedRng


def roles(store, settings, group_id):
    return {m["user_id"]: m["role"] for m in store.docs(settings.collection_memberships, group_id=group_id)}


# create / join

def test_create_group_with_owner(store, settings, group):
    group_id = group.group.id
    assert group.group.owner_id == "u1"
    assert group.membership.role == "owner"
    assert group.membership.display_name == "Alice"
    assert group.person.user_id == "u1"
    assert group.person.is_placeholder is False
    assert group.membership.person_id == group.person.id
    assert roles(store, settings, group_id) == {"u1": "owner"}


def test_create_group_requires_name(services):
    with pytest.raises(ValidationError):
        services.groups.create_group_with_owner("  ", "u1", "Alice")


def test_create_group_requires_actor(services):
    with pytest.raises(MissingActorError):
        services.groups.create_group_with_owner("Club", "", "Alice")


def test_join_creates_member_and_person(store, settings, group, join):
    joined = join("u2", "Bob")

    assert joined.created is True
    assert joined.group_id == group.group.id
    assert joined.membership.role == "member"
    assert joined.person.name == "Bob"
    group_doc = store.data[settings.collection_groups][group.group.id]
    assert 'read("user:u2")' in group_doc["permissions"]


def test_join_twice_returns_existing_membership(store, settings, group, join):
    first = join("u2", "Bob")
    store.reset_accounting()

    second = join("u2", "Robert")

    assert second.created is False
    assert second.membership.id == first.membership.id
    assert second.membership.display_name == "Bob"
    assert store.writes == []
    assert len(store.docs(settings.collection_memberships, group_id=group.group.id, user_id="u2")) == 1


def test_join_resumes_after_person_was_created(store, settings, services, group):
    store.fail("create", settings.collection_memberships, Transient("timeout"))
    with pytest.raises(Transient):
        services.memberships.join_group_by_code(group.invite.code, "u2", "Bob")

    joined = services.memberships.join_group_by_code(group.invite.code, "u2", "Bob")

    assert joined.created is True
    people = store.docs(settings.collection_people, group_id=group.group.id, user_id="u2")
    assert len(people) == 1
    assert joined.person.id == people[0]["id"]


def test_join_with_unknown_code(services, group):
    with pytest.raises(NotFound):
        services.memberships.join_group_by_code("ZZZZZZZZ", "u2", "Bob")
    with pytest.raises(ValidationError):
        services.memberships.join_group_by_code("", "u2", "Bob")


def test_join_scenario_with_known_code(store, settings):
    services = ActionServices(store, settings, rng=ScriptedRng("ABC23XYZ"))
    created = services.groups.create_group_with_owner("Family", "owner-1", "Mom")
    assert created.invite.code == "ABC23XYZ"

    joined = services.memberships.join_group_by_code("abc23xyz", "kid-1", "Sam")

    assert joined.group_id == created.group.id
    group_id = created.group.id
    assert roles(store, settings, group_id) == {"owner-1": "owner", "kid-1": "member"}
    assert services.permissions.sync_group_permissions(group_id, "owner-1").updated == 0

    services.memberships.update_member_role(group_id, joined.membership.id, "admin", "owner-1")
    assert 'update("user:kid-1")' in store.data[settings.collection_groups][group_id]["permissions"]

    moved = services.memberships.transfer_ownership(group_id, created.membership.id, joined.membership.id, "owner-1")
    assert moved.owner_id == "kid-1"
    assert roles(store, settings, group_id) == {"owner-1": "admin", "kid-1": "owner"}


def test_list_members_ordered_by_display_name(services, group, join):
    join("u3", "Carol")
    join("u2", "Bob")
    members = services.memberships.list_members(group.group.id, "u3")
    assert [m.display_name for m in members] == ["Alice", "Bob", "Carol"]


def test_list_members_requires_membership(services, group):
    with pytest.raises(Forbidden):
        services.memberships.list_members(group.group.id, "stranger")


# roles

def test_admin_promotes_member_and_gains_group_update(store, settings, services, group, join):
    bob = join("u2", "Bob")

    updated = services.memberships.update_member_role(group.group.id, bob.membership.id, "admin", "u1")

    assert updated.role == "admin"
    group_doc = store.data[settings.collection_groups][group.group.id]
    assert 'update("user:u2")' in group_doc["permissions"]
    assert 'delete("user:u2")' not in group_doc["permissions"]


def test_member_cannot_promote(services, group, join):
    join("u2", "Bob")
    carol = join("u3", "Carol")
    with pytest.raises(Forbidden):
        services.memberships.update_member_role(group.group.id, carol.membership.id, "admin", "u2")


def test_only_owner_demotes_admin(services, group, join):
    bob = join("u2", "Bob")
    carol = join("u3", "Carol")
    services.memberships.update_member_role(group.group.id, bob.membership.id, "admin", "u1")
    services.memberships.update_member_role(group.group.id, carol.membership.id, "admin", "u1")

    with pytest.raises(Forbidden):
        services.memberships.update_member_role(group.group.id, carol.membership.id, "member", "u2")

    demoted = services.memberships.update_member_role(group.group.id, carol.membership.id, "member", "u1")
    assert demoted.role == "member"


def test_owner_role_cannot_be_changed(services, group, join):
    bob = join("u2", "Bob")
    services.memberships.update_member_role(group.group.id, bob.membership.id, "admin", "u1")
    with pytest.raises(Forbidden):
        services.memberships.update_member_role(group.group.id, group.membership.id, "member", "u2")


def test_invalid_role(services, group, join):
    bob = join("u2", "Bob")
    with pytest.raises(ValidationError):
        services.memberships.update_member_role(group.group.id, bob.membership.id, "owner", "u1")


def test_role_change_on_foreign_membership(services, group):
    other = services.groups.create_group_with_owner("Other", "u9", "Zed")
    with pytest.raises(NotFound):
        services.memberships.update_member_role(group.group.id, other.membership.id, "admin", "u1")


# ownership

def test_transfer_ownership(store, settings, services, group, join):
    bob = join("u2", "Bob")

    result = services.memberships.transfer_ownership(group.group.id, group.membership.id, bob.membership.id, "u1")

    assert result.owner_id == "u2"
    assert roles(store, settings, group.group.id) == {"u1": "admin", "u2": "owner"}
    group_doc = store.data[settings.collection_groups][group.group.id]
    assert 'delete("user:u2")' in group_doc["permissions"]
    assert 'delete("user:u1")' not in group_doc["permissions"]


def test_transfer_by_non_owner_forbidden(services, group, join):
    bob = join("u2", "Bob")
    services.memberships.update_member_role(group.group.id, bob.membership.id, "admin", "u1")
    with pytest.raises(Forbidden):
        services.memberships.transfer_ownership(group.group.id, group.membership.id, bob.membership.id, "u2")


def test_transfer_to_self_rejected(services, group):
    with pytest.raises(ValidationError):
        services.memberships.transfer_ownership(group.group.id, group.membership.id, group.membership.id, "u1")


def test_interrupted_transfer_can_be_finished(store, settings, services, group, join):
    bob = join("u2", "Bob")
    # First membership write (demoting u1) succeeds, promoting u2 fails
    store.fail("update", settings.collection_memberships, Transient("timeout"), after=1)
    with pytest.raises(Transient):
        services.memberships.transfer_ownership(group.group.id, group.membership.id, bob.membership.id, "u1")
    assert roles(store, settings, group.group.id) == {"u1": "admin", "u2": "member"}

    result = services.memberships.transfer_ownership(group.group.id, group.membership.id, bob.membership.id, "u1")

    assert result.owner_id == "u2"
    owners = [uid for uid, role in roles(store, settings, group.group.id).items() if role == "owner"]
    assert owners == ["u2"]


# removal

def test_member_leaves(store, settings, services, group, join):
    bob = join("u2", "Bob")

    assert services.memberships.remove_member(group.group.id, bob.membership.id, "u2") is True

    assert membership_of(store, settings, group.group.id, "u2") is None
    assert store.docs(settings.collection_people, user_id="u2") == []
    group_doc = store.data[settings.collection_groups][group.group.id]
    assert 'read("user:u2")' not in group_doc["permissions"]


def test_leaving_member_with_quotes_becomes_placeholder(store, settings, services, group, join):
    bob = join("u2", "Bob")
    services.quotes.create_quote(group.group.id, bob.person.id, "I'll be right back", "u1")

    services.memberships.remove_member(group.group.id, bob.membership.id, "u2")

    person = store.data[settings.collection_people][bob.person.id]
    assert person["is_placeholder"] is True
    assert person["user_id"] == ""
    assert person["name"] == "Bob"
    assert 'delete("user:u1")' in person["permissions"]


def test_owner_cannot_leave(services, group):
    with pytest.raises(Forbidden):
        services.memberships.remove_member(group.group.id, group.membership.id, "u1")


def test_admin_removes_member(store, settings, services, group, join):
    bob = join("u2", "Bob")
    services.memberships.remove_member(group.group.id, bob.membership.id, "u1")
    assert membership_of(store, settings, group.group.id, "u2") is None


def test_member_cannot_remove_another_member(store, settings, services, group, join):
    join("u2", "Bob")
    carol = join("u3", "Carol")

    with pytest.raises(Forbidden):
        services.memberships.remove_member(group.group.id, carol.membership.id, "u2")

    assert membership_of(store, settings, group.group.id, "u2") is not None
    assert membership_of(store, settings, group.group.id, "u3") is not None


def test_admin_cannot_remove_owner_or_other_admin(services, group, join):
    bob = join("u2", "Bob")
    carol = join("u3", "Carol")
    services.memberships.update_member_role(group.group.id, bob.membership.id, "admin", "u1")
    services.memberships.update_member_role(group.group.id, carol.membership.id, "admin", "u1")

    with pytest.raises(Forbidden):
        services.memberships.remove_member(group.group.id, group.membership.id, "u2")
    with pytest.raises(Forbidden):
        services.memberships.remove_member(group.group.id, carol.membership.id, "u2")

    assert services.memberships.remove_member(group.group.id, carol.membership.id, "u1") is True


def test_removed_member_is_dropped_from_every_acl(store, settings, services, group, join):
    bob = join("u2", "Bob")
    services.people.create_placeholder_person(group.group.id, "Uncle Joe", "u2")

    services.memberships.remove_member(group.group.id, bob.membership.id, "u1")

    for collection in settings.collections.values():
        for document in store.data[collection].values():
            assert not any("user:u2" in entry for entry in document["permissions"]), collection
