"""
Tests for the named action dispatcher.
"""
import pytest

from app.core.exceptions import Conflict, MissingActorError, ValidationError
from app.modules.actions.registry import ACTIONS, dispatch, field, flag

NAMED_ACTIONS = {
    "createGroupWithOwner", "createInvite", "renameInvite", "deleteInvite", "joinGroupByCode",
    "createPlaceholderPerson", "createQuote", "deleteQuote", "removePerson", "claimPlaceholder",
    "unclaimPlaceholder", "updateMemberRole", "transferOwnership", "removeMember", "syncGroupPermissions",
}


def test_every_operation_is_registered():
    assert NAMED_ACTIONS <= set(ACTIONS)


def test_field_accepts_snake_and_camel_case():
    assert field({"group_id": "a"}, "group_id") == "a"
    assert field({"groupId": "b"}, "group_id") == "b"
    assert field({}, "force", False) is False


def test_unknown_action(services):
    with pytest.raises(ValidationError) as exc_info:
        dispatch(services, "dropTables", "u1", {})
    assert exc_info.value.detail == "Unknown action."


def test_missing_actor(services):
    with pytest.raises(MissingActorError):
        dispatch(services, "createGroupWithOwner", "", {"name": "Club"})


def test_payload_must_be_object(services):
    with pytest.raises(ValidationError):
        dispatch(services, "createGroupWithOwner", "u1", ["Club"])


def test_flow_through_actions(store, settings, services):
    created = dispatch(services, "createGroupWithOwner", "u1", {"name": "Club", "displayName": "Alice"})
    group_id = created["group"]["id"]
    assert created["membership"]["role"] == "owner"

    joined = dispatch(services, "joinGroupByCode", "u2", {"code": created["invite"]["code"], "displayName": "Bob"})
    assert joined["created"] is True

    placeholder = dispatch(services, "createPlaceholderPerson", "u2", {"groupId": group_id, "name": "Joe"})
    quote = dispatch(services, "createQuote", "u2", {"groupId": group_id, "personId": placeholder["id"], "text": "Hey"})
    assert quote["created_by_name"] == "Bob"

    claim = dispatch(services, "claimPlaceholder", "u2", {"groupId": group_id, "placeholderId": placeholder["id"]})
    assert claim["quotes_moved"] == 1

    promoted = dispatch(services, "updateMemberRole", "u1", {
        "groupId": group_id, "membershipId": joined["membership"]["id"], "newRole": "admin"
    })
    assert promoted["role"] == "admin"

    assert dispatch(services, "deleteQuote", "u2", {"groupId": group_id, "id": quote["id"]}) == {"ok": True}

    sync = dispatch(services, "syncGroupPermissions", "u1", {"groupId": group_id})
    assert sync["updated"] == 0


def test_rename_group_updates_copies(store, settings, services, group):
    renamed = dispatch(services, "renameGroup", "u1", {"groupId": group.group.id, "name": "Reading Circle"})

    assert renamed["name"] == "Reading Circle"
    assert store.docs(settings.collection_memberships, group_id=group.group.id)[0]["group_name"] == "Reading Circle"
    assert store.docs(settings.collection_invites, group_id=group.group.id)[0]["group_name"] == "Reading Circle"


def test_remove_person_force_flag(store, settings, services, group):
    placeholder = services.people.create_placeholder_person(group.group.id, "Joe", "u1")
    services.quotes.create_quote(group.group.id, placeholder.id, "Hey", "u1")

    result = dispatch(services, "removePerson", "u1", {
        "group_id": group.group.id, "person_id": placeholder.id, "force": True
    })

    assert result == {"ok": True}
    assert store.docs(settings.collection_quotes, group_id=group.group.id) == []


@pytest.mark.parametrize("value", ["false", "no", "", 0, None])
def test_remove_person_force_flag_rejects_non_true_values(store, settings, services, group, value):
    placeholder = services.people.create_placeholder_person(group.group.id, "Joe", "u1")
    services.quotes.create_quote(group.group.id, placeholder.id, "Hey", "u1")

    with pytest.raises(Conflict):
        dispatch(services, "removePerson", "u1", {
            "groupId": group.group.id, "personId": placeholder.id, "force": value
        })

    assert len(store.docs(settings.collection_quotes, group_id=group.group.id)) == 1


def test_flag_parses_strings():
    assert flag({"force": "true"}, "force") is True
    assert flag({"force": " TRUE "}, "force") is True
    assert flag({"force": "false"}, "force") is False
    assert flag({"force": 1}, "force") is False
    assert flag({}, "force") is False
