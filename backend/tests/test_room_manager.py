import asyncio

import pytest

from babelroom.services.rooms import RoomNotFoundError
from tests.helpers import drain, of_type


def connect(services, *connection_ids):
    for connection_id in connection_ids:
        services.hub.register(connection_id)


@pytest.mark.asyncio
async def test_first_join_creates_room(services):
    connect(services, "alice")

    snapshot = await services.rooms.join_room("alice", "abc123", "Alice", "en")

    assert snapshot.room_id == "ABC123"
    assert [m.connection_id for m in snapshot.members] == ["alice"]
    assert "ABC123" in services.registry
    assert services.rooms.get_session("alice").room_id == "ABC123"


@pytest.mark.asyncio
async def test_join_notifies_existing_members_only(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    drain(services, "alice")

    snapshot = await services.rooms.join_room("bob", "r1", "Bob", "es")

    assert {m.connection_id for m in snapshot.members} == {"alice", "bob"}
    joined = of_type(drain(services, "alice"), "user-joined")
    assert joined == [{
        "type": "user-joined",
        "userId": "bob",
        "displayName": "Bob",
        "language": "es",
        "timestamp": joined[0]["timestamp"],
    }]
    assert drain(services, "bob") == []


@pytest.mark.asyncio
async def test_join_defaults_name_and_language(services):
    connect(services, "anon")

    await services.rooms.join_room("anon", "R1")

    session = services.rooms.get_session("anon")
    assert session.language == "en"
    assert session.display_name.startswith("User")


@pytest.mark.asyncio
async def test_rejoin_same_room_updates_in_place(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    drain(services, "alice")

    snapshot = await services.rooms.join_room("bob", "R1", "Roberto", "pt")

    assert snapshot.user_count == 2
    bob = next(m for m in snapshot.members if m.connection_id == "bob")
    assert (bob.display_name, bob.language) == ("Roberto", "pt")
    assert services.rooms.get_session("bob").language == "pt"
    assert [m["type"] for m in drain(services, "alice")] == ["user-language-changed"]
    assert drain(services, "bob") == []


@pytest.mark.asyncio
async def test_rejoin_with_new_language_announces_the_change(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    drain(services, "alice")

    await services.rooms.join_room("bob", "R1", "Bob", "fr")

    changed = of_type(drain(services, "alice"), "user-language-changed")[0]
    assert (changed["userId"], changed["oldLanguage"], changed["newLanguage"]) == ("bob", "es", "fr")


@pytest.mark.asyncio
async def test_rejoin_with_same_language_is_silent(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    drain(services, "alice")

    await services.rooms.join_room("bob", "R1", "Roberto", "es")

    assert drain(services, "alice") == []
    assert services.rooms.get_session("bob").display_name == "Roberto"


@pytest.mark.asyncio
async def test_switching_rooms_leaves_previous_room_first(services):
    connect(services, "alice", "bob", "carol")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    await services.rooms.join_room("carol", "R2", "Carol", "fr")
    drain(services, "alice")
    drain(services, "carol")

    await services.rooms.join_room("bob", "R2", "Bob", "es")

    assert of_type(drain(services, "alice"), "user-left")[0]["userId"] == "bob"
    assert of_type(drain(services, "carol"), "user-joined")[0]["userId"] == "bob"
    assert services.rooms.get_session("bob").room_id == "R2"
    assert [m.connection_id for m in services.rooms.get_room_info("R1").members] == ["alice"]


@pytest.mark.asyncio
async def test_switching_out_of_a_solo_room_deletes_it(services):
    connect(services, "alice")
    await services.rooms.join_room("alice", "R1", "Alice", "en")

    await services.rooms.join_room("alice", "R2", "Alice", "en")

    assert "R1" not in services.registry
    assert "R2" in services.registry


@pytest.mark.asyncio
async def test_last_member_leaving_deletes_room(services):
    connect(services, "alice")
    await services.rooms.join_room("alice", "ABC123", "Alice", "en")

    session = await services.rooms.leave("alice")

    assert session.room_id == "ABC123"
    assert "ABC123" not in services.registry
    assert services.rooms.get_session("alice") is None
    with pytest.raises(RoomNotFoundError):
        services.rooms.get_room_info("ABC123")


@pytest.mark.asyncio
async def test_leave_notifies_remaining_members(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    drain(services, "alice")

    await services.rooms.leave("bob")

    left = of_type(drain(services, "alice"), "user-left")
    assert len(left) == 1
    assert left[0]["displayName"] == "Bob"
    assert services.rooms.get_room_info("R1").user_count == 1


@pytest.mark.asyncio
async def test_leave_without_session_is_noop(services):
    assert await services.rooms.leave("ghost") is None


@pytest.mark.asyncio
async def test_change_language_notifies_others(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "R1", "Alice", "en")
    await services.rooms.join_room("bob", "R1", "Bob", "es")
    drain(services, "alice")

    assert await services.rooms.change_language("bob", "fr")

    changed = of_type(drain(services, "alice"), "user-language-changed")
    assert changed[0]["oldLanguage"] == "es"
    assert changed[0]["newLanguage"] == "fr"
    assert drain(services, "bob") == []
    assert services.rooms.get_session("bob").language == "fr"
    bob = next(m for m in services.rooms.get_room_info("R1").members if m.connection_id == "bob")
    assert bob.language == "fr"


@pytest.mark.asyncio
async def test_change_language_without_session_is_noop(services):
    assert await services.rooms.change_language("ghost", "fr") is False


@pytest.mark.asyncio
async def test_room_ids_are_case_insensitive(services):
    connect(services, "alice", "bob")
    await services.rooms.join_room("alice", "abc123", "Alice", "en")
    await services.rooms.join_room("bob", "AbC123", "Bob", "es")

    assert services.rooms.get_room_info("ABC123").user_count == 2
    assert services.rooms.get_active_room_count() == 1


@pytest.mark.asyncio
async def test_concurrent_churn_keeps_counts_consistent(services):
    ids = [f"user{i}" for i in range(30)]
    connect(services, *ids)

    await asyncio.gather(*[
        services.rooms.join_room(cid, "BUSY", cid, "en" if i % 2 else "es")
        for i, cid in enumerate(ids)
    ])
    assert services.rooms.get_room_info("BUSY").user_count == 30

    await asyncio.gather(*[services.rooms.leave(cid) for cid in ids[:29]])
    assert services.rooms.get_room_info("BUSY").user_count == 1

    # Last leave races with a fresh join of the same room
    await asyncio.gather(
        services.rooms.leave(ids[29]),
        services.rooms.join_room(ids[0], "BUSY", "again", "en"),
    )
    assert services.rooms.get_room_info("BUSY").user_count == 1
    assert services.rooms.get_active_session_count() == 1


@pytest.mark.asyncio
async def test_membership_notifications_keep_order(services):
    connect(services, "host", "a", "b")
    await services.rooms.join_room("host", "R1", "Host", "en")

    await services.rooms.join_room("a", "R1", "A", "es")
    await services.rooms.change_language("a", "fr")
    await services.rooms.join_room("b", "R1", "B", "de")
    await services.rooms.leave("a")

    types = [(m["type"], m["userId"]) for m in drain(services, "host")]
    assert types == [
        ("user-joined", "a"),
        ("user-language-changed", "a"),
        ("user-joined", "b"),
        ("user-left", "a"),
    ]


def test_generated_room_ids_are_short_codes(services):
    room_id = services.registry.generate_room_id()

    assert len(room_id) == 6
    assert room_id.isalnum() and room_id == room_id.upper()
