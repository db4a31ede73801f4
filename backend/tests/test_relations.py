"""
Tests for relationship lookups between collections.
"""

import pytest

from eventgraph.services import relations


@pytest.fixture
def dataset(seed, alice):
    seed(
        users=[alice, {"id": "2", "username": "bob", "email": "b@x.com"}],
        locations=[{"id": "l1", "name": "HQ", "desc": "", "lat": 1.0, "lng": 2.0}],
        events=[
            {"id": "e1", "title": "Launch", "desc": "", "date": "d", "location_id": "l1", "user_id": "1"},
            {"id": "e2", "title": "Retro", "desc": "", "date": "d", "location_id": "gone", "user_id": "2"},
        ],
        participants=[
            {"id": "p1", "user_id": "2", "event_id": "e1"},
            {"id": "p2", "user_id": "1", "event_id": "e1"},
            {"id": "p3", "user_id": "ghost", "event_id": "e2"},
        ],
    )


@pytest.mark.asyncio
async def test_user_events(repos, dataset):
    events = await relations.events_of_user(repos, "1")
    assert [event["id"] for event in events] == ["e1"]
    assert await relations.events_of_user(repos, "nobody") == []


@pytest.mark.asyncio
async def test_user_event_by_id(repos, dataset):
    assert (await relations.event_by_id(repos, "e1"))["title"] == "Launch"
    assert (await relations.event_by_id(repos, "e2"))["user_id"] == "2"
    assert await relations.event_by_id(repos, "missing") is None


@pytest.mark.asyncio
async def test_user_participations(repos, dataset):
    participations = await relations.participations_of_user(repos, "2")
    assert [p["id"] for p in participations] == ["p1"]


@pytest.mark.asyncio
async def test_event_user_and_location(repos, dataset):
    event = await repos.events.get("e1")
    assert (await relations.user_of_event(repos, event))["username"] == "alice"
    assert (await relations.location_of_event(repos, event))["name"] == "HQ"


@pytest.mark.asyncio
async def test_dangling_foreign_keys_resolve_to_none(repos, dataset):
    event = await repos.events.get("e2")
    assert await relations.location_of_event(repos, event) is None

    participant = await repos.participants.get("p3")
    assert await relations.user_of_participant(repos, participant) is None
    assert await relations.user_of_event(repos, {"id": "x"}) is None


@pytest.mark.asyncio
async def test_event_participants(repos, dataset):
    participants = await relations.participants_of_event(repos, "e1")
    assert [p["id"] for p in participants] == ["p1", "p2"]


@pytest.mark.asyncio
async def test_participant_user_and_event(repos, dataset):
    participant = await repos.participants.get("p1")
    assert (await relations.user_of_participant(repos, participant))["username"] == "bob"
    assert (await relations.event_of_participant(repos, participant))["title"] == "Launch"


@pytest.mark.asyncio
async def test_lookups_see_latest_state(repos, dataset):
    """No caching: a delete is visible to the next lookup."""
    event = await repos.events.get("e1")
    await repos.users.delete("1")
    assert await relations.user_of_event(repos, event) is None
    # Deleting a user does not cascade
    assert await repos.events.get("e1") is not None
