"""
Relationship lookups between records.

Foreign keys are resolved by scanning the related collection on every
call, so results always reflect the latest saved document. Dangling keys
resolve to None or an empty list.
"""

from typing import Optional

from eventgraph.services.container import Repositories
from eventgraph.services.repository import Record


async def events_of_user(repos: Repositories, user_id: str) -> list[Record]:
    """Events organised by the user."""
    return await repos.events.find_all(user_id=user_id)


async def event_by_id(repos: Repositories, event_id: str) -> Optional[Record]:
    """Any event with that id; the organizer is not checked."""
    return await repos.events.get(event_id)


async def participations_of_user(repos: Repositories, user_id: str) -> list[Record]:
    """Participant records where the user is the attendee."""
    return await repos.participants.find_all(user_id=user_id)


async def user_of_event(repos: Repositories, event: Record) -> Optional[Record]:
    return await _lookup(repos.users, event.get("user_id"))


async def location_of_event(repos: Repositories, event: Record) -> Optional[Record]:
    return await _lookup(repos.locations, event.get("location_id"))


async def participants_of_event(repos: Repositories, event_id: str) -> list[Record]:
    return await repos.participants.find_all(event_id=event_id)


async def user_of_participant(repos: Repositories, participant: Record) -> Optional[Record]:
    return await _lookup(repos.users, participant.get("user_id"))


async def event_of_participant(repos: Repositories, participant: Record) -> Optional[Record]:
    return await _lookup(repos.events, participant.get("event_id"))


async def _lookup(repository, record_id) -> Optional[Record]:
    if record_id is None:
        return None
    return await repository.find_one(id=record_id)
