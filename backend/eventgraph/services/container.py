"""
Wiring of the four entity repositories around one store and one bus.
"""

from dataclasses import dataclass

from eventgraph.events.bus import EventBus
from eventgraph.events.topics import (
    EVENT_TOPICS,
    LOCATION_TOPICS,
    PARTICIPANT_TOPICS,
    USER_TOPICS,
    Topic,
)
from eventgraph.schemas import (
    EventCreate,
    EventUpdate,
    LocationCreate,
    LocationUpdate,
    ParticipantCreate,
    ParticipantUpdate,
    UserCreate,
    UserUpdate,
)
from eventgraph.services.repository import Repository
from eventgraph.store.json_store import COLLECTIONS, JsonStore


@dataclass
class Repositories:
    store: JsonStore
    bus: EventBus
    users: Repository
    events: Repository
    locations: Repository
    participants: Repository

    async def total_count(self) -> int:
        """Number of records across all four collections."""
        document = await self.store.load()
        return sum(len(document.collection(name)) for name in COLLECTIONS)


def build_repositories(store: JsonStore, bus: EventBus) -> Repositories:
    return Repositories(
        store=store,
        bus=bus,
        users=Repository(
            store, bus,
            entity="user",
            collection="users",
            create_schema=UserCreate,
            update_schema=UserUpdate,
            topics=USER_TOPICS,
        ),
        events=Repository(
            store, bus,
            entity="event",
            collection="events",
            create_schema=EventCreate,
            update_schema=EventUpdate,
            topics=EVENT_TOPICS,
            count_topic=Topic.EVENT_COUNT,
        ),
        locations=Repository(
            store, bus,
            entity="location",
            collection="locations",
            create_schema=LocationCreate,
            update_schema=LocationUpdate,
            topics=LOCATION_TOPICS,
        ),
        participants=Repository(
            store, bus,
            entity="participant",
            collection="participants",
            create_schema=ParticipantCreate,
            update_schema=ParticipantUpdate,
            topics=PARTICIPANT_TOPICS,
        ),
    )
