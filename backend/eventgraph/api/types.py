"""
GraphQL object types.

Each type is built from a stored record with `from_record`. Relationship
fields are resolved lazily, only when a client selects them, by scanning
the related collection through `services.relations`.
"""

from typing import Any, List, Optional

import strawberry
from strawberry.types import Info

from eventgraph.services import relations
from eventgraph.services.repository import Record, as_key


def _repos(info: Info):
    return info.context.repositories


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    email: str

    @strawberry.field(description="Events organised by this user")
    async def events(self, info: Info) -> List["Event"]:
        records = await relations.events_of_user(_repos(info), self.id)
        return [Event.from_record(record) for record in records]

    @strawberry.field(description="An event looked up by id, whoever organised it")
    async def event(self, info: Info, id: strawberry.ID) -> Optional["Event"]:
        record = await relations.event_by_id(_repos(info), id)
        return Event.from_record(record) if record else None

    @strawberry.field(description="Events this user attends")
    async def participations(self, info: Info) -> List["Participant"]:
        records = await relations.participations_of_user(_repos(info), self.id)
        return [Participant.from_record(record) for record in records]

    @classmethod
    def from_record(cls, record: Record) -> "User":
        return cls(
            id=as_key(record["id"]),
            username=record.get("username"),
            email=record.get("email"),
        )


@strawberry.type
class Event:
    id: strawberry.ID
    title: str
    desc: str
    date: str
    from_: Optional[str] = strawberry.field(name="from", default=None)
    to: Optional[str] = None
    location_id: Optional[strawberry.ID] = strawberry.field(name="location_id", default=None)
    user_id: Optional[strawberry.ID] = strawberry.field(name="user_id", default=None)
    record: strawberry.Private[Optional[Record]] = None

    @strawberry.field(description="Organiser; null if the user no longer exists")
    async def user(self, info: Info) -> Optional[User]:
        record = await relations.user_of_event(_repos(info), self.record)
        return User.from_record(record) if record else None

    @strawberry.field
    async def location(self, info: Info) -> Optional["Location"]:
        record = await relations.location_of_event(_repos(info), self.record)
        return Location.from_record(record) if record else None

    @strawberry.field
    async def participants(self, info: Info) -> List["Participant"]:
        records = await relations.participants_of_event(_repos(info), self.id)
        return [Participant.from_record(record) for record in records]

    @classmethod
    def from_record(cls, record: Record) -> "Event":
        return cls(
            id=as_key(record["id"]),
            title=record.get("title"),
            desc=record.get("desc"),
            date=record.get("date"),
            from_=record.get("from"),
            to=record.get("to"),
            location_id=as_key(record.get("location_id")),
            user_id=as_key(record.get("user_id")),
            record=record,
        )


@strawberry.type
class Location:
    id: strawberry.ID
    name: str
    desc: str
    lat: float
    lng: float

    @classmethod
    def from_record(cls, record: Record) -> "Location":
        return cls(
            id=as_key(record["id"]),
            name=record.get("name"),
            desc=record.get("desc"),
            lat=record.get("lat"),
            lng=record.get("lng"),
        )


@strawberry.type
class Participant:
    id: strawberry.ID
    user_id: strawberry.ID = strawberry.field(name="user_id")
    event_id: strawberry.ID = strawberry.field(name="event_id")
    record: strawberry.Private[Optional[Record]] = None

    @strawberry.field
    async def user(self, info: Info) -> Optional[User]:
        record = await relations.user_of_participant(_repos(info), self.record)
        return User.from_record(record) if record else None

    @strawberry.field
    async def event(self, info: Info) -> Optional[Event]:
        record = await relations.event_of_participant(_repos(info), self.record)
        return Event.from_record(record) if record else None

    @classmethod
    def from_record(cls, record: Record) -> "Participant":
        return cls(
            id=as_key(record["id"]),
            user_id=as_key(record.get("user_id")),
            event_id=as_key(record.get("event_id")),
            record=record,
        )


@strawberry.type
class DeleteAllOutput:
    count: int


def build(type_: Any, records: List[Record]) -> list:
    return [type_.from_record(record) for record in records]
