"""
GraphQL input types. Names match the public schema clients already use.

Inputs are converted to plain dicts with `input_fields` and validated by
the repositories, so the rules live in one place (eventgraph.schemas).
"""

import dataclasses
from typing import Any, Optional

import strawberry


@strawberry.input(name="createUserInput")
class CreateUserInput:
    username: str
    email: str


@strawberry.input(name="updateUserInput")
class UpdateUserInput:
    username: Optional[str] = None
    email: Optional[str] = None


@strawberry.input(name="createEventInput")
class CreateEventInput:
    title: str
    desc: str
    date: str
    from_: Optional[str] = strawberry.field(name="from", default=None)
    to: Optional[str] = None
    location_id: Optional[strawberry.ID] = strawberry.field(name="location_id", default=None)
    user_id: Optional[strawberry.ID] = strawberry.field(name="user_id", default=None)


@strawberry.input(name="updateEventInput")
class UpdateEventInput:
    title: Optional[str] = None
    desc: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = strawberry.field(name="from", default=None)
    to: Optional[str] = None
    location_id: Optional[strawberry.ID] = strawberry.field(name="location_id", default=None)
    user_id: Optional[strawberry.ID] = strawberry.field(name="user_id", default=None)


@strawberry.input(name="createLocationInput")
class CreateLocationInput:
    name: str
    desc: str
    lat: float
    lng: float


@strawberry.input(name="updateLocationInput")
class UpdateLocationInput:
    name: Optional[str] = None
    desc: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


@strawberry.input(name="createParticipantInput")
class CreateParticipantInput:
    user_id: strawberry.ID = strawberry.field(name="user_id")
    event_id: strawberry.ID = strawberry.field(name="event_id")


@strawberry.input(name="updateParticipantInput")
class UpdateParticipantInput:
    user_id: Optional[strawberry.ID] = strawberry.field(name="user_id", default=None)
    event_id: Optional[strawberry.ID] = strawberry.field(name="event_id", default=None)


def input_fields(data: Any) -> dict[str, Any]:
    """Fields the client supplied; null means "leave unchanged"."""
    return {
        key: value
        for key, value in dataclasses.asdict(data).items()
        if value is not None
    }
