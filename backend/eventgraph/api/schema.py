"""
GraphQL schema: Query, Mutation and Subscription.

Each field maps onto exactly one repository call. Errors raised by the
data-access layer (NotFoundError, ValidationError, StoreIOError) carry
client-safe messages and are passed through; anything else is masked
unless DEBUG is on.
"""

from typing import Annotated, AsyncGenerator, List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import Info

from eventgraph.api.inputs import (
    CreateEventInput,
    CreateLocationInput,
    CreateParticipantInput,
    CreateUserInput,
    UpdateEventInput,
    UpdateLocationInput,
    UpdateParticipantInput,
    UpdateUserInput,
    input_fields,
)
from eventgraph.api.types import DeleteAllOutput, Event, Location, Participant, User, build
from eventgraph.core.errors import DataAccessError
from eventgraph.core.logging import get_logger
from eventgraph.events.bus import Subscription as BusSubscription
from eventgraph.events.filters import build_predicate
from eventgraph.events.topics import Topic
from eventgraph.services.container import Repositories

logger = get_logger(__name__)

UserIdArgument = Annotated[Optional[strawberry.ID], strawberry.argument(name="user_id")]


def _repos(info: Info) -> Repositories:
    return info.context.repositories


def _listen(info: Info, topic: Topic, **args) -> BusSubscription:
    return _repos(info).bus.subscribe(topic, build_predicate(topic, args))


@strawberry.type
class Query:
    @strawberry.field
    async def users(self, info: Info) -> List[User]:
        return build(User, await _repos(info).users.list())

    @strawberry.field
    async def user(self, info: Info, id: strawberry.ID) -> Optional[User]:
        record = await _repos(info).users.get(id)
        return User.from_record(record) if record else None

    @strawberry.field
    async def events(self, info: Info) -> List[Event]:
        return build(Event, await _repos(info).events.list())

    @strawberry.field
    async def event(self, info: Info, id: strawberry.ID) -> Optional[Event]:
        record = await _repos(info).events.get(id)
        return Event.from_record(record) if record else None

    @strawberry.field
    async def locations(self, info: Info) -> List[Location]:
        return build(Location, await _repos(info).locations.list())

    @strawberry.field
    async def location(self, info: Info, id: strawberry.ID) -> Optional[Location]:
        record = await _repos(info).locations.get(id)
        return Location.from_record(record) if record else None

    @strawberry.field
    async def participants(self, info: Info) -> List[Participant]:
        return build(Participant, await _repos(info).participants.list())

    @strawberry.field
    async def participant(self, info: Info, id: strawberry.ID) -> Optional[Participant]:
        record = await _repos(info).participants.get(id)
        return Participant.from_record(record) if record else None


@strawberry.type
class Mutation:
    # User
    @strawberry.mutation
    async def add_user(self, info: Info, data: CreateUserInput) -> User:
        return User.from_record(await _repos(info).users.create(input_fields(data)))

    @strawberry.mutation
    async def update_user(self, info: Info, id: strawberry.ID, data: UpdateUserInput) -> User:
        return User.from_record(await _repos(info).users.update(id, input_fields(data)))

    @strawberry.mutation
    async def delete_user(self, info: Info, id: strawberry.ID) -> User:
        return User.from_record(await _repos(info).users.delete(id))

    @strawberry.mutation
    async def delete_all_users(self, info: Info) -> DeleteAllOutput:
        return DeleteAllOutput(count=await _repos(info).users.delete_all())

    # Event
    @strawberry.mutation
    async def add_event(self, info: Info, data: CreateEventInput) -> Event:
        return Event.from_record(await _repos(info).events.create(input_fields(data)))

    @strawberry.mutation
    async def update_event(self, info: Info, id: strawberry.ID, data: UpdateEventInput) -> Event:
        return Event.from_record(await _repos(info).events.update(id, input_fields(data)))

    @strawberry.mutation
    async def delete_event(self, info: Info, id: strawberry.ID) -> Event:
        return Event.from_record(await _repos(info).events.delete(id))

    @strawberry.mutation
    async def delete_all_events(self, info: Info) -> DeleteAllOutput:
        return DeleteAllOutput(count=await _repos(info).events.delete_all())

    # Location
    @strawberry.mutation
    async def add_location(self, info: Info, data: CreateLocationInput) -> Location:
        return Location.from_record(await _repos(info).locations.create(input_fields(data)))

    @strawberry.mutation
    async def update_location(
        self, info: Info, id: strawberry.ID, data: UpdateLocationInput
    ) -> Location:
        return Location.from_record(await _repos(info).locations.update(id, input_fields(data)))

    @strawberry.mutation
    async def delete_location(self, info: Info, id: strawberry.ID) -> Location:
        return Location.from_record(await _repos(info).locations.delete(id))

    @strawberry.mutation
    async def delete_all_locations(self, info: Info) -> DeleteAllOutput:
        return DeleteAllOutput(count=await _repos(info).locations.delete_all())

    # Participant
    @strawberry.mutation
    async def add_participant(self, info: Info, data: CreateParticipantInput) -> Participant:
        return Participant.from_record(await _repos(info).participants.create(input_fields(data)))

    @strawberry.mutation
    async def update_participant(
        self, info: Info, id: strawberry.ID, data: UpdateParticipantInput
    ) -> Participant:
        record = await _repos(info).participants.update(id, input_fields(data))
        return Participant.from_record(record)

    @strawberry.mutation
    async def delete_participant(self, info: Info, id: strawberry.ID) -> Participant:
        return Participant.from_record(await _repos(info).participants.delete(id))

    @strawberry.mutation
    async def delete_all_participants(self, info: Info) -> DeleteAllOutput:
        return DeleteAllOutput(count=await _repos(info).participants.delete_all())


@strawberry.type
class Subscription:
    # Subscriptions hold their bus handle in a `with` block so a client
    # disconnect (generator close) deregisters it immediately.

    @strawberry.subscription
    async def count(self, info: Info) -> AsyncGenerator[int, None]:
        """Total records across all collections, now and after every create/delete."""
        with _listen(info, Topic.COUNT) as feed:
            yield await _repos(info).total_count()
            async for value in feed:
                yield value

    # User
    @strawberry.subscription
    async def user_created(self, info: Info) -> AsyncGenerator[User, None]:
        with _listen(info, Topic.USER_CREATED) as feed:
            async for record in feed:
                yield User.from_record(record)

    @strawberry.subscription
    async def user_updated(self, info: Info) -> AsyncGenerator[User, None]:
        with _listen(info, Topic.USER_UPDATED) as feed:
            async for record in feed:
                yield User.from_record(record)

    @strawberry.subscription
    async def user_deleted(self, info: Info) -> AsyncGenerator[User, None]:
        with _listen(info, Topic.USER_DELETED) as feed:
            async for record in feed:
                yield User.from_record(record)

    # Event
    @strawberry.subscription
    async def event_created(
        self, info: Info, user_id: UserIdArgument = None
    ) -> AsyncGenerator[Event, None]:
        """New events, optionally only those organised by user_id."""
        with _listen(info, Topic.EVENT_CREATED, user_id=user_id) as feed:
            async for record in feed:
                yield Event.from_record(record)

    @strawberry.subscription
    async def event_updated(self, info: Info) -> AsyncGenerator[Event, None]:
        with _listen(info, Topic.EVENT_UPDATED) as feed:
            async for record in feed:
                yield Event.from_record(record)

    @strawberry.subscription
    async def event_deleted(self, info: Info) -> AsyncGenerator[Event, None]:
        with _listen(info, Topic.EVENT_DELETED) as feed:
            async for record in feed:
                yield Event.from_record(record)

    @strawberry.subscription
    async def event_count(self, info: Info) -> AsyncGenerator[int, None]:
        with _listen(info, Topic.EVENT_COUNT) as feed:
            yield await _repos(info).events.count()
            async for value in feed:
                yield value

    # Location
    @strawberry.subscription
    async def location_created(self, info: Info) -> AsyncGenerator[Location, None]:
        with _listen(info, Topic.LOCATION_CREATED) as feed:
            async for record in feed:
                yield Location.from_record(record)

    @strawberry.subscription
    async def location_updated(self, info: Info) -> AsyncGenerator[Location, None]:
        with _listen(info, Topic.LOCATION_UPDATED) as feed:
            async for record in feed:
                yield Location.from_record(record)

    @strawberry.subscription
    async def location_deleted(self, info: Info) -> AsyncGenerator[Location, None]:
        with _listen(info, Topic.LOCATION_DELETED) as feed:
            async for record in feed:
                yield Location.from_record(record)

    # Participant
    @strawberry.subscription
    async def participant_added(
        self, info: Info, user_id: UserIdArgument = None
    ) -> AsyncGenerator[Participant, None]:
        """New participants, optionally only those for attendee user_id."""
        with _listen(info, Topic.PARTICIPANT_ADDED, user_id=user_id) as feed:
            async for record in feed:
                yield Participant.from_record(record)

    @strawberry.subscription
    async def participant_updated(self, info: Info) -> AsyncGenerator[Participant, None]:
        with _listen(info, Topic.PARTICIPANT_UPDATED) as feed:
            async for record in feed:
                yield Participant.from_record(record)

    @strawberry.subscription
    async def participant_deleted(self, info: Info) -> AsyncGenerator[Participant, None]:
        with _listen(info, Topic.PARTICIPANT_DELETED) as feed:
            async for record in feed:
                yield Participant.from_record(record)


def is_internal_error(error: GraphQLError) -> bool:
    """Mask everything except data-access errors and GraphQL validation errors."""
    original = error.original_error
    if original is None:
        return False
    return not isinstance(original, DataAccessError)


class LoggedSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None) -> None:
        for error in errors:
            original = error.original_error
            if original is None:
                logger.info("graphql_request_invalid", error=error.message)
            elif isinstance(original, DataAccessError):
                logger.info(
                    "graphql_request_failed",
                    path=error.path,
                    error_type=type(original).__name__,
                    error=str(original),
                )
            else:
                logger.error(
                    "graphql_resolver_error",
                    path=error.path,
                    error_type=type(original).__name__,
                    error=str(original),
                    exc_info=original,
                )


def build_schema(debug: bool = False) -> strawberry.Schema:
    extensions = []
    if not debug:
        extensions.append(lambda: MaskErrors(should_mask_error=is_internal_error))
    return LoggedSchema(
        query=Query,
        mutation=Mutation,
        subscription=Subscription,
        extensions=extensions,
    )
