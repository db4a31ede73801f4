"""
Topic names published on the event bus.
The values are the subscription field names clients use.
"""

from dataclasses import dataclass
from enum import Enum


class Topic(str, Enum):
    USER_CREATED = "userCreated"
    USER_UPDATED = "userUpdated"
    USER_DELETED = "userDeleted"

    EVENT_CREATED = "eventCreated"
    EVENT_UPDATED = "eventUpdated"
    EVENT_DELETED = "eventDeleted"

    LOCATION_CREATED = "locationCreated"
    LOCATION_UPDATED = "locationUpdated"
    LOCATION_DELETED = "locationDeleted"

    PARTICIPANT_ADDED = "participantAdded"
    PARTICIPANT_UPDATED = "participantUpdated"
    PARTICIPANT_DELETED = "participantDeleted"

    # Collection sizes, republished after every create/delete/delete-all
    EVENT_COUNT = "eventCount"
    COUNT = "count"


@dataclass(frozen=True)
class EntityTopics:
    created: Topic
    updated: Topic
    deleted: Topic


USER_TOPICS = EntityTopics(Topic.USER_CREATED, Topic.USER_UPDATED, Topic.USER_DELETED)
EVENT_TOPICS = EntityTopics(Topic.EVENT_CREATED, Topic.EVENT_UPDATED, Topic.EVENT_DELETED)
LOCATION_TOPICS = EntityTopics(Topic.LOCATION_CREATED, Topic.LOCATION_UPDATED, Topic.LOCATION_DELETED)
PARTICIPANT_TOPICS = EntityTopics(
    Topic.PARTICIPANT_ADDED, Topic.PARTICIPANT_UPDATED, Topic.PARTICIPANT_DELETED
)
