from eventgraph.schemas.base import apply_patch, to_fields
from eventgraph.schemas.user import UserCreate, UserUpdate
from eventgraph.schemas.event import EventCreate, EventUpdate
from eventgraph.schemas.location import LocationCreate, LocationUpdate
from eventgraph.schemas.participant import ParticipantCreate, ParticipantUpdate

__all__ = [
    "apply_patch", "to_fields",
    "UserCreate", "UserUpdate",
    "EventCreate", "EventUpdate",
    "LocationCreate", "LocationUpdate",
    "ParticipantCreate", "ParticipantUpdate",
]
