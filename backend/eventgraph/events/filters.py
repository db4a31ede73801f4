"""
Per-subscriber filters for broadcast topics.

A filter is a pure predicate over (payload, subscription args). An unset
argument lets everything through; a set one must match exactly.
"""

from functools import partial
from typing import Any, Callable, Mapping, Optional

from eventgraph.events.bus import topic_name
from eventgraph.events.topics import Topic

Filter = Callable[[Mapping[str, Any], Mapping[str, Any]], bool]


def match_field(field: str, payload: Mapping[str, Any], args: Mapping[str, Any]) -> bool:
    expected = args.get(field)
    if expected is None or expected == "":
        return True
    return payload.get(field) == expected


def match_user_id(payload: Mapping[str, Any], args: Mapping[str, Any]) -> bool:
    """Organizer (events) or attendee (participants) filter."""
    return match_field("user_id", payload, args)


FILTERS: dict[str, Filter] = {
    Topic.EVENT_CREATED.value: match_user_id,
    Topic.PARTICIPANT_ADDED.value: match_user_id,
}


def build_predicate(topic: str, args: Mapping[str, Any]) -> Optional[Callable[[Any], bool]]:
    """Bind subscription args to the topic's filter, or None if the topic has none."""
    topic_filter = FILTERS.get(topic_name(topic))
    if topic_filter is None:
        return None
    return partial(_apply, topic_filter, dict(args))


def _apply(topic_filter: Filter, args: Mapping[str, Any], payload: Any) -> bool:
    return topic_filter(payload, args)
