"""
Event system for change notifications.

The bus carries persisted records from repositories to subscription
resolvers; filters narrow a topic's stream per subscriber.
"""

from eventgraph.events.bus import EventBus, Subscription, SubscriptionClosed
from eventgraph.events.filters import build_predicate, match_user_id
from eventgraph.events.topics import Topic

__all__ = ['EventBus', 'Subscription', 'SubscriptionClosed', 'Topic', 'build_predicate', 'match_user_id']
