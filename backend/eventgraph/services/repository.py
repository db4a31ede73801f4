"""
Repository operations over one collection of the JSON document.

MUTATION FLOW
=============

  validate input  ->  [lock: load -> locate -> apply -> save]  ->  publish

  1. Input is validated against the entity's pydantic schema before the
     store is touched. Invalid input raises ValidationError and nothing is
     written or published.
  2. The change runs inside `JsonStore.transaction()`, so concurrent
     mutations on any collection are serialized. A NotFoundError raised
     while locating the record aborts the transaction without saving.
  3. Only after the document has been saved and the lock released is the
     notification published. Publishing never blocks on subscribers.

Ids are random (uuid4 hex) for every entity and are checked against the
collection inside the lock, so concurrent creates cannot collide. Ids are
compared as literal strings; "01" and "1" are different records.

Foreign keys are not enforced: deleting a user leaves its events and
participants in place, and relationship lookups on them resolve to nothing.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from eventgraph.core.errors import DataAccessError, NotFoundError, ValidationError
from eventgraph.core.logging import get_logger
from eventgraph.core.metrics import record_mutation
from eventgraph.events.bus import EventBus
from eventgraph.events.topics import EntityTopics, Topic
from eventgraph.schemas.base import apply_patch, to_fields
from eventgraph.store.json_store import COLLECTIONS, JsonStore, StoreDocument

logger = get_logger(__name__)

Record = dict[str, Any]


def as_key(value: Any) -> Any:
    """Ids written by older tools may be JSON numbers; compare them by their text."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def same_id(stored: Any, record_id: str) -> bool:
    return stored is not None and as_key(stored) == record_id


def matches(record: Record, criteria: dict[str, Any]) -> bool:
    return all(as_key(record.get(field)) == as_key(value) for field, value in criteria.items())


class Repository:
    def __init__(
        self,
        store: JsonStore,
        bus: EventBus,
        *,
        entity: str,
        collection: str,
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel],
        topics: EntityTopics,
        count_topic: Optional[Topic] = None,
    ):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection {collection!r}")
        self.store = store
        self.bus = bus
        self.entity = entity
        self.collection = collection
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.topics = topics
        self.count_topic = count_topic

    # Reads

    async def list(self) -> List[Record]:
        document = await self.store.load()
        return document.collection(self.collection)

    async def get(self, record_id: str) -> Optional[Record]:
        """The record with this id, or None. Absence is not an error."""
        records = await self.list()
        for record in records:
            if same_id(record.get("id"), record_id):
                return record
        return None

    async def find_all(self, **criteria: Any) -> List[Record]:
        records = await self.list()
        return [record for record in records if matches(record, criteria)]

    async def find_one(self, **criteria: Any) -> Optional[Record]:
        records = await self.list()
        for record in records:
            if matches(record, criteria):
                return record
        return None

    async def count(self) -> int:
        return len(await self.list())

    # Mutations

    async def create(self, data: Any) -> Record:
        payload = self._validate(self.create_schema, data, "create")
        fields = to_fields(payload)

        async with self._mutation("create") as document:
            records = document.collection(self.collection)
            record = {"id": self._new_id(records), **fields}
            records.append(record)
            counts = self._counts(document)

        logger.info("record_created", entity=self.entity, record_id=record["id"])
        self.bus.publish(self.topics.created, record)
        self._publish_counts(counts)
        return record

    async def update(self, record_id: str, patch: Any) -> Record:
        """Shallow-merge patch over the record. Raises NotFoundError if absent."""
        payload = self._validate(self.update_schema, patch, "update")

        async with self._mutation("update") as document:
            records = document.collection(self.collection)
            index = self._index_of(records, record_id)
            record = apply_patch(records[index], payload)
            records[index] = record

        logger.info(
            "record_updated",
            entity=self.entity,
            record_id=record_id,
            fields=sorted(to_fields(payload)),
        )
        self.bus.publish(self.topics.updated, record)
        return record

    async def delete(self, record_id: str) -> Record:
        """Remove the record and return it as it was. Raises NotFoundError if absent."""
        async with self._mutation("delete") as document:
            records = document.collection(self.collection)
            index = self._index_of(records, record_id)
            record = records.pop(index)
            counts = self._counts(document)

        logger.info("record_deleted", entity=self.entity, record_id=record_id)
        self.bus.publish(self.topics.deleted, record)
        self._publish_counts(counts)
        return record

    async def delete_all(self) -> int:
        """Empty the collection. No per-record notifications are published."""
        async with self._mutation("delete_all") as document:
            records = document.collection(self.collection)
            removed = len(records)
            records.clear()
            counts = self._counts(document)

        logger.info("collection_cleared", entity=self.entity, removed=removed)
        self._publish_counts(counts)
        return removed

    # Helpers

    @asynccontextmanager
    async def _mutation(self, operation: str) -> AsyncIterator[StoreDocument]:
        try:
            async with self.store.transaction() as document:
                yield document
        except NotFoundError:
            record_mutation(self.entity, operation, "not_found")
            raise
        except DataAccessError:
            record_mutation(self.entity, operation, "error")
            raise
        record_mutation(self.entity, operation, "success")

    def _validate(self, schema: Type[BaseModel], data: Any, operation: str) -> BaseModel:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True, exclude_unset=True)
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            record_mutation(self.entity, operation, "invalid")
            errors = e.errors(include_url=False, include_context=False)
            logger.warning(
                "validation_failed",
                entity=self.entity,
                operation=operation,
                fields=[".".join(str(part) for part in err["loc"]) for err in errors],
            )
            raise ValidationError(self.entity, errors) from e

    def _index_of(self, records: List[Record], record_id: str) -> int:
        for index, record in enumerate(records):
            if same_id(record.get("id"), record_id):
                return index
        logger.warning("record_not_found", entity=self.entity, record_id=record_id)
        raise NotFoundError(self.entity, record_id)

    @staticmethod
    def _new_id(records: List[Record]) -> str:
        taken = {as_key(record.get("id")) for record in records}
        while True:
            record_id = uuid.uuid4().hex
            if record_id not in taken:
                return record_id

    def _counts(self, document: StoreDocument) -> dict[Topic, int]:
        counts = {Topic.COUNT: sum(len(document.collection(name)) for name in COLLECTIONS)}
        if self.count_topic is not None:
            counts[self.count_topic] = len(document.collection(self.collection))
        return counts

    def _publish_counts(self, counts: dict[Topic, int]) -> None:
        for topic, value in counts.items():
            self.bus.publish(topic, value)
