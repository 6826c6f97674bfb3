"""
Persistence of the status collection.

The whole collection is stored as one versioned JSON document under a
single key and every write replaces it.
"""

import asyncio
import json
import uuid
from typing import Callable, Dict, List, Optional

from shared.errors import StoreError
from shared.logging import get_logger
from ..lifecycle.defaults import STORAGE_KEY, default_statuses
from ..lifecycle.models import AppointmentStatus, LifecycleResult

SCHEMA_VERSION = 1

Collection = List[AppointmentStatus]


def encode_collection(collection: Collection) -> str:
    """Serialize a collection into the versioned envelope."""
    return json.dumps(
        {
            "schema_version": SCHEMA_VERSION,
            "items": [status.model_dump() for status in collection],
        },
        ensure_ascii=False,
    )


def decode_collection(payload: str) -> Collection:
    """Parse a stored document.

    A bare list is the unversioned layout and is read as version 1.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise StoreError("Stored collection is not valid JSON", {"error": str(e)})

    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        version = data.get("schema_version", SCHEMA_VERSION)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise StoreError(
                "Unsupported collection schema version",
                {"schema_version": version, "supported": SCHEMA_VERSION}
            )
        items = data.get("items", [])
    else:
        raise StoreError("Stored collection has an unknown layout")

    return [AppointmentStatus.model_validate(item) for item in items]


class EntityStore:
    """Base store; subclasses provide raw ``_read``/``_write``.

    ``mutate`` serializes writers with a lock so that each change is a
    complete read, transform, persist cycle. Every record handed out
    carries an id; seeded and legacy records get one on first load.
    """

    def __init__(
        self,
        key: str = STORAGE_KEY,
        seed: Callable[[], Collection] = default_statuses,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.key = key
        self.seed = seed
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self.logger = get_logger("settings.store")
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """Whether a mutation is in flight."""
        return self._lock.locked()

    async def start(self):
        """Start the store."""

    async def stop(self):
        """Stop the store."""

    async def health_check(self) -> bool:
        return True

    async def _read(self) -> Optional[str]:
        raise NotImplementedError

    async def _write(self, payload: str):
        raise NotImplementedError

    async def load(self) -> Optional[Collection]:
        """Stored collection, or None when nothing has been stored yet."""
        payload = await self._read()
        if payload is None:
            return None
        return decode_collection(payload)

    async def save(self, collection: Collection):
        """Replace the stored collection."""
        await self._write(encode_collection(collection))
        self.logger.debug("Collection saved", key=self.key, count=len(collection))

    async def load_or_seed(self) -> Collection:
        """Stored collection, seeding the defaults on first use."""
        collection = await self.load()
        if collection is None:
            collection = self._assign_ids(self.seed())
            await self.save(collection)
            self.logger.info("Collection seeded with defaults", key=self.key, count=len(collection))
        elif any(not status.id for status in collection):
            collection = self._assign_ids(collection)
            await self.save(collection)
            self.logger.info("Backfilled status ids", key=self.key, count=len(collection))
        return collection

    async def mutate(self, operation: Callable[[Collection], LifecycleResult]) -> LifecycleResult:
        """Run ``operation`` on the current collection and persist its result.

        Refused operations are not written.
        """
        async with self._lock:
            collection = await self.load_or_seed()
            result = operation(collection)
            if result.ok:
                await self.save(result.collection)
            return result

    def _assign_ids(self, collection: Collection) -> Collection:
        return [
            status if status.id else status.model_copy(update={"id": self.id_factory()})
            for status in collection
        ]


class InMemoryEntityStore(EntityStore):
    """Process-local store keeping serialized documents.

    Stores built over the same ``documents`` mapping share one backend.
    """

    def __init__(
        self,
        key: str = STORAGE_KEY,
        seed: Callable[[], Collection] = default_statuses,
        documents: Optional[Dict[str, str]] = None,
    ):
        super().__init__(key, seed)
        self._documents: Dict[str, str] = documents if documents is not None else {}

    async def _read(self) -> Optional[str]:
        return self._documents.get(self.key)

    async def _write(self, payload: str):
        self._documents[self.key] = payload
