import logging
import os
from contextlib import asynccontextmanager

import aiosqlite

from .entity_meta import EntityMeta
from .exceptions import RecordNotFound
from .query import Column
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class db_context(RecordStore):
    """SQLite record store.

    Creating a context binds it to every entity type registered so far, so
    ``Book.query()``, ``book.save()`` and lazy associations all go through it.
    """

    def __init__(self, db_path, sync_schema=False):
        self._db_path = db_path
        self._sync_schema = sync_schema

        self.bind_entities()

        dir = os.path.dirname(self._db_path)
        if dir and not os.path.exists(dir):
            os.makedirs(dir)

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.db_path, sync_schema=settings.sync_schema)

    async def initialize(self):
        if self._sync_schema:
            await self.sync_schema()

    @asynccontextmanager
    async def get_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
        except Exception:
            await conn.rollback()
            raise
        finally:
            await conn.close()

    async def sync_schema(self):
        for cls in EntityMeta.registry.values():
            logger.info("Syncing table %s for %s", cls._table_name, cls.__name__)
            await cls.sync_schema()
        await self.seed_data()

    async def seed_data(self):
        """Hook for subclasses to insert initial rows after the schema sync."""
        pass

    async def fetch_target(self, owner, descriptor):
        target_cls = descriptor.target_type_for(owner)
        if target_cls is None:
            return [] if descriptor.collection else None

        if descriptor.collection:
            fk_column = target_cls._fields[descriptor.foreign_key].column_name
            return await target_cls.query().filter(Column(fk_column) == owner.id).order_by("id").all()

        key = getattr(owner, descriptor.foreign_key)
        if key is None:
            return None
        record = await target_cls.get_by_id(key)
        if record is None:
            raise RecordNotFound(
                f"{target_cls.__name__} {key} referenced by {type(owner).__name__}.{descriptor.name} not found",
                details={"type": target_cls.__name__, "id": key},
            )
        return record

    async def add_reference(self, from_entity, property_name, to_entity):
        setattr(from_entity, property_name, to_entity.id)
        if not self.is_new(from_entity):
            await from_entity.update()
