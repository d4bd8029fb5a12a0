"""Pytest fixtures for lazy_orm tests."""

import pytest

from lazy_orm import RecordStore, db_context
from lazy_orm.entity_meta import EntityMeta

import models  # noqa: F401  registers the test entity types


class FakeRecordStore(RecordStore):
    """In-memory store that records every call made to it.

    ``respond(name, result)`` sets what fetching association ``name``
    returns. ``result`` may be a value, a callable taking the owner, or an
    exception instance to raise.
    """

    def __init__(self):
        self.results = {}
        self.fetches = []
        self.references = []

    def respond(self, name, result):
        self.results[name] = result

    async def fetch_target(self, owner, descriptor):
        self.fetches.append((owner, descriptor.name))
        result = self.results.get(descriptor.name)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(owner)
        return result

    async def add_reference(self, from_entity, property_name, to_entity):
        self.references.append((from_entity, property_name, to_entity))
        setattr(from_entity, property_name, to_entity.id)


def _unbind():
    for cls in EntityMeta.registry.values():
        cls._context = None


@pytest.fixture
def store():
    """Fake record store bound to every test entity type."""
    fake = FakeRecordStore()
    fake.bind_entities()
    yield fake
    _unbind()


@pytest.fixture
async def db(tmp_path):
    """SQLite store on a temporary file with all tables created."""
    context = db_context(str(tmp_path / "data" / "test.sqlite"), sync_schema=True)
    await context.initialize()
    yield context
    _unbind()
