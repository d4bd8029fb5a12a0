from abc import ABC, abstractmethod

from .entity_meta import EntityMeta


class RecordStore(ABC):
    """Persistence behind associations.

    Associations only ever ask three things of a store: whether an entity
    has been saved, what an association currently points at, and to record
    a reference from one entity to another.
    """

    def bind_entities(self):
        """Make this the store of every registered entity type."""
        for cls in EntityMeta.registry.values():
            cls._context = self

    def is_new(self, entity) -> bool:
        return entity.id is None

    @abstractmethod
    async def fetch_target(self, owner, descriptor):
        """Return the target(s) of ``descriptor`` for ``owner``.

        Singular kinds return an entity or None, collections a list.
        Raises RecordNotFound when a referenced record no longer exists.
        """
        raise NotImplementedError()

    @abstractmethod
    async def add_reference(self, from_entity, property_name, to_entity):
        """Point ``property_name`` of ``from_entity`` at ``to_entity``."""
        raise NotImplementedError()
