"""Lazy association proxies.

    Association
      SingularAssociation     reference-to-one, polymorphic-reference
      CollectionAssociation   reference-to-many

An association does not fetch its target until ``load_target()`` is
awaited, keeps it afterwards, and fetches again once the owner's keys no
longer match the ones the target was loaded for.
"""

import logging

from .exceptions import OrmError, RecordNotFound
from .kinds import kind_for

logger = logging.getLogger(__name__)


class Association:
    def __init__(self, owner, descriptor, store=None):
        self.owner = owner
        self.descriptor = descriptor
        self.kind = kind_for(descriptor)
        self._store = store
        self.reset()

    @property
    def store(self):
        """The explicit store, else whatever store the owner type is bound to now."""
        if self._store is not None:
            return self._store
        return getattr(type(self.owner), "_context", None)

    def __repr__(self):
        state = "loaded" if self._loaded else "unloaded"
        return f"<{type(self).__name__} {self.descriptor.name} of {self.owner!r} ({state})>"

    def reset(self):
        """Forget the target: not loaded, empty, no stale state."""
        self._loaded = False
        self._target = self.kind.empty()
        self._stale_state = None

    async def reload(self):
        """Reset and load again. Returns self, or None when nothing was found."""
        self.reset()
        await self.load_target()
        return self if self._has_target() else None

    @property
    def loaded(self):
        return self._loaded

    def is_loaded(self):
        return self._loaded

    def mark_loaded(self):
        """Record that the target is loaded for the owner's current keys."""
        self._loaded = True
        self._stale_state = self.kind.compute_stale_state(self)

    def is_stale(self):
        """True when the owner's keys changed since the target was loaded.

        An association that has not been loaded is never stale.
        """
        return self._loaded and self._stale_state != self.kind.compute_stale_state(self)

    @property
    def target(self):
        return self._target

    @target.setter
    def target(self, target):
        self._target = target
        self.mark_loaded()

    async def load_target(self):
        """Fetch the target if it is missing or stale, then return it.

        A target that does not exist is not an error: the association ends
        up loaded and empty. Any other store error propagates.
        """
        stale = self._stale_state is not None and self.is_stale()
        if stale or self._should_fetch():
            if stale:
                logger.debug("%r is stale, fetching again", self)
            self._target = await self._find_target()
            self.mark_loaded()
        elif not self._loaded:
            self.mark_loaded()
        return self._target

    def set_inverse_instance(self, record):
        """Point the inverse association of ``record`` back at the owner."""
        if record is None:
            return
        inverse = self.kind.inverse_descriptor_for(self, record)
        if inverse is None:
            return
        record.association(inverse.name).target = self.owner

    def raise_on_type_mismatch(self, record):
        self.kind.check_type(self, record)

    async def set_foreign_key_for(self, record):
        """Store a reference from ``record`` to the owner, once the owner is saved."""
        if self._require_store().is_new(self.owner):
            return
        await self.store.add_reference(record, self.descriptor.foreign_key, self.owner)

    def _has_target(self):
        if self.kind.collection:
            return bool(self._target)
        return self._target is not None

    def _require_store(self):
        if self.store is None:
            raise OrmError(
                f"No record store bound to {type(self.owner).__name__}",
                details={"association": self.descriptor.name},
            )
        return self.store

    def _should_fetch(self):
        if self._loaded:
            return False
        if self._require_store().is_new(self.owner) and not self.kind.has_foreign_key_present(self):
            return False
        return self.descriptor.target_type_for(self.owner) is not None

    async def _find_target(self):
        if self.descriptor.target_type_for(self.owner) is None:
            return self.kind.empty()
        logger.debug("Fetching '%s' for %r", self.descriptor.name, self.owner)
        try:
            target = await self.store.fetch_target(self.owner, self.descriptor)
        except RecordNotFound as e:
            logger.debug("Target of %r not found: %s", self, e)
            self.reset()
            return self.kind.empty()

        if self.kind.collection:
            target = list(target or [])
            for record in target:
                self.set_inverse_instance(record)
        else:
            self.set_inverse_instance(target)
        return target


class SingularAssociation(Association):

    def replace(self, record):
        """Assign ``record`` (or None) as the target without fetching."""
        if record is not None:
            self.raise_on_type_mismatch(record)
        self.kind.write_reference(self, record)
        self.target = record
        self.set_inverse_instance(record)


class CollectionAssociation(Association):
    """Association whose target is a list.

    Iteration, ``len()`` and ``in`` work on the cached target; await
    ``load_target()`` first.
    """

    def __iter__(self):
        return iter(self._target)

    def __len__(self):
        return len(self._target)

    def __contains__(self, record):
        return record in self._target

    async def concat(self, *records):
        """Add records to the collection, referencing the owner from each."""
        for record in records:
            self.raise_on_type_mismatch(record)

        await self.load_target()
        for record in records:
            await self.set_foreign_key_for(record)
            if record not in self._target:
                self._target.append(record)
            self.set_inverse_instance(record)
        return self


def build_association(owner, descriptor, store=None):
    if descriptor.collection:
        return CollectionAssociation(owner, descriptor, store)
    return SingularAssociation(owner, descriptor, store)
