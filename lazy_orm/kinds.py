"""Behaviour that differs between relationship kinds.

Each kind decides what an association's staleness snapshot looks like,
whether a new owner already carries enough to load from, which inverse a
loaded record has, and which records may be assigned. ``KINDS`` maps every
``RelationshipKind`` to its implementation; there are no others.
"""

import logging
from abc import ABC, abstractmethod

from .exceptions import AssociationTypeMismatch
from .relationship import RelationshipKind

logger = logging.getLogger(__name__)


def _single_valued_inverse(descriptor, record_type):
    name = descriptor.inverse_name
    if not name:
        return None
    inverse = getattr(record_type, "_relationships", {}).get(name)
    if inverse is None:
        logger.debug(
            "%s declares no association '%s'; inverse of '%s' not set",
            getattr(record_type, "__name__", record_type), name, descriptor.name,
        )
        return None
    # A single owner cannot stand in for a whole collection
    if inverse.collection:
        return None
    return inverse


class AssociationKind(ABC):
    collection = False

    def empty(self):
        return None

    @abstractmethod
    def compute_stale_state(self, association):
        """Return the key snapshot the current target was loaded for."""

    def has_foreign_key_present(self, association):
        return False

    def inverse_descriptor_for(self, association, record):
        """Descriptor of the association on ``record`` pointing back at the owner."""
        target_type = association.descriptor.resolve_target_type()
        return _single_valued_inverse(association.descriptor, target_type)

    def check_type(self, association, record):
        descriptor = association.descriptor
        expected = descriptor.resolve_target_type()
        if isinstance(record, expected):
            return
        if type(record).__name__ == descriptor.target_type_name:
            return
        raise AssociationTypeMismatch(
            descriptor.target_type_name, type(record).__name__
        )


class ReferenceToOne(AssociationKind):
    """The owner holds the target's id in ``descriptor.foreign_key``."""

    def compute_stale_state(self, association):
        return getattr(association.owner, association.descriptor.foreign_key, None)

    def has_foreign_key_present(self, association):
        return self.compute_stale_state(association) is not None

    def write_reference(self, association, record):
        key = record.id if record is not None else None
        setattr(association.owner, association.descriptor.foreign_key, key)


class ReferenceToMany(AssociationKind):
    collection = True

    def empty(self):
        return []

    def compute_stale_state(self, association):
        return None


class PolymorphicReference(AssociationKind):
    """The owner holds both the target's id and its type name."""

    def compute_stale_state(self, association):
        owner = association.owner
        descriptor = association.descriptor
        return (
            getattr(owner, descriptor.type_field, None),
            getattr(owner, descriptor.foreign_key, None),
        )

    def has_foreign_key_present(self, association):
        type_name, key = self.compute_stale_state(association)
        return type_name is not None and key is not None

    def write_reference(self, association, record):
        owner = association.owner
        descriptor = association.descriptor
        if record is None:
            setattr(owner, descriptor.foreign_key, None)
            setattr(owner, descriptor.type_field, None)
        else:
            setattr(owner, descriptor.foreign_key, record.id)
            setattr(owner, descriptor.type_field, type(record).__name__)

    def inverse_descriptor_for(self, association, record):
        # No static target: the inverse lives on the record's concrete type
        return _single_valued_inverse(association.descriptor, type(record))

    def check_type(self, association, record):
        from .entity import Entity
        if not isinstance(record, Entity):
            raise AssociationTypeMismatch("Entity", type(record).__name__)


KINDS = {
    RelationshipKind.REFERENCE_TO_ONE: ReferenceToOne(),
    RelationshipKind.REFERENCE_TO_MANY: ReferenceToMany(),
    RelationshipKind.POLYMORPHIC_REFERENCE: PolymorphicReference(),
}


def kind_for(descriptor) -> AssociationKind:
    return KINDS[descriptor.kind]
