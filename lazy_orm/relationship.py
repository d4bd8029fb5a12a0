# lazy_orm/relationship.py
import enum
from dataclasses import dataclass
from typing import Any, Optional

import inflection

from .exceptions import UnknownEntityError


class RelationshipKind(enum.Enum):
    REFERENCE_TO_ONE = "reference-to-one"
    REFERENCE_TO_MANY = "reference-to-many"
    POLYMORPHIC_REFERENCE = "polymorphic-reference"


def resolve_entity(target, registry=None):
    """Turn a class, class name or zero-argument callable into an entity class."""
    if registry is None:
        from .entity_meta import EntityMeta
        registry = EntityMeta.registry

    if isinstance(target, type):
        return target
    if isinstance(target, str):
        if target not in registry:
            available = ', '.join(sorted(registry.keys()))
            raise UnknownEntityError(
                f"Unknown entity '{target}'. Available: {available}",
                details={"name": target},
            )
        return registry[target]
    if callable(target):
        return target()
    raise TypeError(f"Invalid relationship target: {target!r}")


@dataclass(frozen=True)
class RelationshipDescriptor:
    """Static, read-only configuration of one association.

    ``target`` may be a class, a class name or a callable returning a class,
    so that relationships can point at entities declared later. Polymorphic
    references have no static target; the owner's ``type_field`` names it.
    """

    name: str
    kind: RelationshipKind
    foreign_key: str
    target: Any = None
    inverse_name: Optional[str] = None
    owner_name: Optional[str] = None
    type_field: Optional[str] = None

    @property
    def collection(self) -> bool:
        return self.kind is RelationshipKind.REFERENCE_TO_MANY

    @property
    def target_type_name(self) -> Optional[str]:
        if self.target is None:
            return None
        if isinstance(self.target, str):
            return self.target
        return self.resolve_target_type().__name__

    def resolve_target_type(self):
        if self.target is None:
            return None
        return resolve_entity(self.target)

    def target_type_for(self, owner):
        """Entity class the association of ``owner`` points at, or None."""
        if self.kind is RelationshipKind.POLYMORPHIC_REFERENCE:
            type_name = getattr(owner, self.type_field, None)
            if not type_name:
                return None
            return resolve_entity(type_name)
        return self.resolve_target_type()


class Relationship:
    """Class-body declaration of an association.

    Instance access returns the owner's association proxy, e.g.
    ``await book.author.load_target()``.
    """

    kind = None

    def __init__(self, target=None, foreign_key=None, inverse_of=None):
        self.target = target
        self.foreign_key = foreign_key
        self.inverse_of = inverse_of
        self.name = None
        self.descriptor = None

    def __set_name__(self, owner, name):
        self.name = name
        self.descriptor = self.describe(owner.__name__, name)

    def default_foreign_key(self, owner_name, name):
        return f"{inflection.underscore(name)}_id"

    def describe(self, owner_name, name):
        return RelationshipDescriptor(
            name=name,
            kind=self.kind,
            foreign_key=self.foreign_key or self.default_foreign_key(owner_name, name),
            target=self.target,
            inverse_name=self.inverse_of,
            owner_name=owner_name,
        )

    def __get__(self, obj, owner):
        if obj is None:
            return self
        return obj.association(self.name)

    def __set__(self, obj, value):
        obj.association(self.name).replace(value)


class BelongsTo(Relationship):
    """Many-to-one: the owner holds the foreign key (``book.author_id``)."""

    kind = RelationshipKind.REFERENCE_TO_ONE


class HasMany(Relationship):
    """One-to-many: each target holds a foreign key back to the owner."""

    kind = RelationshipKind.REFERENCE_TO_MANY

    def default_foreign_key(self, owner_name, name):
        return f"{inflection.underscore(owner_name)}_id"

    def __set__(self, obj, value):
        raise AttributeError(
            f"'{self.name}' is a collection; use concat() to add records"
        )


class PolymorphicBelongsTo(Relationship):
    """Many-to-one whose target type is stored on the owner.

    ``comment.commentable`` reads ``commentable_type`` to know which entity
    ``commentable_id`` refers to.
    """

    kind = RelationshipKind.POLYMORPHIC_REFERENCE

    def __init__(self, foreign_key=None, type_field=None, inverse_of=None):
        super().__init__(None, foreign_key=foreign_key, inverse_of=inverse_of)
        self.type_field = type_field

    def describe(self, owner_name, name):
        return RelationshipDescriptor(
            name=name,
            kind=self.kind,
            foreign_key=self.foreign_key or self.default_foreign_key(owner_name, name),
            inverse_name=self.inverse_of,
            owner_name=owner_name,
            type_field=self.type_field or f"{name}_type",
        )
