# lazy_orm/__init__.py

from .entity import Entity
from .field import Field, ForeignKey
from .relationship import (
    BelongsTo,
    HasMany,
    PolymorphicBelongsTo,
    RelationshipDescriptor,
    RelationshipKind,
)
from .association import Association, CollectionAssociation, SingularAssociation
from .record_store import RecordStore
from .db_context import db_context
from .query import Query, Column, Condition
from .config import Settings, configure_logging
from .exceptions import (
    AssociationTypeMismatch,
    OrmError,
    RecordNotFound,
    UnknownAssociationError,
    UnknownEntityError,
)

__version__ = "0.1.0"

__all__ = [
    'Entity',
    'Field',
    'ForeignKey',
    'BelongsTo',
    'HasMany',
    'PolymorphicBelongsTo',
    'RelationshipDescriptor',
    'RelationshipKind',
    'Association',
    'CollectionAssociation',
    'SingularAssociation',
    'RecordStore',
    'db_context',
    'Query',
    'Column',
    'Condition',
    'Settings',
    'configure_logging',
    'AssociationTypeMismatch',
    'OrmError',
    'RecordNotFound',
    'UnknownAssociationError',
    'UnknownEntityError',
]
