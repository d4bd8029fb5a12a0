import inflection

from .field import Field
from .relationship import Relationship


class EntityMeta(type):
    """Builds the static field and relationship tables of each entity type.

    Class keywords:
        table_name: table to persist into (default: tableized class name)
        versionable: whether the type keeps a version history
    """

    registry = {}

    def __new__(meta, name, bases, attrs, table_name=None, versionable=None):
        fields = {}
        relationships = {}
        for base in reversed(bases):
            fields.update(getattr(base, "_fields", {}))
            relationships.update(getattr(base, "_relationships", {}))

        cls = super().__new__(meta, name, bases, attrs)

        for key, val in attrs.items():
            if isinstance(val, Field):
                fields[key] = val
            elif isinstance(val, Relationship):
                relationships[key] = val.descriptor

        cls._fields = fields
        cls._relationships = relationships

        if table_name is not None:
            cls._table_name = table_name
        elif "_table_name" not in attrs:
            cls._table_name = inflection.tableize(name)

        if versionable is not None:
            cls._versionable = versionable
        elif not hasattr(cls, "_versionable"):
            cls._versionable = False

        if name != "Entity":
            EntityMeta.registry[name] = cls

        return cls

    def __init__(cls, name, bases, attrs, **kwargs):
        super().__init__(name, bases, attrs)
