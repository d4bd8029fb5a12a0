import datetime
from decimal import Decimal

# Column names that must be bracket-escaped in SQLite statements
KEY_WORDS = ["order", "group"]

SQLITE_TYPES = {
    int: "INTEGER",
    bool: "INTEGER",
    float: "REAL",
    Decimal: "REAL",
    str: "TEXT",
    datetime.datetime: "TEXT",
}

# (python type, how SQLite stores it)
_STORAGE = [
    (bool, int),
    (datetime.datetime, datetime.datetime.isoformat),
    (Decimal, float),
]

# py_type -> (stored types accepted, how to rebuild the value)
_RESTORE = {
    bool: (int, bool),
    datetime.datetime: (str, datetime.datetime.fromisoformat),
    Decimal: ((int, float), lambda stored: Decimal(str(stored))),
}


class Field:
    def __init__(self, py_type, primary_key=False, nullable=True, default=None):
        self.py_type = py_type
        self.primary_key = primary_key
        self.nullable = nullable
        self.default = default
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, obj, owner):
        """Column for class access, value for instance access."""
        if obj is None:
            from .query import Column
            return Column(self.column_name)
        return obj.__dict__.get(self.name, self.default)

    def __set__(self, obj, value):
        obj.__dict__[self.name] = value

    @property
    def column_name(self):
        if self.name.lower() in KEY_WORDS:
            return f"[{self.name}]"
        return self.name

    def sql_type(self):
        return SQLITE_TYPES.get(self.py_type, "TEXT")

    def python_to_sql(self, value):
        for py_type, store in _STORAGE:
            if isinstance(value, py_type):
                return store(value)
        return value

    def sql_to_python(self, value):
        """Rebuild the declared Python type from a stored column value."""
        if value is None or self.py_type not in _RESTORE:
            return value
        stored_types, restore = _RESTORE[self.py_type]
        if isinstance(value, stored_types):
            return restore(value)
        return value


class ForeignKey(Field):
    """Integer column holding the id of another entity.

    The referenced table is only needed for the schema, so ``target`` is
    resolved when the table is created.
    """

    def __init__(self, target, target_column="id", nullable=True):
        super().__init__(int, nullable=nullable)
        self.target = target
        self.target_column = target_column

    def references(self, registry):
        """Return ``(table_name, column)`` for the FOREIGN KEY clause."""
        from .relationship import resolve_entity
        cls = resolve_entity(self.target, registry)
        return cls._table_name, self.target_column
