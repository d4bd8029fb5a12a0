import logging

from .association import build_association
from .entity_meta import EntityMeta
from .exceptions import UnknownAssociationError
from .field import Field, ForeignKey
from .query import Query

logger = logging.getLogger(__name__)


class Entity(metaclass=EntityMeta):
    id = Field(int, primary_key=True, nullable=False)
    _context = None

    def __init__(self, **kwargs):
        self._associations = {}
        for f in self._fields.values():
            setattr(self, f.name, kwargs.pop(f.name, f.default))
        for name, value in kwargs.items():
            if name not in self._relationships:
                raise TypeError(f"{type(self).__name__} has no field or association '{name}'")
            setattr(self, name, value)

    def __repr__(self):
        return f"<{type(self).__name__}(id={self.id})>"

    def association(self, name):
        """Return the association proxy for ``name``, creating it on first use."""
        association = self._associations.get(name)
        if association is None:
            descriptor = self._relationships.get(name)
            if descriptor is None:
                available = ', '.join(sorted(self._relationships)) or "none"
                raise UnknownAssociationError(
                    f"{type(self).__name__} has no association '{name}'. Available: {available}",
                    details={"entity": type(self).__name__, "name": name},
                )
            association = build_association(self, descriptor)
            self._associations[name] = association
        return association

    @classmethod
    def is_versionable(cls):
        return cls._versionable

    @classmethod
    def query(cls):
        return Query(cls)

    @classmethod
    async def get_by_id(cls, id):
        return await cls.query().filter_by(id=id).first()

    @classmethod
    async def get_all(cls):
        return await cls.query().all()

    @classmethod
    def _from_row(cls, row, description):
        """Convert database row to entity instance."""
        obj = cls()
        for idx, col in enumerate(description):
            field = cls._fields.get(col[0])
            if field is not None:
                setattr(obj, field.name, field.sql_to_python(row[idx]))
        return obj

    @classmethod
    async def sync_schema(cls):
        """Create the table for this entity if it does not exist."""
        columns = []
        constraints = []
        for f in cls._fields.values():
            col = f"{f.column_name} {f.sql_type()}"
            if f.primary_key:
                col += " PRIMARY KEY AUTOINCREMENT"
            if not f.nullable:
                col += " NOT NULL"
            columns.append(col)

            if isinstance(f, ForeignKey):
                table, colname = f.references(EntityMeta.registry)
                constraints.append(f"FOREIGN KEY ({f.column_name}) REFERENCES {table}({colname})")

        sql = f"CREATE TABLE IF NOT EXISTS {cls._table_name} ({', '.join(columns + constraints)})"

        async with cls._context.get_connection() as conn:
            await conn.execute(sql)
            await conn.commit()

    def _column_values(self):
        fields = [f for f in self._fields.values() if not f.primary_key]
        names = [f.column_name for f in fields]
        values = [f.python_to_sql(getattr(self, f.name)) for f in fields]
        return names, values

    async def insert(self):
        names, values = self._column_values()
        if names:
            placeholders = ", ".join("?" for _ in names)
            sql = f"INSERT INTO {self._table_name} ({', '.join(names)}) VALUES ({placeholders})"
        else:
            sql = f"INSERT INTO {self._table_name} DEFAULT VALUES"

        async with self._context.get_connection() as conn:
            cur = await conn.execute(sql, values)
            self.id = cur.lastrowid
            await conn.commit()
        logger.debug("Inserted %r", self)

    async def update(self):
        if self.id is None:
            raise ValueError("Cannot update entity without an id. Use insert() for new entities.")

        names, values = self._column_values()
        assignments = ", ".join(f"{name} = ?" for name in names)
        sql = f"UPDATE {self._table_name} SET {assignments} WHERE id = ?"

        async with self._context.get_connection() as conn:
            await conn.execute(sql, values + [self.id])
            await conn.commit()

    async def save(self):
        """Insert or update based on whether entity has an id."""
        if self.id is None:
            await self.insert()
        else:
            await self.update()

    async def delete(self):
        if self.id is None:
            raise ValueError("Cannot delete entity without an id.")

        async with self._context.get_connection() as conn:
            await conn.execute(f"DELETE FROM {self._table_name} WHERE id = ?", (self.id,))
            await conn.commit()

        self.id = None
