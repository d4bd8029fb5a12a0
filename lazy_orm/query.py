class Condition:
    """SQL condition with its parameters."""
    def __init__(self, sql, params):
        self.sql = sql
        self.params = params


class Column:
    """Column reference returned by ``Entity.field`` for query building."""
    def __init__(self, name):
        self.name = name

    def _compare(self, op, other):
        if other is None and op == "=":
            return Condition(f"{self.name} IS NULL", [])
        return Condition(f"{self.name} {op} ?", [other])

    def __eq__(self, other):
        return self._compare("=", other)

    __hash__ = object.__hash__

    def __str__(self):
        return self.name


class Query:
    """Async SELECT builder bound to one entity type.

    Example:
        books = await Book.query().filter(Book.author_id == 3).order_by("title").all()
    """
    def __init__(self, entity_cls):
        self.entity_cls = entity_cls
        self._filters = []
        self._params = []
        self._order_by = None
        self._limit_val = None

    def filter(self, *conditions):
        for condition in conditions:
            if not isinstance(condition, Condition):
                raise TypeError(f"Expected Condition, got {type(condition)}")
            self._filters.append(condition.sql)
            self._params.extend(condition.params)
        return self

    def filter_by(self, **kwargs):
        return self.filter(*(Column(k) == v for k, v in kwargs.items()))

    def order_by(self, *fields):
        self._order_by = ", ".join(str(f) for f in fields)
        return self

    def limit(self, n):
        self._limit_val = n
        return self

    def _where(self):
        if not self._filters:
            return ""
        return f" WHERE {' AND '.join(self._filters)}"

    async def all(self):
        sql = f"SELECT * FROM {self.entity_cls._table_name}{self._where()}"
        if self._order_by:
            sql += f" ORDER BY {self._order_by}"
        if self._limit_val is not None:
            sql += f" LIMIT {int(self._limit_val)}"

        async with self.entity_cls._context.get_connection() as conn:
            cursor = await conn.execute(sql, self._params)
            rows = await cursor.fetchall()
            return [self.entity_cls._from_row(row, cursor.description) for row in rows]

    async def first(self):
        results = await self.limit(1).all()
        return results[0] if results else None

    async def count(self):
        sql = f"SELECT COUNT(*) FROM {self.entity_cls._table_name}{self._where()}"
        async with self.entity_cls._context.get_connection() as conn:
            cursor = await conn.execute(sql, self._params)
            result = await cursor.fetchone()
            return result[0]
