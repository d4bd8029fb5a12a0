"""Exceptions raised by lazy_orm.

Store and transport errors (aiosqlite, network clients) are never wrapped
in these; they reach the caller unchanged.
"""


class OrmError(Exception):
    """Base exception for all lazy_orm errors."""

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details


class RecordNotFound(OrmError):
    """Raised by a record store when an association target does not exist.

    Associations recover from this locally: the proxy ends up loaded with
    an empty target.
    """

    pass


class UnknownEntityError(OrmError):
    """Raised when a relationship names an entity type that is not registered."""

    pass


class UnknownAssociationError(OrmError):
    """Raised when an entity is asked for an association it does not declare."""

    pass


class AssociationTypeMismatch(OrmError):
    """Raised when a record of the wrong type is assigned to an association.

    Attributes:
        expected: Name of the declared target type
        actual: Name of the type of the rejected record
    """

    expected: str
    actual: str

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"{expected} expected, got {actual}",
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual
