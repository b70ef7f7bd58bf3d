"""
Base model class for all SQLAlchemy models in the petclinic-core package.

The clinic schema uses integer surrogate keys generated by the database,
so every model inherits an autoincrementing ``id`` primary key.

Example:
    >>> from petclinic_core.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class MyModel(BaseModel):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(String(80))

    >>> instance = MyModel(name="Test")
    >>> instance.is_new()  # True until flushed
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative class for all SQLAlchemy models."""


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (int): Primary key, generated by the database on insert

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        """Return string representation in format <ModelName(id=1)>."""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def is_new(self) -> bool:
        """Return True if the instance has not been assigned an id yet."""
        return self.id is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary representation.

        Dates are converted to ISO format strings; other values are returned
        unchanged.

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, (date, datetime)):
                result[column.key] = value.isoformat()
            else:
                result[column.key] = value
        return result

    @classmethod
    def get_table_name(cls) -> str:
        """Get the database table name for this model."""
        return cls.__tablename__

    def update_fields(self, **kwargs: Optional[Any]) -> None:
        """
        Update multiple fields on the model instance in a single operation.

        Raises:
            AttributeError: If any field name doesn't exist on the model.

        Note:
            This method only modifies the instance. You must flush or commit
            the session to persist changes to the database.
        """
        for field, value in kwargs.items():
            if hasattr(self, field):
                setattr(self, field, value)
            else:
                raise AttributeError(
                    f"'{self.__class__.__name__}' has no attribute '{field}'"
                )
