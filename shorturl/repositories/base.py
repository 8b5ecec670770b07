"""Generic repository for SQLModel tables.

Concrete repositories subclass BaseRepository and add lookups keyed by
their own columns. Store failures leave this layer as RepositoryError,
unique index violations as DuplicateEntityError.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """The store rejected or failed a statement."""
    pass


class DuplicateEntityError(RepositoryError):
    """An insert hit a unique index."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        table = getattr(model_type, "__name__", "row")
        super().__init__(f"{table}.{field_name} {value!r} is already taken")


def _is_unique_violation(error: IntegrityError) -> bool:
    # SQLite says "UNIQUE constraint failed", PostgreSQL "duplicate key value"
    message = str(error.orig if error.orig is not None else error).lower()
    return "unique" in message or "duplicate key" in message


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Statements shared by every table-backed repository.

    Nothing here commits. Callers own the transaction, except that a failed
    insert rolls the session back so it stays usable.
    """

    # Column named in DuplicateEntityError when an insert collides
    unique_field: Optional[str] = None

    def __init__(self, model_type: Type[ModelType]):
        self.model_type = model_type

    @property
    def _name(self) -> str:
        return self.model_type.__name__

    @staticmethod
    def _to_dict(data: Union[BaseModel, Dict[str, Any]], exclude_unset: bool = False) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=exclude_unset)
        return dict(data)

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Insert one row and flush it.

        Flushing here makes a unique index violation surface from this
        call rather than at commit time.

        Args:
            db: Database session
            data: Column values, as a schema instance or a plain dict

        Returns:
            The inserted row with defaults and the primary key populated

        Raises:
            DuplicateEntityError: If the row collides on a unique index
            RepositoryError: On any other store failure
        """
        values = self._to_dict(data)
        try:
            row = self.model_type(**values)
            db.add(row)
            await db.flush()
            await db.refresh(row)
            return row
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                field = self.unique_field or "unique key"
                raise DuplicateEntityError(self.model_type, field, values.get(field)) from e
            logger.error(f"Insert into {self._name} violated a constraint: {e}")
            raise RepositoryError(f"Could not insert {self._name}: {e}") from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Insert into {self._name} failed: {e}")
            raise RepositoryError(f"Could not insert {self._name}: {e}") from e

    async def count(self, db: AsyncSession, *conditions) -> int:
        """Count rows, optionally restricted by SQLAlchemy conditions."""
        query = select(func.count()).select_from(self.model_type)
        if conditions:
            query = query.where(*conditions)
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Counting {self._name} rows failed: {e}")
            raise RepositoryError(f"Could not count {self._name} rows: {e}") from e
        return result.scalar_one()

    async def bulk_update(
        self,
        db: AsyncSession,
        filters: Dict[str, Any],
        data: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> int:
        """
        Run a single UPDATE over every row matching ``filters``.

        Only fields explicitly set on a schema instance are written.

        Args:
            db: Database session
            filters: Column name to required value
            data: Column name to new value

        Returns:
            Number of rows the UPDATE matched

        Raises:
            ValueError: If filters or data are empty
            RepositoryError: On store failures
        """
        conditions = [getattr(self.model_type, column) == value for column, value in filters.items()]
        if not conditions:
            raise ValueError("bulk_update needs at least one filter")

        values = self._to_dict(data, exclude_unset=True)
        if not values:
            raise ValueError("bulk_update needs at least one value to set")

        stmt = update(self.model_type).where(*conditions).values(**values)
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Updating {self._name} rows failed: {e}")
            raise RepositoryError(f"Could not update {self._name} rows: {e}") from e
        return result.rowcount

    async def bulk_delete(self, db: AsyncSession, *conditions) -> int:
        """Delete every row matching the conditions and return how many went."""
        if not conditions:
            raise ValueError("bulk_delete needs at least one condition")

        stmt = delete(self.model_type).where(*conditions)
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Deleting {self._name} rows failed: {e}", exc_info=True)
            raise RepositoryError(f"Could not delete {self._name} rows: {e}") from e
        return result.rowcount
