"""Base repository for database operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption
from sqlmodel import SQLModel

from postdesk.errors import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
)

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common read and write operations.

    Subclasses set ``model`` and may override ``load_options`` to shape how
    rows are loaded (for example to defer large columns) and
    ``duplicate_error`` to translate unique-constraint violations into a
    domain error.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
        label: Human-readable entity name used in not-found messages.
    """

    model: type[ModelT]
    id_field: str = "id"
    label: str = "Record"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    def load_options(self) -> tuple[ORMOption, ...]:
        """Loader options applied to every entity query."""
        return ()

    def duplicate_error(self, record: ModelT, message: str) -> DuplicateEntryError:
        """Build the error raised when ``record`` violates a unique constraint."""
        return DuplicateEntryError(detail=message)

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record UUID

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        return await self.get_by_field(self.id_field, record_id)

    async def get_by_field(
        self,
        field_name: str,
        value: FilterValue,
    ) -> ModelT | None:
        """
        Get a record by a specific field value.

        Args:
            field_name: Name of the field to search
            value: Value to search for

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(self.model).options(*self.load_options()).where(field == value)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: UUID) -> ModelT:
        """
        Get a record by ID or raise an exception if not found.

        Raises:
            RecordNotFoundError: If record is not found
        """
        record = await self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(detail=f"{self.label} not found")
        return record

    async def get_many(self, ids: set[UUID]) -> dict[UUID, ModelT]:
        """
        Load several records in one query, keyed by primary key.

        Unknown ids are simply absent from the result.
        """
        if not ids:
            return {}
        id_column = getattr(self.model, self.id_field)
        statement = select(self.model).options(*self.load_options()).where(id_column.in_(list(ids)))
        result = await self.session.execute(statement)
        return {getattr(record, self.id_field): record for record in result.scalars().all()}

    async def delete(self, record: ModelT) -> None:
        """Delete a loaded record and flush."""
        await self.session.delete(record)
        await self.session.flush()

    async def slugs_with_prefix(self, base: str) -> set[str]:
        """
        Return existing slugs equal to ``base`` or of the form ``base-<suffix>``.

        Only valid for models with a ``slug`` column.

        Args:
            base: Candidate slug

        Returns:
            set[str]: Slugs already taken in the ``base`` family
        """
        slug = getattr(self.model, "slug")
        statement = select(slug).where(
            or_(slug == base, slug.startswith(f"{base}-", autoescape=True)),
        )
        result = await self.session.execute(statement)
        return set(result.scalars().all())

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database with error handling.

        Args:
            record: Record to add

        Returns:
            ModelT: Refreshed record

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other integrity errors
            DatabaseConnectionError: For any other database failure
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise self.duplicate_error(record, error_msg) from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseConnectionError(detail=f"Failed to save record: {e}") from e
        return record

    async def _save(self, record: ModelT, changes: dict[str, Any]) -> ModelT:
        """Apply ``changes`` to a loaded record and persist them."""
        for key, value in changes.items():
            setattr(record, key, value)
        return await self._add_and_refresh(record)

    async def _check_exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Check if a record exists with a specific field value.

        Args:
            field_name: Name of the field to check
            value: Value to check for
            exclude_id: Optional ID to exclude from check (for updates)

        Returns:
            bool: True if record exists, False otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(1).select_from(self.model).where(field == value)

        if exclude_id is not None:
            id_column = getattr(self.model, self.id_field)
            statement = statement.where(id_column != exclude_id)

        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None
