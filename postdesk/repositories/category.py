"""Category repository for database operations."""

from sqlalchemy import delete, select

from postdesk.errors import DuplicateNameError
from postdesk.models import CategoryDB
from postdesk.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryDB]):
    """Repository for the category store."""

    model = CategoryDB
    label = "Category"

    def duplicate_error(self, record: CategoryDB, message: str) -> DuplicateNameError:
        return DuplicateNameError(record.name)

    async def list_all(self) -> list[CategoryDB]:
        """Return every category sorted by name."""
        # pyrefly: ignore [bad-argument-type]
        result = await self.session.execute(select(CategoryDB).order_by(CategoryDB.name))
        return list(result.scalars().all())

    async def create(self, category: CategoryDB) -> CategoryDB:
        """
        Persist a new category.

        Raises:
            DuplicateNameError: If the name or its slug is already taken
        """
        name_taken = await self._check_exists_by_field("name", category.name)
        if name_taken or await self._check_exists_by_field("slug", category.slug):
            raise DuplicateNameError(category.name)
        return await self._add_and_refresh(category)

    async def replace_all(self, categories: list[CategoryDB]) -> list[CategoryDB]:
        """Delete every category and insert ``categories`` in its place."""
        await self.session.execute(delete(CategoryDB))
        self.session.add_all(categories)
        await self.session.flush()
        return categories
