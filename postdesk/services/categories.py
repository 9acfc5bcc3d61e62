"""Category store operations."""

from postdesk.models import CategoryDB
from postdesk.monitoring import get_logger
from postdesk.repositories import CategoryRepository
from postdesk.schemas import CategoryCreate, CategoryResponse
from postdesk.services.slug import derive_slug, next_free
from postdesk.utils import isoformat

logger = get_logger(__name__)

FALLBACK_CATEGORY_SLUG = "category"

DEFAULT_CATEGORIES = (
    ("Technology", "Software, gadgets and the web"),
    ("Lifestyle", "Everyday living"),
    ("Travel", "Places and journeys"),
    ("Food", "Recipes and restaurants"),
    ("Health", "Fitness and wellbeing"),
    ("Business", "Work, money and markets"),
    ("Education", "Learning and teaching"),
    ("Entertainment", "Film, music and games"),
)


def to_response(category: CategoryDB) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        created_at=isoformat(category.created_at) or "",
    )


class CategoryService:
    def __init__(self, categories: CategoryRepository) -> None:
        self.categories = categories

    async def list_all(self) -> list[CategoryResponse]:
        return [to_response(category) for category in await self.categories.list_all()]

    async def create(self, payload: CategoryCreate) -> CategoryResponse:
        """
        Create a category; its slug is derived from the name.

        Names without ASCII letters or digits get the first free
        ``category-N`` slug.

        Raises:
            DuplicateNameError: If the name or slug is taken
        """
        slug = derive_slug(payload.name, fallback="")
        if not slug:
            taken = await self.categories.slugs_with_prefix(FALLBACK_CATEGORY_SLUG)
            slug = next_free(FALLBACK_CATEGORY_SLUG, taken)
        category = CategoryDB(name=payload.name, slug=slug, description=payload.description)
        category = await self.categories.create(category)
        logger.info(f"Category '{category.name}' created")
        return to_response(category)

    async def seed_defaults(self) -> list[CategoryResponse]:
        """Replace every category with the default set."""
        categories = [
            CategoryDB(name=name, slug=derive_slug(name), description=description)
            for name, description in DEFAULT_CATEGORIES
        ]
        await self.categories.replace_all(categories)
        logger.info(f"Seeded {len(categories)} categories")
        return [to_response(category) for category in categories]
