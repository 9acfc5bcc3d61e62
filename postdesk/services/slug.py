"""
Slug derivation.

``derive_slug`` is pure; ``SlugGenerator`` adds the persistence probe that
picks the first free ``-N`` suffix. The probe can race with a concurrent
writer, so the unique index on ``posts.slug`` stays the final authority and
callers retry on ``DuplicateSlugError``.
"""

from re import ASCII, compile

from postdesk.repositories import PostRepository

FALLBACK_SLUG = "post"

_DISALLOWED = compile(r"[^\w ]+", ASCII)
_SPACES = compile(r" +")


def derive_slug(title: str, fallback: str = FALLBACK_SLUG) -> str:
    """
    Derive a URL-safe slug candidate from a title.

    Lowercases, removes everything outside ASCII word characters and spaces,
    and joins the remaining words with single hyphens. Titles with nothing
    left (e.g. "你好世界") get ``fallback``, which the uniqueness probe then
    suffixes like any other base.

    Examples
    --------
    >>> derive_slug("Hello World!!")
    'hello-world'
    >>> derive_slug("  Déjà   vu 2  ")
    'dj-vu-2'
    >>> derive_slug("Ελληνικά")
    'post'
    """
    slug = _SPACES.sub("-", _DISALLOWED.sub("", title.lower()).strip())
    return slug or fallback


def next_free(base: str, taken: set[str]) -> str:
    """
    Return ``base`` or the first ``base-N`` (N >= 1) not in ``taken``.

    Examples
    --------
    >>> next_free("hello-world", {"hello-world", "hello-world-1"})
    'hello-world-2'
    """
    if base not in taken:
        return base
    suffix = 1
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


class SlugGenerator:
    """Produces slugs that are unique at probe time."""

    def __init__(self, posts: PostRepository) -> None:
        self.posts = posts

    async def ensure_unique_slug(self, title: str, *, current: str | None = None) -> str:
        """
        Derive a slug from ``title`` that no other post uses.

        Args:
            title: Post title
            current: Slug the post being updated already owns; it counts as free

        Returns:
            str: The unique slug
        """
        base = derive_slug(title)
        taken = await self.posts.slugs_with_prefix(base)
        if current is not None:
            taken.discard(current)
        return next_free(base, taken)
