from postdesk.services.categories import CategoryService
from postdesk.services.comments import CommentManager
from postdesk.services.image_store import Attachment, ImageStore
from postdesk.services.post_service import PostService, parse_post_id
from postdesk.services.slug import SlugGenerator, derive_slug

__all__ = [
    "Attachment",
    "CategoryService",
    "CommentManager",
    "ImageStore",
    "PostService",
    "SlugGenerator",
    "derive_slug",
    "parse_post_id",
]
