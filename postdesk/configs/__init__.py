from postdesk.configs.settings import (
    DEFAULT_ERROR_MESSAGE,
    IMAGE_ALLOWED_EXTENSIONS,
    MAX_CATEGORY_NAME_LENGTH,
    MAX_EXCERPT_LENGTH,
    MAX_TITLE_LENGTH,
    LimiterConfig,
    Settings,
    settings,
)

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "IMAGE_ALLOWED_EXTENSIONS",
    "MAX_CATEGORY_NAME_LENGTH",
    "MAX_EXCERPT_LENGTH",
    "MAX_TITLE_LENGTH",
    "LimiterConfig",
    "Settings",
    "settings",
]
