from postdesk.managers.rate_limiter import (
    READ_LIMIT,
    WRITE_LIMIT,
    limiter,
    rate_limit_exceeded_handler,
)
from postdesk.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "READ_LIMIT",
    "WRITE_LIMIT",
    "create_access_token",
    "decode_access_token",
    "limiter",
    "rate_limit_exceeded_handler",
]
