"""Utility helper functions."""

from postdesk.utils.helpers import (
    get_summary,
    host,
    isoformat,
    positive_int,
    today_str,
    utc_now,
)

__all__ = [
    "get_summary",
    "host",
    "isoformat",
    "positive_int",
    "today_str",
    "utc_now",
]
