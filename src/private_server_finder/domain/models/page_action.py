"""Page scan intent."""

from enum import Enum


class PageAction(Enum):
    """What a single-page scan should do.

    One value per scan; replaying a rate-limited scan reuses the same value.
    """

    RESET = "reset"
    REFRESH = "refresh"
    NEXT = "next"
