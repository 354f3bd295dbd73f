"""Wall-clock helper shared by components that stamp or age records."""

import time


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)
