"""Wall clock in epoch milliseconds.

Expiry timestamps for sessions and reset requests are stored as absolute
epoch millis. Everything that compares against "now" goes through
``now_ms`` so tests can freeze or advance time.
"""

import time


def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)
