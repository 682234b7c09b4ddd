#!/usr/bin/env python3
"""Constants for sync cadence, history limits and viewer reconnection.

These constants control how often the local clipboard and the remote
table are polled, how many rows feed the history view, and the
exponential backoff used when a viewer reconnects to the daemon.
"""

# Seconds between ticks of both the local watcher and the remote poller.
POLL_INTERVAL: float = 1.0

# Raw rows fetched when building the history view.
# Larger than RESULT_LIMIT so duplicates can be dropped without running short.
FETCH_LIMIT: int = 100

# Maximum number of distinct texts returned in the history view.
RESULT_LIMIT: int = 50

# Name of the remote table holding clipboard entries.
TABLE_NAME: str = "clipboard"

# Initial delay between viewer connection attempts in seconds.
INITIAL_WAIT: float = 1.0

# Maximum delay between viewer connection attempts in seconds.
MAX_WAIT: float = 30.0

# Multiplier for exponential backoff (delay = initial * multiplier^attempt).
WAIT_MULTIPLIER: float = 2.0
