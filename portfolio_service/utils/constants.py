"""Shared constants for the equity history store."""

DAY_MS = 24 * 60 * 60 * 1000

# Range token -> lookback in ms; None means unbounded (from epoch start)
RANGE_LOOKBACK_MS: dict[str, int | None] = {
    "1d": DAY_MS,
    "7d": 7 * DAY_MS,
    "1y": 365 * DAY_MS,
    "all": None,
}
VALID_RANGES = list(RANGE_LOOKBACK_MS)
DEFAULT_RANGE = "1d"

# Snapshot dedup window
DEDUP_WINDOW_MS = 10_000
DEDUP_MIN_EQUITY_DELTA = 0.01

# History downsampling
DEFAULT_MAX_POINTS = 600
MIN_MAX_POINTS = 10
MAX_MAX_POINTS = 2000
MIN_BUCKET_MS = 30_000

DEFAULT_DB_FILE = "data/ibkr-portfolio.sqlite"
MEMORY_DB = ":memory:"
