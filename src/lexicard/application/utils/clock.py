"""Time helpers. All engine timestamps are epoch milliseconds in UTC."""

import time
from datetime import date, datetime, timezone

from lexicard.domain.constants import DAY_MS


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def utc_date(ts: int) -> date:
    """Calendar date (UTC) of an epoch-ms timestamp."""
    return datetime.fromtimestamp(ts / 1000, tz=timezone.utc).date()


def start_of_utc_day(ts: int) -> int:
    """Epoch ms of the UTC midnight at or before `ts`."""
    return ts - ts % DAY_MS
