from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkedDuration:
    seconds: int

    @property
    def minutes(self) -> int:
        return self.seconds // 60

    @property
    def hours(self) -> float:
        """Decimal hours rounded to 2 places (4h30m -> 4.5)."""
        return round(self.seconds / 3600, 2)

    @property
    def label(self) -> str:
        return f"{self.minutes // 60}h {self.minutes % 60:02d}m"


ZERO = WorkedDuration(0)


def worked_duration(clock_in_at: datetime, clock_out_at: datetime) -> WorkedDuration:
    """Duration between two full timestamps.

    Both ends carry their date, so a 22:00 -> 02:00 shift spanning midnight
    yields 4 hours. A non-positive span is a data anomaly and clamps to zero.
    """
    seconds = int((clock_out_at - clock_in_at).total_seconds())
    if seconds <= 0:
        if seconds < 0:
            logger.warning("negative worked duration clamped to zero (in=%s out=%s)", clock_in_at, clock_out_at)
        return ZERO
    return WorkedDuration(seconds)
