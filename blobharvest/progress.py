"""Rate-limited progress lines on stdout."""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

import click

logger = logging.getLogger(__name__)

REPORT_INTERVAL_SECONDS = 30


class ProgressReporter:
    """
    Prints ``YYYY-MM-DD HH:MM:SS P% of UNIT (num/den)`` whenever the integer
    percentage changes or more than 30 seconds passed since the last line.
    A denominator of 0 disables reporting.
    """

    def __init__(self, n: int, unit: str = "",
                 clock: Callable[[], float] = time.time,
                 echo: Optional[Callable[[str], None]] = None):
        self.n = n
        self.unit = unit
        self.clock = clock
        self.echo = echo or click.echo
        self.pct = 0
        self.last_report_at = int(clock())

    @property
    def enabled(self) -> bool:
        return self.n > 0

    def format_line(self, i: int, pct: int, now: float) -> str:
        stamp = datetime.fromtimestamp(now).strftime('%Y-%m-%d %H:%M:%S')
        of = f" of {self.unit}" if self.unit else ""
        return f"{stamp} {pct}%{of} ({i}/{self.n})"

    def update(self, i: int) -> bool:
        """Record progress ``i`` of ``n``; return True if a line was emitted."""
        if not self.enabled:
            return False

        now = self.clock()
        new_pct = i * 100 // self.n
        if new_pct == self.pct and int(now) - self.last_report_at <= REPORT_INTERVAL_SECONDS:
            return False

        self.pct = new_pct
        self.last_report_at = int(now)
        try:
            self.echo(self.format_line(i, new_pct, now))
        except (OSError, ValueError) as e:
            # Progress output must never stop the harvest
            logger.debug(f"Progress write failed: {e}")
        return True
