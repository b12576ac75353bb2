"""Update scheduler — fixed interval plus per-chat daily HH:MM triggers.

Every trigger funnels into the same update callable.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Callable

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

INTERVAL_JOB_ID = "update_interval"
# Overlapping cycles are allowed; the config store serializes writes.
_MAX_INSTANCES = 3

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(text: str) -> tuple[int, int] | None:
    """Parse a 24h ``HH:MM`` string. Returns None if malformed or out of range."""
    m = _TIME_RE.match(text.strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return hour, minute


class UpdateScheduler:
    def __init__(
        self,
        job: Callable[[], object],
        timezone: str = "UTC",
        scheduler: BackgroundScheduler | None = None,
    ):
        self.job = job
        self.timezone = pytz.timezone(timezone)
        self.scheduler = scheduler or BackgroundScheduler(timezone=self.timezone)
        self._daily: dict[str, str] = {}
        self._lock = threading.Lock()

    def add_interval(self, minutes: int) -> None:
        """Run the update every ``minutes`` minutes."""
        if minutes <= 0:
            raise ValueError(f"interval must be positive (got {minutes})")
        self.scheduler.add_job(
            self._run,
            IntervalTrigger(minutes=minutes, timezone=self.timezone),
            id=INTERVAL_JOB_ID,
            replace_existing=True,
            max_instances=_MAX_INSTANCES,
        )
        logger.info("Scheduled update every %d min", minutes)

    def add_daily(self, chat_id: str, hour: int, minute: int) -> str:
        """Run the update daily at ``hour:minute``; replaces the chat's previous time."""
        chat_id = str(chat_id)
        self.scheduler.add_job(
            self._run,
            CronTrigger(hour=hour, minute=minute, timezone=self.timezone),
            id=f"daily_{chat_id}",
            replace_existing=True,
            max_instances=_MAX_INSTANCES,
        )
        label = f"{hour:02d}:{minute:02d}"
        with self._lock:
            self._daily[chat_id] = label
        logger.info("Scheduled daily update at %s %s for chat %s", label, self.timezone, chat_id)
        return label

    def daily_schedules(self) -> dict[str, str]:
        with self._lock:
            return dict(self._daily)

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def _run(self) -> None:
        try:
            self.job()
        except Exception:
            logger.exception("Update cycle failed")
