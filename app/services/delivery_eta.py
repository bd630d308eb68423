"""Business-day delivery estimates (single source of truth for cart and buy-now)."""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import FrozenSet, Optional, Tuple
from zoneinfo import ZoneInfo

from app.config import settings


@dataclass(frozen=True)
class EtaConfig:
    cutoff_hour: int = 14
    skip_weekends: bool = True
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    timezone: str = "Asia/Kolkata"

    @classmethod
    def from_settings(cls, s=settings) -> "EtaConfig":
        return cls(
            cutoff_hour=s.cutoff_hour_local,
            skip_weekends=s.skip_weekends,
            holidays=frozenset(date.fromisoformat(h) for h in s.holidays),
            timezone=s.timezone,
        )

    def now(self) -> datetime:
        return datetime.now(ZoneInfo(self.timezone))


def is_weekend(d: datetime) -> bool:
    return d.weekday() >= 5   # Sat, Sun


def is_holiday(d: datetime, config: EtaConfig) -> bool:
    return d.date() in config.holidays


def _skippable(d: datetime, config: EtaConfig) -> bool:
    return (config.skip_weekends and is_weekend(d)) or is_holiday(d, config)


def next_business_day(d: datetime, config: EtaConfig) -> datetime:
    nxt = d + timedelta(days=1)
    while _skippable(nxt, config):
        nxt += timedelta(days=1)
    return nxt


def add_business_days(start: datetime, days: int, config: EtaConfig) -> datetime:
    cur = start
    for _ in range(days):
        cur = next_business_day(cur, config)
    return cur


def start_counting_from(now: datetime, config: EtaConfig) -> datetime:
    """Orders after the cutoff, or on a non-business day, start from the next business day."""
    if now.hour >= config.cutoff_hour or _skippable(now, config):
        return next_business_day(now, config)
    return now


def fmt_short(d: datetime) -> str:
    return d.strftime("%a, %d %b")   # e.g. "Tue, 13 Aug"


def estimate_delivery(
    sla: Optional[int],
    config: EtaConfig,
    now: Optional[datetime] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Returns (iso timestamp, short text); both None when the product has no SLA."""
    if sla is None or sla < 0:
        return None, None

    now = now or config.now()
    eta = add_business_days(start_counting_from(now, config), sla, config)
    return eta.isoformat(), fmt_short(eta)
