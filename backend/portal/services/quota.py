"""
Monthly gift quota calculation.

Usage is counted on the raw stored ``created_at`` timestamps over the
calendar month containing ``now``; nothing is cached, every call re-reads.
"""
from typing import NamedTuple, Optional
from portal import storage
from portal.utils.clock import utcnow


class QuotaUsage(NamedTuple):
    used_this_month: int
    remaining_quota: Optional[int]  # None = unlimited


def month_bounds(now):
    """
    Return (start of month, start of next month) for the month containing now.

    now is naive UTC like the stored timestamps, so the window is the UTC
    calendar month, not the server's local one.
    """
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_start = start.replace(year=start.year + 1, month=1)
    else:
        next_start = start.replace(month=start.month + 1)
    return start, next_start


def quota_period(now) -> str:
    """Label of the quota month containing now, e.g. '2025-02'."""
    return now.strftime('%Y-%m')


def used_this_month(gift, now=None) -> int:
    start, end = month_bounds(now or utcnow())
    return storage.count_gift_deliveries_for_gift_in_month(gift.id, start, end)


def _remaining(monthly_quota, used):
    if monthly_quota is None:
        return None
    return max(0, monthly_quota - used)


def remaining_quota(gift, now=None):
    """Units of gift still claimable this month, or None if unlimited."""
    if gift.monthly_quota is None:
        return None
    return _remaining(gift.monthly_quota, used_this_month(gift, now))


def quota_usage(gift, now=None) -> QuotaUsage:
    used = used_this_month(gift, now)
    return QuotaUsage(used, _remaining(gift.monthly_quota, used))
