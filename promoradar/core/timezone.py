"""
时间工具
数据库统一保存UTC时间，每日名额与报表按配置的时区偏移划分自然日
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from promoradar.core.config import settings


def report_timezone() -> timezone:
    """报表/每日名额所用的时区"""
    return timezone(timedelta(hours=settings.report_utc_offset_hours))


def utcnow() -> datetime:
    """当前UTC时间（带时区）"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """保证datetime为UTC；无时区信息的值视为UTC（SQLite读回的值不带时区）"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date(dt: datetime) -> date:
    """UTC时间对应的报表自然日"""
    return ensure_utc(dt).astimezone(report_timezone()).date()


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """返回now所在自然日的 [开始, 结束) UTC区间"""
    tz = report_timezone()
    start_local = datetime.combine(local_date(now), time.min, tzinfo=tz)
    end_local = start_local + timedelta(days=1)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def trailing_window_start(now: datetime, days: int) -> datetime:
    """最近days个自然日（含今天）窗口的起点（UTC）"""
    start_of_today, _ = day_bounds(now)
    return start_of_today - timedelta(days=max(days, 1) - 1)
