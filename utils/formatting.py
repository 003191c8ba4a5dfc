# utils/formatting.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

_TIME_FORMATS = ("%Y-%m-%d %H:%M", "%H:%M")


def _parse_time(value: str) -> Optional[datetime]:
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            pass
    return None


def format_duration(minutes: Optional[float]) -> str:
    """Unknown durations render empty rather than as 0h 0m."""
    if minutes is None:
        return ""
    total = int(minutes)
    return f"{total // 60}h {total % 60}m"


def format_time(value: Optional[str]) -> str:
    """'2025-12-14 08:05' or '08:05' -> '08:05'; unknown formats pass through."""
    if not value:
        return "--:--"
    parsed = _parse_time(value)
    return parsed.strftime("%H:%M") if parsed else value


def format_date(value: Optional[str]) -> str:
    """'2025-12-14 08:05' -> 'Dec 14'; bare times carry no date."""
    if not value or " " not in value.strip():
        return ""
    parsed = _parse_time(value)
    return f"{parsed.strftime('%b')} {parsed.day}" if parsed else ""


def format_price(amount: Optional[float]) -> str:
    if amount is None:
        return ""
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def format_stops(stops: int) -> str:
    if stops <= 0:
        return "Direct"
    return f"{stops} stop" if stops == 1 else f"{stops} stops"
