"""
Display helpers for chat timestamps, store hours and prices.
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo

DISPLAY_TZ = ZoneInfo("Africa/Johannesburg")

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DAY_SHORT_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _as_datetime(value: Union[datetime, str]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _time_str(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_message_date(timestamp: Optional[Union[datetime, str]], now: Optional[datetime] = None) -> str:
    """'Today, 3:05 PM', 'Yesterday, 3:05 PM' or 'Mar 5, 2025, 3:05 PM' in South African time."""
    if not timestamp:
        return "N/A"
    local = _as_datetime(timestamp).astimezone(DISPLAY_TZ)
    today = _as_datetime(now or datetime.now(timezone.utc)).astimezone(DISPLAY_TZ).date()
    diff_days = (today - local.date()).days
    time_str = _time_str(local)
    if diff_days == 0:
        return f"Today, {time_str}"
    if diff_days == 1:
        return f"Yesterday, {time_str}"
    return f"{local.strftime('%b')} {local.day}, {local.year}, {time_str}"


def _hours_label(hours: Dict[str, Any]) -> str:
    if not hours.get("open"):
        return "Closed"
    return f"{hours.get('start')}–{hours.get('end')}"


def _same_hours(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    if bool(a.get("open")) != bool(b.get("open")):
        return False
    if not a.get("open"):
        return True
    return a.get("start") == b.get("start") and a.get("end") == b.get("end")


def group_hours(hours: Optional[Dict[str, Dict[str, Any]]]) -> List[Dict[str, str]]:
    """
    Group days sharing the same opening hours.

    hours maps full day names to {"open": bool, "start": "09:00", "end": "17:00"}.
    Days missing from the mapping are skipped. Returns [{"days", "hours"}, ...]
    with "Mon–Fri" for a full working week.
    """
    hours = hours or {}
    grouped = []
    seen = set()
    for index, day in enumerate(DAYS):
        current = hours.get(day)
        if day in seen or not current:
            continue
        same = [DAY_SHORT_NAMES[index]]
        seen.add(day)
        for other_index in range(index + 1, len(DAYS)):
            other_day = DAYS[other_index]
            other = hours.get(other_day)
            if other_day in seen or not other:
                continue
            if _same_hours(current, other):
                same.append(DAY_SHORT_NAMES[other_index])
                seen.add(other_day)
        label = ", ".join(same)
        if same == DAY_SHORT_NAMES[:5]:
            label = "Mon–Fri"
        grouped.append({"days": label, "hours": _hours_label(current)})
    return grouped


def format_price(price: Any) -> str:
    """'R12.00', or 'N/A' when price is missing or not a number."""
    if price is None or price == "":
        return "N/A"
    try:
        return f"R{Decimal(str(price)):.2f}"
    except (InvalidOperation, ValueError):
        return "N/A"
