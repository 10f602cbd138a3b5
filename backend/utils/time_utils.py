from datetime import date, datetime, time
import os

import pytz
from dotenv import load_dotenv

load_dotenv()

APP_TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Manila"))


def now() -> datetime:
    return datetime.now(APP_TIMEZONE)


def today() -> date:
    """Calendar date in the farm's timezone; used for createdAt, lastRestocked and sale dates."""
    return now().date()


def ensure_aware(value):
    """
    Attach the application timezone to naive values.

    SQLite hands back naive datetimes even for DateTime(timezone=True) columns and
    plain dates carry no time at all, so both are normalised before comparing.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else APP_TIMEZONE.localize(value)
    if isinstance(value, date):
        return APP_TIMEZONE.localize(datetime.combine(value, time.min))
    raise TypeError(f"Unsupported temporal value: {value!r}")


def format_time_ago(value, reference: datetime = None) -> str:
    reference = reference or now()
    diff_seconds = (reference - ensure_aware(value)).total_seconds()
    minutes = int(diff_seconds // 60)
    hours = int(diff_seconds // 3600)
    days = int(diff_seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} {'minute' if minutes == 1 else 'minutes'} ago"
    if hours < 24:
        return f"{hours} {'hour' if hours == 1 else 'hours'} ago"
    if days < 7:
        return f"{days} {'day' if days == 1 else 'days'} ago"

    weeks = days // 7
    return f"{weeks} {'week' if weeks == 1 else 'weeks'} ago"
