from datetime import date, datetime, timedelta

OPENING_HOUR = 10
CLOSING_HOUR = 22
SLOT_MINUTES = 30


def parse_date(value):
    """Accept a date, a datetime or an ISO 'YYYY-MM-DD' string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def normalize_time(value):
    """Return 'HH:MM' for 'HH:MM' or 'HH:MM:SS' input."""
    if not value:
        return None
    parsed = datetime.strptime(str(value)[:5], "%H:%M")
    return parsed.strftime("%H:%M")


def time_slots():
    """Bookable start times: 10:00 to 22:00 every 30 minutes."""
    slots = []
    current = datetime(2000, 1, 1, OPENING_HOUR, 0)
    end = datetime(2000, 1, 1, CLOSING_HOUR, 0)
    while current <= end:
        slots.append(current.strftime("%H:%M"))
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


def week_start(day):
    """Sunday on or before the given day."""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def default_report_range(today=None):
    today = today or date.today()
    return today - timedelta(days=30), today
