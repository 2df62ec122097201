from datetime import date, datetime
from academy.models import ScheduleDays
from utils.errors import ValidationError

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def resolve_day_type(day):
    """
    Maps a calendar date to the batch schedule that meets on it.
    ISO weekdays 1/3/5 -> MWF, 2/4/6 -> TTS, Sunday (7) -> None.
    """
    weekday = day.isoweekday()
    if weekday == 7:
        return None
    return ScheduleDays.MWF if weekday % 2 == 1 else ScheduleDays.TTS


def day_name(day):
    return DAY_NAMES[day.weekday()]


def parse_date(value, default=None, field="date"):
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        raise ValidationError(f"Invalid {field} format, use YYYY-MM-DD")


def parse_time(value, field="time"):
    if not value:
        raise ValidationError(f"Missing {field}")
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(str(value).strip(), fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid {field} format, use HH:MM")
