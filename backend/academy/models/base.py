from datetime import datetime
from academy.extensions import db
import enum

class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    CENTRE_MANAGER = "CENTRE_MANAGER"
    FACULTY = "FACULTY"

class ScheduleDays(enum.Enum):
    MWF = "MWF"
    TTS = "TTS"

class AttendanceStatus(enum.Enum):
    Present = "Present"
    Absent = "Absent"
