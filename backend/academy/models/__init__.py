from .User import User, TokenBlocklist
from .Center import Center
from .Batch import Batch
from .Student import Student
from .AttendanceRecord import AttendanceRecord
from .AuditLog import AuditLog
from .base import TimestampMixin, UserRole, ScheduleDays, AttendanceStatus
