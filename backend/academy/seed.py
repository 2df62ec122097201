import os
from datetime import date, time, timedelta
from academy.extensions import db
from academy.models import (
    AttendanceRecord, AttendanceStatus, Batch, Center, ScheduleDays, Student, User, UserRole
)
from academy.services.students import next_roll_number
from utils.schedule import resolve_day_type


def _user(email, full_name, role, center=None, password=None):
    user = User.query.filter_by(email=email).first()
    if user:
        return user
    user = User(email=email, full_name=full_name, role=role, center_id=center.id if center else None)
    user.set_password(password or os.getenv("SEED_PASSWORD", "changeme123"))
    db.session.add(user)
    db.session.commit()
    return user


def seed_data():
    # Clear existing data (for testing)
    AttendanceRecord.query.delete()
    Student.query.delete()
    Batch.query.delete()
    User.query.delete()
    Center.query.delete()
    db.session.commit()

    # Create Centers
    noida = Center(name="Greater Noida")
    delhi = Center(name="Delhi")
    db.session.add_all([noida, delhi])
    db.session.commit()

    admin = _user("admin@academy.local", "Academy Admin", UserRole.ADMIN,
                  password=os.getenv("ADMIN_PASSWORD", "your_secure_password"))
    _user("noida.manager@academy.local", "Noida Manager", UserRole.CENTRE_MANAGER, noida)
    _user("delhi.manager@academy.local", "Delhi Manager", UserRole.CENTRE_MANAGER, delhi)
    asha = _user("asha@academy.local", "Asha Verma", UserRole.FACULTY)
    ravi = _user("ravi@academy.local", "Ravi Kumar", UserRole.FACULTY)

    # Create Batches
    batches = [
        Batch(name="Morning A", schedule_days=ScheduleDays.MWF, start_time=time(8, 0), end_time=time(10, 0),
              faculty_id=asha.id, center_id=noida.id),
        Batch(name="Evening B", schedule_days=ScheduleDays.TTS, start_time=time(17, 0), end_time=time(19, 0),
              faculty_id=ravi.id, center_id=noida.id),
        Batch(name="Morning A", schedule_days=ScheduleDays.MWF, start_time=time(9, 0), end_time=time(11, 0),
              faculty_id=ravi.id, center_id=delhi.id),
    ]
    db.session.add_all(batches)
    db.session.commit()

    # Add Students, roll numbers generated per center
    names = ["Aarav Shah", "Diya Patel", "Kabir Singh", "Meera Nair", "Rohan Gupta", "Sara Khan"]
    for index, name in enumerate(names):
        batch = batches[index % len(batches)]
        db.session.add(Student(
            name=name,
            roll_number=next_roll_number(batch.center),
            batch_id=batch.id,
            center_id=batch.center_id,
        ))
        db.session.flush()
    db.session.commit()

    # One week of attendance for every scheduled batch
    today = date.today()
    for offset in range(7):
        day = today - timedelta(days=offset)
        day_type = resolve_day_type(day)
        for batch in batches:
            if batch.schedule_days != day_type:
                continue
            for position, student in enumerate(batch.students):
                status = AttendanceStatus.Absent if (position + offset) % 4 == 3 else AttendanceStatus.Present
                db.session.add(AttendanceRecord(
                    student_id=student.id, batch_id=batch.id, date=day,
                    status=status, marked_by_id=batch.faculty_id or admin.id,
                ))
    db.session.commit()
