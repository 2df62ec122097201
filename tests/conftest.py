from datetime import time

import pytest
from flask_jwt_extended import create_access_token

from academy import create_app
from academy.config import TestingConfig
from academy.extensions import db
from academy.models import Batch, Center, ScheduleDays, Student, User, UserRole
from utils.access_control import AccessScope


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_center(app):
    def _make(name="Greater Noida"):
        center = Center(name=name)
        db.session.add(center)
        db.session.commit()
        return center
    return _make


@pytest.fixture
def make_user(app):
    def _make(email, role=UserRole.FACULTY, center=None, full_name=None, password="secret123"):
        user = User(
            email=email,
            full_name=full_name or email.split("@")[0].title(),
            role=role,
            center_id=center.id if center else None,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_batch(app):
    def _make(center, name="Morning A", schedule_days=ScheduleDays.MWF, faculty=None,
              start=time(8, 0), end=time(10, 0)):
        batch = Batch(
            name=name,
            schedule_days=schedule_days,
            start_time=start,
            end_time=end,
            faculty_id=faculty.id if faculty else None,
            center_id=center.id,
        )
        db.session.add(batch)
        db.session.commit()
        return batch
    return _make


@pytest.fixture
def make_student(app):
    def _make(center, name, roll_number, batch=None):
        student = Student(
            name=name,
            roll_number=roll_number,
            center_id=center.id,
            batch_id=batch.id if batch else None,
        )
        db.session.add(student)
        db.session.commit()
        return student
    return _make


@pytest.fixture
def auth_header(app):
    def _header(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture
def scope_for():
    return AccessScope.for_user


@pytest.fixture
def center(make_center):
    return make_center("Greater Noida")


@pytest.fixture
def admin(make_user):
    return make_user("admin@academy.local", UserRole.ADMIN, full_name="Admin")


@pytest.fixture
def manager(make_user, center):
    return make_user("manager@academy.local", UserRole.CENTRE_MANAGER, center=center, full_name="Manager")


@pytest.fixture
def faculty(make_user):
    return make_user("asha@academy.local", UserRole.FACULTY, full_name="Asha Verma")
