from sqlalchemy import select
from academy.models import Batch, Center, Student, UserRole
from utils.errors import NotAuthenticated, NotAuthorized, ValidationError


class AccessScope:
    """
    Data-visibility scope of the signed-in user, built once per request from the
    stored profile and passed explicitly to every data-access call.
    - ADMIN sees everything.
    - CENTRE_MANAGER is restricted to rows of their own center.
    - FACULTY is restricted to the batches they teach, whatever the center.
    """

    def __init__(self, user_id, role, center_id=None):
        self.user_id = user_id
        self.role = role
        self.center_id = center_id

    @classmethod
    def for_user(cls, user):
        if not user:
            raise NotAuthenticated("User not found")
        if user.role == UserRole.CENTRE_MANAGER and not user.center_id:
            raise NotAuthorized("User center not found")
        return cls(user.id, user.role, user.center_id)

    def __repr__(self):
        return f"<AccessScope user={self.user_id} role={self.role.value} center={self.center_id}>"

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self):
        return self.role == UserRole.CENTRE_MANAGER

    @property
    def is_faculty(self):
        return self.role == UserRole.FACULTY

    # query predicates

    def filter_batches(self, query):
        if self.is_admin:
            return query
        if self.is_manager:
            return query.filter(Batch.center_id == self.center_id)
        return query.filter(Batch.faculty_id == self.user_id)

    def filter_students(self, query):
        if self.is_admin:
            return query
        if self.is_manager:
            return query.filter(Student.center_id == self.center_id)
        taught = select(Batch.id).where(Batch.faculty_id == self.user_id)
        return query.filter(Student.batch_id.in_(taught))

    def filter_centers(self, query):
        if self.is_admin:
            return query
        if self.is_manager:
            return query.filter(Center.id == self.center_id)
        taught = select(Batch.center_id).where(Batch.faculty_id == self.user_id)
        return query.filter(Center.id.in_(taught))

    # row checks

    def can_access_center(self, center_id):
        if self.is_admin:
            return True
        if self.is_manager:
            return center_id == self.center_id
        return Batch.query.filter_by(center_id=center_id, faculty_id=self.user_id).first() is not None

    def ensure_center(self, center_id):
        if not self.can_access_center(center_id):
            raise NotAuthorized("Access denied to this center")

    def ensure_batch(self, batch):
        if self.is_admin:
            return
        if self.is_manager and batch.center_id == self.center_id:
            return
        if self.is_faculty and batch.faculty_id == self.user_id:
            return
        raise NotAuthorized("Access denied to this batch")

    def ensure_student(self, student):
        if self.is_admin:
            return
        if self.is_manager and student.center_id == self.center_id:
            return
        if self.is_faculty and student.batch is not None and student.batch.faculty_id == self.user_id:
            return
        raise NotAuthorized("Access denied to this student")

    def target_center_id(self, requested=None):
        """
        Resolves which center a write lands in.
        Admins must name the center; managers always write into their own.
        """
        if self.is_admin:
            if not requested:
                raise ValidationError("Center must be specified")
            return int(requested)
        if self.is_manager:
            if requested and int(requested) != self.center_id:
                raise NotAuthorized("Access denied to this center")
            return self.center_id
        raise NotAuthorized()
