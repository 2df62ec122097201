from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from academy.extensions import db
from .base import TimestampMixin, UserRole

class User(db.Model, TimestampMixin):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=False, default="")
    password_hash = db.Column(db.String(512), nullable=False)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.FACULTY, index=True)

    # faculty may float across centers, so this stays nullable
    center_id = db.Column(db.Integer, db.ForeignKey('centers.id'), nullable=True)

    center = db.relationship('Center', back_populates='users')
    batches = db.relationship('Batch', back_populates='faculty', lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self, include_center=False):
        data = {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
            "center_id": self.center_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_center:
            data["center"] = {"id": self.center.id, "name": self.center.name} if self.center else None
        return data


class TokenBlocklist(db.Model):
    __tablename__ = 'token_blocklist'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), nullable=False, index=True)
    token_type = db.Column(db.String(10), nullable=False, default="access")
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete="CASCADE"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
