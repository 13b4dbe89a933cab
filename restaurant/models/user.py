from restaurant.models import db
from sqlalchemy.sql import func
import uuid


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(100), nullable=False)
    # Unique constraint is the real guard against duplicate signups
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(50))
    # Vendors are created by an admin and have no password
    password = db.Column(db.String(255))
    # Path relative to the upload root, never the public URL
    img = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
