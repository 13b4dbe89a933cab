import enum

from restaurant.models import db


class RoleId(enum.IntEnum):
    """Fixed role ids seeded into the ``roles`` table."""
    ADMIN = 1
    VENDOR = 2
    CUSTOMER = 3

    @property
    def label(self):
        return self.name.lower()


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    name = db.Column(db.String(50), unique=True, nullable=False)


class UserRole(db.Model):
    __tablename__ = "user_roles"

    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id"),
        primary_key=True
    )
    role_id = db.Column(
        db.Integer,
        db.ForeignKey("roles.id"),
        primary_key=True
    )
