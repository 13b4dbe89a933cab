# restaurant/repositories/identity_repository.py
"""
Identity Repository

Data access for the ``users`` and ``user_roles`` tables. Methods only
add/flush; the caller owns commit and rollback.
"""
import logging

from sqlalchemy.exc import IntegrityError

from restaurant.errors import ConflictError
from restaurant.models import User, UserRole, RoleId

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "phone", "img")


class IdentityRepository:

    def __init__(self, session):
        self.session = session

    def get(self, account_id):
        return self.session.get(User, account_id)

    def find_by_email(self, email):
        return self.session.query(User).filter_by(email=email).first()

    def email_exists(self, email):
        return self.session.query(User.id).filter_by(email=email).first() is not None

    def create(self, name, email, phone=None, password_hash=None, img=None,
               conflict_message=None):
        # Fast path for a readable error; the unique index decides races
        if self.email_exists(email):
            raise ConflictError(conflict_message)

        user = User(
            name=name,
            email=email,
            phone=phone,
            password=password_hash,
            img=img,
        )
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as e:
            logger.warning(f"[Identity] Unique constraint hit for {email}")
            raise ConflictError(conflict_message) from e
        return user

    def attach_role(self, account_id, role):
        self.session.add(UserRole(user_id=account_id, role_id=int(RoleId(role))))
        self.session.flush()

    def has_role(self, account_id, role):
        return self.session.query(UserRole).filter_by(
            user_id=account_id,
            role_id=int(RoleId(role))
        ).first() is not None

    def roles_of(self, account_id):
        rows = self.session.query(UserRole.role_id).filter_by(user_id=account_id).all()
        return {RoleId(row.role_id) for row in rows}

    def detach_role(self, account_id, role=None):
        """Remove one role, or every role when ``role`` is None"""
        query = self.session.query(UserRole).filter_by(user_id=account_id)
        if role is not None:
            query = query.filter_by(role_id=int(RoleId(role)))
        removed = query.delete()
        self.session.flush()
        return removed

    def update(self, account_id, **fields):
        """Partial update of name/phone/img. Email and password are not updatable here."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        user = self.get(account_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        self.session.flush()
        return user

    def delete(self, account_id):
        """Delete the account row. Roles and vendor profile must be gone already."""
        user = self.get(account_id)
        if user is None:
            return False
        self.session.delete(user)
        self.session.flush()
        return True

    def list(self):
        return self.session.query(User).order_by(User.created_at, User.email).all()
