# restaurant/services/account_service.py
"""
Account lifecycle - signup, login, update and delete for every role.

Each write operation is one transaction over users / user_roles / vendors.
Files written during a failed transaction are removed again.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from restaurant.errors import (
    ApiError,
    AssetNotFoundError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from restaurant.models import RoleId
from restaurant.repositories import IdentityRepository, VendorRepository
from restaurant.utils.passwords import hash_password, verify_password
from restaurant.utils.serializers import (
    account_to_dict,
    admin_login_to_dict,
    customer_login_to_dict,
    vendor_to_dict,
)
from restaurant.utils.validation import is_blank, require_fields, require_id

logger = logging.getLogger(__name__)

# Upload sub-directory per role
ASSET_CATEGORIES = {
    RoleId.ADMIN: "admins",
    RoleId.VENDOR: "vendors",
    RoleId.CUSTOMER: "users",
}


def has_upload(image):
    return image is not None and bool(getattr(image, "filename", None))


class AccountService:

    def __init__(self, session, assets):
        self.session = session
        self.assets = assets
        self.identity = IdentityRepository(session)
        self.vendors = VendorRepository(session)

    # ================= INTERNALS =================

    @contextmanager
    def _transaction(self, action):
        """
        Commit on success, roll back on any failure.

        Yields a list; relative paths appended to it are deleted from the
        asset store if the transaction does not commit.
        """
        new_assets = []
        try:
            yield new_assets
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            self._discard(new_assets)
            if isinstance(e, SQLAlchemyError):
                logger.error(f"[Account] {action} failed: {e}", exc_info=True)
                raise InternalError(f"Failed to {action}") from e
            raise

    def _discard(self, relative_paths):
        for path in relative_paths:
            try:
                self.assets.delete(path)
            except ApiError as e:
                logger.error(f"[Account] Could not remove {path} after rollback: {e.message}")

    def _store_image(self, image, role):
        if not has_upload(image):
            return None
        return self.assets.store(image, ASSET_CATEGORIES[role], image.filename)

    def _remove_image(self, relative_path):
        """Delete a replaced/owned image. A file already gone is only logged."""
        if not relative_path:
            return
        try:
            self.assets.delete(relative_path)
        except AssetNotFoundError:
            logger.warning(f"[Account] Image {relative_path} was already missing")

    def _create_account(self, role, username, email, phone, password, image,
                        conflict_message, description=None):
        # Friendly 409 before doing any hashing or file work
        if self.identity.email_exists(email):
            logger.warning(f"[Account] Signup rejected, {email} already exists")
            raise ConflictError(conflict_message)

        password_hash = hash_password(password) if password is not None else None

        # A failed upload aborts before any row is written
        img_path = self._store_image(image, role)

        with self._transaction(f"create {role.label}") as new_assets:
            if img_path:
                new_assets.append(img_path)

            user = self.identity.create(
                name=username,
                email=email,
                phone=phone,
                password_hash=password_hash,
                img=img_path,
                conflict_message=conflict_message,
            )
            self.identity.attach_role(user.id, role)
            if role == RoleId.VENDOR:
                self.vendors.create(user.id, description)

        logger.info(f"[Account] Created {role.label} {user.id} ({email})")
        return account_to_dict(user, self.assets)

    # ================= SIGNUP =================

    def signup_customer(self, username, email, phone, password, image=None):
        require_fields(
            "Make sure you fill all fields",
            username=username, email=email, phone=phone, password=password,
        )
        return self._create_account(
            RoleId.CUSTOMER, username.strip(), email.strip(), phone.strip(), password, image,
            conflict_message="User is already signed up",
        )

    def signup_admin(self, username, email, password, phone, image=None):
        require_fields(
            "Make sure you fill all fields",
            username=username, email=email, password=password, phone=phone,
        )
        return self._create_account(
            RoleId.ADMIN, username.strip(), email.strip(), phone.strip(), password, image,
            conflict_message="Admin with this email already exists",
        )

    def add_vendor(self, username, email, phone, description, image=None):
        require_fields(
            "Username, email, phone, and description are required",
            username=username, email=email, phone=phone, description=description,
        )
        return self._create_account(
            RoleId.VENDOR, username.strip(), email.strip(), phone.strip(), None, image,
            conflict_message="vendor with this email already exists",
            description=description.strip(),
        )

    # ================= LOGIN =================

    def login_customer(self, email, password):
        require_fields("Email and password are required", email=email, password=password)

        user = self.identity.find_by_email(email.strip())
        if not user or not verify_password(user.password, password):
            logger.warning(f"[Account] Failed login for {email}")
            raise UnauthorizedError("Invalid email or password")

        return customer_login_to_dict(user, self.assets)

    def login_admin(self, email, password):
        require_fields("Make sure you fill all fields", email=email, password=password)

        user = self.identity.find_by_email(email.strip())
        if not user:
            raise UnauthorizedError("This user is not authorized")

        if not verify_password(user.password, password):
            logger.warning(f"[Account] Wrong admin password for {email}")
            raise UnauthorizedError("Password is not correct")

        if not self.identity.has_role(user.id, RoleId.ADMIN):
            logger.warning(f"[Account] {email} tried admin login without admin role")
            raise UnauthorizedError("You do not have admin privileges")

        return admin_login_to_dict(user, self.assets)

    # ================= UPDATE =================

    def update_user(self, account_id, username=None, image=None):
        account_id = require_id(account_id, "User ID is required")

        user = self.identity.get(account_id)
        if not user:
            raise NotFoundError("User not found")

        old_img = user.img
        fields = {}
        if not is_blank(username):
            fields["name"] = username.strip()

        with self._transaction("update user") as new_assets:
            if has_upload(image):
                new_img = self._store_image(image, RoleId.CUSTOMER)
                new_assets.append(new_img)
                fields["img"] = new_img
            if fields:
                self.identity.update(account_id, **fields)
            if "img" in fields:
                self._remove_image(old_img)

        return {
            "id": user.id,
            "name": user.name,
            "img": self.assets.public_url(user.img),
        }

    def update_vendor(self, account_id, name=None, description=None, phone=None, image=None):
        account_id = require_id(account_id, "Vendor ID is required")

        row = self.vendors.get_by_id(account_id)
        if not row:
            raise NotFoundError("Vendor not found")
        user, vendor = row

        old_img = user.img
        fields = {}
        if not is_blank(name):
            fields["name"] = name.strip()
        if not is_blank(phone):
            fields["phone"] = phone.strip()

        with self._transaction("update vendor") as new_assets:
            if has_upload(image):
                new_img = self._store_image(image, RoleId.VENDOR)
                new_assets.append(new_img)
                fields["img"] = new_img
            if fields:
                self.identity.update(account_id, **fields)
            if not is_blank(description):
                self.vendors.update(account_id, description.strip())
            if "img" in fields:
                self._remove_image(old_img)

        return {
            "id": user.id,
            "name": user.name,
            "img": self.assets.public_url(user.img),
            "description": vendor.description,
        }

    # ================= DELETE =================

    def delete_user(self, account_id):
        account_id = require_id(account_id, "User ID is required")

        user = self.identity.get(account_id)
        if not user:
            raise NotFoundError("User not found")

        img = user.img
        with self._transaction("delete user"):
            # A vendor profile may not outlive its account
            self.vendors.delete(account_id)
            self.identity.detach_role(account_id)
            self.identity.delete(account_id)
            # Rows are flushed; a filesystem error here still rolls them back
            self._remove_image(img)

        logger.info(f"[Account] Deleted user {account_id}")
        return {"message": "User deleted successfully"}

    def delete_vendor(self, account_id):
        account_id = require_id(account_id, "Vendor ID is required")

        user = self.identity.get(account_id)
        if not user:
            raise NotFoundError("Vendor not found")
        if not self.identity.has_role(account_id, RoleId.VENDOR) and not self.vendors.get(account_id):
            raise NotFoundError("Vendor not found")

        img = user.img
        with self._transaction("delete vendor"):
            self.vendors.delete(account_id)
            self.identity.detach_role(account_id, RoleId.VENDOR)
            if self.identity.roles_of(account_id):
                raise ConflictError("Account holds other roles and cannot be deleted as a vendor")
            self.identity.delete(account_id)
            self._remove_image(img)

        logger.info(f"[Account] Deleted vendor {account_id}")
        return {"message": "Vendor and all associated data deleted successfully"}

    # ================= READ =================

    def list_users(self):
        return [account_to_dict(user, self.assets) for user in self.identity.list()]

    def list_vendors(self):
        return [
            vendor_to_dict(user, vendor, self.assets)
            for user, vendor in self.vendors.list_all()
        ]

    def get_vendor(self, account_id):
        account_id = require_id(account_id, "Vendor ID is required")

        row = self.vendors.get_by_id(account_id)
        if not row:
            raise NotFoundError("Vendor not found")
        user, vendor = row
        return vendor_to_dict(user, vendor, self.assets)
