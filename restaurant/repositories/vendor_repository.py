# restaurant/repositories/vendor_repository.py
"""
Vendor Profile Repository

``vendors`` rows are a 1:1 extension of a ``users`` row holding the vendor role.
"""
from restaurant.models import User, Vendor


class VendorRepository:

    def __init__(self, session):
        self.session = session

    def create(self, vendor_account_id, description):
        vendor = Vendor(vendor_id=vendor_account_id, description=description)
        self.session.add(vendor)
        self.session.flush()
        return vendor

    def get(self, vendor_account_id):
        return self.session.get(Vendor, vendor_account_id)

    def update(self, vendor_account_id, description):
        vendor = self.get(vendor_account_id)
        if vendor is None:
            return None
        vendor.description = description
        self.session.flush()
        return vendor

    def delete(self, vendor_account_id):
        vendor = self.get(vendor_account_id)
        if vendor is None:
            return False
        self.session.delete(vendor)
        self.session.flush()
        return True

    def _joined(self):
        return self.session.query(User, Vendor).join(Vendor, User.id == Vendor.vendor_id)

    def get_by_id(self, account_id):
        """(User, Vendor) for a vendor account, None when either row is missing"""
        return self._joined().filter(User.id == account_id).first()

    def list_all(self):
        return self._joined().order_by(User.created_at, User.email).all()
