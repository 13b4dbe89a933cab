from .identity_repository import IdentityRepository
from .vendor_repository import VendorRepository
