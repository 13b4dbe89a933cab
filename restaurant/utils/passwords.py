# restaurant/utils/passwords.py
"""
Password hashing helpers (bcrypt)
"""
import bcrypt

from restaurant.errors import HashingError, ValidationError

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password):
    """Hash a plaintext password with a fresh salt"""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    try:
        return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise HashingError() from e


def verify_password(hashed, password):
    """
    Check a plaintext password against a stored hash.

    Returns False on mismatch or when the account has no password
    (vendor accounts). Raises HashingError only for a malformed stored hash.
    """
    if not hashed or password is None:
        return False
    encoded = password.encode("utf-8")
    # No stored hash can come from a longer password
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError as e:
        raise HashingError("Stored password hash is invalid") from e
