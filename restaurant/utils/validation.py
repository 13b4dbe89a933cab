# restaurant/utils/validation.py
"""
Input validation utilities
"""
from restaurant.errors import ValidationError


def is_blank(value):
    return value is None or not str(value).strip()


def require_fields(message=None, **fields):
    """Raise ValidationError if any of the given fields is missing or blank"""
    missing = [name for name, value in fields.items() if is_blank(value)]
    if missing:
        raise ValidationError(message)
    return fields


def require_id(value, message):
    if is_blank(value):
        raise ValidationError(message)
    return str(value).strip()
