# restaurant/utils/serializers.py
"""
Response projections. Image paths become public URLs only here.
"""


def _iso(value):
    return value.isoformat() if value else None


def account_to_dict(user, assets):
    """Full account projection, password excluded"""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "img": assets.public_url(user.img),
        "created_at": _iso(user.created_at),
        "updated_at": _iso(user.updated_at),
    }


def customer_login_to_dict(user, assets):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "img": assets.public_url(user.img),
    }


def admin_login_to_dict(user, assets):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "updatedAt": _iso(user.updated_at),
        "image": assets.public_url(user.img),
    }


def vendor_to_dict(user, vendor, assets):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "img": assets.public_url(user.img),
        "description": vendor.description,
        "created_at": _iso(user.created_at),
    }
