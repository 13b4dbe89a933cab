from restaurant.models import db
from sqlalchemy.sql import func


class Vendor(db.Model):
    __tablename__ = "vendors"

    vendor_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id"),
        primary_key=True
    )
    description = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now())
