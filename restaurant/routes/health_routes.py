import logging

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from restaurant.models import db

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__, url_prefix="/health")


@bp.route("/db")
def db_check():
    try:
        db.session.execute(db.text("SELECT 1"))
        return jsonify({"db": "connected"}), 200
    except SQLAlchemyError as e:
        logger.error(f"[Health] DB check failed: {e}")
        return jsonify({"db": "error"}), 500
