from flask import Blueprint, current_app, send_from_directory

from restaurant.services.asset_store import URL_PREFIX

bp = Blueprint("uploads", __name__, url_prefix=f"/{URL_PREFIX}")


@bp.route("/<path:relative_path>", methods=["GET"])
def serve_upload(relative_path):
    """Read-only access to stored images"""
    assets = current_app.extensions["asset_store"]
    return send_from_directory(assets.root, relative_path)
