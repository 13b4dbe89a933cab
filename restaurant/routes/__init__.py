import logging
import pkgutil
import importlib
from pathlib import Path

from flask import current_app

from restaurant.models import db
from restaurant.services.account_service import AccountService

logger = logging.getLogger(__name__)


def account_service():
    """AccountService bound to the request's session and the app's asset store"""
    return AccountService(db.session, current_app.extensions["asset_store"])


def register_routes(flask_app):
    package_name = __name__
    package_path = Path(__file__).parent

    for module_info in pkgutil.iter_modules([str(package_path)]):
        module_name = module_info.name

        if module_name.startswith("_"):
            continue

        module = importlib.import_module(f"{package_name}.{module_name}")

        if hasattr(module, "bp"):
            flask_app.register_blueprint(module.bp)
            logger.debug(f"[Routes] Registered blueprint: {module_name}")
