import logging
import os

import click
from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from restaurant.errors import register_error_handlers
from restaurant.migrations import init_db
from restaurant.models import db, User
from restaurant.routes import register_routes
from restaurant.services.asset_store import AssetStore

logger = logging.getLogger(__name__)

load_dotenv()

# 10 MB, same as the multipart limit of the upload forms
MAX_UPLOAD_BYTES = 10 << 20


def _database_url():
    url = os.getenv("DATABASE_URL") or os.getenv("DATABASE_CONNECTION_STR")
    if not url:
        raise RuntimeError("DATABASE_URL not set in environment")

    # Fix old postgres:// scheme
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def create_app(config=None):
    app = Flask(__name__)
    CORS(
        app,
        origins="*",
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # ================= CONFIG =================
    app.config.update(
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ECHO=False,
        SQLALCHEMY_ENGINE_OPTIONS={"pool_pre_ping": True},
        MAX_CONTENT_LENGTH=MAX_UPLOAD_BYTES,
        MIGRATIONS_ROOT=os.getenv("MIGRATIONS_ROOT"),
        PUBLIC_BASE_URL=os.getenv("DOMAIN") or os.getenv("PUBLIC_BASE_URL") or "http://localhost:8000",
        UPLOAD_ROOT=os.getenv("UPLOAD_ROOT", "uploads"),
    )
    if config:
        app.config.update(config)
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = _database_url()

    # ================= INIT =================
    db.init_app(app)
    app.extensions["asset_store"] = AssetStore(
        app.config["UPLOAD_ROOT"],
        app.config["PUBLIC_BASE_URL"],
    )

    register_error_handlers(app)
    register_routes(app)
    register_commands(app)

    return app


def register_commands(app):

    @app.cli.command("init-db")
    def init_db_command():
        """Apply migrations (or create tables) and seed roles."""
        init_db(app)
        click.echo("Database ready")

    @app.cli.command("sweep-assets")
    def sweep_assets_command():
        """Delete uploaded files that no account references."""
        assets = app.extensions["asset_store"]
        referenced = [row.img for row in db.session.query(User.img).filter(User.img.isnot(None))]
        removed = assets.sweep_orphans(referenced)
        click.echo(f"Removed {len(removed)} orphaned file(s)")


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Backend API starting on port {port}...")
    app = create_app()
    init_db(app)
    app.run(host="0.0.0.0", port=port, debug=False, use_reloader=False)
