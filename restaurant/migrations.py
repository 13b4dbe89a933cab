# restaurant/migrations.py
"""
Schema bootstrap.

Applies ``NNNNNN_name.up.sql`` files from MIGRATIONS_ROOT in version order,
recording each applied version in ``schema_migrations``. Without a
migrations directory the models are created with ``db.create_all()``.
Either way the fixed roles are seeded.
"""
import logging
import re
import time
from pathlib import Path

from sqlalchemy.exc import OperationalError

from restaurant.models import db, Role, RoleId

logger = logging.getLogger(__name__)

MIGRATION_FILE = re.compile(r"^(\d+)_([\w\-]+)\.up\.sql$")


def discover(migrations_root):
    """[(version, path)] sorted by version"""
    found = []
    for path in Path(migrations_root).iterdir():
        match = MIGRATION_FILE.match(path.name)
        if match:
            found.append((int(match.group(1)), path))
    return sorted(found)


def split_statements(sql):
    statements = []
    for chunk in sql.split(";"):
        lines = [l for l in chunk.splitlines() if not l.strip().startswith("--")]
        statement = "\n".join(lines).strip()
        if statement:
            statements.append(statement)
    return statements


def apply_migrations(migrations_root):
    """Apply pending migrations, returns the list of versions applied"""
    with db.engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE IF NOT EXISTS schema_migrations ("
            "version BIGINT PRIMARY KEY, "
            "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        applied = {row[0] for row in conn.execute(db.text("SELECT version FROM schema_migrations"))}

    newly_applied = []
    for version, path in discover(migrations_root):
        if version in applied:
            continue
        # One transaction per file
        with db.engine.begin() as conn:
            for statement in split_statements(path.read_text(encoding="utf-8")):
                conn.exec_driver_sql(statement)
            conn.execute(
                db.text("INSERT INTO schema_migrations (version) VALUES (:version)"),
                {"version": version},
            )
        logger.info(f"[DB] Applied migration {path.name}")
        newly_applied.append(version)

    if not newly_applied:
        logger.info("[DB] migrations: no change")
    return newly_applied


def seed_roles():
    """Insert the fixed roles if they are missing"""
    for role in RoleId:
        if db.session.get(Role, int(role)) is None:
            db.session.add(Role(id=int(role), name=role.label))
    db.session.commit()


def init_db(app, max_retries=10, delay=2):
    with app.app_context():
        for i in range(max_retries):
            try:
                migrations_root = app.config.get("MIGRATIONS_ROOT")
                if migrations_root:
                    apply_migrations(migrations_root)
                else:
                    db.create_all()
                seed_roles()
                logger.info("[DB] Database ready")
                return
            except OperationalError:
                logger.warning(f"[DB] DB not ready ({i + 1}/{max_retries})")
                if i + 1 == max_retries:
                    raise
                time.sleep(delay)
