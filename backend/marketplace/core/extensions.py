"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, cast

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

if TYPE_CHECKING:
    from marketplace.services._shared.ports import PasswordHasher, TokenManager

# Global naming convention for all constraints
#   %(table_name)s, %(column_0_name)s, %(referred_table_name)s, %(constraint_name)s
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

PASSWORD_HASHER_KEY = "password_hasher"
TOKEN_MANAGER_KEY = "token_manager"
TIMING_DIGEST_KEY = "timing_digest"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the security adapters.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`marketplace.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    The password hasher and token manager are built once here and stored in
    ``app.extensions``; they are stateless and shared by every request.
    A throwaway digest is hashed once too, so a sign-in for an unknown login
    costs one hash check, exactly like a wrong password.
    """
    db.init_app(app)
    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            _configure_sqlite(db.engine)

    # Ensure models are imported so Alembic sees metadata
    from marketplace import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    from marketplace.infra.jwt.flask_jwt_token_manager import JWTTokenManager
    from marketplace.infra.security.password_hasher import WerkzeugPasswordHasher

    hasher = WerkzeugPasswordHasher(method=app.config["PASSWORD_HASH_METHOD"])
    app.extensions[PASSWORD_HASHER_KEY] = hasher
    app.extensions[TIMING_DIGEST_KEY] = hasher.hash(secrets.token_urlsafe(16))
    app.extensions[TOKEN_MANAGER_KEY] = JWTTokenManager()


def get_password_hasher() -> PasswordHasher:
    """Return the hasher bound to the current application."""
    return cast("PasswordHasher", current_app.extensions[PASSWORD_HASHER_KEY])


def get_token_manager() -> TokenManager:
    """Return the token manager bound to the current application."""
    return cast("TokenManager", current_app.extensions[TOKEN_MANAGER_KEY])


def get_timing_digest() -> str:
    """Return the per-app digest checked against when a login is unknown."""
    return cast(str, current_app.extensions[TIMING_DIGEST_KEY])


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys and let SQLAlchemy drive transactions on pysqlite.

    pysqlite opens transactions lazily and ignores SAVEPOINT scoping; handing
    ``BEGIN`` to SQLAlchemy makes ``begin_nested()`` behave as on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")
