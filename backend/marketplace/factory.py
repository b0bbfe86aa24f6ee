"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from marketplace.core.config import BaseConfig, check_config, get_config
from marketplace.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, import path or class. Defaults to the class
        selected by ``APP_ENV``.
    :raises RuntimeError: If a production-like config still uses the
        placeholder signing key.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    check_config(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy (optional module)
    from marketplace.core import proxy

    proxy.init_app(app)

    from marketplace.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from marketplace.core import cors

    cors.init_app(app)

    from marketplace.api import init_app as init_api

    init_api(app)

    from marketplace.api.v1.health import ping

    app.add_url_rule("/ping", endpoint="ping", view_func=ping, methods=["GET"])

    from marketplace.core import errors

    errors.init_app(app)

    from marketplace import cli as app_cli

    app_cli.init_app(app)

    return app
