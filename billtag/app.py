"""Base Flask application class, used by tests or to be extended in real
applications."""
import importlib.resources
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

import sqlalchemy as sa
import sqlalchemy.orm
import yaml
from flask import Flask

from billtag.config import default_config
from billtag.core import extensions, signals
from billtag.services import Service, audit_service, tag_service

logger = logging.getLogger(__name__)
db = extensions.db
__all__ = ["create_app", "Application", "ServiceManager"]


class ServiceManager:
    """Mixin that provides lifecycle (register/start/stop) support for
    services."""

    services: Dict[str, Service]

    def __init__(self) -> None:
        self.services = {}

    def start_services(self):
        for svc in self.services.values():
            svc.start()

    def stop_services(self):
        for svc in self.services.values():
            svc.stop()


class Application(ServiceManager, Flask):
    """Base application class.

    Extend it in your own app.
    """

    default_config = default_config

    def __init__(self, name: Optional[Any] = None, *args: Any, **kwargs: Any) -> None:
        name = name or __name__

        Flask.__init__(self, name, *args, **kwargs)
        ServiceManager.__init__(self)

    def setup(self, config: Optional[Any]) -> None:
        self.configure(config)

        # At this point we have loaded all external config files:
        # SQLALCHEMY_DATABASE_URI and LOGGING_CONFIG_FILE are definitively
        # fixed.
        self.setup_logging()

        extensions.db.init_app(self)

        with self.app_context():
            self.init_extensions()

        # At this point all models should have been imported: time to configure
        # mappers, so that a misconfigured mapper fails now rather than on first
        # use.
        sa.orm.configure_mappers()

        self.register_commands()
        signals.components_registered.send(self)

        if not self.testing:
            with self.app_context():
                self.start_services()

    def configure(self, config: Optional[Any]) -> None:
        if config:
            self.config.from_object(config)

    def setup_logging(self) -> None:
        # Force flask to create application logger before logging
        # configuration; else, flask will overwrite our settings
        self.logger  # noqa

        logging_file = self.config.get("LOGGING_CONFIG_FILE")
        if logging_file:
            logging_file = (Path(self.instance_path) / logging_file).resolve()
        else:
            logging_file = importlib.resources.files("billtag.core").joinpath(
                "default_logging.yml"
            )

        if logging_file.suffix == ".ini":
            # old standard 'ini' file config
            logging.config.fileConfig(str(logging_file), disable_existing_loggers=False)
        else:
            # yaml config file
            logging_cfg = yaml.safe_load(logging_file.read_text())
            logging_cfg.setdefault("version", 1)
            logging_cfg.setdefault("disable_existing_loggers", False)
            logging.config.dictConfig(logging_cfg)

        # after dictConfig, which resets levels of child loggers
        log_level = self.config.get("LOG_LEVEL")
        if log_level:
            self.logger.setLevel(log_level)

    def init_extensions(self) -> None:
        """Initialize services."""
        audit_service.init_app(self)
        tag_service.init_app(self)

    def register_commands(self) -> None:
        from billtag.cli import register_commands

        register_commands(self)


def create_app(
    config: Optional[Any] = None, app_class: type = Application, **kw: Any
) -> Application:
    app = app_class(**kw)
    app.setup(config=config)
    return app
