import logging

import pytest
import sqlalchemy as sa

from billtag.app import Application, create_app
from billtag.core import signals
from billtag.core.extensions import db
from billtag.services import audit_service, tag_service
from billtag.services.base import ServiceStateError
from billtag.testing import fixtures


def test_create_app(app):
    assert isinstance(app, Application)
    assert app.testing
    assert app.config["SQLALCHEMY_DATABASE_URI"]
    assert app.config["TAGGING_AUTOCOMMIT"] is True
    assert app.services == {"audit": audit_service, "tagging": tag_service}
    assert "sqlalchemy" in app.extensions


def test_services_not_started_when_testing(app_context):
    assert not tag_service.running
    assert not audit_service.running


def test_service_start_stop(app_context):
    audit_service.start()
    assert audit_service.running
    with pytest.raises(ServiceStateError):
        audit_service.start()

    audit_service.stop()
    assert not audit_service.running
    with pytest.raises(ServiceStateError):
        audit_service.stop()

    audit_service.stop(ignore_state=True)
    assert not audit_service.running


def test_components_registered_signal():
    apps = []

    def receiver(sender):
        apps.append(sender)

    signals.components_registered.connect(receiver)
    try:
        app = create_app(config=fixtures.TestConfig)
    finally:
        signals.components_registered.disconnect(receiver)
    assert apps == [app]


def test_default_logging(app):
    logger = logging.getLogger("billtag")
    assert logger.level == logging.INFO
    assert logger.handlers


def test_log_level(tmp_path):
    class Config(fixtures.TestConfig):
        LOG_LEVEL = "DEBUG"

    app = create_app(config=Config)
    assert app.logger.level == logging.DEBUG


def test_logging_config_file(tmp_path):
    config_file = tmp_path / "logging.yml"
    config_file.write_text("loggers:\n  billtag:\n    level: ERROR\n")

    class Config(fixtures.TestConfig):
        LOGGING_CONFIG_FILE = str(config_file)

    create_app(config=Config)
    assert logging.getLogger("billtag").level == logging.ERROR


def test_initdb_dropdb(app_context, cli_runner):
    result = cli_runner.invoke(args=["initdb"])
    assert result.exit_code == 0, result.output
    assert "tags" in sa.inspect(db.engine).get_table_names()

    result = cli_runner.invoke(args=["dropdb"], input="n\n")
    assert result.exit_code == 1
    assert "tags" in sa.inspect(db.engine).get_table_names()

    result = cli_runner.invoke(args=["dropdb", "--yes"])
    assert result.exit_code == 0, result.output
    assert sa.inspect(db.engine).get_table_names() == []
