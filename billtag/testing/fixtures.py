"""Configuration and injectable fixtures for Pytest.

Can be reused (and overriden) by adding::

   pytest_plugins = ['billtag.testing.fixtures']

to your `conftest.py`.
"""
import os
from datetime import datetime
from typing import Any, Iterator

import pytz
from flask import Flask
from flask.ctx import AppContext
from flask.testing import FlaskCliRunner
from flask_sqlalchemy import SQLAlchemy
from pytest import fixture
from sqlalchemy.orm import Session

from billtag.app import create_app
from billtag.core.callcontext import CallContext, CallOrigin, UserType
from billtag.core.clock import ClockMock
from billtag.services.tagging import TagDao, TagDefinitionDao, TagService
from billtag.testing.util import cleanup_db, ensure_services_started, \
    stop_all_services


class TestConfig:
    """Base class config settings for test cases.

    The environment variable :envvar:`SQLALCHEMY_DATABASE_URI` can be set
    to easily test against different databases.
    """

    TESTING = True
    DEBUG = True
    SECRET_KEY = "SECRET"
    SQLALCHEMY_DATABASE_URI = os.environ.get("SQLALCHEMY_DATABASE_URI", "sqlite://")
    SQLALCHEMY_ECHO = False
    TAGGING_AUTOCOMMIT = True


@fixture
def config() -> type:
    return TestConfig


@fixture
def app(config: Any) -> Flask:
    # We currently return a fresh app for each test.
    return create_app(config=config)


@fixture
def app_context(app: Flask) -> Iterator[AppContext]:
    with app.app_context() as ctx:
        yield ctx


@fixture
def db(app_context: AppContext) -> Iterator[SQLAlchemy]:
    """Return a fresh db for each test."""
    from billtag.core.extensions import db

    stop_all_services(app_context.app)
    ensure_services_started(["audit"])

    cleanup_db(db)
    db.create_all()
    yield db

    cleanup_db(db)
    stop_all_services(app_context.app)


@fixture
def session(db: SQLAlchemy) -> Session:
    return db.session


@fixture
def cli_runner(app: Flask) -> FlaskCliRunner:
    return app.test_cli_runner()


@fixture
def clock() -> ClockMock:
    return ClockMock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=pytz.utc))


@fixture
def tag_service(db: SQLAlchemy, clock: ClockMock) -> TagService:
    from billtag.services.tagging import tag_service

    ensure_services_started(["tagging"])
    tag_service.set_clock(clock)
    return tag_service


@fixture
def context(tag_service: TagService) -> CallContext:
    return tag_service.create_context(
        "tester", origin=CallOrigin.TEST, user_type=UserType.TEST
    )


@fixture
def definitions(tag_service: TagService) -> TagDefinitionDao:
    return tag_service.definitions


@fixture
def tag_dao(tag_service: TagService) -> TagDao:
    return tag_service.dao
