from typing import Any, Dict

from flask import Flask
from werkzeug.datastructures import ImmutableDict


class DefaultConfig:
    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging: LOGGING_CONFIG_FILE is relative to the instance folder. When
    # unset, the packaged `default_logging.yml` is used.
    LOG_LEVEL = None
    LOGGING_CONFIG_FILE = None

    # Tagging: commit the session after each mutation. Set to False to
    # handle transactions in the calling code.
    TAGGING_AUTOCOMMIT = True


default_config = dict(Flask.default_config)  # type: Dict[str, Any]
default_config.update(
    {k: v for k, v in vars(DefaultConfig).items() if not k.startswith("_")}
)
default_config = ImmutableDict(default_config)
