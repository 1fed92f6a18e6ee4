"""Base class for data access objects."""
import logging
from typing import Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm
from flask import current_app
from sqlalchemy.orm import Session

from .extensions import db
from .transaction import session_for, transaction


class EntityDao:
    """Data access object bound to a session.

    Without an explicit session, the Flask-SQLAlchemy scoped session of the
    current application is used.
    """

    #: config key telling whether mutations commit the session
    autocommit_config_key: Optional[str] = None

    def __init__(
        self,
        session: Optional[Union[Session, sa.orm.scoped_session]] = None,
        autocommit: Optional[bool] = None,
    ) -> None:
        self._session = session
        self._autocommit = autocommit
        self.logger = logging.getLogger(self.__class__.__module__)

    @property
    def session(self) -> Session:
        return session_for(self._session if self._session is not None else db.session)

    @property
    def autocommit(self) -> bool:
        if self._autocommit is not None:
            return self._autocommit
        if self.autocommit_config_key is None:
            return True
        return current_app.config.get(self.autocommit_config_key, True)

    def transaction(self):
        """Atomic unit of work, see :func:`~billtag.core.transaction.transaction`."""
        return transaction(self.session, autocommit=self.autocommit)
