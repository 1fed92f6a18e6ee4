"""Unit of work helpers for services writing history and audit rows.

A :func:`transaction` block runs inside a SAVEPOINT: if anything fails, no
row written in the block survives. Signals registered with
:meth:`Transaction.notify` are queued on the session and only sent after the
enclosing database transaction commits (see :func:`send_pending_signals`).
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Tuple, Union

import sqlalchemy as sa
import sqlalchemy.orm
from blinker import Signal
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

#: key in `Session.info` holding signals waiting for commit
PENDING_SIGNALS_KEY = "billtag_pending_signals"


def session_for(session: Union[Session, sa.orm.scoped_session]) -> Session:
    """Return actual session instance for a session or a scoped session."""
    if isinstance(session, sa.orm.scoped_session):
        return session()
    return session


class Transaction:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.signals: List[Tuple[Signal, dict]] = []

    def notify(self, signal: Signal, **kwargs: Any) -> None:
        """Send `signal` once the changes are committed."""
        self.signals.append((signal, kwargs))


@contextmanager
def transaction(
    session: Union[Session, sa.orm.scoped_session], autocommit: bool = True
) -> Iterator[Transaction]:
    """Run the enclosed block atomically.

    With `autocommit`, the session is committed after the savepoint is
    released, and rolled back on any error so that its connection is given
    back to the pool. Otherwise the caller owns the enclosing transaction.
    """
    session = session_for(session)
    txn = Transaction(session)
    try:
        with session.begin_nested():
            yield txn
            session.flush()

        session.info.setdefault(PENDING_SIGNALS_KEY, []).extend(txn.signals)
        if autocommit:
            session.commit()
    except Exception:
        if autocommit:
            session.rollback()
        raise


def pop_pending_signals(session: Session) -> List[Tuple[Signal, dict]]:
    return session.info.pop(PENDING_SIGNALS_KEY, [])


def send_pending_signals(session: Session, sender: Any) -> None:
    """Send queued signals.

    A failing receiver is logged: the transaction is already committed.
    """
    for signal, kwargs in pop_pending_signals(session):
        try:
            signal.send(sender, **kwargs)
        except Exception:
            logger.error("Error while sending signal %r", signal.name, exc_info=True)
