"""
Transaction handle over a SQLAlchemy ORM `Session`.

    Session = sessionmaker(engine)
    scoped = scoped_session(Session)

    @transactional(SessionProvider(scoped))
    def create_user(name: str) -> None:
        scoped().add(User(name=name))

SQLAlchemy has no rollback-only flag of its own, so the adapter keeps one.
`SessionProvider` caches one adapter per session so nested calls share it.
"""

from __future__ import annotations

import weakref
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import PersistenceError
from ..ports import HandleProvider, TransactionHandle


class SessionTransaction(TransactionHandle):
    def __init__(self, session: Session) -> None:
        self.session = session
        self._rollback_only = False

    def is_active(self) -> bool:
        return self.session.in_transaction()

    def is_rollback_only(self) -> bool:
        return self._rollback_only

    def begin(self) -> None:
        self._rollback_only = False
        try:
            self.session.begin()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"begin failed: {exc}") from exc

    def commit(self) -> None:
        if self._rollback_only:
            self.rollback()
            raise PersistenceError("Transaction marked rollback-only")
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"commit failed: {exc}") from exc
        self._rollback_only = False

    def rollback(self) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"rollback failed: {exc}") from exc
        self._rollback_only = False

    def mark_rollback_only(self) -> None:
        self._rollback_only = True

    def __repr__(self) -> str:
        return f"<SessionTransaction session={id(self.session):#x}>"


class SessionProvider(HandleProvider):
    """
    Vends the SessionTransaction for whatever session `session_getter`
    currently returns (a `scoped_session` works as-is).
    """

    def __init__(self, session_getter: Callable[[], Session]) -> None:
        self._session_getter = session_getter
        self._handles: "weakref.WeakKeyDictionary[Session, SessionTransaction]" = (
            weakref.WeakKeyDictionary()
        )

    def get(self) -> SessionTransaction:
        session = self._session_getter()
        handle = self._handles.get(session)
        if handle is None:
            handle = SessionTransaction(session)
            self._handles[session] = handle
        return handle
