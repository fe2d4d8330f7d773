from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from .db import SessionLocal
from .models import KeyValueModel


class KeyValueRepository:
    """String key-value storage backed by the ``kv_store`` table."""

    def __init__(self, session_factory: sessionmaker[Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            row = session.get(KeyValueModel, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            row = session.get(KeyValueModel, key)
            if row is None:
                session.add(KeyValueModel(key=key, value=value))
            else:
                row.value = value
            session.commit()
