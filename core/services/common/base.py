from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session


class ServiceBase:
    """Commit/rollback around a unit of work; a store without a session commits nothing."""

    _session: Optional[Session] = None

    def _commit(self) -> None:
        if self._session is None:
            return
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def _rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
