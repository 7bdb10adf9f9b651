"""BaseService — abstract foundation for nanocad services.

Every service receives a :class:`Session` at construction time. Services
own their transaction boundaries via ``self._session.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nanocad.infrastructure.session import Session


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class InterpreterService(BaseService):
            def execute_line(self, text: str) -> ServiceResult:
                with self._session.transaction() as session:
                    ...
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session
