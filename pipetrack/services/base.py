from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base class for services. Holds a session for use across multiple repositories.

    Services keep business logic and orchestration, delegating data access
    to repositories, and own the transaction boundary via unit_of_work.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[AsyncSession]:
        """
        Run the enclosed block as one transaction.

        Commits on success. On any error the whole transaction is rolled back;
        storage errors are re-raised as PersistenceError, everything else
        propagates unchanged.
        """
        try:
            yield self.session
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Transaction rolled back after storage error")
            raise PersistenceError("Storage operation failed; no changes were applied") from exc
        except BaseException:
            await self.session.rollback()
            raise
