"""Base class for services that own a unit of work."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple, Type

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from insurance_api.core.exceptions import (
    AppError,
    ConsistencyError,
    InternalError,
    TransientError,
)
from insurance_api.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService:
    """Base class for application services.

    A service is constructed per request with the request's database session.
    Repositories stage changes with ``flush()``; the service decides the
    transaction boundary through :meth:`transaction`.
    """

    def __init__(self, db_session: AsyncSession, logger: Optional[logging.Logger] = None):
        """Initialize the service.

        Args:
            db_session: SQLAlchemy async session shared by the service's repositories
            logger: Optional logger; defaults to the module logger
        """
        self.session = db_session
        self.logger = logger or LOGGER

    @asynccontextmanager
    async def transaction(
        self, passthrough: Tuple[Type[BaseException], ...] = ()
    ) -> AsyncIterator[AsyncSession]:
        """Run a block as one unit of work.

        Commits when the block exits cleanly and rolls back on any exception.
        Errors are translated into the application taxonomy:

        - ``AppError`` passes through unchanged
        - ``StaleDataError`` becomes ``ConsistencyError`` (concurrent update)
        - operational errors and dropped connections become ``TransientError``
        - anything else becomes ``InternalError``

        Exception types listed in ``passthrough`` are rolled back and re-raised
        as-is so the caller can recover from them.

        Args:
            passthrough: Exception types to re-raise untranslated

        Yields:
            AsyncSession: The service's session
        """
        try:
            yield self.session
            await self.session.commit()
        except BaseException as e:
            await self.session.rollback()

            if isinstance(e, AppError) or (passthrough and isinstance(e, passthrough)):
                raise
            if not isinstance(e, Exception):
                # CancelledError, KeyboardInterrupt
                raise

            raise self._translate_error(e) from e

    def _translate_error(self, error: Exception) -> AppError:
        service = self.__class__.__name__

        if isinstance(error, StaleDataError):
            self.logger.warning(
                "Concurrent modification detected",
                extra={"service": service, "error": str(error)},
            )
            return ConsistencyError(
                "The record was modified concurrently; reload and retry", original_error=error
            )

        if isinstance(error, OperationalError) or (
            isinstance(error, DBAPIError) and error.connection_invalidated
        ):
            self.logger.error(
                "Database temporarily unavailable",
                exc_info=True,
                extra={"service": service},
            )
            return TransientError("Database temporarily unavailable", original_error=error)

        if isinstance(error, SQLAlchemyError):
            self.logger.error(
                f"Database operation failed: {str(error)}",
                exc_info=True,
                extra={"service": service},
            )
            return InternalError("Database operation failed", original_error=error)

        self.logger.error(
            f"Service execution failed: {str(error)}",
            exc_info=True,
            extra={"service": service},
        )
        return InternalError(f"Service execution failed: {str(error)}", original_error=error)
