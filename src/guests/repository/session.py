import contextlib
from collections.abc import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import StoreError


@contextlib.asynccontextmanager
async def store_session(
    session_overwrite: AsyncSession | None = None,
) -> AsyncIterator[AsyncSession]:
    """Session scope for a single store call; database failures surface as StoreError."""
    try:
        async with async_session_manager(session_overwrite=session_overwrite) as session:
            yield session
    except SQLAlchemyError as e:
        raise StoreError(str(e)) from e
