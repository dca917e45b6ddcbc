import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

logger = logging.getLogger(__name__)

async def check_db(session: AsyncSession) -> bool:
    """Run ``SELECT 1``; False (logged) when the database does not answer."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("database readiness check failed", exc_info=True)
        return False
