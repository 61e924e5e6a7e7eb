import logging

from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.factories import build_user_service
from portal.core.config import settings

logger = logging.getLogger(__name__)


async def initialize_default_admin(db: AsyncSession) -> None:
    """
    Creates the default administrator when the users table is empty.
    This should be called once at application startup.
    """
    logger.info("Checking and initializing users...")
    user_service = await build_user_service(db)
    if await user_service.has_users():
        logger.info("Users already initialized.")
        return

    await user_service.create_user(
        settings.DEFAULT_ADMIN_USERNAME,
        settings.DEFAULT_ADMIN_PASSWORD,
        is_admin=True,
    )
    await db.commit()
    logger.warning(
        f"Default administrator '{settings.DEFAULT_ADMIN_USERNAME}' created. Change its password after first login."
    )
