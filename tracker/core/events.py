"""
Event handlers for application lifecycle events.
"""
import logging

from tracker.core.config import settings

logger = logging.getLogger("tracker")


async def startup_event_handler() -> None:
    """
    Handle application startup.

    Create missing tables and check the database is reachable.
    """
    logger.info(f"Starting {settings.PROJECT_NAME}")

    from tracker.db.session import initialize_database
    await initialize_database()

    if settings.AZURE_AUTH_ENABLED:
        logger.info(f"Azure AD sign-in enabled for tenant {settings.AZURE_TENANT_ID}")

    logger.info(f"{settings.PROJECT_NAME} v{settings.VERSION} startup complete")


async def shutdown_event_handler() -> None:
    """
    Handle application shutdown.

    Close database connections.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")

    from tracker.db.session import close_database_connections
    await close_database_connections()

    logger.info("Shutdown complete")
