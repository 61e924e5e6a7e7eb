import logging
import os

from portal.core.config import settings

logger = logging.getLogger(__name__)


def initialize_workspace() -> None:
    """
    Ensures the workspace directories exist.
    """
    logger.info("Initializing workspace...")
    os.makedirs(settings.DOCUMENTATION_OUTPUT_DIR, exist_ok=True)
    logger.info(f"Documentation output directory: {settings.DOCUMENTATION_OUTPUT_DIR}")
