import logging

from sqlalchemy.ext.asyncio import AsyncSession

from portal.prompts.defaults import DEFAULT_PROMPTS
from portal.prompts.factories import build_prompt_service
from portal.prompts.schemas import PromptCreate

logger = logging.getLogger(__name__)


async def initialize_default_prompts(db: AsyncSession) -> None:
    """
    Seeds every default prompt whose code is missing. Edited prompts are never overwritten.
    This should be called once at application startup.
    """
    logger.info("Checking and initializing prompts...")
    prompt_service = await build_prompt_service(db)
    existing_codes = {prompt.code for prompt in await prompt_service.list_prompts()}

    created = 0
    for definition in DEFAULT_PROMPTS:
        if definition["code"] in existing_codes:
            continue
        logger.info(f"Seeding prompt: {definition['code']}")
        await prompt_service.create_prompt(PromptCreate(**definition))
        created += 1

    if created:
        await db.commit()
    logger.info(f"Prompts initialized ({created} created).")
