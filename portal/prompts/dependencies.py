from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.dependencies import get_db
from portal.prompts.factories import build_prompt_service
from portal.prompts.services import PromptService


async def get_prompt_service(db: AsyncSession = Depends(get_db)) -> PromptService:
    return await build_prompt_service(db)
