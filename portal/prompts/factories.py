from sqlalchemy.ext.asyncio import AsyncSession

from portal.prompts.repositories import PromptHistoryRepository, PromptRepository
from portal.prompts.services import PromptService


async def build_prompt_service(db: AsyncSession) -> PromptService:
    return PromptService(
        prompt_repo=PromptRepository(db=db),
        history_repo=PromptHistoryRepository(db=db),
    )
