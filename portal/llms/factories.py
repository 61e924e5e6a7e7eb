from async_lru import alru_cache

from portal.core.config import settings
from portal.llms.registry import LLMFactory
from portal.llms.services import LLMService


@alru_cache
async def build_llm_factory_instance() -> LLMFactory:
    return LLMFactory()


async def build_llm_service() -> LLMService:
    llm_factory = await build_llm_factory_instance()
    return LLMService(settings=settings, llm_factory=llm_factory)
