import logging
from datetime import datetime
from string import Template
from typing import ClassVar

from portal.prompts.exceptions import PromptNotFoundException, PromptValidationException
from portal.prompts.models import Prompt, PromptHistory
from portal.prompts.repositories import PromptHistoryRepository, PromptRepository
from portal.prompts.schemas import PromptCreate, PromptHistoryCreate, PromptUpdate

logger = logging.getLogger(__name__)

CHANGE_REASON_MAX_LENGTH = 500


class PromptService:
    # code -> content, shared by every instance of the process
    _cache: ClassVar[dict[str, str]] = {}

    def __init__(self, prompt_repo: PromptRepository, history_repo: PromptHistoryRepository):
        self.prompt_repo = prompt_repo
        self.history_repo = history_repo

    async def get_by_code(self, code: str) -> str:
        """Returns the template text for a code, served from the cache when possible."""
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        prompt = await self.get_prompt(code)
        self._cache[code] = prompt.content
        logger.debug(f"Prompt '{code}' loaded from database and cached")
        return prompt.content

    async def render(self, code: str, **values: str) -> str:
        """Substitutes $placeholders of the template. Unknown placeholders are left as-is."""
        template = await self.get_by_code(code)
        return Template(template).safe_substitute(values)

    async def get_prompt(self, code: str) -> Prompt:
        prompt = await self.prompt_repo.get_by_code(code)
        if not prompt:
            raise PromptNotFoundException(f"Prompt with code '{code}' not found.")
        return prompt

    async def list_prompts(self) -> list[Prompt]:
        return await self.prompt_repo.list_all()

    async def create_prompt(self, prompt_in: PromptCreate) -> Prompt:
        return await self.prompt_repo.create(obj_in=prompt_in)

    async def update_prompt(
        self,
        code: str,
        content: str,
        changed_by: str | None = None,
        reason: str | None = None,
    ) -> Prompt:
        """
        Replaces the content of a prompt.
        The previous content is archived in the history first. The cache entry is dropped once the
        transaction commits, so a concurrent read cannot cache the old text again.
        """
        if content is None or not content.strip():
            raise PromptValidationException("Prompt content cannot be empty")
        if reason and len(reason) > CHANGE_REASON_MAX_LENGTH:
            raise PromptValidationException(f"Change reason must be at most {CHANGE_REASON_MAX_LENGTH} characters")

        prompt = await self.get_prompt(code)
        now = datetime.now()
        await self.history_repo.create(
            obj_in=PromptHistoryCreate(
                prompt_id=prompt.id,
                content=prompt.content,
                changed_at=now,
                changed_by=changed_by,
                change_reason=reason or None,
            )
        )
        prompt = await self.prompt_repo.update(
            db_obj=prompt, obj_in=PromptUpdate(content=content, updated_at=now, updated_by=changed_by)
        )
        self.prompt_repo.on_commit(lambda: self._cache.pop(code, None))
        logger.info(f"Prompt '{code}' updated, previous version archived")
        return prompt

    async def get_history(self, code: str) -> list[PromptHistory]:
        prompt = await self.get_prompt(code)
        return await self.history_repo.list_by_prompt(prompt.id)

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()
