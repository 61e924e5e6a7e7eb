from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from portal.prompts.models import Prompt, PromptHistory
from portal.prompts.repositories import PromptHistoryRepository, PromptRepository


async def test_get_by_code__finds_prompt(db_session: AsyncSession, prompt_repository: PromptRepository):
    db_session.add(Prompt(code="repo_code", name="Repo", content="text"))
    await db_session.flush()

    prompt = await prompt_repository.get_by_code("repo_code")

    assert prompt is not None
    assert prompt.content == "text"
    assert await prompt_repository.get_by_code("unknown_code") is None


async def test_list_by_prompt__newest_first(
    db_session: AsyncSession, prompt_history_repository: PromptHistoryRepository
):
    prompt = Prompt(code="history_code", name="History", content="v3")
    db_session.add(prompt)
    await db_session.flush()
    db_session.add_all(
        [
            PromptHistory(prompt_id=prompt.id, content="v1", changed_at=datetime(2024, 1, 1)),
            PromptHistory(prompt_id=prompt.id, content="v2", changed_at=datetime(2024, 2, 1)),
        ]
    )
    await db_session.flush()

    history = await prompt_history_repository.list_by_prompt(prompt.id)

    assert [entry.content for entry in history] == ["v2", "v1"]
