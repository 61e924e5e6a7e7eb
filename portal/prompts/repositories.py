from typing import Callable

from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.repositories import BaseRepository
from portal.prompts.models import Prompt, PromptHistory


class PromptRepository(BaseRepository[Prompt]):
    model = Prompt

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def get_by_code(self, code: str) -> Prompt | None:
        stmt = select(self.model).where(self.model.code == code)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> list[Prompt]:
        stmt = select(self.model).order_by(self.model.code)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Runs callback once, after the current transaction of the session commits."""
        event.listen(self.db.sync_session, "after_commit", lambda _session: callback(), once=True)


class PromptHistoryRepository(BaseRepository[PromptHistory]):
    model = PromptHistory

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def list_by_prompt(self, prompt_id: int) -> list[PromptHistory]:
        stmt = (
            select(self.model)
            .where(self.model.prompt_id == prompt_id)
            .order_by(self.model.changed_at.desc(), self.model.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
