from sqlalchemy import select

from portal.commons.repositories import BaseRepository
from portal.workflow.models import WorkflowSession


class WorkflowSessionRepository(BaseRepository[WorkflowSession]):
    model = WorkflowSession

    async def list_newest_first(self) -> list[WorkflowSession]:
        result = await self.db.execute(
            select(self.model).order_by(self.model.created_at.desc(), self.model.request_id)
        )
        return list(result.scalars().all())
