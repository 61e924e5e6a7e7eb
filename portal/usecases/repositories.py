from sqlalchemy import select

from portal.commons.repositories import BaseRepository
from portal.usecases.models import UseCaseMvc, UseCaseScenario


class UseCaseScenarioRepository(BaseRepository[UseCaseScenario]):
    model = UseCaseScenario

    async def list_by_request(self, request_id: str, alias: str | None = None) -> list[UseCaseScenario]:
        query = select(self.model).where(self.model.request_id == request_id)
        if alias is not None:
            query = query.where(self.model.use_case_alias == alias)
        result = await self.db.execute(query.order_by(self.model.created_at.desc()))
        return list(result.scalars().all())


class UseCaseMvcRepository(BaseRepository[UseCaseMvc]):
    model = UseCaseMvc

    async def list_by_request(self, request_id: str, alias: str | None = None) -> list[UseCaseMvc]:
        query = select(self.model).where(self.model.request_id == request_id)
        if alias is not None:
            query = query.where(self.model.use_case_alias == alias)
        result = await self.db.execute(query.order_by(self.model.created_at.desc()))
        return list(result.scalars().all())
