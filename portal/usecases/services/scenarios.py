import logging

from portal.usecases.models import UseCaseMvc, UseCaseScenario
from portal.usecases.repositories import UseCaseMvcRepository, UseCaseScenarioRepository
from portal.usecases.schemas import UseCaseMvcCreate, UseCaseScenarioCreate

logger = logging.getLogger(__name__)


class UseCaseScenarioService:
    def __init__(self, scenario_repo: UseCaseScenarioRepository):
        self.scenario_repo = scenario_repo

    async def save_scenario(
        self,
        request_id: str,
        content: str | None,
        alias: str | None = None,
        name: str | None = None,
    ) -> UseCaseScenario:
        scenario = await self.scenario_repo.create(
            obj_in=UseCaseScenarioCreate(
                request_id=request_id,
                use_case_alias=alias,
                use_case_name=name,
                scenario_content=content or "",
            )
        )
        logger.info(f"Saved scenario for requestId: {request_id}, alias: {alias}, length: {len(content or '')}")
        return scenario

    async def get_scenarios(self, request_id: str, alias: str | None = None) -> list[UseCaseScenario]:
        return await self.scenario_repo.list_by_request(request_id, alias)


class UseCaseMvcService:
    def __init__(self, mvc_repo: UseCaseMvcRepository):
        self.mvc_repo = mvc_repo

    async def save_mvc(self, request_id: str, alias: str | None, name: str | None, content: str | None) -> UseCaseMvc:
        mvc = await self.mvc_repo.create(
            obj_in=UseCaseMvcCreate(
                request_id=request_id,
                use_case_alias=alias,
                use_case_name=name,
                mvc_plantuml=content or "",
            )
        )
        logger.info(f"Saved MVC for requestId: {request_id}, alias: {alias}, length: {len(content or '')}")
        return mvc

    async def get_mvc_diagrams(self, request_id: str, alias: str | None = None) -> list[UseCaseMvc]:
        return await self.mvc_repo.list_by_request(request_id, alias)
