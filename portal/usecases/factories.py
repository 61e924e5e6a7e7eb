from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.core.db import sessionmanager
from portal.llms.factories import build_llm_service
from portal.prompts.factories import build_prompt_service
from portal.rag.factories import build_rag_service
from portal.usecases.repositories import UseCaseMvcRepository, UseCaseScenarioRepository
from portal.usecases.services.decomposition import DecompositionService
from portal.usecases.services.documentation import DocumentationService
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService
from portal.workflow.agents import ScenarioWriterService
from portal.workflow.repositories import WorkflowSessionRepository
from portal.workflow.services import WorkflowSessionService


async def build_use_case_scenario_service(db: AsyncSession) -> UseCaseScenarioService:
    return UseCaseScenarioService(scenario_repo=UseCaseScenarioRepository(db=db))


async def build_use_case_mvc_service(db: AsyncSession) -> UseCaseMvcService:
    return UseCaseMvcService(mvc_repo=UseCaseMvcRepository(db=db))


# portal.workflow.factories imports this module, so the session service is assembled here
async def _build_session_service(db: AsyncSession) -> WorkflowSessionService:
    return WorkflowSessionService(session_repo=WorkflowSessionRepository(db=db))


async def build_decomposition_service() -> DecompositionService:
    scenario_writer = ScenarioWriterService(
        db=sessionmanager, llm_service=await build_llm_service(), prompt_service_factory=build_prompt_service
    )
    return DecompositionService(
        db=sessionmanager,
        session_service_factory=_build_session_service,
        scenario_service_factory=build_use_case_scenario_service,
        mvc_service_factory=build_use_case_mvc_service,
        rag_service_factory=build_rag_service,
        scenario_writer=scenario_writer,
    )


async def build_documentation_service(db: AsyncSession) -> DocumentationService:
    return DocumentationService(
        session_service=await _build_session_service(db),
        scenario_service=await build_use_case_scenario_service(db),
        mvc_service=await build_use_case_mvc_service(db),
        output_dir=settings.DOCUMENTATION_OUTPUT_DIR,
    )
