from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.db import sessionmanager
from portal.llms.factories import build_llm_service
from portal.prompts.factories import build_prompt_service
from portal.rag.factories import build_rag_service
from portal.usecases.factories import build_use_case_scenario_service
from portal.workflow.agents import (
    DomainModellerService,
    EvaluatorService,
    IconixAgent,
    MVCModellerService,
    NarrativeWriterService,
    ScenarioWriterService,
    UseCaseModellerService,
)
from portal.workflow.repositories import WorkflowSessionRepository
from portal.workflow.services import OrchestratorService, WorkflowSessionService
from portal.workflow.workers import (
    ModelWorker,
    MVCWorker,
    NarrativeWorker,
    ReviewWorker,
    ScenarioWorker,
    UseCaseWorker,
    UserReviewWorker,
    WorkersRegistry,
)


async def build_workflow_session_service(db: AsyncSession) -> WorkflowSessionService:
    return WorkflowSessionService(session_repo=WorkflowSessionRepository(db=db))


async def build_agent[T: IconixAgent](agent_cls: type[T]) -> T:
    llm_service = await build_llm_service()
    return agent_cls(db=sessionmanager, llm_service=llm_service, prompt_service_factory=build_prompt_service)


async def build_workers_registry() -> WorkersRegistry:
    rag = dict(db=sessionmanager, rag_service_factory=build_rag_service)
    return WorkersRegistry(
        workers=[
            NarrativeWorker(**rag, narrative_writer=await build_agent(NarrativeWriterService)),
            UserReviewWorker(),
            ModelWorker(**rag, modeller=await build_agent(DomainModellerService)),
            ReviewWorker(**rag, evaluator=await build_agent(EvaluatorService)),
            UseCaseWorker(**rag, use_case_modeller=await build_agent(UseCaseModellerService)),
            MVCWorker(**rag, mvc_modeller=await build_agent(MVCModellerService)),
            ScenarioWorker(
                **rag,
                scenario_writer=await build_agent(ScenarioWriterService),
                scenario_service_factory=build_use_case_scenario_service,
            ),
        ]
    )


async def build_orchestrator_service() -> OrchestratorService:
    return OrchestratorService(
        db=sessionmanager,
        session_service_factory=build_workflow_session_service,
        workers_registry=await build_workers_registry(),
    )
