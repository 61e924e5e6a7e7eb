import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.db import DatabaseSessionManager
from portal.rag.services import RagService
from portal.render.filters import filter_mvc_model, filter_use_case_model, shorten_narrative, truncate_plantuml
from portal.usecases.exceptions import DecompositionException
from portal.usecases.schemas import DecompositionRequest, DecompositionResponse, DecompositionResult
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService
from portal.workflow.agents import ScenarioWriterService
from portal.workflow.enums import StateKey
from portal.workflow.services import WorkflowSessionService

logger = logging.getLogger(__name__)

MODEL_MAX_LENGTH = 8000
NARRATIVE_MAX_LENGTH = 2000
RAG_TOP_K = 2


class DecompositionService:
    """Writes one scenario per selected use case from the models of a finished workflow session."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        session_service_factory: Callable[[AsyncSession], Awaitable[WorkflowSessionService]],
        scenario_service_factory: Callable[[AsyncSession], Awaitable[UseCaseScenarioService]],
        mvc_service_factory: Callable[[AsyncSession], Awaitable[UseCaseMvcService]],
        rag_service_factory: Callable[[AsyncSession], Awaitable[RagService]],
        scenario_writer: ScenarioWriterService,
    ):
        self.db = db
        self.session_service_factory = session_service_factory
        self.scenario_service_factory = scenario_service_factory
        self.mvc_service_factory = mvc_service_factory
        self.rag_service_factory = rag_service_factory
        self.scenario_writer = scenario_writer

    async def decompose(self, request_in: DecompositionRequest) -> DecompositionResponse:
        logger.info(f"Decomposition request: requestId={request_in.request_id}, useCases={len(request_in.use_cases)}")
        results = []
        for use_case in request_in.use_cases:
            name = use_case.name or use_case.alias
            try:
                scenario = await self.decompose_use_case(request_in.request_id, use_case.alias, name)
            except Exception as e:
                logger.error(f"Failed to decompose use case {name} ({use_case.alias})", exc_info=True)
                results.append(
                    DecompositionResult(use_case_alias=use_case.alias, use_case_name=name, success=False, error=str(e))
                )
                continue
            results.append(
                DecompositionResult(use_case_alias=use_case.alias, use_case_name=name, scenario=scenario, success=True)
            )
        return DecompositionResponse(results=results)

    async def decompose_use_case(self, request_id: str, alias: str, name: str) -> str:
        logger.info(f"Starting decomposition for use case: {name} (alias: {alias}), requestId: {request_id}")
        async with self.db.session() as session:
            session_service = await self.session_service_factory(session)
            artifacts = (await session_service.get_session_data(request_id)).artifacts

        narrative = artifacts.get("narrative") or ""
        domain_model = artifacts.get(StateKey.PLANTUML) or ""
        use_case_model = artifacts.get(StateKey.USE_CASE_MODEL) or ""
        mvc_model = artifacts.get(StateKey.MVC_DIAGRAM) or ""
        if not domain_model.strip():
            raise DecompositionException("Domain model is required for use case decomposition")
        if not use_case_model.strip():
            raise DecompositionException("Use case model is required for use case decomposition")
        if not mvc_model.strip():
            raise DecompositionException("MVC model is required for use case decomposition")

        filtered_use_case_model = truncate_plantuml(filter_use_case_model(use_case_model, alias, name), MODEL_MAX_LENGTH)
        filtered_mvc_model = truncate_plantuml(filter_mvc_model(mvc_model, alias), MODEL_MAX_LENGTH)
        domain_model = truncate_plantuml(domain_model, MODEL_MAX_LENGTH)
        shortened_narrative = shorten_narrative(narrative, name, NARRATIVE_MAX_LENGTH) or ""

        async with self.db.session() as session:
            rag_service = await self.rag_service_factory(session)
            rag = await rag_service.retrieve_context(f"{name} {alias}", RAG_TOP_K)
        logger.info(f"RAG context retrieved: {rag.fragments_count} fragments")

        logger.info(
            f"Using filtered models - use case: {len(filtered_use_case_model)} chars (was {len(use_case_model)}), "
            f"MVC: {len(filtered_mvc_model)} chars (was {len(mvc_model)}), domain: {len(domain_model)} chars, "
            f"narrative: {len(shortened_narrative)} chars (was {len(narrative)})"
        )
        enhanced_narrative = f"{shortened_narrative}\n\nSelected use case for decomposition: {name}"
        scenario = await self.scenario_writer.generate(
            enhanced_narrative, domain_model, filtered_use_case_model, filtered_mvc_model, rag.text
        )

        async with self.db.session() as session:
            scenario_service = await self.scenario_service_factory(session)
            await scenario_service.save_scenario(request_id, scenario, alias=alias, name=name)
            mvc_service = await self.mvc_service_factory(session)
            await mvc_service.save_mvc(request_id, alias, name, filtered_mvc_model)

        logger.info(f"Scenario for use case {alias} generated: {len(scenario)} chars")
        return scenario
