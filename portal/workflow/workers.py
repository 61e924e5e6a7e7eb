import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.db import DatabaseSessionManager
from portal.rag.schemas import ContextResult
from portal.rag.services import RagService
from portal.usecases.services.scenarios import UseCaseScenarioService
from portal.workflow.agents import (
    DomainModellerService,
    EvaluatorService,
    MVCModellerService,
    NarrativeWriterService,
    ScenarioWriterService,
    UseCaseModellerService,
)
from portal.workflow.context import WorkerContext
from portal.workflow.enums import StateKey, WorkerTool
from portal.workflow.exceptions import MissingArtifactException, PauseForUserReview, UnknownWorkerException
from portal.workflow.schemas import Issue

logger = logging.getLogger(__name__)

NO_GOAL_MESSAGE = "Goal or task description is not set. Enter the goal and run the workflow again."
MISSING_DOMAIN_MODEL = "No domain model (plantuml) in context; run model first."
MISSING_USE_CASE_MODEL = "No use case model (useCaseModel) in context; run usecase first."
MISSING_MVC_MODEL = "No MVC model (mvcDiagram) in context; run mvc first."


def _first_non_blank(*values: Any) -> str:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _require(ctx: WorkerContext, key: StateKey, message: str) -> str:
    value = ctx.artifact(key)
    if not value.strip():
        raise MissingArtifactException(message)
    return value


class Worker(ABC):
    name: ClassVar[str]

    @abstractmethod
    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None: ...


class RagWorker(Worker, ABC):
    """A worker that grounds its agent in documents of the vector store."""

    rag_top_k: ClassVar[int] = 4

    def __init__(self, db: DatabaseSessionManager, rag_service_factory: Callable[[AsyncSession], Awaitable[RagService]]):
        self.db = db
        self.rag_service_factory = rag_service_factory

    async def _retrieve(self, ctx: WorkerContext, query: str) -> ContextResult:
        async with self.db.session() as session:
            rag_service = await self.rag_service_factory(session)
            result = await rag_service.retrieve_context(query, self.rag_top_k)
        ctx.log(
            f"rag.{self.name}: fragments={result.fragments_count}, "
            f"vs={str(result.vector_store_available).lower()}"
        )
        return result


class NarrativeWorker(RagWorker):
    name = WorkerTool.NARRATIVE

    def __init__(self, db, rag_service_factory, narrative_writer: NarrativeWriterService):
        super().__init__(db, rag_service_factory)
        self.narrative_writer = narrative_writer

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        description = _first_non_blank(args.get("description"), ctx.task, ctx.goal)
        if not description:
            if ctx.narrative.strip():
                ctx.log("narrative.skipped: provided by user")
                return
            logger.warning("Goal is empty, narrative is not generated")
            ctx.log("narrative.skipped: goal empty")
            ctx.override_narrative(NO_GOAL_MESSAGE)
            return

        rag = await self._retrieve(ctx, _first_non_blank(ctx.goal, description))
        generated = await self.narrative_writer.compose_narrative(description, ctx.goal, rag.text)
        ctx.override_narrative(generated)
        ctx.log(f"narrative.generated: chars={len(generated or '')}")


class UserReviewWorker(Worker):
    name = WorkerTool.USER_REVIEW

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        review_data: dict[str, Any] = {"narrative": ctx.narrative_effective()}
        if StateKey.PLANTUML in ctx.state:
            review_data["domainModel"] = ctx.state[StateKey.PLANTUML]
        if StateKey.ISSUES in ctx.state:
            review_data["issues"] = ctx.state[StateKey.ISSUES]
        if StateKey.NARRATIVE_ISSUES in ctx.state:
            review_data["narrativeIssues"] = ctx.state[StateKey.NARRATIVE_ISSUES]

        ctx.log("userReview: paused for user review")
        raise PauseForUserReview(
            ctx.request_id, review_data, "Workflow paused for user review. Please review and provide feedback."
        )


class ModelWorker(RagWorker):
    name = WorkerTool.MODEL

    def __init__(self, db, rag_service_factory, modeller: DomainModellerService):
        super().__init__(db, rag_service_factory)
        self.modeller = modeller

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        mode = str(args.get("mode", "generate"))
        model = ctx.artifact(StateKey.PLANTUML)
        narrative = ctx.narrative_effective()
        rag = await self._retrieve(ctx, narrative)

        if mode.lower() == "generate" or not model.strip():
            model = await self.modeller.generate(narrative, rag.text)
            ctx.log(f"model.generate: {len(model)} chars")
        else:
            issues = [Issue.model_validate(raw) for raw in ctx.state.get(StateKey.ISSUES) or []]
            model = await self.modeller.refine(narrative, model, issues, rag.text)
            ctx.log(f"model.refine: {len(model)} chars")
        ctx.state[StateKey.PLANTUML] = model


class ReviewWorker(RagWorker):
    name = WorkerTool.REVIEW

    def __init__(self, db, rag_service_factory, evaluator: EvaluatorService):
        super().__init__(db, rag_service_factory)
        self.evaluator = evaluator

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        target = str(args.get("target", "model"))
        narrative = ctx.narrative_effective()
        rag = await self._retrieve(ctx, narrative)

        if target.lower() == "narrative":
            issues = await self.evaluator.evaluate_narrative(narrative, rag.text)
            ctx.state[StateKey.NARRATIVE_ISSUES] = [issue.model_dump() for issue in issues]
            ctx.log(f"review.narrative: issues={len(issues)}")
            return

        model = _require(ctx, StateKey.PLANTUML, "No PlantUML in context; run model first.")
        issues = await self.evaluator.evaluate_model(narrative, rag.text, model)
        ctx.state[StateKey.ISSUES] = [issue.model_dump() for issue in issues]
        ctx.log(f"review.model: issues={len(issues)}")


class UseCaseWorker(RagWorker):
    name = WorkerTool.USE_CASE

    def __init__(self, db, rag_service_factory, use_case_modeller: UseCaseModellerService):
        super().__init__(db, rag_service_factory)
        self.use_case_modeller = use_case_modeller

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        narrative = ctx.narrative_effective()
        domain_model = _require(ctx, StateKey.PLANTUML, MISSING_DOMAIN_MODEL)
        rag = await self._retrieve(ctx, narrative)

        use_case_model = await self.use_case_modeller.generate(narrative, domain_model, rag.text)
        ctx.state[StateKey.USE_CASE_MODEL] = use_case_model
        ctx.log(f"usecase.generate: {len(use_case_model)} chars")


class MVCWorker(RagWorker):
    name = WorkerTool.MVC

    def __init__(self, db, rag_service_factory, mvc_modeller: MVCModellerService):
        super().__init__(db, rag_service_factory)
        self.mvc_modeller = mvc_modeller

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        narrative = ctx.narrative_effective()
        domain_model = _require(ctx, StateKey.PLANTUML, MISSING_DOMAIN_MODEL)
        use_case_model = _require(ctx, StateKey.USE_CASE_MODEL, MISSING_USE_CASE_MODEL)
        rag = await self._retrieve(ctx, narrative)

        mvc_model = await self.mvc_modeller.generate(narrative, domain_model, use_case_model, rag.text)
        ctx.state[StateKey.MVC_DIAGRAM] = mvc_model
        ctx.log(f"mvc.generate: {len(mvc_model)} chars")


class ScenarioWorker(RagWorker):
    name = WorkerTool.SCENARIO

    def __init__(
        self,
        db,
        rag_service_factory,
        scenario_writer: ScenarioWriterService,
        scenario_service_factory: Callable[[AsyncSession], Awaitable[UseCaseScenarioService]],
    ):
        super().__init__(db, rag_service_factory)
        self.scenario_writer = scenario_writer
        self.scenario_service_factory = scenario_service_factory

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        narrative = ctx.narrative_effective()
        domain_model = _require(ctx, StateKey.PLANTUML, MISSING_DOMAIN_MODEL)
        use_case_model = _require(ctx, StateKey.USE_CASE_MODEL, MISSING_USE_CASE_MODEL)
        mvc_model = _require(ctx, StateKey.MVC_DIAGRAM, MISSING_MVC_MODEL)
        rag = await self._retrieve(ctx, narrative)

        scenario = await self.scenario_writer.generate(narrative, domain_model, use_case_model, mvc_model, rag.text)
        async with self.db.session() as session:
            scenario_service = await self.scenario_service_factory(session)
            await scenario_service.save_scenario(ctx.request_id, scenario)
        ctx.state[StateKey.SCENARIO] = scenario
        ctx.log(f"scenario.generate: {len(scenario)} chars")


class WorkersRegistry:
    def __init__(self, workers: list[Worker]):
        self._workers = {worker.name: worker for worker in workers}

    def get(self, tool: str) -> Worker:
        worker = self._workers.get(tool)
        if worker is None:
            raise UnknownWorkerException(f"Unknown tool: {tool}")
        return worker
