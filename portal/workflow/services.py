import logging
import uuid
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.db import DatabaseSessionManager
from portal.workflow.context import WorkerContext
from portal.workflow.enums import StateKey, WorkerTool, WorkflowStatus
from portal.workflow.exceptions import (
    PauseForUserReview,
    WorkflowSessionNotFoundException,
    WorkflowStateException,
    WorkflowValidationException,
)
from portal.workflow.models import WorkflowSession
from portal.workflow.repositories import WorkflowSessionRepository
from portal.workflow.schemas import (
    OrchestratorPlan,
    PlanStep,
    WorkflowResponse,
    WorkflowResumeRequest,
    WorkflowRunRequest,
    WorkflowSessionCreate,
    WorkflowSessionSummary,
    WorkflowSessionUpdate,
)
from portal.workflow.workers import WorkersRegistry

logger = logging.getLogger(__name__)

REQUEST_ID_MAX_LENGTH = 64
STATUS_ARTIFACT = "_status"
REVIEW_DATA_ARTIFACT = "_reviewData"
DEFAULT_PLAN_DESCRIPTION = (
    "Narrative → UserReview → Model → Review → Model(refine) → UseCase → MVC → Scenario. "
    "The narrative is reviewed before any model is built."
)


def build_default_plan() -> OrchestratorPlan:
    return OrchestratorPlan(
        description=DEFAULT_PLAN_DESCRIPTION,
        plan=[
            PlanStep(tool=WorkerTool.NARRATIVE),
            PlanStep(tool=WorkerTool.USER_REVIEW),
            PlanStep(tool=WorkerTool.MODEL, args={"mode": "generate"}),
            PlanStep(tool=WorkerTool.REVIEW, args={"target": "model"}),
            PlanStep(tool=WorkerTool.MODEL, args={"mode": "refine"}),
            PlanStep(tool=WorkerTool.USE_CASE),
            PlanStep(tool=WorkerTool.MVC),
            PlanStep(tool=WorkerTool.SCENARIO),
        ],
    )


def build_core_artifacts(ctx: WorkerContext) -> dict[str, Any]:
    """Artifacts exposed to clients: the effective narrative plus whatever the workers produced."""
    artifacts: dict[str, Any] = {"narrative": ctx.narrative_effective()}
    for key in (
        StateKey.PLANTUML,
        StateKey.ISSUES,
        StateKey.NARRATIVE_ISSUES,
        StateKey.USE_CASE_MODEL,
        StateKey.MVC_DIAGRAM,
    ):
        if key in ctx.state:
            artifacts[key] = ctx.state[key]
    scenario = ctx.state.get(StateKey.SCENARIO)
    if scenario:
        artifacts["scenarios"] = [scenario]
    return artifacts


class WorkflowSessionService:
    def __init__(self, session_repo: WorkflowSessionRepository):
        self.session_repo = session_repo

    async def load_session(self, request_id: str) -> WorkflowSession | None:
        return await self.session_repo.get(pk=request_id)

    async def get_session(self, request_id: str) -> WorkflowSession:
        session = await self.load_session(request_id)
        if not session:
            raise WorkflowSessionNotFoundException(f"Session not found: {request_id}")
        return session

    async def save_session(
        self,
        ctx: WorkerContext,
        plan: OrchestratorPlan,
        current_step_index: int,
        status: WorkflowStatus,
        user_review_data: dict[str, Any] | None = None,
    ) -> WorkflowSession:
        values = dict(
            narrative=ctx.narrative_effective(),
            goal=ctx.goal,
            task=ctx.task,
            context_state=dict(ctx.state),
            logs=list(ctx.logs),
            plan=plan.model_dump(mode="json"),
            current_step_index=current_step_index,
            status=status,
            user_review_data=user_review_data,
        )
        existing = await self.load_session(ctx.request_id)
        if existing:
            return await self.session_repo.update(db_obj=existing, obj_in=WorkflowSessionUpdate(**values))
        return await self.session_repo.create(obj_in=WorkflowSessionCreate(request_id=ctx.request_id, **values))

    async def list_sessions(self) -> list[WorkflowSessionSummary]:
        sessions = await self.session_repo.list_newest_first()
        return [WorkflowSessionSummary.model_validate(session) for session in sessions]

    async def get_session_data(self, request_id: str) -> WorkflowResponse:
        session = await self.get_session(request_id)
        ctx = self.restore_context(session)

        artifacts = build_core_artifacts(ctx)
        artifacts[STATUS_ARTIFACT] = session.status
        if session.user_review_data:
            artifacts[REVIEW_DATA_ARTIFACT] = session.user_review_data

        plan = OrchestratorPlan.model_validate(session.plan) if session.plan else None
        return WorkflowResponse(request_id=session.request_id, orchestrator=plan, artifacts=artifacts, logs=ctx.logs)

    @staticmethod
    def restore_context(session: WorkflowSession) -> WorkerContext:
        return WorkerContext(
            request_id=session.request_id,
            narrative=session.narrative or "",
            goal=session.goal or "",
            task=session.task or "",
            state=dict(session.context_state or {}),
            logs=list(session.logs or []),
        )

    @staticmethod
    def restore_plan(session: WorkflowSession) -> OrchestratorPlan:
        if not session.plan:
            raise WorkflowStateException(f"Plan is missing for session: {session.request_id}")
        return OrchestratorPlan.model_validate(session.plan)

    async def update_context_from_user_input(
        self, request_id: str, narrative: str | None = None, domain_model: str | None = None
    ) -> WorkflowSession:
        """Applies the edits made during the review pause."""
        session = await self.get_session(request_id)
        state = dict(session.context_state or {})
        session_in = WorkflowSessionUpdate()

        if narrative and narrative.strip():
            session_in.narrative = narrative
            # the generated narrative lives in the override, the edit must replace it
            state[StateKey.NARRATIVE_OVERRIDE] = narrative
        if domain_model and domain_model.strip():
            state[StateKey.PLANTUML] = domain_model
        session_in.context_state = state

        return await self.session_repo.update(db_obj=session, obj_in=session_in)

    async def set_documentation_folder(self, request_id: str, folder_name: str) -> WorkflowSession:
        session = await self.get_session(request_id)
        return await self.session_repo.update(
            db_obj=session, obj_in=WorkflowSessionUpdate(documentation_folder_name=folder_name)
        )


class OrchestratorService:
    """
    Runs the ICONIX plan step by step.

    Progress is committed before every step in a transaction of its own, so a
    failing step leaves the session FAILED and a pause leaves it resumable.
    """

    def __init__(
        self,
        db: DatabaseSessionManager,  # the manager, not a session
        session_service_factory: Callable[[AsyncSession], Awaitable[WorkflowSessionService]],
        workers_registry: WorkersRegistry,
    ):
        self.db = db
        self.session_service_factory = session_service_factory
        self.workers_registry = workers_registry

    async def run(self, request_in: WorkflowRunRequest) -> WorkflowResponse:
        request_id = (request_in.request_id or "").strip() or str(uuid.uuid4())
        if len(request_id) > REQUEST_ID_MAX_LENGTH:
            raise WorkflowValidationException(f"requestId must be at most {REQUEST_ID_MAX_LENGTH} characters")

        goal = (request_in.goal or "").strip()
        task = (request_in.task or "").strip()
        narrative = (request_in.narrative or "").strip()
        if not (goal or task or narrative):
            raise WorkflowValidationException("Goal is required")

        async with self.db.session() as session:
            session_service = await self.session_service_factory(session)
            existing = await session_service.load_session(request_id)
        if existing and existing.status == WorkflowStatus.PAUSED_FOR_REVIEW:
            raise WorkflowStateException(
                f"Session {request_id} is paused for review. Use POST /workflow/resume with requestId, "
                f"narrative and domainModel."
            )

        preview = goal[:100] + ("..." if len(goal) > 100 else "")
        logger.info(f"Starting workflow {request_id}, goal length: {len(goal)} chars, preview: {preview or '(empty)'}")

        ctx = WorkerContext(request_id=request_id, narrative=narrative, goal=goal, task=task)
        plan = build_default_plan()
        ctx.log("plan: Narrative → UserReview → Model → Review → Model(refine) → UseCase → MVC → Scenario")
        return await self._execute(ctx, plan, 0)

    async def resume(self, request_in: WorkflowResumeRequest) -> WorkflowResponse:
        request_id = request_in.request_id
        async with self.db.session() as session:
            session_service = await self.session_service_factory(session)
            workflow_session = await session_service.get_session(request_id)
            if workflow_session.status != WorkflowStatus.PAUSED_FOR_REVIEW:
                raise WorkflowStateException(f"Session is not paused for review: {request_id}")

            workflow_session = await session_service.update_context_from_user_input(
                request_id, request_in.narrative, request_in.domain_model
            )
            ctx = session_service.restore_context(workflow_session)
            plan = session_service.restore_plan(workflow_session)
            start_index = workflow_session.current_step_index + 1

        logger.info(f"Resuming workflow {request_id} at step {start_index + 1}/{len(plan.plan)}")
        return await self._execute(ctx, plan, start_index)

    async def _execute(self, ctx: WorkerContext, plan: OrchestratorPlan, start_index: int) -> WorkflowResponse:
        steps = plan.plan
        current_index = start_index
        try:
            for index in range(start_index, len(steps)):
                current_index = index
                step = steps[index]
                logger.info(f"Executing step {index + 1}/{len(steps)}: '{step.tool}' args={step.args or {}}")
                await self._save(ctx, plan, index, WorkflowStatus.RUNNING)

                worker = self.workers_registry.get(step.tool)
                try:
                    await worker.execute(ctx, step.args or {})
                except PauseForUserReview as pause:
                    logger.info(f"Workflow {ctx.request_id} paused for user review at step {index + 1}")
                    await self._save(ctx, plan, index, WorkflowStatus.PAUSED_FOR_REVIEW, pause.review_data)
                    artifacts = build_core_artifacts(ctx)
                    artifacts[STATUS_ARTIFACT] = WorkflowStatus.PAUSED_FOR_REVIEW
                    artifacts[REVIEW_DATA_ARTIFACT] = pause.review_data
                    return WorkflowResponse(request_id=ctx.request_id, orchestrator=plan, artifacts=artifacts, logs=ctx.logs)

            await self._save(ctx, plan, current_index, WorkflowStatus.COMPLETED)
        except Exception:
            logger.error(f"Workflow {ctx.request_id} failed at step {current_index + 1}", exc_info=True)
            await self._save(ctx, plan, current_index, WorkflowStatus.FAILED)
            raise

        logger.info(f"Workflow {ctx.request_id} completed")
        artifacts = build_core_artifacts(ctx)
        artifacts[STATUS_ARTIFACT] = WorkflowStatus.COMPLETED
        return WorkflowResponse(request_id=ctx.request_id, orchestrator=plan, artifacts=artifacts, logs=ctx.logs)

    async def _save(
        self,
        ctx: WorkerContext,
        plan: OrchestratorPlan,
        step_index: int,
        status: WorkflowStatus,
        review_data: dict[str, Any] | None = None,
    ) -> None:
        async with self.db.session() as session:
            session_service = await self.session_service_factory(session)
            await session_service.save_session(ctx, plan, step_index, status, review_data)
