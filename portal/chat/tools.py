import json
import logging
import uuid
from typing import Annotated, Any

from pydantic import Field

from portal.commons.tools import BaseToolSet
from portal.core.db import DatabaseSessionManager
from portal.usecases.factories import build_use_case_scenario_service
from portal.workflow.agents import format_issues
from portal.workflow.context import WorkerContext
from portal.workflow.enums import StateKey, WorkerTool
from portal.workflow.exceptions import WorkflowSessionNotFoundException
from portal.workflow.factories import build_workflow_session_service
from portal.workflow.schemas import Issue
from portal.workflow.workers import WorkersRegistry

logger = logging.getLogger(__name__)

SESSIONS_LIMIT = 10
SCENARIO_PREVIEW_LENGTH = 200
DIAGRAM_ARTIFACTS = (StateKey.PLANTUML, StateKey.USE_CASE_MODEL, StateKey.MVC_DIAGRAM)
ARTIFACT_TYPES = "narrative, plantuml, useCaseModel, mvcDiagram, scenario"

SESSION_ID_DESCRIPTION = "The requestId of the workflow session."
ARTIFACT_TYPE_DESCRIPTION = f"The artifact to read. One of: {ARTIFACT_TYPES}."
NARRATIVE_DESCRIPTION = "The user narrative describing the problem domain."
DOMAIN_MODEL_DESCRIPTION = "The domain model as a PlantUML class diagram."
USE_CASE_MODEL_DESCRIPTION = "The use case diagram in PlantUML."
MVC_MODEL_DESCRIPTION = "The robustness (MVC) diagram in PlantUML."


def _preview(text: str | None, max_length: int) -> str:
    if not text:
        return ""
    return text if len(text) <= max_length else text[:max_length] + "..."


def _fenced(code: str) -> str:
    return f"```plantuml\n{code.strip()}\n```"


class SessionTools(BaseToolSet):
    """Read access to saved workflow sessions and their scenarios."""
    spec_functions = [
        "get_workflow_sessions",
        "get_session_details",
        "get_session_artifact",
        "get_use_case_scenarios",
    ]

    async def get_workflow_sessions(self) -> str:
        """
        Lists the most recent workflow sessions with their status, author and creation date.
        """
        try:
            async with self.db.session() as session:
                session_service = await build_workflow_session_service(session)
                sessions = await session_service.list_sessions()

            if not sessions:
                return "No saved workflow sessions."
            summaries = [summary.model_dump(mode="json", by_alias=True) for summary in sessions[:SESSIONS_LIMIT]]
            return json.dumps(summaries, indent=2, ensure_ascii=False)

        except Exception as e:
            logger.error(f"SessionTools.get_workflow_sessions failed: {e}", exc_info=True)
            return f"Error listing workflow sessions: {str(e)}"

    async def get_session_details(
        self,
        session_id: Annotated[str, Field(description=SESSION_ID_DESCRIPTION)],
    ) -> str:
        """
        Returns the artifacts of a workflow session (narrative, plantuml, useCaseModel, mvcDiagram, scenarios).
        """
        if not session_id or not session_id.strip():
            return "Error: session_id is required."
        try:
            async with self.db.session() as session:
                session_service = await build_workflow_session_service(session)
                data = await session_service.get_session_data(session_id)

            details = {"requestId": data.request_id, "artifacts": data.artifacts, "logsCount": len(data.logs)}
            return json.dumps(details, indent=2, ensure_ascii=False, default=str)

        except WorkflowSessionNotFoundException:
            return f"Session not found: {session_id}"
        except Exception as e:
            logger.error(f"SessionTools.get_session_details failed: {e}", exc_info=True)
            return f"Error reading session: {str(e)}"

    async def get_session_artifact(
        self,
        session_id: Annotated[str, Field(description=SESSION_ID_DESCRIPTION)],
        artifact_type: Annotated[str, Field(description=ARTIFACT_TYPE_DESCRIPTION)],
    ) -> str:
        """
        Returns a single artifact of a workflow session. Diagrams come back as PlantUML code blocks.
        """
        if not session_id or not session_id.strip():
            return "Error: session_id is required."
        if not artifact_type or not artifact_type.strip():
            return f"Error: artifact_type is required ({ARTIFACT_TYPES})."
        try:
            async with self.db.session() as session:
                session_service = await build_workflow_session_service(session)
                artifacts = (await session_service.get_session_data(session_id)).artifacts

        except WorkflowSessionNotFoundException:
            return f"Session not found: {session_id}"
        except Exception as e:
            logger.error(f"SessionTools.get_session_artifact failed: {e}", exc_info=True)
            return f"Error reading artifact: {str(e)}"

        if artifact_type == StateKey.SCENARIO:
            scenarios = artifacts.get("scenarios") or []
            artifact: Any = scenarios[0] if scenarios else None
        else:
            artifact = artifacts.get(artifact_type)
        if artifact is None:
            return f"Artifact '{artifact_type}' not found in session {session_id}"
        if artifact_type in DIAGRAM_ARTIFACTS and isinstance(artifact, str):
            return _fenced(artifact)
        if isinstance(artifact, str):
            return artifact
        return json.dumps(artifact, indent=2, ensure_ascii=False)

    async def get_use_case_scenarios(
        self,
        session_id: Annotated[str, Field(description=SESSION_ID_DESCRIPTION)],
    ) -> str:
        """
        Lists the use case scenarios generated for a workflow session, newest first.
        """
        if not session_id or not session_id.strip():
            return "Error: session_id is required."
        try:
            async with self.db.session() as session:
                scenario_service = await build_use_case_scenario_service(session)
                scenarios = await scenario_service.get_scenarios(session_id)

            if not scenarios:
                return f"No scenarios found for session {session_id}."
            result = [
                {
                    "id": scenario.id,
                    "useCaseAlias": scenario.use_case_alias or "N/A",
                    "useCaseName": scenario.use_case_name or "N/A",
                    "scenarioPreview": _preview(scenario.scenario_content, SCENARIO_PREVIEW_LENGTH),
                    "createdAt": scenario.created_at.isoformat() if scenario.created_at else "N/A",
                }
                for scenario in scenarios
            ]
            return json.dumps(result, indent=2, ensure_ascii=False)

        except Exception as e:
            logger.error(f"SessionTools.get_use_case_scenarios failed: {e}", exc_info=True)
            return f"Error listing scenarios: {str(e)}"


class IconixTools(BaseToolSet):
    """Runs single ICONIX workers outside of a workflow session."""
    spec_functions = [
        "generate_narrative",
        "generate_domain_model",
        "review_model_or_narrative",
        "generate_use_case_diagram",
        "generate_mvc_diagram",
        "generate_scenario",
    ]

    def __init__(self, db: DatabaseSessionManager, workers_registry: WorkersRegistry):
        super().__init__(db)
        self.workers_registry = workers_registry

    async def _run(self, tool: WorkerTool, ctx: WorkerContext, args: dict[str, Any] | None = None) -> WorkerContext:
        await self.workers_registry.get(tool).execute(ctx, args or {})
        return ctx

    @staticmethod
    def _context(narrative: str | None, state: dict[str, str | None]) -> WorkerContext:
        # scenarios written from the chat are stored under their own request id
        ctx = WorkerContext(request_id=f"chat-{uuid.uuid4()}", narrative=narrative or "")
        ctx.state.update({key: value for key, value in state.items() if value and value.strip()})
        return ctx

    async def generate_narrative(
        self,
        goal: Annotated[str, Field(description="The business goal.")] = "",
        task: Annotated[str, Field(description="The task description.")] = "",
        description: Annotated[str, Field(description="Additional description of what to build.")] = "",
    ) -> str:
        """
        Writes a user narrative of the problem domain from a goal and a task description.
        """
        try:
            ctx = WorkerContext(request_id=f"chat-{uuid.uuid4()}", goal=goal or "", task=task or "")
            args = {"description": description} if description else {}
            ctx = await self._run(WorkerTool.NARRATIVE, ctx, args)
            return ctx.narrative_effective()

        except Exception as e:
            logger.error(f"IconixTools.generate_narrative failed: {e}", exc_info=True)
            return f"Error generating narrative: {str(e)}"

    async def generate_domain_model(
        self,
        narrative: Annotated[str, Field(description=NARRATIVE_DESCRIPTION)],
        mode: Annotated[str, Field(description="'generate' for a new model or 'refine' to improve existing_model.")] = "generate",
        existing_model: Annotated[str, Field(description="The model to refine in 'refine' mode.")] = "",
    ) -> str:
        """
        Builds the ICONIX domain model (PlantUML class diagram) for a narrative.
        """
        if not narrative or not narrative.strip():
            return "Error: narrative is required."
        try:
            ctx = self._context(narrative, {StateKey.PLANTUML: existing_model})
            ctx = await self._run(WorkerTool.MODEL, ctx, {"mode": mode or "generate"})
            return _fenced(ctx.artifact(StateKey.PLANTUML))

        except Exception as e:
            logger.error(f"IconixTools.generate_domain_model failed: {e}", exc_info=True)
            return f"Error generating domain model: {str(e)}"

    async def review_model_or_narrative(
        self,
        narrative: Annotated[str, Field(description=NARRATIVE_DESCRIPTION)],
        target: Annotated[str, Field(description="'model' or 'narrative'.")] = "model",
        domain_model: Annotated[str, Field(description=DOMAIN_MODEL_DESCRIPTION)] = "",
    ) -> str:
        """
        Reviews a domain model against its narrative, or the narrative itself, and lists the issues found.
        """
        target = (target or "model").lower()
        if target == "model" and (not domain_model or not domain_model.strip()):
            return "Error: domain_model is required to review a model."
        try:
            ctx = self._context(narrative, {StateKey.PLANTUML: domain_model})
            ctx = await self._run(WorkerTool.REVIEW, ctx, {"target": target})
            key = StateKey.NARRATIVE_ISSUES if target == "narrative" else StateKey.ISSUES
            issues = [Issue.model_validate(raw) for raw in ctx.state.get(key) or []]
            return f"Review issues:\n{format_issues(issues)}"

        except Exception as e:
            logger.error(f"IconixTools.review_model_or_narrative failed: {e}", exc_info=True)
            return f"Error reviewing {target}: {str(e)}"

    async def generate_use_case_diagram(
        self,
        domain_model: Annotated[str, Field(description=DOMAIN_MODEL_DESCRIPTION)],
        narrative: Annotated[str, Field(description=NARRATIVE_DESCRIPTION)] = "",
    ) -> str:
        """
        Builds the use case diagram (PlantUML) from a domain model.
        """
        if not domain_model or not domain_model.strip():
            return "Error: domain_model is required."
        try:
            ctx = self._context(narrative, {StateKey.PLANTUML: domain_model})
            ctx = await self._run(WorkerTool.USE_CASE, ctx)
            return _fenced(ctx.artifact(StateKey.USE_CASE_MODEL))

        except Exception as e:
            logger.error(f"IconixTools.generate_use_case_diagram failed: {e}", exc_info=True)
            return f"Error generating use case diagram: {str(e)}"

    async def generate_mvc_diagram(
        self,
        domain_model: Annotated[str, Field(description=DOMAIN_MODEL_DESCRIPTION)],
        use_case_model: Annotated[str, Field(description=USE_CASE_MODEL_DESCRIPTION)],
        narrative: Annotated[str, Field(description=NARRATIVE_DESCRIPTION)] = "",
    ) -> str:
        """
        Builds the robustness (MVC) diagram from a domain model and a use case diagram.
        """
        if not domain_model or not domain_model.strip():
            return "Error: domain_model is required."
        if not use_case_model or not use_case_model.strip():
            return "Error: use_case_model is required."
        try:
            ctx = self._context(
                narrative, {StateKey.PLANTUML: domain_model, StateKey.USE_CASE_MODEL: use_case_model}
            )
            ctx = await self._run(WorkerTool.MVC, ctx)
            return _fenced(ctx.artifact(StateKey.MVC_DIAGRAM))

        except Exception as e:
            logger.error(f"IconixTools.generate_mvc_diagram failed: {e}", exc_info=True)
            return f"Error generating MVC diagram: {str(e)}"

    async def generate_scenario(
        self,
        domain_model: Annotated[str, Field(description=DOMAIN_MODEL_DESCRIPTION)],
        use_case_model: Annotated[str, Field(description=USE_CASE_MODEL_DESCRIPTION)],
        mvc_model: Annotated[str, Field(description=MVC_MODEL_DESCRIPTION)],
        narrative: Annotated[str, Field(description=NARRATIVE_DESCRIPTION)] = "",
    ) -> str:
        """
        Writes the use case scenarios (AsciiDoc) from the domain, use case and MVC models.
        """
        missing = [
            name
            for name, value in (("domain_model", domain_model), ("use_case_model", use_case_model), ("mvc_model", mvc_model))
            if not value or not value.strip()
        ]
        if missing:
            return f"Error: {', '.join(missing)} is required."
        try:
            ctx = self._context(
                narrative,
                {
                    StateKey.PLANTUML: domain_model,
                    StateKey.USE_CASE_MODEL: use_case_model,
                    StateKey.MVC_DIAGRAM: mvc_model,
                },
            )
            ctx = await self._run(WorkerTool.SCENARIO, ctx)
            return ctx.artifact(StateKey.SCENARIO)

        except Exception as e:
            logger.error(f"IconixTools.generate_scenario failed: {e}", exc_info=True)
            return f"Error generating scenario: {str(e)}"
