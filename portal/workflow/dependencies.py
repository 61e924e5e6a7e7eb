from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.dependencies import get_db
from portal.workflow.factories import build_orchestrator_service, build_workflow_session_service
from portal.workflow.services import OrchestratorService, WorkflowSessionService


async def get_workflow_session_service(db: AsyncSession = Depends(get_db)) -> WorkflowSessionService:
    return await build_workflow_session_service(db)


async def get_orchestrator_service() -> OrchestratorService:
    return await build_orchestrator_service()
