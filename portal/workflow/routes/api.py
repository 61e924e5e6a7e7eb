import logging

from fastapi import APIRouter, Depends, HTTPException, status

from portal.workflow.dependencies import get_orchestrator_service, get_workflow_session_service
from portal.workflow.exceptions import (
    WorkflowSessionNotFoundException,
    WorkflowStateException,
    WorkflowValidationException,
)
from portal.workflow.schemas import (
    WorkflowResponse,
    WorkflowResumeRequest,
    WorkflowRunRequest,
    WorkflowSessionSummary,
)
from portal.workflow.services import OrchestratorService, WorkflowSessionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/run", response_model=WorkflowResponse)
async def run_workflow(
    request_in: WorkflowRunRequest,
    orchestrator: OrchestratorService = Depends(get_orchestrator_service),
):
    try:
        return await orchestrator.run(request_in)
    except WorkflowValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except WorkflowStateException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Workflow failed: {e}")


@router.post("/resume", response_model=WorkflowResponse)
async def resume_workflow(
    request_in: WorkflowResumeRequest,
    orchestrator: OrchestratorService = Depends(get_orchestrator_service),
):
    try:
        return await orchestrator.resume(request_in)
    except WorkflowSessionNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except WorkflowStateException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Workflow failed: {e}")


@router.get("/session/{request_id}", response_model=WorkflowResponse)
async def get_session(
    request_id: str,
    service: WorkflowSessionService = Depends(get_workflow_session_service),
):
    try:
        return await service.get_session_data(request_id)
    except WorkflowSessionNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/sessions", response_model=list[WorkflowSessionSummary])
async def list_sessions(service: WorkflowSessionService = Depends(get_workflow_session_service)):
    return await service.list_sessions()
