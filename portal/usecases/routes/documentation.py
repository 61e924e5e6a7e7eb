import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from portal.usecases.dependencies import get_documentation_service
from portal.usecases.exceptions import (
    DocumentationFolderExistsException,
    DocumentationNotFoundException,
    DocumentationValidationException,
    NoArtifactsException,
)
from portal.usecases.schemas import (
    DocumentationExistsResponse,
    DocumentationFilesResponse,
    DocumentationGenerateRequest,
    DocumentationGenerateResponse,
)
from portal.usecases.services.documentation import DocumentationService
from portal.workflow.exceptions import WorkflowSessionNotFoundException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", response_model=DocumentationGenerateResponse)
async def generate_documentation(
    request_in: DocumentationGenerateRequest,
    service: DocumentationService = Depends(get_documentation_service),
):
    if not request_in.request_id or not request_in.request_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="requestId is required")
    try:
        return await service.generate(request_in.request_id, request_in.folder_name or "")
    except DocumentationValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except WorkflowSessionNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DocumentationFolderExistsException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except NoArtifactsException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except OSError as e:
        logger.error(f"Failed to write documentation for {request_in.request_id}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to write documentation: {e}"
        )


@router.get("/{request_id}/exists", response_model=DocumentationExistsResponse)
async def documentation_exists(request_id: str, service: DocumentationService = Depends(get_documentation_service)):
    try:
        exists = await service.has_documentation(request_id)
    except OSError:
        logger.warning(f"Could not check documentation folder for {request_id}", exc_info=True)
        exists = False
    return DocumentationExistsResponse(exists=exists)


@router.get("/{request_id}/files", response_model=DocumentationFilesResponse)
async def list_documentation_files(
    request_id: str,
    service: DocumentationService = Depends(get_documentation_service),
):
    try:
        files = await service.list_files(request_id)
    except DocumentationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return DocumentationFilesResponse(files=files)


@router.get("/{request_id}/files/{file_name}", response_class=PlainTextResponse)
async def read_documentation_file(
    request_id: str,
    file_name: str,
    service: DocumentationService = Depends(get_documentation_service),
):
    try:
        return await service.read_file(request_id, file_name)
    except DocumentationValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DocumentationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
