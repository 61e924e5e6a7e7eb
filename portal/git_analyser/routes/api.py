import logging

from fastapi import APIRouter, Depends, HTTPException, status

from portal.git_analyser.dependencies import get_git_analyser_service
from portal.git_analyser.exceptions import GitOperationException
from portal.git_analyser.schemas import GitAnalysisRequest, GitAnalysisResponse
from portal.git_analyser.services import GitAnalyserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=GitAnalysisResponse)
async def analyze_repository(
    request_in: GitAnalysisRequest,
    service: GitAnalyserService = Depends(get_git_analyser_service),
):
    try:
        response = await service.analyze(request_in)
    except GitOperationException as e:
        logger.error(f"Git error during analysis: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Git error: {e}")
    except Exception as e:
        logger.error("Unexpected error during analysis", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Unexpected error: {e}")

    logger.info(
        f"Git analysis completed. Unused files: {len(response.result.unused_files)}, "
        f"broken references: {len(response.result.broken_references)}"
    )
    return response
