from fastapi import APIRouter, Depends, HTTPException, status

from portal.auth.dependencies import require_admin
from portal.auth.models import User
from portal.prompts.dependencies import get_prompt_service
from portal.prompts.exceptions import PromptNotFoundException, PromptValidationException
from portal.prompts.schemas import (
    PromptHistoryRead,
    PromptRead,
    PromptSummaryRead,
    PromptUpdateRequest,
    PromptUpdateResponse,
)
from portal.prompts.services import PromptService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[PromptSummaryRead])
async def list_prompts(service: PromptService = Depends(get_prompt_service)):
    prompts = await service.list_prompts()
    return [
        PromptSummaryRead(
            code=prompt.code,
            name=prompt.name,
            description=prompt.description,
            updated_at=prompt.updated_at,
            content_length=len(prompt.content or ""),
        )
        for prompt in prompts
    ]


@router.get("/{code}", response_model=PromptRead)
async def get_prompt(code: str, service: PromptService = Depends(get_prompt_service)):
    try:
        return await service.get_prompt(code)
    except PromptNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/{code}", response_model=PromptUpdateResponse)
async def update_prompt(
    code: str,
    prompt_in: PromptUpdateRequest,
    current_user: User = Depends(require_admin),
    service: PromptService = Depends(get_prompt_service),
):
    try:
        prompt = await service.update_prompt(
            code, prompt_in.content, changed_by=current_user.id, reason=prompt_in.reason
        )
    except PromptNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PromptValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return PromptUpdateResponse(
        code=prompt.code,
        name=prompt.name,
        content=prompt.content,
        updated_at=prompt.updated_at,
        message="Prompt updated successfully",
    )


@router.get("/{code}/history", response_model=list[PromptHistoryRead])
async def get_prompt_history(code: str, service: PromptService = Depends(get_prompt_service)):
    try:
        return await service.get_history(code)
    except PromptNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
