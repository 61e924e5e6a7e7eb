import logging

from fastapi import APIRouter, Depends, HTTPException, status

from portal.usecases.dependencies import (
    get_decomposition_service,
    get_use_case_mvc_service,
    get_use_case_scenario_service,
)
from portal.usecases.schemas import (
    DecompositionArtifactsResponse,
    DecompositionRequest,
    DecompositionResponse,
    MvcDiagramRead,
    ScenarioRead,
    ScenariosResponse,
)
from portal.usecases.services.decomposition import DecompositionService
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=DecompositionResponse)
async def decompose_use_cases(
    request_in: DecompositionRequest,
    service: DecompositionService = Depends(get_decomposition_service),
):
    if not request_in.use_cases:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one use case is required")
    return await service.decompose(request_in)


@router.get("/{request_id}", response_model=DecompositionArtifactsResponse)
async def get_decomposition_artifacts(
    request_id: str,
    scenario_service: UseCaseScenarioService = Depends(get_use_case_scenario_service),
    mvc_service: UseCaseMvcService = Depends(get_use_case_mvc_service),
):
    scenarios = await scenario_service.get_scenarios(request_id)
    mvc_diagrams = await mvc_service.get_mvc_diagrams(request_id)
    return DecompositionArtifactsResponse(
        scenarios=[ScenarioRead.model_validate(scenario) for scenario in scenarios],
        mvc_diagrams=[MvcDiagramRead.model_validate(mvc) for mvc in mvc_diagrams],
    )


@router.get("/{request_id}/{alias}", response_model=ScenariosResponse)
async def get_use_case_scenarios(
    request_id: str,
    alias: str,
    scenario_service: UseCaseScenarioService = Depends(get_use_case_scenario_service),
):
    scenarios = await scenario_service.get_scenarios(request_id, alias)
    return ScenariosResponse(scenarios=[ScenarioRead.model_validate(scenario) for scenario in scenarios])
