from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.dependencies import get_db
from portal.usecases.factories import (
    build_decomposition_service,
    build_documentation_service,
    build_use_case_mvc_service,
    build_use_case_scenario_service,
)
from portal.usecases.services.decomposition import DecompositionService
from portal.usecases.services.documentation import DocumentationService
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService


async def get_use_case_scenario_service(db: AsyncSession = Depends(get_db)) -> UseCaseScenarioService:
    return await build_use_case_scenario_service(db)


async def get_use_case_mvc_service(db: AsyncSession = Depends(get_db)) -> UseCaseMvcService:
    return await build_use_case_mvc_service(db)


async def get_decomposition_service() -> DecompositionService:
    return await build_decomposition_service()


async def get_documentation_service(db: AsyncSession = Depends(get_db)) -> DocumentationService:
    return await build_documentation_service(db)
