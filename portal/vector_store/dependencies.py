from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.dependencies import get_db
from portal.vector_store.factories import build_vector_store_service, build_vectorization_service
from portal.vector_store.services import VectorizationService, VectorStoreService


async def get_vector_store_service(db: AsyncSession = Depends(get_db)) -> VectorStoreService:
    return await build_vector_store_service(db)


async def get_vectorization_service(db: AsyncSession = Depends(get_db)) -> VectorizationService:
    return await build_vectorization_service(db)
