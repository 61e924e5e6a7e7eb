from sqlalchemy.ext.asyncio import AsyncSession

from portal.rag.services import RagService
from portal.vector_store.factories import build_vector_store_service


async def build_rag_service(db: AsyncSession) -> RagService:
    vector_store_service = await build_vector_store_service(db)
    return RagService(vector_store_service=vector_store_service)
