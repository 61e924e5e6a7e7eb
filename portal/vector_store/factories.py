from sqlalchemy.ext.asyncio import AsyncSession

from portal.llms.factories import build_llm_service
from portal.vector_store.extractors import DefaultDocumentTextExtractor
from portal.vector_store.repositories import VectorStoreDocumentRepository
from portal.vector_store.services import EmbeddingService, VectorizationService, VectorStoreService


async def build_embedding_service() -> EmbeddingService:
    llm_service = await build_llm_service()
    return EmbeddingService(llm_service=llm_service)


async def build_vector_store_service(db: AsyncSession) -> VectorStoreService:
    embedding_service = await build_embedding_service()
    return VectorStoreService(
        document_repo=VectorStoreDocumentRepository(db=db),
        embedding_service=embedding_service,
    )


async def build_vectorization_service(db: AsyncSession) -> VectorizationService:
    vector_store_service = await build_vector_store_service(db)
    return VectorizationService(
        vector_store_service=vector_store_service,
        text_extractor=DefaultDocumentTextExtractor(),
    )
