import logging

from portal.rag.schemas import FRAGMENT_SEPARATOR, ContextResult
from portal.vector_store.services import VectorStoreService

logger = logging.getLogger(__name__)


class RagService:
    def __init__(self, vector_store_service: VectorStoreService):
        self.vector_store_service = vector_store_service

    async def retrieve_context(self, query: str, top_k: int) -> ContextResult:
        """
        Joins the contents of the top_k most similar documents.
        Retrieval never fails the caller: errors yield an empty context flagged as unavailable.
        """
        try:
            results = await self.vector_store_service.find_similar(query, top_k)
        except Exception as e:
            logger.warning(f"Failed to retrieve RAG context from vector store: {e}", exc_info=True)
            return ContextResult(text="", fragments_count=0, vector_store_available=False)

        fragments = [result.content for result in results if result.content and result.content.strip()]
        if not fragments:
            logger.debug("No similar documents found for query")
            return ContextResult(text="", fragments_count=0, vector_store_available=True)

        logger.debug(f"Retrieved {len(fragments)} fragments from vector store")
        return ContextResult(
            text=FRAGMENT_SEPARATOR.join(fragments),
            fragments_count=len(fragments),
            vector_store_available=True,
        )
