import asyncio
import logging
import math
from typing import Any

from llama_index.core.base.embeddings.base import SimilarityMode, similarity

from portal.llms.services import LLMService
from portal.vector_store.exceptions import DocumentNotFoundException, DocumentValidationException
from portal.vector_store.extractors import DocumentTextExtractor
from portal.vector_store.models import VectorStoreDocument
from portal.vector_store.repositories import VectorStoreDocumentRepository
from portal.vector_store.schemas import (
    CONTENT_PREVIEW_LENGTH,
    DocumentCreate,
    DocumentListItem,
    SimilarDocument,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 2500
CHUNK_OVERLAP = 200


def cosine_similarity(query_embedding: list[float], embedding: list[float]) -> float:
    # zero vectors have no direction
    if not any(query_embedding) or not any(embedding):
        return 0.0
    score = float(similarity(query_embedding, embedding, mode=SimilarityMode.DEFAULT))
    return score if math.isfinite(score) else 0.0


class EmbeddingService:
    def __init__(self, llm_service: LLMService):
        self.llm_service = llm_service

    async def embed_text(self, text: str) -> list[float]:
        model = await self.llm_service.get_embedding_model()
        return await model.aget_text_embedding(text)

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        model = await self.llm_service.get_embedding_model()
        return await model.aget_text_embedding_batch(texts)

    async def embed_query(self, query: str) -> list[float]:
        model = await self.llm_service.get_embedding_model()
        return await model.aget_query_embedding(query)


class VectorStoreService:
    def __init__(self, document_repo: VectorStoreDocumentRepository, embedding_service: EmbeddingService):
        self.document_repo = document_repo
        self.embedding_service = embedding_service

    async def add_document(self, content: str, metadata: dict[str, Any] | None = None) -> str:
        if not content or not content.strip():
            raise DocumentValidationException("Document content cannot be empty")
        embedding = await self.embedding_service.embed_text(content)
        document = await self.document_repo.create(
            obj_in=DocumentCreate(content=content, doc_metadata=metadata or None, embedding=embedding)
        )
        logger.debug(f"Added document to vector store: id={document.id}, content_length={len(content)}")
        return document.id

    async def add_documents(self, contents: list[str]) -> list[str]:
        contents = [content for content in contents if content and content.strip()]
        if not contents:
            return []
        embeddings = await self.embedding_service.embed_texts(contents)
        ids = []
        for content, embedding in zip(contents, embeddings):
            document = await self.document_repo.create(obj_in=DocumentCreate(content=content, embedding=embedding))
            ids.append(document.id)
        logger.info(f"Added {len(ids)} documents to vector store")
        return ids

    async def find_similar(self, query: str, top_k: int = 5) -> list[SimilarDocument]:
        """
        Ranks every stored document by cosine similarity to the query embedding.
        """
        if not query or not query.strip() or top_k <= 0:
            return []
        query_embedding = await self.embedding_service.embed_query(query)
        documents = await self.document_repo.list_all()

        scored = [
            (cosine_similarity(query_embedding, document.embedding), document)
            for document in documents
            if document.embedding
        ]
        scored.sort(key=lambda item: item[0], reverse=True)

        results = [
            SimilarDocument(
                id=document.id,
                content=document.content,
                similarity=score,
                metadata=document.doc_metadata or {},
            )
            for score, document in scored[:top_k]
        ]
        logger.debug(f"Found {len(results)} similar documents for query")
        return results

    async def list_documents(self, offset: int = 0, limit: int = 20) -> list[DocumentListItem]:
        documents = await self.document_repo.list_page(offset=max(offset, 0), limit=max(limit, 1))
        return [self._to_list_item(document) for document in documents]

    async def count_documents(self) -> int:
        return await self.document_repo.count()

    async def delete_document(self, document_id: str) -> None:
        deleted = await self.document_repo.delete(pk=document_id)
        if not deleted:
            raise DocumentNotFoundException(f"Document with id {document_id} not found.")
        logger.info(f"Deleted document {document_id} from vector store")

    @staticmethod
    def _to_list_item(document: VectorStoreDocument) -> DocumentListItem:
        return DocumentListItem(
            id=document.id,
            content_preview=(document.content or "")[:CONTENT_PREVIEW_LENGTH],
            metadata=document.doc_metadata or {},
            created_at=document.created_at,
        )


class VectorizationService:
    def __init__(self, vector_store_service: VectorStoreService, text_extractor: DocumentTextExtractor):
        self.vector_store_service = vector_store_service
        self.text_extractor = text_extractor

    @staticmethod
    def chunk_text(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> list[str]:
        """Fixed-size windows; consecutive chunks share `overlap` characters."""
        if not text:
            return []
        chunks = []
        step = chunk_size - overlap
        pos = 0
        while pos < len(text):
            end = min(pos + chunk_size, len(text))
            chunks.append(text[pos:end])
            if end >= len(text):
                break
            pos += step
        return chunks

    async def upload_from_file(self, filename: str, content: bytes) -> list[str]:
        text = await asyncio.to_thread(self.text_extractor.extract_text, filename, content)
        return await self.upload_text(filename, text)

    async def upload_text(self, filename: str, text: str) -> list[str]:
        if not text or not text.strip():
            return []
        chunks = self.chunk_text(text)
        ids = []
        for index, chunk in enumerate(chunks):
            if not chunk.strip():
                continue
            ids.append(await self.vector_store_service.add_document(chunk, {"source": filename, "chunk": index}))
        logger.debug(f"Uploaded file {filename} as {len(chunks)} chunks")
        return ids
