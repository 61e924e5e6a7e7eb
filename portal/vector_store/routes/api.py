import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from portal.auth.dependencies import require_admin
from portal.vector_store.dependencies import get_vector_store_service, get_vectorization_service
from portal.vector_store.exceptions import DocumentNotFoundException, DocumentValidationException
from portal.vector_store.schemas import (
    AddDocumentRequest,
    AddDocumentResponse,
    BatchAddRequest,
    DeleteDocumentResponse,
    DocumentIdsResponse,
    DocumentListResponse,
    SearchRequest,
    SearchResponse,
)
from portal.vector_store.services import VectorizationService, VectorStoreService

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}: {e}")


@router.get("/documents", response_model=DocumentListResponse, dependencies=[Depends(require_admin)])
async def list_documents(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=500),
    service: VectorStoreService = Depends(get_vector_store_service),
):
    try:
        documents = await service.list_documents(offset=page * size, limit=size)
        total = await service.count_documents()
    except Exception as e:
        raise _internal_error("list documents", e)
    return DocumentListResponse(documents=documents, total=total)


@router.post("/documents", response_model=AddDocumentResponse, dependencies=[Depends(require_admin)])
async def add_document(
    document_in: AddDocumentRequest,
    service: VectorStoreService = Depends(get_vector_store_service),
):
    try:
        document_id = await service.add_document(document_in.content, document_in.metadata)
    except DocumentValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise _internal_error("add document", e)
    return AddDocumentResponse(id=document_id, message="Document added successfully")


@router.post("/documents/batch", response_model=DocumentIdsResponse, dependencies=[Depends(require_admin)])
async def add_documents_batch(
    batch_in: BatchAddRequest,
    service: VectorStoreService = Depends(get_vector_store_service),
):
    try:
        ids = await service.add_documents(batch_in.documents)
    except Exception as e:
        raise _internal_error("add documents", e)
    return DocumentIdsResponse(ids=ids, count=len(ids), message="Documents added successfully")


@router.post("/documents/upload", response_model=DocumentIdsResponse, dependencies=[Depends(require_admin)])
async def upload_documents(
    files: list[UploadFile] | None = File(None),
    service: VectorizationService = Depends(get_vectorization_service),
):
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files provided")
    try:
        ids = []
        for upload in files:
            content = await upload.read()
            if not content:
                continue
            ids.extend(await service.upload_from_file(upload.filename or "unknown", content))
    except Exception as e:
        raise _internal_error("upload documents", e)
    return DocumentIdsResponse(ids=ids, count=len(ids), message="Files uploaded and vectorized successfully")


@router.post("/search", response_model=SearchResponse)
async def search_documents(
    search_in: SearchRequest,
    service: VectorStoreService = Depends(get_vector_store_service),
):
    try:
        results = await service.find_similar(search_in.query, search_in.top_k or 5)
    except Exception as e:
        raise _internal_error("search documents", e)
    return SearchResponse(results=results, count=len(results))


@router.delete("/documents/{document_id}", response_model=DeleteDocumentResponse, dependencies=[Depends(require_admin)])
async def delete_document(
    document_id: str,
    service: VectorStoreService = Depends(get_vector_store_service),
):
    try:
        await service.delete_document(document_id)
    except DocumentNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        raise _internal_error("delete document", e)
    return DeleteDocumentResponse(message="Document deleted successfully", id=document_id)
