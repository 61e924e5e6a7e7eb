from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from portal.vector_store.models import VectorStoreDocument
from portal.vector_store.repositories import VectorStoreDocumentRepository


async def test_list_page__newest_first(db_session: AsyncSession, document_repository: VectorStoreDocumentRepository):
    db_session.add_all(
        [
            VectorStoreDocument(id="old", content="old", embedding=[1.0], created_at=datetime(2024, 1, 1)),
            VectorStoreDocument(id="new", content="new", embedding=[1.0], created_at=datetime(2024, 3, 1)),
            VectorStoreDocument(id="mid", content="mid", embedding=[1.0], created_at=datetime(2024, 2, 1)),
        ]
    )
    await db_session.flush()

    first_page = await document_repository.list_page(offset=0, limit=2)
    second_page = await document_repository.list_page(offset=2, limit=2)

    assert [document.id for document in first_page] == ["new", "mid"]
    assert [document.id for document in second_page] == ["old"]
    assert await document_repository.count() == 3


async def test_create__keeps_metadata_and_embedding(
    db_session: AsyncSession, document_repository: VectorStoreDocumentRepository
):
    from portal.vector_store.schemas import DocumentCreate

    document = await document_repository.create(
        obj_in=DocumentCreate(content="text", doc_metadata={"source": "a.txt"}, embedding=[0.5, 0.25])
    )

    stored = await document_repository.get(pk=document.id)
    assert stored.doc_metadata == {"source": "a.txt"}
    assert stored.embedding == [0.5, 0.25]
    assert stored.created_at is not None
