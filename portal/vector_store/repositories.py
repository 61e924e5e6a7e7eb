from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.commons.repositories import BaseRepository
from portal.vector_store.models import VectorStoreDocument


class VectorStoreDocumentRepository(BaseRepository[VectorStoreDocument]):
    model = VectorStoreDocument

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def list_page(self, offset: int, limit: int) -> list[VectorStoreDocument]:
        stmt = (
            select(self.model)
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> list[VectorStoreDocument]:
        result = await self.db.execute(select(self.model))
        return list(result.scalars().all())
