from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.models import User
from portal.commons.repositories import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def list_all(self, include_deleted: bool = False) -> list[User]:
        stmt = select(self.model).order_by(self.model.created_at, self.model.username)
        if not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_by_username(self, username: str) -> User | None:
        stmt = select(self.model).where(self.model.username == username, self.model.deleted_at.is_(None))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_active(self, user_id: str) -> User | None:
        stmt = select(self.model).where(self.model.id == user_id, self.model.deleted_at.is_(None))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def exists_active_username(self, username: str) -> bool:
        return await self.get_active_by_username(username) is not None
