from sqlalchemy import select

from portal.chat.models import ChatMessage
from portal.commons.repositories import BaseRepository


class ChatMessageRepository(BaseRepository[ChatMessage]):
    model = ChatMessage

    async def list_latest(self, limit: int) -> list[ChatMessage]:
        stmt = select(self.model).order_by(self.model.created_at.desc(), self.model.id.desc()).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

