import uuid

from sqlalchemy import JSON, Column, DateTime, String, Text, func

from portal.core.db import Base


class VectorStoreDocument(Base):
    __tablename__ = "document_embeddings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    doc_metadata = Column("metadata", JSON, nullable=True)
    embedding = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
