import uuid

from sqlalchemy import Column, DateTime, Index, String, Text, func

from portal.core.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class UseCaseScenario(Base):
    __tablename__ = "use_case_scenarios"

    id = Column(String(36), primary_key=True, default=_uuid)
    request_id = Column(String(64), nullable=False)
    # empty for the whole-model scenario written by the workflow itself
    use_case_alias = Column(String(255), nullable=True)
    use_case_name = Column(String(500), nullable=True)
    scenario_content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_use_case_scenarios_request_alias", "request_id", "use_case_alias"),)


class UseCaseMvc(Base):
    __tablename__ = "use_case_mvc"

    id = Column(String(36), primary_key=True, default=_uuid)
    request_id = Column(String(64), nullable=False)
    use_case_alias = Column(String(255), nullable=True)
    use_case_name = Column(String(500), nullable=True)
    mvc_plantuml = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_use_case_mvc_request_alias", "request_id", "use_case_alias"),)
