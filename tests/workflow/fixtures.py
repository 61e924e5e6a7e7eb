from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.rag.schemas import ContextResult
from portal.workflow.context import WorkerContext
from portal.workflow.dependencies import get_orchestrator_service, get_workflow_session_service
from portal.workflow.enums import WorkerTool
from portal.workflow.repositories import WorkflowSessionRepository
from portal.workflow.services import OrchestratorService, WorkflowSessionService
from portal.workflow.workers import UserReviewWorker, Worker, WorkersRegistry


class RecordingWorker(Worker):
    """Worker double that records its calls and optionally mutates the context."""

    def __init__(self, name: str, effect: Callable[[WorkerContext, dict[str, Any]], None] | None = None):
        self.name = name
        self.effect = effect
        self.calls: list[dict[str, Any]] = []

    async def execute(self, ctx: WorkerContext, args: dict[str, Any]) -> None:
        self.calls.append(dict(args))
        if self.effect:
            self.effect(ctx, args)


@pytest.fixture
def recording_workers() -> dict[str, RecordingWorker]:
    return {tool: RecordingWorker(tool) for tool in WorkerTool if tool != WorkerTool.USER_REVIEW}


@pytest.fixture
def workers_registry(recording_workers: dict[str, RecordingWorker]) -> WorkersRegistry:
    return WorkersRegistry(workers=[*recording_workers.values(), UserReviewWorker()])


@pytest.fixture
def workflow_session_repository(db_session: AsyncSession) -> WorkflowSessionRepository:
    return WorkflowSessionRepository(db=db_session)


@pytest.fixture
def workflow_session_service(workflow_session_repository: WorkflowSessionRepository) -> WorkflowSessionService:
    return WorkflowSessionService(session_repo=workflow_session_repository)


@pytest.fixture
def workflow_session_service_mock(mocker: MockerFixture) -> MagicMock:
    service = mocker.create_autospec(WorkflowSessionService, instance=True)
    service.load_session.return_value = None
    return service


@pytest.fixture
def orchestrator_service(
    db_sessionmanager_mock, workflow_session_service_mock: MagicMock, workers_registry: WorkersRegistry
) -> OrchestratorService:
    return OrchestratorService(
        db=db_sessionmanager_mock,
        session_service_factory=AsyncMock(return_value=workflow_session_service_mock),
        workers_registry=workers_registry,
    )


@pytest.fixture
def orchestrator_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(OrchestratorService, instance=True)


@pytest.fixture
def rag_context() -> ContextResult:
    return ContextResult(text="Tickets are sold at the counter.", fragments_count=1, vector_store_available=True)


@pytest.fixture
def rag_service_factory(rag_service_mock: MagicMock, rag_context: ContextResult) -> AsyncMock:
    rag_service_mock.retrieve_context.return_value = rag_context
    return AsyncMock(return_value=rag_service_mock)


@pytest.fixture
def override_get_workflow_session_service(workflow_session_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_workflow_session_service] = lambda: workflow_session_service_mock
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_get_orchestrator_service(orchestrator_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_orchestrator_service] = lambda: orchestrator_service_mock
    yield
    app.dependency_overrides.clear()
