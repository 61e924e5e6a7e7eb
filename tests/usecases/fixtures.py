from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.usecases.dependencies import (
    get_decomposition_service,
    get_documentation_service,
    get_use_case_mvc_service,
    get_use_case_scenario_service,
)
from portal.usecases.repositories import UseCaseMvcRepository, UseCaseScenarioRepository
from portal.usecases.services.decomposition import DecompositionService
from portal.usecases.services.documentation import DocumentationService
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService
from portal.workflow.agents import ScenarioWriterService


@pytest.fixture
def use_case_scenario_repository(db_session: AsyncSession) -> UseCaseScenarioRepository:
    return UseCaseScenarioRepository(db=db_session)


@pytest.fixture
def use_case_mvc_repository(db_session: AsyncSession) -> UseCaseMvcRepository:
    return UseCaseMvcRepository(db=db_session)


@pytest.fixture
def use_case_scenario_service(use_case_scenario_repository: UseCaseScenarioRepository) -> UseCaseScenarioService:
    return UseCaseScenarioService(scenario_repo=use_case_scenario_repository)


@pytest.fixture
def use_case_mvc_service(use_case_mvc_repository: UseCaseMvcRepository) -> UseCaseMvcService:
    return UseCaseMvcService(mvc_repo=use_case_mvc_repository)


@pytest.fixture
def use_case_scenario_service_mock(mocker: MockerFixture) -> MagicMock:
    service = mocker.create_autospec(UseCaseScenarioService, instance=True)
    service.get_scenarios.return_value = []
    return service


@pytest.fixture
def use_case_mvc_service_mock(mocker: MockerFixture) -> MagicMock:
    service = mocker.create_autospec(UseCaseMvcService, instance=True)
    service.get_mvc_diagrams.return_value = []
    return service


@pytest.fixture
def scenario_writer_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(ScenarioWriterService, instance=True)


@pytest.fixture
def decomposition_service(
    db_sessionmanager_mock,
    workflow_session_service_mock: MagicMock,
    use_case_scenario_service_mock: MagicMock,
    use_case_mvc_service_mock: MagicMock,
    rag_service_factory: AsyncMock,
    scenario_writer_mock: MagicMock,
) -> DecompositionService:
    return DecompositionService(
        db=db_sessionmanager_mock,
        session_service_factory=AsyncMock(return_value=workflow_session_service_mock),
        scenario_service_factory=AsyncMock(return_value=use_case_scenario_service_mock),
        mvc_service_factory=AsyncMock(return_value=use_case_mvc_service_mock),
        rag_service_factory=rag_service_factory,
        scenario_writer=scenario_writer_mock,
    )


@pytest.fixture
def decomposition_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(DecompositionService, instance=True)


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    return tmp_path / "generated-docs"


@pytest.fixture
def documentation_service(
    workflow_session_service_mock: MagicMock,
    use_case_scenario_service_mock: MagicMock,
    use_case_mvc_service_mock: MagicMock,
    docs_dir: Path,
) -> DocumentationService:
    return DocumentationService(
        session_service=workflow_session_service_mock,
        scenario_service=use_case_scenario_service_mock,
        mvc_service=use_case_mvc_service_mock,
        output_dir=str(docs_dir),
    )


@pytest.fixture
def documentation_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(DocumentationService, instance=True)


@pytest.fixture
def override_use_case_services(
    use_case_scenario_service_mock: MagicMock,
    use_case_mvc_service_mock: MagicMock,
    decomposition_service_mock: MagicMock,
    documentation_service_mock: MagicMock,
):
    from portal.main import app

    app.dependency_overrides[get_use_case_scenario_service] = lambda: use_case_scenario_service_mock
    app.dependency_overrides[get_use_case_mvc_service] = lambda: use_case_mvc_service_mock
    app.dependency_overrides[get_decomposition_service] = lambda: decomposition_service_mock
    app.dependency_overrides[get_documentation_service] = lambda: documentation_service_mock
    yield
    app.dependency_overrides.clear()
