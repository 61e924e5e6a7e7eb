from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.vector_store.dependencies import get_vector_store_service, get_vectorization_service
from portal.vector_store.extractors import DocumentTextExtractor
from portal.vector_store.repositories import VectorStoreDocumentRepository
from portal.vector_store.services import EmbeddingService, VectorizationService, VectorStoreService


@pytest.fixture
def document_repository(db_session: AsyncSession) -> VectorStoreDocumentRepository:
    return VectorStoreDocumentRepository(db=db_session)


@pytest.fixture
def document_repository_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(VectorStoreDocumentRepository, instance=True)


@pytest.fixture
def embedding_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(EmbeddingService, instance=True)


@pytest.fixture
def vector_store_service(
    document_repository_mock: MagicMock, embedding_service_mock: MagicMock
) -> VectorStoreService:
    return VectorStoreService(document_repo=document_repository_mock, embedding_service=embedding_service_mock)


@pytest.fixture
def vector_store_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(VectorStoreService, instance=True)


@pytest.fixture
def text_extractor_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(DocumentTextExtractor, instance=True)


@pytest.fixture
def vectorization_service(
    vector_store_service_mock: MagicMock, text_extractor_mock: MagicMock
) -> VectorizationService:
    return VectorizationService(vector_store_service=vector_store_service_mock, text_extractor=text_extractor_mock)


@pytest.fixture
def vectorization_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(VectorizationService, instance=True)


@pytest.fixture
def override_get_vector_store_service(vector_store_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_vector_store_service] = lambda: vector_store_service_mock
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_get_vectorization_service(vectorization_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_vectorization_service] = lambda: vectorization_service_mock
    yield
    app.dependency_overrides.clear()
