from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from portal.rag.services import RagService


@pytest.fixture
def rag_service(vector_store_service_mock: MagicMock) -> RagService:
    return RagService(vector_store_service=vector_store_service_mock)


@pytest.fixture
def rag_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(RagService, instance=True)
