from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from portal.render.dependencies import get_asciidoc_render_service, get_plantuml_render_service
from portal.render.services import AsciiDocRenderService, PlantUmlRenderService

USE_CASE_MODEL = """@startuml
actor "Customer" as C
actor "Clerk" as K
usecase "Buy ticket" as UC1
usecase "Refund" as UC2
C --> UC1
K --> UC2
UC1 ..> UC2 : <<include>>
@enduml
"""

MVC_MODEL = """@startuml
skinparam monochrome true
package UC1 {
  boundary "Ticket form" as B1
  control "Buy" as C1
}
package UC2 {
  boundary "Refund form" as B2
}
@enduml
"""


@pytest.fixture
def use_case_model() -> str:
    return USE_CASE_MODEL


@pytest.fixture
def mvc_model() -> str:
    return MVC_MODEL


@pytest.fixture
def plantuml_render_service() -> PlantUmlRenderService:
    return PlantUmlRenderService(server_url="http://plantuml.test/plantuml/")


@pytest.fixture
def asciidoc_render_service() -> AsciiDocRenderService:
    return AsciiDocRenderService()


@pytest.fixture
def plantuml_render_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(PlantUmlRenderService, instance=True)


@pytest.fixture
def asciidoc_render_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(AsciiDocRenderService, instance=True)


@pytest.fixture
def override_render_services(plantuml_render_service_mock: MagicMock, asciidoc_render_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_plantuml_render_service] = lambda: plantuml_render_service_mock
    app.dependency_overrides[get_asciidoc_render_service] = lambda: asciidoc_render_service_mock
    yield
    app.dependency_overrides.clear()
