from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from portal.git_analyser.analyzer import FileReferenceAnalyzer
from portal.git_analyser.dependencies import get_git_analyser_service
from portal.git_analyser.services import GitAnalyserService, GitRepositoryService


@pytest.fixture
def git_repository_service() -> GitRepositoryService:
    return GitRepositoryService(timeout=5)


@pytest.fixture
def git_repository_service_mock(mocker: MockerFixture, tmp_path: Path) -> MagicMock:
    service = mocker.create_autospec(GitRepositoryService, instance=True)
    service.clone_repository.return_value = tmp_path
    service.list_files.return_value = []
    return service


@pytest.fixture
def file_reference_analyzer() -> FileReferenceAnalyzer:
    return FileReferenceAnalyzer()


@pytest.fixture
def file_reference_analyzer_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(FileReferenceAnalyzer, instance=True)


@pytest.fixture
def git_analyser_service(
    git_repository_service_mock: MagicMock, file_reference_analyzer_mock: MagicMock
) -> GitAnalyserService:
    return GitAnalyserService(repository_service=git_repository_service_mock, analyzer=file_reference_analyzer_mock)


@pytest.fixture
def git_analyser_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(GitAnalyserService, instance=True)


@pytest.fixture
def web_repository(tmp_path: Path) -> tuple[Path, list[str]]:
    """A small checked out web project with one broken link and one unreferenced file."""
    files = {
        "web/index.html": (
            '<link href="css/site.css?v=2" rel="stylesheet">\n'
            '<script src="js/app.js"></script>\n'
            '<img src="/assets/logo.png">\n'
        ),
        "web/css/site.css": "body { margin: 0; }\n",
        "web/js/app.js": "import { format } from './util';\nconst legacy = require('./legacy');\n",
        "web/js/util.js": "export const format = (value) => value;\n",
        "docs/orphan.xml": "<root/>\n",
        "README.md": "# Demo\n",
    }
    for path, content in files.items():
        full_path = tmp_path / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
    return tmp_path, list(files)


@pytest.fixture
def override_get_git_analyser_service(git_analyser_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_git_analyser_service] = lambda: git_analyser_service_mock
    yield
    app.dependency_overrides.clear()
