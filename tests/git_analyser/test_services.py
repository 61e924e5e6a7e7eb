import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from portal.git_analyser.exceptions import GitOperationException
from portal.git_analyser.schemas import AnalysisResult, GitAnalysisRequest
from portal.git_analyser.services import GitAnalyserService, GitRepositoryService, inject_access_token


@pytest.mark.parametrize(
    "url, token, expected",
    [
        ("https://git.example.com/team/repo.git", "s3cr3t", "https://s3cr3t@git.example.com/team/repo.git"),
        ("http://git.local/repo.git", "s3cr3t", "http://s3cr3t@git.local/repo.git"),
        ("git@git.example.com:team/repo.git", "s3cr3t", "git@git.example.com:team/repo.git"),
        ("https://git.example.com/team/repo.git", "  ", "https://git.example.com/team/repo.git"),
        ("https://git.example.com/team/repo.git", None, "https://git.example.com/team/repo.git"),
    ],
)
def test_inject_access_token(url, token, expected):
    assert inject_access_token(url, token) == expected


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout, stderr=stderr)


async def test_list_files__drops_git_metadata(git_repository_service: GitRepositoryService, tmp_path: Path, mocker):
    run = mocker.patch(
        "portal.git_analyser.services.subprocess.run",
        return_value=_completed(stdout="src/app.js\0.gitignore\0.git/config\0docs/a b.md\0"),
    )

    files = await git_repository_service.list_files(tmp_path)

    assert files == ["src/app.js", "docs/a b.md"]
    assert run.call_args.args[0] == ["git", "ls-tree", "-r", "--name-only", "-z", "HEAD"]
    assert run.call_args.kwargs["cwd"] == tmp_path
    assert run.call_args.kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"


async def test_clone_repository__masks_token_and_removes_directory_on_failure(
    git_repository_service: GitRepositoryService, tmp_path: Path, mocker
):
    clone_dir = tmp_path / "clone"
    clone_dir.mkdir()
    mocker.patch("portal.git_analyser.services.tempfile.mkdtemp", return_value=str(clone_dir))
    run = mocker.patch(
        "portal.git_analyser.services.subprocess.run",
        return_value=_completed(128, stderr="fatal: could not read from https://s3cr3t@git.example.com/repo.git"),
    )

    with pytest.raises(GitOperationException) as exc_info:
        await git_repository_service.clone_repository("https://git.example.com/repo.git", "main", "s3cr3t")

    assert "s3cr3t" not in str(exc_info.value)
    assert "https://***@git.example.com/repo.git" in str(exc_info.value)
    assert run.call_args.args[0] == [
        "git",
        "clone",
        "--branch",
        "main",
        "--single-branch",
        "--",
        "https://s3cr3t@git.example.com/repo.git",
        str(clone_dir),
    ]
    assert not clone_dir.exists()


async def test_clone_repository__returns_checkout_path(
    git_repository_service: GitRepositoryService, tmp_path: Path, mocker
):
    clone_dir = tmp_path / "clone"
    clone_dir.mkdir()
    mocker.patch("portal.git_analyser.services.tempfile.mkdtemp", return_value=str(clone_dir))
    mocker.patch("portal.git_analyser.services.subprocess.run", return_value=_completed())

    repo_path = await git_repository_service.clone_repository("https://git.example.com/repo.git", "main")

    assert repo_path == clone_dir


@pytest.mark.parametrize(
    "error, message",
    [
        (subprocess.TimeoutExpired(cmd="git", timeout=5), "git ls-tree timed out after 5s"),
        (FileNotFoundError("git"), "git executable not found"),
    ],
)
async def test_run_git__wraps_process_errors(
    git_repository_service: GitRepositoryService, tmp_path: Path, mocker, error, message
):
    mocker.patch("portal.git_analyser.services.subprocess.run", side_effect=error)

    with pytest.raises(GitOperationException, match=message):
        await git_repository_service.list_files(tmp_path)


def test_cleanup__removes_directory_and_ignores_missing(tmp_path: Path):
    checkout = tmp_path / "checkout"
    (checkout / "src").mkdir(parents=True)
    (checkout / "src" / "app.js").write_text("x")

    GitRepositoryService.cleanup(checkout)
    GitRepositoryService.cleanup(checkout)

    assert not checkout.exists()


async def test_analyze__clones_analyses_and_cleans_up(
    git_analyser_service: GitAnalyserService,
    git_repository_service_mock: MagicMock,
    file_reference_analyzer_mock: MagicMock,
    tmp_path: Path,
):
    git_repository_service_mock.list_files.return_value = ["src/app.js"]
    file_reference_analyzer_mock.analyze.return_value = AnalysisResult(total_files=1, analyzed_files=1)
    request_in = GitAnalysisRequest(repository_url="https://git.example.com/repo.git", branch="main", access_token="t")

    response = await git_analyser_service.analyze(request_in)

    git_repository_service_mock.clone_repository.assert_awaited_once_with("https://git.example.com/repo.git", "main", "t")
    file_reference_analyzer_mock.analyze.assert_called_once_with(tmp_path, ["src/app.js"])
    git_repository_service_mock.cleanup.assert_called_once_with(tmp_path)
    assert response.request_id
    assert response.branch == "main"
    assert response.result.total_files == 1


async def test_analyze__cleans_up_when_listing_fails(
    git_analyser_service: GitAnalyserService, git_repository_service_mock: MagicMock, tmp_path: Path
):
    git_repository_service_mock.list_files.side_effect = GitOperationException("bad object HEAD")
    request_in = GitAnalysisRequest(repository_url="https://git.example.com/repo.git", branch="main")

    with pytest.raises(GitOperationException):
        await git_analyser_service.analyze(request_in)

    git_repository_service_mock.cleanup.assert_called_once_with(tmp_path)


async def test_get_git_analyser_service__uses_factory(mocker):
    from portal.git_analyser.dependencies import get_git_analyser_service

    service = MagicMock(spec=GitAnalyserService)
    build = mocker.patch(
        "portal.git_analyser.dependencies.build_git_analyser_service", new=AsyncMock(return_value=service)
    )

    assert await get_git_analyser_service() is service
    build.assert_awaited_once_with()
