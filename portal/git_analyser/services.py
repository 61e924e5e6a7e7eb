import asyncio
import logging
import os
import shutil
import subprocess
import tempfile
import uuid
from pathlib import Path

from portal.git_analyser.analyzer import FileReferenceAnalyzer
from portal.git_analyser.exceptions import GitOperationException
from portal.git_analyser.schemas import GitAnalysisRequest, GitAnalysisResponse

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = "git-repo-"
EXCLUDED_FILES = (".gitignore", ".gitattributes")


def inject_access_token(repository_url: str, access_token: str | None) -> str:
    if not access_token or not access_token.strip():
        return repository_url
    for scheme in ("https://", "http://"):
        if repository_url.startswith(scheme):
            return repository_url.replace(scheme, f"{scheme}{access_token}@", 1)
    return repository_url


class GitRepositoryService:
    def __init__(self, timeout: int = 300):
        self.timeout = timeout

    async def clone_repository(self, repository_url: str, branch: str, access_token: str | None = None) -> Path:
        repo_path = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        logger.info(f"Cloning repository: {repository_url} branch: {branch}")
        clone_url = inject_access_token(repository_url, access_token)
        try:
            await self._git(
                ["clone", "--branch", branch, "--single-branch", "--", clone_url, str(repo_path)],
                secret=access_token,
            )
        except GitOperationException:
            self.cleanup(repo_path)
            raise
        logger.info(f"Repository cloned successfully to: {repo_path}")
        return repo_path

    async def list_files(self, repo_path: Path) -> list[str]:
        """Files tracked at HEAD, without git metadata files."""
        output = await self._git(["ls-tree", "-r", "--name-only", "-z", "HEAD"], cwd=repo_path)
        files = [
            path
            for path in output.split("\0")
            if path and not path.startswith(".git/") and path not in EXCLUDED_FILES
        ]
        logger.info(f"Found {len(files)} files in repository")
        return files

    @staticmethod
    def cleanup(repo_path: Path) -> None:
        if not repo_path.exists():
            return
        try:
            shutil.rmtree(repo_path)
            logger.info(f"Cleaned up repository: {repo_path}")
        except OSError as e:
            logger.warning(f"Failed to cleanup repository {repo_path}: {e}")

    async def _git(self, args: list[str], cwd: Path | None = None, secret: str | None = None) -> str:
        return await asyncio.to_thread(self._run_git, args, cwd, secret)

    def _run_git(self, args: list[str], cwd: Path | None, secret: str | None) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except subprocess.TimeoutExpired:
            raise GitOperationException(f"git {args[0]} timed out after {self.timeout}s")
        except FileNotFoundError:
            raise GitOperationException("git executable not found")

        if result.returncode != 0:
            message = (result.stderr or result.stdout or "").strip() or f"git {args[0]} failed"
            if secret:
                message = message.replace(secret, "***")
            raise GitOperationException(message)
        return result.stdout


class GitAnalyserService:
    def __init__(self, repository_service: GitRepositoryService, analyzer: FileReferenceAnalyzer):
        self.repository_service = repository_service
        self.analyzer = analyzer

    async def analyze(self, request_in: GitAnalysisRequest) -> GitAnalysisResponse:
        request_id = str(uuid.uuid4())
        logger.info(f"Starting Git analysis for repository: {request_in.repository_url} branch: {request_in.branch}")

        repo_path = await self.repository_service.clone_repository(
            request_in.repository_url, request_in.branch, request_in.access_token
        )
        try:
            files = await self.repository_service.list_files(repo_path)
            result = await asyncio.to_thread(self.analyzer.analyze, repo_path, files)
        finally:
            self.repository_service.cleanup(repo_path)

        return GitAnalysisResponse(
            request_id=request_id,
            repository_url=request_in.repository_url,
            branch=request_in.branch,
            result=result,
        )
