from portal.git_analyser.analyzer import FileReferenceAnalyzer
from portal.git_analyser.services import GitAnalyserService, GitRepositoryService


async def build_git_analyser_service() -> GitAnalyserService:
    return GitAnalyserService(repository_service=GitRepositoryService(), analyzer=FileReferenceAnalyzer())
