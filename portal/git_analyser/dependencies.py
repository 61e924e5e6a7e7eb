from portal.git_analyser.factories import build_git_analyser_service
from portal.git_analyser.services import GitAnalyserService


async def get_git_analyser_service() -> GitAnalyserService:
    return await build_git_analyser_service()
