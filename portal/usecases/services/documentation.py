"""
Exports the artifacts of a workflow session as a folder of PlantUML and AsciiDoc files.

Folders live under DOCUMENTATION_OUTPUT_DIR. A session remembers the folder it
exported to, so exporting again to the same name refreshes the files.
"""
import logging
import re
from pathlib import Path

import aiofiles
import aiofiles.os

from portal.usecases.exceptions import (
    DocumentationFolderExistsException,
    DocumentationNotFoundException,
    DocumentationValidationException,
    NoArtifactsException,
)
from portal.usecases.schemas import DocumentationFile, DocumentationGenerateResponse
from portal.usecases.services.scenarios import UseCaseMvcService, UseCaseScenarioService
from portal.workflow.enums import StateKey
from portal.workflow.services import WorkflowSessionService

logger = logging.getLogger(__name__)

FOLDER_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")
UNSAFE_FILE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_file_part(value: str | None) -> str:
    if not value or not value.strip():
        return ""
    return UNSAFE_FILE_CHARS.sub("_", value).strip()


def extract_plantuml_block(text: str | None) -> str:
    """The @startuml ... @enduml block of a model answer, without surrounding prose."""
    if not text or not text.strip():
        return ""
    lower = text.lower()
    start = lower.find("@startuml")
    if start < 0:
        return ""
    end = lower.find("@enduml", start)
    if end < 0:
        return text[start:].strip()
    return text[start:end + len("@enduml")].strip()


def file_type(name: str) -> str:
    if name.endswith(".puml"):
        return "puml"
    if name.endswith(".adoc"):
        return "adoc"
    return "text"


class DocumentationService:
    def __init__(
        self,
        session_service: WorkflowSessionService,
        scenario_service: UseCaseScenarioService,
        mvc_service: UseCaseMvcService,
        output_dir: str,
    ):
        self.session_service = session_service
        self.scenario_service = scenario_service
        self.mvc_service = mvc_service
        self.base_path = Path(output_dir).resolve()

    def _resolve_folder(self, folder_name: str) -> Path:
        if not folder_name or not folder_name.strip():
            raise DocumentationValidationException("Folder name is required")
        if not FOLDER_NAME_PATTERN.fullmatch(folder_name):
            raise DocumentationValidationException(
                "Folder name may only contain letters, digits, hyphens and underscores"
            )
        target = (self.base_path / folder_name).resolve()
        if not target.is_relative_to(self.base_path) or target == self.base_path:
            raise DocumentationValidationException("Invalid folder name")
        return target

    async def generate(self, request_id: str, folder_name: str) -> DocumentationGenerateResponse:
        target_dir = self._resolve_folder(folder_name)
        session = await self.session_service.get_session(request_id)

        update_mode = False
        if await aiofiles.os.path.exists(target_dir):
            if session.documentation_folder_name != folder_name:
                raise DocumentationFolderExistsException(f"A folder with this name already exists: {folder_name}")
            update_mode = True

        artifacts = (await self.session_service.get_session_data(request_id)).artifacts
        files: dict[str, str] = {}
        domain_model = artifacts.get(StateKey.PLANTUML)
        if domain_model and domain_model.strip():
            files["domain.puml"] = domain_model
        use_case_model = artifacts.get(StateKey.USE_CASE_MODEL)
        if use_case_model and use_case_model.strip():
            files["use_case.puml"] = use_case_model

        for scenario in await self.scenario_service.get_scenarios(request_id):
            part = sanitize_file_part(scenario.use_case_alias) or sanitize_file_part(scenario.use_case_name)
            files.setdefault(f"scn_{part or 'scenario_' + scenario.id}.adoc", scenario.scenario_content or "")
        for mvc in await self.mvc_service.get_mvc_diagrams(request_id):
            part = sanitize_file_part(mvc.use_case_alias) or sanitize_file_part(mvc.use_case_name)
            files.setdefault(f"mvc_{part or 'mvc_' + mvc.id}.puml", extract_plantuml_block(mvc.mvc_plantuml))

        if not files:
            raise NoArtifactsException(f"No artifacts in session: {request_id}")

        await aiofiles.os.makedirs(target_dir, exist_ok=True)
        for file_name, content in files.items():
            async with aiofiles.open(target_dir / file_name, "w", encoding="utf-8") as f:
                await f.write(content)

        await self.session_service.set_documentation_folder(request_id, folder_name)
        created_files = list(files)
        logger.info(
            f"Documentation {'updated' if update_mode else 'generated'} for requestId={request_id}, "
            f"folder={folder_name}, files={created_files}"
        )
        return DocumentationGenerateResponse(folder_path=str(target_dir), created_files=created_files, updated=update_mode)

    async def has_documentation(self, request_id: str) -> bool:
        session = await self.session_service.load_session(request_id)
        if not session or not session.documentation_folder_name:
            return False
        try:
            folder = self._resolve_folder(session.documentation_folder_name)
        except DocumentationValidationException:
            return False
        return await aiofiles.os.path.isdir(folder)

    async def list_files(self, request_id: str) -> list[DocumentationFile]:
        folder = await self._documentation_dir(request_id)
        entries = []
        for name in await aiofiles.os.listdir(folder):
            if name.startswith(".") or not await aiofiles.os.path.isfile(folder / name):
                continue
            entries.append(DocumentationFile(name=name, type=file_type(name)))
        return sorted(entries, key=lambda entry: entry.name.lower())

    async def read_file(self, request_id: str, file_name: str) -> str:
        if not file_name or not file_name.strip() or ".." in file_name or "/" in file_name or "\\" in file_name:
            raise DocumentationValidationException("Invalid file name")
        folder = await self._documentation_dir(request_id)
        path = (folder / file_name).resolve()
        if not path.is_relative_to(folder):
            raise DocumentationValidationException("Invalid file name")
        if not await aiofiles.os.path.isfile(path):
            raise DocumentationNotFoundException(f"File not found: {file_name}")

        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
            return await f.read()

    async def _documentation_dir(self, request_id: str) -> Path:
        session = await self.session_service.load_session(request_id)
        if not session or not session.documentation_folder_name:
            raise DocumentationNotFoundException(
                f"Session not found or documentation was not generated: {request_id}"
            )
        folder = self._resolve_folder(session.documentation_folder_name)
        if not await aiofiles.os.path.isdir(folder):
            raise DocumentationNotFoundException(f"Documentation folder not found: {session.documentation_folder_name}")
        return folder
