import asyncio
import base64
import io
import logging
import threading

import httpx
from asciidoc.api import AsciiDocAPI
from asciidoc.exceptions import AsciiDocError
from plantuml import deflate_and_encode

from portal.render.exceptions import EmptyRenderInputException, RenderFailedException
from portal.render.schemas import ValidationResult

logger = logging.getLogger(__name__)

PLANTUML_ERROR_HEADER = "X-PlantUML-Diagram-Error"


class PlantUmlRenderService:
    """
    Renders diagrams through a PlantUML server. The source travels in the URL,
    deflated and encoded with the PlantUML base64 alphabet.
    """

    def __init__(self, server_url: str, timeout: float = 30.0):
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout

    async def render_png_base64(self, plantuml_code: str) -> str:
        content = await self._fetch("png", plantuml_code)
        logger.info(f"PlantUML diagram rendered to PNG ({len(content)} bytes)")
        return base64.b64encode(content).decode("ascii")

    async def render_svg(self, plantuml_code: str) -> str:
        content = await self._fetch("svg", plantuml_code)
        logger.info(f"PlantUML diagram rendered to SVG ({len(content)} bytes)")
        return content.decode("utf-8")

    async def validate(self, plantuml_code: str) -> ValidationResult:
        if not plantuml_code or not plantuml_code.strip():
            raise EmptyRenderInputException("PlantUML code cannot be empty")
        response = await self._request("txt", plantuml_code)
        error = response.headers.get(PLANTUML_ERROR_HEADER)
        if error or response.status_code >= 400:
            line = response.headers.get("X-PlantUML-Diagram-Error-Line")
            message = error or f"PlantUML server returned HTTP {response.status_code}"
            if line:
                message = f"{message} (line {line})"
            return ValidationResult(valid=False, error=message)
        return ValidationResult(valid=True)

    async def _fetch(self, output_format: str, plantuml_code: str) -> bytes:
        if not plantuml_code or not plantuml_code.strip():
            raise EmptyRenderInputException("PlantUML code cannot be empty")
        response = await self._request(output_format, plantuml_code)
        error = response.headers.get(PLANTUML_ERROR_HEADER)
        if error:
            raise RenderFailedException(f"PlantUML syntax error: {error}")
        if response.status_code >= 400:
            raise RenderFailedException(f"PlantUML server returned HTTP {response.status_code}")
        if not response.content:
            raise RenderFailedException("Rendering returned an empty result")
        return response.content

    async def _request(self, output_format: str, plantuml_code: str) -> httpx.Response:
        url = f"{self.server_url}/{output_format}/{deflate_and_encode(plantuml_code)}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"PlantUML server request failed: {e}", exc_info=True)
            raise RenderFailedException(f"PlantUML server is unavailable: {e}") from e


class AsciiDocRenderService:
    # the asciidoc engine keeps module level state
    _lock = threading.Lock()

    async def render_html(self, ascii_doc: str) -> str:
        if not ascii_doc or not ascii_doc.strip():
            raise EmptyRenderInputException("AsciiDoc content cannot be empty")
        html, _ = await asyncio.to_thread(self._render_sync, ascii_doc)
        logger.info(f"Rendered AsciiDoc to HTML: {len(ascii_doc)} chars -> {len(html)} chars")
        return html

    async def validate(self, ascii_doc: str) -> ValidationResult:
        if not ascii_doc or not ascii_doc.strip():
            raise EmptyRenderInputException("AsciiDoc content cannot be empty")
        try:
            _, messages = await asyncio.to_thread(self._render_sync, ascii_doc)
        except RenderFailedException as e:
            return ValidationResult(valid=False, error=str(e))
        errors = [message for message in messages if "ERROR" in message]
        if errors:
            return ValidationResult(valid=False, error="; ".join(errors))
        return ValidationResult(valid=True)

    @staticmethod
    def _render_sync(ascii_doc: str) -> tuple[str, list[str]]:
        infile = io.StringIO(ascii_doc)
        outfile = io.StringIO()
        try:
            with AsciiDocRenderService._lock:
                api = AsciiDocAPI()
                api.options("--safe")
                api.execute(infile, outfile, backend="html5")
        except AsciiDocError as e:
            logger.error(f"Error rendering AsciiDoc to HTML: {e}")
            raise RenderFailedException(f"Failed to render AsciiDoc: {e}") from e
        return outfile.getvalue(), list(api.messages)
