from portal.core.config import settings
from portal.render.services import AsciiDocRenderService, PlantUmlRenderService


async def build_plantuml_render_service() -> PlantUmlRenderService:
    return PlantUmlRenderService(server_url=settings.PLANTUML_SERVER_URL)


async def build_asciidoc_render_service() -> AsciiDocRenderService:
    return AsciiDocRenderService()
