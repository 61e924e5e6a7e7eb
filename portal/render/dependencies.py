from portal.render.factories import build_asciidoc_render_service, build_plantuml_render_service
from portal.render.services import AsciiDocRenderService, PlantUmlRenderService


async def get_plantuml_render_service() -> PlantUmlRenderService:
    return await build_plantuml_render_service()


async def get_asciidoc_render_service() -> AsciiDocRenderService:
    return await build_asciidoc_render_service()
