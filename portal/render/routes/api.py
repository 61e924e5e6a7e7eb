from fastapi import APIRouter, Depends, HTTPException, status

from portal.render.dependencies import get_asciidoc_render_service, get_plantuml_render_service
from portal.render.exceptions import EmptyRenderInputException, RenderException
from portal.render.schemas import (
    AsciiDocRequest,
    HtmlResponse,
    PlantUmlRequest,
    PngResponse,
    SvgResponse,
    ValidationResult,
)
from portal.render.services import AsciiDocRenderService, PlantUmlRenderService

router = APIRouter()


def _invalid(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"valid": False, "error": message})


@router.post("/png", response_model=PngResponse)
async def render_png(
    request_in: PlantUmlRequest,
    service: PlantUmlRenderService = Depends(get_plantuml_render_service),
):
    try:
        image = await service.render_png_base64(request_in.plant_uml or "")
    except EmptyRenderInputException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RenderException as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Rendering failed: {e}")
    return PngResponse(image=f"data:image/png;base64,{image}")


@router.post("/svg", response_model=SvgResponse)
async def render_svg(
    request_in: PlantUmlRequest,
    service: PlantUmlRenderService = Depends(get_plantuml_render_service),
):
    try:
        svg = await service.render_svg(request_in.plant_uml or "")
    except EmptyRenderInputException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RenderException as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Rendering failed: {e}")
    return SvgResponse(svg=svg)


@router.post("/validate", response_model=ValidationResult, response_model_exclude_none=True)
async def validate_plantuml(
    request_in: PlantUmlRequest,
    service: PlantUmlRenderService = Depends(get_plantuml_render_service),
):
    try:
        return await service.validate(request_in.plant_uml or "")
    except EmptyRenderInputException as e:
        raise _invalid(str(e))
    except RenderException as e:
        return ValidationResult(valid=False, error=f"Validation failed: {e}")


@router.post("/adoc", response_model=HtmlResponse)
async def render_adoc(
    request_in: AsciiDocRequest,
    service: AsciiDocRenderService = Depends(get_asciidoc_render_service),
):
    try:
        html = await service.render_html(request_in.ascii_doc or "")
    except EmptyRenderInputException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RenderException as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Rendering failed: {e}")
    return HtmlResponse(html=html)


@router.post("/adoc/validate", response_model=ValidationResult, response_model_exclude_none=True)
async def validate_adoc(
    request_in: AsciiDocRequest,
    service: AsciiDocRenderService = Depends(get_asciidoc_render_service),
):
    try:
        return await service.validate(request_in.ascii_doc or "")
    except EmptyRenderInputException as e:
        raise _invalid(str(e))
    except RenderException as e:
        return ValidationResult(valid=False, error=f"Validation failed: {e}")
