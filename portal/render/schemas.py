from portal.commons.schemas import CamelModel


class PlantUmlRequest(CamelModel):
    plant_uml: str | None = None


class AsciiDocRequest(CamelModel):
    ascii_doc: str | None = None


class PngResponse(CamelModel):
    image: str


class SvgResponse(CamelModel):
    svg: str


class HtmlResponse(CamelModel):
    html: str


class ValidationResult(CamelModel):
    valid: bool
    error: str | None = None
