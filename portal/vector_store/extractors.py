import io
import logging
from abc import ABC, abstractmethod

from docx import Document

logger = logging.getLogger(__name__)


class DocumentTextExtractor(ABC):
    @abstractmethod
    def extract_text(self, filename: str, content: bytes) -> str:
        ...


class PlainTextDocumentExtractor(DocumentTextExtractor):
    def extract_text(self, filename: str, content: bytes) -> str:
        if not content:
            return ""
        return content.decode("utf-8", errors="replace")


class WordDocumentExtractor(DocumentTextExtractor):
    """Paragraph text first, then the text of every table cell, one entry per line."""

    def extract_text(self, filename: str, content: bytes) -> str:
        if not content:
            return ""
        try:
            document = Document(io.BytesIO(content))
            parts = [paragraph.text for paragraph in document.paragraphs if paragraph.text]
            for table in document.tables:
                for row in table.rows:
                    for cell in row.cells:
                        if cell.text:
                            parts.append(cell.text.strip())
            return "\n".join(parts)
        except Exception as e:
            logger.warning(f"Failed to extract text from Word document {filename}: {e}")
            return ""


class DefaultDocumentTextExtractor(DocumentTextExtractor):
    def __init__(
        self,
        word_extractor: WordDocumentExtractor | None = None,
        plain_text_extractor: PlainTextDocumentExtractor | None = None,
    ):
        self.word_extractor = word_extractor or WordDocumentExtractor()
        self.plain_text_extractor = plain_text_extractor or PlainTextDocumentExtractor()

    def extract_text(self, filename: str, content: bytes) -> str:
        if not filename or content is None:
            return ""
        if filename.lower().endswith(".docx"):
            return self.word_extractor.extract_text(filename, content)
        return self.plain_text_extractor.extract_text(filename, content)
