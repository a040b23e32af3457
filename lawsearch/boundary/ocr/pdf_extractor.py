"""
PDF text extraction using pypdf.

Converts raw PDF bytes into one text string per physical page.

Dependencies: pypdf
System role: Text extraction stage of document ingestion pipeline
"""

import asyncio
import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from lawsearch.core.exceptions import DocumentProcessingError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Extract per-page text from PDF bytes."""

    async def extract_pages(self, content: bytes) -> list[str]:
        """
        Extract text page by page.

        Args:
            content: Raw PDF bytes

        Returns:
            list[str]: One entry per page in order, "" for pages without text

        Raises:
            DocumentProcessingError: When the bytes are not a readable PDF
        """
        if not content:
            raise DocumentProcessingError("Document content is empty")

        try:
            pages = await asyncio.to_thread(self._extract, content)
        except PdfReadError as e:
            raise DocumentProcessingError(f"Failed to parse PDF: {e}") from e

        logger.info(f"{__name__}:extract_pages - Extracted {len(pages)} pages")
        return pages

    @staticmethod
    def _extract(content: bytes) -> list[str]:
        reader = PdfReader(io.BytesIO(content))
        return [page.extract_text() or "" for page in reader.pages]
