"""
Structural text segmentation for legal pages.

Splits one page of text on the first structural marker family that yields
more than one segment, then windows oversized segments with a fixed overlap.
Segments are cut at positions rather than on consumed separators, so the
segments of a page concatenate back to the page text and every chunk
satisfies page_text[start_offset:end_offset] == chunk.text.

Dependencies: re, lawsearch.models, lawsearch.configs
System role: First stage of document ingestion pipeline
"""

import re
import uuid

from lawsearch.configs.indexing import IndexingSettings
from lawsearch.core.exceptions import ValidationError
from lawsearch.models.chunk import Chunk, chunk_id_for

# Cut points are match ends. Marker patterns end in a lookahead so the
# marker itself opens the next segment.
SPLIT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("section", re.compile(r"\n[ \t]*(?=§\s*\d+\.|Section\s+\d+\.)")),
    ("subsection", re.compile(r"\n[ \t]*(?=\d+(?:\.\d+)+\.?\s|\d+\.\s)")),
    ("parenthetical", re.compile(r"\n[ \t]*(?=\([a-z]\)\s|\(\d+\)\s)")),
    ("paragraph", re.compile(r"\n[ \t]*\n\s*")),
    ("sentence", re.compile(r"(?<=[.!?])\s+")),
)


def split_at_pattern(text: str, pattern: re.Pattern[str]) -> list[str]:
    """
    Cut text at every match end of pattern.

    Args:
        text: Text to cut
        pattern: Compiled pattern whose match ends are cut points

    Returns:
        list[str]: Consecutive slices that concatenate back to text
    """
    segments: list[str] = []
    previous = 0
    for match in pattern.finditer(text):
        cut = match.end()
        if previous < cut < len(text):
            segments.append(text[previous:cut])
            previous = cut
    segments.append(text[previous:])
    return segments


def split_into_sections(text: str) -> list[str]:
    """
    Split a page on the highest-priority structural pattern that applies.

    A pattern applies when it produces more than one non-blank segment.
    If none applies the whole text is a single segment.
    """
    for _, pattern in SPLIT_PATTERNS:
        segments = split_at_pattern(text, pattern)
        if sum(1 for segment in segments if segment.strip()) > 1:
            return segments
    return [text]


def sliding_windows(length: int, chunk_size: int, chunk_overlap: int) -> list[tuple[int, int]]:
    """
    Compute fixed-stride window bounds covering [0, length).

    Consecutive windows overlap by chunk_overlap characters; the final window
    is clipped to length.

    Returns:
        list[tuple[int, int]]: (start, end) pairs relative to the segment
    """
    stride = chunk_size - chunk_overlap
    windows: list[tuple[int, int]] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        windows.append((start, end))
        if end >= length:
            break
        start += stride
    return windows


class Segmenter:
    """Split page text into offset-tracked chunks."""

    def __init__(
        self,
        chunk_size: int = 512,
        chunk_overlap: int = 128,
        max_chunk_length: int = 1024,
    ) -> None:
        """
        Initialize segmenter with window configuration.

        Args:
            chunk_size: Sliding window length for oversized segments
            chunk_overlap: Overlap between consecutive windows
            max_chunk_length: Segments longer than this get windowed

        Raises:
            ValidationError: When the window would not advance
        """
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be positive", field="chunk_size")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValidationError(
                f"chunk_overlap must be in [0, chunk_size); got {chunk_overlap} with chunk_size {chunk_size}",
                field="chunk_overlap",
            )
        if max_chunk_length <= 0:
            raise ValidationError("max_chunk_length must be positive", field="max_chunk_length")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.max_chunk_length = max_chunk_length

    @classmethod
    def from_settings(cls, settings: IndexingSettings) -> "Segmenter":
        return cls(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            max_chunk_length=settings.max_chunk_length,
        )

    def segment(self, text: str, page: int, document_id: uuid.UUID) -> list[Chunk]:
        """
        Segment one page into chunks.

        Args:
            text: Raw page text
            page: 1-based page number
            document_id: Owning document

        Returns:
            list[Chunk]: Chunks in page order, embeddings empty
        """
        chunks: list[Chunk] = []
        if not text or not text.strip():
            return chunks

        offset = 0
        for section in split_into_sections(text):
            if section.strip():
                if len(section) > self.max_chunk_length:
                    bounds = sliding_windows(len(section), self.chunk_size, self.chunk_overlap)
                else:
                    bounds = [(0, len(section))]

                for start, end in bounds:
                    # Windows over trailing whitespace carry no text
                    if not section[start:end].strip():
                        continue
                    chunks.append(
                        self._make_chunk(
                            section[start:end],
                            page,
                            document_id,
                            offset + start,
                            offset + end,
                        )
                    )
            # Blank sections still occupy characters on the page
            offset += len(section)

        return chunks

    def segment_pages(self, pages: list[str], document_id: uuid.UUID) -> list[Chunk]:
        """Segment every page of a document, numbering pages from 1."""
        chunks: list[Chunk] = []
        for index, page_text in enumerate(pages):
            chunks.extend(self.segment(page_text, index + 1, document_id))
        return chunks

    @staticmethod
    def _make_chunk(
        text: str,
        page: int,
        document_id: uuid.UUID,
        start_offset: int,
        end_offset: int,
    ) -> Chunk:
        return Chunk(
            id=chunk_id_for(document_id, page, start_offset, end_offset),
            document_id=document_id,
            page=page,
            text=text,
            start_offset=start_offset,
            end_offset=end_offset,
        )
