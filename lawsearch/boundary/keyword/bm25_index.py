"""
In-process BM25 keyword index.

Scores chunk body and document title as two BM25 fields combined with
configurable weights. Query terms missing from the vocabulary are expanded
to close spellings. Matches are highlighted with <mark> tags in short
fragments of the chunk text.

Dependencies: rank_bm25, difflib, lawsearch.models
System role: Keyword retrieval backend
"""

import difflib
import logging
import re
import uuid

from rank_bm25 import BM25Plus

from lawsearch.configs.search import KeywordIndexSettings
from lawsearch.models.search import KeywordHit, KeywordRecord, SearchFilters

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\w+")
FRAGMENT_SEPARATOR = " ... "


def tokenize(text: str) -> list[str]:
    return TOKEN_PATTERN.findall(text.lower())


class BM25KeywordIndex:
    """KeywordIndex over an in-memory BM25 corpus."""

    def __init__(
        self,
        body_weight: float = 2.0,
        title_weight: float = 1.0,
        fuzzy_cutoff: float = 0.8,
        fragment_size: int = 150,
        max_fragments: int = 3,
    ) -> None:
        """
        Initialize an empty index.

        Args:
            body_weight: Weight of the chunk body field
            title_weight: Weight of the document title field
            fuzzy_cutoff: difflib similarity needed for term expansion (1.0 disables)
            fragment_size: Characters per highlight fragment
            max_fragments: Highlight fragments per hit
        """
        self.body_weight = body_weight
        self.title_weight = title_weight
        self.fuzzy_cutoff = fuzzy_cutoff
        self.fragment_size = fragment_size
        self.max_fragments = max_fragments

        self._records: dict[str, KeywordRecord] = {}
        self._dirty = True
        self._ids: list[str] = []
        self._body_tokens: list[list[str]] = []
        self._title_tokens: list[list[str]] = []
        self._body_bm25: BM25Plus | None = None
        self._title_bm25: BM25Plus | None = None
        self._vocabulary: list[str] = []

    @classmethod
    def from_settings(cls, settings: KeywordIndexSettings) -> "BM25KeywordIndex":
        return cls(
            body_weight=settings.body_weight,
            title_weight=settings.title_weight,
            fuzzy_cutoff=settings.fuzzy_cutoff,
            fragment_size=settings.fragment_size,
            max_fragments=settings.max_fragments,
        )

    def __len__(self) -> int:
        return len(self._records)

    async def ensure_index(self) -> None:
        """No-op: the corpus lives in process memory and is reloaded from persisted chunks."""
        return None

    async def index_batch(self, records: list[KeywordRecord]) -> None:
        """Add or replace records by chunk ID."""
        if not records:
            return
        for record in records:
            self._records[str(record.chunk_id)] = record
        self._dirty = True
        logger.info(f"{__name__}:index_batch - Indexed {len(records)} records ({len(self._records)} total)")

    async def delete_by_document(self, document_id: uuid.UUID) -> None:
        """Remove every record of a document."""
        target = str(document_id)
        doomed = [key for key, record in self._records.items() if record.metadata.get("document_id") == target]
        for key in doomed:
            del self._records[key]
        if doomed:
            self._dirty = True
        logger.info(f"{__name__}:delete_by_document - Removed {len(doomed)} records for document {document_id}")

    async def search(
        self,
        query: str,
        filters: SearchFilters | None,
        top_k: int,
    ) -> list[KeywordHit]:
        """
        Rank records against a free-text query.

        Only records sharing at least one expanded query term in body or
        title are scored; filters are applied before scoring.

        Args:
            query: Free-text query
            filters: Jurisdiction and date filters
            top_k: Maximum hits

        Returns:
            list[KeywordHit]: Hits, highest score first, with highlighted snippets
        """
        query_tokens = tokenize(query)
        if not query_tokens or not self._records:
            return []

        self._rebuild()
        terms = self._expand_terms(query_tokens)
        if not terms:
            return []

        body_scores = self._body_bm25.get_scores(terms)
        title_scores = self._title_bm25.get_scores(terms) if self._title_bm25 is not None else None
        term_set = set(terms)

        scored: list[tuple[float, KeywordRecord]] = []
        for index, chunk_id in enumerate(self._ids):
            record = self._records[chunk_id]
            if filters is not None and not filters.accepts(record.metadata):
                continue

            body_match = not term_set.isdisjoint(self._body_tokens[index])
            title_match = not term_set.isdisjoint(self._title_tokens[index])
            if not body_match and not title_match:
                continue

            score = 0.0
            if body_match:
                score += self.body_weight * float(body_scores[index])
            if title_match and title_scores is not None:
                score += self.title_weight * float(title_scores[index])
            if score > 0:
                scored.append((score, record))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [
            KeywordHit(
                chunk_id=str(record.chunk_id),
                score=score,
                snippet=self.highlight(record.text, terms),
                metadata=dict(record.metadata),
            )
            for score, record in scored[:top_k]
        ]

    async def health_check(self) -> bool:
        return True

    def highlight(self, text: str, terms: list[str]) -> str:
        """
        Wrap term occurrences in <mark> tags within up to max_fragments fragments.

        Returns the original text when no term occurs.
        """
        if not terms:
            return text
        alternatives = "|".join(re.escape(term) for term in sorted(set(terms), key=len, reverse=True))
        pattern = re.compile(rf"\b({alternatives})\b", re.IGNORECASE)

        fragments: list[tuple[int, int]] = []
        covered_until = -1
        for match in pattern.finditer(text):
            if match.start() < covered_until:
                continue
            start = max(0, match.start() - self.fragment_size // 3)
            end = min(len(text), start + self.fragment_size)
            # Extend so the match is never cut
            end = max(end, match.end())
            fragments.append((start, end))
            covered_until = end
            if len(fragments) >= self.max_fragments:
                break

        if not fragments:
            return text
        return FRAGMENT_SEPARATOR.join(
            pattern.sub(r"<mark>\1</mark>", text[start:end]).strip() for start, end in fragments
        )

    def _expand_terms(self, query_tokens: list[str]) -> list[str]:
        """Keep known terms and add close vocabulary matches for unknown ones."""
        known = set(self._vocabulary)
        terms: list[str] = []
        for token in query_tokens:
            if token in known:
                terms.append(token)
            elif self.fuzzy_cutoff < 1.0:
                terms.extend(difflib.get_close_matches(token, self._vocabulary, n=3, cutoff=self.fuzzy_cutoff))
        return list(dict.fromkeys(terms))

    def _rebuild(self) -> None:
        if not self._dirty:
            return

        self._ids = list(self._records)
        self._body_tokens = [tokenize(self._records[key].text) for key in self._ids]
        self._title_tokens = [tokenize(self._records[key].metadata.get("document_title", "")) for key in self._ids]

        # BM25Plus divides by average document length, so empty fields are padded
        self._body_bm25 = BM25Plus([tokens or [""] for tokens in self._body_tokens])
        if any(self._title_tokens):
            self._title_bm25 = BM25Plus([tokens or [""] for tokens in self._title_tokens])
        else:
            self._title_bm25 = None

        vocabulary: set[str] = set()
        for tokens in self._body_tokens + self._title_tokens:
            vocabulary.update(tokens)
        self._vocabulary = sorted(vocabulary)

        self._dirty = False
        logger.debug(f"{__name__}:_rebuild - Rebuilt BM25 over {len(self._ids)} records")
